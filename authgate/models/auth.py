from sqlalchemy import BigInteger, Column, String

from authgate.db.base import Base


class WalletUser(Base):
    """Known wallet with its display role.
    Example:
    {
        "wallet_address": "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T",
        "role": "user",
        "created_at": 1735689600
    }
    """

    __tablename__ = "wallet_users"

    wallet_address = Column(String(64), primary_key=True)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(BigInteger, nullable=False)
