import logging
import time
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from authgate.models.auth import WalletUser

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


class UserDirectory(Protocol):
    """Read access to what the service knows about a wallet."""

    def get_role(self, wallet_address: str) -> str:
        ...


class InMemoryUserDirectory:
    """Dict-backed directory. Wallets not listed resolve to the default role."""

    def __init__(self, roles: Optional[Dict[str, str]] = None):
        self._roles: Dict[str, str] = dict(roles or {})

    def get_role(self, wallet_address: str) -> str:
        return self._roles.get(wallet_address, DEFAULT_ROLE)


class SqlUserDirectory:
    """Directory backed by the wallet_users table. Opens one short session per lookup."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_role(self, wallet_address: str) -> str:
        with self._session_factory() as db:
            user = self._get(db, wallet_address)
            if user is None:
                return DEFAULT_ROLE
            return str(user.role)

    def register(self, wallet_address: str, role: str = DEFAULT_ROLE) -> None:
        """Insert or update a wallet's role."""
        with self._session_factory() as db:
            user = self._get(db, wallet_address)
            if user is None:
                db.add(WalletUser(wallet_address=wallet_address, role=role, created_at=int(time.time())))
            else:
                user.role = role  # type: ignore
            db.commit()
        logger.info("Registered wallet %s with role %s", wallet_address, role)

    @staticmethod
    def _get(db: Session, wallet_address: str) -> Optional[WalletUser]:
        return db.query(WalletUser).filter(WalletUser.wallet_address == wallet_address).first()
