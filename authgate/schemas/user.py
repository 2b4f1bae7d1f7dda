from typing import Any, Dict

from pydantic import Field

from authgate.schemas.my_base_model import CustomBaseModel


class UserSummary(CustomBaseModel):
    """Public view of an authenticated wallet"""

    walletAddress: str = ""
    role: str = "user"


class AuthenticatedUser(UserSummary):
    """Wallet attached to a request after its access token was accepted"""

    claims: Dict[str, Any] = Field(default_factory=dict)


class MeResponse(CustomBaseModel):
    """Response model for the current user"""

    success: bool = True
    user: UserSummary = Field(default_factory=UserSummary)
