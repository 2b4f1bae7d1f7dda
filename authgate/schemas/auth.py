from typing import Optional

from pydantic import BaseModel, Field

from authgate.schemas.my_base_model import CustomBaseModel
from authgate.schemas.user import UserSummary


class ChallengeRequest(BaseModel):
    """Request model for challenge generation - input validation"""

    walletAddress: Optional[str] = Field(None, description="base58 wallet public key")


class ChallengeResponse(CustomBaseModel):
    """Response model for challenge generation - output"""

    success: bool = True
    challenge: str = ""
    expiresIn: int = 0
    walletAddress: str = ""


class LoginRequest(BaseModel):
    """Request model for wallet login - presence is checked by the gateway"""

    publicKey: Optional[str] = Field(None, description="base58 wallet public key")
    signature: Optional[str] = Field(None, description="base58 detached signature of message")
    message: Optional[str] = Field(None, description="Message that was signed")


class LoginResponse(CustomBaseModel):
    """Response model for wallet login - output"""

    success: bool = True
    token: str = ""
    refreshToken: str = ""
    user: UserSummary = Field(default_factory=UserSummary)


class RefreshRequest(BaseModel):
    """Request model for access token refresh - input validation"""

    refreshToken: Optional[str] = Field(None, description="Refresh token issued at login")


class RefreshResponse(CustomBaseModel):
    """Response model for access token refresh - output"""

    success: bool = True
    token: str = ""


class ErrorResponse(CustomBaseModel):
    """Body returned for every handled error"""

    success: bool = False
    message: str = ""
    code: str = ""
