from fastapi import APIRouter, Depends, status

from authgate.core.dependencies import get_current_user, get_gateway
from authgate.core.gateway import AuthGateway
from authgate.core.rate_limit import get_rate_limiter
import authgate.schemas.auth as schemas
from authgate.schemas.my_base_model import Message
from authgate.schemas.user import AuthenticatedUser, MeResponse, UserSummary

router = APIRouter()
group_tags = ["Auth"]

error_responses = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": schemas.ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": schemas.ErrorResponse},
}


@router.post(
    "/challenge",
    tags=group_tags,
    response_model=schemas.ChallengeResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": schemas.ErrorResponse},
    },
    dependencies=[Depends(get_rate_limiter("/challenge"))],
    summary="Get a sign-in message for a wallet",
)
def request_challenge(
    body: schemas.ChallengeRequest, gateway: AuthGateway = Depends(get_gateway)
) -> schemas.ChallengeResponse:
    """Build a challenge message the wallet can sign and send to /login."""
    return gateway.issue_challenge(body.walletAddress)


@router.post(
    "/login",
    tags=group_tags,
    response_model=schemas.LoginResponse,
    responses=error_responses,
    dependencies=[Depends(get_rate_limiter("/login"))],
    summary="Log in with a wallet signature",
)
def login(body: schemas.LoginRequest, gateway: AuthGateway = Depends(get_gateway)) -> schemas.LoginResponse:
    """
    Verify a detached signature of message by publicKey (both base58) and return:
    - token: access token (24h)
    - refreshToken: refresh token (7d)
    - user: wallet summary
    """
    return gateway.login(body)


@router.post(
    "/refresh",
    tags=group_tags,
    response_model=schemas.RefreshResponse,
    responses=error_responses,
    dependencies=[Depends(get_rate_limiter("/refresh"))],
    summary="Exchange a refresh token for a new access token",
)
def refresh(body: schemas.RefreshRequest, gateway: AuthGateway = Depends(get_gateway)) -> schemas.RefreshResponse:
    return gateway.refresh(body)


@router.get(
    "/me",
    tags=group_tags,
    response_model=MeResponse,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": schemas.ErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": schemas.ErrorResponse},
    },
    summary="Get the authenticated wallet",
)
def get_me(user: AuthenticatedUser = Depends(get_current_user)) -> MeResponse:
    return MeResponse(user=UserSummary(walletAddress=user.walletAddress, role=user.role))


@router.post(
    "/logout",
    tags=group_tags,
    response_model=Message,
    summary="Log out",
)
def logout() -> Message:
    """Tokens are not revoked server-side; the client discards them and they expire on their own."""
    return Message(message="Logged out successfully")
