"""
Auth Gateway

Single entry point for wallet authentication. The HTTP layer only translates
requests into calls on AuthGateway and its exceptions into responses.

Operations:
- issue_challenge(): suggest a message for the wallet to sign
- login(): verify a detached wallet signature, mint access + refresh tokens
- refresh(): trade a refresh token for a new access token
- authenticate(): accept an access token from an Authorization header

Tokens are stateless. There is no revocation list, so a token stays valid
until its exp claim passes, and refresh tokens are not rotated.
"""

import logging
import time
from typing import Callable, Optional

import jwt

from authgate.core import jwt_utils, wallet_auth
from authgate.core.config import GatewayConfig
from authgate.core.exceptions import ForbiddenError, InvalidRequestError, UnauthorizedError
from authgate.repository.users import UserDirectory
from authgate.schemas.auth import (
    ChallengeResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
)
from authgate.schemas.user import AuthenticatedUser, UserSummary

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class AuthGateway:
    def __init__(
        self,
        config: GatewayConfig,
        users: UserDirectory,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.users = users
        self._clock = clock
        if config.uses_insecure_secret:
            logger.warning("JWT_SECRET is not set, tokens are signed with the insecure default secret")

    def _now(self) -> int:
        return int(self._clock())

    def _summary(self, wallet_address: str) -> UserSummary:
        return UserSummary(walletAddress=wallet_address, role=self.users.get_role(wallet_address))

    def issue_challenge(self, wallet_address: Optional[str]) -> ChallengeResponse:
        """Build a sign-in challenge for a wallet address."""
        wallet_address = (wallet_address or "").strip()
        if not wallet_auth.is_valid_wallet_address(wallet_address):
            raise InvalidRequestError("Invalid wallet address")

        challenge = wallet_auth.build_challenge(
            wallet_address,
            self.config.project_name,
            timestamp_ms=int(self._clock() * 1000),
        )
        return ChallengeResponse(
            challenge=challenge,
            expiresIn=self.config.challenge_ttl,
            walletAddress=wallet_address,
        )

    def login(self, request: LoginRequest) -> LoginResponse:
        """
        Verify a wallet signature and issue tokens.

        Raises:
            InvalidRequestError: A field is missing, or the challenge is stale when challenges are enforced
            UnauthorizedError: The signature does not verify (including malformed base58)
        """
        if not request.publicKey or not request.signature or not request.message:
            raise InvalidRequestError("Missing required fields: publicKey, signature, message")

        if self.config.require_challenge and not wallet_auth.challenge_is_fresh(
            request.message, request.publicKey, self.config.challenge_ttl, self._clock()
        ):
            raise InvalidRequestError("Invalid or expired challenge")

        if not wallet_auth.verify_signature(request.publicKey, request.signature, request.message):
            logger.info("Rejected login for %s: invalid signature", request.publicKey)
            raise UnauthorizedError("Invalid signature")

        now = self._now()
        token = jwt_utils.create_access_token(self.config, request.publicKey, now)
        refresh_token = jwt_utils.create_refresh_token(self.config, request.publicKey, now)
        logger.info("Wallet %s logged in", request.publicKey)

        return LoginResponse(
            token=token,
            refreshToken=refresh_token,
            user=self._summary(request.publicKey),
        )

    def refresh(self, request: RefreshRequest) -> RefreshResponse:
        """
        Mint a new access token from a refresh token.

        Raises:
            InvalidRequestError: No refresh token given
            UnauthorizedError: Token fails verification, is expired, or is not a refresh token
        """
        if not request.refreshToken:
            raise InvalidRequestError("Refresh token required")

        try:
            payload = jwt_utils.decode_token(self.config, request.refreshToken, now=self._now())
        except jwt.InvalidTokenError as e:
            logger.info("Rejected refresh token: %s", e)
            raise UnauthorizedError("Invalid refresh token")

        wallet_address = payload.get("walletAddress")
        if payload.get("type") != jwt_utils.REFRESH_TOKEN_TYPE or not wallet_address:
            logger.info("Rejected refresh: token type is %r", payload.get("type"))
            raise UnauthorizedError("Invalid refresh token")

        return RefreshResponse(token=jwt_utils.create_access_token(self.config, wallet_address, self._now()))

    def authenticate(self, authorization: Optional[str]) -> AuthenticatedUser:
        """
        Accept an access token from an "Authorization: Bearer <token>" header.

        Raises:
            UnauthorizedError: Header or token missing
            ForbiddenError: Token fails verification, is expired, or is a refresh token
        """
        token = _extract_bearer_token(authorization)
        if not token:
            raise UnauthorizedError("Access token required")

        try:
            payload = jwt_utils.decode_token(self.config, token, now=self._now())
        except jwt.InvalidTokenError as e:
            logger.info("Rejected access token: %s", e)
            raise ForbiddenError("Invalid or expired token")

        wallet_address = payload.get("walletAddress")
        if not wallet_address or payload.get("type") == jwt_utils.REFRESH_TOKEN_TYPE:
            raise ForbiddenError("Invalid or expired token")

        return AuthenticatedUser(
            walletAddress=wallet_address,
            role=self.users.get_role(wallet_address),
            claims=payload,
        )


def _extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from a "Bearer <token>" header, or "" if there is none."""
    if not authorization:
        return ""
    authorization = authorization.strip()
    if not authorization.lower().startswith(BEARER_PREFIX):
        return ""
    return authorization[len(BEARER_PREFIX):].strip()
