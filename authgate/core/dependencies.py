"""
FastAPI Authentication Dependencies
This module provides FastAPI dependency functions that can be injected into route handlers
to reach the shared AuthGateway and to authenticate the caller from the Authorization header.
Usage in endpoints:
    @router.get("/protected")
    def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
        # user.walletAddress is extracted from the access token
        return {"user": user.walletAddress}
Flow:
1. Client sends request with Authorization: Bearer <token> header
2. FastAPI calls get_current_user() dependency
3. AuthGateway.authenticate() validates the JWT
4. Returns the AuthenticatedUser to the route handler
Tests replace get_gateway through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from authgate.core.config import GatewayConfig, settings
from authgate.core.gateway import AuthGateway
from authgate.db.base import Base
from authgate.db.session import build_engine, build_sessionmaker
from authgate.repository.users import InMemoryUserDirectory, SqlUserDirectory, UserDirectory
from authgate.schemas.user import AuthenticatedUser


def build_user_directory() -> UserDirectory:
    """User directory selected by USER_STORE, seeded with the WALLET_ROLES setting."""
    if settings.USER_STORE == "database":
        engine = build_engine(settings.DATABASE_URL)
        Base.metadata.create_all(bind=engine)
        users = SqlUserDirectory(build_sessionmaker(engine))
        for wallet_address, role in settings.WALLET_ROLES.items():
            users.register(wallet_address, role)
        return users
    return InMemoryUserDirectory(settings.WALLET_ROLES)


@lru_cache
def get_gateway() -> AuthGateway:
    """Process-wide gateway built once from settings."""
    return AuthGateway(GatewayConfig.from_settings(settings), build_user_directory())


def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    gateway: AuthGateway = Depends(get_gateway),
) -> AuthenticatedUser:
    """Resolve the Authorization header to the authenticated wallet."""
    return gateway.authenticate(authorization)
