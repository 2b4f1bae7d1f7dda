"""
JWT Token Utilities

This module handles JSON Web Token (JWT) creation and decoding for wallet authentication.
After a wallet signature is verified, the gateway mints an access token and a refresh token
with these helpers; protected routes and the refresh flow decode them again.

Flow:
1. Wallet signature verified -> create_access_token() + create_refresh_token()
2. Client calls a protected route with the access token -> decode_token()
3. Client exchanges the refresh token for a new access token -> decode_token() + create_access_token()

Both tokens contain:
- walletAddress: The authenticated wallet's base58 public key
- type: "access" or "refresh"
- iat: Issued at timestamp
- exp: Expiration timestamp (lifetime from GatewayConfig)

Secrets and lifetimes come from an explicit GatewayConfig, never from module state.
"""

from typing import Any, Dict, Optional

import jwt

from authgate.core.config import GatewayConfig

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _encode(
    config: GatewayConfig,
    wallet_address: str,
    token_type: str,
    lifetime: int,
    issued_at: int,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    if not wallet_address:
        raise ValueError("wallet_address is required")

    payload: Dict[str, Any] = {
        "walletAddress": wallet_address,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def create_access_token(
    config: GatewayConfig,
    wallet_address: str,
    issued_at: int,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a JWT access token for an authenticated wallet address.

    Args:
        config: Gateway configuration holding the signing secret and lifetimes
        wallet_address: The base58 public key that was verified
        issued_at: Epoch seconds used for the iat claim; exp is derived from it
        extra_claims: Optional additional claims to include in the JWT payload

    Returns:
        A JWT token string that can be used in Authorization: Bearer <token> header

    Raises:
        ValueError: If wallet_address is empty
    """
    return _encode(config, wallet_address, ACCESS_TOKEN_TYPE, config.access_token_ttl, issued_at, extra_claims)


def create_refresh_token(config: GatewayConfig, wallet_address: str, issued_at: int) -> str:
    """Create a long-lived refresh token; it is not rotated on use."""
    return _encode(config, wallet_address, REFRESH_TOKEN_TYPE, config.refresh_token_ttl, issued_at)


def decode_token(config: GatewayConfig, token: str, now: Optional[int] = None) -> Dict[str, Any]:
    """
    Verify signature and expiry of a JWT and return its claims.

    Args:
        config: Gateway configuration holding the signing secret
        token: The encoded JWT
        now: Epoch seconds to check exp and iat against. Defaults to the wall clock.

    Raises:
        jwt.ExpiredSignatureError: If the exp claim is not after now
        jwt.ImmatureSignatureError: If the iat claim is after now
        jwt.InvalidTokenError: For any other verification or decoding failure
    """
    if now is None:
        return jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            options={"require": ["exp", "iat"]},
        )

    payload = jwt.decode(
        token,
        config.secret,
        algorithms=[config.algorithm],
        options={"require": ["exp", "iat"], "verify_exp": False, "verify_iat": False},
    )
    exp, iat = payload["exp"], payload["iat"]
    if not isinstance(exp, int) or not isinstance(iat, int):
        raise jwt.DecodeError("exp and iat claims must be integers")
    if exp <= now:
        raise jwt.ExpiredSignatureError("Signature has expired")
    if iat > now:
        raise jwt.ImmatureSignatureError("The token is not yet valid (iat)")
    return payload
