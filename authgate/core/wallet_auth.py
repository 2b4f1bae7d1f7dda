"""
Wallet Signature Utilities

This module handles the cryptographic side of wallet authentication.
A wallet proves control of its key pair by signing a plaintext message with its
ED25519 private key; the server checks that detached signature against the
base58-encoded public key.

Authentication Flow:
1. Backend optionally builds a sign-in challenge -> build_challenge()
2. Wallet signs the message (detached ED25519 signature)
3. Frontend sends: publicKey, signature, message (publicKey and signature base58)
4. Backend verifies: verify_signature()
   - Decodes publicKey and signature from base58
   - Verifies the ED25519 signature over the UTF-8 message bytes
5. If challenges are enforced, challenge_is_fresh() checks the signed message
   was issued for this wallet within the allowed window

The signature verification uses:
- ED25519 cryptography (the cryptography package)
- base58 for the wallet's public key and signature encoding
"""

import logging
import re
import secrets
import time
from typing import Optional

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)

NONCE_NUM_BYTES = 16  # 16 bytes = 32 hex characters
PUBLIC_KEY_NUM_BYTES = 32

_WALLET_LINE = re.compile(r"^Wallet: (\S+)$", re.MULTILINE)
_TIMESTAMP_LINE = re.compile(r"^Timestamp: (\d+)$", re.MULTILINE)


def generate_nonce(num_bytes: int = NONCE_NUM_BYTES) -> str:
    """
    Generate a cryptographically secure random nonce for a sign-in challenge.

    Args:
        num_bytes: Number of random bytes to generate (default: 16 = 32 hex chars)

    Returns:
        Hex-encoded random string (e.g., "a1b2c3d4...")
    """
    if num_bytes <= 0:
        num_bytes = NONCE_NUM_BYTES
    return secrets.token_hex(num_bytes)


def decode_base58(value: str) -> bytes:
    """Decode a base58 string to bytes. Raises ValueError on malformed input."""
    return base58.b58decode(value.strip())


def is_valid_wallet_address(address: str) -> bool:
    """Check that an address is base58 and decodes to an ED25519 public key."""
    if not address:
        return False
    try:
        return len(decode_base58(address)) == PUBLIC_KEY_NUM_BYTES
    except ValueError:
        return False


def verify_signature(public_key: str, signature: str, message: str) -> bool:
    """
    Verify a detached ED25519 wallet signature.

    Every decoding or verification problem counts as a failed verification,
    so malformed input is rejected instead of raising.

    Args:
        public_key: base58-encoded ED25519 public key (the wallet address)
        signature: base58-encoded 64-byte detached signature
        message: the plaintext message that was signed

    Returns:
        True if the signature over message was produced by public_key's private key
    """
    try:
        public_key_bytes = decode_base58(public_key)
        signature_bytes = decode_base58(signature)
        message_bytes = message.encode("utf-8")
        Ed25519PublicKey.from_public_bytes(public_key_bytes).verify(signature_bytes, message_bytes)
    except (InvalidSignature, ValueError) as e:
        logger.debug("Signature verification failed for %s: %r", public_key, e)
        return False
    return True


def build_challenge(
    wallet_address: str,
    project_name: str,
    timestamp_ms: Optional[int] = None,
    nonce: Optional[str] = None,
) -> str:
    """Build the human-readable message a wallet signs to log in."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    if nonce is None:
        nonce = generate_nonce()
    return (
        f"{project_name} Authentication\n\n"
        f"Wallet: {wallet_address}\n"
        f"Timestamp: {timestamp_ms}\n"
        f"Nonce: {nonce}\n\n"
        f"Please sign this message to authenticate with {project_name}."
    )


def challenge_is_fresh(message: str, wallet_address: str, max_age_seconds: int, now: float) -> bool:
    """
    Check that a signed message is a challenge issued for wallet_address
    no more than max_age_seconds before now (epoch seconds).
    """
    wallet_match = _WALLET_LINE.search(message)
    timestamp_match = _TIMESTAMP_LINE.search(message)
    if not wallet_match or not timestamp_match:
        return False
    if wallet_match.group(1) != wallet_address:
        return False

    age_ms = int(now * 1000) - int(timestamp_match.group(1))
    return 0 <= age_ms <= max_age_seconds * 1000
