"""
JWT Token Utilities

This module handles JSON Web Token (JWT) creation and verification for both
login schemes. Email logins and wallet logins produce the same claims shape,
told apart by the `auth_type` claim.

Flow:
1. User logs in (password or wallet signature) -> create_access_token() generates JWT
2. User makes API request with JWT in Authorization header -> verify_token() validates it
3. Protected endpoints use get_identity() from dependencies.py to obtain the Identity

The JWT contains:
- sub: account id (email login) or lowercase wallet address (wallet login)
- role: admin / validator / certificator, fixed for the token's lifetime
- auth_type: email / wallet
- iat: Issued at timestamp
- exp: Expiration timestamp (EMAIL_TOKEN_EXPIRE_SECONDS or WALLET_TOKEN_EXPIRE_SECONDS)
"""

import time
from typing import Any, Dict, Optional

import jwt

from app.core.config import settings
from app.core.errors import Unauthorized
from app.core.identity import CredentialKind, Identity, Role


if not settings.JWT_SECRET:
    raise RuntimeError("JWT_SECRET is not configured")


def default_expiry(credential_kind: CredentialKind) -> int:
    """Wallet sessions are shorter lived than password sessions."""
    if credential_kind is CredentialKind.WALLET:
        return settings.WALLET_TOKEN_EXPIRE_SECONDS
    return settings.EMAIL_TOKEN_EXPIRE_SECONDS


def create_access_token(
    subject: str,
    role: Role,
    credential_kind: CredentialKind,
    expires_in: Optional[int] = None,
    now: Optional[int] = None,
) -> str:
    """
    Create a JWT access token for an authenticated principal.

    Args:
        subject: Account id or lowercase wallet address
        role: Role resolved at login time
        credential_kind: Which login scheme produced the token
        expires_in: Lifetime in seconds, defaults to the credential kind's lifetime
        now: Issue time as epoch seconds, defaults to the current time

    Returns:
        A JWT token string that can be used in Authorization: Bearer <token> header

    Raises:
        ValueError: If subject is empty
    """
    if not subject:
        raise ValueError("subject is required")

    issued_at = int(time.time()) if now is None else int(now)
    lifetime = default_expiry(credential_kind) if expires_in is None else int(expires_in)
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "role": Role(role).value,
        "auth_type": CredentialKind(credential_kind).value,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.ENCODE_ALGORITHM)


def verify_token(token: str, now: Optional[int] = None) -> Identity:
    """
    Verify and decode a JWT token.

    Checks the signature, the payload shape and the expiry. A token is valid
    for every instant strictly before its `exp` claim.

    Args:
        token: The JWT token string from Authorization header
        now: Check time as epoch seconds, defaults to the current time

    Returns:
        The Identity carried by the token

    Raises:
        Unauthorized: If token is missing, expired, invalid, or malformed
    """
    if not token:
        raise Unauthorized("Missing token")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.ENCODE_ALGORITHM],
            options={
                "verify_exp": False,
                "verify_iat": False,
                "require": ["sub", "role", "auth_type", "exp"],
            },
        )
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")

    try:
        expires_at = int(payload["exp"])
        identity = Identity(
            subject=str(payload["sub"]),
            role=Role(payload["role"]),
            credential_kind=CredentialKind(payload["auth_type"]),
            expires_at=expires_at,
        )
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token payload")

    current = int(time.time()) if now is None else int(now)
    if current >= expires_at:
        raise Unauthorized("Token expired")

    return identity
