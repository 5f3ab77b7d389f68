"""
FastAPI Authentication Dependencies
This module provides FastAPI dependency functions that can be injected into route handlers
to automatically extract and validate JWT tokens from the Authorization header.
Usage in endpoints:
    @router.get("/protected")
    def protected_route(identity: Identity = Depends(get_identity)):
        # identity is decoded from the bearer token
        return {"sub": identity.subject, "role": identity.role}
Flow:
1. Client sends request with Authorization: Bearer <token> header
2. FastAPI calls get_identity() dependency
3. AuthGateway.identify() checks the header and decodes the token (jwt_utils.py)
4. Returns the Identity to the route handler
"""

from typing import Optional

from fastapi import Depends, Header

from app.core.config import settings
from app.core.identity import Identity
from app.core.nonce_store import NonceStore
from app.core.roles import RoleResolver
from app.services.auth_gateway import AuthGateway


# one nonce store per process, shared by every request
auth_gateway = AuthGateway(
    nonce_store=NonceStore(expiry_seconds=settings.NONCE_EXPIRY_SECONDS),
    resolver=RoleResolver(settings.admin_wallets),
)


def get_auth_gateway() -> AuthGateway:
    return auth_gateway


def get_identity(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> Identity:
    return gateway.identify(authorization)


def get_optional_identity(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> Optional[Identity]:
    """Identity when a bearer token is sent, None for anonymous calls."""
    if not authorization:
        return None
    return gateway.identify(authorization)
