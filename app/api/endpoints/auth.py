from enum import Enum
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_auth_gateway, get_identity, get_optional_identity
from app.core.identity import Identity
from app.db.session import get_db
import app.schemas.auth as schemas
from app.schemas.user import ProfileResponse, UserPublic, ValidatorRequestOut
from app.services.accounts import get_account
from app.services.auth_gateway import AuthGateway
from app.services.validator_requests import get_request_for_user

router = APIRouter()
group_tags: List[str | Enum] = ["Auth"]


@router.post(
    "/nonce",
    tags=group_tags,
    response_model=schemas.NonceResponse,
    status_code=status.HTTP_200_OK,
)
def request_nonce(
    body: schemas.NonceRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> schemas.NonceResponse:
    """Generate a nonce for a wallet address and return the message to sign."""
    challenge = gateway.request_nonce(body.address)
    return schemas.NonceResponse(nonce=challenge.nonce, message=challenge.message)


@router.post(
    "/verify",
    tags=group_tags,
    response_model=schemas.VerifyResponse,
)
def verify_wallet(
    body: schemas.VerifyRequest,
    db: Session = Depends(get_db),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> schemas.VerifyResponse:
    """Verify a signed nonce and return an access token.

    The nonce is spent by this call whether or not the signature checks out.
    """
    result = gateway.verify(db, body.address, body.signature)
    return schemas.VerifyResponse(
        token=result.token, role=result.role.value, wallet_address=result.subject
    )


@router.post(
    "/login",
    tags=group_tags,
    response_model=schemas.LoginResponse,
)
def login(
    body: schemas.LoginRequest,
    db: Session = Depends(get_db),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> schemas.LoginResponse:
    result = gateway.login(db, body.email, body.password)
    return schemas.LoginResponse(
        token=result.token,
        role=result.role.value,
        user=UserPublic.from_record(result.account),
    )


@router.post(
    "/register",
    tags=group_tags,
    response_model=schemas.RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: schemas.RegisterRequest,
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_optional_identity),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> schemas.RegisterResponse:
    """Create a validator account; it stays unprivileged until an admin approves it."""
    account = gateway.register(
        db,
        identity,
        email=body.email,
        password=body.password,
        username=body.username,
        institution_name=body.institution_name,
        institution_id=body.institution_id,
        document_url=body.document_url,
    )
    return schemas.RegisterResponse(user=UserPublic.from_record(account))


@router.get(
    "/me",
    tags=group_tags,
    response_model=ProfileResponse,
)
def get_me(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    profile = ProfileResponse(
        subject=identity.subject,
        role=identity.role.value,
        auth_type=identity.credential_kind.value,
        expires_at=identity.expires_at,
    )
    if identity.is_email:
        account = get_account(db, identity.user_id)
        if account is not None:
            profile.user = UserPublic.from_record(account)
            request = get_request_for_user(db, account.id)
            if request is not None:
                profile.validator_request = ValidatorRequestOut.from_record(request)
    return profile


@router.post(
    "/connect-wallet",
    tags=group_tags,
    response_model=UserPublic,
)
def connect_wallet(
    body: schemas.ConnectWalletRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> UserPublic:
    """Link a wallet to the logged-in email account (needed before creating pools)."""
    account = gateway.connect_wallet(db, identity, body.wallet_address)
    return UserPublic.from_record(account)
