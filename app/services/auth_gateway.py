"""
Auth Gateway

Single entry point for everything that turns credentials into a token and
a token back into an Identity.

Wallet login, per address:

    NoNonce --request_nonce--> NonceIssued --verify--> TokenIssued
                                            \\-------> Rejected

verify() consumes the nonce before checking the signature, so every verify
attempt burns the nonce whatever its outcome and the client restarts from
request_nonce().

Email login looks the account up by lowercase email and checks the bcrypt
hash. Unknown email and wrong password fail with the same message.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequest, InvalidSignatureFormat, SignatureMismatch, Unauthorized
from app.core.identity import CredentialKind, Identity, Role
from app.core.jwt_utils import create_access_token, verify_token
from app.core.nonce_store import NonceStore
from app.core.roles import RoleResolver
from app.core.security import verify_password
from app.core.wallet_auth import (
    challenge_message,
    is_valid_address,
    normalize_address,
    recover_address,
)
from app.models.users import User
from app.services import accounts
from app.services.validator_requests import add_request
from app.services.workflow import guard_connect_wallet, guard_register

logger = logging.getLogger(__name__)

BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class NonceChallenge:
    nonce: str
    message: str


@dataclass(frozen=True)
class AuthResult:
    token: str
    role: Role
    credential_kind: CredentialKind
    subject: str
    account: Optional[User] = None


class AuthGateway:
    def __init__(self, nonce_store: NonceStore, resolver: RoleResolver) -> None:
        self.nonce_store = nonce_store
        self.resolver = resolver

    # --- wallet login -------------------------------------------------------

    def request_nonce(self, address: str) -> NonceChallenge:
        if not is_valid_address(address):
            raise BadRequest("Invalid address format")
        nonce = self.nonce_store.issue(normalize_address(address))
        return NonceChallenge(nonce=nonce, message=challenge_message(nonce))

    def verify(self, db: Session, address: str, signature: str) -> AuthResult:
        """
        Check a signed challenge and issue a wallet token.

        Raises:
            BadRequest: no live nonce for the address
            InvalidSignatureFormat: signature cannot be parsed or recovered
            SignatureMismatch: signature belongs to another address
        """
        address = normalize_address(address)
        nonce = self.nonce_store.consume(address)
        if nonce is None:
            raise BadRequest("Nonce not found or expired")

        try:
            recovered = recover_address(challenge_message(nonce), signature)
        except InvalidSignatureFormat:
            logger.warning("unreadable signature for %s", address)
            raise
        if recovered != address:
            logger.warning("signature mismatch for %s (recovered %s)", address, recovered)
            raise SignatureMismatch()

        role = self.resolver.resolve_wallet(db, address)
        token = create_access_token(address, role, CredentialKind.WALLET)
        logger.info("wallet token issued: %s role=%s", address, role.value)
        return AuthResult(
            token=token,
            role=role,
            credential_kind=CredentialKind.WALLET,
            subject=address,
        )

    # --- email login --------------------------------------------------------

    def login(self, db: Session, email: str, password: str) -> AuthResult:
        account = accounts.get_account_by_email(db, email)
        if account is None or not verify_password(password or "", account.password_hash):
            raise Unauthorized("Invalid email or password")

        role = self.resolver.resolve_account(account)
        token = create_access_token(str(account.id), role, CredentialKind.EMAIL)
        logger.info("email token issued: user=%s role=%s", account.id, role.value)
        return AuthResult(
            token=token,
            role=role,
            credential_kind=CredentialKind.EMAIL,
            subject=str(account.id),
            account=account,
        )

    def register(
        self,
        db: Session,
        identity: Optional[Identity],
        email: str,
        password: str,
        username: str,
        institution_name: str,
        institution_id: str,
        document_url: Optional[str] = None,
    ) -> User:
        """Create a validator account together with its pending approval request."""
        guard_register(identity)
        if "@" not in (email or ""):
            raise BadRequest("Invalid email")
        if not password:
            raise BadRequest("Password is required")
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise BadRequest("Password is too long")
        if accounts.get_account_by_email(db, email) is not None:
            raise BadRequest("Email already registered")

        try:
            account = accounts.add_account(db, email, password, username, role=Role.VALIDATOR)
            add_request(db, account, institution_name, institution_id, document_url)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise BadRequest("Email already registered")
        db.refresh(account)
        logger.info("validator registered: user=%s", account.id)
        return account

    def connect_wallet(self, db: Session, identity: Identity, wallet_address: str) -> User:
        guard_connect_wallet(identity)
        if not is_valid_address(wallet_address):
            raise BadRequest("Invalid address format")

        account = accounts.get_account(db, identity.user_id)
        if account is None:
            raise Unauthorized("Account no longer exists")
        owner = accounts.get_account_by_wallet(db, wallet_address)
        if owner is not None and owner.id != account.id:
            raise BadRequest("Wallet already linked to another account")
        return accounts.link_wallet(db, account, wallet_address)

    # --- request time -------------------------------------------------------

    def identify(self, authorization: Optional[str]) -> Identity:
        """Turn an `Authorization: Bearer <token>` header value into an Identity."""
        if not authorization:
            raise Unauthorized("Authorization header missing")
        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Unauthorized("Invalid authorization header")
        return verify_token(token.strip())
