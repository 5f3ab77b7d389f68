"""
Workflow guard: who may move which entity out of which state.

Each guard is a pure decision over values the caller has already loaded.
It raises the ApiError describing the first violated precondition and
returns nothing when the operation may proceed. Persistence stays with the
caller, which performs one atomic write after the guard passes.

| Operation                | Credential | Relation                           | State                  |
|--------------------------|------------|------------------------------------|------------------------|
| register                 | email/none | caller is not admin                | -                      |
| decide validator request | email      | admin                              | request pending        |
| create pool              | email      | approved request and linked wallet | code unique            |
| toggle pool              | email      | pool owner                         | -                      |
| submit certificate       | wallet     | -                                  | pool active, hash new  |
| decide certificate       | email      | pool owner                         | certificate pending    |
| connect wallet           | email      | -                                  | -                      |
"""

from typing import Optional

from app.core.errors import BadRequest, Forbidden, NotFound
from app.core.identity import Identity
from app.models.certificates import Certificate, CertificateStatus
from app.models.pools import Pool
from app.models.users import User
from app.models.validator_requests import RequestStatus, ValidatorRequest

EMAIL_LOGIN_REQUIRED = "Validators must use email login"
WALLET_LOGIN_REQUIRED = "Certificators must use wallet login"


def require_email(identity: Identity, message: str = EMAIL_LOGIN_REQUIRED) -> None:
    if not identity.is_email:
        raise BadRequest(message)


def require_wallet(identity: Identity) -> None:
    if not identity.is_wallet:
        raise BadRequest(WALLET_LOGIN_REQUIRED)


def require_admin(identity: Identity) -> None:
    require_email(identity, "Admins must use email login")
    if not identity.is_admin:
        raise Forbidden("Admin role required")


def guard_register(identity: Optional[Identity]) -> None:
    # anonymous registration is the normal case
    if identity is None:
        return
    require_email(identity)
    if identity.is_admin:
        raise Forbidden("Admins cannot register as validators")


def guard_decide_validator_request(
    identity: Identity, request: Optional[ValidatorRequest]
) -> None:
    require_admin(identity)
    if request is None:
        raise NotFound("Validator request not found")
    if request.status != RequestStatus.PENDING.value:
        raise BadRequest("Validator request already processed")


def guard_create_pool(
    identity: Identity,
    approved_request: Optional[ValidatorRequest],
    account: Optional[User],
) -> None:
    require_email(identity)
    if approved_request is None or account is None:
        raise Forbidden("An approved validator request is required")
    if approved_request.status != RequestStatus.APPROVED.value:
        raise Forbidden("An approved validator request is required")
    if not account.wallet_address:
        raise BadRequest("Please connect your wallet first")


def guard_toggle_pool(identity: Identity, pool: Optional[Pool]) -> None:
    require_email(identity)
    if pool is None:
        raise NotFound("Pool not found")
    if pool.validator_id != identity.user_id:
        raise Forbidden("Only the pool owner can change this pool")


def guard_submit_certificate(
    identity: Identity, pool: Optional[Pool], hash_in_use: bool
) -> None:
    require_wallet(identity)
    if pool is None or not pool.is_active:
        raise BadRequest("Pool not found or inactive")
    if hash_in_use:
        raise BadRequest("Certificate already submitted")


def guard_decide_certificate(
    identity: Identity, certificate: Optional[Certificate], pool: Optional[Pool]
) -> None:
    require_email(identity)
    if certificate is None:
        raise NotFound("Certificate not found")
    if certificate.status != CertificateStatus.PENDING.value:
        raise BadRequest("Certificate already processed")
    if pool is None or pool.validator_id != identity.user_id:
        raise Forbidden("Only the pool owner can decide this certificate")


def guard_connect_wallet(identity: Identity) -> None:
    require_email(identity)
