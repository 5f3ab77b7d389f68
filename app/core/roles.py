"""
Role resolution at login time.

The resolved role is written into the token and trusted until the token
expires; approval changes made in between only show up on the next login.
"""

from typing import Iterable

from sqlalchemy.orm import Session

from app.core.identity import Role
from app.core.wallet_auth import normalize_address
from app.models.users import User
from app.models.validator_requests import RequestStatus, ValidatorRequest


class RoleResolver:
    def __init__(self, admin_wallets: Iterable[str] = ()) -> None:
        self._admin_wallets = frozenset(normalize_address(w) for w in admin_wallets if w)

    def is_admin_wallet(self, address: str) -> bool:
        return normalize_address(address) in self._admin_wallets

    def resolve_wallet(self, db: Session, address: str) -> Role:
        """admin if allow-listed, validator if linked to an approved request, else certificator."""
        address = normalize_address(address)
        if address in self._admin_wallets:
            return Role.ADMIN

        approved = (
            db.query(ValidatorRequest.id)
            .join(User, User.id == ValidatorRequest.user_id)
            .filter(
                User.wallet_address == address,
                ValidatorRequest.status == RequestStatus.APPROVED.value,
            )
            .first()
        )
        if approved is not None:
            return Role.VALIDATOR
        return Role.CERTIFICATOR

    def resolve_account(self, account: User) -> Role:
        return Role(account.role)
