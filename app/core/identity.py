from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    VALIDATOR = "validator"
    CERTIFICATOR = "certificator"


class CredentialKind(str, Enum):
    EMAIL = "email"
    WALLET = "wallet"


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a bearer token.

    subject is the account id (as a string) for email credentials and the
    lowercase wallet address for wallet credentials.
    """

    subject: str
    role: Role
    credential_kind: CredentialKind
    expires_at: int

    @property
    def is_email(self) -> bool:
        return self.credential_kind is CredentialKind.EMAIL

    @property
    def is_wallet(self) -> bool:
        return self.credential_kind is CredentialKind.WALLET

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def user_id(self) -> int:
        if not self.is_email:
            raise ValueError("wallet identities have no account id")
        return int(self.subject)

    @property
    def wallet_address(self) -> str:
        if not self.is_wallet:
            raise ValueError("email identities have no wallet subject")
        return self.subject
