"""
handle account rows for email logins
table: users
columns:
    id: int
    email: str (unique, lowercase)
    password_hash: str (bcrypt)
    username: str
    role: str (admin, validator)
    wallet_address: str (optional, lowercase)
    created_at: datetime
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.identity import Role
from app.core.security import hash_password
from app.core.wallet_auth import normalize_address
from app.models.users import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower() if email else ""


def get_account(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_account_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_account_by_wallet(db: Session, wallet_address: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(User.wallet_address == normalize_address(wallet_address))
        .first()
    )


def add_account(
    db: Session,
    email: str,
    password: str,
    username: str,
    role: Role = Role.VALIDATOR,
) -> User:
    """Stage a new account in the session; the caller commits."""
    account = User(
        email=normalize_email(email),
        password_hash=hash_password(password),
        username=username.strip(),
        role=Role(role).value,
    )
    db.add(account)
    db.flush()
    return account


def link_wallet(db: Session, account: User, wallet_address: str) -> User:
    account.wallet_address = normalize_address(wallet_address)
    db.commit()
    db.refresh(account)
    return account


def seed_admin(db: Session, email: str, password: Optional[str]) -> Optional[User]:
    """Create the admin account once. Does nothing without a password."""
    if not password:
        return None
    existing = get_account_by_email(db, email)
    if existing:
        return existing
    account = add_account(db, email, password, "admin", role=Role.ADMIN)
    db.commit()
    db.refresh(account)
    logger.info("admin account seeded: %s", account.email)
    return account
