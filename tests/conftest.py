import os

# must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["NONCE_EXPIRY_SECONDS"] = "300"

import time
from typing import Callable, Generator

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from main import app
from app.core.dependencies import get_auth_gateway
from app.core.identity import CredentialKind, Identity, Role
from app.core.nonce_store import NonceStore
from app.core.roles import RoleResolver
from app.db.base import Base
from app.db.session import get_db
from app.services.accounts import add_account
from app.services.auth_gateway import AuthGateway


# Fixed keys so addresses are stable between runs
ADMIN_KEY = "0x" + "11" * 32
VALIDATOR_KEY = "0x" + "22" * 32
CERTIFICATOR_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
OTHER_KEY = "0x" + "33" * 32


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def admin_wallet():
    return Account.from_key(ADMIN_KEY)


@pytest.fixture
def validator_wallet():
    return Account.from_key(VALIDATOR_KEY)


@pytest.fixture
def certificator_wallet():
    return Account.from_key(CERTIFICATOR_KEY)


@pytest.fixture
def other_wallet():
    return Account.from_key(OTHER_KEY)


@pytest.fixture
def gateway(admin_wallet) -> AuthGateway:
    """Gateway with its own nonce store and the admin wallet allow-listed"""
    return AuthGateway(NonceStore(expiry_seconds=300), RoleResolver([admin_wallet.address]))


@pytest.fixture
def client(session_factory, gateway) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application"""

    def override_get_db() -> Generator:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sign() -> Callable:
    """sign(account, text) -> hex signature, as a wallet's personal_sign would"""

    def _sign(account, text: str) -> str:
        return account.sign_message(encode_defunct(text=text)).signature.hex()

    return _sign


@pytest.fixture
def bearer() -> Callable:
    def _bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def wallet_login(client, sign) -> Callable:
    """wallet_login(account) -> response body of a full nonce/verify round"""

    def _login(account) -> dict:
        nonce = client.post("/auth/nonce", json={"address": account.address}).json()
        response = client.post(
            "/auth/verify",
            json={"address": account.address, "signature": sign(account, nonce["message"])},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def email_login(client) -> Callable:
    def _login(email: str, password: str) -> dict:
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def register(client) -> Callable:
    """register(email, password, institution) -> response body"""

    def _register(email: str, password: str = "pw", institution: str = "X") -> dict:
        response = client.post(
            "/auth/register",
            json={
                "email": email,
                "password": password,
                "username": email.split("@")[0],
                "institution_name": institution,
                "institution_id": f"{institution}-ID",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def admin_account(session_factory):
    """Seeded email admin: admin@admin.com / admin123"""
    db = session_factory()
    try:
        account = add_account(db, "admin@admin.com", "admin123", "admin", role=Role.ADMIN)
        db.commit()
        db.refresh(account)
        return account
    finally:
        db.close()


@pytest.fixture
def make_identity() -> Callable:
    def _make(
        subject="1",
        role: Role = Role.VALIDATOR,
        credential_kind: CredentialKind = CredentialKind.EMAIL,
    ) -> Identity:
        return Identity(
            subject=str(subject),
            role=role,
            credential_kind=credential_kind,
            expires_at=int(time.time()) + 3600,
        )

    return _make
