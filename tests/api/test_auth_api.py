from fastapi.testclient import TestClient

from app.core.identity import CredentialKind, Role
from app.core.jwt_utils import create_access_token


class TestWalletLogin:
    def test_nonce(self, client: TestClient, certificator_wallet):
        response = client.post("/auth/nonce", json={"address": certificator_wallet.address})
        assert response.status_code == 200
        body = response.json()
        assert len(body["nonce"]) == 32
        assert body["message"] == f"Login to Etched: {body['nonce']}"

    def test_nonce_invalid_address(self, client: TestClient):
        response = client.post("/auth/nonce", json={"address": "0x123"})
        assert response.status_code == 400
        assert response.json() == {"error": "bad_request", "message": "Invalid address format"}

    def test_certificator_round_trip(self, client: TestClient, certificator_wallet, sign, bearer):
        nonce = client.post("/auth/nonce", json={"address": certificator_wallet.address}).json()
        response = client.post(
            "/auth/verify",
            json={
                "address": certificator_wallet.address,
                "signature": sign(certificator_wallet, nonce["message"]),
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "certificator"
        assert body["wallet_address"] == certificator_wallet.address.lower()

        me = client.get("/auth/me", headers=bearer(body["token"])).json()
        assert me["subject"] == certificator_wallet.address.lower()
        assert me["role"] == "certificator"
        assert me["auth_type"] == "wallet"
        assert me["user"] is None

    def test_admin_wallet(self, wallet_login, admin_wallet):
        assert wallet_login(admin_wallet)["role"] == "admin"

    def test_verify_burns_nonce_on_failure(self, client: TestClient, certificator_wallet, other_wallet, sign):
        nonce = client.post("/auth/nonce", json={"address": certificator_wallet.address}).json()
        wrong = client.post(
            "/auth/verify",
            json={"address": certificator_wallet.address, "signature": sign(other_wallet, nonce["message"])},
        )
        assert wrong.status_code == 401
        assert wrong.json() == {"error": "unauthorized", "message": "Signature does not match address"}

        retry = client.post(
            "/auth/verify",
            json={
                "address": certificator_wallet.address,
                "signature": sign(certificator_wallet, nonce["message"]),
            },
        )
        assert retry.status_code == 400
        assert retry.json()["error"] == "bad_request"

    def test_malformed_signature(self, client: TestClient, certificator_wallet):
        client.post("/auth/nonce", json={"address": certificator_wallet.address})
        response = client.post(
            "/auth/verify",
            json={"address": certificator_wallet.address, "signature": "0xdeadbeef"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid signature format"


class TestEmailLogin:
    def test_register_and_login(self, client: TestClient, register, email_login, bearer):
        registered = register("a@b.com", "pw", "X")
        assert registered["user"]["role"] == "validator"
        assert "password_hash" not in registered["user"]

        login = email_login("A@B.com", "pw")
        assert login["role"] == "validator"
        assert login["user"]["email"] == "a@b.com"

        me = client.get("/auth/me", headers=bearer(login["token"])).json()
        assert me["auth_type"] == "email"
        assert me["user"]["email"] == "a@b.com"
        assert me["validator_request"]["status"] == "pending"
        assert me["validator_request"]["institution_name"] == "X"

    def test_wrong_password(self, client: TestClient, register):
        register("a@b.com", "pw")
        response = client.post("/auth/login", json={"email": "a@b.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized", "message": "Invalid email or password"}

    def test_unknown_email_same_message(self, client: TestClient):
        response = client.post("/auth/login", json={"email": "ghost@b.com", "password": "pw"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_duplicate_email(self, client: TestClient, register):
        register("a@b.com")
        response = client.post(
            "/auth/register",
            json={
                "email": "A@b.com",
                "password": "pw",
                "username": "a",
                "institution_name": "X",
                "institution_id": "X-ID",
            },
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    def test_admin_cannot_register(self, client: TestClient, admin_account, email_login, bearer):
        token = email_login("admin@admin.com", "admin123")["token"]
        response = client.post(
            "/auth/register",
            headers=bearer(token),
            json={
                "email": "new@b.com",
                "password": "pw",
                "username": "new",
                "institution_name": "X",
                "institution_id": "X-ID",
            },
        )
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"


class TestBearer:
    def test_missing_header(self, client: TestClient):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized", "message": "Authorization header missing"}

    def test_wrong_scheme(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401

    def test_garbage_token(self, client: TestClient, bearer):
        response = client.get("/auth/me", headers=bearer("not-a-jwt"))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_expired_token(self, client: TestClient, bearer):
        token = create_access_token(
            "0x" + "ab" * 20, Role.CERTIFICATOR, CredentialKind.WALLET, expires_in=60, now=1_700_000_000
        )
        response = client.get("/auth/me", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"


class TestConnectWallet:
    def test_link(self, client: TestClient, register, email_login, bearer, validator_wallet):
        register("v@uni.edu")
        token = email_login("v@uni.edu", "pw")["token"]
        response = client.post(
            "/auth/connect-wallet",
            headers=bearer(token),
            json={"wallet_address": validator_wallet.address},
        )
        assert response.status_code == 200
        assert response.json()["wallet_address"] == validator_wallet.address.lower()

    def test_wallet_taken(self, client: TestClient, register, email_login, bearer, validator_wallet):
        for email in ("v@uni.edu", "w@uni.edu"):
            register(email)
        first = email_login("v@uni.edu", "pw")["token"]
        second = email_login("w@uni.edu", "pw")["token"]
        payload = {"wallet_address": validator_wallet.address}
        assert client.post("/auth/connect-wallet", headers=bearer(first), json=payload).status_code == 200
        response = client.post("/auth/connect-wallet", headers=bearer(second), json=payload)
        assert response.status_code == 400

    def test_wallet_login_rejected(self, client: TestClient, wallet_login, bearer, certificator_wallet):
        token = wallet_login(certificator_wallet)["token"]
        response = client.post(
            "/auth/connect-wallet",
            headers=bearer(token),
            json={"wallet_address": certificator_wallet.address},
        )
        assert response.status_code == 400
