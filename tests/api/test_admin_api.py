import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def admin_token(admin_account, email_login):
    return email_login("admin@admin.com", "admin123")["token"]


def _pending(client, bearer, token):
    response = client.get("/admin/validator-requests", headers=bearer(token))
    assert response.status_code == 200
    return response.json()


def test_list_pending(client: TestClient, bearer, register, admin_token):
    register("first@uni.edu", institution="First")
    register("second@uni.edu", institution="Second")
    items = _pending(client, bearer, admin_token)
    assert [item["request"]["institution_name"] for item in items] == ["First", "Second"]
    assert items[0]["user"]["email"] == "first@uni.edu"


def test_approve(client: TestClient, bearer, register, admin_token):
    register("v@uni.edu", institution="Test University")
    request_id = _pending(client, bearer, admin_token)[0]["request"]["id"]

    response = client.post(
        f"/admin/validator-requests/{request_id}/decision",
        headers=bearer(admin_token),
        json={"approve": True},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    assert _pending(client, bearer, admin_token) == []
    validators = client.get("/admin/validators", headers=bearer(admin_token)).json()
    assert len(validators) == 1
    assert validators[0]["institution_name"] == "Test University"
    assert validators[0]["approved_at"] is not None


def test_decision_is_final(client: TestClient, bearer, register, admin_token):
    register("v@uni.edu")
    request_id = _pending(client, bearer, admin_token)[0]["request"]["id"]
    url = f"/admin/validator-requests/{request_id}/decision"

    assert client.post(url, headers=bearer(admin_token), json={"approve": False}).status_code == 200
    response = client.post(url, headers=bearer(admin_token), json={"approve": True})
    assert response.status_code == 400
    assert response.json() == {"error": "bad_request", "message": "Validator request already processed"}


def test_unknown_request(client: TestClient, bearer, admin_token):
    response = client.post(
        "/admin/validator-requests/999/decision", headers=bearer(admin_token), json={"approve": True}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_validator_is_forbidden(client: TestClient, bearer, register, email_login):
    register("v@uni.edu")
    token = email_login("v@uni.edu", "pw")["token"]
    response = client.get("/admin/validator-requests", headers=bearer(token))
    assert response.status_code == 403
    assert response.json() == {"error": "forbidden", "message": "Admin role required"}


def test_admin_wallet_must_use_email(client: TestClient, bearer, wallet_login, admin_wallet):
    token = wallet_login(admin_wallet)["token"]
    response = client.get("/admin/stats", headers=bearer(token))
    assert response.status_code == 400
    assert response.json()["message"] == "Admins must use email login"


def test_stats(client: TestClient, bearer, register, admin_token):
    register("v@uni.edu")
    response = client.get("/admin/stats", headers=bearer(admin_token))
    assert response.status_code == 200
    body = response.json()
    assert body["pending_requests"] == 1
    assert body["total_validators"] == 0
    assert body["total_pools"] == 0
