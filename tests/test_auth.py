from datetime import timedelta

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from config import Settings
from models.log import Log
from models.users import User
from utils.tokenJWT import create_access_token, create_refresh_token, role_required

from conftest import PASSWORD, auth_header, make_user

REGISTER_BODY = {
    "email": "Priya@Example.com",
    "password": "pearls123",
    "first_name": "Priya",
    "last_name": "Shah",
    "phone": "9811111111",
}


def test_register_returns_tokens_and_normalized_user(client, db):
    response = client.post("/api/auth/register", json=REGISTER_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["access_token"] and data["refresh_token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "priya@example.com"
    assert data["user"]["role"] == "customer"
    assert "password_hash" not in data["user"]
    assert db.query(Log).filter(Log.action == "REGISTER", Log.status == "SUCCESS").count() == 1


def test_register_duplicate_email_conflicts(client):
    assert client.post("/api/auth/register", json=REGISTER_BODY).status_code == 201

    response = client.post("/api/auth/register", json={**REGISTER_BODY, "email": "priya@example.com"})

    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "User with this email already exists"}


def test_register_validation_error_uses_envelope(client):
    response = client.post("/api/auth/register", json={**REGISTER_BODY, "password": "123"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "password" in body["error"]


def test_login_success(client, customer):
    response = client.post("/api/auth/login", json={"email": customer.email, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == customer.id


def test_login_wrong_password(client, customer, db):
    response = client.post("/api/auth/login", json={"email": customer.email, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"
    assert db.query(Log).filter(Log.action == "LOGIN", Log.status == "FAIL").count() == 1


def test_login_deactivated_account(client, db):
    user = make_user(db, "gone@example.com", is_active=False)

    response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 403


def test_profile_requires_authorization_header(client):
    response = client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == "Authorization header required"


def test_profile_rejects_refresh_token_as_access(client, customer):
    headers = {"Authorization": f"Bearer {create_refresh_token(customer)}"}

    response = client.get("/api/auth/profile", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_profile_rejects_expired_token(client, customer):
    token = create_access_token(customer, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_get_profile(client, customer, customer_headers):
    response = client.get("/api/auth/profile", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == customer.email
    assert data["addresses"][0]["id"] == "addr-home"


def test_profile_of_stored_local_email(client, db):
    # Accounts seeded outside registration may carry addresses like root@localhost
    user = make_user(db, "root@localhost")

    response = client.get("/api/auth/profile", headers=auth_header(user))

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "root@localhost"


def test_admin_email_setting_is_validated():
    with pytest.raises(ValidationError):
        Settings(ADMIN_EMAIL="admin@localhost")

    assert Settings(ADMIN_EMAIL="owner@ejewel.com").ADMIN_EMAIL == "owner@ejewel.com"


def test_update_profile_assigns_address_ids(client, customer_headers):
    payload = {
        "first_name": "Asha",
        "last_name": "",
        "phone": "9822222222",
        "addresses": [
            {"street": "5 Park Street", "city": "Kolkata", "type": "work"},
            {"id": "keep-me", "street": "12 MG Road", "city": "Mumbai"},
        ],
    }

    response = client.put("/api/auth/profile", json=payload, headers=customer_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["phone"] == "9822222222"
    # Empty strings do not overwrite stored values
    assert data["last_name"] == "Rao"
    new_address, kept_address = data["addresses"]
    assert len(new_address["id"]) == 32
    assert kept_address["id"] == "keep-me"


def test_change_password(client, customer, customer_headers):
    wrong = client.put(
        "/api/auth/change-password",
        json={"current_password": "wrong-one", "new_password": "newsecret"},
        headers=customer_headers,
    )
    assert wrong.status_code == 400

    response = client.put(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "newsecret"},
        headers=customer_headers,
    )
    assert response.status_code == 200

    login = client.post("/api/auth/login", json={"email": customer.email, "password": "newsecret"})
    assert login.status_code == 200


def test_refresh_rotates_tokens_and_logout_revokes(client, customer):
    login = client.post("/api/auth/login", json={"email": customer.email, "password": PASSWORD}).json()["data"]
    first_refresh = login["refresh_token"]

    refreshed = client.post("/api/auth/refresh", json={"refresh_token": first_refresh})
    assert refreshed.status_code == 200
    second = refreshed.json()["data"]
    assert second["refresh_token"] != first_refresh

    # The rotated-out token is no longer accepted
    assert client.post("/api/auth/refresh", json={"refresh_token": first_refresh}).status_code == 401

    headers = {"Authorization": f"Bearer {second['access_token']}"}
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.post("/api/auth/refresh", json={"refresh_token": second["refresh_token"]}).status_code == 401


def test_refresh_rejects_garbage(client):
    response = client.post("/api/auth/refresh", json={"refresh_token": "not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid refresh token"


def test_role_required_checker():
    checker = role_required("admin", "seller")

    seller = User(email="seller@example.com", role="seller")
    assert checker(current_user=seller) is seller

    with pytest.raises(HTTPException) as exc:
        checker(current_user=User(email="buyer@example.com", role="customer"))
    assert exc.value.status_code == 403
    assert exc.value.detail == "Insufficient permissions"
