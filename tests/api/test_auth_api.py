"""
Tests for authentication and profile endpoints.

These test the HTTP layer — status codes, response format,
and error mapping. Business rules are tested in
test_identity_service.py.
"""

import uuid

from sqlalchemy.exc import OperationalError

from finance_tracker.config import TokenConfig
from finance_tracker.services.token_service import TokenIssuer

REGISTRATION = {
    "first_name": "Ana",
    "last_name": "Souza",
    "email": "ana@example.com",
    "password": "s3cret-pass",
    "confirm_password": "s3cret-pass",
}


def register(client, **overrides):
    return client.post("/api/auth/register", json={**REGISTRATION, **overrides})


def auth_headers(response):
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestRegister:

    def test_register_returns_201(self, client):
        response = register(client)
        assert response.status_code == 201

    def test_register_returns_tokens_and_account(self, client):
        data = register(client).json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["account"]["email"] == "ana@example.com"
        assert "password_hash" not in data["account"]

    def test_duplicate_email_returns_409(self, client):
        register(client)
        response = register(client, email="ANA@example.com")
        assert response.status_code == 409

    def test_mismatched_passwords_returns_400(self, client):
        response = register(client, confirm_password="other")
        assert response.status_code == 400
        assert "do not match" in response.json()["detail"]

    def test_missing_field_returns_422(self, client):
        payload = dict(REGISTRATION)
        del payload["email"]
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 422


class TestLogin:

    def test_login_returns_200(self, client):
        register(client)
        response = client.post("/api/auth/login", json={
            "email": "ana@example.com", "password": "s3cret-pass",
        })
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_failures_are_indistinguishable(self, client):
        register(client)
        wrong_password = client.post("/api/auth/login", json={
            "email": "ana@example.com", "password": "nope",
        })
        unknown_email = client.post("/api/auth/login", json={
            "email": "nobody@example.com", "password": "s3cret-pass",
        })

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()


class TestRefresh:

    def test_refresh_rotates_token(self, client):
        refresh_token = register(client).json()["refresh_token"]

        first = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})
        second = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

        assert first.status_code == 200
        assert first.json()["refresh_token"] != refresh_token
        assert second.status_code == 400

    def test_blank_refresh_token_returns_400(self, client):
        response = client.post("/api/auth/refresh", json={"refresh_token": ""})
        assert response.status_code == 400


class TestProfile:

    def test_me_requires_token(self, client):
        response = client.get("/api/users/me")
        assert response.status_code == 401

    def test_me_returns_account(self, client):
        headers = auth_headers(register(client))
        response = client.get("/api/users/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == "ana@example.com"

    def test_token_signed_elsewhere_rejected(self, client, token_config):
        foreign = TokenIssuer(TokenConfig(
            secret_key="a-completely-different-secret-key-value",
            issuer=token_config.issuer,
            audience=token_config.audience,
        ))
        account_id = register(client).json()["account"]["id"]
        token = foreign.issue_access_token(uuid.UUID(account_id), "ana@example.com")

        response = client.get(
            "/api/users/me", headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401

    def test_update_me(self, client):
        headers = auth_headers(register(client))
        response = client.put("/api/users/me", headers=headers, json={
            "first_name": "Ana", "last_name": "Lima", "bio": "Budgeting",
        })
        assert response.status_code == 200
        assert response.json()["last_name"] == "Lima"
        assert response.json()["bio"] == "Budgeting"

    def test_delete_me(self, client):
        headers = auth_headers(register(client))

        response = client.delete("/api/users/me", headers=headers)
        assert response.status_code == 204

        # The token is still cryptographically valid, the account is gone
        response = client.get("/api/users/me", headers=headers)
        assert response.status_code == 404


class TestStorageFailure:

    def test_database_outage_returns_503(self, client, db_session, monkeypatch):
        def failing_execute(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is gone"))

        monkeypatch.setattr(db_session, "execute", failing_execute)
        response = register(client)

        assert response.status_code == 503
        assert "Storage failure" in response.json()["detail"]
