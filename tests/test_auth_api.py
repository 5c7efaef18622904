"""
End-to-end tests for registration, login and the auth guard.
"""

import time

from sqlalchemy import text

from auth.jwt import TokenIssuer, TokenVerifier
from config.settings import Settings
from tests.helpers import auth_header, register


class TestRegister:
    def test_register_returns_token(self, client):
        resp = register(client)
        assert resp.status_code == 201
        assert resp.json()["token"]

    def test_duplicate_email_conflicts_and_keeps_one_row(self, client, sync_engine):
        assert register(client).status_code == 201
        second = register(client, email="A@x.com", name="Impostor")
        assert second.status_code == 409
        assert "error" in second.json()

        with sync_engine.connect() as conn:
            count = conn.execute(
                text("SELECT COUNT(*) FROM users WHERE email = 'a@x.com'")
            ).scalar()
        assert count == 1

    def test_password_is_stored_hashed(self, client, sync_engine):
        register(client, password="secret123")
        with sync_engine.connect() as conn:
            stored = conn.execute(text("SELECT password FROM users")).scalar()
        assert stored != "secret123"
        assert stored.startswith("$2b$")

    def test_missing_fields_rejected(self, client):
        resp = client.post("/auth/register", json={"email": "a@x.com"})
        assert resp.status_code == 422
        assert "password" in resp.json()["fields"]

    def test_overlong_password_rejected(self, client):
        resp = register(client, password="x" * 73)
        assert resp.status_code == 422


class TestLogin:
    def test_login_returns_token(self, client):
        register(client)
        resp = client.post("/auth/login", json={"email": "a@x.com", "password": "secret123"})
        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_login_email_is_case_insensitive(self, client):
        register(client)
        resp = client.post("/auth/login", json={"email": "A@X.COM", "password": "secret123"})
        assert resp.status_code == 200

    def test_wrong_password_and_unknown_email_look_the_same(self, client):
        register(client)
        wrong_pw = client.post("/auth/login", json={"email": "a@x.com", "password": "nope-nope"})
        unknown = client.post("/auth/login", json={"email": "z@x.com", "password": "secret123"})
        assert wrong_pw.status_code == unknown.status_code == 404
        assert wrong_pw.json() == unknown.json() == {"error": "User/Password incorrect."}


class TestAuthGuard:
    def test_valid_token_authorised(self, client):
        token = register(client).json()["token"]
        resp = client.get("/todos", headers=auth_header(token))
        assert resp.status_code == 200
        assert resp.json() == []

    def test_missing_header_is_401(self, client):
        resp = client.get("/todos")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    def test_non_bearer_scheme_is_401(self, client):
        resp = client.get("/todos", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401

    def test_garbage_token_is_403(self, client):
        resp = client.get("/todos", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 403
        assert resp.json() == {"error": "Invalid token"}

    def test_foreign_secret_is_403(self, client):
        other = Settings(_env_file=None, jwt_secret="someone-else")
        token = TokenIssuer(other).issue(1, "a@x.com")
        register(client)
        resp = client.get("/todos", headers=auth_header(token))
        assert resp.status_code == 403

    def test_expired_token_is_403(self, client, app, settings):
        token = register(client).json()["token"]
        app.state.token_verifier = TokenVerifier(
            settings, clock=lambda: time.time() + 3 * 3600 + 1,
        )
        resp = client.get("/todos", headers=auth_header(token))
        assert resp.status_code == 403
        assert resp.json() == {"error": "Invalid token"}

    def test_deleted_user_is_404(self, client, sync_engine):
        token = register(client).json()["token"]
        with sync_engine.begin() as conn:
            conn.execute(text("DELETE FROM users"))
        resp = client.get("/todos", headers=auth_header(token))
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}


class TestErrorMapping:
    def test_unexpected_failure_is_generic_500(self, settings):
        from fastapi.testclient import TestClient

        from api.app import create_app

        app = create_app(settings)

        def boom(*args, **kwargs):
            raise RuntimeError("database exploded at 10.0.0.5")

        with TestClient(app, raise_server_exceptions=False) as c:
            app.state.token_issuer.issue = boom
            resp = register(c)
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}
        assert "10.0.0.5" not in resp.text
