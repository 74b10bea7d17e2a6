"""Tests for administrator authentication and the login gate."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from condoflow.schemas.user import UserCreate
from condoflow.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    decode_token,
    get_password_hash,
    get_user_by_email,
    get_user_by_username,
    verify_password,
)

# =============================================================================
# Unit Tests: Password Hashing
# =============================================================================


class TestPasswordHashing:
    """Tests for the bcrypt helpers."""

    def test_hash_is_bcrypt(self) -> None:
        """Hashes carry the bcrypt prefix."""
        assert get_password_hash("sindico2026").startswith("$2")

    def test_hash_is_salted(self) -> None:
        """The same password hashes differently each time."""
        assert get_password_hash("sindico2026") != get_password_hash("sindico2026")

    def test_verify_password_round_trip(self) -> None:
        """A password verifies against its own hash only."""
        hashed = get_password_hash("sindico2026")
        assert verify_password("sindico2026", hashed) is True
        assert verify_password("outra-senha", hashed) is False
        assert verify_password("", hashed) is False


# =============================================================================
# Unit Tests: JWT Tokens
# =============================================================================


class TestJWTTokens:
    """Tests for token creation and decoding."""

    def test_decode_returns_subject(self) -> None:
        """The subject claim comes back as the username."""
        token = create_access_token(data={"sub": "admin"}, expires_delta=timedelta(hours=1))
        assert decode_token(token).username == "admin"

    def test_decode_garbage_token(self) -> None:
        """A malformed token is rejected with 401."""
        with pytest.raises(HTTPException) as exc_info:
            decode_token("not.a.token")
        assert exc_info.value.status_code == 401
        assert "Could not validate credentials" in exc_info.value.detail

    def test_decode_expired_token(self) -> None:
        """An expired token is rejected with 401."""
        token = create_access_token(data={"sub": "admin"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_decode_token_without_subject(self) -> None:
        """A token without ``sub`` is rejected with 401."""
        token = create_access_token(data={"role": "admin"})
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401


# =============================================================================
# Unit Tests: User Database Operations
# =============================================================================


class TestUserDatabaseOperations:
    """Tests for user lookup and creation."""

    def test_lookup_by_username_and_email(self, test_db, test_user) -> None:
        """Existing users are found by username or email."""
        assert get_user_by_username(test_db, "testuser").id == test_user.id
        assert get_user_by_email(test_db, "test@example.com").id == test_user.id
        assert get_user_by_username(test_db, "ghost") is None

    def test_authenticate_user(self, test_db, test_user) -> None:
        """Only matching credentials authenticate."""
        assert authenticate_user(test_db, "testuser", "testpassword123") is not None
        assert authenticate_user(test_db, "testuser", "wrong") is None
        assert authenticate_user(test_db, "ghost", "testpassword123") is None

    def test_create_user_hashes_password(self, test_db) -> None:
        """Stored passwords are hashed."""
        user = create_user(
            test_db,
            UserCreate(username="sindico", email="sindico@example.com", password="senha123"),
        )
        assert user.is_active is True
        assert user.hashed_password != "senha123"
        assert verify_password("senha123", user.hashed_password)

    def test_create_user_duplicate_username(self, test_db, test_user) -> None:
        """A taken username is refused with 400."""
        with pytest.raises(HTTPException) as exc_info:
            create_user(
                test_db,
                UserCreate(username="testuser", email="other@example.com", password="x"),
            )
        assert exc_info.value.status_code == 400
        assert "Username already registered" in exc_info.value.detail

    def test_create_user_duplicate_email(self, test_db, test_user) -> None:
        """A taken email is refused with 400."""
        with pytest.raises(HTTPException) as exc_info:
            create_user(
                test_db,
                UserCreate(username="other", email="test@example.com", password="x"),
            )
        assert exc_info.value.status_code == 400
        assert "Email already registered" in exc_info.value.detail


# =============================================================================
# Integration Tests: Register and Login Endpoints
# =============================================================================


class TestAuthEndpoints:
    """Tests for /api/auth."""

    def test_register_success(self, client) -> None:
        """Registration returns the user without password data."""
        response = client.post(
            "/api/auth/register",
            json={"username": "sindico", "email": "sindico@example.com", "password": "senha123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "sindico"
        assert data["is_active"] is True
        assert "hashed_password" not in data
        assert "password" not in data

    def test_register_invalid_email(self, client) -> None:
        """A malformed email is a validation error."""
        response = client.post(
            "/api/auth/register",
            json={"username": "sindico", "email": "not-an-email", "password": "senha123"},
        )
        assert response.status_code == 422

    def test_register_duplicate_username(self, client, test_user) -> None:
        """A taken username is refused over HTTP."""
        response = client.post(
            "/api/auth/register",
            json={"username": "testuser", "email": "x@example.com", "password": "senha123"},
        )
        assert response.status_code == 400

    def test_login_success(self, client, test_user) -> None:
        """Login returns a bearer token for the user."""
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "testpassword123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert decode_token(data["access_token"]).username == "testuser"

    def test_login_wrong_password(self, client, test_user) -> None:
        """A wrong password is refused with 401."""
        response = client.post(
            "/api/auth/login",
            json={"username": "testuser", "password": "wrong"},
        )
        assert response.status_code == 401
        assert "Incorrect username or password" in response.json()["detail"]

    def test_login_missing_password(self, client) -> None:
        """A login body without password is a validation error."""
        response = client.post("/api/auth/login", json={"username": "testuser"})
        assert response.status_code == 422


# =============================================================================
# Integration Tests: Login Gate
# =============================================================================


class TestLoginGate:
    """Administrative routes require a bearer token; intake routes do not."""

    @pytest.mark.parametrize(
        "path",
        ["/api/units", "/api/readings", "/api/dashboard", "/api/registrations"],
    )
    def test_admin_routes_require_token(self, client, path) -> None:
        """Administrative listings answer 401 without a token."""
        response = client.get(path)
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token_rejected(self, client) -> None:
        """A malformed bearer token is refused."""
        response = client.get("/api/units", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_token_for_deleted_user_rejected(self, client) -> None:
        """A well-formed token whose user does not exist is refused."""
        token = create_access_token(data={"sub": "ghost"})
        response = client.get("/api/units", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_valid_token_accepted(self, client, auth_headers) -> None:
        """A valid token opens the administrative routes."""
        response = client.get("/api/units", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_public_intake_units_open(self, client) -> None:
        """The intake form's unit list is reachable without logging in."""
        response = client.get("/api/registrations/units")
        assert response.status_code == 200

    def test_register_then_login_then_use(self, client) -> None:
        """Full flow: register, log in, call a protected route."""
        client.post(
            "/api/auth/register",
            json={"username": "flow", "email": "flow@example.com", "password": "senha123"},
        )
        login = client.post("/api/auth/login", json={"username": "flow", "password": "senha123"})
        token = login.json()["access_token"]

        response = client.get("/api/units", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
