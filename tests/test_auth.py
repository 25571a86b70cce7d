"""
Tests for registration, login and token verification.
"""
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from medgram.core.exceptions import ConflictError, InvalidCredentialsError
from medgram.models.user import User, UserRole
from medgram.services.auth_service import AuthService
from tests.conftest import bearer, register


@pytest.mark.unit
class TestAuthService:
    @pytest.fixture
    def auth_service(self, db, settings, pwd_context) -> AuthService:
        return AuthService(db, settings, pwd_context)

    async def test_register_then_login_then_verify(self, auth_service: AuthService):
        user, token = await auth_service.register("dr_lee", "pw1", "Dr Lee", UserRole.CREATOR, "1234567890")

        identity = auth_service.verify(token)
        assert identity.user_id == user.id
        assert identity.role == UserRole.CREATOR

        logged_in, login_token = await auth_service.login("dr_lee", "pw1")
        assert logged_in.id == user.id
        login_identity = auth_service.verify(login_token)
        assert (login_identity.user_id, login_identity.role) == (user.id, UserRole.CREATOR)

    async def test_register_stores_hash_not_password(self, auth_service: AuthService, db):
        user, _ = await auth_service.register("nurse_kim", "s3cret", None, UserRole.USER)

        stored = (await db.execute(select(User).where(User.id == user.id))).scalars().one()
        assert stored.password_hash != "s3cret"
        assert auth_service.pwd_context.verify("s3cret", stored.password_hash)

    async def test_register_defaults(self, auth_service: AuthService):
        user, _ = await auth_service.register("med_student", "pw", None, UserRole.USER)

        assert user.verified is False
        assert user.avatar_url == "https://ui-avatars.com/api/?name=med_student"
        assert user.created_at is not None

    async def test_duplicate_username_conflicts(self, auth_service: AuthService, db):
        await auth_service.register("dr_lee", "pw1", None, UserRole.USER)

        with pytest.raises(ConflictError):
            await auth_service.register("dr_lee", "other", None, UserRole.CREATOR)

        count = (await db.execute(select(func.count(User.id)))).scalar()
        assert count == 1

    async def test_login_wrong_password(self, auth_service: AuthService):
        await auth_service.register("dr_lee", "pw1", None, UserRole.USER)

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("dr_lee", "wrong")

    async def test_login_unknown_user_still_pays_hash_cost(self, auth_service: AuthService):
        with patch.object(
            auth_service.pwd_context,
            "dummy_verify",
            wraps=auth_service.pwd_context.dummy_verify,
        ) as dummy:
            with pytest.raises(InvalidCredentialsError) as exc_info:
                await auth_service.login("nobody", "pw1")

        dummy.assert_called_once()
        assert exc_info.value.message == "Invalid credentials"


@pytest.mark.api
class TestAuthEndpoints:
    async def test_register(self, client):
        response = await client.post(
            "/auth/register",
            json={
                "username": "dr_lee",
                "password": "pw1",
                "fullName": "Dr Lee",
                "role": "CREATOR",
                "npiNumber": "1234567890",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"user", "token"}
        assert set(data["user"]) == {"id", "username", "role"}
        assert data["user"]["username"] == "dr_lee"
        assert data["user"]["role"] == "CREATOR"

    async def test_register_without_role_defaults_to_user(self, client):
        response = await client.post("/auth/register", json={"username": "dr_park", "password": "pw1"})
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "USER"

    async def test_register_duplicate(self, client):
        await register(client, "dr_lee")

        response = await client.post("/auth/register", json={"username": "dr_lee", "password": "x"})

        assert response.status_code == 400
        assert response.json() == {"error": "Username already exists"}

    async def test_register_unknown_role(self, client):
        response = await client.post(
            "/auth/register",
            json={"username": "dr_lee", "password": "pw1", "role": "SUPERUSER"},
        )
        assert response.status_code == 400
        assert "role" in response.json()["error"]

    async def test_register_missing_password(self, client):
        response = await client.post("/auth/register", json={"username": "dr_lee"})
        assert response.status_code == 400
        assert "error" in response.json()

    async def test_login(self, client):
        await register(client, "dr_lee", role="MODERATOR")

        response = await client.post("/auth/login", json={"username": "dr_lee", "password": "pw1"})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        user = data["user"]
        assert user["username"] == "dr_lee"
        assert user["role"] == "MODERATOR"
        assert user["fullName"] == "dr_lee full name"
        assert user["npiNumber"] == "1234567890"
        assert user["verified"] is False
        assert "passwordHash" not in user
        assert "password_hash" not in user
        assert "password" not in user

    async def test_login_wrong_password(self, client):
        await register(client, "dr_lee")

        response = await client.post("/auth/login", json={"username": "dr_lee", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    async def test_login_unknown_user(self, client):
        response = await client.post("/auth/login", json={"username": "ghost", "password": "pw1"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    async def test_me(self, client):
        token = (await register(client, "dr_lee", role="CREATOR"))["token"]

        response = await client.get("/auth/me", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["username"] == "dr_lee"

    async def test_me_requires_token(self, client):
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    async def test_me_rejects_bad_token(self, client):
        response = await client.get("/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}

    async def test_register_short_and_punctuated_handles(self, client):
        for handle in ("li", "dr.o'brien", "anna+md"):
            response = await client.post("/auth/register", json={"username": handle, "password": "pw1"})
            assert response.status_code == 200, response.text
            assert response.json()["user"]["username"] == handle

    async def test_register_handle_too_long(self, client):
        response = await client.post("/auth/register", json={"username": "x" * 51, "password": "pw1"})

        assert response.status_code == 400
        assert "username" in response.json()["error"]
