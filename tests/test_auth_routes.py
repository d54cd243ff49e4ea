"""
Tests for back-office authentication.

Tests cover:
- Seeding of the default administrator
- Login by email and password
- Token protected profile endpoints
- Admin-only registration
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.auth import security
from app.core.config import settings
from app.crud import user_crud
from app.utils.exception_utils import CredentialsException
from app.utils.seed import seed_super_admin


AUTH = "/api/auth"


async def login(client, email, password):
    return await client.post(f"{AUTH}/login", data={"username": email, "password": password})


@pytest.fixture
async def admin_token(db, anon_client):
    await seed_super_admin(db)
    response = await login(anon_client, settings.SUPER_ADMIN_EMAIL, settings.SUPER_ADMIN_PASSWORD)
    return response.json()["access_token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestSeed:
    async def test_seed_is_idempotent(self, db):
        assert await seed_super_admin(db) is True
        assert await seed_super_admin(db) is False

        admin = await user_crud.get_by_email(db, settings.SUPER_ADMIN_EMAIL)
        assert admin.role == "admin"
        assert security.verify_password(settings.SUPER_ADMIN_PASSWORD, admin.hashed_password)


class TestLogin:
    async def test_login_returns_token(self, db, anon_client):
        await seed_super_admin(db)
        response = await login(
            anon_client, settings.SUPER_ADMIN_EMAIL.upper(), settings.SUPER_ADMIN_PASSWORD
        )
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["role"] == "admin"

    async def test_wrong_password(self, db, anon_client):
        await seed_super_admin(db)
        response = await login(anon_client, settings.SUPER_ADMIN_EMAIL, "wrong-password")
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    async def test_unknown_email(self, anon_client):
        response = await login(anon_client, "nobody@example.com", "whatever")
        assert response.status_code == 401


class TestProfile:
    async def test_me(self, anon_client, admin_token):
        response = await anon_client.get(f"{AUTH}/me", headers=bearer(admin_token))
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == settings.SUPER_ADMIN_EMAIL
        assert "hashed_password" not in body

    async def test_update_me(self, anon_client, admin_token):
        response = await anon_client.put(
            f"{AUTH}/me",
            headers=bearer(admin_token),
            json={"name": "Head Admin", "password": "new-secret"},
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Head Admin"

        relogin = await login(anon_client, settings.SUPER_ADMIN_EMAIL, "new-secret")
        assert relogin.status_code == 200

    async def test_missing_or_invalid_token(self, anon_client):
        assert (await anon_client.get(f"{AUTH}/me")).status_code == 401
        response = await anon_client.get(f"{AUTH}/me", headers=bearer("not-a-token"))
        assert response.status_code == 401
        assert response.json()["kind"] == "CredentialsError"

    def test_expired_token(self):
        token = jwt.encode(
            {
                "sub": "64b7f0c2a1b2c3d4e5f60718",
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.ACCESS_TOKEN_SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        with pytest.raises(CredentialsException) as exc:
            security.decode_token(token, settings.ACCESS_TOKEN_SECRET_KEY)
        assert exc.value.detail == "Token has expired"


class TestRegister:
    async def test_admin_registers_user(self, anon_client, admin_token):
        payload = {"name": "Yasmine", "email": "Yasmine@Fadlocar.com", "password": "secret1", "role": "user"}
        response = await anon_client.post(f"{AUTH}/register", headers=bearer(admin_token), json=payload)
        assert response.status_code == 201
        assert response.json()["email"] == "yasmine@fadlocar.com"

        duplicate = await anon_client.post(f"{AUTH}/register", headers=bearer(admin_token), json=payload)
        assert duplicate.status_code == 409

    async def test_non_admin_is_forbidden(self, anon_client, admin_token):
        await anon_client.post(
            f"{AUTH}/register",
            headers=bearer(admin_token),
            json={"name": "Staff", "email": "staff@fadlocar.com", "password": "secret1", "role": "user"},
        )
        token = (await login(anon_client, "staff@fadlocar.com", "secret1")).json()["access_token"]

        response = await anon_client.post(
            f"{AUTH}/register",
            headers=bearer(token),
            json={"name": "Other", "email": "other@fadlocar.com", "password": "secret1"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    async def test_short_password(self, anon_client, admin_token):
        response = await anon_client.post(
            f"{AUTH}/register",
            headers=bearer(admin_token),
            json={"name": "Short", "email": "short@fadlocar.com", "password": "123"},
        )
        assert response.status_code == 400
        assert response.json()["fields"][0]["field"] == "password"
