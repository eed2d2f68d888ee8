"""
Integration tests for the signup API.
"""
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from tenantdock.core.exceptions import GENERIC_PROVISIONING_MESSAGE


@pytest.fixture
def signup_form() -> dict:
    return {
        "company_name": "Acme Corp",
        "subdomain": "acme",
        "admin_name": "Ada Admin",
        "admin_email": "ada@acme.example",
        "password": "correct-horse-battery",
        "password_confirmation": "correct-horse-battery",
        "plan": "pro",
    }


class TestHealth:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_api_health(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestSignup:
    """Test POST /api/v1/signup."""

    @pytest.mark.asyncio
    async def test_signup_success(self, async_client: AsyncClient, signup_form, count_tenants):
        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 201
        data = response.json()
        assert data["tenant"]["subdomain"] == "acme"
        assert data["tenant"]["schema_name"] == "tenant_acme"
        assert data["tenant"]["plan"] == "pro"
        assert data["company_name"] == "Acme Corp"
        assert data["access_url"] == "acme.tenantdock.test"
        assert data["admin_email"] == "ada@acme.example"
        assert data["plan"] == "Pro"
        assert "acme.tenantdock.test" in data["message"]
        assert await count_tenants("acme") == 1

    @pytest.mark.asyncio
    async def test_duplicate_subdomain(self, async_client: AsyncClient, signup_form, count_tenants):
        first = await async_client.post("/api/v1/signup", json=signup_form)
        assert first.status_code == 201

        signup_form["company_name"] = "Acme Again"
        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert "subdomain" in detail["errors"]
        assert detail["input"]["company_name"] == "Acme Again"
        assert detail["input"]["subdomain"] == "acme"
        assert "password" not in detail["input"]
        assert "password_confirmation" not in detail["input"]
        assert await count_tenants() == 1

    @pytest.mark.asyncio
    async def test_password_mismatch(self, async_client: AsyncClient, signup_form, count_tenants):
        signup_form["password_confirmation"] = "something-else"

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert "password_confirmation" in detail["errors"]
        assert detail["input"]["subdomain"] == "acme"
        assert "password" not in detail["input"]
        assert await count_tenants() == 0

    @pytest.mark.asyncio
    async def test_short_password(self, async_client: AsyncClient, signup_form):
        signup_form["password"] = signup_form["password_confirmation"] = "short"

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        errors = response.json()["detail"]["errors"]
        assert errors["password"] == "The password must be at least 8 characters long."

    @pytest.mark.asyncio
    async def test_malformed_subdomain(self, async_client: AsyncClient, signup_form, count_tenants):
        signup_form["subdomain"] = "Acme Corp"

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        errors = response.json()["detail"]["errors"]
        assert errors["subdomain"] == (
            "The subdomain may only contain lowercase letters, digits and hyphens."
        )
        assert await count_tenants() == 0

    @pytest.mark.asyncio
    async def test_invalid_email(self, async_client: AsyncClient, signup_form):
        signup_form["admin_email"] = "not-an-email"

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        assert "admin_email" in response.json()["detail"]["errors"]

    @pytest.mark.asyncio
    async def test_unknown_plan(self, async_client: AsyncClient, signup_form, count_tenants):
        signup_form["plan"] = "platinum"

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 422
        assert "plan" in response.json()["detail"]["errors"]
        assert await count_tenants() == 0

    @pytest.mark.asyncio
    async def test_missing_fields(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/signup", json={"subdomain": "acme"})

        assert response.status_code == 422
        errors = response.json()["detail"]["errors"]
        for field in ("company_name", "admin_name", "admin_email", "password", "plan"):
            assert field in errors

    @pytest.mark.asyncio
    async def test_provisioning_failure_is_generic(
        self, async_client: AsyncClient, signup_form, provisioner, registry, count_tenants
    ):
        provisioner.migrator = AsyncMock()
        provisioner.migrator.upgrade.side_effect = RuntimeError("relation users already exists")

        response = await async_client.post("/api/v1/signup", json=signup_form)

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["errors"] == {"error": GENERIC_PROVISIONING_MESSAGE}
        assert detail["input"]["subdomain"] == "acme"
        assert "relation" not in response.text
        assert "password" not in detail["input"]
        assert await count_tenants() == 0
        assert await registry.exists("tenant_acme") is False
