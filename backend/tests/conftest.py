"""
Pytest configuration and fixtures for TenantDock tests.
"""
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from tenantdock.models import Base, Tenant, TenantSetting, TenantUser
from tenantdock.services.connection_director import ConnectionDirector
from tenantdock.services.migration_runner import MigrationRunner
from tenantdock.services.schema_backends import SQLiteSchemaBackend
from tenantdock.services.schema_registry import SchemaRegistry
from tenantdock.services.tenant_provisioner import TenantProvisioner

TEST_BASE_HOST = "tenantdock.test"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def catalog_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Catalog database in a file, so concurrent sessions get their own connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        connect_args={"timeout": 30},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(catalog_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        catalog_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def schema_backend(tmp_path) -> SQLiteSchemaBackend:
    return SQLiteSchemaBackend(tmp_path / "tenants")


@pytest.fixture
def registry(catalog_engine: AsyncEngine, schema_backend: SQLiteSchemaBackend) -> SchemaRegistry:
    return SchemaRegistry(catalog_engine, schema_backend)


@pytest_asyncio.fixture
async def director(schema_backend: SQLiteSchemaBackend) -> AsyncGenerator[ConnectionDirector, None]:
    director = ConnectionDirector(schema_backend)
    yield director
    await director.dispose()


@pytest.fixture
def migrator() -> MigrationRunner:
    return MigrationRunner()


@pytest.fixture
def provisioner(session_factory, registry, director, migrator) -> TenantProvisioner:
    return TenantProvisioner(
        session_factory,
        registry,
        director,
        migrator,
        base_host=TEST_BASE_HOST,
        migration_timeout=30,
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def signup() -> dict:
    """Provisioning arguments for a typical signup."""
    return {
        "company_name": "Acme Corp",
        "subdomain": "acme",
        "admin_name": "Ada Admin",
        "admin_email": "ada@acme.example",
        "password": "correct-horse-battery",
        "plan": "pro",
    }


# ============================================================================
# Inspection Helpers
# ============================================================================

@pytest.fixture
def read_tenant_schema(schema_backend: SQLiteSchemaBackend):
    """Load the users and settings stored in a tenant schema."""

    async def _read(schema_name: str) -> tuple[list[TenantUser], dict[str, str]]:
        engine = schema_backend.create_tenant_engine(schema_name)
        try:
            async with AsyncSession(engine) as session:
                users = (await session.execute(select(TenantUser))).scalars().all()
                rows = (await session.execute(select(TenantSetting))).scalars().all()
        finally:
            await engine.dispose()
        return list(users), {row.setting_key: row.setting_value for row in rows}

    return _read


@pytest.fixture
def count_tenants(session_factory):
    """Count catalog rows, optionally for one subdomain."""

    async def _count(subdomain: str | None = None) -> int:
        query = select(func.count(Tenant.id))
        if subdomain is not None:
            query = query.where(Tenant.subdomain == subdomain)
        async with session_factory() as session:
            return (await session.execute(query)).scalar_one()

    return _count


# ============================================================================
# FastAPI App Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app(provisioner: TenantProvisioner) -> FastAPI:
    """Create test FastAPI application."""
    from tenantdock.core.deps import get_tenant_provisioner
    from tenantdock.main import app as main_app

    main_app.dependency_overrides[get_tenant_provisioner] = lambda: provisioner

    yield main_app

    main_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
