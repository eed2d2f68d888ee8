"""
Tenant provisioning.

Signup creates a dedicated schema for the new organization, records the
tenant in the catalog, migrates the schema, and seeds the first admin user
and the default settings. The whole sequence runs as a ProvisioningSaga: if
any step fails, everything done so far is undone and the caller sees either
a field error (subdomain taken) or a generic ProvisioningFailure.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from tenantdock.config import settings
from tenantdock.core.exceptions import (
    CompensationFailure,
    FieldValidationError,
    ProvisioningFailure,
    SchemaAlreadyExists,
)
from tenantdock.core.security import hash_password
from tenantdock.core.slug import schema_name_for, slugify
from tenantdock.models.tenant import Tenant
from tenantdock.models.tenant_setting import TenantSetting
from tenantdock.models.tenant_user import TenantUser, TenantUserRole
from tenantdock.services.connection_director import ConnectionDirector
from tenantdock.services.migration_runner import MigrationRunner
from tenantdock.services.plan_catalog import ProvisioningPlan, limits_for
from tenantdock.services.provisioning_saga import ProvisioningSaga, ProvisioningState
from tenantdock.services.schema_registry import SchemaRegistry
from tenantdock.services.tenant_service import TenantService

logger = logging.getLogger(__name__)

DEFAULT_SETTING_KEYS = ("company_name", "plan", "max_users", "storage_limit", "created_at")


@dataclass
class ProvisioningResult:
    """A provisioned tenant and what to tell the person who signed up."""
    tenant: Tenant
    admin_email: str
    plan: str
    access_url: str

    @property
    def plan_label(self) -> str:
        return self.plan.capitalize()

    @property
    def message(self) -> str:
        return (
            "Your company workspace has been created!\n\n"
            f"Company: {self.tenant.name}\n"
            f"URL: {self.access_url}\n"
            f"Admin: {self.admin_email}\n"
            f"Plan: {self.plan_label}\n\n"
            "You can now log in with your email and password."
        )


class TenantProvisioner:
    """Creates tenants together with their schema, admin user and settings."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        registry: SchemaRegistry,
        director: ConnectionDirector,
        migrator: MigrationRunner,
        base_host: str = settings.TENANT_BASE_HOST,
        logical_connection: str | None = None,
        migration_timeout: float | None = settings.TENANT_MIGRATION_TIMEOUT_SECONDS,
        password_hasher: Callable[[str], str] = hash_password,
        default_company_name: str = settings.TENANT_DEFAULT_COMPANY_NAME,
    ):
        self.session_factory = session_factory
        self.registry = registry
        self.director = director
        self.migrator = migrator
        self.base_host = base_host
        self.logical_connection = logical_connection or None
        self.migration_timeout = migration_timeout
        self.password_hasher = password_hasher
        self.default_company_name = default_company_name

    async def provision(
        self,
        company_name: str,
        subdomain: str,
        admin_name: str,
        admin_email: str,
        password: str,
        plan: ProvisioningPlan | str,
    ) -> ProvisioningResult:
        """
        Provision a tenant.

        Raises:
            FieldValidationError: the subdomain normalizes to nothing.
            SchemaAlreadyExists: the subdomain is taken.
            ProvisioningFailure: anything else went wrong; all effects were undone.
            CompensationFailure: undoing failed and the schema was left behind.
        """
        slug = slugify(subdomain)
        if not slug:
            raise FieldValidationError(
                {"subdomain": "The subdomain must contain at least one letter or digit."}
            )
        schema_name = schema_name_for(slug)
        plan_id = plan.value if isinstance(plan, ProvisioningPlan) else plan
        password_hash = self.password_hasher(password)

        saga = ProvisioningSaga(schema_name)
        async with self.session_factory() as db:
            tenants = TenantService(db)
            try:
                await saga.run(
                    ProvisioningState.SCHEMA_CHECKED,
                    lambda: self._check_available(tenants, slug, schema_name),
                )
                await saga.run(
                    ProvisioningState.SCHEMA_CREATED,
                    lambda: self.registry.create(schema_name),
                    compensate=lambda: self.registry.drop(schema_name),
                )
                tenant = await saga.run(
                    ProvisioningState.TENANT_RECORDED,
                    lambda: self._record_tenant(tenants, company_name, slug, schema_name, plan_id),
                    compensate=db.rollback,
                )

                async with self.director.connect(schema_name, self.logical_connection) as engine:
                    saga.advance(ProvisioningState.CONNECTION_BOUND)
                    await saga.run(
                        ProvisioningState.MIGRATED,
                        lambda: self.migrator.upgrade(engine),
                        timeout=self.migration_timeout,
                    )
                    await self._seed_tenant_schema(
                        saga, engine, tenant, admin_name, admin_email, password_hash, plan_id,
                    )

                await saga.run(ProvisioningState.COMMITTED, db.commit)
            except SchemaAlreadyExists:
                logger.info(f"Subdomain {slug} is already taken")
                await self._roll_back(saga)
                raise
            except asyncio.CancelledError:
                await self._roll_back(saga)
                raise
            except Exception as exc:
                logger.exception(
                    f"Provisioning {schema_name} failed after {saga.state.value}: {exc}"
                )
                await self._roll_back(saga)
                raise ProvisioningFailure() from exc

        logger.info(
            f"Provisioned tenant {slug} (id={tenant.id}, schema={schema_name}, plan={plan_id})"
        )
        return ProvisioningResult(
            tenant=tenant,
            admin_email=admin_email,
            plan=plan_id,
            access_url=f"{slug}.{self.base_host}",
        )

    async def _check_available(self, tenants: TenantService, slug: str, schema_name: str) -> None:
        if await tenants.get_by_subdomain(slug) is not None:
            raise SchemaAlreadyExists(schema_name)
        if await self.registry.exists(schema_name):
            raise SchemaAlreadyExists(schema_name)

    async def _record_tenant(
        self,
        tenants: TenantService,
        company_name: str,
        slug: str,
        schema_name: str,
        plan_id: str,
    ) -> Tenant:
        try:
            return await tenants.create(
                name=company_name,
                subdomain=slug,
                schema_name=schema_name,
                plan=plan_id,
            )
        except IntegrityError as exc:
            # Another signup recorded the same subdomain after our check
            await tenants.db.rollback()
            raise SchemaAlreadyExists(schema_name) from exc

    async def _seed_tenant_schema(
        self,
        saga: ProvisioningSaga,
        engine: AsyncEngine,
        tenant: Tenant,
        admin_name: str,
        admin_email: str,
        password_hash: str,
        plan_id: str,
    ) -> None:
        async with AsyncSession(engine, expire_on_commit=False) as tenant_db:
            await saga.run(
                ProvisioningState.ADMIN_SEEDED,
                lambda: self._seed_admin(tenant_db, tenant, admin_name, admin_email, password_hash, plan_id),
            )
            await saga.run(
                ProvisioningState.SETTINGS_SEEDED,
                lambda: self._seed_settings(tenant_db, tenant, plan_id),
            )

    async def _seed_admin(
        self,
        tenant_db: AsyncSession,
        tenant: Tenant,
        admin_name: str,
        admin_email: str,
        password_hash: str,
        plan_id: str,
    ) -> TenantUser:
        admin = TenantUser(
            tenant_id=tenant.id,
            name=admin_name,
            email=admin_email,
            password=password_hash,
            role=TenantUserRole.ADMIN.value,
            plan=plan_id,
        )
        tenant_db.add(admin)
        await tenant_db.flush()
        return admin

    async def _seed_settings(
        self,
        tenant_db: AsyncSession,
        tenant: Tenant,
        plan_id: str,
    ) -> None:
        limits = limits_for(plan_id)
        values = {
            "company_name": self.default_company_name,
            "plan": plan_id,
            "max_users": str(limits.max_users),
            "storage_limit": limits.storage_limit,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        tenant_db.add_all([
            TenantSetting(tenant_id=tenant.id, setting_key=key, setting_value=values[key])
            for key in DEFAULT_SETTING_KEYS
        ])
        # Tenant-side writes become durable here; the catalog commit follows
        await tenant_db.commit()

    async def _roll_back(self, saga: ProvisioningSaga) -> None:
        errors = await saga.compensate()
        if any(e.state == ProvisioningState.SCHEMA_CREATED for e in errors):
            logger.critical(
                f"Schema {saga.schema_name} is orphaned: compensating drop failed",
                extra={"alert": "orphaned_schema", "schema": saga.schema_name},
            )
            raise CompensationFailure(saga.schema_name)
