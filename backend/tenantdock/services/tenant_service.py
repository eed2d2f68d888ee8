"""
Tenant service for catalog operations.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantdock.models.tenant import Tenant


class TenantService:
    """Service for tenant catalog rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain slug."""
        result = await self.db.execute(
            select(Tenant).where(Tenant.subdomain == subdomain)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        name: str,
        subdomain: str,
        schema_name: str,
        plan: str,
    ) -> Tenant:
        """Add a tenant row to the current transaction."""
        tenant = Tenant(
            name=name,
            subdomain=subdomain,
            schema_name=schema_name,
            plan=plan,
            is_active=True,
        )
        self.db.add(tenant)
        await self.db.flush()
        await self.db.refresh(tenant)
        return tenant
