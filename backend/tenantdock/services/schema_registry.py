"""
Schema registry.

Answers whether a schema already exists on the server, independently of the
tenants table, and owns creating and dropping tenant schemas.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from tenantdock.services.schema_backends import SchemaBackend

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Server-level view of tenant schemas."""

    def __init__(self, engine: AsyncEngine, backend: SchemaBackend):
        self.engine = engine
        self.backend = backend

    async def exists(self, schema_name: str) -> bool:
        """Check whether a schema with exactly this name exists.

        Errors reaching the server propagate: an unreachable catalog is not
        the same as a missing schema.
        """
        return await self.backend.exists(self.engine, schema_name)

    async def create(self, schema_name: str) -> None:
        await self.backend.create(self.engine, schema_name)
        logger.info(f"Created schema {schema_name} ({self.backend.name})")

    async def drop(self, schema_name: str) -> None:
        await self.backend.drop(self.engine, schema_name)
        logger.info(f"Dropped schema {schema_name} ({self.backend.name})")
