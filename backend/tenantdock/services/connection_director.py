"""
Connection director.

Keeps track of which tenant schema each logical connection targets, and
hands out engines bound to a schema.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine

from tenantdock.services.schema_backends import SchemaBackend

logger = logging.getLogger(__name__)


class ConnectionDirector:
    """
    Routes logical connection names to physical tenant schemas.

    A logical connection is process-wide state. Code that repoints one and
    then uses it must hold `lock(name)` for the whole sequence, otherwise a
    concurrent caller can repoint it in between. `connect()` does this for
    you; without a logical name it skips the shared state entirely and
    returns a private engine.
    """

    def __init__(self, backend: SchemaBackend):
        self.backend = backend
        self._bindings: dict[str, tuple[str, AsyncEngine]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, logical_name: str) -> asyncio.Lock:
        if logical_name not in self._locks:
            self._locks[logical_name] = asyncio.Lock()
        return self._locks[logical_name]

    def target(self, logical_name: str) -> str | None:
        """Schema the logical connection currently points at."""
        binding = self._bindings.get(logical_name)
        return binding[0] if binding else None

    def engine(self, logical_name: str) -> AsyncEngine:
        binding = self._bindings.get(logical_name)
        if binding is None:
            raise LookupError(f"Logical connection {logical_name!r} is not bound")
        return binding[1]

    async def rebind(self, logical_name: str, schema_name: str) -> AsyncEngine:
        """
        Point a logical connection at a schema.

        The previous engine is disposed so no pooled connection keeps talking
        to the old schema. Rebinding to the current target is a no-op.
        """
        current = self._bindings.get(logical_name)
        if current and current[0] == schema_name:
            return current[1]

        engine = self.backend.create_tenant_engine(schema_name)
        self._bindings[logical_name] = (schema_name, engine)
        if current:
            await current[1].dispose()

        logger.debug(f"Logical connection {logical_name!r} now targets {schema_name}")
        return engine

    async def release(self, logical_name: str) -> None:
        """Forget a logical connection and close its pool."""
        binding = self._bindings.pop(logical_name, None)
        if binding:
            await binding[1].dispose()

    @asynccontextmanager
    async def connect(
        self,
        schema_name: str,
        logical_name: str | None = None,
    ) -> AsyncIterator[AsyncEngine]:
        """
        Get an engine targeting `schema_name` for the duration of the block.

        Without `logical_name` the engine is private to the caller and is
        disposed on exit. With it, the shared logical connection is rebound
        and the caller has exclusive use of it until the block exits.
        """
        if logical_name is None:
            engine = self.backend.create_tenant_engine(schema_name)
            try:
                yield engine
            finally:
                await engine.dispose()
            return

        async with self.lock(logical_name):
            engine = await self.rebind(logical_name, schema_name)
            try:
                yield engine
            finally:
                # Drop pooled connections so a later DROP of the schema is not blocked
                await engine.dispose()

    async def dispose(self) -> None:
        """Close every bound engine (application shutdown)."""
        for logical_name in list(self._bindings):
            await self.release(logical_name)
