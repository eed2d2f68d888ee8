"""
Migration runner.

Applies the tenant migration scripts (`tenantdock/tenant_migrations`) to
whatever schema the given engine targets.
"""
import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

TENANT_MIGRATIONS_PATH = Path(__file__).resolve().parent.parent / "tenant_migrations"


class MigrationRunner:
    """
    Run Alembic upgrades against a tenant schema.

    Runs are serialized per runner: Alembic's `context` and `op` are
    module-level proxies, so two upgrades interleaved on the event loop
    would share them. Use a single runner per process.
    """

    def __init__(self, script_location: str | Path = TENANT_MIGRATIONS_PATH, revision: str = "head"):
        self.script_location = str(script_location)
        self.revision = revision
        self._lock = asyncio.Lock()

    async def upgrade(self, engine: AsyncEngine) -> None:
        async with self._lock:
            async with engine.begin() as conn:
                await conn.run_sync(self._upgrade)

    def _upgrade(self, connection: Connection) -> None:
        config = Config()
        config.set_main_option("script_location", self.script_location.replace("%", "%%"))
        config.attributes["connection"] = connection
        logger.debug(f"Upgrading {connection.engine.url.render_as_string()} to {self.revision}")
        command.upgrade(config, self.revision)
