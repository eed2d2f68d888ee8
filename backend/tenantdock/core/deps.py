"""
FastAPI dependencies and the process-wide provisioning collaborators.
"""
from typing import Annotated

from fastapi import Depends

from tenantdock.config import settings
from tenantdock.database import DATABASE_URL, AsyncSessionLocal, engine
from tenantdock.services.connection_director import ConnectionDirector
from tenantdock.services.migration_runner import MigrationRunner
from tenantdock.services.schema_backends import get_schema_backend
from tenantdock.services.schema_registry import SchemaRegistry
from tenantdock.services.tenant_provisioner import TenantProvisioner

schema_backend = get_schema_backend(DATABASE_URL, settings.TENANT_SQLITE_DIRECTORY)
schema_registry = SchemaRegistry(engine, schema_backend)
connection_director = ConnectionDirector(schema_backend)
migration_runner = MigrationRunner()


def get_tenant_provisioner() -> TenantProvisioner:
    """Provisioner wired to the application database."""
    return TenantProvisioner(
        AsyncSessionLocal,
        schema_registry,
        connection_director,
        migration_runner,
        logical_connection=settings.TENANT_CONNECTION_NAME or None,
    )


Provisioner = Annotated[TenantProvisioner, Depends(get_tenant_provisioner)]
