"""
Alembic environment for tenant schemas.

Only runs against a connection handed in through
`config.attributes["connection"]`; the connection already targets the
tenant schema, so the scripts and the version table stay unqualified.
"""
from alembic import context

from tenantdock.models import TenantBase

config = context.config
target_metadata = TenantBase.metadata


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        raise RuntimeError("Tenant migrations need a connection bound to the tenant schema")

    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Tenant migrations cannot run in offline mode")

run_migrations_online()
