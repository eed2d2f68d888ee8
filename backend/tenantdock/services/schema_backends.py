"""
Dialect-specific schema management.

Each backend knows how to ask the server whether a schema exists, how to
create and drop one, and how to open an engine that targets it. DDL is
issued on AUTOCOMMIT connections: it is never part of the catalog
transaction, so callers have to undo it explicitly.
"""
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import Dialect, make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from tenantdock.core.exceptions import SchemaAlreadyExists
from tenantdock.core.slug import SCHEMA_NAME_PATTERN


def _check_schema_name(schema_name: str) -> None:
    if not SCHEMA_NAME_PATTERN.match(schema_name):
        raise ValueError(f"Refusing to use schema name {schema_name!r}")


class SchemaBackend(ABC):
    """Schema lifecycle operations for one database dialect."""

    name: str

    @abstractmethod
    async def exists(self, engine: AsyncEngine, schema_name: str) -> bool:
        """Check the server's catalog for a schema."""

    @abstractmethod
    async def create(self, engine: AsyncEngine, schema_name: str) -> None:
        """Create a schema. Raises SchemaAlreadyExists if the server already has it."""

    @abstractmethod
    async def drop(self, engine: AsyncEngine, schema_name: str) -> None:
        """Drop a schema and everything in it. Dropping a missing schema is a no-op."""

    @abstractmethod
    def create_tenant_engine(self, schema_name: str) -> AsyncEngine:
        """Open a new engine whose connections target the schema."""


class SQLSchemaBackend(SchemaBackend):
    """Backends that manage schemas through SQL on the catalog server."""

    exists_query: str

    def __init__(self, database_url: str):
        self.url = make_url(database_url)

    @abstractmethod
    def create_statement(self, dialect: Dialect, schema_name: str) -> str:
        ...

    @abstractmethod
    def drop_statement(self, dialect: Dialect, schema_name: str) -> str:
        ...

    @abstractmethod
    def is_duplicate(self, exc: DBAPIError) -> bool:
        """Whether the error is the server rejecting an existing schema."""

    async def exists(self, engine: AsyncEngine, schema_name: str) -> bool:
        async with engine.connect() as conn:
            result = await conn.execute(text(self.exists_query), {"name": schema_name})
            return result.first() is not None

    async def create(self, engine: AsyncEngine, schema_name: str) -> None:
        _check_schema_name(schema_name)
        async with engine.execution_options(isolation_level="AUTOCOMMIT").connect() as conn:
            try:
                await conn.execute(text(self.create_statement(conn.dialect, schema_name)))
            except DBAPIError as exc:
                if self.is_duplicate(exc):
                    raise SchemaAlreadyExists(schema_name) from exc
                raise

    async def drop(self, engine: AsyncEngine, schema_name: str) -> None:
        _check_schema_name(schema_name)
        async with engine.execution_options(isolation_level="AUTOCOMMIT").connect() as conn:
            await conn.execute(text(self.drop_statement(conn.dialect, schema_name)))


class PostgresSchemaBackend(SQLSchemaBackend):
    """One PostgreSQL schema per tenant inside the catalog database."""

    name = "postgresql"
    exists_query = (
        "SELECT schema_name FROM information_schema.schemata WHERE schema_name = :name"
    )
    duplicate_sqlstate = "42P06"

    def create_statement(self, dialect: Dialect, schema_name: str) -> str:
        return f"CREATE SCHEMA {dialect.identifier_preparer.quote_identifier(schema_name)}"

    def drop_statement(self, dialect: Dialect, schema_name: str) -> str:
        return f"DROP SCHEMA IF EXISTS {dialect.identifier_preparer.quote_identifier(schema_name)} CASCADE"

    def is_duplicate(self, exc: DBAPIError) -> bool:
        orig = exc.orig
        codes = {
            getattr(orig, "sqlstate", None),
            getattr(orig, "pgcode", None),
            getattr(getattr(orig, "__cause__", None), "sqlstate", None),
        }
        return self.duplicate_sqlstate in codes

    def create_tenant_engine(self, schema_name: str) -> AsyncEngine:
        _check_schema_name(schema_name)
        return create_async_engine(
            self.url,
            pool_pre_ping=True,
            connect_args={"server_settings": {"search_path": f'"{schema_name}"'}},
        )


class MySQLSchemaBackend(SQLSchemaBackend):
    """One MySQL database per tenant on the catalog server."""

    name = "mysql"
    exists_query = (
        "SELECT SCHEMA_NAME FROM INFORMATION_SCHEMA.SCHEMATA WHERE SCHEMA_NAME = :name"
    )
    charset = "utf8mb4"
    collation = "utf8mb4_unicode_ci"
    duplicate_error_code = 1007  # ER_DB_CREATE_EXISTS

    def create_statement(self, dialect: Dialect, schema_name: str) -> str:
        quoted = dialect.identifier_preparer.quote_identifier(schema_name)
        return f"CREATE DATABASE {quoted} CHARACTER SET {self.charset} COLLATE {self.collation}"

    def drop_statement(self, dialect: Dialect, schema_name: str) -> str:
        return f"DROP DATABASE IF EXISTS {dialect.identifier_preparer.quote_identifier(schema_name)}"

    def is_duplicate(self, exc: DBAPIError) -> bool:
        args = getattr(exc.orig, "args", ())
        return bool(args) and args[0] == self.duplicate_error_code

    def create_tenant_engine(self, schema_name: str) -> AsyncEngine:
        _check_schema_name(schema_name)
        return create_async_engine(self.url.set(database=schema_name), pool_pre_ping=True)


class SQLiteSchemaBackend(SchemaBackend):
    """One SQLite database file per tenant, for development and tests.

    The directory listing is the catalog: the catalog engine is not consulted.
    """

    name = "sqlite"

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, schema_name: str) -> Path:
        _check_schema_name(schema_name)
        return self.directory / f"{schema_name}.db"

    async def exists(self, engine: AsyncEngine, schema_name: str) -> bool:
        return self.path_for(schema_name).exists()

    async def create(self, engine: AsyncEngine, schema_name: str) -> None:
        path = self.path_for(schema_name)
        self.directory.mkdir(parents=True, exist_ok=True)
        try:
            # An empty file is a valid SQLite database
            path.touch(exist_ok=False)
        except FileExistsError as exc:
            raise SchemaAlreadyExists(schema_name) from exc

    async def drop(self, engine: AsyncEngine, schema_name: str) -> None:
        path = self.path_for(schema_name)
        for suffix in ("", "-journal", "-wal", "-shm"):
            Path(f"{path}{suffix}").unlink(missing_ok=True)

    def create_tenant_engine(self, schema_name: str) -> AsyncEngine:
        return create_async_engine(f"sqlite+aiosqlite:///{self.path_for(schema_name)}")


def get_schema_backend(database_url: str, sqlite_directory: str | Path) -> SchemaBackend:
    """Pick the backend matching the catalog database URL."""
    backend_name = make_url(database_url).get_backend_name()
    if backend_name == "postgresql":
        return PostgresSchemaBackend(database_url)
    if backend_name == "mysql":
        return MySQLSchemaBackend(database_url)
    if backend_name == "sqlite":
        return SQLiteSchemaBackend(sqlite_directory)
    raise ValueError(f"Unsupported database backend: {backend_name}")
