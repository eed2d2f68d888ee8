"""
Declarative bases and mixins for TenantDock.

`Base` holds the catalog tables shared by every tenant. `TenantBase` holds
the tables that live inside each tenant's own schema; they are created by
the tenant migrations, never by `create_all` on the catalog.
"""
from sqlalchemy import Column, DateTime, Integer, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()
TenantBase = declarative_base()


class IDMixin:
    """Mixin for integer primary key."""

    id = Column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class BaseModel(IDMixin, TimestampMixin):
    """Base model with integer ID and timestamps."""

    __abstract__ = True
