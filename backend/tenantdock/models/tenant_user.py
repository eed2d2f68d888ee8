"""
Users stored inside a tenant's schema.
"""
from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String

from tenantdock.models.base import BaseModel, TenantBase


class TenantUserRole(str, PyEnum):
    ADMIN = "admin"
    MEMBER = "member"


class TenantUser(TenantBase, BaseModel):
    """A user of one tenant. The first one is created at signup as admin."""

    __tablename__ = "users"

    tenant_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=TenantUserRole.MEMBER.value)
    plan = Column(String(20), nullable=False)

    def __repr__(self) -> str:
        return f"<TenantUser {self.email} ({self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == TenantUserRole.ADMIN.value
