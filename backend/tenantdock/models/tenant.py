"""
Tenant catalog model.
"""
from sqlalchemy import Boolean, Column, String

from tenantdock.models.base import Base, BaseModel


class Tenant(Base, BaseModel):
    """An organization and the schema dedicated to it."""

    __tablename__ = "tenants"

    name = Column(String(255), nullable=False)
    subdomain = Column(String(50), unique=True, nullable=False, index=True)
    schema_name = Column(String(64), unique=True, nullable=False)
    plan = Column(String(20), nullable=False, default="free")
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Tenant {self.name} ({self.subdomain})>"
