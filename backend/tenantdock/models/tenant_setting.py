"""
Per-tenant key/value settings, stored inside the tenant's schema.
"""
from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from tenantdock.models.base import BaseModel, TenantBase


class TenantSetting(TenantBase, BaseModel):
    """A single configuration value for a tenant."""

    __tablename__ = "tenant_settings"
    __table_args__ = (
        UniqueConstraint("tenant_id", "setting_key", name="uq_tenant_settings_tenant_key"),
    )

    tenant_id = Column(Integer, nullable=False, index=True)
    setting_key = Column(String(100), nullable=False)
    setting_value = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TenantSetting {self.setting_key}={self.setting_value!r}>"
