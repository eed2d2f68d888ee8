"""
SQLAlchemy models for TenantDock.
"""
from tenantdock.models.base import Base, BaseModel, TenantBase
from tenantdock.models.tenant import Tenant
from tenantdock.models.tenant_setting import TenantSetting
from tenantdock.models.tenant_user import TenantUser, TenantUserRole

__all__ = [
    "Base",
    "BaseModel",
    "TenantBase",
    "Tenant",
    "TenantSetting",
    "TenantUser",
    "TenantUserRole",
]
