from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "TenantDock"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    API_V1_STR: str = "/api/v1"

    # Catalog database (holds the tenants table)
    DATABASE_URL: str

    # Tenant Databases
    # With a SQLite catalog each tenant schema is a database file in this directory
    TENANT_SQLITE_DIRECTORY: str = "./tenant_data"
    # Access URLs are built as {slug}.{TENANT_BASE_HOST}
    TENANT_BASE_HOST: str = "localhost:8000"
    # Empty: each provisioning run gets its own connection to the new schema.
    # Set: runs share this logical connection and are serialized on it.
    TENANT_CONNECTION_NAME: str = ""
    TENANT_MIGRATION_TIMEOUT_SECONDS: float = 120.0
    # Display name seeded into a new tenant's settings, edited later by the tenant
    TENANT_DEFAULT_COMPANY_NAME: str = "My Company"

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    LOG_LEVEL: str = "DEBUG"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [o.strip() for o in self.CORS_ORIGINS.split(",")]
        return self.CORS_ORIGINS

    @property
    def async_database_url(self) -> str:
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


settings = Settings()
