"""
FastAPI application entry point for TenantDock.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenantdock.api.v1.router import api_router
from tenantdock.config import settings
from tenantdock.core.deps import connection_director
from tenantdock.core.logging_config import setup_logging
from tenantdock.database import engine, init_db
from tenantdock.schemas.signup import FIELD_MESSAGES, REDACTED_FIELDS


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    await init_db()
    yield
    # Shutdown
    await connection_director.dispose()
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report validation errors per field, echoing the input back without passwords."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part != "body"]
        field = ".".join(loc) or "body"
        errors.setdefault(field, FIELD_MESSAGES.get((field, error["type"]), error["msg"]))

    submitted = {}
    if isinstance(exc.body, dict):
        submitted = {k: v for k, v in exc.body.items() if k not in REDACTED_FIELDS}

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": {"errors": errors, "input": submitted}},
    )


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}


@app.get(f"{settings.API_V1_STR}/health")
async def api_health_check():
    """API health check endpoint."""
    return {"status": "healthy", "version": settings.VERSION}
