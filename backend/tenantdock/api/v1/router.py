"""
API v1 router aggregating all endpoints.
"""
from fastapi import APIRouter

from tenantdock.api.v1.signup import router as signup_router

api_router = APIRouter()

api_router.include_router(signup_router)
