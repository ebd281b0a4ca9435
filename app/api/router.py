"""
Main API routers
"""
from fastapi import APIRouter

from app.api.v1 import health, version, logs
from app.api.v1.admin import admin_router

# Public form API, mounted under /api
api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(logs.router, tags=["logs"])

__all__ = ["api_router", "admin_router"]
