"""Admin API (requires an authenticated admin session, except login and auth-status)."""
from fastapi import APIRouter
from app.api.v1.admin import auth as admin_auth
from app.api.v1.admin import logs as admin_logs
from app.api.v1.admin import activity as admin_activity

admin_router = APIRouter(prefix="/admin", tags=["admin"])
admin_router.include_router(admin_auth.router, tags=["admin-auth"])
admin_router.include_router(admin_logs.router, tags=["admin-logs"])
admin_router.include_router(admin_activity.router, tags=["admin-activity"])
