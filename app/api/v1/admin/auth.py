"""
Admin authentication endpoints: login, logout, session status
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db, get_client_ip, get_current_admin, get_optional_admin
from app.core.security import create_session_token
from app.models.admin_session import AdminSession
from app.schemas.auth import AuthStatusResponse, LoginRequest, LoginResponse
from app.schemas.common import MessageResponse
from app.services import admin_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Authenticate the admin and set the session cookie

    Every attempt, successful or not, is recorded in the activity log.
    """
    session = admin_service.login(
        db=db,
        username=login_data.username,
        password=login_data.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent")
    )
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(session.username, session.session_id),
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return LoginResponse(username=session.username)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    current_admin: AdminSession = Depends(get_current_admin)
):
    """Record the logout, end the server-side session and clear the cookie"""
    admin_service.logout(db, current_admin, ip_address=get_client_ip(request))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logged out successfully")


@router.get("/auth-status", response_model=AuthStatusResponse)
async def auth_status(current_admin: Optional[AdminSession] = Depends(get_optional_admin)):
    """Report whether the caller holds a live admin session"""
    return AuthStatusResponse(
        is_authenticated=current_admin is not None,
        user=current_admin.username if current_admin else None
    )
