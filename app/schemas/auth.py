"""
Authentication schemas
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequest(BaseModel):
    """
    Login request schema

    Accepted loosely so that every attempt reaches the activity log:
    unknown keys are ignored and non-string credentials count as missing.
    """
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = Field(None, description="Admin username")
    password: Optional[str] = Field(None, description="Admin password")

    @field_validator("username", "password", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class LoginResponse(BaseModel):
    """Login response schema; the session itself travels in an HttpOnly cookie"""
    success: bool = True
    message: str = "Login successful"
    username: str


class AuthStatusResponse(BaseModel):
    is_authenticated: bool
    user: Optional[str] = None
