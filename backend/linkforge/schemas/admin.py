"""
Pydantic schemas for admin user management endpoints.
Defines request models for user updates and password reset.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from linkforge.models.enums import Role, Status
from .auth import USERNAME_PATTERN

__all__ = ["AdminUserUpdateIn", "AdminResetPasswordIn"]

class AdminUserUpdateIn(BaseModel):
    """
    Request model for updating user information.
    All fields are optional - only provided fields will be updated.
    role/status are only honoured for FOUNDER actors (see services.policy).
    """
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=160)
    role: Optional[Role] = None
    status: Optional[Status] = None

class AdminResetPasswordIn(BaseModel):
    """
    Request model for admin-initiated password reset.
    """
    newPassword: str = Field(min_length=6)
