"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration, login and user information.
"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

__all__ = ["RegisterIn", "LoginRequest", "USERNAME_PATTERN"]

# Public page handles: letters, digits and underscore
USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"

class RegisterIn(BaseModel):
    """
    Request model for account registration.
    The username becomes the public page handle.
    """
    username: str = Field(min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = Field(default=None, max_length=100)  # Display name (defaults to username)

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    """
    email: EmailStr
    password: str
