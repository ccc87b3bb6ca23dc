"""
Pydantic schemas for the signed-in user's own account, design and profile settings.
"""
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from .auth import USERNAME_PATTERN
from .links import bounded_url

__all__ = [
    "AccountUpdateIn",
    "ChangePasswordIn",
    "DesignIn",
    "ProfileSettingsIn",
    "ActivityIn",
    "COLOR_PATTERN",
]

# Profile.avatar column width
AvatarUrl = bounded_url(1024)

# #rgb or #rrggbb
COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"

class AccountUpdateIn(BaseModel):
    """
    Request model for editing one's own account.
    All fields are optional - only provided fields will be updated.
    """
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=20, pattern=USERNAME_PATTERN)
    bio: Optional[str] = Field(default=None, max_length=160)

class ChangePasswordIn(BaseModel):
    currentPassword: str
    newPassword: str = Field(min_length=6)

class DesignIn(BaseModel):
    """
    Request model for page design settings.
    Partial updates are accepted; sending the same payload twice is harmless.
    """
    theme: Optional[str] = Field(default=None, max_length=32)
    backgroundColor: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    textColor: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    font: Optional[str] = Field(default=None, max_length=64)
    buttonStyle: Optional[Literal["solid", "outline", "soft", "glass", "minimal"]] = None
    buttonColor: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    buttonTextColor: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    animation: Optional[Literal["none", "fade", "scale", "slide", "bounce"]] = None
    backgroundPattern: Optional[Literal["none", "dots", "grid", "waves", "circles"]] = None
    customCss: Optional[str] = Field(default=None, max_length=10000)
    title: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

class ProfileSettingsIn(BaseModel):
    description: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[AvatarUrl] = None
    isPublic: Optional[bool] = None

class ActivityIn(BaseModel):
    type: str = Field(min_length=1, max_length=32)
    details: str = Field(max_length=1000)
