# linkforge/api/v1/serializers.py
"""
Dict renderers shared by the routers, plus the username/email uniqueness check
used by registration, self-service edits and admin edits.
"""
from fastapi import HTTPException, status

from linkforge.core.db import guarded
from linkforge.models.activity import Activity
from linkforge.models.enums import Role, Status
from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.user import User


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def user_to_dict(u: User) -> dict:
    """Public representation of an account (no credentials)."""
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "name": u.name,
        "bio": u.bio,
        "role": Role(u.role).value,
        "status": Status(u.status).value,
        "created_at": _iso(u.created_at),
    }


def design_to_dict(p: Profile) -> dict:
    return {
        "theme": p.theme,
        "backgroundColor": p.background_color,
        "textColor": p.text_color,
        "font": p.font,
        "buttonStyle": p.button_style,
        "buttonColor": p.button_color,
        "buttonTextColor": p.button_text_color,
        "animation": p.animation,
        "backgroundPattern": p.background_pattern,
        "customCss": p.custom_css,
    }


def profile_to_dict(p: Profile) -> dict:
    """Owner view of a profile: settings, design and counters."""
    return {
        "id": str(p.id),
        "title": p.title,
        "description": p.description,
        "avatar": p.avatar,
        "isPublic": p.is_public,
        "viewCount": p.view_count,
        "uniqueVisitors": p.unique_visitors,
        "design": design_to_dict(p),
    }


def link_to_dict(l: Link) -> dict:
    return {
        "id": str(l.id),
        "title": l.title,
        "url": l.url,
        "description": l.description,
        "icon": l.icon,
        "order": l.order,
        "isActive": l.is_active,
        "clickCount": l.click_count,
    }


def activity_to_dict(a: Activity) -> dict:
    return {
        "id": a.id,
        "type": a.type,
        "details": a.details,
        "created_at": _iso(a.created_at),
    }


async def ensure_unique(username: str | None = None, email: str | None = None, exclude_id=None) -> None:
    """
    Raise 409 if the username or email is already taken by another account.

    Error codes:
        - USERNAME_EXISTS
        - EMAIL_EXISTS
    """
    if username:
        qs = User.filter(username=username)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        if await guarded(qs.exists()):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail={"code": "USERNAME_EXISTS", "message": "Username already exists"})
    if email:
        qs = User.filter(email=email)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        if await guarded(qs.exists()):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                                detail={"code": "EMAIL_EXISTS", "message": "Email already registered"})
