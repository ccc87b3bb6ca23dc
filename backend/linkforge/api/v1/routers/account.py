# linkforge/api/v1/routers/account.py
"""
Self-service endpoints for the signed-in account: identity fields, password,
page design, profile settings, dashboard stats and the activity log.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from linkforge.api.v1.deps import get_current_user, raise_for_decision
from linkforge.api.v1.serializers import (
    activity_to_dict,
    design_to_dict,
    ensure_unique,
    profile_to_dict,
    user_to_dict,
)
from linkforge.config import settings
from linkforge.core.db import guarded
from linkforge.core.security import hash_password, verify_password
from linkforge.models.link import Link
from linkforge.models.user import User
from linkforge.schemas.account import (
    AccountUpdateIn,
    ActivityIn,
    ChangePasswordIn,
    DesignIn,
    ProfileSettingsIn,
)
from linkforge.services import activity, policy
from linkforge.services.profiles import find_or_create_default, update_profile

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users/me", tags=["account"])

# Request field -> Profile column
_DESIGN_COLUMNS = {
    "theme": "theme",
    "backgroundColor": "background_color",
    "textColor": "text_color",
    "font": "font",
    "buttonStyle": "button_style",
    "buttonColor": "button_color",
    "buttonTextColor": "button_text_color",
    "animation": "animation",
    "backgroundPattern": "background_pattern",
    "customCss": "custom_css",
    "title": "title",
    "description": "description",
}

_SETTINGS_COLUMNS = {
    "description": "description",
    "avatar": "avatar",
    "isPublic": "is_public",
}


# Columns a client may clear by sending null
_NULLABLE = {"title", "description", "avatar", "custom_css"}


def _columns(body, mapping: dict) -> dict:
    """Translate the explicitly-sent request fields to column names."""
    sent = body.model_dump(exclude_unset=True)
    changes = {}
    for key, value in sent.items():
        column = mapping.get(key)
        if column is None or (value is None and column not in _NULLABLE):
            continue
        changes[column] = str(value) if key == "avatar" and value is not None else value
    return changes


@router.get("")
async def get_me(user: User = Depends(get_current_user)):
    """
    Get the signed-in account together with its profile.

    The profile is created with default settings if the account has none yet.
    """
    profile = await find_or_create_default(user)
    return {"success": True, "data": {"user": user_to_dict(user), "profile": profile_to_dict(profile)}}


@router.put("")
async def update_me(body: AccountUpdateIn, user: User = Depends(get_current_user)):
    """
    Update the signed-in account's name, email, username or bio.

    Raises:
        HTTPException (409): USERNAME_EXISTS / EMAIL_EXISTS
        HTTPException (403): policy denial
    """
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    decision = policy.can_edit_user(user, user)
    raise_for_decision(policy.check_field_changes(decision, changes, user))

    changes = {k: v for k, v in changes.items() if getattr(user, k) != v}
    if not changes:
        return {"success": True, "data": user_to_dict(user)}

    await ensure_unique(username=changes.get("username"), email=changes.get("email"), exclude_id=user.id)
    user.update_from_dict(changes)
    await guarded(user.save(update_fields=[*changes.keys(), "updated_at"]))
    await activity.log_activity(user, activity.ACCOUNT_UPDATED, f"Updated {', '.join(sorted(changes))}")
    return {"success": True, "data": user_to_dict(user)}


@router.post("/password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    """
    Change the signed-in account's password.

    Raises:
        HTTPException (400): INVALID_CURRENT_PASSWORD
    """
    if not verify_password(body.currentPassword, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail={"code": "INVALID_CURRENT_PASSWORD", "message": "Current password is incorrect"})
    user.password_hash = hash_password(body.newPassword)
    await guarded(user.save(update_fields=["password_hash", "updated_at"]))
    await activity.log_activity(user, activity.PASSWORD_CHANGED, "Password changed")
    return {"success": True}


@router.delete("")
async def delete_me(user: User = Depends(get_current_user)):
    """
    Delete the signed-in account.

    Profile, links, visits and activities go with it (database cascade).
    """
    await guarded(user.delete())
    logger.info("[account] user deleted themself -> id=%s", user.id)
    return {"success": True}


# ------------------------------------------------------------------------------
# Page design and profile settings
# ------------------------------------------------------------------------------
@router.get("/design")
async def get_design(user: User = Depends(get_current_user)):
    profile = await find_or_create_default(user)
    data = design_to_dict(profile)
    data.update({"title": profile.title, "description": profile.description})
    return {"success": True, "data": data}


@router.put("/design")
async def update_design(body: DesignIn, user: User = Depends(get_current_user)):
    """
    Update page design settings. Only the fields present in the request are
    written, so repeating a request leaves the page as it was.
    """
    profile = await find_or_create_default(user)
    changes = _columns(body, _DESIGN_COLUMNS)
    await update_profile(profile, changes)
    if changes:
        await activity.log_activity(user, activity.DESIGN_UPDATED, "Page design updated")
    data = design_to_dict(profile)
    data.update({"title": profile.title, "description": profile.description})
    return {"success": True, "data": data}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    profile = await find_or_create_default(user)
    return {"success": True, "data": profile_to_dict(profile)}


@router.put("/profile")
async def update_profile_settings(body: ProfileSettingsIn, user: User = Depends(get_current_user)):
    """Update description, avatar URL and page visibility."""
    profile = await find_or_create_default(user)
    changes = _columns(body, _SETTINGS_COLUMNS)
    await update_profile(profile, changes)
    if changes:
        await activity.log_activity(user, activity.PROFILE_UPDATED, "Profile settings updated")
    return {"success": True, "data": profile_to_dict(profile)}


# ------------------------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------------------------
@router.get("/stats")
async def get_stats(user: User = Depends(get_current_user)):
    """
    Dashboard numbers for the signed-in account.

    Returns:
        dict: viewCount, uniqueVisitors, activeLinks, totalClicks and the most
        recent activities
    """
    profile = await find_or_create_default(user)
    links = Link.filter(profile_id=profile.id)
    active_links = await guarded(links.filter(is_active=True).count())
    clicks = await guarded(links.values_list("click_count", flat=True))
    recent = await activity.recent_activities(user, settings.recent_activity_limit)
    return {
        "success": True,
        "data": {
            "viewCount": profile.view_count,
            "uniqueVisitors": profile.unique_visitors,
            "activeLinks": active_links,
            "totalClicks": sum(clicks),
            "recentActivities": [activity_to_dict(a) for a in recent],
        },
    }


@router.post("/activity")
async def add_activity(body: ActivityIn, user: User = Depends(get_current_user)):
    a = await activity.log_activity(user, body.type, body.details)
    return {"success": True, "data": activity_to_dict(a)}


@router.get("/activity")
async def list_activity(
    limit: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
):
    rows = await activity.recent_activities(user, limit)
    return {"success": True, "data": [activity_to_dict(a) for a in rows]}
