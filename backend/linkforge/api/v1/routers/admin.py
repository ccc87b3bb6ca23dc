# linkforge/api/v1/routers/admin.py
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    status,
)
from tortoise.expressions import Q

from linkforge.api.v1.deps import raise_for_decision, require_staff
from linkforge.api.v1.serializers import ensure_unique, profile_to_dict, user_to_dict
from linkforge.core.db import guarded
from linkforge.core.security import hash_password
from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.user import User
from linkforge.schemas.admin import AdminResetPasswordIn, AdminUserUpdateIn
from linkforge.services import policy

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/admin", tags=["admin"])


# ==============================================================================
# User Management Interface
#     Prefix: /api/v1/admin/users
#     Every route requires ADMIN or FOUNDER; what may be done to which account
#     is decided per target by services.policy.
# ==============================================================================
async def _get_user_or_404(user_id: UUID) -> User:
    u = await guarded(User.get_or_none(id=user_id))
    if not u:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail={"code": "USER_NOT_FOUND", "message": "User not found"})
    return u


async def _stats_for(users: list[User]) -> dict[str, dict]:
    """
    Page counters per user id: views, unique visitors, link count, total clicks.

    Two queries for the whole page of users rather than two per user.
    """
    stats = {
        str(u.id): {"viewCount": 0, "uniqueVisitors": 0, "linkCount": 0, "totalClicks": 0}
        for u in users
    }
    if not users:
        return stats

    profiles = await guarded(
        Profile.filter(user_id__in=[u.id for u in users])
        .values("id", "user_id", "view_count", "unique_visitors")
    )
    owner_of = {}
    for p in profiles:
        owner = str(p["user_id"])
        owner_of[str(p["id"])] = owner
        stats[owner]["viewCount"] = p["view_count"]
        stats[owner]["uniqueVisitors"] = p["unique_visitors"]

    if owner_of:
        links = await guarded(
            Link.filter(profile_id__in=list(owner_of)).values_list("profile_id", "click_count")
        )
        for profile_id, clicks in links:
            entry = stats[owner_of[str(profile_id)]]
            entry["linkCount"] += 1
            entry["totalClicks"] += clicks
    return stats


@router.get("/users", dependencies=[Depends(require_staff)])
async def list_users(
    q: str | None = Query(default=None, description="Fuzzy search by username/email/name"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """
    Get paginated list of all users with their page stats (ADMIN/FOUNDER).

    Results are ordered by creation date (newest first).

    Args:
        q: Optional search query for fuzzy matching username, email or name
        offset: Number of items to skip (for pagination)
        limit: Maximum number of items to return (1-100)

    Raises:
        HTTPException (401): If user is not authenticated
        HTTPException (403): FORBIDDEN_ROLE_ESCALATION for USER accounts
    """
    qs = User.all().order_by("-created_at")
    if q:
        qs = qs.filter(Q(username__icontains=q) | Q(email__icontains=q) | Q(name__icontains=q))

    total = await guarded(qs.count())
    rows = await guarded(qs.offset(offset).limit(limit))
    stats = await _stats_for(rows)
    items = [{**user_to_dict(u), "stats": stats[str(u.id)]} for u in rows]

    return {"success": True, "data": {"items": items, "offset": offset, "limit": limit, "total": total}}


@router.get("/users/{user_id}")
async def get_user_detail(user_id: UUID, current: User = Depends(require_staff)):
    """
    Get one account with its profile and stats (ADMIN/FOUNDER).

    Raises:
        HTTPException (404): USER_NOT_FOUND
    """
    u = await _get_user_or_404(user_id)
    profile = await guarded(Profile.get_or_none(user_id=u.id))
    stats = await _stats_for([u])
    return {
        "success": True,
        "data": {
            "user": user_to_dict(u),
            "profile": profile_to_dict(profile) if profile else None,
            "stats": stats[str(u.id)],
        },
    }


@router.patch("/users/{user_id}")
async def update_user(
    user_id: UUID,
    body: AdminUserUpdateIn,
    current: User = Depends(require_staff),
):
    """
    Update another account's fields.

    ADMINs may edit USER accounts' name, email, username and bio. A FOUNDER may
    additionally change role and status, on USER and ADMIN accounts. Values
    equal to the stored ones are ignored, so full records can be sent back.

    Raises:
        HTTPException (404): USER_NOT_FOUND
        HTTPException (403): FORBIDDEN_* policy denial
        HTTPException (409): USERNAME_EXISTS / EMAIL_EXISTS
        HTTPException (400): CANNOT_CHANGE_OWN_ROLE
    """
    u = await _get_user_or_404(user_id)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    decision = policy.can_edit_user(current, u)
    verdict = policy.check_field_changes(decision, changes, u)
    if not verdict:
        logger.info("[admin] edit denied -> actor=%s target=%s reason=%s", current.id, u.id, verdict.reason)
    raise_for_decision(verdict)

    changes = {k: v for k, v in changes.items() if getattr(u, k) != v}
    if not changes:
        return {"success": True, "data": user_to_dict(u)}

    # Founders cannot strip their own privileges
    if str(current.id) == str(u.id) and changes.keys() & policy.PRIVILEGE_FIELDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "CANNOT_CHANGE_OWN_ROLE", "message": "Cannot change your own role or status"},
        )

    await ensure_unique(username=changes.get("username"), email=changes.get("email"), exclude_id=u.id)
    u.update_from_dict(changes)
    await guarded(u.save(update_fields=[*changes.keys(), "updated_at"]))
    logger.info("[admin] user updated -> actor=%s target=%s fields=%s", current.id, u.id, sorted(changes))
    return {"success": True, "data": user_to_dict(u)}


@router.delete("/users/{user_id}")
async def delete_user(user_id: UUID, current: User = Depends(require_staff)):
    """
    Delete an account and everything it owns.

    FOUNDER accounts cannot be deleted; ADMIN accounts only by a FOUNDER.

    Raises:
        HTTPException (404): USER_NOT_FOUND
        HTTPException (403): FORBIDDEN_TARGET_ROLE
    """
    u = await _get_user_or_404(user_id)
    decision = policy.can_delete_user(current, u)
    if not decision:
        logger.info("[admin] delete denied -> actor=%s target=%s reason=%s", current.id, u.id, decision.reason)
    raise_for_decision(decision)

    await guarded(u.delete())
    logger.warning("[admin] user deleted -> actor=%s target=%s username=%s", current.id, u.id, u.username)
    return {"success": True, "data": {"ok": True}}


@router.post("/users/{user_id}/reset-password")
async def reset_user_password(
    user_id: UUID,
    body: AdminResetPasswordIn,
    current: User = Depends(require_staff),
):
    """
    Set a new password for an account the actor is allowed to edit.

    Raises:
        HTTPException (404): USER_NOT_FOUND
        HTTPException (403): FORBIDDEN_* policy denial
    """
    u = await _get_user_or_404(user_id)
    raise_for_decision(policy.can_edit_user(current, u))

    u.password_hash = hash_password(body.newPassword)
    await guarded(u.save(update_fields=["password_hash", "updated_at"]))
    return {"success": True, "data": {"ok": True}}
