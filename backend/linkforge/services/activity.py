"""Dashboard activity log helpers."""
from typing import Any

from linkforge.core.db import guarded
from linkforge.models.activity import Activity

# Activity types written by the application itself
LINK_CREATED = "LINK_CREATED"
LINK_UPDATED = "LINK_UPDATED"
LINK_DELETED = "LINK_DELETED"
LINKS_REORDERED = "LINKS_REORDERED"
DESIGN_UPDATED = "DESIGN_UPDATED"
PROFILE_UPDATED = "PROFILE_UPDATED"
ACCOUNT_UPDATED = "ACCOUNT_UPDATED"
PASSWORD_CHANGED = "PASSWORD_CHANGED"


async def log_activity(user: Any, type: str, details: str) -> Activity:
    return await guarded(Activity.create(user_id=user.id, type=type, details=details))


async def recent_activities(user: Any, limit: int) -> list[Activity]:
    return await guarded(
        Activity.filter(user_id=user.id).order_by("-created_at", "-id").limit(limit)
    )
