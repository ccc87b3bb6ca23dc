"""
Profile lookups.

A profile is created lazily the first time it is needed; every code path goes
through find_or_create_default so there is exactly one way to do it.
"""
import logging
from typing import Any

from tortoise.exceptions import IntegrityError

from linkforge.core.db import guarded
from linkforge.models.profile import DEFAULT_DESIGN, Profile

logger = logging.getLogger("uvicorn.error")


def default_profile_fields(user: Any) -> dict:
    handle = getattr(user, "name", None) or user.username
    return {
        **DEFAULT_DESIGN,
        "title": handle,
        "description": f"{handle}'s links",
        "is_public": True,
    }


async def find_or_create_default(user: Any) -> Profile:
    """
    Return the user's profile, creating one with default design settings if absent.

    Two concurrent first requests may race on the one-to-one constraint;
    the loser re-reads the winner's row.
    """
    profile = await guarded(Profile.get_or_none(user_id=user.id))
    if profile:
        return profile
    try:
        profile = await guarded(Profile.create(user_id=user.id, **default_profile_fields(user)))
        logger.info("[profiles] created default profile for user=%s", user.id)
        return profile
    except IntegrityError:
        return await guarded(Profile.get(user_id=user.id))


async def update_profile(profile: Profile, changes: dict) -> Profile:
    """
    Apply a partial update. Re-sending the same payload leaves the row unchanged.

    Only the named columns are written so a concurrent view-counter increment
    is never overwritten with a stale value.
    """
    if changes:
        profile.update_from_dict(changes)
        await guarded(profile.save(update_fields=[*changes.keys(), "updated_at"]))
    return profile
