"""
Visit Accounting

Counts public page views. Every call appends one Visit row and bumps the
profile's raw view counter; the unique-visitor counter only moves the first
time a given (owner, visitor identifier) pair is seen. Counters are changed
with single atomic UPDATE ... SET x = x + 1 statements, never read-modify-write,
and all writes of one call share a transaction.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from linkforge.core.db import guarded
from linkforge.core.errors import NotFound, ProfileNotFound
from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.visit import Visit

logger = logging.getLogger("uvicorn.error")

VISITOR_ID_BYTES = 16  # 128 bits of entropy
VISITOR_ID_MAX_LEN = 64


@dataclass
class VisitResult:
    """Outcome of recording one page view"""
    visitor_id: str  # Hand back to the client for a long-lived cookie
    is_new_visitor: bool


def new_visitor_id() -> str:
    return secrets.token_hex(VISITOR_ID_BYTES)


def _usable(visitor_id: Optional[str]) -> Optional[str]:
    """Empty or oversized identifiers are treated as absent."""
    if not visitor_id:
        return None
    visitor_id = visitor_id.strip()
    if not visitor_id or len(visitor_id) > VISITOR_ID_MAX_LEN:
        return None
    return visitor_id


async def record_visit(owner_id, visitor_id: Optional[str] = None, ip: Optional[str] = None) -> VisitResult:
    """
    Record a view of `owner_id`'s public page.

    Args:
        owner_id: Id of the User whose profile was viewed
        visitor_id: Identifier previously issued to this browser, if any
        ip: Source address, stored with the raw visit

    Returns:
        VisitResult with the identifier the caller must persist client-side

    Raises:
        ProfileNotFound: owner has no profile (nothing is written)
        StoreUnavailable: storage timed out or is unreachable
    """
    return await guarded(_record_visit(owner_id, _usable(visitor_id), ip))


async def _record_visit(owner_id, visitor_id: Optional[str], ip: Optional[str]) -> VisitResult:
    async with in_transaction() as conn:
        profile_ids = await Profile.filter(user_id=owner_id).using_db(conn).values_list("id", flat=True)
        if not profile_ids:
            raise ProfileNotFound("Profile not found")
        profile_id = profile_ids[0]

        if visitor_id is None:
            visitor_id = new_visitor_id()
            is_new = True
        else:
            seen = await Visit.filter(user_id=owner_id, visitor_id=visitor_id).using_db(conn).exists()
            is_new = not seen

        await Visit.create(user_id=owner_id, visitor_id=visitor_id, ip=ip, using_db=conn)

        counters = {"view_count": F("view_count") + 1}
        if is_new:
            counters["unique_visitors"] = F("unique_visitors") + 1
        await Profile.filter(id=profile_id).using_db(conn).update(**counters)

    logger.debug("[visits] owner=%s new_visitor=%s", owner_id, is_new)
    return VisitResult(visitor_id=visitor_id, is_new_visitor=is_new)


async def record_click(link_id) -> None:
    """
    Count a click on a link shown on a public page.

    Only active links of public profiles are counted.

    Raises:
        NotFound: no such link, or it is not publicly visible
    """
    link = await guarded(Link.filter(id=link_id, is_active=True).select_related("profile").first())
    if link is None or not link.profile.is_public:
        raise NotFound("Link not found", code="LINK_NOT_FOUND")
    await guarded(Link.filter(id=link.id).update(click_count=F("click_count") + 1))
