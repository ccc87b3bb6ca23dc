# linkforge/api/v1/routers/public.py
"""
Unauthenticated endpoints behind a public link page: render data, view
counting and click counting.
"""
import ipaddress
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, Response, status

from linkforge.api.v1.serializers import design_to_dict, link_to_dict
from linkforge.config import settings
from linkforge.core.db import guarded
from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.user import User
from linkforge.schemas.public import VisitIn
from linkforge.services.visits import record_click, record_visit

router = APIRouter(prefix="/public", tags=["public"])


def _page_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                         detail={"code": "PROFILE_NOT_FOUND", "message": "Page not found"})


def _as_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        address = str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None
    # Visit.ip column width; only IPv6 zone ids can exceed it
    return address if len(address) <= 64 else None


def _client_ip(request: Request) -> Optional[str]:
    """
    Source address of a page view, or None when nothing usable is known.

    Behind a reverse proxy the first X-Forwarded-For hop is the browser. The
    header is client-controlled, so anything that is not an IP address is
    ignored in favour of the socket peer.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        hop = _as_ip(forwarded.split(",")[0])
        if hop:
            return hop
    return _as_ip(request.client.host) if request.client else None


async def _public_owner(username: str) -> tuple[User, Profile]:
    user = await guarded(User.get_or_none(username=username))
    if not user:
        raise _page_not_found()
    profile = await guarded(Profile.get_or_none(user_id=user.id))
    if not profile or not profile.is_public:
        raise _page_not_found()
    return user, profile


@router.get("/{username}")
async def get_public_page(username: str):
    """
    Get everything needed to render a public page.

    Only active links are included, in display order. Private pages and
    unknown handles both answer 404.
    """
    user, profile = await _public_owner(username)
    links = await guarded(
        Link.filter(profile_id=profile.id, is_active=True).order_by("order", "created_at")
    )
    return {
        "success": True,
        "data": {
            "username": user.username,
            "name": user.name,
            "bio": user.bio,
            "title": profile.title,
            "description": profile.description,
            "avatar": profile.avatar,
            "design": design_to_dict(profile),
            "links": [
                {k: v for k, v in link_to_dict(l).items() if k not in ("clickCount", "isActive")}
                for l in links
            ],
        },
    }


@router.post("/{username}/visit")
async def visit_public_page(
    username: str,
    request: Request,
    response: Response,
    body: Optional[VisitIn] = None,
):
    """
    Record one view of a public page.

    The visitor is identified by the visitor cookie or, failing that, the
    visitorId in the body. A fresh identifier is issued when neither is
    present, and the cookie is (re)set so the browser keeps it for a year.

    Returns:
        dict: success envelope with visitorId and isNewVisitor
    """
    user, _ = await _public_owner(username)
    visitor_id = request.cookies.get(settings.visitor_cookie_name) or (body.visitorId if body else None)
    result = await record_visit(user.id, visitor_id, _client_ip(request))

    response.set_cookie(
        settings.visitor_cookie_name,
        result.visitor_id,
        max_age=settings.visitor_cookie_max_age_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return {"success": True, "data": {"visitorId": result.visitor_id, "isNewVisitor": result.is_new_visitor}}


@router.post("/links/{link_id}/click")
async def click_link(link_id: UUID):
    """
    Count a click on a link of a public page.

    Raises:
        LINK_NOT_FOUND (404): unknown, inactive, or on a private page
    """
    await record_click(link_id)
    return {"success": True}
