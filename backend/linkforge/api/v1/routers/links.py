# linkforge/api/v1/routers/links.py
"""
Link management for the signed-in account's page.

Positions are owned by services.ordering: creation appends, and only move and
reorder change the order of existing links.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from linkforge.api.v1.deps import get_current_user
from linkforge.api.v1.serializers import link_to_dict, profile_to_dict
from linkforge.core.db import guarded
from linkforge.models.link import Link
from linkforge.models.user import User
from linkforge.schemas.links import LinkIn, LinkUpdateIn, MoveLinkIn, ReorderIn
from linkforge.services import activity, ordering
from linkforge.services.profiles import find_or_create_default

router = APIRouter(prefix="/users/me/links", tags=["links"])

# OrderResult.error -> (HTTP status, detail code)
_ORDER_ERRORS = {
    ordering.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "LINK_NOT_FOUND"),
    ordering.FOREIGN_LINK_ID: (status.HTTP_409_CONFLICT, "FOREIGN_LINK_ID"),
    ordering.VALIDATION_ERROR: (422, "VALIDATION_ERROR"),
}

_ORDER_MESSAGES = {
    "LINK_NOT_FOUND": "Link not found",
    "FOREIGN_LINK_ID": "One or more links do not belong to this page",
    "VALIDATION_ERROR": "Invalid reorder request",
}

# Request field -> Link column
_LINK_COLUMNS = {
    "title": "title",
    "url": "url",
    "description": "description",
    "icon": "icon",
    "isActive": "is_active",
}


def _raise_for_order(result: ordering.OrderResult) -> None:
    if result.ok:
        return
    code, detail = _ORDER_ERRORS[result.error]
    raise HTTPException(status_code=code, detail={"code": detail, "message": _ORDER_MESSAGES[detail]})


def _links_payload(links) -> dict:
    return {"success": True, "data": [link_to_dict(l) for l in links]}


async def _own_link(profile_id, link_id: UUID) -> Link:
    link = await guarded(Link.get_or_none(id=link_id, profile_id=profile_id))
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail={"code": "LINK_NOT_FOUND", "message": "Link not found"})
    return link


@router.get("")
async def list_my_links(user: User = Depends(get_current_user)):
    """
    Get the signed-in account's profile and its links in display order.

    The profile is created with default settings on first access.
    """
    profile = await find_or_create_default(user)
    links = await ordering.list_links(profile.id)
    return {
        "success": True,
        "data": {"profile": profile_to_dict(profile), "links": [link_to_dict(l) for l in links]},
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_link(body: LinkIn, user: User = Depends(get_current_user)):
    """
    Add a link after the current last one.

    Returns:
        dict: success envelope with the created link
    """
    profile = await find_or_create_default(user)
    link = await ordering.append_link(
        profile.id,
        title=body.title,
        url=str(body.url),
        description=body.description,
        icon=body.icon,
    )
    await activity.log_activity(user, activity.LINK_CREATED, f"Added link: {link.title}")
    return {"success": True, "data": link_to_dict(link)}


@router.put("/reorder")
async def reorder_links(body: ReorderIn, user: User = Depends(get_current_user)):
    """
    Persist a complete (or leading partial) ordering in one request.

    Raises:
        HTTPException (409): FOREIGN_LINK_ID when an id belongs to another page
        HTTPException (422): VALIDATION_ERROR for duplicate ids
    """
    profile = await find_or_create_default(user)
    result = await ordering.reorder_bulk(profile.id, body.ids)
    _raise_for_order(result)
    await activity.log_activity(user, activity.LINKS_REORDERED, "Links reordered")
    return _links_payload(result.links)


@router.put("/{link_id}")
async def update_link(link_id: UUID, body: LinkUpdateIn, user: User = Depends(get_current_user)):
    """
    Edit a link's title, URL, description, icon or visibility.

    Only the sent columns are written so a concurrent click count is preserved.
    """
    profile = await find_or_create_default(user)
    link = await _own_link(profile.id, link_id)

    changes = {}
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        changes[_LINK_COLUMNS[key]] = str(value) if key == "url" else value
    if changes:
        link.update_from_dict(changes)
        await guarded(link.save(update_fields=[*changes.keys(), "updated_at"]))
        await activity.log_activity(user, activity.LINK_UPDATED, f"Updated link: {link.title}")
    return {"success": True, "data": link_to_dict(link)}


@router.delete("/{link_id}")
async def delete_link(link_id: UUID, user: User = Depends(get_current_user)):
    """Delete a link and return the remaining ones in display order."""
    profile = await find_or_create_default(user)
    link = await _own_link(profile.id, link_id)
    result = await ordering.remove_link(profile.id, link.id)
    _raise_for_order(result)
    await activity.log_activity(user, activity.LINK_DELETED, f"Deleted link: {link.title}")
    return _links_payload(result.links)


@router.post("/{link_id}/move")
async def move_link(link_id: UUID, body: MoveLinkIn, user: User = Depends(get_current_user)):
    """
    Swap a link with its neighbour above or below.

    Moving the first link up or the last link down returns the list unchanged.
    """
    profile = await find_or_create_default(user)
    result = await ordering.move_link(profile.id, link_id, body.direction)
    _raise_for_order(result)
    return _links_payload(result.links)
