"""
Tests for services.visits against a fresh SQLite database.
"""
import asyncio
import uuid

import pytest

from linkforge.core.errors import NotFound, ProfileNotFound
from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.models.visit import Visit
from linkforge.services.visits import new_visitor_id, record_click, record_visit


pytestmark = pytest.mark.asyncio


async def _counters(user):
    profile = await Profile.get(user_id=user.id)
    return profile.view_count, profile.unique_visitors


async def test_first_visit_without_identifier_issues_one(create_user):
    owner, _ = await create_user()
    result = await record_visit(owner.id)

    assert result.is_new_visitor is True
    assert len(result.visitor_id) == 32
    assert await _counters(owner) == (1, 1)
    assert await Visit.filter(user_id=owner.id, visitor_id=result.visitor_id).count() == 1


async def test_returning_visitor_counts_view_but_not_unique(create_user):
    owner, _ = await create_user()
    first = await record_visit(owner.id, ip="203.0.113.7")
    again = await record_visit(owner.id, first.visitor_id, ip="203.0.113.7")

    assert again.is_new_visitor is False
    assert again.visitor_id == first.visitor_id
    assert await _counters(owner) == (2, 1)
    assert await Visit.filter(user_id=owner.id).count() == 2


async def test_unseen_identifier_is_a_new_visitor(create_user):
    owner, _ = await create_user()
    result = await record_visit(owner.id, "cookie-from-another-page")
    assert result.is_new_visitor is True
    assert result.visitor_id == "cookie-from-another-page"
    assert await _counters(owner) == (1, 1)


async def test_visitor_is_unique_per_owner(create_user):
    alice, _ = await create_user()
    bob, _ = await create_user()
    visitor = new_visitor_id()

    await record_visit(alice.id, visitor)
    result = await record_visit(bob.id, visitor)

    assert result.is_new_visitor is True
    assert await _counters(alice) == (1, 1)
    assert await _counters(bob) == (1, 1)


@pytest.mark.parametrize("bad", ["", "   ", "x" * 65])
async def test_unusable_identifier_is_replaced(create_user, bad):
    owner, _ = await create_user()
    result = await record_visit(owner.id, bad)
    assert result.is_new_visitor is True
    assert result.visitor_id != bad
    assert len(result.visitor_id) == 32


async def test_missing_profile_writes_nothing(db):
    with pytest.raises(ProfileNotFound):
        await record_visit(uuid.uuid4(), "someone")
    assert await Visit.all().count() == 0


async def test_concurrent_views_are_all_counted(create_user):
    owner, _ = await create_user()
    visitors = [new_visitor_id() for _ in range(5)]

    await asyncio.gather(*(record_visit(owner.id, v) for v in visitors for _ in range(2)))

    views, uniques = await _counters(owner)
    assert views == 10
    assert uniques == 5


async def test_unique_visitors_never_exceed_views(create_user):
    owner, _ = await create_user()
    first = await record_visit(owner.id)
    for _ in range(3):
        await record_visit(owner.id, first.visitor_id)
    await record_visit(owner.id)

    views, uniques = await _counters(owner)
    assert (views, uniques) == (5, 2)
    assert uniques <= views


async def test_click_increments_counter(create_user):
    owner, _ = await create_user()
    profile = await Profile.get(user_id=owner.id)
    link = await Link.create(profile_id=profile.id, title="Blog", url="https://example.com/")

    await asyncio.gather(*(record_click(link.id) for _ in range(3)))

    await link.refresh_from_db()
    assert link.click_count == 3


async def test_click_on_hidden_link_is_not_found(create_user):
    owner, _ = await create_user()
    profile = await Profile.get(user_id=owner.id)
    inactive = await Link.create(profile_id=profile.id, title="Old", url="https://example.com/", is_active=False)

    with pytest.raises(NotFound) as exc:
        await record_click(inactive.id)
    assert exc.value.code == "LINK_NOT_FOUND"

    with pytest.raises(NotFound):
        await record_click(uuid.uuid4())


async def test_click_on_private_page_is_not_found(create_user):
    owner, _ = await create_user()
    profile = await Profile.get(user_id=owner.id)
    link = await Link.create(profile_id=profile.id, title="Blog", url="https://example.com/")
    profile.is_public = False
    await profile.save(update_fields=["is_public"])

    with pytest.raises(NotFound):
        await record_click(link.id)
    await link.refresh_from_db()
    assert link.click_count == 0


async def test_concurrent_first_visits_without_identifiers(create_user):
    owner, _ = await create_user()
    await Profile.filter(user_id=owner.id).update(view_count=10, unique_visitors=4)

    first, second = await asyncio.gather(record_visit(owner.id), record_visit(owner.id))

    assert first.visitor_id != second.visitor_id
    assert first.is_new_visitor and second.is_new_visitor
    assert await _counters(owner) == (12, 6)
