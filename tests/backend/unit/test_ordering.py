"""
Tests for services.ordering against a fresh SQLite database.
"""
import asyncio
import uuid

import pytest

from linkforge.models.link import Link
from linkforge.models.profile import Profile
from linkforge.services import ordering


pytestmark = pytest.mark.asyncio


async def _profile_with_links(create_user, *titles):
    owner, _ = await create_user()
    profile = await Profile.get(user_id=owner.id)
    links = []
    for title in titles:
        links.append(await ordering.append_link(profile.id, title=title, url=f"https://{title.lower()}.example/"))
    return profile, links


async def _titles(profile) -> list[str]:
    return [l.title for l in await ordering.list_links(profile.id)]


async def _orders(profile) -> list[int]:
    return [l.order for l in await ordering.list_links(profile.id)]


async def test_append_assigns_next_position(create_user):
    profile, links = await _profile_with_links(create_user, "A", "B", "C")
    assert [l.order for l in links] == [0, 1, 2]


async def test_append_after_gap_uses_max_plus_one(create_user):
    profile, links = await _profile_with_links(create_user, "A", "B", "C")
    await ordering.remove_link(profile.id, links[1].id)
    d = await ordering.append_link(profile.id, title="D", url="https://d.example/")
    assert d.order == 3
    assert await _titles(profile) == ["A", "C", "D"]


async def test_move_up_swaps_with_previous(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")
    result = await ordering.move_link(profile.id, c.id, ordering.UP)

    assert result.ok
    assert [l.title for l in result.links] == ["A", "C", "B"]
    assert await _titles(profile) == ["A", "C", "B"]
    assert await _orders(profile) == [0, 1, 2]


async def test_move_down_swaps_with_next(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")
    result = await ordering.move_link(profile.id, str(a.id), ordering.DOWN)
    assert [l.title for l in result.links] == ["B", "A", "C"]


@pytest.mark.parametrize("index,direction", [(0, ordering.UP), (2, ordering.DOWN)])
async def test_move_past_the_edge_is_a_no_op(create_user, index, direction):
    profile, links = await _profile_with_links(create_user, "A", "B", "C")
    result = await ordering.move_link(profile.id, links[index].id, direction)

    assert result.ok
    assert [l.title for l in result.links] == ["A", "B", "C"]
    assert await _orders(profile) == [0, 1, 2]


async def test_move_compacts_gaps_left_by_deletes(create_user):
    profile, (a, b, c, d) = await _profile_with_links(create_user, "A", "B", "C", "D")
    await ordering.remove_link(profile.id, b.id)
    assert await _orders(profile) == [0, 2, 3]

    result = await ordering.move_link(profile.id, d.id, ordering.UP)
    assert [l.title for l in result.links] == ["A", "D", "C"]
    assert await _orders(profile) == [0, 1, 2]


async def test_move_rejects_unknown_direction(create_user):
    profile, (a,) = await _profile_with_links(create_user, "A")
    result = await ordering.move_link(profile.id, a.id, "sideways")
    assert result.error == ordering.VALIDATION_ERROR


async def test_move_link_of_another_profile_is_not_found(create_user):
    mine, _ = await _profile_with_links(create_user, "A", "B")
    _, (foreign,) = await _profile_with_links(create_user, "X")

    result = await ordering.move_link(mine.id, foreign.id, ordering.UP)
    assert result.error == ordering.NOT_FOUND
    assert await _titles(mine) == ["A", "B"]


async def test_move_on_missing_profile_is_not_found(db):
    result = await ordering.move_link(uuid.uuid4(), uuid.uuid4(), ordering.DOWN)
    assert result.error == ordering.NOT_FOUND


async def test_remove_keeps_remaining_positions(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")
    result = await ordering.remove_link(profile.id, a.id)

    assert result.ok
    assert [(l.title, l.order) for l in result.links] == [("B", 1), ("C", 2)]


async def test_remove_unknown_link_is_not_found(create_user):
    profile, _ = await _profile_with_links(create_user, "A")
    result = await ordering.remove_link(profile.id, uuid.uuid4())
    assert result.error == ordering.NOT_FOUND


async def test_reorder_full_list(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")
    result = await ordering.reorder_bulk(profile.id, [c.id, a.id, b.id])

    assert result.ok
    assert await _titles(profile) == ["C", "A", "B"]
    assert await _orders(profile) == [0, 1, 2]


async def test_reorder_partial_list_keeps_the_rest_after(create_user):
    profile, (a, b, c, d) = await _profile_with_links(create_user, "A", "B", "C", "D")
    await ordering.reorder_bulk(profile.id, [str(d.id), str(b.id)])
    assert await _titles(profile) == ["D", "B", "A", "C"]
    assert await _orders(profile) == [0, 1, 2, 3]


async def test_reorder_with_foreign_id_changes_nothing(create_user):
    profile, (a, b) = await _profile_with_links(create_user, "A", "B")
    _, (foreign,) = await _profile_with_links(create_user, "X")

    result = await ordering.reorder_bulk(profile.id, [b.id, foreign.id, a.id])

    assert result.error == ordering.FOREIGN_LINK_ID
    assert await _titles(profile) == ["A", "B"]
    await foreign.refresh_from_db()
    assert foreign.order == 0


async def test_reorder_with_duplicates_is_rejected(create_user):
    profile, (a, b) = await _profile_with_links(create_user, "A", "B")
    result = await ordering.reorder_bulk(profile.id, [b.id, b.id])
    assert result.error == ordering.VALIDATION_ERROR
    assert await _titles(profile) == ["A", "B"]


async def test_reorder_empty_list_compacts(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")
    await ordering.remove_link(profile.id, a.id)
    result = await ordering.reorder_bulk(profile.id, [])
    assert [(l.title, l.order) for l in result.links] == [("B", 0), ("C", 1)]


async def test_concurrent_moves_leave_a_permutation(create_user):
    profile, links = await _profile_with_links(create_user, "A", "B", "C", "D", "E")

    await asyncio.gather(
        ordering.move_link(profile.id, links[4].id, ordering.UP),
        ordering.move_link(profile.id, links[0].id, ordering.DOWN),
        ordering.move_link(profile.id, links[2].id, ordering.UP),
        ordering.reorder_bulk(profile.id, [links[3].id]),
    )

    assert sorted(await _orders(profile)) == [0, 1, 2, 3, 4]
    assert sorted(await _titles(profile)) == ["A", "B", "C", "D", "E"]


async def test_other_profiles_are_untouched(create_user):
    mine, (a, b) = await _profile_with_links(create_user, "A", "B")
    theirs, _ = await _profile_with_links(create_user, "X", "Y")

    await ordering.reorder_bulk(mine.id, [b.id, a.id])
    assert await _titles(theirs) == ["X", "Y"]
    assert await Link.filter(profile_id=theirs.id).count() == 2


async def test_moving_the_same_link_up_twice(create_user):
    profile, (a, b, c) = await _profile_with_links(create_user, "A", "B", "C")

    first = await ordering.move_link(profile.id, b.id, ordering.UP)
    assert [l.title for l in first.links] == ["B", "A", "C"]

    second = await ordering.move_link(profile.id, b.id, ordering.UP)
    assert second.ok
    assert [l.title for l in second.links] == ["B", "A", "C"]
    assert await _orders(profile) == [0, 1, 2]
