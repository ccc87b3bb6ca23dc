"""
Link Ordering

Maintains the display order of a profile's links. Every mutation runs in one
transaction that first locks the owning profile row, so two reorders of the
same profile (two open dashboard tabs) are applied one after the other and
can never leave duplicate or missing positions. Different profiles never
contend.

Expected failures come back as OrderResult.error codes; only storage
outages raise (StoreUnavailable, via guarded()).
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from tortoise.transactions import in_transaction

from linkforge.core.db import guarded
from linkforge.models.link import Link
from linkforge.models.profile import Profile

UP = "up"
DOWN = "down"

# Error codes
NOT_FOUND = "NOT_FOUND"
FOREIGN_LINK_ID = "FOREIGN_LINK_ID"
VALIDATION_ERROR = "VALIDATION_ERROR"


@dataclass
class OrderResult:
    """Links of one profile sorted by order, or the reason nothing changed"""
    links: List[Link] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _lock_profile(profile_id, conn) -> Optional[Profile]:
    qs = Profile.filter(id=profile_id).using_db(conn)
    # SQLite has no row locks; its single writer already serializes transactions
    if conn.capabilities.dialect != "sqlite":
        qs = qs.select_for_update()
    return await qs.first()


async def _load(profile_id, conn) -> List[Link]:
    return await Link.filter(profile_id=profile_id).using_db(conn).order_by("order", "created_at")


def _renumber(sequence: Sequence[Link]) -> List[Link]:
    """Assign order = index along `sequence`; return only the links that changed."""
    changed = []
    for index, link in enumerate(sequence):
        if link.order != index:
            link.order = index
            changed.append(link)
    return changed


async def _set_orders(links: Iterable[Link], conn) -> None:
    for link in links:
        await Link.filter(id=link.id).using_db(conn).update(order=link.order)


def _index_of(links: Sequence[Link], link_id) -> Optional[int]:
    wanted = str(link_id)
    for index, link in enumerate(links):
        if str(link.id) == wanted:
            return index
    return None


async def list_links(profile_id) -> List[Link]:
    return await guarded(Link.filter(profile_id=profile_id).order_by("order", "created_at"))


async def move_link(profile_id, link_id, direction: str) -> OrderResult:
    """
    Swap a link with its neighbour above (`up`) or below (`down`).

    Moving the first link up or the last link down is a no-op that returns the
    current sequence. Positions left sparse by earlier deletions are compacted
    to 0..N-1 in the same transaction before the swap.
    """
    if direction not in (UP, DOWN):
        return OrderResult(error=VALIDATION_ERROR)
    return await guarded(_move_link(profile_id, link_id, direction))


async def _move_link(profile_id, link_id, direction: str) -> OrderResult:
    async with in_transaction() as conn:
        if await _lock_profile(profile_id, conn) is None:
            return OrderResult(error=NOT_FOUND)
        links = await _load(profile_id, conn)

        index = _index_of(links, link_id)
        if index is None:
            return OrderResult(links, NOT_FOUND)
        neighbour = index - 1 if direction == UP else index + 1
        if neighbour < 0 or neighbour >= len(links):
            return OrderResult(links)

        dirty = {link.id: link for link in _renumber(links)}
        moved, other = links[index], links[neighbour]
        moved.order, other.order = other.order, moved.order
        dirty[moved.id] = moved
        dirty[other.id] = other
        await _set_orders(dirty.values(), conn)

        links[index], links[neighbour] = other, moved
        return OrderResult(links)


async def append_link(profile_id, **fields) -> Link:
    """Create a link positioned after every existing one (order 0 for the first)."""
    return await guarded(_append_link(profile_id, fields))


async def _append_link(profile_id, fields: dict) -> Link:
    async with in_transaction() as conn:
        await _lock_profile(profile_id, conn)
        orders = await Link.filter(profile_id=profile_id).using_db(conn).values_list("order", flat=True)
        position = max(orders, default=-1) + 1
        return await Link.create(profile_id=profile_id, order=position, using_db=conn, **fields)


async def remove_link(profile_id, link_id) -> OrderResult:
    """Delete a link. Remaining positions are left as they are."""
    deleted = await guarded(Link.filter(id=link_id, profile_id=profile_id).delete())
    if not deleted:
        return OrderResult(error=NOT_FOUND)
    return OrderResult(await list_links(profile_id))


async def reorder_bulk(profile_id, ordered_ids: Sequence) -> OrderResult:
    """
    Set order = index for each id in `ordered_ids`.

    Links of the profile that are not listed keep their relative order after
    the listed ones, so the result is always dense. Any id that does not belong
    to the profile rejects the whole call before anything is written.
    """
    wanted = [str(i) for i in ordered_ids]
    if len(set(wanted)) != len(wanted):
        return OrderResult(error=VALIDATION_ERROR)
    return await guarded(_reorder_bulk(profile_id, wanted))


async def _reorder_bulk(profile_id, wanted: List[str]) -> OrderResult:
    async with in_transaction() as conn:
        if await _lock_profile(profile_id, conn) is None:
            return OrderResult(error=NOT_FOUND)
        links = await _load(profile_id, conn)

        by_id = {str(link.id): link for link in links}
        if any(i not in by_id for i in wanted):
            return OrderResult(links, FOREIGN_LINK_ID)

        listed = set(wanted)
        sequence = [by_id[i] for i in wanted] + [l for l in links if str(l.id) not in listed]
        await _set_orders(_renumber(sequence), conn)
        return OrderResult(sequence)
