"""Ordering engine for sibling collections (events, budgets, packing items).

Every ordered table has an ``order_index`` column scoped by a parent column
(``itinerary_id``). Indices are always recomputed from storage; nothing is
cached between calls.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from backend.shiori.db.gateway import PersistenceGateway
from backend.shiori.db.models import Base

logger = logging.getLogger(__name__)

OrderedT = TypeVar("OrderedT", bound=Base)


async def next_order_index(
    gateway: PersistenceGateway,
    model: type[OrderedT],
    parent_column: str,
    parent_id: str,
) -> int:
    """Index for a new sibling: max existing + 1, or 0 for an empty set.

    Uses the max rather than the count so gaps left by deletes never produce
    a duplicate index.
    """
    current = await gateway.max_value(model, "order_index", **{parent_column: parent_id})
    return 0 if current is None else int(current) + 1


async def list_ordered(
    gateway: PersistenceGateway,
    model: type[OrderedT],
    parent_column: str,
    parent_id: str,
) -> list[OrderedT]:
    """Siblings in (order_index, id) order."""
    return await gateway.list_where(
        model,
        order_by=(model.order_index, model.id),  # type: ignore[attr-defined]
        **{parent_column: parent_id},
    )


async def apply_order(
    gateway: PersistenceGateway,
    model: type[OrderedT],
    parent_column: str,
    parent_id: str,
    ordered_ids: Sequence[str],
) -> list[OrderedT]:
    """Reindex a sibling set from an explicit ordered list of IDs.

    Listed IDs get their position in the list (after dropping unknown,
    foreign and repeated IDs). Siblings not listed keep their previous
    relative order and follow the listed ones, so the whole set ends up
    dense. Applying the same list twice yields the same indices.

    Args:
        gateway: Persistence gateway
        model: Ordered ORM class
        parent_column: Name of the scoping column (e.g. "itinerary_id")
        parent_id: Parent whose siblings are reordered
        ordered_ids: Desired order, possibly a subset of the siblings

    Returns:
        Siblings in their new order
    """
    async with gateway.transaction():
        siblings = await list_ordered(gateway, model, parent_column, parent_id)
        by_id = {row.id: row for row in siblings}  # type: ignore[attr-defined]

        listed: list[str] = []
        ignored: list[str] = []
        for record_id in ordered_ids:
            if record_id in by_id and record_id not in listed:
                listed.append(record_id)
            else:
                ignored.append(record_id)

        if ignored:
            logger.info(
                f"[apply_order] ignoring {len(ignored)} id(s) not in {model.__tablename__} "
                f"for parent {parent_id}"
            )

        listed_set = set(listed)
        unlisted = [row.id for row in siblings if row.id not in listed_set]  # type: ignore[attr-defined]
        final_order = listed + unlisted

        for position, record_id in enumerate(final_order):
            if by_id[record_id].order_index != position:  # type: ignore[attr-defined]
                await gateway.update(model, record_id, {"order_index": position})

        return await list_ordered(gateway, model, parent_column, parent_id)
