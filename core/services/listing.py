# =============================================================================
# core/services/listing.py - Ordered Queries with In-Memory Fallback
# =============================================================================
# Several listings want records ordered by a timestamp. If the store can't
# serve the ordering (QueryIndexError) we fetch the filtered set unordered
# and sort, cursor and limit it here instead.
#
# If the unordered query is refused as well, the caller gets an
# IndexRequiredError carrying the store's index hint.
# =============================================================================

import logging
from typing import Any, Sequence

from app.exceptions import IndexRequiredError
from lib.record_store import Filter, OrderBy, QueryIndexError, RecordStore

logger = logging.getLogger(__name__)


def sort_records(records: list[dict[str, Any]], order_by: OrderBy) -> list[dict[str, Any]]:
    """Sort records by one field; records missing the field go last."""
    present = [r for r in records if r.get(order_by.field) is not None]
    missing = [r for r in records if r.get(order_by.field) is None]
    present.sort(key=lambda r: r[order_by.field], reverse=order_by.descending)
    return present + missing


def page_after(
    records: list[dict[str, Any]],
    cursor: str | None,
    limit: int | None,
) -> list[dict[str, Any]]:
    """
    Apply lastId-style cursoring and a limit to an already sorted list.

    An unknown cursor is ignored, matching the store's behaviour.
    """
    if cursor:
        for index, record in enumerate(records):
            if record.get("id") == cursor:
                records = records[index + 1:]
                break
    if limit:
        records = records[:limit]
    return records


def fetch_ordered(
    store: RecordStore,
    collection: str,
    filters: Sequence[Filter] = (),
    order_by: OrderBy | None = None,
    limit: int | None = None,
    cursor: str | None = None,
) -> list[dict[str, Any]]:
    """
    Query with ordering, degrading to an in-memory sort when needed.

    Args:
        store: Record Store to query
        collection: Collection name
        filters: Conditions combined with AND
        order_by: Sort key
        limit: Maximum number of records
        cursor: Id of the last record of the previous page

    Returns:
        Matching records in the requested order

    Raises:
        IndexRequiredError: If neither the ordered nor the unordered query
            can be served
    """
    try:
        return store.query(
            collection, filters, order_by=order_by, limit=limit, cursor=cursor
        )
    except QueryIndexError as e:
        if order_by is None:
            raise IndexRequiredError(collection, e.index_hint)
        logger.warning(
            f"Ordered query on {collection} refused, sorting in memory. "
            f"Hint: {e.index_hint}"
        )
        hint = e.index_hint

    try:
        records = store.query(collection, filters)
    except QueryIndexError as e:
        logger.error(f"Fallback query on {collection} failed: {e}")
        raise IndexRequiredError(collection, e.index_hint or hint)

    return page_after(sort_records(records, order_by), cursor, limit)
