# =============================================================================
# tests/test_supabase_store.py - Supabase Record Store Query Tests
# =============================================================================
# Checks how query() drives the PostgREST builder, using a mocked client.
#
# Run with: pytest tests/test_supabase_store.py -v
# =============================================================================

from unittest.mock import MagicMock, call, patch

import pytest

from lib.record_store import OrderBy
from lib.supabase_client import SupabaseRecordStore, _keyset_after

NEWEST_FIRST = OrderBy("createdAt", descending=True)
STAMP = "2024-03-01T10:00:00+00:00"


@pytest.fixture
def builder():
    """A query builder whose chaining methods all return itself."""
    query = MagicMock(name="query")
    for method in ("select", "eq", "gt", "or_", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value.data = []
    return query


@pytest.fixture
def store(builder):
    client = MagicMock()
    client.table.return_value = builder
    return SupabaseRecordStore(client=client)


class TestKeysetAfter:
    def test_descending_breaks_ties_by_id(self):
        assert _keyset_after("createdAt", STAMP, "fb-2", descending=True) == (
            f'createdAt.lt."{STAMP}",and(createdAt.eq."{STAMP}",id.lt."fb-2")'
        )

    def test_ascending(self):
        assert _keyset_after("createdAt", STAMP, "fb-2", descending=False).startswith(
            f'createdAt.gt."{STAMP}"'
        )

    def test_no_sort_value(self):
        assert _keyset_after("createdAt", None, "fb-2", descending=True) is None


class TestQueryCursor:
    """Keyset pagination after a cursor record."""

    def test_ordered_cursor_uses_tiebreak(self, store, builder):
        with patch.object(SupabaseRecordStore, "get", return_value={"id": "fb-2", "createdAt": STAMP}):
            store.query("feedback", order_by=NEWEST_FIRST, limit=10, cursor="fb-2")

        builder.or_.assert_called_once_with(
            f'createdAt.lt."{STAMP}",and(createdAt.eq."{STAMP}",id.lt."fb-2")'
        )
        builder.lt.assert_not_called()
        assert builder.order.call_args_list == [
            call("createdAt", desc=True, nullsfirst=False),
            call("id", desc=True),
        ]
        builder.limit.assert_called_once_with(10)

    def test_cursor_without_sort_value_ignored(self, store, builder, caplog):
        with patch.object(SupabaseRecordStore, "get", return_value={"id": "fb-2", "createdAt": None}):
            store.query("feedback", order_by=NEWEST_FIRST, cursor="fb-2")

        builder.or_.assert_not_called()
        builder.lt.assert_not_called()
        assert "has no createdAt" in caplog.text

    def test_unknown_cursor_ignored(self, store, builder):
        with patch.object(SupabaseRecordStore, "get", return_value=None):
            store.query("feedback", order_by=NEWEST_FIRST, cursor="gone")

        builder.or_.assert_not_called()
        builder.gt.assert_not_called()

    def test_unordered_cursor_pages_by_id(self, store, builder):
        with patch.object(SupabaseRecordStore, "get", return_value={"id": "p3"}):
            store.query("programs", cursor="p3")

        builder.gt.assert_called_once_with("id", "p3")
        builder.order.assert_called_once_with("id")
