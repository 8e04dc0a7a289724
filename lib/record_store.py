# =============================================================================
# lib/record_store.py - Record Store Interface
# =============================================================================
# Abstract document/collection store consumed by the service layer.
#
# The production implementation lives in lib/supabase_client.py and maps
# each collection onto a Supabase (PostgREST) table. Tests use an in-memory
# implementation of the same interface.
#
# Records are plain dicts. Every record returned by the store carries its
# identifier under the "id" key.
#
# Usage:
#   store.create("programs", {"name": "Foo"})               # -> "id"
#   store.query("resumeFeedback",
#               [Filter("resumeOwnerId", "==", owner_id)],
#               order_by=OrderBy("createdAt", descending=True))
# =============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, NamedTuple, Sequence


# Operators every implementation must understand
FILTER_OPERATORS = ("==", "!=", "<", "<=", ">", ">=", "in")


class Filter(NamedTuple):
    """A single (field, op, value) condition. "==" None matches null fields."""

    field: str
    op: str
    value: Any


class OrderBy(NamedTuple):
    """Sort key for ordered queries."""

    field: str
    descending: bool = False


class RecordStoreError(Exception):
    """
    Error raised by a Record Store operation.

    Mirrors the structure of the app-level errors so callers can surface
    an actionable message.
    """

    def __init__(
        self,
        message: str,
        code: str = "RECORD_STORE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class QueryIndexError(RecordStoreError):
    """
    The store refused an ordered query (missing index, unsortable column,
    sort timeout). Callers may retry unordered and sort in memory.
    """

    def __init__(
        self,
        message: str,
        collection: str,
        index_hint: str | None = None,
    ):
        super().__init__(
            message=message,
            code="QUERY_INDEX_REQUIRED",
            suggestion=index_hint,
            details={"collection": collection},
        )
        self.collection = collection
        self.index_hint = index_hint


def validate_filters(filters: Iterable[Filter]) -> list[Filter]:
    """Normalize filters to a list and reject unknown operators."""
    normalized = [Filter(*f) for f in filters]
    for f in normalized:
        if f.op not in FILTER_OPERATORS:
            raise RecordStoreError(
                message=f"Unsupported filter operator: {f.op}",
                code="INVALID_FILTER",
                suggestion=f"Use one of: {', '.join(FILTER_OPERATORS)}",
                details={"field": f.field, "op": f.op},
            )
    return normalized


class RecordStore(ABC):
    """
    Key/document collection store.

    All methods are blocking calls against the backing service; FastAPI runs
    the handlers that use them in its worker threadpool.
    """

    @abstractmethod
    def create(
        self,
        collection: str,
        fields: dict[str, Any],
        record_id: str | None = None,
    ) -> str:
        """Insert a record and return its identifier."""

    @abstractmethod
    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Fetch a record by id, or None if it does not exist."""

    @abstractmethod
    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> bool:
        """Merge fields into a record. Returns False if the record does not exist."""

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns False if the record does not exist."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return records matching every filter.

        Args:
            collection: Collection name
            filters: Conditions combined with AND
            order_by: Optional sort key
            limit: Maximum number of records
            cursor: Id of the last record of the previous page; results start
                after it. Ignored if that record no longer exists.

        Raises:
            QueryIndexError: If the store cannot serve the ordering
        """

    @abstractmethod
    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        """Count records matching every filter."""

    @abstractmethod
    def update_many(
        self,
        collection: str,
        record_ids: Sequence[str],
        fields: dict[str, Any],
    ) -> int:
        """Apply the same field update to several records in one batch."""

    @abstractmethod
    def delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        """Delete several records in one batch. Returns the number deleted."""

    @abstractmethod
    def compare_and_update(
        self,
        collection: str,
        record_id: str,
        fields: dict[str, Any],
        expected: dict[str, Any],
    ) -> bool:
        """
        Update a record only if its current values equal `expected`.

        Returns False when the record is missing or was changed by someone
        else since it was read.
        """
