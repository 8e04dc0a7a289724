# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the Supabase-backed implementations of the store
# interfaces used by the service layer:
# - SupabaseClient: singleton access to the service-role client, plus
#   short-lived anon clients for Supabase Auth calls
# - SupabaseRecordStore: RecordStore over PostgREST tables
# - SupabaseBlobStore: BlobStore over a Supabase Storage bucket
#
# Each collection maps to a table of the same name; documents keep their
# camelCase field names as column names.
#
# Usage:
#   from lib.supabase_client import SupabaseRecordStore
#   store = SupabaseRecordStore()
#   program = store.get("programs", program_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Sequence

from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from app.config import settings
from lib.blob_store import BlobStore
from lib.record_store import (
    Filter,
    OrderBy,
    QueryIndexError,
    RecordStore,
    RecordStoreError,
    validate_filters,
)

# Set up logging for this module
logger = logging.getLogger(__name__)

# Postgres/PostgREST codes that mean "this ordering can't be served":
# 42703 undefined column, 57014 statement timeout (unindexed sort)
_ORDERING_ERROR_CODES = {"42703", "57014"}


class SupabaseClientError(RecordStoreError):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """


class SupabaseClient:
    """
    Singleton holder for the Supabase service-role client.

    Example:
        client = SupabaseClient.get_client()
        client.table("programs").select("*").execute()
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def new_auth_client(cls) -> Client:
        """
        Create a throwaway anon client for Supabase Auth calls.

        Signing in on a client swaps its auth header, so sign-ins must never
        touch the shared service-role client.
        """
        return create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            options=ClientOptions(persist_session=False, auto_refresh_token=False),
        )


def _apply_filters(query: Any, filters: Sequence[Filter]) -> Any:
    """Translate Filter tuples into PostgREST builder calls."""
    for f in filters:
        if f.op == "==":
            query = query.is_(f.field, "null") if f.value is None else query.eq(f.field, f.value)
        elif f.op == "!=":
            query = query.not_.is_(f.field, "null") if f.value is None else query.neq(f.field, f.value)
        elif f.op == "<":
            query = query.lt(f.field, f.value)
        elif f.op == "<=":
            query = query.lte(f.field, f.value)
        elif f.op == ">":
            query = query.gt(f.field, f.value)
        elif f.op == ">=":
            query = query.gte(f.field, f.value)
        elif f.op == "in":
            query = query.in_(f.field, list(f.value))
    return query


def _keyset_after(field: str, value: Any, record_id: str, descending: bool) -> str | None:
    """
    PostgREST `or` expression selecting rows after a cursor record.

    Rows sharing the cursor's sort value are ordered by id, so the id breaks
    ties. Returns None when the cursor has no sort value to continue from.
    """
    if value is None:
        return None
    op = "lt" if descending else "gt"
    return f'{field}.{op}."{value}",and({field}.eq."{value}",id.{op}."{record_id}")'


class SupabaseRecordStore(RecordStore):
    """
    RecordStore backed by Supabase tables.

    Not-found is reported through return values (None / False); every other
    failure is wrapped in SupabaseClientError.
    """

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    # -------------------------------------------------------------------------
    # Single-record operations
    # -------------------------------------------------------------------------

    def create(
        self,
        collection: str,
        fields: dict[str, Any],
        record_id: str | None = None,
    ) -> str:
        data = dict(fields)
        if record_id:
            data["id"] = record_id

        try:
            response = self.client.table(collection).insert(data).execute()
        except APIError as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {collection}: {e.message}",
                code="INSERT_FAILED",
                details={"collection": collection, "pg_code": e.code},
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"collection": collection},
            )

        new_id = str(response.data[0]["id"])
        logger.debug(f"Inserted {collection}/{new_id}")
        return new_id

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        try:
            response = (
                self.client.table(collection)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            # 22P02: malformed id (e.g. not a uuid) can never match a row
            if e.code == "22P02":
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {collection}/{record_id}: {e.message}",
                code="FETCH_FAILED",
                details={"collection": collection, "id": record_id},
            )

        return response.data[0] if response.data else None

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> bool:
        try:
            response = (
                self.client.table(collection)
                .update(fields)
                .eq("id", record_id)
                .execute()
            )
        except APIError as e:
            if e.code == "22P02":
                return False
            raise SupabaseClientError(
                message=f"Failed to update {collection}/{record_id}: {e.message}",
                code="UPDATE_FAILED",
                details={"collection": collection, "id": record_id},
            )

        return bool(response.data)

    def delete(self, collection: str, record_id: str) -> bool:
        try:
            response = (
                self.client.table(collection)
                .delete()
                .eq("id", record_id)
                .execute()
            )
        except APIError as e:
            if e.code == "22P02":
                return False
            raise SupabaseClientError(
                message=f"Failed to delete {collection}/{record_id}: {e.message}",
                code="DELETE_FAILED",
                details={"collection": collection, "id": record_id},
            )

        return bool(response.data)

    def compare_and_update(
        self,
        collection: str,
        record_id: str,
        fields: dict[str, Any],
        expected: dict[str, Any],
    ) -> bool:
        query = self.client.table(collection).update(fields).eq("id", record_id)
        query = _apply_filters(query, [Filter(k, "==", v) for k, v in expected.items()])

        try:
            response = query.execute()
        except APIError as e:
            raise SupabaseClientError(
                message=f"Conditional update of {collection}/{record_id} failed: {e.message}",
                code="UPDATE_FAILED",
                details={"collection": collection, "id": record_id},
            )

        return bool(response.data)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> list[dict[str, Any]]:
        conditions = validate_filters(filters)

        query = _apply_filters(self.client.table(collection).select("*"), conditions)

        # Keyset pagination: continue after the cursor record, ties broken by id
        cursor_record = self.get(collection, cursor) if cursor else None
        if cursor_record is not None and order_by is None:
            query = query.gt("id", cursor)
        elif cursor_record is not None:
            after = _keyset_after(
                order_by.field,
                cursor_record.get(order_by.field),
                cursor,
                order_by.descending,
            )
            if after is None:
                logger.warning(
                    f"Cursor {collection}/{cursor} has no {order_by.field}; ignoring it"
                )
            else:
                query = query.or_(after)

        if order_by:
            query = query.order(order_by.field, desc=order_by.descending, nullsfirst=False)
            query = query.order("id", desc=order_by.descending)
        elif cursor:
            query = query.order("id")
        if limit:
            query = query.limit(limit)

        try:
            response = query.execute()
        except APIError as e:
            if order_by and e.code in _ORDERING_ERROR_CODES:
                fields = [f.field for f in conditions] + [order_by.field]
                raise QueryIndexError(
                    message=f"Ordered query on {collection} was rejected: {e.message}",
                    collection=collection,
                    index_hint=f"Create an index on {collection}({', '.join(fields)})",
                )
            raise SupabaseClientError(
                message=f"Failed to query {collection}: {e.message}",
                code="QUERY_FAILED",
                details={"collection": collection, "pg_code": e.code},
            )

        records = response.data or []
        logger.debug(f"Fetched {len(records)} records from {collection}")
        return records

    def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        query = self.client.table(collection).select("id", count="exact")
        query = _apply_filters(query, validate_filters(filters))

        try:
            response = query.execute()
        except APIError as e:
            raise SupabaseClientError(
                message=f"Failed to count {collection}: {e.message}",
                code="COUNT_FAILED",
                details={"collection": collection},
            )

        return response.count or 0

    # -------------------------------------------------------------------------
    # Batch writes (single statement each, so atomic at the database)
    # -------------------------------------------------------------------------

    def update_many(
        self,
        collection: str,
        record_ids: Sequence[str],
        fields: dict[str, Any],
    ) -> int:
        if not record_ids:
            return 0

        try:
            response = (
                self.client.table(collection)
                .update(fields)
                .in_("id", list(record_ids))
                .execute()
            )
        except APIError as e:
            raise SupabaseClientError(
                message=f"Batch update of {collection} failed: {e.message}",
                code="BATCH_UPDATE_FAILED",
                details={"collection": collection, "count": len(record_ids)},
            )

        return len(response.data or [])

    def delete_many(self, collection: str, record_ids: Sequence[str]) -> int:
        if not record_ids:
            return 0

        try:
            response = (
                self.client.table(collection)
                .delete()
                .in_("id", list(record_ids))
                .execute()
            )
        except APIError as e:
            raise SupabaseClientError(
                message=f"Batch delete of {collection} failed: {e.message}",
                code="BATCH_DELETE_FAILED",
                details={"collection": collection, "count": len(record_ids)},
            )

        return len(response.data or [])


class SupabaseBlobStore(BlobStore):
    """BlobStore backed by one Supabase Storage bucket with public URLs."""

    def __init__(self, bucket: str | None = None, client: Client | None = None):
        self.bucket = bucket or settings.STORAGE_BUCKET
        self._client = client

    @property
    def client(self) -> Client:
        return self._client or SupabaseClient.get_client()

    def put(self, path: str, data: bytes, content_type: str) -> str:
        try:
            self.client.storage.from_(self.bucket).upload(
                path=path,
                file=data,
                file_options={"content-type": content_type, "upsert": "true"}
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upload {path}: {e}",
                code="STORAGE_UPLOAD_FAILED",
                suggestion=f"Check that the '{self.bucket}' bucket exists",
                details={"path": path},
            )

        logger.info(f"Uploaded blob: {self.bucket}/{path}")
        return self.get_url(path)

    def delete(self, path: str) -> bool:
        try:
            removed = self.client.storage.from_(self.bucket).remove([path])
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {path}: {e}",
                code="STORAGE_DELETE_FAILED",
                details={"path": path},
            )
        return bool(removed)

    def get_url(self, path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(path)
