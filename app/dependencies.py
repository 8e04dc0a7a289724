# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Tests swap the Supabase stores for in-memory ones via
# app.dependency_overrides[get_record_store] / [get_blob_store].
# =============================================================================

from typing import Annotated

from fastapi import Depends

from lib.blob_store import BlobStore
from lib.record_store import RecordStore
from lib.supabase_client import SupabaseBlobStore, SupabaseRecordStore


def get_record_store() -> RecordStore:
    """
    Get the Record Store.

    The wrapper is cheap; the underlying client is a singleton.
    """
    return SupabaseRecordStore()


def get_blob_store() -> BlobStore:
    """Get the Blob Store for the configured bucket."""
    return SupabaseBlobStore()


# Type aliases for dependency injection
RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]
