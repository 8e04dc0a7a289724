# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - record_store.py: Record Store interface (filters, ordering, errors)
# - blob_store.py: Blob Store interface
# - supabase_client.py: Supabase-backed store implementations
# - votes.py: Vote Ledger (toggle with mutual exclusion)
# - feedback_tree.py: Flat feedback -> reply tree
# - utils.py: Shared utilities (timestamps, id normalization)
#
# supabase_client is not re-exported here: it reads app.config, which itself
# imports lib.utils.
# =============================================================================

from lib.record_store import (
    Filter,
    OrderBy,
    QueryIndexError,
    RecordStore,
    RecordStoreError,
)
from lib.blob_store import BlobStore
from lib.utils import utc_now

__all__ = [
    # Stores
    "Filter",
    "OrderBy",
    "QueryIndexError",
    "RecordStore",
    "RecordStoreError",
    "BlobStore",
    # Utils
    "utc_now",
]
