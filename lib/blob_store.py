# =============================================================================
# lib/blob_store.py - Blob Store Interface
# =============================================================================
# Abstract binary object storage with URL retrieval. Implemented over
# Supabase Storage in lib/supabase_client.py.
# =============================================================================

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Binary object storage addressed by path."""

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at `path` (overwriting) and return a download URL."""

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove the object at `path`. Returns False if nothing was removed."""

    @abstractmethod
    def get_url(self, path: str) -> str:
        """Return a download URL for `path`."""
