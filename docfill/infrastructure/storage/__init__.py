"""Output file storage: unique path allocation and the local output store."""

from docfill.infrastructure.storage.local_output_store import LocalOutputStore
from docfill.infrastructure.storage.path_allocator import ensure_unique_path

__all__ = ["LocalOutputStore", "ensure_unique_path"]
