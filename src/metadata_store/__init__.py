"""
Segmentation metadata side-channel: pdf_id -> (segment_count, cuts).

The segmentation core never reads this store; callers create one and inject
it into the CLI or the HTTP application.
"""

from .base import MetadataNotFoundError, MetadataStore
from .json_file import JsonFileMetadataStore
from .memory import InMemoryMetadataStore

__all__ = [
    "InMemoryMetadataStore",
    "JsonFileMetadataStore",
    "MetadataNotFoundError",
    "MetadataStore",
]
