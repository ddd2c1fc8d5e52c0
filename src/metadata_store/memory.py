from __future__ import annotations

from dataclasses import replace

from contracts.segmentation import SegmentationMetadata

from .base import MetadataStore


class InMemoryMetadataStore(MetadataStore):
    """
    Per-instance, non-durable store. Records live as long as the instance.
    """

    def __init__(self) -> None:
        super().__init__()
        self._records: dict[str, SegmentationMetadata] = {}

    def get(self, pdf_id: str) -> SegmentationMetadata | None:
        with self._lock:
            record = self._records.get(pdf_id)
            # Callers get a copy; mutations go through put().
            return replace(record) if record is not None else None

    def put(self, metadata: SegmentationMetadata) -> None:
        with self._lock:
            self._records[metadata.pdf_id] = replace(metadata)

    def delete(self, pdf_id: str) -> bool:
        with self._lock:
            return self._records.pop(pdf_id, None) is not None

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._records)
