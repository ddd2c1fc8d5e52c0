from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

from contracts.segmentation import SegmentationMetadata
from segment_pdf.errors import require_positive_cuts

_MODIFIABLE_FIELDS = frozenset({"cuts"})


class MetadataNotFoundError(KeyError):
    def __init__(self, pdf_id: str) -> None:
        super().__init__(pdf_id)
        self.pdf_id = pdf_id

    def __str__(self) -> str:
        return f"PDF with given ID does not exist: {self.pdf_id!r}"


class MetadataStore(ABC):
    """
    Key-value store of SegmentationMetadata keyed by pdf_id.

    Created explicitly at service start and injected where needed; there is
    no process-wide default instance. Implementations serialize mutations
    through `self._lock`.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod
    def get(self, pdf_id: str) -> SegmentationMetadata | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, metadata: SegmentationMetadata) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, pdf_id: str) -> bool:
        """Return True if a record was removed."""

        raise NotImplementedError

    @abstractmethod
    def list_ids(self) -> list[str]:
        raise NotImplementedError

    def require(self, pdf_id: str) -> SegmentationMetadata:
        metadata = self.get(pdf_id)
        if metadata is None:
            raise MetadataNotFoundError(pdf_id)
        return metadata

    def update_cuts(self, pdf_id: str, cuts: int) -> SegmentationMetadata:
        require_positive_cuts(cuts)
        with self._lock:
            metadata = self.require(pdf_id)
            metadata.cuts = cuts
            self.put(metadata)
            return metadata

    def modify(self, pdf_id: str, updates: dict[str, Any]) -> SegmentationMetadata:
        """
        Partial update. Only `cuts` is modifiable; absent keys are left as-is.
        """

        unknown = set(updates) - _MODIFIABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported metadata fields: {sorted(unknown)}")

        with self._lock:
            metadata = self.require(pdf_id)
            if "cuts" in updates:
                metadata.cuts = require_positive_cuts(updates["cuts"])
                self.put(metadata)
            return metadata
