from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PartitionMode(str, Enum):
    """
    How cut boundaries are turned into sub-documents.

    POSITIONAL: boundary i -> single-page sub-document of page i (legacy).
    SPATIAL: each boundary splits the document at the page containing it;
             every page is kept, grouped into contiguous page ranges.
    """

    POSITIONAL = "positional"
    SPATIAL = "spatial"


@dataclass(frozen=True, slots=True)
class Segment:
    index: int  # 0-indexed, output order
    page_indices: list[int]  # 0-indexed pages of the source document
    payload: bytes  # self-contained PDF bytes

    def to_dict(self) -> dict[str, Any]:
        # Raw bytes are not part of the JSON representation.
        return {
            "index": self.index,
            "page_indices": list(self.page_indices),
            "size_bytes": len(self.payload),
            "sha256": hashlib.sha256(self.payload).hexdigest(),
        }


@dataclass(frozen=True, slots=True)
class SegmentationResult:
    """
    Sub-documents plus the cut boundaries that produced them.

    Request-scoped: nothing here is persisted by the segmentation core.
    """

    segments: list[Segment]
    cuts: list[float]  # sorted ascending
    requested_cuts: int
    mode: PartitionMode
    page_count: int

    def payloads(self) -> list[bytes]:
        return [s.payload for s in self.segments]

    def to_dict(self) -> dict[str, Any]:
        return {
            "cuts": list(self.cuts),
            "requested_cuts": self.requested_cuts,
            "mode": self.mode.value,
            "page_count": self.page_count,
            "segments": [s.to_dict() for s in self.segments],
        }


@dataclass(slots=True)
class SegmentationMetadata:
    """
    Caller-owned bookkeeping for one segmented document.

    Mutable: the metadata store updates `cuts` in place.
    """

    pdf_id: str
    segment_count: int
    cuts: int

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "SegmentationMetadata":
        return SegmentationMetadata(
            pdf_id=str(d["pdf_id"]),
            segment_count=int(d["segment_count"]),
            cuts=int(d["cuts"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"pdf_id": self.pdf_id, "segment_count": self.segment_count, "cuts": self.cuts}
