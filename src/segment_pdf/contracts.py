from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from contracts.segmentation import PartitionMode, SegmentationResult

MAX_INPUT_BYTES = 10 * 1024 * 1024  # 10 MB


class SegmentEngineName(str, Enum):
    """
    Document-model backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"


@dataclass(frozen=True, slots=True)
class SegmentPdfError:
    code: str
    message: str
    detail: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class SegmentPdfResult:
    # Deterministic identifier, stable for identical (file name + content).
    pdf_id: str
    ok: bool
    engine: SegmentEngineName
    source_pdf_name: str
    requested_cuts: int
    mode: PartitionMode
    segment_names: list[str]  # one file name per produced sub-document
    segmentation: SegmentationResult | None
    errors: list[SegmentPdfError]
    meta: dict[str, Any]

    def named_payloads(self) -> list[tuple[str, bytes]]:
        if self.segmentation is None:
            return []
        return list(zip(self.segment_names, self.segmentation.payloads()))

    def to_dict(self) -> dict[str, Any]:
        seg = self.segmentation.to_dict() if self.segmentation is not None else None
        if seg is not None:
            for entry, name in zip(seg["segments"], self.segment_names):
                entry["file_name"] = name
        return {
            "pdf_id": self.pdf_id,
            "ok": self.ok,
            "engine": self.engine.value,
            "source_pdf_name": self.source_pdf_name,
            "requested_cuts": self.requested_cuts,
            "mode": self.mode.value,
            "segmentation": seg,
            "errors": [e.to_dict() for e in self.errors],
            "meta": self.meta,
        }


@dataclass(frozen=True, slots=True)
class SegmentPdfConfig:
    """
    Segmentation stage configuration.

    - `cuts` is carried as given; positivity is checked when the stage runs so
      the failure is reported as a structured error.
    - `data_root` is only needed for relpath entrypoints and must be passed
      explicitly; no environment variable reads in this module.
    """

    cuts: int
    mode: PartitionMode = PartitionMode.POSITIONAL
    engine: SegmentEngineName = SegmentEngineName.PYPDFIUM2
    max_input_bytes: int = MAX_INPUT_BYTES
    data_root: Path | None = None

    def __post_init__(self) -> None:
        if isinstance(self.cuts, bool) or not isinstance(self.cuts, int):
            raise TypeError("cuts must be an int")
        if self.max_input_bytes <= 0:
            raise ValueError("max_input_bytes must be a positive integer")
        if self.data_root is not None and not isinstance(self.data_root, Path):
            raise TypeError("data_root must be a pathlib.Path")
