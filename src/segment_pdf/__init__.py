"""
Gap-based PDF segmentation (PDF -> sub-documents split at whitespace gaps).

Flow: document -> per-page glyph Y positions -> N largest gaps -> cut
boundaries -> sub-document payloads.

This package makes cut decisions only; decoding and serialization are
delegated to the document-model engines under `segment_pdf.engines`.
"""

from .contracts import (
    MAX_INPUT_BYTES,
    SegmentEngineName,
    SegmentPdfConfig,
    SegmentPdfError,
    SegmentPdfResult,
)
from .cut_selector import compute_gaps, select_cuts
from .errors import InvalidCutCountError, InvalidDocumentError, SegmentationError
from .module import run_segment_pdf_bytes, run_segment_pdf_relpath, segment_document
from .partitioner import partition, partition_spatial

__all__ = [
    "MAX_INPUT_BYTES",
    "InvalidCutCountError",
    "InvalidDocumentError",
    "SegmentEngineName",
    "SegmentPdfConfig",
    "SegmentPdfError",
    "SegmentPdfResult",
    "SegmentationError",
    "compute_gaps",
    "partition",
    "partition_spatial",
    "run_segment_pdf_bytes",
    "run_segment_pdf_relpath",
    "segment_document",
    "select_cuts",
]
