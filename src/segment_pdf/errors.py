from __future__ import annotations


class SegmentationError(Exception):
    """
    Base class for contract violations detected by the segmentation core.

    `code` is the stable, machine-readable identifier reported in result
    manifests and HTTP error bodies.
    """

    code = "SEGMENT_ERROR"


class InvalidDocumentError(SegmentationError):
    """Document handle is absent, unreadable, or has zero pages."""

    code = "SEGMENT_INVALID_DOCUMENT"


class InvalidCutCountError(SegmentationError, ValueError):
    """Requested cut count is not a positive integer."""

    code = "SEGMENT_INVALID_CUT_COUNT"


def require_positive_cuts(cuts: object) -> int:
    # bool is an int subclass; True must not pass as one cut.
    if isinstance(cuts, bool) or not isinstance(cuts, int):
        raise InvalidCutCountError(f"Number of cuts must be an integer, got {cuts!r}")
    if cuts <= 0:
        raise InvalidCutCountError("Number of cuts must be greater than zero.")
    return cuts
