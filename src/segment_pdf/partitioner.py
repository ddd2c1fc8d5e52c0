from __future__ import annotations

from typing import Sequence

from contracts.layout import DocumentLayout
from contracts.segmentation import Segment

from .engines.base import LoadedDocument
from .logging_utils import get_component_logger

logger = get_component_logger(__name__, component="segmentation")


def plan_positional_pages(*, cut_count: int, page_count: int) -> list[list[int]]:
    """
    Boundary i -> page i. Boundaries past the last page are dropped, pages
    past the last boundary are not emitted.
    """
    return [[i] for i in range(min(cut_count, page_count))]


def plan_spatial_pages(*, cut_boundaries: Sequence[float], layout: DocumentLayout) -> list[list[int]]:
    """
    Split before the page containing each (document-wide) boundary.

    Every page appears exactly once, in order. Boundaries landing on the
    first page, or on a page that already starts a segment, add no split.
    """

    page_count = layout.page_count()
    if page_count == 0:
        return []

    split_pages = sorted({layout.page_for_coordinate(b) for b in cut_boundaries} - {0})
    starts = [0, *split_pages]
    ends = [*split_pages, page_count]
    return [list(range(a, b)) for a, b in zip(starts, ends)]


def partition(document: LoadedDocument, cut_boundaries: Sequence[float]) -> list[bytes]:
    """
    One single-page sub-document per boundary, positional by boundary index.

    Only min(len(cut_boundaries), page_count) payloads are produced; the
    shortfall is not an error.
    """

    page_count = document.page_count()
    plan = plan_positional_pages(cut_count=len(cut_boundaries), page_count=page_count)
    if len(plan) < len(cut_boundaries):
        logger.warning(
            "Positional partition truncated: %d boundaries, %d page(s)",
            len(cut_boundaries),
            page_count,
        )
    return [document.export_pages(pages) for pages in plan]


def partition_spatial(
    document: LoadedDocument, cut_boundaries: Sequence[float], layout: DocumentLayout
) -> list[Segment]:
    if layout.page_count() != document.page_count():
        raise ValueError(
            f"layout/page mismatch: layout has {layout.page_count()} page(s), "
            f"document has {document.page_count()}"
        )

    plan = plan_spatial_pages(cut_boundaries=cut_boundaries, layout=layout)
    return [
        Segment(index=i, page_indices=pages, payload=document.export_pages(pages))
        for i, pages in enumerate(plan)
    ]
