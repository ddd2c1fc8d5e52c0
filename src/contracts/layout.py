from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PageLayout:
    """
    Vertical glyph positions of one page.

    Coordinates are measured top-down from the top edge of the page, in PDF
    points, and listed in position-sorted order (y, then x).
    """

    page_index: int  # 0-indexed
    width: float
    height: float
    glyph_ys: list[float]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "PageLayout":
        return PageLayout(
            page_index=int(d["page_index"]),
            width=float(d["width"]),
            height=float(d["height"]),
            glyph_ys=[float(y) for y in d.get("glyph_ys", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_index": self.page_index,
            "width": self.width,
            "height": self.height,
            "glyph_ys": list(self.glyph_ys),
        }


@dataclass(frozen=True, slots=True)
class DocumentLayout:
    pages: list[PageLayout]

    def page_count(self) -> int:
        return len(self.pages)

    def flat_coordinates(self) -> list[float]:
        """
        Page-local coordinates of every page, concatenated in page order.
        """
        out: list[float] = []
        for page in self.pages:
            out.extend(page.glyph_ys)
        return out

    def page_offsets(self) -> list[float]:
        """
        Cumulative page heights: offsets[i] is where page i starts on the
        document-wide vertical axis. Has page_count() + 1 entries.
        """
        offsets = [0.0]
        for page in self.pages:
            offsets.append(offsets[-1] + page.height)
        return offsets

    def global_coordinates(self) -> list[float]:
        offsets = self.page_offsets()
        out: list[float] = []
        for i, page in enumerate(self.pages):
            out.extend(offsets[i] + y for y in page.glyph_ys)
        return out

    def page_for_coordinate(self, y: float) -> int:
        """
        Index of the page whose band [offset, offset + height) contains the
        document-wide coordinate `y`. Values past the end map to the last page.
        """
        if not self.pages:
            raise ValueError("layout has no pages")
        starts = self.page_offsets()[:-1]
        idx = bisect_right(starts, y) - 1
        return max(0, min(idx, len(self.pages) - 1))

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "DocumentLayout":
        return DocumentLayout(pages=[PageLayout.from_dict(p) for p in d.get("pages", [])])

    def to_dict(self) -> dict[str, Any]:
        return {"pages": [p.to_dict() for p in self.pages]}
