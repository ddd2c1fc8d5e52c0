from __future__ import annotations

import ctypes
import io
import threading
from typing import Sequence

from contracts.layout import DocumentLayout, PageLayout

from ..errors import InvalidDocumentError
from ..logging_utils import get_component_logger
from .base import LoadedDocument, PdfDocumentEngine

logger = get_component_logger(__name__, component="segmentation")

# PDFium is not thread-safe, even across separate documents.
_PDFIUM_LOCK = threading.RLock()


def _require_pdfium():
    try:
        import pypdfium2 as pdfium  # type: ignore

        return pdfium
    except ImportError as e:
        raise RuntimeError(
            "Missing dependency: pypdfium2 is required for PDF layout extraction."
        ) from e


class Pypdfium2Document(LoadedDocument):
    def __init__(self, pdf) -> None:
        self._pdf = pdf

    def page_count(self) -> int:
        with _PDFIUM_LOCK:
            return len(self._pdf)

    def _page_layout(self, page_index: int) -> PageLayout:
        pdfium = _require_pdfium()
        page = self._pdf[page_index]
        textpage = page.get_textpage()
        try:
            width, height = page.get_size()
            _left, _bottom, _right, top = page.get_mediabox()
            origin_x = ctypes.c_double()
            origin_y = ctypes.c_double()
            positions: list[tuple[float, float]] = []
            for i in range(textpage.count_chars()):
                if not textpage.get_text_range(i, 1).strip():
                    continue
                # Glyph origin sits on the baseline, shared by every glyph of a line.
                ok = pdfium.raw.FPDFText_GetCharOrigin(
                    textpage.raw, i, ctypes.byref(origin_x), ctypes.byref(origin_y)
                )
                if not ok:
                    continue
                # PDF space is bottom-up from the media box; flip so y grows down the page.
                positions.append((float(top) - origin_y.value, origin_x.value))
        finally:
            textpage.close()
            page.close()

        positions.sort()
        return PageLayout(
            page_index=page_index,
            width=float(width),
            height=float(height),
            glyph_ys=[y for y, _x in positions],
        )

    def extract_layout(self) -> DocumentLayout:
        with _PDFIUM_LOCK:
            pages = [self._page_layout(i) for i in range(len(self._pdf))]
        logger.info(
            "Extracted layout: %d page(s), %d glyph(s)",
            len(pages),
            sum(len(p.glyph_ys) for p in pages),
        )
        return DocumentLayout(pages=pages)

    def export_pages(self, page_indices: Sequence[int]) -> bytes:
        pdfium = _require_pdfium()
        indices = [int(i) for i in page_indices]
        with _PDFIUM_LOCK:
            page_count = len(self._pdf)
            for i in indices:
                if i < 0 or i >= page_count:
                    raise ValueError(f"Page out of range: {i} (0..{page_count - 1})")

            out = pdfium.PdfDocument.new()
            try:
                out.import_pages(self._pdf, pages=indices)
                buf = io.BytesIO()
                out.save(buf)
            finally:
                out.close()
        return buf.getvalue()

    def close(self) -> None:
        with _PDFIUM_LOCK:
            self._pdf.close()


class Pypdfium2Engine(PdfDocumentEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except ImportError:
            return None

    def open_document(self, *, pdf_bytes: bytes) -> Pypdfium2Document:
        pdfium = _require_pdfium()
        with _PDFIUM_LOCK:
            try:
                pdf = pdfium.PdfDocument(pdf_bytes)
            except pdfium.PdfiumError as e:
                raise InvalidDocumentError(f"Unreadable PDF: {e}") from e
        return Pypdfium2Document(pdf)
