"""
Document-model providers for the segmentation stage.

Engines decode PDFs, report per-page glyph positions and serialize page
subsets. They make no cut decisions.
"""

from .base import LoadedDocument, PdfDocumentEngine
from .pypdfium2_engine import Pypdfium2Document, Pypdfium2Engine

__all__ = ["LoadedDocument", "PdfDocumentEngine", "Pypdfium2Document", "Pypdfium2Engine"]
