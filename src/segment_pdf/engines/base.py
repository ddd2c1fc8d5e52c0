from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from contracts.layout import DocumentLayout


class LoadedDocument(ABC):
    """
    A decoded document held in memory by a document-model provider.

    One instance per request; instances are never shared between callers.
    """

    @abstractmethod
    def page_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def extract_layout(self) -> DocumentLayout:
        """
        Per-page vertical glyph coordinates from a position-sorted text walk.
        The vertical axis must be the same for every page of the document.
        """

        raise NotImplementedError

    @abstractmethod
    def export_pages(self, page_indices: Sequence[int]) -> bytes:
        """
        Serialize the given 0-indexed pages, in order, as a new self-contained
        document and return its bytes.
        """

        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "LoadedDocument":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class PdfDocumentEngine(ABC):
    """
    Document-model provider abstraction (layout extraction + serialization).

    Engines must:
    - Decode PDF bytes into a LoadedDocument
    - Raise InvalidDocumentError for input they cannot read
    - Perform NO segmentation decisions themselves
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def open_document(self, *, pdf_bytes: bytes) -> LoadedDocument:
        raise NotImplementedError
