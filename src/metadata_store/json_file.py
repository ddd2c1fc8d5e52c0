from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from contracts.segmentation import SegmentationMetadata
from segment_pdf.logging_utils import get_component_logger

from .base import MetadataStore

logger = get_component_logger(__name__, component="store")


class JsonFileMetadataStore(MetadataStore):
    """
    Durable store backed by a single JSON file.

    Every mutation rewrites the whole file (sorted keys, atomic replace), so
    the on-disk bytes are stable for identical contents.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        if not isinstance(path, Path):
            raise TypeError("path must be a pathlib.Path")
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Metadata file is not a JSON object: {self._path}")
        return data

    def _write_all(self, records: dict[str, dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(records, ensure_ascii=False, sort_keys=True, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, self._path)

    def get(self, pdf_id: str) -> SegmentationMetadata | None:
        with self._lock:
            record = self._read_all().get(pdf_id)
        return SegmentationMetadata.from_dict(record) if record is not None else None

    def put(self, metadata: SegmentationMetadata) -> None:
        with self._lock:
            records = self._read_all()
            records[metadata.pdf_id] = metadata.to_dict()
            self._write_all(records)
        logger.info("Stored metadata for %s", metadata.pdf_id)

    def delete(self, pdf_id: str) -> bool:
        with self._lock:
            records = self._read_all()
            if pdf_id not in records:
                return False
            del records[pdf_id]
            self._write_all(records)
        logger.info("Deleted metadata for %s", pdf_id)
        return True

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._read_all())
