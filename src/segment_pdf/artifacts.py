from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path
from typing import Any, Iterable

from .contracts import SegmentPdfResult

# Fixed entry timestamp so identical segments always produce identical archives.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def serialize_segment_result(result: SegmentPdfResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_segment_manifest_json(*, result: SegmentPdfResult, out_manifest: Path) -> None:
    out_manifest.parent.mkdir(parents=True, exist_ok=True)
    out_manifest.write_text(serialize_segment_result(result), encoding="utf-8")


def build_segments_zip(named_payloads: Iterable[tuple[str, bytes]]) -> bytes:
    """
    Package sub-documents into one ZIP archive, in the given order.
    """

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in named_payloads:
            info = zipfile.ZipInfo(filename=name, date_time=_ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            zf.writestr(info, data)
    return buf.getvalue()


def write_segment_files(*, result: SegmentPdfResult, out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name, data in result.named_payloads():
        out_file = out_dir / name
        out_file.write_bytes(data)
        written.append(out_file)
    return written
