from __future__ import annotations

import hashlib
import re
from pathlib import Path


class DataAccessError(Exception):
    pass


def resolve_under_data_root(*, data_root: Path, relpath: str) -> Path:
    """
    Resolve a relative path under an explicit, resolved data_root.

    Absolute paths and `..` escapes are rejected; callers never hand this
    module an arbitrary filesystem location.
    """

    if relpath.startswith(("/", "\\")) or (":" in relpath and "\\" in relpath):
        raise DataAccessError(f"Expected a relative path under data_root, got: {relpath!r}")

    root = data_root.expanduser().resolve()
    candidate = (root / relpath).resolve()

    if not candidate.is_relative_to(root):
        raise DataAccessError(f"Path traversal or external reference detected: relpath={relpath!r}")

    return candidate


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def safe_pdf_stem(file_name: str) -> str:
    """
    Deterministic, filesystem-safe stem for readability.
    """
    s = file_name.replace("\\", "/").split("/")[-1]
    if s.lower().endswith(".pdf"):
        s = s[: -len(".pdf")]
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "pdf"


def compute_pdf_id(*, file_name: str, pdf_bytes: bytes) -> str:
    return f"{safe_pdf_stem(file_name)}_{sha256_bytes(pdf_bytes)[:12]}"


def segment_file_name(*, file_name: str, index: int) -> str:
    """`index` is 0-indexed; file names are numbered from 1."""
    return f"{safe_pdf_stem(file_name)}_segment_{index + 1}.pdf"
