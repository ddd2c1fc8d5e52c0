from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from contracts.segmentation import PartitionMode
from segment_pdf.contracts import MAX_INPUT_BYTES


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """
    HTTP surface configuration.

    `from_env` is the only place environment variables are read; the
    application factory takes an explicit instance.
    """

    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    max_upload_bytes: int = MAX_INPUT_BYTES
    mode: PartitionMode = PartitionMode.POSITIONAL
    metadata_file: Path | None = None  # None => in-memory store

    def __post_init__(self) -> None:
        if not (0 < self.port < 65536):
            raise ValueError("port must be within 1..65535")
        if self.max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be a positive integer")
        if self.metadata_file is not None and not isinstance(self.metadata_file, Path):
            raise TypeError("metadata_file must be a pathlib.Path")

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "ApiConfig":
        env = os.environ if environ is None else environ
        metadata_file = env.get("SEGMENT_API_METADATA_FILE")
        return ApiConfig(
            host=env.get("SEGMENT_API_HOST", "0.0.0.0"),
            port=int(env.get("SEGMENT_API_PORT", "5000")),
            debug=env.get("SEGMENT_API_DEBUG", "false").lower() == "true",
            max_upload_bytes=int(float(env.get("SEGMENT_API_MAX_UPLOAD_MB", "10")) * 1024 * 1024),
            mode=PartitionMode(env.get("SEGMENT_API_MODE", PartitionMode.POSITIONAL.value)),
            metadata_file=Path(metadata_file) if metadata_file else None,
        )
