"""
Development server entrypoint.

Run:
    python -m segment_api.app
"""

from __future__ import annotations

from segment_pdf.logging_utils import get_component_logger

from . import create_app
from .config import ApiConfig

logger = get_component_logger(__name__, component="api")


def main() -> int:
    config = ApiConfig.from_env()
    app = create_app(config)

    logger.info(
        "Starting PDF segmentation API on %s:%d (debug=%s, mode=%s, store=%s)",
        config.host,
        config.port,
        config.debug,
        config.mode.value,
        config.metadata_file or "memory",
    )
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
