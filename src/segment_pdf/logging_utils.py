from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOG_DIR_ENV = "SEGMENT_PDF_LOG_DIR"

_COMPONENT_LOG_FILES = {
    "segmentation": "segmentation.log",
    "store": "store.log",
    "api": "api.log",
}

_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def _resolve_component_log_path(component: str | None) -> Path | None:
    log_dir = os.getenv(_LOG_DIR_ENV)
    if not log_dir:
        return None
    file_name = _COMPONENT_LOG_FILES.get(component or "", "segment_pdf.log")
    return Path(log_dir) / file_name


def get_logger(name: str, level: int = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(name)

    if getattr(logger, "_segment_pdf_configured", False):
        logger.setLevel(level)
        return logger

    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError:
            logger.exception("Failed to initialize file logging at %s", log_file)

    logger._segment_pdf_configured = True  # type: ignore[attr-defined]
    return logger


def get_component_logger(name: str, component: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Logger for one module, writing to stderr and, when SEGMENT_PDF_LOG_DIR is
    set, to a rotating per-component file under that directory.
    """
    return get_logger(name, level=level, log_file=_resolve_component_log_path(component))
