"""
HTTP surface for gap-based PDF segmentation.

Usage:
    from segment_api import create_app
    app = create_app()

Production:
    gunicorn "segment_api:create_app()"
"""

from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from metadata_store import InMemoryMetadataStore, JsonFileMetadataStore, MetadataStore
from segment_pdf.engines import PdfDocumentEngine
from segment_pdf.logging_utils import get_component_logger

from .config import ApiConfig
from .routes import create_blueprint, format_limit

logger = get_component_logger(__name__, component="api")

API_PREFIX = "/api/pdf"
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def _default_store(config: ApiConfig) -> MetadataStore:
    if config.metadata_file is not None:
        return JsonFileMetadataStore(config.metadata_file)
    return InMemoryMetadataStore()


def create_app(
    config: ApiConfig | None = None,
    *,
    store: MetadataStore | None = None,
    engine: PdfDocumentEngine | None = None,
) -> Flask:
    config = config or ApiConfig()
    store = store if store is not None else _default_store(config)

    app = Flask(__name__)
    # Request body cap: the PDF limit plus room for the multipart envelope and form fields.
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
    app.extensions["segment_api"] = {"config": config, "store": store}

    app.register_blueprint(
        create_blueprint(config=config, store=store, engine=engine),
        url_prefix=API_PREFIX,
    )

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(_e):
        return (
            jsonify(
                {
                    "error": "SEGMENT_INPUT_TOO_LARGE",
                    "message": f"File size exceeds the limit of {format_limit(config.max_upload_bytes)}.",
                }
            ),
            400,
        )

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled exception")
        return jsonify({"error": "INTERNAL_SERVER_ERROR", "message": str(e)}), 500

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "service": "pdf-segmentation"})

    return app


__all__ = ["API_PREFIX", "MULTIPART_OVERHEAD_BYTES", "ApiConfig", "create_app"]
