"""
PDF segmentation routes.

- POST   /segment-pdf                   upload + segment, returns a ZIP
- GET    /pdf-metadata/<pdf_id>         metadata lookup
- PUT    /update-segmentation/<pdf_id>  replace cut count (?cuts=N)
- PATCH  /modify-segmentation/<pdf_id>  partial update ({"cuts": N})
- DELETE /delete-pdf/<pdf_id>           drop metadata
"""

from __future__ import annotations

import io

from flask import Blueprint, jsonify, request, send_file

from metadata_store import MetadataNotFoundError, MetadataStore
from segment_pdf.artifacts import build_segments_zip
from segment_pdf.contracts import SegmentPdfConfig
from segment_pdf.engines import PdfDocumentEngine
from segment_pdf.errors import InvalidCutCountError
from segment_pdf.logging_utils import get_component_logger
from segment_pdf.module import run_segment_pdf_bytes

from .config import ApiConfig

logger = get_component_logger(__name__, component="api")

PDF_MIMETYPE = "application/pdf"
ZIP_DOWNLOAD_NAME = "segmented_pdfs.zip"

# Error codes that indicate a server-side failure rather than bad input.
_SERVER_ERROR_CODES = frozenset({"SEGMENT_BACKEND_FAILED"})


def _error(code: str, message: str, status: int):
    return jsonify({"error": code, "message": message}), status


def format_limit(n_bytes: int) -> str:
    mb = 1024 * 1024
    return f"{n_bytes // mb} MB" if n_bytes % mb == 0 else f"{n_bytes} bytes"


def _parse_cuts(raw) -> int | None:
    try:
        cuts = int(raw)
    except (TypeError, ValueError):
        return None
    return cuts if cuts > 0 else None


def create_blueprint(
    *,
    config: ApiConfig,
    store: MetadataStore,
    engine: PdfDocumentEngine | None = None,
) -> Blueprint:
    bp = Blueprint("segment_pdf", __name__)

    @bp.route("/segment-pdf", methods=["POST"])
    def segment_pdf():
        upload = request.files.get("file")
        if upload is None:
            return _error("SEGMENT_INPUT_MISSING", "No file uploaded.", 400)

        if upload.mimetype != PDF_MIMETYPE:
            return _error("SEGMENT_INPUT_NOT_PDF", "Invalid file type. Only PDF files are accepted.", 400)

        pdf_bytes = upload.read()
        if len(pdf_bytes) > config.max_upload_bytes:
            return _error(
                "SEGMENT_INPUT_TOO_LARGE",
                f"File size exceeds the limit of {format_limit(config.max_upload_bytes)}.",
                400,
            )

        cuts = _parse_cuts(request.form.get("cuts"))
        if cuts is None:
            return _error(InvalidCutCountError.code, "The number of cuts must be a positive integer.", 400)

        seg_config = SegmentPdfConfig(cuts=cuts, mode=config.mode, max_input_bytes=config.max_upload_bytes)
        result = run_segment_pdf_bytes(
            config=seg_config,
            pdf_bytes=pdf_bytes,
            file_name=upload.filename or "upload.pdf",
            store=store,
            engine=engine,
        )

        if not result.ok:
            err = result.errors[0]
            status = 500 if err.code in _SERVER_ERROR_CODES else 400
            return _error(err.code, err.message, status)

        logger.info("Segmented %s into %d file(s)", result.pdf_id, len(result.segment_names))

        archive = build_segments_zip(result.named_payloads())
        response = send_file(
            io.BytesIO(archive),
            mimetype="application/zip",
            as_attachment=True,
            download_name=ZIP_DOWNLOAD_NAME,
        )
        response.status_code = 201
        response.headers["X-Pdf-Id"] = result.pdf_id
        return response

    @bp.route("/pdf-metadata/<pdf_id>", methods=["GET"])
    def get_pdf_metadata(pdf_id: str):
        metadata = store.get(pdf_id)
        if metadata is None:
            return _error("METADATA_NOT_FOUND", "PDF metadata not found", 404)
        return jsonify(metadata.to_dict())

    @bp.route("/update-segmentation/<pdf_id>", methods=["PUT"])
    def update_segmentation(pdf_id: str):
        cuts = _parse_cuts(request.args.get("cuts", request.form.get("cuts")))
        if cuts is None:
            return _error(InvalidCutCountError.code, "The number of cuts must be a positive integer.", 400)
        try:
            metadata = store.update_cuts(pdf_id, cuts)
        except MetadataNotFoundError:
            return _error("METADATA_NOT_FOUND", "PDF metadata not found", 404)
        return jsonify({"message": "Segmentation updated successfully", "metadata": metadata.to_dict()})

    @bp.route("/modify-segmentation/<pdf_id>", methods=["PATCH"])
    def modify_segmentation(pdf_id: str):
        updates = request.get_json(silent=True)
        if not isinstance(updates, dict):
            return _error("METADATA_BAD_REQUEST", "JSON object body required", 400)
        try:
            metadata = store.modify(pdf_id, updates)
        except MetadataNotFoundError:
            return _error("METADATA_NOT_FOUND", "PDF metadata not found", 404)
        except InvalidCutCountError as e:
            return _error(e.code, str(e), 400)
        except ValueError as e:
            return _error("METADATA_BAD_REQUEST", str(e), 400)
        return jsonify({"message": "Segmentation details modified successfully", "metadata": metadata.to_dict()})

    @bp.route("/delete-pdf/<pdf_id>", methods=["DELETE"])
    def delete_pdf(pdf_id: str):
        if not store.delete(pdf_id):
            return _error("METADATA_NOT_FOUND", "PDF metadata not found", 404)
        return "", 204

    return bp
