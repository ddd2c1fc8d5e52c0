from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from contracts.segmentation import (
    PartitionMode,
    Segment,
    SegmentationMetadata,
    SegmentationResult,
)

from .contracts import SegmentEngineName, SegmentPdfConfig, SegmentPdfError, SegmentPdfResult
from .cut_selector import select_cuts
from .data_access import (
    DataAccessError,
    compute_pdf_id,
    resolve_under_data_root,
    segment_file_name,
    sha256_bytes,
)
from .engines import LoadedDocument, PdfDocumentEngine, Pypdfium2Engine
from .errors import InvalidCutCountError, InvalidDocumentError, require_positive_cuts
from .logging_utils import get_component_logger
from .partitioner import partition, partition_spatial

if TYPE_CHECKING:
    from metadata_store.base import MetadataStore

logger = get_component_logger(__name__, component="segmentation")


def _get_engine(engine: SegmentEngineName) -> PdfDocumentEngine:
    if engine == SegmentEngineName.PYPDFIUM2:
        return Pypdfium2Engine()
    raise ValueError(f"Unsupported document engine: {engine}")


def segment_document(
    document: LoadedDocument | None,
    cuts: int,
    *,
    mode: PartitionMode = PartitionMode.POSITIONAL,
) -> SegmentationResult:
    """
    Segmentation core: layout -> cut boundaries -> sub-documents.

    Raises InvalidCutCountError / InvalidDocumentError before any gap
    computation. Everything after validation degrades gracefully: fewer
    boundaries or sub-documents than requested is not an error.
    """

    require_positive_cuts(cuts)
    if document is None:
        raise InvalidDocumentError("No document provided.")

    page_count = document.page_count()
    if page_count <= 0:
        raise InvalidDocumentError("Document has no pages.")

    layout = document.extract_layout()

    if mode == PartitionMode.POSITIONAL:
        boundaries = select_cuts(layout.flat_coordinates(), cuts)
        payloads = partition(document, boundaries)
        segments = [Segment(index=i, page_indices=[i], payload=p) for i, p in enumerate(payloads)]
    elif mode == PartitionMode.SPATIAL:
        boundaries = select_cuts(layout.global_coordinates(), cuts)
        segments = partition_spatial(document, boundaries, layout)
    else:
        raise ValueError(f"Unsupported partition mode: {mode}")

    if len(boundaries) < cuts:
        logger.warning(
            "Requested %d cut(s), only %d gap(s) available; returning %d boundary(ies)",
            cuts,
            len(boundaries),
            len(boundaries),
        )

    logger.info(
        "Segmented %d page(s) into %d sub-document(s) (mode=%s, cuts=%s)",
        page_count,
        len(segments),
        mode.value,
        boundaries,
    )

    return SegmentationResult(
        segments=segments,
        cuts=boundaries,
        requested_cuts=cuts,
        mode=mode,
        page_count=page_count,
    )


def _failed(
    *,
    config: SegmentPdfConfig,
    pdf_id: str,
    source_pdf_name: str,
    code: str,
    message: str,
    detail: dict[str, Any] | None = None,
    meta: dict[str, Any] | None = None,
) -> SegmentPdfResult:
    logger.error("Segmentation failed [%s]: %s", code, message)
    return SegmentPdfResult(
        pdf_id=pdf_id,
        ok=False,
        engine=config.engine,
        source_pdf_name=source_pdf_name,
        requested_cuts=config.cuts,
        mode=config.mode,
        segment_names=[],
        segmentation=None,
        errors=[SegmentPdfError(code=code, message=message, detail=detail)],
        meta=meta or {},
    )


def run_segment_pdf_bytes(
    *,
    config: SegmentPdfConfig,
    pdf_bytes: bytes,
    file_name: str,
    store: MetadataStore | None = None,
    engine: PdfDocumentEngine | None = None,
) -> SegmentPdfResult:
    """
    Caller-side entrypoint around the segmentation core.

    Input: raw PDF bytes as uploaded/read, plus the original file name
    Output: sub-document payloads + JSON-ready result; when `store` is given,
    the document's metadata record is written to it on success.
    """

    pdf_id = compute_pdf_id(file_name=file_name, pdf_bytes=pdf_bytes)
    common = {"config": config, "pdf_id": pdf_id, "source_pdf_name": file_name}

    if len(pdf_bytes) > config.max_input_bytes:
        return _failed(
            **common,
            code="SEGMENT_INPUT_TOO_LARGE",
            message=f"File size exceeds the limit of {config.max_input_bytes} bytes.",
            detail={"size_bytes": len(pdf_bytes), "max_input_bytes": config.max_input_bytes},
        )

    if not pdf_bytes.startswith(b"%PDF"):
        return _failed(
            **common,
            code="SEGMENT_INPUT_NOT_PDF",
            message="Input does not declare itself as a PDF.",
            detail={"file_name": file_name},
        )

    try:
        require_positive_cuts(config.cuts)
    except InvalidCutCountError as e:
        return _failed(**common, code=e.code, message=str(e), detail={"cuts": config.cuts})

    engine = engine or _get_engine(config.engine)
    meta: dict[str, Any] = {
        "backend": engine.backend_id(),
        "backend_version": engine.backend_version(),
        "source_sha256": sha256_bytes(pdf_bytes),
    }

    try:
        document = engine.open_document(pdf_bytes=pdf_bytes)
    except InvalidDocumentError as e:
        return _failed(**common, code=e.code, message=str(e), meta=meta)
    except Exception as e:
        logger.exception("Backend failed to open %s", file_name)
        return _failed(
            **common,
            code="SEGMENT_BACKEND_FAILED",
            message="Failed to open PDF",
            detail={"error": repr(e)},
            meta=meta,
        )

    try:
        with document:
            segmentation = segment_document(document, config.cuts, mode=config.mode)
    except (InvalidDocumentError, InvalidCutCountError) as e:
        return _failed(**common, code=e.code, message=str(e), meta=meta)
    except Exception as e:
        logger.exception("Segmentation backend failure for %s", file_name)
        return _failed(
            **common,
            code="SEGMENT_BACKEND_FAILED",
            message="PDF segmentation failed",
            detail={"error": repr(e)},
            meta=meta,
        )

    # Spatial mode folds boundaries that share a page into one segment.
    short_boundaries = len(segmentation.cuts) < config.cuts
    short_segments = config.mode == PartitionMode.POSITIONAL and len(segmentation.segments) < len(
        segmentation.cuts
    )
    if short_boundaries or short_segments:
        meta["under_delivered"] = {
            "requested_cuts": config.cuts,
            "boundaries": len(segmentation.cuts),
            "segments": len(segmentation.segments),
        }

    segment_names = [
        segment_file_name(file_name=file_name, index=s.index) for s in segmentation.segments
    ]

    if store is not None:
        store.put(
            SegmentationMetadata(
                pdf_id=pdf_id,
                segment_count=len(segmentation.segments),
                cuts=config.cuts,
            )
        )

    return SegmentPdfResult(
        pdf_id=pdf_id,
        ok=True,
        engine=config.engine,
        source_pdf_name=file_name,
        requested_cuts=config.cuts,
        mode=config.mode,
        segment_names=segment_names,
        segmentation=segmentation,
        errors=[],
        meta=meta,
    )


def run_segment_pdf_relpath(
    *,
    config: SegmentPdfConfig,
    pdf_relpath: str,
    store: MetadataStore | None = None,
) -> SegmentPdfResult:
    """
    Segment a PDF referenced by a relative path under `config.data_root`.
    """

    file_name = pdf_relpath.replace("\\", "/").split("/")[-1]
    placeholder_id = compute_pdf_id(file_name=file_name, pdf_bytes=b"")
    common = {"config": config, "pdf_id": placeholder_id, "source_pdf_name": file_name}

    if not pdf_relpath.lower().endswith(".pdf"):
        return _failed(
            **common,
            code="SEGMENT_INPUT_NOT_PDF",
            message="Only PDFs are accepted (by .pdf extension)",
            detail={"pdf_relpath": pdf_relpath},
        )

    if config.data_root is None:
        return _failed(
            **common,
            code="SEGMENT_DATA_ACCESS_ERROR",
            message="data_root must be configured for relpath input",
            detail={"pdf_relpath": pdf_relpath},
        )

    try:
        pdf_file: Path = resolve_under_data_root(data_root=config.data_root, relpath=pdf_relpath)
    except DataAccessError as e:
        return _failed(
            **common,
            code="SEGMENT_DATA_ACCESS_ERROR",
            message=str(e),
            detail={"data_root": str(config.data_root), "relpath": pdf_relpath},
        )

    if not pdf_file.is_file():
        return _failed(
            **common,
            code="SEGMENT_INPUT_NOT_FOUND",
            message="Input PDF not found",
            detail={"pdf_relpath": pdf_relpath},
        )

    size_bytes = pdf_file.stat().st_size
    if size_bytes > config.max_input_bytes:
        return _failed(
            **common,
            code="SEGMENT_INPUT_TOO_LARGE",
            message=f"File size exceeds the limit of {config.max_input_bytes} bytes.",
            detail={"size_bytes": size_bytes, "max_input_bytes": config.max_input_bytes},
        )

    return run_segment_pdf_bytes(
        config=config,
        pdf_bytes=pdf_file.read_bytes(),
        file_name=file_name,
        store=store,
    )
