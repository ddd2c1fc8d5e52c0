from __future__ import annotations

import argparse
from pathlib import Path

from contracts.segmentation import PartitionMode
from metadata_store import JsonFileMetadataStore

from .artifacts import build_segments_zip, write_segment_files, write_segment_manifest_json
from .contracts import MAX_INPUT_BYTES, SegmentPdfConfig
from .module import run_segment_pdf_relpath


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sq-segment-pdf",
        description="Split a PDF into sub-documents at its largest vertical whitespace gaps.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Resolved DATA_ROOT path.")
    p.add_argument("--pdf-relpath", required=True, help="PDF path relative to --data-root.")
    p.add_argument("--cuts", required=True, type=int, help="Number of cuts (positive integer).")
    p.add_argument("--out-dir", required=True, type=Path, help="Directory for segment PDFs.")
    p.add_argument("--out-manifest", required=True, type=Path, help="Output manifest JSON file.")
    p.add_argument(
        "--out-zip",
        type=Path,
        default=None,
        help="Optional ZIP archive containing every segment.",
    )
    p.add_argument(
        "--mode",
        choices=[m.value for m in PartitionMode],
        default=PartitionMode.POSITIONAL.value,
        help="positional: boundary i -> page i; spatial: split at the page holding each boundary.",
    )
    p.add_argument(
        "--max-input-bytes",
        type=int,
        default=MAX_INPUT_BYTES,
        help="Reject inputs larger than this (default: 10 MB).",
    )
    p.add_argument(
        "--metadata-file",
        type=Path,
        default=None,
        help="Optional JSON metadata store to record the result in.",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    config = SegmentPdfConfig(
        cuts=args.cuts,
        mode=PartitionMode(args.mode),
        max_input_bytes=args.max_input_bytes,
        data_root=args.data_root,
    )

    store = None
    if args.metadata_file is not None:
        store = JsonFileMetadataStore(args.metadata_file)

    result = run_segment_pdf_relpath(config=config, pdf_relpath=args.pdf_relpath, store=store)

    if result.ok:
        write_segment_files(result=result, out_dir=args.out_dir)
        if args.out_zip is not None:
            args.out_zip.parent.mkdir(parents=True, exist_ok=True)
            args.out_zip.write_bytes(build_segments_zip(result.named_payloads()))
    write_segment_manifest_json(result=result, out_manifest=args.out_manifest)

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
