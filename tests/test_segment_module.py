from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from typing import Sequence
from unittest.mock import patch

from contracts.layout import DocumentLayout, PageLayout
from contracts.segmentation import PartitionMode
from metadata_store import InMemoryMetadataStore
from segment_pdf.artifacts import serialize_segment_result
from segment_pdf.contracts import SegmentPdfConfig
from segment_pdf.engines.base import LoadedDocument, PdfDocumentEngine
from segment_pdf.errors import InvalidCutCountError, InvalidDocumentError
from segment_pdf.module import run_segment_pdf_bytes, run_segment_pdf_relpath, segment_document

FAKE_PDF = b"%PDF-FAKE%"


class _FakeDocument(LoadedDocument):
    def __init__(self, pages: list[list[float]], height: float = 100.0) -> None:
        self.layout = DocumentLayout(
            pages=[
                PageLayout(page_index=i, width=100.0, height=height, glyph_ys=list(ys))
                for i, ys in enumerate(pages)
            ]
        )
        self.closed = False

    def page_count(self) -> int:
        return self.layout.page_count()

    def extract_layout(self) -> DocumentLayout:
        return self.layout

    def export_pages(self, page_indices: Sequence[int]) -> bytes:
        return ("%PDF-FAKE:" + ",".join(str(p) for p in page_indices)).encode("ascii")

    def close(self) -> None:
        self.closed = True


class _FakeEngine(PdfDocumentEngine):
    def __init__(self, document: LoadedDocument | None = None, error: Exception | None = None) -> None:
        self.document = document
        self.error = error
        self.opened = 0

    def backend_id(self) -> str:
        return "fake_backend"

    def backend_version(self) -> str | None:
        return "0"

    def open_document(self, *, pdf_bytes: bytes) -> LoadedDocument:
        self.opened += 1
        if self.error is not None:
            raise self.error
        assert self.document is not None
        return self.document


def _three_page_doc() -> _FakeDocument:
    # Page-local coordinates: distinct sorted = [10, 20, 50, 51, 90]
    # gaps = [10, 30, 1, 39]
    return _FakeDocument([[10.0, 20.0], [50.0, 51.0], [90.0, 10.0]])


class TestSegmentDocument(unittest.TestCase):
    def test_positional_mode_uses_page_local_coordinates(self) -> None:
        result = segment_document(_three_page_doc(), 2)

        self.assertEqual(result.cuts, [50.0, 90.0])
        self.assertEqual(result.mode, PartitionMode.POSITIONAL)
        self.assertEqual([s.page_indices for s in result.segments], [[0], [1]])
        self.assertEqual(result.payloads(), [b"%PDF-FAKE:0", b"%PDF-FAKE:1"])
        self.assertEqual(result.page_count, 3)
        self.assertEqual(result.requested_cuts, 2)

    def test_spatial_mode_uses_document_wide_coordinates(self) -> None:
        # Global: [10, 20, 150, 151, 210, 290]; gaps = [10, 130, 1, 59, 80]
        result = segment_document(_three_page_doc(), 2, mode=PartitionMode.SPATIAL)

        self.assertEqual(result.cuts, [150.0, 290.0])
        self.assertEqual([s.page_indices for s in result.segments], [[0], [1], [2]])

        single = segment_document(_three_page_doc(), 1, mode=PartitionMode.SPATIAL)

        self.assertEqual(single.cuts, [150.0])
        self.assertEqual([s.page_indices for s in single.segments], [[0], [1, 2]])
        self.assertEqual(single.payloads(), [b"%PDF-FAKE:0", b"%PDF-FAKE:1,2"])

    def test_non_positive_cuts_rejected_before_layout(self) -> None:
        doc = _three_page_doc()
        with patch.object(doc, "extract_layout") as extract:
            with self.assertRaises(InvalidCutCountError):
                segment_document(doc, 0)
            with self.assertRaises(InvalidCutCountError):
                segment_document(doc, -3)
            extract.assert_not_called()

    def test_missing_or_empty_document_rejected(self) -> None:
        with self.assertRaises(InvalidDocumentError):
            segment_document(None, 1)
        with self.assertRaises(InvalidDocumentError):
            segment_document(_FakeDocument([]), 1)

    def test_under_delivery_is_logged_not_raised(self) -> None:
        doc = _FakeDocument([[1.0, 2.0]])

        with self.assertLogs("segment_pdf.module", level="WARNING") as logs:
            result = segment_document(doc, 5)

        self.assertEqual(result.cuts, [2.0])
        self.assertEqual(len(result.segments), 1)
        self.assertTrue(any("only 1 gap" in line for line in logs.output))

    def test_page_without_text_yields_no_segments(self) -> None:
        result = segment_document(_FakeDocument([[5.0]]), 1)

        self.assertEqual(result.cuts, [])
        self.assertEqual(result.segments, [])


class TestRunSegmentPdfBytes(unittest.TestCase):
    def _config(self, **kw) -> SegmentPdfConfig:
        return SegmentPdfConfig(cuts=kw.pop("cuts", 2), **kw)

    def test_success_records_metadata_and_names_segments(self) -> None:
        store = InMemoryMetadataStore()
        engine = _FakeEngine(_three_page_doc())

        r = run_segment_pdf_bytes(
            config=self._config(), pdf_bytes=FAKE_PDF, file_name="Report 2024.pdf", store=store, engine=engine
        )

        self.assertTrue(r.ok, r.errors)
        self.assertEqual(r.segment_names, ["Report_2024_segment_1.pdf", "Report_2024_segment_2.pdf"])
        self.assertTrue(r.pdf_id.startswith("Report_2024_"))
        self.assertTrue(engine.document.closed)  # type: ignore[union-attr]
        meta = store.get(r.pdf_id)
        assert meta is not None
        self.assertEqual((meta.segment_count, meta.cuts), (2, 2))
        self.assertEqual(r.meta["backend"], "fake_backend")

    def test_pdf_id_is_deterministic(self) -> None:
        cfg = self._config()
        r1 = run_segment_pdf_bytes(config=cfg, pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=_FakeEngine(_three_page_doc()))
        r2 = run_segment_pdf_bytes(config=cfg, pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=_FakeEngine(_three_page_doc()))
        r3 = run_segment_pdf_bytes(
            config=cfg, pdf_bytes=FAKE_PDF + b" ", file_name="a.pdf", engine=_FakeEngine(_three_page_doc())
        )

        self.assertEqual(r1.pdf_id, r2.pdf_id)
        self.assertNotEqual(r1.pdf_id, r3.pdf_id)

    def test_oversized_input_rejected(self) -> None:
        engine = _FakeEngine(_three_page_doc())
        r = run_segment_pdf_bytes(
            config=self._config(max_input_bytes=4), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=engine
        )

        self.assertFalse(r.ok)
        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INPUT_TOO_LARGE"])
        self.assertEqual(engine.opened, 0)

    def test_non_pdf_bytes_rejected(self) -> None:
        r = run_segment_pdf_bytes(
            config=self._config(), pdf_bytes=b"PK\x03\x04", file_name="a.pdf", engine=_FakeEngine(_three_page_doc())
        )

        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INPUT_NOT_PDF"])

    def test_invalid_cut_count_reported_before_loading(self) -> None:
        engine = _FakeEngine(_three_page_doc())
        r = run_segment_pdf_bytes(config=self._config(cuts=0), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=engine)

        self.assertFalse(r.ok)
        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INVALID_CUT_COUNT"])
        self.assertEqual(engine.opened, 0)

    def test_unreadable_document_reported(self) -> None:
        engine = _FakeEngine(error=InvalidDocumentError("Unreadable PDF"))
        r = run_segment_pdf_bytes(config=self._config(), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=engine)

        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INVALID_DOCUMENT"])

    def test_zero_page_document_reported(self) -> None:
        store = InMemoryMetadataStore()
        r = run_segment_pdf_bytes(
            config=self._config(), pdf_bytes=FAKE_PDF, file_name="a.pdf", store=store, engine=_FakeEngine(_FakeDocument([]))
        )

        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INVALID_DOCUMENT"])
        self.assertEqual(store.list_ids(), [])

    def test_unexpected_backend_failure_reported(self) -> None:
        engine = _FakeEngine(error=RuntimeError("boom"))
        r = run_segment_pdf_bytes(config=self._config(), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=engine)

        self.assertEqual([e.code for e in r.errors], ["SEGMENT_BACKEND_FAILED"])
        self.assertIn("boom", r.errors[0].detail["error"])  # type: ignore[index]

    def test_under_delivery_recorded_in_meta(self) -> None:
        r = run_segment_pdf_bytes(
            config=self._config(cuts=5), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=_FakeEngine(_three_page_doc())
        )

        self.assertTrue(r.ok)
        self.assertEqual(len(r.segment_names), 3)
        self.assertEqual(r.meta["under_delivered"]["requested_cuts"], 5)

    def test_spatial_boundaries_on_one_page_are_not_under_delivery(self) -> None:
        # gaps = [10, 20, 40]: all three boundaries land on the only page.
        doc = _FakeDocument([[10.0, 20.0, 40.0, 80.0]])
        r = run_segment_pdf_bytes(
            config=self._config(cuts=3, mode=PartitionMode.SPATIAL),
            pdf_bytes=FAKE_PDF,
            file_name="a.pdf",
            engine=_FakeEngine(doc),
        )

        self.assertTrue(r.ok)
        self.assertEqual(r.segmentation.cuts, [20.0, 40.0, 80.0])  # type: ignore[union-attr]
        self.assertEqual(len(r.segment_names), 1)
        self.assertNotIn("under_delivered", r.meta)

    def test_positional_page_truncation_recorded_in_meta(self) -> None:
        doc = _FakeDocument([[10.0, 20.0, 40.0]])
        r = run_segment_pdf_bytes(
            config=self._config(cuts=2), pdf_bytes=FAKE_PDF, file_name="a.pdf", engine=_FakeEngine(doc)
        )

        self.assertTrue(r.ok)
        self.assertEqual(len(r.segment_names), 1)
        self.assertEqual(
            r.meta["under_delivered"], {"requested_cuts": 2, "boundaries": 2, "segments": 1}
        )

    def test_manifest_bytes_stable_across_runs(self) -> None:
        cfg = self._config()
        with patch("segment_pdf.module._get_engine", side_effect=lambda _name: _FakeEngine(_three_page_doc())):
            r1 = run_segment_pdf_bytes(config=cfg, pdf_bytes=FAKE_PDF, file_name="input.pdf")
            r2 = run_segment_pdf_bytes(config=cfg, pdf_bytes=FAKE_PDF, file_name="input.pdf")

        b1 = serialize_segment_result(r1)
        b2 = serialize_segment_result(r2)
        self.assertEqual(b1, b2)

        d = json.loads(b1)
        self.assertEqual(d["segmentation"]["cuts"], [50.0, 90.0])
        self.assertEqual(
            [s["file_name"] for s in d["segmentation"]["segments"]],
            ["input_segment_1.pdf", "input_segment_2.pdf"],
        )
        self.assertEqual(d["segmentation"]["segments"][0]["size_bytes"], len(b"%PDF-FAKE:0"))


class TestRunSegmentPdfRelpath(unittest.TestCase):
    def test_reads_pdf_under_data_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "docs").mkdir()
            (root / "docs" / "input.pdf").write_bytes(FAKE_PDF)
            cfg = SegmentPdfConfig(cuts=1, data_root=root)

            with patch("segment_pdf.module._get_engine", return_value=_FakeEngine(_three_page_doc())):
                r = run_segment_pdf_relpath(config=cfg, pdf_relpath="docs/input.pdf")

        self.assertTrue(r.ok, r.errors)
        self.assertEqual(r.source_pdf_name, "input.pdf")
        self.assertEqual(r.segment_names, ["input_segment_1.pdf"])

    def test_relpath_failures(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            cfg = SegmentPdfConfig(cuts=1, data_root=Path(tmp))

            cases = {
                "notes.txt": "SEGMENT_INPUT_NOT_PDF",
                "../outside.pdf": "SEGMENT_DATA_ACCESS_ERROR",
                "/etc/abs.pdf": "SEGMENT_DATA_ACCESS_ERROR",
                "missing.pdf": "SEGMENT_INPUT_NOT_FOUND",
            }
            for relpath, code in cases.items():
                with self.subTest(relpath=relpath):
                    r = run_segment_pdf_relpath(config=cfg, pdf_relpath=relpath)
                    self.assertFalse(r.ok)
                    self.assertEqual([e.code for e in r.errors], [code])

    def test_oversized_file_rejected_without_reading(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "big.pdf").write_bytes(FAKE_PDF + b"0" * 64)
            cfg = SegmentPdfConfig(cuts=1, data_root=root, max_input_bytes=16)

            with patch.object(Path, "read_bytes", side_effect=AssertionError("file was read")):
                r = run_segment_pdf_relpath(config=cfg, pdf_relpath="big.pdf")

        self.assertFalse(r.ok)
        self.assertEqual([e.code for e in r.errors], ["SEGMENT_INPUT_TOO_LARGE"])
        self.assertEqual(r.errors[0].detail["size_bytes"], len(FAKE_PDF) + 64)  # type: ignore[index]

    def test_missing_data_root(self) -> None:
        r = run_segment_pdf_relpath(config=SegmentPdfConfig(cuts=1), pdf_relpath="a.pdf")
        self.assertEqual([e.code for e in r.errors], ["SEGMENT_DATA_ACCESS_ERROR"])


class TestSegmentPdfConfig(unittest.TestCase):
    def test_validation(self) -> None:
        with self.assertRaises(TypeError):
            SegmentPdfConfig(cuts="2")  # type: ignore[arg-type]
        with self.assertRaises(ValueError):
            SegmentPdfConfig(cuts=1, max_input_bytes=0)
        with self.assertRaises(TypeError):
            SegmentPdfConfig(cuts=1, data_root="/tmp")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
