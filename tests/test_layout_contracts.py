from __future__ import annotations

import unittest

from contracts.layout import DocumentLayout, PageLayout


def _layout() -> DocumentLayout:
    return DocumentLayout(
        pages=[
            PageLayout(page_index=0, width=612.0, height=100.0, glyph_ys=[10.0, 30.0]),
            PageLayout(page_index=1, width=612.0, height=200.0, glyph_ys=[]),
            PageLayout(page_index=2, width=612.0, height=100.0, glyph_ys=[5.0, 10.0]),
        ]
    )


class TestDocumentLayout(unittest.TestCase):
    def test_flat_coordinates_keep_page_local_values(self) -> None:
        self.assertEqual(_layout().flat_coordinates(), [10.0, 30.0, 5.0, 10.0])

    def test_global_coordinates_offset_by_page_heights(self) -> None:
        layout = _layout()

        self.assertEqual(layout.page_offsets(), [0.0, 100.0, 300.0, 400.0])
        self.assertEqual(layout.global_coordinates(), [10.0, 30.0, 305.0, 310.0])

    def test_page_for_coordinate(self) -> None:
        layout = _layout()

        self.assertEqual(layout.page_for_coordinate(0.0), 0)
        self.assertEqual(layout.page_for_coordinate(99.9), 0)
        self.assertEqual(layout.page_for_coordinate(100.0), 1)
        self.assertEqual(layout.page_for_coordinate(299.0), 1)
        self.assertEqual(layout.page_for_coordinate(305.0), 2)
        # Past the end / before the start clamp to the outer pages.
        self.assertEqual(layout.page_for_coordinate(10_000.0), 2)
        self.assertEqual(layout.page_for_coordinate(-1.0), 0)

    def test_page_for_coordinate_requires_pages(self) -> None:
        with self.assertRaises(ValueError):
            DocumentLayout(pages=[]).page_for_coordinate(1.0)

    def test_dict_round_trip(self) -> None:
        layout = _layout()
        self.assertEqual(DocumentLayout.from_dict(layout.to_dict()), layout)


if __name__ == "__main__":
    unittest.main()
