"""
Canonical contracts shared by the segmentation stage, the metadata store and
the HTTP surface.

Stage code should consume/produce these contract objects (not ad-hoc dicts).
"""

from .layout import DocumentLayout, PageLayout
from .segmentation import PartitionMode, Segment, SegmentationMetadata, SegmentationResult

__all__ = [
    "DocumentLayout",
    "PageLayout",
    "PartitionMode",
    "Segment",
    "SegmentationMetadata",
    "SegmentationResult",
]
