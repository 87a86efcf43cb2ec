"""Highlights and annotations over rendered notes."""

from .layer import AnnotationLayer
from .segments import Segment, SegmentIndex, plain_text, scan_segments

__all__ = [
    "AnnotationLayer",
    "Segment",
    "SegmentIndex",
    "plain_text",
    "scan_segments",
]
