"""
Board module - dartboard geometry and coordinate scoring.
"""
from .geometry import SegmentMapper

__all__ = [
    "SegmentMapper",
]
