"""
notes
=====

Does: Expose the Notes Constraint Extractor and its brand-policy partitioning.
Returns: extract(notes, lexicon) -> TagSet; partition_brands(brands, policy).
Example:
    tags = extract("no candles, include a mug"); tags.avoid_tags == ("candles",)
"""

from __future__ import annotations

from .brands import partition_brands
from .extractor import extract
from .segments import Polarity, Segment, segment_notes

__all__ = [
    "extract",
    "partition_brands",
    "segment_notes",
    "Polarity",
    "Segment",
]

__docformat__ = "google"
