"""
colors.py.

Does: Scan note segments for palette vocabulary words (case-insensitive, whole word).
Returns: extract_colors() → (requested colors, excluded colors), each de-duplicated
         in order of first appearance.
"""

from __future__ import annotations

from collections.abc import Iterable

from gift_preview.compiler.general.token import word_pattern
from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.notes.segments import Segment

__all__ = ["extract_colors"]


def extract_colors(
    segments: Iterable[Segment], lexicon: Lexicon
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    pattern = word_pattern(lexicon.colors)
    wanted: list[str] = []
    excluded: list[str] = []
    if pattern is None:
        return (), ()
    for seg in segments:
        bucket = excluded if seg.is_avoid else wanted
        for m in pattern.finditer(seg.text):
            color = m.group(0).lower()
            if color not in bucket:
                bucket.append(color)
    # a color both requested and excluded is treated as excluded
    return tuple(c for c in wanted if c not in excluded), tuple(excluded)
