"""
themes.py.

Does: Detect special composition modes (themed/horror-adjacent atmosphere,
      "surprise me") and the first matching interest hint in note segments.
Returns: detect_modes() → frozenset[SpecialMode]; detect_interest() → tuple[str, ...].
"""

from __future__ import annotations

from collections.abc import Sequence

from gift_preview.compiler.general.token import word_pattern
from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.notes.segments import Segment
from gift_preview.compiler.types import SpecialMode

__all__ = ["detect_modes", "detect_interest"]


def _requested_text(segments: Sequence[Segment]) -> str:
    return " | ".join(s.text for s in segments if not s.is_avoid)


def _mentions(text: str, terms: Sequence[str]) -> bool:
    pattern = word_pattern(terms)
    return bool(pattern and pattern.search(text))


def detect_modes(segments: Sequence[Segment], lexicon: Lexicon) -> frozenset[SpecialMode]:
    text = _requested_text(segments)
    modes: set[SpecialMode] = set()
    if _mentions(text, lexicon.themed_keywords):
        modes.add(SpecialMode.THEMED)
    if _mentions(text, lexicon.surprise_keywords):
        modes.add(SpecialMode.SURPRISE)
    return frozenset(modes)


def detect_interest(segments: Sequence[Segment], lexicon: Lexicon) -> tuple[str, ...]:
    """Does: Tag of the first interest group (lexicon order) mentioned outside an exclusion."""
    text = _requested_text(segments)
    for hint in lexicon.interest_hints:
        if _mentions(text, hint.keywords):
            return (hint.tag,)
    return ()
