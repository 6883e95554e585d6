"""
age.py.

Does: Read an explicit age ("10 years old", "7yo", "a 12-year-old") from notes and
      map it to one of the fixed age bands. A bare number is never an age.
Returns: extract_age() → int | None, age_band_for() → AgeBand | None.
"""

from __future__ import annotations

import re
from functools import lru_cache

from gift_preview.compiler.general.token import normalize_text
from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.types import AgeBand

__all__ = ["extract_age", "age_band_for"]


@lru_cache(maxsize=8)
def _age_re(markers: tuple[str, ...]) -> re.Pattern[str]:
    body = "|".join(re.escape(m) for m in sorted(markers, key=len, reverse=True))
    return re.compile(rf"(?<![\d.])(\d{{1,2}})\s*(?:-\s*)?(?:{body})(?![a-z])")


def extract_age(notes: str | None, lexicon: Lexicon) -> int | None:
    """Does: First integer in [1, 99] directly followed by an age marker, else None."""
    text = normalize_text(notes)
    if not text:
        return None
    for m in _age_re(lexicon.age_markers).finditer(text):
        age = int(m.group(1))
        if 1 <= age <= 99:
            return age
    return None


def age_band_for(age: int | None, lexicon: Lexicon) -> AgeBand | None:
    if age is None:
        return None
    return lexicon.band_for_age(age).band
