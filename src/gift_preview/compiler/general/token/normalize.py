# compiler/general/token/normalize.py
# ──────────────────────────────────────────────────────────────
# Shared utilities for notes text normalization and clause splitting
# ──────────────────────────────────────────────────────────────
"""
normalize.

Does: Provide deterministic text normalization (Unicode hygiene, lowercasing,
      whitespace collapsing), clause splitting for free-text notes, and
      whole-word pattern building for vocabulary scans.
Returns: normalize_text(), split_clauses(), word_pattern().
Used by: Notes extractor (age/colors/brands/items/time) and lexicon key lookup.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from functools import lru_cache

__all__ = [
    "normalize_text",
    "split_clauses",
    "word_pattern",
]

# Common “fancy” Unicode punctuation we want to normalize early
_FANCY_HYPHENS = {"‐", "‑", "‒", "–", "—", "−"}  # ‐ - ‒ – — −
_FANCY_QUOTES = {"‘", "’", "‛", "′", "ʼ"}  # ‘ ’ ‛ ′ ʼ

# Clause boundaries: , ; ! ? newlines, and a period that does not sit between digits
_CLAUSE_SPLIT_RE = re.compile(r"[,;!?\n\r]+|\.(?!\d)|(?<!\d)\.")
_WS_RE = re.compile(r"\s+")


# ──────────────────────────────────────────────────────────────
# 0) Light Unicode hygiene
# ──────────────────────────────────────────────────────────────


def _unicode_hygiene(s: str) -> str:
    """
    Does: Apply light Unicode normalization:
          - NFKC fold
          - map fancy hyphens to ASCII '-'
          - map curly quotes to ASCII "'"
    Returns: Cleaned string (best-effort).
    """
    if not isinstance(s, str):
        return ""
    s = unicodedata.normalize("NFKC", s)
    for ch in _FANCY_HYPHENS:
        s = s.replace(ch, "-")
    for ch in _FANCY_QUOTES:
        s = s.replace(ch, "'")
    return s


# ──────────────────────────────────────────────────────────────
# 1) TEXT NORMALIZATION
# ──────────────────────────────────────────────────────────────


def normalize_text(text: str | None, *, lower: bool = True) -> str:
    """
    Does: Normalize free text:
          - Unicode hygiene (NFKC; map fancy hyphens/quotes)
          - lowercase (optional) + trim
          - collapse internal whitespace (newlines included)
    Returns: Normalized text, "" for None/non-str input.
    """
    if not isinstance(text, str):
        return ""
    s = _unicode_hygiene(text)
    if lower:
        s = s.lower()
    return _WS_RE.sub(" ", s).strip()


# ──────────────────────────────────────────────────────────────
# 2) CLAUSES
# ──────────────────────────────────────────────────────────────


def split_clauses(text: str | None) -> list[str]:
    """
    Does: Split notes into clauses on , ; ! ? newlines and sentence periods.
          A period between digits ("7.30") is kept so time tokens survive.
    Returns: Normalized, non-empty clauses in text order.
    """
    if not isinstance(text, str):
        return []
    raw = _unicode_hygiene(text).lower()
    parts = _CLAUSE_SPLIT_RE.split(raw)
    return [c for c in (_WS_RE.sub(" ", p).strip() for p in parts) if c]


# ──────────────────────────────────────────────────────────────
# 3) VOCABULARY PATTERNS
# ──────────────────────────────────────────────────────────────


@lru_cache(maxsize=256)
def _compile_alternation(terms: tuple[str, ...]) -> re.Pattern[str]:
    body = "|".join(re.escape(t) for t in terms)
    return re.compile(rf"(?<![\w'-])(?:{body})(?![\w'-])", re.IGNORECASE)


def word_pattern(terms: Iterable[str]) -> re.Pattern[str] | None:
    """
    Does: Build one whole-word alternation, longest term first, so multi-word
          terms are consumed before their head noun during a left-to-right scan.
    Returns: Compiled pattern (cached per term set) or None for an empty vocabulary.
    """
    cleaned = {normalize_text(t) for t in terms}
    cleaned.discard("")
    if not cleaned:
        return None
    ordered = tuple(sorted(cleaned, key=lambda t: (-len(t), t)))
    return _compile_alternation(ordered)
