# src/gift_preview/compiler/notes/segments.py

"""
segments.py.

Does: Cut free-text notes into polarity-tagged segments. Each clause is scanned
      for include/avoid trigger phrases ("no X", "without X", "include X",
      "focus on X" ...); the phrase a trigger captures runs to the next trigger
      or to the clause end. Text with no trigger ahead of it is a bare list item
      and counts as an include.

Returns: Segment tuples in text order.
Used by: Item tagging, brand/color/theme scans (a signal inside an exclusion
         phrase never counts as a request).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import NamedTuple

from gift_preview.compiler.general.token import split_clauses, word_pattern
from gift_preview.compiler.lexicon.constants import AVOID_TRIGGERS, INCLUDE_TRIGGERS

__all__ = [
    "Polarity",
    "Segment",
    "segment_notes",
]

__docformat__ = "google"

# ── Logging ──────────────────────────────────────────────────────────────────
log = logging.getLogger(__name__)

_AVOID = frozenset(AVOID_TRIGGERS)
_TRIGGER_RE = word_pattern(AVOID_TRIGGERS + INCLUDE_TRIGGERS)


class Polarity(str, Enum):
    INCLUDE = "include"
    AVOID = "avoid"
    BARE = "bare"


class Segment(NamedTuple):
    polarity: Polarity
    text: str
    trigger: str | None = None

    @property
    def is_avoid(self) -> bool:
        return self.polarity is Polarity.AVOID


def _segment_clause(clause: str) -> list[Segment]:
    """Does: Split one clause at its trigger phrases."""
    matches = list(_TRIGGER_RE.finditer(clause)) if _TRIGGER_RE else []
    if not matches:
        return [Segment(Polarity.BARE, clause)]

    out: list[Segment] = []
    prefix = clause[: matches[0].start()].strip()
    if prefix:
        out.append(Segment(Polarity.BARE, prefix))

    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(clause)
        captured = clause[m.end() : end].strip()
        if not captured:
            continue
        trigger = m.group(0).lower()
        polarity = Polarity.AVOID if trigger in _AVOID else Polarity.INCLUDE
        out.append(Segment(polarity, captured, trigger))
    return out


def segment_notes(notes: str | None) -> list[Segment]:
    """
    Does: Clause-split the notes and segment every clause by trigger phrase.
    Returns: Segments in text order; [] for empty notes.
    """
    segments: list[Segment] = []
    for clause in split_clauses(notes):
        segments.extend(_segment_clause(clause))
    log.debug("segmented notes into %d segment(s)", len(segments))
    return segments
