# src/gift_preview/compiler/notes/items.py

"""
items.py.

Does: Map polarity-tagged note segments onto canonical item tags through the
      taxonomy synonym sets ("sneakers"/"shoes" → footwear), keep first-match
      order, resolve include/avoid collisions (avoid wins) and cap the lists.

Returns: ItemTags(include_tags, include_terms, avoid_tags).
Used by: Notes extractor.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import NamedTuple

from gift_preview.compiler.general.token import word_pattern
from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import MAX_AVOID_TAGS, MAX_INCLUDE_TAGS, Lexicon
from gift_preview.compiler.notes.segments import Segment

__all__ = ["ItemTags", "match_item_terms", "tag_items"]

log = logging.getLogger(__name__)


class ItemTags(NamedTuple):
    include_tags: tuple[str, ...]
    include_terms: tuple[str, ...]
    avoid_tags: tuple[str, ...]


def match_item_terms(text: str, lexicon: Lexicon) -> list[tuple[str, str]]:
    """
    Does: Find every taxonomy synonym in `text` (whole words, longest first, left to right).
    Returns: [(tag, literal term), ...] in order of appearance.
    """
    pattern = word_pattern(lexicon.synonym_to_tag)
    if pattern is None or not text:
        return []
    out: list[tuple[str, str]] = []
    for m in pattern.finditer(text):
        term = m.group(0).lower()
        tag = lexicon.synonym_to_tag.get(term)
        if tag:
            out.append((tag, term))
    return out


def tag_items(segments: Iterable[Segment], lexicon: Lexicon) -> ItemTags:
    """
    Does: Collect include/avoid tags from segments in first-match order.
          The avoid cap applies first; a tag both requested and kept as
          excluded is then dropped from the include side, independent of
          which clause came first. The include cap applies last.
    """
    include: dict[str, str] = {}
    avoid: list[str] = []
    for seg in segments:
        for tag, term in match_item_terms(seg.text, lexicon):
            if seg.is_avoid:
                if tag not in avoid:
                    avoid.append(tag)
                    debug(f"avoid tag {tag!r} from {seg.trigger!r} … {term!r}", "notes")
            elif tag not in include:
                include[tag] = term
                debug(f"include tag {tag!r} from {seg.polarity.value} {term!r}", "notes")

    avoid = avoid[:MAX_AVOID_TAGS]
    collisions = [t for t in include if t in avoid]
    for tag in collisions:
        del include[tag]
        log.info("Tag %r both requested and excluded in notes; exclusion wins", tag)

    kept = list(include.items())[:MAX_INCLUDE_TAGS]
    return ItemTags(
        include_tags=tuple(t for t, _ in kept),
        include_terms=tuple(term for _, term in kept),
        avoid_tags=tuple(avoid),
    )
