# extractor.py
"""
extractor.py
============

Does: Turn free-text notes into a TagSet: age band, palette colors, brand
      mentions, canonical include/avoid item tags, special modes, a literal
      dial time and the first interest hint. Pure, deterministic and total;
      text that matches nothing contributes nothing.
Returns: extract(notes, lexicon) -> TagSet
Used by: compile_request() ahead of the rule composer.
"""

from __future__ import annotations

import logging

from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import Lexicon, get_lexicon
from gift_preview.compiler.notes.age import age_band_for, extract_age
from gift_preview.compiler.notes.brands import extract_brands
from gift_preview.compiler.notes.colors import extract_colors
from gift_preview.compiler.notes.items import tag_items
from gift_preview.compiler.notes.segments import segment_notes
from gift_preview.compiler.notes.themes import detect_interest, detect_modes
from gift_preview.compiler.notes.time_token import extract_time_token
from gift_preview.compiler.types import TagSet

logger = logging.getLogger(__name__)

__all__ = ["extract"]


def extract(notes: str | None, lexicon: Lexicon | None = None) -> TagSet:
    """
    Does: Run every notes scanner and assemble the TagSet.
    Args: notes: raw free text (None/"" allowed); lexicon: defaults to the process lexicon.
    Returns: TagSet (empty when nothing matches).
    """
    lexicon = lexicon or get_lexicon()
    segments = segment_notes(notes)

    age = extract_age(notes, lexicon)
    colors, avoid_colors = extract_colors(segments, lexicon)
    brands_requested, brands_avoided = extract_brands(segments, lexicon)
    items = tag_items(segments, lexicon)

    tags = TagSet(
        age=age,
        age_band=age_band_for(age, lexicon),
        colors=colors,
        avoid_colors=avoid_colors,
        brands_requested=brands_requested,
        brands_avoided=brands_avoided,
        include_tags=items.include_tags,
        include_terms=items.include_terms,
        avoid_tags=items.avoid_tags,
        special_modes=detect_modes(segments, lexicon),
        time_token=extract_time_token(notes),
        interest_tags=detect_interest(segments, lexicon),
    )
    debug(f"extracted {tags.as_dict()}", "notes")
    logger.debug(
        "notes extraction: %d include, %d avoid, %d colors",
        len(tags.include_tags),
        len(tags.avoid_tags),
        len(tags.colors),
    )
    return tags
