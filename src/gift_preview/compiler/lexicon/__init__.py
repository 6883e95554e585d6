"""
lexicon.
=======

Does: Aggregate the compiler's static data: policy constants plus the
      immutable Lexicon built from the JSON tables in data/.
Used By: Notes extractor, rule composer, session controller.
Returns: Pure data structures and accessor functions; tables are loaded
         once per process.
"""

# ── Constants ────────────────────────────────────────────────────────────────
from .constants import (
    AVOID_TRIGGERS,
    INCLUDE_TRIGGERS,
    MAX_AVOID_TAGS,
    MAX_INCLUDE_TAGS,
    OCCASION_FALLBACK,
    PALETTE_CONCERN,
    RECIPIENT_FALLBACK,
    UNSPECIFIED,
    VIBE_FALLBACK,
)

# ── Vocabulary ───────────────────────────────────────────────────────────────
from .vocab import (
    AgeBandRule,
    Blueprint,
    InterestHint,
    ItemCategory,
    Lexicon,
    color_hint,
    get_brand_policy,
    get_lexicon,
    load_brand_policy,
)

__all__ = [
    # constants
    "AVOID_TRIGGERS",
    "INCLUDE_TRIGGERS",
    "MAX_AVOID_TAGS",
    "MAX_INCLUDE_TAGS",
    "OCCASION_FALLBACK",
    "PALETTE_CONCERN",
    "RECIPIENT_FALLBACK",
    "UNSPECIFIED",
    "VIBE_FALLBACK",
    # vocab
    "AgeBandRule",
    "Blueprint",
    "InterestHint",
    "ItemCategory",
    "Lexicon",
    "color_hint",
    "get_brand_policy",
    "get_lexicon",
    "load_brand_policy",
]
