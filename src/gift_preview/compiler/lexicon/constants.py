# constants.py
# ============

"""
constants.
=========

Does: Define immutable compiler constants that are policy, not lexicon data
      (tag caps, fallback phrases, trigger phrase families, table file names).
Used By: Notes extractor, rule composer, lexicon loader.
Returns: Pure data structures only (no side effects).
"""

# ── 1) Tag caps (bound prompt size, avoid constraint dilution) ──────────────
MAX_INCLUDE_TAGS = 6
MAX_AVOID_TAGS = 8

# ── 2) Fallback phrases for unknown or unspecified form values ──────────────
OCCASION_FALLBACK = "items should clearly match the occasion"
RECIPIENT_FALLBACK = "items should clearly match the recipient type"
VIBE_FALLBACK = "styling should match the selected vibe"
UNSPECIFIED = "Not specified"

# Concern tag carried by lexicon rules that assert a default palette
PALETTE_CONCERN = "palette"

# ── 3) Trigger phrase families for include/avoid tagging ────────────────────
# Matched longest first at each position, so "no more" wins over "no".
AVOID_TRIGGERS = (
    "do not include",
    "don't include",
    "dont include",
    "does not want",
    "doesn't want",
    "doesnt want",
    "does not like",
    "doesn't like",
    "doesnt like",
    "do not want",
    "don't want",
    "dont want",
    "not a fan of",
    "allergic to",
    "excluding",
    "exclude",
    "without",
    "dislikes",
    "dislike",
    "hates",
    "hate",
    "avoid",
    "no more",
    "not",
    "no",
)

INCLUDE_TRIGGERS = (
    "must include",
    "must have",
    "looking for",
    "focus on",
    "include",
    "wants",
    "want",
    "add",
)

# ── 4) Lexicon table file names under data/ ──────────────────────────────────
TABLE_FILES = {
    "occasions": "occasion_motifs",
    "recipients": "recipient_motifs",
    "vibes": "vibe_styles",
    "colors": "colors",
    "brands": "brands",
    "brand_policy": "brand_policy",
    "taxonomy": "item_taxonomy",
    "ages": "age_bands",
    "themes": "themes",
    "house": "house_style",
    "palettes": "palettes",
    "blueprints": "blueprints",
}
