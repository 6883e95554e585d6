"""
palette.py.

Does: Decide the palette instruction. Explicit colors from the notes always win
      (hard override, dominant not accent). Otherwise a table default applies:
      the child palette for young age bands, else the recipient-group palette
      picked by scanning the recipient label and notes against gendered word lists.
      A default that names an excluded color gives way to the neutral palette,
      then to a color-free fallback.
Returns: palette_rules() → (positive rules, negative phrases); recipient_group() → group name;
         names_avoided_color() → bool.
"""

from __future__ import annotations

from collections.abc import Sequence

from gift_preview.compiler.general.token import normalize_text, word_pattern
from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import PALETTE_CONCERN, Lexicon, color_hint
from gift_preview.compiler.types import RequestContext, Rule, TagSet

__all__ = ["names_avoided_color", "palette_rules", "recipient_group"]

_PALETTE = frozenset({PALETTE_CONCERN})
_NEUTRAL = "neutral"


def names_avoided_color(text: str, avoid_colors: Sequence[str]) -> bool:
    """Does: True when `text` mentions any excluded color as a whole word."""
    pattern = word_pattern(avoid_colors)
    return pattern is not None and pattern.search(normalize_text(text)) is not None


def recipient_group(ctx: RequestContext, lexicon: Lexicon) -> str:
    """Does: Count gendered-word hits in recipient label + notes; a tie or no hit is neutral."""
    words = normalize_text(f"{ctx.recipient} {ctx.notes}").replace("'", " ").split()
    scores = {
        name: sum(1 for w in words if w in vocab)
        for name, (vocab, _) in lexicon.palette_groups.items()
        if vocab
    }
    if not scores:
        return _NEUTRAL
    best = max(scores.values())
    leaders = [name for name, score in scores.items() if score == best]
    return leaders[0] if best > 0 and len(leaders) == 1 else _NEUTRAL


def _default_palette(ctx: RequestContext, tags: TagSet, lexicon: Lexicon) -> str:
    if tags.age_band is not None and tags.age_band in lexicon.child_bands:
        debug(f"child palette for age band {tags.age_band.value}", "compose")
        candidates = [lexicon.child_palette]
    else:
        group = recipient_group(ctx, lexicon)
        debug(f"recipient-group palette {group!r}", "compose")
        candidates = [lexicon.palette_groups.get(group, lexicon.palette_groups[_NEUTRAL])[1]]
    candidates += [lexicon.palette_groups[_NEUTRAL][1], lexicon.fallback_palette]

    for palette in candidates:
        if not names_avoided_color(palette, tags.avoid_colors):
            return palette
        debug(f"palette {palette!r} names an excluded color; trying the next one", "compose")
    return lexicon.fallback_palette


def palette_rules(
    ctx: RequestContext,
    tags: TagSet,
    lexicon: Lexicon,
    existing: Sequence[Rule] = (),
) -> tuple[list[Rule], list[str]]:
    """
    Args: existing: rules already composed; a palette-tagged lexicon rule there
          (e.g. a vibe's muted palette) stands in for the recipient-group default.
    """
    negatives = [f"no {c} tones" for c in tags.avoid_colors]

    if tags.colors:
        named = ", ".join(color_hint(c) for c in tags.colors)
        debug(f"explicit palette override: {named}", "compose")
        return [
            Rule(f"color theme must visibly include these colors: {named}", _PALETTE),
            Rule(
                "apply the color theme to the gift boxes and accent elements (ribbons, tissue paper, "
                "small decor); these colors are the dominant palette, not a minor accent",
                _PALETTE,
            ),
            Rule(
                "keep the overall look premium and cohesive (do not look childish unless age indicates a child)",
                _PALETTE,
            ),
        ], negatives

    if any(PALETTE_CONCERN in r.tags for r in existing):
        return [], negatives

    return [Rule(f"default palette: {_default_palette(ctx, tags, lexicon)}", _PALETTE)], negatives
