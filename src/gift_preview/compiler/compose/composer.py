# composer.py
"""
composer.py
===========

Does: Merge the extracted TagSet with the lexicon tables and the brand policy
      into one non-contradictory constraint set and render the prompt.
      Steps run in a fixed order because later steps refine earlier defaults:
        1. occasion + recipient motifs (fallback phrase for unknown keys)
        2. vibe styles
        3. tier blueprint (boxes, items per box, hero piece)
        4. palette (explicit colors override table defaults)
        5. brand/logo policy
        6. avoid tags (expansion negatives; matching positives suppressed)
        7. include tags (focus mode)
        8. standing safety negatives
        9. de-duplicate and render
Returns: compose(ctx, tags, policy, lexicon) -> ComposedConstraints
Used by: compile_request() and the generation session controller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from gift_preview.compiler.compose.blueprint import blueprint_rules
from gift_preview.compiler.compose.brand_rules import brand_constraints
from gift_preview.compiler.compose.palette import names_avoided_color, palette_rules
from gift_preview.compiler.compose.prompt_template import render_prompt
from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import (
    OCCASION_FALLBACK,
    PALETTE_CONCERN,
    RECIPIENT_FALLBACK,
    VIBE_FALLBACK,
    Lexicon,
    get_lexicon,
)
from gift_preview.compiler.types import (
    BrandPolicy,
    ComposedConstraints,
    RequestContext,
    Rule,
    SpecialMode,
    TagSet,
)

logger = logging.getLogger(__name__)

__all__ = ["compose"]

_HALLOWEEN = "Halloween"


# =============================================================================
# Helpers
# =============================================================================


def _table_rules(rules: Sequence[Rule] | None, fallback: str, label: str, value: str) -> list[Rule]:
    if rules is None:
        debug(f"unknown {label} {value!r}; using fallback phrase", "compose")
        return [Rule(fallback)]
    return list(rules)


def _dedupe(items: Iterable[str]) -> tuple[str, ...]:
    """Case-insensitive, order-preserving de-duplication."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.strip().casefold()
        if key and key not in seen:
            seen.add(key)
            out.append(item.strip())
    return tuple(out)


def _notes_rules(tags: TagSet, lexicon: Lexicon) -> list[Rule]:
    """Positive rules driven by notes signals other than items, colors and brands."""
    rules: list[Rule] = []
    if tags.age_band is not None:
        rules.append(Rule(lexicon.band_rule(tags.age_band)))
    if tags.themed:
        kid = tags.age_band is not None and tags.age_band in lexicon.child_bands
        cues = lexicon.kid_safe_themed_cues if kid else lexicon.themed_cues
        rules.extend(Rule(c, frozenset({"themed"})) for c in cues)
    if tags.time_token:
        rules.append(
            Rule(
                f"any watch or clock dial clearly shows the time {tags.time_token}",
                frozenset({"watch"}),
            )
        )
    if tags.interest_tags and not tags.include_tags:
        for hint in lexicon.interest_hints:
            if hint.tag in tags.interest_tags:
                rules.append(Rule(hint.rule, frozenset({hint.tag})))
    return rules


def _has_notes_signal(tags: TagSet) -> bool:
    return bool(
        tags.age_band
        or tags.colors
        or tags.brands_requested
        or tags.include_tags
        or tags.time_token
        or tags.interest_tags
        or tags.themed
    )


# =============================================================================
# Public API
# =============================================================================


def compose(
    ctx: RequestContext,
    tags: TagSet,
    policy: BrandPolicy | None = None,
    lexicon: Lexicon | None = None,
) -> ComposedConstraints:
    """
    Does: Build the ordered MUST-INCLUDE and NEGATIVE lists plus the prompt.
    Args: ctx: request form; tags: extractor output; policy: brand allow/deny
          policy (permissive default); lexicon: defaults to the process lexicon.
    Returns: ComposedConstraints; a pure function of its arguments.
    """
    lexicon = lexicon or get_lexicon()
    policy = policy or BrandPolicy()
    positives: list[Rule] = []
    negatives: list[str] = list(lexicon.house_negatives)

    # 1) occasion + recipient motifs
    positives += _table_rules(
        lexicon.occasion_rules(ctx.occasion), OCCASION_FALLBACK, "occasion", ctx.occasion
    )
    positives += _table_rules(
        lexicon.recipient_rules(ctx.recipient), RECIPIENT_FALLBACK, "recipient", ctx.recipient
    )

    # 2) vibe styles
    positives += _table_rules(lexicon.vibe_rules(ctx.vibe), VIBE_FALLBACK, "vibe", ctx.vibe)

    # 3) tier blueprint
    bp_pos, bp_neg = blueprint_rules(ctx.tier, lexicon, tags.include_tags, tags.include_terms)
    positives = bp_pos + positives
    negatives += bp_neg

    # 4) palette: explicit colors override every palette default; a default
    #    naming an excluded color is dropped
    if tags.colors:
        positives = [r for r in positives if PALETTE_CONCERN not in r.tags]
    elif tags.avoid_colors:
        positives = [
            r
            for r in positives
            if PALETTE_CONCERN not in r.tags or not names_avoided_color(r.text, tags.avoid_colors)
        ]
    pal_pos, pal_neg = palette_rules(ctx, tags, lexicon, existing=positives)
    positives += pal_pos
    negatives += pal_neg

    # notes-driven atmosphere/age/time/interest rules join before suppression
    positives += _notes_rules(tags, lexicon)
    if tags.themed or lexicon.canonical_occasion(ctx.occasion) == _HALLOWEEN:
        negatives += lexicon.themed_negatives

    # 5) brand/logo policy
    brands = brand_constraints(tags, policy, lexicon)
    positives += brands.positives
    negatives += brands.negatives

    # 6) avoid tags: expansions in, any positive asserting the category out
    avoid = frozenset(tags.avoid_tags)
    for tag in tags.avoid_tags:
        category = lexicon.taxonomy.get(tag)
        if category is not None:
            negatives += category.avoid
    if avoid:
        suppressed = [r for r in positives if r.tags & avoid]
        for r in suppressed:
            debug(f"suppressed {r.text!r} (avoided {sorted(r.tags & avoid)})", "compose")
        positives = [r for r in positives if not r.tags & avoid]

    # 7) include tags: focus mode
    if tags.include_tags:
        focus = ", ".join(tags.include_terms)
        positives.append(
            Rule(
                f"FOCUS: the gift set is built around {focus}; these items are the dominant, "
                "clearly visible subject of the image",
                frozenset(tags.include_tags),
            )
        )
        positives.append(Rule("all non-focus items are minimal, generic and secondary"))
        negatives.append("no unrelated novelty items")
    elif SpecialMode.SURPRISE in tags.special_modes and not _has_notes_signal(tags):
        positives.append(Rule(lexicon.surprise_rule))

    # 8) standing safety negatives
    negatives += lexicon.safety_negatives

    # 9) lists + prompt
    must_include = _dedupe(r.text for r in positives)
    negative = _dedupe(negatives)
    prompt = render_prompt(ctx, lexicon, must_include, negative)
    logger.debug(
        "composed %d must-include / %d negative constraints for occasion=%r tier=%s",
        len(must_include),
        len(negative),
        ctx.occasion,
        ctx.tier.value,
    )
    return ComposedConstraints(
        must_include=must_include,
        negative=negative,
        prompt_text=prompt,
        permitted_brands=brands.permitted,
        blocked_brands=brands.blocked + tuple(
            b for b in tags.brands_avoided if b not in brands.blocked
        ),
    )
