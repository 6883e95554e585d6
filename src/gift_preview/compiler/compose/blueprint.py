"""
blueprint.py.

Does: Turn the tier blueprint (nested box count, items per box, hero piece) into
      composition rules. Focus mode keeps the box layout but swaps the per-box
      item minimum for a relaxed supporting-item count and ties the hero to the
      non-consumable focus items. The hero negative forbids consumables, so a
      consumable focus item never becomes the hero.
Returns: blueprint_rules() → (positive rules, negative phrases).
"""

from __future__ import annotations

from collections.abc import Sequence

from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.types import Rule, Tier

__all__ = ["blueprint_rules"]


def _hero_candidates(
    lexicon: Lexicon, focus_tags: Sequence[str], focus_terms: Sequence[str]
) -> list[str]:
    out: list[str] = []
    for tag, term in zip(focus_tags, focus_terms):
        category = lexicon.taxonomy.get(tag)
        if category is not None and category.consumable:
            debug(f"focus item {term!r} is consumable; not bound to the hero", "compose")
            continue
        out.append(term)
    return out


def blueprint_rules(
    tier: Tier,
    lexicon: Lexicon,
    focus_tags: Sequence[str] = (),
    focus_terms: Sequence[str] = (),
) -> tuple[list[Rule], list[str]]:
    bp = lexicon.blueprint(tier)
    positives = [
        Rule(
            f"show {bp.boxes} open nested boxes stacked from largest to smallest, "
            "each box OPEN with lid removed or pushed aside"
        ),
    ]
    if focus_terms:
        positives.append(
            Rule(
                f"each box shows the focus items or up to {bp.focus_supporting_items} "
                "minimal, generic supporting items; the focus items are the clear centerpiece"
            )
        )
    else:
        positives.append(
            Rule(
                f"at least {bp.items_per_box} distinct items clearly visible in EACH box "
                f"(minimum total items visible: {bp.boxes * bp.items_per_box})"
            )
        )
    positives += [
        Rule("items must be separated enough to count visually (not hidden under tissue paper)"),
        Rule("some items can peek out for depth, but keep a premium uncluttered layout"),
        Rule("avoid empty space that looks like missing items"),
    ]

    negatives: list[str] = []
    if bp.hero:
        positives.append(Rule(bp.hero_rule))
        heroes = _hero_candidates(lexicon, focus_tags, focus_terms)
        if heroes:
            positives.append(Rule(f"the hero item must be one of the focus items: {', '.join(heroes)}"))
        negatives.append(bp.hero_negative)
    return positives, negatives
