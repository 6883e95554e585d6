"""
brand_rules.py.

Does: Compile brand mentions and the BrandPolicy into constraints. No permitted
      brand → standing no-text/no-logo negatives. Permitted brands → a positive
      scoping which brands may appear plus a negative against any other brand.
      Every blocked or excluded brand → an explicit named negative.
Returns: brand_constraints() → BrandConstraints.
"""

from __future__ import annotations

from typing import NamedTuple

from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.notes import partition_brands
from gift_preview.compiler.types import BrandPolicy, Rule, TagSet

__all__ = ["BrandConstraints", "brand_constraints"]


class BrandConstraints(NamedTuple):
    positives: list[Rule]
    negatives: list[str]
    permitted: tuple[str, ...]
    blocked: tuple[str, ...]


def brand_constraints(tags: TagSet, policy: BrandPolicy, lexicon: Lexicon) -> BrandConstraints:
    permitted, blocked = partition_brands(tags.brands_requested, policy)
    positives: list[Rule] = []
    negatives: list[str] = []

    if permitted:
        names = ", ".join(permitted)
        positives.append(
            Rule(f"only these brands may appear, as subtle authentic product branding: {names}")
        )
        negatives.append(f"no brands, logos or brand names other than {names}")
        negatives.append(f"no readable text other than the brand names {names}")
    else:
        negatives.extend(lexicon.no_brand_negatives)

    for brand in blocked + tuple(b for b in tags.brands_avoided if b not in blocked):
        negatives.append(f"no {brand} products, logos or branding")

    return BrandConstraints(positives, negatives, permitted, blocked)
