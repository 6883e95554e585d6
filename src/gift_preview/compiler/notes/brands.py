"""
brands.py.

Does: Find brand mentions in note segments (multi-word names are consumed before
      their head noun, e.g. "apple watch" before "apple") and partition requested
      brands against the process-wide BrandPolicy.
Returns: extract_brands() → (requested, avoided); partition_brands() → (permitted, blocked).
Used by: Notes extractor (mentions), rule composer (policy).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gift_preview.compiler.general.token import normalize_text, word_pattern
from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import Lexicon
from gift_preview.compiler.notes.segments import Segment
from gift_preview.compiler.types import BrandPolicy

__all__ = ["extract_brands", "partition_brands"]

log = logging.getLogger(__name__)


def extract_brands(
    segments: Iterable[Segment], lexicon: Lexicon
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Does: Brand mentions in first-appearance order, split by whether they sit in an exclusion."""
    pattern = word_pattern(lexicon.brands)
    requested: list[str] = []
    avoided: list[str] = []
    if pattern is None:
        return (), ()
    for seg in segments:
        bucket = avoided if seg.is_avoid else requested
        for m in pattern.finditer(seg.text):
            brand = lexicon.brand_display(m.group(0))
            if brand not in bucket:
                bucket.append(brand)
                debug(f"brand {brand!r} ({'avoided' if seg.is_avoid else 'requested'})", "notes")
    return tuple(b for b in requested if b not in avoided), tuple(avoided)


def _is_permitted(brand: str, policy: BrandPolicy) -> bool:
    if not policy.strict_mode:
        return True
    key = normalize_text(brand)
    return key in policy.allow_list and key not in policy.deny_list


def partition_brands(
    brands: Iterable[str], policy: BrandPolicy
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Does: A brand is permitted when strict mode is off, or when strict mode is on
          and the brand is allow-listed and not deny-listed; otherwise blocked.
    Returns: (permitted, blocked), input order preserved.
    """
    permitted: list[str] = []
    blocked: list[str] = []
    for brand in brands:
        (permitted if _is_permitted(brand, policy) else blocked).append(brand)
    if blocked:
        log.info("Brand policy blocked %s; compiling into explicit negatives", blocked)
    return tuple(permitted), tuple(blocked)
