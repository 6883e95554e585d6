"""
compose
=======

Does: Expose the Rule Composer and its building blocks.
Returns: compose(ctx, tags, policy, lexicon) -> ComposedConstraints.
"""

from __future__ import annotations

from .blueprint import blueprint_rules
from .brand_rules import BrandConstraints, brand_constraints
from .composer import compose
from .palette import palette_rules, recipient_group
from .prompt_template import render_prompt

__all__ = [
    "compose",
    "blueprint_rules",
    "brand_constraints",
    "BrandConstraints",
    "palette_rules",
    "recipient_group",
    "render_prompt",
]

__docformat__ = "google"
