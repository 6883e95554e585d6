"""
prompt_template.py.

Does: Render the final backend prompt from the composed lists. Pure string
      interpolation; the only branching is what already lives in the lists.
Returns: render_prompt() → str (byte-identical for identical inputs).
"""

from __future__ import annotations

from collections.abc import Sequence

from gift_preview.compiler.lexicon import UNSPECIFIED, Lexicon
from gift_preview.compiler.types import RequestContext

__all__ = ["render_prompt"]

_TEMPLATE = """{preamble}

STYLE:
{style}

Tier: {tier}
Occasion: {occasion}
Recipient: {recipient}
Vibe: {vibe}

MUST INCLUDE:
{must_include}

NEGATIVE CONSTRAINTS:
{negative}

Notes (user text; treat as constraints when specific):
{notes}

Social context (subtle influence only; no logos):
{social}"""


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def render_prompt(
    ctx: RequestContext,
    lexicon: Lexicon,
    must_include: Sequence[str],
    negative: Sequence[str],
) -> str:
    return _TEMPLATE.format(
        preamble=lexicon.preamble,
        style=_bullets(lexicon.style_rules),
        tier=ctx.tier.value,
        occasion=ctx.occasion or UNSPECIFIED,
        recipient=ctx.recipient or UNSPECIFIED,
        vibe=ctx.vibe or UNSPECIFIED,
        must_include=_bullets(must_include),
        negative=_bullets(negative),
        notes=ctx.notes or "None",
        social=ctx.social or "None",
    ).strip()
