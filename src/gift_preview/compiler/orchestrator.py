# orchestrator.py
"""
orchestrator.py
===============

Does: Glue the Notes Constraint Extractor and the Rule Composer into one
      request-time compile step.
Returns:
  - compile_request(ctx, lexicon, policy) -> (TagSet, ComposedConstraints)
  - compile_payload(payload) -> dict ready for JSON output
Used by: Generation session controller, CLI demo, tests.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from gift_preview.compiler.compose import compose
from gift_preview.compiler.lexicon import Lexicon, get_brand_policy, get_lexicon
from gift_preview.compiler.notes import extract
from gift_preview.compiler.types import (
    BrandPolicy,
    ComposedConstraints,
    RequestContext,
    TagSet,
)

logger = logging.getLogger(__name__)

__all__ = [
    "compile_request",
    "compile_payload",
]


def compile_request(
    ctx: RequestContext,
    lexicon: Lexicon | None = None,
    policy: BrandPolicy | None = None,
) -> tuple[TagSet, ComposedConstraints]:
    """
    Does: extract(notes) then compose(ctx, tags). Policy defaults to the packaged
          data/brand_policy.json, read once per process.
    """
    lexicon = lexicon or get_lexicon()
    policy = policy if policy is not None else get_brand_policy()
    tags = extract(ctx.notes, lexicon)
    composed = compose(ctx, tags, policy, lexicon)
    if composed.blocked_brands:
        logger.info(
            "session %s: brands compiled into negatives: %s",
            ctx.session_id,
            ", ".join(composed.blocked_brands),
        )
    return tags, composed


def compile_payload(
    payload: Mapping[str, Any],
    session_id: str | None = None,
    policy: BrandPolicy | None = None,
) -> dict[str, Any]:
    """Does: Build the context from a raw form payload and compile it into a JSON-ready dict."""
    ctx = RequestContext.from_payload(payload, session_id=session_id)
    tags, composed = compile_request(ctx, policy=policy)
    return {
        "tags": tags.as_dict(),
        "must_include": list(composed.must_include),
        "negative": list(composed.negative),
        "permitted_brands": list(composed.permitted_brands),
        "blocked_brands": list(composed.blocked_brands),
        "prompt_text": composed.prompt_text,
    }
