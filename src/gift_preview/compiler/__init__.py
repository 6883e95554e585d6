"""
compiler
========

Request-time compiler: notes extraction, rule composition, and the lexicon
tables both consult.
"""

from __future__ import annotations

from .orchestrator import compile_payload, compile_request
from .types import (
    AgeBand,
    BrandPolicy,
    ComposedConstraints,
    InvalidRequestError,
    RequestContext,
    SpecialMode,
    TagSet,
    Tier,
)

__all__ = [
    "compile_request",
    "compile_payload",
    "AgeBand",
    "BrandPolicy",
    "ComposedConstraints",
    "InvalidRequestError",
    "RequestContext",
    "SpecialMode",
    "TagSet",
    "Tier",
]
