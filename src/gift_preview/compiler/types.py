# gift_preview/compiler/types.py
"""
types.py.

Does: Define the records that flow through the compiler: the request form,
      the extracted tag set, the brand policy, lexicon rules and the composed
      constraint set.
Used by: notes extractor, rule composer, session controller, CLI.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

__all__ = [
    "Tier",
    "AgeBand",
    "SpecialMode",
    "Rule",
    "RequestContext",
    "TagSet",
    "BrandPolicy",
    "ComposedConstraints",
    "InvalidRequestError",
]

_WS_RE = re.compile(r"\s+")


class InvalidRequestError(ValueError):
    """Raise when a request payload cannot identify its session."""


class Tier(str, Enum):
    STANDARD = "Standard"
    PREMIUM = "Premium"

    @classmethod
    def parse(cls, value: object) -> Tier:
        """Does: Case-insensitive tier lookup; anything unrecognized is STANDARD."""
        text = _clean(value).lower()
        for tier in cls:
            if tier.value.lower() == text or tier.name.lower() == text:
                return tier
        return cls.STANDARD


class AgeBand(str, Enum):
    UP_TO_6 = "0-6"
    AGE_7_10 = "7-10"
    AGE_11_14 = "11-14"
    AGE_15_18 = "15-18"
    ADULT = "18+"


class SpecialMode(str, Enum):
    THEMED = "themed"
    SURPRISE = "surprise"


class Rule(NamedTuple):
    """A positive lexicon phrase plus the canonical tags/concerns it asserts."""

    text: str
    tags: frozenset[str] = frozenset()


def _clean(value: object) -> str:
    if value is None:
        return ""
    return _WS_RE.sub(" ", str(value)).strip()


@dataclass(frozen=True)
class RequestContext:
    recipient: str = ""
    occasion: str = ""
    vibe: str = ""
    tier: Tier = Tier.STANDARD
    notes: str = ""
    session_id: str = ""
    social: str = ""

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any] | None, session_id: str | None = None
    ) -> RequestContext:
        """
        Does: Build a context from a raw form payload. Fields are trimmed and
              whitespace-collapsed; missing ones become "" (unspecified). Notes keep
              their line breaks so bare lists survive.
        Raises: InvalidRequestError when no session id is available.
        """
        payload = payload or {}
        sid = _clean(session_id if session_id is not None else payload.get("sessionId"))
        if not sid:
            raise InvalidRequestError("Missing sessionId")
        notes = payload.get("notes")
        return cls(
            recipient=_clean(payload.get("recipient")),
            occasion=_clean(payload.get("occasion")),
            vibe=_clean(payload.get("vibe")),
            tier=Tier.parse(payload.get("tier")),
            notes=str(notes).strip() if notes is not None else "",
            session_id=sid,
            social=_clean(payload.get("social")),
        )


@dataclass(frozen=True)
class TagSet:
    age: int | None = None
    age_band: AgeBand | None = None
    colors: tuple[str, ...] = ()
    avoid_colors: tuple[str, ...] = ()
    brands_requested: tuple[str, ...] = ()
    brands_avoided: tuple[str, ...] = ()
    include_tags: tuple[str, ...] = ()
    include_terms: tuple[str, ...] = ()
    avoid_tags: tuple[str, ...] = ()
    special_modes: frozenset[SpecialMode] = field(default_factory=frozenset)
    time_token: str | None = None
    interest_tags: tuple[str, ...] = ()

    @property
    def themed(self) -> bool:
        return SpecialMode.THEMED in self.special_modes

    def as_dict(self) -> dict[str, Any]:
        return {
            "age": self.age,
            "age_band": self.age_band.value if self.age_band else None,
            "colors": list(self.colors),
            "avoid_colors": list(self.avoid_colors),
            "brands_requested": list(self.brands_requested),
            "brands_avoided": list(self.brands_avoided),
            "include_tags": list(self.include_tags),
            "include_terms": list(self.include_terms),
            "avoid_tags": list(self.avoid_tags),
            "special_modes": sorted(m.value for m in self.special_modes),
            "time_token": self.time_token,
            "interest_tags": list(self.interest_tags),
        }


@dataclass(frozen=True)
class BrandPolicy:
    allow_list: frozenset[str] = frozenset()
    deny_list: frozenset[str] = frozenset()
    strict_mode: bool = False


@dataclass(frozen=True)
class ComposedConstraints:
    must_include: tuple[str, ...]
    negative: tuple[str, ...]
    prompt_text: str
    permitted_brands: tuple[str, ...] = ()
    blocked_brands: tuple[str, ...] = ()
