"""
settings.py.

Does: Read the runtime configuration surface from the environment: quota and
      attempt bounds, backend selection, verification toggle, brand policy
      overrides and rendering parameters.
Returns: SessionSettings.from_env(), RenderParams, brand_policy_from_env().
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from gift_preview.compiler.general.token import normalize_text
from gift_preview.compiler.lexicon import load_brand_policy
from gift_preview.compiler.types import BrandPolicy

__all__ = ["RenderParams", "SessionSettings", "brand_policy_from_env"]

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}


# ── ENV helpers (tunable without code change) ────────────────────────────────
def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(minimum, int(raw))
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %d", name, raw, default)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE


def _env_list(name: str) -> frozenset[str] | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    return frozenset(normalize_text(x) for x in raw.split(",") if x.strip())


@dataclass(frozen=True)
class RenderParams:
    aspect_ratio: str = "1:1"
    output_format: str = "webp"
    quality: int = 85

    @classmethod
    def from_env(cls) -> RenderParams:
        return cls(
            aspect_ratio=os.getenv("GIFT_PREVIEW_ASPECT_RATIO", "1:1"),
            output_format=os.getenv("GIFT_PREVIEW_OUTPUT_FORMAT", "webp"),
            quality=_env_int("GIFT_PREVIEW_QUALITY", 85, minimum=1),
        )


def brand_policy_from_env() -> BrandPolicy:
    """Does: Start from data/brand_policy.json and let env variables replace each field."""
    base = load_brand_policy()
    allow = _env_list("GIFT_PREVIEW_BRAND_ALLOW")
    deny = _env_list("GIFT_PREVIEW_BRAND_DENY")
    return BrandPolicy(
        allow_list=base.allow_list if allow is None else allow,
        deny_list=base.deny_list if deny is None else deny,
        strict_mode=_env_bool("GIFT_PREVIEW_STRICT_BRANDS", base.strict_mode),
    )


@dataclass(frozen=True)
class SessionSettings:
    max_generations: int = 2
    max_attempts: int = 2
    backend: str = "replicate"
    verification_enabled: bool = False
    render: RenderParams = field(default_factory=RenderParams)

    @classmethod
    def from_env(cls) -> SessionSettings:
        return cls(
            max_generations=_env_int("GIFT_PREVIEW_MAX_GENERATIONS", 2),
            max_attempts=_env_int("GIFT_PREVIEW_MAX_ATTEMPTS", 2, minimum=1),
            backend=os.getenv("GIFT_PREVIEW_BACKEND", "replicate").strip().lower(),
            verification_enabled=_env_bool("GIFT_PREVIEW_VERIFY", False),
            render=RenderParams.from_env(),
        )
