"""
vocab
=====

Does: Build the immutable Lexicon (occasion/recipient/vibe rules, palette and
      brand vocabularies, item taxonomy, age bands, themed-mode tables, house
      style, default palettes, tier blueprints) from the JSON tables in data/,
      once per process, and expose read-only lookups.
Used By: Notes extractor, rule composer, session controller.
Returns: Lexicon instances, get_lexicon(), get_brand_policy(), load_brand_policy(),
         color_hint().
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple

import webcolors

from gift_preview.compiler.general.token import normalize_text
from gift_preview.compiler.general.utils import load_config
from gift_preview.compiler.lexicon.constants import TABLE_FILES
from gift_preview.compiler.types import AgeBand, BrandPolicy, Rule, Tier

log = logging.getLogger(__name__)

__all__ = [
    "ItemCategory",
    "AgeBandRule",
    "InterestHint",
    "Blueprint",
    "Lexicon",
    "get_lexicon",
    "get_brand_policy",
    "load_brand_policy",
    "color_hint",
]


# ── Table records ────────────────────────────────────────────────────────────
class ItemCategory(NamedTuple):
    tag: str
    synonyms: tuple[str, ...]
    avoid: tuple[str, ...]
    consumable: bool = False


class AgeBandRule(NamedTuple):
    band: AgeBand
    max_age: int
    rule: str


class InterestHint(NamedTuple):
    tag: str
    keywords: tuple[str, ...]
    rule: str


class Blueprint(NamedTuple):
    boxes: int
    items_per_box: int
    focus_supporting_items: int
    hero: bool
    hero_rule: str = ""
    hero_negative: str = ""


# ── Validators (run inside load_config; errors become ConfigParseError) ─────
def _rules_table(data: dict[str, Any]) -> dict[str, Any]:
    for key, rules in data.items():
        if not isinstance(rules, list) or not rules:
            raise ValueError(f"{key!r}: expected a non-empty list of rules")
        for r in rules:
            if not isinstance(r, dict) or not isinstance(r.get("text"), str):
                raise ValueError(f"{key!r}: every rule needs a 'text' string")
            if not isinstance(r.get("tags", []), list):
                raise ValueError(f"{key!r}: 'tags' must be a list")
    return data


def _taxonomy_table(data: dict[str, Any]) -> dict[str, Any]:
    for tag, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"{tag!r}: expected an object")
        if not entry.get("synonyms") or not entry.get("avoid"):
            raise ValueError(f"{tag!r}: 'synonyms' and 'avoid' must be non-empty")
        if not isinstance(entry.get("consumable", False), bool):
            raise ValueError(f"{tag!r}: 'consumable' must be a boolean")
    return data


def _age_table(data: dict[str, Any]) -> dict[str, Any]:
    bands = data.get("bands")
    if not isinstance(bands, list) or not bands:
        raise ValueError("'bands' must be a non-empty list")
    known = {b.value for b in AgeBand}
    last = 0
    for b in bands:
        if b.get("band") not in known:
            raise ValueError(f"unknown age band {b.get('band')!r}")
        if int(b["max_age"]) <= last:
            raise ValueError("age bands must be sorted by ascending max_age")
        last = int(b["max_age"])
    if not data.get("markers"):
        raise ValueError("'markers' must be non-empty")
    return data


def _blueprint_table(data: dict[str, Any]) -> dict[str, Any]:
    for tier in Tier:
        if tier.value not in data:
            raise ValueError(f"missing blueprint for tier {tier.value!r}")
        bp = data[tier.value]
        if int(bp.get("boxes", 0)) < 1 or int(bp.get("items_per_box", 0)) < 1:
            raise ValueError(f"{tier.value!r}: boxes/items_per_box must be >= 1")
        if bp.get("hero") and not (bp.get("hero_rule") and bp.get("hero_negative")):
            raise ValueError(f"{tier.value!r}: hero tier needs hero_rule and hero_negative")
    return data


def _policy_table(data: dict[str, Any]) -> dict[str, Any]:
    for key in ("allow_list", "deny_list"):
        if not isinstance(data.get(key, []), list):
            raise ValueError(f"{key!r} must be a list")
    return data


# ── Helpers ──────────────────────────────────────────────────────────────────
def _to_rules(raw: list[dict[str, Any]]) -> tuple[Rule, ...]:
    return tuple(Rule(r["text"], frozenset(r.get("tags", []))) for r in raw)


def _freeze_rules_table(raw: dict[str, Any]) -> Mapping[str, tuple[Rule, ...]]:
    return MappingProxyType({k: _to_rules(v) for k, v in raw.items()})


def _key(value: str) -> str:
    return normalize_text(value)


# ── Lexicon ──────────────────────────────────────────────────────────────────
class Lexicon:
    """Read-only view over every static table the compiler consults.

    Built from a data directory (defaults to the packaged ``data/``); all
    collections are tuples, frozensets or mapping proxies so a shared
    instance cannot be mutated by a request.
    """

    def __init__(self, base_dir: Path | None = None):
        def table(name: str, mode: str = "dict", validator=None) -> Any:
            return load_config(TABLE_FILES[name], mode, base_dir=base_dir, validator=validator)

        self.occasion_motifs = _freeze_rules_table(
            table("occasions", "dict", _rules_table)
        )
        self.recipient_motifs = _freeze_rules_table(
            table("recipients", "dict", _rules_table)
        )
        self.vibe_styles = _freeze_rules_table(table("vibes", "dict", _rules_table))
        self._occasion_keys = {_key(k): k for k in self.occasion_motifs}
        self._recipient_keys = {_key(k): k for k in self.recipient_motifs}
        self._vibe_keys = {_key(k): k for k in self.vibe_styles}

        self.colors: tuple[str, ...] = tuple(_key(c) for c in table("colors", "list"))
        self.brands: tuple[str, ...] = tuple(table("brands", "list"))
        self._brand_display = {_key(b): b for b in self.brands}

        taxonomy = table("taxonomy", "dict", _taxonomy_table)
        self.taxonomy: Mapping[str, ItemCategory] = MappingProxyType(
            {
                tag: ItemCategory(
                    tag,
                    tuple(_key(s) for s in entry["synonyms"]),
                    tuple(entry["avoid"]),
                    bool(entry.get("consumable", False)),
                )
                for tag, entry in taxonomy.items()
            }
        )
        self.synonym_to_tag: Mapping[str, str] = MappingProxyType(
            {syn: cat.tag for cat in self.taxonomy.values() for syn in cat.synonyms}
        )

        ages = table("ages", "dict", _age_table)
        self.age_markers: tuple[str, ...] = tuple(_key(m) for m in ages["markers"])
        self.age_bands: tuple[AgeBandRule, ...] = tuple(
            AgeBandRule(AgeBand(b["band"]), int(b["max_age"]), b["rule"]) for b in ages["bands"]
        )

        themes = table("themes", "dict")
        self.themed_keywords: tuple[str, ...] = tuple(_key(k) for k in themes["themed_keywords"])
        self.themed_cues: tuple[str, ...] = tuple(themes["themed_cues"])
        self.kid_safe_themed_cues: tuple[str, ...] = tuple(themes["kid_safe_themed_cues"])
        self.themed_negatives: tuple[str, ...] = tuple(themes["themed_negatives"])
        self.surprise_keywords: tuple[str, ...] = tuple(
            _key(k) for k in themes["surprise_keywords"]
        )
        self.surprise_rule: str = themes["surprise_rule"]
        self.interest_hints: tuple[InterestHint, ...] = tuple(
            InterestHint(h["tag"], tuple(_key(k) for k in h["keywords"]), h["rule"])
            for h in themes["interest_hints"]
        )

        house = table("house", "dict")
        self.preamble: str = house["preamble"]
        self.style_rules: tuple[str, ...] = tuple(house["style_rules"])
        self.house_negatives: tuple[str, ...] = tuple(house["house_negatives"])
        self.no_brand_negatives: tuple[str, ...] = tuple(house["no_brand_negatives"])
        self.safety_negatives: tuple[str, ...] = tuple(house["safety_negatives"])

        palettes = table("palettes", "dict")
        self.palette_groups: Mapping[str, tuple[frozenset[str], str]] = MappingProxyType(
            {
                name: (frozenset(_key(w) for w in g["words"]), g["palette"])
                for name, g in palettes["groups"].items()
            }
        )
        self.child_palette: str = palettes["child_palette"]
        self.fallback_palette: str = palettes["fallback_palette"]
        self.child_bands: frozenset[AgeBand] = frozenset(
            AgeBand(b) for b in palettes["child_bands"]
        )

        blueprints = table("blueprints", "dict", _blueprint_table)
        self.blueprints: Mapping[Tier, Blueprint] = MappingProxyType(
            {
                tier: Blueprint(
                    boxes=int(bp["boxes"]),
                    items_per_box=int(bp["items_per_box"]),
                    focus_supporting_items=int(bp.get("focus_supporting_items", 1)),
                    hero=bool(bp.get("hero", False)),
                    hero_rule=bp.get("hero_rule", ""),
                    hero_negative=bp.get("hero_negative", ""),
                )
                for tier in Tier
                for bp in (blueprints[tier.value],)
            }
        )
        log.debug(
            "Lexicon built: %d occasions, %d recipients, %d vibes, %d item tags, %d brands",
            len(self.occasion_motifs),
            len(self.recipient_motifs),
            len(self.vibe_styles),
            len(self.taxonomy),
            len(self.brands),
        )

    # ── Lookups ──────────────────────────────────────────────────────────────
    def occasion_rules(self, occasion: str) -> tuple[Rule, ...] | None:
        key = self._occasion_keys.get(_key(occasion))
        return self.occasion_motifs[key] if key else None

    def recipient_rules(self, recipient: str) -> tuple[Rule, ...] | None:
        key = self._recipient_keys.get(_key(recipient))
        return self.recipient_motifs[key] if key else None

    def vibe_rules(self, vibe: str) -> tuple[Rule, ...] | None:
        key = self._vibe_keys.get(_key(vibe))
        return self.vibe_styles[key] if key else None

    def canonical_occasion(self, occasion: str) -> str | None:
        return self._occasion_keys.get(_key(occasion))

    def brand_display(self, brand: str) -> str:
        """Does: Map a matched (lowercase) brand back to its vocabulary spelling."""
        return self._brand_display.get(_key(brand), brand)

    def band_for_age(self, age: int) -> AgeBandRule:
        for rule in self.age_bands:
            if age <= rule.max_age:
                return rule
        return self.age_bands[-1]

    def band_rule(self, band: AgeBand) -> str:
        for rule in self.age_bands:
            if rule.band is band:
                return rule.rule
        return ""

    def blueprint(self, tier: Tier) -> Blueprint:
        return self.blueprints[tier]


# ── Process-wide accessors ───────────────────────────────────────────────────
@lru_cache(maxsize=1)
def get_lexicon() -> Lexicon:
    """Does: Return the process-wide Lexicon, building it from data/ on first call."""
    return Lexicon()


def load_brand_policy(base_dir: Path | None = None) -> BrandPolicy:
    """Does: Read the default brand allow/deny policy from data/brand_policy.json."""
    raw = load_config(
        TABLE_FILES["brand_policy"], "dict", base_dir=base_dir, validator=_policy_table
    )
    return BrandPolicy(
        allow_list=frozenset(_key(b) for b in raw.get("allow_list", [])),
        deny_list=frozenset(_key(b) for b in raw.get("deny_list", [])),
        strict_mode=bool(raw.get("strict_mode", False)),
    )


@lru_cache(maxsize=1)
def get_brand_policy() -> BrandPolicy:
    """Does: Return the process-wide default BrandPolicy, read from data/ on first call only."""
    return load_brand_policy()


@lru_cache(maxsize=256)
def color_hint(color: str) -> str:
    """
    Does: Annotate a CSS-named color with its hex value ("navy (#000080)");
          words outside the CSS vocabulary ("pastel", "neon") come back bare.
    """
    name = _key(color)
    try:
        return f"{name} ({webcolors.name_to_hex(name)})"
    except ValueError:
        return name
