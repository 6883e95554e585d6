# tests/test_notes_extractor.py
"""Notes Constraint Extractor: literal, deterministic tagging of free-text notes."""

from __future__ import annotations

import pytest

from gift_preview.compiler.lexicon import MAX_AVOID_TAGS, MAX_INCLUDE_TAGS, get_lexicon
from gift_preview.compiler.notes import Polarity, extract, partition_brands, segment_notes
from gift_preview.compiler.types import AgeBand, BrandPolicy, SpecialMode, TagSet


@pytest.fixture(scope="module")
def lex():
    return get_lexicon()


# ── Segmentation ─────────────────────────────────────────────────────────────
def test_case_01_segments_carry_polarity():
    segs = segment_notes("No candles, include a mug\nsocks")
    assert [(s.polarity, s.text) for s in segs] == [
        (Polarity.AVOID, "candles"),
        (Polarity.INCLUDE, "a mug"),
        (Polarity.BARE, "socks"),
    ]
    assert segs[0].trigger == "no"


def test_case_02_longest_trigger_wins():
    segs = segment_notes("she doesn't want chocolate")
    assert segs[-1].polarity is Polarity.AVOID
    assert segs[-1].trigger == "doesn't want"
    assert segs[-1].text == "chocolate"


def test_case_03_empty_notes_are_total(lex):
    assert segment_notes("") == []
    assert extract("", lex) == TagSet()
    assert extract(None, lex) == TagSet()
    assert extract("lorem ipsum dolor", lex) == TagSet()


# ── Age ──────────────────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "notes, age, band",
    [
        ("bring 2 candles", None, None),
        ("he is 10 years old", 10, AgeBand.AGE_7_10),
        ("for my 7yo nephew", 7, AgeBand.AGE_7_10),
        ("a 12-year-old who loves soccer", 12, AgeBand.AGE_11_14),
        ("turning 18 years old", 18, AgeBand.AGE_15_18),
        ("she is 4 y/o", 4, AgeBand.UP_TO_6),
        ("grandpa is 80 years old", 80, AgeBand.ADULT),
        ("100 years old", None, None),
        ("budget 25, 3 boxes", None, None),
    ],
)
def test_case_04_age_needs_a_marker(lex, notes, age, band):
    tags = extract(notes, lex)
    assert tags.age == age
    assert tags.age_band == band


# ── Colors ───────────────────────────────────────────────────────────────────
def test_case_05_colors_deduplicated_in_first_appearance_order(lex):
    assert extract("blue and navy and blue again", lex).colors == ("blue", "navy")


def test_case_06_colors_whole_word_case_insensitive(lex):
    tags = extract("Loves RED, tired of reddish stuff, Gold accents", lex)
    assert tags.colors == ("red", "gold")


def test_case_07_excluded_colors_are_not_requested(lex):
    tags = extract("navy please, no pink", lex)
    assert tags.colors == ("navy",)
    assert tags.avoid_colors == ("pink",)


# ── Brands ───────────────────────────────────────────────────────────────────
def test_case_08_multi_word_brands_before_head_noun(lex):
    tags = extract("loves his apple watch and new balance sneakers, also Apple", lex)
    assert tags.brands_requested == ("Apple Watch", "New Balance", "Apple")


def test_case_09_brand_inside_exclusion_is_avoided(lex):
    tags = extract("nike shoes, nothing from adidas, no adidas", lex)
    assert tags.brands_requested == ("Nike",)
    assert tags.brands_avoided == ("Adidas",)


def test_case_10_partition_respects_strict_mode():
    brands = ("Nike", "Disney", "Lego")
    loose = BrandPolicy(deny_list=frozenset({"disney"}))
    assert partition_brands(brands, loose) == (brands, ())

    strict = BrandPolicy(
        allow_list=frozenset({"nike", "disney"}),
        deny_list=frozenset({"disney"}),
        strict_mode=True,
    )
    assert partition_brands(brands, strict) == (("Nike",), ("Disney", "Lego"))


# ── Include / avoid tags ─────────────────────────────────────────────────────
def test_case_11_synonyms_map_to_canonical_tags(lex):
    tags = extract("must include sneakers and a travel mug, no candles or perfume", lex)
    assert tags.include_tags == ("footwear", "mug")
    assert tags.include_terms == ("sneakers", "travel mug")
    assert tags.avoid_tags == ("candles", "fragrance")


def test_case_12_bare_list_counts_as_include(lex):
    tags = extract("socks\nchocolate\nbook", lex)
    assert tags.include_tags == ("apparel", "chocolate", "books")


def test_case_13_include_cap_keeps_first_matches(lex):
    tags = extract("mug, socks, candle, book, watch, perfume, flowers, tea", lex)
    assert len(tags.include_tags) == MAX_INCLUDE_TAGS
    assert tags.include_tags[0] == "mug"
    assert "coffee" not in tags.include_tags


@pytest.mark.parametrize("notes", ["reebok hat, no hats", "no hats, reebok hat"])
def test_case_14_include_avoid_collision_avoid_wins(lex, notes):
    tags = extract(notes, lex)
    assert "headwear" in tags.avoid_tags
    assert "headwear" not in tags.include_tags
    assert tags.brands_requested == ("Reebok",)


# ── Time token ───────────────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "notes, token",
    [
        ("watch showing 10:10", "10:10"),
        ("clock at 7.30.", "7:30"),
        ("dial at 23:59 please", "23:59"),
        ("budget is $12.50", None),
        ("version 2.5.1", None),
        ("25:00 sharp", None),
        ("ratio 3.14159", None),
    ],
)
def test_case_15_time_token(lex, notes, token):
    assert extract(notes, lex).time_token == token


# ── Modes and interests ──────────────────────────────────────────────────────
def test_case_16_themed_mode(lex):
    assert extract("she loves horror movies", lex).themed
    assert not extract("not a fan of horror", lex).themed


def test_case_17_surprise_mode(lex):
    assert SpecialMode.SURPRISE in extract("surprise me!", lex).special_modes


def test_case_18_first_interest_group_only(lex):
    assert extract("plays guitar and soccer", lex).interest_tags == ("sports",)
    assert extract("no sports stuff", lex).interest_tags == ()


def test_case_19_extract_is_deterministic(lex):
    notes = "10 years old, loves Nike and navy, no candles, include a mug, 7.30"
    assert extract(notes, lex) == extract(notes, lex)
    assert extract(notes, lex).as_dict()["age_band"] == "7-10"


def test_case_20_avoid_cap_applies_before_collision(lex):
    notes = (
        "no shoes, no hats, no shirts, no mugs, no candles, no chocolate, "
        "no candy, no wine, no perfume, include perfume"
    )
    tags = extract(notes, lex)
    assert len(tags.avoid_tags) == MAX_AVOID_TAGS
    assert "fragrance" not in tags.avoid_tags
    assert tags.include_tags == ("fragrance",)
