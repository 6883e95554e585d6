# tests/test_general_token.py
from __future__ import annotations

import pytest

from gift_preview.compiler.general.token import normalize_text, split_clauses, word_pattern

"""
Tests: general/token/normalize.py

Goals:
- normalize_text(): Unicode hygiene, lowercasing, whitespace collapse
- split_clauses(): clause boundaries without breaking "7.30" or "$12.50"
- word_pattern(): whole-word, longest-first alternation
"""


# ──────────────────────────────────────────────────────────────────────────────
# normalize_text
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Hello   World ", "hello world"),
        ("Don’t  want\ncandles", "don't want candles"),
        ("Soft–blue", "soft-blue"),
        ("", ""),
        (None, ""),
        (42, ""),
    ],
)
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


def test_normalize_text_keeps_case_when_asked():
    assert normalize_text("  New   Balance ", lower=False) == "New Balance"


# ──────────────────────────────────────────────────────────────────────────────
# split_clauses
# ──────────────────────────────────────────────────────────────────────────────

def test_split_clauses_on_punctuation_and_newlines():
    text = "No candles, include a mug; loves Nike!\nsocks\r\nHe is 10. Thanks?"
    assert split_clauses(text) == [
        "no candles",
        "include a mug",
        "loves nike",
        "socks",
        "he is 10",
        "thanks",
    ]


def test_split_clauses_keeps_decimal_and_time_periods():
    assert split_clauses("Watch at 7.30. Budget $12.50") == ["watch at 7.30", "budget $12.50"]


def test_split_clauses_empty_and_non_str():
    assert split_clauses("") == []
    assert split_clauses(" ,, ; ") == []
    assert split_clauses(None) == []


# ──────────────────────────────────────────────────────────────────────────────
# word_pattern
# ──────────────────────────────────────────────────────────────────────────────

def test_word_pattern_prefers_longest_term():
    pat = word_pattern(["Apple", "Apple Watch", "watch"])
    assert [m.group(0) for m in pat.finditer("an apple watch and an apple")] == [
        "apple watch",
        "apple",
    ]


def test_word_pattern_is_whole_word_only():
    pat = word_pattern(["red", "hat"])
    assert pat.findall("tired of hats, a red hat") == ["red", "hat"]
    assert pat.search("red-ish") is None


def test_word_pattern_empty_vocabulary_is_none():
    assert word_pattern([]) is None
    assert word_pattern(["", "  "]) is None
