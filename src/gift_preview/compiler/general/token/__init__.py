"""
token.
=====

Does: Text hygiene shared by the notes extractor and the composer.
Returns: normalize_text(), split_clauses(), word_pattern().
"""

from __future__ import annotations

from .normalize import normalize_text, split_clauses, word_pattern

__all__ = ["normalize_text", "split_clauses", "word_pattern"]
