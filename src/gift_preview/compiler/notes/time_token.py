"""
time_token.py.

Does: Find a literal clock time ("10:10", "7.30") requested for a watch or clock dial.
Returns: extract_time_token() → "H:MM" with ':' as separator, or None.
"""

from __future__ import annotations

import re

from gift_preview.compiler.general.token import normalize_text

__all__ = ["extract_time_token"]

# hour 0-23, minute 00-59, ':' or '.' separator; prices ("$12.50") and decimals excluded
_TIME_RE = re.compile(r"(?<![\d$€£.,:])([01]?\d|2[0-3])[:.]([0-5]\d)(?![\d.:,]\d|\d)")


def extract_time_token(notes: str | None) -> str | None:
    text = normalize_text(notes)
    m = _TIME_RE.search(text)
    if not m:
        return None
    return f"{m.group(1)}:{m.group(2)}"
