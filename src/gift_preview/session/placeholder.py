"""
placeholder.py.

Does: Build the clearly flagged fallback image reference returned when every
      generation attempt failed, so the caller's flow never dead-ends.
"""

from __future__ import annotations

import os
from urllib.parse import urlencode

from gift_preview.compiler.types import RequestContext

__all__ = ["StaticPlaceholderProvider", "DEFAULT_PLACEHOLDER_URL"]

DEFAULT_PLACEHOLDER_URL = os.getenv(
    "GIFT_PREVIEW_PLACEHOLDER_URL", "/static/gift-preview-placeholder.webp"
)


class StaticPlaceholderProvider:
    """Does: Point at a host-served placeholder asset, tagged with occasion/vibe for analytics."""

    def __init__(self, base_url: str = DEFAULT_PLACEHOLDER_URL):
        self.base_url = base_url

    def build(self, ctx: RequestContext) -> str:
        query = {k: v for k, v in (("occasion", ctx.occasion), ("vibe", ctx.vibe)) if v}
        query["placeholder"] = "1"
        sep = "&" if "?" in self.base_url else "?"
        return f"{self.base_url}{sep}{urlencode(query)}"
