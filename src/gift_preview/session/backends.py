"""
backends.py.
===========

Does: Call the interchangeable image-generation providers over HTTP (Replicate
      predictions API, OpenAI images API) behind the ImageBackend contract, and
      select one by name.
Returns: Content references (image URL or base64 data URI); BackendError on failure.
Used by: Generation session controller.
"""

from __future__ import annotations

# ── Imports & Typing ─────────────────────────────────────────────────────────
import logging
import os
import time
from collections.abc import Callable
from typing import Any

import requests  # type: ignore[import-untyped]

from gift_preview.session.errors import BackendError, ConfigurationError
from gift_preview.session.settings import RenderParams
from gift_preview.session.types import ImageBackend

# ── Logger ───────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)

# ── Config (env-overridable) ─────────────────────────────────────────────────
REPLICATE_API_URL = os.getenv("REPLICATE_API_URL", "https://api.replicate.com/v1")
REPLICATE_MODEL = os.getenv("REPLICATE_MODEL", "black-forest-labs/flux-dev")
REPLICATE_POLL_INTERVAL = float(os.getenv("REPLICATE_POLL_INTERVAL", "1.5"))  # seconds
REPLICATE_POLL_LIMIT = int(os.getenv("REPLICATE_POLL_LIMIT", "40"))

OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1")
OPENAI_IMAGE_MODEL = os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1")

BACKEND_TIMEOUT = float(os.getenv("GIFT_PREVIEW_BACKEND_TIMEOUT", "120"))  # seconds

# Single session for connection reuse
_session = requests.Session()

__all__ = [
    "ReplicateBackend",
    "OpenAIImageBackend",
    "BACKENDS",
    "build_backend",
]

_TERMINAL_FAILURES = {"failed", "canceled"}
_OPENAI_SIZES = {"1:1": "1024x1024", "3:2": "1536x1024", "2:3": "1024x1536"}


def _status(data: dict) -> str:
    status = data.get("status")
    return status if isinstance(status, str) else ""


def _first_output(output: Any) -> str | None:
    if isinstance(output, list):
        output = output[0] if output else None
    return output if isinstance(output, str) and output else None


# ── Replicate ────────────────────────────────────────────────────────────────
class ReplicateBackend:
    """Does: Run a Replicate model prediction (Prefer: wait, then bounded polling)."""

    name = "replicate"

    def __init__(self, model: str = REPLICATE_MODEL, api_token: str | None = None):
        token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not token:
            raise ConfigurationError("REPLICATE_API_TOKEN missing")
        self.api_token = token
        self.model = model

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }

    def _payload(self, prompt: str, params: RenderParams) -> dict:
        return {
            "input": {
                "prompt": prompt,
                "aspect_ratio": params.aspect_ratio,
                "output_format": params.output_format,
                "output_quality": params.quality,
            }
        }

    def _request(self, method: str, url: str, **kwargs: Any) -> dict:
        try:
            resp = _session.request(
                method, url, headers=self._headers(), timeout=BACKEND_TIMEOUT, **kwargs
            )
        except requests.RequestException as e:
            raise BackendError(f"replicate transport error: {e}") from e
        if resp.status_code not in (200, 201, 202):
            raise BackendError(f"replicate status={resp.status_code} body={resp.text[:300]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise BackendError("replicate returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise BackendError(f"replicate returned {type(data).__name__}, expected an object")
        return data

    def generate(self, prompt: str, params: RenderParams) -> str:
        data = self._request(
            "POST",
            f"{REPLICATE_API_URL}/models/{self.model}/predictions",
            json=self._payload(prompt, params),
        )
        polls = 0
        while _status(data) not in {"succeeded", *_TERMINAL_FAILURES}:
            urls = data.get("urls")
            poll_url = urls.get("get") if isinstance(urls, dict) else None
            if not isinstance(poll_url, str) or not poll_url or polls >= REPLICATE_POLL_LIMIT:
                raise BackendError(f"replicate prediction unfinished (status={data.get('status')})")
            time.sleep(REPLICATE_POLL_INTERVAL)
            polls += 1
            data = self._request("GET", poll_url)

        if _status(data) in _TERMINAL_FAILURES:
            raise BackendError(f"replicate prediction {data.get('status')}: {data.get('error')}")

        url = _first_output(data.get("output"))
        if not url:
            raise BackendError("replicate prediction returned no output")
        logger.debug("[replicate] prediction %s succeeded after %d poll(s)", data.get("id"), polls)
        return url


# ── OpenAI images ────────────────────────────────────────────────────────────
class OpenAIImageBackend:
    """Does: Call the OpenAI images API; URL responses pass through, base64 becomes a data URI."""

    name = "openai"

    def __init__(self, model: str = OPENAI_IMAGE_MODEL, api_key: str | None = None):
        key = api_key or os.getenv("OPENAI_API_KEY")
        if not key:
            raise ConfigurationError("OPENAI_API_KEY missing")
        self.api_key = key
        self.model = model

    def _payload(self, prompt: str, params: RenderParams) -> dict:
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "n": 1,
            "size": _OPENAI_SIZES.get(params.aspect_ratio, "1024x1024"),
        }
        if self.model.startswith("dall-e"):
            payload["response_format"] = "url"
        else:
            payload["output_format"] = params.output_format
            if params.output_format in ("webp", "jpeg"):
                payload["output_compression"] = params.quality
        return payload

    def generate(self, prompt: str, params: RenderParams) -> str:
        try:
            resp = _session.post(
                f"{OPENAI_API_URL}/images/generations",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=self._payload(prompt, params),
                timeout=BACKEND_TIMEOUT,
            )
        except requests.RequestException as e:
            raise BackendError(f"openai transport error: {e}") from e
        if resp.status_code != 200:
            raise BackendError(f"openai status={resp.status_code} body={resp.text[:300]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise BackendError("openai returned a non-JSON body") from e

        items = data.get("data") if isinstance(data, dict) else None
        item = items[0] if isinstance(items, list) and items else None
        if not isinstance(item, dict):
            raise BackendError("openai response has no image entry in 'data'")
        if isinstance(item.get("url"), str) and item["url"]:
            return item["url"]
        if isinstance(item.get("b64_json"), str) and item["b64_json"]:
            return f"data:image/{params.output_format};base64,{item['b64_json']}"
        raise BackendError("openai response missing both 'url' and 'b64_json'")


# ── Selection ────────────────────────────────────────────────────────────────
BACKENDS: dict[str, Callable[[], ImageBackend]] = {
    ReplicateBackend.name: ReplicateBackend,
    OpenAIImageBackend.name: OpenAIImageBackend,
}


def build_backend(name: str) -> ImageBackend:
    """
    Does: Instantiate the configured backend by name.
    Raises: ConfigurationError for an unknown name or missing credentials.
    """
    factory = BACKENDS.get((name or "").strip().lower())
    if factory is None:
        raise ConfigurationError(
            f"Unknown image backend {name!r}; expected one of {sorted(BACKENDS)}"
        )
    return factory()
