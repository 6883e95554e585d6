"""
verifier.py.
===========

Does: Ask a vision model on OpenRouter whether a generated preview honours the
      user's notes, and parse its JSON verdict (acceptable, missing items,
      explanation) leniently.
Returns: Verdict dicts; VerificationError when no verdict could be obtained.
Used by: Generation session controller when verification is enabled.
"""

from __future__ import annotations

# ── Imports & Typing ─────────────────────────────────────────────────────────
import json
import logging
import os
import re

import requests  # type: ignore[import-untyped]

from gift_preview.session.errors import ConfigurationError, VerificationError
from gift_preview.session.types import Verdict

# ── Logger ───────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)

# ── Config (env-overridable) ─────────────────────────────────────────────────
OPENROUTER_API_URL = os.getenv("OPENROUTER_API_URL", "https://openrouter.ai/api/v1/chat/completions")
VERIFIER_MODEL = os.getenv("OPENROUTER_VISION_MODEL", "openai/gpt-4o-mini")
VERIFIER_MAX_TOKENS = int(os.getenv("OPENROUTER_MAX_TOKENS", "300"))
VERIFIER_TIMEOUT = float(os.getenv("OPENROUTER_TIMEOUT", "30"))  # seconds

# Single session for connection reuse
_session = requests.Session()

__all__ = [
    "OpenRouterVerifier",
    "has_api_key",
    "build_verification_prompt",
    "parse_verdict",
]

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_YES = {"true", "yes", "1", "acceptable", "pass"}


def has_api_key() -> bool:
    """Does: Check presence of OPENROUTER_API_KEY in environment."""
    return bool(os.getenv("OPENROUTER_API_KEY"))


# ── Prompt construction ──────────────────────────────────────────────────────
def build_verification_prompt(notes: str) -> str:
    """Does: Instruction asking the model for a strict JSON verdict on the notes."""
    return (
        "You review AI-generated gift box preview images against the customer's notes.\n"
        "Check only concrete, visual requests (requested items, excluded items, colors, "
        "displayed times). Ignore tone words.\n"
        'Respond ONLY with JSON: {"acceptable": true|false, "missing": ["..."], '
        '"explanation": "..."}\n'
        f"Customer notes: '{notes.strip() or 'None'}'"
    )


# ── Parsing ──────────────────────────────────────────────────────────────────
def parse_verdict(content: str) -> Verdict:
    """
    Does: Extract the first JSON object from a reply and coerce its fields.
    Raises: VerificationError when no usable object is found.
    """
    match = _JSON_OBJECT_RE.search(content or "")
    if not match:
        raise VerificationError(f"verifier reply has no JSON object: {content!r}")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise VerificationError(f"verifier reply is not valid JSON: {e}") from e
    if not isinstance(data, dict) or "acceptable" not in data:
        raise VerificationError("verifier reply lacks an 'acceptable' field")

    acceptable = data["acceptable"]
    if not isinstance(acceptable, bool):
        acceptable = str(acceptable).strip().lower() in _YES
    missing = data.get("missing") or []
    if isinstance(missing, str):
        missing = [missing]
    elif not isinstance(missing, list):
        raise VerificationError("verifier reply has a non-list 'missing' field")
    return Verdict(
        acceptable=acceptable,
        missing=[str(m) for m in missing if str(m).strip()],
        explanation=str(data.get("explanation") or ""),
    )


# ── Client ───────────────────────────────────────────────────────────────────
class OpenRouterVerifier:
    """
    Does: Independent verification via an OpenRouter vision-capable chat model.
    Args: model: str; max_tokens: int.
    Raises: ConfigurationError if the API key is missing.
    """

    def __init__(self, model: str = VERIFIER_MODEL, max_tokens: int = VERIFIER_MAX_TOKENS):
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise ConfigurationError("OPENROUTER_API_KEY missing")
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, messages: list[dict]) -> str:
        try:
            resp = _session.post(
                OPENROUTER_API_URL,
                headers=self._headers(),
                json={
                    "model": self.model,
                    "temperature": 0,
                    "max_tokens": self.max_tokens,
                    "messages": messages,
                },
                timeout=VERIFIER_TIMEOUT,
            )
        except requests.RequestException as e:
            raise VerificationError(f"verifier transport error: {e}") from e
        if resp.status_code != 200:
            raise VerificationError(f"verifier status={resp.status_code} body={resp.text[:300]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise VerificationError("verifier returned a non-JSON body") from e
        choices = data.get("choices") if isinstance(data, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else None
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise VerificationError("verifier returned empty content")
        return content

    def check(self, content_ref: str, notes: str) -> Verdict:
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": build_verification_prompt(notes)},
                    {"type": "image_url", "image_url": {"url": content_ref}},
                ],
            }
        ]
        verdict = parse_verdict(self._post(messages))
        logger.debug(
            "[verifier] acceptable=%s missing=%s", verdict["acceptable"], verdict["missing"]
        )
        return verdict
