"""
types.py.

Does: Define the structural contracts the session controller talks to
      (backend, verifier, placeholder provider, quota store) and the
      dict-shaped records it returns.
Used by: controller, backends, verifier, placeholder, quota, tests.
"""

from __future__ import annotations

from typing import Literal, Protocol, TypedDict, runtime_checkable

from gift_preview.compiler.types import RequestContext
from gift_preview.session.settings import RenderParams

__all__ = [
    "ImageBackend",
    "Verifier",
    "PlaceholderProvider",
    "QuotaStore",
    "Verdict",
    "AttemptRecord",
    "PreviewResult",
    "Status",
]

Status = Literal["ok", "unverified", "fallback", "quota_exceeded"]


class Verdict(TypedDict):
    acceptable: bool
    missing: list[str]
    explanation: str


class AttemptRecord(TypedDict):
    attempt: int
    content_ref: str | None
    accepted: bool
    rejection_reason: str | None


class PreviewResult(TypedDict):
    status: Status
    accepted: bool
    content_ref: str | None
    used_count: int
    fallback: bool
    reason: str | None
    attempts: list[AttemptRecord]
    blocked_brands: list[str]


@runtime_checkable
class ImageBackend(Protocol):
    """
    Any image-generation provider. generate() returns a content reference
    (URL or data URI) or raises BackendError.
    """

    name: str

    def generate(self, prompt: str, params: RenderParams) -> str: ...


@runtime_checkable
class Verifier(Protocol):
    """Independent check that the produced image honours the notes; raises VerificationError."""

    def check(self, content_ref: str, notes: str) -> Verdict: ...


@runtime_checkable
class PlaceholderProvider(Protocol):
    def build(self, ctx: RequestContext) -> str: ...


@runtime_checkable
class QuotaStore(Protocol):
    def get(self, session_id: str) -> int: ...
    def increment(self, session_id: str) -> int: ...
