"""Error family for the generation session layer."""

from __future__ import annotations

from gift_preview.compiler.types import InvalidRequestError

__all__ = [
    "PreviewError",
    "ConfigurationError",
    "InvalidRequestError",
    "BackendError",
    "VerificationError",
]


class PreviewError(Exception):
    """Base exception for the gift preview session layer."""


class ConfigurationError(PreviewError):
    """Raised before any attempt when the controller cannot run (no backend, missing credentials)."""


class BackendError(PreviewError):
    """Raised by an image backend when a generation attempt yields no content."""


class VerificationError(PreviewError):
    """Raised by a verifier that could not reach a verdict."""
