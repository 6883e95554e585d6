"""
session
=======

Generation session layer: per-session quota, interchangeable image backends,
optional verification and the placeholder fallback.
"""

from __future__ import annotations

from .backends import BACKENDS, OpenAIImageBackend, ReplicateBackend, build_backend
from .controller import GenerationSessionController, build_controller_from_env
from .errors import (
    BackendError,
    ConfigurationError,
    InvalidRequestError,
    PreviewError,
    VerificationError,
)
from .placeholder import StaticPlaceholderProvider
from .quota import InMemoryQuotaStore
from .settings import RenderParams, SessionSettings, brand_policy_from_env
from .types import (
    AttemptRecord,
    ImageBackend,
    PlaceholderProvider,
    PreviewResult,
    QuotaStore,
    Verdict,
    Verifier,
)
from .verifier import OpenRouterVerifier

__all__ = [
    "GenerationSessionController",
    "build_controller_from_env",
    "BACKENDS",
    "ReplicateBackend",
    "OpenAIImageBackend",
    "build_backend",
    "OpenRouterVerifier",
    "StaticPlaceholderProvider",
    "InMemoryQuotaStore",
    "RenderParams",
    "SessionSettings",
    "brand_policy_from_env",
    "PreviewError",
    "ConfigurationError",
    "InvalidRequestError",
    "BackendError",
    "VerificationError",
    "ImageBackend",
    "Verifier",
    "PlaceholderProvider",
    "QuotaStore",
    "Verdict",
    "AttemptRecord",
    "PreviewResult",
]
