"""
controller.py.
=============

Does: Run one preview request through the session state machine:
      quota check, compile, bounded attempt loop with optional independent
      verification, then either the delivered content or a flagged placeholder.
Returns: PreviewResult dicts (never raises for backend or verifier trouble).
Used by: CLI demo (--generate) and any host request handler.
"""

from __future__ import annotations

# ── Imports & Typing ─────────────────────────────────────────────────────────
import logging

from gift_preview.compiler import BrandPolicy, RequestContext, compile_request
from gift_preview.compiler.general.utils import debug
from gift_preview.compiler.lexicon import Lexicon, get_brand_policy
from gift_preview.session.backends import build_backend
from gift_preview.session.errors import BackendError, ConfigurationError, VerificationError
from gift_preview.session.placeholder import StaticPlaceholderProvider
from gift_preview.session.quota import InMemoryQuotaStore
from gift_preview.session.settings import SessionSettings, brand_policy_from_env
from gift_preview.session.types import (
    AttemptRecord,
    ImageBackend,
    PlaceholderProvider,
    PreviewResult,
    QuotaStore,
    Verifier,
)

# ── Logger ───────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)

__all__ = ["GenerationSessionController", "build_controller_from_env"]


def _missing_reason(missing: list[str], explanation: str) -> str:
    if missing:
        return "missing: " + ", ".join(missing)
    return explanation or "rejected by verifier"


class GenerationSessionController:
    """
    Does: Enforce the per-session quota and drive up to `max_attempts`
          sequential backend calls for one request.
    Args: backend: ImageBackend (required); quota: QuotaStore; settings:
          SessionSettings; verifier: optional Verifier, consulted only when
          settings.verification_enabled; placeholder: PlaceholderProvider;
          lexicon/policy: forwarded to compile_request.
    Raises: ConfigurationError when no backend is given.
    """

    def __init__(
        self,
        backend: ImageBackend | None,
        quota: QuotaStore | None = None,
        settings: SessionSettings | None = None,
        verifier: Verifier | None = None,
        placeholder: PlaceholderProvider | None = None,
        lexicon: Lexicon | None = None,
        policy: BrandPolicy | None = None,
    ):
        if backend is None:
            raise ConfigurationError("No image backend configured")
        self.backend = backend
        self.quota = quota if quota is not None else InMemoryQuotaStore()
        self.settings = settings or SessionSettings()
        self.verifier = verifier
        self.placeholder = placeholder or StaticPlaceholderProvider()
        self.lexicon = lexicon
        self.policy = policy if policy is not None else get_brand_policy()

    # ── Attempt helpers ──────────────────────────────────────────────────────
    def _verify(self, content_ref: str, notes: str) -> tuple[bool, str | None, bool]:
        """Returns (accepted, rejection_reason, verifier_failed)."""
        if not (self.settings.verification_enabled and self.verifier is not None):
            return True, None, False
        try:
            verdict = self.verifier.check(content_ref, notes)
        except VerificationError as e:
            logger.warning("Verifier unavailable, returning content unverified: %s", e)
            return False, f"verification unavailable: {e}", True
        if verdict["acceptable"]:
            return True, None, False
        return False, _missing_reason(verdict["missing"], verdict["explanation"]), False

    # ── Public API ───────────────────────────────────────────────────────────
    def run(self, ctx: RequestContext) -> PreviewResult:
        sid = ctx.session_id
        used = self.quota.get(sid)
        if used >= self.settings.max_generations:
            logger.info("session %s: quota exhausted (%d/%d)", sid, used, self.settings.max_generations)
            return PreviewResult(
                status="quota_exceeded",
                accepted=False,
                content_ref=None,
                used_count=used,
                fallback=False,
                reason=f"Generation limit of {self.settings.max_generations} reached for this session",
                attempts=[],
                blocked_brands=[],
            )

        _, composed = compile_request(ctx, self.lexicon, self.policy)
        blocked = list(composed.blocked_brands)
        attempts: list[AttemptRecord] = []
        content: str | None = None
        accepted = False
        last_reason: str | None = None

        for k in range(1, self.settings.max_attempts + 1):
            try:
                ref = self.backend.generate(composed.prompt_text, self.settings.render)
            except BackendError as e:
                logger.warning("session %s: attempt %d on %s failed: %s", sid, k, self.backend.name, e)
                last_reason = str(e)
                attempts.append(AttemptRecord(attempt=k, content_ref=None, accepted=False, rejection_reason=str(e)))
                continue

            content = ref
            accepted, reason, verifier_failed = self._verify(ref, ctx.notes)
            attempts.append(AttemptRecord(attempt=k, content_ref=ref, accepted=accepted, rejection_reason=reason))
            debug(f"attempt {k}: accepted={accepted} reason={reason!r}", "session")
            last_reason = reason
            if accepted or verifier_failed:
                break

        if content is None:
            logger.error("session %s: all %d attempts failed; serving placeholder", sid, len(attempts))
            return PreviewResult(
                status="fallback",
                accepted=False,
                content_ref=self.placeholder.build(ctx),
                used_count=used,
                fallback=True,
                reason=f"Preview generation failed after {len(attempts)} attempt(s): {last_reason}",
                attempts=attempts,
                blocked_brands=blocked,
            )

        new_count = self.quota.increment(sid)
        return PreviewResult(
            status="ok" if accepted else "unverified",
            accepted=accepted,
            content_ref=content,
            used_count=new_count,
            fallback=False,
            reason=None if accepted else last_reason,
            attempts=attempts,
            blocked_brands=blocked,
        )


# ── Factory ──────────────────────────────────────────────────────────────────
def build_controller_from_env(quota: QuotaStore | None = None) -> GenerationSessionController:
    """
    Does: Wire a controller from environment configuration: backend by name,
          OpenRouter verifier when GIFT_PREVIEW_VERIFY is on, brand policy overrides.
    Raises: ConfigurationError for an unknown backend or missing credentials.
    """
    from gift_preview.session.verifier import OpenRouterVerifier

    settings = SessionSettings.from_env()
    backend = build_backend(settings.backend)
    verifier = OpenRouterVerifier() if settings.verification_enabled else None
    return GenerationSessionController(
        backend,
        quota=quota,
        settings=settings,
        verifier=verifier,
        policy=brand_policy_from_env(),
    )
