# tests/test_session_controller.py
"""Generation session controller: quota, retries, verification and fallback."""

from __future__ import annotations

import pytest

from gift_preview.compiler.types import RequestContext, Tier
from gift_preview.session import (
    BackendError,
    ConfigurationError,
    GenerationSessionController,
    ImageBackend,
    InMemoryQuotaStore,
    SessionSettings,
    StaticPlaceholderProvider,
    VerificationError,
    build_controller_from_env,
)


# ── Dummies ───────────────────────────────────────────────────────────────────
class DummyBackend:
    name = "dummy"

    def __init__(self, outcomes=None):
        # each outcome: a content ref string or an Exception to raise
        self.outcomes = list(outcomes or [])
        self.calls = []

    def generate(self, prompt, params):
        self.calls.append((prompt, params))
        outcome = self.outcomes.pop(0) if self.outcomes else "https://img.example/default.webp"
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class DummyVerifier:
    def __init__(self, verdicts):
        self.verdicts = list(verdicts)
        self.calls = []

    def check(self, content_ref, notes):
        self.calls.append((content_ref, notes))
        verdict = self.verdicts.pop(0)
        if isinstance(verdict, Exception):
            raise verdict
        return verdict


def _ctx(session_id="sess-1", notes="no candles, include a mug") -> RequestContext:
    return RequestContext(
        recipient="Friend",
        occasion="Birthday",
        vibe="Minimalist",
        tier=Tier.STANDARD,
        notes=notes,
        session_id=session_id,
    )


def _verdict(ok, missing=(), explanation=""):
    return {"acceptable": ok, "missing": list(missing), "explanation": explanation}


# ── Tests ─────────────────────────────────────────────────────────────────────
def test_case_01_dummy_backend_satisfies_protocol():
    assert isinstance(DummyBackend(), ImageBackend)


def test_case_02_missing_backend_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        GenerationSessionController(None, InMemoryQuotaStore())


def test_case_03_accepted_result_increments_quota_once():
    backend = DummyBackend(["https://img.example/1.webp"])
    quota = InMemoryQuotaStore()
    ctrl = GenerationSessionController(backend, quota)

    result = ctrl.run(_ctx())

    assert result["status"] == "ok"
    assert result["accepted"] is True
    assert result["fallback"] is False
    assert result["content_ref"] == "https://img.example/1.webp"
    assert result["used_count"] == 1
    assert quota.get("sess-1") == 1
    prompt, params = backend.calls[0]
    assert "no candles, no candle-like objects, no wax items" in prompt
    assert params.aspect_ratio == "1:1"


def test_case_04_quota_exhausted_skips_backend():
    backend = DummyBackend()
    quota = InMemoryQuotaStore()
    ctrl = GenerationSessionController(backend, quota, SessionSettings(max_generations=2))

    assert ctrl.run(_ctx())["used_count"] == 1
    assert ctrl.run(_ctx())["used_count"] == 2
    calls_before = len(backend.calls)

    result = ctrl.run(_ctx())
    assert result["status"] == "quota_exceeded"
    assert result["accepted"] is False
    assert result["content_ref"] is None
    assert result["used_count"] == 2
    assert len(backend.calls) == calls_before


def test_case_05_quota_is_per_session():
    ctrl = GenerationSessionController(DummyBackend(), InMemoryQuotaStore(), SessionSettings(max_generations=1))
    assert ctrl.run(_ctx("a"))["status"] == "ok"
    assert ctrl.run(_ctx("a"))["status"] == "quota_exceeded"
    assert ctrl.run(_ctx("b"))["status"] == "ok"


def test_case_06_transport_failure_then_success_retries():
    backend = DummyBackend([BackendError("timeout"), "https://img.example/2.webp"])
    ctrl = GenerationSessionController(backend, InMemoryQuotaStore(), SessionSettings(max_attempts=2))

    result = ctrl.run(_ctx())
    assert result["status"] == "ok"
    assert result["content_ref"] == "https://img.example/2.webp"
    assert [a["content_ref"] for a in result["attempts"]] == [None, "https://img.example/2.webp"]
    assert result["attempts"][0]["rejection_reason"] == "timeout"


def test_case_07_always_failing_backend_falls_back_without_quota():
    backend = DummyBackend([BackendError("boom")] * 3)
    quota = InMemoryQuotaStore()
    quota.increment("sess-1")
    placeholder = StaticPlaceholderProvider("https://cdn.example/placeholder.webp")
    ctrl = GenerationSessionController(
        backend, quota, SessionSettings(max_attempts=3), placeholder=placeholder
    )

    result = ctrl.run(_ctx())
    assert result["status"] == "fallback"
    assert result["fallback"] is True
    assert result["accepted"] is False
    assert result["used_count"] == 1
    assert quota.get("sess-1") == 1
    assert result["content_ref"].startswith("https://cdn.example/placeholder.webp?")
    assert "occasion=Birthday" in result["content_ref"]
    assert "boom" in result["reason"]
    assert len(backend.calls) == 3


def test_case_08_verifier_rejection_retries_then_accepts():
    backend = DummyBackend(["https://img.example/a.webp", "https://img.example/b.webp"])
    verifier = DummyVerifier([_verdict(False, ["mug"]), _verdict(True)])
    ctrl = GenerationSessionController(
        backend,
        InMemoryQuotaStore(),
        SessionSettings(max_attempts=2, verification_enabled=True),
        verifier=verifier,
    )

    result = ctrl.run(_ctx())
    assert result["status"] == "ok"
    assert result["content_ref"] == "https://img.example/b.webp"
    assert result["attempts"][0]["rejection_reason"] == "missing: mug"
    assert verifier.calls[0] == ("https://img.example/a.webp", "no candles, include a mug")


def test_case_09_last_rejected_content_returned_unverified():
    backend = DummyBackend(["https://img.example/a.webp", "https://img.example/b.webp"])
    verifier = DummyVerifier([_verdict(False, ["mug"]), _verdict(False, [], "candles visible")])
    quota = InMemoryQuotaStore()
    ctrl = GenerationSessionController(
        backend, quota, SessionSettings(max_attempts=2, verification_enabled=True), verifier=verifier
    )

    result = ctrl.run(_ctx())
    assert result["status"] == "unverified"
    assert result["accepted"] is False
    assert result["fallback"] is False
    assert result["content_ref"] == "https://img.example/b.webp"
    assert result["reason"] == "candles visible"
    assert result["used_count"] == 1
    assert quota.get("sess-1") == 1


def test_case_10_verifier_outage_returns_content_unverified_without_retry():
    backend = DummyBackend(["https://img.example/a.webp", "https://img.example/b.webp"])
    verifier = DummyVerifier([VerificationError("openrouter down")])
    ctrl = GenerationSessionController(
        backend,
        InMemoryQuotaStore(),
        SessionSettings(max_attempts=2, verification_enabled=True),
        verifier=verifier,
    )

    result = ctrl.run(_ctx())
    assert result["status"] == "unverified"
    assert result["content_ref"] == "https://img.example/a.webp"
    assert len(backend.calls) == 1
    assert "openrouter down" in result["reason"]


def test_case_11_verifier_ignored_when_disabled():
    verifier = DummyVerifier([])
    ctrl = GenerationSessionController(
        DummyBackend(), InMemoryQuotaStore(), SessionSettings(verification_enabled=False), verifier=verifier
    )
    assert ctrl.run(_ctx())["status"] == "ok"
    assert verifier.calls == []


def test_case_12_blocked_brands_are_reported():
    ctrl = GenerationSessionController(DummyBackend(), InMemoryQuotaStore())
    result = ctrl.run(_ctx(notes="no adidas, include a mug"))
    assert result["blocked_brands"] == ["Adidas"]


def test_case_13_settings_from_env(monkeypatch):
    monkeypatch.setenv("GIFT_PREVIEW_MAX_GENERATIONS", "5")
    monkeypatch.setenv("GIFT_PREVIEW_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("GIFT_PREVIEW_BACKEND", " OpenAI ")
    monkeypatch.setenv("GIFT_PREVIEW_VERIFY", "yes")
    monkeypatch.setenv("GIFT_PREVIEW_QUALITY", "not-a-number")
    s = SessionSettings.from_env()
    assert s.max_generations == 5
    assert s.max_attempts == 1
    assert s.backend == "openai"
    assert s.verification_enabled is True
    assert s.render.quality == 85


def test_case_14_build_from_env_requires_credentials(monkeypatch):
    monkeypatch.setenv("GIFT_PREVIEW_BACKEND", "replicate")
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    with pytest.raises(ConfigurationError):
        build_controller_from_env()

    monkeypatch.setenv("GIFT_PREVIEW_BACKEND", "midjourney")
    with pytest.raises(ConfigurationError):
        build_controller_from_env()


def test_case_15_build_from_env_wires_verifier_and_policy(monkeypatch):
    monkeypatch.setenv("GIFT_PREVIEW_BACKEND", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GIFT_PREVIEW_VERIFY", "1")
    monkeypatch.setenv("OPENROUTER_API_KEY", "or-test")
    monkeypatch.setenv("GIFT_PREVIEW_STRICT_BRANDS", "true")
    monkeypatch.setenv("GIFT_PREVIEW_BRAND_ALLOW", "Nike, Lego")

    ctrl = build_controller_from_env()
    assert ctrl.backend.name == "openai"
    assert ctrl.verifier is not None
    assert ctrl.policy.strict_mode is True
    assert ctrl.policy.allow_list == frozenset({"nike", "lego"})
    assert "disney" in ctrl.policy.deny_list
