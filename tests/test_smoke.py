import json

import pytest

from gift_preview import demo
from gift_preview.compiler import InvalidRequestError, compile_payload
from gift_preview.demo import main


def test_smoke():
    out = compile_payload(
        {
            "recipient": "  Friend ",
            "occasion": "Birthday",
            "vibe": "Minimalist",
            "tier": "premium",
            "notes": "no candles, include a mug",
            "sessionId": "abc",
        }
    )
    assert isinstance(out, dict)
    for key in ("tags", "must_include", "negative", "permitted_brands", "blocked_brands", "prompt_text"):
        assert key in out
    assert out["tags"]["avoid_tags"] == ["candles"]
    assert out["tags"]["include_tags"] == ["mug"]
    assert "Tier: Premium" in out["prompt_text"]
    assert "Recipient: Friend" in out["prompt_text"]
    json.dumps(out)


def test_smoke_missing_session_id():
    with pytest.raises(InvalidRequestError):
        compile_payload({"occasion": "Birthday"})
    assert compile_payload({"occasion": "Birthday"}, session_id="s")["must_include"]


def test_demo_prints_json(capsys):
    main(["--occasion", "Halloween", "--vibe", "Playful", "loves", "horror,", "9", "years", "old"])
    out = json.loads(capsys.readouterr().out)
    assert out["tags"]["age_band"] == "7-10"
    assert out["tags"]["special_modes"] == ["themed"]


def test_demo_generate_without_credentials_exits(monkeypatch, capsys):
    monkeypatch.setenv("GIFT_PREVIEW_BACKEND", "replicate")
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    monkeypatch.setattr(demo, "load_dotenv", lambda: False)
    with pytest.raises(SystemExit) as exc:
        main(["--generate", "include a mug"])
    assert exc.value.code == 1
    assert "REPLICATE_API_TOKEN" in capsys.readouterr().err
