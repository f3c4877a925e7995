from __future__ import annotations

import pytest

from ptflow_ai.common.config import DEFAULT_BASE_URL, DEFAULT_MODEL, Settings
from ptflow_ai.serve.auth import StaticTokenVerifier


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENROUTER_API_KEY", "OPENROUTER_MODEL", "OPENROUTER_BASE_URL", "APP_URL", "NEXTAUTH_URL",
                 "AI_REQUEST_TIMEOUT", "SESSION_TOKENS", "PROMPTS_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = Settings.from_env()
    assert s.api_key == ""
    assert not s.ai_configured
    assert s.model == DEFAULT_MODEL
    assert s.base_url == DEFAULT_BASE_URL
    assert s.app_url == "http://localhost:3000"
    assert s.request_timeout == 60.0
    assert s.session_tokens == frozenset()


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY", " sk-or-123 ")
    monkeypatch.setenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")
    monkeypatch.setenv("OPENROUTER_BASE_URL", "https://proxy.internal/api/v1/")
    monkeypatch.delenv("APP_URL", raising=False)
    monkeypatch.setenv("NEXTAUTH_URL", "https://ptflow.example")
    monkeypatch.setenv("AI_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("SESSION_TOKENS", "a, b,,c")
    s = Settings.from_env()
    assert s.api_key == "sk-or-123"
    assert s.ai_configured
    assert s.model == "anthropic/claude-3.5-sonnet"
    assert s.base_url == "https://proxy.internal/api/v1"
    assert s.app_url == "https://ptflow.example"
    assert s.request_timeout == 30.0
    assert s.session_tokens == frozenset({"a", "b", "c"})


def test_settings_are_immutable() -> None:
    s = Settings(api_key="k")
    with pytest.raises(AttributeError):
        s.api_key = "other"  # type: ignore[misc]


def test_static_token_verifier() -> None:
    verify = StaticTokenVerifier(["tok-1", ""])
    assert verify("tok-1")
    assert not verify("tok-2")
    assert not verify("")
    assert not StaticTokenVerifier([])("anything")
