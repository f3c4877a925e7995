"""Process-wide settings, read once from the environment at start-up."""
from __future__ import annotations
import os
from dataclasses import dataclass, field

PROVIDER_NAME = "OpenRouter"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "anthropic/claude-3-haiku"


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    app_url: str = "http://localhost:3000"
    app_title: str = "PT Flow AI"
    request_timeout: float = 60.0
    prompts_path: str | None = None
    session_tokens: frozenset[str] = field(default_factory=frozenset)
    log_level: str = "INFO"

    @property
    def ai_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> Settings:
        tokens = os.getenv("SESSION_TOKENS", "")
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY", "").strip(),
            model=os.getenv("OPENROUTER_MODEL") or DEFAULT_MODEL,
            base_url=(os.getenv("OPENROUTER_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            app_url=os.getenv("APP_URL") or os.getenv("NEXTAUTH_URL") or "http://localhost:3000",
            app_title=os.getenv("APP_TITLE") or "PT Flow AI",
            request_timeout=float(os.getenv("AI_REQUEST_TIMEOUT", "60") or 60),
            prompts_path=os.getenv("PROMPTS_PATH") or None,
            session_tokens=frozenset(t.strip() for t in tokens.split(",") if t.strip()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
