"""Dataclasses for gateway request/response types."""
from __future__ import annotations
from dataclasses import dataclass

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


@dataclass(frozen=True)
class GenerationRequest:
    """One system + user prompt pair and its sampling parameters.

    ``model`` of None means the configured default model.
    """
    system_prompt: str
    user_prompt: str
    model: str | None = None
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS


@dataclass(frozen=True)
class GenerationResult:
    """Completion text, or an error message with empty text."""
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> GenerationResult:
        return cls(text="", error=message)
