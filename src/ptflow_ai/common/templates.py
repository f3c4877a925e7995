"""Prompt templating helpers.

Prompts live in a YAML prompt pack (``prompts.yaml`` next to this module by
default). Each top-level key names one prompt with a ``system`` text, a
``user`` template containing ``{{field}}`` placeholders, and optional
``temperature`` / ``max_tokens`` sampling parameters.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from ptflow_ai.common.schema import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, GenerationRequest

DEFAULT_PROMPTS_PATH = Path(__file__).with_name("prompts.yaml")

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
_BLANK_RUN = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")


@dataclass(frozen=True)
class PromptSpec:
    """A system prompt, a user template and the sampling parameters for one call."""
    name: str
    system: str
    user: str
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    def request(self, **fields: Any) -> GenerationRequest:
        """Render the user template with ``fields`` into a gateway request."""
        return GenerationRequest(
            system_prompt=self.system.strip(),
            user_prompt=render_prompt(self.user, **fields),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


PromptPack = dict[str, PromptSpec]


def render_prompt(template: str, **fields: Any) -> str:
    """
    Render fields into the template.

    Args:
        template: Template content containing ``{{name}}`` placeholders.
        fields: Values to substitute. None renders as an empty string.

    Returns:
        Rendered prompt. A template line holding only a placeholder whose
        value is empty is dropped, and the blank lines around it collapse to
        one. Field values are inserted unchanged.

    Raises:
        KeyError: A placeholder has no matching field.
    """
    def _value(name: str) -> str:
        value = fields[name]
        return "" if value is None else str(value)

    kept = []
    for line in template.split("\n"):
        alone = _PLACEHOLDER.fullmatch(line.strip())
        if alone and not _value(alone.group(1)):
            continue
        kept.append(line)
    template = _BLANK_RUN.sub("\n\n", "\n".join(kept)).strip()
    return _PLACEHOLDER.sub(lambda m: _value(m.group(1)), template)


def optional_section(heading: str, value: str | None) -> str:
    """Return ``heading:`` followed by ``value`` on the next line, or "" when value is empty."""
    if not value or not str(value).strip():
        return ""
    return f"{heading}:\n{value}"


def _to_spec(name: str, raw: Any) -> PromptSpec:
    if not isinstance(raw, dict):
        raise ValueError(f"Prompt '{name}' must be a mapping, got {type(raw).__name__}")
    return PromptSpec(
        name=name,
        system=str(raw.get("system") or ""),
        user=str(raw.get("user") or ""),
        temperature=float(raw.get("temperature", DEFAULT_TEMPERATURE)),
        max_tokens=int(raw.get("max_tokens", DEFAULT_MAX_TOKENS)),
    )


def load_template(path: str | Path | None = None) -> PromptPack:
    """
    Load a prompt pack file.

    Args:
        path: Path to a YAML prompt pack. Defaults to the packaged one.
    """
    path = Path(path) if path else DEFAULT_PROMPTS_PATH
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Prompt pack {path} must be a mapping of prompt names")
    return {name: _to_spec(name, raw) for name, raw in data.items()}


@lru_cache(maxsize=None)
def default_prompts() -> PromptPack:
    return load_template()


def find_pack_problems(pack: PromptPack, names: list[str] | tuple[str, ...]) -> list[str]:
    """List prompts in ``names`` that are missing from the pack or lack system/user text."""
    problems = []
    for name in names:
        spec = pack.get(name)
        if spec is None:
            problems.append(f"{name}: missing")
            continue
        if not spec.system.strip():
            problems.append(f"{name}: empty system prompt")
        if not spec.user.strip():
            problems.append(f"{name}: empty user template")
    return problems
