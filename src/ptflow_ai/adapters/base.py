"""Shared pieces for the feature adapters.

An adapter validates its input, renders a prompt from the prompt pack, calls
the gateway and post-processes the completion. Failures are raised as
``AdapterError`` subclasses, which the HTTP layer maps to status codes.
"""
from __future__ import annotations
from typing import Any, Iterable, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ptflow_ai.common.schema import GenerationRequest, GenerationResult
from ptflow_ai.common.templates import PromptPack, default_prompts

ModelT = TypeVar("ModelT", bound=BaseModel)


class AdapterError(Exception):
    """Base class for adapter failures."""


class InvalidInputError(AdapterError):
    """The input cannot be used. Raised before any gateway call."""

    def __init__(self, message: str, received: Any = None) -> None:
        self.received = received
        super().__init__(message)


class MissingFieldsError(InvalidInputError):
    """Required input fields are absent or empty."""

    def __init__(self, missing: list[str], received: dict[str, Any]) -> None:
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}", received)


class GenerationError(AdapterError):
    """The gateway returned an error; the message is passed through unchanged."""


class Generator(Protocol):
    def generate(self, request: GenerationRequest) -> GenerationResult: ...


class CamelModel(BaseModel):
    """Base for adapter inputs and outputs; camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatientRef(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    primary_diagnosis: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


def parse_input(model: type[ModelT], body: Any) -> ModelT:
    """Validate a raw JSON body into ``model``, reporting failures as InvalidInputError."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid request body: {e.error_count()} validation error(s)", body) from e


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def require_fields(data: CamelModel, names: Iterable[str]) -> None:
    """
    Check that every named attribute of ``data`` is present.

    Args:
        data: Parsed adapter input.
        names: Attribute names (snake_case) that must be non-empty.

    Raises:
        MissingFieldsError: With the camelCase names of the missing fields and
            the parsed values of all required fields.
    """
    names = list(names)
    dumped = data.model_dump(mode="json", by_alias=True, include=set(names))
    received = {to_camel(name): dumped.get(to_camel(name)) for name in names}
    missing = [to_camel(name) for name in names if is_missing(getattr(data, name))]
    if missing:
        raise MissingFieldsError(missing, received)


def join_codes(value: str | list[str] | None) -> str:
    """Render a code list as "a, b"; strings pass through."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def complete(
    gateway: Generator,
    prompt_name: str,
    prompts: PromptPack | None = None,
    **fields: Any,
) -> str:
    """Render ``prompt_name`` with ``fields``, run it and return the completion text.

    Raises:
        GenerationError: The gateway reported an error.
    """
    prompt = (prompts or default_prompts())[prompt_name]
    result = gateway.generate(prompt.request(**fields))
    if result.error:
        raise GenerationError(result.error)
    return result.text
