"""Draft replies to patient messages."""
from __future__ import annotations

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.common.templates import PromptPack, optional_section

REQUIRED = ("patient_message", "patient_context")

RESPONSE_KINDS = {
    "general": "a general informational response",
    "appointment": "a response regarding appointment scheduling or changes",
    "billing": "a response regarding billing or insurance questions",
    "clinical": "a response that acknowledges their concern and suggests contacting their therapist",
}


class MessageResponseInput(CamelModel):
    patient_message: str | None = None
    patient_context: str | None = None
    message_history: str | None = None
    response_type: str | None = None


class MessageResponseOutput(CamelModel):
    suggestions: str


def handle(
    data: MessageResponseInput, gateway: Generator, prompts: PromptPack | None = None
) -> MessageResponseOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "message_response",
        prompts,
        response_kind=RESPONSE_KINDS.get(data.response_type or "", "a response"),
        patient_context=data.patient_context,
        patient_message=data.patient_message,
        message_history_section=optional_section("Previous Message History", data.message_history),
    )
    return MessageResponseOutput(suggestions=text)
