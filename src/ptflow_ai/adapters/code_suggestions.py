"""ICD-10 / CPT code suggestions."""
from __future__ import annotations

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.adapters.parsing import extract_cpt_codes, extract_icd_codes
from ptflow_ai.common.templates import PromptPack, optional_section

REQUIRED = ("diagnosis", "procedures")


class CodeSuggestionsInput(CamelModel):
    diagnosis: str | None = None
    procedures: str | None = None
    session_notes: str | None = None


class CodeSuggestionsOutput(CamelModel):
    icd_codes: list[str]
    cpt_codes: list[str]
    full_text: str


def handle(
    data: CodeSuggestionsInput, gateway: Generator, prompts: PromptPack | None = None
) -> CodeSuggestionsOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "code_suggestions",
        prompts,
        diagnosis=data.diagnosis,
        procedures=data.procedures,
        session_notes_section=optional_section("Session Documentation", data.session_notes),
    )
    return CodeSuggestionsOutput(
        icd_codes=extract_icd_codes(text),
        cpt_codes=extract_cpt_codes(text),
        full_text=text,
    )
