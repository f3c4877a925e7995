"""SOAP note drafting."""
from __future__ import annotations
import logging

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.adapters.parsing import extract_soap
from ptflow_ai.common.templates import PromptPack, optional_section

LOGGER = logging.getLogger("ptflow.adapters.soap_note")

REQUIRED = ("patient_info", "chief_complaint", "observations")


class SoapNoteInput(CamelModel):
    patient_info: str | None = None
    chief_complaint: str | None = None
    observations: str | None = None
    previous_notes: str | None = None


class SoapNoteOutput(CamelModel):
    subjective: str
    objective: str
    assessment: str
    plan: str
    full_text: str
    placeholder_sections: list[str] = []


def handle(data: SoapNoteInput, gateway: Generator, prompts: PromptPack | None = None) -> SoapNoteOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "soap_note",
        prompts,
        patient_info=data.patient_info,
        chief_complaint=data.chief_complaint,
        observations=data.observations,
        previous_notes_section=optional_section("Previous Session Notes", data.previous_notes),
    )
    sections = extract_soap(text)
    filler = [name for name, section in sections.items() if section.is_placeholder]
    if filler:
        LOGGER.info("SOAP sections not found in completion: %s", ", ".join(filler))
    return SoapNoteOutput(
        subjective=sections["subjective"].text,
        objective=sections["objective"].text,
        assessment=sections["assessment"].text,
        plan=sections["plan"].text,
        full_text=text,
        placeholder_sections=filler,
    )
