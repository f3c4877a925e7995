"""Narrative progress analysis against the initial evaluation."""
from __future__ import annotations

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.common.templates import PromptPack

REQUIRED = ("patient_name", "diagnosis", "session_history", "initial_eval", "current_status")


class ProgressAnalysisInput(CamelModel):
    patient_name: str | None = None
    diagnosis: str | None = None
    session_history: str | None = None
    initial_eval: str | None = None
    current_status: str | None = None


class ProgressAnalysisOutput(CamelModel):
    analysis: str


def handle(
    data: ProgressAnalysisInput, gateway: Generator, prompts: PromptPack | None = None
) -> ProgressAnalysisOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "progress_analysis",
        prompts,
        patient_name=data.patient_name,
        diagnosis=data.diagnosis,
        initial_eval=data.initial_eval,
        current_status=data.current_status,
        session_history=data.session_history,
    )
    return ProgressAnalysisOutput(analysis=text)
