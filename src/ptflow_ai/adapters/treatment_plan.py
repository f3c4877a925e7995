"""Treatment plan recommendations."""
from __future__ import annotations

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.common.templates import PromptPack, optional_section

REQUIRED = ("diagnosis", "current_status", "goals", "limitations")


class TreatmentPlanInput(CamelModel):
    diagnosis: str | None = None
    current_status: str | None = None
    goals: str | None = None
    limitations: str | None = None
    session_history: str | None = None


class TreatmentPlanOutput(CamelModel):
    recommendation: str


def handle(
    data: TreatmentPlanInput, gateway: Generator, prompts: PromptPack | None = None
) -> TreatmentPlanOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "treatment_plan",
        prompts,
        diagnosis=data.diagnosis,
        current_status=data.current_status,
        goals=data.goals,
        limitations=data.limitations,
        session_history_section=optional_section("Recent Session History", data.session_history),
    )
    return TreatmentPlanOutput(recommendation=text)
