"""Home exercise program drafting."""
from __future__ import annotations

from ptflow_ai.adapters.base import CamelModel, Generator, complete, require_fields
from ptflow_ai.common.templates import PromptPack

REQUIRED = ("diagnosis", "body_region")
DEFAULT_GOALS = "Improve strength, ROM, and function"
DEFAULT_EQUIPMENT = "Minimal equipment (resistance bands, household items)"


class HomePlanInput(CamelModel):
    diagnosis: str | None = None
    body_region: str | None = None
    goals: str | None = None
    equipment: str | None = None


class HomePlanOutput(CamelModel):
    exercise_plan: str


def handle(data: HomePlanInput, gateway: Generator, prompts: PromptPack | None = None) -> HomePlanOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "home_plan",
        prompts,
        diagnosis=data.diagnosis,
        body_region=data.body_region,
        goals=data.goals or DEFAULT_GOALS,
        equipment=data.equipment or DEFAULT_EQUIPMENT,
    )
    return HomePlanOutput(exercise_plan=text)
