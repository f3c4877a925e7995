"""Feature name -> adapter lookup, shared by the HTTP app and the CLI."""
from __future__ import annotations
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from ptflow_ai.adapters import (
    claim_justification,
    code_suggestions,
    home_plan,
    message_response,
    progress_analysis,
    progress_summary,
    session_summary,
    soap_note,
    treatment_plan,
)
from ptflow_ai.adapters.base import CamelModel, Generator, parse_input
from ptflow_ai.common.templates import PromptPack


@dataclass(frozen=True)
class Feature:
    name: str
    prompt_names: tuple[str, ...]
    parse: Callable[[Any], CamelModel]
    handle: Callable[[Any, Generator, PromptPack | None], CamelModel]

    def run(self, body: Any, gateway: Generator, prompts: PromptPack | None = None) -> CamelModel:
        return self.handle(self.parse(body), gateway, prompts)


FEATURES: dict[str, Feature] = {
    f.name: f
    for f in (
        Feature("soap-note", ("soap_note",),
                partial(parse_input, soap_note.SoapNoteInput), soap_note.handle),
        Feature("code-suggestions", ("code_suggestions",),
                partial(parse_input, code_suggestions.CodeSuggestionsInput), code_suggestions.handle),
        Feature("claim-justification", ("claim_justification",),
                claim_justification.decode, claim_justification.handle),
        Feature("home-plan", ("home_plan",),
                partial(parse_input, home_plan.HomePlanInput), home_plan.handle),
        Feature("message-response", ("message_response",),
                partial(parse_input, message_response.MessageResponseInput), message_response.handle),
        Feature("progress-analysis", ("progress_analysis",),
                partial(parse_input, progress_analysis.ProgressAnalysisInput), progress_analysis.handle),
        Feature("progress-summary", ("progress_summary",),
                partial(parse_input, progress_summary.ProgressSummaryInput), progress_summary.handle),
        Feature("session-summary", ("session_summary_clinical", "session_summary_patient"),
                partial(parse_input, session_summary.SessionSummaryInput), session_summary.handle),
        Feature("treatment-plan", ("treatment_plan",),
                partial(parse_input, treatment_plan.TreatmentPlanInput), treatment_plan.handle),
    )
}


def prompt_names() -> tuple[str, ...]:
    return tuple(name for f in FEATURES.values() for name in f.prompt_names)
