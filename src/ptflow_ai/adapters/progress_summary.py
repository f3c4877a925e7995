"""Patient-friendly summary of recorded progress metrics."""
from __future__ import annotations
from datetime import datetime

from ptflow_ai.adapters.base import CamelModel, Generator, PatientRef, complete, require_fields
from ptflow_ai.common.templates import PromptPack

REQUIRED = ("patient", "metrics")


class Metric(CamelModel):
    type: str
    label: str
    value_numeric: float
    unit: str = ""
    measured_at: datetime


class ProgressSummaryInput(CamelModel):
    patient: PatientRef | None = None
    metrics: list[Metric] | None = None


class ProgressSummaryOutput(CamelModel):
    progress_summary: str


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_metrics(metrics: list[Metric]) -> str:
    """
    Render metrics grouped by "type: label", oldest reading first.

    Groups keep the order in which they first appear; each reading renders as
    ``M/D/YYYY: <value> <unit>``.
    """
    groups: dict[str, list[Metric]] = {}
    for metric in metrics:
        groups.setdefault(f"{metric.type}: {metric.label}", []).append(metric)

    blocks = []
    for label, readings in groups.items():
        readings = sorted(readings, key=lambda m: m.measured_at.timestamp())
        points = [
            f"{m.measured_at.month}/{m.measured_at.day}/{m.measured_at.year}: "
            f"{_number(m.value_numeric)} {m.unit}".rstrip()
            for m in readings
        ]
        blocks.append(f"{label}:\n" + "\n".join(points))
    return "\n\n".join(blocks)


def handle(
    data: ProgressSummaryInput, gateway: Generator, prompts: PromptPack | None = None
) -> ProgressSummaryOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "progress_summary",
        prompts,
        patient_name=data.patient.full_name,
        diagnosis=data.patient.primary_diagnosis,
        metrics_text=format_metrics(data.metrics),
    )
    return ProgressSummaryOutput(progress_summary=text)
