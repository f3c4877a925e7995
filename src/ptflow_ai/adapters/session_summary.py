"""Clinical and patient-friendly summaries of one treatment session.

Both summaries are generated from the same context by two independent gateway
calls that run side by side. A failed clinical summary fails the request; a
failed patient-friendly summary is reported next to the clinical one.
"""
from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor

from ptflow_ai.adapters.base import (
    CamelModel,
    GenerationError,
    Generator,
    PatientRef,
    require_fields,
)
from ptflow_ai.common.templates import PromptPack, default_prompts

LOGGER = logging.getLogger("ptflow.adapters.session_summary")

REQUIRED = ("session_note", "patient")


class SessionNote(CamelModel):
    subjective: str | None = None
    objective: str | None = None
    assessment: str | None = None
    plan: str | None = None


class ExerciseRef(CamelModel):
    name: str | None = None


class ExerciseEntry(CamelModel):
    exercise: ExerciseRef | None = None
    sets: int | str | None = None
    reps: int | str | None = None
    pain_score: float | int | None = None
    comments: str | None = None

    def describe(self) -> str:
        name = self.exercise.name if self.exercise and self.exercise.name else "Exercise"
        pain = "" if self.pain_score is None else self.pain_score
        if isinstance(pain, float) and pain.is_integer():
            pain = int(pain)
        line = f"- {name}: {self.sets} sets x {self.reps} reps, Pain: {pain}/10"
        return f"{line} ({self.comments})" if self.comments else line


class SessionSummaryInput(CamelModel):
    session_note: SessionNote | None = None
    patient: PatientRef | None = None
    exercises: list[ExerciseEntry] | None = None


class SessionSummaryOutput(CamelModel):
    clinical_summary: str
    patient_friendly_summary: str
    patient_friendly_error: str | None = None


def build_context(data: SessionSummaryInput) -> str:
    note = data.session_note or SessionNote()
    patient = data.patient or PatientRef()
    exercises = "\n".join(e.describe() for e in data.exercises or []) or "None documented"
    return (
        f"Patient: {patient.full_name}, {patient.primary_diagnosis or ''}\n"
        "\n"
        "SOAP Note:\n"
        f"Subjective: {note.subjective or ''}\n"
        f"Objective: {note.objective or ''}\n"
        f"Assessment: {note.assessment or ''}\n"
        f"Plan: {note.plan or ''}\n"
        "\n"
        "Exercises Performed:\n"
        f"{exercises}"
    )


def handle(
    data: SessionSummaryInput, gateway: Generator, prompts: PromptPack | None = None
) -> SessionSummaryOutput:
    require_fields(data, REQUIRED)
    prompts = prompts or default_prompts()
    context = build_context(data)
    clinical_request = prompts["session_summary_clinical"].request(context=context)
    patient_request = prompts["session_summary_patient"].request(context=context)

    # generate() never raises, so both futures always settle with a result
    with ThreadPoolExecutor(max_workers=2) as executor:
        clinical_future = executor.submit(gateway.generate, clinical_request)
        patient_future = executor.submit(gateway.generate, patient_request)
        clinical = clinical_future.result()
        patient = patient_future.result()

    if clinical.error:
        raise GenerationError(clinical.error)
    if patient.error:
        LOGGER.warning("Patient-friendly summary failed: %s", patient.error)
    return SessionSummaryOutput(
        clinical_summary=clinical.text,
        patient_friendly_summary=patient.text,
        patient_friendly_error=patient.error,
    )
