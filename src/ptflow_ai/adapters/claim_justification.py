"""Medical-necessity justification text for insurance claims.

Two request shapes are accepted and decoded as an explicit tagged union:

- ``current``: ``{diagnosis, cptCodes, icdCodes, functionalLimitations?, sessionNotes?}``
- ``legacy``: ``{claim: {cptCodes, icdCodes}, patient: {primaryDiagnosis, medicalHistory}, sessionNotes?}``

Codes may be given as a list or as a pre-joined string.
"""
from __future__ import annotations
from typing import Annotated, Any, Union

from pydantic import Discriminator, Tag, TypeAdapter, ValidationError

from ptflow_ai.adapters.base import (
    CamelModel,
    Generator,
    InvalidInputError,
    complete,
    join_codes,
    require_fields,
)
from ptflow_ai.common.templates import PromptPack, optional_section

REQUIRED = ("diagnosis", "cpt_codes", "icd_codes")
NOT_SPECIFIED = "Not specified"

Codes = Union[list[str], str, None]


class ClaimJustificationInput(CamelModel):
    diagnosis: str | None = None
    cpt_codes: Codes = None
    icd_codes: Codes = None
    functional_limitations: str | None = None
    session_notes: str | None = None


class LegacyClaim(CamelModel):
    cpt_codes: Codes = None
    icd_codes: Codes = None


class LegacyPatient(CamelModel):
    primary_diagnosis: str | None = None
    medical_history: str | None = None


class LegacyClaimRequest(CamelModel):
    claim: LegacyClaim
    patient: LegacyPatient
    session_notes: str | None = None

    def to_input(self) -> ClaimJustificationInput:
        return ClaimJustificationInput(
            diagnosis=self.patient.primary_diagnosis,
            cpt_codes=self.claim.cpt_codes,
            icd_codes=self.claim.icd_codes,
            functional_limitations=self.patient.medical_history,
            session_notes=self.session_notes,
        )


class ClaimJustificationOutput(CamelModel):
    justification: str


def _shape(value: Any) -> str:
    if isinstance(value, dict):
        return "legacy" if value.get("claim") and value.get("patient") else "current"
    return "legacy" if isinstance(value, LegacyClaimRequest) else "current"


ClaimJustificationBody = Annotated[
    Union[
        Annotated[LegacyClaimRequest, Tag("legacy")],
        Annotated[ClaimJustificationInput, Tag("current")],
    ],
    Discriminator(_shape),
]
_BODY = TypeAdapter(ClaimJustificationBody)


def decode(body: Any) -> ClaimJustificationInput:
    """Decode either request shape into ``ClaimJustificationInput``."""
    try:
        parsed = _BODY.validate_python(body)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid request body: {e.error_count()} validation error(s)", body) from e
    if isinstance(parsed, LegacyClaimRequest):
        return parsed.to_input()
    return parsed


def handle(
    data: ClaimJustificationInput, gateway: Generator, prompts: PromptPack | None = None
) -> ClaimJustificationOutput:
    require_fields(data, REQUIRED)
    text = complete(
        gateway,
        "claim_justification",
        prompts,
        diagnosis=data.diagnosis,
        cpt_codes=join_codes(data.cpt_codes),
        icd_codes=join_codes(data.icd_codes),
        functional_limitations=data.functional_limitations or NOT_SPECIFIED,
        session_notes_section=optional_section("Session Documentation", data.session_notes),
    )
    return ClaimJustificationOutput(justification=text)
