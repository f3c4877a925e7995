"""Post-processing of completion text: billing codes and SOAP sections."""
from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum

# Letter, two digits, optional dot and up to four alphanumerics (M54.5, S83.511A).
ICD10_PATTERN = re.compile(r"\b[A-Z]\d{2}(?:\.[0-9A-Z]{1,4})?\b")
# Five digits starting with 9 (PT procedure range, e.g. 97110).
CPT_PATTERN = re.compile(r"\b9\d{4}\b")

SOAP_SECTIONS: tuple[tuple[str, str], ...] = (
    ("subjective", "Subjective"),
    ("objective", "Objective"),
    ("assessment", "Assessment"),
    ("plan", "Plan"),
)

_ANY_LABEL = r"(?:[SOAP]|Subjective|Objective|Assessment|Plan)"
_LABEL_TAIL = r"(?:[ \t]*\([SOAP]\))?[ \t*]*:[ \t*]*"
_LINE_PREFIX = r"[ \t#*\d.]*"
_BARE_LETTER = re.compile(r"^[SOAP]:", re.IGNORECASE)


def extract_codes(text: str, pattern: re.Pattern[str]) -> list[str]:
    """All matches of ``pattern`` in ``text``, de-duplicated in first-seen order."""
    return list(dict.fromkeys(pattern.findall(text)))


def extract_icd_codes(text: str) -> list[str]:
    return extract_codes(text, ICD10_PATTERN)


def extract_cpt_codes(text: str) -> list[str]:
    return extract_codes(text, CPT_PATTERN)


class Strategy(str, Enum):
    MARKER = "marker"
    LINE_SCAN = "line_scan"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class Section:
    text: str
    strategy: Strategy

    @property
    def is_placeholder(self) -> bool:
        return self.strategy is Strategy.PLACEHOLDER


def placeholder(section_name: str) -> str:
    return f"[Generated {section_name} section]"


def _marker_pattern(section_name: str) -> re.Pattern[str]:
    label = rf"(?:{section_name[0]}|{section_name})"
    return re.compile(
        rf"(?:^|\n){_LINE_PREFIX}{label}{_LABEL_TAIL}(.*?)(?=\n{_LINE_PREFIX}{_ANY_LABEL}{_LABEL_TAIL}|\Z)",
        re.IGNORECASE | re.DOTALL,
    )


def _scan_lines(text: str, section_name: str) -> str:
    lowered = section_name.lower()
    captured: list[str] = []
    capturing = False
    for line in text.split("\n"):
        if lowered in line.lower():
            capturing = True
            continue
        if capturing and _BARE_LETTER.match(line):
            break
        if capturing:
            captured.append(line)
    return "\n".join(captured).strip()


def extract_section(text: str, section_name: str) -> Section:
    """
    Pull one SOAP section out of free text.

    Tries a label anchored at line start ("S:", "Subjective:", "1. Subjective (S):",
    "**Subjective:**") up to the next label; then a line scan that starts after any
    line mentioning the section and stops at a bare "X:" line; then a placeholder.

    Args:
        text: Completion text.
        section_name: One of Subjective, Objective, Assessment, Plan.
    """
    match = _marker_pattern(section_name).search(text)
    if match and match.group(1).strip():
        return Section(match.group(1).strip(), Strategy.MARKER)
    scanned = _scan_lines(text, section_name)
    if scanned:
        return Section(scanned, Strategy.LINE_SCAN)
    return Section(placeholder(section_name), Strategy.PLACEHOLDER)


def extract_soap(text: str) -> dict[str, Section]:
    """All four sections keyed by lowercase name; every key is always present."""
    return {key: extract_section(text, name) for key, name in SOAP_SECTIONS}
