"""Mandatory health warning statement (27 CFR Part 16).

The "GOVERNMENT WARNING:" prefix must appear in capital letters and the two
numbered sections must follow verbatim.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

HEALTH_WARNING_PREFIX = "GOVERNMENT WARNING:"

HEALTH_WARNING_SECTION_1 = (
    "(1) According to the Surgeon General, women should not drink alcoholic "
    "beverages during pregnancy because of the risk of birth defects."
)

HEALTH_WARNING_SECTION_2 = (
    "(2) Consumption of alcoholic beverages impairs your ability to drive a car "
    "or operate machinery, and may cause health problems."
)

HEALTH_WARNING_FULL = f"{HEALTH_WARNING_PREFIX} {HEALTH_WARNING_SECTION_1} {HEALTH_WARNING_SECTION_2}"

# Lead-in every acceptable warning must contain, compared case-insensitively
HEALTH_WARNING_LEAD_IN = "government warning"


@dataclass
class HealthWarningCheck:
    """Formatting findings for a warning statement read off a label."""
    valid: bool
    issues: List[str] = field(default_factory=list)


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def has_lead_in(text: Optional[str]) -> bool:
    """True if the text contains "government warning" in any case."""
    if not text:
        return False
    return HEALTH_WARNING_LEAD_IN in _collapse(text).lower()


def check_health_warning(text: Optional[str]) -> HealthWarningCheck:
    """
    Check a warning statement against the mandated wording.

    Reports each problem separately so a specialist can see whether the
    prefix capitalization, a section, or a section number is at fault.
    """
    normalized = _collapse(text or "")
    if not normalized:
        return HealthWarningCheck(valid=False, issues=["Health warning statement is empty"])

    issues = []
    if not normalized.startswith(HEALTH_WARNING_PREFIX):
        if normalized.lower().startswith(HEALTH_WARNING_PREFIX.lower()):
            issues.append('"GOVERNMENT WARNING:" prefix must be in ALL CAPS')
        else:
            issues.append('Missing "GOVERNMENT WARNING:" prefix')

    if normalized != HEALTH_WARNING_FULL:
        if HEALTH_WARNING_SECTION_1 not in normalized:
            issues.append("Missing or incorrect section (1) - Surgeon General pregnancy warning")
        if HEALTH_WARNING_SECTION_2 not in normalized:
            issues.append("Missing or incorrect section (2) - impaired driving/machinery warning")
        if "(1)" not in normalized:
            issues.append('Missing section number "(1)"')
        if "(2)" not in normalized:
            issues.append('Missing section number "(2)"')
        if not issues:
            issues.append("Health warning text does not match the required statement")

    return HealthWarningCheck(valid=not issues, issues=issues)
