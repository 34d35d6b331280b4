"""Overall label status resolution.

Aggregates per-field verdicts into one label disposition. The rules are an
ordered list evaluated top to bottom; the first rule whose predicate holds
decides the status. The order encodes regulatory severity:

1. invalid_container_size   -> rejected
2. critical_field_mismatch  -> rejected
3. field_mismatch           -> needs_correction (30 days)
4. field_not_found          -> needs_correction (30 days)
5. minor_corrections_only   -> conditionally_approved (7 days)
6. field_needs_correction   -> needs_correction (30 days)
7. all_fields_match         -> approved
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Union

from ..config import Settings, get_settings
from .beverage_types import BeverageType, is_valid_size, resolve_beverage_type
from .comparison import VerdictStatus
from .fields import FieldName

logger = logging.getLogger(__name__)


class LabelStatus(str, Enum):
    """Overall disposition of a label."""
    APPROVED = "approved"
    CONDITIONALLY_APPROVED = "conditionally_approved"
    NEEDS_CORRECTION = "needs_correction"
    REJECTED = "rejected"


class DeadlinePolicy(str, Enum):
    NONE = "none"
    CONDITIONAL = "conditional"
    CORRECTION = "correction"


# A mismatch on any of these cannot be downgraded to a correction
CRITICAL_FIELDS = frozenset({
    FieldName.BRAND_NAME.value,
    FieldName.ALCOHOL_CONTENT.value,
    FieldName.HEALTH_WARNING.value,
})

# needs_correction on only these fields earns the conditional approval track
MINOR_DISCREPANCY_FIELDS = frozenset({
    FieldName.FANCIFUL_NAME.value,
    FieldName.QUALIFYING_PHRASE.value,
    FieldName.COUNTRY_OF_ORIGIN.value,
    FieldName.GRAPE_VARIETAL.value,
    FieldName.APPELLATION_OF_ORIGIN.value,
    FieldName.NAME_AND_ADDRESS.value,
    FieldName.STATE_OF_DISTILLATION.value,
    FieldName.AGE_STATEMENT.value,
})


@dataclass(frozen=True)
class FieldStatus:
    """Field name and verdict status, the only parts of a verdict the resolver reads."""
    field_name: str
    status: VerdictStatus


@dataclass(frozen=True)
class StatusDecision:
    """Overall status with its correction window."""
    status: LabelStatus
    deadline_days: Optional[int]
    rule: str


@dataclass(frozen=True)
class ResolutionInput:
    verdicts: List[FieldStatus]
    beverage_type: BeverageType
    container_size_ml: Optional[float]

    def with_status(self, status: VerdictStatus) -> List[FieldStatus]:
        return [v for v in self.verdicts if v.status == status]


@dataclass(frozen=True)
class StatusRule:
    name: str
    predicate: Callable[[ResolutionInput], bool]
    status: LabelStatus
    deadline: DeadlinePolicy


def _invalid_container_size(data: ResolutionInput) -> bool:
    # Only checked at initial validation; reviews pass no container size
    if data.container_size_ml is None:
        return False
    return not is_valid_size(data.beverage_type, data.container_size_ml)


def _critical_field_mismatch(data: ResolutionInput) -> bool:
    return any(v.field_name in CRITICAL_FIELDS for v in data.with_status(VerdictStatus.MISMATCH))


def _field_mismatch(data: ResolutionInput) -> bool:
    return bool(data.with_status(VerdictStatus.MISMATCH))


def _field_not_found(data: ResolutionInput) -> bool:
    return bool(data.with_status(VerdictStatus.NOT_FOUND))


def _minor_corrections_only(data: ResolutionInput) -> bool:
    flagged = data.with_status(VerdictStatus.NEEDS_CORRECTION)
    return bool(flagged) and all(v.field_name in MINOR_DISCREPANCY_FIELDS for v in flagged)


def _field_needs_correction(data: ResolutionInput) -> bool:
    return bool(data.with_status(VerdictStatus.NEEDS_CORRECTION))


def _always(data: ResolutionInput) -> bool:
    return True


STATUS_RULES = (
    StatusRule("invalid_container_size", _invalid_container_size, LabelStatus.REJECTED, DeadlinePolicy.NONE),
    StatusRule("critical_field_mismatch", _critical_field_mismatch, LabelStatus.REJECTED, DeadlinePolicy.NONE),
    StatusRule("field_mismatch", _field_mismatch, LabelStatus.NEEDS_CORRECTION, DeadlinePolicy.CORRECTION),
    StatusRule("field_not_found", _field_not_found, LabelStatus.NEEDS_CORRECTION, DeadlinePolicy.CORRECTION),
    StatusRule("minor_corrections_only", _minor_corrections_only, LabelStatus.CONDITIONALLY_APPROVED,
               DeadlinePolicy.CONDITIONAL),
    StatusRule("field_needs_correction", _field_needs_correction, LabelStatus.NEEDS_CORRECTION,
               DeadlinePolicy.CORRECTION),
    StatusRule("all_fields_match", _always, LabelStatus.APPROVED, DeadlinePolicy.NONE),
)


def to_field_status(verdict: Any) -> FieldStatus:
    """
    Reduce a verdict to (field_name, status).

    Accepts ComparisonVerdict/FieldStatus objects or mappings keyed by
    ``field_name``/``fieldName`` and ``status``.
    """
    if isinstance(verdict, FieldStatus):
        return verdict
    if isinstance(verdict, dict):
        name = verdict.get("field_name", verdict.get("fieldName"))
        status = verdict.get("status")
    else:
        name = verdict.field_name
        status = verdict.status
    if isinstance(name, Enum):
        name = name.value
    return FieldStatus(field_name=str(name), status=VerdictStatus(status))


def _deadline_days(policy: DeadlinePolicy, settings: Settings) -> Optional[int]:
    if policy == DeadlinePolicy.CONDITIONAL:
        return settings.conditional_deadline_days
    if policy == DeadlinePolicy.CORRECTION:
        return settings.correction_deadline_days
    return None


def determine_overall_status(
    verdicts: Iterable[Any],
    beverage_type: Union[str, BeverageType],
    container_size_ml: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> StatusDecision:
    """
    Resolve the overall label status from per-field verdicts.

    Args:
        verdicts: Per-field verdicts (only field name and status are read)
        beverage_type: Beverage category of the label
        container_size_ml: Container size; omit when re-evaluating after review

    Returns:
        StatusDecision naming the rule that fired
    """
    settings = settings or get_settings()
    data = ResolutionInput(
        verdicts=[to_field_status(v) for v in verdicts],
        beverage_type=resolve_beverage_type(beverage_type),
        container_size_ml=container_size_ml,
    )

    for rule in STATUS_RULES:
        if rule.predicate(data):
            decision = StatusDecision(
                status=rule.status,
                deadline_days=_deadline_days(rule.deadline, settings),
                rule=rule.name,
            )
            logger.debug(f"Overall status {decision.status.value} via {rule.name} "
                         f"({len(data.verdicts)} verdicts, container={container_size_ml})")
            return decision

    # all_fields_match always holds
    raise AssertionError("status rules exhausted")
