"""Re-evaluating a label after specialist overrides."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from ..config import Settings
from .beverage_types import BeverageType
from .comparison import VerdictStatus
from .exceptions import UnknownFieldOverrideError
from .status import FieldStatus, StatusDecision, determine_overall_status, to_field_status

logger = logging.getLogger(__name__)


class ResolvedStatus(str, Enum):
    """Statuses a specialist may assign to a field."""
    MATCH = "match"
    MISMATCH = "mismatch"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FieldOverride:
    """A specialist's decision on one field."""
    field_name: str
    resolved_status: ResolvedStatus
    reviewer_notes: Optional[str] = None


def apply_overrides(verdicts: Iterable[Any], overrides: Iterable[FieldOverride]) -> List[FieldStatus]:
    """
    Replace verdict statuses with the specialist's resolutions.

    The original verdicts are not modified; a new list of field statuses is
    returned in the original order.
    """
    statuses = [to_field_status(v) for v in verdicts]
    index = {s.field_name: i for i, s in enumerate(statuses)}

    for override in overrides:
        name = override.field_name.value if isinstance(override.field_name, Enum) else override.field_name
        if name not in index:
            raise UnknownFieldOverrideError(name)
        position = index[name]
        resolved = VerdictStatus(ResolvedStatus(override.resolved_status).value)
        logger.info(f"Override {name}: {statuses[position].status.value} -> {resolved.value}")
        statuses[position] = FieldStatus(field_name=name, status=resolved)

    return statuses


def reevaluate_after_review(
    verdicts: Iterable[Any],
    overrides: Iterable[FieldOverride],
    beverage_type: Union[str, BeverageType],
    settings: Optional[Settings] = None,
) -> StatusDecision:
    """Recompute the label status from post-review statuses (no container size check)."""
    return determine_overall_status(apply_overrides(verdicts, overrides), beverage_type, settings=settings)
