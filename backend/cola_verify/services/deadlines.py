"""Correction deadlines and lazy deadline expiry.

Callers pass the current time explicitly; nothing here reads the clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union

from ..config import Settings, get_settings
from .status import LabelStatus


class Urgency(str, Enum):
    GREEN = "green"
    AMBER = "amber"
    RED = "red"
    EXPIRED = "expired"


@dataclass(frozen=True)
class DeadlineInfo:
    days_remaining: int
    urgency: Urgency


def compute_correction_deadline(
    status: Union[str, LabelStatus],
    now: datetime,
    settings: Optional[Settings] = None,
) -> Optional[datetime]:
    """
    Absolute correction deadline for a freshly decided status.

    - conditionally_approved -> now + 7 days
    - needs_correction -> now + 30 days
    - anything else -> None
    """
    settings = settings or get_settings()
    if status == LabelStatus.CONDITIONALLY_APPROVED:
        return now + timedelta(days=settings.conditional_deadline_days)
    if status == LabelStatus.NEEDS_CORRECTION:
        return now + timedelta(days=settings.correction_deadline_days)
    return None


def effective_status(
    status: str,
    correction_deadline: Optional[datetime],
    now: datetime,
    deadline_expired: bool = False,
) -> str:
    """
    Status after applying an expired correction deadline.

    Expiry is lazy: no scheduled job flips statuses, callers evaluate this
    whenever they display a label.

    - needs_correction past its deadline -> rejected
    - conditionally_approved past its deadline -> needs_correction
    - everything else passes through unchanged (including workflow
      statuses like pending_review that this engine does not produce)
    """
    if correction_deadline is None:
        return status
    if not (deadline_expired or correction_deadline <= now):
        return status
    if status == LabelStatus.NEEDS_CORRECTION:
        return LabelStatus.REJECTED.value
    if status == LabelStatus.CONDITIONALLY_APPROVED:
        return LabelStatus.NEEDS_CORRECTION.value
    return status


def deadline_info(deadline: Optional[datetime], now: datetime) -> Optional[DeadlineInfo]:
    """
    Days remaining and urgency for a deadline.

    green: more than 7 days left; amber: 1-7 days; red: under 24 hours;
    expired: deadline has passed.
    """
    if deadline is None:
        return None

    remaining = deadline - now
    if remaining <= timedelta(0):
        return DeadlineInfo(days_remaining=0, urgency=Urgency.EXPIRED)

    # Partial days round up, so 36 hours left reads as 2 days
    days_remaining = -(-remaining // timedelta(days=1))

    if remaining < timedelta(hours=24):
        urgency = Urgency.RED
    elif days_remaining <= 7:
        urgency = Urgency.AMBER
    else:
        urgency = Urgency.GREEN

    return DeadlineInfo(days_remaining=days_remaining, urgency=urgency)
