"""Verification service: compares extracted label fields against application data."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import Settings, get_settings
from .beverage_types import BeverageType
from .comparison import ComparisonVerdict, FieldComparator, VerdictStatus
from .expected_fields import build_expected_fields
from .fields import FieldName, display_name, parse_field_name
from .health_warning import check_health_warning
from .status import LabelStatus, determine_overall_status
from .strictness import StrictnessLevel, StrictnessPolicy

logger = logging.getLogger(__name__)


@dataclass
class ExtractedField:
    """A value read off the label by the extraction pipeline."""
    field_name: str
    value: Optional[str]
    confidence: float = 0.0
    bounding_box: Optional[Dict[str, float]] = None


@dataclass
class LabelVerification:
    """Complete verification result for one label."""
    status: LabelStatus
    deadline_days: Optional[int]
    rule: str
    verdicts: List[ComparisonVerdict]
    overall_confidence: int
    auto_approved: bool
    summary: str
    passed_count: int
    review_count: int
    failed_count: int
    health_warning_issues: List[str] = field(default_factory=list)
    bounding_boxes: Dict[str, Dict[str, float]] = field(default_factory=dict)


def to_extracted_field(record: Any) -> ExtractedField:
    """Accept ExtractedField objects or mappings with snake_case or camelCase keys."""
    if isinstance(record, ExtractedField):
        return record
    if isinstance(record, Mapping):
        return ExtractedField(
            field_name=str(record.get("field_name", record.get("fieldName", ""))),
            value=record.get("value"),
            confidence=float(record.get("confidence") or 0.0),
            bounding_box=record.get("bounding_box", record.get("boundingBox")),
        )
    return ExtractedField(
        field_name=str(getattr(record, "field_name")),
        value=getattr(record, "value", None),
        confidence=float(getattr(record, "confidence", 0.0) or 0.0),
        bounding_box=getattr(record, "bounding_box", None),
    )


def index_extracted_fields(records: Iterable[Any]) -> Dict[str, ExtractedField]:
    """
    Index extracted records by field name.

    The first record for a field wins; records for unknown field names are
    dropped since no expected field can ask for them.
    """
    indexed = {}
    for record in records:
        extracted = to_extracted_field(record)
        known = parse_field_name(extracted.field_name)
        if known is None:
            logger.debug(f"Ignoring extracted value for unknown field '{extracted.field_name}'")
            continue
        indexed.setdefault(known.value, extracted)
    return indexed


class VerificationService:
    """Runs the full comparison pipeline for one label submission."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.comparator = FieldComparator(self.settings)

    def verify(
        self,
        application_data: Mapping[str, Any],
        beverage_type: Union[str, BeverageType],
        extracted_fields: Iterable[Any],
        field_strictness: Union[StrictnessPolicy, Mapping[str, Union[str, StrictnessLevel]], None] = None,
        container_size_ml: Optional[float] = None,
    ) -> LabelVerification:
        """
        Verify extracted fields against the application.

        Args:
            application_data: Values declared on the application
            beverage_type: Beverage category
            extracted_fields: Records from the extraction pipeline
            field_strictness: Policy or stored field -> strictness overrides
            container_size_ml: Container size for the standards of fill check

        Returns:
            LabelVerification with verdicts, overall status and deadline
        """
        policy = field_strictness if isinstance(field_strictness, StrictnessPolicy) \
            else StrictnessPolicy.from_settings(field_strictness)

        expected_fields = build_expected_fields(
            application_data, beverage_type, include_default_health_warning=True
        )
        extracted = index_extracted_fields(extracted_fields)

        verdicts = []
        for expected in expected_fields:
            record = extracted.get(expected.field_name.value)
            verdicts.append(self.comparator.compare(
                expected.field_name,
                expected.expected_value,
                record.value if record else None,
                policy.level_for(expected.field_name),
            ))

        decision = determine_overall_status(verdicts, beverage_type, container_size_ml, self.settings)

        passed = sum(1 for v in verdicts if v.status == VerdictStatus.MATCH)
        review = sum(1 for v in verdicts if v.status == VerdictStatus.NEEDS_CORRECTION)
        failed = sum(1 for v in verdicts if v.status in (VerdictStatus.MISMATCH, VerdictStatus.NOT_FOUND))

        overall_confidence = round(sum(v.confidence for v in verdicts) / len(verdicts)) if verdicts else 0
        auto_approved = self.settings.auto_approval_enabled and decision.status == LabelStatus.APPROVED

        warning = extracted.get(FieldName.HEALTH_WARNING.value)
        warning_issues = check_health_warning(warning.value).issues if warning and warning.value else []

        boxes = {
            name: record.bounding_box
            for name, record in extracted.items()
            if record.bounding_box is not None
        }

        logger.info(f"Verified {len(verdicts)} fields: {decision.status.value} via {decision.rule} "
                    f"(passed={passed}, review={review}, failed={failed})")

        return LabelVerification(
            status=decision.status,
            deadline_days=decision.deadline_days,
            rule=decision.rule,
            verdicts=verdicts,
            overall_confidence=overall_confidence,
            auto_approved=auto_approved,
            summary=self._generate_summary(verdicts, decision.status, decision.rule),
            passed_count=passed,
            review_count=review,
            failed_count=failed,
            health_warning_issues=warning_issues,
            bounding_boxes=boxes,
        )

    def _generate_summary(
        self,
        verdicts: List[ComparisonVerdict],
        status: LabelStatus,
        rule: str,
    ) -> str:
        """Generate human-readable summary."""
        if status == LabelStatus.APPROVED:
            return "✅ All fields verified successfully. Label matches application data."

        if rule == "invalid_container_size":
            return "❌ Rejected. Container size is not an authorized standard of fill."

        issues = []
        for v in verdicts:
            name = display_name(v.field_name)
            if v.status == VerdictStatus.MISMATCH:
                issues.append(f"❌ {name}: does not match ({v.reasoning})")
            elif v.status == VerdictStatus.NOT_FOUND:
                issues.append(f"❌ {name}: not detected on label")
            elif v.status == VerdictStatus.NEEDS_CORRECTION:
                issues.append(f"⚠️ {name}: needs review ({v.reasoning})")

        headers = {
            LabelStatus.REJECTED: "❌ Rejected. Critical fields do not match:",
            LabelStatus.NEEDS_CORRECTION: "❌ Corrections required. Issues found:",
            LabelStatus.CONDITIONALLY_APPROVED: "⚠️ Conditionally approved. Minor discrepancies:",
        }
        return headers[status] + "\n" + "\n".join(issues)
