"""Services for field comparison, status resolution, review, deadlines, and batch processing."""

from .fields import FieldName, FieldClass, field_class, parse_field_name
from .exceptions import (
    VerificationError,
    UnknownBeverageTypeError,
    UnknownFieldOverrideError,
    BatchTooLargeError,
)
from .beverage_types import (
    BeverageType,
    BeverageTypeConfig,
    BEVERAGE_TYPES,
    get_config,
    get_mandatory_fields,
    get_optional_fields,
    is_valid_size,
    health_warning_min_type_size_mm,
)
from .health_warning import HEALTH_WARNING_FULL, HealthWarningCheck, check_health_warning
from .strictness import StrictnessLevel, StrictnessPolicy, get_field_strictness_defaults
from .comparison import ComparisonVerdict, FieldComparator, VerdictStatus, compare_field
from .expected_fields import ExpectedField, build_expected_fields
from .status import LabelStatus, StatusDecision, STATUS_RULES, determine_overall_status
from .review import FieldOverride, ResolvedStatus, apply_overrides, reevaluate_after_review
from .deadlines import DeadlineInfo, Urgency, compute_correction_deadline, deadline_info, effective_status
from .verification import ExtractedField, LabelVerification, VerificationService
from .batch import (
    ApplicationCSVParser,
    ApplicationRow,
    CSVValidationError,
    BatchSubmission,
    BatchItemResult,
    BatchReport,
    BatchVerifier,
)

__all__ = [
    "FieldName",
    "FieldClass",
    "field_class",
    "parse_field_name",
    "VerificationError",
    "UnknownBeverageTypeError",
    "UnknownFieldOverrideError",
    "BatchTooLargeError",
    "BeverageType",
    "BeverageTypeConfig",
    "BEVERAGE_TYPES",
    "get_config",
    "get_mandatory_fields",
    "get_optional_fields",
    "is_valid_size",
    "health_warning_min_type_size_mm",
    "HEALTH_WARNING_FULL",
    "HealthWarningCheck",
    "check_health_warning",
    "StrictnessLevel",
    "StrictnessPolicy",
    "get_field_strictness_defaults",
    "ComparisonVerdict",
    "FieldComparator",
    "VerdictStatus",
    "compare_field",
    "ExpectedField",
    "build_expected_fields",
    "LabelStatus",
    "StatusDecision",
    "STATUS_RULES",
    "determine_overall_status",
    "FieldOverride",
    "ResolvedStatus",
    "apply_overrides",
    "reevaluate_after_review",
    "DeadlineInfo",
    "Urgency",
    "compute_correction_deadline",
    "deadline_info",
    "effective_status",
    "ExtractedField",
    "LabelVerification",
    "VerificationService",
    "ApplicationCSVParser",
    "ApplicationRow",
    "CSVValidationError",
    "BatchSubmission",
    "BatchItemResult",
    "BatchReport",
    "BatchVerifier",
]
