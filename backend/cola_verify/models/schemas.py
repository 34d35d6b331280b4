"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..services.beverage_types import BeverageType
from ..services.comparison import VerdictStatus
from ..services.deadlines import Urgency
from ..services.fields import FieldName
from ..services.review import ResolvedStatus
from ..services.status import LabelStatus
from ..services.strictness import StrictnessLevel


class BoundingBox(BaseModel):
    """Where on the label image a value was read, as fractions of the image size."""
    x: float
    y: float
    width: float
    height: float


class ExtractedFieldInput(BaseModel):
    """A field value read off the label by the extraction pipeline."""
    field_name: str = Field(..., min_length=1)
    value: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    bounding_box: Optional[BoundingBox] = None


class ExpectedFieldsRequest(BaseModel):
    beverage_type: BeverageType
    application_data: Dict[str, Any]
    include_default_health_warning: bool = False


class ExpectedFieldOut(BaseModel):
    field_name: FieldName
    expected_value: str


class ExpectedFieldsResponse(BaseModel):
    beverage_type: BeverageType
    fields: list[ExpectedFieldOut]


class CompareRequest(BaseModel):
    """Compare a single field."""
    field_name: str = Field(..., min_length=1)
    expected_value: str
    extracted_value: Optional[str] = None
    strictness: StrictnessLevel = StrictnessLevel.MODERATE

    class Config:
        json_schema_extra = {
            "example": {
                "field_name": "alcohol_content",
                "expected_value": "45% ALC/VOL",
                "extracted_value": "45.0% Alc./Vol.",
                "strictness": "strict"
            }
        }


class VerdictOut(BaseModel):
    """Result for a single field comparison."""
    field_name: str
    expected_value: str
    extracted_value: Optional[str] = None
    status: VerdictStatus
    confidence: int = Field(..., ge=0, le=100)
    reasoning: str

    class Config:
        json_schema_extra = {
            "example": {
                "field_name": "brand_name",
                "expected_value": "Old Tom Distillery",
                "extracted_value": "OLD TOM DISTILLERY",
                "status": "match",
                "confidence": 100,
                "reasoning": "identical after normalization (strict)"
            }
        }


class FieldStatusIn(BaseModel):
    field_name: str = Field(..., min_length=1)
    status: VerdictStatus


class StatusRequest(BaseModel):
    """Resolve an overall status from per-field verdicts."""
    beverage_type: BeverageType
    verdicts: list[FieldStatusIn]
    container_size_ml: Optional[float] = Field(None, gt=0)


class StatusResponse(BaseModel):
    status: LabelStatus
    deadline_days: Optional[int] = None
    rule: str


class VerifyRequest(BaseModel):
    """Verify one label: application data against extracted fields."""
    beverage_type: BeverageType
    application_data: Dict[str, Any]
    extracted_fields: list[ExtractedFieldInput]
    field_strictness: Optional[Dict[FieldName, StrictnessLevel]] = None
    container_size_ml: Optional[float] = Field(None, gt=0)

    class Config:
        json_schema_extra = {
            "example": {
                "beverage_type": "distilled_spirits",
                "application_data": {
                    "brand_name": "Old Tom Distillery",
                    "class_type": "Kentucky Straight Bourbon Whiskey",
                    "alcohol_content": "45% Alc./Vol.",
                    "net_contents": "750 mL"
                },
                "extracted_fields": [
                    {"field_name": "brand_name", "value": "OLD TOM DISTILLERY", "confidence": 0.97}
                ],
                "container_size_ml": 750
            }
        }


class VerifyResponse(BaseModel):
    """Overall verification result for a label."""
    status: LabelStatus
    deadline_days: Optional[int] = None
    correction_deadline: Optional[datetime] = None
    rule: str
    verdicts: list[VerdictOut]
    overall_confidence: int = Field(..., ge=0, le=100)
    auto_approved: bool
    summary: str
    passed_count: int
    review_count: int
    failed_count: int
    health_warning_issues: list[str] = []
    bounding_boxes: Dict[str, BoundingBox] = {}
    processing_time_ms: int


class FieldOverrideIn(BaseModel):
    """A specialist's resolution for one field."""
    field_name: str = Field(..., min_length=1)
    resolved_status: ResolvedStatus
    reviewer_notes: Optional[str] = None


class ReviewRequest(BaseModel):
    beverage_type: BeverageType
    verdicts: list[FieldStatusIn]
    overrides: list[FieldOverrideIn]


class ReviewResponse(BaseModel):
    status: LabelStatus
    deadline_days: Optional[int] = None
    correction_deadline: Optional[datetime] = None
    rule: str
    fields: list[FieldStatusIn]


class DeadlineRequest(BaseModel):
    """Apply lazy deadline expiry to a stored status."""
    status: str
    correction_deadline: Optional[datetime] = None
    deadline_expired: bool = False
    now: Optional[datetime] = None


class DeadlineResponse(BaseModel):
    status: str
    effective_status: str
    days_remaining: Optional[int] = None
    urgency: Optional[Urgency] = None


class BatchSubmissionIn(BaseModel):
    """One label in a batch.

    The beverage type is validated per item so a bad row fails alone.
    """
    submission_id: str = Field(..., min_length=1)
    beverage_type: str
    application_data: Dict[str, Any]
    extracted_fields: list[ExtractedFieldInput]
    field_strictness: Optional[Dict[FieldName, StrictnessLevel]] = None
    container_size_ml: Optional[float] = Field(None, gt=0)


class BatchVerifyRequest(BaseModel):
    submissions: list[BatchSubmissionIn]


class BatchItemOut(BaseModel):
    """Result for a single submission in batch verification."""
    submission_id: str
    success: bool
    result: Optional[VerifyResponse] = None
    error: Optional[str] = None


class BatchVerificationResponse(BaseModel):
    """Response for batch verification."""
    success: bool
    total: int
    processed: int
    failed: int
    status_counts: Dict[str, int]
    results: list[BatchItemOut]
    processing_time_ms: int


class ApplicationRowOut(BaseModel):
    row_number: int
    beverage_type: BeverageType
    container_size_ml: int
    brand_name: str
    fields: Dict[str, str]


class CSVErrorOut(BaseModel):
    row_number: int
    field: str
    message: str


class CSVParseResponse(BaseModel):
    """Parsed application rows from a CSV upload."""
    success: bool
    rows: list[ApplicationRowOut]
    errors: list[CSVErrorOut]


class BeverageTypeOut(BaseModel):
    beverage_type: BeverageType
    label: str
    mandatory_fields: list[FieldName]
    optional_fields: list[FieldName]
    valid_sizes_ml: Optional[list[int]] = None


class SizeCheckResponse(BaseModel):
    beverage_type: BeverageType
    size_ml: float
    valid: bool
    health_warning_min_type_size_mm: int


class StrictnessDefaultsResponse(BaseModel):
    defaults: Dict[str, StrictnessLevel]


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Unknown beverage type",
                "detail": "Use distilled_spirits, wine, or malt_beverage"
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
