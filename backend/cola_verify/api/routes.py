"""API route definitions."""

import time
from datetime import datetime, timezone
from fastapi import APIRouter, UploadFile, File, HTTPException
import logging

from ..models import (
    ExpectedFieldsRequest,
    ExpectedFieldOut,
    ExpectedFieldsResponse,
    CompareRequest,
    VerdictOut,
    FieldStatusIn,
    StatusRequest,
    StatusResponse,
    VerifyRequest,
    VerifyResponse,
    ReviewRequest,
    ReviewResponse,
    DeadlineRequest,
    DeadlineResponse,
    BatchVerifyRequest,
    BatchItemOut,
    BatchVerificationResponse,
    ApplicationRowOut,
    CSVErrorOut,
    CSVParseResponse,
    BeverageTypeOut,
    SizeCheckResponse,
    StrictnessDefaultsResponse,
    ErrorResponse,
    HealthResponse,
)
from ..services import (
    BEVERAGE_TYPES,
    BeverageType,
    VerificationError,
    UnknownFieldOverrideError,
    FieldComparator,
    FieldOverride,
    LabelVerification,
    VerificationService,
    ApplicationCSVParser,
    BatchSubmission,
    BatchVerifier,
    apply_overrides,
    build_expected_fields,
    compute_correction_deadline,
    deadline_info,
    determine_overall_status,
    effective_status,
    get_field_strictness_defaults,
    health_warning_min_type_size_mm,
    is_valid_size,
)
from ..services.verification import ExtractedField
from ..config import get_settings
from .. import __version__

logger = logging.getLogger(__name__)
router = APIRouter()

# Initialize services
comparator = FieldComparator()
verification_service = VerificationService()
csv_parser = ApplicationCSVParser()
batch_verifier = BatchVerifier()


def _to_extracted(fields) -> list:
    return [
        ExtractedField(
            field_name=f.field_name,
            value=f.value,
            confidence=f.confidence,
            bounding_box=f.bounding_box.model_dump() if f.bounding_box else None,
        )
        for f in fields
    ]


def _verification_response(verification: LabelVerification, start_time: float) -> VerifyResponse:
    return VerifyResponse(
        status=verification.status,
        deadline_days=verification.deadline_days,
        correction_deadline=compute_correction_deadline(verification.status, datetime.now(timezone.utc)),
        rule=verification.rule,
        verdicts=[VerdictOut(**vars(v)) for v in verification.verdicts],
        overall_confidence=verification.overall_confidence,
        auto_approved=verification.auto_approved,
        summary=verification.summary,
        passed_count=verification.passed_count,
        review_count=verification.review_count,
        failed_count=verification.failed_count,
        health_warning_issues=verification.health_warning_issues,
        bounding_boxes=verification.bounding_boxes,
        processing_time_ms=int((time.time() - start_time) * 1000),
    )


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health."""
    return HealthResponse(status="healthy", version=__version__)


@router.get("/beverage-types", response_model=list[BeverageTypeOut], tags=["Registry"])
async def list_beverage_types():
    """List every beverage category with its field sets and standards of fill."""
    return [_beverage_type_out(beverage_type) for beverage_type in BEVERAGE_TYPES]


@router.get("/beverage-types/{beverage_type}", response_model=BeverageTypeOut, tags=["Registry"])
async def get_beverage_type(beverage_type: BeverageType):
    return _beverage_type_out(beverage_type)


@router.get(
    "/beverage-types/{beverage_type}/sizes/{size_ml}",
    response_model=SizeCheckResponse,
    tags=["Registry"]
)
async def check_container_size(beverage_type: BeverageType, size_ml: float):
    """Check a container size against the category's standards of fill."""
    return SizeCheckResponse(
        beverage_type=beverage_type,
        size_ml=size_ml,
        valid=is_valid_size(beverage_type, size_ml),
        health_warning_min_type_size_mm=health_warning_min_type_size_mm(size_ml),
    )


def _beverage_type_out(beverage_type: BeverageType) -> BeverageTypeOut:
    config = BEVERAGE_TYPES[beverage_type]
    return BeverageTypeOut(
        beverage_type=beverage_type,
        label=config.label,
        mandatory_fields=list(config.mandatory_fields),
        optional_fields=list(config.optional_fields),
        valid_sizes_ml=sorted(config.valid_sizes_ml) if config.valid_sizes_ml is not None else None,
    )


@router.get("/strictness/defaults", response_model=StrictnessDefaultsResponse, tags=["Registry"])
async def strictness_defaults():
    defaults = get_field_strictness_defaults()
    return StrictnessDefaultsResponse(defaults={field.value: level for field, level in defaults.items()})


@router.post("/expected-fields", response_model=ExpectedFieldsResponse, tags=["Verification"])
async def expected_fields(request: ExpectedFieldsRequest):
    """Project application data onto the fields the label must show."""
    fields = build_expected_fields(
        request.application_data,
        request.beverage_type,
        include_default_health_warning=request.include_default_health_warning,
    )
    return ExpectedFieldsResponse(
        beverage_type=request.beverage_type,
        fields=[ExpectedFieldOut(field_name=f.field_name, expected_value=f.expected_value) for f in fields],
    )


@router.post("/compare", response_model=VerdictOut, tags=["Verification"])
async def compare(request: CompareRequest):
    """Compare a single field value under a strictness level."""
    verdict = comparator.compare(
        request.field_name,
        request.expected_value,
        request.extracted_value,
        request.strictness,
    )
    return VerdictOut(**vars(verdict))


@router.post("/status", response_model=StatusResponse, tags=["Verification"])
async def resolve_status(request: StatusRequest):
    """Resolve the overall label status from per-field verdicts."""
    decision = determine_overall_status(
        request.verdicts,
        request.beverage_type,
        container_size_ml=request.container_size_ml,
    )
    return StatusResponse(status=decision.status, deadline_days=decision.deadline_days, rule=decision.rule)


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    tags=["Verification"]
)
async def verify_label(request: VerifyRequest):
    """
    Verify one label's extracted fields against its application data.

    Builds the expected fields for the beverage type, compares each under its
    configured strictness, and resolves the overall status and deadline.
    """
    start_time = time.time()

    try:
        verification = verification_service.verify(
            application_data=request.application_data,
            beverage_type=request.beverage_type,
            extracted_fields=_to_extracted(request.extracted_fields),
            field_strictness=request.field_strictness,
            container_size_ml=request.container_size_ml,
        )
    except VerificationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _verification_response(verification, start_time)


@router.post(
    "/review",
    response_model=ReviewResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Override names a field with no verdict"},
    },
    tags=["Review"]
)
async def review_label(request: ReviewRequest):
    """Apply specialist overrides and re-evaluate the label status."""
    overrides = [
        FieldOverride(
            field_name=o.field_name,
            resolved_status=o.resolved_status,
            reviewer_notes=o.reviewer_notes,
        )
        for o in request.overrides
    ]

    try:
        statuses = apply_overrides(request.verdicts, overrides)
    except UnknownFieldOverrideError as e:
        raise HTTPException(status_code=422, detail=str(e))

    decision = determine_overall_status(statuses, request.beverage_type)
    return ReviewResponse(
        status=decision.status,
        deadline_days=decision.deadline_days,
        correction_deadline=compute_correction_deadline(decision.status, datetime.now(timezone.utc)),
        rule=decision.rule,
        fields=[FieldStatusIn(field_name=s.field_name, status=s.status) for s in statuses],
    )


@router.post("/deadlines/effective-status", response_model=DeadlineResponse, tags=["Review"])
async def deadline_status(request: DeadlineRequest):
    """Apply lazy deadline expiry to a stored status and report urgency."""
    now = request.now or datetime.now(timezone.utc)
    deadline = request.correction_deadline
    # Naive timestamps are stored in UTC
    if deadline is not None and deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    info = deadline_info(deadline, now)
    return DeadlineResponse(
        status=request.status,
        effective_status=effective_status(request.status, deadline, now, request.deadline_expired),
        days_remaining=info.days_remaining if info else None,
        urgency=info.urgency if info else None,
    )


@router.post(
    "/verify/batch",
    response_model=BatchVerificationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    tags=["Verification"]
)
async def verify_batch(request: BatchVerifyRequest):
    """
    Verify multiple labels in one request.

    Each submission is verified independently; a submission with an unknown
    beverage type is reported as a failed item without stopping the batch.
    """
    start_time = time.time()
    settings = get_settings()

    if len(request.submissions) > settings.max_batch_size:
        raise HTTPException(
            status_code=400,
            detail=f"Too many labels. Maximum batch size is {settings.max_batch_size} labels."
        )

    submissions = [
        BatchSubmission(
            submission_id=s.submission_id,
            application_data=s.application_data,
            beverage_type=s.beverage_type,
            extracted_fields=_to_extracted(s.extracted_fields),
            container_size_ml=s.container_size_ml,
            field_strictness=s.field_strictness,
        )
        for s in request.submissions
    ]

    report = batch_verifier.verify_all(submissions)

    results = [
        BatchItemOut(
            submission_id=item.submission_id,
            success=item.success,
            error=item.error,
            result=_verification_response(item.result, start_time) if item.result else None,
        )
        for item in report.results
    ]

    return BatchVerificationResponse(
        success=report.error_count == 0,
        total=len(submissions),
        processed=len(submissions) - report.error_count,
        failed=report.error_count,
        status_counts=report.status_counts,
        results=results,
        processing_time_ms=int((time.time() - start_time) * 1000),
    )


@router.post(
    "/applications/csv",
    response_model=CSVParseResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
    },
    tags=["Batch"]
)
async def parse_applications_csv(
    csv_file: UploadFile = File(..., description="CSV file with application data"),
):
    """
    Parse a bulk application CSV.

    Required columns: brand_name, beverage_type, container_size_ml.
    Header variants such as "Brand Name", "ABV" or "Type of Product" are
    recognized. Unknown columns are ignored.

    Example CSV:
    ```
    Brand Name,Type of Product,Container Size (mL),ABV
    Old Tom Distillery,spirits,750,45% Alc./Vol.
    Willow Glen,wine,750,13.5% Alc./Vol.
    ```
    """
    try:
        csv_content = (await csv_file.read()).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=400,
            detail="CSV file must be UTF-8 encoded"
        )

    rows, errors = csv_parser.parse(csv_content)
    logger.info(f"Parsed application CSV: {len(rows)} rows, {len(errors)} errors")

    return CSVParseResponse(
        success=not errors,
        rows=[
            ApplicationRowOut(
                row_number=r.row_number,
                beverage_type=r.beverage_type,
                container_size_ml=r.container_size_ml,
                brand_name=r.brand_name,
                fields=r.fields,
            )
            for r in rows
        ],
        errors=[CSVErrorOut(row_number=e.row_number, field=e.field, message=e.message) for e in errors],
    )
