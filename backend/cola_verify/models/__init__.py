"""Pydantic models for request/response schemas."""

from .schemas import (
    BoundingBox,
    ExtractedFieldInput,
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
    FieldOverrideIn,
    ReviewRequest,
    ReviewResponse,
    DeadlineRequest,
    DeadlineResponse,
    BatchSubmissionIn,
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

__all__ = [
    "BoundingBox",
    "ExtractedFieldInput",
    "ExpectedFieldsRequest",
    "ExpectedFieldOut",
    "ExpectedFieldsResponse",
    "CompareRequest",
    "VerdictOut",
    "FieldStatusIn",
    "StatusRequest",
    "StatusResponse",
    "VerifyRequest",
    "VerifyResponse",
    "FieldOverrideIn",
    "ReviewRequest",
    "ReviewResponse",
    "DeadlineRequest",
    "DeadlineResponse",
    "BatchSubmissionIn",
    "BatchVerifyRequest",
    "BatchItemOut",
    "BatchVerificationResponse",
    "ApplicationRowOut",
    "CSVErrorOut",
    "CSVParseResponse",
    "BeverageTypeOut",
    "SizeCheckResponse",
    "StrictnessDefaultsResponse",
    "ErrorResponse",
    "HealthResponse",
]
