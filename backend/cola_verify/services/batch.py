"""Batch processing: CSV application import and multi-label verification."""

import csv
import io
import re
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field

from ..config import Settings, get_settings
from .beverage_types import BeverageType
from .exceptions import BatchTooLargeError, VerificationError
from .verification import LabelVerification, VerificationService

logger = logging.getLogger(__name__)


# Header variants seen in applicant spreadsheets, keyed by lowercased header
# with underscores, slashes and runs of whitespace collapsed to one space
COLUMN_ALIASES = {
    "brand name": "brand_name",
    "brandname": "brand_name",
    "brand": "brand_name",
    "fanciful name": "fanciful_name",
    "fancifulname": "fanciful_name",
    "class type": "class_type",
    "classtype": "class_type",
    "class type code": "class_type_code",
    "classtypecode": "class_type_code",
    "alcohol content": "alcohol_content",
    "alcoholcontent": "alcohol_content",
    "abv": "alcohol_content",
    "net contents": "net_contents",
    "netcontents": "net_contents",
    "name and address": "name_and_address",
    "nameandaddress": "name_and_address",
    "qualifying phrase": "qualifying_phrase",
    "qualifyingphrase": "qualifying_phrase",
    "country of origin": "country_of_origin",
    "countryoforigin": "country_of_origin",
    "country": "country_of_origin",
    "grape varietal": "grape_varietal",
    "grapevarietal": "grape_varietal",
    "varietal": "grape_varietal",
    "grape": "grape_varietal",
    "appellation of origin": "appellation_of_origin",
    "appellationoforigin": "appellation_of_origin",
    "appellation": "appellation_of_origin",
    "vintage year": "vintage_year",
    "vintageyear": "vintage_year",
    "vintage": "vintage_year",
    "sulfite declaration": "sulfite_declaration",
    "sulfitedeclaration": "sulfite_declaration",
    "sulfites": "sulfite_declaration",
    "age statement": "age_statement",
    "agestatement": "age_statement",
    "age": "age_statement",
    "state of distillation": "state_of_distillation",
    "stateofdistillation": "state_of_distillation",
    "serial number": "serial_number",
    "serialnumber": "serial_number",
    "beverage type": "beverage_type",
    "beveragetype": "beverage_type",
    "type of product": "beverage_type",
    "container size ml": "container_size_ml",
    "container size (ml)": "container_size_ml",
    "container size": "container_size_ml",
    "containersizeml": "container_size_ml",
    "size ml": "container_size_ml",
}

BEVERAGE_TYPE_ALIASES = {
    "distilled spirits": BeverageType.DISTILLED_SPIRITS,
    "distilled_spirits": BeverageType.DISTILLED_SPIRITS,
    "spirits": BeverageType.DISTILLED_SPIRITS,
    "wine": BeverageType.WINE,
    "malt beverage": BeverageType.MALT_BEVERAGE,
    "malt beverages": BeverageType.MALT_BEVERAGE,
    "malt_beverage": BeverageType.MALT_BEVERAGE,
    "beer": BeverageType.MALT_BEVERAGE,
}

_HEADER_SEPARATORS = re.compile(r"[_\s/]+")


def normalize_header(header: str) -> Optional[str]:
    """Map a CSV header to its snake_case field name, None if unrecognized."""
    raw = (header or "").strip().lower()
    collapsed = _HEADER_SEPARATORS.sub(" ", raw).strip()
    return COLUMN_ALIASES.get(collapsed) or COLUMN_ALIASES.get(raw)


def normalize_beverage_type(value: str) -> Optional[BeverageType]:
    return BEVERAGE_TYPE_ALIASES.get((value or "").strip().lower())


@dataclass
class ApplicationRow:
    """Parsed and validated CSV row."""
    row_number: int
    beverage_type: BeverageType
    container_size_ml: int
    brand_name: str
    fields: Dict[str, str] = field(default_factory=dict)

    def to_application_data(self) -> Dict[str, str]:
        """Application values keyed by field name, ready for build_expected_fields."""
        data = dict(self.fields)
        data["brand_name"] = self.brand_name
        return data


@dataclass
class CSVValidationError:
    """Error from CSV validation."""
    row_number: int
    field: str
    message: str


class ApplicationCSVParser:
    """Parse and validate bulk application CSV files."""

    REQUIRED_COLUMNS = {"brand_name", "beverage_type", "container_size_ml"}

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def parse(self, csv_content: str) -> Tuple[List[ApplicationRow], List[CSVValidationError]]:
        """
        Parse CSV content and return validated rows.

        Args:
            csv_content: CSV file content as string

        Returns:
            Tuple of (valid_rows, errors)
        """
        rows: List[ApplicationRow] = []
        errors: List[CSVValidationError] = []

        try:
            reader = csv.DictReader(io.StringIO(csv_content))

            if not reader.fieldnames:
                errors.append(CSVValidationError(
                    row_number=0,
                    field="header",
                    message="CSV file is empty or has no header"
                ))
                return rows, errors

            column_map = {}
            unknown_columns = []
            for header in reader.fieldnames:
                name = normalize_header(header)
                if name:
                    column_map[header] = name
                elif header and header.strip():
                    unknown_columns.append(header.strip())

            if unknown_columns:
                logger.warning(f"Unknown CSV columns will be ignored: {unknown_columns}")

            missing_required = self.REQUIRED_COLUMNS - set(column_map.values())
            if missing_required:
                errors.append(CSVValidationError(
                    row_number=1,
                    field="header",
                    message=f"Missing required columns: {', '.join(sorted(missing_required))}"
                ))
                return rows, errors

            records = list(enumerate(reader, start=2))  # 1-indexed, after the header
            if len(records) > self.settings.max_batch_size:
                errors.append(CSVValidationError(
                    row_number=0,
                    field="csv",
                    message=f"CSV has {len(records)} rows; the maximum batch size is "
                            f"{self.settings.max_batch_size}"
                ))
                return rows, errors

            for row_num, record in records:
                row = self._parse_row(row_num, record, column_map, errors)
                if row is not None:
                    rows.append(row)

        except csv.Error as e:
            errors.append(CSVValidationError(
                row_number=0,
                field="csv",
                message=f"CSV parsing error: {str(e)}"
            ))
            return rows, errors

        if not rows and not errors:
            errors.append(CSVValidationError(
                row_number=0,
                field="csv",
                message="No data rows found in CSV file"
            ))

        return rows, errors

    def _parse_row(
        self,
        row_num: int,
        record: Mapping[Optional[str], Any],
        column_map: Dict[str, str],
        errors: List[CSVValidationError],
    ) -> Optional[ApplicationRow]:
        values: Dict[str, str] = {}
        for header, name in column_map.items():
            value = (record.get(header) or "").strip()
            if value and name not in values:
                values[name] = value

        row_errors = []

        brand_name = values.pop("brand_name", "")
        if not brand_name:
            row_errors.append(CSVValidationError(
                row_number=row_num,
                field="brand_name",
                message="Brand name is required"
            ))

        raw_type = values.pop("beverage_type", "")
        beverage_type = normalize_beverage_type(raw_type)
        if not raw_type:
            row_errors.append(CSVValidationError(
                row_number=row_num,
                field="beverage_type",
                message="Beverage type is required"
            ))
        elif beverage_type is None:
            row_errors.append(CSVValidationError(
                row_number=row_num,
                field="beverage_type",
                message=f"Unknown beverage type '{raw_type}'. "
                        f"Use distilled_spirits, wine, or malt_beverage."
            ))

        raw_size = values.pop("container_size_ml", "")
        container_size_ml = None
        if not raw_size:
            row_errors.append(CSVValidationError(
                row_number=row_num,
                field="container_size_ml",
                message="Container size (mL) is required"
            ))
        else:
            try:
                size = float(raw_size)
                if size <= 0 or not size.is_integer():
                    row_errors.append(CSVValidationError(
                        row_number=row_num,
                        field="container_size_ml",
                        message=f"Container size must be a positive whole number, got {raw_size}"
                    ))
                else:
                    container_size_ml = int(size)
            except ValueError:
                row_errors.append(CSVValidationError(
                    row_number=row_num,
                    field="container_size_ml",
                    message=f"Invalid container size value: '{raw_size}'"
                ))

        if row_errors:
            errors.extend(row_errors)
            return None

        return ApplicationRow(
            row_number=row_num,
            beverage_type=beverage_type,
            container_size_ml=container_size_ml,
            brand_name=brand_name,
            fields=values,
        )


@dataclass
class BatchSubmission:
    """One label in a batch: application data plus what extraction read."""
    submission_id: str
    application_data: Mapping[str, Any]
    beverage_type: str
    extracted_fields: List[Any]
    container_size_ml: Optional[float] = None
    field_strictness: Optional[Mapping[str, str]] = None

    @classmethod
    def from_row(cls, row: ApplicationRow, extracted_fields: Iterable[Any]) -> "BatchSubmission":
        return cls(
            submission_id=row.fields.get("serial_number") or f"row-{row.row_number}",
            application_data=row.to_application_data(),
            beverage_type=row.beverage_type.value,
            extracted_fields=list(extracted_fields),
            container_size_ml=row.container_size_ml,
        )


@dataclass
class BatchItemResult:
    submission_id: str
    success: bool
    error: Optional[str] = None
    result: Optional[LabelVerification] = None


@dataclass
class BatchReport:
    results: List[BatchItemResult]
    status_counts: Dict[str, int]
    error_count: int


class BatchVerifier:
    """Verify multiple labels sequentially with one shared pipeline."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.verification_service = VerificationService(self.settings)

    def verify_all(self, submissions: List[BatchSubmission]) -> BatchReport:
        """
        Verify every submission, keeping input order.

        A submission that breaks the engine's contract (unknown beverage
        type, for instance) is reported as a failed item; the rest of the
        batch still runs.
        """
        if len(submissions) > self.settings.max_batch_size:
            raise BatchTooLargeError(len(submissions), self.settings.max_batch_size)

        results = []
        counts: Counter = Counter()

        for submission in submissions:
            try:
                verification = self.verification_service.verify(
                    application_data=submission.application_data,
                    beverage_type=submission.beverage_type,
                    extracted_fields=submission.extracted_fields,
                    field_strictness=submission.field_strictness,
                    container_size_ml=submission.container_size_ml,
                )
            except VerificationError as e:
                logger.warning(f"Batch item {submission.submission_id} failed: {e}")
                results.append(BatchItemResult(
                    submission_id=submission.submission_id,
                    success=False,
                    error=str(e),
                ))
                continue

            counts[verification.status.value] += 1
            results.append(BatchItemResult(
                submission_id=submission.submission_id,
                success=True,
                result=verification,
            ))

        error_count = sum(1 for r in results if not r.success)
        logger.info(f"Batch of {len(submissions)} verified: {dict(counts)}, {error_count} errors")

        return BatchReport(results=results, status_counts=dict(counts), error_count=error_count)
