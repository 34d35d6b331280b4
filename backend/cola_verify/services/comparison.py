"""Field comparator: scores one expected value against one extracted value."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from rapidfuzz import fuzz

from ..config import Settings, get_settings
from .fields import NUMERIC_FIELDS, FieldClass, FieldName, display_name, parse_field_name
from .health_warning import HEALTH_WARNING_FULL, has_lead_in
from .normalization import (
    NormalizedValue,
    abv_equal,
    normalize_health_warning,
    normalize_value,
    normalize_whitespace,
)
from .strictness import DEFAULT_STRICTNESS, StrictnessLevel

logger = logging.getLogger(__name__)

_MANDATED_WARNING = normalize_health_warning(HEALTH_WARNING_FULL)


class VerdictStatus(str, Enum):
    """Outcome of comparing one field."""
    MATCH = "match"
    MISMATCH = "mismatch"
    NOT_FOUND = "not_found"
    NEEDS_CORRECTION = "needs_correction"


@dataclass(frozen=True)
class ComparisonVerdict:
    """Result of comparing a single field."""
    field_name: str
    expected_value: str
    extracted_value: Optional[str]
    status: VerdictStatus
    confidence: int
    reasoning: str


NOT_FOUND_REASONING = "field not detected on label."


def _bigrams(text: str) -> set:
    return {text[i:i + 2] for i in range(len(text) - 1)}


def bigram_similarity(a: str, b: str) -> float:
    """
    Dice coefficient over adjacent-character pairs (0-1).

    Strings shorter than two characters have no bigrams and only match
    themselves.
    """
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    bigrams_a = _bigrams(a)
    bigrams_b = _bigrams(b)
    return 2 * len(bigrams_a & bigrams_b) / (len(bigrams_a) + len(bigrams_b))


def word_overlap(a: str, b: str) -> float:
    """Shared words as a fraction of the shorter value's distinct words."""
    words_a = set(a.split())
    words_b = set(b.split())
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / min(len(words_a), len(words_b))


def _percent(score: float) -> int:
    return int(round(max(0.0, min(1.0, score)) * 100))


def _coerce_strictness(strictness: Union[str, StrictnessLevel, None]) -> StrictnessLevel:
    if isinstance(strictness, StrictnessLevel):
        return strictness
    try:
        return StrictnessLevel(strictness)
    except ValueError:
        logger.warning(f"Unrecognized strictness {strictness!r}, comparing as {DEFAULT_STRICTNESS.value}")
        return DEFAULT_STRICTNESS


class FieldComparator:
    """
    Compares application values against values read off a label.

    Decision order:
    1. Missing or blank extracted value -> not_found
    2. Numeric fields (ABV, net contents, vintage) -> exact after unit
       normalization, never relaxed by strictness
    3. Sulfite declaration -> boolean equality
    4. Health warning -> mandated lead-in, then bigram similarity
    5. Text fields -> strict / moderate / lenient rules

    Pure: no I/O, no state beyond the thresholds read from settings.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def compare(
        self,
        field_name: Union[str, FieldName],
        expected_value: str,
        extracted_value: Optional[str],
        strictness: Union[str, StrictnessLevel] = DEFAULT_STRICTNESS,
    ) -> ComparisonVerdict:
        """
        Compare one field.

        Args:
            field_name: Field being checked; unknown names compare as text
            expected_value: Value from the application
            extracted_value: Value read from the label, None if not found
            strictness: Strictness level configured for this field

        Returns:
            ComparisonVerdict with status, confidence (0-100) and reasoning
        """
        field = parse_field_name(field_name)
        name = field.value if field else str(field_name)
        expected_value = expected_value or ""

        if extracted_value is None or not extracted_value.strip():
            return ComparisonVerdict(
                field_name=name,
                expected_value=expected_value,
                extracted_value=None,
                status=VerdictStatus.NOT_FOUND,
                confidence=0,
                reasoning=NOT_FOUND_REASONING,
            )

        level = _coerce_strictness(strictness)
        expected = normalize_value(field or name, expected_value)
        extracted = normalize_value(field or name, extracted_value)

        if expected.field_class != extracted.field_class:
            # One side parsed as a number and the other did not
            expected = normalize_value(None, expected_value)
            extracted = normalize_value(None, extracted_value)

        if expected.field_class == FieldClass.NUMERIC:
            status, confidence, reasoning = self._compare_numeric(
                field, expected, extracted, expected_value, extracted_value
            )
        elif expected.field_class == FieldClass.BOOLEAN:
            status, confidence, reasoning = self._compare_boolean(expected, extracted)
        elif expected.field_class == FieldClass.HEALTH_WARNING:
            status, confidence, reasoning = self._compare_health_warning(extracted, extracted_value)
        else:
            status, confidence, reasoning = self._compare_text(expected.text, extracted.text, level)
            if field in NUMERIC_FIELDS:
                reasoning = f"could not parse {display_name(field).lower()} values; {reasoning}"

        confidence = max(0, min(100, confidence))
        logger.debug(f"Compare {name} ({level.value}): '{expected_value}' vs '{extracted_value}' -> "
                     f"{status.value} ({confidence})")

        return ComparisonVerdict(
            field_name=name,
            expected_value=expected_value,
            extracted_value=extracted_value,
            status=status,
            confidence=confidence,
            reasoning=reasoning,
        )

    # ------------------------------------------------------------------
    # Numeric fields
    # ------------------------------------------------------------------

    def _numeric_match_confidence(self, expected_raw: str, extracted_raw: str) -> int:
        """Floor confidence for an exact numeric match, raised as the raw strings agree."""
        floor = self.settings.numeric_match_min_confidence
        closeness = fuzz.ratio(
            normalize_whitespace(expected_raw).lower(),
            normalize_whitespace(extracted_raw).lower(),
        ) / 100.0
        return int(round(floor + (100 - floor) * closeness))

    def _compare_numeric(
        self,
        field: Optional[FieldName],
        expected: NormalizedValue,
        extracted: NormalizedValue,
        expected_raw: str,
        extracted_raw: str,
    ) -> Tuple[VerdictStatus, int, str]:
        if field == FieldName.ALCOHOL_CONTENT:
            tolerance = self.settings.abv_tolerance
            equal = abv_equal(expected.value, extracted.value, tolerance)
            values = f"{expected.value:g}% vs {extracted.value:g}%"
            rule = f"alcohol content {values}"
            detail = f"within ±{tolerance:g}" if equal else "outside tolerance"
        elif field == FieldName.NET_CONTENTS:
            exp_ml, ext_ml = expected.value.ml, extracted.value.ml
            tolerance = 0.0
            if expected.value.customary != extracted.value.customary:
                tolerance = max(exp_ml, ext_ml) * self.settings.customary_conversion_tolerance
            equal = abs(exp_ml - ext_ml) <= tolerance
            rule = f"net contents {exp_ml} mL vs {ext_ml} mL"
            if tolerance:
                detail = "within unit conversion rounding" if equal else "outside unit conversion rounding"
            else:
                detail = "equal" if equal else "not equal"
        elif field == FieldName.AGE_STATEMENT:
            equal = expected.value == extracted.value
            rule = f"age statement {expected.value} vs {extracted.value} years"
            detail = "equal" if equal else "not equal"
        else:
            equal = expected.value == extracted.value
            rule = f"vintage year {expected.value} vs {extracted.value}"
            detail = "equal" if equal else "not equal"

        if equal:
            return VerdictStatus.MATCH, self._numeric_match_confidence(expected_raw, extracted_raw), f"{rule}, {detail}"
        return VerdictStatus.MISMATCH, 0, f"{rule}, {detail}; numeric fields are never fuzzy-matched"

    # ------------------------------------------------------------------
    # Sulfite declaration
    # ------------------------------------------------------------------

    def _compare_boolean(
        self, expected: NormalizedValue, extracted: NormalizedValue
    ) -> Tuple[VerdictStatus, int, str]:
        def word(flag):
            return "present" if flag else "absent"

        reasoning = f"sulfite declaration expected {word(expected.value)}, label {word(extracted.value)}"
        if expected.value == extracted.value:
            return VerdictStatus.MATCH, 100, reasoning
        return VerdictStatus.MISMATCH, 0, reasoning

    # ------------------------------------------------------------------
    # Health warning
    # ------------------------------------------------------------------

    def _compare_health_warning(
        self, extracted: NormalizedValue, extracted_raw: str
    ) -> Tuple[VerdictStatus, int, str]:
        """
        Health warning ignores configured strictness and the application value.

        The lead-in is required, then the label text is scored against the
        mandated warning with the bigram rule.
        """
        if not has_lead_in(extracted_raw):
            return VerdictStatus.MISMATCH, 0, 'required "government warning" lead-in missing'
        return self._bigram_rule(_MANDATED_WARNING, extracted.value)

    # ------------------------------------------------------------------
    # Text fields
    # ------------------------------------------------------------------

    def _bigram_rule(self, expected: str, extracted: str) -> Tuple[VerdictStatus, int, str]:
        match_threshold = self.settings.moderate_match_threshold
        review_threshold = self.settings.moderate_review_threshold
        similarity = bigram_similarity(expected, extracted)
        pct = _percent(similarity)

        if similarity >= match_threshold:
            return (
                VerdictStatus.MATCH,
                pct,
                f"bigram similarity {pct}%, above {_percent(match_threshold)}% threshold",
            )
        if similarity >= review_threshold:
            return (
                VerdictStatus.NEEDS_CORRECTION,
                pct,
                f"bigram similarity {pct}%, between {_percent(review_threshold)}% and "
                f"{_percent(match_threshold)}%; needs specialist judgment",
            )
        return (
            VerdictStatus.MISMATCH,
            pct,
            f"bigram similarity {pct}%, below {_percent(review_threshold)}% threshold",
        )

    def _compare_text(
        self, expected: str, extracted: str, level: StrictnessLevel
    ) -> Tuple[VerdictStatus, int, str]:
        if level == StrictnessLevel.STRICT:
            if expected == extracted:
                return VerdictStatus.MATCH, 100, "identical after normalization (strict)"
            return VerdictStatus.MISMATCH, 0, "differs after normalization (strict)"

        if level == StrictnessLevel.LENIENT:
            similarity = bigram_similarity(expected, extracted)
            if expected and extracted and (expected in extracted or extracted in expected):
                overlap = word_overlap(expected, extracted)
                return (
                    VerdictStatus.MATCH,
                    _percent(max(similarity, overlap)),
                    "one value contains the other (lenient)",
                )
            overlap = word_overlap(expected, extracted)
            overlap_threshold = self.settings.lenient_word_overlap
            if overlap >= overlap_threshold:
                return (
                    VerdictStatus.MATCH,
                    _percent(max(similarity, overlap)),
                    f"word overlap {_percent(overlap)}% of shorter value, at or above "
                    f"{_percent(overlap_threshold)}% (lenient)",
                )
            status, confidence, reasoning = self._bigram_rule(expected, extracted)
            return status, confidence, f"no containment or word overlap; {reasoning}"

        return self._bigram_rule(expected, extracted)


def compare_field(
    field_name: Union[str, FieldName],
    expected_value: str,
    extracted_value: Optional[str],
    strictness: Union[str, StrictnessLevel] = DEFAULT_STRICTNESS,
    settings: Optional[Settings] = None,
) -> ComparisonVerdict:
    """Compare one field with the configured thresholds (see FieldComparator)."""
    return FieldComparator(settings).compare(field_name, expected_value, extracted_value, strictness)
