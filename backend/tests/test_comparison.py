"""Tests for the field comparator."""

import pytest
from cola_verify.config import Settings
from cola_verify.services.comparison import (
    FieldComparator,
    VerdictStatus,
    bigram_similarity,
    compare_field,
    word_overlap,
)
from cola_verify.services.health_warning import HEALTH_WARNING_FULL
from cola_verify.services.strictness import StrictnessLevel


ALL_LEVELS = [StrictnessLevel.STRICT, StrictnessLevel.MODERATE, StrictnessLevel.LENIENT]


@pytest.fixture
def comparator():
    """Create comparator with default thresholds."""
    return FieldComparator(Settings())


class TestSimilarityMeasures:

    def test_identical(self):
        assert bigram_similarity("bourbon", "bourbon") == 1.0

    def test_disjoint(self):
        assert bigram_similarity("abc", "xyz") == 0.0

    def test_short_strings(self):
        assert bigram_similarity("a", "b") == 0.0

    def test_dice_coefficient(self):
        # 8 shared bigrams out of 14 + 14
        assert bigram_similarity("kentucky bourbon", "kentucky whiskey") == pytest.approx(16 / 28)

    def test_word_overlap_uses_shorter_value(self):
        assert word_overlap("napa valley", "napa valley reserve wine") == 1.0
        assert word_overlap("", "napa") == 0.0


class TestNotFound:
    """Missing extracted values are not_found regardless of field or strictness."""

    @pytest.mark.parametrize("strictness", ALL_LEVELS)
    @pytest.mark.parametrize("field_name", ["brand_name", "alcohol_content", "health_warning", "label_color"])
    def test_none_is_not_found(self, comparator, field_name, strictness):
        verdict = comparator.compare(field_name, "Old Tom", None, strictness)
        assert verdict.status == VerdictStatus.NOT_FOUND
        assert verdict.confidence == 0
        assert verdict.extracted_value is None

    def test_whitespace_is_not_found(self, comparator):
        verdict = comparator.compare("brand_name", "Old Tom", "   ")
        assert verdict.status == VerdictStatus.NOT_FOUND
        assert verdict.reasoning == "field not detected on label."


class TestNumericFields:
    """ABV, net contents, vintage and age statement are exact after unit normalization."""

    @pytest.mark.parametrize("strictness", ALL_LEVELS)
    def test_abv_formats_match(self, comparator, strictness):
        verdict = comparator.compare("alcohol_content", "45% ALC/VOL", "45.0% Alc./Vol.", strictness)
        assert verdict.status == VerdictStatus.MATCH
        assert 85 <= verdict.confidence <= 100

    def test_identical_raw_strings_full_confidence(self, comparator):
        verdict = comparator.compare("alcohol_content", "45%", "45%")
        assert verdict.confidence == 100

    def test_proof_matches_percentage(self, comparator):
        verdict = comparator.compare("alcohol_content", "13.5%", "27 Proof")
        assert verdict.status == VerdictStatus.MATCH

    def test_lenient_never_relaxes_numeric(self, comparator):
        verdict = comparator.compare("alcohol_content", "45%", "47%", StrictnessLevel.LENIENT)
        assert verdict.status == VerdictStatus.MISMATCH
        assert verdict.confidence == 0
        assert "never fuzzy" in verdict.reasoning

    def test_abv_outside_tolerance(self, comparator):
        verdict = comparator.compare("alcohol_content", "45%", "45.1%")
        assert verdict.status == VerdictStatus.MISMATCH

    def test_net_contents_unit_conversion(self, comparator):
        assert comparator.compare("net_contents", "750 mL", "75 cl").status == VerdictStatus.MATCH
        assert comparator.compare("net_contents", "750 ml", "750 mL (25.4 FL OZ)").status == VerdictStatus.MATCH

    def test_net_contents_customary_rounding(self, comparator):
        verdict = comparator.compare("net_contents", "750 mL", "25.4 FL OZ")
        assert verdict.status == VerdictStatus.MATCH
        assert "unit conversion" in verdict.reasoning

    def test_net_contents_mismatch(self, comparator):
        verdict = comparator.compare("net_contents", "750 mL", "700 mL", StrictnessLevel.LENIENT)
        assert verdict.status == VerdictStatus.MISMATCH

    def test_vintage(self, comparator):
        assert comparator.compare("vintage_year", "2019", "Vintage 2019").status == VerdictStatus.MATCH
        assert comparator.compare("vintage_year", "2019", "2018").status == VerdictStatus.MISMATCH

    def test_abv_decimal_comma(self, comparator):
        verdict = comparator.compare("alcohol_content", "13.5% Alc./Vol.", "13,5% vol")
        assert verdict.status == VerdictStatus.MATCH

    @pytest.mark.parametrize("strictness", ALL_LEVELS)
    def test_age_statement_wording_ignored(self, comparator, strictness):
        verdict = comparator.compare("age_statement", "Aged 12 Years", "12 Years Old", strictness)
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence >= 85

    @pytest.mark.parametrize("strictness", ALL_LEVELS)
    def test_age_statement_wrong_years(self, comparator, strictness):
        verdict = comparator.compare("age_statement", "Aged 12 Years", "Aged 10 Years", strictness)
        assert verdict.status == VerdictStatus.MISMATCH
        assert verdict.confidence == 0
        assert "12 vs 10" in verdict.reasoning

    def test_age_statement_without_years_is_text(self, comparator):
        verdict = comparator.compare("age_statement", "Aged 12 Years", "Aged in oak")
        assert verdict.reasoning.startswith("could not parse age statement values")

    def test_unparseable_falls_back_to_text(self, comparator):
        verdict = comparator.compare("alcohol_content", "forty five percent", "45%")
        assert verdict.status == VerdictStatus.MISMATCH
        assert verdict.reasoning.startswith("could not parse alcohol content values")


class TestSulfiteDeclaration:

    def test_present_on_both(self, comparator):
        verdict = comparator.compare("sulfite_declaration", "Contains Sulfites", "CONTAINS SULPHITES")
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence == 100

    def test_absent_on_label(self, comparator):
        verdict = comparator.compare("sulfite_declaration", "Contains Sulfites", "Product of France")
        assert verdict.status == VerdictStatus.MISMATCH


class TestHealthWarning:

    def test_exact_warning_matches(self, comparator):
        verdict = comparator.compare("health_warning", HEALTH_WARNING_FULL, HEALTH_WARNING_FULL)
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence == 100

    def test_case_and_spacing_ignored(self, comparator):
        label = HEALTH_WARNING_FULL.lower().replace(" ", "  ")
        verdict = comparator.compare("health_warning", HEALTH_WARNING_FULL, label)
        assert verdict.status == VerdictStatus.MATCH

    def test_lead_in_required(self, comparator):
        verdict = comparator.compare(
            "health_warning",
            HEALTH_WARNING_FULL,
            "Surgeon General warns pregnant women not to drink alcoholic beverages",
            StrictnessLevel.LENIENT,
        )
        assert verdict.status == VerdictStatus.MISMATCH
        assert "lead-in" in verdict.reasoning

    def test_scored_against_mandated_text(self, comparator):
        verdict = comparator.compare("health_warning", "GOVERNMENT WARNING", HEALTH_WARNING_FULL)
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence == 100

    def test_lead_in_with_wrong_text(self, comparator):
        verdict = comparator.compare("health_warning", HEALTH_WARNING_FULL, "GOVERNMENT WARNING: drink responsibly")
        assert verdict.status == VerdictStatus.MISMATCH


class TestTextStrictness:
    """Test strict, moderate and lenient text rules."""

    def test_strict_exact(self, comparator):
        verdict = comparator.compare("brand_name", "Bulleit", "BULLEIT", StrictnessLevel.STRICT)
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence == 100

    def test_strict_rejects_extra_words(self, comparator):
        verdict = comparator.compare("brand_name", "Bulleit", "Bulleit Bourbon", StrictnessLevel.STRICT)
        assert verdict.status == VerdictStatus.MISMATCH
        assert verdict.confidence == 0

    def test_lenient_containment(self, comparator):
        verdict = comparator.compare("brand_name", "Bulleit", "Bulleit Bourbon", StrictnessLevel.LENIENT)
        assert verdict.status == VerdictStatus.MATCH
        assert "contains" in verdict.reasoning

    def test_lenient_word_overlap(self, comparator):
        verdict = comparator.compare(
            "fanciful_name", "Napa Valley Reserve", "Reserve Napa Estate", StrictnessLevel.LENIENT
        )
        assert verdict.status == VerdictStatus.MATCH
        assert "word overlap" in verdict.reasoning

    def test_lenient_falls_back_to_bigrams(self, comparator):
        verdict = comparator.compare("fanciful_name", "Old Tom", "Jack Daniels", StrictnessLevel.LENIENT)
        assert verdict.status == VerdictStatus.MISMATCH
        assert verdict.reasoning.startswith("no containment or word overlap")

    def test_moderate_case_insensitive(self, comparator):
        verdict = comparator.compare("brand_name", "Old Tom Distillery", "OLD TOM DISTILLERY", StrictnessLevel.MODERATE)
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.confidence == 100

    def test_moderate_needs_correction_band(self, comparator):
        verdict = comparator.compare("class_type", "Kentucky Bourbon", "Kentucky Whiskey", StrictnessLevel.MODERATE)
        assert verdict.status == VerdictStatus.NEEDS_CORRECTION
        assert verdict.confidence == 57

    def test_moderate_mismatch(self, comparator):
        verdict = comparator.compare("brand_name", "Old Tom", "Jack Daniels", StrictnessLevel.MODERATE)
        assert verdict.status == VerdictStatus.MISMATCH

    def test_unknown_strictness_is_moderate(self, comparator):
        verdict = comparator.compare("class_type", "Kentucky Bourbon", "Kentucky Whiskey", "extreme")
        assert verdict.status == VerdictStatus.NEEDS_CORRECTION

    def test_unknown_field_compares_as_text(self, comparator):
        verdict = comparator.compare("label_color", "Deep Red", "DEEP RED")
        assert verdict.status == VerdictStatus.MATCH
        assert verdict.field_name == "label_color"

    def test_thresholds_from_settings(self):
        relaxed = FieldComparator(Settings(moderate_match_threshold=0.5))
        verdict = relaxed.compare("class_type", "Kentucky Bourbon", "Kentucky Whiskey")
        assert verdict.status == VerdictStatus.MATCH


class TestVerdictShape:

    def test_idempotent(self, comparator):
        first = comparator.compare("brand_name", "Old Tom", "OLD TOM", StrictnessLevel.MODERATE)
        second = comparator.compare("brand_name", "Old Tom", "OLD TOM", StrictnessLevel.MODERATE)
        assert first == second

    def test_values_echoed(self, comparator):
        verdict = comparator.compare("brand_name", "Old Tom", "OLD TOM")
        assert verdict.expected_value == "Old Tom"
        assert verdict.extracted_value == "OLD TOM"
        assert verdict.reasoning

    def test_module_level_helper(self):
        verdict = compare_field("brand_name", "Bulleit", "Bulleit Bourbon", "lenient")
        assert verdict.status == VerdictStatus.MATCH
