"""Tests for health warning statement checks."""

from cola_verify.services.health_warning import (
    HEALTH_WARNING_FULL,
    HEALTH_WARNING_SECTION_1,
    check_health_warning,
    has_lead_in,
)


class TestLeadIn:

    def test_any_case(self):
        assert has_lead_in("Government Warning: ...")
        assert has_lead_in("GOVERNMENT\nWARNING")

    def test_missing(self):
        assert not has_lead_in("Surgeon General warning")
        assert not has_lead_in(None)


class TestCheckHealthWarning:
    """Test formatting issues reported for a label's warning."""

    def test_exact_statement_valid(self):
        result = check_health_warning(HEALTH_WARNING_FULL)
        assert result.valid
        assert result.issues == []

    def test_line_breaks_tolerated(self):
        result = check_health_warning(HEALTH_WARNING_FULL.replace(" (2)", "\n(2)"))
        assert result.valid

    def test_empty(self):
        result = check_health_warning("  ")
        assert not result.valid
        assert result.issues == ["Health warning statement is empty"]

    def test_prefix_not_capitalized(self):
        text = HEALTH_WARNING_FULL.replace("GOVERNMENT WARNING:", "Government Warning:")
        result = check_health_warning(text)
        assert not result.valid
        assert '"GOVERNMENT WARNING:" prefix must be in ALL CAPS' in result.issues

    def test_missing_prefix(self):
        result = check_health_warning(HEALTH_WARNING_SECTION_1)
        assert 'Missing "GOVERNMENT WARNING:" prefix' in result.issues
        assert any("section (2)" in issue for issue in result.issues)
        assert 'Missing section number "(2)"' in result.issues
