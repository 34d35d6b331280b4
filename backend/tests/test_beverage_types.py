"""Tests for the beverage type registry."""

import pytest
from cola_verify.services.beverage_types import (
    BEVERAGE_TYPES,
    BeverageType,
    BeverageTypeConfig,
    get_checked_fields,
    get_mandatory_fields,
    get_optional_fields,
    health_warning_min_type_size_mm,
    is_valid_size,
    resolve_beverage_type,
)
from cola_verify.services.exceptions import UnknownBeverageTypeError, VerificationError
from cola_verify.services.fields import FieldName


class TestRegistry:

    def test_every_type_registered(self):
        assert set(BEVERAGE_TYPES) == set(BeverageType)

    @pytest.mark.parametrize("beverage_type", list(BeverageType))
    def test_mandatory_and_optional_disjoint(self, beverage_type):
        mandatory = set(get_mandatory_fields(beverage_type))
        optional = set(get_optional_fields(beverage_type))
        assert not mandatory & optional

    def test_wine_requires_sulfite_and_varietal(self):
        mandatory = get_mandatory_fields("wine")
        assert FieldName.SULFITE_DECLARATION in mandatory
        assert FieldName.GRAPE_VARIETAL in mandatory

    def test_malt_alcohol_content_optional(self):
        assert FieldName.ALCOHOL_CONTENT not in get_mandatory_fields("malt_beverage")
        assert FieldName.ALCOHOL_CONTENT in get_optional_fields("malt_beverage")

    def test_checked_fields_mandatory_first(self):
        checked = get_checked_fields(BeverageType.DISTILLED_SPIRITS)
        assert checked[0] == FieldName.BRAND_NAME
        assert checked[-1] == FieldName.STANDARDS_OF_FILL

    def test_overlapping_config_rejected(self):
        with pytest.raises(ValueError):
            BeverageTypeConfig(
                label="Broken",
                mandatory_fields=(FieldName.BRAND_NAME,),
                optional_fields=(FieldName.BRAND_NAME,),
                valid_sizes_ml=None,
            )

    def test_unknown_beverage_type(self):
        with pytest.raises(UnknownBeverageTypeError) as exc_info:
            resolve_beverage_type("cider")
        assert isinstance(exc_info.value, VerificationError)
        assert exc_info.value.beverage_type == "cider"


class TestStandardsOfFill:
    """Test container size validation."""

    def test_spirits_sizes(self):
        assert is_valid_size("distilled_spirits", 750)
        assert is_valid_size("distilled_spirits", 1750)
        assert not is_valid_size("distilled_spirits", 800)

    def test_wine_sizes(self):
        assert is_valid_size("wine", 187)
        assert not is_valid_size("wine", 1750)

    def test_malt_any_size(self):
        assert is_valid_size("malt_beverage", 473)
        assert is_valid_size("malt_beverage", 12345)

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownBeverageTypeError):
            is_valid_size("mead", 750)


class TestWarningTypeSize:

    @pytest.mark.parametrize("size_ml,expected", [
        (50, 1),
        (237, 1),
        (750, 2),
        (3000, 2),
        (3750, 3),
    ])
    def test_min_type_size(self, size_ml, expected):
        assert health_warning_min_type_size_mm(size_ml) == expected
