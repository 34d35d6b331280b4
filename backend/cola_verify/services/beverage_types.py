"""Beverage type registry: field sets and standards of fill per category."""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union

from .exceptions import UnknownBeverageTypeError
from .fields import FieldName


class BeverageType(str, Enum):
    """TTB beverage categories."""
    DISTILLED_SPIRITS = "distilled_spirits"
    WINE = "wine"
    MALT_BEVERAGE = "malt_beverage"


@dataclass(frozen=True)
class BeverageTypeConfig:
    """Static rules for one beverage category."""
    label: str
    mandatory_fields: Tuple[FieldName, ...]
    optional_fields: Tuple[FieldName, ...]
    # None means any container size is permitted
    valid_sizes_ml: Optional[FrozenSet[int]]

    def __post_init__(self):
        overlap = set(self.mandatory_fields) & set(self.optional_fields)
        if overlap:
            names = ", ".join(sorted(f.value for f in overlap))
            raise ValueError(f"{self.label}: fields both mandatory and optional: {names}")

    @property
    def checked_fields(self) -> Tuple[FieldName, ...]:
        """Mandatory fields followed by optional fields, in registry order."""
        return self.mandatory_fields + self.optional_fields


BEVERAGE_TYPES = {
    BeverageType.DISTILLED_SPIRITS: BeverageTypeConfig(
        label="Distilled Spirits",
        mandatory_fields=(
            FieldName.BRAND_NAME,
            FieldName.CLASS_TYPE,
            FieldName.ALCOHOL_CONTENT,
            FieldName.NET_CONTENTS,
            FieldName.HEALTH_WARNING,
            FieldName.NAME_AND_ADDRESS,
            FieldName.QUALIFYING_PHRASE,
        ),
        optional_fields=(
            FieldName.FANCIFUL_NAME,
            FieldName.COUNTRY_OF_ORIGIN,
            FieldName.AGE_STATEMENT,
            FieldName.STATE_OF_DISTILLATION,
            FieldName.STANDARDS_OF_FILL,
        ),
        valid_sizes_ml=frozenset({
            50, 100, 187, 200, 250, 331, 350, 355, 375, 475, 500, 570, 700, 710,
            720, 750, 900, 945, 1000, 1500, 1750, 1800, 2000, 3000, 3750,
        }),
    ),
    BeverageType.WINE: BeverageTypeConfig(
        label="Wine",
        mandatory_fields=(
            FieldName.BRAND_NAME,
            FieldName.CLASS_TYPE,
            FieldName.ALCOHOL_CONTENT,
            FieldName.NET_CONTENTS,
            FieldName.HEALTH_WARNING,
            FieldName.NAME_AND_ADDRESS,
            FieldName.QUALIFYING_PHRASE,
            FieldName.GRAPE_VARIETAL,
            FieldName.APPELLATION_OF_ORIGIN,
            FieldName.SULFITE_DECLARATION,
        ),
        optional_fields=(
            FieldName.FANCIFUL_NAME,
            FieldName.COUNTRY_OF_ORIGIN,
            FieldName.VINTAGE_YEAR,
            FieldName.STANDARDS_OF_FILL,
        ),
        valid_sizes_ml=frozenset({
            180, 187, 200, 250, 300, 330, 360, 375, 473, 500, 550, 568, 600, 620,
            700, 720, 750, 1000, 1500, 1800, 2250, 3000,
        }),
    ),
    BeverageType.MALT_BEVERAGE: BeverageTypeConfig(
        label="Malt Beverages",
        mandatory_fields=(
            FieldName.BRAND_NAME,
            FieldName.CLASS_TYPE,
            FieldName.NET_CONTENTS,
            FieldName.HEALTH_WARNING,
            FieldName.NAME_AND_ADDRESS,
            FieldName.QUALIFYING_PHRASE,
        ),
        optional_fields=(
            FieldName.FANCIFUL_NAME,
            FieldName.ALCOHOL_CONTENT,
            FieldName.COUNTRY_OF_ORIGIN,
            FieldName.STANDARDS_OF_FILL,
        ),
        valid_sizes_ml=None,
    ),
}


def resolve_beverage_type(beverage_type: Union[str, BeverageType]) -> BeverageType:
    """Coerce a string to BeverageType, failing fast on unknown values."""
    if isinstance(beverage_type, BeverageType):
        return beverage_type
    try:
        return BeverageType(beverage_type)
    except ValueError:
        raise UnknownBeverageTypeError(beverage_type) from None


def get_config(beverage_type: Union[str, BeverageType]) -> BeverageTypeConfig:
    return BEVERAGE_TYPES[resolve_beverage_type(beverage_type)]


def get_mandatory_fields(beverage_type: Union[str, BeverageType]) -> Tuple[FieldName, ...]:
    return get_config(beverage_type).mandatory_fields


def get_optional_fields(beverage_type: Union[str, BeverageType]) -> Tuple[FieldName, ...]:
    return get_config(beverage_type).optional_fields


def get_checked_fields(beverage_type: Union[str, BeverageType]) -> Tuple[FieldName, ...]:
    return get_config(beverage_type).checked_fields


def is_valid_size(beverage_type: Union[str, BeverageType], size_ml: float) -> bool:
    """
    Check a container size against the category's standards of fill.

    Malt beverages have no standards of fill, so every size is valid.
    """
    valid_sizes = get_config(beverage_type).valid_sizes_ml
    if valid_sizes is None:
        return True
    return size_ml in valid_sizes


def health_warning_min_type_size_mm(container_size_ml: float) -> int:
    """
    Minimum type size for the health warning statement (27 CFR 16.22).

    - Containers up to 237 mL (8 fl oz): 1 mm
    - Containers over 237 mL up to 3 L: 2 mm
    - Containers over 3 L: 3 mm
    """
    if container_size_ml <= 237:
        return 1
    if container_size_ml <= 3000:
        return 2
    return 3
