"""Label field catalogue and the comparison class of each field."""

from enum import Enum
from typing import Optional, Union


class FieldName(str, Enum):
    """Fields checked on a COLA label."""
    BRAND_NAME = "brand_name"
    FANCIFUL_NAME = "fanciful_name"
    CLASS_TYPE = "class_type"
    ALCOHOL_CONTENT = "alcohol_content"
    NET_CONTENTS = "net_contents"
    HEALTH_WARNING = "health_warning"
    NAME_AND_ADDRESS = "name_and_address"
    QUALIFYING_PHRASE = "qualifying_phrase"
    COUNTRY_OF_ORIGIN = "country_of_origin"
    GRAPE_VARIETAL = "grape_varietal"
    APPELLATION_OF_ORIGIN = "appellation_of_origin"
    VINTAGE_YEAR = "vintage_year"
    SULFITE_DECLARATION = "sulfite_declaration"
    AGE_STATEMENT = "age_statement"
    STATE_OF_DISTILLATION = "state_of_distillation"
    STANDARDS_OF_FILL = "standards_of_fill"


class FieldClass(str, Enum):
    """How a field's values are normalized and compared."""
    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    HEALTH_WARNING = "health_warning"


NUMERIC_FIELDS = frozenset({
    FieldName.ALCOHOL_CONTENT,
    FieldName.NET_CONTENTS,
    FieldName.VINTAGE_YEAR,
    FieldName.AGE_STATEMENT,
})

BOOLEAN_FIELDS = frozenset({FieldName.SULFITE_DECLARATION})

# Human-readable names used in reasoning strings and summaries
FIELD_DISPLAY_NAMES = {
    FieldName.BRAND_NAME: "Brand Name",
    FieldName.FANCIFUL_NAME: "Fanciful Name",
    FieldName.CLASS_TYPE: "Class/Type",
    FieldName.ALCOHOL_CONTENT: "Alcohol Content",
    FieldName.NET_CONTENTS: "Net Contents",
    FieldName.HEALTH_WARNING: "Health Warning",
    FieldName.NAME_AND_ADDRESS: "Name and Address",
    FieldName.QUALIFYING_PHRASE: "Qualifying Phrase",
    FieldName.COUNTRY_OF_ORIGIN: "Country of Origin",
    FieldName.GRAPE_VARIETAL: "Grape Varietal",
    FieldName.APPELLATION_OF_ORIGIN: "Appellation of Origin",
    FieldName.VINTAGE_YEAR: "Vintage Year",
    FieldName.SULFITE_DECLARATION: "Sulfite Declaration",
    FieldName.AGE_STATEMENT: "Age Statement",
    FieldName.STATE_OF_DISTILLATION: "State of Distillation",
    FieldName.STANDARDS_OF_FILL: "Standards of Fill",
}

_FIELDS_BY_VALUE = {f.value: f for f in FieldName}


def parse_field_name(name: Union[str, FieldName, None]) -> Optional[FieldName]:
    """Resolve a field name string to the enum, or None if it is not a known field."""
    if isinstance(name, FieldName):
        return name
    if not name:
        return None
    return _FIELDS_BY_VALUE.get(name.strip().lower())


def field_class(name: Union[str, FieldName, None]) -> FieldClass:
    """
    Comparison class for a field.

    Unknown names compare as generic text so a new extractor field never
    breaks a validation run.
    """
    field = parse_field_name(name)
    if field is None:
        return FieldClass.TEXT
    if field == FieldName.HEALTH_WARNING:
        return FieldClass.HEALTH_WARNING
    if field in NUMERIC_FIELDS:
        return FieldClass.NUMERIC
    if field in BOOLEAN_FIELDS:
        return FieldClass.BOOLEAN
    return FieldClass.TEXT


def display_name(name: Union[str, FieldName]) -> str:
    field = parse_field_name(name)
    if field is None:
        return str(name)
    return FIELD_DISPLAY_NAMES[field]
