"""Projects submitted application data onto the fields a label must show."""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from .beverage_types import BeverageType, get_config
from .fields import FieldName
from .health_warning import HEALTH_WARNING_FULL

logger = logging.getLogger(__name__)

SULFITE_DECLARATION_TEXT = "Contains Sulfites"

# Submission forms send camelCase keys; CSV imports and the API send snake_case
APPLICATION_KEYS = {
    FieldName.BRAND_NAME: "brandName",
    FieldName.FANCIFUL_NAME: "fancifulName",
    FieldName.CLASS_TYPE: "classType",
    FieldName.ALCOHOL_CONTENT: "alcoholContent",
    FieldName.NET_CONTENTS: "netContents",
    FieldName.HEALTH_WARNING: "healthWarning",
    FieldName.NAME_AND_ADDRESS: "nameAndAddress",
    FieldName.QUALIFYING_PHRASE: "qualifyingPhrase",
    FieldName.COUNTRY_OF_ORIGIN: "countryOfOrigin",
    FieldName.GRAPE_VARIETAL: "grapeVarietal",
    FieldName.APPELLATION_OF_ORIGIN: "appellationOfOrigin",
    FieldName.VINTAGE_YEAR: "vintageYear",
    FieldName.SULFITE_DECLARATION: "sulfiteDeclaration",
    FieldName.AGE_STATEMENT: "ageStatement",
    FieldName.STATE_OF_DISTILLATION: "stateOfDistillation",
}

_TRUE_STRINGS = {"true", "yes", "y", "1"}


@dataclass(frozen=True)
class ExpectedField:
    """A field the label must show, with the value the applicant declared."""
    field_name: FieldName
    expected_value: str


def _lookup(data: Mapping[str, Any], field: FieldName) -> Any:
    value = data.get(field.value)
    if value is None and field in APPLICATION_KEYS:
        value = data.get(APPLICATION_KEYS[field])
    return value


def _is_declared(value: Any) -> bool:
    """Sulfite declarations arrive as booleans, or as strings from CSV imports."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def build_expected_fields(
    application_data: Mapping[str, Any],
    beverage_type: Union[str, BeverageType],
    include_default_health_warning: bool = False,
) -> List[ExpectedField]:
    """
    Build the ordered list of fields to compare for a submission.

    Walks the beverage type's mandatory fields, then its optional fields, and
    keeps those the application gives a value for. Fields outside the
    beverage type are never produced (grape varietal is never checked on a
    malt beverage).

    Args:
        application_data: Submitted values keyed by snake_case or camelCase name
        beverage_type: Beverage category of the submission
        include_default_health_warning: Expect the mandated warning text when
            the application leaves the warning blank

    Returns:
        ExpectedField list in registry order
    """
    config = get_config(beverage_type)
    fields = []

    for field in config.checked_fields:
        if field == FieldName.STANDARDS_OF_FILL:
            # Checked against the container size by the status resolver
            continue
        value = _lookup(application_data, field)

        if field == FieldName.SULFITE_DECLARATION:
            if _is_declared(value):
                fields.append(ExpectedField(field, SULFITE_DECLARATION_TEXT))
            continue

        text = _as_text(value)
        if text is None and field == FieldName.HEALTH_WARNING and include_default_health_warning:
            text = HEALTH_WARNING_FULL
        if text is not None:
            fields.append(ExpectedField(field, text))

    logger.debug(f"Expected fields for {config.label}: {[f.field_name.value for f in fields]}")
    return fields
