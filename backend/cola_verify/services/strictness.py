"""Per-field strictness policy.

Strictness is stored by an external settings backend. The engine only ever
sees it as a value handed in by the caller.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from .fields import FieldName, parse_field_name


class StrictnessLevel(str, Enum):
    """How much textual variation still counts as a match."""
    STRICT = "strict"
    MODERATE = "moderate"
    LENIENT = "lenient"


DEFAULT_STRICTNESS = StrictnessLevel.MODERATE

_FIELD_STRICTNESS_DEFAULTS = {
    FieldName.BRAND_NAME: StrictnessLevel.STRICT,
    FieldName.FANCIFUL_NAME: StrictnessLevel.LENIENT,
    FieldName.CLASS_TYPE: StrictnessLevel.STRICT,
    FieldName.ALCOHOL_CONTENT: StrictnessLevel.STRICT,
    FieldName.NET_CONTENTS: StrictnessLevel.STRICT,
    FieldName.HEALTH_WARNING: StrictnessLevel.STRICT,
    FieldName.NAME_AND_ADDRESS: StrictnessLevel.MODERATE,
    FieldName.QUALIFYING_PHRASE: StrictnessLevel.MODERATE,
    FieldName.COUNTRY_OF_ORIGIN: StrictnessLevel.MODERATE,
    FieldName.GRAPE_VARIETAL: StrictnessLevel.MODERATE,
    FieldName.APPELLATION_OF_ORIGIN: StrictnessLevel.MODERATE,
    FieldName.VINTAGE_YEAR: StrictnessLevel.STRICT,
    FieldName.SULFITE_DECLARATION: StrictnessLevel.STRICT,
    FieldName.AGE_STATEMENT: StrictnessLevel.MODERATE,
    FieldName.STATE_OF_DISTILLATION: StrictnessLevel.MODERATE,
    FieldName.STANDARDS_OF_FILL: StrictnessLevel.STRICT,
}


def get_field_strictness_defaults() -> Dict[FieldName, StrictnessLevel]:
    """Default strictness for every field (a fresh copy the caller may modify)."""
    return dict(_FIELD_STRICTNESS_DEFAULTS)


class StrictnessPolicy:
    """
    Immutable field -> strictness lookup.

    Built from the defaults plus whatever overrides the settings store holds.
    Fields absent from both resolve to moderate.
    """

    def __init__(self, overrides: Optional[Mapping[Union[str, FieldName], Union[str, StrictnessLevel]]] = None):
        levels = get_field_strictness_defaults()
        for name, level in (overrides or {}).items():
            field = parse_field_name(name)
            if field is None:
                raise ValueError(f"Unknown field in strictness settings: {name!r}")
            try:
                levels[field] = StrictnessLevel(level)
            except ValueError:
                raise ValueError(f"Invalid strictness {level!r} for field {field.value!r}") from None
        self._levels = MappingProxyType(levels)

    @classmethod
    def from_settings(cls, stored: Optional[Mapping[str, str]]) -> "StrictnessPolicy":
        """Build a policy from the persisted ``field_strictness`` setting (may be None)."""
        return cls(stored)

    def level_for(self, field_name: Union[str, FieldName]) -> StrictnessLevel:
        field = parse_field_name(field_name)
        if field is None:
            return DEFAULT_STRICTNESS
        return self._levels.get(field, DEFAULT_STRICTNESS)

    def as_dict(self) -> Dict[str, str]:
        return {field.value: level.value for field, level in self._levels.items()}

    def __eq__(self, other):
        if not isinstance(other, StrictnessPolicy):
            return NotImplemented
        return dict(self._levels) == dict(other._levels)

    def __repr__(self):
        return f"StrictnessPolicy({self.as_dict()!r})"
