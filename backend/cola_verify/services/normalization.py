"""Field value normalization.

Turns raw application and label strings into comparable canonical forms.
Every field name has one strategy:

- text fields: case folded, quotes straightened, punctuation folded
- alcohol_content: ABV percentage (proof is halved), one decimal place
- net_contents: whole milliliters, US customary composites summed
- vintage_year: four-digit year
- age_statement: whole years
- sulfite_declaration: boolean
- health_warning: case folded, whitespace collapsed

Nothing here raises on bad input. A typed field whose value cannot be parsed
degrades to text normalization so the comparison still runs.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Optional, Union

from .fields import FieldClass, FieldName, field_class, parse_field_name

# Straight quotes replace the typographic variants OCR and word processors emit
_QUOTE_TABLE = str.maketrans({
    "‘": "'",
    "’": "'",
    "‛": "'",
    "′": "'",
    "´": "'",
    "`": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "″": '"',
})

# Periods that are not decimal points (abbreviations like "Co." or "U.S.A.")
_ABBREVIATION_PERIOD = re.compile(r"(?<!\d)\.|\.(?!\d)")
# Apostrophes not inside a word ('quoted', trailing possessive marks)
_LOOSE_APOSTROPHE = re.compile(r"(?<!\w)'|'(?!\w)")
# Remaining punctuation except apostrophes and decimal points
_PUNCTUATION = re.compile(r"[^\w\s'.]")

_NUMBER_FORMS = r"\d{1,3}(?:,\d{3})+|\d+(?:\.\d+)?|\.\d+"
_NUMBER = "(" + _NUMBER_FORMS + ")"

# European decimal comma ("13,5%"); thousands groups always have three digits
_DECIMAL_COMMA = r"\d+,\d{1,2}(?!\d)"

# ABV: first number immediately before "%" or "proof"
_ABV_PATTERN = re.compile(
    r"(" + _DECIMAL_COMMA + r"|" + _NUMBER_FORMS + r")\s*(%|percent\b|proof\b)",
    re.IGNORECASE,
)

_VOLUME_PATTERN = re.compile(
    _NUMBER + r"\s*("
    r"fl\.?\s*oz\.?|fluid\s+ounces?|ounces?|oz\.?|"
    r"millilit(?:er|re)s?|ml|centilit(?:er|re)s?|cl|lit(?:er|re)s?|l|"
    r"pints?|pt\.?|quarts?|qt\.?|gallons?|gal\.?"
    r")(?![a-z])",
    re.IGNORECASE,
)

_BARE_NUMBER = re.compile(r"^\s*" + _NUMBER + r"\s*$")

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")

_AGE_YEARS_PATTERN = re.compile(r"(\d+)[\s-]*(?:years?|yrs?)\b", re.IGNORECASE)
_AGED_PATTERN = re.compile(r"\baged\s+(\d+)", re.IGNORECASE)

# Unit conversion constants
ML_PER_LITER = 1000.0
ML_PER_CENTILITER = 10.0
ML_PER_FL_OZ = 29.5735
ML_PER_PINT = 473.176
ML_PER_QUART = 946.353
ML_PER_GALLON = 3785.41

_METRIC_UNITS = ("ml", "cl", "l")


@dataclass(frozen=True)
class Volume:
    """A net contents declaration converted to milliliters."""
    ml: int
    # True when the declaration used US customary units (fl oz, pt, qt, gal)
    customary: bool = False


@dataclass(frozen=True)
class NormalizedValue:
    """Canonical form of one field value."""
    field_class: FieldClass
    value: Any
    text: str


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to one space and trim."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def normalize_text(text: Optional[str]) -> str:
    """
    Generic text normalization for name-like fields.

    "STONE’S  THROW Co." -> "stone's throw co"
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.translate(_QUOTE_TABLE).lower()
    text = _ABBREVIATION_PERIOD.sub("", text)
    text = _LOOSE_APOSTROPHE.sub(" ", text)
    text = _PUNCTUATION.sub(" ", text)
    text = text.replace("_", " ")
    return normalize_whitespace(text)


def normalize_health_warning(text: Optional[str]) -> str:
    """Case folded, whitespace collapsed warning text."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text).translate(_QUOTE_TABLE)
    return normalize_whitespace(text).lower()


def _to_float(number: str) -> float:
    return float(number.replace(",", ""))


def parse_alcohol_content(text: Optional[str]) -> Optional[float]:
    """
    Extract ABV as a percentage rounded to one decimal.

    Handles:
    - "45% Alc./Vol." -> 45.0
    - "Alc. 13.5% by Vol." -> 13.5
    - "13,5% vol" -> 13.5 (decimal comma)
    - "90 Proof" -> 45.0
    - "57% ALC/VOL 114 PROOF" -> 57.0 (first value wins)
    """
    if not text:
        return None
    match = _ABV_PATTERN.search(text)
    if not match:
        return None
    number = match.group(1)
    if re.fullmatch(_DECIMAL_COMMA, number):
        value = float(number.replace(",", "."))
    else:
        value = _to_float(number)
    if match.group(2).lower() == "proof":
        value = value / 2
    return round(value, 1)


def abv_equal(a: float, b: float, tolerance: float = 0.05) -> bool:
    """Compare two ABV values after rounding to one decimal."""
    # Small epsilon so 0.05 itself counts as within tolerance despite float error
    return abs(round(a, 1) - round(b, 1)) <= tolerance + 1e-9


def _unit_key(unit: str) -> str:
    unit = re.sub(r"[\s.]", "", unit.lower())
    if unit.startswith("fl") or unit.startswith("fluid") or unit.startswith("ounce") or unit == "oz":
        return "floz"
    if unit.startswith("millilit") or unit == "ml":
        return "ml"
    if unit.startswith("centilit") or unit == "cl":
        return "cl"
    if unit.startswith("lit") or unit == "l":
        return "l"
    if unit.startswith("pint") or unit == "pt":
        return "pt"
    if unit.startswith("quart") or unit == "qt":
        return "qt"
    return "gal"


_UNIT_TO_ML = {
    "ml": 1.0,
    "cl": ML_PER_CENTILITER,
    "l": ML_PER_LITER,
    "floz": ML_PER_FL_OZ,
    "pt": ML_PER_PINT,
    "qt": ML_PER_QUART,
    "gal": ML_PER_GALLON,
}


def parse_volume(text: Optional[str]) -> Optional[Volume]:
    """
    Parse a net contents declaration.

    A metric amount is authoritative when present, so "750 mL (25.4 FL OZ)"
    reads as 750 mL. US customary parts in descending unit order are summed:
    "1 PT. 9.4 FL. OZ." -> 751 mL. A bare number is read as milliliters.
    """
    if not text:
        return None

    parts = [(_to_float(m.group(1)), _unit_key(m.group(2))) for m in _VOLUME_PATTERN.finditer(text)]

    if not parts:
        bare = _BARE_NUMBER.match(text)
        if bare:
            return Volume(ml=int(round(_to_float(bare.group(1)))))
        return None

    for amount, unit in parts:
        if unit in _METRIC_UNITS:
            return Volume(ml=int(round(amount * _UNIT_TO_ML[unit])))

    total = 0.0
    previous_factor = None
    for amount, unit in parts:
        factor = _UNIT_TO_ML[unit]
        # A repeated or larger unit starts a new declaration, e.g. an equivalent
        if previous_factor is not None and factor >= previous_factor:
            break
        total += amount * factor
        previous_factor = factor

    return Volume(ml=int(round(total)), customary=True)


def parse_net_contents_ml(text: Optional[str]) -> Optional[int]:
    """Net contents in whole milliliters, or None if no volume is found."""
    volume = parse_volume(text)
    return volume.ml if volume else None


def parse_vintage_year(text: Optional[str]) -> Optional[int]:
    """First standalone four-digit token, e.g. "Vintage 2019" -> 2019."""
    if not text:
        return None
    match = _YEAR_PATTERN.search(text)
    return int(match.group(1)) if match else None


def parse_age_statement(text: Optional[str]) -> Optional[int]:
    """
    Age in whole years.

    "12 Years Old" -> 12, "Aged 8 Yrs." -> 8, "Aged 4 in oak" -> 4
    """
    if not text:
        return None
    match = _AGE_YEARS_PATTERN.search(text) or _AGED_PATTERN.search(text)
    return int(match.group(1)) if match else None


def normalize_sulfite_declaration(text: Optional[str]) -> bool:
    """Any mention of sulfites counts as a declaration; absence is False."""
    if not text:
        return False
    lowered = text.lower()
    return "sulfite" in lowered or "sulphite" in lowered


def normalize_value(field_name: Union[str, FieldName, None], raw: Optional[str]) -> NormalizedValue:
    """
    Normalize one value using its field's strategy.

    Typed fields that cannot be parsed come back as TEXT so the caller
    compares them as strings instead of failing.
    """
    text = normalize_text(raw)
    kind = field_class(field_name)

    if kind == FieldClass.HEALTH_WARNING:
        return NormalizedValue(kind, normalize_health_warning(raw), text)

    if kind == FieldClass.BOOLEAN:
        return NormalizedValue(kind, normalize_sulfite_declaration(raw), text)

    if kind == FieldClass.NUMERIC:
        field = parse_field_name(field_name)
        if field == FieldName.ALCOHOL_CONTENT:
            value = parse_alcohol_content(raw)
        elif field == FieldName.NET_CONTENTS:
            value = parse_volume(raw)
        elif field == FieldName.AGE_STATEMENT:
            value = parse_age_statement(raw)
        else:
            value = parse_vintage_year(raw)
        if value is not None:
            return NormalizedValue(kind, value, text)

    return NormalizedValue(FieldClass.TEXT, text, text)
