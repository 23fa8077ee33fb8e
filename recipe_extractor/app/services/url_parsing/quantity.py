"""Quantity parsing, unit canonicalization and merging for grocery aggregation."""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from pydantic import BaseModel

from recipe_extractor.app.services.url_parsing.constants import (
    FRACTION_CHARS,
    FRACTION_GLYPHS,
    FRACTION_WORDS,
    UNIT_SYNONYMS,
)
from recipe_extractor.app.services.url_parsing.parsing_utils import clean_text


class ParsedQuantity(BaseModel):
    amount: float
    unit: str = ""


_FRACTION_WORD_ALT = "|".join(re.escape(word) for word in FRACTION_WORDS)
_NUMBER = r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?"

_FRACTION_QTY_RE = re.compile(
    rf"^(?:(?P<whole>\d+)\s*)?(?P<frac>[{FRACTION_CHARS}]|{_FRACTION_WORD_ALT})"
    rf"(?:\s+(?:of\s+)?(?:an?\s+)?(?P<unit>[a-z][a-z\.]*))?$"
)
_NUMERIC_QTY_RE = re.compile(rf"^(?P<number>{_NUMBER})(?:\s*(?P<unit>[a-z][a-z\.]*))?$")
_QUANTITY_PREFIX_RE = re.compile(
    rf"^(?P<amount>\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?\s*[{FRACTION_CHARS}]?|[{FRACTION_CHARS}]"
    rf"|(?:\d+\s+)?(?:{_FRACTION_WORD_ALT}))(?=\s|$)",
    re.I,
)
_GLYPH_BY_VALUE = {round(value, 3): glyph for glyph, value in FRACTION_GLYPHS.items()}
_SNAP_TOLERANCE = 0.002


def canonical_unit(token: Optional[str]) -> Optional[str]:
    """Canonical unit name for a unit spelling, or None if it is not a unit."""
    if not token:
        return None
    return UNIT_SYNONYMS.get(token.lower().strip().rstrip("."))


def _parse_number(raw: str) -> Optional[Decimal]:
    value = raw.strip()
    if not value:
        return None
    try:
        if "/" not in value and " " not in value:
            return Decimal(value)
        if " " in value:
            whole_part, frac_part = value.split(None, 1)
            num_str, denom_str = frac_part.split("/", 1)
            denom = Decimal(denom_str)
            if denom == 0:
                return None
            return Decimal(whole_part) + Decimal(num_str) / denom
        num_str, denom_str = value.split("/", 1)
        denom = Decimal(denom_str)
        if denom == 0:
            return None
        return Decimal(num_str) / denom
    except (InvalidOperation, ValueError):
        return None


def parse(quantity_text: str) -> Optional[ParsedQuantity]:
    """Parse a whole quantity string such as "1 ½ cups", "half" or "2 tbsp"."""
    text = clean_text(quantity_text).lower()
    if not text:
        return None
    # "1½" -> "1 ½"
    text = re.sub(rf"(\d)([{FRACTION_CHARS}])", r"\1 \2", text)

    match = _FRACTION_QTY_RE.match(text)
    if match:
        frac = match.group("frac")
        value = FRACTION_GLYPHS.get(frac, FRACTION_WORDS.get(frac, 0.0))
        whole = int(match.group("whole")) if match.group("whole") else 0
        unit = match.group("unit")
        canonical = canonical_unit(unit) if unit else ""
        if canonical is None:
            return None
        return ParsedQuantity(amount=whole + value, unit=canonical)

    match = _NUMERIC_QTY_RE.match(text)
    if match:
        number = _parse_number(match.group("number"))
        if number is None:
            return None
        unit = match.group("unit")
        canonical = canonical_unit(unit) if unit else ""
        if canonical is None:
            return None
        return ParsedQuantity(amount=float(number), unit=canonical)
    return None


def _snap(amount: float) -> float:
    """Pull sums like ⅓ + ⅓ (0.666) onto the nearest whole number or glyph value."""
    nearest = round(amount)
    if abs(amount - nearest) <= _SNAP_TOLERANCE:
        return float(nearest)
    whole = math.floor(amount)
    for value in FRACTION_GLYPHS.values():
        if abs(amount - whole - value) <= _SNAP_TOLERANCE:
            return whole + value
    return amount


def format_number(amount: float) -> str:
    value = round(_snap(amount), 3)
    if value in _GLYPH_BY_VALUE:
        return _GLYPH_BY_VALUE[value]
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_quantity(parsed: ParsedQuantity) -> str:
    number = format_number(parsed.amount)
    return f"{number} {parsed.unit}" if parsed.unit else number


def merge_quantities(a: str, b: str) -> str:
    """
    Combine two quantity strings.

    Same unit (or both unitless) adds the amounts; anything else is kept
    side by side as "a + b" so nothing is silently dropped.
    """
    a = clean_text(a)
    b = clean_text(b)
    if not a:
        return b
    if not b:
        return a
    first = parse(a)
    second = parse(b)
    if first and second and first.unit == second.unit:
        return format_quantity(
            ParsedQuantity(amount=first.amount + second.amount, unit=first.unit)
        )
    return f"{a} + {b}"


def merge_key(name: str) -> str:
    """Name used to match the same ingredient across recipes."""
    text = clean_text(name).lower()
    text = re.sub(r"\s*\(\d+\)$", "", text)
    text = re.sub(rf"^[\d\s/\.{FRACTION_CHARS}]+", "", text)
    first, _, rest = text.partition(" ")
    if rest and canonical_unit(first):
        text = rest
    return text.strip()


def split_ingredient(line: str) -> Tuple[str, str]:
    """Split "1 tablespoon butter" into ("1 tablespoon", "butter")."""
    cleaned = clean_text(line)
    match = _QUANTITY_PREFIX_RE.match(cleaned)
    if not match:
        return "", cleaned
    amount = match.group("amount").strip()
    rest = cleaned[match.end():].strip()
    unit_word, _, remainder = rest.partition(" ")
    quantity = amount
    if unit_word and canonical_unit(unit_word):
        quantity = f"{amount} {unit_word}"
        rest = remainder.strip()
    rest = re.sub(r"^of\s+", "", rest, flags=re.I)
    return quantity, rest
