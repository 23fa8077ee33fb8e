"""General parsing utilities for recipe extraction."""

import re
from typing import List, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T?(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$",
    re.I,
)
_HOURS_RE = re.compile(r"(\d+)\s*(?:h|hr|hrs|hour|hours)\b", re.I)
_MINUTES_RE = re.compile(r"(\d+)\s*(?:m|min|mins|minute|minutes)\b", re.I)
_SERVINGS_PATTERNS = (
    re.compile(r"serves\s+(\d+)", re.I),
    re.compile(r"serves?:\s*(\d+)", re.I),
    re.compile(r"servings?:\s*(\d+)", re.I),
    re.compile(r"yields?:\s*(\d+)", re.I),
)


def coerce_text(value) -> str:
    """
    Plain text from a JSON / JSON-LD scalar.

    Unwraps {"@value": ...} language-tagged values, takes the first usable
    element of a list and renders numbers without a trailing ".0".
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    if isinstance(value, dict):
        for key in ("@value", "text", "name"):
            if key in value:
                return coerce_text(value[key])
        return ""
    if isinstance(value, list):
        return next((text for text in map(coerce_text, value) if text.strip()), "")
    return ""


def clean_text(text) -> str:
    """Normalize whitespace in text."""
    return _WHITESPACE_RE.sub(" ", coerce_text(text)).strip()


def parse_iso8601_duration(duration: str) -> Optional[int]:
    """Minutes in an ISO-8601 duration such as PT1H30M or P1DT2H; None when unparseable or zero."""
    if not duration:
        return None
    match = _ISO_DURATION_RE.match(duration.strip())
    if not match:
        return None
    parts = {name: int(value or 0) for name, value in match.groupdict().items()}
    total = parts["days"] * 24 * 60 + parts["hours"] * 60 + parts["minutes"]
    if parts["seconds"] >= 30:
        total += 1
    return total or None


def parse_minutes(value) -> Optional[int]:
    """Minutes from a number, an ISO-8601 duration or text like "1 hr 20 mins"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        return None
    iso_minutes = parse_iso8601_duration(value)
    if iso_minutes is not None:
        return iso_minutes
    hours = _HOURS_RE.search(value)
    minutes = _MINUTES_RE.search(value)
    if not hours and not minutes:
        return None
    total = (int(hours.group(1)) * 60 if hours else 0) + (int(minutes.group(1)) if minutes else 0)
    return total or None


def format_minutes(minutes: Optional[int]) -> Optional[str]:
    """Render minutes as display text, e.g. 90 -> "1 hr 30 mins"."""
    if not minutes:
        return None
    hours, mins = divmod(minutes, 60)
    parts = []
    if hours:
        parts.append(f"{hours} hr" + ("s" if hours > 1 else ""))
    if mins:
        parts.append(f"{mins} min" + ("s" if mins > 1 else ""))
    return " ".join(parts)


def format_duration(value) -> Optional[str]:
    """Display text for a duration given as ISO-8601, minutes or free text."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and not value.strip().upper().startswith("P"):
        return clean_text(value) or None
    return format_minutes(parse_minutes(value))


def parse_servings(value) -> Optional[int]:
    """First integer in a recipeYield-style value (number, string or list of either)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, list):
        return next((parsed for parsed in map(parse_servings, value) if parsed is not None), None)
    if isinstance(value, (str, dict)):
        match = re.search(r"\d+", coerce_text(value))
        return int(match.group()) if match else None
    return None


def parse_servings_from_text(text: str) -> Optional[int]:
    """Servings mentioned in free text ("Serves 4", "Yield: 12")."""
    if not text:
        return None
    for pattern in _SERVINGS_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def _ingredient_line(entry) -> str:
    if isinstance(entry, str):
        return clean_text(entry)
    if not isinstance(entry, dict):
        return ""
    name = clean_text(entry.get("text")) or clean_text(entry.get("name"))
    prefix = " ".join(filter(None, (clean_text(entry.get(key)) for key in ("quantity", "unit"))))
    return clean_text(f"{prefix} {name}" if prefix and name else name)


def extract_ingredient_text(ingredients) -> List[str]:
    """Ingredient lines from strings or {text|name, quantity, unit} dicts."""
    if isinstance(ingredients, str):
        ingredients = [ingredients]
    if not isinstance(ingredients, list):
        return []
    return [line for line in map(_ingredient_line, ingredients) if line]


def extract_instruction_text(instructions) -> List[str]:
    """Step text from a string, a list of strings, HowToStep dicts or nested HowToSections."""
    if isinstance(instructions, str):
        step = clean_text(instructions)
        return [step] if step else []
    if not isinstance(instructions, list):
        return []
    steps: List[str] = []
    for entry in instructions:
        if isinstance(entry, dict) and isinstance(entry.get("itemListElement"), list):
            steps.extend(extract_instruction_text(entry["itemListElement"]))
            continue
        if isinstance(entry, dict):
            entry = clean_text(entry.get("text")) or clean_text(entry.get("description"))
        if isinstance(entry, str) and clean_text(entry):
            steps.append(clean_text(entry))
    return steps
