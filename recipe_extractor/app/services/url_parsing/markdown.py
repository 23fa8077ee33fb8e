"""
Markdown recipe contract: parsing, rendering and display fix-ups.

Documents follow the layout::

    # Title
    optional description and metadata lines (Prep Time: ..., Servings: ...)
    ## Ingredients
    ### optional subsection
    - item
    ## Instructions
    1. step
    ## Tips
    - tip
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

_FENCE_OPEN_RE = re.compile(r"^```[\w-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_TITLE_RE = re.compile(r"^# (.*)$", re.M)
_SECTION_PREFIX = "## "
_LIST_ITEM_RE = re.compile(r"^[-*•]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^\d+[.)]\s*(.+)$")
_SUBHEADING_RE = re.compile(r"^#{3,6}\s+(.+)$")
_BOLD_LINE_RE = re.compile(r"^(\*\*|__)(.+)\1:?$")
_PLAIN_HEADING_RES = [
    re.compile(r"^[A-Z][A-Z0-9 &'/,()-]*:$"),
    re.compile(r"^for (?:the )?.+:$", re.I),
    re.compile(r"^[A-Z][a-z]+(?: [A-Za-z&'()/-]+)*:$"),
]
_TIME_RE = re.compile(
    r"^[\s*_-]*(prep time|cook time|total time)[\s*_]*:[\s*_]*(.+?)[\s*_]*$", re.I | re.M
)
_SERVINGS_RE = re.compile(
    r"^[\s*_-]*(?:servings|yield)[\s*_]*:[\s*_]*(.+?)[\s*_]*$"
    r"|^[\s*_-]*serves(?:[\s*_]*:[\s*_]*|[\s*_]+(?=\d))(.+?)[\s*_]*$",
    re.I | re.M,
)

INGREDIENT_HEADINGS = ("ingredient",)
INSTRUCTION_HEADINGS = ("instruction", "direction", "method", "step", "preparation")
TIP_HEADINGS = ("tip", "note", "storage")


class MarkdownSection(BaseModel):
    heading: str
    body: str


class ParsedMarkdown(BaseModel):
    title: str
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    ingredient_categories: Optional[Dict[str, List[str]]] = None
    instructions: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[str] = None

    @property
    def cooking_time(self) -> Optional[str]:
        return self.total_time or self.cook_time or self.prep_time


def clean_markdown(text: str) -> str:
    """Strip surrounding code fences and stray ''' sequences."""
    cleaned = (text or "").strip()
    cleaned = _FENCE_OPEN_RE.sub("", cleaned)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned)
    cleaned = cleaned.replace("'''", "")
    return cleaned.strip()


def _strip_emphasis(text: str) -> str:
    return re.sub(r"(\*\*|__)", "", text).strip()


def _clean_label(text: str) -> str:
    return _strip_emphasis(text).strip("*_# ").rstrip(":").strip()


def _split_document(markdown: str) -> Tuple[List[str], List[MarkdownSection]]:
    preamble: List[str] = []
    sections: List[MarkdownSection] = []
    heading: Optional[str] = None
    body: List[str] = []
    for line in markdown.splitlines():
        if line.startswith(_SECTION_PREFIX):
            if heading is not None:
                sections.append(MarkdownSection(heading=heading, body="\n".join(body).strip()))
            heading = line[len(_SECTION_PREFIX):].strip()
            body = []
        elif heading is None:
            preamble.append(line)
        else:
            body.append(line)
    if heading is not None:
        sections.append(MarkdownSection(heading=heading, body="\n".join(body).strip()))
    return preamble, sections


def parse_markdown_sections(markdown: str) -> List[MarkdownSection]:
    """Split a document into its `## ` sections, in document order."""
    _, sections = _split_document(clean_markdown(markdown))
    return sections


def _heading_kind(heading: str) -> Optional[str]:
    label = _clean_label(heading).lower()
    if label.startswith(INGREDIENT_HEADINGS):
        return "ingredients"
    if label.startswith(INSTRUCTION_HEADINGS):
        return "instructions"
    if label.startswith(TIP_HEADINGS):
        return "tips"
    return None


def subsection_label(line: str) -> Optional[str]:
    """Category label when the line opens an ingredient subsection, else None."""
    match = _SUBHEADING_RE.match(line)
    if match:
        return _clean_label(match.group(1)) or None
    match = _LIST_ITEM_RE.match(line)
    if match:
        inner = _strip_emphasis(match.group(1))
        if len(inner) > 1 and inner.endswith(":"):
            return _clean_label(inner)
        return None
    if _BOLD_LINE_RE.match(line):
        return _clean_label(line) or None
    if any(pattern.match(line) for pattern in _PLAIN_HEADING_RES):
        return _clean_label(line) or None
    return None


def _parse_ingredients(body: str) -> Tuple[List[str], Optional[Dict[str, List[str]]]]:
    ingredients: List[str] = []
    categories: Dict[str, List[str]] = {}
    current: Optional[str] = None
    for raw in body.splitlines():
        line = raw.strip()
        if not line:
            continue
        label = subsection_label(line)
        if label is not None:
            current = label
            categories.setdefault(current, [])
            continue
        match = _LIST_ITEM_RE.match(line)
        text = match.group(1).strip() if match else line
        if not text:
            continue
        ingredients.append(text)
        if current is not None:
            categories[current].append(text)
    categories = {name: items for name, items in categories.items() if items}
    return ingredients, categories or None


def _parse_steps(body: str) -> List[str]:
    lines = [line.strip() for line in body.splitlines() if line.strip()]
    numbered = []
    for line in lines:
        match = _NUMBERED_RE.match(line)
        if match:
            numbered.append(match.group(1).strip())
    if numbered:
        return numbered
    return _parse_list(body)


def _parse_list(body: str) -> List[str]:
    lines = [line.strip() for line in body.splitlines() if line.strip()]
    bullets = []
    for line in lines:
        match = _LIST_ITEM_RE.match(line)
        if match and match.group(1).strip():
            bullets.append(match.group(1).strip())
    if bullets:
        return bullets
    return [line for line in lines if not line.startswith("#")]


def _parse_metadata(markdown: str) -> Dict[str, Optional[str]]:
    meta: Dict[str, Optional[str]] = {}
    for match in _TIME_RE.finditer(markdown):
        key = match.group(1).lower().replace(" ", "_")
        meta.setdefault(key, match.group(2).strip())
    match = _SERVINGS_RE.search(markdown)
    if match:
        meta["servings"] = (match.group(1) or match.group(2) or "").strip() or None
    return meta


def _is_metadata_line(line: str) -> bool:
    return bool(_TIME_RE.match(line) or _SERVINGS_RE.match(line))


def parse_markdown(markdown: str, default_title: str = "Recipe") -> ParsedMarkdown:
    """Parse a recipe markdown document; missing sections yield empty lists."""
    cleaned = clean_markdown(markdown)
    title_match = _TITLE_RE.search(cleaned)
    title = title_match.group(1).strip() if title_match else ""

    preamble, sections = _split_document(cleaned)
    description_lines = [
        line.strip()
        for line in preamble
        if line.strip() and not line.startswith("#") and not _is_metadata_line(line)
    ]

    ingredients: List[str] = []
    categories: Optional[Dict[str, List[str]]] = None
    instructions: List[str] = []
    tips: List[str] = []
    for section in sections:
        kind = _heading_kind(section.heading)
        if kind == "ingredients" and not ingredients:
            ingredients, categories = _parse_ingredients(section.body)
        elif kind == "instructions" and not instructions:
            instructions = _parse_steps(section.body)
        elif kind == "tips":
            tips.extend(_parse_list(section.body))

    return ParsedMarkdown(
        title=title or default_title,
        description=" ".join(description_lines) or None,
        ingredients=ingredients,
        ingredient_categories=categories,
        instructions=instructions,
        tips=tips,
        **_parse_metadata(cleaned),
    )


def render_markdown(
    title: str,
    ingredients: Sequence[str],
    instructions: Sequence[str],
    *,
    description: Optional[str] = None,
    ingredient_categories: Optional[Dict[str, List[str]]] = None,
    tips: Sequence[str] = (),
    prep_time: Optional[str] = None,
    cook_time: Optional[str] = None,
    total_time: Optional[str] = None,
    servings: Optional[str] = None,
) -> str:
    """Render recipe fields to the markdown contract; steps are numbered from 1."""
    lines = [f"# {title}", ""]
    if description:
        lines.extend([description, ""])
    meta = [
        f"{label}: {value}"
        for label, value in (
            ("Prep Time", prep_time),
            ("Cook Time", cook_time),
            ("Total Time", total_time),
            ("Servings", servings),
        )
        if value
    ]
    if meta:
        lines.extend(meta + [""])

    lines.append("## Ingredients")
    flattened = [item for items in (ingredient_categories or {}).values() for item in items]
    if ingredient_categories and flattened == list(ingredients):
        for category, items in ingredient_categories.items():
            if not items:
                continue
            lines.append(f"### {category}")
            lines.extend(f"- {item}" for item in items)
    else:
        lines.extend(f"- {item}" for item in ingredients)
    lines.append("")

    lines.append("## Instructions")
    lines.extend(f"{idx}. {step}" for idx, step in enumerate(instructions, start=1))

    if tips:
        lines.extend(["", "## Tips"])
        lines.extend(f"- {tip}" for tip in tips)
    return "\n".join(lines).strip() + "\n"


def normalize_recipe_markdown(markdown: str) -> str:
    """Display fix-up: "- Heading:" items inside Ingredients become "### Heading" lines."""
    output: List[str] = []
    in_ingredients = False
    for line in clean_markdown(markdown).splitlines():
        if line.startswith(_SECTION_PREFIX):
            in_ingredients = _heading_kind(line[len(_SECTION_PREFIX):]) == "ingredients"
            output.append(line)
            continue
        if in_ingredients:
            match = _LIST_ITEM_RE.match(line.strip())
            if match:
                inner = _strip_emphasis(match.group(1))
                if len(inner) > 1 and inner.endswith(":"):
                    output.append(f"### {_clean_label(inner)}")
                    continue
        output.append(line)
    return "\n".join(output)
