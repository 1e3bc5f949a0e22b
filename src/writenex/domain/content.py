"""Content models and frontmatter parse/render.

A content file is::

    ---
    <YAML metadata>
    ---

    <markdown body>

Rendering follows the host site generator's conventions so files written
here read back identically there:

- ``None`` values are dropped.
- Strings containing ``:``, ``#`` or a newline are double-quoted.
- Numbers and booleans are bare; dates are ``YYYY-MM-DD``.
- Lists are block sequences indented two spaces; empty lists are ``[]``.
- Mappings become a nested block.

Both directions go through ruamel.yaml; the rules above are applied by
converting values before dumping.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from io import StringIO
from typing import Any

from pydantic import BaseModel, Field
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

_FRONTMATTER_DELIMITER = "---"

# Characters that force a double-quoted scalar.
_QUOTE_TRIGGERS = (":", "#", "\n")

EXCERPT_LENGTH = 150


class FrontmatterError(ValueError):
    """The YAML block between the delimiters could not be parsed."""


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML instance.

    ruamel's YAML object is stateful; a failed dump can leave a shared
    instance unusable, so each call gets its own.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    y.indent(mapping=2, sequence=4, offset=2)
    y.width = 4096
    return y


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ContentItem(BaseModel):
    """A parsed content file."""

    model_config = {"frozen": True}

    id: str
    path: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    raw: str = ""


class ContentSummary(BaseModel):
    """The listing view of a content item."""

    model_config = {"frozen": True}

    id: str
    path: str
    title: str
    pub_date: str | None = None
    draft: bool = False
    excerpt: str = ""


# ---------------------------------------------------------------------------
# Parse / render
# ---------------------------------------------------------------------------


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split *content* into ``(frontmatter, body)``.

    The first line must be ``---`` and a later line must close the block.
    One blank line after the closing delimiter is treated as the separator
    and dropped. Without valid delimiters the whole text is the body.

    Raises:
        FrontmatterError: The YAML block is malformed.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    try:
        loaded = _new_yaml().load(yaml_block)
    except YAMLError as exc:
        raise FrontmatterError(f"Invalid frontmatter: {exc}") from exc

    if loaded is None:
        return {}, body
    if not isinstance(loaded, Mapping):
        raise FrontmatterError("Frontmatter must be a mapping")
    return dict(loaded), body


def _prepare_value(value: Any) -> Any:
    if isinstance(value, str):
        if any(ch in value for ch in _QUOTE_TRIGGERS):
            return DoubleQuotedScalarString(value)
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, Mapping):
        return {str(k): _prepare_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_prepare_value(v) for v in value]
    return value


def frontmatter_to_yaml(frontmatter: Mapping[str, Any]) -> str:
    """Render *frontmatter* as YAML lines without a trailing newline."""
    prepared = {
        str(key): _prepare_value(value) for key, value in frontmatter.items() if value is not None
    }
    if not prepared:
        return ""
    buf = StringIO()
    _new_yaml().dump(prepared, buf)
    return buf.getvalue().rstrip("\n")


def render_frontmatter(frontmatter: Mapping[str, Any], body: str) -> str:
    """Render the full file text: delimiters, metadata, blank line, body."""
    yaml_text = frontmatter_to_yaml(frontmatter)
    return f"{_FRONTMATTER_DELIMITER}\n{yaml_text}\n{_FRONTMATTER_DELIMITER}\n\n{body}"


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

_EXCERPT_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"_([^_]+)_"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"^>\s+", re.MULTILINE), ""),
    (re.compile(r"^[-*_]{3,}$", re.MULTILINE), ""),
    (re.compile(r"\s+"), " "),
]


def generate_excerpt(body: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Plain-text excerpt of a markdown body, cut at a word boundary."""
    cleaned = body
    for pattern, repl in _EXCERPT_RULES:
        cleaned = pattern.sub(repl, cleaned)
    cleaned = cleaned.strip()

    if len(cleaned) <= max_length:
        return cleaned

    truncated = cleaned[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.7:
        return truncated[:last_space] + "..."
    return truncated + "..."


def to_summary(item: ContentItem) -> ContentSummary:
    fm = item.frontmatter
    date_value = next(
        (fm[k] for k in ("pubDate", "publishDate", "date") if fm.get(k) is not None),
        None,
    )
    if isinstance(date_value, (date, datetime)):
        pub_date: str | None = date_value.isoformat()
    else:
        pub_date = str(date_value) if date_value else None

    return ContentSummary(
        id=item.id,
        path=item.path,
        title=str(fm.get("title") or item.id),
        pub_date=pub_date,
        draft=fm.get("draft") is True,
        excerpt=generate_excerpt(item.body),
    )
