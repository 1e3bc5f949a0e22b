"""Slug generation for content identifiers and path tokens.

A slug is lowercase ASCII letters, digits and single hyphens, with no
leading or trailing hyphen. Accented characters are folded to their ASCII
base letter (``café`` -> ``cafe``); anything else that is not a word
character is dropped.
"""

from __future__ import annotations

import re
import unicodedata

DEFAULT_SLUG = "untitled"

_STRIP_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")


def slugify(value: str) -> str:
    """Convert *value* to a URL-safe slug.

    Examples:
        >>> slugify("My First Post!")
        'my-first-post'
        >>> slugify("  Hello__World  ")
        'hello-world'
        >>> slugify("Crème Brûlée")
        'creme-brulee'
    """
    text = unicodedata.normalize("NFKD", value)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = _STRIP_RE.sub("", text.lower().strip())
    text = _SEPARATOR_RE.sub("-", text)
    return text.strip("-")


def slug_from_title(title: object, *, explicit: str | None = None) -> str:
    """Base slug for a new item: *explicit*, else the slugified title.

    Falls back to :data:`DEFAULT_SLUG` when neither yields anything.
    """
    if explicit:
        return explicit
    if isinstance(title, str) and title.strip():
        return slugify(title) or DEFAULT_SLUG
    return DEFAULT_SLUG
