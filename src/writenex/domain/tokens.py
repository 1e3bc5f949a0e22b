"""Token resolution for naming patterns.

Every placeholder in a template resolves through four layers, first hit
wins:

1. ``custom_tokens`` passed by the caller.
2. A built-in resolver (:data:`TOKEN_RESOLVERS`).
3. A frontmatter field with the token's name (strings slugified,
   numbers stringified).
4. The empty string.

Resolution never raises; unknown tokens simply become ``""``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from writenex.domain.patterns import parse_pattern_tokens
from writenex.domain.slugs import slugify

# Frontmatter fields checked, in order, for date-derived tokens.
DATE_FIELDS: tuple[str, ...] = ("pubDate", "date", "publishDate", "createdAt", "created")

LANG_FIELDS: tuple[str, ...] = ("lang", "language", "locale")

TokenResolver = Callable[[Mapping[str, Any], str], str]


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def resolve_date(frontmatter: Mapping[str, Any]) -> date:
    """First parseable date among :data:`DATE_FIELDS`, else today (UTC)."""
    for name in DATE_FIELDS:
        parsed = _parse_date(frontmatter.get(name))
        if parsed is not None:
            return parsed
    return datetime.now(UTC).date()


def _first_string(frontmatter: Mapping[str, Any], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = frontmatter.get(name)
        if isinstance(value, str):
            return value
    return None


def _lang(fm: Mapping[str, Any], _slug: str) -> str:
    return _first_string(fm, LANG_FIELDS) or "en"


def _category(fm: Mapping[str, Any], _slug: str) -> str:
    category = fm.get("category")
    if isinstance(category, str):
        return category
    categories = fm.get("categories")
    if isinstance(categories, list) and categories and isinstance(categories[0], str):
        return categories[0]
    return "uncategorized"


def _author(fm: Mapping[str, Any], _slug: str) -> str:
    author = fm.get("author")
    if isinstance(author, str):
        return slugify(author)
    if isinstance(author, Mapping) and "name" in author:
        return slugify(str(author["name"]))
    return "anonymous"


def _type(fm: Mapping[str, Any], _slug: str) -> str:
    return _first_string(fm, ("type", "contentType")) or "post"


def _status(fm: Mapping[str, Any], _slug: str) -> str:
    status = fm.get("status")
    if isinstance(status, str):
        return status
    if fm.get("draft") is True:
        return "draft"
    return "published"


def _series(fm: Mapping[str, Any], _slug: str) -> str:
    series = fm.get("series")
    return slugify(series) if isinstance(series, str) else ""


def _collection(fm: Mapping[str, Any], _slug: str) -> str:
    collection = fm.get("collection")
    return collection if isinstance(collection, str) else ""


TOKEN_RESOLVERS: dict[str, TokenResolver] = {
    "slug": lambda _fm, slug: slug,
    "date": lambda fm, _slug: resolve_date(fm).isoformat(),
    "year": lambda fm, _slug: f"{resolve_date(fm).year:04d}",
    "month": lambda fm, _slug: f"{resolve_date(fm).month:02d}",
    "day": lambda fm, _slug: f"{resolve_date(fm).day:02d}",
    "lang": _lang,
    "category": _category,
    "author": _author,
    "type": _type,
    "status": _status,
    "series": _series,
    "collection": _collection,
}


def get_supported_tokens() -> list[str]:
    """Names of tokens with a built-in resolver."""
    return list(TOKEN_RESOLVERS)


def _from_frontmatter(value: Any) -> str | None:
    if isinstance(value, str):
        return slugify(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return None


def resolve_pattern_tokens(
    pattern: str,
    slug: str,
    frontmatter: Mapping[str, Any] | None = None,
    custom_tokens: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Resolve every placeholder in *pattern* to a string value.

    >>> resolve_pattern_tokens("{year}/{month}/{slug}.md", "hi", {"pubDate": "2024-06-05"})
    {'year': '2024', 'month': '06', 'slug': 'hi'}
    """
    fm = frontmatter or {}
    custom = custom_tokens or {}
    resolved: dict[str, str] = {}

    for token in parse_pattern_tokens(pattern):
        if token in custom:
            resolved[token] = custom[token] or ""
            continue

        resolver = TOKEN_RESOLVERS.get(token)
        if resolver is not None:
            resolved[token] = resolver(fm, slug)
            continue

        raw = _from_frontmatter(fm.get(token))
        resolved[token] = raw if raw is not None else ""

    return resolved
