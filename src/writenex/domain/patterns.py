"""Naming-pattern catalog and detection scoring.

A collection's naming convention is one of a fixed catalog of templates
such as ``{slug}.md``, ``{date}-{slug}.md`` or ``{year}/{month}/{slug}.md``.
Each :class:`PatternTemplate` owns a regex with named groups (one per
token), so extraction is ``match.groupdict()`` and never needs a per-entry
closure.

Detection is a fold over relative file paths:

1. Match every path against every template (a path may match several).
2. Score each template: ``match_ratio * 100 + priority``.
3. Keep the strictly highest score; catalog order breaks exact ties.

The ratio term dominates, so a template matching nearly every file beats a
narrower, higher-priority one. Priority decides near-ties in favour of the
richer structure (``{slug}/index.md`` over ``{category}/{slug}.md``).

Pure: no filesystem access here. Directory scanning lives in
:mod:`writenex.infrastructure.discovery`.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import BaseModel, Field

CONTENT_EXTENSIONS: tuple[str, ...] = (".md", ".mdx")

DEFAULT_PATTERN = "{slug}.md"

MAX_SAMPLES = 3

_TOKEN_RE = re.compile(r"\{([^}]+)\}")
_UNCLOSED_TOKEN_RE = re.compile(r"\{[^}]*$")

_EXT = r"\.(?P<ext>md|mdx)$"
_LANG = r"(?P<lang>[a-z]{2}(?:-[A-Z]{2})?)"


@dataclass(frozen=True)
class PatternTemplate:
    """One catalog entry: a template string plus its matcher."""

    name: str
    template: str
    regex: re.Pattern[str]
    priority: int

    def match(self, relative_path: str) -> re.Match[str] | None:
        return self.regex.match(relative_path)

    def extract(self, match: re.Match[str], extension: str) -> dict[str, str]:
        """Token values captured by *match*, plus the file extension."""
        tokens = {k: v for k, v in match.groupdict().items() if k != "ext"}
        tokens["extension"] = extension
        return tokens


# Order is the documented secondary tie-break; scoring decides everything else.
PATTERN_CATALOG: tuple[PatternTemplate, ...] = (
    PatternTemplate(
        name="year-month-day-slug",
        template="{year}/{month}/{day}/{slug}.md",
        regex=re.compile(
            r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})/(?P<slug>[^/]+)" + _EXT
        ),
        priority=95,
    ),
    PatternTemplate(
        name="year-month-slug",
        template="{year}/{month}/{slug}.md",
        regex=re.compile(r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<slug>[^/]+)" + _EXT),
        priority=90,
    ),
    PatternTemplate(
        name="year-slug",
        template="{year}/{slug}.md",
        regex=re.compile(r"^(?P<year>\d{4})/(?P<slug>[^/]+)" + _EXT),
        priority=85,
    ),
    PatternTemplate(
        name="lang-folder-index",
        template="{lang}/{slug}/index.md",
        regex=re.compile(r"^" + _LANG + r"/(?P<slug>[^/]+)/index" + _EXT),
        priority=82,
    ),
    PatternTemplate(
        name="category-folder-index",
        template="{category}/{slug}/index.md",
        regex=re.compile(r"^(?P<category>[^/]+)/(?P<slug>[^/]+)/index" + _EXT),
        priority=80,
    ),
    PatternTemplate(
        name="folder-index",
        template="{slug}/index.md",
        regex=re.compile(r"^(?P<slug>[^/]+)/index" + _EXT),
        priority=75,
    ),
    PatternTemplate(
        name="date-slug",
        template="{date}-{slug}.md",
        regex=re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>[^/]+)" + _EXT),
        priority=70,
    ),
    PatternTemplate(
        name="lang-slug",
        template="{lang}/{slug}.md",
        regex=re.compile(r"^" + _LANG + r"/(?P<slug>[^/]+)" + _EXT),
        priority=60,
    ),
    PatternTemplate(
        name="category-slug",
        template="{category}/{slug}.md",
        regex=re.compile(r"^(?P<category>[^/]+)/(?P<slug>[^/]+)" + _EXT),
        priority=50,
    ),
    PatternTemplate(
        name="simple-slug",
        template="{slug}.md",
        regex=re.compile(r"^(?P<slug>[^/]+)" + _EXT),
        priority=10,
    ),
)


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------


class PatternSample(BaseModel):
    """A matched file and the tokens extracted from it."""

    model_config = {"frozen": True}

    file_path: str
    extracted: dict[str, str] = Field(default_factory=dict)


class DetectionResult(BaseModel):
    """Outcome of scanning a collection for its naming convention."""

    model_config = {"frozen": True}

    pattern: str
    confidence: float = 0.0
    match_count: int = 0
    total_files: int = 0
    samples: list[PatternSample] = Field(default_factory=list)


@dataclass
class _Tally:
    template: PatternTemplate
    count: int = 0
    samples: list[PatternSample] = field(default_factory=list)
    extensions: Counter[str] = field(default_factory=Counter)


# ---------------------------------------------------------------------------
# Matching and scoring
# ---------------------------------------------------------------------------


def is_content_file(filename: str) -> bool:
    """True for ``.md`` / ``.mdx`` files (case-insensitive)."""
    return filename.lower().endswith(CONTENT_EXTENSIONS)


def _extension_of(relative_path: str) -> str:
    dot = relative_path.rfind(".")
    return relative_path[dot:].lower() if dot != -1 else ""


def normalize_relative_path(relative_path: str) -> str:
    """Use forward slashes regardless of the host path separator."""
    return relative_path.replace("\\", "/")


def match_path(relative_path: str) -> list[tuple[PatternTemplate, dict[str, str]]]:
    """Every catalog template matching *relative_path*, in catalog order."""
    path = normalize_relative_path(relative_path)
    ext = _extension_of(path)
    matches: list[tuple[PatternTemplate, dict[str, str]]] = []
    for template in PATTERN_CATALOG:
        m = template.match(path)
        if m is not None:
            matches.append((template, template.extract(m, ext)))
    return matches


def _with_extension(template: str, extensions: Counter[str]) -> str:
    """Swap the template's ``.md`` suffix for the dominant observed extension."""
    if not extensions:
        return template
    top = max(extensions.values())
    ext = ".md" if extensions[".md"] == top else extensions.most_common(1)[0][0]
    if ext == ".md":
        return template
    return template.removesuffix(".md") + ext


def score_paths(relative_paths: Iterable[str]) -> DetectionResult:
    """Pick the catalog template that best explains *relative_paths*.

    Returns the flat ``{slug}.md`` template with zero confidence when there
    are no paths, or when no template matches any of them.
    """
    paths = [normalize_relative_path(p) for p in relative_paths]
    total = len(paths)
    if total == 0:
        return DetectionResult(pattern=DEFAULT_PATTERN)

    tallies = [_Tally(template=t) for t in PATTERN_CATALOG]
    for path in paths:
        ext = _extension_of(path)
        for tally in tallies:
            m = tally.template.match(path)
            if m is None:
                continue
            tally.count += 1
            tally.extensions[ext] += 1
            if len(tally.samples) < MAX_SAMPLES:
                tally.samples.append(
                    PatternSample(file_path=path, extracted=tally.template.extract(m, ext))
                )

    best: _Tally | None = None
    best_score = -1.0
    for tally in tallies:
        if tally.count == 0:
            continue
        score = (tally.count / total) * 100 + tally.template.priority
        if score > best_score:
            best, best_score = tally, score

    if best is None:
        return DetectionResult(pattern=DEFAULT_PATTERN, total_files=total)

    return DetectionResult(
        pattern=_with_extension(best.template.template, best.extensions),
        confidence=best.count / total,
        match_count=best.count,
        total_files=total,
        samples=best.samples,
    )


# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------


def parse_pattern_tokens(pattern: str) -> list[str]:
    """Token names in order of appearance.

    >>> parse_pattern_tokens("{year}/{month}/{slug}.md")
    ['year', 'month', 'slug']
    """
    return _TOKEN_RE.findall(pattern)


def generate_path_from_pattern(pattern: str, tokens: dict[str, str]) -> str:
    """Substitute *tokens* into *pattern*; unknown placeholders are left as-is.

    >>> generate_path_from_pattern("{date}-{slug}.md", {"date": "2024-01-15", "slug": "hi"})
    '2024-01-15-hi.md'
    """
    result = pattern
    for key, value in tokens.items():
        result = result.replace(f"{{{key}}}", value)
    return result


def validate_pattern(pattern: str, required: Iterable[str] = ("slug",)) -> bool:
    """True when every *required* token appears in *pattern*."""
    tokens = set(parse_pattern_tokens(pattern))
    return all(req in tokens for req in required)


def is_valid_pattern(pattern: str) -> tuple[bool, str | None]:
    """Check that *pattern* can be used to create content.

    Returns ``(True, None)`` or ``(False, reason)``.
    """
    if "{slug}" not in pattern:
        return False, "Pattern must contain {slug} token"
    if not pattern.endswith(CONTENT_EXTENSIONS):
        return False, "Pattern must end with .md or .mdx"
    if _UNCLOSED_TOKEN_RE.search(pattern):
        return False, "Pattern contains unclosed token"
    return True, None


def get_pattern_extension(pattern: str) -> str:
    return ".mdx" if pattern.endswith(".mdx") else ".md"


def is_folder_pattern(pattern: str) -> bool:
    """True for ``.../{slug}/index.md``-style templates."""
    return "/index." in pattern
