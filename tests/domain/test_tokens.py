"""Tests for layered token resolution."""

from __future__ import annotations

from datetime import UTC, date, datetime

from writenex.domain.tokens import get_supported_tokens, resolve_date, resolve_pattern_tokens


class TestResolveDate:
    def test_date_object(self) -> None:
        assert resolve_date({"pubDate": date(2024, 6, 5)}) == date(2024, 6, 5)

    def test_datetime_object(self) -> None:
        assert resolve_date({"date": datetime(2024, 6, 5, 23, 0)}) == date(2024, 6, 5)

    def test_iso_string_with_z(self) -> None:
        assert resolve_date({"pubDate": "2024-06-05T10:00:00Z"}) == date(2024, 6, 5)

    def test_field_order(self) -> None:
        fm = {"created": "2020-01-01", "publishDate": "2021-02-02"}
        assert resolve_date(fm) == date(2021, 2, 2)

    def test_unparseable_falls_through(self) -> None:
        fm = {"pubDate": "soon", "date": "2022-03-04"}
        assert resolve_date(fm) == date(2022, 3, 4)

    def test_defaults_to_today(self) -> None:
        assert resolve_date({}) == datetime.now(UTC).date()


class TestResolvePatternTokens:
    def test_year_month_from_pub_date(self) -> None:
        tokens = resolve_pattern_tokens(
            "{year}/{month}/{slug}.md", "hi", {"pubDate": date(2024, 6, 5)}
        )
        assert tokens == {"year": "2024", "month": "06", "slug": "hi"}

    def test_date_and_day(self) -> None:
        tokens = resolve_pattern_tokens("{date}-{day}-{slug}.md", "x", {"date": "2024-01-09"})
        assert tokens["date"] == "2024-01-09"
        assert tokens["day"] == "09"

    def test_custom_tokens_win(self) -> None:
        tokens = resolve_pattern_tokens(
            "{lang}/{slug}.md", "x", {"lang": "fr"}, custom_tokens={"lang": "de"}
        )
        assert tokens["lang"] == "de"

    def test_builtin_defaults(self) -> None:
        tokens = resolve_pattern_tokens(
            "{lang}/{category}/{author}/{type}/{status}/{slug}.md", "x", {}
        )
        assert tokens == {
            "lang": "en",
            "category": "uncategorized",
            "author": "anonymous",
            "type": "post",
            "status": "published",
            "slug": "x",
        }

    def test_builtins_read_frontmatter(self) -> None:
        fm = {
            "language": "es",
            "categories": ["guides", "misc"],
            "author": {"name": "Ana María"},
            "contentType": "note",
            "draft": True,
            "series": "Getting Started",
        }
        tokens = resolve_pattern_tokens(
            "{lang}/{category}/{author}/{type}/{status}/{series}/{slug}.md", "x", fm
        )
        assert tokens["lang"] == "es"
        assert tokens["category"] == "guides"
        assert tokens["author"] == "ana-maria"
        assert tokens["type"] == "note"
        assert tokens["status"] == "draft"
        assert tokens["series"] == "getting-started"

    def test_frontmatter_fallback(self) -> None:
        fm = {"region": "North America", "volume": 3.0, "flag": True}
        tokens = resolve_pattern_tokens("{region}/{volume}/{flag}/{missing}/{slug}.md", "x", fm)
        assert tokens["region"] == "north-america"
        assert tokens["volume"] == "3"
        assert tokens["flag"] == ""
        assert tokens["missing"] == ""

    def test_no_frontmatter(self) -> None:
        assert resolve_pattern_tokens("{slug}.md", "x") == {"slug": "x"}

    def test_supported_tokens(self) -> None:
        supported = get_supported_tokens()
        assert {"slug", "date", "year", "month", "day", "lang", "category"} <= set(supported)
