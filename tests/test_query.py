"""Tests for query compilation, filtering and sorting."""

from __future__ import annotations

import pytest

from scoops.errors import InvalidPattern
from scoops.models import PackageRecord
from scoops.query import (
    SearchQuery,
    binary_stem,
    filter_buckets,
    filter_record,
    filter_records,
    sort_key,
)


def _record(name: str, binaries: list[str] | None = None, description: str = "") -> PackageRecord:
    return PackageRecord(name=name, binaries=binaries or [], description=description)


class TestSearchQuery:
    """Test SearchQuery.compile."""

    def test_case_insensitive_by_default(self) -> None:
        """Terms match regardless of case."""
        query = SearchQuery.compile("FOO")

        assert query.pattern.search("foobar")

    def test_case_sensitive_prefix(self) -> None:
        """A leading (?-i) turns case sensitivity back on."""
        query = SearchQuery.compile("(?-i)FOO")

        assert not query.pattern.search("foobar")
        assert query.pattern.search("FOObar")

    def test_default_fields(self) -> None:
        """Name and bins are searched by default."""
        assert SearchQuery.compile("x").fields == ["name", "bins"]

    def test_invalid_pattern(self) -> None:
        """Unbalanced expressions are rejected."""
        with pytest.raises(InvalidPattern):
            SearchQuery.compile("foo(")

    def test_unknown_field(self) -> None:
        """Unknown fields are rejected."""
        with pytest.raises(ValueError, match="homepage"):
            SearchQuery.compile("x", ["name", "homepage"])


class TestFilterRecord:
    """Test filter_record side effects."""

    def test_name_match_clears_binaries(self) -> None:
        """Binaries are dropped once the name matched."""
        record = _record("foo", ["foo.exe", "bar.exe"])

        assert filter_record(record, SearchQuery.compile("foo", ["name", "bins"]))
        assert record.binaries == []

    def test_bins_match_keeps_matching_only(self) -> None:
        """Only binaries whose stem matches survive."""
        record = _record("suite", ["tools\\qrcode.exe", "other.exe", "bin/qr.cmd"])

        assert filter_record(record, SearchQuery.compile("qr", ["bins"]))
        assert record.binaries == ["qrcode.exe", "qr.cmd"]

    def test_bins_extension_not_matched(self) -> None:
        """The extension is not part of the matched text."""
        record = _record("suite", ["tool.exe"])

        assert not filter_record(record, SearchQuery.compile("exe", ["bins"]))
        assert record.binaries == []

    def test_description_match_leaves_record(self) -> None:
        """Description matches do not touch binaries."""
        record = _record("x", ["x.exe"], description="QR code generator")

        assert filter_record(record, SearchQuery.compile("qr", ["description"]))
        assert record.binaries == ["x.exe"]

    def test_no_match(self) -> None:
        record = _record("alpha", ["beta.exe"], description="gamma")

        assert not filter_record(record, SearchQuery.compile("delta", ["name", "bins", "description"]))


class TestFilterRecords:
    """Test filter_records ordering and retention."""

    def test_name_field_property(self) -> None:
        """Every record retained by a name search has no binaries."""
        records = [_record("foo", ["a.exe"]), _record("foobar", ["foo.exe"]), _record("baz")]

        matches = filter_records(SearchQuery.compile("foo", ["name"]), records)

        assert [r.name for r in matches] == ["foo", "foobar"]
        assert all(r.binaries == [] for r in matches)

    def test_bins_field_property(self) -> None:
        """Every record retained by a bins search keeps only matching binaries."""
        query = SearchQuery.compile("git", ["bins"])
        records = [
            _record("a", ["git.exe", "gitk.exe", "sh.exe"]),
            _record("b", ["ls.exe"]),
            _record("c", ["bin\\lazygit.exe"]),
        ]

        matches = filter_records(query, records)

        assert [r.name for r in matches] == ["a", "c"]
        for record in matches:
            assert record.binaries
            assert all(query.pattern.search(binary_stem(b)) for b in record.binaries)

    def test_sort_ignores_case_and_hyphens_stably(self) -> None:
        """Foo-Bar and foobar compare equal and keep input order."""
        records = [_record("zeta"), _record("Foo-Bar"), _record("foobar"), _record("alpha")]

        matches = filter_records(SearchQuery.compile(""), records)

        assert [r.name for r in matches] == ["alpha", "Foo-Bar", "foobar", "zeta"]
        assert sort_key(records[1]) == sort_key(records[2])

    def test_sort_stable_reverse_input(self) -> None:
        records = [_record("foobar"), _record("Foo-Bar")]

        matches = filter_records(SearchQuery.compile(""), records)

        assert [r.name for r in matches] == ["foobar", "Foo-Bar"]


class TestFilterBuckets:
    """Test filter_buckets."""

    def test_drops_empty_buckets_and_counts(self) -> None:
        """Buckets without matches are removed and matches are counted."""
        buckets = {
            "main": [_record("git"), _record("gitui"), _record("curl")],
            "extras": [_record("vscode")],
        }

        match = filter_buckets(SearchQuery.compile("git", ["name"]), buckets)

        assert list(match.buckets) == ["main"]
        assert match.num_records == 2
        assert match.num_buckets_loaded == 2
