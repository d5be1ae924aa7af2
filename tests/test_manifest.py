"""Tests for manifest parsing."""

from __future__ import annotations

import json

from scoops.manifest import BAD_BIN, ManifestParser, manifest_name, read_manifest


def _raw(document) -> bytes:
    return json.dumps(document).encode("utf-8")


class TestReadManifest:
    """Test read_manifest function."""

    def test_plain_fields(self) -> None:
        """Should extract version, description and homepage."""
        result = read_manifest(
            "foo.json",
            _raw({"version": "1.0", "description": "A tool", "homepage": "https://x.io"}),
        )

        assert result.error is None
        assert result.anomaly is None
        assert result.record.version == "1.0"
        assert result.record.description == "A tool"
        assert result.record.homepage == "https://x.io"
        assert result.record.binaries == []

    def test_missing_fields_are_empty(self) -> None:
        """Missing fields become empty strings."""
        result = read_manifest("foo.json", b"{}")

        assert result.record.version == ""
        assert result.record.description == ""
        assert result.record.homepage == ""

    def test_name_not_read_from_content(self) -> None:
        """The record name is left for the loader to assign."""
        result = read_manifest("foo.json", _raw({"name": "other", "version": "1"}))

        assert result.record.name == ""

    def test_single_string_bin(self) -> None:
        """A string bin is a single binary."""
        result = read_manifest("foo.json", _raw({"bin": "foo.exe"}))

        assert result.record.binaries == ["foo.exe"]

    def test_bin_list_with_aliases_and_flags(self) -> None:
        """Nested lists keep only the executable and its alias."""
        result = read_manifest(
            "foo.json",
            _raw({"bin": ["a.exe", ["b.exe", "bee", "--flag", "--other"], ["c.exe"]]}),
        )

        assert result.anomaly is None
        assert result.record.binaries == ["a.exe", "b.exe", "bee", "c.exe"]

    def test_bad_bin_shape_kept_with_anomaly(self) -> None:
        """An object bin is reported as an anomaly but the record is kept."""
        result = read_manifest("foo.json", _raw({"version": "2", "bin": {"x": 1}}))

        assert result.anomaly == BAD_BIN
        assert result.record is not None
        assert result.record.version == "2"
        assert result.record.binaries == []

    def test_bad_bin_element_keeps_other_elements(self) -> None:
        """Unexpected list elements are skipped, the rest is kept."""
        result = read_manifest("foo.json", _raw({"bin": ["a.exe", 42, "b.exe"]}))

        assert result.anomaly == BAD_BIN
        assert result.record.binaries == ["a.exe", "b.exe"]

    def test_malformed_document(self) -> None:
        """Broken JSON yields an error and no record."""
        result = read_manifest("foo.json", b'{"version": "1.0",')

        assert result.record is None
        assert result.error

    def test_non_object_document(self) -> None:
        """A JSON array is not a manifest."""
        result = read_manifest("foo.json", b"[1, 2]")

        assert result.record is None
        assert result.error

    def test_byte_order_mark(self) -> None:
        """Manifests saved with a BOM still parse."""
        result = read_manifest("foo.json", b"\xef\xbb\xbf" + _raw({"version": "3"}))

        assert result.record.version == "3"


class TestManifestParser:
    """Test ManifestParser reporting."""

    def test_broken_manifest_skipped_with_warning(self) -> None:
        """Malformed documents are dropped and reported."""
        errors: list[str] = []
        parser = ManifestParser(errors)

        assert parser.parse("bucket/broken.json", b"not json") is None
        assert len(errors) == 1
        assert "Skipped BROKEN manifest: bucket/broken.json" in errors[0]

    def test_anomaly_included_with_warning(self) -> None:
        """Anomalous documents are kept and reported."""
        errors: list[str] = []
        parser = ManifestParser(errors)

        record = parser.parse("bucket/odd.json", _raw({"version": "1", "bin": 7}))

        assert record is not None
        assert record.version == "1"
        assert errors == ['Including BROKEN manifest (bad "bin"): bucket/odd.json']

    def test_good_manifest_no_warning(self) -> None:
        """Clean documents produce no warnings."""
        parser = ManifestParser()

        assert parser.parse("ok.json", _raw({"version": "1"})) is not None
        assert parser.errors == []


def test_manifest_name_strips_extension() -> None:
    assert manifest_name("7zip.json") == "7zip"
    assert manifest_name("README") == "README"
