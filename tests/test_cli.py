"""Tests for the command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest

from scoops.cli import POSH_HOOK, build_parser, main


@pytest.fixture
def scoop_env(tmp_path: Path, monkeypatch) -> Path:
    """Point scoop's directories into a temporary home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("SCOOP", str(home / "scoop"))
    monkeypatch.setenv("SCOOP_GLOBAL", str(home / "global"))
    monkeypatch.delenv("SCOOP_CACHE", raising=False)
    return home


@pytest.fixture
def local_bucket(tmp_path: Path, write_manifest) -> Path:
    bucket = tmp_path / "local"
    write_manifest(bucket, "foo", {"version": "1.0", "bin": "foo.exe"})
    write_manifest(bucket, "bar", {"version": "2.0", "description": "bar tool"})
    return bucket


def _result_lines(output: str) -> list[str]:
    merged = output.split("MERGED RESULTS:", 1)[-1]
    return [line.strip() for line in merged.splitlines() if line.strip()]


class TestMain:
    """Tests for main()."""

    def test_directory_bucket_name_match(self, scoop_env, local_bucket, capsys) -> None:
        """A name match reports the record without its binaries."""
        exit_code = main(["--source", str(local_bucket), "--fields", "name,bins", "foo"])

        lines = _result_lines(capsys.readouterr().out)
        assert exit_code == 0
        assert f"'{local_bucket}' bucket:" in lines
        record_lines = [line for line in lines if line.startswith("foo")]
        assert len(record_lines) == 1
        assert "(1.0)" in record_lines[0]
        assert "[foo.exe]" not in record_lines[0]
        assert not any(line.startswith("bar") for line in lines)

    def test_no_matches_exit_status(self, scoop_env, local_bucket, capsys) -> None:
        exit_code = main(["--source", str(local_bucket), "zzz"])

        assert exit_code == 1
        assert "No matches found." in capsys.readouterr().out

    def test_fallback_source_skipped(self, scoop_env, local_bucket, tmp_path, capsys) -> None:
        """An if0 source is not searched after a match."""
        missing = tmp_path / "missing-bucket"

        exit_code = main(["--source", str(local_bucket), "--source", f"if0: {missing}", "foo"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "#2 Searching" not in output
        assert "from 1 sources" in output

    def test_no_merge_prints_per_source(self, scoop_env, local_bucket, capsys) -> None:
        exit_code = main(["--no-merge", "--source", str(local_bucket), "bar"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert "MERGED RESULTS" not in output
        assert "bar" in output

    def test_hook(self, capsys) -> None:
        assert main(["--hook"]) == 0
        assert POSH_HOOK in capsys.readouterr().out

    def test_empty_term_lists_everything(self, scoop_env, local_bucket, capsys) -> None:
        """An explicit empty term matches every app instead of printing usage."""
        exit_code = main(["--source", str(local_bucket), ""])

        lines = _result_lines(capsys.readouterr().out)
        assert exit_code == 0
        assert any(line.startswith("foo") for line in lines)
        assert any(line.startswith("bar") and line.endswith(": bar tool") for line in lines)

    def test_missing_term_prints_usage(self, capsys) -> None:
        assert main([]) == 2
        assert "usage:" in capsys.readouterr().out

    def test_invalid_pattern(self, scoop_env, local_bucket, capsys) -> None:
        assert main(["--source", str(local_bucket), "foo("]) == 2
        assert "Failed to parse search term" in capsys.readouterr().err

    def test_bad_source(self, scoop_env) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--source", "[zip] x.zip", "foo"])
        assert exc.value.code == 2

    def test_unknown_field(self, scoop_env) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--fields", "name,size", "foo"])
        assert exc.value.code == 2


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["term"])

    assert args.fields == "name,bins"
    assert args.cache == 1.0
    assert args.linelen == 120
    assert args.merge is True
    assert args.sources is None
