"""Shared fixtures for scoops tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from scoops.config import ScoopConfig


@pytest.fixture
def config(tmp_path: Path) -> ScoopConfig:
    """Configuration rooted in a temporary scoop directory."""
    home = tmp_path / "home"
    home.mkdir()
    return ScoopConfig.load(environ={}, home=home)


@pytest.fixture
def write_manifest():
    """Write a manifest document into a directory."""

    def _write(directory: Path, name: str, manifest: dict | str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{name}.json"
        body = manifest if isinstance(manifest, str) else json.dumps(manifest)
        path.write_text(body, encoding="utf-8")
        return path

    return _write
