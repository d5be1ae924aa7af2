"""Scoop app manifest parsing.

See https://github.com/ScoopInstaller/scoop/wiki/App-Manifests. The package
name is not part of a manifest; loaders assign it from the file name.
"""

import json
from dataclasses import dataclass
from typing import Optional

from scoops.errors import warn
from scoops.models import PackageRecord

MANIFEST_SUFFIX = ".json"

BAD_BIN = 'bad "bin"'


@dataclass
class ManifestResult:
    """Outcome of reading one manifest document."""

    label: str
    record: Optional[PackageRecord] = None
    # malformed document, record dropped
    error: Optional[str] = None
    # unexpected shape in a non-essential field, record kept
    anomaly: Optional[str] = None


def manifest_name(filename: str) -> str:
    """Package name for a manifest file name."""
    if filename.endswith(MANIFEST_SUFFIX):
        return filename[: -len(MANIFEST_SUFFIX)]
    return filename


def _string(document: dict, key: str) -> str:
    value = document.get(key)
    return value if isinstance(value, str) else ""


def _read_bins(value) -> tuple[list[str], bool]:
    """Extract binaries from a ``bin`` field.

    ``bin`` may be missing, a string, or a list of strings and
    ``[executable, alias, *flags]`` lists. Flags are ignored.

    Returns:
        Tuple of (binaries, shape_ok).
    """
    if value is None:
        return [], True
    if isinstance(value, str):
        return [value], True
    if not isinstance(value, list):
        return [], False

    bins = []
    shape_ok = True
    for item in value:
        if isinstance(item, str):
            bins.append(item)
        elif isinstance(item, list):
            # executable and alias only
            for part in item[:2]:
                if isinstance(part, str):
                    bins.append(part)
                else:
                    shape_ok = False
        else:
            shape_ok = False
    return bins, shape_ok


def read_manifest(label: str, raw: bytes) -> ManifestResult:
    """Parse one manifest document without reporting anything.

    Args:
        label: Where the document came from, used in messages.
        raw: Undecoded document body.

    Returns:
        A ManifestResult holding either a record or an error.
    """
    try:
        document = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, ValueError) as e:
        return ManifestResult(label=label, error=str(e))

    if not isinstance(document, dict):
        return ManifestResult(label=label, error="manifest is not a JSON object")

    bins, shape_ok = _read_bins(document.get("bin"))
    record = PackageRecord(
        version=_string(document, "version"),
        description=_string(document, "description"),
        homepage=_string(document, "homepage"),
        binaries=bins,
    )
    return ManifestResult(label=label, record=record, anomaly=None if shape_ok else BAD_BIN)


class ManifestParser:
    """Parses manifests and reports broken ones without stopping."""

    def __init__(self, errors: Optional[list[str]] = None):
        self.errors: list[str] = [] if errors is None else errors

    def parse(self, label: str, raw: bytes) -> Optional[PackageRecord]:
        """Parse a manifest, returning None if it is unusable."""
        result = read_manifest(label, raw)
        if result.error is not None:
            warn(self.errors, f"Skipped BROKEN manifest: {label} ({result.error})")
            return None
        if result.anomaly is not None:
            warn(self.errors, f"Including BROKEN manifest ({result.anomaly}): {label}")
        return result.record
