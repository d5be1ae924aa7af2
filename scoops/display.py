"""Search result output."""

from pathlib import Path
from typing import Optional

from tabulate import tabulate

from scoops.models import BucketCollection

INSTALLED_MARKER = "**"
GLOBAL_MARKER = "G*"

DESCRIPTION_SEPARATOR = ": "


def installed_apps(apps_dir: Path) -> set[str]:
    """Names of apps installed under a scoop apps folder."""
    try:
        return {entry.name for entry in apps_dir.iterdir()}
    except OSError:
        return set()


def _truncate(text: str, width: int) -> str:
    if width <= 0:
        return ""
    return text[:width]


def format_results(
    buckets: BucketCollection,
    linelen: int = 120,
    installed: frozenset[str] = frozenset(),
    installed_global: frozenset[str] = frozenset(),
) -> str:
    """Render buckets sorted by name, one table per bucket."""
    blocks = []
    for bucket in sorted(buckets):
        records = buckets[bucket]
        if not records:
            continue

        rows = []
        for record in records:
            marker = ""
            if record.name in installed:
                marker = INSTALLED_MARKER
            elif record.name in installed_global:
                marker = GLOBAL_MARKER
            binary = f"[{record.binaries[0]}]" if record.binaries else ""
            rows.append([marker, record.name, f"({record.version})", binary])

        table = [
            line.rstrip()
            for line in tabulate(rows, tablefmt="plain", disable_numparse=True).splitlines()
        ]

        # whatever the first columns leave of the line goes to the description
        width = max(len(line) for line in table)
        remainder = linelen - width - len(DESCRIPTION_SEPARATOR)
        lines = []
        for line, record in zip(table, records):
            description = _truncate(record.description, remainder)
            if description:
                line = line.ljust(width) + DESCRIPTION_SEPARATOR + description
            lines.append(line)

        blocks.append(f"'{bucket}' bucket:\n" + "\n".join(lines) + "\n")

    if not blocks:
        return "No matches found.\n"
    return "\n".join(blocks)


def print_results(
    buckets: BucketCollection,
    linelen: int = 120,
    apps_dir: Optional[Path] = None,
    global_apps_dir: Optional[Path] = None,
) -> None:
    installed = frozenset(installed_apps(apps_dir)) if apps_dir else frozenset()
    installed_global = (
        frozenset(installed_apps(global_apps_dir)) if global_apps_dir else frozenset()
    )
    print(format_results(buckets, linelen, installed, installed_global))
