"""Search query compilation, record filtering and ordering."""

import os
import re
from dataclasses import dataclass, field
from typing import Iterable

from scoops.errors import InvalidPattern
from scoops.models import BucketCollection, PackageRecord, SourceMatch

FIELDS = ("name", "bins", "description")
DEFAULT_FIELDS = ("name", "bins")

CASE_SENSITIVE_PREFIX = "(?-i)"


@dataclass
class SearchQuery:
    """A compiled search term and the manifest fields it is matched against."""

    pattern: re.Pattern
    fields: list[str] = field(default_factory=lambda: list(DEFAULT_FIELDS))

    @classmethod
    def compile(cls, term: str, fields: Iterable[str] = DEFAULT_FIELDS) -> "SearchQuery":
        """Build a query from a search term.

        The term is a regular expression matched case-insensitively unless it
        starts with ``(?-i)``.

        Raises:
            InvalidPattern: If the term is not a valid regular expression.
            ValueError: If an unknown field is named.
        """
        fields = [f.strip() for f in fields if f.strip()]
        unknown = [f for f in fields if f not in FIELDS]
        if unknown:
            raise ValueError(
                f"Unknown field(s): {', '.join(unknown)} (choose from {', '.join(FIELDS)})"
            )

        flags = re.IGNORECASE
        if term.startswith(CASE_SENSITIVE_PREFIX):
            term = term[len(CASE_SENSITIVE_PREFIX):]
            flags = 0

        try:
            pattern = re.compile(term, flags)
        except re.error as e:
            raise InvalidPattern(f"Failed to parse search term regexp {term!r}: {e}") from e
        return cls(pattern=pattern, fields=fields)


def binary_stem(path: str) -> str:
    """Base file name of a binary path without its extension."""
    base = re.split(r"[\\/]", path)[-1]
    return os.path.splitext(base)[0]


def filter_record(record: PackageRecord, query: SearchQuery) -> bool:
    """Whether a record matches, narrowing its binaries as a side effect.

    A name match clears the binaries (they add nothing once the name itself
    matched). A binaries match keeps only the matching binaries.
    """
    found = False
    for name in query.fields:
        if name == "name":
            if query.pattern.search(record.name):
                record.binaries = []
                found = True
        elif name == "bins":
            bins = []
            for binary in record.binaries:
                base = re.split(r"[\\/]", binary)[-1]
                if query.pattern.search(binary_stem(base)):
                    bins.append(base)
            record.binaries = bins
            if bins:
                found = True
        elif name == "description":
            if query.pattern.search(record.description):
                found = True
    return found


def sort_key(record: PackageRecord) -> str:
    """Case-insensitive name with hyphens ignored."""
    return record.name.replace("-", "").lower()


def filter_records(query: SearchQuery, records: list[PackageRecord]) -> list[PackageRecord]:
    """Matching records in stable name order."""
    return sorted((r for r in records if filter_record(r, query)), key=sort_key)


def filter_buckets(query: SearchQuery, buckets: BucketCollection) -> SourceMatch:
    """Filter every bucket, dropping buckets left without matches."""
    match = SourceMatch(num_buckets_loaded=len(buckets))
    for bucket, records in buckets.items():
        matches = filter_records(query, records)
        if matches:
            match.buckets[bucket] = matches
            match.num_records += len(matches)
    return match
