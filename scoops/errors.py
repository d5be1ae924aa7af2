"""Exceptions and warning reporting shared by the search engine."""

import sys


class ScoopsError(Exception):
    """Base class for all errors raised by scoops."""


class SourceUnavailable(ScoopsError):
    """A configured source could not be read at all."""


class FetchFailed(ScoopsError):
    """A download failed and no cached copy could stand in for it."""


class SourceFormatError(ScoopsError, ValueError):
    """A source descriptor did not match the source grammar."""


class InvalidPattern(ScoopsError):
    """The search term is not a valid regular expression."""


class HomeDirectoryError(ScoopsError):
    """The invoking user's home directory could not be determined."""


def warn(errors: list[str], message: str) -> None:
    """Record a non-fatal problem and echo it to stderr."""
    errors.append(message)
    print(f"Warning: {message}", file=sys.stderr)
