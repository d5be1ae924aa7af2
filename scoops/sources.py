"""Textual source descriptors, as given with ``--source``."""

import os
import re

from scoops.errors import SourceFormatError
from scoops.loaders.base import is_remote
from scoops.models import SourceCondition, SourceDescriptor, SourceKind

SOURCE_KINDS = "|".join(kind.value for kind in SourceKind)

SOURCE_FORMAT_RE = re.compile(
    r"^(?:(?P<cond>" + SourceCondition.IF_ZERO.value + r"): )?"
    r"(?:\[(?P<kind>[^\]]*)\] )?"
    r"(?P<path>.*)$"
)

SOURCE_PATTERN_HUMAN = f'"<if0:> [<{SOURCE_KINDS}>] <:active|:rasa or path/url>"'


def _format_error(value: str, reason: str) -> SourceFormatError:
    return SourceFormatError(
        f"Given source does not match the required pattern ({reason}):\n"
        f"PATTERN: {SOURCE_PATTERN_HUMAN}\n"
        f"GIVEN:   {value}"
    )


def parse_source(value: str, aliases: dict[str, SourceDescriptor]) -> SourceDescriptor:
    """Parse ``[if0: ][[kind] ]<path or :alias>``.

    An alias supplies kind and path; a condition given alongside it is kept.
    A leading ``~`` in a local path is expanded to the home directory.

    Raises:
        SourceFormatError: For an unknown kind or alias, or an empty path.
    """
    match = SOURCE_FORMAT_RE.match(value)
    if match is None:
        raise _format_error(value, "unparseable")

    condition = SourceCondition(match.group("cond") or "")
    kind_text = match.group("kind")
    path = match.group("path").strip()

    kind = None
    if kind_text is not None:
        try:
            kind = SourceKind(kind_text)
        except ValueError:
            raise _format_error(value, f"unknown kind [{kind_text}]") from None

    if not path:
        raise _format_error(value, "missing path")

    if path.startswith(":"):
        alias = aliases.get(path[1:])
        if alias is None:
            raise _format_error(value, f"unknown alias {path}")
        return SourceDescriptor(condition=condition, kind=alias.kind, path=alias.path)

    if not is_remote(path):
        path = os.path.expanduser(path)
    return SourceDescriptor(condition=condition, kind=kind, path=path)
