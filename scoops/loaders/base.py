"""Base loader class."""

from abc import ABC, abstractmethod

from scoops.errors import warn
from scoops.manifest import ManifestParser
from scoops.models import BucketCollection


def is_remote(path: str) -> bool:
    """Whether a source path is a URL rather than a local file."""
    return "://" in path


class BaseLoader(ABC):
    """Abstract base class for bucket loaders."""

    kind: str = "unknown"

    def __init__(self, parser: ManifestParser):
        self.parser = parser
        self.errors = parser.errors

    @abstractmethod
    def load(self, path: str) -> BucketCollection:
        """Load buckets from this kind of source.

        Args:
            path: Local path or URL of the source.

        Returns:
            Mapping of bucket identity to its records.

        Raises:
            SourceUnavailable: If the source cannot be read at all.
        """

    def warn(self, message: str) -> None:
        warn(self.errors, f"[{self.kind}] {message}")
