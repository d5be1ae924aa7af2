"""Rename bucket paths and URLs to short, known bucket names."""

import os
from typing import Optional

from scoops.config import ScoopConfig
from scoops.errors import warn
from scoops.loaders.redirect import read_name_sources
from scoops.models import BucketCollection

KNOWN_PREFIX = "/"


class BucketNamer:
    """Uses scoop's buckets.json to give known sources their bucket names.

    Local buckets under the scoop buckets folder are shortened to their
    folder name. Anything else keeps its path or URL.
    """

    def __init__(
        self,
        config: ScoopConfig,
        known: Optional[dict[str, str]] = None,
        errors: Optional[list[str]] = None,
    ):
        self.config = config
        self.errors: list[str] = [] if errors is None else errors
        self._known = known
        self._by_source: Optional[dict[str, str]] = None

    def known_names(self) -> dict[str, str]:
        """Known bucket name -> source mapping, read once from the registry."""
        if self._known is None:
            try:
                self._known = read_name_sources(self.config.registry_file)
            except FileNotFoundError:
                self._known = {}
            except (OSError, ValueError) as e:
                warn(self.errors, f"Unable to read known buckets {self.config.registry_file}: {e}")
                self._known = {}
        return self._known

    def name_for(self, source: str, prefix: str = KNOWN_PREFIX) -> str:
        if self._by_source is None:
            self._by_source = {url: name for name, url in self.known_names().items()}

        if source in self._by_source:
            return prefix + self._by_source[source]

        buckets_root = str(self.config.buckets_dir) + os.sep
        if source.startswith(buckets_root):
            return prefix + source[len(buckets_root):]
        return source

    def rename(self, buckets: BucketCollection, prefix: str = KNOWN_PREFIX) -> BucketCollection:
        """Re-key a collection by display name, moving the record lists."""
        return {self.name_for(source, prefix): records for source, records in buckets.items()}
