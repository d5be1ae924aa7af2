"""buckets.json style documents mapping bucket names to source URLs."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Union

from scoops.errors import SourceUnavailable
from scoops.loaders.base import BaseLoader
from scoops.manifest import ManifestParser
from scoops.models import BucketCollection, SourceDescriptor, SourceKind

REDIRECT_SUFFIX = ".json"


def read_name_sources(path: Union[str, Path]) -> dict[str, str]:
    """Load a flat ``{"name": "url"}`` document.

    Entries whose value is not a string are ignored.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    with open(path, encoding="utf-8-sig") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError(f"{path} is not a JSON object")
    return {name: url for name, url in document.items() if isinstance(url, str)}


class RedirectLoader(BaseLoader):
    """Load every bucket referenced by a name -> URL document."""

    kind = "redirect"

    def __init__(
        self,
        parser: ManifestParser,
        resolve: Callable[[SourceDescriptor], BucketCollection],
    ):
        super().__init__(parser)
        self.resolve = resolve

    def load(self, path: str) -> BucketCollection:
        try:
            name_sources = read_name_sources(path)
        except (OSError, ValueError) as e:
            raise SourceUnavailable(f"Unable to read bucket list {path}: {e}") from e

        buckets: BucketCollection = {}
        for name, url in name_sources.items():
            try:
                buckets.update(self.resolve(SourceDescriptor(kind=SourceKind.BUCKET, path=url)))
            except SourceUnavailable as e:
                self.warn(f"Skipping bucket '{name}': {e}")
        return buckets
