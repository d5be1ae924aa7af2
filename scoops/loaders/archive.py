"""Buckets packed in zip archives, local or downloaded."""

import re
import zipfile
import zlib

from scoops.cache import CacheStore
from scoops.errors import SourceUnavailable
from scoops.loaders.base import BaseLoader
from scoops.manifest import ManifestParser
from scoops.models import BucketCollection, PackageRecord

# <name>.json at the archive root or directly inside a bucket/ directory at any depth
MANIFEST_ENTRY_RE = re.compile(r"(^|(?:^|[/\\])bucket[/\\])([^/\\]*)\.json$")


class ZipLoader(BaseLoader):
    """Load manifests from a zip archive such as a GitHub zipball."""

    kind = "zip"

    def __init__(self, parser: ManifestParser, cache: CacheStore):
        super().__init__(parser)
        self.cache = cache

    def load(self, path: str) -> BucketCollection:
        return {path: self.load_records(path)}

    def load_url(self, url: str) -> BucketCollection:
        """Download (or reuse a cached copy of) an archive and load it."""
        archive_path = self.cache.fetch(self.cache.cache_path(url, ".zip"), url)
        return {url: self.load_records(str(archive_path))}

    def load_records(self, archive_path: str) -> list[PackageRecord]:
        records = []
        try:
            with zipfile.ZipFile(archive_path) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    match = MANIFEST_ENTRY_RE.search(info.filename)
                    if not match:
                        continue

                    raw = archive.read(info)
                    record = self.parser.parse(f"{archive_path}:{info.filename}", raw)
                    if record is not None:
                        record.name = match.group(2)
                        records.append(record)
        except (
            zipfile.BadZipFile,
            zlib.error,
            RuntimeError,  # encrypted entry
            NotImplementedError,  # unsupported compression method
            OSError,
        ) as e:
            raise SourceUnavailable(f"Unable to read archive {archive_path}: {e}") from e
        return records
