"""Buckets stored as plain directories of manifests."""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from scoops.errors import SourceUnavailable
from scoops.loaders.base import BaseLoader
from scoops.manifest import MANIFEST_SUFFIX, ManifestParser, manifest_name
from scoops.models import BucketCollection, PackageRecord


class DirectoryLoader(BaseLoader):
    """Load manifests from ``<path>/bucket`` or ``<path>`` itself."""

    kind = "directory"

    def __init__(self, parser: ManifestParser, max_workers: int = 8):
        super().__init__(parser)
        self.max_workers = max(1, max_workers)

    def load(self, path: str) -> BucketCollection:
        return {path: self.load_records(path)}

    def load_records(self, path: str) -> list[PackageRecord]:
        """Read every manifest of a single bucket directory."""
        manifest_dir = Path(path)
        if (manifest_dir / "bucket").is_dir():
            manifest_dir = manifest_dir / "bucket"

        try:
            entries = sorted(manifest_dir.iterdir())
        except OSError as e:
            raise SourceUnavailable(f"Bucket directory not readable: {manifest_dir}: {e}") from e

        records = []
        for entry in entries:
            if not entry.name.endswith(MANIFEST_SUFFIX) or not entry.is_file():
                continue

            try:
                raw = entry.read_bytes()
            except OSError as e:
                self.warn(f"Could not read manifest {entry}: {e}")
                continue

            record = self.parser.parse(str(entry), raw)
            if record is not None:
                record.name = manifest_name(entry.name)
                records.append(record)
        return records

    def load_set(self, root: str) -> BucketCollection:
        """Load every immediate subdirectory of ``root`` as its own bucket.

        Subdirectories are scanned in parallel; each worker returns its own
        (bucket, records) pair and the results are collected here.
        """
        try:
            subdirs = sorted(entry for entry in Path(root).iterdir() if entry.is_dir())
        except OSError as e:
            raise SourceUnavailable(f"Buckets folder does not exist: {root}: {e}") from e

        buckets = [os.path.join(root, subdir.name) for subdir in subdirs]
        if not buckets:
            return {}

        results: BucketCollection = {}
        with ThreadPoolExecutor(max_workers=min(len(buckets), self.max_workers)) as executor:
            futures = {executor.submit(self.load_records, bucket): bucket for bucket in buckets}
            for future in as_completed(futures):
                bucket = futures[future]
                try:
                    results[bucket] = future.result()
                except SourceUnavailable as e:
                    self.warn(str(e))

        # keep bucket order independent of completion order
        return {bucket: results[bucket] for bucket in buckets if bucket in results}
