"""Buckets hosted in remote git repositories.

Repositories are shallow-cloned into the bucket cache and pulled on
subsequent runs.
"""

import subprocess
from pathlib import Path
from typing import Optional

from scoops.cache import CacheStore
from scoops.loaders.base import BaseLoader
from scoops.loaders.directory import DirectoryLoader
from scoops.models import BucketCollection


class GitLoader(BaseLoader):
    """Clone or update a bucket repository, then read it as a directory."""

    kind = "git"

    def __init__(
        self,
        directory: DirectoryLoader,
        cache: CacheStore,
        timeout: Optional[float] = None,
    ):
        super().__init__(directory.parser)
        self.directory = directory
        self.cache = cache
        self.timeout = timeout

    def load(self, path: str) -> BucketCollection:
        repo_path = self.ensure_repository(path)
        return {path: self.directory.load_records(str(repo_path))}

    def ensure_repository(self, url: str) -> Path:
        """Ensure a working copy of ``url`` exists in the cache.

        Git failures are reported but not raised: whatever the cache directory
        holds afterwards (possibly stale or missing) is used as is.

        Args:
            url: Repository URL.

        Returns:
            Path to the local working copy.
        """
        repo_path = self.cache.cache_path(url)

        if (repo_path / ".git").exists():
            print(f"Updating repository cache: {repo_path}")
            cmdline = ["git", "pull", "--depth=1", "--ff-only"]
            cwd: Optional[Path] = repo_path
        else:
            print(f"Cloning repository: {url}")
            cmdline = ["git", "clone", "--depth=1", url, str(repo_path)]
            cwd = None

        try:
            result = subprocess.run(
                cmdline,
                cwd=cwd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            if result.stdout.strip():
                print(result.stdout.strip())
        except subprocess.CalledProcessError as e:
            self.warn(
                f"{' '.join(cmdline)} failed: {(e.stderr or '').strip()[:200]}\n"
                "Trying to continue anyway..."
            )
        except subprocess.TimeoutExpired:
            self.warn(f"{' '.join(cmdline)} timed out. Trying to continue anyway...")
        except OSError as e:
            self.warn(f"Could not run git: {e}. Trying to continue anyway...")

        return repo_path
