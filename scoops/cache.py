"""Download cache for remote buckets and HTML directories.

Cached files live under ``<cache>/buckets`` and are named after the escaped
URL. Freshness is judged purely from the file's modification time.
"""

import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from scoops.config import ScoopConfig
from scoops.errors import FetchFailed, warn

REQUEST_TIMEOUT = 60


def get_session(retries: int = 3, proxy: str = "") -> requests.Session:
    """Create a requests session with retry logic and an optional proxy."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    if proxy:
        # scoop stores the proxy as host[:port] (optionally user:pass@host)
        proxy_url = proxy if "://" in proxy else f"http://{proxy}"
        session.proxies.update({"http": proxy_url, "https": proxy_url})
    return session


def format_age(age: timedelta) -> str:
    """Render an age as whole days, hours or minutes."""
    seconds = int(age.total_seconds())
    if seconds >= 86400:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    return f"{seconds // 60}m"


class CacheStore:
    """Maps URLs to cache files and refreshes them when stale."""

    def __init__(
        self,
        config: ScoopConfig,
        session: Optional[requests.Session] = None,
        errors: Optional[list[str]] = None,
    ):
        self.config = config
        self.duration = config.cache_duration
        self.session = session or get_session(proxy=config.proxy)
        self.errors: list[str] = [] if errors is None else errors

    def cache_path(self, url: str, suffix: str = "") -> Path:
        """Deterministic cache location for a URL.

        Raises:
            FetchFailed: If the cache directory cannot be created.
        """
        try:
            cache_dir = self.config.bucket_cache_dir()
        except OSError as e:
            raise FetchFailed(f"Cache directory not usable: {e}") from e
        return cache_dir / (quote_plus(url) + suffix)

    def age(self, path: Path) -> Optional[timedelta]:
        """Age of a cache file, or None if it does not exist."""
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        return timedelta(seconds=max(0.0, time.time() - mtime))

    def fetch(self, path: Path, url: str) -> Path:
        """Ensure ``path`` holds a usable copy of ``url``.

        Downloads when the cache file is missing or older than the configured
        duration. A failed download or cache write falls back to an existing
        cache file.

        Args:
            path: Cache file to read or refresh.
            url: Remote location of the data.

        Returns:
            The cache file path.

        Raises:
            FetchFailed: If the server answered with a non-200 status, or the
                download or cache write failed and nothing is cached.
        """
        age = self.age(path)
        if age is not None and age <= self.duration:
            print(f"using {format_age(age)} old cache: {path}")
            return path

        print(f"Downloading: {url}")
        try:
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            if age is None:
                raise FetchFailed(f"Failed to download {url}: {e}") from e
            modified = datetime.fromtimestamp(path.stat().st_mtime)
            warn(
                self.errors,
                f"Failed to download {url}, so using stale cache from "
                f"{modified:%a, %d %b %Y %H:%M:%S}: {e}",
            )
            return path

        if response.status_code != 200:
            raise FetchFailed(
                f"Failed to fetch {url}: {response.status_code} {response.reason}"
            )

        try:
            self._store(path, response.content)
        except OSError as e:
            if age is None:
                raise FetchFailed(f"Failed to cache {url} at {path}: {e}") from e
            warn(self.errors, f"Failed to update cache {path}, so using stale cache: {e}")
        return path

    def _store(self, path: Path, content: bytes) -> None:
        """Replace ``path`` with ``content`` without exposing a partial file."""
        partial = path.with_name(path.name + ".part")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            partial.write_bytes(content)
            partial.replace(path)
        except OSError:
            partial.unlink(missing_ok=True)
            raise
