"""Routes a source descriptor to the loader for its format."""

from dataclasses import dataclass
from typing import Optional, Union

from scoops.cache import CacheStore
from scoops.config import ScoopConfig
from scoops.errors import FetchFailed, SourceUnavailable
from scoops.loaders import (
    DirectoryLoader,
    GitLoader,
    HtmlTableLoader,
    RedirectLoader,
    ZipLoader,
    is_remote,
)
from scoops.loaders.redirect import REDIRECT_SUFFIX
from scoops.manifest import ManifestParser
from scoops.models import BucketCollection, SourceDescriptor, SourceKind

HTML_SUFFIXES = (".html", ".htm")
ZIP_SUFFIX = ".zip"
# GitHub archive downloads: https://api.github.com/repos/<owner>/<repo>/zipball/<ref>
ZIPBALL_MARKER = "/zipball/"


@dataclass(frozen=True)
class DirectorySetTarget:
    """Folder whose immediate subdirectories are buckets."""

    root: str


@dataclass(frozen=True)
class DirectoryTarget:
    path: str


@dataclass(frozen=True)
class ZipTarget:
    path: str
    remote: bool


@dataclass(frozen=True)
class GitTarget:
    url: str


@dataclass(frozen=True)
class HtmlTarget:
    path: str


@dataclass(frozen=True)
class RedirectTarget:
    path: str


BackendTarget = Union[
    DirectorySetTarget, DirectoryTarget, ZipTarget, GitTarget, HtmlTarget, RedirectTarget
]


def plan(descriptor: SourceDescriptor) -> BackendTarget:
    """Pick the backend for a source from its kind, or from its path's shape."""
    path = descriptor.path
    lowered = path.lower()

    if descriptor.kind is SourceKind.BUCKETS:
        if lowered.endswith(REDIRECT_SUFFIX):
            return RedirectTarget(path)
        return DirectorySetTarget(path)
    if descriptor.kind is SourceKind.REDIRECT:
        return RedirectTarget(path)
    if descriptor.kind is SourceKind.HTML:
        return HtmlTarget(path)

    # no kind, or a single bucket: infer from the path
    if lowered.endswith(HTML_SUFFIXES):
        return HtmlTarget(path)
    if is_remote(path):
        if lowered.endswith(ZIP_SUFFIX) or ZIPBALL_MARKER in lowered:
            return ZipTarget(path, remote=True)
        return GitTarget(path)
    if lowered.endswith(ZIP_SUFFIX):
        return ZipTarget(path, remote=False)
    return DirectoryTarget(path)


class SourceResolver:
    """Loads the buckets of a source with the matching loader."""

    def __init__(
        self,
        config: ScoopConfig,
        cache: Optional[CacheStore] = None,
        errors: Optional[list[str]] = None,
    ):
        self.config = config
        self.errors: list[str] = [] if errors is None else errors
        self.cache = cache or CacheStore(config, errors=self.errors)

        self.parser = ManifestParser(self.errors)
        self.directory = DirectoryLoader(self.parser, max_workers=config.max_workers)
        self.zip = ZipLoader(self.parser, self.cache)
        self.git = GitLoader(self.directory, self.cache, timeout=config.git_timeout)
        self.html = HtmlTableLoader(self.parser, self.cache)
        self.redirect = RedirectLoader(self.parser, self.resolve)

    def resolve(self, descriptor: SourceDescriptor) -> BucketCollection:
        """Load the buckets of a source, keyed by their path or URL.

        Raises:
            SourceUnavailable: If the source cannot be read.
        """
        target = plan(descriptor)
        try:
            return self._load(target)
        except FetchFailed as e:
            raise SourceUnavailable(str(e)) from e

    def _load(self, target: BackendTarget) -> BucketCollection:
        if isinstance(target, DirectorySetTarget):
            return self.directory.load_set(target.root)
        if isinstance(target, DirectoryTarget):
            return self.directory.load(target.path)
        if isinstance(target, ZipTarget):
            if target.remote:
                return self.zip.load_url(target.path)
            return self.zip.load(target.path)
        if isinstance(target, GitTarget):
            return self.git.load(target.url)
        if isinstance(target, HtmlTarget):
            return self.html.load(target.path)
        if isinstance(target, RedirectTarget):
            return self.redirect.load(target.path)
        raise TypeError(f"Unhandled backend target: {target!r}")
