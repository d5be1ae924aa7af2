"""Bucket loaders for the supported source formats."""

from scoops.loaders.archive import ZipLoader
from scoops.loaders.base import BaseLoader, is_remote
from scoops.loaders.directory import DirectoryLoader
from scoops.loaders.git import GitLoader
from scoops.loaders.html import HtmlTableLoader
from scoops.loaders.redirect import RedirectLoader, read_name_sources

__all__ = [
    "BaseLoader",
    "DirectoryLoader",
    "ZipLoader",
    "GitLoader",
    "HtmlTableLoader",
    "RedirectLoader",
    "is_remote",
    "read_name_sources",
]
