"""Bucket listings scraped from HTML tables (primarily rasa's scoop-directory)."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from scoops.cache import CacheStore
from scoops.errors import SourceUnavailable
from scoops.loaders.base import BaseLoader, is_remote
from scoops.manifest import ManifestParser
from scoops.models import BucketCollection, PackageRecord

# hrefs containing one of these are taken as the bucket's repository
FORGE_MARKERS = ("github.com", "gitlab.com", "bitbucket.org")


@dataclass
class TableColumns:
    """Indices of the interesting columns of a table, -1 when absent."""

    name: int = -1
    version: int = -1
    description: int = -1


def locate_columns(headings: list[str]) -> TableColumns:
    """Find the name, version and description columns by header text."""
    columns = TableColumns()
    for index, heading in enumerate(headings):
        label = heading.lower()
        if "name" in label:
            columns.name = index
        elif "ver" in label:
            columns.version = index
        elif "desc" in label:
            columns.description = index
    return columns


def _cell(row: list[str], index: int) -> str:
    if 0 <= index < len(row):
        return row[index].strip()
    return ""


def read_table(table: Tag) -> tuple[list[str], list[list[str]]]:
    """Split a table into its header texts and data rows."""
    headings: list[str] = []
    rows: list[list[str]] = []
    for tr in table.find_all("tr"):
        headings.extend(th.get_text().strip() for th in tr.find_all("th"))
        cells = [td.get_text().strip() for td in tr.find_all("td")]
        if cells:
            rows.append(cells)
    return headings, rows


def _forge_href(anchor: Tag) -> Optional[str]:
    href = anchor.get("href")
    if isinstance(href, str) and any(marker in href for marker in FORGE_MARKERS):
        return href
    return None


def find_table_source(table: Tag) -> str:
    """URL of the repository link closest before ``table``.

    Walks back through the table's preceding siblings, nearest first, up to
    the previous table. Within a sibling the first repository link wins.
    """
    for sibling in table.previous_siblings:
        if not isinstance(sibling, Tag):
            continue
        if sibling.name == "table":
            break

        anchors = [sibling] if sibling.name == "a" else []
        anchors.extend(sibling.find_all("a"))
        for anchor in anchors:
            href = _forge_href(anchor)
            if href:
                return href
    return ""


class HtmlTableLoader(BaseLoader):
    """Load package listings from every table with a name column."""

    kind = "html"

    def __init__(self, parser: ManifestParser, cache: CacheStore):
        super().__init__(parser)
        self.cache = cache

    def load(self, path: str) -> BucketCollection:
        if is_remote(path):
            html_path = self.cache.fetch(self.cache.cache_path(path, ".html"), path)
        else:
            html_path = Path(path)

        try:
            markup = html_path.read_bytes()
        except OSError as e:
            raise SourceUnavailable(f"Unable to read HTML {html_path}: {e}") from e

        return self.parse(markup)

    def parse(self, markup: Union[str, bytes]) -> BucketCollection:
        """Extract buckets from an HTML document."""
        soup = BeautifulSoup(markup, "html.parser")

        buckets: BucketCollection = {}
        for table in soup.find_all("table"):
            headings, rows = read_table(table)
            columns = locate_columns(headings)
            if columns.name < 0:
                # not a package table
                continue

            buckets[find_table_source(table)] = [
                PackageRecord(
                    name=_cell(row, columns.name),
                    version=_cell(row, columns.version),
                    description=_cell(row, columns.description),
                )
                for row in rows
            ]
        return buckets
