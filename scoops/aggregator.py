"""Searches sources in order and combines their matches."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from scoops.errors import SourceUnavailable, warn
from scoops.models import SourceCondition, SourceDescriptor, SourceMatch
from scoops.naming import KNOWN_PREFIX, BucketNamer
from scoops.query import SearchQuery, filter_buckets
from scoops.resolver import SourceResolver

DIVIDER = "____________________"


@dataclass
class SearchState:
    """Everything gathered during one search run."""

    query: SearchQuery
    sources: list[SourceDescriptor]
    # one entry per searched source, in order
    matches: list[SourceMatch] = field(default_factory=list)
    num_sources_searched: int = 0
    num_matches: int = 0

    @property
    def num_buckets(self) -> int:
        return sum(len(match.buckets) for match in self.matches)


def merge_matches(matches: list[SourceMatch]) -> SourceMatch:
    """Union the buckets of several matches; later sources win on collisions."""
    merged = SourceMatch()
    for match in matches:
        merged.buckets.update(match.buckets)
    merged.num_records = sum(len(records) for records in merged.buckets.values())
    return merged


class ResultAggregator:
    """Runs a query over an ordered list of sources."""

    def __init__(
        self,
        resolver: SourceResolver,
        namer: BucketNamer,
        prefix: str = KNOWN_PREFIX,
    ):
        self.resolver = resolver
        self.namer = namer
        self.prefix = prefix
        self.errors = resolver.errors

    def search_source(self, query: SearchQuery, source: SourceDescriptor) -> SourceMatch:
        """Load, filter and rename the buckets of one source."""
        try:
            buckets = self.resolver.resolve(source)
        except SourceUnavailable as e:
            warn(self.errors, f"Unable to get buckets from source {source}: {e}")
            return SourceMatch(source=source, error=str(e))

        match = filter_buckets(query, buckets)
        match.source = source
        match.buckets = self.namer.rename(match.buckets, self.prefix)
        return match

    def run(
        self,
        query: SearchQuery,
        sources: list[SourceDescriptor],
        on_match: Optional[Callable[[SourceMatch], None]] = None,
    ) -> SearchState:
        """Search each source in turn.

        Sources marked ``if0`` are skipped once any earlier source matched.

        Args:
            query: Compiled search query.
            sources: Sources in search order.
            on_match: Called with each source's match as soon as it is ready.

        Returns:
            The final search state.
        """
        state = SearchState(query=query, sources=list(sources))

        for index, source in enumerate(state.sources, 1):
            if source.condition is SourceCondition.IF_ZERO and state.num_matches > 0:
                continue

            print(DIVIDER)
            print(f"#{index} Searching {source}")

            match = self.search_source(query, source)
            print(
                f"- {match.num_records} apps matched in "
                f"{len(match.buckets)}/{match.num_buckets_loaded} buckets\n"
            )

            state.matches.append(match)
            state.num_matches += match.num_records
            state.num_sources_searched += 1
            if on_match is not None:
                on_match(match)

        print(DIVIDER)
        print(
            f"TOTAL: {state.num_matches} apps matched in {state.num_buckets} buckets "
            f"from {state.num_sources_searched} sources\n"
        )
        return state
