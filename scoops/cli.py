"""Search scoop buckets from several sources: local, remote, zip, html.

Usage:
    scoops python                                  # :active, then :rasa
    scoops --source mybucket.zip --source "if0: :rasa" python
    scoops --source "[html] https://rasa.github.io/scoop-directory/by-score.html" actools
    scoops --source "[bucket] https://github.com/ScoopInstaller/Versions" python
    scoops --fields name,bins,description "\\bqr\\b"
"""

import argparse
import sys
from datetime import timedelta
from typing import Optional

from scoops import __version__
from scoops.aggregator import ResultAggregator, merge_matches
from scoops.config import ScoopConfig
from scoops.display import print_results
from scoops.errors import HomeDirectoryError, InvalidPattern, SourceFormatError
from scoops.naming import BucketNamer
from scoops.query import DEFAULT_FIELDS, FIELDS, SearchQuery
from scoops.resolver import SourceResolver
from scoops.sources import SOURCE_PATTERN_HUMAN, parse_source

POSH_HOOK = (
    'function scoop { if ($args[0] -eq "search") { scoops.exe @($args | Select-Object -Skip 1) }'
    " else { scoop.ps1 @args } }"
)

DEFAULT_SOURCES = [":active", ":rasa"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scoops",
        description="Searches Scoop buckets: local, remote, zip, html",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
SOURCE FORMAT: {SOURCE_PATTERN_HUMAN}
  if0: -- only use the source as a fallback if there were 0 previous matches

The search term is a case-insensitive regular expression.
Prefix it with "(?-i)" for a case-sensitive search.

Examples:
    %(prog)s --source "mybucket.zip" --source "if0: :rasa" python
    %(prog)s --source "[html] https://rasa.github.io/scoop-directory/by-score.html" actools
    %(prog)s --source "[bucket] https://github.com/ScoopInstaller/Versions" python
    %(prog)s --source "~/scoop/buckets/main" python
        """,
    )
    parser.add_argument("term", nargs="?", help="search term (regular expression)")
    parser.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="SOURCE",
        help="a specific source to search (multiple allowed; default: :active, :rasa)",
    )
    parser.add_argument(
        "--fields",
        default=",".join(DEFAULT_FIELDS),
        help=f"app manifest fields to search: {','.join(FIELDS)} (default: %(default)s)",
    )
    parser.add_argument(
        "--cache",
        type=float,
        default=1.0,
        help="cache duration in days (default: %(default)s)",
    )
    parser.add_argument(
        "--linelen",
        type=int,
        default=120,
        help="max line length for results, trims descriptions (default: %(default)s)",
    )
    parser.add_argument(
        "--merge",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="merge the results from all sources into a single output (default: on)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="print debug info (query, fields, sources, config)",
    )
    parser.add_argument(
        "--hook",
        action="store_true",
        help="print posh hook code to integrate with scoop and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.hook:
        print(POSH_HOOK)
        return 0

    if args.term is None:
        parser.print_help()
        return 2

    errors: list[str] = []
    try:
        config = ScoopConfig.load(errors=errors)
    except HomeDirectoryError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    config = config.model_copy(update={"cache_duration": timedelta(days=args.cache)})

    aliases = config.named_sources()
    try:
        sources = [parse_source(value, aliases) for value in args.sources or DEFAULT_SOURCES]
    except SourceFormatError as e:
        parser.error(str(e))

    try:
        query = SearchQuery.compile(args.term, args.fields.split(","))
    except InvalidPattern as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        parser.error(str(e))

    if args.debug:
        print(f"VERSION: {__version__}")
        print(f"  QUERY: {query.pattern.pattern}")
        print(f" FIELDS: {','.join(query.fields)}")
        print(f"SOURCES: {[str(source) for source in sources]}")
        print(f" CONFIG: {config.model_dump_json()}")

    resolver = SourceResolver(config, errors=errors)
    aggregator = ResultAggregator(resolver, BucketNamer(config, errors=errors))

    def show(match):
        print_results(match.buckets, args.linelen, config.apps_dir, config.global_apps_dir)

    state = aggregator.run(query, sources, on_match=None if args.merge else show)

    if args.merge:
        print("MERGED RESULTS:\n")
        show(merge_matches(state.matches))

    if errors:
        print(f"{len(errors)} warning(s):", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)

    return 0 if state.num_matches > 0 else 1


if __name__ == "__main__":
    sys.exit(main())
