"""
Command-line interface for the vector-space search engine.

Usage:
    vsmsearch index <collection_dir> <index_dir> <stopwords_file>
    vsmsearch search <index_dir> [-rf] <top_n> <keyword> [<keyword> ...]

`index` builds <index_dir>/index.txt from every file in <collection_dir>.
`search` prints the top_n documents as "rank. doc_id,score" lines, or
"Nothing found". With -rf the query is refined by pseudo relevance feedback.

Each error class exits with its own status (see vsmsearch.errors).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .config import LOG_LEVEL
from .errors import ConfigError, SearchEngineError
from .index_builder import build_index
from .index_loader import load_index
from .ranker import QueryRanker, format_score


def _path(value: str) -> Path:
    """Path argument with ~ expanded to the user's home directory."""
    return Path(value).expanduser()


def run_index(args: argparse.Namespace) -> int:
    print("Indexing in progress...")
    num_docs, num_terms = build_index(args.collection_dir, args.index_dir, args.stopwords)
    print(f"Indexing finished: {num_docs} documents, {num_terms} terms")
    return 0


def run_search(args: argparse.Namespace) -> int:
    if args.top_n <= 0:
        raise ConfigError(f"Number of documents must be positive, got {args.top_n}")
    loaded = load_index(args.index_dir)
    ranker = QueryRanker(loaded)
    results = ranker.search(" ".join(args.keywords), args.top_n, use_feedback=args.use_feedback)

    if not results:
        print("Nothing found")
        return 0
    for rank, (doc_id, score) in enumerate(results, start=1):
        print(f"{rank}. {doc_id},{format_score(score)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vsmsearch", description="Vector space model search engine.")
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: VSMSEARCH_LOG_LEVEL or WARNING).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    index = commands.add_parser("index", help="Index a collection of documents.")
    index.add_argument("collection_dir", type=_path, help="Directory holding the documents.")
    index.add_argument("index_dir", type=_path, help="Directory to write index.txt to.")
    index.add_argument("stopwords", type=_path, help="Stopwords file, one word per line.")
    index.set_defaults(handler=run_index)

    search = commands.add_parser("search", help="Search an index.")
    search.add_argument("index_dir", type=_path, help="Directory holding index.txt.")
    search.add_argument(
        "-rf",
        dest="use_feedback",
        action="store_true",
        help="Refine the query with pseudo relevance feedback.",
    )
    search.add_argument("top_n", type=int, help="Number of top documents to show.")
    search.add_argument("keywords", nargs="+", help="Query keywords.")
    search.set_defaults(handler=run_search)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.handler(args)
    except SearchEngineError as e:
        print(f"Something wrong happened: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
