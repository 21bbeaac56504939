"""
Build the inverted index for a document collection and print index analytics.

Usage:
    python build_index.py <collection_dir> <index_dir> <stopwords_file>

Output:
  - <index_dir>/index.txt      (one line per term: term,doc,tf:positions,...,idf)
  - <index_dir>/stopwords.txt  (copy of the stopwords file, used when searching)
  - Analytics table printed to console
"""

import argparse
import logging
import sys
from pathlib import Path

from vsmsearch.config import INDEX_FILE, LOG_LEVEL
from vsmsearch.errors import SearchEngineError
from vsmsearch.index_builder import build_index


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build the vector space model index")
    parser.add_argument("collection_dir", type=Path, help="Directory holding the documents")
    parser.add_argument("index_dir", type=Path, help="Output directory for index.txt")
    parser.add_argument("stopwords", type=Path, help="Stopwords file, one word per line")
    args = parser.parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    try:
        num_docs, num_terms = build_index(
            args.collection_dir.expanduser(),
            args.index_dir.expanduser(),
            args.stopwords.expanduser(),
        )
    except SearchEngineError as e:
        print(f"Something wrong happened: {e}")
        return e.exit_code

    if num_docs == 0:
        print("No documents found in the collection folder.")

    index_path = args.index_dir.expanduser() / INDEX_FILE
    index_size_kb = index_path.stat().st_size / 1024

    print("\n" + "=" * 50)
    print("INDEX ANALYTICS")
    print("=" * 50)
    print()
    print("| Metric                      | Value |")
    print("|-----------------------------|-------|")
    print(f"| Number of indexed documents | {num_docs} |")
    print(f"| Number of unique terms      | {num_terms} |")
    print(f"| Total size of index (KB)    | {index_size_kb:.2f} |")
    print()
    print("=" * 50)
    print(f"\nIndex saved to: {index_path}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
