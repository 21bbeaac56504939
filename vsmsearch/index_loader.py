"""
Index loader: parses index.txt back into memory and derives, for every
document, its term-weight vector (wf * idf, wf = 1 + ln(tf)) and the
Euclidean length of that vector.

Lines are ordered by term, so a document's length is only known once the
whole file has been read.
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import INDEX_FILE, STOPWORDS_FILE
from .errors import ConfigError
from .posting import InvertedIndex, PostingsList
from .tokenizer import load_stopwords

log = logging.getLogger(__name__)


@dataclass
class LoadedIndex:
    """Read-only snapshot used for searching."""

    index: InvertedIndex
    document_vectors: dict[str, dict[str, float]]
    document_lengths: dict[str, float]
    stopwords: frozenset[str] = field(default_factory=frozenset)

    @property
    def total_docs(self) -> int:
        """Number of documents with a computed vector length."""
        return len(self.document_lengths)


def parse_index(lines: Iterable[str]) -> LoadedIndex:
    """
    Build a LoadedIndex from index lines. Any malformed line raises
    IndexFormatError; nothing partial is returned.
    """
    index = InvertedIndex()
    vectors: dict[str, dict[str, float]] = {}
    sum_squares: dict[str, float] = {}

    for line_number, line in enumerate(lines, start=1):
        term, postings = PostingsList.from_line(line.rstrip("\r\n"), line_number)
        index.add_postings(term, postings)
        for doc_id, posting in postings.items():
            weight = (1 + math.log(posting.tf)) * postings.idf if posting.tf > 0 else 0.0
            sum_squares[doc_id] = sum_squares.get(doc_id, 0.0) + weight * weight
            vectors.setdefault(doc_id, {})[term] = weight

    lengths = {doc_id: math.sqrt(s) for doc_id, s in sum_squares.items()}
    return LoadedIndex(index=index, document_vectors=vectors, document_lengths=lengths)


def load_index(index_dir: Path) -> LoadedIndex:
    """
    Load index_dir/index.txt and the stopwords saved alongside it.
    """
    index_dir = Path(index_dir)
    index_path = index_dir / INDEX_FILE
    if not index_path.is_file():
        raise ConfigError(f"Index file not found: {index_path}")

    with open(index_path, "r", encoding="utf-8") as f:
        loaded = parse_index(f)

    stopwords_path = index_dir / STOPWORDS_FILE
    if stopwords_path.is_file():
        loaded.stopwords = load_stopwords(stopwords_path)
    else:
        log.warning("No stopwords found in %s, searching without stopwords", index_dir)

    log.info("Loaded %d terms over %d documents", len(loaded.index), loaded.total_docs)
    return loaded
