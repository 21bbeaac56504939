"""
Posting and inverted index data structures.

A posting represents a term's occurrences in one document: term frequency
plus the positions at which the term was seen. A postings list groups the
postings of one term and carries the term's idf, recomputed every time an
occurrence is recorded.

On-disk representation, one line per term:
    term,doc1,tf1:pos1;pos2;...,doc2,tf2:pos1;...,idf
"""

import math
import re
from dataclasses import dataclass, field
from typing import Iterator

from .config import FIELD_DELIMITER, IDF_PRECISION
from .errors import IndexFormatError

_LINE_FORMAT = re.compile(
    r"[^,]+"  # term
    r"(?:,[^,]+,\d+:\d+(?:;\d+)*)+"  # doc,tf:positions
    r",-?\d+(?:\.\d+)?"  # idf
)


def round_half_up(value: float, precision: int) -> float:
    scale = 10 ** precision
    return math.floor(value * scale + 0.5) / scale


@dataclass
class Posting:
    """
    Occurrences of a term in one document.
    - tf: term frequency
    - positions: increasing term positions within the document
    """

    tf: int = 0
    positions: list[int] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.tf}:" + ";".join(str(p) for p in self.positions)


class PostingsList:
    """
    Postings of a single term: doc_id -> Posting, plus the term's idf.
    idf is always derived from the document frequency, never set directly.
    """

    def __init__(self) -> None:
        self._postings: dict[str, Posting] = {}
        self._idf = 0.0

    @property
    def idf(self) -> float:
        return self._idf

    def record_occurrence(self, doc_id: str, total_docs: int, position: int) -> None:
        """
        Record one occurrence of the term at `position` in `doc_id`, then
        recompute idf from the current document frequency.
        """
        posting = self._postings.setdefault(doc_id, Posting())
        posting.tf += 1
        posting.positions.append(position)
        # df + 1 in the denominator leaves room for terms unseen in the index.
        self._idf = round_half_up(math.log(total_docs / (len(self._postings) + 1)), IDF_PRECISION)

    def tf(self, doc_id: str) -> int:
        posting = self._postings.get(doc_id)
        return posting.tf if posting is not None else 0

    def positions(self, doc_id: str) -> list[int] | None:
        posting = self._postings.get(doc_id)
        return posting.positions if posting is not None else None

    def doc_ids(self) -> Iterator[str]:
        return iter(self._postings)

    def items(self) -> Iterator[tuple[str, Posting]]:
        return iter(self._postings.items())

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._postings

    def __repr__(self) -> str:
        return f"PostingsList(df={len(self)}, idf={self._idf})"

    def to_line(self, term: str) -> str:
        """Serialize as one index line (without the trailing newline)."""
        fields = [term]
        for doc_id, posting in self._postings.items():
            fields.append(doc_id)
            fields.append(str(posting))
        fields.append(repr(self._idf))
        return FIELD_DELIMITER.join(fields)

    @classmethod
    def from_line(cls, line: str, line_number: int | None = None) -> tuple[str, "PostingsList"]:
        """
        Parse one index line into (term, postings list).
        Raises IndexFormatError if the line does not follow the grammar.
        """
        if _LINE_FORMAT.fullmatch(line) is None:
            raise IndexFormatError(f"Illegal term properties {line!r}", line_number)
        fields = line.split(FIELD_DELIMITER)
        postings = cls()
        for i in range(1, len(fields) - 1, 2):
            tf, positions = fields[i + 1].split(":")
            postings._postings[fields[i]] = Posting(
                tf=int(tf), positions=[int(p) for p in positions.split(";")]
            )
        postings._idf = float(fields[-1])
        return fields[0], postings


class InvertedIndex:
    """
    Inverted index: map from term -> postings list.
    """

    def __init__(self) -> None:
        self._index: dict[str, PostingsList] = {}

    def add_occurrence(self, term: str, doc_id: str, total_docs: int, position: int) -> None:
        """Record an occurrence of term in doc_id, creating its postings list if needed."""
        self._index.setdefault(term, PostingsList()).record_occurrence(doc_id, total_docs, position)

    def add_postings(self, term: str, postings: PostingsList) -> None:
        self._index[term] = postings

    def get_postings(self, term: str) -> PostingsList | None:
        """Return the postings list for a term, or None."""
        return self._index.get(term)

    def tokens(self) -> Iterator[str]:
        """Iterate over all terms in the index."""
        return iter(self._index)

    def items(self) -> Iterator[tuple[str, PostingsList]]:
        return iter(self._index.items())

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, term: str) -> bool:
        return term in self._index

    def to_lines(self) -> Iterator[str]:
        """Index lines sorted by term."""
        for term in sorted(self._index):
            yield self._index[term].to_line(term)
