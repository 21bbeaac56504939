"""
Query ranking by vector-space cosine similarity.

Query weights use sublinear tf and the index idf:
    w(t, q) = (1 + ln tf(t, q)) * idf(t)
with ln(N) standing in for the idf of terms the index has never seen.
When the query has two or more distinct terms, the whole query is also
resolved as a phrase and added as one extra dimension weighted by the
phrase idf.

    score(d) = sum_t w(t, q) * (1 + ln tf(t, d)) * idf(t) / (|q| * |d|)

Optionally the query vector is refined with Rocchio pseudo relevance
feedback between ranking rounds; only the last round is returned.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_CEILING, Decimal
from typing import Dict, List, Tuple

from .config import DEFAULT_FEEDBACK, SCORE_PRECISION, FeedbackConfig
from .feedback import apply_pseudo_relevance_feedback
from .index_loader import LoadedIndex
from .phrase import resolve_phrase
from .posting import PostingsList
from .tokenizer import iter_terms

log = logging.getLogger(__name__)

PHRASE_SEPARATOR = " "


def is_phrase(key: str) -> bool:
    return PHRASE_SEPARATOR in key


def round_score(score: float, precision: int = SCORE_PRECISION) -> float:
    """Round up to `precision` decimals, using the exact value of the float."""
    step = Decimal(1).scaleb(-precision)
    return float(Decimal(score).quantize(step, rounding=ROUND_CEILING))


def format_score(score: float, precision: int = SCORE_PRECISION) -> str:
    """Decimal notation without trailing zeros, e.g. 0.5 or 0.123."""
    return f"{score:.{precision}f}".rstrip("0").rstrip(".")


class QueryRanker:
    """
    Ranks documents of a loaded index against free-text queries.
    The loaded index is never modified; each query owns its query vector.
    """

    def __init__(self, loaded: LoadedIndex, feedback: FeedbackConfig = DEFAULT_FEEDBACK) -> None:
        self.loaded = loaded
        self.feedback = feedback

    def query_terms(self, query: str) -> Dict[str, int]:
        """Term frequencies of the query, in order of first appearance."""
        tfs: Dict[str, int] = {}
        for term in iter_terms(query, self.loaded.stopwords):
            tfs[term] = tfs.get(term, 0) + 1
        return tfs

    def build_query_vector(self, query: str) -> Dict[str, float]:
        n = self.loaded.total_docs
        index = self.loaded.index
        tfs = self.query_terms(query)

        query_vector: Dict[str, float] = {}
        for term, tf in tfs.items():
            postings = index.get_postings(term)
            if postings is not None:
                idf = postings.idf
            else:
                idf = math.log(n) if n > 0 else 0.0
            query_vector[term] = (1 + math.log(tf)) * idf

        if len(tfs) > 1:
            phrase = PHRASE_SEPARATOR.join(tfs)
            postings = resolve_phrase(index, tfs, n)
            if postings is not None:
                # Query-side tf of the phrase is 1, so its weight is the idf.
                query_vector[phrase] = postings.idf
        return query_vector

    def _postings_for(self, key: str) -> PostingsList | None:
        if is_phrase(key):
            return resolve_phrase(self.loaded.index, key.split(PHRASE_SEPARATOR), self.loaded.total_docs)
        return self.loaded.index.get_postings(key)

    def rank(self, query_vector: Dict[str, float]) -> List[Tuple[str, float]]:
        """
        One ranking round: cosine scores of every document with a positive
        dot product, best first. Ties keep document id order.
        """
        query_length = math.sqrt(sum(w * w for w in query_vector.values()))
        postings_by_key = {}
        for key in query_vector:
            postings = self._postings_for(key)
            if postings is not None:
                postings_by_key[key] = postings

        scores: Dict[str, float] = {}
        for doc_id in sorted(self.loaded.document_lengths):
            doc_length = self.loaded.document_lengths[doc_id]
            dot = 0.0
            for key, postings in postings_by_key.items():
                tf = postings.tf(doc_id)
                if tf > 0:
                    dot += (1 + math.log(tf)) * postings.idf * query_vector[key]
            if dot > 0 and doc_length > 0:
                scores[doc_id] = dot / (query_length * doc_length)

        return sorted(scores.items(), key=lambda x: x[1], reverse=True)

    def search(self, query: str, top_n: int, use_feedback: bool = False) -> List[Tuple[str, float]]:
        """
        Return up to top_n (doc_id, score) pairs, best first, scores rounded
        up to three decimals. An empty list means nothing was found.
        """
        if top_n <= 0 or self.loaded.total_docs == 0:
            return []
        query_vector = self.build_query_vector(query)
        if not query_vector:
            return []

        rounds = self.feedback.iterations if use_feedback else 1
        ranked: List[Tuple[str, float]] = []
        for round_number in range(rounds):
            if round_number > 0:
                apply_pseudo_relevance_feedback(
                    query_vector,
                    self.loaded.document_vectors,
                    [doc_id for doc_id, _ in ranked],
                    self.feedback,
                )
            ranked = self.rank(query_vector)
            log.debug("Round %d ranked %d documents", round_number + 1, len(ranked))
            if not ranked:
                return []

        return [(doc_id, round_score(score)) for doc_id, score in ranked[:top_n]]
