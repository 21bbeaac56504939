"""
Pseudo relevance feedback (Rocchio).

The top-k ranked documents are assumed relevant and the rest of the ranking
irrelevant. The query vector moves towards the centroid of the relevant
documents and away from the irrelevant ones:

    q' = alpha * q + beta / k * sum(relevant) - gamma / (N - k) * sum(irrelevant)
"""

from typing import Mapping, Sequence

from .config import DEFAULT_FEEDBACK, FeedbackConfig


def _sum_vectors(doc_ids: Sequence[str], document_vectors: Mapping[str, Mapping[str, float]]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for doc_id in doc_ids:
        for term, weight in document_vectors.get(doc_id, {}).items():
            totals[term] = totals.get(term, 0.0) + weight
    return totals


def apply_pseudo_relevance_feedback(
    query_vector: dict[str, float],
    document_vectors: Mapping[str, Mapping[str, float]],
    ranked_doc_ids: Sequence[str],
    config: FeedbackConfig = DEFAULT_FEEDBACK,
) -> None:
    """
    Update query_vector in place from a ranking (best document first).
    N is the number of documents with a vector, not the ranking's length.
    """
    k = min(config.top_k, len(ranked_doc_ids))
    if k == 0:
        return
    ik = len(document_vectors) - k

    relevant = _sum_vectors(ranked_doc_ids[:k], document_vectors)
    for term, total in relevant.items():
        query_vector[term] = config.alpha * query_vector.get(term, 0.0) + total * config.beta / k

    # Every document is in the relevant set: nothing to move away from.
    if ik <= 0:
        return
    irrelevant = _sum_vectors(ranked_doc_ids[k:], document_vectors)
    for term, total in irrelevant.items():
        query_vector[term] = config.alpha * query_vector.get(term, 0.0) - total * config.gamma / ik
