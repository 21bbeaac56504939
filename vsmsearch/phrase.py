"""
Phrase resolution over positional postings.

Consecutive terms are merged pairwise: for every document containing both,
a position of the left term is kept when some position of the right term
follows it. The result is a synthetic postings list whose tf counts phrase
matches and whose idf reflects the phrase's rarity. It is used at query time
only and never persisted.
"""

from typing import Iterable, Sequence

from .posting import InvertedIndex, PostingsList


def _merge_pair(first: PostingsList, second: PostingsList, total_docs: int) -> PostingsList:
    merged = PostingsList()
    for doc_id in first.doc_ids():
        if doc_id not in second:
            continue
        following = second.positions(doc_id)
        # Greedy forward match: a position of `second` is claimed at most once.
        last_position = 0
        for p1 in first.positions(doc_id):
            for p2 in following:
                if p2 > p1 and p2 > last_position:
                    merged.record_occurrence(doc_id, total_docs, p1)
                    last_position = p2
                    break
    return merged


def merge_postings(total_docs: int, postings_lists: Sequence[PostingsList]) -> PostingsList | None:
    """
    Merge postings lists of consecutive phrase terms into one postings list.

    The last pair is merged first and the result replaces the right operand
    of the previous pair, so positions in the result are those of the first
    term wherever the remaining terms follow in order. A single postings list
    is returned unchanged; an empty sequence gives None.
    """
    if not postings_lists:
        return None
    merged = postings_lists[-1]
    for left in reversed(postings_lists[:-1]):
        merged = _merge_pair(left, merged, total_docs)
    return merged


def resolve_phrase(index: InvertedIndex, terms: Iterable[str], total_docs: int) -> PostingsList | None:
    """
    Postings for a phrase of index terms. Terms missing from the index are
    dropped from the phrase.
    """
    postings = [p for p in (index.get_postings(t) for t in terms) if p is not None]
    return merge_postings(total_docs, postings)
