from __future__ import annotations

import math
from pathlib import Path

import pytest

from conftest import write_files
from vsmsearch.index_builder import build_index
from vsmsearch.index_loader import load_index
from vsmsearch.ranker import QueryRanker, format_score, round_score
from vsmsearch.tokenizer import stem_token


@pytest.fixture
def zoo_ranker(zoo_index: Path) -> QueryRanker:
    return QueryRanker(load_index(zoo_index))


def test_single_term_matches_only_its_document(zoo_ranker: QueryRanker):
    results = zoo_ranker.search("cat", 10)
    assert [doc_id for doc_id, _ in results] == ["a.txt"]
    assert results[0][1] == pytest.approx(0.679)


def test_shared_term_returns_both_documents_tied(zoo_ranker: QueryRanker):
    results = zoo_ranker.search("sat", 10)
    assert [doc_id for doc_id, _ in results] == ["a.txt", "b.txt"]
    assert results[0][1] == results[1][1] == pytest.approx(0.282)


def test_absent_term_finds_nothing(zoo_ranker: QueryRanker):
    assert zoo_ranker.search("giraffe", 10) == []


def test_stopword_only_query_finds_nothing(zoo_ranker: QueryRanker):
    assert zoo_ranker.build_query_vector("the on") == {}
    assert zoo_ranker.search("the on", 10) == []


def test_results_are_truncated_to_top_n(zoo_ranker: QueryRanker):
    assert [doc_id for doc_id, _ in zoo_ranker.search("sat", 1)] == ["a.txt"]
    assert zoo_ranker.search("sat", 0) == []


@pytest.mark.parametrize("query", ["cat", "sat", "bird", "deep", "in", "mat"])
def test_single_term_scores_are_cosines(zoo_ranker: QueryRanker, query: str):
    results = zoo_ranker.search(query, 10)
    assert results
    for _, score in results:
        assert 0 < score <= 1


def test_query_vector_uses_index_idf_and_fallback(zoo_ranker: QueryRanker):
    vector = zoo_ranker.build_query_vector("giraffe cat")
    giraffe = stem_token("giraffe")
    assert vector[giraffe] == pytest.approx(math.log(4))
    assert vector["cat"] == pytest.approx(0.693)
    # The unknown term drops out of the phrase, leaving the postings of "cat".
    assert vector[f"{giraffe} cat"] == pytest.approx(0.693)


def test_repeated_query_terms_use_sublinear_tf(zoo_ranker: QueryRanker):
    vector = zoo_ranker.build_query_vector("cat cats")
    assert vector == pytest.approx({"cat": (1 + math.log(2)) * 0.693})


def test_phrase_dimension_is_added_for_multi_term_queries(zoo_ranker: QueryRanker):
    vector = zoo_ranker.build_query_vector("cat sat")
    assert set(vector) == {"cat", "sat", "cat sat"}
    assert vector["cat sat"] == pytest.approx(0.693)

    # Terms out of order do not form a phrase anywhere.
    assert zoo_ranker.build_query_vector("mat cat")["mat cat"] == 0.0


def test_phrase_query_ranks_the_matching_document_first(zoo_ranker: QueryRanker):
    results = zoo_ranker.search("cat sat", 10)
    assert [doc_id for doc_id, _ in results] == ["a.txt", "b.txt"]
    assert results[0][1] > results[1][1]


def test_feedback_disabled_matches_first_ranking_round(zoo_ranker: QueryRanker):
    for query in ("cat", "sat", "cat sat", "bird deep"):
        first_round = zoo_ranker.rank(zoo_ranker.build_query_vector(query))
        expected = [(doc_id, round_score(score)) for doc_id, score in first_round][:3]
        assert zoo_ranker.search(query, 3, use_feedback=False) == expected


def test_feedback_expands_towards_top_documents(zoo_ranker: QueryRanker):
    results = zoo_ranker.search("cat", 10, use_feedback=True)
    assert [doc_id for doc_id, _ in results] == ["a.txt", "b.txt"]
    assert results[0][1] > results[1][1] > 0


def test_search_does_not_modify_the_loaded_index(zoo_ranker: QueryRanker):
    before = {doc_id: dict(vector) for doc_id, vector in zoo_ranker.loaded.document_vectors.items()}
    zoo_ranker.search("cat sat", 10, use_feedback=True)
    assert zoo_ranker.loaded.document_vectors == before


def test_two_document_collection(pets_index: Path):
    ranker = QueryRanker(load_index(pets_index))
    results = ranker.search("sat", 10)
    assert [doc_id for doc_id, _ in results] == ["a.txt", "b.txt"]
    assert all(score > 0 for _, score in results)
    assert ranker.search("giraffe", 10) == []
    # "cat" occurs in one of two documents: ln(2 / (1 + 1)) gives it no weight.
    assert ranker.search("cat", 10) == []


def test_round_score_rounds_up():
    assert round_score(0.1234) == 0.124
    assert round_score(0.123) == 0.123
    assert round_score(0.5) == 0.5
    assert round_score(0.0001) == 0.001


def test_format_score():
    assert format_score(0.5) == "0.5"
    assert format_score(1.0) == "1"
    assert format_score(0.124) == "0.124"


def test_phrase_dimension_can_push_scores_above_one(tmp_path: Path, stopwords_file: Path):
    docs = {"a.txt": "cat sat"}
    docs.update({f"filler{i}.txt": f"word{chr(ord('a') + i)} other" for i in range(5)})
    collection = write_files(tmp_path / "phrase_docs", docs)
    index_dir = tmp_path / "phrase_index"
    build_index(collection, index_dir, stopwords_file)
    ranker = QueryRanker(load_index(index_dir))

    # Document lengths hold term weights only, while the phrase adds to the dot product.
    (doc_id, score), = ranker.search("cat sat", 5)
    assert doc_id == "a.txt"
    assert score == pytest.approx(1.225)

    (_, single), = ranker.search("cat", 5)
    assert 0 < single <= 1


def test_round_score_ceiling_can_pass_one():
    assert round_score(1.0) == 1.0
    assert round_score(math.nextafter(1.0, 2.0)) == 1.001
