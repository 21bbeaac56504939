from __future__ import annotations

from pathlib import Path

import build_index as build_index_script
from vsmsearch.search_cli import main


def test_index_then_search(tmp_path: Path, zoo_collection: Path, stopwords_file: Path, capsys):
    index_dir = tmp_path / "index"
    assert main(["index", str(zoo_collection), str(index_dir), str(stopwords_file)]) == 0
    assert "Indexing finished: 4 documents" in capsys.readouterr().out

    assert main(["search", str(index_dir), "5", "cat"]) == 0
    assert capsys.readouterr().out.splitlines() == ["1. a.txt,0.679"]

    assert main(["search", str(index_dir), "5", "sat"]) == 0
    assert capsys.readouterr().out.splitlines() == ["1. a.txt,0.282", "2. b.txt,0.282"]


def test_search_with_feedback_flag(zoo_index: Path, capsys):
    assert main(["search", str(zoo_index), "-rf", "5", "cat"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split(",")[0] for line in lines] == ["1. a.txt", "2. b.txt"]


def test_nothing_found(zoo_index: Path, capsys):
    assert main(["search", str(zoo_index), "5", "giraffe"]) == 0
    assert capsys.readouterr().out.strip() == "Nothing found"


def test_invalid_collection_exit_status(tmp_path: Path, stopwords_file: Path, capsys):
    status = main(["index", str(tmp_path / "nowhere"), str(tmp_path / "index"), str(stopwords_file)])
    assert status == 3
    assert "Invalid collection path" in capsys.readouterr().err


def test_missing_index_exit_status(tmp_path: Path):
    assert main(["search", str(tmp_path), "5", "cat"]) == 3


def test_non_positive_top_n_exit_status(zoo_index: Path):
    assert main(["search", str(zoo_index), "0", "cat"]) == 3


def test_corrupt_index_exit_status(zoo_index: Path, capsys):
    with open(zoo_index / "index.txt", "a", encoding="utf-8") as f:
        f.write("foo,bar\n")
    assert main(["search", str(zoo_index), "5", "cat"]) == 5
    assert "Illegal term properties" in capsys.readouterr().err


def test_build_index_script_prints_analytics(tmp_path: Path, zoo_collection: Path, stopwords_file: Path, capsys):
    index_dir = tmp_path / "index"
    assert build_index_script.main([str(zoo_collection), str(index_dir), str(stopwords_file)]) == 0
    out = capsys.readouterr().out
    assert "| Number of indexed documents | 4 |" in out
    assert (index_dir / "index.txt").exists()
