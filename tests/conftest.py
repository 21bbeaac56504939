from __future__ import annotations

from pathlib import Path

import pytest

from vsmsearch.index_builder import build_index

PETS = {
    "a.txt": "the cat sat on the mat",
    "b.txt": "the dog sat on the log",
}

ZOO = {
    **PETS,
    "c.txt": "a bird flew over the hill",
    "d.txt": "fish swim in the deep sea",
}


def write_files(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def stopwords_file(tmp_path: Path) -> Path:
    path = tmp_path / "stopwords.txt"
    path.write_text("the\non\n", encoding="utf-8")
    return path


@pytest.fixture
def pets_collection(tmp_path: Path) -> Path:
    return write_files(tmp_path / "pets", PETS)


@pytest.fixture
def zoo_collection(tmp_path: Path) -> Path:
    return write_files(tmp_path / "zoo", ZOO)


@pytest.fixture
def zoo_index(tmp_path: Path, zoo_collection: Path, stopwords_file: Path) -> Path:
    index_dir = tmp_path / "zoo_index"
    build_index(zoo_collection, index_dir, stopwords_file)
    return index_dir


@pytest.fixture
def pets_index(tmp_path: Path, pets_collection: Path, stopwords_file: Path) -> Path:
    index_dir = tmp_path / "pets_index"
    build_index(pets_collection, index_dir, stopwords_file)
    return index_dir
