"""
Index builder: constructs the positional inverted index from a flat directory
of documents and saves it, with a copy of the stopwords file, to an index
directory. Every build replaces the previous index.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator

from .config import FIELD_DELIMITER, HTML_SUFFIXES, INDEX_FILE, STOPWORDS_FILE
from .errors import ConfigError, DocumentReadError, IndexPersistError
from .posting import InvertedIndex
from .tokenizer import extract_text_from_html, iter_terms, load_stopwords, read_html_file

log = logging.getLogger(__name__)


def _document_files(collection_dir: Path) -> list[Path]:
    """Regular files directly under collection_dir, sorted by name."""
    return sorted((p for p in collection_dir.iterdir() if p.is_file()), key=lambda p: p.name)


def _document_id(filepath: Path) -> str:
    # The field delimiter separates values in the index file.
    return filepath.name.replace(FIELD_DELIMITER, "")


def _document_terms(filepath: Path, stopwords: frozenset[str]) -> Iterator[str]:
    if filepath.suffix.lower() in HTML_SUFFIXES:
        yield from iter_terms(extract_text_from_html(read_html_file(filepath)), stopwords)
        return
    with open(filepath, "rb") as f:
        yield from iter_terms(f, stopwords)


def index_document(
    index: InvertedIndex,
    filepath: Path,
    doc_id: str,
    total_docs: int,
    stopwords: frozenset[str],
) -> int:
    """
    Add every term of one document to the index, numbering positions from 0.
    Nothing is recorded unless the whole document was read.
    Returns the number of terms recorded.
    """
    try:
        terms = list(_document_terms(filepath, stopwords))
    except (OSError, ValueError) as e:
        raise DocumentReadError(f"Unable to read document {doc_id}: {e}") from e
    for position, term in enumerate(terms):
        index.add_occurrence(term, doc_id, total_docs, position)
    return len(terms)


def index_collection(collection_dir: Path, stopwords: frozenset[str]) -> tuple[InvertedIndex, int]:
    """
    Build an in-memory index over all regular files of collection_dir
    (non-recursive). Unreadable documents are skipped with a warning but
    still count towards the number of documents.
    Returns (index, number of documents).
    """
    files = _document_files(Path(collection_dir))
    total_docs = len(files)
    index = InvertedIndex()

    for filepath in files:
        doc_id = _document_id(filepath)
        if not doc_id:
            log.warning("Skipping document with unusable name %r", filepath.name)
            continue
        try:
            n_terms = index_document(index, filepath, doc_id, total_docs, stopwords)
        except DocumentReadError as e:
            log.warning("%s", e)
            continue
        log.debug("Indexed %s (%d terms)", doc_id, n_terms)

    return index, total_docs


def write_index(index: InvertedIndex, index_dir: Path, stopwords_path: Path) -> Path:
    """
    Save the index as index_dir/index.txt (one line per term) and copy the
    stopwords file next to it. The index file only appears once both writes
    have succeeded.
    """
    index_dir = Path(index_dir)
    index_path = index_dir / INDEX_FILE
    tmp_path = index_path.with_name(index_path.name + ".tmp")
    stopwords_copy = index_dir / STOPWORDS_FILE

    try:
        with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
            for line in index.to_lines():
                f.write(line + "\n")
        if Path(stopwords_path).resolve() != stopwords_copy.resolve():
            shutil.copyfile(stopwords_path, stopwords_copy)
        os.replace(tmp_path, index_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise IndexPersistError(f"Unable to save the index: {e}") from e

    return index_path


def build_index(collection_dir: Path, index_dir: Path, stopwords_path: Path) -> tuple[int, int]:
    """
    Index a collection directory into index_dir.
    Returns (num_docs, num_terms).
    """
    collection_dir = Path(collection_dir)
    index_dir = Path(index_dir)
    stopwords_path = Path(stopwords_path)

    if not collection_dir.is_dir() or not os.access(collection_dir, os.R_OK):
        raise ConfigError(f"Invalid collection path: {collection_dir}")
    if not stopwords_path.is_file():
        raise ConfigError(f"Invalid stopwords path: {stopwords_path}")
    if index_dir.exists() and not index_dir.is_dir():
        raise ConfigError(f"Invalid index path: {index_dir}")

    try:
        stopwords = load_stopwords(stopwords_path)
    except OSError as e:
        raise ConfigError(f"Unable to read stopwords {stopwords_path}: {e}") from e

    index, total_docs = index_collection(collection_dir, stopwords)
    log.info("Indexed %d documents, %d terms", total_docs, len(index))

    try:
        index_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IndexPersistError(f"Unable to create index directory {index_dir}: {e}") from e
    write_index(index, index_dir, stopwords_path)

    return total_docs, len(index)
