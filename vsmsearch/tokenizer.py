"""
Tokenizer for the search engine index.
Turns plain text (or the visible text of an HTML document) into a lazy stream
of tokens, filtered inline by a chain of predicates.

Structural tokens are preserved whole: e-mail addresses, acronyms (C.A.T or
CAT), web URLs and IPv4 addresses. Words hyphenated across a line break are
joined back together. Supports stemming (Porter) of the surviving tokens.
"""

import io
import logging
import re
import warnings
from pathlib import Path
from typing import Callable, Iterable, Iterator

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.stem import PorterStemmer

from .config import FIELD_DELIMITER

log = logging.getLogger(__name__)

_STEMMER = PorterStemmer()

# Tried in this order against a trimmed fragment; the first full match wins.
RULES = (
    # E-mail
    re.compile(r"[-A-Za-z0-9_.]+@[A-Za-z][A-Za-z0-9_]+\.[a-z]+"),
    # Acronym
    re.compile(r"[A-Z](?:\.?[A-Z])+"),
    # Web address
    re.compile(r"(?:https?|ftp|file)://[-a-zA-Z0-9+&@#/%?=~_|!:,.;]*[-a-zA-Z0-9+&@#/%=~_|]"),
    # IP address
    re.compile(r"\d{1,3}(?:\.\d{1,3}){3}"),
)

_NON_PRINTABLE = re.compile(r"[^\x20-\x7e\t]")
_LEADING_JUNK = re.compile(r"^[^A-Za-z0-9]+")
_TRAILING_JUNK = re.compile(r"[^-A-Za-z0-9]+$")
_SPLIT = re.compile(r"[^\sA-Za-z0-9]+")
_NUMERIC = re.compile(r"(?:-?\d+(?:\.\d+)?)+")

TokenFilter = Callable[[str], bool]


def is_numeric(value: str) -> bool:
    """True for numbers and hyphen-joined number combinations such as 10-10."""
    return _NUMERIC.fullmatch(value) is not None


def stem_token(word: str) -> str:
    """Return Porter stem of word."""
    return _STEMMER.stem(word)


def _source_lines(source) -> Iterable:
    if isinstance(source, str):
        return source.splitlines()
    if isinstance(source, io.IOBase):
        return source
    raise TypeError(f"Unknown source type: {type(source).__name__}")


class Tokenizer:
    """
    Single-pass iterator over the tokens of a text source.

    The source is either a str or an open file object (text or binary).
    Filters may be added with add_filter() until the first token is pulled;
    every generic token must satisfy all of them. Structurally recognised
    tokens are emitted as they are.
    """

    def __init__(self, source) -> None:
        self._lines = _source_lines(source)
        self._filters: list[TokenFilter] = [lambda t: t != ""]
        self._tokens: Iterator[str] | None = None

    def add_filter(self, predicate: TokenFilter) -> "Tokenizer":
        """Add a filter to the chain. Returns self for chaining."""
        if self._tokens is not None:
            raise RuntimeError("Filters cannot be added once tokenizing has started")
        self._filters.append(predicate)
        return self

    def accepts(self, token: str) -> bool:
        return all(f(token) for f in self._filters)

    def __iter__(self) -> "Tokenizer":
        return self

    def __next__(self) -> str:
        if self._tokens is None:
            self._tokens = self._generate()
        return next(self._tokens)

    def _generate(self) -> Iterator[str]:
        pending = ""
        for line_number, raw in enumerate(self._lines, start=1):
            if isinstance(raw, bytes):
                raw = raw.decode("ascii", "ignore")
            pending += _NON_PRINTABLE.sub("", raw).strip()
            if not pending:
                continue
            # Hyphenated across a line break: join with the next line.
            if pending.endswith("-"):
                pending = pending[:-1]
                continue
            line, pending = pending, ""
            yield from self._scan_or_skip(line, line_number)
        if pending:
            yield from self._scan_or_skip(pending, line_number)

    def _scan_or_skip(self, line: str, line_number: int) -> list[str]:
        try:
            return self._scan(line)
        except ValueError as e:
            log.warning("Unable to tokenize line %d: %s", line_number, e)
            return []

    def _scan(self, line: str) -> list[str]:
        tokens: list[str] = []
        for fragment in line.split():
            trimmed = _TRAILING_JUNK.sub("", _LEADING_JUNK.sub("", fragment))
            if any(rule.fullmatch(trimmed) for rule in RULES):
                tokens.append(trimmed)
                continue
            for part in _SPLIT.split(trimmed):
                part = part.strip()
                if self.accepts(part):
                    tokens.append(part)
        return tokens


def normalized_tokens(source, stopwords: frozenset[str] | set[str]) -> Tokenizer:
    """
    Tokenizer with the filters used for both indexing and querying:
    longer than one character, not a stopword, not numeric.
    """
    return (
        Tokenizer(source)
        .add_filter(lambda t: len(t) > 1)
        .add_filter(lambda t: t.lower() not in stopwords)
        .add_filter(lambda t: not is_numeric(t))
    )


def iter_terms(source, stopwords: frozenset[str] | set[str]) -> Iterator[str]:
    """
    Yield index terms: filtered tokens, lowercased and stemmed.
    Tokens whose stem is numeric are dropped. The index field delimiter,
    which web addresses may contain, is removed from every term.
    """
    for token in normalized_tokens(source, stopwords):
        term = stem_token(token.lower()).replace(FIELD_DELIMITER, "")
        if not is_numeric(term):
            yield term


def load_stopwords(path: Path) -> frozenset[str]:
    """
    Read a stopwords file (one word per line). Matching is case-insensitive,
    so the words are stored lowercased.
    """
    text = Path(path).read_text(encoding="utf-8", errors="ignore")
    return frozenset(w.strip().lower() for w in re.split(r"[\r\n]+", text) if w.strip())


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    # Remove script and style elements
    for element in soup(["script", "style"]):
        element.decompose()
    # One line per block keeps hyphenation joins working on the result.
    return soup.get_text(separator="\n", strip=True)


def read_html_file(filepath: Path) -> str:
    """
    Read HTML file content, handling common encodings.
    """
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            return Path(filepath).read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode file: {filepath}")
