"""Vector space model search engine package."""

from .errors import ConfigError, DocumentReadError, IndexFormatError, IndexPersistError, SearchEngineError
from .posting import Posting, PostingsList, InvertedIndex
from .index_builder import build_index, index_collection
from .index_loader import LoadedIndex, load_index, parse_index
from .ranker import QueryRanker
from .tokenizer import Tokenizer, iter_terms
