"""
Constants and tunables shared by the indexer and the searcher.
"""

import os
from dataclasses import dataclass

INDEX_FILE = "index.txt"
STOPWORDS_FILE = "stopwords.txt"

# Character separating fields of an index line; stripped from document ids.
FIELD_DELIMITER = ","

IDF_PRECISION = 3
SCORE_PRECISION = 3

# Documents with these suffixes are reduced to visible text before tokenizing.
HTML_SUFFIXES = (".html", ".htm")

LOG_LEVEL = os.getenv("VSMSEARCH_LOG_LEVEL", "WARNING")


@dataclass(frozen=True)
class FeedbackConfig:
    """Rocchio pseudo relevance feedback parameters."""

    iterations: int = 2
    top_k: int = 5
    alpha: float = 1.0
    beta: float = 0.7
    gamma: float = 0.25


DEFAULT_FEEDBACK = FeedbackConfig()
