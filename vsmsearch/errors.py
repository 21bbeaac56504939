"""
Error taxonomy for indexing and searching.
Each class carries the process exit status the CLI reports for it.
"""


class SearchEngineError(Exception):
    """Base class for all failures raised by the search engine."""

    exit_code = 1


class ConfigError(SearchEngineError):
    """Invalid or missing collection, index or stopwords path."""

    exit_code = 3


class DocumentReadError(SearchEngineError):
    """A single document could not be read during a build."""

    exit_code = 4


class IndexFormatError(SearchEngineError):
    """A line of the on-disk index does not follow the index grammar."""

    exit_code = 5

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class IndexPersistError(SearchEngineError):
    """The index file or the stopwords copy could not be written."""

    exit_code = 6
