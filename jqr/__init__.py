"""Pretty-print, query and convert JSON data with JSONPath."""

from .errors import DocumentParseError, InvalidQueryError, JqrError, SerializationError
from .query import (
    INVALID_QUERY,
    NO_RESULTS,
    JSONPathEngine,
    Match,
    MatchKind,
    QueryOutcome,
    ResultNormalizer,
    extract_jsonpath,
    query_all,
    query_document,
)
from .rendering import JSONFormatter

__version__ = "0.1.0"

__all__ = [
    "DocumentParseError",
    "InvalidQueryError",
    "JqrError",
    "SerializationError",
    "INVALID_QUERY",
    "NO_RESULTS",
    "JSONPathEngine",
    "Match",
    "MatchKind",
    "QueryOutcome",
    "ResultNormalizer",
    "extract_jsonpath",
    "query_all",
    "query_document",
    "JSONFormatter",
]
