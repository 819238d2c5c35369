"""JSONPath selection and result normalization."""

from .engine import JSONPathEngine, Match, MatchKind
from .normalizer import (
    INVALID_QUERY,
    NO_RESULTS,
    OutcomeKind,
    QueryOutcome,
    ResultNormalizer,
    resolve,
)
from .extract import extract_jsonpath, query_all, query_document, run_query

__all__ = [
    "JSONPathEngine",
    "Match",
    "MatchKind",
    "INVALID_QUERY",
    "NO_RESULTS",
    "OutcomeKind",
    "QueryOutcome",
    "ResultNormalizer",
    "resolve",
    "extract_jsonpath",
    "query_all",
    "query_document",
    "run_query",
]
