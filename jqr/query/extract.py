"""
Query entry points.

Ties the selection engine and the normalizer together for callers that hold
a parsed document and a query string.
"""

from typing import Any, List, Optional

from .engine import JSONPathEngine
from .normalizer import QueryOutcome, ResultNormalizer


def run_query(document: Any, query: str) -> QueryOutcome:
    """Evaluate a query and return its tagged outcome."""
    matches = JSONPathEngine.find(document, query)
    return ResultNormalizer.outcome(matches, query)


def extract_jsonpath(document: Any, query: str) -> Any:
    """
    Extract data from a document with a JSONPath query.

    Args:
        document: Parsed JSON data
        query: JSONPath expression (e.g., "$.pets[*].name")

    Returns:
        A single value for one match, a list for several matches, or one of
        the sentinel strings "No results found" / "Invalid JSONPath query".
        Never raises for a well-formed document.

    Example:
        >>> extract_jsonpath({"pets": [{"name": "Buddy"}, {"name": "Whiskers"}]}, "$.pets[*].name")
        ['Buddy', 'Whiskers']
    """
    return ResultNormalizer.normalize(run_query(document, query))


def query_all(document: Any, query: str) -> List[Any]:
    """
    Extract every match of a query as a list, even when there is only one.

    Raises:
        InvalidQueryError: If the query does not compile
    """
    return ResultNormalizer.collect(run_query(document, query))


def query_document(document: Any, query: Optional[str] = None) -> Any:
    """Return the document itself when no query is given, otherwise extract_jsonpath()."""
    if query is None:
        return document
    return extract_jsonpath(document, query)
