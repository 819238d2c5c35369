"""
JSONPath compilation and selection.

Wraps jsonpath-ng and presents its native matches as an ordered sequence of
tagged Match values, so callers can tell a value found inside the document
from one computed by the engine, or from a location that holds nothing.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as jsonpath_parse
from jsonpath_ng.jsonpath import Child, DatumInContext, Fields, Index, JSONPath, Root, This

logger = logging.getLogger(__name__)


class MatchKind(enum.Enum):
    """Provenance of a selected value."""

    BORROWED = "borrowed"
    SYNTHESIZED = "synthesized"
    ABSENT = "absent"


@dataclass(frozen=True)
class Match:
    """One located result of evaluating a path against a document."""

    kind: MatchKind
    value: Any = None
    location: Optional[str] = None

    @classmethod
    def borrowed(cls, value: Any, location: Optional[str] = None) -> "Match":
        return cls(MatchKind.BORROWED, value, location)

    @classmethod
    def synthesized(cls, value: Any) -> "Match":
        return cls(MatchKind.SYNTHESIZED, value)

    @classmethod
    def absent(cls, location: Optional[str] = None) -> "Match":
        return cls(MatchKind.ABSENT, None, location)


class JSONPathEngine:
    """Compiles JSONPath queries and evaluates them against documents."""

    @staticmethod
    def compile(query: str) -> Optional[JSONPath]:
        """
        Compile a JSONPath query string.

        Args:
            query: JSONPath expression (e.g., "$.users[*].name")

        Returns:
            The compiled expression, or None if the query is not valid
        """
        if not isinstance(query, str) or not query.strip():
            logger.debug("Rejecting empty JSONPath query")
            return None

        try:
            return jsonpath_parse(query)
        except JSONPathError as e:
            logger.debug("JSONPath query %r failed to compile: %s", query, e)
            return None

    @staticmethod
    def is_definite(expression: JSONPath) -> bool:
        """
        Return True if the expression names at most one location.

        Definite paths are built only from the root, single field names and
        single array indices. Wildcards, slices, descendants, filters and
        unions can select any number of nodes.
        """
        # Extended-dialect operators such as `sorted` subclass This
        if type(expression) in (Root, This):
            return True

        if isinstance(expression, Child):
            return JSONPathEngine.is_definite(expression.left) and JSONPathEngine.is_definite(expression.right)

        if type(expression) is Fields:
            return len(expression.fields) == 1 and expression.fields[0] != "*"

        if type(expression) is Index:
            # jsonpath-ng >= 1.6 stores a tuple of indices, older releases a single index
            indices = getattr(expression, "indices", None)
            if indices is not None:
                return len(indices) == 1
            return True

        return False

    @staticmethod
    def to_match(datum: DatumInContext, document: Any) -> Match:
        """Convert one native jsonpath-ng match into a Match."""
        # Values computed by the engine (`len`, arithmetic, sorting) carry no
        # parent context; the only context-free value that lives in the
        # document is the document itself.
        if datum.context is not None or datum.value is document:
            return Match.borrowed(datum.value, str(datum.full_path))
        return Match.synthesized(datum.value)

    @staticmethod
    def evaluate(document: Any, expression: JSONPath) -> List[Match]:
        """
        Evaluate a compiled expression against a document.

        Args:
            document: Parsed JSON data; never modified
            expression: Expression returned by compile()

        Returns:
            Matches in document order. A definite path that selects nothing
            yields a single absent match; any other empty selection yields
            an empty list.
        """
        try:
            found = expression.find(document)
        except (TypeError, KeyError, AttributeError, IndexError, ValueError) as e:
            logger.debug("Evaluation of %s failed: %s", expression, e)
            found = []
        except RecursionError:
            logger.warning("Document is nested too deeply to evaluate %s", expression)
            found = []

        matches = [JSONPathEngine.to_match(datum, document) for datum in found]

        if not matches and JSONPathEngine.is_definite(expression):
            matches = [Match.absent(str(expression))]

        logger.debug("Expression %s selected %d match(es)", expression, len(matches))
        return matches

    @staticmethod
    def find(document: Any, query: str) -> Optional[List[Match]]:
        """
        Compile and evaluate a query in one step.

        Returns:
            The match sequence, or None if the query failed to compile
        """
        expression = JSONPathEngine.compile(query)
        if expression is None:
            return None
        return JSONPathEngine.evaluate(document, expression)
