"""
Result normalization.

Folds a compilation outcome and its match sequence into a single JSON value.
Zero, one and many matches map to different output shapes, and invalid or
empty queries are reported in-band as sentinel strings.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from ..errors import InvalidQueryError
from .engine import Match, MatchKind

logger = logging.getLogger(__name__)

NO_RESULTS = "No results found"
INVALID_QUERY = "Invalid JSONPath query"


class OutcomeKind(enum.Enum):
    VALUE = "value"
    EMPTY = "empty"
    INVALID_QUERY = "invalid_query"


@dataclass(frozen=True)
class QueryOutcome:
    """Tagged result of running one query, before it is flattened to JSON."""

    kind: OutcomeKind
    matches: Tuple[Match, ...] = ()
    query: Optional[str] = None

    @classmethod
    def invalid(cls, query: Optional[str] = None) -> "QueryOutcome":
        return cls(OutcomeKind.INVALID_QUERY, (), query)

    @classmethod
    def from_matches(cls, matches: Iterable[Match], query: Optional[str] = None) -> "QueryOutcome":
        matches = tuple(matches)
        kind = OutcomeKind.VALUE if matches else OutcomeKind.EMPTY
        return cls(kind, matches, query)

    @property
    def cardinality(self) -> int:
        return len(self.matches)


def copy_tree(value: Any) -> Any:
    """Deep-copy nested dicts and lists without recursing, so depth is unbounded."""
    if not isinstance(value, (dict, list)):
        return value

    root = {} if isinstance(value, dict) else []
    pending = [(value, root)]
    while pending:
        source, target = pending.pop()
        items = source.items() if isinstance(source, dict) else enumerate(source)
        for key, item in items:
            if isinstance(item, (dict, list)):
                child = {} if isinstance(item, dict) else []
                pending.append((item, child))
            else:
                child = item
            if isinstance(target, dict):
                target[key] = child
            else:
                target.append(child)
    return root


def resolve(match: Match) -> Any:
    """
    Turn a match into an independently owned JSON value.

    Borrowed values are deep-copied so the result never aliases the source
    document. Synthesized values are already owned by the caller. Absent
    matches become None (JSON null).
    """
    if match.kind is MatchKind.BORROWED:
        return copy_tree(match.value)
    if match.kind is MatchKind.SYNTHESIZED:
        return match.value
    return None


class ResultNormalizer:
    """Maps query outcomes to output values."""

    @staticmethod
    def outcome(matches: Optional[List[Match]], query: Optional[str] = None) -> QueryOutcome:
        """
        Build a QueryOutcome from a match sequence.

        Args:
            matches: Match sequence, or None if the query failed to compile
            query: The original query string, kept for error reporting

        Returns:
            The tagged outcome
        """
        if matches is None:
            return QueryOutcome.invalid(query)
        return QueryOutcome.from_matches(matches, query)

    @staticmethod
    def normalize(outcome: QueryOutcome) -> Any:
        """
        Collapse an outcome into a single JSON value.

        Returns:
            - "Invalid JSONPath query" if the query failed to compile
            - "No results found" if nothing matched
            - The resolved value itself for exactly one match
            - A list of resolved values, in match order, otherwise
        """
        logger.debug("Normalizing %s outcome with %d match(es)", outcome.kind.value, outcome.cardinality)

        if outcome.kind is OutcomeKind.INVALID_QUERY:
            return INVALID_QUERY
        if outcome.kind is OutcomeKind.EMPTY:
            return NO_RESULTS
        if outcome.cardinality == 1:
            return resolve(outcome.matches[0])
        return [resolve(match) for match in outcome.matches]

    @staticmethod
    def collect(outcome: QueryOutcome) -> List[Any]:
        """
        Return every resolved value as a list, whatever the cardinality.

        Unlike normalize(), a single match is still wrapped in a list and an
        empty selection is an empty list.

        Raises:
            InvalidQueryError: If the query failed to compile
        """
        if outcome.kind is OutcomeKind.INVALID_QUERY:
            raise InvalidQueryError(outcome.query or "")
        return [resolve(match) for match in outcome.matches]
