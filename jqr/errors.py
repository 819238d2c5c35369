"""Exceptions raised outside the query core."""


class JqrError(Exception):
    """Base class for jqr errors."""


class DocumentParseError(JqrError, ValueError):
    """Input text could not be parsed as JSON or YAML."""


class SerializationError(JqrError):
    """A result could not be rendered as text."""


class InvalidQueryError(JqrError, ValueError):
    """Raised by the non-collapsing API when a JSONPath query does not compile."""

    def __init__(self, query: str):
        super().__init__(f"Invalid JSONPath query: {query!r}")
        self.query = query
