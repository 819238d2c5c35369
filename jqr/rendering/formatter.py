"""
JSON and YAML formatting.

Renders query results as indented JSON and converts documents between JSON
and YAML.
"""

import json
import logging
from typing import Any, Optional

import yaml

from ..config import DocumentLoader
from ..errors import DocumentParseError, SerializationError
from ..query import query_document

logger = logging.getLogger(__name__)

RED = "\033[91m"
RESET = "\033[0m"


def colorize(text: str, color: str = RED, enabled: bool = True) -> str:
    """Wrap text in an ANSI color code."""
    if not enabled:
        return text
    return f"{color}{text}{RESET}"


def stringify_keys(value: Any) -> Any:
    """Rebuild mappings so every key is a string, spelling scalars the way JSON does."""
    if isinstance(value, dict):
        return {_json_key(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [stringify_keys(item) for item in value]
    return value


def _json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, bool):
        return json.dumps(key)
    return str(key)


class JSONFormatter:
    """Pretty-prints JSON and converts between JSON and YAML."""

    def __init__(self, indent: int = 2, sort_keys: bool = False, color: bool = False):
        self.indent = indent
        self.sort_keys = sort_keys
        self.color = color

    def error_text(self, message: str) -> str:
        """Format an error message for the terminal."""
        return colorize(message, RED, self.color)

    def dumps(self, value: Any) -> str:
        """
        Serialize a value as indented JSON.

        Raises:
            SerializationError: If the value is not JSON-serializable
        """
        try:
            return json.dumps(
                value,
                indent=self.indent,
                ensure_ascii=False,
                sort_keys=self.sort_keys,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Serialization error: {e}") from e

    def pretty_print_json(self, content: str, query: Optional[str] = None) -> str:
        """
        Pretty-print JSON text, optionally filtered by a JSONPath query.

        Args:
            content: JSON text
            query: Optional JSONPath query

        Returns:
            Indented JSON text

        Raises:
            DocumentParseError: If content is not valid JSON
            SerializationError: If the result cannot be rendered

        Example:
            >>> JSONFormatter().pretty_print_json('{"name": "Alice", "age": 25}', "$.name")
            '"Alice"'
        """
        document = DocumentLoader.parse_json(content)
        return self.dumps(query_document(document, query))

    def convert_to_yaml(self, content: str) -> str:
        """
        Convert JSON text to YAML.

        Raises:
            DocumentParseError: If content is not valid JSON
        """
        logger.debug("Converting %d characters of JSON to YAML", len(content))
        document = DocumentLoader.parse_json(content)
        return yaml.safe_dump(
            document,
            sort_keys=self.sort_keys,
            allow_unicode=True,
            default_flow_style=False,
        )

    def convert_to_json(self, content: str) -> str:
        """
        Convert YAML text to indented JSON.

        Values JSON cannot represent natively, such as YAML timestamps, are
        written as strings, and so are non-string mapping keys.

        Raises:
            DocumentParseError: If content is not valid YAML
            SerializationError: If the document cannot be rendered as JSON
        """
        logger.debug("Converting %d characters of YAML to JSON", len(content))
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DocumentParseError(f"Invalid YAML: {e}") from e

        try:
            return json.dumps(
                stringify_keys(document),
                indent=self.indent,
                ensure_ascii=False,
                sort_keys=self.sort_keys,
                default=str,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Serialization error: {e}") from e
