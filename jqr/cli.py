"""
jqr command-line interface.

Pretty-prints JSON read from a file or stdin, optionally filtered by a
JSONPath query, and converts between JSON and YAML.

Usage:
    jqr data.json '$.user.name'
    cat data.json | jqr '$.users[*].name'
    jqr data.json --to-yaml
    jqr config.yaml --to-json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config import DocumentLoader, SettingsLoader
from .errors import JqrError
from .query import query_all
from .rendering import JSONFormatter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jqr", description="Pretty-print and query JSON data")
    parser.add_argument("file", nargs="?", help="Path to JSON file. If omitted or '-', reads from stdin.")
    parser.add_argument("query", nargs="?", help="JSONPath query (e.g., '$.user.name')")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--to-yaml", action="store_true", help="Convert JSON to YAML")
    mode.add_argument("--to-json", action="store_true", help="Convert YAML to JSON")
    mode.add_argument("--all", action="store_true", help="Always print query results as an array")

    parser.add_argument("--indent", type=int, help="Indentation width for JSON output")
    parser.add_argument("--sort-keys", action="store_true", default=None, help="Sort object keys in output")
    parser.add_argument("--no-color", action="store_true", help="Disable colored error messages")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def split_positionals(file: Optional[str], query: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Treat a lone positional that looks like a JSONPath query as the query."""
    if file is not None and query is None and file.startswith("$") and not Path(file).exists():
        return None, file
    return file, query


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.file is None and args.query is None and sys.stdin.isatty():
        parser.print_help()
        return 0

    try:
        settings = SettingsLoader().load()
    except ValueError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    if args.indent is not None:
        settings.indent = args.indent
    if args.sort_keys:
        settings.sort_keys = True
    if args.no_color:
        settings.color = False

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    formatter = JSONFormatter(
        indent=settings.indent,
        sort_keys=settings.sort_keys,
        color=settings.color and sys.stderr.isatty(),
    )

    file, query = split_positionals(args.file, args.query)
    loader = DocumentLoader()

    try:
        content = loader.read_text(file)
    except OSError as e:
        print(formatter.error_text(f"Error reading file: {e}"), file=sys.stderr)
        return 1

    try:
        if args.to_yaml:
            print(formatter.convert_to_yaml(content), end="")
        elif args.to_json:
            print(formatter.convert_to_json(content))
        elif args.all:
            if query is None:
                parser.error("--all requires a query")
            document = loader.parse_json(content)
            print(formatter.dumps(query_all(document, query)))
        else:
            print(formatter.pretty_print_json(content, query))
    except JqrError as e:
        logger.debug("Command failed", exc_info=True)
        if args.to_yaml:
            prefix = "Error converting to YAML"
        elif args.to_json:
            prefix = "Error converting to JSON"
        else:
            prefix = "Error processing JSON"
        print(formatter.error_text(f"{prefix}: {e}"), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
