"""
Document and settings loaders.

Handles reading input documents from files or stdin, and loading user
settings from a config directory and the environment.
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..errors import DocumentParseError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "~/.config/jqr"
SETTINGS_FILE = "jqr.json"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON value")


class DocumentLoader:
    """Loads JSON documents from files or stdin."""

    def __init__(self, stdin: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin

    def read_text(self, path: Optional[str] = None) -> str:
        """
        Read raw document text.

        Args:
            path: File path; stdin is read when omitted or "-"

        Returns:
            The file contents
        """
        if path is None or path == "-":
            return self.stdin.read()

        doc_file = Path(path)
        if not doc_file.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        with open(doc_file, encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def parse_json(text: str) -> Any:
        """Parse JSON text into a document. NaN and Infinity are rejected."""
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            raise DocumentParseError(f"Invalid JSON: {e}") from e
        except RecursionError as e:
            raise DocumentParseError("Invalid JSON: document is nested too deeply") from e

    def load(self, path: Optional[str] = None) -> Any:
        """Read and parse a JSON document."""
        return self.parse_json(self.read_text(path))


@dataclass
class Settings:
    indent: int = 2
    sort_keys: bool = False
    color: bool = True
    log_level: str = "WARNING"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _is_log_level(name: Any) -> bool:
    return isinstance(name, str) and isinstance(logging.getLevelName(name.upper()), int)


class SettingsLoader:
    """Loads settings from jqr.json in the config directory, then the environment."""

    # Expected JSON types for each setting in the file
    FIELD_TYPES = {"indent": int, "sort_keys": bool, "color": bool, "log_level": str}

    def __init__(self, config_dir: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.environ = environ if environ is not None else os.environ
        config_dir = config_dir or self.environ.get("JQR_CONFIG_DIR") or DEFAULT_CONFIG_DIR
        self.config_dir = Path(config_dir).expanduser()
        self.settings_file = self.config_dir / SETTINGS_FILE

    def load_file(self) -> Dict[str, Any]:
        """Load the settings file, or return an empty dict if there is none."""
        if not self.settings_file.exists():
            return {}

        with open(self.settings_file, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid settings file {self.settings_file}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid settings file {self.settings_file}: expected an object")
        return data

    def check_value(self, key: str, value: Any) -> Any:
        """Validate one value from the settings file and return it normalized."""
        expected = self.FIELD_TYPES[key]
        # bool is a subclass of int, so `true` must not pass as an indent
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"Invalid settings file {self.settings_file}: "
                f"{key!r} must be {expected.__name__}, got {value!r}"
            )
        if key == "indent" and value < 0:
            raise ValueError(f"Invalid settings file {self.settings_file}: 'indent' must not be negative")
        if key == "log_level":
            if not _is_log_level(value):
                raise ValueError(f"Invalid settings file {self.settings_file}: unknown log level {value!r}")
            return value.upper()
        return value

    def load(self) -> Settings:
        settings = Settings()
        known = {f.name for f in fields(Settings)}

        for key, value in self.load_file().items():
            if key not in known:
                logger.warning("Ignoring unknown setting %r in %s", key, self.settings_file)
                continue
            setattr(settings, key, self.check_value(key, value))

        # Environment overrides
        if "JQR_INDENT" in self.environ:
            try:
                settings.indent = int(self.environ["JQR_INDENT"])
            except ValueError:
                raise ValueError(f"JQR_INDENT must be an integer, got {self.environ['JQR_INDENT']!r}")
            if settings.indent < 0:
                raise ValueError(f"JQR_INDENT must not be negative, got {settings.indent}")
        if "JQR_SORT_KEYS" in self.environ:
            settings.sort_keys = _parse_bool(self.environ["JQR_SORT_KEYS"])
        if "JQR_LOG_LEVEL" in self.environ:
            level = self.environ["JQR_LOG_LEVEL"]
            if not _is_log_level(level):
                raise ValueError(f"JQR_LOG_LEVEL must be a logging level name, got {level!r}")
            settings.log_level = level.upper()
        if "NO_COLOR" in self.environ:
            settings.color = False

        return settings
