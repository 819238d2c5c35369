"""Document and settings loading."""

from .loaders import DocumentLoader, Settings, SettingsLoader

__all__ = ["DocumentLoader", "Settings", "SettingsLoader"]
