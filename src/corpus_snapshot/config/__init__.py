"""Configuration for corpus-snapshot."""

from corpus_snapshot.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
