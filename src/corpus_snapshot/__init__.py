"""corpus-snapshot: dated corpus snapshots from moving git repositories."""

__version__ = "0.1.0"
