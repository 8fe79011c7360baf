"""Exception hierarchy for corpus-snapshot.

Every fatal condition of a batch run is a ``SnapshotError``. The batch
runner stops at the first one it sees.
"""

from typing import Any


class SnapshotError(Exception):
    """Base exception for all corpus-snapshot errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration ---

class ConfigurationError(SnapshotError):
    """Invalid operator input or environment."""


class InvalidDateError(ConfigurationError):
    """A date is not a valid YYYYMMDD value."""


class DateOrderError(ConfigurationError):
    """The start date is after the end date."""


class InvalidSpecError(ConfigurationError):
    """A repository specification has an empty name or url."""


class DuplicateNameError(ConfigurationError):
    """Two repository specifications resolve to the same name."""


class ReservedNameError(ConfigurationError):
    """A repository name collides with the merge output directory."""


class MissingCommandError(ConfigurationError):
    """A required executable is not on PATH."""


# --- Git / synchronization ---

class GitCommandError(SnapshotError):
    """A git invocation exited non-zero."""


class SyncError(SnapshotError):
    """Clone, fetch or pull failed."""


class UnexpectedPathError(SyncError):
    """The working copy path exists but is not a git checkout."""


# --- History ---

class HistoryError(SnapshotError):
    """The repository history does not fit the requested date range."""


class NoCommitBeforeDateError(HistoryError):
    """No commit exists at or before the end-date boundary."""


class StartDateTooEarlyError(HistoryError):
    """The start date does not postdate the earliest commit."""


class EarliestCommitUnreadableError(HistoryError):
    """The earliest commit date could not be read."""


# --- Filesystem safety ---

class PathSafetyError(SnapshotError):
    """A destructive operation targeted an unsafe path."""


class FilesystemError(SnapshotError):
    """A work, output or merge directory could not be created, cleared or written."""


# --- Extraction collaborator ---

class CollaboratorError(SnapshotError):
    """The external extraction tool could not run or failed."""


class MissingMarkerFileError(CollaboratorError):
    """The repository lacks the marker file the extractor reads."""


class MissingExtractorError(CollaboratorError):
    """The extractor script is not installed."""


class ExtractionFailedError(CollaboratorError):
    """The extractor exited non-zero."""
