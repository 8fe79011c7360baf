"""Core domain models and exceptions for corpus-snapshot."""

from corpus_snapshot.core.exceptions import (
    CollaboratorError,
    ConfigurationError,
    FilesystemError,
    HistoryError,
    PathSafetyError,
    SnapshotError,
    SyncError,
)
from corpus_snapshot.core.models import (
    BatchReport,
    DatedOutputFile,
    MergedBatch,
    MergeResult,
    RepositoryResult,
    RepoSpec,
    StageOutcome,
    StageStatus,
    SyncAction,
    WorkingCopy,
)

__all__ = [
    # Models
    "RepoSpec",
    "WorkingCopy",
    "SyncAction",
    "DatedOutputFile",
    "MergedBatch",
    "MergeResult",
    "StageOutcome",
    "StageStatus",
    "RepositoryResult",
    "BatchReport",
    # Exceptions
    "SnapshotError",
    "ConfigurationError",
    "SyncError",
    "HistoryError",
    "PathSafetyError",
    "FilesystemError",
    "CollaboratorError",
]
