"""Domain models for corpus-snapshot."""

from corpus_snapshot.core.models.output import (
    DatedOutputFile,
    MergedBatch,
    MergeResult,
)
from corpus_snapshot.core.models.repository import RepoSpec, SyncAction, WorkingCopy
from corpus_snapshot.core.models.run import (
    BatchReport,
    RepositoryResult,
    StageOutcome,
    StageStatus,
)

__all__ = [
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
]
