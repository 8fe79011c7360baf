"""Batch run outcome models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from corpus_snapshot.core.exceptions import SnapshotError
from corpus_snapshot.core.models.output import DatedOutputFile, MergeResult
from corpus_snapshot.core.models.repository import RepoSpec, WorkingCopy


class StageStatus(str, Enum):
    """Result of a single pipeline stage."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class StageOutcome(BaseModel):
    """Tagged success/failure of one named stage."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stage: str
    status: StageStatus
    repo_name: str | None = None
    error: SnapshotError | None = None

    @property
    def ok(self) -> bool:
        return self.status == StageStatus.SUCCEEDED

    @classmethod
    def succeeded(cls, stage: str, repo_name: str | None = None) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.SUCCEEDED, repo_name=repo_name)

    @classmethod
    def failed(
        cls, stage: str, error: SnapshotError, repo_name: str | None = None
    ) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.FAILED, repo_name=repo_name, error=error)


class RepositoryResult(BaseModel):
    """Everything produced for one repository."""

    spec: RepoSpec
    working_copy: WorkingCopy
    outputs: list[DatedOutputFile] = Field(default_factory=list)


class BatchReport(BaseModel):
    """Summary of a batch run, successful or not."""

    outcomes: list[StageOutcome] = Field(default_factory=list)
    repositories: list[RepositoryResult] = Field(default_factory=list)
    merge: MergeResult | None = None

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failure(self) -> StageOutcome | None:
        """The stage that stopped the run, if any."""
        for outcome in self.outcomes:
            if not outcome.ok:
                return outcome
        return None
