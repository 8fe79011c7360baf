"""Batch snapshot pipeline."""

import shutil
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from corpus_snapshot.config.settings import DEFAULT_MAX_MERGE_BYTES
from corpus_snapshot.core.exceptions import (
    FilesystemError,
    MissingCommandError,
    MissingMarkerFileError,
    ReservedNameError,
    SnapshotError,
)
from corpus_snapshot.core.models.output import DatedOutputFile
from corpus_snapshot.core.models.repository import RepoSpec, WorkingCopy
from corpus_snapshot.core.models.run import BatchReport, RepositoryResult, StageOutcome
from corpus_snapshot.extraction.base import Extractor
from corpus_snapshot.git.client import GitClient
from corpus_snapshot.git.history import HistoricalCheckoutSelector
from corpus_snapshot.git.synchronizer import RepositorySynchronizer
from corpus_snapshot.merging.merger import OutputMerger
from corpus_snapshot.specs.resolver import resolve_specs
from corpus_snapshot.utils.dates import ensure_date_order, validate_ymd
from corpus_snapshot.utils.paths import ContainedPath

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class BatchRequest(BaseModel):
    """A validated batch run: dates, repositories and directories."""

    model_config = ConfigDict(frozen=True)

    output_root: Path
    work_root: Path
    start_ymd: str
    end_ymd: str
    repos: list[RepoSpec] = Field(min_length=1)
    merge_dir_name: str = "merged"
    max_merge_bytes: int = Field(default=DEFAULT_MAX_MERGE_BYTES, ge=1)

    @property
    def merge_dir(self) -> Path:
        return self.output_root / self.merge_dir_name


def prepare_request(
    output_root: str | Path,
    start_ymd: str,
    end_ymd: str,
    raw_specs: Iterable[str],
    work_root: str | Path = "repos",
    merge_dir_name: str = "merged",
    max_merge_bytes: int = DEFAULT_MAX_MERGE_BYTES,
) -> BatchRequest:
    """Validate operator input and create the output and work roots.

    Raises a ``ConfigurationError`` (or ``FilesystemError`` when a root
    cannot be created) before any repository is touched.
    """
    validate_ymd(start_ymd)
    validate_ymd(end_ymd)
    ensure_date_order(start_ymd, end_ymd)

    repos = resolve_specs(raw_specs)
    for spec in repos:
        if spec.name == merge_dir_name:
            raise ReservedNameError(
                f"Repo name collides with merge directory: {spec.name}",
                details={"name": spec.name},
            )

    output_root = Path(output_root)
    work_root = Path(work_root)
    for directory in (output_root, work_root):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Cannot create directory {directory}: {e.strerror or e}",
                details={"path": str(directory)},
            ) from e

    return BatchRequest(
        output_root=output_root.resolve(),
        work_root=work_root.resolve(),
        start_ymd=start_ymd,
        end_ymd=end_ymd,
        repos=repos,
        merge_dir_name=merge_dir_name,
        max_merge_bytes=max_merge_bytes,
    )


class BatchPipeline:
    """Runs the whole batch, one repository at a time.

    Per repository:
    1. Synchronize the working copy with its remote
    2. Require the extractor's input file
    3. Check the start date against the earliest commit, reset to the end date
    4. Recreate the repository's output directory and run the extractor

    The run stops at the first failing stage; the merge only happens once
    every repository has succeeded.
    """

    def __init__(
        self,
        extractor: Extractor,
        git: GitClient | None = None,
        required_commands: Sequence[str] = ("git",),
    ) -> None:
        self._extractor = extractor
        self._git = git or GitClient()
        self._selector = HistoricalCheckoutSelector(self._git)
        self._required_commands = tuple(required_commands)

    def run(self, request: BatchRequest) -> BatchReport:
        report = BatchReport()

        if self._stage(report, "preflight", None, self.preflight) is None:
            return report

        synchronizer = RepositorySynchronizer(request.work_root, self._git)
        for spec in request.repos:
            logger.info("Processing repository", repo=spec.name, url=spec.url)
            result = self._process_repository(report, request, synchronizer, spec)
            if result is None:
                return report
            report.repositories.append(result)
            logger.info("Repository done", repo=spec.name, outputs=len(result.outputs))

        merger = OutputMerger(request.max_merge_bytes)
        report.merge = self._stage(
            report,
            "merge",
            None,
            lambda: merger.merge(request.output_root, request.merge_dir),
        )
        return report

    def preflight(self) -> bool:
        """Check required commands and the extractor before touching repositories."""
        for command in self._required_commands:
            if shutil.which(command) is None:
                raise MissingCommandError(
                    f"Missing command: {command}", details={"command": command}
                )
        self._extractor.verify()
        return True

    def _process_repository(
        self,
        report: BatchReport,
        request: BatchRequest,
        synchronizer: RepositorySynchronizer,
        spec: RepoSpec,
    ) -> RepositoryResult | None:
        working_copy = self._stage(report, "sync", spec.name, lambda: synchronizer.synchronize(spec))
        if working_copy is None:
            return None

        if self._stage(report, "marker", spec.name, lambda: self._require_input(working_copy)) is None:
            return None

        working_copy = self._stage(
            report,
            "checkout",
            spec.name,
            lambda: self._selector.checkout(working_copy, request.start_ymd, request.end_ymd),
        )
        if working_copy is None:
            return None

        outputs = self._stage(
            report,
            "extract",
            spec.name,
            lambda: self._extract(request, spec, working_copy),
        )
        if outputs is None:
            return None

        return RepositoryResult(spec=spec, working_copy=working_copy, outputs=outputs)

    def _require_input(self, working_copy: WorkingCopy) -> bool:
        required = self._extractor.required_input(working_copy)
        if required is not None and not required.is_file():
            raise MissingMarkerFileError(
                f"Missing {required.name} file in repo: {working_copy.path}",
                details={"path": str(required)},
            )
        return True

    def _extract(
        self, request: BatchRequest, spec: RepoSpec, working_copy: WorkingCopy
    ) -> list[DatedOutputFile]:
        output_dir = ContainedPath(request.output_root, request.output_root / spec.name).recreate()
        outputs = self._extractor.extract(working_copy, request.start_ymd, output_dir)
        logger.info(
            "Extraction finished",
            repo=spec.name,
            extractor=self._extractor.name,
            files=len(outputs),
        )
        return outputs

    @staticmethod
    def _stage(
        report: BatchReport,
        stage: str,
        repo_name: str | None,
        action: Callable[[], T],
    ) -> T | None:
        """Run one stage, record its outcome, and return its value (None on failure)."""
        try:
            value = action()
        except SnapshotError as e:
            logger.error(
                "Stage failed",
                stage=stage,
                repo=repo_name,
                error=e.message,
                **{k: v for k, v in e.details.items() if k not in ("stage", "repo", "error")},
            )
            report.outcomes.append(StageOutcome.failed(stage, e, repo_name))
            return None
        report.outcomes.append(StageOutcome.succeeded(stage, repo_name))
        return value
