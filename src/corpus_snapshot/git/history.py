"""Historical checkout selection."""

import structlog

from corpus_snapshot.core.exceptions import (
    EarliestCommitUnreadableError,
    GitCommandError,
    NoCommitBeforeDateError,
    StartDateTooEarlyError,
)
from corpus_snapshot.core.models.repository import WorkingCopy
from corpus_snapshot.git.client import GitClient
from corpus_snapshot.utils.dates import end_of_day_boundary

logger = structlog.get_logger(__name__)


class HistoricalCheckoutSelector:
    """Pins a working copy to the last commit of a given day.

    The commit is the first one ``git rev-list --before`` yields from HEAD,
    i.e. git's reverse-chronological walk. On a linear history, commits
    sharing a timestamp resolve to the one closest to HEAD.
    """

    def __init__(self, git: GitClient | None = None) -> None:
        self._git = git or GitClient()

    def earliest_commit_ymd(self, working_copy: WorkingCopy) -> str:
        """Committer date of the repository's first commit, as YYYYMMDD."""
        try:
            root_ymd = self._git.earliest_commit_ymd(working_copy.path)
        except GitCommandError as e:
            raise EarliestCommitUnreadableError(
                f"Failed to read earliest commit date from {working_copy.path}",
                details={"path": str(working_copy.path), **e.details},
            ) from e
        if not root_ymd:
            raise EarliestCommitUnreadableError(
                f"Failed to read earliest commit date from {working_copy.path}",
                details={"path": str(working_copy.path)},
            )
        return root_ymd

    def check_start_date(self, working_copy: WorkingCopy, start_ymd: str) -> str:
        """Require the start date to fall strictly after the earliest commit."""
        root_ymd = self.earliest_commit_ymd(working_copy)
        if int(start_ymd) <= int(root_ymd):
            raise StartDateTooEarlyError(
                f"Start date must be later than earliest commit ({root_ymd}) "
                f"for {working_copy.path}",
                details={"start": start_ymd, "earliest": root_ymd, "path": str(working_copy.path)},
            )
        return root_ymd

    def select_commit(self, working_copy: WorkingCopy, end_ymd: str) -> str:
        """Most recent commit at or before ``end_ymd 23:59:59``."""
        boundary = end_of_day_boundary(end_ymd)
        commit = self._git.last_commit_before(working_copy.path, boundary)
        if not commit:
            raise NoCommitBeforeDateError(
                f"No commit found before end date {end_ymd} in {working_copy.path}",
                details={"end": end_ymd, "path": str(working_copy.path)},
            )
        return commit

    def checkout(self, working_copy: WorkingCopy, start_ymd: str, end_ymd: str) -> WorkingCopy:
        """Validate the start date, then hard-reset to the end-date commit.

        Destructive: local changes in the working copy are discarded.
        """
        self.check_start_date(working_copy, start_ymd)
        commit = self.select_commit(working_copy, end_ymd)
        self._git.reset_hard(working_copy.path, commit)

        logger.info(
            "Checked out historical commit",
            path=str(working_copy.path),
            end=end_ymd,
            commit=commit[:12],
        )
        return working_copy.model_copy(update={"head_commit": commit})
