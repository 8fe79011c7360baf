"""Working copy synchronization."""

from pathlib import Path

import structlog

from corpus_snapshot.core.exceptions import GitCommandError, SyncError, UnexpectedPathError
from corpus_snapshot.core.models.repository import RepoSpec, SyncAction, WorkingCopy
from corpus_snapshot.git.client import GitClient
from corpus_snapshot.git.url_resolver import normalize_url
from corpus_snapshot.utils.paths import ContainedPath

logger = structlog.get_logger(__name__)


class RepositorySynchronizer:
    """Keeps ``<work_root>/<name>`` a fresh clone of the expected remote.

    - absent: clone
    - git checkout bound to the same remote: fetch + pull
    - git checkout bound elsewhere (or unreadable remote): delete, clone
    - anything else at that path: ``UnexpectedPathError``
    """

    def __init__(self, work_root: Path, git: GitClient | None = None) -> None:
        self._work_root = Path(work_root).resolve()
        self._git = git or GitClient()

    def path_for(self, spec: RepoSpec) -> Path:
        """Working copy directory for ``spec``; raises ``PathSafetyError`` outside the work root."""
        repo_dir = self._work_root / spec.name
        ContainedPath(self._work_root, repo_dir)
        return repo_dir

    def synchronize(self, spec: RepoSpec) -> WorkingCopy:
        """Bring the working copy for ``spec`` up to date with its remote."""
        repo_dir = self.path_for(spec)

        if self._git.is_work_tree(repo_dir):
            if self._remote_matches(repo_dir, spec.url):
                self._update(repo_dir, spec)
                action = SyncAction.UPDATED
            else:
                logger.info(
                    "Remote url mismatch, recloning",
                    repo=spec.name,
                    path=str(repo_dir),
                )
                ContainedPath(self._work_root, repo_dir).remove()
                self._clone(repo_dir, spec)
                action = SyncAction.RECLONED
        elif repo_dir.exists() or repo_dir.is_symlink():
            raise UnexpectedPathError(
                f"Path exists but is not a git repo: {repo_dir}",
                details={"repo": spec.name, "path": str(repo_dir)},
            )
        else:
            self._clone(repo_dir, spec)
            action = SyncAction.CLONED

        logger.info("Repository synchronized", repo=spec.name, action=action.value)
        return WorkingCopy(
            path=repo_dir,
            bound_remote_url=normalize_url(spec.url),
            head_commit=self._git.get_head_commit(repo_dir),
            sync_action=action,
        )

    def _remote_matches(self, repo_dir: Path, expected_url: str) -> bool:
        current = normalize_url(self._git.get_remote_url(repo_dir))
        return bool(current) and current == normalize_url(expected_url)

    def _update(self, repo_dir: Path, spec: RepoSpec) -> None:
        try:
            self._git.fetch(repo_dir)
            self._git.pull(repo_dir)
        except GitCommandError as e:
            raise SyncError(
                f"Failed to update {spec.name}: {e.message}",
                details={"repo": spec.name, "url": spec.url, **e.details},
            ) from e

    def _clone(self, repo_dir: Path, spec: RepoSpec) -> None:
        logger.info("Cloning repository", repo=spec.name, url=spec.url)
        try:
            self._git.clone(spec.url, repo_dir)
        except GitCommandError as e:
            raise SyncError(
                f"Failed to clone {spec.url}: {e.message}",
                details={"repo": spec.name, "url": spec.url, **e.details},
            ) from e
