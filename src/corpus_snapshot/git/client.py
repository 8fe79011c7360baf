"""Thin git CLI wrapper using subprocess."""

import subprocess
from pathlib import Path

import structlog

from corpus_snapshot.core.exceptions import GitCommandError

logger = structlog.get_logger(__name__)


class GitClient:
    """Runs git plumbing commands.

    Uses subprocess + git CLI directly (no gitpython dependency). Every
    failing invocation raises ``GitCommandError``; callers translate it into
    the error of the stage they implement.
    """

    def __init__(self, executable: str = "git", timeout: float | None = None) -> None:
        self._executable = executable
        self._timeout = timeout

    def run(self, *args: str, cwd: Path | None = None) -> str:
        """Run a git command and return stripped stdout."""
        command = [self._executable, *args]
        logger.debug("Running git", args=list(args), cwd=str(cwd) if cwd else None)
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self._timeout,
            )
        except subprocess.CalledProcessError as e:
            raise GitCommandError(
                f"git {' '.join(args)} failed with exit code {e.returncode}",
                details={
                    "args": list(args),
                    "cwd": str(cwd) if cwd else None,
                    "returncode": e.returncode,
                    "stderr": (e.stderr or "").strip(),
                },
            ) from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"git {' '.join(args)} timed out after {self._timeout}s",
                details={"args": list(args), "cwd": str(cwd) if cwd else None},
            ) from e
        except FileNotFoundError as e:
            raise GitCommandError(
                f"git executable not found: {self._executable}",
                details={"executable": self._executable},
            ) from e
        return result.stdout.strip()

    # --- Repository state ---

    @staticmethod
    def is_work_tree(path: Path) -> bool:
        """True if ``path`` holds a ``.git`` directory."""
        return (path / ".git").is_dir()

    def get_remote_url(self, path: Path) -> str | None:
        """Get the origin remote URL, or None if it cannot be read."""
        try:
            url = self.run("remote", "get-url", "origin", cwd=path)
        except GitCommandError:
            return None
        return url or None

    def get_head_commit(self, path: Path) -> str:
        return self.run("rev-parse", "HEAD", cwd=path)

    # --- Network ---

    def clone(self, url: str, dest: Path) -> None:
        self.run("clone", url, str(dest))

    def fetch(self, path: Path) -> None:
        self.run("fetch", "origin", cwd=path)

    def pull(self, path: Path) -> None:
        self.run("pull", "origin", cwd=path)

    # --- History ---

    def earliest_commit_ymd(self, path: Path) -> str:
        """Committer date of the first commit in ``git log --reverse``, as YYYYMMDD."""
        output = self.run(
            "log", "--reverse", "--format=%cd", "--date=format:%Y%m%d", cwd=path
        )
        return output.splitlines()[0].strip() if output else ""

    def last_commit_before(self, path: Path, boundary: str) -> str:
        """Most recent commit reachable from HEAD committed no later than ``boundary``."""
        return self.run("rev-list", "-n", "1", f"--before={boundary}", "HEAD", cwd=path)

    def reset_hard(self, path: Path, commit: str) -> None:
        self.run("reset", "--hard", commit, cwd=path)
