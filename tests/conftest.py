"""Pytest configuration and fixtures."""

import os
import subprocess
from pathlib import Path

import pytest

from corpus_snapshot.core.models.output import DatedOutputFile
from corpus_snapshot.core.models.repository import WorkingCopy
from corpus_snapshot.extraction.base import Extractor, collect_dated_files


def git(repo: Path, *args: str, env: dict[str, str] | None = None) -> str:
    """Run git in ``repo`` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
        env=env,
    )
    return result.stdout.strip()


class RepoBuilder:
    """Builds a throwaway upstream repository with pinned commit dates."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.mkdir(parents=True)
        git(self.path, "init")
        git(self.path, "config", "user.email", "test@test.com")
        git(self.path, "config", "user.name", "Test")
        self._counter = 0

    def commit(self, when: str, files: dict[str, str] | None = None, message: str | None = None) -> str:
        """Commit ``files`` with author and committer date ``when``; return the sha.

        ``when`` is ``YYYY-MM-DD`` (noon local time is used) or a full
        ``YYYY-MM-DDTHH:MM:SS`` timestamp.
        """
        self._counter += 1
        files = files or {"m": f"message {self._counter}\n"}
        for relative, content in files.items():
            target = self.path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)

        timestamp = when if "T" in when else f"{when}T12:00:00"
        env = {**os.environ, "GIT_AUTHOR_DATE": timestamp, "GIT_COMMITTER_DATE": timestamp}
        git(self.path, "add", ".")
        git(self.path, "commit", "-m", message or f"commit {self._counter}", env=env)
        return git(self.path, "rev-parse", "HEAD")

    @property
    def url(self) -> str:
        return str(self.path)


@pytest.fixture
def repo_builder(tmp_path: Path):
    """Factory fixture: ``repo_builder("name")`` creates an upstream repo."""

    def _build(name: str = "upstream") -> RepoBuilder:
        return RepoBuilder(tmp_path / "remotes" / name)

    return _build


@pytest.fixture
def upstream(repo_builder) -> RepoBuilder:
    """Upstream with commits on 2026-01-10, 2026-01-12 and 2026-01-16."""
    builder = repo_builder("upstream")
    builder.commit("2026-01-10")
    builder.commit("2026-01-12")
    builder.commit("2026-01-16")
    return builder


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    path = tmp_path / "repos"
    path.mkdir()
    return path


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


class FakeExtractor(Extractor):
    """Writes one dated file per day named in ``days``, tagged with the repo head."""

    def __init__(self, days: tuple[str, ...] = ("260111", "260112"), marker: str | None = "m") -> None:
        self.days = days
        self.marker = marker
        self.calls: list[tuple[Path, str, Path]] = []

    @property
    def name(self) -> str:
        return "fake"

    def required_input(self, working_copy: WorkingCopy) -> Path | None:
        return working_copy.path / self.marker if self.marker else None

    def extract(self, working_copy: WorkingCopy, start_ymd: str, output_dir: Path) -> list[DatedOutputFile]:
        self.calls.append((working_copy.path, start_ymd, output_dir))
        assert list(output_dir.iterdir()) == []
        for day in self.days:
            (output_dir / f"{day}_{working_copy.path.name}.txt").write_text(
                f"{working_copy.path.name} {day} {working_copy.head_commit}\n"
            )
        return collect_dated_files(output_dir)


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()
