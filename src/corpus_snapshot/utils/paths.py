"""Filesystem paths guarded to stay inside a root directory."""

import os
import shutil
from pathlib import Path

import structlog

from corpus_snapshot.core.exceptions import FilesystemError, PathSafetyError

logger = structlog.get_logger(__name__)


class ContainedPath:
    """A path proven to live strictly inside a root directory.

    Both the root and the target are canonicalized (symlinks resolved) at
    construction. Construction fails with ``PathSafetyError`` for an empty
    target, the filesystem root, the root itself, or anything outside the
    root, so an instance is always safe to delete.
    """

    __slots__ = ("_root", "_path")

    def __init__(self, root: str | os.PathLike, target: str | os.PathLike) -> None:
        if not str(root).strip():
            raise PathSafetyError("Unsafe root: empty path")
        if not str(target).strip():
            raise PathSafetyError("Unsafe path: empty path", details={"root": str(root)})

        resolved_root = Path(root).resolve()
        resolved = Path(target).resolve()

        if resolved == Path(resolved.anchor):
            raise PathSafetyError(f"Unsafe path: {target}", details={"path": str(target)})
        if resolved == resolved_root or not resolved.is_relative_to(resolved_root):
            raise PathSafetyError(
                f"Refuse path outside work root: {target}",
                details={"path": str(resolved), "root": str(resolved_root)},
            )

        self._root = resolved_root
        self._path = resolved

    @property
    def root(self) -> Path:
        return self._root

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"ContainedPath(root={str(self._root)!r}, path={str(self._path)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContainedPath):
            return NotImplemented
        return (self._root, self._path) == (other._root, other._path)

    def __hash__(self) -> int:
        return hash((self._root, self._path))

    def remove(self) -> None:
        """Delete the path recursively. Missing paths are ignored."""
        try:
            if self._path.is_dir() and not self._path.is_symlink():
                logger.debug("Removing directory", path=str(self._path))
                shutil.rmtree(self._path)
            elif self._path.exists() or self._path.is_symlink():
                logger.debug("Removing file", path=str(self._path))
                self._path.unlink()
        except OSError as e:
            raise FilesystemError(
                f"Failed to remove {self._path}: {e.strerror or e}",
                details={"path": str(self._path)},
            ) from e

    def recreate(self) -> Path:
        """Remove the path and create it again as an empty directory."""
        self.remove()
        try:
            self._path.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError(
                f"Failed to create {self._path}: {e.strerror or e}",
                details={"path": str(self._path)},
            ) from e
        return self._path
