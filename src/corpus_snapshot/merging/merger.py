"""Size-bounded merging of dated output files."""

import os
import shutil
from pathlib import Path

import structlog

from corpus_snapshot.config.settings import DEFAULT_MAX_MERGE_BYTES
from corpus_snapshot.core.exceptions import ConfigurationError, FilesystemError
from corpus_snapshot.core.models.output import (
    MERGED_FILENAME_GLOB,
    MERGED_FILENAME_TEMPLATE,
    DatedOutputFile,
    MergedBatch,
    MergeResult,
    is_dated_filename,
)

logger = structlog.get_logger(__name__)


class OutputMerger:
    """Concatenates dated output files into ``merged_N.txt`` batches.

    Inputs are read in byte-wise path order and copied whole. A new batch
    starts only when the current one is non-empty and the next file would
    push it past ``max_size_bytes``, so a file larger than the ceiling
    still lands, unsplit, in a batch of its own.
    """

    def __init__(self, max_size_bytes: int = DEFAULT_MAX_MERGE_BYTES) -> None:
        if max_size_bytes < 1:
            raise ConfigurationError(
                f"Merge size ceiling must be positive: {max_size_bytes}",
                details={"max_size_bytes": max_size_bytes},
            )
        self._max_size = max_size_bytes

    def collect_inputs(self, source_root: Path, merge_dir: Path) -> list[DatedOutputFile]:
        """All dated files under ``source_root`` outside ``merge_dir``, in merge order."""
        source_root = Path(source_root).resolve()
        merge_dir = Path(merge_dir).resolve()

        inputs: list[DatedOutputFile] = []
        for dirpath, dirnames, filenames in os.walk(source_root):
            current = Path(dirpath)
            dirnames[:] = [d for d in dirnames if current / d != merge_dir]
            for filename in filenames:
                path = current / filename
                if not is_dated_filename(filename) or path.is_symlink() or not path.is_file():
                    continue
                inputs.append(DatedOutputFile.from_path(path))

        inputs.sort(key=lambda f: os.fsencode(f.path))
        return inputs

    def purge(self, merge_dir: Path) -> int:
        """Delete merged files left by earlier runs. Returns how many were removed."""
        removed = 0
        for path in Path(merge_dir).glob(MERGED_FILENAME_GLOB):
            if path.is_file():
                path.unlink()
                removed += 1
        return removed

    def plan(self, inputs: list[DatedOutputFile], merge_dir: Path) -> list[MergedBatch]:
        """Assign inputs to batches without touching the filesystem."""
        batches: list[MergedBatch] = []
        current: MergedBatch | None = None

        for item in inputs:
            if current is None or (
                current.size_bytes > 0 and current.size_bytes + item.size_bytes > self._max_size
            ):
                index = len(batches) + 1
                current = MergedBatch(
                    index=index,
                    path=Path(merge_dir) / MERGED_FILENAME_TEMPLATE.format(index=index),
                )
                batches.append(current)
            current.sources.append(item)
            current.size_bytes += item.size_bytes

        return batches

    def merge(self, source_root: Path, merge_dir: Path) -> MergeResult:
        """Rebuild ``merge_dir`` from every dated file under ``source_root``.

        ``merge_dir`` must sit inside ``source_root``. Input files are only
        read.
        """
        source_root = Path(source_root).resolve()
        merge_dir = Path(merge_dir).resolve()
        if merge_dir == source_root or not merge_dir.is_relative_to(source_root):
            raise ConfigurationError(
                f"Merge directory must be inside {source_root}: {merge_dir}",
                details={"source_root": str(source_root), "merge_dir": str(merge_dir)},
            )

        try:
            merge_dir.mkdir(parents=True, exist_ok=True)
            purged = self.purge(merge_dir)
        except OSError as e:
            raise FilesystemError(
                f"Cannot prepare merge directory {merge_dir}: {e.strerror or e}",
                details={"merge_dir": str(merge_dir)},
            ) from e
        if purged:
            logger.debug("Purged previous merged files", count=purged, merge_dir=str(merge_dir))

        inputs = self.collect_inputs(source_root, merge_dir)
        result = MergeResult(merge_dir=merge_dir, max_size_bytes=self._max_size)
        if not inputs:
            logger.warning("No txt files found to merge", source_root=str(source_root))
            return result

        result.batches = self.plan(inputs, merge_dir)
        for batch in result.batches:
            try:
                self._write_batch(batch)
            except OSError as e:
                raise FilesystemError(
                    f"Failed to write {batch.path}: {e.strerror or e}",
                    details={"path": str(batch.path)},
                ) from e

        logger.info(
            "Merged files saved",
            merge_dir=str(merge_dir),
            inputs=result.input_count,
            batches=len(result.batches),
            bytes=result.total_bytes,
        )
        return result

    @staticmethod
    def _write_batch(batch: MergedBatch) -> None:
        with open(batch.path, "wb") as out:
            for item in batch.sources:
                with open(item.path, "rb") as src:
                    shutil.copyfileobj(src, out)
