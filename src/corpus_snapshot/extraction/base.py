"""Extractor interface."""

import os
from abc import ABC, abstractmethod
from pathlib import Path

from corpus_snapshot.core.models.output import DatedOutputFile, is_dated_filename
from corpus_snapshot.core.models.repository import WorkingCopy


class Extractor(ABC):
    """Turns a checked-out working copy into dated output files."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs."""

    def verify(self) -> None:
        """Check the extractor can run at all. Raises ``CollaboratorError``."""

    def required_input(self, working_copy: WorkingCopy) -> Path | None:
        """File that must exist in the working copy before ``extract``."""
        return None

    @abstractmethod
    def extract(
        self, working_copy: WorkingCopy, start_ymd: str, output_dir: Path
    ) -> list[DatedOutputFile]:
        """Write dated files for content after ``start_ymd`` into ``output_dir``.

        ``output_dir`` exists and is empty when this is called.
        """


def collect_dated_files(output_dir: Path) -> list[DatedOutputFile]:
    """Dated files directly or indirectly under ``output_dir``, in byte-wise path order."""
    files = [
        DatedOutputFile.from_path(path)
        for path in output_dir.rglob("*")
        if path.is_file() and is_dated_filename(path.name)
    ]
    return sorted(files, key=lambda f: os.fsencode(f.path))
