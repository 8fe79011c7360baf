"""Extractor backed by an external shell script."""

import shutil
import subprocess
from pathlib import Path

import structlog

from corpus_snapshot.core.exceptions import (
    ExtractionFailedError,
    MissingExtractorError,
)
from corpus_snapshot.core.models.output import DatedOutputFile
from corpus_snapshot.core.models.repository import WorkingCopy
from corpus_snapshot.extraction.base import Extractor, collect_dated_files
from corpus_snapshot.extraction.config import ExtractionConfig

logger = structlog.get_logger(__name__)


class ScriptExtractor(Extractor):
    """Runs ``<shell> <script> -o <out> -e <start> -i <repo>/<marker>``.

    The script runs from its own directory so it can find its helpers.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self._config = config or ExtractionConfig()

    @property
    def name(self) -> str:
        return self._config.script

    def verify(self) -> None:
        script_dir = self._config.script_dir.resolve()
        if not self._config.script_path.is_file():
            raise MissingExtractorError(
                f"{self._config.script} not found in {script_dir}",
                details={"script": self._config.script, "script_dir": str(script_dir)},
            )
        if shutil.which(self._config.shell) is None:
            raise MissingExtractorError(
                f"Missing command: {self._config.shell}",
                details={"command": self._config.shell},
            )

    def required_input(self, working_copy: WorkingCopy) -> Path:
        return working_copy.path / self._config.marker_file

    def extract(
        self, working_copy: WorkingCopy, start_ymd: str, output_dir: Path
    ) -> list[DatedOutputFile]:
        script_dir = self._config.script_dir.resolve()
        command = [
            self._config.shell,
            str(self._config.script_path.resolve()),
            "-o",
            str(output_dir),
            "-e",
            start_ymd,
            "-i",
            str(self.required_input(working_copy)),
        ]
        logger.debug("Running extractor", command=command, cwd=str(script_dir))

        try:
            result = subprocess.run(
                command,
                cwd=script_dir,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._config.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise ExtractionFailedError(
                f"{self._config.script} timed out for {working_copy.path}",
                details={"path": str(working_copy.path), "timeout": self._config.timeout_seconds},
            ) from e
        except OSError as e:
            raise MissingExtractorError(
                f"Failed to start {self._config.shell}: {e}",
                details={"command": self._config.shell},
            ) from e

        if result.returncode != 0:
            raise ExtractionFailedError(
                f"{self._config.script} exited with code {result.returncode} "
                f"for {working_copy.path}",
                details={
                    "path": str(working_copy.path),
                    "returncode": result.returncode,
                    "stderr": result.stderr.strip()[-2000:],
                },
            )

        return collect_dated_files(output_dir)
