"""Extraction configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ExtractionConfig(BaseModel):
    """Configuration for the external extraction script."""

    model_config = ConfigDict(frozen=True)

    script: str = Field(default="m2a.sh", description="Extractor script file name")
    script_dir: Path = Field(
        default=Path("."), description="Directory holding the script; also its working directory"
    )
    shell: str = Field(default="bash", description="Interpreter used to run the script")
    marker_file: str = Field(
        default="m", description="File inside the repository handed to the script as input"
    )
    timeout_seconds: float | None = Field(
        default=None, gt=0, description="Kill the script after this many seconds"
    )

    @property
    def script_path(self) -> Path:
        return self.script_dir / self.script
