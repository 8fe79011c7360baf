"""Extraction output and merge models."""

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Six leading digits, an underscore, anything, ".txt".
DATED_FILENAME_RE = re.compile(r"[0-9]{6}_.*\.txt", re.DOTALL)

MERGED_FILENAME_TEMPLATE = "merged_{index}.txt"
MERGED_FILENAME_GLOB = "merged_*.txt"


def is_dated_filename(name: str) -> bool:
    """Return True if ``name`` follows the dated output filename convention."""
    return DATED_FILENAME_RE.fullmatch(name) is not None


class DatedOutputFile(BaseModel):
    """A single extraction artifact."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int = Field(ge=0)

    @classmethod
    def from_path(cls, path: Path) -> "DatedOutputFile":
        return cls(path=path, size_bytes=path.stat().st_size)


class MergedBatch(BaseModel):
    """One ``merged_N.txt`` file and the inputs concatenated into it."""

    index: int = Field(ge=1)
    path: Path
    size_bytes: int = 0
    sources: list[DatedOutputFile] = Field(default_factory=list)


class MergeResult(BaseModel):
    """Outcome of one merge run."""

    merge_dir: Path
    max_size_bytes: int
    batches: list[MergedBatch] = Field(default_factory=list)

    @property
    def input_count(self) -> int:
        return sum(len(batch.sources) for batch in self.batches)

    @property
    def total_bytes(self) -> int:
        return sum(batch.size_bytes for batch in self.batches)
