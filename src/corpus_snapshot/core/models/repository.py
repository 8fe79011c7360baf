"""Repository models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class RepoSpec(BaseModel):
    """A named repository to snapshot.

    ``name`` is already sanitized and ``url`` already normalized; build these
    through ``corpus_snapshot.specs.resolve_specs``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class SyncAction(str, Enum):
    """What the synchronizer did to a working copy."""

    CLONED = "cloned"
    UPDATED = "updated"
    RECLONED = "recloned"


class WorkingCopy(BaseModel):
    """A local git checkout bound to one remote."""

    model_config = ConfigDict(frozen=True)

    path: Path
    bound_remote_url: str | None = None
    head_commit: str | None = None
    sync_action: SyncAction | None = None
