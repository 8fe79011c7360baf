"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_MERGE_BYTES = 8 * 1024 * 1024


class Settings(BaseSettings):
    """Settings loaded from ``CORPUS_SNAPSHOT_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CORPUS_SNAPSHOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Working copies
    work_root: str = "repos"
    git_timeout_seconds: float | None = None

    # Merging
    merge_dir_name: str = "merged"
    max_merge_bytes: int = Field(default=DEFAULT_MAX_MERGE_BYTES, ge=1)

    # --- Extraction collaborator ---
    marker_file: str = "m"
    extractor_script: str = "m2a.sh"
    extractor_shell: str = "bash"
    script_dir: str = "."
    extractor_timeout_seconds: float | None = Field(default=None, gt=0)

    # Checked on PATH before any repository is touched
    required_commands: list[str] = Field(default_factory=lambda: ["git", "python"])


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
