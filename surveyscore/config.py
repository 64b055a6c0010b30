"""Settings for the surveyscore CLI, read from ``SURVEYSCORE_*`` env vars or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _nearest_env_file() -> Path | None:
    """The first .env found walking up from the working directory, if any."""
    cwd = Path.cwd().resolve()
    for parent in [cwd, *cwd.parents]:
        env_path = parent / ".env"
        if env_path.is_file():
            return env_path
    return None


class SurveyScoreSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SURVEYSCORE_",
        env_file=_nearest_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Where the edited counts live between commands
    state_file: Path = Path(".surveyscore") / "state.json"

    # Exports land here; the log file goes in <output_dir>/.surveyscore/
    output_dir: Path = Path("output")
    log_level: str = "INFO"

    # Narrative
    min_sample_size: int = Field(default=10, ge=0)
    keyword_top_k: int = Field(default=3, ge=1)
    colour_top_k: int = Field(default=2, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        name = str(value).strip().upper()
        if name not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return name


def load_settings(**overrides: object) -> SurveyScoreSettings:
    """Load settings; CLI overrides win over env and .env.

    ``None`` overrides are dropped so unset CLI options fall through.
    """
    cleaned = {k: v for k, v in overrides.items() if v is not None}
    return SurveyScoreSettings(**cleaned)  # type: ignore[arg-type]
