"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CHECKIN_WINDOW_DAYS = 14


class DataConfig(BaseModel):
    """Record source configuration."""

    path: Path = Field(default=Path("data/disbursements.json"))
    source: str = Field(default="file", pattern=r"^(file|db)$")

    @field_validator("source", mode="before")
    @classmethod
    def normalize_source(cls, v: Any) -> Any:
        """Accept FILE / Db / etc."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class PacingConfig(BaseModel):
    """Pacing engine configuration."""

    checkin_window_days: int = DEFAULT_CHECKIN_WINDOW_DAYS
    sort_mode: str = Field(default="priority", pattern=r"^(priority|alpha)$")
    filter_mode: str = Field(default="all", pattern=r"^(all|risk|high)$")

    @field_validator("checkin_window_days")
    @classmethod
    def clamp_window(cls, v: int) -> int:
        """Negative windows collapse to zero days."""
        return max(0, v)


class DatabaseConfig(BaseModel):
    """Postgres snapshot store configuration."""

    dsn_env: list[str] = Field(
        default_factory=lambda: ["AWARD_PACING_DATABASE_URL", "DATABASE_URL"]
    )
    schema_name: str = Field(default="award_pacing", pattern=r"^[a-z_][a-z0-9_]*$")
    connect_timeout_seconds: int = Field(default=15, ge=1, le=300)


class ReportConfig(BaseModel):
    """Report configuration section."""

    title: str = "Award Pacing Report"
    trend_title: str = "Award Pacing Trend Report"
    owner_limit: int = Field(default=5, ge=1)
    cohort_limit: int = Field(default=4, ge=1)
    upcoming_preview_chars: int = Field(default=64, ge=8)


class Config(BaseModel):
    """Root configuration model."""

    data: DataConfig = Field(default_factory=DataConfig)
    pacing: PacingConfig = Field(default_factory=PacingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] | None = yaml.safe_load(f)

    return Config.model_validate(raw_config or {})
