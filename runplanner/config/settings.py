import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues."""
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        return db_url

    db_path = Path(__file__).parent.parent.parent / "runplanner.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.warning(f"DATABASE_URL not set, using local SQLite database: {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    generation_model: str = Field(
        default="gpt-4o-mini",
        validation_alias="GENERATION_MODEL",
        description="Model used for training plan generation",
    )
    generation_temperature: float = Field(
        default=1.0,
        validation_alias="GENERATION_TEMPERATURE",
    )
    generation_timeout_seconds: float = Field(
        default=90.0,
        gt=0,
        validation_alias="GENERATION_TIMEOUT_SECONDS",
        description="Deadline for a single plan generation call",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE", description="Optional log file path")
    log_rotation: str = Field(default="10 MB", validation_alias="LOG_ROTATION")
    log_retention: str = Field(default="7 days", validation_alias="LOG_RETENTION")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @property
    def generation_enabled(self) -> bool:
        return bool(self.openai_api_key)


settings = Settings()
