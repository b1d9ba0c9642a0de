# settings.py
# Run configuration for the terminal game.

from typing import Optional

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GameSettings(BaseModel):
    """Settings for a terminal session."""
    seed: Optional[int] = Field(
        default=None,
        ge=0,
        description="Seed for the tile placement random source. Unseeded when omitted."
    )
    color: bool = Field(
        default=True,
        description="Render tiles with their colors."
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
