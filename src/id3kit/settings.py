"""Environment-driven configuration for loading data and building trees."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from id3kit.logging import LogLevel


class InductionSettings(BaseSettings):
    """Settings for the loader and the induction engine.

    Values are read from `ID3KIT_*` environment variables or a `.env` file,
    e.g. `ID3KIT_MAX_DEPTH=4` or `ID3KIT_TXT_DELIMITER=|`.

    Attributes:
        delimiter (str): Field delimiter for delimited text files.
        txt_delimiter (str): Field delimiter used for `.txt` files when no
            delimiter is passed explicitly.
        max_depth (int | None): Upper bound on tree depth. `None` means the
            tree may grow as deep as the attribute count allows.
        log_level (LogLevel): Level `enable_logging` uses when none is passed.
    """

    model_config = SettingsConfigDict(
        env_prefix="ID3KIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    delimiter: str = Field(default=",", description="Field delimiter for delimited text files.")
    txt_delimiter: str = Field(default=",", description="Field delimiter for .txt files.")
    max_depth: int | None = Field(default=None, ge=1, description="Upper bound on tree depth.")
    log_level: LogLevel = Field(default="SPLIT", description="Minimum level for id3kit log output.")

    @field_validator("delimiter", "txt_delimiter", mode="after")
    @classmethod
    def _validate_single_character(cls, value: str) -> str:
        """Validate that a delimiter is exactly one character.

        Args:
            value (str): The delimiter to validate.

        Returns:
            str: The validated delimiter, unchanged.

        Raises:
            ValueError: If the delimiter is not a single character.
        """
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        return value
