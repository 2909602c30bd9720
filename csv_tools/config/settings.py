"""
Configuration settings for csv_tools.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). Settings are validated when
they are built, so a bad delimiter or unknown encoding fails at startup rather
than halfway through writing a file.

**Scope**: Only the file boundary (csv_tools.data.io) and the scripts under
actions/ read settings, and only to fill in arguments the caller left as
None. The in-memory core (tokenizer, loader, CSVTable) takes every parameter
explicitly and never looks at the environment.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op if the file doesn't exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

TRUE_VALUES = ("true", "1", "yes")


def parse_delimiter(raw: str) -> str:
    """Turn a delimiter as written in .env files or on the command line into a character."""
    # A literal tab is awkward to type
    if raw in ("\\t", "tab", "TAB"):
        return "\t"
    return raw


@dataclass(frozen=True)
class CSVSettings:
    """
    Defaults used when reading and writing CSV files.

    Attributes:
        delimiter: Field separator (default ","). Must be exactly one
                   character and not a double quote or backslash, since
                   those carry meaning for the tokenizer.
        encoding: Text encoding for reading and writing files (default "utf-8").
        trim_on_load: If True, read_csv_file trims leading and trailing
                      blank rows after loading (default False).
    """
    delimiter: str = ","
    encoding: str = "utf-8"
    trim_on_load: bool = False

    def __post_init__(self):
        """Validate settings after initialization."""
        if len(self.delimiter) != 1:
            raise ValueError(
                f"CSV_TOOLS_DELIMITER must be a single character, got: {self.delimiter!r}"
            )
        if self.delimiter in ('"', "\\"):
            raise ValueError(
                f"CSV_TOOLS_DELIMITER cannot be a quote or a backslash, got: {self.delimiter!r}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"CSV_TOOLS_ENCODING is not a known encoding: {self.encoding!r}")

    @classmethod
    def from_env(cls) -> "CSVSettings":
        """
        Load CSV settings from environment variables.

        **Environment variables**:
          - CSV_TOOLS_DELIMITER (optional): Field separator. "\\t" or "tab"
            selects a tab. Defaults to ",".
          - CSV_TOOLS_ENCODING (optional): File encoding. Defaults to "utf-8".
          - CSV_TOOLS_TRIM_ON_LOAD (optional): "true", "1" or "yes" to trim
            blank rows when reading files. Defaults to false.

        Returns:
            CSVSettings object with values loaded from environment.

        Raises:
            ValueError: If a variable holds an invalid value.

        Usage example:
            >>> # In .env file:
            >>> # CSV_TOOLS_DELIMITER=;
            >>> settings = CSVSettings.from_env()
            >>> settings.delimiter
            ';'
        """
        delimiter = parse_delimiter(os.getenv("CSV_TOOLS_DELIMITER", ","))
        encoding = os.getenv("CSV_TOOLS_ENCODING", "utf-8")
        trim_on_load = os.getenv("CSV_TOOLS_TRIM_ON_LOAD", "false").lower() in TRUE_VALUES

        return cls(
            delimiter=delimiter,
            encoding=encoding,
            trim_on_load=trim_on_load,
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for csv_tools.

    **Usage pattern**:
      ```python
      from csv_tools.config.settings import get_settings

      delimiter = get_settings().csv.delimiter
      ```

    Attributes:
        csv: File format defaults.
    """
    csv: CSVSettings = field(default_factory=CSVSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load global settings from environment variables."""
        return cls(csv=CSVSettings.from_env())


# Lazily loaded on first get_settings() call. Tests can build Settings directly.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.
    Call reset_settings() to force a reload (tests do this after changing
    environment variables).

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If the environment holds invalid values.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("CSV_TOOLS_DELIMITER", ";")
          reset_settings()
          assert get_settings().csv.delimiter == ";"
      ```
    """
    global _default_settings
    _default_settings = None
