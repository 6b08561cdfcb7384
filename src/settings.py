"""Runtime configuration for the payments ledger."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("standard", "json")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    """Settings for a single ledger run."""

    log_level: str = "WARNING"
    log_format: str = "standard"
    sort_output: bool = True

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level {self.log_level!r}, expected one of {', '.join(LOG_LEVELS)}")
        self.log_format = self.log_format.lower()
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"Unknown log format {self.log_format!r}, expected one of {', '.join(LOG_FORMATS)}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Create settings from LEDGER_* environment variables."""
        if environ is None:
            environ = os.environ

        return cls(
            log_level=environ.get("LEDGER_LOG_LEVEL", "WARNING"),
            log_format=environ.get("LEDGER_LOG_FORMAT", "standard"),
            sort_output=_parse_bool("LEDGER_SORT_OUTPUT", environ.get("LEDGER_SORT_OUTPUT", "true")),
        )


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")
