"""
Configuration for the triples tools.

Settings come from defaults, then an optional JSON file, then environment
variables (TRIPLES_DB, TRIPLES_LOG_LEVEL), then command-line flags.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from triples.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DB_LOCATION = "/tmp/triples.db"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TriplesConfig:
    """Runtime settings for import and export runs."""
    db_location: str = DEFAULT_DB_LOCATION
    log_level: str = "WARNING"
    # log and skip rejected lines instead of aborting the import
    continue_on_error: bool = False
    batch_log_interval: int = 1000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "db_location": self.db_location,
            "log_level": self.log_level,
            "continue_on_error": self.continue_on_error,
            "batch_log_interval": self.batch_log_interval,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TriplesConfig":
        return cls(
            db_location=data.get("db_location", DEFAULT_DB_LOCATION),
            log_level=str(data.get("log_level", "WARNING")).upper(),
            continue_on_error=bool(data.get("continue_on_error", False)),
            batch_log_interval=int(data.get("batch_log_interval", 1000)),
        )

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "TriplesConfig":
        """Override fields from TRIPLES_* environment variables."""
        env = os.environ if environ is None else environ
        if env.get("TRIPLES_DB"):
            self.db_location = env["TRIPLES_DB"]
        if env.get("TRIPLES_LOG_LEVEL"):
            self.log_level = env["TRIPLES_LOG_LEVEL"].upper()
        return self

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []
        if not self.db_location:
            errors.append("db_location must not be empty")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        if self.batch_log_interval <= 0:
            errors.append("batch_log_interval must be positive")
        return errors

    def save(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "TriplesConfig":
        """
        Load configuration from a JSON file.

        Raises:
            ConfigError: If the file is unreadable or fails validation
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"can not read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must hold a JSON object")
        try:
            config = cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid config {path}: {e}") from e
        errors = config.validate()
        if errors:
            raise ConfigError(f"invalid config {path}: {'; '.join(errors)}")
        logger.debug(f"Loaded config from {path}")
        return config


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> TriplesConfig:
    """Defaults, then the file at path (if given), then the environment."""
    config = TriplesConfig.load(path) if path is not None else TriplesConfig()
    config.apply_env(environ)
    errors = config.validate()
    if errors:
        raise ConfigError("; ".join(errors))
    return config
