"""
Configuration Loader

Reads rangestream settings from the environment. There is no config file;
every setting has a default, so an empty environment yields a working
(silent) configuration.

Supported variables:
    RANGESTREAM_DEBUG_LOG   truthy ("1", "true", "yes", "on") enables stderr logging
    RANGESTREAM_LOG_LEVEL   logging level name (default "DEBUG")
    RANGESTREAM_LOG_FILE    optional path of a log file
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

# Mapping from setting names to environment variable names
SETTING_TO_ENV: Dict[str, str] = {
    "debug_log": "RANGESTREAM_DEBUG_LOG",
    "log_level": "RANGESTREAM_LOG_LEVEL",
    "log_file": "RANGESTREAM_LOG_FILE",
}

DEFAULTS: Dict[str, object] = {
    "debug_log": False,
    "log_level": "DEBUG",
    "log_file": None,
}

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class StreamSettings:
    """
    Logging-related settings for the package.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    debug_log: bool = False
    log_level: str = "DEBUG"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StreamSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (tests)

        Returns:
            StreamSettings with defaults for every unset variable
        """
        env = os.environ if environ is None else environ

        log_level = env.get(SETTING_TO_ENV["log_level"]) or DEFAULTS["log_level"]
        log_file = env.get(SETTING_TO_ENV["log_file"])

        return cls(
            debug_log=_parse_bool(env.get(SETTING_TO_ENV["debug_log"]), DEFAULTS["debug_log"]),
            log_level=log_level.strip().upper(),
            log_file=Path(log_file) if log_file else None,
        )

    @property
    def logging_enabled(self) -> bool:
        return self.debug_log or self.log_file is not None


_settings: Optional[StreamSettings] = None


def load_settings() -> StreamSettings:
    """Return the process-wide settings, reading the environment once."""
    global _settings
    if _settings is None:
        _settings = StreamSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next load re-reads the environment."""
    global _settings
    _settings = None
