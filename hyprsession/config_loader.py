"""Configuration file loading."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import Configuration
from .constants import CONFIG_FILE
from .models import ConfigError
from .schema import SESSION_CONFIG_SCHEMA
from .validation import ConfigValidator

if TYPE_CHECKING:
    import logging

__all__ = ["SECTION", "load_config"]

SECTION = "hyprsession"


def _load_config_file(fname: Path, log: logging.Logger) -> dict[str, Any]:
    """Read the `[hyprsession]` table of a TOML file, empty if the file is missing.

    Raises:
        ConfigError: If the file has syntax errors
    """
    if not fname.exists():
        log.debug("No config file at %s", fname)
        return {}
    log.debug("Loading %s", fname)
    with fname.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.critical("Problem reading %s: %s", fname, e)
            raise ConfigError(str(e)) from e
    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        log.critical("[%s] must be a table in %s", SECTION, fname)
        msg = f"invalid [{SECTION}] section"
        raise ConfigError(msg)
    return section


def load_config(log: logging.Logger, config_filename: str = "", overrides: dict[str, Any] | None = None) -> Configuration:
    """Build the configuration from the file and the command line overrides.

    Args:
        log: Logger for status and error messages
        config_filename: Optional config file path, defaults to CONFIG_FILE
        overrides: Values given on the command line, `None` values are ignored

    Raises:
        ConfigError: If the file can't be parsed or a value has the wrong type
    """
    fname = Path(os.path.expandvars(config_filename)).expanduser() if config_filename else CONFIG_FILE
    raw = _load_config_file(fname, log)
    raw.update({key: value for key, value in (overrides or {}).items() if value is not None})

    validator = ConfigValidator(raw, SECTION, log)
    validator.warn_unknown_keys(SESSION_CONFIG_SCHEMA)
    errors = validator.validate(SESSION_CONFIG_SCHEMA)
    for error in errors:
        log.error(error)
    if errors:
        msg = f"{len(errors)} config error(s)"
        raise ConfigError(msg)

    return Configuration(raw, logger=log, schema=SESSION_CONFIG_SCHEMA)
