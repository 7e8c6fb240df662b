"""Configuration validation with schema definitions.

`ConfigField` / `ConfigItems` describe the accepted keys, `ConfigValidator`
reports type errors and suggests the closest known key on typos.
"""

import difflib
import logging
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, int, float, bool) or tuple of types for union
        default: Default value if not provided
        description: Human-readable description
    """

    name: str
    field_type: type | tuple[type, ...] = str
    default: Any = None
    description: str = ""

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'int or float')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class ConfigItems(list):
    """A list of ConfigField items with lookup by name."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    def get(self, name: str) -> ConfigField | None:
        """Get a ConfigField by name."""
        for prop in self:
            if prop.name == name:
                return prop
        return None


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Return the known key closest to `unknown_key`, if any is close enough."""
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        section: Config section name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates configuration against a schema."""

    def __init__(self, config: dict, section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            config: The configuration dictionary to validate
            section: Name of the section for error messages
            logger: Logger instance for warnings
        """
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate configuration against schema.

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []
        for field_def in schema:
            value = self.config.get(field_def.name)
            if value is None:
                continue
            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
        return errors

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        """Check if value matches expected type, return an error message if not."""
        expected = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if any(self._is_instance(value, typ) for typ in expected):
            return None
        suggestion = "Use true/false (without quotes)" if bool in expected else ""
        if suggestion == "" and (int in expected or float in expected):
            suggestion = f"Use {field_def.name} = 42 (without quotes)"
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
            suggestion,
        )

    @staticmethod
    def _is_instance(value: Any, typ: type) -> bool:  # noqa: ANN401
        """Loose type check: bool strings are bools, numeric strings are numbers."""
        if typ is bool:
            return isinstance(value, bool) or (isinstance(value, str) and value.lower() in BOOL_STRINGS)
        if typ in {int, float}:
            if isinstance(value, bool):
                return False
            if isinstance(value, int | float):
                return typ is float or isinstance(value, int)
            try:
                typ(value)
            except (ValueError, TypeError):
                return False
            return True
        return isinstance(value, typ)

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log warnings for unknown configuration keys.

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = [f.name for f in schema]

        for key in self.config:
            if key in known_keys:
                continue
            similar = _find_similar_key(key, known_keys)
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"
            self.log.warning(msg)
            warnings.append(msg)

        return warnings
