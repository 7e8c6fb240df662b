"""Configuration wrapper providing typed access with schema defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging

    from .validation import ConfigItems

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_STRINGS", "BOOL_TRUE_STRINGS", "Configuration", "coerce_to_bool"]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """Settings of the running instance.

    Values come from the config file, then from the command line, then from
    the schema defaults.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Optional list of ConfigField definitions for automatic defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema_defaults: dict[str, ConfigValueType] = {}
        if schema:
            self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value, falling back to the schema default then to `default`."""
        if name in self:
            return dict.get(self, name)  # type: ignore[return-value]
        if name in self._schema_defaults:
            return self._schema_defaults[name]
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing (see `coerce_to_bool`)."""
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value, `default` if missing or invalid."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)
            return default

    def get_float(self, name: str, default: float = 0.0) -> float:
        """Get a float value, `default` if missing or invalid."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return float(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid float value for %s: %s", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)
