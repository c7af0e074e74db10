"""Settings dataclass for SPINTABLE configuration.

This module defines the Settings dataclass that holds the tunables of the
spinner render loop, and loads them from ``SPINTABLE_*`` environment
variables.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, fields

from spintable.utils.errors import ConfigurationError

ENV_PREFIX = "SPINTABLE_"

UNICODE_RUNES: tuple[str, ...] = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
ASCII_RUNES: tuple[str, ...] = ("|", "/", "-", "\\")

_GLYPH_STYLES = ("auto", "unicode", "ascii")
_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass
class Settings:
    """Configuration settings for SPINTABLE.

    Attributes:
        period: Seconds between two animation ticks of the render loop
        glyph_style: Spinner rune set: "unicode", "ascii" or "auto"
            ("auto" picks ascii when stdout is not UTF encoded)
        auto_debrief: Default for SpinGroup/SpinTable auto_debrief
        empty_output_placeholder: Text shown in failure reports for a
            captured stream that is empty or whitespace-only
    """

    period: float = 0.1
    glyph_style: str = "auto"
    auto_debrief: bool = True
    empty_output_placeholder: str = "(empty)"

    # Environment key to attribute mapping
    _key_mapping: dict[str, str] = field(
        default_factory=lambda: {
            "PERIOD": "period",
            "GLYPHS": "glyph_style",
            "AUTO_DEBRIEF": "auto_debrief",
            "EMPTY_OUTPUT": "empty_output_placeholder",
        },
        repr=False,
    )

    def __post_init__(self) -> None:
        if self.period <= 0:
            raise ConfigurationError(f"period must be positive, got {self.period}")
        if self.glyph_style not in _GLYPH_STYLES:
            raise ConfigurationError(
                f"Invalid glyph style '{self.glyph_style}'. "
                f"Valid options: {', '.join(_GLYPH_STYLES)}"
            )

    def get_attribute_for_key(self, key: str) -> str | None:
        """Get the attribute name for a config key (without the env prefix)."""
        return self._key_mapping.get(key)

    @classmethod
    def get_config_keys(cls) -> list[str]:
        """Get list of all valid configuration keys."""
        temp = cls()
        return list(temp._key_mapping.keys())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``SPINTABLE_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings with every present variable applied

        Raises:
            ConfigurationError: If a variable holds a value of the wrong type
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        types = {f.name: f.type for f in fields(cls)}
        values: dict[str, object] = {}

        for key in cls.get_config_keys():
            raw = environ.get(f"{ENV_PREFIX}{key}")
            if raw is None:
                continue
            attr = defaults.get_attribute_for_key(key)
            if attr is None:
                raise ConfigurationError(f"Unknown configuration key: {key}")
            values[attr] = _coerce(f"{ENV_PREFIX}{key}", raw, types[attr])

        return cls(**values)  # type: ignore[arg-type]

    def uses_ascii_glyphs(self) -> bool:
        """Whether the spinner should animate with ASCII runes."""
        if self.glyph_style == "auto":
            encoding = getattr(sys.stdout, "encoding", None) or ""
            return "UTF" not in encoding.upper()
        return self.glyph_style == "ascii"

    def runes(self) -> tuple[str, ...]:
        """Uncolored spinner frames for the configured glyph style."""
        return ASCII_RUNES if self.uses_ascii_glyphs() else UNICODE_RUNES


def _coerce(name: str, raw: str, annotation: object) -> object:
    """Convert an environment string to the type named by a field annotation."""
    value = raw.strip()
    if annotation in (bool, "bool"):
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"{name} must be a boolean, got '{raw}'")
    if annotation in (float, "float"):
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(f"{name} must be a number, got '{raw}'") from e
    if annotation in (str, "str") and name.endswith("GLYPHS"):
        return value.lower()
    return raw


_settings: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get the process settings, loading them from the environment once."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = Settings.from_env()
        return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings
    with _settings_lock:
        _settings = None


__all__ = [
    "Settings",
    "ENV_PREFIX",
    "UNICODE_RUNES",
    "ASCII_RUNES",
    "get_settings",
    "reset_settings",
]
