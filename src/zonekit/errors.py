from __future__ import annotations


class ZoneKitError(Exception):
    """Base class for errors raised by zonekit."""


class ConfigError(ZoneKitError):
    """Raised when a settings file cannot be read or parsed."""
