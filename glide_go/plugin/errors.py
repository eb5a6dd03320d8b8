"""Errors raised by the plugin shell.

Each class carries a stable `kind` tag that the HTTP layer echoes to the
host alongside the message.
"""


class PluginError(Exception):
    kind = "plugin-error"


class ConfigInvalidError(PluginError):
    """Raised when the host sends a configuration that fails validation."""

    kind = "config-invalid"


class PluginNotServingError(PluginError):
    """Raised by the health check once the plugin has begun shutting down."""

    kind = "not-serving"
