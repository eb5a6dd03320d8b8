"""Host-facing plugin shell: metadata, configuration, detect and execute.

Public API:
    GoPlugin, PluginConfig, load_plugin_config
"""

from glide_go.plugin.config import load_plugin_config, parse_plugin_config
from glide_go.plugin.errors import ConfigInvalidError, PluginError, PluginNotServingError
from glide_go.plugin.schemas import PluginConfig
from glide_go.plugin.shell import GoPlugin

__all__ = [
    "ConfigInvalidError",
    "GoPlugin",
    "PluginConfig",
    "PluginError",
    "PluginNotServingError",
    "load_plugin_config",
    "parse_plugin_config",
]
