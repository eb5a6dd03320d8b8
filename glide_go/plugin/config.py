"""Loading the plugin's configuration block from a host config file.

The host keeps per-plugin settings in .glide.yml:

    plugins:
      go:
        enableWorkspace: true
        enableTools: false

A missing file or a missing block yields the defaults.
"""

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from glide_go.plugin.errors import ConfigInvalidError
from glide_go.plugin.schemas import PluginConfig

logger = logging.getLogger(__name__)

PLUGIN_KEY = "go"


def parse_plugin_config(raw: Mapping[str, Any] | PluginConfig | None) -> PluginConfig:
    """Validate a raw mapping into PluginConfig, applying defaults for missing keys."""
    if isinstance(raw, PluginConfig):
        return raw
    if raw is None:
        return PluginConfig()
    if not isinstance(raw, Mapping):
        raise ConfigInvalidError(f"plugin config must be a mapping, got {type(raw).__name__}")
    try:
        return PluginConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigInvalidError(str(exc)) from exc


def load_plugin_config(path: str | Path) -> PluginConfig:
    """Read the plugins.go block of a .glide.yml file."""
    path = Path(path)
    if not path.is_file():
        logger.debug("Config file %s not found; using defaults", path)
        return PluginConfig()

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigInvalidError(f"{path}: invalid YAML: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigInvalidError(f"{path}: top level must be a mapping")

    plugins = document.get("plugins") or {}
    if not isinstance(plugins, dict):
        raise ConfigInvalidError(f"{path}: 'plugins' must be a mapping")

    return parse_plugin_config(plugins.get(PLUGIN_KEY))
