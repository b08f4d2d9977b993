"""Configuration hierarchy — merges sources in priority order.

Transformer options (``merge_options``), earlier wins:
  1. Local options supplied for this content type
  2. Plugin options supplied by the host
  3. Package defaults

CLI settings (``load_config_hierarchy``), later overrides earlier:
  1. Package defaults
  2. Global config   (~/.asciidoc-transformer/config.yaml)
  3. Project config  (./asciidoc-transformer.yaml)
  4. Environment variables (ASCIIDOC_TRANSFORMER_*)
  5. Runtime arguments
"""

from __future__ import annotations

import copy
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from asciidoc_transformer.config.defaults import get_default_options, get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".asciidoc-transformer" / "config.yaml"
_PROJECT_CONFIG_NAME = "asciidoc-transformer.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "ASCIIDOC_TRANSFORMER_WORDS_PER_MINUTE": "words_per_minute",
    "ASCIIDOC_TRANSFORMER_CACHE_MAX_ENTRIES": "cache_max_entries",
    "ASCIIDOC_TRANSFORMER_CACHE_DISABLED": "cache_disabled",
    "ASCIIDOC_TRANSFORMER_LOG_LEVEL": "log_level",
}

_INT_KEYS = {"words_per_minute", "cache_max_entries"}

_TRUTHY = {"1", "true", "yes", "on"}


def merge_options(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-merge option layers, the first layer taking precedence.

    A key is only filled from a later layer when every earlier layer leaves
    it unset (absent or ``None``). Nested mappings merge key by key.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            _fill_missing(merged, layer)
    return merged


def merge_with_defaults(
    local_options: Mapping[str, Any] | None,
    options: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Merge local and plugin options over the built-in defaults."""
    return merge_options(local_options, options, get_default_options())


def _fill_missing(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if current is None:
            if value is not None:
                target[key] = copy.deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, Mapping):
            _fill_missing(current, value)


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge CLI configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments (highest priority)
    # Filter out None values — only override when explicitly set
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for asciidoc-transformer.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read ASCIIDOC_TRANSFORMER_* environment variables.

    Numeric settings that do not parse are logged and left to the lower layers.
    """
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        try:
            result[config_key] = _coerce_env_value(config_key, value)
        except ValueError:
            logger.warning("Ignoring %s=%r: expected an integer", env_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    if key == "cache_disabled":
        return value.strip().lower() in _TRUTHY
    if key in _INT_KEYS:
        return int(value)
    return value
