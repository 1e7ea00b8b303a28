"""Configuration loading for classloom.

Settings come from a YAML file (``classloom.yaml``) and are overridden by
explicit keyword arguments, which is how the CLI passes its flags.

File lookup order:
  1. explicit ``path`` argument
  2. CLASSLOOM_CONFIG env var
  3. ./classloom.yaml (only if present)
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..graph_builder.constants import DEFAULT_SYSTEM_NAMESPACES
from ..graph_builder.models import Visibility

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CLASSLOOM_CONFIG"
DEFAULT_CONFIG_FILE = "classloom.yaml"

_LIST_KEYS = ("type_names", "namespaces", "system_namespaces", "exclude")
_BOOL_KEYS = ("ignore_dependencies", "exclude_system_types", "use_symbols")


class ConfigError(ValueError):
    """Raised for unreadable config files or invalid settings."""


@dataclass
class GraphConfig:
    """Options consumed by the graph builder.

    Empty ``type_names`` / ``namespaces`` mean "no filter".
    """

    type_names: List[str] = field(default_factory=list)
    namespaces: List[str] = field(default_factory=list)
    min_visibility: Visibility = Visibility.PUBLIC
    ignore_dependencies: bool = False
    exclude_system_types: bool = False
    system_namespaces: List[str] = field(default_factory=lambda: list(DEFAULT_SYSTEM_NAMESPACES))
    use_symbols: bool = True
    exclude: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in _LIST_KEYS:
                if isinstance(value, str):
                    value = [value]
                if not isinstance(value, (list, tuple)):
                    raise ConfigError(f"'{key}' must be a list of strings")
                values[key] = [str(v) for v in value]
            elif key in _BOOL_KEYS:
                if not isinstance(value, bool):
                    raise ConfigError(f"'{key}' must be true or false")
                values[key] = value
            elif key == "min_visibility":
                try:
                    values[key] = Visibility.parse(value)
                except ValueError as e:
                    raise ConfigError(str(e)) from e
        return cls(**values)

    def merged(self, **overrides: Any) -> "GraphConfig":
        """Return a copy with non-None overrides applied."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GraphConfig.from_dict(data)


def get_config_path(path: Optional[str] = None) -> Optional[Path]:
    """Resolve which config file to read, or None for built-in defaults."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    return default if default.is_file() else None


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """Read a YAML config file into a plain dict.

    Settings may sit under a top-level ``classloom:`` key or at the root.
    """
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    section = data.get("classloom", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'classloom' section in {config_file} must be a mapping")
    return section


def load_config(path: Optional[str] = None, **overrides: Any) -> GraphConfig:
    """Load settings from YAML and apply keyword overrides.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    config_file = get_config_path(path)
    data: Dict[str, Any] = {}
    if config_file is not None:
        logger.info(f"Loading config from {config_file}")
        data = load_config_file(config_file)

    config = GraphConfig.from_dict(data)
    return config.merged(**overrides)
