from .config_loader import ConfigError, GraphConfig, get_config_path, load_config

__all__ = ["ConfigError", "GraphConfig", "get_config_path", "load_config"]
