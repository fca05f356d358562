"""Configuration loader for the name cache.

This module handles loading configuration from files and environment variables,
with validation and hot reload capabilities.
"""

import json
import logging
import os
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .schema import (
    CacheConfig,
    ExclusionConfig,
    LoggingConfig,
    NameCacheConfig,
    NetworkConfig,
    ResolverConfig,
    create_default_config,
)

ENV_PREFIX = "DNS_NAMECACHE_"

# fields given as comma-separated lists in environment variables
LIST_FIELDS = {("resolver", "nameservers"), ("exclusion", "patterns")}

FILE_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with hot reload support."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        enable_hot_reload: bool = False,
        reload_callback: Optional[Callable[[NameCacheConfig], None]] = None,
    ):
        """Initialize configuration loader.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            enable_hot_reload: Enable file watching for hot reload
            reload_callback: Callback function called when config changes
        """
        self.config_file = config_file
        self.enable_hot_reload = enable_hot_reload
        self.reload_callback = reload_callback
        self._config: Optional[NameCacheConfig] = None
        self._observer: Optional[Observer] = None
        self._last_reload_time = 0.0

    def load_config(self) -> NameCacheConfig:
        """Load configuration from file and environment variables.

        Returns:
            Loaded and validated name cache configuration

        Raises:
            FileNotFoundError: If config file is specified but not found
            ValueError: If configuration is invalid
            yaml.YAMLError: If YAML parsing fails
            json.JSONDecodeError: If JSON parsing fails
        """
        # Defaults first, every section present
        config_dict = asdict(create_default_config())

        # File values win over defaults
        if self.config_file:
            file_config = self._load_from_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        # Environment wins over the file
        config_dict = self._apply_env_overrides(config_dict)

        # Section dataclasses validate on construction
        self._config = self._dict_to_config(config_dict)

        return self._config

    def start_hot_reload(self) -> None:
        """Start file watching for hot reload."""
        if not self.enable_hot_reload or not self.config_file:
            return

        config_path = Path(self.config_file)
        if not config_path.exists():
            return

        event_handler = ConfigFileHandler(str(config_path), self._on_config_change)
        self._observer = Observer()
        self._observer.schedule(event_handler, str(config_path.parent), recursive=False)
        self._observer.start()

    def stop_hot_reload(self) -> None:
        """Stop file watching."""
        if self._observer and self._observer.is_alive():
            self._observer.stop()
            self._observer.join()

    def get_config(self) -> Optional[NameCacheConfig]:
        """Get current configuration."""
        return self._config

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file.

        Raises:
            FileNotFoundError: If file is not found
            ValueError: If file format is not supported
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        content = path.read_text(encoding="utf-8")

        parser = FILE_PARSERS.get(path.suffix.lower())
        if parser is not None:
            parsed = parser(content)
        else:
            # unknown extension: YAML is a superset of most JSON
            try:
                parsed = yaml.safe_load(content)
            except yaml.YAMLError:
                try:
                    parsed = json.loads(content)
                except json.JSONDecodeError:
                    raise ValueError(f"Unsupported file format: {file_path}")

        # an empty file parses to None
        return parsed if isinstance(parsed, dict) else {}

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> NameCacheConfig:
        """Convert dictionary to configuration object.

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            return NameCacheConfig(
                cache=CacheConfig(**config_dict.get("cache", {})),
                resolver=ResolverConfig(**config_dict.get("resolver", {})),
                exclusion=ExclusionConfig(**config_dict.get("exclusion", {})),
                network=NetworkConfig(**config_dict.get("network", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as e:
            # unknown keys in a section
            raise ValueError(f"Invalid configuration: {e}") from e

    def _merge_configs(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Merge two configuration dictionaries, override wins."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Environment variables use the format DNS_NAMECACHE_<SECTION>_<KEY>
        For example: DNS_NAMECACHE_CACHE_POSITIVE_MAX_SIZE=5000
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            key_parts = env_key[len(ENV_PREFIX) :].lower().split("_")
            if len(key_parts) < 2:
                continue

            section = key_parts[0]
            config_key = "_".join(key_parts[1:])

            if not isinstance(config_dict.get(section), dict):
                logger.warning(f"Ignoring unknown configuration section in {env_key}")
                continue

            if (section, config_key) in LIST_FIELDS:
                value = [s.strip() for s in env_value.split(",") if s.strip()]
            else:
                value = self._convert_env_value(env_value)

            config_dict[section][config_key] = value

        return config_dict

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable value to bool, int, float or str."""
        lowered = value.lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False

        for convert in (int, float):
            try:
                return convert(value)
            except ValueError:
                continue

        return value

    def _on_config_change(self, file_path: str) -> None:
        """Handle configuration file change event."""
        # Debounce rapid changes
        current_time = time.time()
        if current_time - self._last_reload_time < 1.0:
            return
        self._last_reload_time = current_time

        try:
            new_config = self.load_config()
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Error reloading configuration from {file_path}: {e}")
            return

        if self.reload_callback:
            self.reload_callback(new_config)

        logger.info(f"Configuration reloaded from {file_path}")


class ConfigFileHandler(FileSystemEventHandler):
    """File system event handler for configuration changes."""

    def __init__(self, config_path: str, callback: Callable[[str], None]):
        """Initialize handler.

        Args:
            config_path: Watched configuration file
            callback: Function to call when the file changes
        """
        self.config_path = os.path.abspath(config_path)
        self.callback = callback

    def on_modified(self, event: Any) -> None:
        """Handle file modification event."""
        if not event.is_directory:
            self._dispatch(event.src_path)

    def on_moved(self, event: Any) -> None:
        """Editors that save by renaming a temp file over the config."""
        if not event.is_directory:
            self._dispatch(event.dest_path)

    def _dispatch(self, path: str) -> None:
        if os.path.abspath(path) == self.config_path:
            self.callback(path)
