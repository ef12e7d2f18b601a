"""Application configuration management using Dynaconf."""

import os
import sys
from pathlib import Path
from threading import Lock
from typing import Any

from dynaconf import Dynaconf

DEFAULT_CONFIG_FILE = "mibkit_config.yaml"


class AppConfig:
    """Singleton configuration manager for the MIB tooling."""

    _instance = None
    _lock = Lock()
    _initialized = False

    def get_platform_setting(self, key: str, default: Any = None) -> Any:
        """Get a platform-specific setting value."""
        platform_key = sys.platform  # e.g. 'linux', 'darwin', 'win32'
        value = self.get(key, {})
        if isinstance(value, dict):
            return value.get(platform_key, default)
        return default

    def __new__(cls, config_path: str = DEFAULT_CONFIG_FILE) -> "AppConfig":
        """Create or return the singleton instance of AppConfig."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._initialized = False
            return cls._instance

    def __init__(self, config_path: str = DEFAULT_CONFIG_FILE) -> None:
        """Initialize singleton settings once from the specified config path."""
        if self.__class__._initialized and hasattr(self, "settings"):
            return
        self._init_config(config_path)

    def _init_config(self, config_path: str) -> None:
        """Initialize the configuration from the specified file."""
        if self.__class__._initialized:
            return

        # If caller passed the default name, prefer data/mibkit_config.yaml if present
        if config_path == DEFAULT_CONFIG_FILE:
            data_path = Path("data") / DEFAULT_CONFIG_FILE
            if data_path.exists():
                config_path = str(data_path)

        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file {config_path} not found")

        self.settings = Dynaconf(settings_files=[config_path], environments=False)
        self.config_path = config_path
        self.__class__._initialized = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key."""
        return self.settings.get(key, default)

    def mib_dirs(self) -> list[str]:
        """Directories searched for MIB source files, platform directory last."""
        dirs = [str(d) for d in self.get("mib_dirs", []) or []]
        system_mib_dir = self.get_platform_setting("system_mib_dir")
        if isinstance(system_mib_dir, str) and system_mib_dir:
            dirs.append(system_mib_dir)
        return dirs

    def reload(self) -> None:
        """Reload the configuration from disk."""
        self.settings.reload()

    @classmethod
    def reset(cls) -> None:
        """Forget the singleton so the next construction reads config again."""
        with cls._lock:
            cls._instance = None
            cls._initialized = False
