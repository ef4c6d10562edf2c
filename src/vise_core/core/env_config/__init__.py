"""
Environment configuration system for Vise Core.

Load configuration from .env files, environment variables and config files.

Example:
    >>> from vise_core.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> # Load from .env
    >>> lifecycle_config, logging_config = load_from_env()
    >>>
    >>> # Load with overrides
    >>> lifecycle_config, _ = load_from_env(full_log=True)
    >>>
    >>> # Load a server config file with router bases
    >>> app_config = ConfigFileLoader.from_file("vise.yaml")
"""

from .loader import load_from_env, print_config_summary
from .validator import ViseSettings, LifecycleSettings, LoggingSettings
from .file_loader import AppConfigFile, ConfigFileLoader

__all__ = [
    # Main loader
    "load_from_env",
    "print_config_summary",
    # Validators
    "ViseSettings",
    "LifecycleSettings",
    "LoggingSettings",
    # Config files
    "AppConfigFile",
    "ConfigFileLoader",
]
