"""
Configuration file loader for YAML and JSON files.

Reads the ``vise`` section of a server config file: lifecycle options,
logging and the router base of every app.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..config import LifecycleConfig
from ..exceptions import ConfigValidationError
from ..logging import LoggingConfig

CONFIG_FILE_ENV = "VISE_CONFIG_FILE"

RouterBase = Union[str, List[str]]


@dataclass(frozen=True)
class AppConfigFile:
    """
    Parsed server config file.

    Attributes:
        lifecycle: Lifecycle configuration
        logging: Logging configuration (None = not configured)
        router_base: App name -> router base (string or list of patterns),
                     in declared order; input of match_app_for_url()
    """
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)
    logging: Optional[LoggingConfig] = None
    router_base: Dict[str, RouterBase] = field(default_factory=dict)


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Supports YAML and JSON formats with automatic format detection.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("vise.yaml")
        >>> config = ConfigFileLoader.from_json("vise.json")
        >>> config = ConfigFileLoader.from_file("vise.yaml")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From VISE_CONFIG_FILE env var
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> AppConfigFile:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> AppConfigFile:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> AppConfigFile:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path() -> Optional[AppConfigFile]:
        """Загрузить из пути указанного в VISE_CONFIG_FILE; None если переменная не задана."""
        config_path = os.environ.get(CONFIG_FILE_ENV)
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _section(config_data: Dict[str, Any], name: str, source: str) -> Dict[str, Any]:
        section = config_data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigValidationError(f"{name} must be a dictionary in {source}")
        return section

    @staticmethod
    def _router_base(config_data: Dict[str, Any], source: str) -> Dict[str, RouterBase]:
        router_base = ConfigFileLoader._section(config_data, "router_base", source)
        result: Dict[str, RouterBase] = {}
        for app_name, base in router_base.items():
            if isinstance(base, str):
                result[str(app_name)] = base
            elif isinstance(base, list) and all(isinstance(item, str) for item in base):
                result[str(app_name)] = list(base)
            else:
                raise ConfigValidationError(
                    f"router_base of '{app_name}' must be a string or a list of patterns in {source}"
                )
        return result

    @staticmethod
    def _build_config(data: Any, source: str) -> AppConfigFile:
        """
        Build AppConfigFile from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        if isinstance(data, dict) and "vise" in data:
            config_data = data["vise"]
        else:
            config_data = data

        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        try:
            lifecycle_data = ConfigFileLoader._section(config_data, "lifecycle", source)
            logging_cfg = None
            if "logging" in config_data:
                logging_data = ConfigFileLoader._section(config_data, "logging", source)
                logging_cfg = LoggingConfig.create(
                    level=logging_data.get("level", "INFO"),
                    format=logging_data.get("format", "text"),
                    enable_console=logging_data.get("enable_console", True),
                    enable_file=logging_data.get("enable_file", False),
                    file_path=logging_data.get("file_path"),
                    enable_correlation_id=logging_data.get("enable_correlation_id", True),
                    hooks=logging_data.get("hooks"),
                )

            lifecycle_cfg = LifecycleConfig(
                full_log=lifecycle_data.get("full_log", False),
                log_truncate=lifecycle_data.get("log_truncate", 100),
                content_type=lifecycle_data.get("content_type", "text/html; charset=utf-8"),
                render_by_header=lifecycle_data.get("render_by_header", "x-render-by"),
                default_title=lifecycle_data.get("default_title", ""),
                logging=logging_cfg,
            )

            return AppConfigFile(
                lifecycle=lifecycle_cfg,
                logging=logging_cfg,
                router_base=ConfigFileLoader._router_base(config_data, source),
            )

        except (ValueError, TypeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}")
