"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Optional, Tuple

from pydantic import ValidationError

from ..config import LifecycleConfig
from ..exceptions import ConfigValidationError
from ..logging.config import LoggingConfig
from .validator import ViseSettings


def load_from_env(
    env_file: Optional[str] = None,
    **overrides
) -> Tuple[LifecycleConfig, Optional[LoggingConfig]]:
    """
    Load LifecycleConfig and LoggingConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (VISE_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Explicit config overrides (same names as ViseSettings fields)

    Returns:
        (LifecycleConfig, LoggingConfig or None when every handler is disabled)

    Raises:
        ConfigValidationError: Environment or overrides are invalid

    Example:
        >>> lifecycle_config, logging_config = load_from_env()

        >>> # Load with overrides
        >>> lifecycle_config, _ = load_from_env(full_log=True, log_level="DEBUG")
    """
    try:
        settings = ViseSettings(_env_file=env_file) if env_file else ViseSettings()
        lifecycle_settings = settings.to_lifecycle_settings()
        logging_settings = settings.to_logging_settings()
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid environment configuration: {e}") from e

    logging_config = None
    try:
        if logging_settings:
            logging_config = LoggingConfig.create(
                level=overrides.get('log_level', logging_settings.level),
                format=overrides.get('log_format', logging_settings.format),
                enable_console=overrides.get('log_enable_console', logging_settings.enable_console),
                enable_file=overrides.get('log_enable_file', logging_settings.enable_file),
                file_path=overrides.get('log_file_path', logging_settings.file_path),
                max_bytes=overrides.get('log_max_bytes', logging_settings.max_bytes),
                backup_count=overrides.get('log_backup_count', logging_settings.backup_count),
                enable_correlation_id=overrides.get('log_enable_correlation_id', logging_settings.enable_correlation_id),
            )

        config = LifecycleConfig(
            full_log=overrides.get('full_log', lifecycle_settings.full_log),
            log_truncate=overrides.get('log_truncate', lifecycle_settings.log_truncate),
            content_type=overrides.get('content_type', lifecycle_settings.content_type),
            render_by_header=overrides.get('render_by_header', lifecycle_settings.render_by_header),
            default_title=overrides.get('default_title', lifecycle_settings.default_title),
            logging=logging_config,
        )
    except ValueError as e:
        raise ConfigValidationError(f"Invalid configuration override: {e}") from e

    return config, logging_config


def print_config_summary(config: LifecycleConfig):
    """
    Print configuration summary.

    Useful for debugging and verification.

    Example:
        >>> config, _ = load_from_env()
        >>> print_config_summary(config)
        LifecycleConfig:
          full_log: False
          log_truncate: 100
          ...
    """
    print("LifecycleConfig:")
    print(f"  full_log: {config.full_log}")
    print(f"  log_truncate: {config.log_truncate}")
    print(f"  content_type: {config.content_type}")
    print(f"  render_by_header: {config.render_by_header}")
    print(f"  default_title: {config.default_title!r}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
