"""
Pydantic validators for environment configuration.

Provides validated models for the lifecycle and logging options.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LifecycleSettings(BaseModel):
    """Lifecycle configuration from environment."""

    full_log: bool = Field(default=False, description="Log complete hook results")
    log_truncate: int = Field(default=100, gt=0, description="Prefix length of truncated log fields")
    content_type: str = Field(default="text/html; charset=utf-8", min_length=1)
    render_by_header: Optional[str] = Field(default="x-render-by")
    default_title: str = Field(default="")


class LoggingSettings(BaseModel):
    """Logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text", "colored"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """Validate file_path is required when enable_file=True."""
        if info.data.get('enable_file') and not v:
            raise ValueError("file_path is required when enable_file=True")
        return v


class ViseSettings(BaseSettings):
    """
    Vise configuration from environment variables.

    Reads from:
    1. Environment variables (VISE_*)
    2. .env file
    3. Defaults

    Example .env file:
        VISE_FULL_LOG=false
        VISE_LOG_TRUNCATE=200
        VISE_RENDER_BY_HEADER=x-render-by
        VISE_LOG_LEVEL=DEBUG
        VISE_LOG_FORMAT=json

    Usage:
        >>> settings = ViseSettings()
        >>> settings.log_truncate
        100
    """

    model_config = SettingsConfigDict(
        env_prefix='VISE_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Lifecycle
    full_log: bool = Field(default=False)
    log_truncate: int = Field(default=100, gt=0)
    content_type: str = Field(default="text/html; charset=utf-8", min_length=1)
    render_by_header: Optional[str] = Field(default="x-render-by")
    default_title: str = Field(default="")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('render_by_header')
    @classmethod
    def validate_render_by_header(cls, v: Optional[str]) -> Optional[str]:
        """Empty header name disables the header."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def to_lifecycle_settings(self) -> LifecycleSettings:
        """Convert to LifecycleSettings."""
        return LifecycleSettings(
            full_log=self.full_log,
            log_truncate=self.log_truncate,
            content_type=self.content_type,
            render_by_header=self.render_by_header,
            default_title=self.default_title,
        )

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_correlation_id=self.log_enable_correlation_id,
        )
