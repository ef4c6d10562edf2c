"""
Настройки логирования жизненного цикла.

Один LoggingConfig описывает, куда пишутся строки одного
LifecycleOrchestrator: уровень, формат, консоль и/или файл с ротацией,
correlation id запроса и, при необходимости, только трассировка хуков.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и как логирует жизненный цикл.

    Attributes:
        level: Минимальный уровень; фазы жизненного цикла пишутся на DEBUG,
               трассировка хуков и "Request finished" на INFO
        format: json для сборщиков логов, text/colored для терминала
        enable_console: Писать в stderr
        enable_file: Писать в файл с ротацией (нужен file_path)
        file_path: Путь к файлу лога
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        enable_correlation_id: Добавлять id запроса, выданный start()
        extra_fields: Статичные поля каждой записи (service, environment, ...)
        hooks: None пишет всё; кортеж оставляет только трассировку хуков
               (пустой кортеж: все хуки, иначе только перечисленные)

    Raises:
        ValueError: enable_file без file_path, max_bytes <= 0, backup_count < 0

    Example:
        >>> # Only the render path of a busy server, as JSON lines in a file
        >>> config = LoggingConfig.create(
        ...     format="json",
        ...     enable_console=False,
        ...     enable_file=True,
        ...     file_path="/var/log/vise/render.log",
        ...     hooks=["render", "after_render"],
        ... )
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)
    hooks: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")
        if isinstance(self.hooks, str):
            object.__setattr__(self, "hooks", (self.hooks,))
        elif self.hooks is not None:
            object.__setattr__(self, "hooks", tuple(str(name) for name in self.hooks))

    @property
    def hooks_only(self) -> bool:
        """Handlers drop everything except hook trace records."""
        return self.hooks is not None

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = 5,
        enable_correlation_id: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None,
        hooks: Optional[Iterable[str]] = None,
    ) -> "LoggingConfig":
        """
        Build a config from plain strings (env variables, config files).

        Level and format are case-insensitive.

        Raises:
            ValueError: On unknown level or format
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            enable_file=enable_file,
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            enable_correlation_id=enable_correlation_id,
            extra_fields=extra_fields or {},
            hooks=hooks,
        )
