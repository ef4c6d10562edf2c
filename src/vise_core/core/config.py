"""
Система конфигурации для Vise Core.

Все конфиги immutable (frozen dataclasses): реестр хуков и конфигурация
разделяются между конкурентными запросами только на чтение.
"""

from dataclasses import dataclass, replace
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"
DEFAULT_RENDER_BY_HEADER = "x-render-by"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LIFECYCLE CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class LifecycleConfig:
    """
    Конфигурация жизненного цикла запроса.

    Args:
        full_log: Логировать результаты хуков полностью, без усечения
        log_truncate: Длина префикса для усечения HTML/контента в логах
        content_type: Content-Type синтезированных ответов
        render_by_header: Заголовок с именем плагина-источника (None = не добавлять)
        default_title: Заголовок страницы по умолчанию (extra.title)
        logging: Конфигурация логирования (None = логгер по умолчанию)

    Examples:
        >>> LifecycleConfig(full_log=True)
        >>> LifecycleConfig(log_truncate=200, render_by_header=None)
    """
    full_log: bool = False
    log_truncate: int = 100
    content_type: str = DEFAULT_CONTENT_TYPE
    render_by_header: Optional[str] = DEFAULT_RENDER_BY_HEADER
    default_title: str = ""
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация."""
        if self.log_truncate <= 0:
            raise ValueError("log_truncate must be positive")
        if not self.content_type:
            raise ValueError("content_type must not be empty")
        if self.render_by_header is not None and not self.render_by_header.strip():
            raise ValueError("render_by_header must not be blank")

    def with_full_log(self, full_log: bool = True) -> 'LifecycleConfig':
        """
        Создать новый конфиг с изменённым режимом логирования.

        Example:
            >>> debug_config = config.with_full_log()
        """
        return replace(self, full_log=full_log)
