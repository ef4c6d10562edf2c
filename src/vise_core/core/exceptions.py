"""
Иерархия исключений Vise Core.

Классификация:
- ViseException - базовое исключение, все ошибки движка наследуются от него
- FatalError (fatal=True) - ошибки конфигурации, запросы не обслуживаются
  пока конфигурация не исправлена

Ошибки рендеринга исключениями НЕ являются: они превращаются в
ErrorRenderResult внутри жизненного цикла. Исключения из остальных хуков
пробрасываются вызывающему коду как есть.
"""

from typing import Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ViseException(Exception):
    """Базовое исключение Vise Core."""

    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FatalError(ViseException):
    """
    Фатальная ошибка - сервер не может обслуживать запросы.

    Примеры: невалидное имя плагина, неизвестный хук.
    """
    fatal = True

class ConfigurationError(FatalError):
    """Ошибка конфигурации хуков или плагинов."""
    pass

class InvalidPluginNameError(ConfigurationError):
    """
    Имя плагина не проходит валидацию.

    Допустимые префиксы: ``vise-plugin-``, ``app-``, ``vise:``,
    за которыми следуют строчные буквы, цифры и дефисы внутри имени.

    Args:
        plugin_name: Имя плагина, не прошедшее проверку
    """

    def __init__(self, plugin_name: str):
        self.plugin_name = plugin_name
        super().__init__(f"illegal vise plugin name: {plugin_name}")

class UnknownHookError(ConfigurationError):
    """
    Обращение к хуку, которого нет в реестре.

    Args:
        hook_name: Идентификатор хука
    """

    def __init__(self, hook_name: str):
        self.hook_name = hook_name
        super().__init__(f"unknown hook: {hook_name}")

class RegistryFrozenError(ConfigurationError):
    """
    Попытка зарегистрировать callback после заморозки реестра.

    Реестр строится один раз при старте процесса и дальше только читается.
    """

    def __init__(self, hook_name: Optional[str] = None):
        self.hook_name = hook_name
        msg = "hook registry is frozen"
        if hook_name:
            msg += f", cannot tap '{hook_name}'"
        super().__init__(msg)

class ConfigValidationError(ConfigurationError):
    """Конфигурационный файл или переменные окружения невалидны."""
    pass
