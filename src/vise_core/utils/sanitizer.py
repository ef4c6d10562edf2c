# src/vise_core/utils/sanitizer.py
"""
Утилита для маскирования чувствительных данных в логах хуков.

Трассировка хуков содержит заголовки HTTP запроса (Cookie, Authorization),
RenderContext.extra и initState страницы, поэтому всё, что попадает в
лог, сначала проходит через mask_sensitive_data().
"""

import re
from typing import Any, Dict, Mapping, Set


MASK = "***REDACTED***"

# Чувствительные ключи (case-insensitive, частичное совпадение).
# 'key' в список не входит: CacheInfo.key
SENSITIVE_KEYS: Set[str] = {
    # Пароли
    'password', 'passwd', 'pwd',
    # Токены
    'token', 'access_token', 'refresh_token', 'jwt', 'id_token',
    'csrf', 'xsrf',
    # Секреты и ключи API
    'secret', 'api_key', 'apikey', 'private_key',
    # Аутентификация
    'authorization', 'proxy-authorization', 'credentials',
    # Сессии и куки
    'cookie', 'set-cookie', 'session', 'sessionid', 'ticket',
    # Платёжные данные
    'credit_card', 'card_number', 'cvv', 'ssn',
}

# Регулярные выражения для sensitive данных внутри строк
SENSITIVE_PATTERNS = [
    # Bearer / Basic в значениях заголовков
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + MASK),
    # key=value в query string или теле
    (re.compile(r'((?:api[_-]?key|token|password|session(?:id)?)=)([^\s&,;]+)', re.IGNORECASE), r'\1' + MASK),
]


def mask_sensitive_data(data: Any, mask: str = MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках и строках.

    Args:
        data: Данные для маскирования (Mapping, list, tuple, str, скаляр)
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными значениями; исходные данные не меняются

    Examples:
        >>> mask_sensitive_data({"Cookie": "uid=1", "Accept": "text/html"})
        {'Cookie': '***REDACTED***', 'Accept': 'text/html'}

        >>> mask_sensitive_data("/page?token=abc&lang=en")
        '/page?token=***REDACTED***&lang=en'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _mask_string(data, mask)

    if isinstance(data, Mapping):
        return _mask_mapping(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Прочие объекты возвращаем как есть
    return data


def _mask_mapping(data: Mapping, mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if _is_sensitive_key(str(key).lower()):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str, mask: str) -> str:
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        if mask != MASK:
            replacement = replacement.replace(MASK, mask)
        result = pattern.sub(replacement, result)
    return result


def _is_sensitive_key(key: str) -> bool:
    """Точное или частичное совпадение ключа (в нижнем регистре) с SENSITIVE_KEYS."""
    if key in SENSITIVE_KEYS:
        return True
    return any(sensitive_key in key for sensitive_key in SENSITIVE_KEYS)


def mask_headers(headers: Mapping[str, Any], mask: str = MASK) -> Dict[str, Any]:
    """
    Маскирует чувствительные заголовки HTTP запроса.

    Examples:
        >>> mask_headers({"Authorization": "Bearer t0k3n", "User-Agent": "curl/8"})
        {'Authorization': '***REDACTED***', 'User-Agent': 'curl/8'}
    """
    return _mask_mapping(headers, mask)


def add_sensitive_keys(*keys: str) -> None:
    """
    Добавляет ключи в SENSITIVE_KEYS (например, собственные заголовки приложения).

    Examples:
        >>> add_sensitive_keys('x-internal-user')
    """
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())


def remove_sensitive_keys(*keys: str) -> None:
    """Удаляет ключи из SENSITIVE_KEYS."""
    for key in keys:
        SENSITIVE_KEYS.discard(key.lower())


def get_sensitive_keys() -> Set[str]:
    """Возвращает копию текущего набора чувствительных ключей."""
    return SENSITIVE_KEYS.copy()
