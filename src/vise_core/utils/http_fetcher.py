# src/vise_core/utils/http_fetcher.py
"""
Асинхронная загрузка данных для SSR на базе httpx.

Используется в ``before_render`` для предзагрузки данных страницы
(initState). Ответ бэкенда ожидается в виде ``{code, msg, data}``.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .object import delete_invalid_key

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
NO_URL_MESSAGE = "No url provided in config."


def _parse_code(raw: Any) -> int:
    """Код из ответа бэкенда; всё, что не парсится как int, становится 500."""
    if isinstance(raw, bool):
        return 500
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 500


def _read_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except json.JSONDecodeError:
        return response.text


async def http_fetcher(
    config: Mapping[str, Any],
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    Выполнить HTTP запрос за данными для рендеринга.

    Args:
        config: Параметры запроса: ``url`` (обязателен), ``method``
                (по умолчанию GET), ``params`` (None-значения
                отбрасываются), ``headers``, ``json``, ``data``, ``timeout``
        client: Готовый httpx.AsyncClient (по умолчанию создаётся на запрос)

    Returns:
        ``{"code": int, "msg": str, "data": Any}``. Без url возвращается
        code=500 и msg "No url provided in config.".

    Raises:
        httpx.HTTPStatusError: Бэкенд ответил 4xx/5xx
        httpx.RequestError: Сетевая ошибка или таймаут

    Example:
        >>> result = await http_fetcher({"url": "https://api.example.com/page", "params": {"id": 1}})
        >>> result["code"]
        0
    """
    url = config.get("url")
    if not url:
        return {"code": 500, "msg": NO_URL_MESSAGE, "data": ""}

    request_kwargs: Dict[str, Any] = {
        "params": delete_invalid_key(dict(config.get("params") or {})),
        "headers": config.get("headers"),
    }
    for key in ("json", "data"):
        if config.get(key) is not None:
            request_kwargs[key] = config[key]

    method = str(config.get("method", "GET")).upper()
    timeout = config.get("timeout", DEFAULT_TIMEOUT)

    logger.debug("Fetching SSR data", extra={"method": method, "url": url})

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            response = await own_client.request(method, url, **request_kwargs)
    else:
        response = await client.request(method, url, timeout=timeout, **request_kwargs)

    response.raise_for_status()
    body = _read_body(response)

    if isinstance(body, dict):
        msg = body.get("msg")
        data = body.get("data")
        return {
            "code": _parse_code(body.get("code")),
            "msg": msg if msg is not None else "ok",
            "data": data if data is not None else body,
        }

    return {"code": 500, "msg": "ok", "data": body}
