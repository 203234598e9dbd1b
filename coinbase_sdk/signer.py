"""
Подпись запросов HMAC-SHA256 в формате заголовка `CB-ACCESS-SIGN`.
"""

from __future__ import annotations

import hashlib
import hmac


def sign(secret: str, timestamp: int, method: str, path: str, body: bytes = b"") -> str:
    """
    Посчитать подпись запроса.

    Сообщение: десятичный `timestamp` + метод в верхнем регистре + путь с
    query-строкой ровно в том виде, в каком он уйдёт в сеть, + сырые байты тела.

    Args:
        secret: Секрет API (непустой).
        timestamp: Секунды от эпохи, взятые в момент сборки запроса.
        method: HTTP-метод.
        path: Путь и query-строка, например `"/v2/accounts?limit=100"`.
        body: Тело запроса; пустое для GET.

    Returns:
        Подпись в нижнем регистре, 64 hex-символа.
    """
    message = f"{timestamp}{method.upper()}{path}".encode("utf-8") + body
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
