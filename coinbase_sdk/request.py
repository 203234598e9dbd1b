"""
Сборка запросов к API: учётные данные, дескриптор запроса и `RequestBuilder`.

Builder собирает абсолютный URL из базового адреса и относительного пути,
добавляет служебные заголовки и, если заданы учётные данные, подписывает
запрос. Путь с query-строкой для подписи берётся из того же объекта URL,
который затем уходит в транспорт, поэтому подписанное и отправленное
значения совпадают побайтно.
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from .endpoints import DEFAULT_API_VERSION, USER_AGENT
from .exceptions import ConfigurationError, RequestBuildError
from .signer import sign


class Credentials(BaseModel):
    """
    Ключ и секрет API.

    Неизменяемы и живут столько же, сколько клиент. Секрет хранится как
    `SecretStr`, поэтому не попадает в `repr` и логи.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    secret: SecretStr

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("API key must not be empty")
        return value

    @field_validator("secret")
    @classmethod
    def _secret_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("API secret must not be empty")
        return value

    @classmethod
    def from_env(cls) -> "Credentials":
        """Прочитать `COINBASE_API_KEY` и `COINBASE_API_SECRET` из окружения."""
        names = ("COINBASE_API_KEY", "COINBASE_API_SECRET")
        missing = [name for name in names if not os.getenv(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                details={"missing": missing},
            )
        return cls(key=os.environ["COINBASE_API_KEY"], secret=os.environ["COINBASE_API_SECRET"])


@dataclass(frozen=True)
class RequestDescriptor:
    """Готовый к отправке запрос: метод, абсолютный URL, заголовки и тело."""

    method: str
    url: httpx.URL
    headers: Dict[str, str] = field(repr=False)
    body: bytes = b""

    @property
    def path(self) -> str:
        """Путь и query-строка в том виде, в каком они уходят в сеть."""
        return self.url.raw_path.decode("ascii")

    @property
    def signed(self) -> bool:
        return "CB-ACCESS-SIGN" in self.headers

    def to_httpx(self) -> httpx.Request:
        return httpx.Request(self.method, self.url, headers=self.headers, content=self.body or None)


class RequestBuilder:
    """
    Сборщик запросов для одного базового адреса.

    Без учётных данных строит публичные запросы (`User-Agent`,
    `Content-Type`). С учётными данными на каждую сборку заново читает часы,
    считает подпись и добавляет заголовки `CB-VERSION`, `CB-ACCESS-KEY`,
    `CB-ACCESS-SIGN`, `CB-ACCESS-TIMESTAMP`.
    """

    def __init__(
        self,
        base_url: str,
        credentials: Optional[Credentials] = None,
        *,
        user_agent: str = USER_AGENT,
        api_version: str = DEFAULT_API_VERSION,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._origin = self._parse_absolute(self.base_url)
        self._credentials = credentials
        self._user_agent = user_agent
        self._api_version = api_version
        self._clock = clock or time.time

    @property
    def signed(self) -> bool:
        return self._credentials is not None

    def build(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[bytes] = None,
        json_body: Any = None,
    ) -> RequestDescriptor:
        """
        Собрать запрос к `base_url + path`.

        Raises:
            RequestBuildError: путь не начинается с `/`, итоговый URI
                некорректен или одновременно переданы `body` и `json_body`.
        """
        if not path.startswith("/"):
            raise RequestBuildError(f"Request path must start with '/': {path!r}", details={"path": path})
        if body is not None and json_body is not None:
            raise RequestBuildError("Pass either body or json_body, not both")

        url = self._parse_absolute(self.base_url + path)
        if params:
            url = url.copy_merge_params({key: str(value) for key, value in params.items()})

        payload = body or b""
        if json_body is not None:
            payload = json.dumps(json_body, separators=(",", ":")).encode("utf-8")

        method = method.upper()
        headers = {
            "User-Agent": self._user_agent,
            "Content-Type": "application/json",
        }
        if self._credentials is not None:
            timestamp = int(self._clock())
            signature = sign(
                self._credentials.secret.get_secret_value(),
                timestamp,
                method,
                url.raw_path.decode("ascii"),
                payload,
            )
            headers["CB-VERSION"] = self._api_version
            headers["CB-ACCESS-KEY"] = self._credentials.key
            headers["CB-ACCESS-SIGN"] = signature
            headers["CB-ACCESS-TIMESTAMP"] = str(timestamp)

        return RequestDescriptor(method=method, url=url, headers=headers, body=payload)

    def build_next(self, next_uri: str) -> RequestDescriptor:
        """
        Собрать GET-запрос по курсору `next_uri` из блока пагинации.

        Относительный путь присоединяется к базовому адресу. Абсолютный URI
        допускается только на том же origin: учётные данные не уходят на
        чужой хост.
        """
        if next_uri.startswith("/"):
            return self.build(next_uri)

        target = self._parse_absolute(next_uri)
        if (target.scheme, target.host, target.port) != (self._origin.scheme, self._origin.host, self._origin.port):
            raise RequestBuildError(
                f"Pagination cursor points to a foreign origin: {next_uri!r}",
                details={"next_uri": next_uri, "base_url": self.base_url},
            )
        return self.build(target.raw_path.decode("ascii"))

    @staticmethod
    def _parse_absolute(raw: str) -> httpx.URL:
        try:
            url = httpx.URL(raw)
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"Invalid request URI: {raw!r}", details={"url": raw}) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise RequestBuildError(f"Request URI must be absolute http(s): {raw!r}", details={"url": raw})
        return url
