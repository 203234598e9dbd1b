"""
HTTP-транспорт поверх `httpx.AsyncClient`.

Транспорт владеет пулом соединений клиента, выдерживает паузу перед каждой
отправкой и переводит сетевые исключения httpx в `TransportError`.
Повторов нет: любая ошибка сразу уходит вызывающему.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .envelope import ResponseEnvelope, decode_envelope
from .exceptions import TransportError
from .request import RequestDescriptor
from .utils import DispatchThrottle

logger = logging.getLogger(__name__)

DEFAULT_POOL_IDLE_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class RawResponse:
    """Статус и сырое тело ответа."""

    status_code: int
    body: bytes


class HttpTransport:
    """
    Асинхронный транспорт с общим пулом соединений.

    Attributes:
        pool_idle_timeout_seconds: Через сколько секунд простоя соединение
            закрывается.
        timeout_seconds: Тайм-аут запроса; `None` означает без ограничения.
    """

    def __init__(
        self,
        *,
        pool_idle_timeout_seconds: float = DEFAULT_POOL_IDLE_TIMEOUT_SECONDS,
        timeout_seconds: Optional[float] = None,
        throttle: Optional[DispatchThrottle] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Args:
            pool_idle_timeout_seconds: Время жизни простаивающего соединения.
            timeout_seconds: Тайм-аут запроса (по умолчанию без тайм-аута).
            throttle: Пауза перед отправкой (по умолчанию без паузы).
            client: Заранее настроенный httpx-клиент (для тестов).
        """
        self.pool_idle_timeout_seconds = pool_idle_timeout_seconds
        self.timeout_seconds = timeout_seconds
        self._throttle = throttle or DispatchThrottle(0)
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        # Клиент создаётся при первом запросе, внутри того цикла событий,
        # который будет его использовать.
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(keepalive_expiry=self.pool_idle_timeout_seconds),
                timeout=self.timeout_seconds,
            )
        return self._client

    async def send(self, request: RequestDescriptor) -> RawResponse:
        """
        Отправить запрос и прочитать тело ответа.

        Raises:
            TransportError: сбой соединения, TLS или чтения.
        """
        await self._throttle.acquire()
        client = self._get_client()

        logger.debug("Dispatching %s %s (signed=%s)", request.method, request.url.path, request.signed)
        start_time = time.perf_counter()
        try:
            response = await client.send(request.to_httpx())
        except httpx.RequestError as exc:
            logger.warning("Transport failure for %s %s: %s", request.method, request.url.path, exc)
            raise TransportError(
                f"Network error contacting API: {exc}",
                details={"method": request.method, "path": request.url.path},
            ) from exc

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "%s %s -> %d in %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
        )
        return RawResponse(status_code=response.status_code, body=response.content)

    async def fetch(self, request: RequestDescriptor, data_type: Any = Any) -> ResponseEnvelope[Any]:
        """Отправить запрос и декодировать конверт ответа."""
        response = await self.send(request)
        return decode_envelope(response.body, data_type, status_code=response.status_code).unwrap()

    async def aclose(self) -> None:
        """Закрыть пул соединений, если клиент создан транспортом."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
