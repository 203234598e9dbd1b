"""
Стратегии исполнения запросов: блокирующая и неблокирующая.

Отложенная операция представляет собой корутину «запрос → декодирование конверта». Стратегия
решает только, когда и в каком потоке она будет доведена до конца; шаг
снятия конверта и проброс ошибок у обеих стратегий одинаковы. Стратегия
передаётся клиенту при создании.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Coroutine, Protocol, TypeVar

from .envelope import ResponseEnvelope, unwrap_envelope
from .exceptions import AdapterInitError
from .pagination import AsyncPageIterator, PageIterator, PaginatedFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ExecutionStrategy(Protocol):
    """Общий интерфейс стратегий исполнения."""

    blocking: bool

    @property
    def closed(self) -> bool:
        """Стратегия остановлена и новых операций не принимает."""

    def run(self, operation: Coroutine[Any, Any, R]) -> Any:
        """Довести корутину до результата (или вернуть ожидаемый объект)."""

    def process(self, operation: Awaitable[ResponseEnvelope[T]]) -> Any:
        """Исполнить операцию и снять конверт ответа."""

    def paginate(self, fetcher: PaginatedFetcher[T]) -> Any:
        """Вернуть итератор страниц, подходящий для стратегии."""

    def shutdown(self) -> None:
        """Освободить ресурсы стратегии."""


async def _unwrapped(operation: Awaitable[ResponseEnvelope[T]]) -> T:
    return unwrap_envelope(await operation)


class BlockingStrategy:
    """
    Блокирующая стратегия с собственным однопоточным циклом событий.

    Вызывающий поток ждёт завершения операции и получает результат или
    исключение напрямую. Один экземпляр обслуживает один вызов за раз;
    из разных потоков нужна внешняя синхронизация или отдельный клиент на
    поток. Вызывать из уже работающего цикла событий нельзя (asyncio
    поднимет `RuntimeError`).
    """

    blocking = True

    def __init__(self) -> None:
        try:
            self._loop = asyncio.new_event_loop()
        except OSError as exc:
            raise AdapterInitError(f"Failed to create a private event loop: {exc}") from exc

    @property
    def closed(self) -> bool:
        return self._loop.is_closed()

    def run(self, operation: Coroutine[Any, Any, R]) -> R:
        if self._loop.is_closed():
            if inspect.iscoroutine(operation):
                operation.close()
            raise RuntimeError("BlockingStrategy has been shut down")
        return self._loop.run_until_complete(operation)

    def process(self, operation: Awaitable[ResponseEnvelope[T]]) -> T:
        return self.run(_unwrapped(operation))

    def paginate(self, fetcher: PaginatedFetcher[T]) -> PageIterator[T]:
        return PageIterator(fetcher, self.run)

    def shutdown(self) -> None:
        if self._loop.is_closed():
            return
        try:
            self._loop.run_until_complete(self._loop.shutdown_asyncgens())
        finally:
            self._loop.close()
            logger.debug("Private event loop closed")


class NonBlockingStrategy:
    """
    Неблокирующая стратегия: операции возвращаются как корутины и
    исполняются циклом событий вызывающего. Создание не может завершиться
    ошибкой.
    """

    blocking = False

    @property
    def closed(self) -> bool:
        return False

    def run(self, operation: Coroutine[Any, Any, R]) -> Coroutine[Any, Any, R]:
        return operation

    def process(self, operation: Awaitable[ResponseEnvelope[T]]) -> Coroutine[Any, Any, T]:
        return _unwrapped(operation)

    def paginate(self, fetcher: PaginatedFetcher[T]) -> AsyncPageIterator[T]:
        return AsyncPageIterator(fetcher)

    def shutdown(self) -> None:
        return None


def make_strategy(mode: str) -> ExecutionStrategy:
    """Создать стратегию по имени режима (`"blocking"` или `"async"`)."""
    normalized = mode.strip().lower()
    if normalized in ("blocking", "sync"):
        return BlockingStrategy()
    if normalized in ("async", "non-blocking", "nonblocking"):
        return NonBlockingStrategy()
    raise ValueError(f"Unsupported execution mode: {mode}")
