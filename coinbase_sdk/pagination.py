"""
Обход курсорной пагинации.

`PaginatedFetcher` реализует явный автомат состояний `START → EMITTING → DONE` с
поглощающим состоянием `FAILED`. Один вызов `next_page()` делает ровно один
запрос. Страницы не запрашиваются заранее: потребитель, прекративший
итерацию, больше не вызывает сетевых запросов. Итераторы не
перезапускаются; для повторного обхода нужен новый fetcher.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Mapping, Optional, TypeVar

from .request import RequestBuilder, RequestDescriptor
from .transport import HttpTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageState(str, Enum):
    START = "start"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"


class PaginatedFetcher(Generic[T]):
    """
    Состояние обхода страниц одного запроса.

    Первый запрос строится из базового пути и параметров (например, `limit`).
    Следующие идут по `pagination.next_uri` с тем же режимом аутентификации;
    подпись каждый раз пересчитывается со свежей меткой времени.
    """

    def __init__(
        self,
        builder: RequestBuilder,
        transport: HttpTransport,
        data_type: Any,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._builder = builder
        self._transport = transport
        self._data_type = data_type
        self._path = path
        self._params = dict(params or {})
        self._state = PageState.START
        self._next_uri: Optional[str] = None
        self.pages_fetched = 0

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state in (PageState.DONE, PageState.FAILED)

    def _next_request(self) -> RequestDescriptor:
        if self._state is PageState.START:
            return self._builder.build(self._path, params=self._params)
        assert self._next_uri is not None
        return self._builder.build_next(self._next_uri)

    async def next_page(self) -> T:
        """
        Загрузить следующую страницу и вернуть её `data`.

        Ошибка переводит автомат в `FAILED` и пробрасывается один раз;
        уже отданные страницы остаются в силе.

        Raises:
            StopAsyncIteration: обход завершён.
            CoinbaseSdkError: сбой сборки запроса, транспорта или декодирования.
        """
        if self.done:
            raise StopAsyncIteration

        try:
            envelope = await self._transport.fetch(self._next_request(), self._data_type)
        except Exception:
            self._state = PageState.FAILED
            logger.warning("Pagination over %s failed after %d page(s)", self._path, self.pages_fetched)
            raise

        self.pages_fetched += 1
        self._next_uri = envelope.next_uri
        self._state = PageState.EMITTING if self._next_uri else PageState.DONE
        logger.debug("Fetched page %d of %s (next_uri=%s)", self.pages_fetched, self._path, self._next_uri)
        return envelope.data


class PageIterator(Generic[T]):
    """Синхронный итератор страниц; каждый шаг прогоняется через `run`."""

    def __init__(self, fetcher: PaginatedFetcher[T], run: Callable[[Awaitable[T]], T]) -> None:
        self._fetcher = fetcher
        self._run = run

    def __iter__(self) -> "PageIterator[T]":
        return self

    def __next__(self) -> T:
        if self._fetcher.done:
            raise StopIteration
        return self._run(self._fetcher.next_page())


class AsyncPageIterator(Generic[T]):
    """Асинхронный итератор страниц для цикла событий вызывающего."""

    def __init__(self, fetcher: PaginatedFetcher[T]) -> None:
        self._fetcher = fetcher

    def __aiter__(self) -> "AsyncPageIterator[T]":
        return self

    async def __anext__(self) -> T:
        if self._fetcher.done:
            raise StopAsyncIteration
        return await self._fetcher.next_page()
