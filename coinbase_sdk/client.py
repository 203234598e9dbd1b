"""
Клиенты Coinbase API v2: публичный и приватный (с подписью запросов).

Наружу отдаются высокоуровневые методы эндпоинтов; сборка и подпись
запросов, транспорт, декодирование конвертов и обход страниц живут в
отдельных модулях. Как именно исполняется запрос (блокирующе или через
корутину), решает стратегия, переданная при создании клиента.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional, Union
from uuid import UUID

import httpx
from dotenv import load_dotenv

# Загружаем .env.sdk (приоритет) и затем общий .env
load_dotenv(dotenv_path=".env.sdk")
load_dotenv()

from . import endpoints
from .adapters import ExecutionStrategy, make_strategy
from .models import Account, Currency, CurrencyPrice, CurrentTime, ExchangeRates, Transaction
from .pagination import PaginatedFetcher
from .request import Credentials, RequestBuilder
from .transport import DEFAULT_POOL_IDLE_TIMEOUT_SECONDS, HttpTransport
from .utils import DispatchThrottle


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


# Значения по умолчанию берутся из окружения, чтобы не держать их захардкоженными.
DEFAULT_DISPATCH_DELAY_SECONDS = float(os.getenv("COINBASE_DISPATCH_DELAY_SECONDS", "0.35"))
DEFAULT_TIMEOUT_SECONDS = _optional_float(os.getenv("COINBASE_TIMEOUT_SECONDS"))
DEFAULT_EXECUTION_MODE = os.getenv("COINBASE_EXECUTION_MODE", "async")


@dataclass
class ClientSettings:
    """Настройки клиентов `PublicClient` и `PrivateClient`."""

    base_url: str = endpoints.DEFAULT_BASE_URL
    api_version: str = endpoints.DEFAULT_API_VERSION
    user_agent: str = endpoints.USER_AGENT
    dispatch_delay_seconds: float = DEFAULT_DISPATCH_DELAY_SECONDS
    pool_idle_timeout_seconds: float = DEFAULT_POOL_IDLE_TIMEOUT_SECONDS
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    page_limit: int = endpoints.DEFAULT_PAGE_LIMIT
    execution_mode: str = DEFAULT_EXECUTION_MODE

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Сконструировать настройки из переменных окружения."""
        return cls(
            base_url=os.getenv("COINBASE_API_URL", endpoints.DEFAULT_BASE_URL),
            api_version=os.getenv("COINBASE_API_VERSION", endpoints.DEFAULT_API_VERSION),
            dispatch_delay_seconds=float(
                os.getenv("COINBASE_DISPATCH_DELAY_SECONDS", str(DEFAULT_DISPATCH_DELAY_SECONDS))
            ),
            pool_idle_timeout_seconds=float(
                os.getenv("COINBASE_POOL_IDLE_TIMEOUT_SECONDS", str(DEFAULT_POOL_IDLE_TIMEOUT_SECONDS))
            ),
            timeout_seconds=_optional_float(os.getenv("COINBASE_TIMEOUT_SECONDS")),
            page_limit=int(os.getenv("COINBASE_PAGE_LIMIT", str(endpoints.DEFAULT_PAGE_LIMIT))),
            execution_mode=os.getenv("COINBASE_EXECUTION_MODE", DEFAULT_EXECUTION_MODE),
        )


class PublicClient:
    """
    Клиент публичных эндпоинтов (без подписи).

    Каждый метод возвращает то, что отдаёт стратегия: с `BlockingStrategy`
    готовое значение, с `NonBlockingStrategy` корутину, которую нужно
    дождаться (`await`). Ошибки (`TransportError`, `DomainError`,
    `SerializationError`) пробрасываются без повторов.

    Example:
        >>> client = PublicClient(ClientSettings(execution_mode="blocking"))
        >>> client.current_time().epoch
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        strategy: Optional[ExecutionStrategy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep_func: Optional[Callable[[float], Awaitable[None]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Args:
            settings: Настройки; по умолчанию читаются из окружения.
            strategy: Стратегия исполнения; по умолчанию по `settings.execution_mode`.
            http_client: Заранее настроенный httpx-клиент (для тестов).
            sleep_func: Функция паузы перед отправкой (для тестов).
            clock: Источник времени для подписи (для тестов).
        """
        self.settings = settings or ClientSettings.from_env()
        self._strategy = strategy or make_strategy(self.settings.execution_mode)
        self._clock = clock
        self._transport = HttpTransport(
            pool_idle_timeout_seconds=self.settings.pool_idle_timeout_seconds,
            timeout_seconds=self.settings.timeout_seconds,
            throttle=DispatchThrottle(self.settings.dispatch_delay_seconds, sleep_func=sleep_func),
            client=http_client,
        )
        self._builder = self._make_builder(None)

    @property
    def strategy(self) -> ExecutionStrategy:
        return self._strategy

    # ------------------------------------------------------------------ #
    # Публичное API
    # ------------------------------------------------------------------ #
    def currencies(self) -> Any:
        """
        Список известных валют. Коды по возможности соответствуют ISO 4217;
        валюты вне стандарта используют собственный код (например, BTC).

        Returns:
            `List[Currency]` (или корутина с ним).
        """
        return self._call(endpoints.build_currencies_endpoint(), List[Currency])

    def exchange_rates(self, currency: Optional[str] = None) -> Any:
        """
        Текущие курсы обмена. Базовая валюта по умолчанию USD.

        Returns:
            `ExchangeRates` (или корутина с ним).
        """
        return self._call(endpoints.build_exchange_rates_endpoint(currency), ExchangeRates)

    def buy_price(self, currency_pair: str) -> Any:
        """Полная цена покупки одной единицы, например для `"BTC-USD"`."""
        return self._call(endpoints.build_price_endpoint(currency_pair, "buy"), CurrencyPrice)

    def sell_price(self, currency_pair: str) -> Any:
        """Полная цена продажи одной единицы."""
        return self._call(endpoints.build_price_endpoint(currency_pair, "sell"), CurrencyPrice)

    def spot_price(self, currency_pair: str, on_date: Optional[date] = None) -> Any:
        """
        Текущая рыночная цена пары (обычно между ценой покупки и продажи).

        Args:
            currency_pair: Пара, например `"BTC-USD"`.
            on_date: Дата для исторической цены (UTC).
        """
        return self._call(endpoints.build_price_endpoint(currency_pair, "spot", on_date=on_date), CurrencyPrice)

    def current_time(self) -> Any:
        """Серверное время API (`CurrentTime`)."""
        return self._call(endpoints.build_current_time_endpoint(), CurrentTime)

    def close(self) -> Any:
        """
        Закрыть пул соединений. Для блокирующей стратегии также закрывается
        её цикл событий; для неблокирующей возвращается корутина.
        """
        if not self._strategy.blocking:
            return self._transport.aclose()
        if self._strategy.closed:
            return None
        try:
            self._strategy.run(self._transport.aclose())
        finally:
            self._strategy.shutdown()
        return None

    def __enter__(self) -> "PublicClient":
        if not self._strategy.blocking:
            raise TypeError("Use 'async with' for clients with a non-blocking strategy")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def __aenter__(self) -> "PublicClient":
        if self._strategy.blocking:
            raise TypeError("Use 'with' for clients with a blocking strategy")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        mode = "blocking" if self._strategy.blocking else "async"
        return f"<{self.__class__.__name__}(base_url={self.settings.base_url!r}, mode={mode!r})>"

    # ------------------------------------------------------------------ #
    # Внутренние вспомогательные методы
    # ------------------------------------------------------------------ #
    def _make_builder(self, credentials: Optional[Credentials]) -> RequestBuilder:
        return RequestBuilder(
            self.settings.base_url,
            credentials,
            user_agent=self.settings.user_agent,
            api_version=self.settings.api_version,
            clock=self._clock,
        )

    def _ensure_open(self) -> None:
        # Проверяем до создания корутины fetch, иначе её некому будет дождаться.
        if self._strategy.closed:
            raise RuntimeError(f"{self.__class__.__name__} has been closed")

    def _call(self, spec: endpoints.EndpointSpec, data_type: Any, builder: Optional[RequestBuilder] = None) -> Any:
        self._ensure_open()
        # Запрос собирается сразу: ошибка сборки не откладывается до исполнения.
        request = (builder or self._builder).build(spec.path, params=spec.params)
        return self._strategy.process(self._transport.fetch(request, data_type))

    def _paginate(self, spec: endpoints.EndpointSpec, data_type: Any, builder: Optional[RequestBuilder] = None) -> Any:
        self._ensure_open()
        fetcher: PaginatedFetcher[Any] = PaginatedFetcher(
            builder or self._builder,
            self._transport,
            data_type,
            spec.path,
            spec.params,
        )
        return self._strategy.paginate(fetcher)


class PrivateClient(PublicClient):
    """
    Клиент приватных эндпоинтов. Каждый запрос к ним подписывается заново со
    свежей меткой времени; публичные методы остаются без подписи.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        settings: Optional[ClientSettings] = None,
        *,
        strategy: Optional[ExecutionStrategy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep_func: Optional[Callable[[float], Awaitable[None]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Args:
            credentials: Ключ и секрет; по умолчанию `Credentials.from_env()`.
            settings: Настройки; по умолчанию читаются из окружения.
        """
        credentials = credentials or Credentials.from_env()
        super().__init__(
            settings,
            strategy=strategy,
            http_client=http_client,
            sleep_func=sleep_func,
            clock=clock,
        )
        self._signed_builder = self._make_builder(credentials)

    def accounts(self) -> Any:
        """
        Счета пользователя, доступные ключу (первая страница).

        Returns:
            `List[Account]` (или корутина с ним).
        """
        return self._call(endpoints.build_accounts_endpoint(), List[Account], self._signed_builder)

    def account(self, account_id: Union[str, UUID]) -> Any:
        """Один счёт по идентификатору."""
        return self._call(endpoints.build_account_endpoint(account_id), Account, self._signed_builder)

    def accounts_pages(self, limit: Optional[int] = None) -> Any:
        """
        Все счета постранично.

        Returns:
            Итератор `List[Account]` для блокирующей стратегии, асинхронный
            итератор для неблокирующей.
        """
        spec = endpoints.build_accounts_endpoint(limit or self.settings.page_limit)
        return self._paginate(spec, List[Account], self._signed_builder)

    def transactions(self, account_id: Union[str, UUID]) -> Any:
        """Транзакции счёта (первая страница)."""
        return self._call(endpoints.build_transactions_endpoint(account_id), List[Transaction], self._signed_builder)

    def transactions_pages(self, account_id: Union[str, UUID], limit: Optional[int] = None) -> Any:
        """Все транзакции счёта постранично."""
        spec = endpoints.build_transactions_endpoint(account_id, limit or self.settings.page_limit)
        return self._paginate(spec, List[Transaction], self._signed_builder)
