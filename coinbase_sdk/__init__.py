"""
Публичная точка входа пакета `coinbase_sdk`.

SDK предоставляет `PublicClient` и `PrivateClient` для Coinbase API v2 с
типизированными моделями, подписью запросов HMAC-SHA256, обходом курсорной
пагинации и нормализованными исключениями. Блокирующий или асинхронный режим
выбирается стратегией исполнения при создании клиента.
"""

from .adapters import BlockingStrategy, ExecutionStrategy, NonBlockingStrategy, make_strategy
from .client import ClientSettings, PrivateClient, PublicClient
from .endpoints import SDK_VERSION
from .envelope import DecodeResult, ErrorEnvelope, Pagination, ResponseEnvelope, decode_envelope
from .exceptions import (
    AdapterInitError,
    CoinbaseSdkError,
    ConfigurationError,
    DomainError,
    RequestBuildError,
    SerializationError,
    TransportError,
)
from .models import (
    Account,
    AccountCurrency,
    Balance,
    Currency,
    CurrencyPrice,
    CurrentTime,
    ExchangeRates,
    Transaction,
)
from .pagination import AsyncPageIterator, PageIterator, PaginatedFetcher
from .request import Credentials, RequestBuilder, RequestDescriptor
from .signer import sign
from .utils import DispatchThrottle

__version__ = SDK_VERSION

__all__ = [
    "PublicClient",
    "PrivateClient",
    "ClientSettings",
    "Credentials",
    "ExecutionStrategy",
    "BlockingStrategy",
    "NonBlockingStrategy",
    "make_strategy",
    "RequestBuilder",
    "RequestDescriptor",
    "sign",
    "DispatchThrottle",
    "ResponseEnvelope",
    "ErrorEnvelope",
    "Pagination",
    "DecodeResult",
    "decode_envelope",
    "PaginatedFetcher",
    "PageIterator",
    "AsyncPageIterator",
    "Account",
    "AccountCurrency",
    "Balance",
    "Currency",
    "CurrencyPrice",
    "CurrentTime",
    "ExchangeRates",
    "Transaction",
    "CoinbaseSdkError",
    "TransportError",
    "SerializationError",
    "DomainError",
    "RequestBuildError",
    "AdapterInitError",
    "ConfigurationError",
    "__version__",
]
