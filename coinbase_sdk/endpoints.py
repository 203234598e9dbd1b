"""
Хелперы для построения путей и query‑параметров эндпоинтов Coinbase API v2.

Все функции возвращают `EndpointSpec` (относительный путь + параметры), чтобы
сборка и подпись запроса в `RequestBuilder` оставались отделёнными от
построения путей.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Union
from urllib.parse import quote
from uuid import UUID

from dotenv import load_dotenv

# Подтягиваем значения из .env.sdk (если есть) и затем из стандартного .env
load_dotenv(dotenv_path=".env.sdk")
load_dotenv()

SDK_VERSION = "0.1.0"
USER_AGENT = f"coinbase-sdk/{SDK_VERSION}"

DEFAULT_BASE_URL = os.getenv("COINBASE_API_URL", "https://api.coinbase.com")
# Версия API фиксируется датой и уходит в заголовке CB-VERSION.
DEFAULT_API_VERSION = os.getenv("COINBASE_API_VERSION", "2021-01-01")
DEFAULT_PAGE_LIMIT = int(os.getenv("COINBASE_PAGE_LIMIT", "100"))


@dataclass(frozen=True)
class EndpointSpec:
    """Относительный путь и параметры запроса, готовые к сборке."""

    path: str
    params: Dict[str, str] = field(default_factory=dict)


def _segment(value: Union[str, UUID]) -> str:
    return quote(str(value), safe="")


def build_currencies_endpoint() -> EndpointSpec:
    """Список известных валют."""
    return EndpointSpec(path="/v2/currencies")


def build_exchange_rates_endpoint(currency: Optional[str] = None) -> EndpointSpec:
    """Курсы обмена; базовая валюта по умолчанию USD."""
    params = {"currency": currency} if currency else {}
    return EndpointSpec(path="/v2/exchange-rates", params=params)


def build_price_endpoint(currency_pair: str, side: str, *, on_date: Optional[date] = None) -> EndpointSpec:
    """
    Цена покупки, продажи или спот для валютной пары (например, `"BTC-USD"`).

    Дата поддерживается только для спот-цены.
    """
    if side not in ("buy", "sell", "spot"):
        raise ValueError(f"Unsupported price side: {side}")
    params: Dict[str, str] = {}
    if on_date is not None:
        if side != "spot":
            raise ValueError("Historic prices are only available for the spot side")
        params["date"] = on_date.isoformat()
    return EndpointSpec(path=f"/v2/prices/{_segment(currency_pair)}/{side}", params=params)


def build_current_time_endpoint() -> EndpointSpec:
    """Серверное время API."""
    return EndpointSpec(path="/v2/time")


def build_accounts_endpoint(limit: Optional[int] = None) -> EndpointSpec:
    """Счета пользователя; `limit` задаёт размер страницы при пагинации."""
    params = {"limit": str(limit)} if limit else {}
    return EndpointSpec(path="/v2/accounts", params=params)


def build_account_endpoint(account_id: Union[str, UUID]) -> EndpointSpec:
    """Один счёт по идентификатору (UUID или код валюты, например `"LINK"`)."""
    return EndpointSpec(path=f"/v2/accounts/{_segment(account_id)}")


def build_transactions_endpoint(account_id: Union[str, UUID], limit: Optional[int] = None) -> EndpointSpec:
    """Транзакции счёта."""
    params = {"limit": str(limit)} if limit else {}
    return EndpointSpec(path=f"/v2/accounts/{_segment(account_id)}/transactions", params=params)
