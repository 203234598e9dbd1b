"""
Типизированные Pydantic‑модели для полезной нагрузки (`data`) ответов API.

Модели описывают только поля, которые нужны потребителям; неизвестные поля
игнорируются для устойчивости к расширению API. Денежные суммы приходят
строками и разбираются в `Decimal` без потери точности.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ApiBaseModel(BaseModel):
    """Базовая модель, игнорирующая лишние поля."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Currency(ApiBaseModel):
    """Валюта из публичного справочника `/v2/currencies`."""

    id: str = Field(description="Код валюты, по возможности ISO 4217 (например, 'USD').")
    name: str
    min_size: Decimal = Field(description="Минимальный шаг суммы.")


class ExchangeRates(ApiBaseModel):
    """Курсы обмена для одной базовой валюты."""

    currency: str = Field(description="Базовая валюта.")
    rates: Dict[str, Decimal] = Field(description="Сколько единиц каждой валюты стоит единица базовой.")


class CurrencyPrice(ApiBaseModel):
    amount: Decimal
    currency: str
    base: Optional[str] = Field(default=None, description="Базовая валюта пары, если API её вернул.")


class CurrentTime(ApiBaseModel):
    """Серверное время API."""

    iso: datetime
    epoch: int = Field(description="Секунды от эпохи.")


class Balance(ApiBaseModel):
    amount: Decimal
    currency: str


class AccountCurrency(ApiBaseModel):
    """Описание валюты внутри счёта."""

    code: str
    name: str
    color: Optional[str] = None
    sort_index: Optional[int] = None
    exponent: Optional[int] = None
    type: Optional[str] = Field(default=None, description="'crypto' или 'fiat'.")
    address_regex: Optional[str] = None
    asset_id: Optional[UUID] = None
    destination_tag_name: Optional[str] = None
    destination_tag_regex: Optional[str] = None


class Account(ApiBaseModel):
    """Счёт (кошелёк) пользователя."""

    # id бывает как UUID, так и кодом токена (например, "LINK")
    id: str
    type: str
    name: str
    primary: bool
    currency: AccountCurrency
    balance: Balance
    resource: str
    resource_path: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    allow_deposits: bool = True
    allow_withdrawals: bool = True


class Network(ApiBaseModel):
    status: str
    name: Optional[str] = None


class TransactionParty(ApiBaseModel):
    """Отправитель или получатель транзакции."""

    id: Optional[UUID] = None
    resource: str
    resource_path: Optional[str] = None
    currency: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class TransactionDetails(ApiBaseModel):
    title: str
    subtitle: str


class Transaction(ApiBaseModel):
    """Транзакция по счёту."""

    id: UUID
    type: str
    status: str
    amount: Balance
    native_amount: Balance
    resource: str
    resource_path: str
    details: TransactionDetails
    instant_exchange: bool = False
    description: Optional[str] = None
    network: Optional[Network] = None
    from_: Optional[TransactionParty] = Field(default=None, alias="from")
    to: Optional[TransactionParty] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
