"""
Конверты ответов API и их поэтапное декодирование.

Успешный ответ приходит как `{"pagination": {...} | null, "data": ...}`,
отказ на уровне API приходит как `{"message": "..."}`. Порядок попыток важен:
сначала конверт успеха для ожидаемого типа данных, затем конверт ошибки и
только потом `SerializationError` с исходной ошибкой первой попытки и сырым
телом. Несовпадение схемы никогда не превращается в «пустые данные».
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CoinbaseSdkError, DomainError, SerializationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class Order(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


class Pagination(BaseModel):
    """
    Блок пагинации. Для обхода страниц значим только `next_uri`; остальные
    поля служебные и принимаются в любом виде, не влияя на декодирование.
    """

    model_config = ConfigDict(extra="allow")

    ending_before: Optional[Any] = None
    starting_after: Optional[Any] = None
    previous_ending_before: Optional[Any] = None
    next_starting_after: Optional[Any] = None
    limit: Optional[Any] = None
    order: Optional[Any] = None
    previous_uri: Optional[Any] = None
    next_uri: Optional[str] = Field(default=None, description="Относительный путь следующей страницы.")

    @property
    def sort_order(self) -> Optional[Order]:
        """Порядок сортировки, если сервер прислал известное значение."""
        try:
            return Order(self.order)
        except (TypeError, ValueError):
            return None


class ResponseEnvelope(BaseModel, Generic[T]):
    """Конверт успешного ответа."""

    model_config = ConfigDict(extra="ignore")

    pagination: Optional[Pagination] = None
    data: T

    @property
    def next_uri(self) -> Optional[str]:
        return self.pagination.next_uri if self.pagination else None


class ErrorEnvelope(BaseModel):
    """Конверт отказа API."""

    model_config = ConfigDict(extra="ignore")

    message: str


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """
    Итог декодирования: либо конверт, либо ошибка (`DomainError` или
    `SerializationError`). Все три исхода доступны как данные.
    """

    envelope: Optional[ResponseEnvelope[T]] = None
    error: Optional[CoinbaseSdkError] = None

    @property
    def ok(self) -> bool:
        return self.envelope is not None

    def unwrap(self) -> ResponseEnvelope[T]:
        if self.envelope is not None:
            return self.envelope
        if self.error is None:
            raise CoinbaseSdkError("Decode result holds neither an envelope nor an error")
        raise self.error


def _attempt(model: Type[M], body: bytes) -> Tuple[Optional[M], Optional[ValidationError]]:
    try:
        return model.model_validate_json(body), None
    except ValidationError as exc:
        return None, exc


def decode_envelope(body: bytes, data_type: Any = Any, *, status_code: Optional[int] = None) -> DecodeResult[Any]:
    """
    Разобрать тело ответа.

    Args:
        body: Сырые байты ответа.
        data_type: Ожидаемый тип поля `data` (модель pydantic, `list[...]` и т.п.).
        status_code: HTTP-статус ответа, сохраняется в ошибках.
    """
    envelope, envelope_error = _attempt(ResponseEnvelope[data_type], body)
    if envelope is not None:
        return DecodeResult(envelope=envelope)

    rejection, _ = _attempt(ErrorEnvelope, body)
    if rejection is not None:
        logger.warning("API rejected request (status=%s): %s", status_code, rejection.message)
        return DecodeResult(error=DomainError(rejection.message, status_code=status_code))

    raw = body.decode("utf-8", errors="replace")
    logger.warning("Failed to decode response (status=%s): %s", status_code, envelope_error)
    return DecodeResult(error=SerializationError(envelope_error, raw, status_code=status_code))


def unwrap_envelope(envelope: ResponseEnvelope[T]) -> T:
    """Снять конверт и отдать полезную нагрузку."""
    return envelope.data
