"""
Нормализованная иерархия исключений для `coinbase_sdk`.

Каждый сбой конвейера (сеть, разбор ответа, отказ API, сборка запроса)
превращается в одно из этих исключений, чтобы вызывающий код мог различать
причины по типу или по `error_type`, не разбирая детали транспорта.
"""

from typing import Any, Optional


class CoinbaseSdkError(Exception):
    """Базовый класс для всех ошибок SDK."""

    error_type: str = "UNKNOWN"

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.status_code = status_code

    def __repr__(self) -> str:  # pragma: no cover - мелкий хелпер
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code!r})"


class TransportError(CoinbaseSdkError):
    """Сбой соединения, TLS или ввода-вывода на сетевом уровне."""

    error_type = "TRANSPORT"


class SerializationError(CoinbaseSdkError):
    """
    Тело ответа не подошло ни под конверт успеха, ни под конверт ошибки.

    Хранит исходную ошибку декодирования конверта успеха (`decode_error`) и
    сырое тело ответа (`raw`) для диагностики.
    """

    error_type = "SERIALIZATION"

    def __init__(
        self,
        decode_error: Exception,
        raw: str,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"Response matched neither the data envelope nor the error envelope: {decode_error}",
            details={"raw": raw},
            status_code=status_code,
        )
        self.decode_error = decode_error
        self.raw = raw


class DomainError(CoinbaseSdkError):
    """API отклонил запрос и вернул корректный конверт `{"message": ...}`."""

    error_type = "DOMAIN"


class RequestBuildError(CoinbaseSdkError, ValueError):
    """Из базового URL и пути нельзя собрать корректный абсолютный URI."""

    error_type = "INVALID_REQUEST"


class AdapterInitError(CoinbaseSdkError):
    """Не удалось создать приватный цикл событий блокирующей стратегии."""

    error_type = "ADAPTER_INIT"


class ConfigurationError(CoinbaseSdkError):
    """В окружении отсутствуют обязательные параметры (например, ключи API)."""

    error_type = "CONFIGURATION"
