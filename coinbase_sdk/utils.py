"""
Вспомогательные примитивы SDK: задержка перед отправкой запроса.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional


class DispatchThrottle:
    """
    Фиксированная пауза перед каждой отправкой запроса.

    Пауза безусловная и не зависит от ответа сервера; `delay_seconds=0`
    отключает её. Функцию сна можно подменить (например, в тестах).
    """

    def __init__(
        self,
        delay_seconds: float,
        *,
        sleep_func: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be non-negative, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._sleep = sleep_func or asyncio.sleep

    async def acquire(self) -> None:
        if self.delay_seconds <= 0:
            return
        await self._sleep(self.delay_seconds)
