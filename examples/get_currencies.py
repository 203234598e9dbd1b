#!/usr/bin/env python3
"""
Список валют и курс BTC через asyncio-клиент.

Запуск:
    COINBASE_EXECUTION_MODE=async python examples/get_currencies.py
"""

from __future__ import annotations

import asyncio
import sys

from coinbase_sdk import ClientSettings, PublicClient


async def main() -> int:
    settings = ClientSettings.from_env()
    settings.execution_mode = "async"

    async with PublicClient(settings) as client:
        currencies = await client.currencies()
        spot = await client.spot_price("BTC-USD")

    for currency in currencies[:10]:
        print(f"{currency.id:>6}  {currency.name}")
    print(f"... всего {len(currencies)}; BTC-USD spot = {spot.amount} {spot.currency}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
