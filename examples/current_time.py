#!/usr/bin/env python3
"""
Серверное время Coinbase в блокирующем режиме.

Запуск:
    python examples/current_time.py
"""

from __future__ import annotations

import logging
import sys

from coinbase_sdk import ClientSettings, PublicClient


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    settings = ClientSettings.from_env()
    settings.execution_mode = "blocking"

    with PublicClient(settings) as client:
        now = client.current_time()

    print(f"iso={now.iso.isoformat()} epoch={now.epoch}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
