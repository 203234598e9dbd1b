#!/usr/bin/env python3
"""
Постраничный обход счетов и транзакций пользователя.

Запуск:
    COINBASE_API_KEY=... COINBASE_API_SECRET=... python examples/list_transactions.py [ACCOUNT_ID]

Без ACCOUNT_ID печатаются все счета, с ним печатаются транзакции счёта.
"""

from __future__ import annotations

import sys

from coinbase_sdk import ClientSettings, CoinbaseSdkError, PrivateClient


def main(argv: list) -> int:
    settings = ClientSettings.from_env()
    settings.execution_mode = "blocking"

    try:
        with PrivateClient(settings=settings) as client:
            if len(argv) > 1:
                for page in client.transactions_pages(argv[1]):
                    for tx in page:
                        print(f"{tx.created_at}  {tx.type:<12} {tx.amount.amount} {tx.amount.currency}")
            else:
                for page in client.accounts_pages():
                    for account in page:
                        print(f"{account.id}  {account.name:<24} {account.balance.amount} {account.balance.currency}")
    except CoinbaseSdkError as exc:
        print(f"❌ {exc.error_type}: {exc.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
