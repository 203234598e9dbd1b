from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import TypeAdapter

from coinbase_sdk.envelope import Order, Pagination
from coinbase_sdk.models import Account, Currency, CurrencyPrice, CurrentTime, ExchangeRates, Transaction

ACCOUNTS_JSON = """[
{
  "id": "f1bb8f61-7f5d-4f04-9552-bcbafdf856b7",
  "type": "wallet",
  "created_at": "2019-07-12T03:27:07Z",
  "updated_at": "2019-07-12T14:07:57Z",
  "resource": "account",
  "resource_path": "/v2/accounts/f1bb8f61-7f5d-4f04-9552-bcbafdf856b7",
  "name": "EOS Wallet",
  "primary": true,
  "currency": {
    "code": "EOS",
    "name": "EOS",
    "color": "#000000",
    "sort_index": 128,
    "exponent": 4,
    "type": "crypto",
    "address_regex": "(^[a-z1-5.]{1,11}[a-z1-5]$)|(^[a-z1-5.]{12}[a-j1-5]$)",
    "asset_id": "cc2ddaa5-5a03-4cbf-93ef-e4df102d4311",
    "destination_tag_name": "EOS Memo",
    "destination_tag_regex": "^.{1,100}$"
  },
  "balance": {"amount": "9.1238", "currency": "EOS"},
  "allow_deposits": true,
  "allow_withdrawals": true
}
]"""

TRANSACTIONS_JSON = """[
{
  "id": "9dd482e4-d8ce-46f7-a261-281843bd2855",
  "type": "send",
  "status": "completed",
  "amount": {"amount": "-0.00100000", "currency": "BTC"},
  "native_amount": {"amount": "-0.01", "currency": "USD"},
  "description": null,
  "created_at": "2015-03-11T13:13:35-07:00",
  "updated_at": "2015-03-26T15:55:43-07:00",
  "resource": "transaction",
  "resource_path": "/v2/accounts/af6fd33a-e20c-494a-b3f6-f91d204af4b7/transactions/9dd482e4-d8ce-46f7-a261-281843bd2855",
  "network": {"status": "off_blockchain", "name": "bitcoin"},
  "to": {
    "id": "2dbc3cfb-ed1e-4c10-aedb-aeb1693e01e7",
    "resource": "user",
    "resource_path": "/v2/users/2dbc3cfb-ed1e-4c10-aedb-aeb1693e01e7"
  },
  "instant_exchange": false,
  "details": {"title": "Sent bitcoin", "subtitle": "to User 2"}
},
{
  "id": "c1c413d1-acf8-4fcb-a8ed-4e2e4820c6f0",
  "type": "buy",
  "status": "pending",
  "amount": {"amount": "1.00000000", "currency": "BTC"},
  "native_amount": {"amount": "10.00", "currency": "USD"},
  "description": null,
  "created_at": "2015-03-26T13:42:00-07:00",
  "updated_at": "2015-03-26T15:55:45-07:00",
  "resource": "transaction",
  "resource_path": "/v2/accounts/af6fd33a-e20c-494a-b3f6-f91d204af4b7/transactions/c1c413d1-acf8-4fcb-a8ed-4e2e4820c6f0",
  "buy": {
    "id": "ae7df6e7-fef1-441d-a6f3-e4661ca6f39a",
    "resource": "buy",
    "resource_path": "/v2/accounts/af6fd33a-e20c-494a-b3f6-f91d204af4b7/buys/ae7df6e7-fef1-441d-a6f3-e4661ca6f39a"
  },
  "instant_exchange": false,
  "details": {"title": "Bought bitcoin", "subtitle": "using Capital One Bank"}
}
]"""


def test_pagination_parses_cursor_fields():
    pagination = Pagination.model_validate_json(
        """{
            "ending_before": null,
            "starting_after": null,
            "previous_ending_before": null,
            "next_starting_after": "d16ec1ba-b3f7-5d6a-a9c8-817930030324",
            "limit": 25,
            "order": "desc",
            "previous_uri": null,
            "next_uri": "/v2/accounts?starting_after=d16ec1ba-b3f7-5d6a-a9c8-817930030324"
        }"""
    )
    assert pagination.limit == 25
    assert pagination.sort_order is Order.DESCENDING
    assert pagination.next_uri == "/v2/accounts?starting_after=d16ec1ba-b3f7-5d6a-a9c8-817930030324"


def test_accounts_parse():
    accounts = TypeAdapter(List[Account]).validate_json(ACCOUNTS_JSON)
    assert len(accounts) == 1
    account = accounts[0]
    assert account.currency.code == "EOS"
    assert account.currency.asset_id == UUID("cc2ddaa5-5a03-4cbf-93ef-e4df102d4311")
    assert account.balance.amount == Decimal("9.1238")


def test_transactions_parse():
    transactions = TypeAdapter(List[Transaction]).validate_json(TRANSACTIONS_JSON)
    assert len(transactions) == 2
    send, buy = transactions
    assert send.network.status == "off_blockchain"
    assert send.to.resource == "user"
    assert send.amount.amount == Decimal("-0.001")
    assert buy.status == "pending"
    assert buy.network is None


def test_transaction_from_party_uses_alias():
    transaction = Transaction.model_validate(
        {
            "id": "9dd482e4-d8ce-46f7-a261-281843bd2855",
            "type": "request",
            "status": "pending",
            "amount": {"amount": "1", "currency": "BTC"},
            "native_amount": {"amount": "10", "currency": "USD"},
            "resource": "transaction",
            "resource_path": "/v2/accounts/x/transactions/y",
            "details": {"title": "Requested bitcoin", "subtitle": "from User 2"},
            "from": {"resource": "email", "email": "user@example.com"},
        }
    )
    assert transaction.from_.email == "user@example.com"


def test_public_payloads_parse():
    currency = Currency.model_validate({"id": "AED", "name": "United Arab Emirates Dirham", "min_size": "0.01000000"})
    rates = ExchangeRates.model_validate({"currency": "BTC", "rates": {"AED": "36.73", "AFN": "589.50"}})
    price = CurrencyPrice.model_validate({"amount": "1010.25", "currency": "USD"})
    now = CurrentTime.model_validate({"iso": "2015-06-23T18:02:51Z", "epoch": 1435082571})

    assert currency.min_size == Decimal("0.01")
    assert rates.rates["AFN"] == Decimal("589.50")
    assert price.amount == Decimal("1010.25")
    assert int(now.iso.timestamp()) == 1435082571
