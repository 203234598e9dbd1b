import asyncio
import inspect
from typing import Any

import pytest

from coinbase_sdk.adapters import BlockingStrategy, NonBlockingStrategy, make_strategy
from coinbase_sdk.envelope import ResponseEnvelope
from coinbase_sdk.exceptions import AdapterInitError, DomainError
from coinbase_sdk.request import RequestBuilder
from coinbase_sdk.transport import HttpTransport

BASE_URL = "https://api.example.com"


async def _envelope(data):
    return ResponseEnvelope[Any](data=data)


async def _failing(error):
    raise error


@pytest.fixture
def blocking():
    strategy = BlockingStrategy()
    yield strategy
    strategy.shutdown()


def test_blocking_process_returns_unwrapped_payload(blocking):
    assert blocking.process(_envelope({"epoch": 1})) == {"epoch": 1}


@pytest.mark.asyncio
async def test_non_blocking_process_returns_awaitable():
    pending = NonBlockingStrategy().process(_envelope({"epoch": 1}))

    assert inspect.isawaitable(pending)
    assert await pending == {"epoch": 1}


def test_strategies_produce_equal_values_for_same_response(blocking, fake_api):
    body = {"data": {"iso": "2015-06-23T18:02:51Z", "epoch": 1435082571}}
    _, blocking_client = fake_api({"/v2/time": (200, body)})
    _, async_client = fake_api({"/v2/time": (200, body)})
    builder = RequestBuilder(BASE_URL)

    blocking_value = blocking.process(HttpTransport(client=blocking_client).fetch(builder.build("/v2/time")))
    async_value = asyncio.run(
        NonBlockingStrategy().process(HttpTransport(client=async_client).fetch(builder.build("/v2/time")))
    )

    assert blocking_value == async_value == body["data"]


def test_errors_propagate_unchanged_in_both_strategies(blocking):
    error = DomainError("not allowed", status_code=403)

    with pytest.raises(DomainError) as blocking_exc:
        blocking.process(_failing(error))
    with pytest.raises(DomainError) as async_exc:
        asyncio.run(NonBlockingStrategy().process(_failing(error)))

    assert blocking_exc.value is error
    assert async_exc.value is error


def test_blocking_strategy_fails_at_construction_without_event_loop(monkeypatch):
    def _no_loop():
        raise OSError("too many open files")

    monkeypatch.setattr(asyncio, "new_event_loop", _no_loop)
    with pytest.raises(AdapterInitError):
        BlockingStrategy()


def test_blocking_strategy_rejects_work_after_shutdown():
    strategy = BlockingStrategy()
    strategy.shutdown()
    strategy.shutdown()

    assert strategy.closed
    with pytest.raises(RuntimeError):
        strategy.run(_envelope(None))


def test_non_blocking_run_hands_back_the_coroutine():
    coroutine = _envelope(None)
    assert NonBlockingStrategy().run(coroutine) is coroutine
    coroutine.close()


def test_make_strategy_by_mode():
    blocking = make_strategy("blocking")
    try:
        assert isinstance(blocking, BlockingStrategy) and blocking.blocking
    finally:
        blocking.shutdown()
    assert isinstance(make_strategy("async"), NonBlockingStrategy)
    with pytest.raises(ValueError):
        make_strategy("threads")


def test_closed_flag_reflects_strategy_state():
    strategy = BlockingStrategy()
    assert not strategy.closed
    strategy.shutdown()
    assert strategy.closed
    assert not NonBlockingStrategy().closed
