import asyncio
import threading
import time

import pytest

from task_dialogue.actions.dispatcher import ActionDispatcher
from task_dialogue.actions.results import ActionRequest, ActionResult, ActionStatus


@pytest.mark.asyncio
async def test_plain_return_value_becomes_success():
    dispatcher = ActionDispatcher({"echo": lambda request: {"args": request.arguments}})

    result = await dispatcher.dispatch("echo", {"x": 1})

    assert result.status == ActionStatus.SUCCESS
    assert result.data == {"args": {"x": 1}}


@pytest.mark.asyncio
async def test_async_handler_result_passes_through():
    async def needs_account(request: ActionRequest):
        return ActionResult.precondition_failed("open_account")

    dispatcher = ActionDispatcher({"stock_purchase": needs_account})

    result = await dispatcher.dispatch("stock_purchase", {})

    assert result.status == ActionStatus.PRECONDITION_FAILED
    assert result.missing_dependency == "open_account"


@pytest.mark.asyncio
async def test_handler_receives_request_with_conversation():
    seen = []
    dispatcher = ActionDispatcher({"record": seen.append})

    await dispatcher.dispatch("record", {"ticker": "AAPL"}, conversation_id="c9")

    assert seen == [ActionRequest(intent_name="record", arguments={"ticker": "AAPL"}, conversation_id="c9")]


@pytest.mark.asyncio
async def test_unknown_intent_is_an_error():
    dispatcher = ActionDispatcher({})

    result = await dispatcher.dispatch("teleport", {})

    assert result.status == ActionStatus.ERROR
    assert "teleport" in result.message


@pytest.mark.asyncio
async def test_handler_exception_is_an_error():
    def boom(request):
        raise RuntimeError("exchange closed")

    dispatcher = ActionDispatcher({"boom": boom})

    result = await dispatcher.dispatch("boom", {})

    assert result == ActionResult.error("exchange closed")


@pytest.mark.asyncio
async def test_exception_without_message_reports_its_type():
    def boom(request):
        raise KeyError()

    result = await ActionDispatcher({"boom": boom}).dispatch("boom", {})

    assert result.message == "KeyError"


@pytest.mark.asyncio
async def test_slow_handler_times_out():
    async def slow(request):
        await asyncio.sleep(1)

    dispatcher = ActionDispatcher({"slow": slow}, timeout_seconds=0.01)

    result = await dispatcher.dispatch("slow", {})

    assert result.status == ActionStatus.ERROR
    assert "timed out" in result.message


@pytest.mark.asyncio
async def test_slow_sync_handler_times_out():
    def slow(request):
        time.sleep(0.5)
        return {"late": True}

    dispatcher = ActionDispatcher({"slow": slow}, timeout_seconds=0.05)

    started = time.monotonic()
    result = await dispatcher.dispatch("slow", {})
    elapsed = time.monotonic() - started

    assert result.status == ActionStatus.ERROR
    assert "timed out" in result.message
    assert elapsed < 0.4


@pytest.mark.asyncio
async def test_sync_handler_does_not_block_event_loop():
    loop_thread = threading.get_ident()
    handler_threads = []
    finished = []

    def record(request):
        handler_threads.append(threading.get_ident())
        time.sleep(0.2)
        finished.append(time.monotonic())

    ticks = []

    async def ticker():
        for _ in range(5):
            ticks.append(time.monotonic())
            await asyncio.sleep(0.01)

    await asyncio.gather(ActionDispatcher({"record": record}).dispatch("record", {}), ticker())

    assert handler_threads and handler_threads[0] != loop_thread
    # The ticker kept running while the handler slept
    assert ticks[-1] < finished[0]


def test_handler_table_is_frozen_at_construction():
    handlers = {"a": lambda request: None}
    dispatcher = ActionDispatcher(handlers)

    handlers["b"] = lambda request: None

    assert dispatcher.registered_intents == {"a"}
