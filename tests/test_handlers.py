import pytest

from task_dialogue.actions.dispatcher import ActionDispatcher
from task_dialogue.actions.handlers import BrokerageLedger, build_demo_handlers
from task_dialogue.actions.results import ActionStatus
from task_dialogue.data.tool_catalog import SLOTS, TOOLS
from task_dialogue.domain.registry import ToolRegistry, validate_handlers


@pytest.fixture
def demo_dispatcher() -> ActionDispatcher:
    return ActionDispatcher(build_demo_handlers(BrokerageLedger()))


def test_demo_handlers_cover_catalog():
    validate_handlers(ToolRegistry(TOOLS, SLOTS), build_demo_handlers(BrokerageLedger()))


@pytest.mark.asyncio
async def test_purchase_requires_an_open_account(demo_dispatcher):
    result = await demo_dispatcher.dispatch("stock_purchase", {"ticker": "AAPL", "quantity": 100}, "c1")

    assert result.status == ActionStatus.PRECONDITION_FAILED
    assert result.missing_dependency == "open_account"


@pytest.mark.asyncio
async def test_purchase_succeeds_after_account_is_opened(demo_dispatcher):
    opened = await demo_dispatcher.dispatch(
        "open_account",
        {"education": "bachelor", "occupation": "engineer", "address": "1 Main St"},
        "c1",
    )
    bought = await demo_dispatcher.dispatch("stock_purchase", {"ticker": "aapl", "quantity": 100}, "c1")

    assert opened.status == ActionStatus.SUCCESS
    assert bought.status == ActionStatus.SUCCESS
    assert "AAPL" in bought.data["message"]


@pytest.mark.asyncio
async def test_accounts_are_per_conversation(demo_dispatcher):
    await demo_dispatcher.dispatch(
        "open_account",
        {"education": "bachelor", "occupation": "engineer", "address": "1 Main St"},
        "c1",
    )

    result = await demo_dispatcher.dispatch("stock_purchase", {"ticker": "AAPL", "quantity": 1}, "c2")

    assert result.status == ActionStatus.PRECONDITION_FAILED


@pytest.mark.asyncio
async def test_invalid_quantity_is_an_error(demo_dispatcher):
    await demo_dispatcher.dispatch(
        "open_account",
        {"education": "bachelor", "occupation": "engineer", "address": "1 Main St"},
        "c1",
    )

    result = await demo_dispatcher.dispatch("stock_purchase", {"ticker": "AAPL", "quantity": -3}, "c1")

    assert result.status == ActionStatus.ERROR
    assert "quantity" in result.message


@pytest.mark.asyncio
async def test_weather_defaults_city(demo_dispatcher):
    default = await demo_dispatcher.dispatch("check_weather", {})
    paris = await demo_dispatcher.dispatch("check_weather", {"city": "Paris"})

    assert default.data["city"] == "Hangzhou"
    assert paris.data == {"city": "Paris", "weather": "sunny", "temperature": "25°C"}
