"""
Demo Business Actions

Reference handlers for the default tool catalog. They stand in for real
brokerage and weather back ends: account opening, stock purchase (which
requires an open account) and a canned weather lookup.
"""

import logging
import threading
from typing import Dict, Optional, Set

from pydantic import BaseModel, Field, PositiveInt

from .dispatcher import ActionHandler
from .results import ActionRequest, ActionResult

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_CITY = "Hangzhou"


class OpenAccountRequest(BaseModel):
    education: str
    occupation: str
    address: str


class StockPurchaseRequest(BaseModel):
    ticker: str
    quantity: PositiveInt


class WeatherRequest(BaseModel):
    city: Optional[str] = Field(None, description="Falls back to the default city when empty.")


class BrokerageLedger:
    """
    In-memory record of which conversations own a brokerage account.
    """

    def __init__(self):
        self._accounts: Set[str] = set()
        self._lock = threading.Lock()

    def open_account(self, owner: str):
        with self._lock:
            self._accounts.add(owner)

    def has_account(self, owner: str) -> bool:
        with self._lock:
            return owner in self._accounts


def build_demo_handlers(ledger: BrokerageLedger) -> Dict[str, ActionHandler]:
    """Returns the name -> handler table for the default catalog."""

    def open_account(request: ActionRequest) -> dict:
        params = OpenAccountRequest.model_validate(request.arguments)
        ledger.open_account(_owner(request))
        logger.info(f"Opened account for conversation {request.conversation_id}")
        return {
            "status": "success",
            "message": f"Account opened for a user working as {params.occupation}.",
        }

    def stock_purchase(request: ActionRequest):
        if not ledger.has_account(_owner(request)):
            return ActionResult.precondition_failed(
                "open_account", message="A brokerage account is required before buying stock."
            )
        params = StockPurchaseRequest.model_validate(request.arguments)
        logger.info(f"Buying {params.quantity} x {params.ticker} for {request.conversation_id}")
        return {
            "status": "success",
            "message": f"Bought {params.quantity} shares of {params.ticker.upper()}.",
        }

    def check_weather(request: ActionRequest) -> dict:
        params = WeatherRequest.model_validate(request.arguments)
        city = params.city or DEFAULT_WEATHER_CITY
        return {"city": city, "weather": "sunny", "temperature": "25°C"}

    return {
        "open_account": open_account,
        "stock_purchase": stock_purchase,
        "check_weather": check_weather,
    }


def _owner(request: ActionRequest) -> str:
    return request.conversation_id or "anonymous"
