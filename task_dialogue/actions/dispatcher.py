"""
Action Dispatcher.

Routes an intent name to its registered handler and normalizes whatever
comes back into an ActionResult. The handler table is fixed at
construction; nothing is discovered or registered at request time.
"""

import asyncio
import inspect
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Set, Union

from ..infrastructure.timeouts import run_with_timeout
from .results import ActionRequest, ActionResult

logger = logging.getLogger(__name__)

ActionHandler = Callable[[ActionRequest], Union[Any, Awaitable[Any]]]


class ActionDispatcher:
    def __init__(
        self,
        handlers: Mapping[str, ActionHandler],
        timeout_seconds: Optional[float] = None,
    ):
        self._handlers = MappingProxyType(dict(handlers))
        self.timeout_seconds = timeout_seconds

    @property
    def registered_intents(self) -> Set[str]:
        return set(self._handlers)

    async def dispatch(
        self,
        intent_name: str,
        arguments: Dict[str, Any],
        conversation_id: Optional[str] = None,
    ) -> ActionResult:
        """
        Invokes the handler for `intent_name`. Never raises: unknown intents,
        handler exceptions and timeouts all become ERROR results.
        """
        handler = self._handlers.get(intent_name)
        if handler is None:
            logger.error(f"No action handler registered for '{intent_name}'")
            return ActionResult.error(f"No action is available for '{intent_name}'.")

        request = ActionRequest(
            intent_name=intent_name,
            arguments=dict(arguments),
            conversation_id=conversation_id,
        )
        logger.info(f"Dispatching '{intent_name}' for conversation {conversation_id}")

        try:
            outcome = await run_with_timeout(
                lambda: self._invoke(handler, request),
                self.timeout_seconds,
                operation_name=f"action '{intent_name}'",
            )
        except Exception as e:
            logger.error(f"Action '{intent_name}' failed: {e}")
            return ActionResult.error(str(e) or type(e).__name__)

        if isinstance(outcome, ActionResult):
            logger.info(f"Action '{intent_name}' returned {outcome.status.value}")
            return outcome
        logger.info(f"Action '{intent_name}' succeeded")
        return ActionResult.success(outcome)

    @staticmethod
    async def _invoke(handler: ActionHandler, request: ActionRequest) -> Any:
        if inspect.iscoroutinefunction(handler):
            return await handler(request)
        # Sync handlers run off the event loop so the timeout can fire and
        # other conversations keep moving
        outcome = await asyncio.to_thread(handler, request)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome
