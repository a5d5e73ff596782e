"""
Action Layer - Business Action Dispatch

Defines the ActionResult outcome model, the ActionDispatcher that routes
intents to handlers, and the demo handlers for the default catalog.
"""

from task_dialogue.actions.results import ActionRequest, ActionResult, ActionStatus
from task_dialogue.actions.dispatcher import ActionDispatcher, ActionHandler

__all__ = [
    "ActionDispatcher",
    "ActionHandler",
    "ActionRequest",
    "ActionResult",
    "ActionStatus",
]
