"""
Schemas - Decision Models Exchanged Inside a Turn

Defines the Pydantic models passed between the oracle wrappers and the
DialogueEngine, and the TurnResult returned to callers.
"""

from task_dialogue.schemas.decisions import IntentMatch, ModifySlotArguments, TurnResult

__all__ = [
    "IntentMatch",
    "ModifySlotArguments",
    "TurnResult",
]
