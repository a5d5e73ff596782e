"""
Task Dialogue Orchestrator

A multi-turn, task-completion chatbot core: a deterministic dialogue state
machine that recognizes tasks, gathers their slots across turns, confirms
them with the user and dispatches business actions, with digressions and
precondition sub-tasks handled along the way.
"""

from task_dialogue.domain import (
    MODIFY_SLOT_INTENT,
    SlotDefinition,
    ToolKind,
    ToolMetadata,
    ToolRegistry,
)
from task_dialogue.state import (
    DialogueState,
    DialogueStatus,
    Message,
    OriginatingIntent,
)
from task_dialogue.schemas import IntentMatch, TurnResult
from task_dialogue.actions import ActionDispatcher, ActionRequest, ActionResult, ActionStatus
from task_dialogue.execution import DialogueEngine, IntentExtractor, ResponseGenerator

__all__ = [
    # Domain Layer
    "MODIFY_SLOT_INTENT",
    "SlotDefinition",
    "ToolKind",
    "ToolMetadata",
    "ToolRegistry",
    # State Layer
    "DialogueState",
    "DialogueStatus",
    "Message",
    "OriginatingIntent",
    # Schemas
    "IntentMatch",
    "TurnResult",
    # Action Layer
    "ActionDispatcher",
    "ActionRequest",
    "ActionResult",
    "ActionStatus",
    # Execution Layer
    "DialogueEngine",
    "IntentExtractor",
    "ResponseGenerator",
]
