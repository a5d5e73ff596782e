"""
State Layer - Runtime Data Models

Defines the per-conversation dialogue state: the active task, its slots,
its status and the suspended parent task (if any).
"""

from task_dialogue.state.models import (
    DialogueState,
    DialogueStatus,
    Message,
    OriginatingIntent,
)

__all__ = [
    "DialogueState",
    "DialogueStatus",
    "Message",
    "OriginatingIntent",
]
