"""
State Layer - Runtime Data Models

This module defines the per-conversation dialogue state that tracks a task
from recognition through slot filling to confirmation. A conversation with
no stored DialogueState is Idle.

Nested sub-tasks (unmet action preconditions) are modelled by the
OriginatingIntent snapshot: the suspended parent's name and arguments ride
along on the sub-task's state until the sub-task succeeds.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class DialogueStatus(str, Enum):
    """
    GATHERING_INFO: Required slots are still being collected.
    CONFIRMATION_PENDING: All slots are present; waiting for the user's yes.
    """
    GATHERING_INFO = "GATHERING_INFO"
    CONFIRMATION_PENDING = "CONFIRMATION_PENDING"


class OriginatingIntent(BaseModel):
    """
    Snapshot of a parent task suspended while a precondition sub-task runs.
    """
    intent_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

    # The parent's own parent, when the suspended task was itself a sub-task
    originating_intent: Optional["OriginatingIntent"] = None

    def chain(self) -> List[str]:
        """Intent names from this snapshot up to the root task."""
        names = [self.intent_name]
        if self.originating_intent:
            names.extend(self.originating_intent.chain())
        return names


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DialogueState(BaseModel):
    """
    The state of the single task in progress for one conversation.
    """
    conversation_id: str
    intent_name: str
    required_slots: List[str] = Field(default_factory=list)
    collected_slots: Dict[str, Any] = Field(default_factory=dict)
    status: DialogueStatus = DialogueStatus.GATHERING_INFO
    originating_intent: Optional[OriginatingIntent] = None
    history: List[Message] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _confirmation_requires_all_slots(self):
        if self.status == DialogueStatus.CONFIRMATION_PENDING and self.missing_slots():
            raise ValueError(
                f"Cannot await confirmation for '{self.intent_name}' "
                f"with missing slots: {self.missing_slots()}"
            )
        return self

    def missing_slots(self) -> List[str]:
        """Required slots without a non-null value, in declared order."""
        return [
            slot for slot in self.required_slots
            if self.collected_slots.get(slot) is None
        ]

    def merge_slots(self, values: Dict[str, Any]):
        """Newer non-null values overwrite older ones; nulls never erase."""
        for key, value in values.items():
            if value is not None:
                self.collected_slots[key] = value

    def add_message(self, role: Literal["user", "assistant"], content: str):
        self.history.append(Message(role=role, content=content))
