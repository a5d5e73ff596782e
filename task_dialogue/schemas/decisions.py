"""
Schemas - Decision Models Exchanged Inside a Turn

This module defines the Pydantic models that carry decisions between the
oracle wrappers and the DialogueEngine: what the IntentExtractor matched,
how a slot correction is shaped, and what a turn returns to the caller.
"""
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class IntentMatch(BaseModel):
    """
    A recognized intent with the arguments the oracle extracted for it.
    Absence of an IntentMatch means "no intent".
    """
    intent_name: str = Field(
        ...,
        description="One of the intents the extraction call was restricted to."
    )
    arguments: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extracted slot values. Keys with null values are dropped."
    )


class ModifySlotArguments(BaseModel):
    """
    Arguments of the 'modify_slot' control intent.
    """
    slot_name: str = Field(..., min_length=1)
    slot_value: Any = Field(..., description="The corrected value; null is rejected.")

    @field_validator("slot_value")
    @classmethod
    def _value_present(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("slot_value must be provided")
        return value


class TurnResult(BaseModel):
    """
    The outcome of processing one user utterance.
    """
    reply: str = Field(..., description="Text to show the user.")
    is_task_finished: bool = Field(
        ...,
        description="True when no task remains in progress after this turn."
    )
