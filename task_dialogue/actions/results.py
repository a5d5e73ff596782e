"""
Action Results - Discriminated Outcome of an Action Dispatch

Every action call, whatever the handler returned or raised, is normalized
into an ActionResult so the DialogueEngine only ever branches on `status`.
"""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class ActionStatus(str, Enum):
    """
    SUCCESS: The action completed; `data` carries its payload.
    PRECONDITION_FAILED: The action needs another intent (`missing_dependency`) done first.
    ERROR: The action failed; `message` says why.
    """
    SUCCESS = "SUCCESS"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    ERROR = "ERROR"


class ActionResult(BaseModel):
    status: ActionStatus
    data: Any = None
    missing_dependency: Optional[str] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def _dependency_required_on_precondition_failure(self):
        if self.status == ActionStatus.PRECONDITION_FAILED and not self.missing_dependency:
            raise ValueError("PRECONDITION_FAILED results must name a missing_dependency.")
        return self

    @classmethod
    def success(cls, data: Any = None) -> "ActionResult":
        return cls(status=ActionStatus.SUCCESS, data=data)

    @classmethod
    def precondition_failed(cls, missing_dependency: str, message: Optional[str] = None) -> "ActionResult":
        return cls(
            status=ActionStatus.PRECONDITION_FAILED,
            missing_dependency=missing_dependency,
            message=message,
        )

    @classmethod
    def error(cls, message: str) -> "ActionResult":
        return cls(status=ActionStatus.ERROR, message=message)


class ActionRequest(BaseModel):
    """
    What a handler receives: the slot values plus the conversation they belong to.
    """
    intent_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    conversation_id: Optional[str] = None
