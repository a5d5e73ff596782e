"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class UserMessage(BaseModel):
    text: str


class ChatResponse(BaseModel):
    reply: str
    is_task_finished: bool


class ChatMessage(BaseModel):
    role: str
    content: str


class OriginatingIntentRead(BaseModel):
    intent_name: str
    arguments: Dict[str, Any]
    # The suspended task's own parent, up to the root task
    originating_intent: Optional["OriginatingIntentRead"] = None


class DialogueStateRead(BaseModel):
    conversation_id: str
    intent_name: str
    status: str
    required_slots: List[str]
    collected_slots: Dict[str, Any]
    missing_slots: List[str]
    originating_intent: Optional[OriginatingIntentRead] = None
    history: List[ChatMessage]
    updated_at: datetime
