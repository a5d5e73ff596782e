"""
Chat Service - Application Orchestration Layer

This service is the entry point for all conversation operations coming
from the API. It owns the caller-side guarantees the DialogueEngine leaves
to its callers: at most one in-flight turn per conversation, plus reading
and abandoning a conversation's task.
"""

import asyncio
import logging
from typing import Dict, Optional

from ..execution.engine import DialogueEngine
from ..repositories.state import DialogueStateRepository
from ..schemas.decisions import TurnResult
from ..state.models import DialogueState

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        state_repository: DialogueStateRepository,
        engine: DialogueEngine,
    ):
        self.state_repo = state_repository
        self.engine = engine
        self._locks: Dict[str, asyncio.Lock] = {}
        self._in_flight: Dict[str, int] = {}

    def get_state(self, conversation_id: str) -> Optional[DialogueState]:
        """Retrieves the task in progress (None when the conversation is idle)."""
        return self.state_repo.get(conversation_id)

    def abandon_task(self, conversation_id: str) -> bool:
        """Explicitly drops the task in progress. Returns False if there was none."""
        removed = self.state_repo.clear(conversation_id)
        if removed:
            logger.info(f"Task abandoned for conversation {conversation_id}")
        return removed

    async def process_message(self, conversation_id: str, user_text: str) -> TurnResult:
        """
        Runs one engine turn. Turns for the same conversation are serialized;
        different conversations proceed independently.
        """
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._in_flight[conversation_id] = self._in_flight.get(conversation_id, 0) + 1
        try:
            async with lock:
                return await self.engine.process_message(user_text, conversation_id)
        finally:
            self._in_flight[conversation_id] -= 1
            # Drop the lock once no turn is running or queued for this conversation
            if not self._in_flight[conversation_id]:
                del self._in_flight[conversation_id]
                self._locks.pop(conversation_id, None)
