import asyncio
from unittest.mock import MagicMock

import pytest

from task_dialogue.schemas.decisions import TurnResult
from task_dialogue.services.chat import ChatService


class RecordingEngine:
    """Engine double that tracks how many turns overlap per conversation."""

    def __init__(self):
        self.active = {}
        self.max_overlap = {}
        self.running = 0
        self.max_running = 0

    async def process_message(self, user_message, conversation_id):
        self.active[conversation_id] = self.active.get(conversation_id, 0) + 1
        self.max_overlap[conversation_id] = max(
            self.max_overlap.get(conversation_id, 0), self.active[conversation_id]
        )
        self.running += 1
        self.max_running = max(self.max_running, self.running)
        await asyncio.sleep(0.01)
        self.running -= 1
        self.active[conversation_id] -= 1
        return TurnResult(reply=user_message, is_task_finished=True)


@pytest.mark.asyncio
async def test_turns_for_one_conversation_are_serialized(state_repo):
    engine = RecordingEngine()
    service = ChatService(state_repository=state_repo, engine=engine)

    results = await asyncio.gather(*(service.process_message("c1", f"m{i}") for i in range(3)))

    assert [r.reply for r in results] == ["m0", "m1", "m2"]
    assert engine.max_overlap["c1"] == 1
    assert service._locks == {}


@pytest.mark.asyncio
async def test_different_conversations_run_concurrently(state_repo):
    engine = RecordingEngine()
    service = ChatService(state_repository=state_repo, engine=engine)

    await asyncio.gather(service.process_message("c1", "a"), service.process_message("c2", "b"))

    assert engine.max_overlap == {"c1": 1, "c2": 1}
    assert engine.max_running == 2


@pytest.mark.asyncio
async def test_lock_is_released_when_engine_fails(state_repo):
    engine = MagicMock()
    engine.process_message.side_effect = RuntimeError("boom")
    service = ChatService(state_repository=state_repo, engine=engine)

    with pytest.raises(RuntimeError):
        await service.process_message("c1", "hi")

    assert service._locks == {}


def test_abandon_task_reports_presence(state_repo, engine):
    service = ChatService(state_repository=state_repo, engine=engine)

    assert service.abandon_task("c1") is False
