import os

# Settings() is instantiated at import time and requires an API key.
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("STATE_BACKEND", "memory")

from unittest.mock import AsyncMock, MagicMock

import pytest

from task_dialogue.actions.results import ActionResult
from task_dialogue.data.tool_catalog import SLOTS, TOOLS
from task_dialogue.domain.registry import ToolRegistry
from task_dialogue.execution.engine import DialogueEngine
from task_dialogue.repositories.state import InMemoryDialogueStateRepository

from tests.support import ScriptedExtractor


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry(TOOLS, SLOTS)


@pytest.fixture
def state_repo() -> InMemoryDialogueStateRepository:
    return InMemoryDialogueStateRepository()


@pytest.fixture
def extractor() -> ScriptedExtractor:
    return ScriptedExtractor()


@pytest.fixture
def responder() -> MagicMock:
    responder = MagicMock()
    responder.summarize = AsyncMock(return_value="SUMMARY")
    responder.free_chat = AsyncMock(return_value="CHAT")
    return responder


@pytest.fixture
def dispatcher() -> MagicMock:
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value=ActionResult.success({"ok": True}))
    return dispatcher


@pytest.fixture
def engine(registry, state_repo, extractor, responder, dispatcher) -> DialogueEngine:
    return DialogueEngine(
        registry=registry,
        state_repository=state_repo,
        extractor=extractor,
        responder=responder,
        dispatcher=dispatcher,
        affirmative_phrases=["yes", "correct"],
    )
