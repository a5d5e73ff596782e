"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the application's services.
It is responsible for:
1. Instantiating the core Singleton services (Registry, Store, Adapters, Engine).
2. Validating the wiring at startup (every actionable intent has a handler).
3. Managing the lifecycle of these objects using @lru_cache to ensure
   they are created only once per application process.

Tests replace any of these through `app.dependency_overrides`.
"""


from functools import lru_cache
from fastapi import Depends

from ..config import settings
from ..data.tool_catalog import SLOTS, TOOLS
from ..domain.registry import ToolRegistry, validate_handlers
from ..llm.interface import LLMProvider
from ..llm.adapters.openai_adapter import OpenAIAdapter
from ..actions.dispatcher import ActionDispatcher
from ..actions.handlers import BrokerageLedger, build_demo_handlers
from ..repositories.state import (
    DialogueStateRepository,
    InMemoryDialogueStateRepository,
    SQLDialogueStateRepository,
)
from ..execution.engine import DialogueEngine
from ..execution.extractor import IntentExtractor
from ..execution.responder import ResponseGenerator
from ..services.chat import ChatService


# LLM Provider (Singleton)
@lru_cache()
def get_llm_provider() -> LLMProvider:
    return OpenAIAdapter(
        api_key=settings.OPENAI_API_KEY,
        model_name=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
        default_headers=settings.OPENAI_EXTRA_HEADERS,
        max_retries=settings.MAX_RETRIES,
    )

# Tool Registry (Singleton, validated on construction)
@lru_cache()
def get_tool_registry() -> ToolRegistry:
    return ToolRegistry(TOOLS, SLOTS)

# Action Dispatcher (Singleton)
# Note: the ledger lives inside the handlers, so this must be a singleton too.
@lru_cache()
def get_action_dispatcher() -> ActionDispatcher:
    handlers = build_demo_handlers(BrokerageLedger())
    validate_handlers(get_tool_registry(), handlers)
    return ActionDispatcher(handlers, timeout_seconds=settings.ACTION_TIMEOUT_SECONDS)

# State Repository (Singleton)
# Note: In-memory storage must be a singleton so data persists across requests!
@lru_cache()
def get_state_repository() -> DialogueStateRepository:
    if settings.STATE_BACKEND == "postgres":
        return SQLDialogueStateRepository()
    return InMemoryDialogueStateRepository()

# The Engine (Singleton Service)
@lru_cache()
def get_dialogue_engine(
    llm: LLMProvider = Depends(get_llm_provider),
    registry: ToolRegistry = Depends(get_tool_registry),
    repo: DialogueStateRepository = Depends(get_state_repository),
    dispatcher: ActionDispatcher = Depends(get_action_dispatcher),
) -> DialogueEngine:
    return build_dialogue_engine(llm, registry, repo, dispatcher)

# The Chat Service (Singleton Service)
@lru_cache()
def get_chat_service(
    repo: DialogueStateRepository = Depends(get_state_repository),
    engine: DialogueEngine = Depends(get_dialogue_engine),
) -> ChatService:
    return ChatService(state_repository=repo, engine=engine)


def build_dialogue_engine(
    llm: LLMProvider,
    registry: ToolRegistry,
    repo: DialogueStateRepository,
    dispatcher: ActionDispatcher,
) -> DialogueEngine:
    """
    Assembles the engine from its collaborators using the configured settings.
    Shared by the API wiring above and the console script.
    """
    extractor = IntentExtractor(
        llm_provider=llm,
        registry=registry,
        timeout_seconds=settings.ORACLE_TIMEOUT_SECONDS,
        temperature=settings.LLM_TEMPERATURE,
    )
    responder = ResponseGenerator(
        llm_provider=llm,
        timeout_seconds=settings.ORACLE_TIMEOUT_SECONDS,
        temperature=settings.LLM_TEMPERATURE,
        capabilities=[registry.title_for(name) for name in sorted(registry.business_intents())],
    )
    return DialogueEngine(
        registry=registry,
        state_repository=repo,
        extractor=extractor,
        responder=responder,
        dispatcher=dispatcher,
        affirmative_phrases=settings.AFFIRMATIVE_PHRASES,
        max_history_messages=settings.MAX_HISTORY_MESSAGES,
        reconfirm_resumed_task=settings.RECONFIRM_RESUMED_TASK,
    )
