import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import Response

from ..config import settings
from ..exceptions import StateStoreError
from ..infrastructure.database.connection import init_db
from ..services.chat import ChatService
from ..state.models import OriginatingIntent
from .dependencies import get_chat_service
from .schemas import (
    ChatMessage,
    ChatResponse,
    DialogueStateRead,
    OriginatingIntentRead,
    UserMessage,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.STATE_BACKEND == "postgres":
        init_db()
    yield


app = FastAPI(title="Task Dialogue Orchestrator", lifespan=lifespan)

# --- Endpoints ---

@app.post("/conversations/{conversation_id}/messages", response_model=ChatResponse)
async def handle_message(
    conversation_id: str,
    message: UserMessage,
    service: ChatService = Depends(get_chat_service)
):
    try:
        turn_result = await service.process_message(conversation_id, message.text)
    except StateStoreError as e:
        logger.error(f"Turn aborted for {conversation_id}: {e}")
        raise HTTPException(status_code=503, detail="Conversation state is unavailable.")

    # Explicitly Map: TurnResult (Engine) -> ChatResponse (API)
    return ChatResponse(
        reply=turn_result.reply,
        is_task_finished=turn_result.is_task_finished,
    )


@app.get("/conversations/{conversation_id}/state", response_model=DialogueStateRead)
def get_state(
    conversation_id: str,
    service: ChatService = Depends(get_chat_service)
):
    """
    Returns the task in progress. 404 means the conversation is idle.
    """
    try:
        state = service.get_state(conversation_id)
    except StateStoreError:
        raise HTTPException(status_code=503, detail="Conversation state is unavailable.")
    if not state:
        raise HTTPException(status_code=404, detail="No task in progress")

    return DialogueStateRead(
        conversation_id=state.conversation_id,
        intent_name=state.intent_name,
        status=state.status.value,
        required_slots=state.required_slots,
        collected_slots=state.collected_slots,
        missing_slots=state.missing_slots(),
        originating_intent=_originating_read(state.originating_intent),
        history=[ChatMessage(role=msg.role, content=msg.content) for msg in state.history],
        updated_at=state.updated_at,
    )


@app.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
def abandon_task(
    conversation_id: str,
    service: ChatService = Depends(get_chat_service)
):
    """
    Abandons the task in progress. Returns 204 No Content on success.
    """
    try:
        removed = service.abandon_task(conversation_id)
    except StateStoreError:
        raise HTTPException(status_code=503, detail="Conversation state is unavailable.")
    if not removed:
        raise HTTPException(status_code=404, detail="No task in progress")

    # For 204, we must explicitly return a Response object with no content
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _originating_read(parent: Optional[OriginatingIntent]) -> Optional[OriginatingIntentRead]:
    if parent is None:
        return None
    return OriginatingIntentRead(
        intent_name=parent.intent_name,
        arguments=parent.arguments,
        originating_intent=_originating_read(parent.originating_intent),
    )
