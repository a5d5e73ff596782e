import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..exceptions import StateStoreError
from ..state.models import DialogueState
from ..infrastructure.database.tables import DialogueStateDBModel
from ..infrastructure.database.connection import get_engine

logger = logging.getLogger(__name__)


class DialogueStateRepository(ABC):
    """
    Defines how the engine accesses per-conversation dialogue state.
    Implementations must make get/save/clear atomic per conversation id;
    no coordination across ids is required.
    """

    @abstractmethod
    def get(self, conversation_id: str) -> Optional[DialogueState]:
        """Retrieves the state of the active task, or None when Idle."""
        pass

    @abstractmethod
    def save(self, conversation_id: str, state: DialogueState):
        """Persists (inserts or replaces) the state."""
        pass

    @abstractmethod
    def clear(self, conversation_id: str) -> bool:
        """Removes the state. Returns True if a record existed."""
        pass


class InMemoryDialogueStateRepository(DialogueStateRepository):
    """
    Process-local storage for testing/dev purposes.
    States are kept serialized so callers always receive independent copies.
    """

    def __init__(self):
        self._store: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> Optional[DialogueState]:
        with self._lock:
            data = self._store.get(conversation_id)
        if data is None:
            return None
        return DialogueState.model_validate(data)

    def save(self, conversation_id: str, state: DialogueState):
        state.updated_at = datetime.now(timezone.utc)
        data = state.model_dump(mode="json")
        with self._lock:
            self._store[conversation_id] = data

    def clear(self, conversation_id: str) -> bool:
        with self._lock:
            return self._store.pop(conversation_id, None) is not None


class SQLDialogueStateRepository(DialogueStateRepository):
    """
    SQL storage (PostgreSQL + JSONB in production) for dialogue state.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine or get_engine()

    def get(self, conversation_id: str) -> Optional[DialogueState]:
        try:
            with Session(self._engine) as db:
                result = db.get(DialogueStateDBModel, conversation_id)
                if not result:
                    return None

                # Deserialize JSON back into the Pydantic state model
                state = DialogueState.model_validate(result.state)
                state.updated_at = result.updated_at
                return state
        except SQLAlchemyError as e:
            logger.error(f"Failed to load state for {conversation_id}: {e}")
            raise StateStoreError(f"State store unavailable: {e}") from e

    def save(self, conversation_id: str, state: DialogueState):
        now = datetime.now(timezone.utc)
        state.updated_at = now
        try:
            with Session(self._engine) as db:
                result = db.get(DialogueStateDBModel, conversation_id)
                if result:
                    result.state = state.model_dump(mode="json")
                    result.updated_at = now
                else:
                    result = DialogueStateDBModel(
                        conversation_id=conversation_id,
                        state=state.model_dump(mode="json"),
                    )
                db.add(result)
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save state for {conversation_id}: {e}")
            raise StateStoreError(f"State store unavailable: {e}") from e

    def clear(self, conversation_id: str) -> bool:
        try:
            with Session(self._engine) as db:
                statement = select(DialogueStateDBModel).where(
                    DialogueStateDBModel.conversation_id == conversation_id
                )
                result = db.exec(statement).first()

                if result:
                    db.delete(result)
                    db.commit()
                    return True
                return False
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear state for {conversation_id}: {e}")
            raise StateStoreError(f"State store unavailable: {e}") from e
