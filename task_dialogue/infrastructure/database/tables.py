"""
Database Table Definitions.

This module defines the SQL schema using SQLModel.
We use the 'DBModel' suffix to distinguish these persistence models
from the Pydantic state model (DialogueState).
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, Column
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DialogueStateDBModel(SQLModel, table=True):
    """
    Persistence model for in-progress dialogue tasks.
    One row per conversation with an active task; Idle conversations have no row.
    """

    __tablename__ = "dialogue_states"

    conversation_id: str = Field(primary_key=True, index=True)

    # The entire DialogueState (slots, status, parent snapshot, history).
    # JSONB on PostgreSQL, plain JSON elsewhere.
    state: Dict[str, Any] = Field(
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    )

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
