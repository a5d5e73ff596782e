"""
Domain Layer - Static Tool Metadata

Defines the declarative catalog of intents (tools), their slots and the
registry that answers lookups over them.
"""

from task_dialogue.domain.models import (
    SlotDefinition,
    ToolKind,
    ToolMetadata,
)
from task_dialogue.domain.registry import (
    AFFIRMATIVE_PHRASES,
    MODIFY_SLOT_INTENT,
    ToolRegistry,
    validate_handlers,
)

__all__ = [
    "AFFIRMATIVE_PHRASES",
    "MODIFY_SLOT_INTENT",
    "SlotDefinition",
    "ToolKind",
    "ToolMetadata",
    "ToolRegistry",
    "validate_handlers",
]
