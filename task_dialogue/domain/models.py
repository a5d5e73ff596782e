"""
Domain Layer - Static Tool Metadata

This module defines the immutable catalog records describing which intents
the assistant understands. Each ToolMetadata doubles as the function
definition offered to the oracle and as the slot checklist the
DialogueEngine works through before an action may run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class ToolKind(str, Enum):
    """
    Classifies how the engine treats an intent.

    BUSINESS: A task the user can start while idle (slot filling + confirmation).
    DIGRESSION: A side query answered on any turn without touching the active task.
    CONTROL: Drives the dialogue itself (e.g. correcting a collected slot).
    """
    BUSINESS = "business"
    DIGRESSION = "digression"
    CONTROL = "control"


@dataclass(frozen=True)
class SlotDefinition:
    """
    A named parameter an intent may require.

    Attributes:
        name: Slot key as it appears in collected slots and action arguments.
        question: Text asked when the slot is missing.
        description: Hint given to the oracle in the function schema.
        json_type: JSON Schema type advertised to the oracle.
    """
    name: str
    question: str
    description: str = ""
    json_type: str = "string"


@dataclass(frozen=True)
class ToolMetadata:
    """
    Catalog entry for one intent.

    Attributes:
        name: Unique intent name; also the action handler key.
        title: Human-readable name used in replies (e.g. "stock purchase").
        description: Oracle-facing description of when to pick this intent.
        kind: ToolKind classification.
        required_slots: Slots that must be collected before dispatch, in the
            order they are asked.
        optional_slots: Extra parameters the oracle may fill but the engine
            never asks for.
    """
    name: str
    title: str
    description: str
    kind: ToolKind = ToolKind.BUSINESS
    required_slots: Tuple[str, ...] = ()
    optional_slots: Tuple[str, ...] = ()

    def to_function_schema(self, slots: Mapping[str, SlotDefinition]) -> Dict:
        """Render this tool in the OpenAI function-calling format."""
        properties: Dict[str, Dict[str, str]] = {}
        for slot_name in self.required_slots + self.optional_slots:
            slot: Optional[SlotDefinition] = slots.get(slot_name)
            properties[slot_name] = {
                "type": slot.json_type if slot else "string",
                "description": slot.description if slot else "",
            }
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {"type": "object", "properties": properties},
            },
        }
