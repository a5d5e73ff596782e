"""
Tool Registry.

Read-only lookups over the declarative tool catalog. The registry is built
once at startup and validated eagerly so that a broken catalog fails the
process instead of a conversation.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..exceptions import RegistryValidationError
from .models import SlotDefinition, ToolKind, ToolMetadata

MODIFY_SLOT_INTENT = "modify_slot"

GENERIC_SLOT_QUESTION = "Please provide your {slot}."

# Replies that confirm a pending task (case-insensitive substring match)
AFFIRMATIVE_PHRASES = ("yes", "yep", "yeah", "correct", "confirm", "that's right")


class ToolRegistry:
    def __init__(self, tools: Iterable[ToolMetadata], slots: Iterable[SlotDefinition] = ()):
        self._tools: Dict[str, ToolMetadata] = {}
        for tool in tools:
            if not tool.name or not tool.name.strip():
                raise RegistryValidationError("Tool names must be non-empty.")
            if tool.name in self._tools:
                raise RegistryValidationError(f"Duplicate tool name '{tool.name}'.")
            if len(set(tool.required_slots)) != len(tool.required_slots):
                raise RegistryValidationError(
                    f"Tool '{tool.name}' lists a required slot more than once."
                )
            self._tools[tool.name] = tool

        self._slots: Dict[str, SlotDefinition] = {}
        for slot in slots:
            if slot.name in self._slots:
                raise RegistryValidationError(f"Duplicate slot definition '{slot.name}'.")
            self._slots[slot.name] = slot

    def get(self, intent_name: str) -> Optional[ToolMetadata]:
        return self._tools.get(intent_name)

    def required_slots(self, intent_name: str) -> List[str]:
        """Ordered required slots; empty for unknown or slot-less intents."""
        tool = self._tools.get(intent_name)
        if not tool:
            return []
        return list(tool.required_slots)

    def question_for(self, slot_name: str) -> str:
        slot = self._slots.get(slot_name)
        if slot:
            return slot.question
        return GENERIC_SLOT_QUESTION.format(slot=slot_name)

    def title_for(self, intent_name: str) -> str:
        tool = self._tools.get(intent_name)
        if tool:
            return tool.title
        return intent_name.replace("_", " ")

    def business_intents(self) -> Set[str]:
        return self._names_of_kind(ToolKind.BUSINESS)

    def digression_intents(self) -> Set[str]:
        return self._names_of_kind(ToolKind.DIGRESSION)

    def actionable_intents(self) -> Set[str]:
        """Intents that end in an action dispatch (everything except control intents)."""
        return self.business_intents() | self.digression_intents()

    def tools_for(self, intent_names: Iterable[str]) -> List[ToolMetadata]:
        wanted = set(intent_names)
        return [tool for name, tool in self._tools.items() if name in wanted]

    def function_schemas(self, intent_names: Iterable[str]) -> List[dict]:
        return [tool.to_function_schema(self._slots) for tool in self.tools_for(intent_names)]

    def _names_of_kind(self, kind: ToolKind) -> Set[str]:
        return {name for name, tool in self._tools.items() if tool.kind == kind}


def validate_handlers(registry: ToolRegistry, handlers: Mapping[str, object]):
    """Fail fast when an actionable intent has no registered handler."""
    missing = registry.actionable_intents() - set(handlers)
    if missing:
        raise RegistryValidationError(
            f"No action handler registered for: {', '.join(sorted(missing))}"
        )
