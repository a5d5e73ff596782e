"""Test doubles shared across the suite."""

from typing import Any, Dict, Iterable, List, Optional, Union
from unittest.mock import AsyncMock

from task_dialogue.domain.registry import MODIFY_SLOT_INTENT
from task_dialogue.schemas.decisions import IntentMatch

DIGRESSION = frozenset({"check_weather"})
BUSINESS = frozenset({"open_account", "stock_purchase"})
MODIFY = frozenset({MODIFY_SLOT_INTENT})

ScriptEntry = Union[None, IntentMatch, List[Optional[IntentMatch]]]


class ScriptedExtractor:
    """
    Stand-in for IntentExtractor keyed by the allowed-intent set of each call.

    A script value may be a single IntentMatch/None (returned every time) or a
    list consumed one call at a time (None once exhausted). Unscripted scopes
    return None. Every call is recorded as (allowed_set, last_user_message).
    """

    def __init__(self, script: Optional[Dict[frozenset, ScriptEntry]] = None):
        self.script: Dict[frozenset, ScriptEntry] = dict(script or {})
        self.calls: List[tuple] = []
        self.extract = AsyncMock(side_effect=self._extract)

    def on(self, allowed: Iterable[str], *results: Optional[IntentMatch]):
        self.script[frozenset(allowed)] = list(results)
        return self

    def calls_for(self, allowed: Iterable[str]) -> int:
        key = frozenset(allowed)
        return sum(1 for scope, _ in self.calls if scope == key)

    async def _extract(self, history, allowed_intents, active_task=None):
        key = frozenset(allowed_intents)
        last_user = next((m.content for m in reversed(history) if m.role == "user"), "")
        self.calls.append((key, last_user))
        entry = self.script.get(key)
        if isinstance(entry, list):
            return entry.pop(0) if entry else None
        return entry


def match(intent_name: str, **arguments: Any) -> IntentMatch:
    return IntentMatch(intent_name=intent_name, arguments=arguments)
