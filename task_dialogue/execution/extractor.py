"""
Extractor - Intent & Slot Extraction Layer

This module defines the IntentExtractor, a stateless wrapper around the
oracle's function-calling capability. Each call offers the oracle only the
intents the engine allows at that point of the dialogue; whatever comes
back is validated and reduced to an IntentMatch or None ("no intent").
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..domain.registry import ToolRegistry
from ..infrastructure.timeouts import run_with_timeout
from ..llm.interface import LLMProvider
from ..schemas.decisions import IntentMatch
from ..state.models import Message
from .prompts import Template, render

logger = logging.getLogger(__name__)

_ARGUMENTS_ADAPTER = TypeAdapter(Dict[str, Any])


def to_llm_messages(system_prompt: str, history: List[Message]) -> List[dict]:
    """System prompt followed by the conversation, in OpenAI chat format."""
    messages = [{"role": "system", "content": system_prompt}]
    for msg in history:
        messages.append({"role": msg.role, "content": msg.content})
    return messages


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class IntentExtractor:
    def __init__(
        self,
        llm_provider: LLMProvider,
        registry: ToolRegistry,
        timeout_seconds: Optional[float] = None,
        temperature: float = 0.0,
    ):
        self.llm = llm_provider
        self.registry = registry
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature

    async def extract(
        self,
        history: List[Message],
        allowed_intents: Iterable[str],
        active_task: Optional[str] = None,
    ) -> Optional[IntentMatch]:
        """
        Asks the oracle which (if any) of `allowed_intents` the conversation expresses.

        Never raises: oracle errors, timeouts, out-of-scope tool names and
        malformed arguments all degrade to None for this call only.
        """
        allowed = set(allowed_intents)
        tools = self.registry.function_schemas(allowed)
        if not tools:
            return None

        system_prompt = render(Template.INTENT_EXTRACTION, active_task=active_task)
        messages = to_llm_messages(system_prompt, history)

        try:
            tool_call = await run_with_timeout(
                lambda: self.llm.select_tool(
                    messages=messages, tools=tools, temperature=self.temperature
                ),
                self.timeout_seconds,
                operation_name="intent extraction",
            )
        except Exception as e:
            logger.warning(f"Intent extraction failed, treating as no intent: {e}")
            return None

        if tool_call is None:
            logger.debug(f"No intent among {sorted(allowed)}")
            return None

        if tool_call.name not in allowed:
            logger.warning(
                f"Oracle chose '{tool_call.name}' outside the allowed set {sorted(allowed)}"
            )
            return None

        try:
            arguments = _ARGUMENTS_ADAPTER.validate_json(tool_call.arguments or "{}")
        except ValidationError as e:
            logger.warning(f"Malformed arguments for '{tool_call.name}': {e}")
            return None

        cleaned = {key: value for key, value in arguments.items() if not _is_blank(value)}
        logger.info(f"Extracted intent '{tool_call.name}' with slots {sorted(cleaned)}")
        return IntentMatch(intent_name=tool_call.name, arguments=cleaned)
