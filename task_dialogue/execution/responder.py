"""
Responder - Natural-Language Replies from the Oracle

Turns structured action outcomes into user-facing text (summaries) and
handles turns where the user is just chatting. Both calls fall back to
deterministic text when the oracle is unavailable, so a turn always ends
with a reply.
"""

import json
import logging
from typing import Iterable, List, Optional

from fastapi.encoders import jsonable_encoder

from ..actions.results import ActionResult, ActionStatus
from ..infrastructure.timeouts import run_with_timeout
from ..llm.interface import LLMProvider
from ..state.models import Message
from .extractor import to_llm_messages
from .prompts import Template, render, replies

logger = logging.getLogger(__name__)


class ResponseGenerator:
    def __init__(
        self,
        llm_provider: LLMProvider,
        timeout_seconds: Optional[float] = None,
        temperature: float = 0.0,
        capabilities: Iterable[str] = (),
    ):
        self.llm = llm_provider
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.capabilities = list(capabilities)

    async def summarize(self, history: List[Message], result: ActionResult) -> str:
        """
        Summarize an action outcome in the context of the user's latest request.
        """
        user_request = _latest_user_message(history)
        result_json = json.dumps(
            jsonable_encoder(result, exclude_none=True), ensure_ascii=False
        )
        system_prompt = render(
            Template.RESULT_SUMMARY,
            user_request=user_request,
            status=result.status.value,
            result_json=result_json,
        )
        messages = [{"role": "system", "content": system_prompt}]

        try:
            summary = await run_with_timeout(
                lambda: self.llm.generate_text(messages=messages, temperature=self.temperature),
                self.timeout_seconds,
                operation_name="result summary",
            )
            if summary and summary.strip():
                return summary.strip()
            logger.warning("Oracle returned an empty summary")
        except Exception as e:
            logger.error(f"Result summarization failed: {e}")

        if result.status == ActionStatus.ERROR:
            return replies.SUMMARY_ERROR_FALLBACK.format(message=result.message or "unknown error")
        return replies.SUMMARY_SUCCESS_FALLBACK

    async def free_chat(self, history: List[Message]) -> str:
        """Reply to small talk; no tools are offered to the oracle."""
        system_prompt = render(Template.FREE_CHAT, capabilities=self.capabilities)
        messages = to_llm_messages(system_prompt, history)

        try:
            reply = await run_with_timeout(
                lambda: self.llm.generate_text(messages=messages, temperature=self.temperature),
                self.timeout_seconds,
                operation_name="free chat",
            )
            if reply and reply.strip():
                return reply.strip()
        except Exception as e:
            logger.error(f"Free chat failed: {e}")
        return replies.FREE_CHAT_FALLBACK


def _latest_user_message(history: List[Message]) -> str:
    for msg in reversed(history):
        if msg.role == "user":
            return msg.content
    return ""
