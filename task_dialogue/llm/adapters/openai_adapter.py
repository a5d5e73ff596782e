from typing import Dict, List, Optional
from openai import AsyncOpenAI

from ..interface import LLMProvider, ToolCall
from ...config import settings


class OpenAIAdapter(LLMProvider):
    def __init__(
        self,
        api_key: str,
        model_name: str = settings.OPENAI_MODEL,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        max_retries: int = settings.MAX_RETRIES,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=default_headers or None,
            max_retries=max_retries,
        )
        self.model_name = model_name

    async def generate_text(
        self,
        messages: List[dict],
        temperature: float = 0.0
    ) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=temperature,
        )
        return completion.choices[0].message.content or ""

    async def select_tool(
        self,
        messages: List[dict],
        tools: List[dict],
        temperature: float = 0.0
    ) -> Optional[ToolCall]:
        completion = await self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            tools=tools,
            tool_choice="auto",
            temperature=temperature,
        )

        # Only the first call is used; the engine acts on one intent per scope
        message = completion.choices[0].message
        if not message.tool_calls:
            return None
        call = message.tool_calls[0]
        return ToolCall(name=call.function.name, arguments=call.function.arguments or "{}")
