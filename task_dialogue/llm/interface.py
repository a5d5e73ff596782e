from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel


class ToolCall(BaseModel):
    """
    The function the oracle chose, with its raw (unparsed) JSON arguments.
    """
    name: str
    arguments: str = "{}"


class LLMProvider(ABC):
    """
    Abstract Base Class interface that defines the contract for any LLM provider
    (OpenAI, Anthropic, Local LLaMA, etc.)
    """

    @abstractmethod
    async def generate_text(
        self,
        messages: List[dict],
        temperature: float = 0.0
    ) -> str:
        """
        Generates a plain natural-language reply.
        """
        pass

    @abstractmethod
    async def select_tool(
        self,
        messages: List[dict],
        tools: List[dict],
        temperature: float = 0.0
    ) -> Optional[ToolCall]:
        """
        Offers `tools` (OpenAI function schemas) to the LLM and returns the first
        tool call it makes, or None if it answered without calling a tool.
        """
        pass
