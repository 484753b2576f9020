"""
LLM Provider Base - Abstract base for hosted chat-completion APIs.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


class LLMResponseError(Exception):
    """Raised when the upstream API answers with an unusable payload."""


@dataclass
class LLMMessage:
    """A single prompt entry sent to the completion API."""
    role: str  # "system", "user", "assistant"
    content: str

    @staticmethod
    def system(text: str) -> "LLMMessage":
        return LLMMessage(role="system", content=text)

    @staticmethod
    def user(text: str) -> "LLMMessage":
        return LLMMessage(role="user", content=text)


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.7, default_max_tokens: int = 1024):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: Prompt entries, system instruction first
            temperature: Sampling temperature override
            max_tokens: Max tokens override
            **kwargs: Additional provider-specific parameters

        Returns:
            LLMResponse with the first choice's text ("" when it carried none)

        Raises:
            httpx.HTTPError: on transport failures and non-2xx statuses
            LLMResponseError: when the payload has no choices
        """
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]
