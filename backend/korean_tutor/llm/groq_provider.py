"""
Groq LLM Provider.
Talks to Groq's OpenAI-compatible chat/completions endpoint.
"""

import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse, LLMResponseError
from ..core.logging_config import preview_text

logger = logging.getLogger(__name__)

GROQ_MODELS = {
    "FAST": "llama3-8b-8192",
    "BALANCED": "llama3-70b-8192",
    "SMART": "mixtral-8x7b-32768",
}


class GroqProvider(LLMProvider):
    """
    Provider for the Groq cloud API.
    Model names may be given directly or as one of the GROQ_MODELS aliases.
    """

    def __init__(
        self,
        api_key: str,
        model: str = GROQ_MODELS["BALANCED"],
        base_url: str = "https://api.groq.com/openai/v1",
        default_temperature: float = 0.7,
        default_max_tokens: int = 1024,
        timeout: float = 60.0,
    ):
        super().__init__(api_key, GROQ_MODELS.get(model, model), base_url,
                         default_temperature, default_max_tokens)
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat_completion(
        self,
        messages: List[LLMMessage],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Send one non-streaming request to the Chat Completions endpoint."""
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": kwargs.get("model", self.model),
            "messages": self._format_messages(messages),
            "temperature": temperature if temperature is not None else self.default_temperature,
            "max_tokens": max_tokens or self.default_max_tokens,
            "stream": False,
        }

        if logger.isEnabledFor(logging.DEBUG):
            last = preview_text(messages[-1].content, 200) if messages else ""
            logger.debug(
                f"LLM API call starting: provider=groq, model={payload['model']}, "
                f"temperature={payload['temperature']}, {len(messages)} messages, last: {last}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
                if resp.status_code >= 400:
                    logger.warning(f"Groq API error {resp.status_code}: {preview_text(resp.text, 500)}")
                resp.raise_for_status()
                data = resp.json()

            choices = data.get("choices") if isinstance(data, dict) else None
            if not isinstance(choices, list):
                raise LLMResponseError("Groq API response has no choices list")

            # An empty list is an answer without text, not a failure
            first = choices[0] if choices and isinstance(choices[0], dict) else {}
            message = first.get("message") or {}
            usage = data.get("usage") or {}
            duration_ms = (time.time() - start_time) * 1000

            logger.info(
                "LLM API call completed",
                extra={"extra_fields": {
                    "provider": "groq",
                    "model": data.get("model", self.model),
                    "prompt_tokens": usage.get("prompt_tokens", 0),
                    "completion_tokens": usage.get("completion_tokens", 0),
                    "total_tokens": usage.get("total_tokens", 0),
                    "duration_ms": round(duration_ms, 2),
                }}
            )

            return LLMResponse(
                content=message.get("content") or "",
                model=data.get("model", self.model),
                usage=usage,
                raw=data,
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"LLM API call failed: {str(e)}",
                extra={"extra_fields": {
                    "provider": "groq",
                    "model": payload.get("model"),
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
