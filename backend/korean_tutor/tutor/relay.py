"""
Completion Relay - turns a learner's message into a single tutor reply.

The relay is stateless: every call builds a fresh two-entry prompt (system
instruction + user text), makes exactly one upstream request and normalizes
the outcome into a reply string. Upstream failures never escape; they are
logged here and replaced by a localized fallback.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..llm.base import LLMProvider, LLMMessage
from ..core.logging_config import preview_text
from .language import Language, detect_language, wants_romanization
from .prompts import build_system_prompt, get_prompts

logger = logging.getLogger(__name__)


@dataclass
class RelayReply:
    """Outcome of one relay call."""
    reply: str
    failed: bool = False
    language: Language = "ko"


class CompletionRelay:
    """Relay between the chat endpoint and a hosted completion API."""

    def __init__(
        self,
        provider: Optional[LLMProvider],
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ):
        """
        Args:
            provider: Upstream provider; None when no API key is configured
            temperature: Fixed sampling temperature
            max_tokens: Response-length budget
        """
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_messages(self, message: str, language: Language, romanize: bool) -> list[LLMMessage]:
        return [
            LLMMessage.system(build_system_prompt(language, romanize)),
            LLMMessage.user(message),
        ]

    async def reply(self, message: str, romanize: bool = False) -> RelayReply:
        """
        Produce the tutor's reply to ``message``.

        The romanize hint is honoured when either the caller sets it or the
        text itself asks for a transliteration.
        """
        language = detect_language(message)
        romanize = romanize or wants_romanization(message)
        prompts = get_prompts(language)

        logger.debug(
            f"Relay request: language={language}, romanize={romanize}, "
            f"message={preview_text(message)}"
        )

        if self.provider is None:
            logger.warning("Relay called without a configured completion provider")
            return RelayReply(reply=prompts.server_error, failed=True, language=language)

        start_time = time.time()
        try:
            response = await self.provider.chat_completion(
                self.build_messages(message, language, romanize),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(
                f"Relay upstream call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "language": language,
                    "romanize": romanize,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error": str(e),
                }}
            )
            return RelayReply(reply=prompts.server_error, failed=True, language=language)

        text = (response.content or "").strip()
        if not text:
            logger.warning("Relay upstream returned an empty choice")
            return RelayReply(reply=prompts.no_reply, language=language)

        logger.info(
            "Relay reply ready",
            extra={"extra_fields": {
                "language": language,
                "romanize": romanize,
                "model": response.model,
                "reply_length": len(text),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }}
        )
        return RelayReply(reply=text, language=language)
