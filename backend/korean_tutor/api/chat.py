"""
Chat API endpoint - relays a learner's message to the completion API.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from ..config import settings
from ..llm.factory import create_llm_provider
from ..tutor.relay import CompletionRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

METHOD_NOT_ALLOWED = "Method not allowed"


class ChatRequest(BaseModel):
    """Body of POST /api/chat."""
    message: str
    romanize: Optional[bool] = None

    @field_validator("message")
    @classmethod
    def check_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be empty")
        if len(value) > settings.max_message_length:
            raise ValueError(f"message must be at most {settings.max_message_length} characters")
        return value


class ChatResponse(BaseModel):
    reply: str


def get_completion_relay() -> CompletionRelay:
    """Build the relay from settings; the API key stays on the server."""
    provider = create_llm_provider(
        provider=settings.llm_provider,
        api_key=settings.groq_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout,
    )
    return CompletionRelay(
        provider,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    relay: CompletionRelay = Depends(get_completion_relay),
):
    """
    Get the tutor's reply to one message.

    Returns:
        200 {"reply": ...} on success, 500 {"reply": <localized fallback>}
        when the upstream call failed. Upstream error details are only logged.
    """
    result = await relay.reply(request.message, romanize=bool(request.romanize))

    if result.failed:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ChatResponse(reply=result.reply).model_dump(),
        )

    return ChatResponse(reply=result.reply)


@router.api_route("/chat", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def chat_method_not_allowed():
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"reply": METHOD_NOT_ALLOWED},
        headers={"Allow": "POST"},
    )
