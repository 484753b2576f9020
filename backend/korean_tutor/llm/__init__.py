"""LLM module - provides a unified interface for hosted completion APIs."""

from .base import LLMProvider, LLMMessage, LLMResponse, LLMResponseError
from .groq_provider import GroqProvider, GROQ_MODELS
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'LLMResponseError',
    'GroqProvider',
    'GROQ_MODELS',
    'create_llm_provider',
]
