"""Tutor module - input classification, prompts and the completion relay."""

from .language import contains_hangul, detect_language, wants_romanization
from .prompts import TutorPrompts, build_system_prompt, get_prompts
from .relay import CompletionRelay, RelayReply

__all__ = [
    'contains_hangul',
    'detect_language',
    'wants_romanization',
    'TutorPrompts',
    'build_system_prompt',
    'get_prompts',
    'CompletionRelay',
    'RelayReply',
]
