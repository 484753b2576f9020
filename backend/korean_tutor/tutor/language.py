"""
Input classifiers used to pick the tutoring register.

All functions here are pure: no I/O, no state.
"""

from typing import Literal

Language = Literal["ko", "en"]

# Hangul Syllables, Hangul Jamo, Hangul Compatibility Jamo
HANGUL_RANGES = (
    (0xAC00, 0xD7A3),
    (0x1100, 0x11FF),
    (0x3130, 0x318F),
)

ROMANIZATION_TRIGGERS = (
    "romanize",
    "romanise",
    "romanization",
    "romanisation",
    "romaja",
    "pronounce",
    "pronunciation",
    "how do you say",
    "how to say",
    "in english letters",
    "로마자",
    "발음",
)


def is_hangul_char(char: str) -> bool:
    code = ord(char)
    return any(low <= code <= high for low, high in HANGUL_RANGES)


def contains_hangul(text: str) -> bool:
    """True if ``text`` holds at least one Hangul character."""
    return any(is_hangul_char(c) for c in text)


def detect_language(text: str) -> Language:
    """Classify the user's input as Korean-script ("ko") or anything else ("en")."""
    return "ko" if contains_hangul(text) else "en"


def wants_romanization(text: str) -> bool:
    """
    Detect requests for a Latin-alphabet transliteration.

    Matches a fixed list of English and Korean trigger phrases anywhere in the
    text, ignoring case.
    """
    lowered = text.lower()
    return any(trigger in lowered for trigger in ROMANIZATION_TRIGGERS)
