"""
System instructions and fixed reply strings, keyed by input language.
"""

from dataclasses import dataclass

from .language import Language


@dataclass(frozen=True)
class TutorPrompts:
    system: str
    server_error: str  # upstream failed or is not configured
    no_reply: str  # upstream answered without usable text


KOREAN_PROMPTS = TutorPrompts(
    system=(
        "당신은 친절한 한국어 선생님입니다. 학습자가 한국어로 말하면 자연스럽고 "
        "대화체인 한국어로 답하세요. 학습자의 문장에 문법이나 어휘 실수가 있으면 "
        "답변 끝에 짧게 고쳐 주세요. 영어로 설명해 달라는 요청이 있을 때만 영어를 사용하세요."
    ),
    server_error="서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
    no_reply="죄송합니다, 답변을 생성할 수 없습니다.",
)

ENGLISH_PROMPTS = TutorPrompts(
    system=(
        "You are a helpful Korean language tutor. The learner is writing in English. "
        "Answer in clear English, and include natural Korean example sentences (in Hangul) "
        "that the learner can practice. Keep responses conversational and encouraging."
    ),
    server_error="A server error occurred. Please try again in a moment.",
    no_reply="Sorry, I couldn't generate a reply.",
)

ROMANIZATION_INSTRUCTION = (
    " Whenever you write Korean, add its Revised Romanization in parentheses "
    "right after it, e.g. 안녕하세요 (annyeonghaseyo)."
)

PROMPTS_BY_LANGUAGE = {
    "ko": KOREAN_PROMPTS,
    "en": ENGLISH_PROMPTS,
}


def get_prompts(language: Language) -> TutorPrompts:
    return PROMPTS_BY_LANGUAGE[language]


def build_system_prompt(language: Language, romanize: bool = False) -> str:
    """System instruction for ``language``, extended when romanization is wanted."""
    prompt = get_prompts(language).system
    if romanize:
        prompt += ROMANIZATION_INSTRUCTION
    return prompt
