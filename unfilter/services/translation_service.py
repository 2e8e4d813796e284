"""
/**
 * @file unfilter/services/translation_service.py
 * @description HR 黑话“翻译”服务（基于 OpenAI Chat Completions）。
 */
"""

from __future__ import annotations

from typing import Dict, List, Optional

from unfilter.services.openai_client_service import OpenAIClient


STYLE_RULES = "Keep answers concise (6–18 words). No preambles, no disclaimers, no emojis."

TONE_PROMPTS: Dict[str, str] = {
    "sarcastic": (
        "You are a sarcastic corporate translator. You mock HR jargon and expose what it *really* means. "
        "Your style is witty, irreverent, and funny. " + STYLE_RULES
    ),
    "blunt": (
        "You are a blunt corporate translator. You strip HR jargon down to what it plainly means. "
        "Your style is direct and matter-of-fact. " + STYLE_RULES
    ),
}

DEFAULT_TONE = "sarcastic"


def system_prompt_for(tone: str, custom: str = "") -> str:
    if custom:
        return custom
    return TONE_PROMPTS.get(tone, TONE_PROMPTS[DEFAULT_TONE])


def build_messages(phrase: str, tone: str = DEFAULT_TONE, custom_system: str = "") -> List[Dict[str, str]]:
    adjective = tone if tone in TONE_PROMPTS else DEFAULT_TONE
    return [
        {"role": "system", "content": system_prompt_for(tone, custom_system)},
        {
            "role": "user",
            "content": f"Corporate phrase: \"{phrase}\". Give the unfiltered, {adjective} translation in one sentence.",
        },
    ]


def translate_phrase(
    phrase: str,
    model: Optional[str] = None,
    tone: Optional[str] = None,
    client: Optional[OpenAIClient] = None,
) -> str:
    h = client or OpenAIClient()
    settings = h.settings
    messages = build_messages(phrase, tone=tone or settings.tone, custom_system=settings.custom_system_prompt)
    return h.chat_completion(messages, model=model or settings.model)
