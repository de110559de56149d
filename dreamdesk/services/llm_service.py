"""
Motivational quote generation.

Uses Groq (Llama 3) for the quote text. This endpoint never fails: a missing
GROQ_API_KEY, a provider error or an unusable answer all fall back to a
fixed local list of quotes.
"""

import logging
import random
import re
from typing import Optional

from groq import AsyncGroq

from dreamdesk.config import get_settings
from dreamdesk.models.ai import MotivationalQuote

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a motivational coach. Generate a short, powerful motivational quote "
    "(under 120 characters). Respond with ONLY the quote text, no JSON, no formatting, "
    "no quotation marks around the entire response. Example: The future belongs to "
    "those who believe in the beauty of their dreams."
)

GENERAL_THEME = "general"

FALLBACK_QUOTES = [
    MotivationalQuote(quote="The future belongs to those who believe in the beauty of their dreams.", author="Eleanor Roosevelt"),
    MotivationalQuote(
        quote="Success is not final, failure is not fatal: it is the courage to continue that counts.",
        author="Winston Churchill",
    ),
    MotivationalQuote(quote="The only way to do great work is to love what you do.", author="Steve Jobs"),
    MotivationalQuote(quote="Innovation distinguishes between a leader and a follower.", author="Steve Jobs"),
    MotivationalQuote(quote="Your time is limited, don't waste it living someone else's life.", author="Steve Jobs"),
    MotivationalQuote(quote="Be yourself; everyone else is already taken.", author="Oscar Wilde"),
    MotivationalQuote(
        quote="Two things are infinite: the universe and human stupidity; and I'm not sure about the universe.",
        author="Albert Einstein",
    ),
    MotivationalQuote(quote="The only impossible journey is the one you never begin.", author="Tony Robbins"),
]

MIN_QUOTE_LENGTH = 10


def fallback_quote() -> MotivationalQuote:
    return random.choice(FALLBACK_QUOTES).model_copy()


def user_prompt(theme: str) -> str:
    if theme == GENERAL_THEME:
        return "Generate a powerful motivational quote for someone working on their personal projects and goals."
    return f"Generate a motivational quote about {theme} for someone working on their personal growth."


def clean_quote(raw: str) -> Optional[str]:
    """
    Strip formatting artifacts from a model answer.
    Returns None when what is left is too short or still looks like JSON.
    """
    text = raw.strip()
    text = re.sub(r"^[\"']|[\"']$", "", text)
    text = re.sub(r"^`+|`+$", "", text)
    text = re.sub(r"^json\s*", "", text, flags=re.IGNORECASE)
    text = re.sub(r"^\{.*?\}", "", text)
    text = re.sub(r"quote:\s*", "", text, count=1, flags=re.IGNORECASE)
    text = re.sub(r"author:\s*.*$", "", text, flags=re.IGNORECASE)
    text = re.sub(r"[,\s]*$", "", text)
    if len(text) < MIN_QUOTE_LENGTH or "{" in text or "}" in text:
        return None
    return text


class QuoteService:
    """
    Encapsulates the quote LLM call. Uses Groq when GROQ_API_KEY is set,
    otherwise falls back to the local quotes.
    """

    async def _complete(self, api_key: str, theme: str) -> str:
        client = AsyncGroq(api_key=api_key)
        response = await client.chat.completions.create(
            model=get_settings().llm_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt(theme)},
            ],
            temperature=0.9,
            max_tokens=100,
        )
        return response.choices[0].message.content or ""

    async def generate_quote(self, theme: Optional[str] = None) -> MotivationalQuote:
        theme = (theme or "").strip() or GENERAL_THEME
        api_key = (get_settings().groq_api_key or "").strip()
        if not api_key:
            logger.debug("GROQ_API_KEY not set; using fallback quote")
            return fallback_quote()

        try:
            content = await self._complete(api_key, theme)
        except Exception as e:
            logger.exception("Groq API error; falling back to local quote: %s", e)
            return fallback_quote()

        quote = clean_quote(content)
        if quote is None:
            logger.warning("Unusable quote from model (%r); using fallback", content[:200])
            return fallback_quote()
        return MotivationalQuote(
            quote=quote,
            author="Anonymous",
            theme=None if theme == GENERAL_THEME else theme,
        )


quote_service = QuoteService()
