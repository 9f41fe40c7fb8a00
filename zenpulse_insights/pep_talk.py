"""
Supportive response ("pep talk") generation.

The response strategy depends on how much the user wrote: very short input
gets a random greeting, short greetings get a canned mood-based reply, and
anything longer goes to an AI provider with a prompt sized to the input.
Every result, canned and fallback text included, is cached by request
fingerprint so repeats within the TTL never reach a provider.
"""

import logging
import random

from .cache import ResponseCache, fingerprint
from .errors import AllProvidersExhausted
from .fallback import FallbackSelector
from .models import ChatMessage, CompletionOptions

logger = logging.getLogger(__name__)

DEFAULT_TONE = "supportive"

VERY_SHORT_LENGTH = 5
GREETING_MAX_LENGTH = 20
MEDIUM_MAX_LENGTH = 100

SHORT_RESPONSES = (
    "Hey there! 👋 How are you feeling today?",
    "Hi! 😊 What's on your mind?",
    "Hello! How's your day going?",
    "Hey! Ready to share how you're feeling?",
    "Hi there! What's your mood like today?",
)

GREETING_PHRASES = (
    "hi",
    "hello",
    "hey",
    "sup",
    "yo",
    "good morning",
    "good afternoon",
    "good evening",
)

MOOD_GREETINGS = {
    1: "Hi! I'm here if you want to talk about what's bringing you down.",
    2: "Hey there! Hope things get a bit easier for you today.",
    3: "Hi! Sounds like you're doing okay - that's great!",
    4: "Hey! Glad to hear from you when you're feeling good!",
    5: "Hi! Love that positive energy! 😊",
}
DEFAULT_GREETING = "Hey! Great to hear from you!"

MOOD_CONTEXT = {
    1: "feeling very low and could use some gentle support",
    2: "feeling down but showing resilience",
    3: "feeling balanced and steady",
    4: "feeling good and motivated",
    5: "feeling excellent and energetic",
}
DEFAULT_MOOD_CONTEXT = "sharing how their day is going"

MEDIUM_FALLBACK = "Thanks for sharing that with me. I'm here to listen and support you. 💙"
DETAILED_FALLBACK = (
    "I hear you and appreciate you sharing that. Sometimes just expressing "
    "ourselves helps. What's one thing that might make today a bit better?"
)

MEDIUM_OPTIONS = CompletionOptions(max_tokens=80, temperature=0.7)
DETAILED_OPTIONS = CompletionOptions(max_tokens=120, temperature=0.8)


def is_simple_greeting(text: str) -> bool:
    """True for short messages containing a greeting phrase."""
    normalized = text.strip().lower()
    if len(normalized) >= GREETING_MAX_LENGTH:
        return False
    return any(phrase in normalized for phrase in GREETING_PHRASES)


def mood_greeting(mood_level: int) -> str:
    return MOOD_GREETINGS.get(mood_level, DEFAULT_GREETING)


def medium_prompt(mood_level: int, text: str) -> str:
    return (
        "You are ZenPulse AI, a compassionate mental wellness assistant. "
        f'User shared: "{text}" (they\'re feeling {mood_level}/5 overall).\n\n'
        "Respond naturally and supportively (1-2 sentences). Acknowledge their "
        "message and offer one small, practical suggestion. Keep it conversational "
        "and empathetic. IMPORTANT: Never mention mood levels, ratings, or numbers "
        "in your response."
    )


def detailed_prompt(mood_level: int, text: str) -> str:
    context = MOOD_CONTEXT.get(mood_level, DEFAULT_MOOD_CONTEXT)
    return (
        "You are ZenPulse AI, a compassionate mental wellness assistant. "
        f'User shared: "{text}" (they\'re experiencing {context}).\n\n'
        "Provide a thoughtful, supportive response that:\n"
        "- Acknowledges what they shared\n"
        "- Offers 1 practical, specific suggestion\n"
        "- Uses warm, empathetic language\n"
        "- Keeps response to 2-3 sentences\n\n"
        "Focus on empathy and actionable insights without quantifying their feelings."
    )


class PepTalkGenerator:
    """Picks and runs a response strategy for a (mood, text, tone) request."""

    def __init__(
        self,
        selector: FallbackSelector,
        cache: ResponseCache[str],
        rng: random.Random | None = None,
    ) -> None:
        self._selector = selector
        self._cache = cache
        self._rng = rng or random.Random()

    async def generate(
        self, mood_level: int, text: str | None, tone: str = DEFAULT_TONE
    ) -> str:
        """
        Return a supportive response for the given mood and journal text.

        Args:
            mood_level: Mood from 1 to 5; other values use default wording
            text: Journal text or chat message, possibly empty
            tone: Free-form tone label, part of the cache key

        Returns:
            A non-empty response string; provider failures degrade to
            fixed fallback text
        """
        raw = text or ""
        key = fingerprint(mood_level, raw, tone)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Using cached response for: %s", key)
            return cached

        response = await self._respond(mood_level, raw)
        self._cache.set(key, response)
        return response

    async def _respond(self, mood_level: int, raw: str) -> str:
        length = len(raw.strip())

        if length < VERY_SHORT_LENGTH:
            return self._rng.choice(SHORT_RESPONSES)

        if is_simple_greeting(raw):
            return mood_greeting(mood_level)

        if length < MEDIUM_MAX_LENGTH:
            return await self._complete(
                medium_prompt(mood_level, raw), MEDIUM_OPTIONS, MEDIUM_FALLBACK
            )

        return await self._complete(
            detailed_prompt(mood_level, raw), DETAILED_OPTIONS, DETAILED_FALLBACK
        )

    async def _complete(
        self, prompt: str, options: CompletionOptions, fallback: str
    ) -> str:
        try:
            result = await self._selector.complete(
                [ChatMessage(role="user", content=prompt)], options
            )
        except AllProvidersExhausted as e:
            logger.error("AI error (pep talk): %s", e)
            return fallback

        text = result.text.strip()
        return text or fallback
