"""
Sentiment classification for journal text.

Providers are asked for a one-word label in priority order. When no
provider is configured or every provider fails, a keyword heuristic takes
over, so classification always yields a label.
"""

import logging
from collections.abc import Sequence

from .errors import ProviderError
from .fallback import Route
from .models import ChatMessage, CompletionOptions, SentimentLabel
from .providers import ProviderRegistry

logger = logging.getLogger(__name__)

POSITIVE_WORDS = (
    "amazing",
    "great",
    "wonderful",
    "excellent",
    "fantastic",
    "awesome",
    "love",
    "happy",
    "excited",
    "good",
    "positive",
)

NEGATIVE_WORDS = (
    "terrible",
    "awful",
    "horrible",
    "bad",
    "sucks",
    "hate",
    "sad",
    "depressed",
    "angry",
    "frustrated",
    "negative",
    "worst",
)

SENTIMENT_OPTIONS = CompletionOptions(max_tokens=5, temperature=0.1)


def sentiment_prompt(text: str | None, detailed: bool = False) -> str:
    prompt = (
        f'Analyze the sentiment of this message: "{text or "No message"}".\n'
        "Return only one word: positive, neutral, or negative."
    )
    if detailed:
        prompt += "\nConsider emotional tone, keywords, and context."
    return prompt


def normalize_sentiment(reply: str) -> SentimentLabel:
    """Map a free-form provider reply onto a ``SentimentLabel``."""
    normalized = reply.strip().lower()
    if "positive" in normalized:
        return SentimentLabel.POSITIVE
    if "negative" in normalized:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def keyword_sentiment(text: str | None) -> SentimentLabel:
    """
    Classify text by keyword containment.

    Only-positive matches are positive and only-negative matches are
    negative; both or neither is neutral.
    """
    lowered = (text or "").lower()
    has_positive = any(word in lowered for word in POSITIVE_WORDS)
    has_negative = any(word in lowered for word in NEGATIVE_WORDS)

    if has_positive and not has_negative:
        return SentimentLabel.POSITIVE
    if has_negative and not has_positive:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


class SentimentClassifier:
    """Classifies text with AI providers, falling back to keywords."""

    def __init__(self, registry: ProviderRegistry, routes: Sequence[Route]) -> None:
        self._registry = registry
        self._routes = tuple(routes)

    async def classify(self, mood_level: int, text: str | None) -> SentimentLabel:
        for index, route in enumerate(self._routes):
            if not self._registry.is_available(route.provider):
                continue

            # The primary provider gets the more detailed instruction.
            prompt = sentiment_prompt(text, detailed=index == 0)
            try:
                result = await self._registry.complete(
                    route.provider,
                    route.model,
                    [ChatMessage(role="user", content=prompt)],
                    SENTIMENT_OPTIONS,
                )
            except ProviderError as e:
                logger.warning("%s sentiment error: %s", route.provider, e)
                continue

            return normalize_sentiment(result.text)

        label = keyword_sentiment(text)
        if label is SentimentLabel.NEUTRAL:
            logger.warning(
                "Using neutral fallback (no AI providers available for sentiment analysis)"
            )
        logger.debug("Keyword sentiment for mood %s: %s", mood_level, label.value)
        return label
