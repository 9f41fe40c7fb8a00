"""
Insight orchestration engine.

The engine owns the provider registry, the response caches and the four
insight services, and exposes the operations the HTTP layer calls on entry
writes, chat messages and read-path queries. It never touches storage;
callers pass in the observations they want analyzed.
"""

import asyncio
import logging
import random
import time
from collections.abc import Sequence

from .burnout import BURNOUT_WINDOW, detect_burnout
from .cache import Clock, ResponseCache, SingleSlotCache
from .config import Settings, get_settings
from .fallback import FallbackSelector, Route
from .models import ChatReply, EntryInsight, MoodObservation, SentimentLabel
from .pep_talk import PepTalkGenerator
from .providers import MISTRAL, OPENAI, ProviderRegistry
from .sentiment import SentimentClassifier
from .summary import SUMMARY_WINDOW, WeeklySummarizer

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_TONE = "gentle"
CHAT_TONE = "supportive"
DEFAULT_CHAT_MOOD = 3

PEP_TALK_FAILURE = "Stay motivated and keep going!"


class InsightEngine:
    """Turns mood observations into AI-backed insights."""

    def __init__(
        self,
        registry: ProviderRegistry,
        routes: Sequence[Route],
        pep_talk_cache_ttl: float = 300.0,
        summary_cache_ttl: float = 600.0,
        clock: Clock = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.selector = FallbackSelector(registry, routes)
        self.pep_talk_cache: ResponseCache[str] = ResponseCache(pep_talk_cache_ttl, clock)
        self.summary_cache: SingleSlotCache[str] = SingleSlotCache(summary_cache_ttl, clock)
        self.pep_talks = PepTalkGenerator(self.selector, self.pep_talk_cache, rng)
        self.sentiment = SentimentClassifier(registry, routes)
        self.summarizer = WeeklySummarizer(self.selector, self.summary_cache)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        clock: Clock = time.monotonic,
        rng: random.Random | None = None,
    ) -> "InsightEngine":
        """Build an engine with OpenAI first and Mistral as fallback."""
        settings = settings or get_settings()
        registry = ProviderRegistry.from_settings(settings)
        routes = (
            Route(OPENAI, settings.openai_model),
            Route(MISTRAL, settings.mistral_model),
        )

        availability = registry.availability()
        logger.info(
            "AI providers - OpenAI: %s, Mistral: %s",
            "available" if availability.get(OPENAI) else "missing",
            "available" if availability.get(MISTRAL) else "missing",
        )

        return cls(
            registry,
            routes,
            pep_talk_cache_ttl=settings.pep_talk_cache_ttl,
            summary_cache_ttl=settings.summary_cache_ttl,
            clock=clock,
            rng=rng,
        )

    # MARK: - Write path

    async def process_entry(
        self, mood_level: int, journal: str | None, tone: str = DEFAULT_ENTRY_TONE
    ) -> EntryInsight:
        """
        Generate the pep talk and sentiment for a new journal entry.

        Both run concurrently; if one of them raises, it is replaced by its
        default and the other result is kept.
        """
        pep_talk, sentiment = await asyncio.gather(
            self.pep_talks.generate(mood_level, journal, tone),
            self.sentiment.classify(mood_level, journal),
            return_exceptions=True,
        )

        if isinstance(pep_talk, BaseException):
            logger.error("Pep talk generation failed: %r", pep_talk)
            pep_talk = PEP_TALK_FAILURE
        if isinstance(sentiment, BaseException):
            logger.error("Sentiment analysis failed: %r", sentiment)
            sentiment = SentimentLabel.NEUTRAL

        return EntryInsight(pep_talk=pep_talk, sentiment=sentiment)

    async def chat(self, message: str, mood_level: int | None = None) -> ChatReply:
        """Answer a chat message in the context of the user's current mood."""
        mood = mood_level if mood_level is not None else DEFAULT_CHAT_MOOD
        logger.info("Chat - user mood: %s", mood)

        sentiment = await self.sentiment.classify(mood, message)
        response = await self.pep_talks.generate(mood, message, CHAT_TONE)
        return ChatReply(response=response, sentiment=sentiment, user_mood=mood)

    # MARK: - Read path

    def burnout_risk(self, observations: Sequence[MoodObservation]) -> bool:
        """Check the most recent observations (newest first) for burnout risk."""
        return detect_burnout(observations[:BURNOUT_WINDOW])

    async def weekly_summary(
        self, entries: Sequence[MoodObservation], newest_first: bool = False
    ) -> str:
        """Summarize the latest week of entries."""
        if newest_first:
            window = list(reversed(entries[:SUMMARY_WINDOW]))
        else:
            window = list(entries[-SUMMARY_WINDOW:])
        return await self.summarizer.summarize(window)

    async def aclose(self) -> None:
        await self.registry.aclose()
