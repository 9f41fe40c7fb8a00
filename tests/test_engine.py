"""
Tests for the insight orchestration engine.
"""

import asyncio
from datetime import date, timedelta

import httpx
from fakes import ROUTES, FakeProvider, ManualClock, build_engine

from zenpulse_insights.config import Settings
from zenpulse_insights.engine import PEP_TALK_FAILURE, InsightEngine
from zenpulse_insights.models import MoodObservation, SentimentLabel
from zenpulse_insights.pep_talk import MEDIUM_FALLBACK, MOOD_GREETINGS
from zenpulse_insights.providers import MistralProvider, ProviderConfig, ProviderRegistry
from zenpulse_insights.summary import SUMMARY_FALLBACK

JOURNAL = "Had a frustrating meeting but the evening was calm"


def _newest_first(moods: list[int]) -> list[MoodObservation]:
    latest = date(2024, 6, 30)
    return [
        MoodObservation(date=latest - timedelta(days=i), mood_level=mood)
        for i, mood in enumerate(moods)
    ]


class TestInsightEngine:
    """Test suite for InsightEngine."""

    def setup_method(self):
        """Set up an engine over two fake providers."""
        self.clock = ManualClock()
        self.primary = FakeProvider("openai", replies=["You handled that well."])
        self.secondary = FakeProvider("mistral", replies=["negative"])
        self.engine = build_engine(self.primary, self.secondary, self.clock)

    async def test_process_entry(self):
        """Test that an entry gets both a pep talk and a sentiment."""
        insight = await self.engine.process_entry(2, JOURNAL)

        assert insight.pep_talk == "You handled that well."
        # The primary's reply contains neither label, so it is neutral.
        assert insight.sentiment == SentimentLabel.NEUTRAL
        assert len(self.primary.calls) == 2

    async def test_process_entry_default_tone_is_cache_key(self):
        """Test that entries default to the gentle tone."""
        await self.engine.process_entry(2, JOURNAL)
        assert self.engine.pep_talk_cache.get(f"2-{JOURNAL[:50]}-gentle") is not None

    async def test_pep_talk_failure_is_isolated(self):
        """Test that a raising pep talk keeps the sentiment result."""

        async def broken(*args, **kwargs):
            raise RuntimeError("template exploded")

        self.engine.pep_talks.generate = broken
        self.primary.replies = ["positive"]

        insight = await self.engine.process_entry(4, JOURNAL)

        assert insight.pep_talk == PEP_TALK_FAILURE
        assert insight.sentiment == SentimentLabel.POSITIVE

    async def test_sentiment_failure_is_isolated(self):
        """Test that a raising sentiment keeps the pep talk and is not cancelled."""
        finished = asyncio.Event()
        real_generate = self.engine.pep_talks.generate

        async def slow_generate(*args, **kwargs):
            await asyncio.sleep(0.01)
            result = await real_generate(*args, **kwargs)
            finished.set()
            return result

        async def broken(*args, **kwargs):
            raise RuntimeError("classifier exploded")

        self.engine.pep_talks.generate = slow_generate
        self.engine.sentiment.classify = broken

        insight = await self.engine.process_entry(2, JOURNAL)

        assert finished.is_set()
        assert insight.pep_talk == "You handled that well."
        assert insight.sentiment == SentimentLabel.NEUTRAL

    async def test_chat_defaults(self):
        """Test that chat uses mood 3 when none is given."""
        reply = await self.engine.chat("good morning!")

        assert reply.user_mood == 3
        assert reply.response == MOOD_GREETINGS[3]
        assert self.engine.pep_talk_cache.get("3-good morning!-supportive") is not None

    async def test_chat_with_mood(self):
        """Test that chat replies reflect the given mood."""
        reply = await self.engine.chat("hey, good evening", mood_level=1)

        assert reply.user_mood == 1
        assert reply.response == MOOD_GREETINGS[1]
        assert reply.sentiment == SentimentLabel.NEUTRAL

    def test_burnout_risk(self):
        """Test burnout detection over observations given newest first."""
        assert self.engine.burnout_risk(_newest_first([5, 5, 1, 1, 1])) is True
        assert self.engine.burnout_risk(_newest_first([1, 1, 5, 1, 1])) is False

    def test_burnout_window_is_two_weeks(self):
        """Test that observations older than the window are ignored."""
        moods = [4] * 14 + [1, 1, 1]
        assert self.engine.burnout_risk(_newest_first(moods)) is False

    async def test_weekly_summary_newest_first(self):
        """Test that the latest seven entries are summarized oldest first."""
        entries = _newest_first([3] * 10)

        summary = await self.engine.weekly_summary(entries, newest_first=True)

        assert summary == "You handled that well."
        prompt = self.primary.last_prompt
        assert "2024-06-24" in prompt
        assert "2024-06-23" not in prompt
        assert prompt.index("2024-06-24") < prompt.index("2024-06-30")

    async def test_weekly_summary_chronological(self):
        """Test that chronological input keeps its last seven entries."""
        entries = list(reversed(_newest_first([3] * 10)))

        await self.engine.weekly_summary(entries)

        prompt = self.primary.last_prompt
        assert "2024-06-23" not in prompt
        assert prompt.index("2024-06-24") < prompt.index("2024-06-30")

    async def test_aclose_closes_providers(self):
        """Test that closing the engine closes every provider."""
        await self.engine.aclose()
        assert self.primary.closed and self.secondary.closed


class TestEngineWithoutProviders:
    """Test suite for an engine with no configured credentials."""

    def setup_method(self):
        """Build the engine from settings that carry no API keys."""
        settings = Settings(_env_file=None, openai_api_key=None, mistral_api_key=None)
        self.engine = InsightEngine.from_settings(settings, clock=ManualClock())

    async def test_everything_degrades(self):
        """Test that every operation still returns a usable value."""
        insight = await self.engine.process_entry(2, "this is terrible and I feel awful")

        assert insight.pep_talk == MEDIUM_FALLBACK
        assert insight.sentiment == SentimentLabel.NEGATIVE

        summary = await self.engine.weekly_summary(_newest_first([2, 2]), newest_first=True)
        assert summary == SUMMARY_FALLBACK

    def test_caches_use_settings_ttls(self):
        """Test that the caches take their TTLs from settings."""
        assert self.engine.pep_talk_cache.ttl == 300
        assert self.engine.summary_cache.ttl == 600


class TestEngineWithMalformedProvider:
    """Test suite for an engine whose only provider returns an unexpected payload."""

    def setup_method(self):
        """Serve Mistral replies whose model field is not a string."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"model": 123, "choices": [{"message": {"content": "hi there friend"}}]},
            )

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="https://api.mistral.ai/v1"
        )
        mistral = MistralProvider(
            ProviderConfig(
                name="mistral", api_key="mistral-test-key-0123456789", model="mistral-medium"
            ),
            client=client,
        )
        registry = ProviderRegistry([FakeProvider("openai", available=False), mistral])
        self.engine = InsightEngine(registry, ROUTES, clock=ManualClock())

    async def test_chat_degrades_to_fallback(self):
        """Test that a bad payload shape yields the fallback reply instead of raising."""
        reply = await self.engine.chat("I had a long day at the office")

        assert reply.response == MEDIUM_FALLBACK
        assert reply.sentiment == SentimentLabel.NEUTRAL
        await self.engine.aclose()
