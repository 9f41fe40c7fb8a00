"""
Weekly wellness narrative.

The summary lives in a single unkeyed slot: while it is live, every caller
gets it back no matter which entries they pass in.
"""

import logging
from collections.abc import Sequence

from .cache import SingleSlotCache
from .errors import AllProvidersExhausted
from .fallback import FallbackSelector
from .models import ChatMessage, CompletionOptions, MoodObservation

logger = logging.getLogger(__name__)

# Entries summarized by the read path, oldest first.
SUMMARY_WINDOW = 7

SUMMARY_OPTIONS = CompletionOptions(max_tokens=200, temperature=0.7)

SUMMARY_FALLBACK = (
    "This week had ups and downs. Reflect, recharge, and step forward stronger."
)


def format_entry(entry: MoodObservation) -> str:
    journal = entry.journal_text or "No journal"
    return f"({entry.date.isoformat()} | mood {entry.mood_level}/5): {journal}"


def summary_prompt(entries: Sequence[MoodObservation]) -> str:
    journals = "\n".join(format_entry(entry) for entry in entries)
    return f"""You are ZenPulse AI, analyzing mood and productivity patterns for the past 7 days.

DATA TO ANALYZE:
{journals}

PROVIDE A COMPREHENSIVE SUMMARY THAT INCLUDES:

1. **Overall Mood Trend**: Describe the general emotional journey
2. **Key Patterns**: Identify any recurring themes or triggers
3. **Strengths Highlighted**: Celebrate consistent positive behaviors
4. **Growth Opportunities**: Suggest 2-3 gentle, actionable improvements
5. **Encouraging Outlook**: End with hopeful, realistic perspective

Write in a warm, professional tone like a thoughtful wellness coach. Keep total length to 150-200 words. Use markdown formatting for readability.

Focus on insights that empower the user rather than judgment."""


class WeeklySummarizer:
    """Produces and caches the weekly narrative."""

    def __init__(self, selector: FallbackSelector, cache: SingleSlotCache[str]) -> None:
        self._selector = selector
        self._cache = cache

    async def summarize(self, entries: Sequence[MoodObservation]) -> str:
        """
        Summarize entries given in chronological order.

        Provider failure returns a generic sentence that is not cached, so
        the next call tries the providers again.
        """
        cached = self._cache.get()
        if cached is not None:
            logger.debug("Using cached weekly summary")
            return cached

        try:
            result = await self._selector.complete(
                [ChatMessage(role="user", content=summary_prompt(entries))],
                SUMMARY_OPTIONS,
            )
        except AllProvidersExhausted as e:
            logger.error("AI error (summary): %s", e)
            return SUMMARY_FALLBACK

        summary = result.text.strip()
        if not summary:
            return SUMMARY_FALLBACK

        self._cache.set(summary)
        return summary
