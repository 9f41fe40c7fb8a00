"""
FastAPI server for the ZenPulse insight engine.

This module exposes the engine over HTTP. It is stateless: callers supply
the mood, text and observation windows in each request, and persistence
stays with the caller.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from .burnout import detect_burnout
from .config import get_settings
from .engine import DEFAULT_ENTRY_TONE, InsightEngine
from .models import ChatReply, EntryInsight, MoodObservation, SentimentLabel

logger = logging.getLogger(__name__)

DEMO_ENTRIES = (
    MoodObservation(date=date(2024, 6, 1), mood_level=3, journal_text="Feeling okay."),
    MoodObservation(date=date(2024, 6, 2), mood_level=2, journal_text="A bit tired."),
    MoodObservation(date=date(2024, 6, 3), mood_level=1, journal_text="Very stressed."),
    MoodObservation(date=date(2024, 6, 4), mood_level=2, journal_text="Still tired."),
    MoodObservation(date=date(2024, 6, 5), mood_level=4, journal_text="Better today."),
)


# API Request/Response Schemas
class EntryRequest(BaseModel):
    """Payload for entry insight requests."""

    mood: int = Field(..., ge=1, le=5, description="Mood level from 1 to 5")
    journal: str | None = Field(None, description="Journal text for the entry")
    tone: str = Field(DEFAULT_ENTRY_TONE, description="Preferred pep talk tone")


class ChatRequest(BaseModel):
    """Payload for chat messages."""

    message: str = Field(..., min_length=1, description="The user's message")
    mood: int | None = Field(
        None, ge=1, le=5, description="Today's mood, if the user logged one"
    )


class ObservationsRequest(BaseModel):
    """Payload carrying a window of mood observations."""

    entries: list[MoodObservation] = Field(..., description="Mood observations")
    newest_first: bool = Field(
        True, description="Whether entries are ordered most recent first"
    )


class BurnoutResponse(BaseModel):
    """Response model for burnout checks."""

    burnout_risk: bool = Field(..., description="Three or more low days in a row")


class SummaryResponse(BaseModel):
    """Response model for weekly summaries."""

    summary: str = Field(..., description="Weekly wellness narrative")


class DemoResponse(BaseModel):
    """Response model for the demo endpoint."""

    pep_talk: str
    sentiment: SentimentLabel
    burnout: bool
    summary: str


def create_app(engine: InsightEngine) -> FastAPI:
    """
    Create a FastAPI application around the given engine.

    Args:
        engine: The InsightEngine instance to use for the application

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        yield
        await engine.aclose()

    app = FastAPI(
        title="ZenPulse Insights",
        description="AI insight engine for mood journaling",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "service": "zenpulse-insights",
            "providers": engine.registry.availability(),
        }

    @app.post("/insights/entry")
    async def entry_insight(request: EntryRequest) -> EntryInsight:
        """Generate the pep talk and sentiment for a journal entry."""
        return await engine.process_entry(request.mood, request.journal, request.tone)

    @app.post("/chat")
    async def chat(request: ChatRequest) -> ChatReply:
        """Reply to a chat message."""
        return await engine.chat(request.message, request.mood)

    @app.post("/insights/burnout")
    async def burnout(request: ObservationsRequest) -> BurnoutResponse:
        """
        Check a window of observations for burnout risk.

        Entries are scanned in the order given; callers should send the most
        recent observation first.
        """
        entries = request.entries if request.newest_first else request.entries[::-1]
        return BurnoutResponse(burnout_risk=engine.burnout_risk(entries))

    @app.post("/insights/summary")
    async def summary(request: ObservationsRequest) -> SummaryResponse:
        """Summarize the latest week of observations."""
        text = await engine.weekly_summary(
            request.entries, newest_first=request.newest_first
        )
        return SummaryResponse(summary=text)

    @app.get("/insights/demo")
    async def demo() -> DemoResponse:
        """Run every insight once over a fixed set of sample entries."""
        message = "Feeling stressed"
        pep_talk = await engine.pep_talks.generate(2, message, DEFAULT_ENTRY_TONE)
        sentiment = await engine.sentiment.classify(2, message)
        return DemoResponse(
            pep_talk=pep_talk,
            sentiment=sentiment,
            burnout=detect_burnout(DEMO_ENTRIES),
            summary=await engine.summarizer.summarize(DEMO_ENTRIES),
        )

    return app


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    uvicorn.run(
        create_app(InsightEngine.from_settings(settings)),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
