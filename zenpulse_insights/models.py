"""
Shared data models for the ZenPulse insight engine.

This module defines the core domain models used across multiple layers
of the application (provider adapters, insight services, API, CLI).
"""

from datetime import date as Date
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SentimentLabel(str, Enum):
    """Normalized sentiment of a journal entry or chat message."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class MoodObservation(BaseModel):
    """A single day's mood, as recorded by the entry-write path."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: Date = Field(
        ...,
        validation_alias=AliasChoices("date", "entry_date"),
        description="Calendar day the entry belongs to",
    )
    mood_level: int = Field(
        ...,
        ge=1,
        le=5,
        validation_alias=AliasChoices("mood_level", "mood"),
        description="Self-reported mood from 1 (very low) to 5 (excellent)",
    )
    journal_text: str | None = Field(
        None,
        validation_alias=AliasChoices("journal_text", "journal"),
        description="Optional free-text journal entry",
    )


class ChatMessage(BaseModel):
    """A role-tagged turn sent to a chat-completion provider."""

    role: str = Field("user", description="Message role (system, user, assistant)")
    content: str = Field(..., description="Message text")


class CompletionOptions(BaseModel):
    """Sampling options forwarded to the provider."""

    max_tokens: int = Field(..., gt=0, description="Upper bound on generated tokens")
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature")


class CompletionResult(BaseModel):
    """Canonical completion result every provider response is translated into."""

    text: str = Field(..., description="Content of the first choice")
    provider: str = Field(..., description="Name of the provider that answered")
    model: str = Field(..., description="Model identifier used for the request")


class EntryInsight(BaseModel):
    """AI insights attached to a journal entry."""

    pep_talk: str = Field(..., description="Short supportive response")
    sentiment: SentimentLabel = Field(..., description="Sentiment of the journal text")


class ChatReply(BaseModel):
    """Reply to a chat message."""

    response: str = Field(..., description="Supportive response text")
    sentiment: SentimentLabel = Field(..., description="Sentiment of the message")
    user_mood: int = Field(..., description="Mood level the reply was generated for")
