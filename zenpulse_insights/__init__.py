"""
ZenPulse Insights - AI insight engine for a mood-journaling backend.

This package turns mood and journal observations into supportive responses,
sentiment labels, burnout verdicts and weekly summaries, falling back across
chat-completion providers and caching responses to avoid redundant calls.
"""

__version__ = "0.1.0"
