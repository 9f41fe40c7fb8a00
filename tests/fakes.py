"""
Test doubles shared by the test suites.
"""

import random
from collections.abc import Sequence

from zenpulse_insights.engine import InsightEngine
from zenpulse_insights.errors import TransportError
from zenpulse_insights.fallback import Route
from zenpulse_insights.models import ChatMessage, CompletionOptions, CompletionResult
from zenpulse_insights.providers import BaseProvider, ProviderConfig, ProviderRegistry

ROUTES = (Route("openai", "gpt-4o-mini"), Route("mistral", "mistral-medium"))


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(BaseProvider):
    """Provider that records calls and answers with canned replies."""

    def __init__(
        self,
        name: str,
        replies: Sequence[str] = ("ok",),
        available: bool = True,
        fail: bool = False,
        call_log: list[str] | None = None,
    ) -> None:
        super().__init__(
            ProviderConfig(
                name=name,
                api_key="test-key-1234567890" if available else None,
                model=f"{name}-model",
            )
        )
        self.replies = list(replies)
        self.fail = fail
        self.calls: list[tuple[str, list[ChatMessage], CompletionOptions]] = []
        self.call_log = call_log if call_log is not None else []
        self.closed = False

    async def complete(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        self.calls.append((model, list(messages), options))
        self.call_log.append(self.name)
        if self.fail:
            raise TransportError(self.name, "connection refused")
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        return CompletionResult(text=reply, provider=self.name, model=model)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_prompt(self) -> str:
        return self.calls[-1][1][-1].content

    @property
    def last_options(self) -> CompletionOptions:
        return self.calls[-1][2]


def build_engine(
    primary: FakeProvider,
    secondary: FakeProvider,
    clock: ManualClock | None = None,
    seed: int = 7,
) -> InsightEngine:
    return InsightEngine(
        ProviderRegistry([primary, secondary]),
        ROUTES,
        clock=clock or ManualClock(),
        rng=random.Random(seed),
    )
