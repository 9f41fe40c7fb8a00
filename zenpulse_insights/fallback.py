"""
Ordered provider fallback.

Providers are tried strictly in the configured order, one at a time. The
first success wins; a failed provider is logged and skipped. Nothing is
raced in parallel or load-balanced.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from .errors import AllProvidersExhausted, ProviderError
from .models import ChatMessage, CompletionOptions, CompletionResult
from .providers import ProviderRegistry

logger = logging.getLogger(__name__)


class Route(NamedTuple):
    """A provider paired with the model to request from it."""

    provider: str
    model: str


class FallbackSelector:
    """Runs completions against a priority-ordered chain of providers."""

    def __init__(self, registry: ProviderRegistry, routes: Sequence[Route]) -> None:
        self.registry = registry
        self.routes = tuple(routes)

    async def smart_complete(
        self,
        primary: Route,
        secondary: Route,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        """Try ``primary``, then ``secondary``."""
        return await self.complete_chain((primary, secondary), messages, options)

    async def complete(
        self, messages: Sequence[ChatMessage], options: CompletionOptions
    ) -> CompletionResult:
        """Run a completion over the default route chain."""
        return await self.complete_chain(self.routes, messages, options)

    async def complete_chain(
        self,
        routes: Sequence[Route],
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        """
        Try each configured route in order until one succeeds.

        Unconfigured providers are skipped without an attempt.

        Raises:
            AllProvidersExhausted: If every attempt failed or none was possible
        """
        errors: list[str] = []
        for route in routes:
            if not self.registry.is_available(route.provider):
                continue

            try:
                logger.info("Using %s (%s)", route.provider, route.model)
                return await self.registry.complete(
                    route.provider, route.model, messages, options
                )
            except ProviderError as e:
                logger.warning("%s failed: %s, trying next provider", route.provider, e)
                errors.append(str(e))

        raise AllProvidersExhausted(errors)
