"""
Error taxonomy for the insight engine.

Provider-level errors are raised by the adapters and absorbed by the
fallback selector; ``AllProvidersExhausted`` is the only error the insight
services ever see, and each of them degrades it to canned text.
"""


class InsightEngineError(RuntimeError):
    """Base class for all insight engine errors."""


class ProviderError(InsightEngineError):
    """Raised by a provider adapter for a single failed completion."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderUnavailable(ProviderError):
    """The named provider is unknown or has no valid credentials."""


class TransportError(ProviderError):
    """Network, timeout or HTTP-status failure talking to a provider."""


class MalformedResponse(ProviderError):
    """The provider answered without ``choices[0].message.content``."""


class AllProvidersExhausted(InsightEngineError):
    """Every configured provider failed, or none is configured."""

    def __init__(self, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        detail = "; ".join(self.errors) if self.errors else "no providers configured"
        super().__init__(f"All providers failed: {detail}")
