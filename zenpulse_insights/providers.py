"""
Chat-completion provider adapters.

Each adapter hides one backend's auth and transport behind the same
``complete(model, messages, options)`` call and translates the backend's
payload into a ``CompletionResult`` at the boundary. Adapters make exactly
one outbound request per call and never retry; retrying on another provider
is the fallback selector's job.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field

from .config import MISTRAL_DEFAULT_BASE_URL, Settings
from .errors import MalformedResponse, ProviderError, ProviderUnavailable, TransportError
from .models import ChatMessage, CompletionOptions, CompletionResult

logger = logging.getLogger(__name__)

OPENAI = "openai"
MISTRAL = "mistral"

# Mistral keys shorter than this are placeholders, not credentials.
MISTRAL_MIN_KEY_LENGTH = 11


class ProviderConfig(BaseModel):
    """Static configuration for one provider, fixed for the process lifetime."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Provider name used for routing")
    api_key: str | None = Field(None, description="Credential; absent means unavailable")
    model: str = Field(..., description="Default model identifier")
    base_url: str | None = Field(None, description="API base URL override")
    timeout: float = Field(15.0, gt=0, description="Per-request timeout in seconds")
    min_key_length: int = Field(1, ge=1, description="Shortest key treated as valid")

    @property
    def available(self) -> bool:
        """Whether the provider has usable credentials."""
        return bool(self.api_key) and len(self.api_key) >= self.min_key_length


# MARK: - Adapters


class BaseProvider(ABC):
    """Common interface all chat-completion providers implement."""

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def available(self) -> bool:
        return self.config.available

    @abstractmethod
    async def complete(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        """Perform a single chat completion request."""

    async def aclose(self) -> None:
        """Release any transport resources held by the provider."""

    def _request_body(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [message.model_dump() for message in messages],
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
        }

    def _to_result(self, model: str, payload: Any) -> CompletionResult:
        """Translate an OpenAI-shaped payload into a ``CompletionResult``."""
        if not isinstance(payload, Mapping):
            raise MalformedResponse(self.name, "response is not a JSON object")

        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise MalformedResponse(self.name, "response has no choices")

        first = choices[0]
        message = first.get("message") if isinstance(first, Mapping) else None
        if not isinstance(message, Mapping):
            raise MalformedResponse(self.name, "first choice has no message")

        content = message.get("content")
        if not isinstance(content, str):
            raise MalformedResponse(self.name, "message has no text content")

        reported_model = payload.get("model")
        if reported_model is not None and not isinstance(reported_model, str):
            raise MalformedResponse(self.name, "response model is not a string")

        return CompletionResult(
            text=content, provider=self.name, model=reported_model or model
        )


class OpenAIProvider(BaseProvider):
    """Provider backed by the official OpenAI async SDK."""

    def __init__(self, config: ProviderConfig, client: AsyncOpenAI | None = None) -> None:
        super().__init__(config)
        if client is None and config.available:
            # SDK retries disabled: one request per call.
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.timeout,
                max_retries=0,
            )
        self._client = client

    async def complete(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        if self._client is None or not self.available:
            raise ProviderUnavailable(self.name, "OPENAI_API_KEY is not configured")

        try:
            response = await self._client.chat.completions.create(
                **self._request_body(model, messages, options)
            )
        except openai.APIResponseValidationError as e:
            raise MalformedResponse(self.name, str(e)) from e
        except openai.APITimeoutError as e:
            raise TransportError(self.name, "request timed out") from e
        except openai.APIStatusError as e:
            raise TransportError(self.name, f"HTTP {e.status_code}") from e
        except openai.APIError as e:
            raise TransportError(self.name, str(e)) from e

        payload = response.model_dump() if hasattr(response, "model_dump") else response
        return self._to_result(model, payload)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()


class MistralProvider(BaseProvider):
    """Provider for Mistral's OpenAI-compatible chat completions endpoint."""

    def __init__(
        self, config: ProviderConfig, client: httpx.AsyncClient | None = None
    ) -> None:
        super().__init__(config)
        if client is None and config.available:
            client = httpx.AsyncClient(
                base_url=(config.base_url or MISTRAL_DEFAULT_BASE_URL).rstrip("/"),
                timeout=config.timeout,
            )
        self._client = client

    async def complete(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        if self._client is None or not self.available:
            raise ProviderUnavailable(self.name, "MISTRAL_API_KEY is not configured")

        try:
            response = await self._client.post(
                "/chat/completions",
                json=self._request_body(model, messages, options),
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise TransportError(self.name, "request timed out") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(self.name, str(e) or type(e).__name__) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse(self.name, "response body is not JSON") from e
        return self._to_result(model, payload)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


# MARK: - Registry


class ProviderRegistry:
    """
    Named collection of providers.

    Availability of each provider is fixed when it is registered; the
    registry never re-reads credentials.
    """

    def __init__(self, providers: Sequence[BaseProvider] = ()) -> None:
        self._providers: dict[str, BaseProvider] = {}
        for provider in providers:
            self.register(provider)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        """Build the OpenAI and Mistral providers from settings."""
        openai_config = ProviderConfig(
            name=OPENAI,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.provider_timeout,
        )
        mistral_config = ProviderConfig(
            name=MISTRAL,
            api_key=settings.mistral_api_key,
            model=settings.mistral_model,
            base_url=settings.mistral_base_url,
            timeout=settings.provider_timeout,
            min_key_length=MISTRAL_MIN_KEY_LENGTH,
        )
        return cls([OpenAIProvider(openai_config), MistralProvider(mistral_config)])

    def register(self, provider: BaseProvider) -> None:
        self._providers[provider.name] = provider

    def get(self, name: str) -> BaseProvider | None:
        return self._providers.get(name)

    def is_available(self, name: str) -> bool:
        provider = self._providers.get(name)
        return provider is not None and provider.available

    def availability(self) -> dict[str, bool]:
        """Return provider name -> availability, in registration order."""
        return {name: p.available for name, p in self._providers.items()}

    async def complete(
        self,
        provider_name: str,
        model: str,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
    ) -> CompletionResult:
        """
        Run one completion on the named provider.

        Raises:
            ProviderUnavailable: If the provider is unknown or unconfigured
            TransportError: On network or HTTP failure
            MalformedResponse: If the payload lacks the expected structure
        """
        provider = self._providers.get(provider_name)
        if provider is None or not provider.available:
            raise ProviderUnavailable(provider_name, "provider not available")

        try:
            return await provider.complete(model, messages, options)
        except ProviderError as e:
            logger.error("%s API error: %s", provider_name.upper(), e)
            raise

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.aclose()
