"""LLM provider abstraction and the normalized provider adapter.

Every backend takes the same inputs (system prompt, user prompt, token cap,
temperature) and either returns generated text or raises one of the errors
in ``questline.errors``.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import httpx

from ..errors import MissingCredentialError, ProviderCallError
from ..models.provider import Provider
from ..utils.sanitize import sanitize_error

NO_RESPONSE = "No response generated."


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol that all LLM providers must implement."""

    name: str

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]: ...


class BaseProvider:
    """Base class with shared HTTP handling and config."""

    name: str = "base"
    provider: Optional[Provider] = None
    DEFAULT_ENDPOINT: str = ""

    def __init__(
        self,
        provider_config: dict,
        common_config: dict,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = provider_config
        self.common = common_config
        self.endpoint = (self.config.get("endpoint") or self.DEFAULT_ENDPOINT).rstrip("/")
        self.timeout = self.common.get("timeout_seconds", 120)
        self._transport = transport

    @property
    def label(self) -> str:
        return self.provider.label if self.provider else self.name

    @property
    def fallback_error(self) -> str:
        return f"{self.label} API call failed"

    async def complete(
        self,
        api_key: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> Optional[str]:
        raise NotImplementedError

    async def _post_json(self, url: str, body: dict, headers: dict) -> dict:
        """POST a JSON body and return the decoded response.

        Raises ProviderCallError for non-2xx statuses, transport errors and
        bodies that are not JSON objects.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = extract_error_message(e.response) or f"{self.fallback_error} ({status})"
            raise ProviderCallError(sanitize_error(message), status_code=status) from e
        except httpx.HTTPError as e:
            raise ProviderCallError(sanitize_error(str(e)) or self.fallback_error) from e
        except ValueError as e:
            raise ProviderCallError(f"{self.fallback_error}: response was not valid JSON") from e

        if not isinstance(data, dict):
            raise ProviderCallError(f"{self.fallback_error}: unexpected response shape")
        return data

    def _checked_text(self, value: object, data: dict) -> Optional[str]:
        """Return generated text, rejecting anything that is not a string."""
        if value is None or isinstance(value, str):
            return value
        raise self._malformed(data)

    def _malformed(self, data: dict) -> ProviderCallError:
        return ProviderCallError(
            f"{self.fallback_error}: malformed response (keys: {', '.join(sorted(data)) or 'none'})"
        )


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull the provider's own error message out of an error response.

    All four backends use ``{"error": {"message": ...}}``; some proxies
    return ``{"error": "..."}`` instead.
    """
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, list) and data:
        data = data[0]
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message") or None
    if isinstance(error, str):
        return error or None
    return None


class ProviderAdapter:
    """Normalizes calls to the provider backends into one signature.

    The pipeline executor only depends on ``call``; the backend is picked by
    provider tag and never branched on anywhere else.
    """

    def __init__(self, providers: dict[Provider, LLMProvider]):
        self._providers = dict(providers)

    @property
    def providers(self) -> dict[Provider, LLMProvider]:
        return dict(self._providers)

    async def call(
        self,
        provider: Provider | str,
        api_key: Optional[str],
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        provider = Provider(provider)
        if not api_key:
            raise MissingCredentialError(f"{provider.label} API Key is missing")

        backend = self._providers.get(provider)
        if backend is None:
            raise ProviderCallError(f"No backend configured for provider: {provider.value}")

        text = await backend.complete(
            api_key, model, system_prompt, user_prompt, max_tokens, temperature
        )
        if text is not None and not isinstance(text, str):
            raise ProviderCallError(
                f"{provider.label} API call failed: expected text, got {type(text).__name__}"
            )
        return text or NO_RESPONSE


def get_provider(
    provider: Provider | str,
    config: dict,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BaseProvider:
    """Factory function to create one provider backend from config."""
    ai_config = config.get("ai", {})
    provider = Provider(provider)
    provider_config = dict(ai_config.get(provider.value, {}))

    # Common config is the ai section minus provider sub-configs
    common_config = {
        k: v for k, v in ai_config.items() if k not in {p.value for p in Provider}
    }

    if common_config.get("simulate"):
        from .simulated import SimulatedProvider
        return SimulatedProvider(provider, provider_config, common_config)

    if provider == Provider.GEMINI:
        from .gemini import GeminiProvider
        return GeminiProvider(provider_config, common_config, transport)
    elif provider == Provider.OPENAI:
        from .openai_provider import OpenAIProvider
        return OpenAIProvider(provider_config, common_config, transport)
    elif provider == Provider.ANTHROPIC:
        from .anthropic import AnthropicProvider
        return AnthropicProvider(provider_config, common_config, transport)
    elif provider == Provider.XAI:
        from .xai import XAIProvider
        return XAIProvider(provider_config, common_config, transport)
    else:
        raise ValueError(f"Unknown AI provider: {provider}")


def build_adapter(
    config: dict,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    overrides: Optional[dict[Provider, LLMProvider]] = None,
) -> ProviderAdapter:
    """Create an adapter with one backend per provider; overrides win."""
    overrides = overrides or {}
    providers: dict[Provider, LLMProvider] = {
        p: overrides[p] if p in overrides else get_provider(p, config, transport)
        for p in Provider
    }
    return ProviderAdapter(providers)
