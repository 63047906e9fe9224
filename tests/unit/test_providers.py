"""Tests for providers/."""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
import pytest

from questline.core.config import DEFAULT_CONFIG
from questline.errors import MissingCredentialError, ProviderCallError
from questline.models.provider import Provider
from questline.providers.anthropic import AnthropicProvider
from questline.providers.base import NO_RESPONSE, ProviderAdapter, build_adapter, get_provider
from questline.providers.gemini import GeminiProvider
from questline.providers.openai_provider import OpenAIProvider
from questline.providers.simulated import SimulatedProvider
from questline.providers.xai import XAIProvider
from questline.utils.sanitize import sanitize_error


def recording_transport(status: int, payload, captured: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


ARGS = ("secret-key", "", "system text", "user text", 321, 0.4)


def _args(model: str) -> tuple:
    return (ARGS[0], model) + ARGS[2:]


class TestGetProvider:
    def test_each_provider(self):
        assert isinstance(get_provider("gemini", DEFAULT_CONFIG), GeminiProvider)
        assert isinstance(get_provider("openai", DEFAULT_CONFIG), OpenAIProvider)
        assert isinstance(get_provider("anthropic", DEFAULT_CONFIG), AnthropicProvider)
        assert isinstance(get_provider(Provider.XAI, DEFAULT_CONFIG), XAIProvider)

    def test_invalid_provider_raises(self):
        with pytest.raises(ValueError):
            get_provider("ollama", DEFAULT_CONFIG)

    def test_simulate_flag(self):
        provider = get_provider("anthropic", {"ai": {"simulate": True}})
        assert isinstance(provider, SimulatedProvider)
        assert provider.name == "simulated-anthropic"

    def test_endpoint_and_timeout_from_config(self):
        config = {"ai": {"timeout_seconds": 9, "openai": {"endpoint": "http://proxy.local/"}}}
        provider = get_provider("openai", config)
        assert provider.url == "http://proxy.local/v1/chat/completions"
        assert provider.timeout == 9

    def test_build_adapter_overrides(self):
        fake = SimulatedProvider(Provider.GEMINI, {}, {})
        adapter = build_adapter(DEFAULT_CONFIG, overrides={Provider.GEMINI: fake})
        assert adapter.providers[Provider.GEMINI] is fake
        assert isinstance(adapter.providers[Provider.OPENAI], OpenAIProvider)


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured: list = []
        payload = {"choices": [{"message": {"content": "hello"}}]}
        provider = OpenAIProvider({}, {}, recording_transport(200, payload, captured))

        text = await provider.complete(*_args("gpt-4o-mini"))

        assert text == "hello"
        request = captured[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer secret-key"
        body = json.loads(request.content)
        assert body == {
            "model": "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": "system text"},
                {"role": "user", "content": "user text"},
            ],
            "max_tokens": 321,
            "temperature": 0.4,
        }

    @pytest.mark.asyncio
    async def test_error_message_from_body(self):
        payload = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
        provider = OpenAIProvider({}, {}, recording_transport(401, payload, []))
        with pytest.raises(ProviderCallError, match="Incorrect API key provided") as exc:
            await provider.complete(*_args("gpt-4o-mini"))
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_fallback_message(self):
        provider = OpenAIProvider({}, {}, recording_transport(502, "Bad Gateway", []))
        with pytest.raises(ProviderCallError, match="OpenAI API call failed"):
            await provider.complete(*_args("gpt-4o-mini"))

    @pytest.mark.asyncio
    async def test_malformed_response(self):
        provider = OpenAIProvider({}, {}, recording_transport(200, {"id": "x"}, []))
        with pytest.raises(ProviderCallError, match="malformed"):
            await provider.complete(*_args("gpt-4o-mini"))

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        provider = OpenAIProvider({}, {}, recording_transport(200, "<html>", []))
        with pytest.raises(ProviderCallError, match="not valid JSON"):
            await provider.complete(*_args("gpt-4o-mini"))

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        provider = OpenAIProvider({}, {}, httpx.MockTransport(handler))
        with pytest.raises(ProviderCallError, match="connection refused"):
            await provider.complete(*_args("gpt-4o-mini"))

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        provider = OpenAIProvider({}, {}, recording_transport(200, {"choices": []}, []))
        assert await provider.complete(*_args("gpt-4o-mini")) is None


class TestXAIProvider:
    @pytest.mark.asyncio
    async def test_uses_xai_endpoint(self):
        captured: list = []
        payload = {"choices": [{"message": {"content": "grok says"}}]}
        provider = XAIProvider({}, {}, recording_transport(200, payload, captured))
        assert await provider.complete(*_args("grok-beta")) == "grok says"
        assert str(captured[0].url) == "https://api.x.ai/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_fallback_names_xai(self):
        provider = XAIProvider({}, {}, recording_transport(500, "", []))
        with pytest.raises(ProviderCallError, match="xAI API call failed"):
            await provider.complete(*_args("grok-beta"))


class TestAnthropicProvider:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured: list = []
        payload = {"content": [{"type": "text", "text": "claude says"}]}
        provider = AnthropicProvider({}, {}, recording_transport(200, payload, captured))

        text = await provider.complete(*_args("claude-3-5-haiku-20241022"))

        assert text == "claude says"
        request = captured[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "secret-key"
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = json.loads(request.content)
        assert body["system"] == "system text"
        assert body["messages"] == [{"role": "user", "content": "user text"}]
        assert body["max_tokens"] == 321
        assert body["temperature"] == 0.4

    @pytest.mark.asyncio
    async def test_no_text_block(self):
        payload = {"content": [{"type": "tool_use", "name": "x"}]}
        provider = AnthropicProvider({}, {}, recording_transport(200, payload, []))
        assert await provider.complete(*_args("claude-3-5-haiku-20241022")) is None

    @pytest.mark.asyncio
    async def test_error_message(self):
        payload = {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}
        provider = AnthropicProvider({}, {}, recording_transport(529, payload, []))
        with pytest.raises(ProviderCallError, match="Overloaded"):
            await provider.complete(*_args("claude-3-5-haiku-20241022"))


class TestGeminiProvider:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured: list = []
        payload = {"candidates": [{"content": {"parts": [{"text": "gem"}, {"text": "ini"}]}}]}
        provider = GeminiProvider({}, {}, recording_transport(200, payload, captured))

        text = await provider.complete(*_args("gemini-2.5-flash"))

        assert text == "gemini"
        request = captured[0]
        assert str(request.url) == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
        )
        assert request.headers["x-goog-api-key"] == "secret-key"
        body = json.loads(request.content)
        assert body["systemInstruction"] == {"parts": [{"text": "system text"}]}
        assert body["contents"] == [{"role": "user", "parts": [{"text": "user text"}]}]
        assert body["generationConfig"] == {"maxOutputTokens": 321, "temperature": 0.4}

    @pytest.mark.asyncio
    async def test_blocked_prompt_has_no_text(self):
        payload = {"promptFeedback": {"blockReason": "SAFETY"}}
        provider = GeminiProvider({}, {}, recording_transport(200, payload, []))
        assert await provider.complete(*_args("gemini-2.5-flash")) is None

    @pytest.mark.asyncio
    async def test_error_message(self):
        payload = {"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}}
        provider = GeminiProvider({}, {}, recording_transport(400, payload, []))
        with pytest.raises(ProviderCallError, match="API key not valid."):
            await provider.complete(*_args("gemini-2.5-flash"))


class TestProviderAdapter:
    @pytest.mark.asyncio
    async def test_missing_key_checked_before_network(self):
        captured: list = []
        transport = recording_transport(200, {"choices": []}, captured)
        adapter = build_adapter(DEFAULT_CONFIG, transport=transport)

        for key in ("", None):
            with pytest.raises(MissingCredentialError, match="OpenAI API Key is missing"):
                await adapter.call("openai", key, "gpt-4o-mini", "s", "u", 10, 0.5)
        assert captured == []

    @pytest.mark.asyncio
    async def test_empty_generation_becomes_sentinel(self):
        transport = recording_transport(200, {"content": []}, [])
        adapter = build_adapter(DEFAULT_CONFIG, transport=transport)
        text = await adapter.call(
            Provider.ANTHROPIC, "k", "claude-3-5-haiku-20241022", "s", "u", 10, 0.5
        )
        assert text == NO_RESPONSE

    @pytest.mark.asyncio
    async def test_uniform_errors_across_providers(self):
        transport = recording_transport(500, {"error": {"message": "server exploded"}}, [])
        adapter = build_adapter(DEFAULT_CONFIG, transport=transport)
        for provider in Provider:
            with pytest.raises(ProviderCallError, match="server exploded"):
                await adapter.call(provider, "k", "m", "s", "u", 10, 0.5)

    @pytest.mark.asyncio
    async def test_unconfigured_backend(self):
        adapter = ProviderAdapter({})
        with pytest.raises(ProviderCallError, match="No backend"):
            await adapter.call("xai", "k", "grok-beta", "s", "u", 10, 0.5)

    @pytest.mark.asyncio
    async def test_simulated_response(self):
        adapter = build_adapter({"ai": {"simulate": True, "simulate_delay_seconds": 0}})
        text = await adapter.call("xai", "k", "grok-beta", "Be concise and helpful", "Describe the device", 10, 0.5)
        assert text.startswith("[Simulated grok-beta Response]")
        assert "Describe the device" in text


class TestSanitizeError:
    def test_redacts_keys(self):
        message = "bad key sk-abcdefghijklmnopqrstuvwxyz and AIzaSyA1234567890abcdefghijklmnopqrstu"
        sanitized = sanitize_error(message)
        assert "sk-abc" not in sanitized
        assert "AIza" not in sanitized
        assert sanitized.count("[REDACTED_KEY]") == 2

    def test_redacts_query_key(self):
        assert sanitize_error("GET /v1?key=abc123&alt=json") == "GET /v1?key=[REDACTED]&alt=json"

    def test_redacts_bearer(self):
        assert sanitize_error("header Bearer abc123") == "header Bearer [REDACTED]"

    def test_empty(self):
        assert sanitize_error("") == ""

    @pytest.mark.asyncio
    async def test_provider_errors_are_sanitized(self):
        payload = {"error": {"message": "Incorrect API key provided: sk-proj-abcdefghijklmnopqrstuvwx"}}
        provider = OpenAIProvider({}, {}, recording_transport(401, payload, []))
        with pytest.raises(ProviderCallError) as exc:
            await provider.complete(*_args("gpt-4o-mini"))
        assert "abcdefghijklmnop" not in str(exc.value)
        assert "[REDACTED_KEY]" in str(exc.value)


class TestNonTextReplies:
    @pytest.mark.asyncio
    async def test_openai_content_list_rejected(self):
        payload = {"choices": [{"message": {"content": [{"type": "text", "text": "hi"}]}}]}
        adapter = build_adapter(DEFAULT_CONFIG, transport=recording_transport(200, payload, []))
        with pytest.raises(ProviderCallError, match="malformed"):
            await adapter.call("openai", "k", "gpt-4o-mini", "s", "u", 10, 0.5)

    @pytest.mark.asyncio
    async def test_xai_content_int_rejected(self):
        payload = {"choices": [{"message": {"content": 123}}]}
        provider = XAIProvider({}, {}, recording_transport(200, payload, []))
        with pytest.raises(ProviderCallError, match="malformed"):
            await provider.complete(*_args("grok-beta"))

    @pytest.mark.asyncio
    async def test_anthropic_text_int_rejected(self):
        payload = {"content": [{"type": "text", "text": 42}]}
        provider = AnthropicProvider({}, {}, recording_transport(200, payload, []))
        with pytest.raises(ProviderCallError, match="malformed"):
            await provider.complete(*_args("claude-3-5-haiku-20241022"))

    @pytest.mark.asyncio
    async def test_gemini_part_text_dict_rejected(self):
        payload = {"candidates": [{"content": {"parts": [{"text": {"nested": "x"}}]}}]}
        provider = GeminiProvider({}, {}, recording_transport(200, payload, []))
        with pytest.raises(ProviderCallError, match="malformed"):
            await provider.complete(*_args("gemini-2.5-flash"))

    @pytest.mark.asyncio
    async def test_adapter_rejects_non_text_from_any_backend(self):
        class OddProvider:
            name = "odd"

            async def complete(self, *args):
                return 123

        adapter = ProviderAdapter({Provider.XAI: OddProvider()})
        with pytest.raises(ProviderCallError, match="expected text, got int"):
            await adapter.call("xai", "k", "grok-beta", "s", "u", 10, 0.5)


class TestBuildAdapterOverrides:
    def test_overridden_backends_not_built(self):
        fakes = {p: SimulatedProvider(p, {}, {}) for p in Provider}
        with patch("questline.providers.base.get_provider") as mock_get:
            adapter = build_adapter(DEFAULT_CONFIG, overrides=fakes)
        mock_get.assert_not_called()
        assert adapter.providers == fakes

    def test_only_missing_backends_built(self):
        fake = SimulatedProvider(Provider.XAI, {}, {})
        with patch("questline.providers.base.get_provider", wraps=get_provider) as mock_get:
            build_adapter(DEFAULT_CONFIG, overrides={Provider.XAI: fake})
        built = [c.args[0] for c in mock_get.call_args_list]
        assert Provider.XAI not in built
        assert len(built) == 3
