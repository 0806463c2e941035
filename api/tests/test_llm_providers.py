"""
Tests for generative providers and the provider factory.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest
from google.genai import errors as genai_errors

from config import settings
from services.legal.schemas import NEWS_SCHEMA, STUDY_MATERIALS_SCHEMA
from services.llm import (
    GenerationAuthError,
    GenerationRateLimitError,
    GenerationRequest,
    GenerationRequestError,
    GenerationServerError,
    ModelTier,
    ProviderNotConfiguredError,
    ResponseParseError,
    get_llm_provider,
    reset_provider,
)
from services.llm.anthropic_provider import PAYLOAD_TOOL_NAME, AnthropicProvider
from services.llm.base import error_from_status, unwrap_array_payload, wrap_array_schema
from services.llm.gemini_provider import GeminiProvider, to_gemini_schema
from services.llm.mock_provider import MockProvider
from services.llm.openrouter_provider import OpenRouterProvider


NEWS_ITEM = {
    "title": "Supreme Court reaffirms right to privacy",
    "summary": "Article 21.",
    "url": "https://www.verdictum.in/court-updates/privacy",
    "source": "Verdictum",
    "date": "2026-10-17",
}


def news_request(use_search: bool = False) -> GenerationRequest:
    return GenerationRequest(
        prompt="Fetch news",
        response_schema=NEWS_SCHEMA,
        use_search=use_search,
        label="news",
    )


class TestErrorMapping:
    """Tests for status -> error class mapping."""

    @pytest.mark.parametrize("status,expected", [
        (429, GenerationRateLimitError),
        (500, GenerationServerError),
        (503, GenerationServerError),
        (401, GenerationAuthError),
        (403, GenerationAuthError),
        (400, GenerationRequestError),
        (404, GenerationRequestError),
    ])
    def test_error_from_status(self, status, expected):
        error = error_from_status(status, "message")
        assert type(error) is expected
        assert error.status_code == status


class TestSchemaWrapping:
    """Tests for wrapping array schemas in an object root."""

    def test_array_schema_wrapped(self):
        schema, wrapped = wrap_array_schema(NEWS_SCHEMA)

        assert wrapped is True
        assert schema["type"] == "object"
        assert schema["properties"]["items"] is NEWS_SCHEMA

    def test_object_schema_untouched(self):
        schema, wrapped = wrap_array_schema(STUDY_MATERIALS_SCHEMA)
        assert wrapped is False
        assert schema is STUDY_MATERIALS_SCHEMA

    def test_unwrap(self):
        assert json.loads(unwrap_array_payload({"items": [1, 2]}, True)) == [1, 2]

    def test_unwrap_missing_items(self):
        with pytest.raises(ResponseParseError):
            unwrap_array_payload({"records": []}, True)


class TestGeminiProvider:
    """Tests for GeminiProvider."""

    def test_schema_conversion_uppercases_types(self):
        converted = to_gemini_schema(NEWS_SCHEMA)

        assert converted["type"] == "ARRAY"
        assert converted["items"]["type"] == "OBJECT"
        assert converted["items"]["properties"]["title"] == {"type": "STRING"}
        assert "url" in converted["items"]["required"]

    def test_model_per_tier(self):
        provider = GeminiProvider(api_key="k", fast_model="flash", deep_model="pro")
        assert provider.get_model_name(ModelTier.FAST) == "flash"
        assert provider.get_model_name(ModelTier.DEEP) == "pro"

    def test_search_tool_only_when_requested(self):
        provider = GeminiProvider(api_key="k")
        assert provider._build_config(news_request(use_search=True)).tools
        assert not provider._build_config(news_request(use_search=False)).tools

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        provider = GeminiProvider(api_key="")
        provider._api_key = ""
        assert provider.is_available is False

        with pytest.raises(ProviderNotConfiguredError):
            await provider.generate(news_request())

    @pytest.mark.asyncio
    async def test_generate_returns_text(self):
        provider = GeminiProvider(api_key="k")
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(
            text=json.dumps([NEWS_ITEM]),
            candidates=[],
        ))
        provider._client = client

        response = await provider.generate(news_request())

        assert json.loads(response.content) == [NEWS_ITEM]
        assert response.metadata["provider"] == "gemini"

    @pytest.mark.asyncio
    async def test_empty_text_is_parse_error(self):
        provider = GeminiProvider(api_key="k")
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text=None, candidates=[]),
        )
        provider._client = client

        with pytest.raises(ResponseParseError):
            await provider.generate(news_request())

    @pytest.mark.asyncio
    async def test_resource_exhausted_is_rate_limit(self):
        provider = GeminiProvider(api_key="k")
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(side_effect=genai_errors.ClientError(
            429,
            {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
        ))
        provider._client = client

        with pytest.raises(GenerationRateLimitError):
            await provider.generate(news_request())

    @pytest.mark.asyncio
    async def test_server_error_mapped(self):
        provider = GeminiProvider(api_key="k")
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(side_effect=genai_errors.ServerError(
            503,
            {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}},
        ))
        provider._client = client

        with pytest.raises(GenerationServerError):
            await provider.generate(news_request())


class TestAnthropicProvider:
    """Tests for AnthropicProvider."""

    def _provider_with_response(self, content_blocks):
        provider = AnthropicProvider(api_key="k", model="claude-test")
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=SimpleNamespace(
            id="msg_1",
            model="claude-test",
            content=content_blocks,
            stop_reason="tool_use",
            usage=SimpleNamespace(input_tokens=10, output_tokens=20),
        ))
        provider._client = client
        return provider, client

    @pytest.mark.asyncio
    async def test_array_payload_unwrapped(self):
        block = SimpleNamespace(type="tool_use", name=PAYLOAD_TOOL_NAME, input={"items": [NEWS_ITEM]})
        provider, client = self._provider_with_response([block])

        response = await provider.generate(news_request())

        assert json.loads(response.content) == [NEWS_ITEM]
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "tool", "name": PAYLOAD_TOOL_NAME}
        assert kwargs["tools"][0]["input_schema"]["type"] == "object"

    @pytest.mark.asyncio
    async def test_search_request_adds_web_search(self):
        block = SimpleNamespace(type="tool_use", name=PAYLOAD_TOOL_NAME, input={"items": []})
        provider, client = self._provider_with_response([block])

        await provider.generate(news_request(use_search=True))

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "any"}
        assert kwargs["tools"][0]["name"] == "web_search"

    @pytest.mark.asyncio
    async def test_missing_tool_call_is_parse_error(self):
        provider, _ = self._provider_with_response([SimpleNamespace(type="text", text="Sorry")])

        with pytest.raises(ResponseParseError):
            await provider.generate(news_request())

    @pytest.mark.asyncio
    async def test_rate_limit_mapped(self):
        provider = AnthropicProvider(api_key="k")
        client = MagicMock()
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client.messages.create = AsyncMock(side_effect=anthropic.RateLimitError(
            "rate limited",
            response=httpx.Response(429, request=request),
            body=None,
        ))
        provider._client = client

        with pytest.raises(GenerationRateLimitError):
            await provider.generate(news_request())


class TestOpenRouterProvider:
    """Tests for OpenRouterProvider over a mock transport."""

    def _provider(self, handler):
        return OpenRouterProvider(
            api_key="k",
            model="test/model",
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_generate(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "gen-1",
                "model": "test/model",
                "choices": [{
                    "message": {"content": json.dumps({"items": [NEWS_ITEM]})},
                    "finish_reason": "stop",
                }],
            })

        response = await self._provider(handler).generate(news_request(use_search=True))

        assert json.loads(response.content) == [NEWS_ITEM]
        assert seen["body"]["model"] == "test/model:online"
        assert seen["body"]["response_format"]["type"] == "json_schema"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [
        (429, GenerationRateLimitError),
        (502, GenerationServerError),
        (401, GenerationAuthError),
    ])
    async def test_status_errors(self, status, expected):
        provider = self._provider(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(expected):
            await provider.generate(news_request())

    @pytest.mark.asyncio
    async def test_non_json_content_is_parse_error(self):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "not json"}}]})

        with pytest.raises(ResponseParseError):
            await self._provider(handler).generate(news_request())


class TestMockProvider:
    """Tests for MockProvider."""

    @pytest.mark.asyncio
    async def test_unknown_label_returns_empty_of_schema_type(self):
        provider = MockProvider(record_requests=True)

        array_response = await provider.generate(GenerationRequest(
            prompt="p", response_schema={"type": "array"}, label="unknown",
        ))
        object_response = await provider.generate(GenerationRequest(
            prompt="p", response_schema={"type": "object"}, label="unknown",
        ))

        assert json.loads(array_response.content) == []
        assert json.loads(object_response.content) == {}
        assert len(provider.requests) == 2

    @pytest.mark.asyncio
    async def test_requests_not_recorded_by_default(self):
        """The factory singleton serves every request; it must not accumulate them."""
        provider = MockProvider()

        for _ in range(50):
            await provider.generate(news_request())

        assert provider.requests == []


class TestProviderFactory:
    """Tests for get_llm_provider."""

    def setup_method(self):
        reset_provider()

    def teardown_method(self):
        reset_provider()

    def test_force_mock(self):
        assert isinstance(get_llm_provider(force_mock=True), MockProvider)

    def test_configured_mock(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "mock")
        assert isinstance(get_llm_provider(), MockProvider)

    def test_gemini_selected_with_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "gemini")
        monkeypatch.setattr(settings, "gemini_api_key", "test-key")
        assert isinstance(get_llm_provider(), GeminiProvider)

    def test_anthropic_selected_with_key(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "anthropic")
        monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
        assert isinstance(get_llm_provider(), AnthropicProvider)

    def test_fallback_to_mock_without_keys(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "gemini")
        monkeypatch.setattr(settings, "gemini_api_key", "")
        assert isinstance(get_llm_provider(), MockProvider)

    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(settings, "llm_provider", "mock")
        assert get_llm_provider() is get_llm_provider()
