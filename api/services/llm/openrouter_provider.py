"""
M&O Legal Desk - OpenRouter Provider

Implementation of the generative provider using OpenRouter's
OpenAI-compatible API with json_schema response formatting.
"""

import json
from typing import Optional

import httpx
import structlog

from config import settings
from services.llm.base import (
    BaseGenerativeProvider,
    GenerationError,
    GenerationRequest,
    GenerationResponse,
    ModelTier,
    ProviderNotConfiguredError,
    ResponseParseError,
    error_from_status,
    unwrap_array_payload,
    wrap_array_schema,
)


logger = structlog.get_logger()

# OpenRouter API endpoint (OpenAI-compatible)
OPENROUTER_API_BASE = "https://openrouter.ai/api/v1"


class OpenRouterProvider(BaseGenerativeProvider):
    """
    OpenRouter provider.

    Search-grounded requests use OpenRouter's ":online" model suffix.
    """

    name = "openrouter"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        site_url: Optional[str] = None,
        site_name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the OpenRouter provider.

        Args:
            api_key: OpenRouter API key (defaults to settings)
            model: Model to use (defaults to settings)
            site_url: Your site URL for OpenRouter rankings (optional)
            site_name: Your site name for OpenRouter rankings (optional)
            transport: Custom httpx transport (tests)
        """
        self._api_key = api_key or settings.openrouter_api_key
        self._model = model or settings.openrouter_model
        self._site_url = site_url or "https://moandocean.in"
        self._site_name = site_name or "M&O Legal Desk"
        self._transport = transport

    @property
    def is_available(self) -> bool:
        """Check if API key is configured."""
        return bool(self._api_key)

    def get_model_name(self, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model identifier."""
        return self._model

    def _get_headers(self) -> dict:
        """Get headers for OpenRouter API requests."""
        if not self._api_key:
            raise ProviderNotConfiguredError("OpenRouter API key not configured")
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._site_url,
            "X-Title": self._site_name,
        }

    def _build_payload(self, request: GenerationRequest, schema: dict) -> dict:
        model = f"{self._model}:online" if request.use_search else self._model
        return {
            "model": model,
            "messages": [{"role": "user", "content": request.prompt}],
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": request.label.replace(" ", "_"),
                    "strict": False,
                    "schema": schema,
                },
            },
        }

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate a structured response."""
        schema, wrapped = wrap_array_schema(request.response_schema)
        payload = self._build_payload(request, schema)

        async with httpx.AsyncClient(timeout=90.0, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{OPENROUTER_API_BASE}/chat/completions",
                    headers=self._get_headers(),
                    json=payload,
                )
            except httpx.TimeoutException as e:
                raise GenerationError("OpenRouter API timeout") from e
            except httpx.RequestError as e:
                raise GenerationError(f"OpenRouter request error: {e}") from e

        if response.status_code != 200:
            error_body = response.text[:500]
            logger.error(
                "openrouter_api_error",
                status=response.status_code,
                body=error_body,
            )
            raise error_from_status(
                response.status_code,
                f"OpenRouter API error: {response.status_code} - {error_body}",
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
            parsed = json.loads(content)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ResponseParseError(f"Malformed OpenRouter response: {e}") from e

        logger.info("openrouter_response", label=request.label, model=payload["model"])

        return GenerationResponse(
            content=unwrap_array_payload(parsed, wrapped),
            model=data.get("model", self._model),
            finish_reason=data["choices"][0].get("finish_reason") or "stop",
            metadata={
                "provider": "openrouter",
                "id": data.get("id"),
            },
        )
