"""
M&O Legal Desk - Gemini Provider

Implementation of the generative provider using Google's Gemini API
through the google-genai SDK.
"""

from typing import Optional

import httpx
import structlog
from google import genai
from google.genai import errors, types

from config import settings
from services.llm.base import (
    BaseGenerativeProvider,
    GenerationError,
    GenerationRateLimitError,
    GenerationRequest,
    GenerationResponse,
    ModelTier,
    ProviderNotConfiguredError,
    ResponseParseError,
    error_from_status,
)


logger = structlog.get_logger()

# Gemini schema keys we pass through; everything else is dropped
_SCHEMA_KEYS = ("type", "properties", "items", "required", "enum", "description")


def to_gemini_schema(schema: dict) -> dict:
    """
    Convert a JSON schema into Gemini's OpenAPI-subset schema.

    Gemini expects upper-case type names ("STRING", "ARRAY", ...).
    """
    converted = {}
    for key in _SCHEMA_KEYS:
        if key not in schema:
            continue
        value = schema[key]
        if key == "type":
            converted["type"] = str(value).upper()
        elif key == "properties":
            converted["properties"] = {
                name: to_gemini_schema(sub) for name, sub in value.items()
            }
        elif key == "items":
            converted["items"] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


class GeminiProvider(BaseGenerativeProvider):
    """
    Gemini provider.

    Uses the flash model for feeds and the pro model for study lab analysis.
    Search-grounded requests attach the Google Search tool.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        fast_model: Optional[str] = None,
        deep_model: Optional[str] = None,
    ):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Gemini API key (defaults to settings)
            fast_model: Model for FAST tier requests
            deep_model: Model for DEEP tier requests
        """
        self._api_key = api_key or settings.gemini_api_key
        self._models = {
            ModelTier.FAST: fast_model or settings.gemini_fast_model,
            ModelTier.DEEP: deep_model or settings.gemini_deep_model,
        }
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Lazy-initialize the Gemini client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderNotConfiguredError("Gemini API key not configured")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    @property
    def is_available(self) -> bool:
        """Check if API key is configured."""
        return bool(self._api_key)

    def get_model_name(self, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model identifier."""
        return self._models[tier]

    def _build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        config_kwargs = {
            "response_mime_type": "application/json",
            "response_schema": to_gemini_schema(request.response_schema),
        }
        if request.use_search:
            config_kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        return types.GenerateContentConfig(**config_kwargs)

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate a structured response."""
        model = self.get_model_name(request.model_tier)

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=request.prompt,
                config=self._build_config(request),
            )
        except errors.APIError as e:
            raise self._map_api_error(e) from e
        except httpx.TimeoutException as e:
            raise GenerationError("Gemini API timeout") from e
        except httpx.RequestError as e:
            raise GenerationError(f"Gemini request error: {e}") from e

        text = response.text
        if not text:
            raise ResponseParseError("Gemini returned an empty payload")

        finish_reason = "stop"
        if response.candidates and response.candidates[0].finish_reason:
            finish_reason = str(response.candidates[0].finish_reason)

        logger.info("gemini_response", label=request.label, model=model)

        return GenerationResponse(
            content=text,
            model=model,
            finish_reason=finish_reason,
            metadata={"provider": "gemini", "grounded": request.use_search},
        )

    def _map_api_error(self, error: errors.APIError) -> GenerationError:
        """Translate a google-genai APIError into our error taxonomy."""
        message = f"Gemini API error: {error}"
        status = (error.status or "").upper()

        if status == "RESOURCE_EXHAUSTED":
            return GenerationRateLimitError(message, status_code=error.code)

        logger.error(
            "gemini_api_error",
            code=error.code,
            status=status,
            message=str(error.message)[:500],
        )
        return error_from_status(error.code or 0, message)
