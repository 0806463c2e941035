"""
M&O Legal Desk - Anthropic Claude Provider

Implementation of the generative provider using Anthropic's Claude API.
Structured output is obtained by forcing a single tool call whose
input schema is the requested output schema.
"""

from typing import Optional

import structlog
from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic

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

PAYLOAD_TOOL_NAME = "emit_payload"
WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


class AnthropicProvider(BaseGenerativeProvider):
    """
    Anthropic Claude provider.

    The same model serves both tiers; DEEP requests get a larger token budget.
    """

    name = "anthropic"

    MAX_TOKENS = {
        ModelTier.FAST: 4096,
        ModelTier.DEEP: 8192,
    }

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize the Anthropic provider.

        Args:
            api_key: Anthropic API key (defaults to settings)
            model: Model to use (defaults to settings)
        """
        self._api_key = api_key or settings.anthropic_api_key
        self._model = model or settings.anthropic_model
        self._client: Optional[AsyncAnthropic] = None

    @property
    def client(self) -> AsyncAnthropic:
        """Lazy-initialize the Anthropic client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderNotConfiguredError("Anthropic API key not configured")
            self._client = AsyncAnthropic(api_key=self._api_key)
        return self._client

    @property
    def is_available(self) -> bool:
        """Check if API key is configured."""
        return bool(self._api_key)

    def get_model_name(self, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model identifier."""
        return self._model

    def _build_tools(self, request: GenerationRequest, input_schema: dict) -> tuple[list[dict], dict]:
        """Build the tool list and tool_choice for a request."""
        payload_tool = {
            "name": PAYLOAD_TOOL_NAME,
            "description": "Return the final answer as structured JSON.",
            "input_schema": input_schema,
        }
        if request.use_search:
            # Search must be allowed to run before the payload tool is called
            return [WEB_SEARCH_TOOL, payload_tool], {"type": "any"}
        return [payload_tool], {"type": "tool", "name": PAYLOAD_TOOL_NAME}

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Generate a structured response."""
        input_schema, wrapped = wrap_array_schema(request.response_schema)
        tools, tool_choice = self._build_tools(request, input_schema)

        try:
            response = await self.client.messages.create(
                model=self._model,
                max_tokens=self.MAX_TOKENS[request.model_tier],
                tools=tools,
                tool_choice=tool_choice,
                messages=[{"role": "user", "content": request.prompt}],
            )
        except APIStatusError as e:
            logger.error("anthropic_api_error", status=e.status_code, label=request.label)
            raise error_from_status(e.status_code, f"Anthropic API error: {e}") from e
        except APITimeoutError as e:
            raise GenerationError("Anthropic API timeout") from e
        except APIConnectionError as e:
            raise GenerationError(f"Anthropic connection error: {e}") from e

        payload = None
        for block in response.content:
            if getattr(block, "type", None) == "tool_use" and block.name == PAYLOAD_TOOL_NAME:
                payload = block.input
                break

        if payload is None:
            raise ResponseParseError("Anthropic response did not include a payload tool call")

        logger.info(
            "anthropic_response",
            label=request.label,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )

        return GenerationResponse(
            content=unwrap_array_payload(payload, wrapped),
            model=response.model,
            finish_reason=response.stop_reason or "stop",
            metadata={
                "provider": "anthropic",
                "id": response.id,
            },
        )
