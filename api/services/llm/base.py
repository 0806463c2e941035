"""
M&O Legal Desk - Generative Provider Base Interface

Abstract base class for structured-output generative providers,
plus the error taxonomy every provider maps its failures onto.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ModelTier(str, Enum):
    """Which class of model a request should run on."""
    FAST = "fast"  # Feeds, suggestions, extraction
    DEEP = "deep"  # Study lab analysis


@dataclass(frozen=True)
class GenerationRequest:
    """A single structured generation call."""
    prompt: str
    response_schema: dict  # JSON schema of the expected payload
    model_tier: ModelTier = ModelTier.FAST
    use_search: bool = False  # Ground the answer with live web search
    label: str = "generation"  # Short name used in logs


@dataclass
class GenerationResponse:
    """Raw provider response; content is the JSON text of the payload."""
    content: str
    model: str
    finish_reason: str = "stop"
    metadata: dict = field(default_factory=dict)


class GenerationError(Exception):
    """Base exception for generative backend failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationRateLimitError(GenerationError):
    """Raised on HTTP 429 or an exhausted quota."""

    def __init__(self, message: str, status_code: Optional[int] = 429):
        super().__init__(message, status_code=status_code)


class GenerationServerError(GenerationError):
    """Raised when the backend reports a server-side fault (5xx)."""
    pass


class GenerationAuthError(GenerationError):
    """Raised when the backend rejects our credentials (401/403)."""
    pass


class GenerationRequestError(GenerationError):
    """Raised when the backend rejects the request itself (other 4xx)."""
    pass


class ResponseParseError(GenerationError):
    """Raised when the backend payload is not the JSON shape we asked for."""
    pass


class ProviderNotConfiguredError(GenerationError):
    """Raised when a provider is used without credentials."""
    pass


def error_from_status(status_code: int, message: str) -> GenerationError:
    """Map an HTTP-style status code onto the generation error taxonomy."""
    if status_code == 429:
        return GenerationRateLimitError(message, status_code=status_code)
    if status_code >= 500:
        return GenerationServerError(message, status_code=status_code)
    if status_code in (401, 403):
        return GenerationAuthError(message, status_code=status_code)
    return GenerationRequestError(message, status_code=status_code)


def wrap_array_schema(schema: dict) -> tuple[dict, bool]:
    """
    Wrap a non-object schema in an object with a single "items" property.

    Tool-calling and json_schema response formats require an object at the
    root. Returns the (possibly wrapped) schema and whether it was wrapped.
    """
    if schema.get("type") == "object":
        return schema, False
    wrapped = {
        "type": "object",
        "properties": {"items": schema},
        "required": ["items"],
    }
    return wrapped, True


def unwrap_array_payload(payload: Any, wrapped: bool) -> str:
    """Inverse of wrap_array_schema: return the JSON text of the real payload."""
    if wrapped:
        if not isinstance(payload, dict) or "items" not in payload:
            raise ResponseParseError("Wrapped payload is missing 'items'")
        payload = payload["items"]
    return json.dumps(payload)


class BaseGenerativeProvider(ABC):
    """
    Abstract base class for generative providers.

    All providers must implement:
    - generate(): Structured (JSON) generation for one request
    - get_model_name(): Return the model identifier for a tier
    - is_available: Whether the provider has what it needs to run
    """

    name: str = "base"

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Run one structured generation call.

        Args:
            request: Prompt, output schema and model tier

        Returns:
            GenerationResponse whose content is JSON text

        Raises:
            GenerationError (or a subclass) on any backend failure
        """
        pass

    @abstractmethod
    def get_model_name(self, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model identifier used for a tier."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is configured and available."""
        pass
