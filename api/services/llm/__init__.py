# M&O Legal Desk - Generative Provider Package

from services.llm.base import (
    BaseGenerativeProvider,
    GenerationAuthError,
    GenerationError,
    GenerationRateLimitError,
    GenerationRequest,
    GenerationRequestError,
    GenerationResponse,
    GenerationServerError,
    ModelTier,
    ProviderNotConfiguredError,
    ResponseParseError,
)
from services.llm.factory import get_llm_provider, reset_provider

__all__ = [
    "BaseGenerativeProvider",
    "GenerationAuthError",
    "GenerationError",
    "GenerationRateLimitError",
    "GenerationRequest",
    "GenerationRequestError",
    "GenerationResponse",
    "GenerationServerError",
    "ModelTier",
    "ProviderNotConfiguredError",
    "ResponseParseError",
    "get_llm_provider",
    "reset_provider",
]
