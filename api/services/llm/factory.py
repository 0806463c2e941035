"""
M&O Legal Desk - Generative Provider Factory

Factory function to get the configured generative provider.
"""

from typing import Optional
import structlog

from config import settings
from services.llm.base import BaseGenerativeProvider
from services.llm.anthropic_provider import AnthropicProvider
from services.llm.gemini_provider import GeminiProvider
from services.llm.mock_provider import MockProvider
from services.llm.openrouter_provider import OpenRouterProvider


logger = structlog.get_logger()

# Singleton provider instance
_provider_instance: Optional[BaseGenerativeProvider] = None


def get_llm_provider(force_mock: bool = False) -> BaseGenerativeProvider:
    """
    Get the configured generative provider.

    Provider selection priority:
    1. If force_mock=True or LLM_PROVIDER=mock, return MockProvider
    2. If LLM_PROVIDER=anthropic and ANTHROPIC_API_KEY is set, return AnthropicProvider
    3. If LLM_PROVIDER=openrouter and OPENROUTER_API_KEY is set, return OpenRouterProvider
    4. If GEMINI_API_KEY is set, return GeminiProvider
    5. Otherwise, return MockProvider (fallback)

    The provider is cached as a singleton.

    Args:
        force_mock: Force using the mock provider regardless of config

    Returns:
        Configured provider instance
    """
    global _provider_instance

    if force_mock:
        logger.info("llm_provider_selected", provider="mock", reason="force_mock")
        return MockProvider()

    if _provider_instance is not None:
        return _provider_instance

    choice = settings.llm_provider.lower()

    if choice == "mock":
        _provider_instance = MockProvider()
        logger.info("llm_provider_selected", provider="mock", reason="configured")
        return _provider_instance

    if choice == "anthropic" and settings.anthropic_api_key:
        _provider_instance = AnthropicProvider()
    elif choice == "openrouter" and settings.openrouter_api_key:
        _provider_instance = OpenRouterProvider()
    elif settings.gemini_api_key:
        _provider_instance = GeminiProvider()

    if _provider_instance is not None:
        logger.info(
            "llm_provider_selected",
            provider=_provider_instance.name,
            model=_provider_instance.get_model_name(),
        )
        return _provider_instance

    # Fallback to mock
    logger.warning(
        "llm_provider_fallback",
        provider="mock",
        reason="no_api_key",
        hint="Set GEMINI_API_KEY (or ANTHROPIC_API_KEY / OPENROUTER_API_KEY) for live content",
    )
    _provider_instance = MockProvider()
    return _provider_instance


def reset_provider() -> None:
    """
    Reset the cached provider instance.

    Useful for testing or when configuration changes.
    """
    global _provider_instance
    _provider_instance = None
    logger.info("llm_provider_reset")
