"""
M&O Legal Desk - Content Pipeline

Composes every generative call the app makes:
build request -> retrying invoke -> parse -> sanitize.

The fetch-batch family never raises: failures are converted to an empty
batch by a single adapter (degrade_to_empty).
"""

import functools
import json
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from config import settings
from services.legal.clock import Clock
from services.legal.retry import invoke_with_retry
from services.legal.sanitizer import ResultSanitizer, get_sanitizer
from services.legal.schemas import (
    EXTRACTION_SCHEMA,
    STUDY_MATERIALS_SCHEMA,
    SUGGESTIONS_SCHEMA,
    extraction_prompt,
    get_batch_spec,
    study_materials_prompt,
    suggestions_prompt,
)
from services.legal.types import (
    BatchKind,
    ContentRecord,
    ExtractedContent,
    StudyMaterials,
)
from services.llm import (
    BaseGenerativeProvider,
    GenerationRequest,
    ModelTier,
    ResponseParseError,
    get_llm_provider,
)

logger = structlog.get_logger()

T = TypeVar("T")

EXTRACTION_FALLBACK_TEXT = "Extraction failed due to heavy traffic. Please try again in a moment."

JURISDICTION_FEEDS = {
    "tamil_nadu": BatchKind.TAMIL_NADU,
    "supreme_court": BatchKind.SUPREME_COURT,
}


def degrade_to(fallback: Callable[[], T]):
    """
    Decorator: on any exception, log it and return fallback() instead.

    This is the one place where pipeline failures stop propagating.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    "pipeline_call_degraded",
                    operation=func.__name__,
                    error_type=type(e).__name__,
                    error=str(e)[:200],
                )
                return fallback()
        return wrapper
    return decorator


degrade_to_empty = degrade_to(list)


def parse_json(text: Optional[str]) -> Any:
    """Decode a provider payload, treating bad JSON as a terminal failure."""
    try:
        return json.loads(text or "")
    except ValueError as e:
        raise ResponseParseError(f"Backend payload is not valid JSON: {e}") from e


def parse_batch(payload: Any, record_cls: type) -> list:
    """
    Build records from a decoded payload.

    A payload that is not a list is a parse failure. Individual items
    that do not fit the record shape are dropped.
    """
    if not isinstance(payload, list):
        raise ResponseParseError(f"Expected a JSON array, got {type(payload).__name__}")

    records = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        try:
            records.append(record_cls.from_dict(item))
        except (KeyError, TypeError, ValueError, OverflowError):
            continue

    dropped = len(payload) - len(records)
    if dropped:
        logger.debug("malformed_records_dropped", record_type=record_cls.__name__, dropped=dropped)
    return records


class ContentPipeline:
    """
    Fetch-and-sanitize pipeline over a generative provider.

    Each call owns its own retry state; instances hold no per-call state
    and can serve concurrent requests.
    """

    def __init__(
        self,
        provider: Optional[BaseGenerativeProvider] = None,
        sanitizer: Optional[ResultSanitizer] = None,
        clock: Optional[Clock] = None,
        max_attempts: Optional[int] = None,
        base_delay_ms: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            provider: Generative provider (defaults to the configured one)
            sanitizer: Result sanitizer (defaults to the shared one)
            clock: Clock for backoff waits (defaults to the system clock)
            max_attempts: Retry budget per call (defaults to settings)
            base_delay_ms: First backoff delay (defaults to settings)
        """
        self._provider = provider
        self.sanitizer = sanitizer or get_sanitizer()
        self.clock = clock
        self.max_attempts = max_attempts if max_attempts is not None else settings.fetch_max_attempts
        self.base_delay_ms = base_delay_ms if base_delay_ms is not None else settings.fetch_base_delay_ms

    @property
    def provider(self) -> BaseGenerativeProvider:
        if self._provider is None:
            self._provider = get_llm_provider()
        return self._provider

    async def _generate(self, request: GenerationRequest) -> Any:
        """Run one request through the retrying invoker and decode it."""
        response = await invoke_with_retry(
            lambda: self.provider.generate(request),
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            clock=self.clock,
            label=request.label,
        )
        return parse_json(response.content)

    # =========================================================================
    # Fetch-batch family (never raises)
    # =========================================================================

    @degrade_to_empty
    async def fetch_batch(
        self,
        kind: BatchKind,
        query: Optional[str] = None,
        page: int = 1,
    ) -> list[ContentRecord]:
        """
        Fetch, parse and sanitize one batch of a content kind.

        Args:
            kind: Which feed to fetch
            query: Free-text focus (search term, or act name for judgments)
            page: 1-based batch index

        Returns:
            Cleaned batch, or [] on any unrecovered failure
        """
        spec = get_batch_spec(kind)
        request = GenerationRequest(
            prompt=spec.prompt(query, page),
            response_schema=spec.schema,
            model_tier=ModelTier.FAST,
            use_search=True,
            label=spec.kind.value,
        )
        payload = await self._generate(request)
        records = parse_batch(payload, spec.record_cls)
        cleaned = self.sanitizer.sanitize(records)

        logger.info(
            "batch_fetched",
            kind=spec.kind.value,
            page=page,
            received=len(records),
            returned=len(cleaned),
        )
        return cleaned

    async def fetch_jurisdiction_feed(self, jurisdiction: str, page: int = 1) -> list[ContentRecord]:
        """Fetch a jurisdiction-specific feed; unknown jurisdictions yield []."""
        kind = JURISDICTION_FEEDS.get(jurisdiction)
        if kind is None:
            logger.warning("unknown_jurisdiction", jurisdiction=jurisdiction)
            return []
        return await self.fetch_batch(kind, page=page)

    @degrade_to_empty
    async def fetch_search_suggestions(self, text: str) -> list[str]:
        """Short search completions for the search box."""
        text = (text or "").strip()
        if len(text) < settings.suggestion_min_length:
            return []

        payload = await self._generate(GenerationRequest(
            prompt=suggestions_prompt(text),
            response_schema=SUGGESTIONS_SCHEMA,
            label="suggestions",
        ))
        if not isinstance(payload, list):
            raise ResponseParseError("Suggestions payload is not a list")
        return [item for item in payload if isinstance(item, str) and item.strip()]

    # =========================================================================
    # Viewer and study lab
    # =========================================================================

    @degrade_to(lambda: ExtractedContent(text=EXTRACTION_FALLBACK_TEXT))
    async def extract_resource_content(self, title: str, url: str) -> ExtractedContent:
        """Pull readable text and act/judgment mentions from a source page."""
        payload = await self._generate(GenerationRequest(
            prompt=extraction_prompt(title, url),
            response_schema=EXTRACTION_SCHEMA,
            use_search=True,
            label="extraction",
        ))
        try:
            return ExtractedContent.from_dict(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ResponseParseError(f"Malformed extraction payload: {e}") from e

    async def generate_study_materials(self, content: str) -> StudyMaterials:
        """
        Turn pasted legal text into flashcards, a mind map and a briefing note.

        Unlike the fetch family this raises on failure; the caller decides
        how to report it.

        Raises:
            ValueError: If content is blank
            GenerationError: If the backend fails or returns a bad payload
        """
        if not content or not content.strip():
            raise ValueError("content must not be empty")

        payload = await self._generate(GenerationRequest(
            prompt=study_materials_prompt(content),
            response_schema=STUDY_MATERIALS_SCHEMA,
            model_tier=ModelTier.DEEP,
            label="study_materials",
        ))
        try:
            return StudyMaterials.from_dict(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ResponseParseError(f"Malformed study materials payload: {e}") from e


# Module-level singleton
_pipeline: Optional[ContentPipeline] = None


def get_pipeline() -> ContentPipeline:
    """Get or create the content pipeline singleton."""
    global _pipeline
    if _pipeline is None:
        _pipeline = ContentPipeline()
    return _pipeline


def reset_pipeline() -> None:
    """Reset the pipeline singleton (for testing)."""
    global _pipeline
    _pipeline = None
