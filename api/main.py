"""
M&O Legal Desk - API Gateway
FastAPI application entry point
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import settings
from services.legal import BatchKind, ContentPipeline, get_pipeline
from services.llm import GenerationError, get_llm_provider


def configure_logging() -> None:
    """Filter structlog output at the configured level."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("api_startup")

    provider = get_llm_provider()
    logger.info(
        "generative_backend_status",
        provider=provider.name,
        available=provider.is_available,
        max_attempts=settings.fetch_max_attempts,
        base_delay_ms=settings.fetch_base_delay_ms,
    )

    yield

    logger.info("api_shutdown")


# Create FastAPI application
app = FastAPI(
    title="M&O Legal Desk API",
    description="Legal news, judgments, statutes and study lab for M&O Law Office",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_content_pipeline() -> ContentPipeline:
    """Dependency hook for the content pipeline."""
    return get_pipeline()


# ===========================================
# Pydantic Models
# ===========================================


class BatchResponse(BaseModel):
    kind: str
    page: int
    items: list[dict]
    count: int
    has_more: bool


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


class ExtractRequest(BaseModel):
    title: str
    url: str


class StudyLabRequest(BaseModel):
    content: str


# ===========================================
# Root & Health Endpoints
# ===========================================


@app.get("/")
async def root():
    """Root endpoint - confirms API is running."""
    return {"ok": True, "service": "M&O Legal Desk API", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@app.get("/health/ready")
async def ready():
    """Readiness check with generative backend status."""
    provider = get_llm_provider()
    return {
        "ready": provider.is_available,
        "checks": {
            "generative_backend": provider.is_available,
        },
        "provider": provider.name,
        "model": provider.get_model_name(),
    }


@app.get("/health/live")
async def live():
    """Liveness check."""
    return {"live": True}


@app.get("/api/info")
async def info():
    """Get API information."""
    return {
        "name": "M&O Legal Desk",
        "version": "0.1.0",
        "description": "Legal content feeds and AI study lab",
        "content_kinds": [kind.value for kind in BatchKind],
    }


# ===========================================
# Content Feeds
# ===========================================


@app.get("/api/content/{kind}", response_model=BatchResponse)
async def get_content_batch(
    kind: str,
    query: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1, le=100),
    pipeline: ContentPipeline = Depends(get_content_pipeline),
):
    """
    Fetch one page of a content feed.

    Backend failures yield an empty page, never an error status.
    """
    try:
        batch_kind = BatchKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown content kind: {kind}")

    records = await pipeline.fetch_batch(batch_kind, query=query, page=page)
    return BatchResponse(
        kind=batch_kind.value,
        page=page,
        items=[record.to_dict() for record in records],
        count=len(records),
        has_more=len(records) >= settings.batch_has_more_threshold,
    )


@app.get("/api/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(
    q: str = Query("", max_length=200),
    pipeline: ContentPipeline = Depends(get_content_pipeline),
):
    """Search-box suggestions."""
    suggestions = await pipeline.fetch_search_suggestions(q)
    return SuggestionsResponse(suggestions=suggestions)


# ===========================================
# Viewer & Study Lab
# ===========================================


@app.post("/api/extract")
async def extract_resource(
    body: ExtractRequest,
    pipeline: ContentPipeline = Depends(get_content_pipeline),
):
    """Extract readable text and cross-references from a source page."""
    content = await pipeline.extract_resource_content(body.title, body.url)
    return content.to_dict()


@app.post("/api/study-lab")
async def study_lab(
    body: StudyLabRequest,
    pipeline: ContentPipeline = Depends(get_content_pipeline),
):
    """Generate flashcards, a mind map and a briefing note from legal text."""
    if not body.content.strip():
        raise HTTPException(status_code=422, detail="content must not be empty")
    if len(body.content) > settings.study_lab_max_chars:
        raise HTTPException(
            status_code=422,
            detail=f"content exceeds {settings.study_lab_max_chars} characters",
        )

    try:
        materials = await pipeline.generate_study_materials(body.content)
    except GenerationError as e:
        logger.error("study_lab_failed", error_type=type(e).__name__, error=str(e)[:200])
        raise HTTPException(
            status_code=502,
            detail="The analysis service is busy. Please try again in a moment.",
        )

    return materials.to_dict()
