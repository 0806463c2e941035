# M&O Legal Desk - Legal content services
# Fetches, parses and sanitizes generated legal content

from services.legal.clock import Clock, FakeClock, SystemClock
from services.legal.pipeline import (
    ContentPipeline,
    degrade_to,
    degrade_to_empty,
    get_pipeline,
    parse_batch,
    reset_pipeline,
)
from services.legal.retry import invoke_with_retry, is_transient
from services.legal.sanitizer import (
    RejectionReason,
    ResultSanitizer,
    get_sanitizer,
    sanitize,
)
from services.legal.types import (
    BareAct,
    BatchKind,
    ContentRecord,
    ExtractedContent,
    LandmarkJudgment,
    LegalNews,
    ScholarlyArticle,
    StudyMaterials,
)

__all__ = [
    "Clock",
    "FakeClock",
    "SystemClock",
    "ContentPipeline",
    "degrade_to",
    "degrade_to_empty",
    "get_pipeline",
    "parse_batch",
    "reset_pipeline",
    "invoke_with_retry",
    "is_transient",
    "RejectionReason",
    "ResultSanitizer",
    "get_sanitizer",
    "sanitize",
    "BareAct",
    "BatchKind",
    "ContentRecord",
    "ExtractedContent",
    "LandmarkJudgment",
    "LegalNews",
    "ScholarlyArticle",
    "StudyMaterials",
]
