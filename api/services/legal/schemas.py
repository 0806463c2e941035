"""
M&O Legal Desk - Request Schemas and Prompts

Defines, per content kind, the instruction text sent to the generative
backend and the strict JSON schema its answer must follow.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from services.legal.types import (
    BareAct,
    BatchKind,
    LandmarkJudgment,
    LegalNews,
    ScholarlyArticle,
)


def _string() -> dict:
    return {"type": "string"}


def _array_of(item_schema: dict) -> dict:
    return {"type": "array", "items": item_schema}


def _object(properties: dict, required: list[str]) -> dict:
    return {"type": "object", "properties": properties, "required": required}


# =============================================================================
# RECORD SCHEMAS
# =============================================================================

NEWS_SCHEMA = _array_of(_object(
    {
        "title": _string(),
        "summary": _string(),
        "url": _string(),
        "source": _string(),
        "date": _string(),
    },
    ["title", "summary", "url", "source", "date"],
))

ARTICLE_SCHEMA = _array_of(_object(
    {
        "title": _string(),
        "author": _string(),
        "summary": _string(),
        "url": _string(),
        "downloadUrl": _string(),
        "source": _string(),
        "act": _string(),
    },
    ["title", "author", "summary", "url", "source"],
))

JUDGMENT_SCHEMA = _array_of(_object(
    {
        "caseName": _string(),
        "citation": _string(),
        "act": _string(),
        "summary": _string(),
        "impact": _string(),
        "link": _string(),
        "freeDownloadLink": _string(),
        "bench": _string(),
        "relatedActs": _array_of(_string()),
    },
    ["caseName", "citation", "act", "summary", "impact", "link"],
))

STATUTE_SCHEMA = _array_of(_object(
    {
        "name": _string(),
        "year": {"type": "number"},
        "description": _string(),
        "sourceUrl": _string(),
        "secondarySourceUrl": _string(),
        "pdfUrl": _string(),
        "sections": _string(),
    },
    ["name", "year", "description", "sourceUrl", "secondarySourceUrl", "pdfUrl"],
))


# =============================================================================
# STUDY LAB / VIEWER SCHEMAS
# =============================================================================

STUDY_MATERIALS_SCHEMA = _object(
    {
        "flashcards": _array_of(_object(
            {"question": _string(), "answer": _string()},
            ["question", "answer"],
        )),
        "mindMap": _object(
            {
                "id": _string(),
                "label": _string(),
                "children": _array_of(_object(
                    {"id": _string(), "label": _string()},
                    ["id", "label"],
                )),
            },
            ["id", "label"],
        ),
        "briefing": _object(
            {
                "provisions": _array_of(_string()),
                "arguments": _array_of(_string()),
                "conclusion": _string(),
            },
            ["provisions", "arguments", "conclusion"],
        ),
    },
    ["flashcards", "mindMap", "briefing"],
)

EXTRACTION_SCHEMA = _object(
    {
        "text": _string(),
        "mentions": _array_of(_object(
            {
                "name": _string(),
                "type": {"type": "string", "enum": ["act", "judgment"]},
            },
            ["name", "type"],
        )),
    },
    ["text", "mentions"],
)

SUGGESTIONS_SCHEMA = _array_of(_string())


# =============================================================================
# PROMPTS
# =============================================================================

def _news_prompt(query: Optional[str], page: int) -> str:
    return (
        "Fetch today's Indian legal news and daily updates.\n"
        "PRIORITIZE: https://www.verdictum.in/, The Leaflet, India Legal Live, and official "
        "High Court/Supreme Court press releases.\n"
        "STRICT RULE: Only include FULL, VERIFIED, and LIVE URLs. Do not guess or truncate "
        "URLs with '...'.\n"
        f"Avoid paywalled sites like LiveLaw or Bar and Bench. Batch {page}."
    )


def _articles_prompt(query: Optional[str], page: int) -> str:
    return (
        "Fetch scholarly articles and research from National/State Judicial Academies "
        "and Verdictum.in.\n"
        f"Query: {query or ''}.\n"
        "STRICT RULE: Provide only DIRECT and COMPLETE source URLs. No placeholders or "
        "guessed citation URLs.\n"
        f"Batch {page}."
    )


def _tamil_nadu_prompt(query: Optional[str], page: int) -> str:
    return (
        "Tamil Nadu law updates and Madras High Court news.\n"
        "STRICT RULE: Verify URLs are live and publicly accessible.\n"
        f"Batch {page}. Include Verdictum.in TN section."
    )


def _supreme_court_prompt(query: Optional[str], page: int) -> str:
    return (
        "Supreme Court case summaries and observer reports.\n"
        "STRICT RULE: Use only active, verifiable URLs from free portals like Verdictum "
        "or SC Observer.\n"
        f"Batch {page}."
    )


def _judgments_prompt(query: Optional[str], page: int) -> str:
    return (
        f"Fetch Landmark Judgments for {query}.\n"
        "STRICT RULE: Provide only COMPLETE and FUNCTIONAL source links from Indian Kanoon, "
        "Verdictum, or court websites.\n"
        f"DO NOT guess URLs based on citations. Batch {page}.\n"
        "Identify specifically mentioned Bare Acts for 'relatedActs'."
    )


def _statutes_prompt(query: Optional[str], page: int) -> str:
    focus = f" Focus on: {query}." if query else ""
    return (
        f"Fetch official Indian Bare Acts from IndiaCode.nic.in.{focus}\n"
        "STRICT RULE: sourceUrl must be the direct IndiaCode page. pdfUrl must be a verified "
        "bitstream/download link if available.\n"
        f"Ensure URLs do not contain '...' and are fully resolved. Batch {page}."
    )


def study_materials_prompt(content: str) -> str:
    return (
        "Analyze the following legal text as a senior legal researcher for M&O Law Office: "
        f"\"{content}\".\n"
        "Create:\n"
        "1. 5 Flashcards for key provisions.\n"
        "2. A hierarchical Mind Map of concepts.\n"
        "3. A Briefing Note for an advocate (Key provisions, Core arguments, and Conclusion).\n"
        "Return only a JSON object matching the schema."
    )


def extraction_prompt(title: str, url: str) -> str:
    return (
        f"Extract the full legal text or detailed analytical summary for: \"{title}\" "
        f"from the live webpage: {url}.\n"
        "Focus on structured sections: facts, laws mentioned, and findings. Avoid ads.\n"
        "ALSO, identify all specific Indian Bare Acts and Landmark Judgments mentioned "
        "in the content.\n"
        "Return as a JSON object."
    )


def suggestions_prompt(text: str) -> str:
    return f"Legal search suggestions for \"{text}\". JSON array of short strings."


# =============================================================================
# BATCH REGISTRY
# =============================================================================

@dataclass(frozen=True)
class BatchSpec:
    """Everything needed to request and parse one kind of content batch."""
    kind: BatchKind
    record_cls: type
    schema: dict
    build_prompt: Callable[[Optional[str], int], str]
    default_query: Optional[str] = None

    def prompt(self, query: Optional[str], page: int) -> str:
        return self.build_prompt(query or self.default_query, page)


BATCH_SPECS: dict[BatchKind, BatchSpec] = {
    BatchKind.NEWS: BatchSpec(BatchKind.NEWS, LegalNews, NEWS_SCHEMA, _news_prompt),
    BatchKind.ARTICLES: BatchSpec(
        BatchKind.ARTICLES, ScholarlyArticle, ARTICLE_SCHEMA, _articles_prompt,
    ),
    BatchKind.JUDGMENTS: BatchSpec(
        BatchKind.JUDGMENTS,
        LandmarkJudgment,
        JUDGMENT_SCHEMA,
        _judgments_prompt,
        default_query="Constitution",
    ),
    BatchKind.STATUTES: BatchSpec(BatchKind.STATUTES, BareAct, STATUTE_SCHEMA, _statutes_prompt),
    BatchKind.TAMIL_NADU: BatchSpec(
        BatchKind.TAMIL_NADU, ScholarlyArticle, ARTICLE_SCHEMA, _tamil_nadu_prompt,
    ),
    BatchKind.SUPREME_COURT: BatchSpec(
        BatchKind.SUPREME_COURT, ScholarlyArticle, ARTICLE_SCHEMA, _supreme_court_prompt,
    ),
}


def get_batch_spec(kind: BatchKind) -> BatchSpec:
    """Look up the batch definition for a content kind."""
    return BATCH_SPECS[BatchKind(kind)]
