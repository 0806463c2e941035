"""
M&O Legal Desk - Mock Generative Provider

Fallback provider that returns canned payloads when no real backend
is configured. Useful for development and testing.
"""

import asyncio
import json

from services.llm.base import (
    BaseGenerativeProvider,
    GenerationRequest,
    GenerationResponse,
    ModelTier,
)


# Canned payloads keyed by request label.
# The news fixture deliberately carries one paywalled and one dead-link item.
MOCK_PAYLOADS: dict = {
    "news": [
        {
            "title": "Supreme Court reaffirms right to privacy in data protection case",
            "summary": "A constitution bench held that informational privacy is part of Article 21.",
            "url": "https://www.verdictum.in/court-updates/supreme-court/right-to-privacy-data-protection",
            "source": "Verdictum",
            "date": "2026-10-17",
        },
        {
            "title": "Madras High Court issues guidelines on bail hearings",
            "summary": "The court directed trial courts to decide bail pleas within a fixed timeline.",
            "url": "https://www.verdictum.in/court-updates/high-courts/madras-high-court/bail-guidelines",
            "source": "Verdictum",
            "date": "2026-10-17",
        },
        {
            "title": "Bar Council circular on enrolment fees",
            "summary": "Circular issued to all state bar councils.",
            "url": "https://www.livelaw.in/top-stories/bar-council-enrolment-fee",
            "source": "LiveLaw",
            "date": "2026-10-16",
        },
        {
            "title": "Page Not Found",
            "summary": "Oops, the page you were looking for does not exist.",
            "url": "https://theleaflet.in/missing-article",
            "source": "The Leaflet",
            "date": "2026-10-16",
        },
    ],
    "articles": [
        {
            "title": "Reading Article 14 after Navtej Johar",
            "author": "National Judicial Academy",
            "summary": "An analysis of manifest arbitrariness as a ground of review.",
            "url": "https://nja.gov.in/Concluded_Programmes/2025-26/article-14-reading.html",
            "source": "National Judicial Academy",
            "act": "Constitution of India",
        },
    ],
    "tamil_nadu": [
        {
            "title": "Tamil Nadu notifies amended rent control rules",
            "author": "Verdictum",
            "summary": "The amended rules streamline eviction petitions before rent authorities.",
            "url": "https://www.verdictum.in/state/tamil-nadu/rent-control-rules-amendment",
            "source": "Verdictum",
            "act": "Tamil Nadu Regulation of Rights and Responsibilities of Landlords and Tenants Act, 2017",
        },
    ],
    "supreme_court": [
        {
            "title": "Weekly summary of Supreme Court constitution bench hearings",
            "author": "SC Observer",
            "summary": "Hearings on electoral bonds and the Places of Worship Act continued.",
            "url": "https://www.scobserver.in/reports/constitution-bench-weekly-summary",
            "source": "SC Observer",
            "act": "Constitution of India",
        },
    ],
    "judgments": [
        {
            "caseName": "Justice K.S. Puttaswamy (Retd.) v. Union of India",
            "citation": "(2017) 10 SCC 1",
            "act": "Constitution of India",
            "summary": "Right to privacy held to be a fundamental right.",
            "impact": "Foundation of Indian data protection jurisprudence.",
            "link": "https://indiankanoon.org/doc/91938676/",
            "bench": "Nine-judge bench",
            "relatedActs": ["Constitution of India", "Aadhaar Act, 2016"],
        },
    ],
    "statutes": [
        {
            "name": "The Indian Contract Act, 1872",
            "year": 1872,
            "description": "Law relating to contracts in India.",
            "sourceUrl": "https://www.indiacode.nic.in/handle/123456789/2187",
            "secondarySourceUrl": "https://legislative.gov.in/the-indian-contract-act-1872",
            "pdfUrl": "https://www.indiacode.nic.in/bitstream/123456789/2187/2/A187209.pdf",
            "sections": "266",
        },
    ],
    "suggestions": [
        "Right to privacy",
        "Right to information",
        "Right to education",
    ],
    "extraction": {
        "text": "Facts: The petitioner challenged the Aadhaar scheme. Findings: Privacy is protected under Article 21.",
        "mentions": [
            {"name": "Constitution of India", "type": "act"},
            {"name": "Justice K.S. Puttaswamy (Retd.) v. Union of India", "type": "judgment"},
        ],
    },
    "study_materials": {
        "flashcards": [
            {"question": "Which article protects the right to privacy?", "answer": "Article 21."},
        ],
        "mindMap": {
            "id": "root",
            "label": "Right to Privacy",
            "children": [
                {"id": "a21", "label": "Article 21"},
                {"id": "prop", "label": "Proportionality test"},
            ],
        },
        "briefing": {
            "provisions": ["Article 14", "Article 19", "Article 21"],
            "arguments": ["Privacy is intrinsic to life and liberty."],
            "conclusion": "Privacy is a fundamental right subject to reasonable restrictions.",
        },
    },
}


class MockProvider(BaseGenerativeProvider):
    """
    Mock provider for testing and development.

    Returns canned payloads without requiring API keys.
    """

    name = "mock"

    def __init__(self, payloads: dict = None, latency: float = 0.0, record_requests: bool = False):
        """
        Initialize the mock provider.

        Args:
            payloads: Override payloads keyed by request label
            latency: Simulated response time in seconds
            record_requests: Keep every request in self.requests (for tests)
        """
        self._payloads = payloads if payloads is not None else MOCK_PAYLOADS
        self._latency = latency
        self._record_requests = record_requests
        self.requests: list[GenerationRequest] = []

    @property
    def is_available(self) -> bool:
        """Mock provider is always available."""
        return True

    def get_model_name(self, tier: ModelTier = ModelTier.FAST) -> str:
        """Return the model identifier."""
        return f"mock-legal-{tier.value}"

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Return the canned payload for the request label."""
        if self._record_requests:
            self.requests.append(request)
        if self._latency:
            await asyncio.sleep(self._latency)

        if request.label in self._payloads:
            payload = self._payloads[request.label]
        else:
            payload = [] if request.response_schema.get("type") == "array" else {}

        return GenerationResponse(
            content=json.dumps(payload),
            model=self.get_model_name(request.model_tier),
            metadata={
                "provider": "mock",
                "warning": "This is a mock response. Configure a provider API key for real content.",
            },
        )
