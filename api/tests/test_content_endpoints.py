"""
Tests for content, viewer and study lab endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from config import settings
from main import app, get_content_pipeline
from services.legal import ContentPipeline, FakeClock
from services.llm import GenerationAuthError, GenerationRateLimitError
from services.llm.mock_provider import MockProvider


class FailingProvider(MockProvider):
    """Mock provider whose every call fails with the given error."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    async def generate(self, request):
        self.requests.append(request)
        raise self.error


def pipeline_for(provider) -> ContentPipeline:
    return ContentPipeline(provider=provider, clock=FakeClock(), max_attempts=3, base_delay_ms=10)


@pytest.fixture
def provider():
    return MockProvider(record_requests=True)


@pytest.fixture
def client(provider):
    """Test client wired to a pipeline over the given provider."""
    app.dependency_overrides[get_content_pipeline] = lambda: pipeline_for(provider)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestContentEndpoint:
    """Tests for GET /api/content/{kind}."""

    def test_news_page(self, client):
        response = client.get("/api/content/news")

        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "news"
        assert data["page"] == 1
        assert data["count"] == 2
        assert all("livelaw" not in item["url"] for item in data["items"])

    def test_has_more_follows_threshold(self, client):
        """Fewer than the threshold ends pagination."""
        response = client.get("/api/content/news")
        assert response.json()["has_more"] is (2 >= settings.batch_has_more_threshold)

    def test_judgments_use_wire_field_names(self, client):
        response = client.get("/api/content/judgments", params={"query": "Constitution", "page": 2})

        item = response.json()["items"][0]
        assert item["caseName"].startswith("Justice K.S. Puttaswamy")
        assert item["link"].startswith("https://indiankanoon.org/")

    def test_jurisdiction_feed(self, client):
        response = client.get("/api/content/tamil_nadu")
        assert response.status_code == 200
        assert response.json()["count"] == 1

    def test_unknown_kind_is_404(self, client):
        response = client.get("/api/content/gossip")
        assert response.status_code == 404

    def test_page_must_be_positive(self, client):
        response = client.get("/api/content/news", params={"page": 0})
        assert response.status_code == 422

    @pytest.mark.parametrize("provider", [FailingProvider(GenerationRateLimitError("429"))])
    def test_backend_failure_is_empty_page(self, client, provider):
        """Exhausted retries still return 200 with no items."""
        response = client.get("/api/content/statutes")

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["has_more"] is False
        assert len(provider.requests) == 3


class TestSuggestionsEndpoint:
    """Tests for GET /api/suggestions."""

    def test_suggestions(self, client):
        response = client.get("/api/suggestions", params={"q": "right"})

        assert response.status_code == 200
        assert "Right to privacy" in response.json()["suggestions"]

    def test_short_query_is_empty(self, client, provider):
        response = client.get("/api/suggestions", params={"q": "r"})

        assert response.json() == {"suggestions": []}
        assert provider.requests == []


class TestExtractEndpoint:
    """Tests for POST /api/extract."""

    def test_extract(self, client):
        response = client.post(
            "/api/extract",
            json={"title": "Puttaswamy", "url": "https://indiankanoon.org/doc/91938676/"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["text"].startswith("Facts:")
        assert {"name": "Constitution of India", "type": "act"} in data["mentions"]

    @pytest.mark.parametrize("provider", [FailingProvider(GenerationAuthError("bad key", status_code=401))])
    def test_extract_failure_returns_fallback(self, client, provider):
        response = client.post("/api/extract", json={"title": "t", "url": "https://indiankanoon.org/doc/1/"})

        assert response.status_code == 200
        assert response.json()["text"].startswith("Extraction failed")


class TestStudyLabEndpoint:
    """Tests for POST /api/study-lab."""

    def test_generates_materials(self, client):
        response = client.post("/api/study-lab", json={"content": "Article 21 protects life."})

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"flashcards", "mindMap", "briefing"}
        assert data["mindMap"]["label"] == "Right to Privacy"

    def test_blank_content_is_422(self, client):
        response = client.post("/api/study-lab", json={"content": "   "})
        assert response.status_code == 422

    def test_oversized_content_is_422(self, client, monkeypatch):
        monkeypatch.setattr(settings, "study_lab_max_chars", 10)
        response = client.post("/api/study-lab", json={"content": "x" * 11})
        assert response.status_code == 422

    @pytest.mark.parametrize("provider", [FailingProvider(GenerationRateLimitError("quota exceeded"))])
    def test_backend_failure_is_502(self, client, provider):
        response = client.post("/api/study-lab", json={"content": "Article 21"})

        assert response.status_code == 502
        assert len(provider.requests) == 3
