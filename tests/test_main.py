"""Tests for FastAPI main application."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from jobpsych_api.gemini_client import classify_provider_error
from jobpsych_api.main import app


@pytest.fixture
def client():
    """Create test client (no Gemini key configured)."""
    with TestClient(app) as client:
        yield client


def _fail_provider(client: TestClient, status: int) -> None:
    """Make the running service's live calls fail with a provider status."""
    service = client.app.state.ai_service
    stub = AsyncMock()
    stub.generate = AsyncMock(side_effect=classify_provider_error(status, "boom"))
    service._client = stub


class TestHomeAndHealth:
    """Tests for metadata and health endpoints."""

    def test_home(self, client):
        """Home returns service metadata."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["apiPrefix"] == "/api"
        assert data["ai"]["apiKeyConfigured"] is False

    def test_health_check(self, client):
        """Test basic health check."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert "version" in data
        assert "uptime" in data

    def test_detailed_health_check(self, client):
        """Detailed health reports the AI configuration state."""
        response = client.get("/health/detailed")
        assert response.status_code == 200
        assert response.json()["services"]["ai"] == "not_configured"

    def test_trace_id_echoed(self, client):
        """A supplied trace ID is echoed in the response headers."""
        response = client.get("/health", headers={"X-Trace-ID": "abc123"})
        assert response.headers["X-Trace-ID"] == "abc123"


class TestChatEndpoint:
    """Tests for chat endpoint."""

    def test_chat_placeholder(self, client):
        """Without a key chat returns the JobPsych placeholder."""
        response = client.post("/api/ai/chat", json={"message": "Hello", "sessionType": "general"})
        assert response.status_code == 200

        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert "JobPsych AI assistant" in data["response"]
        assert data["sessionType"] == "general"
        assert data["model"] == "gemini-2.5-flash"

    def test_chat_validation_empty_message(self, client):
        """Test that empty message fails validation."""
        response = client.post("/api/ai/chat", json={"message": ""})
        assert response.status_code == 422

    def test_chat_invalid_credentials(self, client):
        """A 401 from the provider becomes a structured failure."""
        _fail_provider(client, 401)
        response = client.post("/api/ai/chat", json={"message": "Hello"})
        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["error"]["reason"] == "invalid_credentials"
        assert "Invalid API key" in body["error"]["message"]

    def test_chat_rate_limited(self, client):
        """A 429 from the provider is surfaced as 429."""
        _fail_provider(client, 429)
        response = client.post("/api/ai/chat", json={"message": "Hello"})
        assert response.status_code == 429
        assert "Rate limit" in response.json()["error"]["message"]

    def test_chat_provider_unavailable(self, client):
        """A 503 from the provider is surfaced as 503."""
        _fail_provider(client, 503)
        response = client.post("/api/ai/chat", json={"message": "Hello"})
        assert response.status_code == 503
        assert response.json()["error"]["reason"] == "provider_unavailable"


class TestJobPsychEndpoints:
    """Tests for coaching and analysis endpoints."""

    def test_coaching(self, client):
        """Coaching echoes the coaching type."""
        response = client.post(
            "/api/ai/coaching", json={"query": "I feel stuck", "sessionType": "motivation"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["coachingType"] == "motivation"
        assert data["response"]["sessionType"] == "coaching"

    def test_analyze_text(self, client):
        """Text analysis echoes the analysis type."""
        response = client.post(
            "/api/ai/analyze", json={"text": "I love this!", "analysisType": "sentiment"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "sentiment"
        assert len(data["insights"]) <= 3
        assert len(data["recommendations"]) <= 3

    def test_analyze_text_invalid_type(self, client):
        """Unknown analysis types are rejected."""
        response = client.post("/api/ai/analyze", json={"text": "Hi", "analysisType": "tone"})
        assert response.status_code == 422

    def test_analyze_job(self, client):
        """Job analysis returns the placeholder shape."""
        response = client.post(
            "/api/ai/analyze-job",
            json={"jobDescription": "Data analyst", "userProfile": "Teacher", "analysisType": "fit"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "fit"
        assert data["confidence"] == 0.5

    def test_analyze_job_failure(self, client):
        """Live analysis failures are reported as analysis_failed."""
        _fail_provider(client, 401)
        response = client.post("/api/ai/analyze-job", json={"analysisType": "career_path"})
        assert response.status_code == 502
        assert response.json()["error"] == {
            "reason": "analysis_failed",
            "message": "Failed to analyze job fit",
        }

    def test_career_path(self, client):
        """Career path returns a chat response."""
        response = client.post(
            "/api/ai/career-path",
            json={
                "currentRole": "Teacher",
                "experience": "8 years",
                "interests": "Data",
                "goals": "Analytics role",
            },
        )
        assert response.status_code == 200
        assert response.json()["data"]["sessionType"] == "analysis"

    def test_interview_prep(self, client):
        """Interview prep echoes the interview type."""
        response = client.post(
            "/api/ai/interview-prep",
            json={"jobDescription": "SRE", "userProfile": "Sysadmin", "interviewType": "technical"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["interviewType"] == "technical"
        assert data["preparation"]["type"] == "interview_prep"

    def test_skill_gap(self, client):
        """Skill gap runs a skills_gap analysis."""
        response = client.post(
            "/api/ai/skill-gap",
            json={"targetRole": "ML Engineer", "currentSkills": "Python", "desiredSkills": "PyTorch"},
        )
        assert response.status_code == 200
        assert response.json()["data"]["type"] == "skills_gap"


class TestModelsAndStatus:
    """Tests for models, status and diagnose endpoints."""

    def test_models(self, client):
        """Models list is stable across calls."""
        first = client.get("/api/ai/models").json()["data"]
        second = client.get("/api/ai/models").json()["data"]
        assert first == second
        assert first["default"] == "gemini-2.5-flash"
        assert "gemini-2.5-flash" in first["models"]

    def test_status(self, client):
        """Status reports not_configured without a key."""
        data = client.get("/api/ai/status").json()["data"]
        assert data["status"] == "not_configured"
        assert data["provider"] == "Google Gemini"
        assert "lastCheck" in data

    def test_diagnose(self, client):
        """Diagnose reports key absence without probing."""
        data = client.get("/api/ai/diagnose").json()["data"]
        assert data["apiKey"] == {"exists": False, "length": 0}
        assert data["suggestions"]


class TestHireDeskEndpoints:
    """Tests for HireDesk endpoints."""

    def test_screening_query(self, client):
        """Screening queries echo the query type with a non-empty answer."""
        response = client.post(
            "/api/hiredesk/query",
            json={"query": "What should I look for?", "queryType": "screening"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["queryType"] == "screening"
        assert data["answer"]

    def test_candidate_match_without_context(self, client):
        """candidate_match without role or candidate info is a 400."""
        response = client.post(
            "/api/hiredesk/query",
            json={"query": "Is this a match?", "queryType": "candidate_match"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["reason"] == "context_validation_failure"

    def test_candidate_match_with_role(self, client):
        """Supplying a job role makes candidate_match valid."""
        response = client.post(
            "/api/hiredesk/query",
            json={"query": "Is this a match?", "queryType": "candidate_match", "jobRole": "SRE"},
        )
        assert response.status_code == 200

    def test_invalid_query_type(self, client):
        """Unknown query types fail schema validation."""
        response = client.post(
            "/api/hiredesk/query", json={"query": "Hi", "queryType": "salary"}
        )
        assert response.status_code == 422

    def test_hiredesk_status(self, client):
        """HireDesk status lists supported query types."""
        data = client.get("/api/hiredesk/status").json()["data"]
        assert data["status"] == "operational"
        assert "candidate_match" in data["supportedQueryTypes"]


class TestMetricsEndpoint:
    """Tests for Prometheus metrics endpoint."""

    def test_metrics_endpoint(self, client):
        """Test that metrics endpoint exists."""
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "http_requests" in response.text or "llm_" in response.text
