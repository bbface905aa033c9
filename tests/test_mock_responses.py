"""Tests for placeholder responses."""

from jobpsych_api.mock_responses import (
    MOCK_CONFIDENCE,
    mock_chat,
    mock_job_analysis,
    mock_response,
    mock_text_analysis,
)
from jobpsych_api.models import AnalysisResult, ChatRequest, ChatResponse
from jobpsych_api.normalizer import normalize_analysis, normalize_chat


class TestMockChat:
    """Tests for mock_chat()."""

    def test_mentions_configuration(self) -> None:
        """The placeholder tells the operator to configure the key."""
        response = mock_chat(ChatRequest(message="Hello"), "gemini-2.5-flash")
        assert "JobPsych AI assistant" in response.response
        assert "GEMINI_API_KEY" in response.response

    def test_model_defaults(self) -> None:
        """Model is the requested one, else the default."""
        assert mock_chat(ChatRequest(message="Hi"), "gemini-2.5-flash").model == "gemini-2.5-flash"
        assert mock_chat(ChatRequest(message="Hi", model="gemini-1.5-pro"), "x").model == "gemini-1.5-pro"

    def test_echoes_session_type(self) -> None:
        """Session type is echoed back."""
        response = mock_chat(ChatRequest(message="Hi", session_type="coaching"), "m")
        assert response.session_type == "coaching"

    def test_same_fields_as_live(self) -> None:
        """Placeholder and live chat responses share their field set."""
        mock = mock_chat(ChatRequest(message="Hi"), "m")
        live = normalize_chat("Hello!", prompt="p", model="m", session_type="general")
        assert mock.model_fields_set == live.model_fields_set
        assert mock.tokens is not None


class TestMockAnalyses:
    """Tests for the analysis placeholders."""

    def test_job_analysis(self) -> None:
        """Job analysis placeholder has fixed confidence and a score."""
        result = mock_job_analysis("fit")
        assert result.type == "fit"
        assert result.confidence == MOCK_CONFIDENCE
        assert 0 <= result.result["score"] <= 100
        assert "GEMINI_API_KEY" in result.result["analysis"]
        assert len(result.insights) <= 3
        assert len(result.recommendations) <= 3

    def test_text_analysis_quotes_input(self) -> None:
        """Text analysis placeholder quotes the first 50 characters."""
        text = "x" * 80
        result = mock_text_analysis(text, "summary")
        assert result.type == "summary"
        assert result.confidence == MOCK_CONFIDENCE
        assert result.result["content"] == f"Mock summary analysis of: {'x' * 50}..."

    def test_same_fields_as_live(self) -> None:
        """Placeholder and live analysis results share their field set."""
        live = normalize_analysis("text", "text_analysis", "keywords")
        assert mock_text_analysis("text", "keywords").model_fields_set == live.model_fields_set
        assert mock_job_analysis("fit").model_fields_set == live.model_fields_set


class TestMockDispatch:
    """Tests for mock_response()."""

    def test_chat(self) -> None:
        """Chat kind yields a ChatResponse."""
        response = mock_response("chat", "general", ChatRequest(message="Hi"), "gemini-2.5-flash")
        assert isinstance(response, ChatResponse)
        assert response.model == "gemini-2.5-flash"

    def test_chat_from_plain_text(self) -> None:
        """Chat kind accepts a bare message and an unknown session type."""
        response = mock_response("chat", "bogus", "Hello", "gemini-2.5-flash")
        assert isinstance(response, ChatResponse)
        assert response.model == "gemini-2.5-flash"
        assert response.session_type == "general"

    def test_text_analysis(self) -> None:
        """Text kind yields a text analysis."""
        result = mock_response("text_analysis", "sentiment", "I love this!", "m")
        assert isinstance(result, AnalysisResult)
        assert result.type == "sentiment"

    def test_job_analysis(self) -> None:
        """Any other kind yields a job analysis."""
        result = mock_response("job_analysis", "career_path", None, "m")
        assert isinstance(result, AnalysisResult)
        assert result.type == "career_path"
