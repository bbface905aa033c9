"""Pydantic models for API requests and responses."""

from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

SessionType = Literal["coaching", "analysis", "general"]
JobAnalysisType = Literal["fit", "skills_gap", "career_path", "interview_prep"]
TextAnalysisType = Literal["sentiment", "summary", "keywords"]
QueryType = Literal["screening", "interview_questions", "job_posting", "candidate_match"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# JobPsych Chat Models
# =============================================================================


class ChatRequest(CamelModel):
    """Request body for the chat endpoint."""

    message: str = Field(..., min_length=1, max_length=2000, description="User message")
    context: str | None = Field(default=None, description="Additional context for the model")
    model: str | None = Field(default=None, description="Model identifier override")
    session_type: SessionType = Field(default="general", description="Chat session mode")


class ChatResponse(CamelModel):
    """Chat response, identical in shape for live and placeholder output."""

    response: str = Field(..., description="Assistant response")
    model: str = Field(..., description="Model identifier used")
    tokens: int | None = Field(default=None, ge=0, description="Estimated token count")
    session_type: str = Field(..., description="Echo of the requested session type")


class CoachingRequest(CamelModel):
    """Request body for a career coaching session."""

    query: str = Field(..., min_length=1, max_length=1000)
    session_type: Literal["goal_setting", "problem_solving", "motivation", "career_change"] | None = None
    user_context: str | None = Field(default=None, max_length=1000)


class CoachingResult(CamelModel):
    """Coaching response with the coaching flavour echoed back."""

    response: ChatResponse
    coaching_type: str


class CareerPathRequest(CamelModel):
    """Request body for career path recommendations."""

    current_role: str = Field(..., min_length=1, max_length=200)
    experience: str = Field(..., min_length=1, max_length=1000)
    interests: str = Field(..., min_length=1, max_length=1000)
    goals: str = Field(..., min_length=1, max_length=1000)


# =============================================================================
# Analysis Models
# =============================================================================


class JobAnalysisRequest(CamelModel):
    """Request body for job fit analysis."""

    job_description: str | None = Field(default=None, max_length=3000)
    user_profile: str | None = Field(default=None, max_length=2000)
    analysis_type: JobAnalysisType


class TextAnalysisRequest(CamelModel):
    """Request body for free text analysis."""

    text: str = Field(..., min_length=1, max_length=5000)
    analysis_type: TextAnalysisType


class InterviewPrepRequest(CamelModel):
    """Request body for interview preparation."""

    job_description: str = Field(..., min_length=1, max_length=3000)
    user_profile: str = Field(..., min_length=1, max_length=2000)
    interview_type: Literal["technical", "behavioral", "case_study", "general"] | None = None


class SkillGapRequest(CamelModel):
    """Request body for skill gap analysis."""

    target_role: str = Field(..., min_length=1, max_length=200)
    current_skills: str = Field(..., min_length=1, max_length=1000)
    desired_skills: str = Field(..., min_length=1, max_length=1000)


class AnalysisResult(CamelModel):
    """Structured analysis; `result` varies by analysis type."""

    type: str = Field(..., description="Requested analysis type")
    result: dict[str, Any] = Field(default_factory=dict)
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    insights: list[str] = Field(default_factory=list, max_length=3)
    recommendations: list[str] = Field(default_factory=list, max_length=3)


class InterviewPrepResult(CamelModel):
    """Interview preparation analysis with the interview type echoed back."""

    preparation: AnalysisResult
    interview_type: str


# =============================================================================
# HireDesk Models
# =============================================================================


class HireDeskQuery(CamelModel):
    """Recruiter query for the HireDesk assistant."""

    query: str = Field(..., min_length=1, max_length=2000)
    job_role: str | None = Field(default=None, max_length=200)
    candidate_info: str | None = Field(default=None, max_length=3000)
    query_type: QueryType
    context: str | None = Field(default=None, max_length=1000)


class HireDeskResponse(CamelModel):
    """HireDesk answer."""

    answer: str
    query_type: str
    suggestions: list[str] | None = None


class QueryContextValidation(CamelModel):
    """Outcome of the HireDesk cross-field check."""

    is_valid: bool
    message: str | None = None


class HireDeskStatus(CamelModel):
    """HireDesk service description."""

    service: str = "HireDesk AI Assistant"
    status: str = "operational"
    supported_query_types: list[str]
    version: str


# =============================================================================
# Status / Diagnostics Models
# =============================================================================


class ServiceStatus(CamelModel):
    """Model Gateway status snapshot."""

    status: Literal["connected", "not_configured"]
    models: list[str]
    provider: str = "Google Gemini"
    features: list[str] = Field(default_factory=list)
    last_check: datetime = Field(default_factory=_utcnow)


class ModelsInfo(CamelModel):
    """Supported models and the configured default."""

    models: list[str]
    default: str


class ApiKeyInfo(CamelModel):
    """What can safely be reported about the configured key."""

    exists: bool
    length: int


class Diagnostics(CamelModel):
    """Result of a provider connectivity diagnosis."""

    timestamp: datetime = Field(default_factory=_utcnow)
    environment: str
    api_key: ApiKeyInfo
    model: str
    suggestions: list[str] = Field(default_factory=list)


class HealthResponse(CamelModel):
    """Response for health check endpoints."""

    status: Literal["OK"] = "OK"
    timestamp: datetime = Field(default_factory=_utcnow)
    uptime: float = Field(..., description="Seconds since process start")
    environment: str
    version: str
    system: dict[str, str] | None = None
    services: dict[str, str] | None = None


# =============================================================================
# Envelopes
# =============================================================================


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope wrapping every API payload."""

    success: bool = True
    data: T
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorDetail(CamelModel):
    """Structured failure reason plus message."""

    reason: str
    message: str


class ErrorResponse(CamelModel):
    """Failure envelope."""

    success: bool = False
    error: ErrorDetail
