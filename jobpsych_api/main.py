"""FastAPI application entrypoint for the JobPsych / HireDesk AI API."""

import platform
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from jobpsych_api import __version__, hiredesk
from jobpsych_api.ai_service import AIService, AnalysisError
from jobpsych_api.config import get_settings
from jobpsych_api.gemini_client import GeminiError
from jobpsych_api.hiredesk import QueryContextError
from jobpsych_api.models import (
    AnalysisResult,
    ApiResponse,
    CareerPathRequest,
    ChatRequest,
    ChatResponse,
    CoachingRequest,
    CoachingResult,
    Diagnostics,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    HireDeskQuery,
    HireDeskResponse,
    HireDeskStatus,
    InterviewPrepRequest,
    InterviewPrepResult,
    JobAnalysisRequest,
    ModelsInfo,
    ServiceStatus,
    SkillGapRequest,
    TextAnalysisRequest,
)
from jobpsych_api.observability import configure_logging, generate_trace_id, set_trace_id
from jobpsych_api.prompts import build_career_path_message, build_coaching_context

settings = get_settings()
configure_logging(settings.log_level, json_logs=not settings.is_development)

logger = structlog.get_logger()

START_TIME = time.monotonic()

# Rate limiter
limiter = Limiter(key_func=get_remote_address)
RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"

# HTTP status per provider failure; anything not listed is a bad gateway.
ERROR_STATUS = {
    "provider_unavailable": 503,
    "rate_limited": 429,
    "context_validation_failure": 400,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting JobPsych AI API", version=__version__)

    service = AIService(settings)
    await service.initialize()
    app.state.ai_service = service

    yield

    logger.info("Shutting down JobPsych AI API")
    await service.close()


# Create FastAPI app
app = FastAPI(
    title="JobPsych AI API",
    description="Career psychology coaching and recruiter assistance backed by Google Gemini",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def trace_id_middleware(request: Request, call_next):
    """Add trace ID to every request for log correlation."""
    trace_id = request.headers.get("X-Trace-ID", generate_trace_id())
    set_trace_id(trace_id)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)

    response = await call_next(request)

    response.headers["X-Trace-ID"] = trace_id
    return response


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

Instrumentator().instrument(app).expose(app)


def get_ai_service(request: Request) -> AIService:
    """Model gateway created during startup."""
    return request.app.state.ai_service


# =============================================================================
# Error Handlers
# =============================================================================


def _error_response(status_code: int, reason: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(reason=reason, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


@app.exception_handler(GeminiError)
async def gemini_error_handler(request: Request, exc: GeminiError) -> JSONResponse:
    logger.error("Gemini request failed", path=request.url.path, reason=exc.reason, error=str(exc))
    return _error_response(ERROR_STATUS.get(exc.reason, 502), exc.reason, str(exc))


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    logger.error("Analysis request failed", path=request.url.path, error=str(exc))
    return _error_response(502, exc.reason, str(exc))


@app.exception_handler(QueryContextError)
async def query_context_error_handler(request: Request, exc: QueryContextError) -> JSONResponse:
    logger.warning("HireDesk query rejected", path=request.url.path, error=str(exc))
    return _error_response(400, exc.reason, str(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return _error_response(500, "internal_error", "Internal server error")


# =============================================================================
# Home / Health Endpoints
# =============================================================================


@app.get("/")
async def home() -> dict:
    """Service metadata."""
    return {
        "success": True,
        "data": {
            "name": "jobpsych-ai-assistant",
            "description": (
                "JobPsych AI Assistant - Career psychology and professional development guidance"
            ),
            "version": __version__,
            "environment": settings.environment,
            "apiPrefix": settings.api_prefix,
            "ai": {
                "model": settings.ai_model,
                "apiKeyConfigured": settings.has_gemini_key,
            },
            "rateLimit": {"perMinute": settings.rate_limit_per_minute},
            "endpoints": {
                "health": "/health",
                "ai": f"{settings.api_prefix}/ai",
                "hiredesk": f"{settings.api_prefix}/hiredesk",
            },
        },
    }


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check."""
    return HealthResponse(
        uptime=round(time.monotonic() - START_TIME, 3),
        environment=settings.environment,
        version=__version__,
    )


@app.get("/health/detailed", response_model=HealthResponse)
async def detailed_health_check(
    service: AIService = Depends(get_ai_service),
) -> HealthResponse:
    """Liveness plus platform and AI configuration details."""
    return HealthResponse(
        uptime=round(time.monotonic() - START_TIME, 3),
        environment=settings.environment,
        version=__version__,
        system={
            "platform": platform.system().lower(),
            "pythonVersion": platform.python_version(),
            "arch": platform.machine(),
        },
        services={"ai": "connected" if service.has_key else "not_configured"},
    )


# =============================================================================
# JobPsych AI Endpoints
# =============================================================================

ai_router = APIRouter(prefix=f"{settings.api_prefix}/ai")


@ai_router.post("/chat", response_model=ApiResponse[ChatResponse])
@limiter.limit(RATE_LIMIT)
async def chat(
    request: Request,
    chat_request: ChatRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[ChatResponse]:
    """
    Chat with JobPsych AI.

    - **message**: The user's message
    - **context**: Optional extra context
    - **model**: Optional model override
    - **sessionType**: coaching, analysis or general (default)
    """
    response = await service.chat(chat_request)
    return ApiResponse(data=response)


@ai_router.post("/coaching", response_model=ApiResponse[CoachingResult])
@limiter.limit(RATE_LIMIT)
async def coaching(
    request: Request,
    coaching_request: CoachingRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[CoachingResult]:
    """Career coaching session."""
    coaching_type = coaching_request.session_type or "general"
    response = await service.chat(
        ChatRequest(
            message=coaching_request.query,
            context=build_coaching_context(coaching_type, coaching_request.user_context),
            session_type="coaching",
        )
    )
    return ApiResponse(data=CoachingResult(response=response, coaching_type=coaching_type))


@ai_router.post("/analyze-job", response_model=ApiResponse[AnalysisResult])
@limiter.limit(RATE_LIMIT)
async def analyze_job(
    request: Request,
    analysis_request: JobAnalysisRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[AnalysisResult]:
    """Job fit, skills gap, career path or interview prep analysis."""
    result = await service.analyze_job_fit(analysis_request)
    return ApiResponse(data=result)


@ai_router.post("/analyze", response_model=ApiResponse[AnalysisResult])
@limiter.limit(RATE_LIMIT)
async def analyze_text(
    request: Request,
    analysis_request: TextAnalysisRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[AnalysisResult]:
    """Sentiment, summary or keyword analysis of free text."""
    result = await service.analyze_text(analysis_request.text, analysis_request.analysis_type)
    return ApiResponse(data=result)


@ai_router.get("/models", response_model=ApiResponse[ModelsInfo])
async def get_models(service: AIService = Depends(get_ai_service)) -> ApiResponse[ModelsInfo]:
    """Supported models and the configured default."""
    return ApiResponse(
        data=ModelsInfo(models=service.get_available_models(), default=service.default_model)
    )


@ai_router.get("/status", response_model=ApiResponse[ServiceStatus])
async def get_status(service: AIService = Depends(get_ai_service)) -> ApiResponse[ServiceStatus]:
    """AI service configuration state."""
    return ApiResponse(data=service.get_status())


@ai_router.get("/diagnose", response_model=ApiResponse[Diagnostics])
async def diagnose(service: AIService = Depends(get_ai_service)) -> ApiResponse[Diagnostics]:
    """Check the Gemini key and connectivity."""
    return ApiResponse(data=await service.diagnose())


@ai_router.post("/career-path", response_model=ApiResponse[ChatResponse])
@limiter.limit(RATE_LIMIT)
async def career_path(
    request: Request,
    career_request: CareerPathRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[ChatResponse]:
    """Career path recommendations from a short profile."""
    message = build_career_path_message(
        career_request.current_role,
        career_request.experience,
        career_request.interests,
        career_request.goals,
    )
    # The assembled profile can exceed the public chat length limit.
    response = await service.chat(
        ChatRequest.model_construct(
            message=message, context=None, model=None, session_type="analysis"
        )
    )
    return ApiResponse(data=response)


@ai_router.post("/interview-prep", response_model=ApiResponse[InterviewPrepResult])
@limiter.limit(RATE_LIMIT)
async def interview_prep(
    request: Request,
    prep_request: InterviewPrepRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[InterviewPrepResult]:
    """Interview preparation guidance."""
    result = await service.analyze_job_fit(
        JobAnalysisRequest(
            job_description=prep_request.job_description,
            user_profile=prep_request.user_profile,
            analysis_type="interview_prep",
        )
    )
    return ApiResponse(
        data=InterviewPrepResult(
            preparation=result,
            interview_type=prep_request.interview_type or "general",
        )
    )


@ai_router.post("/skill-gap", response_model=ApiResponse[AnalysisResult])
@limiter.limit(RATE_LIMIT)
async def skill_gap(
    request: Request,
    gap_request: SkillGapRequest,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[AnalysisResult]:
    """Skill gap analysis between current and desired skills."""
    result = await service.analyze_job_fit(
        JobAnalysisRequest(
            job_description=(
                f"Target Role: {gap_request.target_role}\n"
                f"Required Skills: {gap_request.desired_skills}"
            ),
            user_profile=f"Current Skills: {gap_request.current_skills}",
            analysis_type="skills_gap",
        )
    )
    return ApiResponse(data=result)


# =============================================================================
# HireDesk Endpoints
# =============================================================================

hiredesk_router = APIRouter(prefix=f"{settings.api_prefix}/hiredesk")


@hiredesk_router.post("/query", response_model=ApiResponse[HireDeskResponse])
@limiter.limit(RATE_LIMIT)
async def hiredesk_query(
    request: Request,
    query: HireDeskQuery,
    service: AIService = Depends(get_ai_service),
) -> ApiResponse[HireDeskResponse]:
    """
    Recruiter assistant query.

    - **query**: The recruiter's question
    - **jobRole** / **candidateInfo** / **context**: Optional supporting detail
    - **queryType**: screening, interview_questions, job_posting or candidate_match
    """
    response = await hiredesk.process_query(service, query)
    return ApiResponse(data=response)


@hiredesk_router.get("/status", response_model=ApiResponse[HireDeskStatus])
async def hiredesk_status() -> ApiResponse[HireDeskStatus]:
    """HireDesk service description."""
    return ApiResponse(data=hiredesk.get_status())


app.include_router(ai_router)
app.include_router(hiredesk_router)


# =============================================================================
# Entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "jobpsych_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
