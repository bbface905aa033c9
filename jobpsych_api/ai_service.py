"""Model gateway: live Gemini calls or placeholder output.

One ``AIService`` is built at startup and handed to every request handler.
Its state (settings, Gemini client) only changes through ``initialize()``,
which swaps the client in one assignment, so request handlers read it
without locking.

Entry points never raise because a key is missing: they return placeholder
output instead. Once a key is configured, a failed provider call raises a
classified ``GeminiError`` (chat) or ``AnalysisError`` (analysis) and is
never replaced by placeholder output.
"""

import structlog

from jobpsych_api.config import Settings, get_settings
from jobpsych_api.gemini_client import (
    GeminiClient,
    GeminiError,
    LLMResponse,
    classify_provider_error,
)
from jobpsych_api.mock_responses import mock_response
from jobpsych_api.models import (
    AnalysisResult,
    ApiKeyInfo,
    ChatRequest,
    ChatResponse,
    Diagnostics,
    JobAnalysisRequest,
    ServiceStatus,
)
from jobpsych_api.normalizer import normalize_analysis, normalize_chat
from jobpsych_api.observability import log_llm_request, log_llm_response
from jobpsych_api.prompts import build_user_message, select_system_prompt

logger = structlog.get_logger()

SUPPORTED_MODELS = (
    "gemini-1.5-flash",
    "gemini-1.5-pro",
    "gemini-1.0-pro",
    "gemini-2.5-flash",
)

FEATURES = (
    "JobPsych Coaching",
    "Career Analysis",
    "Psychological Insights",
)

# Keys shorter than this are almost certainly truncated copies.
MIN_EXPECTED_KEY_LENGTH = 30


class AnalysisError(Exception):
    """Raised when a live analysis call fails for any provider reason."""

    reason = "analysis_failed"


class AIService:
    """Owns the live/placeholder decision and the single provider call per request."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._client: GeminiClient | None = None

    @property
    def has_key(self) -> bool:
        """True when a live Gemini client is ready."""
        return self._client is not None

    @property
    def default_model(self) -> str:
        return self._settings.ai_model

    async def initialize(self, settings: Settings | None = None) -> None:
        """Read configuration and (re)build the Gemini client.

        A missing or placeholder key, ``MOCK_GEMINI=true``, or a client
        construction failure all leave the service on the placeholder path.
        None of them raise.
        """
        if settings is not None:
            self._settings = settings
        cfg = self._settings

        logger.info(
            "Initializing AI service",
            has_api_key=bool(cfg.gemini_api_key),
            api_key_length=len(cfg.gemini_api_key),
            model=cfg.ai_model,
        )

        client: GeminiClient | None = None
        if cfg.mock_gemini:
            logger.info("MOCK_GEMINI=true: AI features will return placeholder output")
        elif not cfg.has_gemini_key:
            logger.warning(
                "GEMINI_API_KEY not configured properly. AI features will be limited.",
                env_var_set=bool(cfg.gemini_api_key),
            )
        else:
            try:
                client = GeminiClient(
                    api_key=cfg.gemini_api_key,
                    base_url=cfg.gemini_base_url,
                    model=cfg.ai_model,
                    max_tokens=cfg.llm_max_tokens,
                    temperature=cfg.llm_temperature,
                )
                await client.connect()
                logger.info("Google Gemini AI service initialized successfully")
            except Exception as e:
                logger.error("Failed to initialize Google Gemini AI service", error=str(e))
                client = None

        previous, self._client = self._client, client
        if previous is not None:
            await previous.close()

    async def close(self) -> None:
        """Close the Gemini client, returning to the placeholder path."""
        client, self._client = self._client, None
        if client is not None:
            await client.close()

    async def _generate(
        self,
        client: GeminiClient,
        kind: str,
        sub_kind: str,
        system_prompt: str,
        user_message: str,
        model: str,
    ) -> LLMResponse:
        request_log = log_llm_request(
            model=model,
            kind=kind,
            sub_kind=sub_kind,
            system_prompt=system_prompt,
            user_message=user_message,
        )
        try:
            response = await client.generate(system_prompt, user_message, model=model)
        except GeminiError as e:
            log_llm_response(request_log=request_log, error=f"{e.reason}: {e}")
            raise
        except Exception as e:
            error = classify_provider_error(None, str(e))
            log_llm_response(request_log=request_log, error=f"{error.reason}: {e}")
            raise error from e

        log_llm_response(
            request_log=request_log,
            tokens_total=response.tokens_used,
            finish_reason=response.finish_reason or "stop",
        )
        return response

    async def chat(self, request: ChatRequest, system_prompt: str | None = None) -> ChatResponse:
        """Answer a chat message.

        Args:
            request: Validated chat request.
            system_prompt: Overrides the session type prompt (used by HireDesk).

        Raises:
            GeminiError: A live call failed; the subclass names the cause.
        """
        logger.info(
            "Processing JobPsych chat request",
            model=request.model,
            session_type=request.session_type,
        )

        client = self._client
        if client is None:
            return mock_response("chat", request.session_type, request, self.default_model)

        system = system_prompt or select_system_prompt("chat", request.session_type)
        user_message = build_user_message(
            "chat",
            {
                "message": request.message,
                "context": request.context,
                "session_type": request.session_type,
            },
        )
        model = request.model or self.default_model

        response = await self._generate(
            client, "chat", request.session_type, system, user_message, model
        )
        return normalize_chat(
            response.content,
            prompt=f"{system}\n\n{user_message}",
            model=model,
            session_type=request.session_type,
        )

    async def analyze_job_fit(self, request: JobAnalysisRequest) -> AnalysisResult:
        """Run a job analysis (fit, skills gap, career path, interview prep)."""
        logger.info("Analyzing job fit with JobPsych AI", analysis_type=request.analysis_type)

        client = self._client
        if client is None:
            return mock_response(
                "job_analysis", request.analysis_type, request, self.default_model
            )

        system = select_system_prompt("job_analysis", request.analysis_type)
        user_message = build_user_message(
            "job_analysis",
            {
                "job_description": request.job_description,
                "user_profile": request.user_profile,
                "analysis_type": request.analysis_type,
            },
        )

        try:
            response = await self._generate(
                client,
                "job_analysis",
                request.analysis_type,
                system,
                user_message,
                self.default_model,
            )
        except GeminiError as e:
            logger.error(
                "Job analysis failed", analysis_type=request.analysis_type, reason=e.reason
            )
            raise AnalysisError("Failed to analyze job fit") from e

        return normalize_analysis(response.content, "job_analysis", request.analysis_type)

    async def analyze_text(self, text: str, analysis_type: str) -> AnalysisResult:
        """Run a text analysis (sentiment, summary, keywords)."""
        logger.info("Analyzing text with JobPsych context", type=analysis_type, length=len(text))

        client = self._client
        if client is None:
            return mock_response("text_analysis", analysis_type, text, self.default_model)

        system = select_system_prompt("text_analysis", analysis_type)
        user_message = build_user_message(
            "text_analysis", {"text": text, "analysis_type": analysis_type}
        )

        try:
            response = await self._generate(
                client, "text_analysis", analysis_type, system, user_message, self.default_model
            )
        except GeminiError as e:
            logger.error("Text analysis failed", type=analysis_type, reason=e.reason)
            raise AnalysisError("Failed to analyze text") from e

        return normalize_analysis(response.content, "text_analysis", analysis_type)

    def get_available_models(self) -> list[str]:
        """Fixed list of supported Gemini models."""
        return list(SUPPORTED_MODELS)

    def get_status(self) -> ServiceStatus:
        """Current configuration state. Does not touch the network."""
        return ServiceStatus(
            status="connected" if self.has_key else "not_configured",
            models=self.get_available_models(),
            features=list(FEATURES),
        )

    async def diagnose(self) -> Diagnostics:
        """Check the key and, when a client exists, probe the API with one request."""
        cfg = self._settings
        key = cfg.gemini_api_key
        suggestions: list[str] = []

        if not key:
            suggestions.append("❌ GEMINI_API_KEY environment variable is not set")
        elif len(key) < MIN_EXPECTED_KEY_LENGTH:
            suggestions.append("⚠️ GEMINI_API_KEY seems too short, please verify")
        else:
            suggestions.append("✅ GEMINI_API_KEY is set and has reasonable length")

        client = self._client
        if client is None:
            suggestions.append("❌ Cannot test API - no API key provided")
        else:
            try:
                response = await client.generate("Reply with a short greeting.", "Hello")
                suggestions.append("✅ API connection successful")
                suggestions.append(f"✅ Test response: {response.content[:50]}...")
            except GeminiError as e:
                logger.error("API diagnosis failed", reason=e.reason, status=e.status_code)
                suggestions.append(_diagnosis_hint(e))

        return Diagnostics(
            environment=cfg.environment,
            api_key=ApiKeyInfo(exists=bool(key), length=len(key)),
            model=cfg.ai_model,
            suggestions=suggestions,
        )


def _diagnosis_hint(error: GeminiError) -> str:
    if error.status_code == 403:
        return "❌ API Key doesn't have permission - check your Google AI Studio settings"
    return f"❌ API test failed: {error}"
