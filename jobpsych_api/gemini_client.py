"""Google Gemini client over the Generative Language REST API."""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from jobpsych_api.config import get_settings

logger = structlog.get_logger()


class GeminiError(Exception):
    """Base exception for Gemini provider failures."""

    reason = "unknown_provider_error"
    status_code: int | None = None


class GeminiUnavailableError(GeminiError):
    """Raised when the provider reports 503."""

    reason = "provider_unavailable"
    status_code = 503


class GeminiAuthError(GeminiError):
    """Raised when the API key is rejected."""

    reason = "invalid_credentials"
    status_code = 401


class GeminiRateLimitError(GeminiError):
    """Raised when rate limit is exceeded."""

    reason = "rate_limited"
    status_code = 429


class GeminiBadRequestError(GeminiError):
    """Raised when the provider rejects the request body."""

    reason = "invalid_upstream_request"
    status_code = 400


class GeminiUnknownError(GeminiError):
    """Raised for any other status, or when there is no status at all."""


def classify_provider_error(status: int | None, detail: str | None = None) -> GeminiError:
    """Map a provider status code to a typed failure with a user facing message.

    Args:
        status: HTTP status from the provider, or None for transport failures.
        detail: Provider supplied error message, if any.

    Returns:
        The exception to raise; the caller decides whether to chain it.
    """
    if status == 503:
        return GeminiUnavailableError(
            "Google Gemini service is temporarily unavailable. Please try again later."
        )
    if status == 401:
        return GeminiAuthError("Invalid API key. Please check your GEMINI_API_KEY configuration.")
    if status == 429:
        return GeminiRateLimitError("Rate limit exceeded. Please try again later.")
    if status == 400:
        return GeminiBadRequestError("Invalid request. Please check your input and try again.")
    error = GeminiUnknownError(
        f"Failed to process request with Gemini: {detail or 'Unknown error'}"
    )
    error.status_code = status
    return error


@dataclass
class LLMResponse:
    """Non-streaming response from the model."""

    content: str
    tokens_used: int
    finish_reason: str | None = None


class GeminiClient:
    """Async client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ):
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key. Defaults to config value.
            base_url: API base URL. Defaults to config value.
            model: Default model ID. Defaults to config value.
            max_tokens: Maximum output tokens. Defaults to config value.
            temperature: Sampling temperature. Defaults to config value.
        """
        settings = get_settings()
        self._api_key = api_key or settings.gemini_api_key
        self._base_url = base_url or settings.gemini_base_url
        self._model = model or settings.ai_model
        self._max_tokens = max_tokens or settings.llm_max_tokens
        self._temperature = temperature if temperature is not None else settings.llm_temperature
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._model

    async def __aenter__(self) -> "GeminiClient":
        """Enter async context."""
        await self.connect()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Exit async context."""
        await self.close()

    async def connect(self) -> None:
        """Create the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "x-goog-api-key": self._api_key,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(60.0, connect=10.0),
        )
        logger.info("Gemini client connected", model=self._model)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Gemini client closed")

    def _build_payload(self, system_prompt: str, user_message: str) -> dict[str, Any]:
        """Build the generateContent request body."""
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_message}]}],
            "generationConfig": {
                "maxOutputTokens": self._max_tokens,
                "temperature": self._temperature,
            },
        }

    async def generate(
        self,
        system_prompt: str,
        user_message: str,
        model: str | None = None,
    ) -> LLMResponse:
        """Issue a single generateContent call.

        Args:
            system_prompt: System instructions for the model.
            user_message: The assembled user message.
            model: Model ID override for this call.

        Returns:
            Model text with token usage.

        Raises:
            GeminiError: Classified by provider status; never retried. Also
                raised when the client is closed or the body cannot be read.
        """
        if self._client is None:
            raise classify_provider_error(None, "Gemini client is not connected")

        model_id = model or self._model
        payload = self._build_payload(system_prompt, user_message)

        try:
            response = await self._client.post(f"/models/{model_id}:generateContent", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._classify_http_error(e) from e
        except httpx.RequestError as e:
            logger.error("Gemini transport error", error=str(e), model=model_id)
            raise classify_provider_error(None, str(e)) from e

        try:
            data = response.json()
            candidate = (data.get("candidates") or [{}])[0]
            parts = candidate.get("content", {}).get("parts", [])
            content = "".join(part.get("text", "") for part in parts)
            tokens_used = data.get("usageMetadata", {}).get("totalTokenCount", 0)
            finish_reason = candidate.get("finishReason")
        except (ValueError, KeyError, AttributeError, IndexError, TypeError) as e:
            logger.error("Malformed Gemini response", error=str(e), model=model_id)
            raise classify_provider_error(
                response.status_code, f"Malformed response body: {e}"
            ) from e

        logger.info(
            "LLM response received",
            model=model_id,
            tokens=tokens_used,
            finish_reason=finish_reason,
        )

        return LLMResponse(
            content=content,
            tokens_used=tokens_used,
            finish_reason=finish_reason,
        )

    def _classify_http_error(self, error: httpx.HTTPStatusError) -> GeminiError:
        """Log an HTTP error from the Gemini API and return its classified form."""
        status = error.response.status_code
        try:
            detail = error.response.json().get("error", {}).get("message", str(error))
        except Exception:
            detail = str(error)

        logger.error("Gemini API error", status=status, detail=detail)

        return classify_provider_error(status, detail)
