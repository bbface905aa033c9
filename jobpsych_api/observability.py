"""Observability utilities: logging setup, trace IDs, LLM metrics, and payload logging.

This module provides:
- structlog configuration bound to the stdlib log level
- Trace ID generation and propagation via context vars
- Prometheus metrics for LLM calls (tokens, latency, errors)
- Structured logging helpers for LLM request/response correlation
"""

import logging
import secrets
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass

import structlog
from prometheus_client import Counter, Gauge, Histogram

logger = structlog.get_logger()

PROMPT_PREVIEW_CHARS = 100

# =============================================================================
# Logging Setup
# =============================================================================


def configure_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# =============================================================================
# Trace ID Context
# =============================================================================

# Context variable for trace ID propagation across async calls
trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")


def generate_trace_id() -> str:
    """Generate cryptographically secure trace ID for request tracking."""
    return secrets.token_hex(16)


def get_trace_id() -> str:
    """Get current trace ID from context, or empty string if not set."""
    return trace_id_ctx.get()


def set_trace_id(trace_id: str) -> None:
    """Set trace ID in context."""
    trace_id_ctx.set(trace_id)


# =============================================================================
# Prometheus Metrics for LLM
# =============================================================================

llm_requests_total = Counter(
    "llm_requests_total",
    "Total LLM API requests",
    ["model", "kind", "status"],
)

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens used in LLM calls",
    ["model", "kind"],
)

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM response latency in seconds",
    ["model", "kind"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

llm_active_requests = Gauge(
    "llm_active_requests",
    "Currently active LLM requests",
    ["model"],
)


# =============================================================================
# LLM Payload Logging
# =============================================================================


def preview(text: str, limit: int = PROMPT_PREVIEW_CHARS) -> str:
    """Truncate text for logs."""
    return text[:limit] + ("..." if len(text) > limit else "")


@dataclass
class LLMRequestLog:
    """Structured log data for LLM requests."""

    trace_id: str
    model: str
    kind: str
    sub_kind: str
    system_prompt_chars: int
    user_message_chars: int
    prompt_preview: str
    timestamp: float = 0.0

    def __post_init__(self) -> None:
        if self.timestamp == 0.0:
            self.timestamp = time.time()


def log_llm_request(
    model: str,
    kind: str,
    sub_kind: str,
    system_prompt: str,
    user_message: str,
) -> LLMRequestLog:
    """Log an LLM request with enough context to diagnose it later.

    Returns LLMRequestLog for correlation with response.
    """
    log_data = LLMRequestLog(
        trace_id=get_trace_id(),
        model=model,
        kind=kind,
        sub_kind=sub_kind,
        system_prompt_chars=len(system_prompt),
        user_message_chars=len(user_message),
        prompt_preview=preview(user_message),
    )

    logger.info(
        "llm_request",
        trace_id=log_data.trace_id,
        model=log_data.model,
        kind=log_data.kind,
        sub_kind=log_data.sub_kind,
        system_prompt_chars=log_data.system_prompt_chars,
        user_message_chars=log_data.user_message_chars,
        prompt_preview=log_data.prompt_preview,
    )

    llm_active_requests.labels(model=model).inc()
    return log_data


def log_llm_response(
    request_log: LLMRequestLog,
    tokens_total: int = 0,
    finish_reason: str = "unknown",
    error: str | None = None,
) -> None:
    """Log an LLM response with metrics and correlation."""
    latency_ms = int((time.time() - request_log.timestamp) * 1000)

    if error:
        logger.error(
            "llm_response",
            trace_id=request_log.trace_id,
            model=request_log.model,
            kind=request_log.kind,
            sub_kind=request_log.sub_kind,
            prompt_preview=request_log.prompt_preview,
            latency_ms=latency_ms,
            error=error,
        )
        status = "error"
    else:
        logger.info(
            "llm_response",
            trace_id=request_log.trace_id,
            model=request_log.model,
            kind=request_log.kind,
            sub_kind=request_log.sub_kind,
            tokens_total=tokens_total,
            latency_ms=latency_ms,
            finish_reason=finish_reason,
        )
        status = "success"

    llm_active_requests.labels(model=request_log.model).dec()
    llm_requests_total.labels(
        model=request_log.model,
        kind=request_log.kind,
        status=status,
    ).inc()

    if tokens_total > 0:
        llm_tokens_total.labels(model=request_log.model, kind=request_log.kind).inc(tokens_total)

    llm_latency_seconds.labels(
        model=request_log.model,
        kind=request_log.kind,
    ).observe(latency_ms / 1000.0)
