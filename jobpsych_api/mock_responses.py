"""Placeholder results for when no Gemini key is configured.

Results carry the same fields as live output; only the content differs and
tells the operator to configure GEMINI_API_KEY.
"""

import random
from datetime import datetime, timezone
from typing import Any, get_args

from jobpsych_api.models import AnalysisResult, ChatRequest, ChatResponse, SessionType
from jobpsych_api.normalizer import estimate_tokens

MOCK_CONFIDENCE = 0.5

MOCK_CHAT_RESPONSE = (
    "I am a JobPsych AI assistant. Please configure GEMINI_API_KEY for full functionality."
)


def mock_chat(request: ChatRequest, default_model: str) -> ChatResponse:
    """Placeholder chat reply echoing the requested model and session type."""
    return ChatResponse(
        response=MOCK_CHAT_RESPONSE,
        model=request.model or default_model,
        tokens=estimate_tokens(request.message + MOCK_CHAT_RESPONSE),
        session_type=request.session_type,
    )


def mock_job_analysis(analysis_type: str) -> AnalysisResult:
    """Placeholder job analysis with a random score."""
    return AnalysisResult(
        type=analysis_type,
        result={
            "analysis": (
                f"Mock {analysis_type} analysis - Please configure GEMINI_API_KEY for real insights"
            ),
            "score": random.uniform(0, 100),
            "factors": ["Communication", "Problem Solving", "Adaptability"],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        confidence=MOCK_CONFIDENCE,
        insights=["This is a demo insight", "Configure API key for real analysis"],
        recommendations=["Set up Gemini API key", "Provide more detailed information"],
    )


def mock_text_analysis(text: str, analysis_type: str) -> AnalysisResult:
    """Placeholder text analysis quoting the start of the input."""
    return AnalysisResult(
        type=analysis_type,
        result={
            "analysisType": analysis_type,
            "content": f"Mock {analysis_type} analysis of: {text[:50]}...",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        confidence=MOCK_CONFIDENCE,
        insights=["Demo mode active"],
        recommendations=["Configure GEMINI_API_KEY for full functionality"],
    )


def mock_response(
    kind: str, sub_kind: str, original_input: Any, default_model: str
) -> ChatResponse | AnalysisResult:
    """Dispatch to the placeholder for a request kind. Never raises.

    ``original_input`` is a ChatRequest for ``chat`` and the analysed text for
    ``text_analysis``; it is ignored for ``job_analysis``. ``default_model`` is
    reported when a chat request names no model.
    """
    if kind == "chat":
        if not isinstance(original_input, ChatRequest):
            session_type = sub_kind if sub_kind in get_args(SessionType) else "general"
            original_input = ChatRequest(
                message=str(original_input or "-"), session_type=session_type
            )
        return mock_chat(original_input, default_model)
    if kind == "text_analysis":
        return mock_text_analysis(str(original_input or ""), sub_kind)
    return mock_job_analysis(sub_kind)
