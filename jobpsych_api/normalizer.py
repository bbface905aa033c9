"""Shape raw model text into API results.

The insight and recommendation extractors are plain substring heuristics:
split on line breaks, keep lines containing any marker (case-sensitive), in
source order, first three only. No lines matching is a normal outcome.
"""

import math
from datetime import datetime, timezone

from jobpsych_api.models import AnalysisResult, ChatResponse

INSIGHT_MARKERS = ("insight", "important", "key")
RECOMMENDATION_MARKERS = ("recommend", "suggest", "should")
MAX_EXTRACTED_LINES = 3

# Fixed per analysis kind; not derived from the model output.
JOB_ANALYSIS_CONFIDENCE = 0.85
TEXT_ANALYSIS_CONFIDENCE = 0.8


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


def _extract_lines(raw_text: str, markers: tuple[str, ...]) -> list[str]:
    matches = [line for line in raw_text.split("\n") if any(m in line for m in markers)]
    return matches[:MAX_EXTRACTED_LINES]


def extract_insights(raw_text: str) -> list[str]:
    """First three lines mentioning an insight, something important, or a key point."""
    return _extract_lines(raw_text, INSIGHT_MARKERS)


def extract_recommendations(raw_text: str) -> list[str]:
    """First three lines that recommend, suggest, or say what someone should do."""
    return _extract_lines(raw_text, RECOMMENDATION_MARKERS)


def normalize_chat(raw_text: str, prompt: str, model: str, session_type: str) -> ChatResponse:
    """Wrap raw chat output with a token estimate over prompt plus reply."""
    return ChatResponse(
        response=raw_text,
        model=model,
        tokens=estimate_tokens(prompt + raw_text),
        session_type=session_type,
    )


def normalize_analysis(raw_text: str, kind: str, sub_kind: str) -> AnalysisResult:
    """Wrap raw analysis output and pull out insight/recommendation lines."""
    timestamp = datetime.now(timezone.utc).isoformat()

    if kind == "job_analysis":
        result = {"analysis": raw_text, "timestamp": timestamp}
        confidence = JOB_ANALYSIS_CONFIDENCE
    else:
        result = {"analysisType": sub_kind, "content": raw_text, "timestamp": timestamp}
        confidence = TEXT_ANALYSIS_CONFIDENCE

    return AnalysisResult(
        type=sub_kind,
        result=result,
        confidence=confidence,
        insights=extract_insights(raw_text),
        recommendations=extract_recommendations(raw_text),
    )
