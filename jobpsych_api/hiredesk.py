"""HireDesk: recruiter queries answered through the model gateway."""

import structlog

from jobpsych_api import __version__
from jobpsych_api.ai_service import AIService
from jobpsych_api.models import (
    ChatRequest,
    HireDeskQuery,
    HireDeskResponse,
    HireDeskStatus,
    QueryContextValidation,
)
from jobpsych_api.normalizer import extract_recommendations
from jobpsych_api.prompts import build_user_message, select_system_prompt

logger = structlog.get_logger()

SUPPORTED_QUERY_TYPES = ("screening", "interview_questions", "job_posting", "candidate_match")

# Query types that still run without a job role, just with less to go on.
ROLE_RECOMMENDED_QUERY_TYPES = ("interview_questions", "job_posting")


class QueryContextError(Exception):
    """Raised when a query lacks the context its type requires."""

    reason = "context_validation_failure"


def validate_query_context(query: HireDeskQuery) -> QueryContextValidation:
    """Check the cross-field rules the request schema cannot express.

    ``candidate_match`` needs a job role or candidate information. Interview
    question and job posting queries without a job role pass, but are logged.
    """
    if query.query_type == "candidate_match" and not query.job_role and not query.candidate_info:
        return QueryContextValidation(
            is_valid=False,
            message="Candidate matching requires either job role or candidate information",
        )

    if query.query_type in ROLE_RECOMMENDED_QUERY_TYPES and not query.job_role:
        logger.warning("Job role not provided for query type", query_type=query.query_type)

    return QueryContextValidation(is_valid=True)


async def process_query(service: AIService, query: HireDeskQuery) -> HireDeskResponse:
    """Validate and answer a recruiter query.

    Raises:
        QueryContextError: The cross-field check failed.
        GeminiError: The live model call failed.
    """
    logger.info(
        "Processing HireDesk query",
        query_type=query.query_type,
        has_job_role=bool(query.job_role),
        has_candidate_info=bool(query.candidate_info),
    )

    validation = validate_query_context(query)
    if not validation.is_valid:
        raise QueryContextError(validation.message or "Invalid query context")

    message = build_user_message(
        "recruiter_query",
        {
            "query": query.query,
            "job_role": query.job_role,
            "candidate_info": query.candidate_info,
            "context": query.context,
            "query_type": query.query_type,
        },
    )
    # The assembled message can exceed the public chat length limit.
    chat_request = ChatRequest.model_construct(
        message=message, context=None, model=None, session_type="analysis"
    )
    response = await service.chat(
        chat_request,
        system_prompt=select_system_prompt("recruiter_query", query.query_type),
    )

    return HireDeskResponse(
        answer=response.response,
        query_type=query.query_type,
        suggestions=extract_recommendations(response.response) or None,
    )


def get_status() -> HireDeskStatus:
    """Describe the HireDesk service."""
    return HireDeskStatus(
        supported_query_types=list(SUPPORTED_QUERY_TYPES),
        version=__version__,
    )
