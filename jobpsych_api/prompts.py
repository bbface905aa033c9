"""System prompt selection and user message assembly.

Every request is classified by a two level key: the ``kind`` of call
(``chat``, ``job_analysis``, ``text_analysis``, ``recruiter_query``) and a
``sub_kind`` drawn from that kind's enum (session type, analysis type or query
type). ``select_system_prompt`` maps the pair to a fixed instruction string and
``build_user_message`` folds the caller's fields into one self-describing
message. Unknown kinds or sub kinds fall back to a generic prompt; neither
function raises.
"""

from collections.abc import Mapping
from typing import Literal

PromptKind = Literal["chat", "job_analysis", "text_analysis", "recruiter_query"]

# ---------------------------------------------------------------------------
# JobPsych chat
# ---------------------------------------------------------------------------

JOBPSYCH_BASE_PROMPT = """You are JobPsych AI, a specialized AI assistant focused on career psychology, job analysis, and professional development. You provide evidence-based insights using psychological principles for career guidance.

RESPONSE GUIDELINES:
- Keep ALL responses under 20 words unless explicitly asked for longer answers
- Use simple, natural language (no buzzwords or filler)
- Sound confident, clear, and engaging
- Avoid long paragraphs; prefer short sentences or bullet points
- Provide direct value in as few words as possible
- Be concise, informative, and attractive"""

CHAT_PROMPTS = {
    "coaching": (
        "You are in coaching mode. Provide supportive, encouraging guidance with "
        "actionable steps. Focus on motivation, goal-setting, and overcoming career challenges."
    ),
    "analysis": (
        "You are in analysis mode. Provide detailed, analytical insights about job fit, "
        "skills gaps, career trajectories, and market trends. Be objective and data-driven."
    ),
    "general": (
        "Provide balanced guidance that combines psychological insights with practical "
        "career advice. Be professional, empathetic, and solution-oriented."
    ),
}

# ---------------------------------------------------------------------------
# JobPsych job analysis
# ---------------------------------------------------------------------------

JOB_ANALYSIS_BASE_PROMPT = (
    "As JobPsych AI, analyze the following for career psychology insights. "
    "Keep your response under 20 words unless specifically asked for details. "
    "Be direct and actionable."
)

JOB_ANALYSIS_PROMPTS = {
    "fit": (
        "Analyze the psychological fit between this person and role. Consider personality "
        "traits, work style, growth potential, and potential challenges."
    ),
    "skills_gap": (
        "Identify skills gaps and provide a development roadmap with psychological "
        "considerations for learning preferences and motivation."
    ),
    "career_path": (
        "Suggest career progression paths considering psychological factors like "
        "personality type, values, and long-term satisfaction."
    ),
    "interview_prep": (
        "Provide interview preparation advice focusing on psychological strategies to "
        "reduce anxiety, present authentically, and demonstrate fit."
    ),
}

JOB_ANALYSIS_DEFAULT = "Provide general career guidance based on the provided information."

# career_path reads the same two fields as "where am I / who am I"
JOB_ANALYSIS_LABELS = {
    "career_path": ("Current Role/Interest", "User Background"),
}
DEFAULT_JOB_ANALYSIS_LABELS = ("Job Description", "User Profile")

# ---------------------------------------------------------------------------
# JobPsych text analysis
# ---------------------------------------------------------------------------

TEXT_ANALYSIS_BASE_PROMPT = (
    "As JobPsych AI, analyze this career-related content. "
    "Keep your response under 20 words unless specifically asked for details. "
    "Be direct and insightful."
)

TEXT_ANALYSIS_PROMPTS = {
    "sentiment": (
        "Analyze the emotional tone and psychological state reflected in this text. "
        "Consider stress levels, confidence, motivation, and career satisfaction."
    ),
    "summary": (
        "Summarize the key career and psychological themes, highlighting important "
        "insights about the person's professional situation."
    ),
    "keywords": (
        "Extract key career-related terms, psychological indicators, and professional "
        "themes. Focus on skills, motivations, concerns, and opportunities."
    ),
}

TEXT_ANALYSIS_DEFAULT = "Provide comprehensive analysis with career psychology insights."

# ---------------------------------------------------------------------------
# HireDesk recruiter queries
# ---------------------------------------------------------------------------

HIREDESK_BASE_PROMPT = """You are HireDesk AI, a professional assistant for recruiters and hiring managers.
Provide clear, actionable, and objective insights to help with hiring decisions.
Focus on practical advice that can be immediately applied in recruitment processes."""

HIREDESK_PROMPTS = {
    "screening": """Your task: Help recruiters screen candidates effectively.
- Suggest relevant screening questions
- Identify key qualifications to look for
- Highlight red flags or positive indicators
- Provide objective evaluation criteria
Be concise and data-driven.""",
    "interview_questions": """Your task: Generate relevant interview questions for the role.
- Create role-specific technical and behavioral questions
- Include questions to assess cultural fit
- Suggest follow-up questions for deeper insights
- Balance technical skills with soft skills assessment
Provide 5-7 well-structured questions with brief explanations.""",
    "job_posting": """Your task: Optimize job postings for clarity and appeal.
- Improve job descriptions for better candidate engagement
- Suggest compelling language that attracts top talent
- Ensure clarity on requirements and responsibilities
- Optimize for inclusivity and accessibility
- Balance being comprehensive with being concise
Provide specific, actionable recommendations.""",
    "candidate_match": """Your task: Analyze candidate-role fit.
- Evaluate how well candidate qualifications match role requirements
- Identify strengths and potential gaps
- Assess experience relevance
- Provide objective scoring or rating if possible
- Suggest areas for further evaluation in interviews
Be balanced and evidence-based in your assessment.""",
}


def select_system_prompt(kind: str, sub_kind: str | None = None) -> str:
    """Return the system prompt for a (kind, sub_kind) pair.

    Args:
        kind: One of ``chat``, ``job_analysis``, ``text_analysis``, ``recruiter_query``.
        sub_kind: Session type, analysis type or query type for that kind.

    Returns:
        A non-empty instruction string. Unrecognized values get the generic
        variant of the kind, and an unrecognized kind gets the general chat prompt.
    """
    if kind == "job_analysis":
        task = JOB_ANALYSIS_PROMPTS.get(sub_kind or "", JOB_ANALYSIS_DEFAULT)
        return f"{JOB_ANALYSIS_BASE_PROMPT}\n\n{task}"

    if kind == "text_analysis":
        task = TEXT_ANALYSIS_PROMPTS.get(sub_kind or "", TEXT_ANALYSIS_DEFAULT)
        return f"{TEXT_ANALYSIS_BASE_PROMPT}\n\n{task}"

    if kind == "recruiter_query":
        task = HIREDESK_PROMPTS.get(sub_kind or "")
        return f"{HIREDESK_BASE_PROMPT}\n\n{task}" if task else HIREDESK_BASE_PROMPT

    mode = CHAT_PROMPTS.get(sub_kind or "", CHAT_PROMPTS["general"])
    return f"{JOBPSYCH_BASE_PROMPT} {mode}"


def build_user_message(kind: str, fields: Mapping[str, str | None]) -> str:
    """Fold request fields into a single user message for the model.

    The requested analysis or query type is always stated at the end so the
    message stands on its own without the original request metadata.
    """
    if kind == "job_analysis":
        return _build_job_analysis_message(fields)
    if kind == "text_analysis":
        return _build_text_analysis_message(fields)
    if kind == "recruiter_query":
        return _build_recruiter_message(fields)
    return _build_chat_message(fields)


def _build_chat_message(fields: Mapping[str, str | None]) -> str:
    session_type = fields.get("session_type") or "general"
    context = fields.get("context") or "No additional context provided"
    return (
        f"User Query: {fields.get('message') or ''}\n\n"
        f"Context: {context}\n\n"
        f"Respond in {session_type} mode."
    )


def _build_job_analysis_message(fields: Mapping[str, str | None]) -> str:
    analysis_type = fields.get("analysis_type") or "general"
    description_label, profile_label = JOB_ANALYSIS_LABELS.get(
        analysis_type, DEFAULT_JOB_ANALYSIS_LABELS
    )
    return (
        f"{description_label}: {fields.get('job_description') or 'Not provided'}\n"
        f"{profile_label}: {fields.get('user_profile') or 'Not provided'}\n\n"
        f"Requested analysis type: {analysis_type}."
    )


def _build_text_analysis_message(fields: Mapping[str, str | None]) -> str:
    analysis_type = fields.get("analysis_type") or "general"
    return f'"{fields.get("text") or ""}"\n\nRequested analysis type: {analysis_type}.'


def _build_recruiter_message(fields: Mapping[str, str | None]) -> str:
    message = f"Query: {fields.get('query') or ''}\n\n"

    if fields.get("job_role"):
        message += f"Job Role: {fields['job_role']}\n"

    if fields.get("candidate_info"):
        message += f"Candidate Information:\n{fields['candidate_info']}\n\n"

    if fields.get("context"):
        message += f"Additional Context: {fields['context']}\n"

    query_type = fields.get("query_type") or "general"
    message += f"\nPlease provide a detailed, actionable response for this {query_type} query."
    return message


def build_coaching_context(coaching_type: str | None, user_context: str | None) -> str:
    """Context block passed along with a coaching chat."""
    return (
        f"Coaching Session Type: {coaching_type or 'general'}\n"
        f"User Context: {user_context or 'No additional context'}"
    )


def build_career_path_message(current_role: str, experience: str, interests: str, goals: str) -> str:
    """Chat message asking for career path recommendations."""
    return (
        "I need career path recommendations based on my profile:\n"
        f"Current Role: {current_role}\n"
        f"Experience: {experience}\n"
        f"Interests: {interests}\n"
        f"Goals: {goals}"
    )
