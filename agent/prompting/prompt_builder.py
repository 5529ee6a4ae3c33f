"""
Prompt Builder Layer
====================

Assembles the outbound prompt text for each task kind.

Responsibilities:
- Defines the examiner and tutor behavioral contracts
- Embeds the literal assessment JSON schema so the model mirrors its shape
- Embeds the band rubric and the topic-relevance instruction
- Serializes caller metadata verbatim into the prompt

Invariants:
- Pure functions of their inputs: no network, no state
- ASSESSMENT_SCHEMA field names match AssessmentResult exactly
- Output constraints (≤6 corrections, exactly 3 follow-up questions,
  30-80 word feedback, JSON only) are stated in every assessment prompt
"""

import json
from typing import Any, Dict, Optional

MAX_CORRECTIONS: int = 6
MAX_CORRECTION_WORDS: int = 25
FOLLOW_UP_QUESTION_COUNT: int = 3
FEEDBACK_WORDS: tuple = (30, 80)

# ── Output schema (template the model fills in) ───────────────────────────────
ASSESSMENT_SCHEMA: Dict[str, Any] = {
    "bandScore": 0,
    "criteria": {
        "fluency_coherence": 0,
        "lexical_resource": 0,
        "grammatical_range_accuracy": 0,
        "pronunciation": 0,
    },
    "strengths": [""],
    "weaknesses": [""],
    "corrections": [{"original": "", "suggestion": "", "explanation": ""}],
    "feedback": "",
    "followUpQuestions": [""] * FOLLOW_UP_QUESTION_COUNT,
    "practicePlan": "",
    "rawModelOutput": "",
}

# ── Rubric ────────────────────────────────────────────────────────────────────
BAND_RUBRIC = """Band descriptors (short):
- 9.0: Expert user (fully operational command, rare inaccuracies)
- 8.0: Very good user (occasional inaccuracies)
- 7.0: Good user (overall effective command)
- 6.0: Competent user (some errors, breakdowns in complex language)
- 5.0: Modest user (partial command, frequent issues)
- 4.0: Limited user (conveys only basic meaning)
- 3.0: Extremely limited
- 2.0: Intermittent
- 1.0: Non-user
- 0.0: No attempt

Round band scores to the nearest 0.5."""

# ── Behavioral contracts ──────────────────────────────────────────────────────
EXAMINER_SYSTEM_PROMPT = (
    "You are an experienced IELTS speaking examiner. Use the official IELTS "
    "band descriptors. Return ONLY a JSON object EXACTLY matching the schema provided."
)

TUTOR_SYSTEM_PROMPT = (
    "You are an empathetic English learning assistant and daily tutor. "
    "Greet the user conversationally, correct small errors when asked, provide "
    "short practice tasks (1-3 bullets), and keep replies concise. When asked "
    "for a daily plan, produce a 7-day micro plan."
)


def _dump_metadata(metadata: Optional[Dict[str, Any]]) -> str:
    return json.dumps(metadata or {}, ensure_ascii=False)


def topic_instruction(metadata: Optional[Dict[str, Any]]) -> str:
    """Relevance instruction when the caller supplied the question being answered."""
    metadata = metadata or {}
    topic = metadata.get("topicContext") or metadata.get("questionText")
    if topic:
        return (
            f'- IMPORTANT: The user is answering the question/topic: "{topic}". '
            "Assess if the response is relevant to this topic."
        )
    return "- No specific question context provided. Assess general speaking ability."


def build_assessment_prompt(
    transcript: str,
    prompt_id: str = "unknown",
    metadata: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Build the examiner prompt for scoring a speaking transcript.

    Args:
        transcript: The learner's spoken answer, transcribed.
        prompt_id: Identifier of the speaking task being answered.
        metadata: Optional context (userLocale, topicContext, durationSec, audioUrl).

    Returns:
        A single prompt string ending with the JSON-only instruction.
    """
    low, high = FEEDBACK_WORDS
    schema = json.dumps(ASSESSMENT_SCHEMA, indent=2)

    instructions = "\n".join([
        f"- Evaluate the transcript below for the given promptId: {prompt_id}",
        topic_instruction(metadata),
        "- Use the rubric and mapping. Provide numerical floats for criteria and "
        "bandScore and round the bandScore to nearest 0.5.",
        f"- corrections: include up to {MAX_CORRECTIONS} short corrections (each "
        f"original <={MAX_CORRECTION_WORDS} words), with suggestion and brief explanation.",
        f"- feedback: {low}-{high} words, 3 actionable next steps.",
        f"- followUpQuestions: provide exactly {FOLLOW_UP_QUESTION_COUNT} follow-up questions.",
        "- practicePlan: provide a short 7-day micro plan as a single string with "
        "bullets separated by semicolons.",
        "- rawModelOutput: echo any extra commentary in one string for debugging.",
        "- DO NOT return any additional text outside the JSON.",
    ])

    return (
        f"SYSTEM: {EXAMINER_SYSTEM_PROMPT}\n\n"
        f"SCHEMA:\n{schema}\n\n"
        f"INSTRUCTIONS:\n{instructions}\n\n"
        f"RUBRIC:\n{BAND_RUBRIC}\n\n"
        f"TRANSCRIPT:\n{transcript}\n\n"
        f"METADATA: {_dump_metadata(metadata)}\n\n"
        "Respond now with the JSON only."
    )


def build_chat_prompt(message: str, metadata: Optional[Dict[str, Any]] = None) -> str:
    """Build the tutor prompt for a free-form chat turn."""
    system = TUTOR_SYSTEM_PROMPT
    locale = (metadata or {}).get("userLocale")
    if locale:
        system += f" Reply in the user's locale ({locale})."

    return (
        f"{system}\n\n"
        f"USER_MESSAGE:\n{message}\n\n"
        f"METADATA:{_dump_metadata(metadata)}\n\n"
        "Respond as a natural conversational reply. Return the reply text only."
    )
