"""
Result assembly.

Assessment: parsed fields are merged over an empty result, then
`rawModelOutput` is forced to the true extracted text so the debugging
trail is never whatever the model chose to echo. `bandScore` is the one
mandatory field.

Chat: extracted text is the reply; the raw envelope is kept serialized.
"""

import logging
import math
from typing import Any, Dict, List

from agent.prompting.prompt_builder import FOLLOW_UP_QUESTION_COUNT, MAX_CORRECTIONS
from agent.results import AssessmentResult, ChatReply
from inference.envelope import serialize
from inference.errors import BadUpstreamShapeError

logger = logging.getLogger(__name__)

BAND_MIN: float = 0.0
BAND_MAX: float = 9.0


def round_half(value: float) -> float:
    """Round to the nearest 0.5, halves rounding up (6.25 -> 6.5)."""
    return math.floor(value * 2 + 0.5) / 2


def _as_number(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _clamp(value: float) -> float:
    return min(BAND_MAX, max(BAND_MIN, value))


def normalize_assessment(fields: Dict[str, Any], strict: bool = False) -> Dict[str, Any]:
    """
    Enforce the numeric and cardinality rules the prompt asks for.

    Lenient mode corrects what it can: band rounded to the 0.5 grid, scores
    clamped to 0-9, corrections and follow-up questions truncated. Strict
    mode raises BadUpstreamShapeError listing every violation instead.
    A non-numeric bandScore is rejected in both modes.
    """
    band = _as_number(fields.get("bandScore"))
    if band is None or math.isnan(band):
        raise BadUpstreamShapeError(
            "Model returned a non-numeric bandScore",
            {"bandScore": fields.get("bandScore")},
        )

    violations: List[str] = []
    out = dict(fields)

    if not BAND_MIN <= band <= BAND_MAX:
        violations.append(f"bandScore {band} outside {BAND_MIN}-{BAND_MAX}")
    elif round_half(band) != band:
        violations.append(f"bandScore {band} not on the 0.5 grid")
    out["bandScore"] = round_half(_clamp(band))

    criteria = fields.get("criteria")
    if isinstance(criteria, dict):
        normalized = {}
        for name, raw in criteria.items():
            score = _as_number(raw)
            if score is None:
                normalized[name] = raw
                continue
            if not BAND_MIN <= score <= BAND_MAX:
                violations.append(f"criteria.{name} {score} outside {BAND_MIN}-{BAND_MAX}")
            normalized[name] = _clamp(score)
        out["criteria"] = normalized

    corrections = fields.get("corrections")
    if isinstance(corrections, list) and len(corrections) > MAX_CORRECTIONS:
        violations.append(f"{len(corrections)} corrections (max {MAX_CORRECTIONS})")
        out["corrections"] = corrections[:MAX_CORRECTIONS]

    questions = fields.get("followUpQuestions")
    if isinstance(questions, list) and len(questions) != FOLLOW_UP_QUESTION_COUNT:
        violations.append(
            f"{len(questions)} follow-up questions (expected {FOLLOW_UP_QUESTION_COUNT})"
        )
        out["followUpQuestions"] = questions[:FOLLOW_UP_QUESTION_COUNT]

    if violations:
        if strict:
            raise BadUpstreamShapeError(
                "Model output violates assessment constraints",
                {"violations": violations},
            )
        logger.warning(f"Corrected model output: {'; '.join(violations)}")

    return out


def assemble_assessment(
    parsed: Dict[str, Any],
    extracted_text: str,
    strict: bool = False,
) -> AssessmentResult:
    """
    Merge recovered fields into an AssessmentResult.

    Raises:
        BadUpstreamShapeError: bandScore missing/null, non-numeric, or (strict)
            a constraint violation.
    """
    merged = {**parsed, "rawModelOutput": extracted_text}

    if merged.get("bandScore") is None:
        logger.warning(f"Model JSON lacks bandScore (keys: {sorted(parsed)})")
        raise BadUpstreamShapeError(
            "Model returned unexpected output",
            {"keys": sorted(parsed)},
        )

    return AssessmentResult.from_mapping(normalize_assessment(merged, strict=strict))


def assemble_chat(extracted_text: str, envelope: Any) -> ChatReply:
    return ChatReply(reply=extracted_text.strip(), raw_model_output=serialize(envelope))
