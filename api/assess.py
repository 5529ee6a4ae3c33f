"""
Assessment route.

POST /api/assess → TutorService.assess

Validation happens here; pipeline failures (UpstreamError, ParseError,
BadUpstreamShapeError) propagate to the app-level error boundary.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from agent.tutor import TutorService

from .deps import get_tutor
from .schemas import AssessmentResponse, AssessRequest, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["assessment"])

MIN_TRANSCRIPT_WORDS = 20
TOO_SHORT_MESSAGE = "Please speak at least 30 seconds or 20 words to be assessable."


def word_count(text: str) -> int:
    return len(text.split())


@router.post(
    "/assess",
    response_model=AssessmentResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def assess(body: AssessRequest, tutor: TutorService = Depends(get_tutor)):
    """
    Score a spoken answer.

    Expected payload:
    {
        "transcript": "I usually spend my weekends ...",
        "promptId": "part1-hobbies",
        "topicContext": "Describe how you spend your weekends",
        "durationSec": 45,
        "userLocale": "vi-VN"
    }
    """
    if not body.transcript or word_count(body.transcript) < MIN_TRANSCRIPT_WORDS:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": TOO_SHORT_MESSAGE},
        )

    # Provider call blocks; keep it off the event loop
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        tutor.assess,
        body.transcript,
        body.promptId or "unknown",
        body.metadata(),
    )
    return result.to_dict()
