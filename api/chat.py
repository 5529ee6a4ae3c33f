"""
Chat route.

POST /api/chat → TutorService.chat
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from agent.tutor import TutorService
from inference import GatewayError

from .deps import get_tutor
from .schemas import ChatRequest, ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

CHAT_FAILED_MESSAGE = "Assistant failed. Please try again later."


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(body: ChatRequest, tutor: TutorService = Depends(get_tutor)):
    """Reply to one learner message as the daily tutor."""
    if not body.message or not body.message.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Message is required"},
        )

    try:
        loop = asyncio.get_running_loop()
        out = await loop.run_in_executor(
            None, tutor.chat, body.message, body.sessionId, body.metadata()
        )
    except GatewayError as e:
        logger.error(f"Chat error (session={body.sessionId}): {e}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": CHAT_FAILED_MESSAGE},
        )

    return out.to_dict()
