"""
HTTP API - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between the client app and the gateway routes.
Fields are optional at parse time; routes apply the domain checks so
clients get the same {"message": ...} shape as every other error.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# REQUESTS
# ============================================================================

class AssessRequest(BaseModel):
    """Speaking transcript to score."""

    transcript: Optional[str] = Field(None, description="Transcribed spoken answer (>= 20 words)")
    promptId: Optional[str] = Field(None, description="Speaking task identifier")
    audioUrl: Optional[str] = Field(None, description="Reference returned by /api/upload")
    durationSec: Optional[float] = Field(None, description="Recording length in seconds")
    userLocale: Optional[str] = None
    topicContext: Optional[str] = Field(None, description="Question/topic being answered")
    questionText: Optional[str] = None

    def metadata(self) -> Dict[str, Any]:
        meta: Dict[str, Any] = {
            "audioUrl": self.audioUrl or None,
            "durationSec": self.durationSec or None,
            "userLocale": self.userLocale or None,
        }
        if self.topicContext:
            meta["topicContext"] = self.topicContext
        if self.questionText:
            meta["questionText"] = self.questionText
        return meta


class ChatRequest(BaseModel):
    """One chat turn with the tutor."""

    message: Optional[str] = None
    sessionId: Optional[str] = Field(None, description="Opaque, passed through")
    userLocale: Optional[str] = None

    def metadata(self) -> Dict[str, Any]:
        return {"userLocale": self.userLocale or None}


# ============================================================================
# RESPONSES
# ============================================================================

class CorrectionOut(BaseModel):
    original: str
    suggestion: str
    explanation: str


class AssessmentResponse(BaseModel):
    bandScore: float
    criteria: Dict[str, Any]
    strengths: List[str]
    weaknesses: List[str]
    corrections: List[CorrectionOut]
    feedback: str
    followUpQuestions: List[str]
    practicePlan: str
    rawModelOutput: str = ""


class ChatResponse(BaseModel):
    reply: str
    rawModelOutput: str


class UploadResponse(BaseModel):
    audioUrl: str


class ErrorResponse(BaseModel):
    message: str
