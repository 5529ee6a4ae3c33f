"""
Tutor service: the two pipeline entry points.

    assess: PromptBuilder -> Dispatcher -> ResponseExtractor
            -> StructuredRecoveryParser -> ResultAssembler
    chat:   PromptBuilder -> Dispatcher -> ResponseExtractor -> ResultAssembler

The service holds only read-only collaborators (backend, timeouts,
strictness), so one instance safely serves concurrent requests.
"""

import logging
from typing import Any, Dict, Optional

from agent.assembler import assemble_assessment, assemble_chat
from agent.prompting import build_assessment_prompt, build_chat_prompt
from agent.recovery import recover_json_object
from agent.results import AssessmentResult, ChatReply
from inference import (
    TASK_TIMEOUTS,
    DispatchRequest,
    PromptRequest,
    ProviderBackend,
    extract_text,
)

logger = logging.getLogger(__name__)


class TutorService:
    """Speaking assessment and chat tutoring over a provider backend."""

    def __init__(
        self,
        backend: ProviderBackend,
        strict_assessment: bool = False,
        timeouts: Optional[Dict[str, float]] = None,
    ):
        self.backend = backend
        self.strict_assessment = strict_assessment
        self.timeouts = {**TASK_TIMEOUTS, **(timeouts or {})}

    def assess(
        self,
        transcript: str,
        prompt_id: str = "unknown",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AssessmentResult:
        """
        Score a speaking transcript.

        Raises:
            ValueError: empty transcript.
            UpstreamError: provider call failed.
            ParseError: no JSON object could be recovered.
            BadUpstreamShapeError: JSON lacks a usable bandScore.
        """
        if not transcript:
            raise ValueError("Transcript required")

        request = PromptRequest(
            task="assessment",
            primary_text=transcript,
            prompt_id=prompt_id,
            metadata=dict(metadata or {}),
        )
        prompt = build_assessment_prompt(request.primary_text, request.prompt_id, request.metadata)
        envelope = self._dispatch(request, prompt)

        text = extract_text(envelope)
        parsed = recover_json_object(text)
        result = assemble_assessment(parsed, text, strict=self.strict_assessment)

        logger.info(f"Assessed prompt {prompt_id}: band {result.band_score}")
        return result

    def chat(
        self,
        message: str,
        session_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ChatReply:
        """
        Produce a conversational tutor reply.

        Raises:
            ValueError: empty message.
            UpstreamError: provider call failed.
        """
        if not message:
            raise ValueError("message required")

        request = PromptRequest(
            task="chat",
            primary_text=message,
            session_id=session_id,
            metadata=dict(metadata or {}),
        )
        prompt = build_chat_prompt(request.primary_text, request.metadata)
        envelope = self._dispatch(request, prompt)

        reply = assemble_chat(extract_text(envelope), envelope)
        reply.session_id = session_id
        return reply

    def _dispatch(self, request: PromptRequest, prompt: str) -> Any:
        return self.backend.dispatch(
            DispatchRequest(
                task=request.task,
                prompt=prompt,
                timeout_s=self.timeouts[request.task],
            )
        )
