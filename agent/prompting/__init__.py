"""
Prompt Builder layer.

Exports the examiner/tutor behavioral contracts and the prompt assemblers.
"""

from .prompt_builder import (
    ASSESSMENT_SCHEMA,
    EXAMINER_SYSTEM_PROMPT,
    TUTOR_SYSTEM_PROMPT,
    build_assessment_prompt,
    build_chat_prompt,
)

__all__ = [
    "ASSESSMENT_SCHEMA",
    "EXAMINER_SYSTEM_PROMPT",
    "TUTOR_SYSTEM_PROMPT",
    "build_assessment_prompt",
    "build_chat_prompt",
]
