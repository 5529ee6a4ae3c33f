import json
from typing import Any

from .base import ProviderBackend
from .types import DispatchRequest

STUB_ASSESSMENT = {
    "bandScore": 6.5,
    "criteria": {
        "fluency_coherence": 6.5,
        "lexical_resource": 6.0,
        "grammatical_range_accuracy": 6.5,
        "pronunciation": 6.0,
    },
    "strengths": ["Extends answers with relevant detail"],
    "weaknesses": ["Occasional hesitation before complex ideas"],
    "corrections": [
        {
            "original": "I go to travelling every summer",
            "suggestion": "I go travelling every summer",
            "explanation": "'go' + -ing takes no preposition",
        }
    ],
    "feedback": (
        "A clear, well organised answer. Work on linking ideas with a wider "
        "range of connectors, practise past tense forms in longer sentences, "
        "and record yourself to reduce pauses before complex points."
    ),
    "followUpQuestions": [
        "Why do you think people enjoy travelling?",
        "How has tourism changed in your country?",
        "Would you prefer to travel alone or in a group?",
    ],
    "practicePlan": "Day 1: linking words; Day 2: past tenses; Day 3: record and review",
}

STUB_CHAT_REPLY = "Hi! Nice to hear from you. What would you like to practise today?"


class StubProviderBackend(ProviderBackend):
    """
    Deterministic fake provider for offline development and CI.

    Returns a standard candidates envelope; assessment answers wrap valid
    JSON in a line of prose, as real models tend to.
    """

    def dispatch(self, request: DispatchRequest) -> Any:
        if request.task == "assessment":
            text = f"Here is the assessment:\n{json.dumps(STUB_ASSESSMENT)}\n"
        else:
            text = STUB_CHAT_REPLY

        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}
