"""
Response envelope normalization.

Providers wrap their answer in one of a handful of envelope shapes.
Each shape is a variant below; `classify_envelope` matches them in a
fixed precedence order and always lands on a variant, falling back to
`UnknownEnvelope`. `extract_text` therefore never raises.

Precedence:
  1. CandidatesEnvelope   candidates[0].content.parts[0].text
  2. PlainTextEnvelope    the body itself is a string
  3. OutputTextEnvelope   {"output_text": "..."}
  4. ResultEnvelope       {"result": <str | any>}
  5. UnknownEnvelope      whole body serialized
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Union


def serialize(data: Any) -> str:
    """Serialize an arbitrary envelope (or part of one) to text."""
    try:
        return json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


@dataclass(frozen=True)
class CandidatesEnvelope:
    text_value: str

    def text(self) -> str:
        return self.text_value


@dataclass(frozen=True)
class PlainTextEnvelope:
    body: str

    def text(self) -> str:
        return self.body


@dataclass(frozen=True)
class OutputTextEnvelope:
    output_text: str

    def text(self) -> str:
        return self.output_text


@dataclass(frozen=True)
class ResultEnvelope:
    result: Any

    def text(self) -> str:
        if isinstance(self.result, str):
            return self.result
        return serialize(self.result)


@dataclass(frozen=True)
class UnknownEnvelope:
    raw: Any

    def text(self) -> str:
        return serialize(self.raw)


Envelope = Union[
    CandidatesEnvelope,
    PlainTextEnvelope,
    OutputTextEnvelope,
    ResultEnvelope,
    UnknownEnvelope,
]


def _first(items: Any) -> Optional[Any]:
    if isinstance(items, list) and items:
        return items[0]
    return None


def _candidate_text(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    candidate = _first(data.get("candidates"))
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    part = _first(content.get("parts"))
    if not isinstance(part, dict):
        return None
    text = part.get("text")
    return text if isinstance(text, str) else None


def classify_envelope(data: Any) -> Envelope:
    """Match a raw provider body against the known envelope variants."""
    text = _candidate_text(data)
    if text is not None:
        return CandidatesEnvelope(text)

    if isinstance(data, str):
        return PlainTextEnvelope(data)

    if isinstance(data, dict):
        output_text = data.get("output_text")
        if isinstance(output_text, str) and output_text:
            return OutputTextEnvelope(output_text)

        # Falsy results (None, "", {}, 0) are treated as absent
        if data.get("result"):
            return ResultEnvelope(data["result"])

    return UnknownEnvelope(data)


def extract_text(data: Any) -> str:
    """Pull a single plain-text payload out of a provider body."""
    return classify_envelope(data).text()
