from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Correction:
    original: str
    suggestion: str
    explanation: str

    @classmethod
    def from_mapping(cls, data: Any) -> "Correction":
        data = data if isinstance(data, dict) else {}
        return cls(
            original=str(data.get("original") or ""),
            suggestion=str(data.get("suggestion") or ""),
            explanation=str(data.get("explanation") or ""),
        )


@dataclass
class AssessmentResult:
    band_score: float
    criteria: Dict[str, Any] = field(default_factory=dict)
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    corrections: List[Correction] = field(default_factory=list)
    feedback: str = ""
    follow_up_questions: List[str] = field(default_factory=list)
    practice_plan: str = ""
    raw_model_output: str = ""

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "AssessmentResult":
        """Build from the camelCase field mapping the model returns."""
        return cls(
            band_score=data["bandScore"],
            criteria=dict(data.get("criteria") or {}),
            strengths=[str(s) for s in data.get("strengths") or []],
            weaknesses=[str(w) for w in data.get("weaknesses") or []],
            corrections=[Correction.from_mapping(c) for c in data.get("corrections") or []],
            feedback=str(data.get("feedback") or ""),
            follow_up_questions=[str(q) for q in data.get("followUpQuestions") or []],
            practice_plan=str(data.get("practicePlan") or ""),
            raw_model_output=str(data.get("rawModelOutput") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape returned to clients."""
        return {
            "bandScore": self.band_score,
            "criteria": self.criteria,
            "strengths": self.strengths,
            "weaknesses": self.weaknesses,
            "corrections": [vars(c) for c in self.corrections],
            "feedback": self.feedback,
            "followUpQuestions": self.follow_up_questions,
            "practicePlan": self.practice_plan,
            "rawModelOutput": self.raw_model_output,
        }


@dataclass
class ChatReply:
    reply: str
    raw_model_output: str
    session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"reply": self.reply, "rawModelOutput": self.raw_model_output}
