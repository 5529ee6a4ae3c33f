"""
Result assembler tests.

Verifies:
✔ rawModelOutput is always the extracted text, never the model's echo
✔ Missing/null bandScore is BadUpstreamShapeError (not ParseError)
✔ Lenient normalization rounds, clamps and truncates
✔ Strict normalization rejects violations
✔ Chat replies are trimmed and keep the serialized envelope
"""

import json

import pytest

from agent.assembler import assemble_assessment, assemble_chat, normalize_assessment, round_half
from agent.results import AssessmentResult, ChatReply
from inference import BadUpstreamShapeError, ParseError


def valid_fields(**overrides):
    fields = {
        "bandScore": 6.5,
        "criteria": {
            "fluency_coherence": 6.5,
            "lexical_resource": 6.0,
            "grammatical_range_accuracy": 6.5,
            "pronunciation": 6.0,
        },
        "strengths": ["uses a range of vocabulary"],
        "weaknesses": ["occasional hesitation"],
        "corrections": [
            {"original": "I go to travelling", "suggestion": "I go travelling", "explanation": "preposition"}
        ],
        "feedback": "Good",
        "followUpQuestions": ["Q1", "Q2", "Q3"],
        "practicePlan": "Day1;Day2",
    }
    fields.update(overrides)
    return fields


class TestAssembleAssessment:

    def test_builds_typed_result(self):
        result = assemble_assessment(valid_fields(), "the text")
        assert isinstance(result, AssessmentResult)
        assert result.band_score == 6.5
        assert result.criteria["lexical_resource"] == 6.0
        assert result.corrections[0].suggestion == "I go travelling"
        assert result.follow_up_questions == ["Q1", "Q2", "Q3"]

    def test_raw_model_output_overrides_model_echo(self):
        result = assemble_assessment(valid_fields(rawModelOutput="debug"), "full extracted text")
        assert result.raw_model_output == "full extracted text"

    def test_to_dict_wire_shape(self):
        data = assemble_assessment(valid_fields(), "txt").to_dict()
        assert set(data) == {
            "bandScore", "criteria", "strengths", "weaknesses", "corrections",
            "feedback", "followUpQuestions", "practicePlan", "rawModelOutput",
        }
        assert data["corrections"][0] == {
            "original": "I go to travelling",
            "suggestion": "I go travelling",
            "explanation": "preposition",
        }

    @pytest.mark.parametrize("fields", [{"criteria": {}}, {"bandScore": None}])
    def test_missing_band_score(self, fields):
        with pytest.raises(BadUpstreamShapeError) as exc_info:
            assemble_assessment(fields, "txt")
        assert not isinstance(exc_info.value, ParseError)

    @pytest.mark.parametrize("band", ["high", True, [6], {"v": 6}])
    def test_non_numeric_band_score(self, band):
        with pytest.raises(BadUpstreamShapeError):
            assemble_assessment(valid_fields(bandScore=band), "txt")

    def test_numeric_string_band_score_accepted(self):
        assert assemble_assessment(valid_fields(bandScore="7"), "txt").band_score == 7.0

    def test_missing_optional_fields_default_empty(self):
        result = assemble_assessment({"bandScore": 5}, "txt")
        assert result.strengths == []
        assert result.corrections == []
        assert result.feedback == ""


class TestNormalization:

    @pytest.mark.parametrize(
        "value,expected",
        [(6.0, 6.0), (6.2, 6.0), (6.25, 6.5), (6.74, 6.5), (6.75, 7.0), (0.1, 0.0)],
    )
    def test_round_half(self, value, expected):
        assert round_half(value) == expected

    def test_lenient_rounds_and_clamps(self):
        out = normalize_assessment(
            valid_fields(bandScore=9.7, criteria={"pronunciation": -1, "lexical_resource": 6.3})
        )
        assert out["bandScore"] == 9.0
        assert out["criteria"] == {"pronunciation": 0.0, "lexical_resource": 6.3}

    def test_lenient_truncates_lists(self):
        corrections = [{"original": str(i), "suggestion": "", "explanation": ""} for i in range(9)]
        out = normalize_assessment(
            valid_fields(corrections=corrections, followUpQuestions=["a", "b", "c", "d"])
        )
        assert len(out["corrections"]) == 6
        assert out["followUpQuestions"] == ["a", "b", "c"]

    def test_lenient_keeps_short_question_list(self):
        out = normalize_assessment(valid_fields(followUpQuestions=["only one"]))
        assert out["followUpQuestions"] == ["only one"]

    def test_valid_output_unchanged(self):
        fields = valid_fields()
        assert normalize_assessment(fields, strict=True) == fields

    @pytest.mark.parametrize(
        "overrides",
        [
            {"bandScore": 6.3},
            {"bandScore": 10},
            {"criteria": {"pronunciation": 11}},
            {"followUpQuestions": ["a", "b"]},
            {"corrections": [{}] * 7},
        ],
    )
    def test_strict_rejects_violations(self, overrides):
        with pytest.raises(BadUpstreamShapeError) as exc_info:
            normalize_assessment(valid_fields(**overrides), strict=True)
        assert exc_info.value.details["violations"]


class TestAssembleChat:

    def test_reply_trimmed_and_envelope_serialized(self):
        envelope = {"output_text": "  plain reply text \n"}
        reply = assemble_chat("  plain reply text \n", envelope)
        assert isinstance(reply, ChatReply)
        assert reply.reply == "plain reply text"
        assert json.loads(reply.raw_model_output) == envelope
        assert reply.to_dict() == {"reply": "plain reply text", "rawModelOutput": reply.raw_model_output}
