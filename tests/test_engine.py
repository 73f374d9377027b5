import json
from types import SimpleNamespace

import pytest

from practice.core.engine import EMPTY_ANSWER_ANALYSIS, CoachEngine
from practice.system.exceptions import AnalysisError


NO_CHOICES = object()


class FakeChat:
    def __init__(self, contents):
        self.contents = list(contents)
        self.calls = []

    def complete(self, model, messages, response_format=None):
        self.calls.append({"model": model, "messages": messages, "response_format": response_format})
        content = self.contents.pop(0)
        if isinstance(content, Exception):
            raise content
        choices = [] if content is NO_CHOICES else [SimpleNamespace(message=SimpleNamespace(content=content))]
        return SimpleNamespace(
            choices=choices,
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=30),
        )


def make_engine(*contents):
    chat = FakeChat(contents)
    return CoachEngine(client=SimpleNamespace(chat=chat), model="test-model"), chat


async def test_empty_answer_skips_the_model():
    engine, chat = make_engine()
    analysis = await engine.analyze_answer("Why us?", "   ")

    assert analysis == EMPTY_ANSWER_ANALYSIS
    assert chat.calls == []


async def test_analysis_parses_fenced_json_and_clamps_ratings():
    payload = {
        "feedback": "Clear and on topic.",
        "clarity": 9,
        "relevance": "4",
        "overall": 0,
        "strengths": ["Structure", ""],
        "areasForImprovement": "none",
    }
    engine, chat = make_engine(f"Here you go:\n```json\n{json.dumps(payload)}\n```")
    analysis = await engine.analyze_answer("Why us?", "Because of the product.", job_title="Backend Engineer")

    assert analysis["clarity"] == 5
    assert analysis["relevance"] == 4
    assert analysis["overall"] == 3
    assert analysis["strengths"] == ["Structure"]
    assert analysis["areasForImprovement"] == []
    assert chat.calls[0]["model"] == "test-model"
    assert "Backend Engineer" in chat.calls[0]["messages"][1]["content"]
    assert engine.metrics["total_tokens"] == 42


async def test_trailing_commas_are_tolerated():
    engine, _ = make_engine('{"feedback": "Fine", "clarity": 3, "relevance": 3, "overall": 4,}')
    analysis = await engine.analyze_answer("Q", "A real answer")
    assert analysis["overall"] == 4


async def test_malformed_model_output_raises():
    engine, _ = make_engine("I cannot answer that")
    with pytest.raises(AnalysisError):
        await engine.analyze_answer("Q", "A real answer")


@pytest.mark.parametrize("content", [None, "", NO_CHOICES])
async def test_empty_model_output_raises_analysis_error(content):
    engine, _ = make_engine(content)
    with pytest.raises(AnalysisError):
        await engine.analyze_answer("Q", "A real answer")


async def test_model_failure_raises_analysis_error():
    engine, _ = make_engine(RuntimeError("rate limited"))
    with pytest.raises(AnalysisError):
        await engine.analyze_answer("Q", "A real answer")


async def test_generate_questions_keeps_valid_items():
    payload = {
        "behavioral": [{"question": "Tell me about a failure.", "suggestedAnswer": "Use STAR."}, {"foo": 1}],
        "technical": [{"question": "Explain async IO."}],
    }
    engine, chat = make_engine(json.dumps(payload))
    result = await engine.generate_questions("Backend Engineer", ["Python"])

    assert result["behavioral"] == [{"question": "Tell me about a failure.", "suggestedAnswer": "Use STAR."}]
    assert result["technical"] == [{"question": "Explain async IO.", "suggestedAnswer": ""}]
    assert "Python" in chat.calls[0]["messages"][1]["content"]
