import pytest

from practice.core.question_source import QuestionSource, extract_skills
from practice.system.exceptions import CareerAPIError, QuestionSourceError


class FakeBank:
    def __init__(self, questions=None, error=None):
        self.questions = questions if questions is not None else []
        self.error = error
        self.categories = []

    async def get_questions(self, category=None):
        self.categories.append(category)
        if self.error:
            raise self.error
        return self.questions


class FakeGenerator:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def generate_questions(self, job_title, skills):
        self.calls.append((job_title, skills))
        return self.result


def test_extract_skills_matches_known_skills_case_insensitively():
    skills = extract_skills("We need strong python and sql, plus react experience.")
    assert skills == ["React", "Python", "SQL"]


async def test_load_without_job_uses_question_bank():
    bank = FakeBank([
        {"question": "Why this role?", "description": "Motivation", "category": "behavioral"},
        {"question": ""},
    ])
    questions = await QuestionSource(bank).load(category="behavioral")

    assert questions == [{"question": "Why this role?", "description": "Motivation"}]
    assert bank.categories == ["behavioral"]


async def test_load_with_job_generates_behavioral_then_technical():
    generator = FakeGenerator({
        "behavioral": [{"question": "Tell me about a deadline you missed.", "suggestedAnswer": "Own it."}],
        "technical": [{"question": "How does the event loop work?"}],
    })
    job = {"id": 3, "position": "Frontend Engineer", "jobDescription": "TypeScript and React"}
    questions = await QuestionSource(FakeBank(), generator).load(job=job)

    assert [q["question"] for q in questions] == [
        "Tell me about a deadline you missed.",
        "How does the event loop work?",
    ]
    assert questions[0]["suggestedAnswer"] == "Own it."
    assert generator.calls == [("Frontend Engineer", ["React", "TypeScript"])]


async def test_source_errors_are_wrapped():
    with pytest.raises(QuestionSourceError) as exc_info:
        await QuestionSource(FakeBank(error=CareerAPIError("down"))).load()
    assert exc_info.value.status_code == 502


async def test_empty_question_list_is_an_error():
    with pytest.raises(QuestionSourceError):
        await QuestionSource(FakeBank([])).load()
