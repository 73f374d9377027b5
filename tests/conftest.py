import asyncio
from typing import Any, Dict, List

import pytest

from practice.core.feedback import FeedbackRequester
from practice.core.persister import SessionPersister
from practice.core.session import PracticeSession
from practice.core.session_machine import initial_state
from practice.system.exceptions import CareerAPIError

QUESTIONS = [
    {"question": "Tell me about yourself.", "description": "", "suggestedAnswer": "Start with your current role and a recent achievement that shows your impact on the team."},
    {"question": "Describe a conflict with a teammate.", "description": ""},
    {"question": "How do you design a REST API?", "description": ""},
]


class FakeAnalyzer:
    def __init__(self, result: Dict[str, Any] | None = None, error: Exception | None = None, delay: float = 0.0):
        self.result = result or {
            "feedback": "Solid answer.",
            "clarity": 4,
            "relevance": 4,
            "overall": 4,
            "strengths": ["Concise"],
            "areasForImprovement": ["Add metrics"],
        }
        self.error = error
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def analyze_answer(self, question, answer, job_title=None, company_name=None):
        self.calls.append({
            "question": question,
            "answer": answer,
            "job_title": job_title,
            "company_name": company_name,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return dict(self.result)


class FakeStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: List[Dict[str, Any]] = []
        self.history: List[Dict[str, Any]] = []

    async def save_practice(self, submission):
        if self.fail:
            raise CareerAPIError("Error saving interview practice")
        self.saved.append(submission)
        return {"id": len(self.saved)}

    async def get_practice_history(self):
        return self.history


@pytest.fixture
def questions():
    return [dict(q) for q in QUESTIONS]


@pytest.fixture
def state(questions):
    return initial_state("practice_test", questions)


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def make_session(questions, analyzer, store):
    def factory(time_limit: int = 120, tick_interval: float = 1.0, session_analyzer=None, session_store=None, count=None):
        return PracticeSession(
            "practice_test",
            questions[:count] if count else questions,
            FeedbackRequester(session_analyzer or analyzer),
            SessionPersister(session_store or store),
            job={"id": 7, "position": "Backend Engineer", "companyName": "Acme"},
            time_limit=time_limit,
            tick_interval=tick_interval,
        )
    return factory
