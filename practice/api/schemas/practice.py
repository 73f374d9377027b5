from typing import Any, Dict, List

from pydantic import BaseModel

from practice.core.models import SessionState
from practice.core.session_machine import current_record, hint_for


class JobContextModel(BaseModel):
    id: int | None = None
    position: str
    companyName: str | None = None
    jobDescription: str | None = None


class OpenSessionRequest(BaseModel):
    job: JobContextModel | None = None
    category: str | None = None


class AnswerRequest(BaseModel):
    answer: str


class SubmitRequest(BaseModel):
    answer: str | None = None


class RateFeedbackRequest(BaseModel):
    helpful: bool


class SessionStateResponse(BaseModel):
    session_id: str
    phase: str
    current_question_index: int
    total_questions: int
    question: Dict[str, Any] | None = None
    hint: str | None = None
    time_remaining: int
    score: int
    confidence: int
    feedback_pending: bool = False
    saving: bool = False
    saved: bool = False
    closed: bool = False
    notice: Dict[str, Any] | None = None
    records: List[Dict[str, Any]] = []

    @classmethod
    def from_state(cls, state: SessionState, closed: bool = False) -> "SessionStateResponse":
        record = current_record(state) if state["records"] else None
        return cls(
            session_id=state["session_id"],
            phase=state["phase"].value,
            current_question_index=state["current_question_index"],
            total_questions=len(state["records"]),
            question=dict(record["question"]) if record else None,
            hint=hint_for(record) if record and state["show_hint"] else None,
            time_remaining=state["time_remaining"],
            score=state["score"],
            confidence=(record["confidence"] if record else None) or 3,
            feedback_pending=state["feedback_pending"],
            saving=state["saving"],
            saved=state["saved"],
            closed=closed,
            notice=dict(state["notice"]) if state["notice"] else None,
            records=[dict(r) for r in state["records"]],
        )
