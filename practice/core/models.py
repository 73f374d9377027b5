from enum import Enum
from typing import List, Literal, TypedDict


class Phase(str, Enum):
    INTRO = "intro"
    QUESTION = "question"
    FEEDBACK = "feedback"
    SUMMARY = "summary"


class Question(TypedDict, total=False):
    question: str
    description: str
    suggestedAnswer: str


class AnswerAnalysis(TypedDict, total=False):
    feedback: str
    clarity: int
    relevance: int
    overall: int
    strengths: List[str]
    areasForImprovement: List[str]
    suggestedResponse: str


class JobContext(TypedDict, total=False):
    id: int
    position: str
    companyName: str
    jobDescription: str


class Notice(TypedDict):
    title: str
    description: str
    variant: Literal["default", "destructive"]


class QuestionRecord(TypedDict):
    question: Question
    answer: str
    feedback: str | None
    analysis: AnswerAnalysis | None
    confidence: int | None
    rating: Literal["helpful", "not-helpful"] | None
    helpful_awarded: bool


class SessionState(TypedDict):
    session_id: str
    job: JobContext | None
    records: List[QuestionRecord]
    current_question_index: int
    phase: Phase
    score: int
    time_limit: int
    time_remaining: int
    show_hint: bool
    feedback_token: int
    feedback_pending: bool
    saving: bool
    saved: bool
    notice: Notice | None
