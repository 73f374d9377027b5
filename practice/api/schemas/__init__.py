from practice.api.schemas.coach import (
    AnalyzeAnswerRequest,
    AnswerAnalysisResponse,
    GenerateQuestionsRequest,
    GeneratedQuestionsResponse,
)
from practice.api.schemas.practice import (
    AnswerRequest,
    JobContextModel,
    OpenSessionRequest,
    RateFeedbackRequest,
    SessionStateResponse,
    SubmitRequest,
)

__all__ = [
    "AnalyzeAnswerRequest",
    "AnswerAnalysisResponse",
    "AnswerRequest",
    "GenerateQuestionsRequest",
    "GeneratedQuestionsResponse",
    "JobContextModel",
    "OpenSessionRequest",
    "RateFeedbackRequest",
    "SessionStateResponse",
    "SubmitRequest",
]
