from practice.system.exceptions.api_exception_handler import common_exception_handler
from practice.system.exceptions.base_exception import (
    AnalysisError,
    BaseHTTPException,
    CareerAPIError,
    InvalidTransitionError,
    QuestionSourceError,
    SessionNotFoundError,
)

__all__ = [
    "AnalysisError",
    "BaseHTTPException",
    "CareerAPIError",
    "InvalidTransitionError",
    "QuestionSourceError",
    "SessionNotFoundError",
    "common_exception_handler",
]
