class BaseHTTPException(Exception):
    status_code: int = 500
    detail: str = "Internal server error"

    def __init__(self, detail: str | None = None, status_code: int | None = None):
        self.detail = detail or self.detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.detail)


class SessionNotFoundError(BaseHTTPException):
    status_code = 404
    detail = "Practice session not found"


class InvalidTransitionError(BaseHTTPException):
    status_code = 409
    detail = "Action is not allowed in the current phase"


class QuestionSourceError(BaseHTTPException):
    status_code = 502
    detail = "Failed to load interview questions"


class CareerAPIError(BaseHTTPException):
    status_code = 502
    detail = "Career API request failed"


class AnalysisError(BaseHTTPException):
    status_code = 502
    detail = "Answer analysis failed"
