from typing import List

from pydantic import BaseModel


class AnalyzeAnswerRequest(BaseModel):
    question: str
    answer: str = ""
    jobTitle: str | None = None
    companyName: str | None = None


class AnswerAnalysisResponse(BaseModel):
    feedback: str
    clarity: int
    relevance: int
    overall: int
    strengths: List[str] = []
    areasForImprovement: List[str] = []
    suggestedResponse: str | None = None


class GenerateQuestionsRequest(BaseModel):
    jobTitle: str
    skills: List[str]


class GeneratedQuestion(BaseModel):
    question: str
    suggestedAnswer: str = ""


class GeneratedQuestionsResponse(BaseModel):
    behavioral: List[GeneratedQuestion] = []
    technical: List[GeneratedQuestion] = []
