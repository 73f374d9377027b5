import logging

from fastapi import APIRouter, Depends

from practice.api.deps import get_engine
from practice.api.schemas import (
    AnalyzeAnswerRequest,
    AnswerAnalysisResponse,
    GenerateQuestionsRequest,
    GeneratedQuestionsResponse,
)
from practice.core.engine import CoachEngine
from practice.system.exceptions import AnalysisError

logger = logging.getLogger(__name__)
coach_router = APIRouter()

UNAVAILABLE_ANALYSIS = {
    "feedback": "We couldn't analyze your answer at this time. Please try again later.",
    "clarity": 3,
    "relevance": 3,
    "overall": 3,
    "strengths": ["Attempted the question"],
    "areasForImprovement": ["Try again later for detailed feedback"],
}

UNAVAILABLE_QUESTIONS = {
    "behavioral": [{"question": "Unable to generate questions at this time.", "suggestedAnswer": ""}],
    "technical": [],
}


@coach_router.post("/analyze-answer", response_model=AnswerAnalysisResponse)
async def analyze_answer(request: AnalyzeAnswerRequest, engine: CoachEngine = Depends(get_engine)):
    try:
        analysis = await engine.analyze_answer(
            request.question,
            request.answer,
            job_title=request.jobTitle,
            company_name=request.companyName,
        )
    except AnalysisError as e:
        logger.error(f"Error analyzing interview answer: {e.detail}")
        return UNAVAILABLE_ANALYSIS
    return analysis


@coach_router.post("/generate-questions", response_model=GeneratedQuestionsResponse)
async def generate_questions(request: GenerateQuestionsRequest, engine: CoachEngine = Depends(get_engine)):
    try:
        return await engine.generate_questions(request.jobTitle, request.skills)
    except AnalysisError as e:
        logger.error(f"Error generating interview questions: {e.detail}")
        return UNAVAILABLE_QUESTIONS
