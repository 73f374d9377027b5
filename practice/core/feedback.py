"""
Feedback requester for practice answers.

Sends the candidate's answer to an analyzer (the career API or the local
coach engine), validates the structured result and turns the outcome into a
session action. A failed request becomes FEEDBACK_FAILED so the session can
fall back to its length-based feedback; nothing raised by the analyzer
escapes request().
"""
import logging
from typing import Any, Dict, List, Protocol

from practice.core.models import AnswerAnalysis, JobContext
from practice.core.scoring import MAX_CONFIDENCE, MIN_CONFIDENCE
from practice.core.session_machine import Action, ActionType
from practice.system.exceptions import AnalysisError

logger = logging.getLogger(__name__)

DEFAULT_RATING = 3
DEFAULT_FEEDBACK = "No feedback available."


class AnswerAnalyzer(Protocol):
    async def analyze_answer(
        self,
        question: str,
        answer: str,
        job_title: str | None = None,
        company_name: str | None = None,
    ) -> Dict[str, Any]:
        ...


def _rating(value: Any) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return DEFAULT_RATING
    if rating == 0:
        return DEFAULT_RATING
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, rating))


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def normalize_analysis(raw: Any) -> AnswerAnalysis:
    """
    Validate an analyzer response.

    Ratings are coerced into 1-5 (missing or unparsable ones become 3) and
    list fields are reduced to lists of strings.

    Raises:
        AnalysisError: If the response is not a JSON object
    """
    if not isinstance(raw, dict):
        raise AnalysisError(f"Unexpected analysis payload: {type(raw).__name__}")

    analysis: AnswerAnalysis = {
        "feedback": str(raw.get("feedback") or DEFAULT_FEEDBACK),
        "clarity": _rating(raw.get("clarity")),
        "relevance": _rating(raw.get("relevance")),
        "overall": _rating(raw.get("overall")),
        "strengths": _strings(raw.get("strengths")),
        "areasForImprovement": _strings(raw.get("areasForImprovement")),
    }
    if raw.get("suggestedResponse"):
        analysis["suggestedResponse"] = str(raw["suggestedResponse"])
    return analysis


class FeedbackRequester:
    def __init__(self, analyzer: AnswerAnalyzer):
        self.analyzer = analyzer

    async def request(
        self,
        token: int,
        question: str,
        answer: str,
        job: JobContext | None = None,
    ) -> Action:
        """
        Analyze an answer and build the action that folds the result into the session.

        Args:
            token: Feedback generation token the response belongs to
            question: The question text
            answer: The candidate's answer
            job: Optional job context for the analysis

        Returns:
            FEEDBACK_RECEIVED with the analysis, or FEEDBACK_FAILED
        """
        job = job or {}
        try:
            raw = await self.analyzer.analyze_answer(
                question,
                answer,
                job_title=job.get("position"),
                company_name=job.get("companyName"),
            )
            analysis = normalize_analysis(raw)
        except Exception as e:
            logger.warning(f"Answer analysis failed, falling back to local feedback: {e}")
            return Action(ActionType.FEEDBACK_FAILED, token=token, error=str(e))

        logger.info(
            f"Answer analysed: clarity={analysis['clarity']} relevance={analysis['relevance']} "
            f"overall={analysis['overall']}"
        )
        return Action(ActionType.FEEDBACK_RECEIVED, token=token, analysis=analysis)
