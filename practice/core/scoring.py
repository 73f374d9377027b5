"""
Score and confidence rules for a practice session.

Every function here is pure; the session reducer applies them at the
transition points only, so the running score is always the sum of the
increments applied so far.
"""
import math

from practice.core.models import AnswerAnalysis

BASE_ADVANCE_SCORE = 100
SKIP_PENALTY = 50
HELPFUL_BONUS = 10
POINTS_PER_RATING = 20
CONFIDENCE_BONUS_PER_LEVEL = 5
TIME_BONUS_DIVISOR = 10

DEFAULT_CONFIDENCE = 3
MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5

LONG_ANSWER_THRESHOLD = 50

TIME_EXPIRED_FEEDBACK = (
    "Time expired! It's important to practice answering questions concisely within "
    "the allocated time. Try to structure your answers more efficiently next time."
)

DETAILED_ANSWER_FEEDBACK = (
    "Your answer is detailed and shows good preparation. You've addressed the key points "
    "effectively. To elevate your response, consider structuring it using the STAR method "
    "(Situation, Task, Action, Result) for maximum impact."
)

SHORT_ANSWER_FEEDBACK = (
    "Your answer provides basic information but could benefit from more depth. Consider "
    "expanding with specific examples and achievements. Quantify your impact whenever possible."
)

NO_ANSWER_FEEDBACK = (
    "You didn't provide an answer. Remember, even if you're not perfectly prepared, "
    "attempting to answer helps you practice thinking on your feet."
)


def clamp_confidence(value: int) -> int:
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, value))


def feedback_points(overall: int) -> int:
    """Convert a 1-5 overall rating into score points (out of 100)."""
    return overall * POINTS_PER_RATING


def advance_bonus(time_remaining: int, confidence: int | None) -> int:
    time_bonus = max(0, time_remaining // TIME_BONUS_DIVISOR)
    confidence_bonus = (confidence or DEFAULT_CONFIDENCE) * CONFIDENCE_BONUS_PER_LEVEL
    return BASE_ADVANCE_SCORE + time_bonus + confidence_bonus


def apply_skip_penalty(score: int) -> int:
    return max(0, score - SKIP_PENALTY)


def derive_confidence(analysis: AnswerAnalysis) -> tuple[int, int]:
    """
    Derive confidence levels from an answer analysis.

    Returns:
        Tuple of (confidence for the answered question, baseline for the next one)
    """
    average = (analysis["clarity"] + analysis["relevance"] + analysis["overall"]) / 3
    current = clamp_confidence(math.ceil(average))
    boost = 1 if analysis["overall"] > 3 else 0
    return current, clamp_confidence(current + boost)


def fallback_confidence(current: int | None) -> int:
    return clamp_confidence((current or DEFAULT_CONFIDENCE) + 1)


def fallback_feedback(answer_length: int) -> str:
    """Length-only feedback used when the analysis backend is unavailable."""
    if answer_length > LONG_ANSWER_THRESHOLD:
        return DETAILED_ANSWER_FEEDBACK
    if answer_length > 0:
        return SHORT_ANSWER_FEEDBACK
    return NO_ANSWER_FEEDBACK
