"""
Practice session state machine.

The whole session lives in a single SessionState. Every change goes through
reduce(), which takes the current state and a typed Action and returns a
Transition: the next state plus the side effects the caller must run
(timer start/stop, feedback request, persisting, closing). reduce() never
performs I/O and never mutates its input.
"""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

from practice.core.models import AnswerAnalysis, JobContext, Notice, Phase, Question, QuestionRecord, SessionState
from practice.core.scoring import (
    DEFAULT_CONFIDENCE,
    HELPFUL_BONUS,
    TIME_EXPIRED_FEEDBACK,
    advance_bonus,
    apply_skip_penalty,
    derive_confidence,
    fallback_confidence,
    fallback_feedback,
    feedback_points,
)
from practice.system.exceptions import InvalidTransitionError

HINT_WORDS = 15


class ActionType(str, Enum):
    START_QUESTION = "START_QUESTION"
    UPDATE_ANSWER = "UPDATE_ANSWER"
    TOGGLE_HINT = "TOGGLE_HINT"
    TICK = "TICK"
    SUBMIT_ANSWER = "SUBMIT_ANSWER"
    TIMER_EXPIRED = "TIMER_EXPIRED"
    FEEDBACK_RECEIVED = "FEEDBACK_RECEIVED"
    FEEDBACK_FAILED = "FEEDBACK_FAILED"
    SKIP = "SKIP"
    ADVANCE = "ADVANCE"
    RATE_FEEDBACK = "RATE_FEEDBACK"
    FINISH = "FINISH"
    SAVE_SUCCEEDED = "SAVE_SUCCEEDED"
    SAVE_FAILED = "SAVE_FAILED"
    CLOSE = "CLOSE"


class Effect(str, Enum):
    START_TIMER = "start_timer"
    STOP_TIMER = "stop_timer"
    REQUEST_FEEDBACK = "request_feedback"
    PERSIST = "persist"
    CLOSE = "close"


@dataclass(frozen=True)
class Action:
    type: ActionType
    answer: str | None = None
    token: int | None = None
    analysis: AnswerAnalysis | None = None
    helpful: bool | None = None
    error: str | None = None


@dataclass
class Transition:
    state: SessionState
    effects: List[Effect] = field(default_factory=list)
    accepted: bool = True


def _empty_record(question: Question) -> QuestionRecord:
    return {
        "question": question,
        "answer": "",
        "feedback": None,
        "analysis": None,
        "confidence": None,
        "rating": None,
        "helpful_awarded": False,
    }


def initial_state(
    session_id: str,
    questions: List[Question],
    job: JobContext | None = None,
    time_limit: int = 120,
) -> SessionState:
    return {
        "session_id": session_id,
        "job": job,
        "records": [_empty_record(q) for q in questions],
        "current_question_index": 0,
        "phase": Phase.INTRO,
        "score": 0,
        "time_limit": time_limit,
        "time_remaining": time_limit,
        "show_hint": False,
        "feedback_token": 0,
        "feedback_pending": False,
        "saving": False,
        "saved": False,
        "notice": None,
    }


def current_record(state: SessionState) -> QuestionRecord:
    return state["records"][state["current_question_index"]]


def is_last_question(state: SessionState) -> bool:
    return state["current_question_index"] >= len(state["records"]) - 1


def has_answer(record: QuestionRecord) -> bool:
    return bool(record["answer"] and record["answer"].strip())


def hint_for(record: QuestionRecord) -> str | None:
    suggested = record["question"].get("suggestedAnswer")
    if not suggested:
        return None
    return " ".join(suggested.split(" ")[:HINT_WORDS]) + "..."


def _notice(title: str, description: str, destructive: bool = False) -> Notice:
    return {
        "title": title,
        "description": description,
        "variant": "destructive" if destructive else "default",
    }


def _require(state: SessionState, action: Action, *phases: Phase) -> None:
    if state["phase"] not in phases:
        allowed = ", ".join(p.value for p in phases)
        raise InvalidTransitionError(
            f"{action.type.value} is not allowed in phase '{state['phase'].value}' (expected {allowed})"
        )


def _move_on(state: SessionState) -> None:
    if is_last_question(state):
        state["phase"] = Phase.SUMMARY
    else:
        state["current_question_index"] += 1
        state["phase"] = Phase.INTRO
    state["show_hint"] = False


def _start_question(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.INTRO)
    if not state["records"]:
        raise InvalidTransitionError("Session has no questions")
    state["phase"] = Phase.QUESTION
    state["time_remaining"] = state["time_limit"]
    state["show_hint"] = False
    state["notice"] = None
    return Transition(state, [Effect.START_TIMER])


def _update_answer(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.QUESTION)
    current_record(state)["answer"] = action.answer or ""
    return Transition(state)


def _toggle_hint(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.QUESTION)
    state["show_hint"] = not state["show_hint"]
    return Transition(state)


def _tick(state: SessionState, action: Action) -> Transition:
    if state["phase"] != Phase.QUESTION:
        return Transition(state, accepted=False)
    state["time_remaining"] = max(0, state["time_remaining"] - 1)
    return Transition(state)


def _submit_answer(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.QUESTION)
    record = current_record(state)
    if action.answer is not None:
        record["answer"] = action.answer
    if not has_answer(record):
        raise InvalidTransitionError("Cannot submit an empty answer")
    state["phase"] = Phase.FEEDBACK
    state["feedback_token"] += 1
    state["feedback_pending"] = True
    return Transition(state, [Effect.STOP_TIMER, Effect.REQUEST_FEEDBACK])


def _timer_expired(state: SessionState, action: Action) -> Transition:
    if state["phase"] != Phase.QUESTION:
        return Transition(state, accepted=False)
    state["time_remaining"] = 0
    record = current_record(state)
    if has_answer(record):
        record["feedback"] = TIME_EXPIRED_FEEDBACK
        state["phase"] = Phase.FEEDBACK
    else:
        _move_on(state)
    return Transition(state, [Effect.STOP_TIMER])


def _is_live_response(state: SessionState, action: Action) -> bool:
    return (
        state["phase"] == Phase.FEEDBACK
        and state["feedback_pending"]
        and action.token == state["feedback_token"]
    )


def _set_next_confidence(state: SessionState, confidence: int) -> None:
    next_index = state["current_question_index"] + 1
    if next_index < len(state["records"]):
        state["records"][next_index]["confidence"] = confidence


def _feedback_received(state: SessionState, action: Action) -> Transition:
    if not _is_live_response(state, action):
        return Transition(state, accepted=False)
    analysis = action.analysis
    record = current_record(state)
    current, following = derive_confidence(analysis)

    record["analysis"] = analysis
    record["feedback"] = analysis.get("feedback") or ""
    record["confidence"] = current
    _set_next_confidence(state, following)
    state["score"] += feedback_points(analysis["overall"])
    state["feedback_pending"] = False
    return Transition(state)


def _feedback_failed(state: SessionState, action: Action) -> Transition:
    if not _is_live_response(state, action):
        return Transition(state, accepted=False)
    record = current_record(state)
    record["feedback"] = fallback_feedback(len(record["answer"] or ""))
    _set_next_confidence(state, fallback_confidence(record["confidence"]))
    state["feedback_pending"] = False
    state["notice"] = _notice(
        "Error", "Failed to get AI feedback. Using simpler analysis instead.", destructive=True
    )
    return Transition(state)


def _skip(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.QUESTION)
    state["score"] = apply_skip_penalty(state["score"])
    _move_on(state)
    return Transition(state, [Effect.STOP_TIMER])


def _advance(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.FEEDBACK)
    record = current_record(state)
    if record["feedback"]:
        state["score"] += advance_bonus(state["time_remaining"], record["confidence"])
    # a response for this question arriving later must not be applied
    state["feedback_token"] += 1
    state["feedback_pending"] = False
    _move_on(state)
    return Transition(state)


def _rate_feedback(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.FEEDBACK)
    record = current_record(state)
    if not record["feedback"]:
        raise InvalidTransitionError("There is no feedback to rate yet")
    if action.helpful and not record["helpful_awarded"]:
        state["score"] += HELPFUL_BONUS
        record["helpful_awarded"] = True
    record["rating"] = "helpful" if action.helpful else "not-helpful"
    return Transition(state)


def _finish(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.SUMMARY)
    if state["saving"] or state["saved"]:
        raise InvalidTransitionError("Practice session is already being saved")
    state["saving"] = True
    state["notice"] = None
    return Transition(state, [Effect.PERSIST])


def _save_succeeded(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.SUMMARY)
    state["saving"] = False
    state["saved"] = True
    state["notice"] = _notice(
        "Practice Completed!", "Your interview practice session has been saved successfully"
    )
    return Transition(state, [Effect.CLOSE])


def _save_failed(state: SessionState, action: Action) -> Transition:
    _require(state, action, Phase.SUMMARY)
    state["saving"] = False
    state["notice"] = _notice(
        "Error",
        f"Failed to save practice session: {action.error or 'Unknown error'}",
        destructive=True,
    )
    return Transition(state)


def _close(state: SessionState, action: Action) -> Transition:
    reset = initial_state(
        state["session_id"],
        [record["question"] for record in state["records"]],
        job=state["job"],
        time_limit=state["time_limit"],
    )
    reset["feedback_token"] = state["feedback_token"] + 1
    reset["saved"] = state["saved"]
    reset["notice"] = state["notice"] if state["saved"] else None
    return Transition(reset, [Effect.STOP_TIMER])


_HANDLERS: Dict[ActionType, Callable[[SessionState, Action], Transition]] = {
    ActionType.START_QUESTION: _start_question,
    ActionType.UPDATE_ANSWER: _update_answer,
    ActionType.TOGGLE_HINT: _toggle_hint,
    ActionType.TICK: _tick,
    ActionType.SUBMIT_ANSWER: _submit_answer,
    ActionType.TIMER_EXPIRED: _timer_expired,
    ActionType.FEEDBACK_RECEIVED: _feedback_received,
    ActionType.FEEDBACK_FAILED: _feedback_failed,
    ActionType.SKIP: _skip,
    ActionType.ADVANCE: _advance,
    ActionType.RATE_FEEDBACK: _rate_feedback,
    ActionType.FINISH: _finish,
    ActionType.SAVE_SUCCEEDED: _save_succeeded,
    ActionType.SAVE_FAILED: _save_failed,
    ActionType.CLOSE: _close,
}


def reduce(state: SessionState, action: Action) -> Transition:
    """
    Apply an action to a session state.

    Args:
        state: The current state (left untouched)
        action: The action to apply

    Returns:
        Transition with the next state and the effects to run

    Raises:
        InvalidTransitionError: If the action is not valid in the current phase
    """
    handler = _HANDLERS[action.type]
    return handler(copy.deepcopy(state), action)


def build_submission(state: SessionState, session_date: str) -> Dict[str, Any]:
    """Build the payload the career API expects for a finished practice session."""
    job = state["job"] or {}
    return {
        "processId": job.get("id"),
        "questions": [
            {
                "question": record["question"].get("question", ""),
                "answer": record["answer"] or "",
                "feedback": record["feedback"] or "",
                "confidence": record["confidence"] or DEFAULT_CONFIDENCE,
            }
            for record in state["records"]
        ],
        "sessionDate": session_date,
        "score": state["score"],
    }
