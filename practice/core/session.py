import asyncio
import logging
from typing import Awaitable, Callable, List

from practice.core.feedback import FeedbackRequester
from practice.core.models import JobContext, Phase, Question, SessionState
from practice.core.persister import SessionPersister
from practice.core.session_machine import (
    Action,
    ActionType,
    Effect,
    current_record,
    initial_state,
    reduce,
)
from practice.core.timer import Countdown
from practice.utils.logger import PracticeLogger

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], Awaitable[None]]


class PracticeSession:
    """
    Owns one open practice dialog: its state, countdown and in-flight requests.

    All changes go through dispatch(), which runs the reducer and then the
    effects it asked for. Timer start/stop effects run before dispatch()
    returns; the feedback request runs as a background task whose result is
    dispatched back with the token it was issued for.
    """

    def __init__(
        self,
        session_id: str,
        questions: List[Question],
        feedback_requester: FeedbackRequester,
        persister: SessionPersister,
        job: JobContext | None = None,
        time_limit: int = 120,
        tick_interval: float = 1.0,
        practice_logger: PracticeLogger | None = None,
    ):
        self.session_id = session_id
        self.feedback_requester = feedback_requester
        self.persister = persister
        self.logger = practice_logger or PracticeLogger(session_id, log_dir=None)
        self.countdown = Countdown(self._on_tick, interval=tick_interval)
        self.closed = False

        self._state = initial_state(session_id, questions, job=job, time_limit=time_limit)
        self._listeners: List[StateListener] = []
        self._feedback_task: asyncio.Task | None = None

        self.logger.log("Questions", f"Session opened with {len(questions)} questions", {
            "job": (job or {}).get("position"),
        })

    @property
    def state(self) -> SessionState:
        return self._state

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def dispatch(self, action: Action) -> SessionState:
        """
        Apply an action and run its effects.

        Raises:
            InvalidTransitionError: If the action is not valid in the current phase
        """
        previous = self._state
        transition = reduce(previous, action)
        if not transition.accepted:
            if action.type != ActionType.TICK:
                self.logger.log("Session", f"Discarded {action.type.value}", {"phase": previous["phase"].value})
            return self._state

        self._state = transition.state
        if previous["phase"] != self._state["phase"]:
            self.logger.log_state_transition(previous["phase"].value, self._state["phase"].value, action.type.value)
        if previous["score"] != self._state["score"]:
            self.logger.log_metric("score", self._state["score"])

        for effect in transition.effects:
            await self._run_effect(effect)

        await self._notify()
        return self._state

    async def _run_effect(self, effect: Effect) -> None:
        if effect == Effect.STOP_TIMER:
            self.countdown.stop()
        elif effect == Effect.START_TIMER:
            self.countdown.start()
            self.logger.log("Timer", f"Countdown started ({self._state['time_remaining']}s)")
        elif effect == Effect.REQUEST_FEEDBACK:
            self._start_feedback_request()
        elif effect == Effect.PERSIST:
            self.logger.log("Persister", "Saving practice session", {"score": self._state["score"]})
            outcome = await self.persister.persist(self._state)
            if self.closed:
                self.logger.log("Persister", f"Discarded {outcome.type.value}, session already closed")
                return
            await self.dispatch(outcome)
        elif effect == Effect.CLOSE:
            self.logger.mark_saved()
            await self.close()

    def _start_feedback_request(self) -> None:
        record = current_record(self._state)
        token = self._state["feedback_token"]
        self.logger.log("Feedback", "Requesting answer analysis", {"token": token})
        self._feedback_task = asyncio.get_running_loop().create_task(
            self._request_feedback(token, record["question"].get("question", ""), record["answer"])
        )

    async def _request_feedback(self, token: int, question: str, answer: str) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        outcome = await self.feedback_requester.request(token, question, answer, self._state["job"])
        self.logger.log_latency("Feedback", (loop.time() - started) * 1000)
        if self.closed:
            return
        await self.dispatch(outcome)

    async def wait_for_feedback(self) -> SessionState:
        task = self._feedback_task
        if task is not None and not task.done():
            await asyncio.wait({task})
        return self._state

    async def _on_tick(self) -> None:
        await self.dispatch(Action(ActionType.TICK))
        if self._state["phase"] == Phase.QUESTION and self._state["time_remaining"] <= 0:
            self.logger.log("Timer", "Time expired")
            await self.dispatch(Action(ActionType.TIMER_EXPIRED))

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                await listener(self._state)
            except Exception as e:
                logger.warning(f"Dropping state listener for {self.session_id}: {e}")
                self.remove_listener(listener)

    async def close(self) -> SessionState:
        """Discard the dialog: stop the countdown, drop pending feedback and reset state."""
        if self.closed:
            return self._state
        self.closed = True
        self.countdown.stop()
        task, self._feedback_task = self._feedback_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self._state = reduce(self._state, Action(ActionType.CLOSE)).state
        self.logger.log("Session", "Session closed", {"saved": self._state["saved"]})
        await self._notify()
        return self._state
