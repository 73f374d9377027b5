import logging
import uuid

from practice.config.settings import settings
from practice.core.feedback import AnswerAnalyzer, FeedbackRequester
from practice.core.models import JobContext, SessionState
from practice.core.persister import PracticeStore, SessionPersister
from practice.core.question_source import QuestionSource
from practice.core.session import PracticeSession
from practice.core.session_machine import Action, ActionType
from practice.storages.session_storage import SessionStorage
from practice.system.exceptions import SessionNotFoundError
from practice.utils.logger import PracticeLogger

logger = logging.getLogger(__name__)


class PracticeUseCase:
    def __init__(
        self,
        question_source: QuestionSource,
        analyzer: AnswerAnalyzer,
        store: PracticeStore,
        storage: SessionStorage,
        time_limit: int | None = None,
        tick_interval: float = 1.0,
        log_dir: str | None = None,
    ):
        self.question_source = question_source
        self.feedback_requester = FeedbackRequester(analyzer)
        self.persister = SessionPersister(store)
        self.storage = storage
        self.time_limit = time_limit or settings.QUESTION_TIME_LIMIT
        self.tick_interval = tick_interval
        self.log_dir = log_dir

    async def open_session(
        self,
        job: JobContext | None = None,
        category: str | None = None,
        session_id: str | None = None,
    ) -> PracticeSession:
        """
        Load questions and open a new practice dialog.

        Raises:
            QuestionSourceError: If no questions could be fetched or generated
        """
        questions = await self.question_source.load(job, category)
        session_id = session_id or f"practice_{uuid.uuid4().hex[:8]}"

        session = PracticeSession(
            session_id,
            questions,
            self.feedback_requester,
            self.persister,
            job=job,
            time_limit=self.time_limit,
            tick_interval=self.tick_interval,
            practice_logger=PracticeLogger(session_id, log_dir=self.log_dir),
        )
        self.storage.save(session_id, session)
        logger.info(f"Opened practice session {session_id} with {len(questions)} questions")
        return session

    def get_session(self, session_id: str) -> PracticeSession:
        session = self.storage.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Practice session {session_id} not found")
        return session

    async def dispatch(self, session_id: str, action: Action) -> SessionState:
        session = self.get_session(session_id)
        state = await session.dispatch(action)
        if session.closed:
            self.storage.delete(session_id)
        return state

    async def submit_answer(self, session_id: str, answer: str | None = None) -> SessionState:
        session = self.get_session(session_id)
        await session.dispatch(Action(ActionType.SUBMIT_ANSWER, answer=answer))
        return await session.wait_for_feedback()

    async def save_session(self, session_id: str) -> SessionState:
        return await self.dispatch(session_id, Action(ActionType.FINISH))

    async def close_session(self, session_id: str) -> SessionState:
        session = self.get_session(session_id)
        state = await session.close()
        self.storage.delete(session_id)
        return state
