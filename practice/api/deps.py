from practice.clients.career_api import CareerAPIClient
from practice.config.settings import settings
from practice.core.engine import CoachEngine
from practice.core.question_source import QuestionSource
from practice.core.use_case import PracticeUseCase
from practice.storages.session_storage import SessionStorage

_client: CareerAPIClient | None = None
_engine: CoachEngine | None = None
_storage: SessionStorage | None = None
_use_case: PracticeUseCase | None = None


def get_client() -> CareerAPIClient:
    global _client
    if _client is None:
        _client = CareerAPIClient()
    return _client


def get_engine() -> CoachEngine:
    global _engine
    if _engine is None:
        _engine = CoachEngine()
    return _engine


def get_storage() -> SessionStorage:
    global _storage
    if _storage is None:
        _storage = SessionStorage()
    return _storage


def get_use_case() -> PracticeUseCase:
    global _use_case
    if _use_case is None:
        client = get_client()
        if settings.ANALYZER_BACKEND == "mistral":
            engine = get_engine()
            question_source = QuestionSource(client, generator=engine)
            analyzer = engine
        else:
            question_source = QuestionSource(client)
            analyzer = client
        _use_case = PracticeUseCase(
            question_source,
            analyzer,
            client,
            get_storage(),
            log_dir=settings.LOG_DIR,
        )
    return _use_case


async def shutdown() -> None:
    global _client, _use_case
    storage = get_storage()
    for session_id in storage.list_ids():
        session = storage.get(session_id)
        if session is not None:
            await session.close()
        storage.delete(session_id)
    if _client is not None:
        await _client.aclose()
    _client = None
    _use_case = None
