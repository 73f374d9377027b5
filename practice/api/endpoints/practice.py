import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from practice.api.deps import get_use_case
from practice.api.schemas import (
    AnswerRequest,
    OpenSessionRequest,
    RateFeedbackRequest,
    SessionStateResponse,
    SubmitRequest,
)
from practice.core.models import SessionState
from practice.core.session import PracticeSession
from practice.core.session_machine import Action, ActionType
from practice.core.use_case import PracticeUseCase
from practice.system.exceptions import BaseHTTPException

logger = logging.getLogger(__name__)
practice_router = APIRouter()


def _present(use_case: PracticeUseCase, session_id: str, state: SessionState) -> SessionStateResponse:
    return SessionStateResponse.from_state(state, closed=not use_case.storage.exists(session_id))


@practice_router.post("/sessions", response_model=SessionStateResponse, status_code=201)
async def open_session(
    request: OpenSessionRequest | None = None,
    use_case: PracticeUseCase = Depends(get_use_case),
):
    request = request or OpenSessionRequest()
    job = request.job.model_dump(exclude_none=True) if request.job else None
    session = await use_case.open_session(job=job, category=request.category)
    return _present(use_case, session.session_id, session.state)


@practice_router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    session = use_case.get_session(session_id)
    return _present(use_case, session_id, session.state)


@practice_router.delete("/sessions/{session_id}", response_model=SessionStateResponse)
async def discard_session(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.close_session(session_id)
    return SessionStateResponse.from_state(state, closed=True)


@practice_router.post("/sessions/{session_id}/start", response_model=SessionStateResponse)
async def start_question(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.dispatch(session_id, Action(ActionType.START_QUESTION))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/answer", response_model=SessionStateResponse)
async def update_answer(
    session_id: str,
    request: AnswerRequest,
    use_case: PracticeUseCase = Depends(get_use_case),
):
    state = await use_case.dispatch(session_id, Action(ActionType.UPDATE_ANSWER, answer=request.answer))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/hint", response_model=SessionStateResponse)
async def toggle_hint(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.dispatch(session_id, Action(ActionType.TOGGLE_HINT))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/submit", response_model=SessionStateResponse)
async def submit_answer(
    session_id: str,
    request: SubmitRequest | None = None,
    use_case: PracticeUseCase = Depends(get_use_case),
):
    answer = request.answer if request else None
    state = await use_case.submit_answer(session_id, answer)
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/skip", response_model=SessionStateResponse)
async def skip_question(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.dispatch(session_id, Action(ActionType.SKIP))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/next", response_model=SessionStateResponse)
async def next_question(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.dispatch(session_id, Action(ActionType.ADVANCE))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/rate", response_model=SessionStateResponse)
async def rate_feedback(
    session_id: str,
    request: RateFeedbackRequest,
    use_case: PracticeUseCase = Depends(get_use_case),
):
    state = await use_case.dispatch(session_id, Action(ActionType.RATE_FEEDBACK, helpful=request.helpful))
    return _present(use_case, session_id, state)


@practice_router.post("/sessions/{session_id}/save", response_model=SessionStateResponse)
async def save_session(session_id: str, use_case: PracticeUseCase = Depends(get_use_case)):
    state = await use_case.save_session(session_id)
    return _present(use_case, session_id, state)


@practice_router.get("/history")
async def practice_history(use_case: PracticeUseCase = Depends(get_use_case)):
    return await use_case.persister.store.get_practice_history()


WS_ACTIONS = {
    "start": ActionType.START_QUESTION,
    "answer": ActionType.UPDATE_ANSWER,
    "hint": ActionType.TOGGLE_HINT,
    "submit": ActionType.SUBMIT_ANSWER,
    "skip": ActionType.SKIP,
    "next": ActionType.ADVANCE,
    "rate": ActionType.RATE_FEEDBACK,
    "save": ActionType.FINISH,
}


async def _send(websocket: WebSocket, payload: dict) -> None:
    await websocket.send_text(json.dumps(payload, ensure_ascii=False))


async def websocket_practice(websocket: WebSocket, use_case: PracticeUseCase = Depends(get_use_case)):
    logger.info(f"WebSocket connection attempt from {websocket.client}")
    await websocket.accept()

    session: PracticeSession | None = None

    async def push_state(state: SessionState) -> None:
        closed = session is None or session.closed
        await _send(websocket, {
            "type": "state",
            "state": SessionStateResponse.from_state(state, closed=closed).model_dump(),
        })

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await _send(websocket, {"type": "error", "message": "Messages must be JSON"})
                continue
            if not isinstance(message, dict):
                await _send(websocket, {"type": "error", "message": "Messages must be JSON objects"})
                continue

            action = message.get("action")

            try:
                if action == "open":
                    if session is not None:
                        session.remove_listener(push_state)
                    session = await use_case.open_session(job=message.get("job"), category=message.get("category"))
                    session.add_listener(push_state)
                    await _send(websocket, {"type": "session_id", "session_id": session.session_id})
                    await push_state(session.state)

                elif action == "resume":
                    if session is not None:
                        session.remove_listener(push_state)
                    session = use_case.get_session(message.get("session_id", ""))
                    session.add_listener(push_state)
                    await push_state(session.state)

                elif session is None:
                    await _send(websocket, {"type": "error", "message": "No practice session. Open one first."})

                elif action == "close":
                    await use_case.close_session(session.session_id)

                elif action in WS_ACTIONS:
                    await use_case.dispatch(session.session_id, Action(
                        WS_ACTIONS[action],
                        answer=message.get("answer"),
                        helpful=message.get("helpful"),
                    ))

                elif action == "get_state":
                    await push_state(session.state)

                else:
                    await _send(websocket, {"type": "error", "message": f"Unknown action: {action}"})

            except BaseHTTPException as e:
                await _send(websocket, {"type": "error", "status": e.status_code, "message": e.detail})

    except WebSocketDisconnect:
        if session is not None:
            session.remove_listener(push_state)
            logger.info(f"WebSocket disconnected for session {session.session_id}, session preserved")
