from typing import Dict, List

from practice.core.session import PracticeSession


class SessionStorage:
    def __init__(self):
        self._sessions: Dict[str, PracticeSession] = {}

    def save(self, session_id: str, session: PracticeSession) -> None:
        self._sessions[session_id] = session

    def get(self, session_id: str) -> PracticeSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        if session_id in self._sessions:
            del self._sessions[session_id]

    def exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def list_ids(self) -> List[str]:
        return list(self._sessions.keys())
