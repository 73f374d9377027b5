import logging
from datetime import datetime, timezone
from typing import Any, Dict, Protocol

from practice.core.models import SessionState
from practice.core.session_machine import Action, ActionType, build_submission
from practice.system.exceptions import BaseHTTPException

logger = logging.getLogger(__name__)


class PracticeStore(Protocol):
    async def save_practice(self, submission: Dict[str, Any]) -> Dict[str, Any]:
        ...


class SessionPersister:
    """Submits a finished session and reports the outcome as a session action."""

    def __init__(self, store: PracticeStore):
        self.store = store

    async def persist(self, state: SessionState) -> Action:
        submission = build_submission(state, datetime.now(timezone.utc).isoformat())
        try:
            await self.store.save_practice(submission)
        except BaseHTTPException as e:
            logger.error(f"Saving practice session {state['session_id']} failed: {e.detail}")
            return Action(ActionType.SAVE_FAILED, error=e.detail)
        except Exception as e:
            logger.error(f"Saving practice session {state['session_id']} failed: {e}", exc_info=True)
            return Action(ActionType.SAVE_FAILED, error=str(e) or "Unknown error")

        logger.info(f"Practice session {state['session_id']} saved with score {state['score']}")
        return Action(ActionType.SAVE_SUCCEEDED)
