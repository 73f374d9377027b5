"""
Async client for the career platform REST API.

Covers the interview endpoints the practice flow consumes (question bank,
question generation, answer analysis, practice persistence) and the
interview-process CRUD used by the process-details view.
"""
import logging
import time
from typing import Any, Dict, List

import httpx

from practice.config.settings import settings
from practice.storages.history_cache import PracticeHistoryCache
from practice.system.exceptions import CareerAPIError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


class CareerAPIClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        history_cache: PracticeHistoryCache | None = None,
    ):
        headers = {"Accept": "application/json"}
        token = token if token is not None else settings.CAREER_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.CAREER_API_URL,
            headers=headers,
            timeout=timeout or settings.REQUEST_TIMEOUT,
            transport=transport,
        )
        self.history_cache = history_cache or PracticeHistoryCache()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return GENERIC_ERROR
        if isinstance(body, dict):
            return body.get("message") or body.get("detail") or GENERIC_ERROR
        return GENERIC_ERROR

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        start_time = time.time()
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise CareerAPIError(f"Career API unreachable: {e}") from e

        latency = (time.time() - start_time) * 1000
        logger.info(f"{method} {path} -> {response.status_code} ({latency:.0f}ms)")

        if response.is_error:
            message = self._error_message(response)
            status_code = response.status_code if response.status_code < 500 else 502
            raise CareerAPIError(message, status_code=status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ========================================
    # Practice flow
    # ========================================

    async def get_questions(self, category: str | None = None) -> List[Dict[str, Any]]:
        params = {"category": category} if category else None
        return await self._request("GET", "/api/interview/questions", params=params)

    async def generate_questions(self, job_title: str, skills: List[str]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/interview/generate-questions",
            json={"jobTitle": job_title, "skills": skills},
        )

    async def analyze_answer(
        self,
        question: str,
        answer: str,
        job_title: str | None = None,
        company_name: str | None = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"question": question, "answer": answer}
        if job_title:
            payload["jobTitle"] = job_title
        if company_name:
            payload["companyName"] = company_name
        return await self._request("POST", "/api/interview/analyze-answer", json=payload)

    async def save_practice(self, submission: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._request("POST", "/api/interview/practice", json=submission)
        self.history_cache.invalidate()
        return result

    async def get_practice_history(self) -> List[Dict[str, Any]]:
        cached = self.history_cache.get()
        if cached is not None:
            return cached
        history = await self._request("GET", "/api/interview/practice-history")
        self.history_cache.set(history)
        return history

    # ========================================
    # Interview processes
    # ========================================

    async def get_process(self, process_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/interview/processes/{process_id}")

    async def update_process(self, process_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/interview/processes/{process_id}", json=changes)

    async def list_stages(self, process_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/interview/processes/{process_id}/stages")

    async def add_stage(self, process_id: int, stage: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/api/interview/processes/{process_id}/stages", json=stage)

    async def update_stage(self, stage_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/interview/stages/{stage_id}", json=changes)

    async def delete_stage(self, stage_id: int) -> None:
        await self._request("DELETE", f"/api/interview/stages/{stage_id}")

    async def list_followups(self, process_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/api/interview/processes/{process_id}/followups")

    async def add_followup(self, process_id: int, followup: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/api/interview/processes/{process_id}/followups", json=followup
        )

    async def set_followup_completed(self, followup_id: int, completed: bool) -> Dict[str, Any]:
        action = "complete" if completed else "uncomplete"
        return await self._request("PUT", f"/api/interview/followup-actions/{followup_id}/{action}")
