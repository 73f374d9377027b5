import json

import httpx
import pytest

from practice.clients.career_api import GENERIC_ERROR, CareerAPIClient
from practice.system.exceptions import CareerAPIError


class Recorder:
    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes[(request.method, request.url.path)]
        return handler(request)


def make_client(routes, token="secret"):
    recorder = Recorder(routes)
    client = CareerAPIClient(
        base_url="http://career.test",
        token=token,
        transport=httpx.MockTransport(recorder),
    )
    return client, recorder


async def test_analyze_answer_sends_job_context_and_token():
    client, recorder = make_client({
        ("POST", "/api/interview/analyze-answer"): lambda r: httpx.Response(200, json={"overall": 4}),
    })
    result = await client.analyze_answer("Why us?", "Because.", job_title="QA", company_name="Acme")
    await client.aclose()

    body = json.loads(recorder.requests[0].content)
    assert result == {"overall": 4}
    assert body == {"question": "Why us?", "answer": "Because.", "jobTitle": "QA", "companyName": "Acme"}
    assert recorder.requests[0].headers["Authorization"] == "Bearer secret"


async def test_error_message_comes_from_response_body():
    client, _ = make_client({
        ("GET", "/api/interview/processes/9"): lambda r: httpx.Response(404, json={"message": "Process not found"}),
    })
    with pytest.raises(CareerAPIError) as exc_info:
        await client.get_process(9)
    await client.aclose()

    assert exc_info.value.detail == "Process not found"
    assert exc_info.value.status_code == 404


async def test_server_errors_map_to_bad_gateway_with_generic_message():
    client, _ = make_client({
        ("GET", "/api/interview/questions"): lambda r: httpx.Response(500, text="boom"),
    })
    with pytest.raises(CareerAPIError) as exc_info:
        await client.get_questions()
    await client.aclose()

    assert exc_info.value.detail == GENERIC_ERROR
    assert exc_info.value.status_code == 502


async def test_transport_failure_raises_career_api_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = make_client({("GET", "/api/interview/questions"): unreachable})
    with pytest.raises(CareerAPIError):
        await client.get_questions(category="technical")
    await client.aclose()


async def test_history_is_cached_until_a_practice_is_saved():
    history = [{"id": 1, "score": 120}]
    client, recorder = make_client({
        ("GET", "/api/interview/practice-history"): lambda r: httpx.Response(200, json=history),
        ("POST", "/api/interview/practice"): lambda r: httpx.Response(201, json={"id": 2}),
    })

    assert await client.get_practice_history() == history
    assert await client.get_practice_history() == history
    await client.save_practice({"score": 10, "questions": []})
    await client.get_practice_history()
    await client.aclose()

    paths = [(r.method, r.url.path) for r in recorder.requests]
    assert paths.count(("GET", "/api/interview/practice-history")) == 2


async def test_followup_completion_and_stage_delete():
    client, recorder = make_client({
        ("PUT", "/api/interview/followup-actions/4/uncomplete"): lambda r: httpx.Response(200, json={"completed": False}),
        ("DELETE", "/api/interview/stages/5"): lambda r: httpx.Response(204),
    }, token="")

    assert await client.set_followup_completed(4, False) == {"completed": False}
    assert await client.delete_stage(5) is None
    await client.aclose()

    assert "Authorization" not in recorder.requests[0].headers
