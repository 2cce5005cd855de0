import json
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from gradii.server.api.v1.code_execution import EXECUTE_RATE_LIMIT

pytestmark = pytest.mark.asyncio

EXECUTE = "/api/v1/coding/execute"


async def test_execute_success(client: AsyncClient, piston):
    response = await client.post(EXECUTE, json={"language": "python", "code": "print('hello')", "input": "x"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["output"] == "hello\n"
    assert data["language"] == "python"
    sent = json.loads(piston.requests[0].content)
    assert sent["stdin"] == "x"
    assert sent["files"][0]["name"] == "solution.py"


async def test_execute_reports_runtime_error(client: AsyncClient, piston):
    piston.execute_json = {"run": {"stdout": "", "stderr": "Traceback: boom", "code": 1}}

    response = await client.post(EXECUTE, json={"language": "python", "code": "raise SystemExit(1)"})

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "Traceback: boom"


async def test_execute_unsupported_language(client: AsyncClient, piston):
    response = await client.post(EXECUTE, json={"language": "cobol", "code": "DISPLAY 'HI'."})

    assert response.status_code == 400
    assert piston.requests == []


async def test_execute_upstream_failure(client: AsyncClient, piston):
    piston.status_code = 503

    response = await client.post(EXECUTE, json={"language": "python", "code": "print(1)"})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "UPSTREAM_ERROR"


async def test_execute_is_rate_limited_per_ip(client: AsyncClient):
    body = {"language": "python", "code": "print(1)"}
    headers = {"X-Forwarded-For": "198.51.100.9"}

    for _ in range(EXECUTE_RATE_LIMIT):
        assert (await client.post(EXECUTE, json=body, headers=headers)).status_code == 200
    limited = await client.post(EXECUTE, json=body, headers=headers)
    other_ip = await client.post(EXECUTE, json=body, headers={"X-Forwarded-For": "198.51.100.10"})

    assert limited.status_code == 429
    assert "retry-after" in limited.headers
    assert other_ip.status_code == 200


async def test_status_operational(client: AsyncClient):
    response = await client.get(EXECUTE)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "operational"
    assert data["runtime_count"] == 1
    assert set(data["supported_languages"]) == {"java", "python", "cpp", "php"}


async def test_status_unavailable(client: AsyncClient, piston):
    piston.status_code = 500

    response = await client.get(EXECUTE)

    assert response.status_code == 200
    assert response.json()["status"] == "unavailable"
    assert response.json()["runtime_count"] is None


async def test_execution_is_reported_to_monitoring(client: AsyncClient, piston):
    with patch("gradii.server.api.v1.code_execution.log_code_execution") as mock_log:
        await client.post(EXECUTE, json={"language": "python", "code": "print('hello')"})

    language, success, exit_code, duration_ms = mock_log.call_args[0]
    assert (language, success, exit_code) == ("python", True, 0)
    assert duration_ms >= 0
