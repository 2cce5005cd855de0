"""Unit tests for the Piston code execution client."""

import json
from typing import Any, Dict, List

import httpx
import pytest

from gradii.core.errors import UpstreamServiceError, ValidationError
from gradii.integrations.piston import SUPPORTED_RUNTIMES, PistonClient

BASE_URL = "http://mock-piston"


def _client(handler) -> PistonClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PistonClient(BASE_URL, client=http)


@pytest.mark.asyncio
async def test_execute_success_sends_pinned_runtime():
    seen: List[Dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/execute"
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"run": {"stdout": "42\n", "stderr": "", "code": 0}})

    client = _client(handler)
    result = await client.execute("Python", "print(42)", stdin="x")
    await client.aclose()

    assert result.success is True
    assert result.output == "42\n"
    assert result.error == ""
    assert result.version == SUPPORTED_RUNTIMES["python"].version
    payload = seen[0]
    assert payload["language"] == "python"
    assert payload["files"] == [{"name": "solution.py", "content": "print(42)"}]
    assert payload["stdin"] == "x"
    assert payload["run_timeout"] == 3000


@pytest.mark.asyncio
async def test_execute_without_output_reports_placeholder():
    client = _client(lambda request: httpx.Response(200, json={"run": {"stdout": "", "stderr": "", "code": 0}}))

    result = await client.execute("python", "x = 1")

    assert result.success is True
    assert result.output == "Code executed successfully (no output)"


@pytest.mark.asyncio
async def test_execute_compile_error():
    body = {
        "compile": {"stdout": "", "stderr": "Solution.java:1: error: ';' expected", "code": 1},
        "run": {"stdout": "", "stderr": "", "code": None},
    }
    client = _client(lambda request: httpx.Response(200, json=body))

    result = await client.execute("java", "class Solution {")

    assert result.success is False
    assert "expected" in result.error
    assert result.exit_code == 1


@pytest.mark.asyncio
async def test_execute_runtime_error():
    body = {"run": {"stdout": "partial", "stderr": "ZeroDivisionError", "code": 1}}
    client = _client(lambda request: httpx.Response(200, json=body))

    result = await client.execute("python", "1/0")

    assert result.success is False
    assert result.output == "partial"
    assert result.error == "ZeroDivisionError"


@pytest.mark.asyncio
async def test_execute_non_2xx_raises_upstream_error():
    client = _client(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(UpstreamServiceError) as exc_info:
        await client.execute("python", "print(1)")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_execute_transport_error_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)

    with pytest.raises(UpstreamServiceError):
        await client.execute("python", "print(1)")


@pytest.mark.asyncio
@pytest.mark.parametrize("language,code", [("ruby", "puts 1"), ("python", "   ")])
async def test_execute_rejects_bad_input_without_calling_piston(language, code):
    calls: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = _client(handler)

    with pytest.raises(ValidationError):
        await client.execute(language, code)
    assert calls == []


@pytest.mark.asyncio
async def test_runtimes_counts_entries():
    runtimes = [{"language": "python", "version": "3.10.0"}, {"language": "java", "version": "15.0.2"}]
    client = _client(lambda request: httpx.Response(200, json=runtimes))

    assert await client.runtimes() == 2


def test_supported_languages():
    assert set(PistonClient.supported_languages()) == {"java", "python", "cpp", "php"}
