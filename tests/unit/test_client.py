"""End-to-end tests for SVGMakerClient's request pipeline.

The HTTP layer is an httpx.MockTransport; retry sleeps are recorded
instead of awaited.
"""

import json
from unittest.mock import patch

import httpx
import pytest

from svgmaker import ClientConfig, ErrorKind, SVGMakerClient, SVGMakerError
from svgmaker.responses import ApiResult
from svgmaker.transport import Operation


class ScriptedServer:
    """Serves queued responses in order and records requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(server, **overrides):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(server))
    overrides.setdefault("base_url", "https://api.test")
    return SVGMakerClient("test-key", http_client=http_client, **overrides)


@pytest.fixture
def sleep_calls():
    calls = []

    async def mock_sleep(delay):
        calls.append(delay)

    with (
        patch("svgmaker.retry.asyncio.sleep", side_effect=mock_sleep),
        patch("svgmaker.retry.random.uniform", return_value=0),
    ):
        yield calls


class TestConstruction:
    def test_requires_api_key(self):
        with pytest.raises(SVGMakerError) as exc_info:
            SVGMakerClient("")
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_overrides_applied_to_config(self):
        client = SVGMakerClient("k", timeout=10.0, rate_limit=5)
        assert client.config.api_key == "k"
        assert client.config.timeout == 10.0
        assert client.config.rate_limit == 5

    def test_base_config_combined_with_overrides(self):
        base = ClientConfig(max_retries=1, base_url="https://staging.test")
        client = SVGMakerClient("k", base, timeout=3.0)
        assert client.config.max_retries == 1
        assert client.config.base_url == "https://staging.test"
        assert client.config.timeout == 3.0

    def test_unknown_option_rejected(self):
        with pytest.raises(SVGMakerError, match="bogus"):
            SVGMakerClient("k", bogus=True)


class TestPipeline:
    """Rate limiter, retry wrapper and transport working together."""

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_succeeds(self, sleep_calls):
        """500, 500, then a success envelope: three calls, two sleeps."""
        server = ScriptedServer(
            httpx.Response(500, json={"error": "boom"}),
            httpx.Response(500, json={"error": "boom"}),
            httpx.Response(200, json={"success": True, "data": {"id": 7}}),
        )
        client = make_client(server, max_retries=2)

        result = await client.execute(Operation("GET", "/v1/account"))

        assert isinstance(result, ApiResult)
        assert result.data == {"id": 7}
        assert len(server.requests) == 3
        assert len(sleep_calls) == 2

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_error(self, sleep_calls):
        server = ScriptedServer(
            httpx.Response(503, json={"error": "first"}),
            httpx.Response(502, json={"error": "second"}),
        )
        client = make_client(server, max_retries=1)

        with pytest.raises(SVGMakerError) as exc_info:
            await client.execute(Operation("GET", "/x"))

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "second"

    @pytest.mark.asyncio
    async def test_auth_error_not_retried(self, sleep_calls):
        server = ScriptedServer(
            httpx.Response(
                401,
                json={
                    "success": False,
                    "error": {"code": "INVALID_API_KEY", "message": "Invalid key"},
                },
            )
        )
        client = make_client(server)

        with pytest.raises(SVGMakerError) as exc_info:
            await client.execute(Operation("GET", "/x"))

        assert exc_info.value.kind is ErrorKind.AUTH
        assert len(server.requests) == 1
        assert sleep_calls == []

    @pytest.mark.asyncio
    async def test_network_errors_retried(self, sleep_calls):
        server = ScriptedServer(
            httpx.ConnectError("refused"),
            httpx.Response(200, json={"ok": True}),
        )
        client = make_client(server)

        assert await client.execute(Operation("GET", "/x")) == {"ok": True}
        assert len(server.requests) == 2

    @pytest.mark.asyncio
    async def test_operation_admitted_once_across_retries(self, sleep_calls):
        server = ScriptedServer(
            httpx.Response(500, json={}),
            httpx.Response(200, json={}),
        )
        client = make_client(server, rate_limit=10)

        await client.execute(Operation("GET", "/x"))

        assert len(client._limiter) == 1


class TestSetConfig:
    @pytest.mark.asyncio
    async def test_new_config_used_by_later_operations(self):
        server = ScriptedServer(
            httpx.Response(200, json={}),
            httpx.Response(200, json={}),
        )
        client = make_client(server)

        await client.execute(Operation("GET", "/x"))
        client.set_config(base_url="https://eu.api.test", api_key="other-key")
        await client.execute(Operation("GET", "/x"))

        assert server.requests[0].url.host == "api.test"
        assert server.requests[1].url.host == "eu.api.test"
        assert server.requests[1].headers["x-api-key"] == "other-key"

    def test_rate_limit_change_replaces_limiter(self):
        client = SVGMakerClient("k", rate_limit=5)
        limiter = client._limiter

        client.set_config(timeout=9.0)
        assert client._limiter is limiter

        client.set_config(rate_limit=7)
        assert client._limiter is not limiter
        assert client._limiter.capacity == 7

    def test_invalid_update_keeps_previous_config(self):
        client = SVGMakerClient("k")
        previous = client.config

        with pytest.raises(SVGMakerError):
            client.set_config(max_retries=-1)

        assert client.config is previous

    def test_empty_api_key_rejected(self):
        client = SVGMakerClient("k")
        with pytest.raises(SVGMakerError):
            client.set_config(api_key="")


class TestResponseHooks:
    @pytest.mark.asyncio
    async def test_hooks_applied_in_order(self):
        server = ScriptedServer(httpx.Response(200, json={"n": 1}))
        client = make_client(server)

        async def add_one(result):
            return {"n": result["n"] + 1}

        client.add_response_hook(add_one)
        client.add_response_hook(lambda result: {"n": result["n"] * 10})

        assert await client.execute(Operation("GET", "/x")) == {"n": 20}


class TestStreamEvents:
    @pytest.mark.asyncio
    async def test_stream_not_retried(self, sleep_calls):
        server = ScriptedServer(httpx.Response(500, json={"error": "boom"}))
        client = make_client(server)

        with pytest.raises(SVGMakerError):
            async for _ in client.stream_events(Operation("POST", "/v1/generate")):
                pass

        assert len(server.requests) == 1
        assert sleep_calls == []

    @pytest.mark.asyncio
    async def test_events_decoded(self):
        body = "".join(
            json.dumps(record) + "\n"
            for record in [
                {"status": "processing", "message": "Starting"},
                {"status": "generated", "svgUrl": "u"},
                {"status": "complete", "creditCost": 1},
            ]
        )
        server = ScriptedServer(httpx.Response(200, content=body.encode()))
        client = make_client(server)

        events = [e async for e in client.stream_events(Operation("POST", "/x"))]

        assert [e.status for e in events] == ["processing", "generated", "complete"]
        assert events[-1]["svgUrl"] == "u"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with SVGMakerClient("k") as client:
            http_client = client._http_client
        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        http_client = httpx.AsyncClient()
        async with SVGMakerClient("k", http_client=http_client):
            pass
        assert not http_client.is_closed
        await http_client.aclose()
