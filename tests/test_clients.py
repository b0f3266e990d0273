"""Tests for typed clients - behavior focused with HTTP mocking."""

import httpx
import pytest

from http_client_utilities.clients import BaseHttpClient, HttpOptions
from http_client_utilities.exceptions import HttpResponseError


class UsersClient(BaseHttpClient):
    """Minimal typed client used by the tests."""

    @property
    def client_name(self) -> str:
        return "users"

    async def get_user(self, username: str, include_groups: bool = False) -> dict:
        uri = (
            self.uri("api")
            .with_segment("users")
            .with_segment(username)
            .with_param_if("include", "groups", include_groups)
        )
        return await self.get_json(uri)


# --- Fixtures ---


@pytest.fixture
def options():
    """Options with no retries for predictable tests."""
    return HttpOptions(
        base_address="https://example.org",
        number_of_retries=0,
        headers={"Authorization": "Bearer test-token"},
    )


def make_client(options, handler) -> UsersClient:
    return UsersClient(options, transport=httpx.MockTransport(handler))


class TestGetJson:
    """Test typed request behavior."""

    @pytest.mark.asyncio
    async def test_returns_decoded_body_on_success(self, options):
        """Given 200 response, returns decoded JSON."""
        async with make_client(options, lambda request: httpx.Response(200, json={"name": "jdoe"})) as client:
            result = await client.get_user("jdoe")

        assert result == {"name": "jdoe"}

    @pytest.mark.asyncio
    async def test_builds_request_uri(self, options):
        """Segments are encoded and conditional params applied."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        async with make_client(options, handler) as client:
            await client.get_user("John Doe", include_groups=True)

        assert seen[0].url.path == "/api/users/John+Doe"
        assert seen[0].url.params["include"] == "groups"

    @pytest.mark.asyncio
    async def test_includes_configured_headers(self, options):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        async with make_client(options, handler) as client:
            await client.get_user("jdoe")

        assert seen[0].headers["Authorization"] == "Bearer test-token"
        assert seen[0].headers["User-Agent"].startswith("http-client-utilities/")

    @pytest.mark.asyncio
    async def test_raises_response_error_on_404(self, options):
        """Given 404, raises a non-retryable HttpResponseError."""
        async with make_client(options, lambda request: httpx.Response(404, text="no such user")) as client:
            with pytest.raises(HttpResponseError) as exc_info:
                await client.get_user("ghost")

        assert exc_info.value.status_code == 404
        assert exc_info.value.retryable is False
        assert exc_info.value.client_name == "users"

    @pytest.mark.asyncio
    async def test_final_transient_status_is_retryable_error(self, options):
        """Given 503 after retries, the error is flagged retryable."""
        options.number_of_retries = 1
        options.retries_sleep_duration = 0
        options.retries_maximum_sleep_duration = 0
        calls = 0

        def handler(request):
            nonlocal calls
            calls += 1
            return httpx.Response(503)

        async with make_client(options, handler) as client:
            with pytest.raises(HttpResponseError) as exc_info:
                await client.get_user("jdoe")

        assert calls == 2
        assert exc_info.value.retryable is True


class TestHealthCheck:
    """Test health check behavior."""

    @pytest.mark.asyncio
    async def test_returns_true_when_up(self, options):
        """Given 200, returns True."""
        async with make_client(options, lambda request: httpx.Response(200)) as client:
            assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_returns_false_on_error_status(self, options):
        async with make_client(options, lambda request: httpx.Response(500)) as client:
            assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_returns_false_when_down(self, options):
        """Given connection error, returns False."""

        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(options, handler) as client:
            assert await client.health_check() is False
