"""Tests for retry module - behavior focused."""

import httpx
import pytest

from http_client_utilities.exceptions import (
    CircuitOpenError,
    HttpUtilitiesError,
    InvalidArgumentError,
)
from http_client_utilities.retry import RetryConfig, async_with_retry, is_transient, with_retry


def status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://test")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("boom", request=request, response=response)


class TestRetryConfigDelays:
    """Test the delay sequence produced by RetryConfig."""

    def test_delays_match_retry_count(self):
        """One delay is produced per retry."""
        config = RetryConfig(max_retries=4, base_delay=0.3, max_delay=3.0)

        delays = list(config.delays())

        assert len(delays) == 4
        assert all(0.3 <= delay <= 3.0 for delay in delays)

    def test_no_retry_yields_no_delays(self):
        """Zero retries means an empty sequence."""
        assert list(RetryConfig.no_retry().delays()) == []

    def test_disabled_jitter_is_constant(self):
        """jitter=False collapses the ceiling onto the seed delay."""
        config = RetryConfig(max_retries=3, base_delay=0.5, max_delay=5.0, jitter=False)

        assert list(config.delays()) == [0.5, 0.5, 0.5]

    def test_zero_max_delay_disables_jitter(self):
        """max_delay=0 is the opt-out signal for jitter."""
        config = RetryConfig(max_retries=3, base_delay=0.5, max_delay=0)

        assert config.jitter_enabled is False
        assert list(config.delays()) == [0.5, 0.5, 0.5]

    def test_no_jitter_preset_is_constant(self):
        config = RetryConfig.no_jitter(max_retries=2, delay=1.0)

        assert list(config.delays()) == [1.0, 1.0]

    def test_each_call_creates_fresh_sequence(self):
        """Sequences are per operation and never shared."""
        config = RetryConfig(max_retries=2)

        first = config.delays()
        list(first)

        assert len(list(config.delays())) == 2

    def test_rejects_negative_retries(self):
        with pytest.raises(InvalidArgumentError):
            RetryConfig(max_retries=-1)

    def test_rejects_ceiling_below_seed(self):
        """A non-zero ceiling below the seed is a misconfiguration, not clamped."""
        with pytest.raises(InvalidArgumentError):
            RetryConfig(base_delay=2.0, max_delay=1.0)


class TestRetryConfig:
    """Test RetryConfig behavior."""

    def test_should_retry_rate_limit_status(self):
        """429 status should trigger retry."""
        config = RetryConfig()
        assert config.should_retry(429) is True

    def test_should_retry_request_timeout(self):
        """408 status should trigger retry."""
        assert RetryConfig().should_retry(408) is True

    def test_should_retry_server_errors(self):
        """5xx statuses should trigger retry."""
        config = RetryConfig()

        assert config.should_retry(500) is True
        assert config.should_retry(502) is True
        assert config.should_retry(503) is True
        assert config.should_retry(504) is True
        assert config.should_retry(507) is True

    def test_should_not_retry_client_errors(self):
        """4xx statuses (except 408 and 429) should not trigger retry."""
        config = RetryConfig()

        assert config.should_retry(400) is False
        assert config.should_retry(401) is False
        assert config.should_retry(403) is False
        assert config.should_retry(404) is False

    def test_should_not_retry_success(self):
        assert RetryConfig().should_retry(200) is False

    def test_aggressive_preset_has_more_retries(self):
        """Aggressive preset should have more retries than default."""
        default = RetryConfig()
        aggressive = RetryConfig.aggressive()

        assert aggressive.max_retries > default.max_retries

    def test_conservative_preset_has_fewer_retries(self):
        """Conservative preset should have fewer retries than default."""
        default = RetryConfig()
        conservative = RetryConfig.conservative()

        assert conservative.max_retries < default.max_retries

    def test_no_retry_preset_has_zero_retries(self):
        """No retry preset should have zero retries."""
        no_retry = RetryConfig.no_retry()

        assert no_retry.max_retries == 0


class TestIsTransient:
    """Test transient failure classification."""

    def test_transport_errors_are_transient(self):
        config = RetryConfig()

        assert is_transient(httpx.ConnectError("refused"), config) is True
        assert is_transient(httpx.ReadTimeout("slow"), config) is True

    def test_status_errors_follow_config(self):
        config = RetryConfig()

        assert is_transient(status_error(503), config) is True
        assert is_transient(status_error(404), config) is False

    def test_domain_errors_use_retryable_flag(self):
        config = RetryConfig()

        assert is_transient(CircuitOpenError(), config) is True
        assert is_transient(HttpUtilitiesError("nope"), config) is False

    def test_other_exceptions_are_not_transient(self):
        assert is_transient(KeyError("x"), RetryConfig()) is False


class TestWithRetry:
    """Test the synchronous retry decorator."""

    def test_retries_until_success(self):
        """Given two transient failures then success, returns the result."""
        calls = []

        @with_retry(RetryConfig.no_jitter(max_retries=3, delay=0))
        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise httpx.ConnectError("refused")
            return "ok"

        assert flaky() == "ok"
        assert len(calls) == 3

    def test_reraises_after_exhaustion(self):
        """After max_retries the last exception propagates."""
        calls = []

        @with_retry(RetryConfig.no_jitter(max_retries=2, delay=0))
        def always_fails():
            calls.append(1)
            raise status_error(503)

        with pytest.raises(httpx.HTTPStatusError):
            always_fails()

        assert len(calls) == 3

    def test_does_not_retry_permanent_failure(self):
        calls = []

        @with_retry(RetryConfig.no_jitter(max_retries=3, delay=0))
        def not_found():
            calls.append(1)
            raise status_error(404)

        with pytest.raises(httpx.HTTPStatusError):
            not_found()

        assert len(calls) == 1

    def test_on_retry_receives_jittered_delays(self):
        """The callback sees each delay from the sequence, within bounds."""
        seen = []

        @with_retry(
            RetryConfig(max_retries=3, base_delay=0.001, max_delay=0.01),
            on_retry=lambda attempt, exc, delay: seen.append((attempt, delay)),
        )
        def always_fails():
            raise httpx.ConnectError("refused")

        with pytest.raises(httpx.ConnectError):
            always_fails()

        assert [attempt for attempt, _ in seen] == [0, 1, 2]
        assert all(0.001 <= delay <= 0.01 for _, delay in seen)


class TestAsyncWithRetry:
    """Test the async retry decorator."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        calls = []

        @async_with_retry(RetryConfig.no_jitter(max_retries=2, delay=0))
        async def flaky():
            calls.append(1)
            if len(calls) < 2:
                raise httpx.ReadTimeout("slow")
            return 42

        assert await flaky() == 42
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_no_retry_config_calls_once(self):
        calls = []

        @async_with_retry(RetryConfig.no_retry())
        async def fails():
            calls.append(1)
            raise httpx.ConnectError("refused")

        with pytest.raises(httpx.ConnectError):
            await fails()

        assert len(calls) == 1
