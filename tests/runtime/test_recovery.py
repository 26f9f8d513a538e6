"""
Unit tests for Result values, the error hierarchy and the opt-in retry policy.
"""

import pytest

from musicbrainz_client.recovery import RetryPolicy, transport_or_unavailable
from musicbrainz_client.runtime.errors import (
    ConfigurationError,
    DecodeError,
    ErrorCode,
    MusicBrainzError,
    RemoteError,
    TransportError,
)
from musicbrainz_client.runtime.result import Result


class TestErrors:
    """Tests for the error hierarchy."""

    def test_to_dict(self):
        error = TransportError("boom", {"url": "x"}, cause=OSError("down"))
        data = error.to_dict()
        assert data["code"] == ErrorCode.TRANSPORT_FAILURE.value
        assert data["kind"] == "TRANSPORT_FAILURE"
        assert data["details"] == {"url": "x"}
        assert data["cause"] == "down"

    def test_str_includes_code(self):
        assert str(DecodeError("bad")).startswith("[DECODE_ERROR] bad")

    def test_remote_error_message(self):
        error = RemoteError(503, "Service Unavailable", error="slow down")
        assert error.message == "HTTP 503: Service Unavailable (slow down)"
        assert error.is_server_error
        assert not error.is_client_error

    def test_all_are_client_errors(self):
        for error in (TransportError("x"), DecodeError("x"), ConfigurationError("x"), RemoteError(404, "")):
            assert isinstance(error, MusicBrainzError)


class TestResult:
    """Tests for Result."""

    def test_success(self):
        result = Result.capture(lambda: 42)
        assert result.ok
        assert result.kind is ErrorCode.OK
        assert result.unwrap() == 42

    def test_failure(self):
        def fail():
            raise RemoteError(404, "Not Found")

        result = Result.capture(fail)
        assert not result.ok
        assert result.kind is ErrorCode.REMOTE_ERROR
        assert result.value_or("fallback") == "fallback"
        with pytest.raises(RemoteError):
            result.unwrap()

    def test_other_exceptions_propagate(self):
        with pytest.raises(ZeroDivisionError):
            Result.capture(lambda: 1 / 0)

    @pytest.mark.asyncio
    async def test_capture_async(self):
        async def fail():
            raise TransportError("offline")

        result = await Result.capture_async(fail())
        assert result.kind is ErrorCode.TRANSPORT_FAILURE


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    @pytest.fixture(autouse=True)
    def no_sleep(self, monkeypatch):
        monkeypatch.setattr("musicbrainz_client.recovery.time.sleep", lambda s: None)

    def test_retries_transport_errors(self):
        """Test transport failures are retried until success."""
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise TransportError("reset")
            return "ok"

        policy = RetryPolicy(max_attempts=3, jitter=False)
        assert policy.call(flaky) == "ok"
        assert policy.get_stats() == {"total_attempts": 3, "total_retries": 2}

    def test_gives_up_with_last_error(self):
        policy = RetryPolicy(max_attempts=2)
        calls = []

        def down():
            calls.append(1)
            raise TransportError("down")

        with pytest.raises(TransportError):
            policy.call(down)
        assert len(calls) == 2

    def test_remote_errors_not_retried_by_default(self):
        calls = []

        def missing():
            calls.append(1)
            raise RemoteError(404, "Not Found")

        with pytest.raises(RemoteError):
            RetryPolicy(max_attempts=5).call(missing)
        assert len(calls) == 1

    def test_unavailable_predicate(self):
        assert transport_or_unavailable(RemoteError(503, ""))
        assert not transport_or_unavailable(RemoteError(500, ""))
        assert transport_or_unavailable(TransportError("x"))

    def test_backoff_delays(self):
        policy = RetryPolicy(base_delay=1.0, factor=2.0, max_delay=5.0, jitter=False)
        assert [policy.calculate_delay(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    @pytest.mark.asyncio
    async def test_call_async(self, monkeypatch):
        async def no_wait(delay):
            return None

        monkeypatch.setattr("musicbrainz_client.recovery.asyncio.sleep", no_wait)
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise TransportError("reset")
            return "ok"

        assert await RetryPolicy(jitter=False).call_async(flaky) == "ok"
        assert len(attempts) == 2
