"""Unit tests for RetryPolicy."""

import pytest

from kbsync.application.services.retry_policy import NO_RETRY, RetryPolicy
from kbsync.domain.exceptions import (
    BlobNotFound,
    InfrastructurePermissionError,
    StorageUnavailable,
)

FAST = RetryPolicy(attempts=3, min_wait=0.0, max_wait=0.0, multiplier=0.0)


class _Flaky:
    def __init__(self, failures: int, exc: Exception) -> None:
        self.failures = failures
        self.exc = exc
        self.calls = 0

    async def __call__(self, value: str) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return value


@pytest.mark.asyncio
async def test_transient_error_retried_until_success() -> None:
    fn = _Flaky(2, StorageUnavailable("busy"))
    assert await FAST.call(fn, "ok") == "ok"
    assert fn.calls == 3


@pytest.mark.asyncio
async def test_gives_up_after_attempts() -> None:
    fn = _Flaky(5, StorageUnavailable("busy"))
    with pytest.raises(StorageUnavailable):
        await FAST.call(fn, "ok")
    assert fn.calls == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [
        InfrastructurePermissionError("blob store", "Storage Admin"),
        BlobNotFound("kb/x"),
        RuntimeError("bug"),
    ],
)
async def test_non_transient_errors_not_retried(exc: Exception) -> None:
    fn = _Flaky(1, exc)
    with pytest.raises(type(exc)):
        await FAST.call(fn, "ok")
    assert fn.calls == 1


@pytest.mark.asyncio
async def test_no_retry_single_attempt() -> None:
    fn = _Flaky(1, StorageUnavailable("busy"))
    with pytest.raises(StorageUnavailable):
        await NO_RETRY.call(fn, "ok")
    assert fn.calls == 1


@pytest.mark.parametrize(
    "kwargs",
    [{"attempts": 0}, {"min_wait": -1.0}, {"min_wait": 5.0, "max_wait": 1.0}],
)
def test_invalid_policy_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)
