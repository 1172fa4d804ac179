import threading
import time
from typing import List, Optional

import pytest

from mcastguard.errors import PermitUnavailableError, ReleaseFailedError
from mcastguard.guard.guard_state import Held, Released
from mcastguard.guard.multicast_guard import GuardResult, MulticastGuard
from mcastguard.permit.multicast_permit import MulticastPermit
from mcastguard.permit.permit_provider import PermitProvider


class FakePermit(MulticastPermit):
    def __init__(
        self,
        acquire_error: Optional[Exception] = None,
        release_error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.acquire_error = acquire_error
        self.release_error = release_error
        self.delay = delay
        self.acquire_calls = 0
        self.release_calls = 0
        self.__held = False

    @property
    def tag(self) -> str:
        return "fake"

    @property
    def is_held(self) -> bool:
        return self.__held

    def acquire(self) -> None:
        self.acquire_calls += 1
        time.sleep(self.delay)
        if self.acquire_error is not None:
            raise self.acquire_error
        self.__held = True

    def release(self) -> None:
        self.release_calls += 1
        time.sleep(self.delay)
        self.__held = False
        if self.release_error is not None:
            raise self.release_error


class FakeProvider(PermitProvider):
    def __init__(self, **permit_kwargs) -> None:
        self.permit_kwargs = permit_kwargs
        self.create_error: Optional[Exception] = None
        self.created: List[FakePermit] = []
        self.__lock = threading.Lock()

    def create_permit(self) -> MulticastPermit:
        if self.create_error is not None:
            raise self.create_error
        permit = FakePermit(**self.permit_kwargs)
        with self.__lock:
            self.created.append(permit)
        return permit


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def guard(provider: FakeProvider) -> MulticastGuard:
    return MulticastGuard(provider)


def test_requires_provider() -> None:
    with pytest.raises(ValueError):
        MulticastGuard(None)  # type: ignore[arg-type]


def test_initially_released(guard: MulticastGuard) -> None:
    assert not guard.is_held
    assert guard.permit is None
    assert guard.state == Released()


def test_acquire_holds_permit(guard, provider) -> None:
    result = guard.acquire()

    assert result == GuardResult(success=True, changed=True)
    assert guard.is_held
    assert len(provider.created) == 1
    permit = provider.created[0]
    assert guard.permit is permit
    assert guard.state == Held(permit)
    assert permit.is_held


def test_acquire_twice_holds_one_permit(guard, provider) -> None:
    first = guard.acquire()
    second = guard.acquire()

    assert first.success and first.changed
    assert second.success and not second.changed
    assert len(provider.created) == 1
    assert provider.created[0].acquire_calls == 1


def test_release_when_not_held_succeeds(guard, provider) -> None:
    result = guard.release()

    assert result == GuardResult(success=True, changed=False)
    assert not guard.is_held
    assert provider.created == []


def test_acquire_then_release_round_trip(guard, provider) -> None:
    guard.acquire()
    result = guard.release()

    assert result == GuardResult(success=True, changed=True)
    assert not guard.is_held
    assert guard.permit is None
    assert guard.state == Released()
    assert provider.created[0].release_calls == 1
    assert not provider.created[0].is_held


def test_reacquire_after_release_creates_new_permit(guard, provider) -> None:
    guard.acquire()
    guard.release()
    guard.acquire()

    assert guard.is_held
    assert len(provider.created) == 2
    assert guard.permit is provider.created[1]


def test_acquire_failure_leaves_guard_released(guard, provider) -> None:
    provider.create_error = PermitUnavailableError("No active network interface.")

    result = guard.acquire()

    assert not result.success
    assert not result.changed
    assert isinstance(result.error, PermitUnavailableError)
    assert str(result.error) == "No active network interface."
    assert not guard.is_held


def test_acquire_failure_is_not_retried(provider) -> None:
    provider.permit_kwargs = {"acquire_error": PermitUnavailableError("denied")}
    guard = MulticastGuard(provider)

    result = guard.acquire()

    assert not result.success
    assert len(provider.created) == 1
    assert provider.created[0].acquire_calls == 1
    assert guard.state == Released()
    assert guard.permit is None

    # Nothing is attempted in the background; only the caller retries.
    time.sleep(0.05)
    assert len(provider.created) == 1
    assert guard.release().success
    assert len(provider.created) == 1

    provider.permit_kwargs = {}
    assert guard.acquire() == GuardResult(success=True, changed=True)
    assert len(provider.created) == 2
    assert provider.created[0].acquire_calls == 1
    assert guard.permit is provider.created[1]


def test_acquire_unexpected_error_is_wrapped(provider) -> None:
    cause = PermissionError("Operation not permitted")
    provider.permit_kwargs = {"acquire_error": cause}
    guard = MulticastGuard(provider)

    result = guard.acquire()

    assert not result.success
    assert isinstance(result.error, PermitUnavailableError)
    assert result.error.__cause__ is cause
    assert "Operation not permitted" in str(result.error)
    assert not guard.is_held


def test_release_after_failed_acquire_is_safe(guard, provider) -> None:
    provider.create_error = PermitUnavailableError("denied")
    guard.acquire()

    result = guard.release()

    assert result.success
    assert not guard.is_held


def test_release_failure_still_clears_state(provider) -> None:
    provider.permit_kwargs = {"release_error": ReleaseFailedError("busy")}
    guard = MulticastGuard(provider)
    guard.acquire()

    result = guard.release()

    assert not result.success
    assert result.changed
    assert isinstance(result.error, ReleaseFailedError)
    assert not guard.is_held

    # Cleanup is never blocked by the earlier failure.
    assert guard.release() == GuardResult(success=True, changed=False)
    assert provider.created[0].release_calls == 1


def test_release_unexpected_error_is_wrapped(provider) -> None:
    cause = OSError("device gone")
    provider.permit_kwargs = {"release_error": cause}
    guard = MulticastGuard(provider)
    guard.acquire()

    result = guard.release()

    assert isinstance(result.error, ReleaseFailedError)
    assert result.error.__cause__ is cause
    assert not guard.is_held


def test_close_releases_held_permit(guard, provider) -> None:
    guard.acquire()
    guard.close()

    assert not guard.is_held
    assert provider.created[0].release_calls == 1
    assert guard.close().success


def test_context_manager_releases_on_exit(provider) -> None:
    with MulticastGuard(provider) as guard:
        assert guard.acquire().success
        assert guard.is_held

    assert not guard.is_held
    assert provider.created[0].release_calls == 1


def test_context_manager_releases_on_exception(provider) -> None:
    with pytest.raises(RuntimeError):
        with MulticastGuard(provider) as guard:
            guard.acquire()
            raise RuntimeError("session failed")

    assert not guard.is_held


def test_concurrent_acquire_creates_one_permit() -> None:
    provider = FakeProvider(delay=0.01)
    guard = MulticastGuard(provider)
    num_threads = 10
    barrier = threading.Barrier(num_threads)
    results: List[GuardResult] = []
    results_lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        result = guard.acquire()
        with results_lock:
            results.append(result)

    threads = [threading.Thread(target=worker) for _ in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(provider.created) == 1
    assert provider.created[0].acquire_calls == 1
    assert all(r.success for r in results)
    assert sum(1 for r in results if r.changed) == 1
    assert guard.is_held


def test_concurrent_release_releases_once() -> None:
    provider = FakeProvider(delay=0.01)
    guard = MulticastGuard(provider)
    guard.acquire()
    num_threads = 10
    barrier = threading.Barrier(num_threads)
    results: List[GuardResult] = []
    results_lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        result = guard.release()
        with results_lock:
            results.append(result)

    threads = [threading.Thread(target=worker) for _ in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert provider.created[0].release_calls == 1
    assert all(r.success for r in results)
    assert sum(1 for r in results if r.changed) == 1
    assert not guard.is_held


def test_concurrent_acquire_release_stays_consistent() -> None:
    provider = FakeProvider()
    guard = MulticastGuard(provider)
    num_threads = 8
    iterations = 50
    barrier = threading.Barrier(num_threads)

    def worker(thread_id: int) -> None:
        barrier.wait()
        for _ in range(iterations):
            if thread_id % 2 == 0:
                guard.acquire()
            else:
                guard.release()

    threads = [
        threading.Thread(target=worker, args=(i,)) for i in range(num_threads)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    held_permits = [p for p in provider.created if p.is_held]
    if guard.is_held:
        assert held_permits == [guard.permit]
    else:
        assert held_permits == []
    for permit in provider.created:
        assert permit.acquire_calls == 1
        assert permit.release_calls <= 1
