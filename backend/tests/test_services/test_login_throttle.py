"""Tests for LoginThrottle."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from services.login_throttle import LoginThrottle


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def throttle(clock: FakeClock) -> LoginThrottle:
    return LoginThrottle(max_failures=5, window=timedelta(minutes=10), clock=clock)


class TestCheckAllowed:
    """Tests for the sliding window lockout."""

    def test_unknown_username_is_allowed(self, throttle: LoginThrottle) -> None:
        assert throttle.check_allowed("bob") is True

    def test_four_failures_still_allowed(self, throttle: LoginThrottle) -> None:
        for _ in range(4):
            throttle.record_failure("bob")
        assert throttle.check_allowed("bob") is True

    def test_five_failures_within_window_lock_out(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        for _ in range(5):
            throttle.record_failure("bob")
            clock.advance(seconds=10)
        assert throttle.check_allowed("bob") is False

    def test_lockout_lifts_when_oldest_failure_leaves_window(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        """Failures at t=0..4min; the t=0 one expires at t=10min."""
        for _ in range(5):
            throttle.record_failure("bob")
            clock.advance(minutes=1)

        clock.now = datetime(2024, 1, 1, 12, 9, 59, tzinfo=timezone.utc)
        assert throttle.check_allowed("bob") is False

        clock.now = datetime(2024, 1, 1, 12, 10, tzinfo=timezone.utc)
        assert throttle.check_allowed("bob") is True

    def test_failures_spread_beyond_window_never_lock(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        for _ in range(10):
            throttle.record_failure("bob")
            clock.advance(minutes=3)
        assert throttle.check_allowed("bob") is True

    def test_checking_does_not_extend_lockout(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        for _ in range(5):
            throttle.record_failure("bob")
        for _ in range(20):
            clock.advance(seconds=20)
            throttle.check_allowed("bob")
        # 400 seconds of polling, then past the 10 minute mark
        clock.advance(seconds=201)
        assert throttle.check_allowed("bob") is True

    def test_usernames_are_tracked_separately(self, throttle: LoginThrottle) -> None:
        for _ in range(5):
            throttle.record_failure("bob")
        assert throttle.check_allowed("bob") is False
        assert throttle.check_allowed("alice") is True


class TestRecordSuccess:
    """Tests for clearing failures."""

    def test_success_clears_failures(self, throttle: LoginThrottle) -> None:
        for _ in range(4):
            throttle.record_failure("bob")
        throttle.record_success("bob")
        for _ in range(4):
            throttle.record_failure("bob")
        assert throttle.check_allowed("bob") is True

    def test_success_for_unknown_username_is_noop(
        self, throttle: LoginThrottle
    ) -> None:
        throttle.record_success("nobody")
        assert throttle.tracked_usernames() == 0

    def test_expired_entries_are_dropped(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        throttle.record_failure("bob")
        clock.advance(minutes=11)
        throttle.check_allowed("bob")
        assert throttle.tracked_usernames() == 0


class TestPurge:
    """Usernames tried once and never again must not accumulate."""

    def test_purge_drops_only_stale_usernames(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        throttle.record_failure("old")
        clock.advance(minutes=9)
        throttle.record_failure("recent")
        clock.advance(minutes=2)

        assert throttle.purge() == 1
        assert throttle.tracked_usernames() == 1
        assert throttle.check_allowed("recent") is True

    def test_locked_username_survives_purge(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        for _ in range(5):
            throttle.record_failure("bob")
        clock.advance(minutes=5)

        assert throttle.purge() == 0
        assert throttle.check_allowed("bob") is False

    def test_table_is_purged_once_threshold_is_reached(self, clock: FakeClock) -> None:
        throttle = LoginThrottle(
            max_failures=5,
            window=timedelta(minutes=10),
            clock=clock,
            purge_threshold=1000,
        )
        for i in range(1000):
            throttle.record_failure(f"guess{i}")
        assert throttle.tracked_usernames() == 1000

        clock.advance(hours=1)
        throttle.record_failure("newcomer")

        assert throttle.tracked_usernames() == 1


class TestRetryAfter:
    """Tests for retry_after."""

    def test_zero_when_not_locked(self, throttle: LoginThrottle) -> None:
        throttle.record_failure("bob")
        assert throttle.retry_after("bob") == 0

    def test_seconds_until_oldest_failure_expires(
        self, throttle: LoginThrottle, clock: FakeClock
    ) -> None:
        for _ in range(5):
            throttle.record_failure("bob")
        clock.advance(minutes=4)
        assert throttle.retry_after("bob") == 360


class TestConstruction:
    def test_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            LoginThrottle(max_failures=0)


class TestConcurrency:
    """The table is shared by every request thread."""

    def test_concurrent_failures_are_all_counted(self) -> None:
        throttle = LoginThrottle(max_failures=200, window=timedelta(minutes=10))
        barrier = threading.Barrier(8)

        def hammer() -> None:
            barrier.wait()
            for _ in range(25):
                throttle.record_failure("bob")

        threads = [threading.Thread(target=hammer) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert throttle.check_allowed("bob") is False

    def test_concurrent_mixed_operations_do_not_raise(self) -> None:
        throttle = LoginThrottle(max_failures=5, window=timedelta(minutes=10))
        errors: list[BaseException] = []

        def worker(i: int) -> None:
            try:
                for _ in range(200):
                    name = f"user{i % 3}"
                    throttle.record_failure(name)
                    throttle.check_allowed(name)
                    throttle.retry_after(name)
                    if i % 2:
                        throttle.record_success(name)
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
