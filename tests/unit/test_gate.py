"""Unit tests for probekit.gate.DelayedGate."""
import threading
import time

import pytest

from probekit.gate import DelayedGate


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.mark.unit
class TestNonPositiveDelay:
    """A gate with delay <= 0 is achieved after every reset."""

    @pytest.mark.parametrize("delay", [0, 0.0, -1, -0.5])
    def test_achieved_on_construction(self, delay):
        gate = DelayedGate(delay)
        assert gate.is_achieved() is True
        assert gate.deadline is None
        assert gate.remaining() == 0.0

    def test_achieved_after_every_reset(self):
        gate = DelayedGate(0)
        for _ in range(5):
            gate.reset()
            assert gate.is_achieved() is True
            assert gate.remaining_ms() == 0

    def test_no_timer_scheduled(self):
        gate = DelayedGate(0)
        gate.reset()
        assert gate._timer is None


@pytest.mark.unit
class TestPositiveDelay:
    """A gate with delay > 0 counts down from its last reset."""

    def test_pending_immediately_after_construction(self):
        gate = DelayedGate(5)
        assert gate.is_achieved() is False
        assert gate.deadline is not None

    def test_achieved_after_delay(self, wait_for):
        gate = DelayedGate(0.1)
        assert gate.is_achieved() is False
        assert wait_for(gate.is_achieved, timeout=2.0)
        assert gate.deadline is None
        assert gate.remaining() == 0.0

    def test_not_achieved_before_delay(self):
        start = time.monotonic()
        gate = DelayedGate(0.3)
        while time.monotonic() - start < 0.2:
            assert gate.is_achieved() is False
            time.sleep(0.01)

    def test_delay_is_immutable(self):
        gate = DelayedGate(2)
        gate.reset()
        assert gate.delay == 2.0
        with pytest.raises(AttributeError):
            gate.delay = 3

    def test_repr_shows_state(self):
        assert "pending" in repr(DelayedGate(5))
        assert "achieved" in repr(DelayedGate(0))


@pytest.mark.unit
class TestRemaining:
    """remaining() is advisory and never negative."""

    def test_counts_down_with_clock(self):
        clock = FakeClock()
        gate = DelayedGate(10, clock=clock)
        assert gate.remaining() == pytest.approx(10.0)
        clock.advance(4)
        assert gate.remaining() == pytest.approx(6.0)
        assert gate.remaining_ms() == 6000

    def test_clamped_at_zero_past_deadline(self):
        clock = FakeClock()
        gate = DelayedGate(10, clock=clock)
        clock.advance(11)
        assert gate.remaining() == 0.0

    def test_restarts_on_reset(self):
        clock = FakeClock()
        gate = DelayedGate(10, clock=clock)
        clock.advance(7)
        gate.reset()
        assert gate.remaining() == pytest.approx(10.0)

    def test_monotonically_non_increasing(self, wait_for):
        gate = DelayedGate(0.2)
        previous = gate.remaining()
        while not gate.is_achieved():
            current = gate.remaining()
            assert current <= previous
            previous = current
            time.sleep(0.005)
        assert gate.remaining() == 0.0


@pytest.mark.unit
class TestReset:
    """reset() forces pending and restarts the window."""

    def test_reset_after_achievement_goes_pending(self, wait_for):
        gate = DelayedGate(0.1)
        assert wait_for(gate.is_achieved)
        gate.reset()
        assert gate.is_achieved() is False
        assert wait_for(gate.is_achieved)

    def test_generation_increments(self):
        gate = DelayedGate(5)
        first = gate.generation
        gate.reset()
        gate.reset()
        assert gate.generation == first + 2

    def test_second_reset_restarts_window(self, wait_for):
        gate = DelayedGate(0.4)
        time.sleep(0.2)
        second_reset_at = time.monotonic()
        gate.reset()

        # the first reset's deadline passes without effect
        time.sleep(0.3)
        assert gate.is_achieved() is False

        assert wait_for(gate.is_achieved, timeout=2.0)
        assert time.monotonic() - second_reset_at >= 0.4

    def test_stale_timer_is_a_no_op(self):
        gate = DelayedGate(5)
        stale_generation = gate.generation
        gate.reset()

        # simulate the superseded timer firing after cancellation failed
        gate._fire(stale_generation)

        assert gate.is_achieved() is False
        assert gate.deadline is not None

    def test_current_timer_flips_gate(self):
        gate = DelayedGate(5)
        gate._fire(gate.generation)
        assert gate.is_achieved() is True
        assert gate.deadline is None


@pytest.mark.unit
class TestConcurrency:
    """Concurrent resets and reads never observe an early flip."""

    def test_concurrent_resets_achieve_only_at_last_deadline(self):
        delay = 0.2
        workers = 16
        gate = DelayedGate(delay)
        start_generation = gate.generation
        barrier = threading.Barrier(workers)

        def resetter():
            barrier.wait()
            gate.reset()

        threads = [threading.Thread(target=resetter) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert gate.generation == start_generation + workers
        final_deadline = gate.deadline
        assert final_deadline is not None

        observed = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                if gate.is_achieved():
                    observed.append(time.monotonic())
                    return
                gate.remaining()

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        for thread in readers:
            thread.join(timeout=3.0)
        stop.set()

        assert len(observed) == 4
        assert min(observed) >= final_deadline

    def test_reset_is_visible_to_other_threads(self, wait_for):
        gate = DelayedGate(0.2)
        assert wait_for(gate.is_achieved)
        gate.reset()

        seen = []
        thread = threading.Thread(target=lambda: seen.append(gate.is_achieved()))
        thread.start()
        thread.join()

        assert seen == [False]
