import threading
import pytest

from airdraw.scheduler import InferenceGate, LandmarkMailbox, TickClock


@pytest.fixture
def clock():
    # 100ms interval keeps the arithmetic exact
    return TickClock(fps=10)


def test_first_call_ticks(clock):
    assert clock.ready(0.0)
    assert clock.elapsed_ms == pytest.approx(100.0)


def test_early_calls_are_skipped(clock):
    clock.ready(0.0)
    assert not clock.ready(50.0)
    assert not clock.ready(99.0)
    assert clock.ready(100.0)


def test_phase_stays_aligned(clock):
    clock.ready(0.0)
    assert clock.ready(130.0)
    assert clock.elapsed_ms == pytest.approx(130.0)
    # Next tick is due at 200, not 230
    assert not clock.ready(190.0)
    assert clock.ready(200.0)


def test_late_ticks_coalesce(clock):
    clock.ready(0.0)
    # 3.5 intervals late: one tick, not three queued ones
    assert clock.ready(350.0)
    assert not clock.ready(360.0)
    assert clock.ready(400.0)


def test_time_until_next(clock):
    assert clock.time_until_next(0.0) == 0.0
    clock.ready(0.0)
    assert clock.time_until_next(40.0) == pytest.approx(60.0)
    assert clock.time_until_next(150.0) == 0.0


def test_mailbox_latest_wins():
    mailbox = LandmarkMailbox()
    assert mailbox.read() is None
    mailbox.post("first")
    mailbox.post("second")
    assert mailbox.read() == "second"
    # Reading does not consume
    assert mailbox.read() == "second"
    mailbox.clear()
    assert mailbox.read() is None


class BlockingDetector:
    """Detector that waits until released, for exercising the in-flight gate."""

    def __init__(self, result="hand"):
        self.result = result
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def __call__(self):
        self.calls += 1
        self.started.set()
        assert self.release.wait(timeout=5.0)
        return self.result


def test_gate_posts_result():
    mailbox = LandmarkMailbox()
    detector = BlockingDetector(result=[(0.5, 0.5, 0.0)])
    with InferenceGate(detector, mailbox) as gate:
        assert gate.submit()
        detector.release.set()
    # close() waits for the request in flight
    assert mailbox.read() == [(0.5, 0.5, 0.0)]


def test_gate_drops_requests_while_busy():
    mailbox = LandmarkMailbox()
    detector = BlockingDetector()
    gate = InferenceGate(detector, mailbox)
    try:
        assert gate.submit()
        assert detector.started.wait(timeout=5.0)
        assert gate.busy

        assert not gate.submit()
        assert not gate.submit()
        assert gate.dropped_requests == 2
    finally:
        detector.release.set()
        gate.close()

    assert detector.calls == 1
    assert not gate.busy


def test_gate_accepts_after_completion():
    mailbox = LandmarkMailbox()
    calls = []

    def detector():
        calls.append(1)
        return len(calls)

    gate = InferenceGate(detector, mailbox)
    gate.submit()
    gate._pending.result(timeout=5.0)
    assert gate.submit()
    gate.close()

    assert len(calls) == 2
    assert mailbox.read() == 2


def test_gate_failure_counts_as_no_hand(capsys):
    mailbox = LandmarkMailbox()
    mailbox.post("stale")

    def detector():
        raise RuntimeError("camera read failed")

    gate = InferenceGate(detector, mailbox)
    gate.submit()
    gate.close()

    assert mailbox.read() is None
    assert gate.failed_requests == 1
    assert "Frame dropped" in capsys.readouterr().out


def test_closed_gate_rejects_requests():
    gate = InferenceGate(lambda: None, LandmarkMailbox())
    gate.close()
    assert not gate.submit()
    # Closing twice is harmless
    gate.close()
