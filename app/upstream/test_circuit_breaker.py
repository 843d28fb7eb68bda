import pytest

from app.upstream.circuit_breaker import BreakerState, CircuitBreaker, CircuitOpenError


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def fail():
    raise RuntimeError("upstream down")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker("test", failure_threshold=2, reset_timeout_s=10, clock=clock)


def test_passes_results_through(breaker):
    assert breaker.call(lambda x: x * 2, 21) == 42
    assert breaker.state is BreakerState.closed


def test_opens_after_consecutive_failures(breaker):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    assert breaker.state is BreakerState.open
    with pytest.raises(CircuitOpenError):
        breaker.call(lambda: "not called")


def test_success_resets_failure_count(breaker):
    with pytest.raises(RuntimeError):
        breaker.call(fail)
    breaker.call(lambda: None)
    with pytest.raises(RuntimeError):
        breaker.call(fail)
    assert breaker.state is BreakerState.closed


def test_half_open_trial_success_closes(breaker, clock):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    clock.now += 10
    assert breaker.state is BreakerState.half_open
    assert breaker.call(lambda: "ok") == "ok"
    assert breaker.state is BreakerState.closed


def test_half_open_trial_failure_reopens(breaker, clock):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    clock.now += 10
    with pytest.raises(RuntimeError):
        breaker.call(fail)
    assert breaker.state is BreakerState.open
    clock.now += 5
    with pytest.raises(CircuitOpenError) as exc_info:
        breaker.call(lambda: None)
    assert exc_info.value.retry_after_s == pytest.approx(5)


def test_only_one_trial_call_while_half_open(breaker, clock):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    clock.now += 10

    def trial():
        with pytest.raises(CircuitOpenError):
            breaker.call(lambda: None)
        return "trial"

    assert breaker.call(trial) == "trial"
    assert breaker.state is BreakerState.closed


def test_interrupted_trial_allows_another_trial(breaker, clock):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    clock.now += 10

    def interrupted():
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        breaker.call(interrupted)
    assert breaker.call(lambda: "ok") == "ok"
    assert breaker.state is BreakerState.closed


def test_slow_success_from_before_opening_keeps_circuit_open(breaker):
    def slow_call():
        # Other callers fail and open the circuit while this one is running.
        for _ in range(2):
            with pytest.raises(RuntimeError):
                breaker.call(fail)
        return "late"

    assert breaker.call(slow_call) == "late"
    assert breaker.state is BreakerState.open
    with pytest.raises(CircuitOpenError):
        breaker.call(lambda: None)


def test_slow_failure_from_before_closing_is_ignored(breaker, clock):
    for _ in range(2):
        with pytest.raises(RuntimeError):
            breaker.call(fail)
    clock.now += 10
    breaker.call(lambda: None)

    def slow_failure():
        raise RuntimeError("stale")

    # A failure reported for an earlier generation does not count.
    breaker._on_failure(0)
    breaker._on_failure(0)
    assert breaker.state is BreakerState.closed
    with pytest.raises(RuntimeError):
        breaker.call(slow_failure)
    assert breaker.state is BreakerState.closed
