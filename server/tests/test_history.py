from collections import deque

from services.history import AdmissionState, HistoryAdmissionPolicy


def _buffers(size=5):
    return deque(maxlen=size), deque(maxlen=size)


def test_first_sample_is_always_admitted(clock):
    policy = HistoryAdmissionPolicy(10_000, clock=clock)
    history, humidity = _buffers()

    assert policy.state is AdmissionState.AWAITING_FIRST_SAMPLE
    assert policy.admit(21.0, None, history, humidity) is True
    assert list(history) == [21.0]
    assert policy.state is AdmissionState.THROTTLED
    assert policy.last_admitted_at == clock.now


def test_interval_measured_from_last_admission(clock):
    policy = HistoryAdmissionPolicy(60, clock=clock)
    history, humidity = _buffers()

    policy.admit(20.0, None, history, humidity)
    clock.advance(40)
    assert policy.admit(21.0, None, history, humidity) is False
    clock.advance(30)
    # 70s since the admission, 30s since the rejected report
    assert policy.admit(22.0, None, history, humidity) is True
    assert list(history) == [20.0, 22.0]


def test_exact_interval_admits(clock):
    policy = HistoryAdmissionPolicy(60, clock=clock)
    history, humidity = _buffers()

    policy.admit(20.0, None, history, humidity)
    clock.advance(60)
    assert policy.admit(21.0, None, history, humidity) is True


def test_humidity_piggybacks_on_admission(clock):
    policy = HistoryAdmissionPolicy(60, clock=clock)
    history, humidity = _buffers()

    policy.admit(20.0, 45.0, history, humidity)
    clock.advance(1)
    policy.admit(20.5, 46.0, history, humidity)
    assert list(humidity) == [45.0]


def test_zero_interval_admits_every_sample(clock):
    policy = HistoryAdmissionPolicy(0, clock=clock)
    history, humidity = _buffers(size=2)

    for value in (1.0, 2.0, 3.0):
        assert policy.admit(value, value * 10, history, humidity) is True
    assert list(history) == [2.0, 3.0]
    assert list(humidity) == [20.0, 30.0]
