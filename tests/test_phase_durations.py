import numpy as np
import pytest

from legtraj.nodes_variables import Bounds
from legtraj.phase_durations import PhaseDurations


def _durations():
    return PhaseDurations(0, [0.5, 0.3, 0.4], True, 0.2, 1.0)


class _Recorder:
    def __init__(self):
        self.calls = 0

    def update_polynomial_durations(self):
        self.calls += 1


def test_last_phase_not_optimized():
    d = _durations()
    assert d.rows == 2
    np.testing.assert_allclose(d.values(), [0.5, 0.3])
    assert d.total_time == pytest.approx(1.2)


def test_bounds():
    assert _durations().bounds() == [Bounds(0.2, 1.0), Bounds(0.2, 1.0)]


def test_set_variables_fills_total_time():
    d = _durations()
    d.set_variables([0.4, 0.4])
    assert d.phase_durations() == pytest.approx([0.4, 0.4, 0.4])
    assert sum(d.phase_durations()) == pytest.approx(d.total_time)
    np.testing.assert_allclose(d.values(), [0.4, 0.4])


def test_set_variables_exceeding_total_raises():
    with pytest.raises(ValueError):
        _durations().set_variables([1.0, 0.5])


def test_set_variables_wrong_size_raises():
    with pytest.raises(ValueError):
        _durations().set_variables([0.1])


def test_observers_notified():
    d = _durations()
    recorder = _Recorder()
    d.add_observer(recorder)
    d.set_variables([0.3, 0.3])
    assert recorder.calls == 1
    d.update_observers()
    assert recorder.calls == 2


def test_is_contact_phase_alternates():
    d = _durations()
    assert d.is_contact_phase(0.1)
    assert not d.is_contact_phase(0.6)
    assert d.is_contact_phase(1.0)


def test_is_contact_phase_starting_in_flight():
    d = PhaseDurations(1, [0.5, 0.3, 0.4], False, 0.2, 1.0)
    assert not d.is_contact_phase(0.1)
    assert d.is_contact_phase(0.6)


def test_is_contact_phase_after_end_raises():
    with pytest.raises(ValueError):
        _durations().is_contact_phase(5.0)


def test_jacobian_intermediate_phase():
    d = _durations()
    dx_dt = np.array([1.0, 2.0, 3.0])
    xd = np.array([0.5, -0.5, 0.25])
    jac = d.jacobian_of_pos(1, dx_dt, xd)
    assert jac.shape == (3, 2)
    np.testing.assert_allclose(jac[:, 1], dx_dt)
    np.testing.assert_allclose(jac[:, 0], -xd)


def test_jacobian_last_phase():
    d = _durations()
    dx_dt = np.array([1.0, 2.0, 3.0])
    xd = np.array([0.5, -0.5, 0.25])
    jac = d.jacobian_of_pos(2, dx_dt, xd)
    for col in range(2):
        np.testing.assert_allclose(jac[:, col], -xd - dx_dt)


def test_jacobian_first_phase_only_stretches():
    d = _durations()
    dx_dt = np.array([1.0, 2.0, 3.0])
    jac = d.jacobian_of_pos(0, dx_dt, np.zeros(3))
    np.testing.assert_allclose(jac[:, 0], dx_dt)
    np.testing.assert_allclose(jac[:, 1], np.zeros(3))


def test_empty_timings_raise():
    with pytest.raises(ValueError):
        PhaseDurations(0, [], True, 0.2, 1.0)