import numpy as np
import pytest

from legtraj.nodes_variables import Bounds, Dx, NodeValueInfo
from legtraj.nodes_variables_phase_based import (
    NodesVariablesEEForce,
    NodesVariablesEEMotion,
    NodesVariablesEETorque,
    PolyInfo,
    build_poly_infos,
)


def _motion():
    return NodesVariablesEEMotion(3, True, "motion", 2)


def _force():
    return NodesVariablesEEForce(3, True, "force", 2)


def test_build_poly_infos_alternates_phases():
    infos = build_poly_infos(3, True, 2)
    assert infos == [
        PolyInfo(0, 0, 1, True),
        PolyInfo(1, 0, 2, False),
        PolyInfo(1, 1, 2, False),
        PolyInfo(2, 0, 1, True),
    ]


def test_build_poly_infos_starting_with_changing_phase():
    infos = build_poly_infos(2, False, 3)
    assert [i.is_constant for i in infos] == [False, False, False, True]
    assert [i.poly_in_phase for i in infos] == [0, 1, 2, 0]


def test_motion_node_structure():
    m = _motion()
    assert m.polynomial_count() == 4
    assert m.indices_of_non_constant_nodes() == [2]
    assert m.rows == 11
    assert len(m.bounds()) == m.rows
    assert all(b == Bounds() for b in m.bounds())


def test_motion_stance_position_shared_between_nodes():
    m = _motion()
    info = m.node_values_info(0)
    assert info == [NodeValueInfo(0, Dx.POS, 0), NodeValueInfo(1, Dx.POS, 0)]


def test_motion_swing_z_velocity_not_optimized():
    m = _motion()
    assert m.opt_index(NodeValueInfo(2, Dx.VEL, 2)) is None
    assert m.opt_index(NodeValueInfo(2, Dx.VEL, 0)) is not None
    assert m.nodes()[2][Dx.VEL][2] == 0.0


def test_motion_set_variables_round_trip():
    m = _motion()
    x = np.arange(1.0, m.rows + 1.0)
    m.set_variables(x)
    np.testing.assert_allclose(m.values(), x)
    nodes = m.nodes()
    np.testing.assert_allclose(nodes[0][Dx.POS], nodes[1][Dx.POS])
    np.testing.assert_allclose(nodes[3][Dx.POS], nodes[4][Dx.POS])
    np.testing.assert_allclose(nodes[0][Dx.VEL], np.zeros(3))


def test_motion_value_at_start_of_phase():
    m = _motion()
    m.set_by_linear_interpolation([0.0, 0.0, 0.0], [4.0, 0.0, 0.0], 2.0)
    node = m.node_id_at_start_of_phase(2)
    np.testing.assert_allclose(m.value_at_start_of_phase(2), m.nodes()[node][Dx.POS])


def test_convert_phase_to_poly_durations():
    m = _motion()
    durations = m.convert_phase_to_poly_durations([0.5, 0.3, 0.4])
    assert durations == pytest.approx([0.5, 0.15, 0.15, 0.4])
    assert sum(durations) == pytest.approx(1.2)


def test_derivative_and_prev_polynomials():
    m = _motion()
    assert m.derivative_of_poly_duration_wrt_phase_duration(0) == 1.0
    assert m.derivative_of_poly_duration_wrt_phase_duration(1) == 0.5
    assert m.number_of_prev_polynomials_in_phase(2) == 1
    assert m.number_of_prev_polynomials_in_phase(0) == 0


def test_phase_queries():
    m = _motion()
    assert m.phase(2) == 1
    assert m.poly_id_at_start_of_phase(2) == 3
    assert m.node_id_at_start_of_phase(1) == 1
    assert m.is_in_constant_phase(3)
    assert not m.is_in_constant_phase(1)


def test_phase_of_constant_node_raises():
    with pytest.raises(ValueError):
        _motion().phase(0)


def test_missing_phase_raises():
    with pytest.raises(ValueError):
        _motion().poly_id_at_start_of_phase(7)


def test_adjacent_poly_ids():
    m = _motion()
    assert m.adjacent_poly_ids(0) == [0]
    assert m.adjacent_poly_ids(4) == [3]
    assert m.adjacent_poly_ids(2) == [1, 2]
    with pytest.raises(IndexError):
        m.adjacent_poly_ids(5)


def test_force_node_structure():
    f = _force()
    assert f.polynomial_count() == 5
    assert f.indices_of_non_constant_nodes() == [0, 1, 4, 5]
    assert f.rows == 4 * 6


def test_force_swing_nodes_zero_after_set():
    f = _force()
    f.set_variables(np.ones(f.rows))
    nodes = f.nodes()
    np.testing.assert_allclose(nodes[2], np.zeros((2, 3)))
    np.testing.assert_allclose(nodes[3], np.zeros((2, 3)))
    np.testing.assert_allclose(nodes[0], np.ones((2, 3)))


def test_torque_matches_force_parameterization():
    f = _force()
    t = NodesVariablesEETorque(3, True, "torque", 2)
    assert t.rows == f.rows
    assert [t.node_values_info(i) for i in range(t.rows)] == [
        f.node_values_info(i) for i in range(f.rows)
    ]


def test_node_values_info_out_of_range():
    with pytest.raises(IndexError):
        _force().node_values_info(100)


def test_bounds_on_motion_stance_apply_to_shared_variable():
    m = _motion()
    m.add_bounds(0, Dx.POS, [0, 1], [0.3, -0.1, 0.0])
    assert m.bounds()[0] == Bounds(0.3, 0.3)
    assert m.bounds()[1] == Bounds(-0.1, -0.1)
    assert m.bounds()[2] == Bounds()