"""Spline nodes whose parameterization follows alternating contact phases."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from legtraj.nodes_variables import (
    NO_BOUND,
    Dx,
    NodesVariables,
    NodeValueInfo,
    Side,
)

_N_DIM_3D = 3
_Z = 2


@dataclass(frozen=True)
class PolyInfo:
    """Where a polynomial sits within the phases."""

    phase: int
    poly_in_phase: int
    n_polys_in_phase: int
    is_constant: bool


def build_poly_infos(
    phase_count: int, first_phase_constant: bool, n_polys_in_changing_phase: int
) -> list[PolyInfo]:
    """Describe every polynomial of phases that alternate constant/changing.

    A constant phase is spanned by a single polynomial, a changing phase by
    ``n_polys_in_changing_phase`` polynomials.
    """
    infos: list[PolyInfo] = []
    phase_constant = first_phase_constant
    for phase in range(phase_count):
        if phase_constant:
            infos.append(PolyInfo(phase, 0, 1, True))
        else:
            infos.extend(
                PolyInfo(phase, j, n_polys_in_changing_phase, False)
                for j in range(n_polys_in_changing_phase)
            )
        phase_constant = not phase_constant
    return infos


class NodesVariablesPhaseBased(NodesVariables):
    """Nodes of a 3D spline whose polynomials belong to alternating phases.

    In a constant phase the node values do not change, so fewer optimization
    variables are needed; subclasses decide how the nodes are parameterized.
    """

    def __init__(
        self,
        phase_count: int,
        first_phase_constant: bool,
        name: str,
        n_polys_in_changing_phase: int,
    ) -> None:
        super().__init__(name)
        self._polynomial_info = build_poly_infos(
            phase_count, first_phase_constant, n_polys_in_changing_phase
        )
        self._make_nodes(len(self._polynomial_info) + 1, _N_DIM_3D)
        self._index_to_node_value_info: list[list[NodeValueInfo]] = []

    def _set_number_of_variables(self, n_variables: int) -> None:
        self._bounds = [NO_BOUND] * n_variables
        self._set_rows(n_variables)

    def node_values_info(self, idx: int) -> list[NodeValueInfo]:
        if not 0 <= idx < len(self._index_to_node_value_info):
            raise IndexError(f"optimization index out of range: {idx}")
        return list(self._index_to_node_value_info[idx])

    def convert_phase_to_poly_durations(self, phase_durations: Sequence[float]) -> list[float]:
        """Split every phase duration equally among the polynomials of that phase."""
        return [
            phase_durations[info.phase] / info.n_polys_in_phase
            for info in self._polynomial_info
        ]

    def derivative_of_poly_duration_wrt_phase_duration(self, poly_id: int) -> float:
        """How a polynomial's duration changes with the duration of its phase."""
        return 1.0 / self._polynomial_info[poly_id].n_polys_in_phase

    def number_of_prev_polynomials_in_phase(self, poly_id: int) -> int:
        """Number of polynomials before ``poly_id`` within the same phase."""
        return self._polynomial_info[poly_id].poly_in_phase

    def is_constant_node(self, node_id: int) -> bool:
        """True if the polynomial left or right of the node is in a constant phase."""
        return any(self.is_in_constant_phase(p) for p in self.adjacent_poly_ids(node_id))

    def is_in_constant_phase(self, poly_id: int) -> bool:
        """True if the polynomial belongs to a constant phase."""
        return self._polynomial_info[poly_id].is_constant

    def indices_of_non_constant_nodes(self) -> list[int]:
        """Ids of all nodes that are not constant."""
        return [i for i in range(len(self._nodes)) if not self.is_constant_node(i)]

    def phase(self, node_id: int) -> int:
        """Phase of a non-constant node."""
        if self.is_constant_node(node_id):
            raise ValueError(f"node {node_id} is constant and borders two phases")
        return self._polynomial_info[self.adjacent_poly_ids(node_id)[0]].phase

    def poly_id_at_start_of_phase(self, phase: int) -> int:
        """Id of the first polynomial of ``phase``."""
        for poly_id, info in enumerate(self._polynomial_info):
            if info.phase == phase:
                return poly_id
        raise ValueError(f"no polynomial belongs to phase {phase}")

    def value_at_start_of_phase(self, phase: int) -> np.ndarray:
        """Position of the node at the start of ``phase``."""
        return self._nodes[self.node_id_at_start_of_phase(phase)][Dx.POS].copy()

    def node_id_at_start_of_phase(self, phase: int) -> int:
        """Id of the node at the start of ``phase``."""
        return self.node_id(self.poly_id_at_start_of_phase(phase), Side.START)

    def adjacent_poly_ids(self, node_id: int) -> list[int]:
        """Ids of the polynomials left and right of a node."""
        last_node_id = len(self._nodes) - 1
        if not 0 <= node_id <= last_node_id:
            raise IndexError(f"node id out of range: {node_id}")
        if node_id == 0:
            return [0]
        if node_id == last_node_id:
            return [last_node_id - 1]
        return [node_id - 1, node_id]


class NodesVariablesEEMotion(NodesVariablesPhaseBased):
    """Endeffector motion nodes: the foot stands still during contact."""

    def __init__(
        self,
        phase_count: int,
        is_in_contact_at_start: bool,
        name: str,
        n_polys_in_changing_phase: int,
    ) -> None:
        # the contact phase is the constant one for motion
        super().__init__(phase_count, is_in_contact_at_start, name, n_polys_in_changing_phase)
        self._index_to_node_value_info = self._phase_based_parameterization()
        self._set_number_of_variables(len(self._index_to_node_value_info))

    def _phase_based_parameterization(self) -> list[list[NodeValueInfo]]:
        index_map: list[list[NodeValueInfo]] = []
        node_id = 0
        while node_id < len(self._nodes):
            if not self.is_constant_node(node_id):
                # swing node: positions and horizontal velocities are optimized
                for dim in range(self._n_dim):
                    index_map.append([NodeValueInfo(node_id, Dx.POS, dim)])
                    if dim == _Z:
                        # vertical velocity fixed to zero gives smoother steps
                        self._nodes[node_id][Dx.VEL][_Z] = 0.0
                    else:
                        index_map.append([NodeValueInfo(node_id, Dx.VEL, dim)])
                node_id += 1
            else:
                # stance: the foot does not move, one position for both nodes
                self._nodes[node_id][Dx.VEL] = 0.0
                self._nodes[node_id + 1][Dx.VEL] = 0.0
                for dim in range(self._n_dim):
                    index_map.append(
                        [
                            NodeValueInfo(node_id, Dx.POS, dim),
                            NodeValueInfo(node_id + 1, Dx.POS, dim),
                        ]
                    )
                node_id += 2
        return index_map


class _ContactOnlyNodes(NodesVariablesPhaseBased):
    """Nodes that are non-zero only during contact, zero during swing."""

    def __init__(
        self,
        phase_count: int,
        is_in_contact_at_start: bool,
        name: str,
        n_polys_in_changing_phase: int,
    ) -> None:
        # the contact phase is the changing one here
        super().__init__(
            phase_count, not is_in_contact_at_start, name, n_polys_in_changing_phase
        )
        self._index_to_node_value_info = self._phase_based_parameterization()
        self._set_number_of_variables(len(self._index_to_node_value_info))

    def _phase_based_parameterization(self) -> list[list[NodeValueInfo]]:
        index_map: list[list[NodeValueInfo]] = []
        node_id = 0
        while node_id < len(self._nodes):
            if not self.is_constant_node(node_id):
                for dim in range(self._n_dim):
                    index_map.append([NodeValueInfo(node_id, Dx.POS, dim)])
                    index_map.append([NodeValueInfo(node_id, Dx.VEL, dim)])
                node_id += 1
            else:
                # nothing acts during swing: both nodes are zero and not optimized
                self._nodes[node_id][:] = 0.0
                self._nodes[node_id + 1][:] = 0.0
                node_id += 2
        return index_map


class NodesVariablesEEForce(_ContactOnlyNodes):
    """Endeffector force nodes: forces exist only during contact."""


class NodesVariablesEETorque(_ContactOnlyNodes):
    """Endeffector torque nodes: torques exist only during contact."""