"""Optimization variables given by the values of spline nodes."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

import numpy as np


class Dx(IntEnum):
    """Derivative of a node value that is stored in a node."""

    POS = 0
    VEL = 1


N_DERIVATIVES = len(Dx)


class Side(IntEnum):
    """Which end of a polynomial a node sits at."""

    START = 0
    END = 1


@dataclass(frozen=True)
class Bounds:
    """Lower and upper bound of one optimization variable."""

    lower: float = -math.inf
    upper: float = math.inf


NO_BOUND = Bounds()


@dataclass(frozen=True)
class NodeValueInfo:
    """Identifies one scalar value inside the nodes: node, derivative, dimension."""

    node_id: int = 0
    deriv: Dx = Dx.POS
    dim: int = 0


class NodesObserver(Protocol):
    """Anything that must be told when the node values change."""

    def update_nodes(self) -> None: ...


class NodesVariables(ABC):
    """Spline nodes whose position/velocity values are optimization variables.

    Each node is a ``(2, n_dim)`` array holding position and velocity. A
    subclass decides which node values each optimization index stands for.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._n_dim = 0
        self._rows = 0
        self._nodes: list[np.ndarray] = []
        self._bounds: list[Bounds] = []
        self._observers: list[NodesObserver] = []

    @property
    def n_dim(self) -> int:
        """Dimension of each node value, e.g. 3 for a 3D position."""
        return self._n_dim

    @property
    def rows(self) -> int:
        """Number of optimization variables."""
        return self._rows

    def _set_rows(self, n_variables: int) -> None:
        self._rows = n_variables

    def _make_nodes(self, n_nodes: int, n_dim: int) -> None:
        self._n_dim = n_dim
        self._nodes = [np.zeros((N_DERIVATIVES, n_dim)) for _ in range(n_nodes)]

    @abstractmethod
    def node_values_info(self, idx: int) -> list[NodeValueInfo]:
        """Return the node values that optimization index ``idx`` stands for."""

    def _all_infos(self) -> Iterable[tuple[int, NodeValueInfo]]:
        for idx in range(self._rows):
            for nvi in self.node_values_info(idx):
                yield idx, nvi

    def opt_index(self, nvi: NodeValueInfo) -> int | None:
        """Return the optimization index of a node value, or None if it is not optimized."""
        for idx, candidate in self._all_infos():
            if candidate == nvi:
                return idx
        return None

    def values(self) -> np.ndarray:
        """Return the current values of all optimization variables."""
        x = np.zeros(self._rows)
        for idx, nvi in self._all_infos():
            x[idx] = self._nodes[nvi.node_id][nvi.deriv][nvi.dim]
        return x

    def set_variables(self, x: Sequence[float] | np.ndarray) -> None:
        """Write the optimization variables into the nodes and notify observers."""
        x = np.asarray(x, dtype=float)
        if x.shape != (self._rows,):
            raise ValueError(f"expected {self._rows} values, got shape {x.shape}")
        for idx, nvi in self._all_infos():
            self._nodes[nvi.node_id][nvi.deriv][nvi.dim] = x[idx]
        self.update_observers()

    def add_observer(self, observer: NodesObserver) -> None:
        """Register an object whose ``update_nodes`` is called on every change."""
        self._observers.append(observer)

    def update_observers(self) -> None:
        """Tell every observer that the node values changed."""
        for observer in self._observers:
            observer.update_nodes()

    @staticmethod
    def node_id(poly_id: int, side: Side | int) -> int:
        """Return the id of the node at the given side of polynomial ``poly_id``."""
        return poly_id + int(Side(side))

    def boundary_nodes(self, poly_id: int) -> list[np.ndarray]:
        """Return copies of the start and end node of polynomial ``poly_id``."""
        if not 0 <= poly_id < self.polynomial_count():
            raise IndexError(f"polynomial id out of range: {poly_id}")
        return [
            self._nodes[self.node_id(poly_id, side)].copy()
            for side in (Side.START, Side.END)
        ]

    def polynomial_count(self) -> int:
        """Number of polynomials spanned by the nodes."""
        return len(self._nodes) - 1

    def bounds(self) -> list[Bounds]:
        """Bounds of every optimization variable."""
        return list(self._bounds)

    def nodes(self) -> list[np.ndarray]:
        """Copies of all nodes, each a ``(2, n_dim)`` array of position and velocity."""
        return [node.copy() for node in self._nodes]

    def set_by_linear_interpolation(
        self,
        initial_val: Sequence[float] | np.ndarray,
        final_val: Sequence[float] | np.ndarray,
        t_total: float,
    ) -> None:
        """Initialize optimized positions along a line and velocities to the average.

        Node values that are not optimization variables are left untouched.
        """
        initial_val = np.asarray(initial_val, dtype=float)
        dp = np.asarray(final_val, dtype=float) - initial_val
        average_velocity = dp / t_total
        num_nodes = len(self._nodes)
        for _, nvi in self._all_infos():
            node = self._nodes[nvi.node_id]
            if nvi.deriv == Dx.POS:
                pos = initial_val + nvi.node_id / (num_nodes - 1) * dp
                node[Dx.POS][nvi.dim] = pos[nvi.dim]
            elif nvi.deriv == Dx.VEL:
                node[Dx.VEL][nvi.dim] = average_velocity[nvi.dim]

    def add_bounds(
        self,
        node_id: int,
        deriv: Dx | int,
        dimensions: Iterable[int],
        val: Sequence[float] | np.ndarray,
    ) -> None:
        """Fix the given dimensions of a node value to the entries of ``val``."""
        for dim in dimensions:
            self.add_bound(NodeValueInfo(node_id, Dx(deriv), dim), float(val[dim]))

    def add_bound(self, nvi: NodeValueInfo, val: float) -> None:
        """Fix every optimization variable representing ``nvi`` to ``val``."""
        for idx, candidate in self._all_infos():
            if candidate == nvi:
                self._bounds[idx] = Bounds(val, val)

    def add_start_bound(
        self, deriv: Dx | int, dimensions: Iterable[int], val: Sequence[float] | np.ndarray
    ) -> None:
        """Fix values of the first node."""
        self.add_bounds(0, deriv, dimensions, val)

    def add_final_bound(
        self, deriv: Dx | int, dimensions: Iterable[int], val: Sequence[float] | np.ndarray
    ) -> None:
        """Fix values of the last node."""
        self.add_bounds(len(self._nodes) - 1, deriv, dimensions, val)


class NodesVariablesAll(NodesVariables):
    """Nodes whose position and velocity values are all optimized."""

    def __init__(self, n_nodes: int, n_dim: int, variable_id: str) -> None:
        super().__init__(variable_id)
        n_opt_variables = n_nodes * N_DERIVATIVES * n_dim
        self._make_nodes(n_nodes, n_dim)
        self._bounds = [NO_BOUND] * n_opt_variables
        self._set_rows(n_opt_variables)

    def node_values_info(self, idx: int) -> list[NodeValueInfo]:
        if not 0 <= idx < self._rows:
            raise IndexError(f"optimization index out of range: {idx}")
        per_node = N_DERIVATIVES * self._n_dim
        internal_id = idx % per_node  # p.x, p.y, p.z, v.x, v.y, v.z
        deriv = Dx.POS if internal_id < self._n_dim else Dx.VEL
        return [NodeValueInfo(idx // per_node, deriv, internal_id % self._n_dim)]