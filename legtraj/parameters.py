"""Parameters that shape the trajectory optimization problem."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

_X, _Y, _Z = 0, 1, 2


class ConstraintName(Enum):
    """Constraints that can be added to the problem."""

    DYNAMIC = auto()
    ENDEFFECTOR_ROM = auto()
    TOTAL_TIME = auto()
    TERRAIN = auto()
    TERRAIN_HARD = auto()
    FORCE = auto()
    TORQUE = auto()
    SWING = auto()
    BASE_ROM = auto()
    BASE_ACC = auto()


class CostName(Enum):
    """Costs that can be added to the problem."""

    FORCES = auto()
    EE_MOTION = auto()


def _default_constraints() -> list[ConstraintName]:
    return [
        ConstraintName.TERRAIN,
        ConstraintName.DYNAMIC,
        ConstraintName.BASE_ACC,
        ConstraintName.ENDEFFECTOR_ROM,
        ConstraintName.FORCE,
        ConstraintName.SWING,
    ]


def _all_dims() -> list[int]:
    return [_X, _Y, _Z]


@dataclass
class Parameters:
    """Motion and problem parameters; defaults give a minimal basic problem."""

    ee_phase_durations: list[list[float]] = field(default_factory=list)
    ee_in_contact_at_start: list[bool] = field(default_factory=list)
    ee_stance_position: list[list[tuple[float, float]]] = field(default_factory=list)

    duration_base_polynomial: float = 0.1
    force_polynomials_per_stance_phase: int = 3
    torque_polynomials_per_stance_phase: int = 3
    ee_polynomials_per_swing_phase: int = 2

    force_limit_in_normal_direction: float = 1000.0
    torque_tx_min: float = -100.0
    torque_tx_max: float = 100.0
    torque_ty_min: float = -100.0
    torque_ty_max: float = 100.0
    torque_k_friction: float = 2.0 / 3.0

    dt_constraint_range_of_motion: float = 0.08
    dt_constraint_dynamic: float = 0.1
    dt_constraint_base_motion: float = 0.1 / 4.0
    bound_phase_duration: tuple[float, float] = (0.2, 1.0)

    constraints: list[ConstraintName] = field(default_factory=_default_constraints)
    costs: list[tuple[CostName, float]] = field(default_factory=list)

    bounds_final_lin_pos: list[int] = field(default_factory=_all_dims)
    bounds_final_lin_vel: list[int] = field(default_factory=_all_dims)
    bounds_final_ang_pos: list[int] = field(default_factory=_all_dims)
    bounds_final_ang_vel: list[int] = field(default_factory=_all_dims)

    def optimize_phase_durations(self) -> None:
        """Optimize over the phase durations by constraining the total time."""
        self.constraints.append(ConstraintName.TOTAL_TIME)

    def base_poly_durations(self) -> list[float]:
        """Durations of the base polynomials that fill up the total time."""
        dt = self.duration_base_polynomial
        t_left = self.total_time()
        eps = 1e-10  # repeated subtraction accumulates error
        durations = []
        while t_left > eps:
            durations.append(dt if t_left > dt else t_left)
            t_left -= dt
        return durations

    def phase_count(self, ee: int) -> int:
        """Number of contact/swing phases of endeffector ``ee``."""
        if ee < 0:
            raise IndexError(f"endeffector index out of range: {ee}")
        return len(self.ee_phase_durations[ee])

    def ee_count(self) -> int:
        """Number of endeffectors."""
        return len(self.ee_in_contact_at_start)

    def total_time(self) -> float:
        """Total duration of the motion; every foot must span the same time."""
        totals = [sum(durations, 0.0) for durations in self.ee_phase_durations]
        if not totals:
            return 0.0
        reference = totals[0]
        if any(abs(t - reference) >= 1e-6 for t in totals):
            raise ValueError("phase durations of the endeffectors sum to different totals")
        return reference

    def is_optimize_timings(self) -> bool:
        """True if the phase durations are optimized (total time is constrained)."""
        return ConstraintName.TOTAL_TIME in self.constraints