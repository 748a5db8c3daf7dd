"""Durations of the contact and swing phases of one endeffector."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import numpy as np

from legtraj.nodes_variables import Bounds

_SEGMENT_EPS = 1e-10


class PhaseDurationsObserver(Protocol):
    """Anything that must be told when the phase durations change."""

    def update_polynomial_durations(self) -> None: ...


def _schedule_name(ee: int) -> str:
    return f"ee_schedule_{ee}"


def _segment_id(t_global: float, durations: Sequence[float]) -> int:
    t = 0.0
    for i, duration in enumerate(durations):
        t += duration
        if t >= t_global - _SEGMENT_EPS:
            return i
    raise ValueError(f"time {t_global} lies after the last phase")


class PhaseDurations:
    """Phase durations of one endeffector as optimization variables.

    The last phase is not optimized: it fills up the remaining total time.
    """

    def __init__(
        self,
        ee: int,
        timings: Sequence[float],
        is_first_phase_in_contact: bool,
        min_duration: float,
        max_duration: float,
    ) -> None:
        if not timings:
            raise ValueError("at least one phase duration is required")
        self.name = _schedule_name(ee)
        self._durations = [float(t) for t in timings]
        self._rows = len(self._durations) - 1
        self._t_total = sum(self._durations, 0.0)
        self._phase_duration_bounds = Bounds(min_duration, max_duration)
        self._initial_contact_state = is_first_phase_in_contact
        self._observers: list[PhaseDurationsObserver] = []

    @property
    def rows(self) -> int:
        """Number of optimization variables."""
        return self._rows

    @property
    def total_time(self) -> float:
        """Fixed sum of all phase durations."""
        return self._t_total

    def add_observer(self, observer: PhaseDurationsObserver) -> None:
        """Register an object notified on every change of the durations."""
        self._observers.append(observer)

    def update_observers(self) -> None:
        """Tell every observer that the durations changed."""
        for observer in self._observers:
            observer.update_polynomial_durations()

    def values(self) -> np.ndarray:
        """Durations of all but the last phase."""
        return np.array(self._durations[: self._rows], dtype=float)

    def set_variables(self, x: Sequence[float] | np.ndarray) -> None:
        """Set the optimized durations; the last phase fills up the total time."""
        x = np.asarray(x, dtype=float)
        if x.shape != (self._rows,):
            raise ValueError(f"expected {self._rows} values, got shape {x.shape}")
        total = float(x.sum())
        if not self._t_total > total:
            raise ValueError("optimized phase durations exceed the total time")
        self._durations[: self._rows] = x.tolist()
        self._durations[-1] = self._t_total - total
        self.update_observers()

    def bounds(self) -> list[Bounds]:
        """Bounds of every optimized phase duration."""
        return [self._phase_duration_bounds] * self._rows

    def phase_durations(self) -> list[float]:
        """Durations of all phases, including the last one."""
        return list(self._durations)

    def is_contact_phase(self, t: float) -> bool:
        """True if the endeffector is in contact at time ``t``."""
        phase_id = _segment_id(t, self._durations)
        if phase_id % 2 == 0:
            return self._initial_contact_state
        return not self._initial_contact_state

    def jacobian_of_pos(
        self,
        current_phase: int,
        dx_dt: Sequence[float] | np.ndarray,
        xd: Sequence[float] | np.ndarray,
    ) -> np.ndarray:
        """Derivative of a spline position w.r.t. the optimized phase durations.

        ``dx_dt`` is the change of the position when the current phase
        stretches, ``xd`` the velocity of the spline at that time.
        """
        dx_dt = np.asarray(dx_dt, dtype=float)
        xd = np.asarray(xd, dtype=float)
        jac = np.zeros((xd.shape[0], self._rows))
        in_last_phase = current_phase == len(self._durations) - 1

        # the duration of the current phase stretches or compresses the spline
        if not in_last_phase:
            jac[:, current_phase] = dx_dt

        for phase in range(current_phase):
            # every previous duration shifts the spline along the time axis
            jac[:, phase] = -xd
            # with fixed final time they also stretch the last phase
            if in_last_phase:
                jac[:, phase] -= dx_dt
        return jac