"""Gait parameters, spline node variables and phase durations for legged-robot trajectory optimization."""

__version__ = "0.1.0"
__all__ = [
    "parameters",
    "nodes_variables",
    "nodes_variables_phase_based",
    "phase_durations",
]