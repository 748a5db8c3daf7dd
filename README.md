# legtraj

This package provides building blocks for the trajectory optimization of legged robots.

## Parameters

`legtraj.parameters.Parameters` is a dataclass that describes the problem. It holds:

- the phase durations of each end-effector (`ee_phase_durations`);
- the initial contact states (`ee_in_contact_at_start`);
- the stance positions (`ee_stance_position`);
- the number of polynomials per phase;
- the sampling intervals of the constraints;
- torque and force limits;
- the constraints in use (`ConstraintName`) and the weighted costs in use (`CostName`).

It has these methods:

- `total_time()` gives the sum of the phase durations. It raises `ValueError` if the end-effectors do not sum to the same total.
- `base_poly_durations()` splits the total time into base polynomials of length `duration_base_polynomial`.
- `phase_count(ee)` and `ee_count()` give the number of phases and the number of end-effectors.
- `optimize_phase_durations()` adds the `TOTAL_TIME` constraint.
- `is_optimize_timings()` reports whether that constraint is present.

## Node variables

In `legtraj.nodes_variables`, `NodesVariables` keeps a list of spline nodes. Each node is a `(2, n_dim)` array that holds the position row and the velocity row. Some of these values are optimization variables, and `NodeValueInfo` identifies each one by node, derivative and dimension. The class has these methods:

- `values()` and `set_variables(x)` read and write the variables. `set_variables(x)` also notifies the observers.
- `set_by_linear_interpolation(...)` gives the variables a first guess.
- `add_bound`, `add_bounds`, `add_start_bound` and `add_final_bound` fix variables to a value. The result is read back through `bounds()`.
- `opt_index(nvi)` maps a node value to its optimization index. It returns `None` if that value is not optimized.

`NodesVariablesAll` optimizes every position and every velocity.

`legtraj.nodes_variables_phase_based` builds the nodes from phases that alternate between constant and changing (`build_poly_infos`, `PolyInfo`). It has three classes:

- `NodesVariablesEEMotion`: a stance foot does not move. One position is shared by both stance nodes, and the vertical swing velocity is held at zero.
- `NodesVariablesEEForce` and `NodesVariablesEETorque`: the values are zero and not optimized during swing.

## Phase durations

In `legtraj.phase_durations`, `PhaseDurations` holds the contact schedule of one end-effector:

- Every phase duration except the last is an optimization variable. The last phase fills up the fixed total time.
- `is_contact_phase(t)` gives the contact state at time `t`.
- `jacobian_of_pos(current_phase, dx_dt, xd)` gives the derivative of a spline position with respect to the durations.

## Install

```
pip install .
```

## Example

```python
import numpy as np
from legtraj.parameters import Parameters
from legtraj.nodes_variables import Dx
from legtraj.nodes_variables_phase_based import NodesVariablesEEMotion
from legtraj.phase_durations import PhaseDurations

params = Parameters()
params.ee_phase_durations.append([0.4, 0.2, 0.4])
params.ee_in_contact_at_start.append(True)
print(params.total_time(), params.base_poly_durations())

motion = NodesVariablesEEMotion(3, True, "ee-motion_0", 2)
motion.set_by_linear_interpolation(np.zeros(3), np.array([1.0, 0.0, 0.0]), 1.0)
motion.add_bounds(0, Dx.POS, [0, 1], np.zeros(3))
print(motion.values())

schedule = PhaseDurations(0, [0.4, 0.2, 0.4], True, 0.2, 1.0)
print(schedule.is_contact_phase(0.5))   # False: the foot is in swing
schedule.set_variables([0.3, 0.3])
print(schedule.phase_durations())       # the last phase fills up to 1.0
```

## What this package does not do

- It has no terrain models, so there are no height maps and no terrain normals.
- It does not assemble or solve the optimization problem. It has no solver, no dynamics, no constraint or cost evaluation, and no spline evaluation over time.
- It provides no command-line tool.

`ConstraintName` and `CostName` only record which terms are meant to be used.

## Tests

```
pip install ".[test]"
pytest
```