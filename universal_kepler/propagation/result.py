"""
Propagation Results
===================

Per-step and per-call result containers of the Kepler state propagator.
"""
import numpy as np

from dataclasses import dataclass
from enum        import IntEnum


class ExitFlag(IntEnum):
  """
  How a time step was propagated.
  """
  OK       =  1  # universal-variable state transition converged
  FALLBACK = -1  # Kepler loop was unsafe, classical element propagation used


@dataclass
class StepResult:
  """
  Outcome of a single time step.
  """
  state                : np.ndarray  # [pos_x, pos_y, pos_z, vel_x, vel_y, vel_z]
  exit_flag            : ExitFlag
  kepler_iterations    : int
  cont_frac_iterations : int
  time_error           : float       # [s]


@dataclass
class PropagationResult:
  """
  Outcome of a propagation call, one row per requested time step.

  The wide-form accessors (x, y, z, vx, vy, vz, position, velocity) are views
  of the states array.
  """
  time_steps           : np.ndarray  # requested time steps [s], shape (n,)
  states               : np.ndarray  # shape (n, 6)
  exit_flags           : np.ndarray  # ExitFlag values, shape (n,)
  kepler_iterations    : np.ndarray  # outer Kepler-loop count, shape (n,)
  cont_frac_iterations : np.ndarray  # cumulative continued fraction count, shape (n,)
  time_error           : np.ndarray  # final |time residual| [s], shape (n,)

  @classmethod
  def allocate(
    cls,
    time_steps : np.ndarray,
  ) -> 'PropagationResult':
    num_steps = len(time_steps)
    return cls(
      time_steps           = np.asarray(time_steps, dtype=float),
      states               = np.full((num_steps, 6), np.nan),
      exit_flags           = np.zeros(num_steps, dtype=int),
      kepler_iterations    = np.zeros(num_steps, dtype=int),
      cont_frac_iterations = np.zeros(num_steps, dtype=int),
      time_error           = np.zeros(num_steps),
    )

  def store(
    self,
    index : int,
    step  : StepResult,
  ) -> None:
    self.states[index]               = step.state
    self.exit_flags[index]           = int(step.exit_flag)
    self.kepler_iterations[index]    = step.kepler_iterations
    self.cont_frac_iterations[index] = step.cont_frac_iterations
    self.time_error[index]           = step.time_error

  def __len__(self) -> int:
    return len(self.time_steps)

  def __getitem__(
    self,
    index : int,
  ) -> StepResult:
    return StepResult(
      state                = self.states[index].copy(),
      exit_flag            = ExitFlag(int(self.exit_flags[index])),
      kepler_iterations    = int(self.kepler_iterations[index]),
      cont_frac_iterations = int(self.cont_frac_iterations[index]),
      time_error           = float(self.time_error[index]),
    )

  @property
  def converged(self) -> np.ndarray:
    return self.exit_flags == ExitFlag.OK

  @property
  def diagnostics(self) -> dict:
    return {
      'kepler_iterations'    : self.kepler_iterations,
      'cont_frac_iterations' : self.cont_frac_iterations,
      'time_error'           : self.time_error,
    }

  @property
  def position(self) -> np.ndarray:
    return self.states[:, 0:3]

  @property
  def velocity(self) -> np.ndarray:
    return self.states[:, 3:6]

  @property
  def x(self) -> np.ndarray:
    return self.states[:, 0]

  @property
  def y(self) -> np.ndarray:
    return self.states[:, 1]

  @property
  def z(self) -> np.ndarray:
    return self.states[:, 2]

  @property
  def vx(self) -> np.ndarray:
    return self.states[:, 3]

  @property
  def vy(self) -> np.ndarray:
    return self.states[:, 4]

  @property
  def vz(self) -> np.ndarray:
    return self.states[:, 5]
