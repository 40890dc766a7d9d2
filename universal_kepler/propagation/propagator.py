"""
Kepler State Propagator
=======================

Batch driver of the universal-variable two-body propagator. A single initial
Cartesian state is advanced to every requested time step; steps where the
universal Kepler loop is unsafe fall back to classical element propagation.
"""
import numpy as np

from concurrent.futures import ProcessPoolExecutor
from dataclasses        import dataclass
from typing             import Optional

from universal_kepler.errors                  import MultiBodyNotSupported, PropagationInputError
from universal_kepler.model.kepler_stm        import (
  OrbitEnergyTerms,
  compute_orbit_energy_terms,
  lagrange_state,
  period_wrap_corrections,
  solve_universal_anomaly,
)
from universal_kepler.model.orbit_converter   import OrbitConverter
from universal_kepler.propagation.result      import ExitFlag, PropagationResult, StepResult
from universal_kepler.utility.time_helper     import normalize_time_unit, time_steps_to_seconds


@dataclass(frozen=True)
class PropagationConfig:
  """
  Initial state of one orbit about one central body.

  Validated on construction. Position and velocity share one distance unit, the
  gravitational parameter is expressed in that distance unit cubed per second
  squared, and time_unit is the unit of the time steps passed to propagate().
  """
  position  : np.ndarray
  velocity  : np.ndarray
  gp        : float
  time_unit : str = 'days'

  def __post_init__(self):
    position = np.asarray(self.position, dtype=float).flatten()
    velocity = np.asarray(self.velocity, dtype=float).flatten()

    for label, vec in (('position', position), ('velocity', velocity)):
      if vec.size > 3 and vec.size % 3 == 0:
        raise MultiBodyNotSupported(
          f"The {label} describes {vec.size // 3} bodies. Only one orbit can be "
          "propagated per call; call once per orbit to propagate several."
        )
      if vec.size != 3:
        raise PropagationInputError(f"The {label} must have 3 components, received {vec.size}.")
      if not np.all(np.isfinite(vec)):
        raise ValueError(f"The {label} must be finite, received {vec}.")

    gp = float(self.gp)
    if not np.isfinite(gp) or gp <= 0:
      raise ValueError(f"The gravitational parameter must be positive and finite, received {self.gp}.")

    # Frozen dataclass: normalized values are set through object.__setattr__
    object.__setattr__(self, 'position',  position)
    object.__setattr__(self, 'velocity',  velocity)
    object.__setattr__(self, 'gp',        gp)
    object.__setattr__(self, 'time_unit', normalize_time_unit(self.time_unit))

  @property
  def state(self) -> np.ndarray:
    return np.concatenate((self.position, self.velocity))

  @classmethod
  def from_state(
    cls,
    state     : np.ndarray,
    gp        : float,
    time_unit : str = 'days',
  ) -> 'PropagationConfig':
    """
    Build a configuration from a stacked [pos, vel] state vector.
    """
    state = np.asarray(state, dtype=float).flatten()
    if state.size > 6 and state.size % 6 == 0:
      raise MultiBodyNotSupported(
        f"The state describes {state.size // 6} bodies. Only one orbit can be "
        "propagated per call; call once per orbit to propagate several."
      )
    if state.size != 6:
      raise PropagationInputError(f"The state must have 6 components, received {state.size}.")
    return cls(position=state[0:3], velocity=state[3:6], gp=gp, time_unit=time_unit)


def propagate_elements(
  terms     : OrbitEnergyTerms,
  time_step : float,
) -> np.ndarray:
  """
  Propagate the initial state with classical orbital elements.

  Used when the universal Kepler loop is unsafe. The mean anomaly is advanced
  linearly with the mean motion; converter errors are not caught.

  Input:
  ------
    terms : OrbitEnergyTerms
      Initial-state quantities.
    time_step : float
      Time step [s].

  Output:
  -------
    state : np.ndarray
      New state [pos_x, pos_y, pos_z, vel_x, vel_y, vel_z].
  """
  initial_state = np.concatenate((terms.pos_vec, terms.vel_vec))

  elements        = OrbitConverter.cartesian_to_elements(initial_state, terms.gp, anomaly_type='mean')
  elements['ma'] += OrbitConverter.mean_motion(elements, terms.gp) * time_step

  return OrbitConverter.elements_to_cartesian(elements, terms.gp, anomaly_type='mean')


def propagate_step(
  terms     : OrbitEnergyTerms,
  time_step : float,
  delta_u   : float = 0.0,
) -> StepResult:
  """
  Propagate the initial state by one time step.

  Input:
  ------
    terms : OrbitEnergyTerms
      Initial-state quantities.
    time_step : float
      Time step [s].
    delta_u : float
      Period-wrap correction of the universal function U for this time step.

  Output:
  -------
    step : StepResult
      New state, exit flag and iteration diagnostics.
  """
  if time_step == 0.0:
    return StepResult(
      state                = np.concatenate((terms.pos_vec, terms.vel_vec)),
      exit_flag            = ExitFlag.OK,
      kepler_iterations    = 0,
      cont_frac_iterations = 0,
      time_error           = 0.0,
    )

  iteration = solve_universal_anomaly(terms, time_step, delta_u)

  if iteration.unsafe:
    state     = propagate_elements(terms, time_step)
    exit_flag = ExitFlag.FALLBACK
  else:
    state     = lagrange_state(terms, iteration)
    exit_flag = ExitFlag.OK

  return StepResult(
    state                = state,
    exit_flag            = exit_flag,
    kepler_iterations    = iteration.kepler_iterations,
    cont_frac_iterations = iteration.cont_frac_iterations,
    time_error           = iteration.time_error,
  )


def _propagate_chunk(args) -> list:
  """
  Propagate a contiguous chunk of time steps. Runs in a worker process.
  """
  terms, time_steps, delta_u = args
  return [
    propagate_step(terms, time_step, du)
    for time_step, du in zip(time_steps, delta_u)
  ]


def propagate(
  config      : PropagationConfig,
  time_steps  : float | list | np.ndarray,
  max_workers : Optional[int] = None,
) -> PropagationResult:
  """
  Propagate one orbit to every requested time step.

  Input:
  ------
    config : PropagationConfig
      Validated initial state, gravitational parameter and time unit.
    time_steps : float | list | np.ndarray
      Elapsed time(s) since the initial state, in config.time_unit. Negative
      values propagate backwards.
    max_workers : int, optional
      Number of worker processes. None or 1 propagates sequentially.

  Output:
  -------
    result : PropagationResult
      One row per requested time step, in input order.
  """
  time_steps_s = time_steps_to_seconds(time_steps, config.time_unit)

  terms   = compute_orbit_energy_terms(config.position, config.velocity, config.gp)
  delta_u = period_wrap_corrections(terms, time_steps_s)

  result = PropagationResult.allocate(time_steps_s)

  num_steps   = len(time_steps_s)
  num_workers = min(max_workers or 1, num_steps)

  if num_workers <= 1:
    steps = _propagate_chunk((terms, time_steps_s, delta_u))
  else:
    schedule = [
      (terms, time_chunk, delta_u_chunk)
      for time_chunk, delta_u_chunk in zip(
        np.array_split(time_steps_s, num_workers),
        np.array_split(delta_u,      num_workers),
      )
    ]
    steps = []
    with ProcessPoolExecutor(max_workers=num_workers) as executor:
      for chunk_steps in executor.map(_propagate_chunk, schedule):
        steps.extend(chunk_steps)

  for idx, step in enumerate(steps):
    result.store(idx, step)

  return result
