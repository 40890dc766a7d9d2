"""
Propagation Call Adapter
========================

Positional-argument entry point accepting either a stacked state vector or six
scalar components.

Usage:
------
  progress_orbit(time_steps, state, gp)
  progress_orbit(time_steps, state, gp, time_unit)
  progress_orbit(time_steps, x, y, z, vx, vy, vz, gp)
  progress_orbit(time_steps, x, y, z, vx, vy, vz, gp, time_unit)
"""
import numpy as np

from typing import Optional

from universal_kepler.errors                  import InvalidArgumentCount
from universal_kepler.propagation.propagator  import PropagationConfig, propagate
from universal_kepler.propagation.result      import PropagationResult


def progress_orbit(
  time_steps,
  *args,
  max_workers : Optional[int] = None,
) -> PropagationResult:
  """
  Propagate one orbit from positional arguments.

  Input:
  ------
    time_steps : float | list | np.ndarray
      Elapsed time(s) since the initial state.
    *args
      (state, gp[, time_unit]) or (x, y, z, vx, vy, vz, gp[, time_unit]).
      The time unit defaults to 'days'.
    max_workers : int, optional
      Number of worker processes, forwarded to propagate().

  Output:
  -------
    result : PropagationResult
      Result of the batch driver, unchanged.
  """
  if len(args) in (2, 3):
    state     = np.asarray(args[0], dtype=float).ravel()
    gp        = args[1]
    time_unit = args[2] if len(args) == 3 else 'days'
  elif len(args) in (7, 8):
    state     = np.concatenate([np.asarray(arg, dtype=float).ravel() for arg in args[0:6]])
    gp        = args[6]
    time_unit = args[7] if len(args) == 8 else 'days'
  else:
    raise InvalidArgumentCount(
      f"progress_orbit() takes (state, gp[, time_unit]) or "
      f"(x, y, z, vx, vy, vz, gp[, time_unit]) after the time steps, received {len(args)} arguments."
    )

  config = PropagationConfig.from_state(state, gp, time_unit)
  return propagate(config, time_steps, max_workers=max_workers)
