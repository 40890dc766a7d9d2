import numpy as np

from types import SimpleNamespace

from universal_kepler.model.constants       import CONVERTER
from universal_kepler.model.orbit_converter import OrbitConverter
from universal_kepler.propagation.result    import ExitFlag, PropagationResult
from universal_kepler.utility.time_helper   import format_time_offset


def print_initial_state(
  config : SimpleNamespace,
) -> None:
  """
  Print the initial Cartesian state and its classical orbital elements.

  Input:
  ------
    config : SimpleNamespace
      Run configuration from build_config.
  """
  dist_unit = config.distance_unit
  pos_vec   = config.state[0:3]
  vel_vec   = config.state[3:6]

  print("\nInitial State")
  print(f"  Object : {config.name}")
  print(f"  GP     : {config.gp:>19.12e} {dist_unit}^3/s^2")
  print(f"  Cartesian State")
  print(f"    Position : {pos_vec[0]:>19.12e}  {pos_vec[1]:>19.12e}  {pos_vec[2]:>19.12e} {dist_unit}")
  print(f"    Velocity : {vel_vec[0]:>19.12e}  {vel_vec[1]:>19.12e}  {vel_vec[2]:>19.12e} {dist_unit}/s")

  try:
    coe = OrbitConverter.pv_to_coe(pos_vec, vel_vec, config.gp)
  except ValueError as error:
    print(f"  Classical Orbital Elements : undefined ({error})")
    return

  sma  = coe['sma' ]
  ecc  = coe['ecc' ]
  inc  = coe['inc' ] * CONVERTER.DEG_PER_RAD
  raan = coe['raan'] * CONVERTER.DEG_PER_RAD
  aop  = coe['aop' ] * CONVERTER.DEG_PER_RAD
  ta   = coe['ta'  ] * CONVERTER.DEG_PER_RAD

  print(f"  Classical Orbital Elements")
  print(f"    SMA  : { sma:>19.12e} {dist_unit}")
  print(f"    ECC  : { ecc:>19.12e}")
  print(f"    INC  : { inc:>19.12e} deg")
  print(f"    RAAN : {raan:>19.12e} deg")
  print(f"    AOP  : { aop:>19.12e} deg")
  print(f"    TA   : {  ta:>19.12e} deg")
  if ecc < 1.0:
    period = 2 * np.pi / OrbitConverter.mean_motion(coe, config.gp)
    print(f"    Period : {format_time_offset(period)}")


def print_step_table(
  result        : PropagationResult,
  distance_unit : str,
) -> None:
  """
  Print one line per propagated time step.

  Input:
  ------
    result : PropagationResult
      Propagation result.
    distance_unit : str
      Distance unit label of the states.
  """
  print("\nPropagation Results")
  print(
    f"  {'Elapsed Time':>20}  "
    f"{'Position [' + distance_unit + ']':^63}  "
    f"{'Velocity [' + distance_unit + '/s]':^63}  "
    f"{'Flag':>8}  {'Iter':>4}  {'CF Iter':>7}  {'Time Err [s]':>12}"
  )
  for idx in range(len(result)):
    step = result[idx]
    print(
      f"  {format_time_offset(result.time_steps[idx]):>20}  "
      f"{step.state[0]:>19.12e}  {step.state[1]:>19.12e}  {step.state[2]:>19.12e}  "
      f"{step.state[3]:>19.12e}  {step.state[4]:>19.12e}  {step.state[5]:>19.12e}  "
      f"{step.exit_flag.name:>8}  {step.kepler_iterations:>4d}  {step.cont_frac_iterations:>7d}  {step.time_error:>12.6e}"
    )


def print_results_summary(
  result : PropagationResult,
  gp     : float,
) -> None:
  """
  Print a summary of the propagation result.

  Input:
  ------
    result : PropagationResult
      Propagation result.
    gp : float
      Gravitational parameter used for the propagation.
  """
  num_steps    = len(result)
  num_fallback = int(np.sum(result.exit_flags == ExitFlag.FALLBACK))

  print("\nResults Summary")
  print(f"  Time Steps           : {num_steps}")
  print(f"  Converged Steps      : {num_steps - num_fallback}")
  print(f"  Fallback Steps       : {num_fallback}")
  print(f"  Max Kepler Iter      : {int(np.max(result.kepler_iterations))}")
  print(f"  Total CF Iter        : {int(np.sum(result.cont_frac_iterations))}")
  print(f"  Max Time Error       : {float(np.max(result.time_error)):.6e} s")

  # Two-body invariants relative to the first step
  energy  = np.array([
    OrbitConverter.pv_to_specific_energy(pos_vec, vel_vec, gp)
    for pos_vec, vel_vec in zip(result.position, result.velocity)
  ])
  ang_mom = np.linalg.norm(np.cross(result.position, result.velocity), axis=1)

  energy_drift  = np.max(np.abs(energy  - energy[0] )) / abs(energy[0])  if energy[0]  != 0 else np.nan
  ang_mom_drift = np.max(np.abs(ang_mom - ang_mom[0])) / abs(ang_mom[0]) if ang_mom[0] != 0 else np.nan
  print(f"  Energy Drift         : {energy_drift:.6e} (relative)")
  print(f"  Ang. Momentum Drift  : {ang_mom_drift:.6e} (relative)")
