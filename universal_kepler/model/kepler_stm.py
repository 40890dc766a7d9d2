"""
Universal Kepler State Transition
=================================

Shepperd's universal-variable solution of the two-body problem. A Cartesian
state is advanced by a time step without converting to orbital elements: the
universal anomaly is found with a Halley iteration on the universal Kepler
equation, and the new state follows from the Lagrange coefficients.

Source:
-------
  S.W. Shepperd, "Universal Keplerian State Transition Matrix",
  Celestial Mechanics 35 (1985), pp. 129-144.
"""
import numpy as np

from dataclasses import dataclass

from universal_kepler.model.constants          import KEPLERSTM
from universal_kepler.model.continued_fraction import evaluate_continued_fraction


@dataclass(frozen=True)
class OrbitEnergyTerms:
  """
  Quantities of the initial state shared by every time step of a call.
  """
  pos_vec : np.ndarray  # initial position vector
  vel_vec : np.ndarray  # initial velocity vector
  gp      : float       # gravitational parameter
  pos_mag : float       # initial radius
  nu0     : float       # initial position-velocity dot product
  beta    : float       # 2*gp/pos_mag - v·v, positive for bound orbits
  period  : float       # orbital period, np.inf for unbound orbits

  @property
  def is_elliptic(self) -> bool:
    return self.beta > 0


@dataclass
class IterationState:
  """
  Transient state of the Kepler loop for one time step.
  """
  u                    : float = 0.0    # universal anomaly
  kepler_iterations    : int   = 0      # outer Kepler-loop count
  cont_frac_iterations : int   = 0      # cumulative continued fraction count
  time                 : float = 0.0    # time reached by the last evaluated u
  delta_time           : float = 0.0    # time residual, time - dt
  pos_mag              : float = 0.0    # projected radius of the last evaluated u
  u1                   : float = 0.0    # universal function U1 of the last evaluated u
  u2                   : float = 0.0    # universal function U2 of the last evaluated u
  unsafe               : bool  = False  # loop aborted, fall back to element propagation

  @property
  def time_error(self) -> float:
    return abs(self.delta_time)


def compute_orbit_energy_terms(
  pos_vec : np.ndarray,
  vel_vec : np.ndarray,
  gp      : float,
) -> OrbitEnergyTerms:
  """
  Compute the initial-state quantities used by every time step.

  Input:
  ------
    pos_vec : np.ndarray
      Initial position vector.
    vel_vec : np.ndarray
      Initial velocity vector.
    gp : float
      Gravitational parameter of the central body.

  Output:
  -------
    terms : OrbitEnergyTerms
      Radius, radial dot product, energy term beta and period.
  """
  pos_vec = np.asarray(pos_vec, dtype=float).flatten()
  vel_vec = np.asarray(vel_vec, dtype=float).flatten()

  pos_mag = float(np.sqrt(np.dot(pos_vec, pos_vec)))
  nu0     = float(np.dot(pos_vec, vel_vec))
  beta    = 2.0 * gp / pos_mag - float(np.dot(vel_vec, vel_vec))

  if beta > 0:
    period = 2.0 * np.pi * gp * beta**(-1.5)
  else:
    period = np.inf

  return OrbitEnergyTerms(
    pos_vec = pos_vec,
    vel_vec = vel_vec,
    gp      = gp,
    pos_mag = pos_mag,
    nu0     = nu0,
    beta    = beta,
    period  = period,
  )


def period_wrap_corrections(
  terms      : OrbitEnergyTerms,
  time_steps : np.ndarray,
) -> np.ndarray:
  """
  Compute the universal function correction for whole orbital periods.

  For bound orbits the universal Kepler function is multivalued over complete
  revolutions. Removing the number of whole periods contained in each time step
  keeps the Kepler loop within a single revolution.

  Input:
  ------
    terms : OrbitEnergyTerms
      Initial-state quantities.
    time_steps : np.ndarray
      Time steps [s].

  Output:
  -------
    delta_u : np.ndarray
      Correction of the universal function U for each time step. Zero for
      parabolic and hyperbolic orbits.
  """
  time_steps = np.atleast_1d(np.asarray(time_steps, dtype=float))

  if not terms.is_elliptic:
    return np.zeros_like(time_steps)

  beta   = terms.beta
  period = terms.period

  num_periods = np.floor((time_steps + period / 2.0 - 2.0 * terms.nu0 / beta) / period)
  return 2.0 * np.pi * num_periods * beta**(-2.5)


def solve_universal_anomaly(
  terms     : OrbitEnergyTerms,
  time_step : float,
  delta_u   : float = 0.0,
) -> IterationState:
  """
  Solve the universal Kepler equation for one time step.

  Halley iteration on the universal anomaly until the time residual drops to
  KEPLERSTM.TIME_TOL seconds. The loop is declared unsafe, and aborted, when it
  needs more than KEPLERSTM.MAX_ITERATIONS iterations or when the series
  argument q reaches 1.

  Input:
  ------
    terms : OrbitEnergyTerms
      Initial-state quantities.
    time_step : float
      Time step [s]. Must be nonzero; a zero step is the identity and is
      handled by the caller.
    delta_u : float
      Period-wrap correction of the universal function U for this time step.

  Output:
  -------
    state : IterationState
      Universal anomaly, counters, residual and the universal functions of the
      last evaluated iterate.
  """
  beta    = terms.beta
  gp      = terms.gp
  pos_mag = terms.pos_mag
  nu0     = terms.nu0

  state = IterationState(delta_time=-time_step)

  # The first pass evaluates u = 0, so at least one Halley-updated iterate is
  # evaluated even when the time step itself is within tolerance
  while state.kepler_iterations < 2 or abs(state.delta_time) > KEPLERSTM.TIME_TOL:
    state.kepler_iterations += 1

    # q stays below 1/2 at the solution, but intermediate iterates can overshoot
    beta_u_sq = beta * state.u * state.u
    q         = beta_u_sq / (1.0 + beta_u_sq) if beta_u_sq > -1.0 else np.inf

    if state.kepler_iterations > KEPLERSTM.MAX_ITERATIONS or q >= 1.0:
      state.unsafe = True
      break

    cont_frac, cont_frac_iterations = evaluate_continued_fraction(q)
    state.cont_frac_iterations += cont_frac_iterations

    # Universal functions from the half-angle quantities
    u0_half = 1.0 - 2.0 * q
    u1_half = 2.0 * (1.0 - q) * state.u
    u_func  = 16.0 / 15.0 * u1_half**5 * cont_frac + delta_u
    u0      = 2.0 * u0_half**2 - 1.0
    u1      = 2.0 * u0_half * u1_half
    u2      = 2.0 * u1_half**2
    u3      = beta * u_func + u1 * u2 / 3.0

    # Projected radius and time of flight
    state.pos_mag    = pos_mag * u0 + nu0 * u1 + gp * u2
    state.time       = pos_mag * u1 + nu0 * u2 + gp * u3
    state.delta_time = state.time - time_step
    state.u1         = u1
    state.u2         = u2

    # Halley step
    state.u = state.u - state.delta_time / (
      (1.0 - q) * (4.0 * state.pos_mag + state.delta_time * beta * state.u)
    )

  return state


def lagrange_state(
  terms : OrbitEnergyTerms,
  state : IterationState,
) -> np.ndarray:
  """
  Reconstruct the Cartesian state from a converged Kepler loop.

  Input:
  ------
    terms : OrbitEnergyTerms
      Initial-state quantities.
    state : IterationState
      Converged iteration state.

  Output:
  -------
    state_vec : np.ndarray
      New state [pos_x, pos_y, pos_z, vel_x, vel_y, vel_z].
  """
  gp      = terms.gp
  pos_mag = terms.pos_mag

  f     = 1.0 - gp / pos_mag * state.u2
  f_dot = -gp * state.u1 / state.pos_mag / pos_mag
  g     = pos_mag * state.u1 + terms.nu0 * state.u2
  g_dot = 1.0 - gp / state.pos_mag * state.u2

  pos_vec = f     * terms.pos_vec + g     * terms.vel_vec
  vel_vec = f_dot * terms.pos_vec + g_dot * terms.vel_vec

  return np.concatenate((pos_vec, vel_vec))
