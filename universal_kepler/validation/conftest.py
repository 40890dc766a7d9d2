"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for all validation tests.
"""
import pytest
import numpy as np

from scipy.integrate import solve_ivp

from universal_kepler.model.constants import SOLARSYSTEMCONSTANTS


@pytest.fixture
def heliocentric_scenario():
  """Earth-like heliocentric orbit in km and km/s."""
  return {
    'pos_vec' : np.array([150e6, 0.0, -2e3]),  # [km]
    'vel_vec' : np.array([1.2, 29.4, 0.01]),   # [km/s]
    'gp'      : 1.32e11,                        # [km³/s²]
  }


@pytest.fixture
def leo_initial_state():
  """Typical LEO initial state for testing."""
  return np.array([
    7000.0e3,    # x [m]
    0.0,         # y [m]
    0.0,         # z [m]
    0.0,         # vx [m/s]
    7.5e3,       # vy [m/s]
    0.0,         # vz [m/s]
  ])


@pytest.fixture
def inclined_elliptic_state():
  """Inclined elliptical Earth orbit away from periapsis."""
  return np.array([
    6524.834e3,  # x [m]
    6862.875e3,  # y [m]
    6448.296e3,  # z [m]
    4.901327e3,  # vx [m/s]
    5.533756e3,  # vy [m/s]
   -1.976341e3,  # vz [m/s]
  ])


@pytest.fixture
def hyperbolic_initial_state():
  """Earth escape trajectory from LEO altitude."""
  return np.array([
    7000.0e3,    # x [m]
    0.0,         # y [m]
    0.0,         # z [m]
    0.0,         # vx [m/s]
    12.0e3,      # vy [m/s]
    1.0e3,       # vz [m/s]
  ])


@pytest.fixture
def long_escape_step():
  """Earth escape trajectory and a one-day step whose Kepler iterates overshoot to q >= 1."""
  return {
    'state' : np.array([
       1381631.39,   # x [m]
      -1451681.42,   # y [m]
       7037512.77,   # z [m]
      -4000.16,      # vx [m/s]
       2700.24,      # vy [m/s]
       9737.73,      # vz [m/s]
    ]),
    'time_step' : 87618.39,  # [s]
  }


@pytest.fixture
def earth_gp():
  """Earth gravitational parameter [m³/s²]."""
  return SOLARSYSTEMCONSTANTS.EARTH.GP


@pytest.fixture
def two_body_reference():
  """
  Independent two-body reference built on numerical integration.

  Returns a function (state_o, gp, time_steps) -> states of shape (n, 6).
  """
  def _reference(state_o, gp, time_steps):
    def _two_body(t, state):
      pos_vec = state[0:3]
      pos_mag = np.linalg.norm(pos_vec)
      return np.concatenate((state[3:6], -gp * pos_vec / pos_mag**3))

    state_o    = np.asarray(state_o, dtype=float)
    time_steps = np.atleast_1d(np.asarray(time_steps, dtype=float))
    states     = np.empty((len(time_steps), 6))
    atol       = np.concatenate((
      np.full(3, 1e-12 * np.linalg.norm(state_o[0:3])),
      np.full(3, 1e-12 * np.linalg.norm(state_o[3:6])),
    ))
    for idx, time_step in enumerate(time_steps):
      if time_step == 0.0:
        states[idx] = state_o
        continue
      sol = solve_ivp(
        fun    = _two_body,
        t_span = (0.0, time_step),
        y0     = state_o,
        method = 'DOP853',
        rtol   = 1e-12,
        atol   = atol,
      )
      states[idx] = sol.y[:, -1]
    return states

  return _reference


@pytest.fixture
def state_close():
  """
  Compare a propagated state with a reference state at the requested time.

  A converged step is the exact two-body state at the requested time plus the
  reported time residual, so the position tolerance is the distance covered in
  that residual, and the velocity tolerance the velocity change, on top of a
  relative tolerance.
  """
  def _state_close(state, ref_state, gp, time_error=0.0, rtol=1e-8):
    pos_mag = np.linalg.norm(ref_state[0:3])
    vel_mag = np.linalg.norm(ref_state[3:6])
    acc_mag = gp / pos_mag**2

    pos_tol = 1.01 * vel_mag * time_error + rtol * pos_mag
    vel_tol = 1.01 * acc_mag * time_error + rtol * vel_mag

    pos_err = np.linalg.norm(state[0:3] - ref_state[0:3])
    vel_err = np.linalg.norm(state[3:6] - ref_state[3:6])
    return pos_err <= pos_tol and vel_err <= vel_tol

  return _state_close
