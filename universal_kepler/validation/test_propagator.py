"""
Integration Tests for Kepler State Propagator
=============================================

Tests for the batch driver, its configuration and its result container.

Tests:
------
TestKeplerianPropagation
  - test_known_solution_zero_step_identity           : verify a zero step returns the initial state exactly
  - test_known_solution_heliocentric_year            : verify the heliocentric scenario after 365.25 days
  - test_roundtrip_forward_backward                  : verify propagating forward then backward returns to start
  - test_physical_laws_energy_conservation           : verify specific energy is conserved
  - test_physical_laws_angular_momentum_conservation : verify angular momentum is conserved
  - test_sanity_check_converged_step_bounds          : verify residual and iteration bounds of converged steps
  - test_known_solution_numerical_integration        : verify agreement with numerical integration
  - test_known_solution_hyperbolic_orbit             : verify an escape trajectory against numerical integration

TestPeriodWrap
  - test_known_solution_whole_periods_added : verify N periods plus a remainder equals the remainder

TestTimeUnits
  - test_known_solution_day_equals_86400_seconds : verify 1 day and 86400 s give identical results
  - test_error_invalid_time_unit                 : verify unsupported time units are rejected

TestFallback
  - test_known_solution_fallback_matches_converged : verify element propagation agrees with the Kepler loop
  - test_known_solution_series_domain_fallback    : verify a q >= 1 abort falls back and matches numerical integration

TestParallelPropagation
  - test_known_solution_parallel_equals_sequential : verify the process pool returns the sequential result

TestPropagationConfig
  - test_error_multi_body_state      : verify several orbits in one call are rejected
  - test_error_invalid_inputs        : verify non-finite or malformed inputs are rejected
  - test_sanity_check_result_views   : verify result accessors are views of the states

Usage:
------
  python -m pytest universal_kepler/validation/test_propagator.py -v
"""
import pytest
import numpy as np

from universal_kepler.errors                 import InvalidTimeUnit, MultiBodyNotSupported, PropagationInputError
from universal_kepler.model.constants        import CONVERTER, KEPLERSTM
from universal_kepler.model.orbit_converter  import OrbitConverter
from universal_kepler.propagation            import ExitFlag, PropagationConfig, propagate
from universal_kepler.propagation.propagator import propagate_elements
from universal_kepler.model.kepler_stm       import compute_orbit_energy_terms


@pytest.fixture
def heliocentric_config(heliocentric_scenario):
  return PropagationConfig(
    position  = heliocentric_scenario['pos_vec'],
    velocity  = heliocentric_scenario['vel_vec'],
    gp        = heliocentric_scenario['gp'],
    time_unit = 'days',
  )


@pytest.fixture
def leo_config(inclined_elliptic_state, earth_gp):
  return PropagationConfig.from_state(inclined_elliptic_state, earth_gp, time_unit='seconds')


class TestKeplerianPropagation:
  """
  Tests for two-body propagation with the universal-variable state transition.
  """

  def test_known_solution_zero_step_identity(self, heliocentric_config):
    """
    A zero time step returns the initial state exactly.
    """
    result = propagate(heliocentric_config, 0.0)

    assert len(result) == 1
    assert np.array_equal(result.states[0], heliocentric_config.state)
    assert result.exit_flags[0]        == ExitFlag.OK
    assert result.kepler_iterations[0] == 0
    assert result.time_error[0]        == 0.0

  def test_known_solution_heliocentric_year(self, heliocentric_config, state_close):
    """
    Test the heliocentric scenario after 365.25 days, more than one period.
    """
    result = propagate(heliocentric_config, [0.0, 365.25])

    terms = compute_orbit_energy_terms(heliocentric_config.position, heliocentric_config.velocity, heliocentric_config.gp)
    assert 365.25 * CONVERTER.SEC_PER_DAY > terms.period

    # Closed-form reference from classical elements
    ref_state = propagate_elements(terms, 365.25 * CONVERTER.SEC_PER_DAY)

    assert np.array_equal(result.states[0], heliocentric_config.state)
    assert np.allclose(result.states[1], ref_state, rtol=1e-3)
    assert state_close(result.states[1], ref_state, heliocentric_config.gp, result.time_error[1], rtol=1e-8)

  def test_roundtrip_forward_backward(self, heliocentric_scenario, state_close):
    """
    Propagating forward by dt and then backward by dt returns the initial state.
    """
    config_o = PropagationConfig(heliocentric_scenario['pos_vec'], heliocentric_scenario['vel_vec'], heliocentric_scenario['gp'])

    for time_step in [10.0, 200.0, 1000.0]:
      forward  = propagate(config_o, time_step)
      config_f = PropagationConfig.from_state(forward.states[0], heliocentric_scenario['gp'])
      backward = propagate(config_f, -time_step)

      time_error = forward.time_error[0] + backward.time_error[0]
      assert state_close(backward.states[0], config_o.state, heliocentric_scenario['gp'], time_error, rtol=1e-6)

  def test_physical_laws_energy_conservation(self, leo_config):
    """
    Specific energy is conserved for converged steps.
    """
    time_steps = np.linspace(-20000.0, 20000.0, 41)
    result     = propagate(leo_config, time_steps)

    specific_energy_o = OrbitConverter.pv_to_specific_energy(leo_config.position, leo_config.velocity, leo_config.gp)
    for idx in np.flatnonzero(result.converged):
      specific_energy = OrbitConverter.pv_to_specific_energy(result.position[idx], result.velocity[idx], leo_config.gp)
      assert np.isclose(specific_energy, specific_energy_o, rtol=1e-9)

  def test_physical_laws_angular_momentum_conservation(self, leo_config):
    """
    Angular momentum vector is conserved.
    """
    time_steps = np.linspace(0.0, 30000.0, 31)
    result     = propagate(leo_config, time_steps)

    ang_mom_vec_o = OrbitConverter.pv_to_ang_mom(leo_config.position, leo_config.velocity)
    for idx in range(len(result)):
      ang_mom_vec = OrbitConverter.pv_to_ang_mom(result.position[idx], result.velocity[idx])
      assert np.allclose(ang_mom_vec, ang_mom_vec_o, rtol=1e-9, atol=1e-9 * np.linalg.norm(ang_mom_vec_o))

  def test_sanity_check_converged_step_bounds(self, heliocentric_config):
    """
    Converged steps satisfy the time tolerance and the iteration limit.
    """
    time_steps = np.linspace(-1000.0, 1000.0, 57)
    result     = propagate(heliocentric_config, time_steps)

    converged = result.converged
    assert np.all(result.time_error[converged]        <= KEPLERSTM.TIME_TOL)
    assert np.all(result.kepler_iterations[converged] <= KEPLERSTM.MAX_ITERATIONS)
    assert np.all(np.isfinite(result.states))

  def test_known_solution_numerical_integration(self, leo_config, two_body_reference, state_close):
    """
    Agreement with an independent numerical integration of the two-body problem.
    """
    time_steps = np.array([0.0, 60.0, 1500.0, 4000.0, 9000.0, -3000.0])
    result     = propagate(leo_config, time_steps)

    ref_states = two_body_reference(leo_config.state, leo_config.gp, time_steps)

    for idx in range(len(result)):
      assert state_close(result.states[idx], ref_states[idx], leo_config.gp, result.time_error[idx], rtol=1e-7)

  def test_known_solution_hyperbolic_orbit(self, hyperbolic_initial_state, earth_gp, two_body_reference, state_close):
    """
    An escape trajectory against numerical integration.
    """
    config     = PropagationConfig.from_state(hyperbolic_initial_state, earth_gp, time_unit='seconds')
    time_steps = np.array([30.0, 600.0, 3600.0, -1200.0])
    result     = propagate(config, time_steps)

    ref_states = two_body_reference(hyperbolic_initial_state, earth_gp, time_steps)

    for idx in range(len(result)):
      assert state_close(result.states[idx], ref_states[idx], earth_gp, result.time_error[idx], rtol=1e-7)


class TestPeriodWrap:
  """
  Tests for propagation across whole orbital periods.
  """

  @pytest.mark.parametrize("num_periods", [1, 5, -3])
  def test_known_solution_whole_periods_added(self, leo_config, state_close, num_periods):
    """
    Propagating N periods plus a remainder equals propagating the remainder.
    """
    terms     = compute_orbit_energy_terms(leo_config.position, leo_config.velocity, leo_config.gp)
    remainder = 0.37 * terms.period

    result = propagate(leo_config, [remainder, num_periods * terms.period + remainder])

    time_error = result.time_error[0] + result.time_error[1]
    assert state_close(result.states[1], result.states[0], leo_config.gp, time_error, rtol=1e-8)


class TestTimeUnits:
  """
  Tests for time unit handling.
  """

  def test_known_solution_day_equals_86400_seconds(self, heliocentric_scenario):
    """
    One day and 86400 seconds give identical results.
    """
    pos_vec = heliocentric_scenario['pos_vec']
    vel_vec = heliocentric_scenario['vel_vec']
    gp      = heliocentric_scenario['gp']

    result_days    = propagate(PropagationConfig(pos_vec, vel_vec, gp, time_unit='Days'   ), [1.0, 2.5])
    result_seconds = propagate(PropagationConfig(pos_vec, vel_vec, gp, time_unit='seconds'), [86400.0, 216000.0])

    assert np.array_equal(result_days.time_steps, result_seconds.time_steps)
    assert np.array_equal(result_days.states,     result_seconds.states)

  @pytest.mark.parametrize("time_unit", ['hours', 'sec', '', None])
  def test_error_invalid_time_unit(self, heliocentric_scenario, time_unit):
    """
    Only 'seconds' and 'days' are accepted.
    """
    with pytest.raises(InvalidTimeUnit):
      PropagationConfig(heliocentric_scenario['pos_vec'], heliocentric_scenario['vel_vec'], heliocentric_scenario['gp'], time_unit=time_unit)


class TestFallback:
  """
  Tests for the classical element propagation fallback.
  """

  def test_known_solution_fallback_matches_converged(self, leo_config, state_close, monkeypatch):
    """
    Forcing every step onto the fallback gives the converged result.
    """
    time_steps = np.array([0.0, 100.0, 2500.0, 7000.0, -4000.0])
    converged  = propagate(leo_config, time_steps)

    monkeypatch.setattr(KEPLERSTM, 'MAX_ITERATIONS', 1)
    fallback = propagate(leo_config, time_steps)

    assert fallback.exit_flags[0] == ExitFlag.OK
    assert np.all(fallback.exit_flags[1:] == ExitFlag.FALLBACK)
    assert not np.any(fallback.converged[1:])

    for idx in range(len(time_steps)):
      assert state_close(fallback.states[idx], converged.states[idx], leo_config.gp, converged.time_error[idx], rtol=1e-8)

  def test_known_solution_series_domain_fallback(self, long_escape_step, earth_gp, two_body_reference, state_close):
    """
    A long escape step leaving the series domain is propagated with elements.
    """
    config     = PropagationConfig.from_state(long_escape_step['state'], earth_gp, time_unit='seconds')
    time_steps = np.array([long_escape_step['time_step']])

    result = propagate(config, time_steps)

    assert result.exit_flags[0] == ExitFlag.FALLBACK
    assert not result.converged[0]
    assert result.kepler_iterations[0] <= KEPLERSTM.MAX_ITERATIONS

    # Element propagation lands on the requested time, so no residual allowance
    ref_states = two_body_reference(config.state, earth_gp, time_steps)
    assert state_close(result.states[0], ref_states[0], earth_gp, rtol=1e-8)


class TestParallelPropagation:
  """
  Tests for the process pool map.
  """

  def test_known_solution_parallel_equals_sequential(self, heliocentric_config):
    """
    Chunked parallel propagation returns the sequential result row for row.
    """
    time_steps = np.linspace(-400.0, 800.0, 13)

    sequential = propagate(heliocentric_config, time_steps)
    parallel   = propagate(heliocentric_config, time_steps, max_workers=2)

    assert np.array_equal(parallel.time_steps,        sequential.time_steps)
    assert np.array_equal(parallel.states,            sequential.states)
    assert np.array_equal(parallel.exit_flags,        sequential.exit_flags)
    assert np.array_equal(parallel.kepler_iterations, sequential.kepler_iterations)


class TestPropagationConfig:
  """
  Tests for input validation and the result container.
  """

  def test_error_multi_body_state(self, heliocentric_scenario):
    """
    Two stacked orbits are rejected with a pointer to per-orbit calls.
    """
    pos_vec = np.concatenate((heliocentric_scenario['pos_vec'], heliocentric_scenario['pos_vec']))
    vel_vec = np.concatenate((heliocentric_scenario['vel_vec'], heliocentric_scenario['vel_vec']))

    with pytest.raises(MultiBodyNotSupported, match="call once per orbit"):
      PropagationConfig(pos_vec, vel_vec, heliocentric_scenario['gp'])

    with pytest.raises(MultiBodyNotSupported):
      PropagationConfig.from_state(np.zeros(12), heliocentric_scenario['gp'])

  def test_error_invalid_inputs(self, heliocentric_scenario, heliocentric_config):
    """
    Non-finite values, bad shapes, bad gp and empty time sequences are rejected.
    """
    pos_vec = heliocentric_scenario['pos_vec']
    vel_vec = heliocentric_scenario['vel_vec']

    with pytest.raises(PropagationInputError):
      PropagationConfig(pos_vec[0:2], vel_vec, 1.32e11)
    with pytest.raises(ValueError):
      PropagationConfig(np.array([np.nan, 0.0, 0.0]), vel_vec, 1.32e11)
    with pytest.raises(ValueError):
      PropagationConfig(pos_vec, vel_vec, 0.0)
    with pytest.raises(ValueError):
      PropagationConfig(pos_vec, vel_vec, np.inf)
    with pytest.raises(ValueError):
      propagate(heliocentric_config, [])
    with pytest.raises(ValueError):
      propagate(heliocentric_config, [1.0, np.nan])

  def test_sanity_check_result_views(self, heliocentric_config):
    """
    Wide-form accessors read the states array.
    """
    result = propagate(heliocentric_config, [0.0, 10.0, 20.0])

    assert result.states.shape == (3, 6)
    assert np.array_equal(result.x,        result.states[:, 0])
    assert np.array_equal(result.vz,       result.states[:, 5])
    assert np.array_equal(result.position, result.states[:, 0:3])
    assert np.array_equal(result.velocity, result.states[:, 3:6])
    assert np.array_equal(result.time_steps, np.array([0.0, 10.0, 20.0]) * CONVERTER.SEC_PER_DAY)
    assert set(result.diagnostics) == {'kepler_iterations', 'cont_frac_iterations', 'time_error'}

    step = result[1]
    assert step.exit_flag == ExitFlag.OK
    assert np.array_equal(step.state, result.states[1])
