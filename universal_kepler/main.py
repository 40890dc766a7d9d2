"""
Universal-Variable Kepler Propagator

Description:
  This script propagates a single two-body orbit from an initial Cartesian
  state to a list of elapsed times, using Shepperd's universal-variable state
  transition. Steps where the universal Kepler iteration is unsafe fall back to
  classical element propagation.

  The script performs the following steps:
  1. Builds the run configuration from the command line and an optional state
     vector file.
  2. Prints the initial state and its classical orbital elements.
  3. Propagates the state to every requested time step.
  4. Prints the per-step results and a summary.

Usage:

  Argument                Required   Description
  ----------------------  --------   --------------------------------------------------
  --state                 Yes*       Initial state X Y Z VX VY VZ
  --state-vector-file     Yes*       State vector .yaml file (*one of the two)
  --gp                    No         Gravitational parameter [distance unit^3/s^2]
  --central-body          No         Tabulated central body (default: SUN)
  --distance-unit         No         m or km (default: km)
  --time-steps            No         Elapsed times (default: 0)
  --time-unit             No         seconds or days (default: days)
  --workers               No         Number of worker processes
  --log-file              No         Copy terminal output to a file

  Example Commands:
    python -m universal_kepler.main \
      --state <x> <y> <z> <vx> <vy> <vz> \
      --time-steps <t> [<t> ...] \
      [--gp <gp> | --central-body <name>] \
      [--distance-unit km] \
      [--time-unit days]

    python -m universal_kepler.main \
      --state 150e6 0 -2e3 1.2 29.4 0.01 \
      --gp 1.32e11 \
      --time-steps 0 91.3125 182.625 365.25 \
      --time-unit days
"""
import sys

from typing import Optional

from universal_kepler.input.cli           import parse_command_line_arguments
from universal_kepler.input.configuration import build_config, print_configuration
from universal_kepler.propagation         import PropagationConfig, PropagationResult, propagate
from universal_kepler.utility.logger      import start_logging, stop_logging
from universal_kepler.utility.printer     import print_initial_state, print_results_summary, print_step_table


def main(
  state             : Optional[list]  = None,
  state_vector_file : Optional[str]   = None,
  gp                : Optional[float] = None,
  central_body      : Optional[str]   = None,
  distance_unit     : Optional[str]   = None,
  time_steps        : Optional[list]  = None,
  time_unit         : Optional[str]   = None,
  workers           : Optional[int]   = None,
  log_file          : Optional[str]   = None,
) -> PropagationResult:
  """
  Main function to run the Kepler propagation.

  Builds the run configuration, prints it together with the initial state,
  propagates the orbit and prints the results.

  Input:
  ------
    See build_config.

  Output:
  -------
    result : PropagationResult
      Propagation result.
  """
  config = build_config(
    state             = state,
    state_vector_file = state_vector_file,
    gp                = gp,
    central_body      = central_body,
    distance_unit     = distance_unit,
    time_steps        = time_steps,
    time_unit         = time_unit,
    workers           = workers,
    log_file          = log_file,
  )

  # Start logging
  logger = start_logging(config.log_filepath) if config.log_filepath is not None else None

  try:
    print_configuration(config)
    print_initial_state(config)

    propagation_config = PropagationConfig.from_state(
      state     = config.state,
      gp        = config.gp,
      time_unit = config.time_unit,
    )
    result = propagate(
      propagation_config,
      config.time_steps,
      max_workers = config.workers,
    )

    print_step_table(result, config.distance_unit)
    print_results_summary(result, config.gp)
  finally:
    # Stop logging
    stop_logging(logger)

  return result


def cli(
  argv : Optional[list] = None,
) -> int:
  """
  Console entry point. Input errors are reported as [ERROR] lines.
  """
  # Parse command-line arguments
  args = parse_command_line_arguments(argv)

  try:
    main(
      state             = args.state,
      state_vector_file = args.state_vector_file,
      gp                = args.gp,
      central_body      = args.central_body,
      distance_unit     = args.distance_unit,
      time_steps        = args.time_steps,
      time_unit         = args.time_unit,
      workers           = args.workers,
      log_file          = args.log_file,
    )
  except (ValueError, FileNotFoundError) as error:
    print(f"[ERROR] {error}", file=sys.stderr)
    return 1

  return 0


if __name__ == "__main__":
  sys.exit(cli())
