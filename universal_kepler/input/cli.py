import sys
import argparse

from typing import Optional

from universal_kepler.model.constants import CONVERTER, SOLARSYSTEMCONSTANTS


def parse_command_line_arguments(
  argv : Optional[list] = None,
) -> argparse.Namespace:
  """
  Parse command-line arguments for the Kepler propagator.

  Input:
  ------
    argv : list | None
      Argument strings. None reads from sys.argv.

  Output:
  -------
    args : argparse.Namespace
      Parsed command-line arguments. Options that were not given are None so
      that state-vector file values can fill them in.
  """
  parser = argparse.ArgumentParser(
    prog            = 'universal-kepler',
    description     = 'Universal-variable two-body orbit propagator',
    formatter_class = argparse.RawDescriptionHelpFormatter,
  )

  # If no arguments provided, print help and exit
  if argv is None:
    argv = sys.argv[1:]
  if len(argv) == 0:
    parser.print_help(sys.stderr)
    sys.exit(1)

  # Initial state arguments
  parser.add_argument(
    '--state',
    dest    = 'state',
    type    = float,
    nargs   = 6,
    metavar = ('X', 'Y', 'Z', 'VX', 'VY', 'VZ'),
    default = None,
    help    = 'Initial Cartesian state, position then velocity, in the distance unit.',
  )
  parser.add_argument(
    '--state-vector-file',
    '--sv-file',
    dest    = 'state_vector_file',
    type    = str,
    default = None,
    help    = 'Path to a .yaml state vector file. Command-line values override file values.',
  )

  # Central body arguments
  central_body_group = parser.add_mutually_exclusive_group()
  central_body_group.add_argument(
    '--gp',
    dest    = 'gp',
    type    = float,
    default = None,
    help    = 'Gravitational parameter of the central body in distance unit^3/s^2.',
  )
  central_body_group.add_argument(
    '--central-body',
    dest    = 'central_body',
    type    = str.upper,
    choices = list(SOLARSYSTEMCONSTANTS.NAME_TO_GP.keys()),
    default = None,
    help    = 'Central body whose tabulated gravitational parameter is used (default: SUN).',
  )
  parser.add_argument(
    '--distance-unit',
    dest    = 'distance_unit',
    type    = str.lower,
    choices = list(CONVERTER.GP_SCALE_PER_DISTANCE_UNIT.keys()),
    default = None,
    help    = 'Distance unit of the state and of a tabulated central body (default: km).',
  )

  # Time arguments
  parser.add_argument(
    '--time-steps',
    dest    = 'time_steps',
    type    = float,
    nargs   = '+', # accepts 1 or more args.
    default = None,
    help    = 'Elapsed times since the initial state (e.g. 0 30 365.25).',
  )
  parser.add_argument(
    '--time-unit',
    dest    = 'time_unit',
    type    = str.lower,
    choices = list(CONVERTER.SEC_PER_TIME_UNIT.keys()),
    default = None,
    help    = 'Unit of the time steps (default: days).',
  )

  # Run arguments
  parser.add_argument(
    '--workers',
    dest    = 'workers',
    type    = int,
    default = None,
    help    = 'Number of worker processes (default: sequential).',
  )
  parser.add_argument(
    '--log-file',
    dest    = 'log_file',
    type    = str,
    default = None,
    help    = 'Copy the terminal output to this file.',
  )

  # Parse arguments
  args = parser.parse_args(argv)

  return args
