"""
Time Utilities
==============

Utility functions for time-unit handling and formatting.
"""
import numpy as np

from universal_kepler.errors          import InvalidTimeUnit
from universal_kepler.model.constants import CONVERTER


def normalize_time_unit(
  time_unit : str,
) -> str:
  """
  Normalize a time unit label.

  Input:
  ------
    time_unit : str
      'seconds' or 'days', case-insensitive.

  Output:
  -------
    time_unit : str
      Lower-case time unit label.
  """
  if isinstance(time_unit, str) and time_unit.strip().lower() in CONVERTER.SEC_PER_TIME_UNIT:
    return time_unit.strip().lower()
  raise InvalidTimeUnit(f"Only 'seconds' and 'days' are valid time units, received {time_unit!r}.")


def time_steps_to_seconds(
  time_steps : float | list | np.ndarray,
  time_unit  : str = 'days',
) -> np.ndarray:
  """
  Convert requested time steps to a flat array of seconds.

  Input:
  ------
    time_steps : float | list | np.ndarray
      Scalar or sequence of elapsed times.
    time_unit : str
      Unit of time_steps, 'seconds' or 'days'.

  Output:
  -------
    time_steps_s : np.ndarray
      Elapsed times [s], in input order.
  """
  sec_per_unit = CONVERTER.SEC_PER_TIME_UNIT[normalize_time_unit(time_unit)]

  time_steps_s = np.atleast_1d(np.asarray(time_steps, dtype=float)).flatten()
  if time_steps_s.size == 0:
    raise ValueError("At least one time step must be requested.")
  if not np.all(np.isfinite(time_steps_s)):
    raise ValueError("Time steps must be finite.")

  return time_steps_s * sec_per_unit


def format_time_offset(
  seconds : float,
) -> str:
  """
  Format a time offset in seconds as a human-readable string.

  Examples:
    12345.678 -> "+0d 03h 25m 45.678s"
   -98765.432 -> "-1d 03h 26m 05.432s"

  Input:
  ------
    seconds : float
      Time offset in seconds (can be positive or negative).

  Output:
  -------
    str
      Formatted string like "+47d 21h 30m 20.357s"
  """
  sign    = '+' if seconds >= 0 else '-'
  abs_sec = abs(seconds)

  days    = int(abs_sec // 86400)
  hours   = int((abs_sec % 86400) // 3600)
  minutes = int((abs_sec % 3600) // 60)
  secs    = abs_sec % 60

  return f"{sign}{days}d {hours:02d}h {minutes:02d}m {secs:06.3f}s"
