"""
Universal-Variable Kepler Propagator
====================================

Propagates a single two-body orbit from an initial Cartesian state to any number
of elapsed times with Shepperd's universal-variable state transition.
"""

from .errors      import PropagationInputError, InvalidArgumentCount, MultiBodyNotSupported, InvalidTimeUnit
from .propagation import PropagationConfig, PropagationResult, ExitFlag, propagate, progress_orbit

__all__ = [
  'PropagationConfig', 'PropagationResult', 'ExitFlag', 'propagate', 'progress_orbit',
  'PropagationInputError', 'InvalidArgumentCount', 'MultiBodyNotSupported', 'InvalidTimeUnit',
]
