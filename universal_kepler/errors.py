"""
Propagation Errors
==================

Exceptions raised at the propagation call boundary. All derive from ValueError
so callers that already guard against bad input keep working.
"""


class PropagationInputError(ValueError):
  """Raised when a propagation request is malformed."""


class InvalidArgumentCount(PropagationInputError):
  """Raised when a call matches none of the supported argument shapes."""


class MultiBodyNotSupported(PropagationInputError):
  """Raised when position/velocity describe more than one orbit."""


class InvalidTimeUnit(PropagationInputError):
  """Raised when the time unit is neither 'seconds' nor 'days'."""
