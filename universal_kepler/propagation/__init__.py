"""
Orbit Propagation Package
=========================

Batch driver, result containers and positional call adapter of the Kepler
state propagator.
"""

from .result     import ExitFlag, StepResult, PropagationResult
from .propagator import PropagationConfig, propagate
from .adapter    import progress_orbit

__all__ = ['ExitFlag', 'StepResult', 'PropagationResult', 'PropagationConfig', 'propagate', 'progress_orbit']
