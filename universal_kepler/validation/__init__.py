"""
Validation Package
==================

Test suite for the universal-variable Kepler propagator.

Modules:
--------
- test_continued_fraction : Tests for the continued fraction evaluator
- test_kepler_stm         : Tests for the universal Kepler iteration and Lagrange reconstruction
- test_orbit_converter    : Tests for orbital element conversions
- test_propagator         : Integration tests for the batch driver
- test_adapter            : Tests for the positional call adapter
- test_configuration      : Tests for command-line and state vector file parsing

Usage:
------
Run all tests:
  python -m pytest universal_kepler/validation/ -v

Run a specific test module:
  python -m pytest universal_kepler/validation/test_propagator.py -v

Run a specific test class:
  python -m pytest universal_kepler/validation/test_propagator.py::TestPeriodWrap -v
"""
