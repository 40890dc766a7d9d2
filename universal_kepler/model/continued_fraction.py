"""
Continued Fraction Evaluator
============================

Gauss-form continued fraction for the hypergeometric series that appears in the
universal-variable Kepler equation.
"""
from universal_kepler.model.constants import KEPLERSTM


def evaluate_continued_fraction(
  q   : float,
  tol : float = KEPLERSTM.CONT_FRAC_TOL,
) -> tuple[float, int]:
  """
  Evaluate the continued fraction G(q) of the universal Kepler series.

  The series is G = 1 + sum(B_k), where the partial terms B_k follow from the
  running convergent A_k of the Gauss continued fraction. Iteration stops as
  soon as two successive partial sums differ by no more than tol.

  Input:
  ------
    q : float
      Series argument, q = beta*u² / (1 + beta*u²). Must satisfy q < 1;
      q is negative for hyperbolic orbits.
    tol : float
      Convergence tolerance on successive partial sums.

  Output:
  -------
    value : float
      Converged value of the continued fraction.
    iterations : int
      Number of continued fraction iterations performed.

  Source:
  -------
    S.W. Shepperd, "Universal Keplerian State Transition Matrix",
    Celestial Mechanics 35 (1985), pp. 129-144.
  """
  if not q < 1.0:
    raise ValueError(f"evaluate_continued_fraction() requires q < 1, received q = {q}")

  # Running convergents and partial sum
  a_conv   = 1.0
  b_term   = 1.0
  value    = 1.0
  num      = 0.0
  k_sign   = -9.0
  den      = 15.0
  l_index  = 3.0
  previous = float('inf')

  iterations = 0
  while abs(value - previous) > tol:
    k_sign   = -k_sign
    l_index  = l_index + 2.0
    den      = den + 4.0 * l_index
    num      = num + (1.0 + k_sign) * l_index
    a_conv   = den / (den - num * a_conv * q)
    b_term   = (a_conv - 1.0) * b_term
    previous = value
    value    = value + b_term

    iterations += 1

  return value, iterations
