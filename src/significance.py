"""
Significance primitives: normal CDF, regularized incomplete beta,
Student-t and F tail probabilities.

All tails reduce to the regularized incomplete beta function I_x(a, b),
evaluated exactly with scipy.special.betainc:

  two-tailed t:   p = I_x(df/2, 1/2),        x = df / (df + t²)
  upper-tail F:   p = I_x(df2/2, df1/2),     x = df2 / (df2 + df1·F)

Edge cases are returned explicitly instead of leaking NaN/Inf:
df ≤ 0 → 1.0, F ≤ 0 (or NaN) → 1.0, F = ∞ → 0.0.
"""

from __future__ import annotations

import math

from scipy import special


def _clamp_probability(p: float) -> float:
    if math.isnan(p):
        return 1.0
    return max(0.0, min(1.0, p))


def normal_cdf(z: float) -> float:
    """Standard normal CDF Φ(z)."""
    return float(special.ndtr(z))


def incomplete_beta(a: float, b: float, x: float) -> float:
    """Regularized incomplete beta I_x(a, b) for a, b > 0."""
    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0
    return _clamp_probability(float(special.betainc(a, b, x)))


def t_distribution_p_value(t: float, df: float) -> float:
    """Two-tailed Student-t p-value P(|T| ≥ |t|)."""
    if df <= 0 or math.isnan(t):
        return 1.0
    if math.isinf(t):
        return 0.0
    x = df / (df + t * t)
    return incomplete_beta(df / 2.0, 0.5, x)


def f_distribution_p_value(f: float, df1: float, df2: float) -> float:
    """Upper-tail F p-value P(F' ≥ f) with (df1, df2) degrees of freedom."""
    if df1 <= 0 or df2 <= 0:
        return 1.0
    if math.isnan(f) or f <= 0:
        return 1.0
    if math.isinf(f):
        return 0.0
    x = df2 / (df2 + df1 * f)
    return incomplete_beta(df2 / 2.0, df1 / 2.0, x)
