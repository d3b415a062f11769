"""
Multi-predictor regression for attributing a shared outcome across
several habits.

Fits the ordinary least-squares model

    y = β₀ + β₁·h₁ + … + β_p·h_p + ε

by forming the normal equations XᵀX·β = Xᵀy (X has a leading column of
ones) and solving them with Gaussian elimination and partial pivoting.
A pivot below SINGULAR_PIVOT_TOLERANCE means collinear predictors and
yields None rather than a division by ~0.

Goodness of fit:

    R²      = 1 − SS_res / SS_tot                  (0 when SS_tot = 0)
    R²_adj  = 1 − (1 − R²)(n − 1) / (n − p − 1)
    F       = (SS_reg / p) / (SS_res / (n − p − 1)),  SS_reg = SS_tot − SS_res
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np

from constants import MINIMUM_SAMPLE_SIZE, SIGNIFICANCE_ALPHA, SINGULAR_PIVOT_TOLERANCE
from significance import f_distribution_p_value

log = logging.getLogger("regression")


@dataclass(frozen=True)
class RegressionResult:
    coefficients: Dict[str, float]
    intercept: float
    r_squared: float
    adjusted_r_squared: float
    f_statistic: float
    p_value: float
    sample_size: int

    @property
    def is_significant(self) -> bool:
        return self.p_value < SIGNIFICANCE_ALPHA and self.sample_size >= MINIMUM_SAMPLE_SIZE


def gaussian_elimination(matrix: np.ndarray, vector: np.ndarray) -> Optional[np.ndarray]:
    """Solve A·x = b with partial pivoting; None if A is (numerically) singular."""
    a = np.array(matrix, dtype=np.float64)
    b = np.array(vector, dtype=np.float64)
    size = len(b)

    # Forward elimination
    for i in range(size):
        pivot_row = i + int(np.argmax(np.abs(a[i:, i])))
        if pivot_row != i:
            a[[i, pivot_row]] = a[[pivot_row, i]]
            b[[i, pivot_row]] = b[[pivot_row, i]]

        pivot = a[i, i]
        if abs(pivot) < SINGULAR_PIVOT_TOLERANCE:
            return None

        for k in range(i + 1, size):
            factor = a[k, i] / pivot
            a[k, i:] -= factor * a[i, i:]
            b[k] -= factor * b[i]

    # Back substitution
    x = np.zeros(size, dtype=np.float64)
    for i in range(size - 1, -1, -1):
        x[i] = (b[i] - np.dot(a[i, i + 1:], x[i + 1:])) / a[i, i]
    return x


def multiple_regression(predictor_matrix: Sequence[Sequence[float]],
                        outcome: Sequence[float],
                        names: Sequence[str]) -> Optional[RegressionResult]:
    """OLS fit of outcome on the named predictors plus an intercept.

    predictor_matrix: n rows (days) × p columns (habits, usually 0/1).
    Returns None when n ≤ p + 1, n < MINIMUM_SAMPLE_SIZE, p = 0, the
    row count differs from len(outcome), or the system is singular.
    """
    n = len(outcome)
    p = len(names)

    if p == 0:
        log.debug("Regression skipped: no predictors")
        return None
    if len(predictor_matrix) != n:
        log.debug(f"Regression skipped: {len(predictor_matrix)} rows vs {n} outcomes")
        return None
    if n <= p + 1 or n < MINIMUM_SAMPLE_SIZE:
        log.debug(f"Regression skipped: n={n} too small for p={p}")
        return None

    X = np.asarray(predictor_matrix, dtype=np.float64).reshape(n, -1)
    if X.shape[1] != p:
        raise ValueError(f"predictor_matrix has {X.shape[1]} columns but {p} names")
    y = np.asarray(outcome, dtype=np.float64)

    design = np.column_stack([np.ones(n), X])
    xtx = design.T @ design
    xty = design.T @ y

    beta = gaussian_elimination(xtx, xty)
    if beta is None:
        log.debug(f"Regression skipped: singular normal equations for {list(names)}")
        return None

    fitted = design @ beta
    ss_res = float(np.sum((y - fitted) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    df_res = n - p - 1

    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0
    adjusted_r_squared = 1.0 - (1.0 - r_squared) * (n - 1) / df_res

    if ss_tot <= 0:
        f_statistic, p_value = 0.0, 1.0
    elif ss_res <= 0:
        f_statistic, p_value = math.inf, 0.0
    else:
        ss_reg = ss_tot - ss_res
        f_statistic = (ss_reg / p) / (ss_res / df_res)
        p_value = f_distribution_p_value(f_statistic, p, df_res)

    coefficients: Dict[str, float] = {
        name: float(beta[i + 1]) for i, name in enumerate(names)
    }
    return RegressionResult(
        coefficients=coefficients,
        intercept=float(beta[0]),
        r_squared=r_squared,
        adjusted_r_squared=adjusted_r_squared,
        f_statistic=f_statistic,
        p_value=p_value,
        sample_size=n,
    )
