"""
Derivative solver for clamped cubic splines.

The clamped system fixes the end derivatives and asks for second-derivative
continuity at every interior knot. With derivatives expressed per unit of the
normalised segment parameter it becomes

    1 0 0 ...     0     d_0       = tangent_at_start
    1 4 1 ...     0     d_i       = 3 * (y_{i+1} - y_{i-1})
    0 1 4 1 ...   0
    ...
    0 ...     1 4 1
    0 ...     0 0 1     d_{n-1}   = tangent_at_end

which is strictly diagonally dominant and is solved in O(n) with the Thomas
algorithm.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import torch

from ._core import (
    MIN_POINTS,
    ArrayLike,
    InvalidInputError,
    SingularSystemError,
    as_float_array,
    get_backend,
)

logger = logging.getLogger(__name__)


def solve_tridiagonal(lower: ArrayLike, diag: ArrayLike, upper: ArrayLike, rhs: ArrayLike) -> ArrayLike:
    """
    Solve a tridiagonal system using the Thomas algorithm.

    Row ``i`` reads ``lower[i]*x[i-1] + diag[i]*x[i] + upper[i]*x[i+1] = rhs[i]``;
    ``lower[0]`` and ``upper[-1]`` are ignored.

    Args:
        lower: Sub-diagonal (N,)
        diag: Main diagonal (N,)
        upper: Super-diagonal (N,)
        rhs: Right-hand side (N,)

    Returns:
        Solution x (N,) in the backend of ``diag``

    Raises:
        InvalidInputError: empty system or band length mismatch
        SingularSystemError: a pivot is exactly zero during elimination
    """
    n = diag.shape[0]
    if n == 0:
        raise InvalidInputError("Cannot solve an empty system")
    for name, band in (("lower", lower), ("upper", upper), ("rhs", rhs)):
        if band.shape[0] != n:
            raise InvalidInputError(f"{name} has length {band.shape[0]}, expected {n}")

    if get_backend(diag) == "numpy":
        return _thomas_numpy(
            np.asarray(lower, dtype=np.float64),
            np.asarray(diag, dtype=np.float64),
            np.asarray(upper, dtype=np.float64),
            np.asarray(rhs, dtype=np.float64),
        )
    return _thomas_torch(
        as_float_array(lower, like=diag),
        diag,
        as_float_array(upper, like=diag),
        as_float_array(rhs, like=diag),
    )


def clamped_system(
    values: ArrayLike,
    tangent_at_start: float,
    tangent_at_end: float,
) -> Tuple[ArrayLike, ArrayLike, ArrayLike, ArrayLike]:
    """
    Build the bands of the clamped derivative system.

    Args:
        values: Ordinates y_0..y_{n-1} (N,), N >= 2
        tangent_at_start, tangent_at_end: Prescribed end derivatives

    Returns:
        (lower, diag, upper, rhs), each (N,)
    """
    values = as_float_array(values)
    n = values.shape[0]
    if n < MIN_POINTS:
        raise InvalidInputError(f"Need at least {MIN_POINTS} values, got {n}")

    if get_backend(values) == "numpy":
        lower, diag, upper = np.ones(n), np.full(n, 4.0), np.ones(n)
        rhs = np.zeros(n)
    else:
        kw = dict(dtype=values.dtype, device=values.device)
        lower, diag, upper = torch.ones(n, **kw), torch.full((n,), 4.0, **kw), torch.ones(n, **kw)
        rhs = torch.zeros(n, **kw)

    # Identity boundary rows
    lower[0] = upper[0] = 0.0
    lower[-1] = upper[-1] = 0.0
    diag[0] = diag[-1] = 1.0
    rhs[0] = tangent_at_start
    rhs[-1] = tangent_at_end

    rhs[1:-1] = 3 * (values[2:] - values[:-2])
    return lower, diag, upper, rhs


def solve_clamped_derivatives(
    values: ArrayLike,
    tangent_at_start: float = 0.0,
    tangent_at_end: float = 0.0,
) -> ArrayLike:
    """
    Solve for the knot derivatives of a clamped cubic spline.

    Args:
        values: Ordinates y_0..y_{n-1} (N,), ordered by abscissa
        tangent_at_start: d_0
        tangent_at_end: d_{n-1}

    Returns:
        Derivatives d_0..d_{n-1} (N,), per unit of the normalised segment parameter

    Example:
        >>> solve_clamped_derivatives(np.array([0.0, 1.0, 0.0]))
        array([0., 0., 0.])
    """
    values = as_float_array(values)
    n = values.shape[0]
    if n < MIN_POINTS:
        raise InvalidInputError(f"Need at least {MIN_POINTS} values, got {n}")

    if n == MIN_POINTS:
        # Only the two boundary rows remain
        if get_backend(values) == "numpy":
            return np.array([tangent_at_start, tangent_at_end], dtype=np.float64)
        return torch.tensor([tangent_at_start, tangent_at_end], dtype=values.dtype, device=values.device)

    derivatives = solve_tridiagonal(*clamped_system(values, tangent_at_start, tangent_at_end))
    logger.debug("derivatives: %s", derivatives)
    return derivatives


# =============================================================================
# Internal: Thomas Algorithm
# =============================================================================


def _thomas_numpy(a: np.ndarray, b: np.ndarray, c: np.ndarray, d: np.ndarray) -> np.ndarray:
    n = b.shape[0]
    c_p, d_p = np.zeros(n), np.zeros(n)

    denom = b[0]
    if denom == 0:
        raise SingularSystemError("Zero pivot in row 0")
    c_p[0] = c[0] / denom if n > 1 else 0.0
    d_p[0] = d[0] / denom
    for i in range(1, n):
        denom = b[i] - a[i] * c_p[i-1]
        if denom == 0:
            raise SingularSystemError(f"Zero pivot in row {i}")
        c_p[i] = c[i] / denom if i < n-1 else 0.0
        d_p[i] = (d[i] - a[i] * d_p[i-1]) / denom

    x = np.zeros(n)
    x[-1] = d_p[-1]
    for i in range(n-2, -1, -1):
        x[i] = d_p[i] - c_p[i] * x[i+1]
    return x


def _thomas_torch(a: torch.Tensor, b: torch.Tensor, c: torch.Tensor, d: torch.Tensor) -> torch.Tensor:
    n = b.shape[0]
    c_p, d_p = torch.zeros_like(b), torch.zeros_like(b)

    denom = b[0]
    if float(denom) == 0.0:
        raise SingularSystemError("Zero pivot in row 0")
    if n > 1:
        c_p[0] = c[0] / denom
    d_p[0] = d[0] / denom
    for i in range(1, n):
        denom = b[i] - a[i] * c_p[i-1]
        if float(denom) == 0.0:
            raise SingularSystemError(f"Zero pivot in row {i}")
        if i < n-1:
            c_p[i] = c[i] / denom
        d_p[i] = (d[i] - a[i] * d_p[i-1]) / denom

    x = torch.zeros_like(b)
    x[-1] = d_p[-1]
    for i in range(n-2, -1, -1):
        x[i] = d_p[i] - c_p[i] * x[i+1]
    return x
