"""
Hermite coefficient derivation and piecewise evaluation.

For consecutive control points (y_i, d_i), (y_{i+1}, d_{i+1}) the segment is

    S_i(t) = a[i] + b[i]*t + c[i]*t² + d[i]*t³,    t = (x - x_i) / (x_{i+1} - x_i)

with S_i(0) = y_i, S_i(1) = y_{i+1}, S_i'(0) = d_i, S_i'(1) = d_{i+1}.
Queries outside [x_0, x_{n-1}) take the boundary ordinate.
"""

from __future__ import annotations

from typing import Tuple

from ._core import ArrayLike, clip, diff, searchsorted_right, where, zeros_like


def hermite_coefficients(
    values: ArrayLike,
    derivatives: ArrayLike,
) -> Tuple[ArrayLike, ArrayLike, ArrayLike, ArrayLike]:
    """
    Convert knot values and derivatives to power-basis segment coefficients.

    Args:
        values: y_0..y_{n-1} (N,)
        derivatives: d_0..d_{n-1} (N,), per unit of the normalised segment parameter

    Returns:
        (a, b, c, d), each (N-1,)
    """
    y0, y1 = values[:-1], values[1:]
    d0, d1 = derivatives[:-1], derivatives[1:]
    a = y0
    b = d0
    c = 3*(y1 - y0) - 2*d0 - d1
    d = 2*(y0 - y1) + d0 + d1
    return a, b, c, d


def locate_segments(knots: ArrayLike, x: ArrayLike) -> ArrayLike:
    """Greatest i with knots[i] <= x, clipped to a valid segment index."""
    return clip(searchsorted_right(knots, x) - 1, 0, knots.shape[0] - 2)


def evaluate_hermite(
    knots: ArrayLike,
    values: ArrayLike,
    coefficients: Tuple[ArrayLike, ArrayLike, ArrayLike, ArrayLike],
    x: ArrayLike,
) -> ArrayLike:
    """
    Evaluate the piecewise cubic with constant extrapolation.

    Args:
        knots: Sorted abscissae (N,)
        values: Ordinates (N,)
        coefficients: (a, b, c, d), each (N-1,)
        x: Query points, any shape, same backend as ``knots``

    Returns:
        Values with the shape of ``x``
    """
    a, b, c, d = coefficients
    idx, t = _segment_parameter(knots, x)
    t2 = t * t
    inside = a[idx] + b[idx]*t + c[idx]*t2 + d[idx]*t2*t
    return where(x < knots[0], values[0], where(x >= knots[-1], values[-1], inside))


def evaluate_hermite_derivative(
    knots: ArrayLike,
    coefficients: Tuple[ArrayLike, ArrayLike, ArrayLike, ArrayLike],
    x: ArrayLike,
    order: int = 1,
) -> ArrayLike:
    """
    Evaluate the derivative in x units (order=1,2,3).

    Outside [knots[0], knots[-1]) the spline is constant, so the result is zero.
    """
    if order not in (1, 2, 3):
        raise ValueError(f"order must be 1, 2, or 3, got {order}")

    a, b, c, d = coefficients
    idx, t = _segment_parameter(knots, x)
    h = diff(knots)[idx]
    if order == 1:
        inside = (b[idx] + 2*c[idx]*t + 3*d[idx]*t*t) / h
    elif order == 2:
        inside = (2*c[idx] + 6*d[idx]*t) / (h*h)
    else:
        inside = 6*d[idx] / (h*h*h)

    outside = (x < knots[0]) | (x >= knots[-1])
    return where(outside, zeros_like(inside), inside)


def _segment_parameter(knots: ArrayLike, x: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
    idx = locate_segments(knots, x)
    x0, x1 = knots[idx], knots[idx + 1]
    # Queries outside the domain are masked by the caller; clamping keeps them finite
    t = clip((x - x0) / (x1 - x0), 0.0, 1.0)
    return idx, t
