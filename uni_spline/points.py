"""
Point types and input validation.

Sample points are ``(x, y)`` pairs; control points add the prescribed first
derivative ``d``. Splines store columns internally, so this module also turns
point sequences (or ``(N, 2)`` / ``(N, 3)`` arrays) into sorted, validated
columns.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from ._core import (
    MIN_POINTS,
    ArrayLike,
    InvalidInputError,
    all_finite,
    as_float_array,
    diff,
    get_backend,
)


@dataclass(frozen=True, slots=True)
class SamplePoint:
    """Abscissa/ordinate pair."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


@dataclass(frozen=True, slots=True)
class ControlPoint:
    """Sample point with a prescribed first derivative ``d``.

    ``d`` is expressed per unit of the normalised segment parameter, i.e. it is
    the slope of the segment polynomial with respect to ``t`` in ``[0, 1]``.
    """

    x: float
    y: float
    d: float

    def __iter__(self) -> Iterator[float]:
        return iter(astuple(self))


@dataclass(frozen=True, slots=True)
class SegmentCoefficients:
    """Power-basis cubic ``a + b*t + c*t**2 + d*t**3`` for ``t`` in ``[0, 1]``."""

    a: float
    b: float
    c: float
    d: float

    def value(self, t: float) -> float:
        t2 = t * t
        return self.a + self.b * t + self.c * t2 + self.d * t2 * t

    def slope(self, t: float) -> float:
        """Derivative with respect to ``t``."""
        return self.b + 2 * self.c * t + 3 * self.d * t * t


PointsLike = Union[ArrayLike, Sequence[SamplePoint], Sequence[ControlPoint], Sequence[Tuple[float, ...]]]


# =============================================================================
# Parsing
# =============================================================================


def point_columns(points: PointsLike, width: int) -> Tuple[ArrayLike, ...]:
    """
    Split points into ``width`` float columns.

    Args:
        points: Sequence of points/tuples, or an array/tensor of shape (N, width)
        width: 2 for samples (x, y), 3 for control points (x, y, d)

    Returns:
        Tuple of ``width`` 1-D columns in the input backend (NumPy for sequences)
    """
    if isinstance(points, (np.ndarray, torch.Tensor)):
        table = as_float_array(points)
    else:
        rows = [_row(p, width) for p in points]
        table = np.asarray(rows, dtype=np.float64).reshape(len(rows), width)

    if table.ndim != 2 or table.shape[1] != width:
        raise InvalidInputError(f"Points must have shape (N, {width}), got {tuple(table.shape)}")
    return tuple(table[:, k] for k in range(width))


def _row(point: Iterable[float], width: int) -> Tuple[float, ...]:
    row = tuple(point)
    if len(row) != width:
        raise InvalidInputError(f"Expected {width} values per point, got {len(row)}: {row!r}")
    return row


def sorted_columns(x: ArrayLike, *columns: ArrayLike) -> Tuple[ArrayLike, ...]:
    """
    Validate and sort columns ascending by ``x``.

    Args:
        x: Abscissae (N,)
        *columns: Columns (N,) reordered along with ``x``

    Returns:
        ``(x, *columns)`` sorted by x, as fresh arrays

    Raises:
        InvalidInputError: fewer than 2 points, mismatched lengths, non-finite
            values, or duplicate abscissae
    """
    x = as_float_array(x)
    columns = tuple(as_float_array(col, like=x) for col in columns)

    if x.ndim != 1:
        raise InvalidInputError(f"x must be 1-D, got shape {tuple(x.shape)}")
    n = x.shape[0]
    if n < MIN_POINTS:
        raise InvalidInputError(f"Need at least {MIN_POINTS} points, got {n}")
    for col in columns:
        if col.shape != x.shape:
            raise InvalidInputError(f"Column shape {tuple(col.shape)} does not match x shape {tuple(x.shape)}")
    for col in (x,) + columns:
        if not all_finite(col):
            raise InvalidInputError("Points must be finite")

    if get_backend(x) == "torch":
        x, order = torch.sort(x, stable=True)
        columns = tuple(col[order] for col in columns)
    else:
        order = np.argsort(x, kind="stable")
        x = x[order]
        columns = tuple(col[order] for col in columns)

    duplicates = diff(x) <= 0
    if bool(duplicates.any()):
        first = int(duplicates.nonzero()[0][0])
        raise InvalidInputError(f"Duplicate x value {float(x[first])} at sorted positions {first} and {first + 1}")

    return (x,) + columns


def spacing_spread(x: ArrayLike) -> Optional[float]:
    """Relative spread ``(max(h) - min(h)) / max(h)`` of knot gaps, None for one gap."""
    h = diff(x)
    if h.shape[0] < 2:
        return None
    h_max, h_min = float(h.max()), float(h.min())
    return (h_max - h_min) / h_max
