"""
Core utilities: types, constants, errors, and backend-agnostic operations.

This module provides the foundational building blocks used throughout uni_spline.
All internal modules depend on this module.
"""

from __future__ import annotations

from typing import Literal, Union

import numpy as np
import torch


# =============================================================================
# Type Definitions
# =============================================================================

ArrayLike = Union[np.ndarray, torch.Tensor]
Backend = Literal["numpy", "torch"]
Scalar = Union[float, int]


# =============================================================================
# Numerical Constants
# =============================================================================

MIN_POINTS = 2  # A piecewise cubic needs at least one segment
UNIFORM_SPACING_RTOL = 1e-6  # Relative knot-spacing spread still treated as uniform


# =============================================================================
# Errors
# =============================================================================


class SplineError(ValueError):
    """Base class for spline construction errors."""

    pass


class InvalidInputError(SplineError):
    """Raised for too few points, duplicate abscissae or malformed arrays."""

    pass


class SingularSystemError(SplineError):
    """Raised when tridiagonal elimination hits a zero pivot."""

    pass


# =============================================================================
# Backend Detection
# =============================================================================


def get_backend(x: ArrayLike) -> Backend:
    """Determine backend from input type."""
    return "torch" if isinstance(x, torch.Tensor) else "numpy"


def as_float_array(x, like: ArrayLike = None) -> ArrayLike:
    """Convert to a floating-point array, following ``like``'s backend if given.

    Tensors keep their floating dtype and device (integer tensors are promoted to
    the default float dtype); everything else becomes a float64 ndarray. With a
    NumPy ``like`` a tensor is copied to a float64 ndarray.
    """
    if like is not None and get_backend(like) == "torch":
        return torch.as_tensor(x, dtype=like.dtype, device=like.device)
    if isinstance(x, torch.Tensor):
        if like is not None:
            return np.asarray(x.detach().cpu().numpy(), dtype=np.float64)
        return x if x.is_floating_point() else x.to(torch.get_default_dtype())
    return np.asarray(x, dtype=np.float64)


# =============================================================================
# Backend-Agnostic Operations
# =============================================================================


def zeros_like(x: ArrayLike) -> ArrayLike:
    """Zero tensor/array with the shape, dtype and device of ``x``."""
    if isinstance(x, torch.Tensor):
        return torch.zeros_like(x)
    return np.zeros_like(x)


def diff(x: ArrayLike) -> ArrayLike:
    """First difference along the leading dimension."""
    if isinstance(x, torch.Tensor):
        return x[1:] - x[:-1]
    return np.diff(x)


def all_finite(x: ArrayLike) -> bool:
    """True if every element is finite."""
    if isinstance(x, torch.Tensor):
        return bool(torch.isfinite(x).all())
    return bool(np.isfinite(x).all())


def searchsorted_right(sorted_x: ArrayLike, query: ArrayLike) -> ArrayLike:
    """Insertion indices keeping equal elements to the left of the query."""
    if isinstance(sorted_x, torch.Tensor):
        return torch.searchsorted(sorted_x, query.contiguous(), side="right")
    return np.searchsorted(sorted_x, query, side="right")


def clip(x: ArrayLike, low, high) -> ArrayLike:
    """Clamp elements into ``[low, high]``."""
    if isinstance(x, torch.Tensor):
        return torch.clamp(x, low, high)
    return np.clip(x, low, high)


def where(cond: ArrayLike, a: ArrayLike, b: ArrayLike) -> ArrayLike:
    """Elementwise select."""
    if isinstance(cond, torch.Tensor):
        return torch.where(cond, a, b)
    return np.where(cond, a, b)
