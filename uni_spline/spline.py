"""
CubicSpline class: build once, evaluate many times.

Two construction paths:
    CubicSpline.from_samples(samples, tangent_at_start, tangent_at_end)  # solve for derivatives
    CubicSpline.from_control_points(points)                              # derivatives known

Both NumPy and PyTorch column data are accepted through CubicSpline.from_arrays().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import torch

from ._core import (
    UNIFORM_SPACING_RTOL,
    ArrayLike,
    Backend,
    Scalar,
    get_backend,
)
from .hermite import evaluate_hermite, evaluate_hermite_derivative, hermite_coefficients
from .points import (
    ControlPoint,
    PointsLike,
    SegmentCoefficients,
    point_columns,
    sorted_columns,
    spacing_spread,
)
from .solver import solve_clamped_derivatives

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class CubicSpline:
    """
    C1-continuous piecewise cubic Hermite spline with constant extrapolation.

    Control points are sorted by x on construction and never change afterwards;
    segment coefficients are derived eagerly. Attributes cannot be reassigned and
    NumPy arrays are stored read-only. Derivatives are per unit of the
    normalised segment parameter t in [0, 1].

    Example:
        >>> spline = CubicSpline.from_samples([(0.1, 0.3), (0.4, 0.6), (1.0, 1.0)])
        >>> spline(0.7)
        >>> spline.evaluate(np.linspace(0.0, 2.0, 50))

        >>> line = CubicSpline.from_control_points([(0, 0, 1), (1, 1, 1)])
        >>> line(0.5)
        0.5
    """

    knots: ArrayLike  # (N,)
    values: ArrayLike  # (N,)
    derivatives: ArrayLike  # (N,)
    a: ArrayLike = field(init=False, repr=False)  # (N-1,)
    b: ArrayLike = field(init=False, repr=False)  # (N-1,)
    c: ArrayLike = field(init=False, repr=False)  # (N-1,)
    d: ArrayLike = field(init=False, repr=False)  # (N-1,)
    backend: Backend = field(init=False)

    def __post_init__(self) -> None:
        """Sort, validate and derive segment coefficients."""
        knots, values, derivatives = sorted_columns(self.knots, self.values, self.derivatives)
        a, b, c, d = hermite_coefficients(values, derivatives)
        arrays = dict(knots=knots, values=values, derivatives=derivatives, a=a, b=b, c=c, d=d)
        for name, array in arrays.items():
            if isinstance(array, np.ndarray):
                array.setflags(write=False)
            object.__setattr__(self, name, array)
        object.__setattr__(self, "backend", get_backend(knots))

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_samples(
        cls,
        samples: PointsLike,
        tangent_at_start: float = 0.0,
        tangent_at_end: float = 0.0,
        *,
        check_spacing: bool = True,
    ) -> "CubicSpline":
        """
        Create a clamped spline through sample points, solving for derivatives.

        Args:
            samples: (x, y) pairs or SamplePoints, or an array/tensor (N, 2)
            tangent_at_start: Derivative at the smallest x
            tangent_at_end: Derivative at the largest x
            check_spacing: Log a warning if the samples are not evenly spaced

        Returns:
            CubicSpline instance

        Raises:
            InvalidInputError: fewer than 2 samples or duplicate x
        """
        x, y = point_columns(samples, 2)
        return cls.from_arrays(
            x, y, tangent_at_start=tangent_at_start, tangent_at_end=tangent_at_end, check_spacing=check_spacing
        )

    @classmethod
    def from_control_points(cls, points: Union[PointsLike, Sequence[ControlPoint]]) -> "CubicSpline":
        """Create from (x, y, d) control points, skipping the solver."""
        x, y, d = point_columns(points, 3)
        return cls(knots=x, values=y, derivatives=d)

    @classmethod
    def from_arrays(
        cls,
        x: ArrayLike,
        y: ArrayLike,
        d: Optional[ArrayLike] = None,
        *,
        tangent_at_start: float = 0.0,
        tangent_at_end: float = 0.0,
        check_spacing: bool = True,
    ) -> "CubicSpline":
        """
        Create from column data.

        Args:
            x: Abscissae (N,)
            y: Ordinates (N,)
            d: Derivatives (N,). If None they are solved for with the clamped system
            tangent_at_start, tangent_at_end: End derivatives (only used if d is None)
            check_spacing: Log a warning if x is not evenly spaced (only used if d is None)

        Returns:
            CubicSpline instance in the backend of ``x``
        """
        if d is not None:
            return cls(knots=x, values=y, derivatives=d)

        x, y = sorted_columns(x, y)
        spread = spacing_spread(x)
        if check_spacing and spread is not None and spread > UNIFORM_SPACING_RTOL:
            logger.warning(
                "Knot spacing is not uniform (relative spread %.3g); derivatives are solved "
                "per normalised segment and the curve is only C1 at the knots",
                spread,
            )

        derivatives = solve_clamped_derivatives(y, float(tangent_at_start), float(tangent_at_end))
        spline = cls(knots=x, values=y, derivatives=derivatives)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("controlPoints: %s", spline.control_points)
        return spline

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def n_points(self) -> int:
        return self.knots.shape[0]

    @property
    def n_segments(self) -> int:
        return self.a.shape[0]

    @property
    def domain(self) -> Tuple[float, float]:
        """Sampled interval (x_min, x_max); evaluation is constant outside it."""
        return float(self.knots[0]), float(self.knots[-1])

    @property
    def control_points(self) -> Tuple[ControlPoint, ...]:
        return tuple(
            ControlPoint(x, y, d)
            for x, y, d in zip(self.knots.tolist(), self.values.tolist(), self.derivatives.tolist())
        )

    @property
    def coefficients(self) -> Tuple[SegmentCoefficients, ...]:
        return tuple(
            SegmentCoefficients(a, b, c, d)
            for a, b, c, d in zip(self.a.tolist(), self.b.tolist(), self.c.tolist(), self.d.tolist())
        )

    def __len__(self) -> int:
        return self.n_points

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def evaluate(self, x: Union[Scalar, ArrayLike]) -> Union[float, ArrayLike]:
        """
        Evaluate the spline.

        Args:
            x: Scalar or array/tensor of query points (any shape)

        Returns:
            float for scalar input, otherwise values with the shape of ``x``
        """
        query = self._query(x)
        result = evaluate_hermite(self.knots, self.values, (self.a, self.b, self.c, self.d), query.reshape(-1))
        return self._result(x, result.reshape(query.shape))

    def derivative(self, x: Union[Scalar, ArrayLike], order: int = 1) -> Union[float, ArrayLike]:
        """Derivative dy/dx of order 1, 2 or 3; zero outside the sampled domain."""
        query = self._query(x)
        result = evaluate_hermite_derivative(self.knots, (self.a, self.b, self.c, self.d), query.reshape(-1), order)
        return self._result(x, result.reshape(query.shape))

    __call__ = evaluate
    f = evaluate

    def _query(self, x) -> ArrayLike:
        """Query points in the spline's backend, dtype and device."""
        if self.backend == "torch":
            return torch.as_tensor(x, dtype=self.knots.dtype, device=self.knots.device)
        if isinstance(x, torch.Tensor):
            x = x.detach().cpu().numpy()
        return np.asarray(x, dtype=np.float64)

    @staticmethod
    def _result(x, result: ArrayLike) -> Union[float, ArrayLike]:
        """Result in the query's backend: tensor (same device), ndarray, or float."""
        if isinstance(x, torch.Tensor):
            dtype = x.dtype if x.is_floating_point() else torch.get_default_dtype()
            return torch.as_tensor(result, dtype=dtype, device=x.device)
        if isinstance(result, torch.Tensor):
            result = result.detach().cpu().numpy()
        if isinstance(x, np.ndarray) or np.ndim(x) > 0:
            return result
        return float(result)


# =============================================================================
# Functional API
# =============================================================================


def compute_spline(
    samples: PointsLike,
    tangent_at_start: float = 0.0,
    tangent_at_end: float = 0.0,
) -> CubicSpline:
    """
    Build a clamped cubic spline through samples (compute once, evaluate many times).

    Example:
        >>> spline = compute_spline([(0.1, 0.3), (0.4, 0.6), (1, 1), (2, 1.6), (2.5, 2)])
        >>> spline(3.0)
        2.0
    """
    return CubicSpline.from_samples(samples, tangent_at_start, tangent_at_end)


def hermite_spline(points: Union[PointsLike, Sequence[ControlPoint]]) -> CubicSpline:
    """Build a spline from (x, y, d) control points."""
    return CubicSpline.from_control_points(points)


def evaluate(spline: CubicSpline, x: Union[Scalar, ArrayLike]) -> Union[float, ArrayLike]:
    """Evaluate ``spline`` at ``x`` (total function, constant outside the domain)."""
    return spline.evaluate(x)
