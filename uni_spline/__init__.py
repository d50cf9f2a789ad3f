"""
Clamped cubic Hermite splines supporting both NumPy and PyTorch backends.

API Styles
----------
1. Class-based API (recommended):
   - CubicSpline.from_samples(): solve for derivatives with clamped end tangents
   - CubicSpline.from_control_points(): derivatives already known
   - CubicSpline.from_arrays(): NumPy/PyTorch column data

2. Functional API:
   - compute_spline(), hermite_spline(), evaluate()

3. Building blocks:
   - solve_tridiagonal(), solve_clamped_derivatives(), hermite_coefficients()

Usage Examples
--------------
Samples with flat ends:
    spline = CubicSpline.from_samples([(0.1, 0.3), (0.4, 0.6), (1, 1)])
    y = spline(0.7)
    ys = spline.evaluate(np.linspace(0.0, 2.0, 100))

Known derivatives:
    line = CubicSpline.from_control_points([(0, 0, 1), (1, 1, 1)])
    line(0.5)  # 0.5

Damping a signal:
    damper = SignalDamper(light_response_spline())
    damper.subscribe(lambda damped, raw: ...)
    damper.update(raw_intensity)

Conventions
-----------
- Control points are sorted by x; duplicate x raises InvalidInputError
- Derivatives d are per unit of the normalised segment parameter t in [0, 1]
- Evaluation is constant outside the sampled domain: x < x_0 gives y_0,
  x >= x_{n-1} gives y_{n-1}
"""

# Types, constants and errors
from ._core import (
    ArrayLike,
    Backend,
    InvalidInputError,
    MIN_POINTS,
    SingularSystemError,
    SplineError,
    UNIFORM_SPACING_RTOL,
)

# Points
from .points import ControlPoint, SamplePoint, SegmentCoefficients

# Solver
from .solver import clamped_system, solve_clamped_derivatives, solve_tridiagonal

# Coefficients and evaluation kernels
from .hermite import (
    evaluate_hermite,
    evaluate_hermite_derivative,
    hermite_coefficients,
    locate_segments,
)

# Spline
from .spline import CubicSpline, compute_spline, evaluate, hermite_spline

# Damping
from .damping import LIGHT_RESPONSE_SAMPLES, SignalDamper, light_response_spline

__all__ = [
    # Types
    "ArrayLike",
    "Backend",
    # Constants
    "MIN_POINTS",
    "UNIFORM_SPACING_RTOL",
    "LIGHT_RESPONSE_SAMPLES",
    # Errors
    "SplineError",
    "InvalidInputError",
    "SingularSystemError",
    # Points
    "SamplePoint",
    "ControlPoint",
    "SegmentCoefficients",
    # Solver
    "solve_tridiagonal",
    "clamped_system",
    "solve_clamped_derivatives",
    # Coefficients and evaluation
    "hermite_coefficients",
    "locate_segments",
    "evaluate_hermite",
    "evaluate_hermite_derivative",
    # Spline
    "CubicSpline",
    "compute_spline",
    "hermite_spline",
    "evaluate",
    # Damping
    "SignalDamper",
    "light_response_spline",
]

__version__ = "0.1.0"
