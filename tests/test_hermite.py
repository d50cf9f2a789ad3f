"""Tests for Hermite coefficient derivation and evaluation kernels."""

import numpy as np
import pytest
import torch

from uni_spline import (
    SegmentCoefficients,
    evaluate_hermite,
    evaluate_hermite_derivative,
    hermite_coefficients,
    locate_segments,
)


class TestHermiteCoefficients:
    def test_straight_line(self):
        a, b, c, d = hermite_coefficients(np.array([0.0, 1.0]), np.array([1.0, 1.0]))
        np.testing.assert_array_equal(a, [0.0])
        np.testing.assert_array_equal(b, [1.0])
        np.testing.assert_array_equal(c, [0.0])
        np.testing.assert_array_equal(d, [0.0])

    def test_one_segment_per_pair(self):
        coeffs = hermite_coefficients(np.arange(5.0), np.zeros(5))
        assert all(k.shape == (4,) for k in coeffs)

    def test_endpoint_values_and_slopes(self):
        """Each segment starts/ends at its knot values with the knot derivatives."""
        rng = np.random.default_rng(3)
        values, derivatives = rng.normal(size=6), rng.normal(size=6)
        a, b, c, d = hermite_coefficients(values, derivatives)

        for i in range(5):
            seg = SegmentCoefficients(a[i], b[i], c[i], d[i])
            assert seg.value(0.0) == values[i]
            assert seg.value(1.0) == pytest.approx(values[i + 1], abs=1e-12)
            assert seg.slope(0.0) == derivatives[i]
            assert seg.slope(1.0) == pytest.approx(derivatives[i + 1], abs=1e-12)

    def test_torch_input(self):
        a, b, c, d = hermite_coefficients(torch.tensor([0.0, 1.0, 0.0]), torch.tensor([0.0, 0.0, 0.0]))
        assert isinstance(c, torch.Tensor)
        assert c.tolist() == [3.0, -3.0]
        assert d.tolist() == [-2.0, 2.0]


class TestSegmentCoefficients:
    def test_value(self):
        seg = SegmentCoefficients(1.0, 2.0, 3.0, 4.0)
        assert seg.value(0.5) == 1.0 + 1.0 + 0.75 + 0.5

    def test_slope(self):
        seg = SegmentCoefficients(1.0, 2.0, 3.0, 4.0)
        assert seg.slope(0.5) == 2.0 + 3.0 + 3.0

    def test_frozen(self):
        seg = SegmentCoefficients(1.0, 2.0, 3.0, 4.0)
        with pytest.raises(AttributeError):
            seg.a = 0.0


class TestLocateSegments:
    def test_numpy(self):
        knots = np.array([0.0, 1.0, 2.0, 3.0])
        x = np.array([-1.0, 0.0, 0.5, 1.0, 2.999, 3.0, 10.0])
        np.testing.assert_array_equal(locate_segments(knots, x), [0, 0, 0, 1, 2, 2, 2])

    def test_torch(self):
        knots = torch.tensor([0.0, 1.0, 2.0, 3.0])
        x = torch.tensor([-1.0, 0.0, 0.5, 1.0, 2.5, 3.0, 10.0])
        assert locate_segments(knots, x).tolist() == [0, 0, 0, 1, 2, 2, 2]


class TestEvaluateHermite:
    def setup_method(self):
        self.knots = np.array([0.0, 1.0, 3.0])
        self.values = np.array([1.0, 2.0, 0.0])
        self.coeffs = hermite_coefficients(self.values, np.array([0.0, 0.5, 0.0]))

    def test_constant_outside(self):
        x = np.array([-5.0, -1e-9, 3.0, 3.5, 1e300])
        result = evaluate_hermite(self.knots, self.values, self.coeffs, x)
        np.testing.assert_array_equal(result, [1.0, 1.0, 0.0, 0.0, 0.0])

    def test_knots_exact(self):
        result = evaluate_hermite(self.knots, self.values, self.coeffs, self.knots)
        np.testing.assert_array_equal(result, self.values)

    def test_normalised_parameter(self):
        """Midpoint of the second segment is t = 0.5."""
        a, b, c, d = (k[1] for k in self.coeffs)
        expected = SegmentCoefficients(a, b, c, d).value(0.5)
        result = evaluate_hermite(self.knots, self.values, self.coeffs, np.array([2.0]))
        assert result[0] == pytest.approx(expected, abs=1e-15)

    def test_infinite_queries_stay_finite(self):
        x = np.array([-np.inf, np.inf])
        result = evaluate_hermite(self.knots, self.values, self.coeffs, x)
        np.testing.assert_array_equal(result, [1.0, 0.0])


class TestEvaluateHermiteDerivative:
    def setup_method(self):
        # y = x on [0, 2]: slope per normalised segment is h = 2
        self.knots = np.array([0.0, 2.0])
        self.coeffs = hermite_coefficients(np.array([0.0, 2.0]), np.array([2.0, 2.0]))

    def test_first_derivative_in_x_units(self):
        result = evaluate_hermite_derivative(self.knots, self.coeffs, np.array([0.0, 1.0, 1.9]))
        np.testing.assert_allclose(result, [1.0, 1.0, 1.0])

    @pytest.mark.parametrize("order", [2, 3])
    def test_higher_orders_vanish_on_line(self, order):
        result = evaluate_hermite_derivative(self.knots, self.coeffs, np.array([0.5, 1.5]), order)
        np.testing.assert_allclose(result, [0.0, 0.0], atol=1e-15)

    def test_zero_outside(self):
        result = evaluate_hermite_derivative(self.knots, self.coeffs, np.array([-1.0, 2.0, 5.0]))
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_invalid_order_raises(self):
        with pytest.raises(ValueError, match="order"):
            evaluate_hermite_derivative(self.knots, self.coeffs, np.array([1.0]), order=4)
