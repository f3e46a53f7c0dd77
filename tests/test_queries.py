"""Тесты вычисления значений, корней, экстремумов и предикатов."""

import math

import numpy as np
import pytest

from singlab import (
    SingFun,
    construct,
    feval,
    is_equal,
    is_finite,
    is_inf,
    is_nan,
    max_value,
    min_value,
    minandmax,
    roots,
    zero_singfun,
)
from singlab import smooth


def power(a, b, value=1.0):
    return SingFun(smooth.constant(value), (a, b))


class TestFeval:
    def test_endpoint_rules(self):
        assert feval(power(0.5, 0.0), -1.0) == 0.0
        assert feval(power(-0.5, 0.0), -1.0) == math.inf
        assert feval(power(-0.5, 0.0, -3.0), -1.0) == -math.inf
        assert feval(power(-0.5, 0.0), 1.0) == pytest.approx(2.0 ** -0.5)
        assert feval(power(0.0, 0.25, 2.0), -1.0) == pytest.approx(2.0 * 2.0 ** 0.25)

    def test_vanishing_residual_at_pole(self):
        # s(x) = 1 + x обращается в нуль в -1: значение не определено
        f = SingFun(smooth.from_coeffs([1.0, 1.0]), (-1.0, 0.0))
        assert math.isnan(feval(f, -1.0))
        assert feval(f, 0.0) == pytest.approx(1.0)

    def test_interior(self, interior):
        f = construct(lambda x: np.exp(x) * (1.0 - x) ** -0.5, exponents=(0.0, -0.5))
        np.testing.assert_allclose(feval(f, interior), np.exp(interior) / np.sqrt(1.0 - interior), rtol=1e-13)

    def test_shapes(self):
        f = power(0.5, 0.5)
        assert isinstance(f(0.0), float)
        assert f(np.zeros((2, 3))).shape == (2, 3)
        v = f(np.array([-1.0, 0.0, 1.0]))
        np.testing.assert_allclose(v, [0.0, 1.0, 0.0])

    def test_outside_interval_rejected(self):
        with pytest.raises(ValueError):
            feval(power(0.5, 0.0), 1.5)
        with pytest.raises(ValueError):
            power(0.5, 0.0)(np.array([0.0, -2.0]))


class TestRoots:
    def test_interior_and_endpoint_roots(self):
        f = SingFun(smooth.from_coeffs([0.0, 1.0]), (0.5, 0.5))
        np.testing.assert_allclose(roots(f), [-1.0, 0.0, 1.0], atol=1e-14)

    def test_endpoints_excluded_on_request(self):
        f = SingFun(smooth.from_coeffs([0.0, 1.0]), (0.5, 0.5))
        np.testing.assert_allclose(f.roots(endpoints=False), [0.0], atol=1e-14)

    def test_residual_root_at_zero_exponent_end(self):
        f = SingFun(smooth.from_coeffs([1.0, 1.0]), (0.0, -0.5))
        assert roots(f).tolist() == [-1.0]

    def test_residual_root_at_pole_dropped(self):
        f = SingFun(smooth.from_coeffs([1.0, 1.0]), (-1.0, 0.0))
        assert roots(f).size == 0

    def test_cosine_roots(self):
        f = construct(lambda x: np.cos(3.0 * x) * (1.0 + x) ** -0.5, exponents=(-0.5, 0.0))
        ref = [-np.pi / 6.0, np.pi / 6.0]
        np.testing.assert_allclose(roots(f), ref, atol=1e-12)

    def test_zero_function(self):
        assert roots(zero_singfun()).size == 0


class TestExtrema:
    def test_interior_maximum(self):
        # (1+x)^{1/2}(1-x): максимум при x = -1/3
        f = power(0.5, 1.0)
        (lo, hi), (xlo, xhi) = minandmax(f)
        assert hi == pytest.approx((2.0 / 3.0) ** 0.5 * (4.0 / 3.0), rel=1e-12)
        assert xhi == pytest.approx(-1.0 / 3.0, abs=1e-10)
        assert lo == 0.0
        assert xlo in (-1.0, 1.0)

    def test_pole_gives_infinite_max(self):
        f = power(-1.0, 0.0)
        assert max_value(f) == math.inf
        assert min_value(f) == pytest.approx(0.5)
        assert f.max() == math.inf
        assert f.min() == pytest.approx(0.5)

    def test_negative_pole(self):
        f = power(0.0, -2.0, -1.0)
        assert min_value(f) == -math.inf
        assert max_value(f) == pytest.approx(-0.25)

    def test_smooth_function(self):
        f = construct(lambda x: np.sin(2.0 * x), exponents=(0.0, 0.0))
        (lo, hi), (xlo, xhi) = f.minandmax()
        assert hi == pytest.approx(1.0, rel=1e-13)
        assert lo == pytest.approx(-1.0, rel=1e-13)
        assert xhi == pytest.approx(np.pi / 4.0, abs=1e-7)

    def test_complex_rejected(self):
        z = construct(lambda x: np.exp(1j * x), exponents=(0.0, 0.0))
        with pytest.raises(ValueError):
            minandmax(z)


class TestPredicates:
    def test_finite_and_inf(self):
        assert is_finite(power(0.5, 2.0))
        assert not is_finite(power(-0.5, 0.0))
        assert is_inf(power(-0.5, 0.0))
        assert not is_inf(power(0.5, 0.0))

    def test_inf_needs_nonzero_residual(self):
        f = SingFun(smooth.from_coeffs([1.0, 1.0]), (-1.0, 0.0))
        assert not is_inf(f)

    def test_nan(self):
        assert is_nan(SingFun(smooth.from_coeffs([1.0, np.nan]), (0.0, 0.0)))
        assert not is_nan(power(0.5, 0.0))

    def test_equal(self):
        f = power(0.5, 0.0)
        assert is_equal(f, power(0.5 + 1e-12, 0.0))
        assert not is_equal(f, power(0.5, 1.0))
        assert not is_equal(f, power(0.5, 0.0, 2.0))

    def test_length_and_real(self):
        f = SingFun(smooth.from_coeffs([0.0, 1.0, 0.5]), (0.5, 0.0))
        assert f.length == 3
        assert f.is_real()
