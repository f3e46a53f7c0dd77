"""Тесты гладкого движка Чебышёва."""

import numpy as np
import pytest

from singlab import smooth
from singlab.config import SingfunConfig, SmoothConfig


XS = np.linspace(-1.0, 1.0, 41)


class TestMake:
    def test_cos_is_resolved(self):
        s = smooth.make(np.cos)
        assert s.happy
        assert s.length < 40
        np.testing.assert_allclose(s(XS), np.cos(XS), atol=1e-14)

    def test_resolved_near_machine_precision(self):
        # коэффициент c_16 ≈ 1e-13 у exp(2x) должен сохраниться
        s = smooth.make(lambda x: np.exp(2.0 * x))
        assert s.happy
        assert s.length >= 17
        np.testing.assert_allclose(s(XS), np.exp(2.0 * XS), rtol=2e-13)

    def test_scalar_evaluation_returns_scalar(self):
        s = smooth.make(np.exp)
        v = s(0.25)
        assert isinstance(v, float)
        assert v == pytest.approx(np.exp(0.25), rel=1e-14)

    def test_constant_output_is_broadcast(self):
        s = smooth.make(lambda x: 3.0)
        assert s.length == 1
        assert s(0.7) == pytest.approx(3.0)

    def test_non_finite_samples_rejected(self):
        with pytest.raises(ValueError):
            smooth.make(lambda x: np.full(np.shape(x), np.nan))

    def test_vector_output_rejected(self):
        with pytest.raises(ValueError):
            smooth.make(lambda x: np.zeros((2, np.size(x))))

    def test_unresolved_function_is_flagged(self):
        cfg = SingfunConfig(smooth=SmoothConfig(max_length=65))
        s = smooth.make(np.abs, cfg)
        assert not s.happy
        assert s.length == 65

    def test_coefficients_are_read_only(self):
        s = smooth.make(np.cos)
        with pytest.raises(ValueError):
            s.coeffs[0] = 1.0

    def test_complex_values(self):
        s = smooth.make(lambda x: np.exp(1j * x))
        assert not smooth.is_real(s)
        np.testing.assert_allclose(s(XS), np.exp(1j * XS), atol=1e-14)


class TestOperations:
    def test_diff(self):
        s = smooth.diff(smooth.make(np.sin))
        np.testing.assert_allclose(s(XS), np.cos(XS), atol=1e-12)

    def test_cumsum_vanishes_at_left_end(self):
        F = smooth.cumsum(smooth.make(np.cos))
        assert F(-1.0) == pytest.approx(0.0, abs=1e-14)
        np.testing.assert_allclose(F(XS), np.sin(XS) - np.sin(-1.0), atol=1e-14)

    def test_definite_integral(self):
        assert smooth.definite_integral(smooth.make(np.cos)) == pytest.approx(2.0 * np.sin(1.0), rel=1e-14)

    def test_add_and_scale(self):
        s = smooth.add(smooth.make(np.cos), smooth.scale(smooth.make(np.sin), 2.0))
        np.testing.assert_allclose(s(XS), np.cos(XS) + 2.0 * np.sin(XS), atol=1e-14)

    def test_add_cancellation_gives_zero(self):
        s = smooth.make(np.cos)
        assert smooth.is_zero(smooth.add(s, smooth.scale(s, -1.0)))

    def test_multiply(self):
        e = smooth.make(np.exp)
        np.testing.assert_allclose(smooth.multiply(e, e)(XS), np.exp(2.0 * XS), rtol=1e-12)

    def test_divide(self):
        q = smooth.divide(smooth.make(np.exp), smooth.make(lambda x: 2.0 + x))
        np.testing.assert_allclose(q(XS), np.exp(XS) / (2.0 + XS), rtol=1e-12)

    def test_polynomial_powers(self):
        np.testing.assert_allclose(smooth.one_plus_x_power(3)(XS), (1.0 + XS) ** 3, atol=1e-14)
        np.testing.assert_allclose(smooth.one_minus_x_power(2)(XS), (1.0 - XS) ** 2, atol=1e-14)
        assert smooth.one_plus_x_power(0).length == 1
        with pytest.raises(ValueError):
            smooth.one_minus_x_power(-1)

    def test_flip(self):
        s = smooth.flip(smooth.make(np.exp))
        np.testing.assert_allclose(s(XS), np.exp(-XS), rtol=1e-12)

    def test_real_imag_conj(self):
        s = smooth.make(lambda x: np.cos(x) + 1j * np.sin(x))
        np.testing.assert_allclose(smooth.real(s)(XS), np.cos(XS), atol=1e-14)
        np.testing.assert_allclose(smooth.imag(s)(XS), np.sin(XS), atol=1e-14)
        np.testing.assert_allclose(smooth.conj(s)(XS), np.exp(-1j * XS), atol=1e-14)


class TestRootsAndExtrema:
    def test_roots_of_quadratic(self):
        r = smooth.roots(smooth.make(lambda x: x**2 - 0.25))
        np.testing.assert_allclose(r, [-0.5, 0.5], atol=1e-12)

    def test_roots_outside_interval_dropped(self):
        assert smooth.roots(smooth.make(lambda x: x - 3.0)).size == 0

    def test_constant_has_no_roots(self):
        assert smooth.roots(smooth.constant(2.0)).size == 0

    def test_roots_at_endpoint(self):
        r = smooth.roots(smooth.from_coeffs([1.0, 1.0]))
        assert r.tolist() == [-1.0]

    def test_minandmax(self):
        (lo, hi), (xlo, _) = smooth.minandmax(smooth.make(lambda x: x**2))
        assert lo == pytest.approx(0.0, abs=1e-14)
        assert hi == pytest.approx(1.0, rel=1e-14)
        assert xlo == pytest.approx(0.0, abs=1e-8)

    def test_minandmax_rejects_complex(self):
        with pytest.raises(ValueError):
            smooth.minandmax(smooth.make(lambda x: np.exp(1j * x)))

    def test_vscale(self):
        assert smooth.make(np.exp).vscale == pytest.approx(np.e, rel=1e-14)
