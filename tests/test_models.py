"""Тесты тестовых случаев models.py и диагностики."""

import numpy as np
import pytest

from singlab import construct
from singlab.diagnostics import (
    detection_report,
    reconstruction_error,
    residual_error,
    smooth_quality,
)
from singlab.models import (
    CASES,
    case_double_pole_left,
    case_from_exponents,
    case_root_left_exp,
    from_exponents,
)


class TestCases:
    @pytest.mark.parametrize("name", sorted(CASES))
    def test_factorisation(self, name):
        case = CASES[name]()
        X = case.grid(200)
        a, b = case.exponents
        ref = case.residual(X) * (1.0 + X) ** a * (1.0 - X) ** b
        np.testing.assert_allclose(case.op(X), ref, rtol=1e-14)
        assert np.all(np.isfinite(case.op(X)))

    def test_grid_excludes_endpoints(self):
        X = case_from_exponents(0.5, 0.5).grid(10)
        assert X.size == 10
        assert X[0] > -1.0 and X[-1] < 1.0

    def test_invalid_orders(self):
        with pytest.raises(ValueError):
            case_double_pole_left(0)
        with pytest.raises(ValueError):
            case_root_left_exp(0)

    def test_meta(self):
        case = from_exponents(-0.25, 1.5, np.exp, hints=("branch", "root"), name="demo")
        assert case.meta == {"type": "demo", "a": -0.25, "b": 1.5, "hints": ("branch", "root")}
        assert case.exponents == (-0.25, 1.5)

    @pytest.mark.parametrize("name", sorted(CASES))
    def test_construct_recovers_exponents(self, name):
        case = CASES[name]()
        f = construct(case.op, type_hints=case.hints)
        assert abs(f.exponents[0] - case.exponents[0]) < 1e-9
        assert abs(f.exponents[1] - case.exponents[1]) < 1e-9
        assert reconstruction_error(f, case.op, case.grid(101)) < 1e-9


class TestDiagnostics:
    def test_detection_report(self):
        case = CASES["sqrt_right_cos"]()
        rep = detection_report(case.op, case.hints, case.exponents)
        assert rep["a"] == 0.0
        assert rep["err_b"] < 1e-10
        assert set(rep) == {"a", "b", "err_a", "err_b"}

    def test_report_without_exact(self):
        rep = detection_report(case_double_pole_left(3).op, ("pole", "none"))
        assert rep == {"a": -3.0, "b": 0.0}

    def test_errors_for_given_exponents(self):
        case = case_from_exponents(-0.5, 0.75)
        f = construct(case.op, exponents=case.exponents)
        assert reconstruction_error(f, case.op) < 1e-13
        assert residual_error(f, case.residual) < 1e-13

    def test_smooth_quality(self):
        case = case_from_exponents(0.5, 0.0)
        f = construct(case.op, exponents=case.exponents)
        q = smooth_quality(f)
        assert set(q) == {"length", "happy", "tail_ratio", "vscale"}
        assert q["happy"] == 1.0
        assert q["length"] == f.length
        assert q["tail_ratio"] < 1e-10
        assert q["vscale"] == pytest.approx(1.0, rel=1e-13)
