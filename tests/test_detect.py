"""Тесты определения показателей на концах."""

import logging

import numpy as np
import pytest

from singlab.config import DetectionConfig, SingfunConfig
from singlab.detect import (
    SingType,
    detect,
    detect_endpoint,
    parse_sing_type,
    parse_type_hints,
)
from singlab.errors import InvalidOperator, SingularityDetectionFailed, UnknownSingularityType


class TestTypeHints:
    @pytest.mark.parametrize("text,kind", [
        ("pole", SingType.POLE),
        ("Branch", SingType.BRANCH),
        ("ROOT", SingType.ROOT),
        (" none ", SingType.NONE),
        ("unknown", SingType.BRANCH),
        ("sing", SingType.BRANCH),
    ])
    def test_parse(self, text, kind):
        assert parse_sing_type(text) is kind

    def test_enum_passes_through(self):
        assert parse_sing_type(SingType.ROOT) is SingType.ROOT

    @pytest.mark.parametrize("bad", ["spike", "", 3, None])
    def test_unknown_type_rejected(self, bad):
        with pytest.raises(UnknownSingularityType):
            parse_sing_type(bad)

    def test_default_pair_is_branch(self):
        assert parse_type_hints(None) == (SingType.BRANCH, SingType.BRANCH)

    @pytest.mark.parametrize("bad", ["pole", ("pole",), ("pole", "none", "root")])
    def test_hints_must_be_pair(self, bad):
        with pytest.raises(UnknownSingularityType):
            parse_type_hints(bad)


class TestFractional:
    def test_sqrt_right_with_unknown_hint(self):
        a, b = detect(lambda x: np.sqrt(1.0 - x) * np.cos(x), ("none", "unknown"))
        assert a == 0.0
        assert abs(b - 0.5) < 1e-10

    @pytest.mark.parametrize("e", [-0.5, -0.25, 0.3, 1.5])
    def test_left_branch(self, e):
        a = detect_endpoint(lambda x: (1.0 + x) ** e * (2.0 + np.sin(x)), -1, "branch")
        assert abs(a - e) < 1e-9

    def test_both_ends(self):
        a, b = detect(lambda x: (1.0 + x) ** -0.5 * (1.0 - x) ** 0.25 * np.exp(x))
        assert abs(a + 0.5) < 1e-9
        assert abs(b - 0.25) < 1e-9


class TestInteger:
    def test_double_pole(self):
        assert detect(lambda x: np.exp(x) / (1.0 + x) ** 2, ("pole", "none")) == (-2.0, 0.0)

    def test_high_order_pole(self):
        assert detect_endpoint(lambda x: np.cos(x) / (1.0 - x) ** 8, 1, "pole") == -8.0

    def test_simple_root(self):
        assert detect(lambda x: (1.0 + x) * np.exp(x), ("root", "none")) == (1.0, 0.0)

    def test_branch_hint_finds_integer(self):
        assert detect_endpoint(lambda x: np.exp(x) / (1.0 - x), 1, "branch") == -1.0

    def test_smooth_function_gives_zero(self):
        assert detect(lambda x: 1.0 / (2.0 + x)) == (0.0, 0.0)

    def test_sign_mismatch_is_kept_and_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="singlab.detect"):
            a = detect_endpoint(lambda x: (1.0 + x) ** 2 * np.cos(x), -1, "pole")
        assert a == 2.0
        assert any("pole" in r.getMessage() for r in caplog.records)

    def test_pole_order_cap(self):
        cfg = SingfunConfig(detection=DetectionConfig(max_pole_order=2))
        with pytest.raises(SingularityDetectionFailed):
            detect_endpoint(lambda x: 1.0 / (1.0 + x) ** 3, -1, "pole", cfg)


class TestEdgeCases:
    def test_none_hint_does_not_sample(self):
        calls = []

        def op(x):
            calls.append(np.asarray(x).copy())
            return np.where(np.abs(x) > 0.9, np.nan, 1.0)

        assert detect(op, ("none", "none")) == (0.0, 0.0)
        for x in calls:
            assert np.all(np.abs(x) <= 0.5)

    def test_zero_function(self):
        assert detect(lambda x: 0.0 * x) == (0.0, 0.0)

    def test_pole_hint_on_branch_fails(self):
        with pytest.raises(SingularityDetectionFailed):
            detect(lambda x: np.sqrt(1.0 + x), ("pole", "none"))

    def test_root_hint_on_branch_fails(self):
        with pytest.raises(SingularityDetectionFailed):
            detect(lambda x: (1.0 - x) ** 0.5, ("none", "root"))

    def test_oscillation_fails(self):
        with pytest.raises(SingularityDetectionFailed):
            detect(lambda x: 2.0 + np.sin(1.0 / (1.0 + x)), ("branch", "none"))

    def test_invalid_side(self):
        with pytest.raises(ValueError):
            detect_endpoint(np.cos, 0)

    def test_not_callable(self):
        with pytest.raises(InvalidOperator):
            detect(42.0)

    def test_scalar_only_callable(self):
        import math
        assert detect(math.exp, ("branch", "branch")) == (0.0, 0.0)
