"""
singlab/calculus.py

Анализ на SingFun: производная, первообразная, определённый интеграл,
скалярное произведение и нормы.

Производная (правило произведения для f = s·(1+x)^a(1-x)^b):
    f' = s'·(1+x)^a(1-x)^b + a·s·(1+x)^{a-1}(1-x)^b - b·s·(1+x)^a(1-x)^{b-1}.
Три слагаемых имеют показатели (a,b), (a-1,b), (a,b-1) и всегда
складываются правилом algebra.plus (избытки 0 или 1). Слагаемое с
нулевым показателем опускается.

Первообразная cumsum(f, m) — m раз повторённый шаг:
    - показатель ≤ -1 на любом конце — DivergentAntiderivative;
    - целые неотрицательные показатели поглощаются гладкой частью g;
    - оба конца гладкие:        F = ∫_{-1}^x g,            F(-1) = 0;
    - особенность слева (a):    F = (1+x)^{a+1} u(x),
          u(x) = ∫_0^1 τ^a g(-1 + (1+x)τ) dτ;
    - особенность справа (b):   F = -(1-x)^{b+1} v(x),
          v(x) = ∫_0^1 τ^b g(1 - (1-x)τ) dτ,      F(1) = 0;
    - особенности на обоих концах: две части не сводятся к одной
      факторизованной форме — AdditionIncompatibleExponents.
Интегралы по τ берутся формулой Гаусса–Якоби с весом τ^a, точной для
полиномиальной g, после чего u (или v) снова строится гладким движком.

integral(f) = ∫_{-1}^{1} f — Гаусс–Якоби с весом (1+x)^a (1-x)^b.

Зависимости: numpy, singlab.quadrature, singlab.smooth.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import numpy as np

from . import smooth
from .algebra import conj, plus, times
from .config import SingfunConfig, resolve_config
from .errors import AdditionIncompatibleExponents, DivergentAntiderivative
from .factor import is_nonneg_integer, snap_pair
from .quadrature import build_quadrature, nodes_for_length
from .singfun import SingFun, zero_singfun
from .smooth import SmoothFun


Array = np.ndarray


# ------------------------------- ПРОИЗВОДНАЯ ------------------------------- #
def _diff_once(f: SingFun, c: SingfunConfig) -> SingFun:
    a, b = snap_pair(f.exponents, c.exponent_tol)
    s = f.smooth
    if smooth.is_zero(s, c):
        return zero_singfun()
    out = SingFun(smooth.diff(s), (a, b))
    if a != 0.0:
        out = plus(out, SingFun(smooth.scale(s, a), (a - 1.0, b)), c)
    if b != 0.0:
        out = plus(out, SingFun(smooth.scale(s, -b), (a, b - 1.0)), c)
    return out


def diff(f: SingFun, k: int = 1, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """k-я производная; k = 0 — f без изменений."""
    if int(k) != k or k < 0:
        raise ValueError(f"diff: порядок производной должен быть целым >= 0, получено {k!r}")
    c = resolve_config(cfg)
    for _ in range(int(k)):
        f = _diff_once(f, c)
    return f


# ----------------------------- ПЕРВООБРАЗНАЯ ------------------------------- #
def _check_convergent(a: float, b: float, tol: float, what: str) -> None:
    if a <= -1.0 + tol or b <= -1.0 + tol:
        raise DivergentAntiderivative(
            f"{what}: показатели ({a:.6g}, {b:.6g}) ≤ -1, интеграл расходится на конце"
        )


def _absorb(s: SmoothFun, a: float, b: float, tol: float) -> Tuple[SmoothFun, float, float]:
    """Целые неотрицательные показатели перенести в гладкую часть."""
    if a != 0.0 and is_nonneg_integer(a, tol):
        s = smooth.multiply(s, smooth.one_plus_x_power(int(round(a))))
        a = 0.0
    if b != 0.0 and is_nonneg_integer(b, tol):
        s = smooth.multiply(s, smooth.one_minus_x_power(int(round(b))))
        b = 0.0
    return s, a, b


def _tau_integral(g: SmoothFun, e: float, side: int, c: SingfunConfig) -> SmoothFun:
    """
    w(x) = ∫_0^1 τ^e g(∓1 ± (1∓x)τ) dτ — при side = -1 опора в левом конце,
    при side = 1 в правом. Замена τ = (1+y)/2 даёт вес (1+y)^e на [-1, 1].
    """
    q = build_quadrature(nodes_for_length(smooth.length(g)), e, 0.0)
    y = (1.0 + q.nodes) / 2.0
    w = q.weights * 2.0 ** (-(e + 1.0))

    def integrand(x: Array) -> Array:
        xv = np.asarray(x, dtype=float)
        if side < 0:
            t = -1.0 + np.multiply.outer(1.0 + xv, y)
        else:
            t = 1.0 - np.multiply.outer(1.0 - xv, y)
        return smooth.evaluate(g, t) @ w

    return smooth.make(integrand, c)


def _cumsum_once(f: SingFun, c: SingfunConfig) -> SingFun:
    tol = c.exponent_tol
    a, b = snap_pair(f.exponents, tol)
    _check_convergent(a, b, tol, "cumsum")
    if smooth.is_zero(f.smooth, c):
        return zero_singfun()

    g, a, b = _absorb(f.smooth, a, b, tol)
    if a == 0.0 and b == 0.0:
        return SingFun(smooth.cumsum(g), (0.0, 0.0))
    if a != 0.0 and b != 0.0:
        raise AdditionIncompatibleExponents(
            f"cumsum: нецелые показатели на обоих концах ({a:.6g}, {b:.6g}); "
            "первообразная не выражается одной факторизованной формой"
        )
    if a != 0.0:
        return SingFun(_tau_integral(g, a, -1, c), (a + 1.0, 0.0))
    v = _tau_integral(g, b, 1, c)
    return SingFun(smooth.scale(v, -1.0), (0.0, b + 1.0))


def cumsum(f: SingFun, m: int = 1, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """
    m-кратная первообразная в факторизованной форме; m = 0 — f без изменений.
    Каждый шаг проверяет сходимость и совместимость концов заново.
    """
    if int(m) != m or m < 0:
        raise ValueError(f"cumsum: кратность должна быть целой >= 0, получено {m!r}")
    c = resolve_config(cfg)
    for _ in range(int(m)):
        f = _cumsum_once(f, c)
    return f


# ------------------------------- ИНТЕГРАЛЫ --------------------------------- #
def integral(f: SingFun, cfg: Optional[SingfunConfig] = None) -> complex | float:
    """∫_{-1}^{1} f(x) dx по Гауссу–Якоби с весом (1+x)^a (1-x)^b."""
    c = resolve_config(cfg)
    a, b = snap_pair(f.exponents, c.exponent_tol)
    _check_convergent(a, b, c.exponent_tol, "integral")
    if smooth.is_zero(f.smooth, c):
        return 0.0
    if a == 0.0 and b == 0.0:
        return smooth.definite_integral(f.smooth)
    q = build_quadrature(nodes_for_length(f.length), a, b)
    return q.integrate(lambda x: smooth.evaluate(f.smooth, x))


def inner_product(f: SingFun, g: SingFun, cfg: Optional[SingfunConfig] = None) -> complex | float:
    """⟨f, g⟩ = ∫ conj(f)·g."""
    c = resolve_config(cfg)
    return integral(times(conj(f), g, c), c)


def norm(f: SingFun, p: Any = 2, cfg: Optional[SingfunConfig] = None) -> float:
    """
    ||f||_2 (p = 2) или ||f||_∞ (p = inf или "inf").
    """
    c = resolve_config(cfg)
    if p == 2:
        return float(np.sqrt(abs(np.real(inner_product(f, f, c)))))
    if p == np.inf or p == "inf":
        from .queries import minandmax
        sq = times(conj(f), f, c)
        sq = SingFun(smooth.real(sq.smooth), sq.exponents)
        (_, hi), _ = minandmax(sq, c)
        return float(np.sqrt(hi))
    raise ValueError(f"norm: поддерживаются p = 2 и p = inf, получено {p!r}")
