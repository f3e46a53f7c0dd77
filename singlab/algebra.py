"""
singlab/algebra.py

Арифметика над SingFun: показатели разрешаются алгебраически,
численная работа делегируется гладкому движку.

Умножение / деление (всегда представимы):
    times(f, g):   (a_f + a_g, b_f + b_g),  s_f · s_g
    rdivide(f, g): (a_f - a_g, b_f - b_g),  s_f / s_g
Деление запрещено (DivisionBySingularResidual), если s_g обращается в нуль
где-либо на [-1, 1]: частное перестало бы быть гладким.

Сложение / вычитание:
    - равные показатели (в пределах exponent_tol) — складываются остатки;
    - иначе на каждом конце common = min, а «избыток» каждого слагаемого
      exp - common должен быть целым неотрицательным: тогда он поглощается
      множителем (1+x)^k или (1-x)^k в гладкой части;
    - в противном случае сумма не выражается одним SingFun —
      AdditionIncompatibleExponents. Более общих правил нет.
Нулевое слагаемое возвращает другое без изменений, нулевая сумма —
zero_singfun().

Скаляры (int/float/complex) трактуются как константы с показателями (0, 0).

Сужение restrict(f, [s1, s2]) переносит кусок f на [-1, 1]:
    g(y) = f(x(y)),  x(y) = s1 + (s2 - s1)(1 + y)/2.
Конец, оставшийся в ±1, сохраняет показатель: 1+x = h(1+y), 1-x = h(1-y),
h = (s2 - s1)/2, так что множитель h^e уходит в гладкую часть константой.
Внутренний конец получает показатель 0, его множитель вычисляется явно
и поглощается заново построенной гладкой частью.

Зависимости: numpy, singlab.smooth, singlab.factor.
"""

from __future__ import annotations

from numbers import Number
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from . import smooth
from .config import SingfunConfig, resolve_config
from .errors import AdditionIncompatibleExponents, DivisionBySingularResidual
from .factor import is_nonneg_integer, snap_pair
from .singfun import SingFun, zero_singfun
from .smooth import SmoothFun


Operand = Union[SingFun, int, float, complex]
Exponents = Tuple[float, float]


# ----------------------------- ВСПОМОГАТЕЛЬНОЕ ----------------------------- #
def _is_scalar(x: Any) -> bool:
    return isinstance(x, Number) and not isinstance(x, bool)


def _as_singfun(x: Operand) -> SingFun:
    if isinstance(x, SingFun):
        return x
    if _is_scalar(x):
        return SingFun(smooth.constant(x), (0.0, 0.0))
    raise TypeError(f"Ожидается SingFun или скаляр, получено {type(x).__name__}")


def _same_exponents(e1: Exponents, e2: Exponents, tol: float) -> bool:
    return abs(e1[0] - e2[0]) <= tol and abs(e1[1] - e2[1]) <= tol


def _lift(s: SmoothFun, exps: Exponents, common: Exponents, tol: float) -> SmoothFun:
    """
    Переписать s·(1+x)^a(1-x)^b при показателях common: избыток каждого
    конца уходит в гладкую часть как (1±x)^k.
    """
    for side, (e, e0) in enumerate(zip(exps, common)):
        excess = e - e0
        if not is_nonneg_integer(excess, tol):
            end = "левом" if side == 0 else "правом"
            raise AdditionIncompatibleExponents(
                f"Избыток показателя {excess:.6g} на {end} конце не является целым "
                f"неотрицательным: показатели {exps} не приводятся к {common}"
            )
        k = int(round(excess))
        if k > 0:
            poly = smooth.one_plus_x_power(k) if side == 0 else smooth.one_minus_x_power(k)
            s = smooth.multiply(s, poly)
    return s


# ------------------------------ СЛОЖЕНИЕ ----------------------------------- #
def plus(f: Operand, g: Operand, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """f + g с приведением к общей паре показателей."""
    c = resolve_config(cfg)
    tol = c.exponent_tol
    f, g = _as_singfun(f), _as_singfun(g)
    if smooth.is_zero(f.smooth, c):
        return g
    if smooth.is_zero(g.smooth, c):
        return f

    fe = snap_pair(f.exponents, tol)
    ge = snap_pair(g.exponents, tol)
    if _same_exponents(fe, ge, tol):
        s = smooth.add(f.smooth, g.smooth)
        exps = fe
    else:
        exps = (min(fe[0], ge[0]), min(fe[1], ge[1]))
        s = smooth.add(_lift(f.smooth, fe, exps, tol), _lift(g.smooth, ge, exps, tol))

    if smooth.is_zero(s, c):
        return zero_singfun()
    return SingFun(s, exps)


def minus(f: Operand, g: Operand, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """f - g."""
    return plus(f, uminus(_as_singfun(g)), cfg)


# ----------------------------- УМНОЖЕНИЕ ----------------------------------- #
def times(f: Operand, g: Operand, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """
    f · g. Показатели складываются точно (без допусков и «защёлкивания»).
    """
    c = resolve_config(cfg)
    if _is_scalar(g):
        f, g = g, f
    if _is_scalar(f):
        g = _as_singfun(g)
        if f == 0:
            return zero_singfun()
        return SingFun(smooth.scale(g.smooth, f), g.exponents)

    f, g = _as_singfun(f), _as_singfun(g)
    if smooth.is_zero(f.smooth, c) or smooth.is_zero(g.smooth, c):
        return zero_singfun()
    exps = (f.exponents[0] + g.exponents[0], f.exponents[1] + g.exponents[1])
    return SingFun(smooth.multiply(f.smooth, g.smooth), exps)


def rdivide(f: Operand, g: Operand, cfg: Optional[SingfunConfig] = None) -> SingFun:
    """
    f / g. Ошибка DivisionBySingularResidual, если гладкая часть g
    нулевая или имеет корень на [-1, 1].
    """
    c = resolve_config(cfg)
    if _is_scalar(g):
        if g == 0:
            raise DivisionBySingularResidual("Деление на скалярный нуль")
        return times(f, 1.0 / g, c)

    f, g = _as_singfun(f), _as_singfun(g)
    if smooth.is_zero(g.smooth, c):
        raise DivisionBySingularResidual("Деление на нулевую функцию")
    r = smooth.roots(g.smooth, c)
    if r.size:
        raise DivisionBySingularResidual(
            f"Гладкая часть делителя обращается в нуль в точках {r.tolist()}"
        )
    if smooth.is_zero(f.smooth, c):
        return zero_singfun()

    exps = (f.exponents[0] - g.exponents[0], f.exponents[1] - g.exponents[1])
    return SingFun(smooth.divide(f.smooth, g.smooth, c), exps)


# ------------------------------ УНАРНЫЕ ------------------------------------ #
def uminus(f: SingFun) -> SingFun:
    return SingFun(smooth.scale(f.smooth, -1.0), f.exponents)


def uplus(f: SingFun) -> SingFun:
    return f


def conj(f: SingFun) -> SingFun:
    """Сопряжение: множитель вещественный, сопрягается только остаток."""
    if smooth.is_real(f.smooth):
        return f
    return SingFun(smooth.conj(f.smooth), f.exponents)


def real(f: SingFun) -> SingFun:
    s = smooth.real(f.smooth)
    if smooth.is_zero(s):
        return zero_singfun()
    return SingFun(s, f.exponents)


def imag(f: SingFun) -> SingFun:
    s = smooth.imag(f.smooth)
    if smooth.is_zero(s):
        return zero_singfun()
    return SingFun(s, f.exponents)


def flipud(f: SingFun) -> SingFun:
    """g(x) = f(-x): остаток отражается, показатели меняются местами."""
    a, b = f.exponents
    return SingFun(smooth.flip(f.smooth), (b, a))


# -------------------------------- СУЖЕНИЕ ---------------------------------- #
def _breakpoints(s: Sequence[float]) -> np.ndarray:
    pts = np.asarray(s, dtype=float).ravel()
    if pts.size < 2 or not np.all(np.isfinite(pts)):
        raise ValueError(f"restrict: нужны хотя бы две конечные точки, получено {s!r}")
    if pts[0] < -1.0 or pts[-1] > 1.0 or np.any(np.diff(pts) <= 0.0):
        raise ValueError(f"restrict: точки должны строго возрастать внутри [-1, 1], получено {s!r}")
    return pts


def restrict(
    f: SingFun, s: Sequence[float], cfg: Optional[SingfunConfig] = None
) -> Union[SingFun, List[SingFun]]:
    """
    Сужение f на [s1, s2] ⊂ [-1, 1], перенесённое на [-1, 1].
    Для s из k > 2 точек — список из k-1 кусков.
    """
    c = resolve_config(cfg)
    pts = _breakpoints(s)
    if pts.size > 2:
        return [restrict(f, pts[i:i + 2], c) for i in range(pts.size - 1)]

    s1, s2 = float(pts[0]), float(pts[1])
    if s1 == -1.0 and s2 == 1.0:
        return f
    if smooth.is_zero(f.smooth, c):
        return zero_singfun()

    a, b = snap_pair(f.exponents, c.exponent_tol)
    h = (s2 - s1) / 2.0
    new_a = a if s1 == -1.0 else 0.0
    new_b = b if s2 == 1.0 else 0.0
    scale = h ** new_a * h ** new_b

    def op(y):
        x = s1 + h * (1.0 + np.asarray(y, dtype=float))
        vals = smooth.evaluate(f.smooth, x) * scale
        if new_a == 0.0 and a != 0.0:
            vals = vals * np.power(1.0 + x, a)
        if new_b == 0.0 and b != 0.0:
            vals = vals * np.power(1.0 - x, b)
        return vals

    return SingFun(smooth.make(op, c), (new_a, new_b))
