"""
singlab/smooth.py

Гладкий движок: приближение гладких функций на [-1, 1] рядами Чебышёва.

Представление:
    s(x) = Σ_{k=0}^{n-1} c_k T_k(x),
где T_k — полиномы Чебышёва I рода. Коэффициенты хранятся в неизменяемом
массиве numpy (вещественном или комплексном).

Построение (make):
- выборка в точках Чебышёва I рода x_j = cos(π(2j+1)/(2n)) — концы ±1
  никогда не вычисляются, поэтому остаток после снятия особенности можно
  строить из функции, которая даёт Inf/NaN на концах;
- длины n = 17, 33, 65, …, max_length (рост 2n-1);
- «счастье»: хвост коэффициентов ниже tol·max|c|; после этого хвост
  обрезается. Если к max_length сходимости нет — предупреждение в лог и
  возврат лучшего приближения с флагом happy=False.

Операции (контракт, который потребляет ядро singlab):
    make, evaluate, diff, cumsum, multiply, divide, add, scale, roots,
    length, is_real, is_zero, minandmax, definite_integral, flip,
    real, imag, conj, constant, zero, from_coeffs,
    one_plus_x_power, one_minus_x_power

Зависимости: numpy (numpy.polynomial.chebyshev).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import logging

import numpy as np
from numpy.polynomial import chebyshev as C

from .config import SingfunConfig, resolve_config


Array = np.ndarray
Func = Callable[[Array], Array]

_LOG = logging.getLogger("singlab.smooth")
_EPS = np.finfo(float).eps


# ------------------------------- ЗНАЧЕНИЕ ---------------------------------- #
@dataclass(frozen=True, eq=False)
class SmoothFun:
    """
    Гладкая функция на [-1, 1] в базисе Чебышёва.

    Поля:
      coeffs — коэффициенты c_0..c_{n-1} (только чтение)
      happy  — сошлась ли адаптивная интерполяция
    """
    coeffs: Array
    happy: bool = True

    def __post_init__(self) -> None:
        c = np.array(self.coeffs, copy=True)
        if c.ndim != 1 or c.size == 0:
            raise ValueError("SmoothFun: ожидается непустой одномерный массив коэффициентов")
        if not np.iscomplexobj(c):
            c = c.astype(float)
        c.setflags(write=False)
        object.__setattr__(self, "coeffs", c)

    def __call__(self, x: Array | float) -> Array:
        return evaluate(self, x)

    @property
    def length(self) -> int:
        return length(self)

    @property
    def vscale(self) -> float:
        """max |s| по точкам Чебышёва II рода (включая концы)."""
        n = max(self.coeffs.size, 2)
        x = C.chebpts2(n)
        return float(np.max(np.abs(C.chebval(x, self.coeffs))))


# ----------------------------- ВСПОМОГАТЕЛЬНОЕ ----------------------------- #
def _sample(op: Func, x: Array) -> Array:
    """
    Вычислить op на узлах x. Скалярный результат (константа) растягивается
    на форму x; любая другая несовпадающая форма — ошибка.
    """
    vals = np.asarray(op(x))
    if vals.shape != x.shape:
        if vals.size == 1:
            vals = np.full(x.shape, vals.reshape(()).item())
        else:
            raise ValueError(
                f"smooth.make: функция вернула форму {vals.shape} вместо {x.shape} "
                "(поддерживаются только скалярные функции)"
            )
    if not np.iscomplexobj(vals):
        vals = vals.astype(float)
    return vals


def _values_to_coeffs(vals: Array) -> Array:
    """
    Коэффициенты интерполянта по значениям в точках Чебышёва I рода
    (дискретная ортогональность T_k на chebpts1).
    """
    n = vals.size
    x = C.chebpts1(n)
    V = C.chebvander(x, n - 1)
    c = (2.0 / n) * (V.T @ vals)
    c[0] *= 0.5
    return c


def _chop(c: Array, tol: float) -> Array:
    """Отбросить хвост коэффициентов, по модулю не превосходящих tol (оставить ≥ 1)."""
    big = np.flatnonzero(np.abs(c) > tol)
    if big.size == 0:
        return np.zeros(1, dtype=c.dtype)
    return c[: big[-1] + 1]


def _scale(c: Array) -> float:
    return float(np.max(np.abs(c))) if c.size else 0.0


def _is_happy(c: Array, tol: float) -> bool:
    scale = _scale(c)
    if scale == 0.0:
        return True
    m = max(2, c.size // 8)
    return bool(np.max(np.abs(c[-m:])) <= tol * scale)


# -------------------------------- СБОРКА ----------------------------------- #
def make(op: Func, cfg: Optional[SingfunConfig] = None) -> SmoothFun:
    """
    Адаптивно построить SmoothFun по векторизованной функции op.

    Ошибки:
      ValueError — нескалярный результат op или не конечные значения в узлах.
    """
    sc = resolve_config(cfg).smooth
    n = sc.min_length
    c = np.zeros(1)
    while True:
        x = C.chebpts1(n)
        vals = _sample(op, x)
        if not np.all(np.isfinite(vals)):
            raise ValueError(
                f"smooth.make: функция даёт не конечные значения во внутренних узлах (n={n})"
            )
        c = _values_to_coeffs(vals)
        if _is_happy(c, sc.tol):
            return SmoothFun(_chop(c, sc.tol * _scale(c)), happy=True)
        if n >= sc.max_length:
            break
        n = min(2 * n - 1, sc.max_length)

    tail = np.max(np.abs(c[-max(2, c.size // 8):])) / max(_scale(c), _EPS)
    _LOG.warning(
        "smooth.make: нет сходимости при длине %d (относительный хвост %.2e); "
        "возвращаем неразрешённое приближение", c.size, tail,
    )
    return SmoothFun(c, happy=False)


def from_coeffs(coeffs: Array, happy: bool = True) -> SmoothFun:
    return SmoothFun(np.asarray(coeffs), happy=happy)


def constant(value: complex | float) -> SmoothFun:
    return SmoothFun(np.array([value]))


def zero() -> SmoothFun:
    return SmoothFun(np.zeros(1))


def one_plus_x_power(k: int) -> SmoothFun:
    """(1+x)^k для целого k ≥ 0 как ряд Чебышёва: 1+x = T_0 + T_1."""
    if k < 0:
        raise ValueError("one_plus_x_power: k должно быть >= 0")
    return SmoothFun(C.chebpow([1.0, 1.0], int(k)))


def one_minus_x_power(k: int) -> SmoothFun:
    """(1-x)^k для целого k ≥ 0: 1-x = T_0 - T_1."""
    if k < 0:
        raise ValueError("one_minus_x_power: k должно быть >= 0")
    return SmoothFun(C.chebpow([1.0, -1.0], int(k)))


# ------------------------------- ОПЕРАЦИИ ---------------------------------- #
def evaluate(f: SmoothFun, x: Array | float) -> Array:
    """Значения s(x); для скалярного x — скаляр."""
    xv = np.asarray(x, dtype=float)
    out = C.chebval(xv, f.coeffs)
    if xv.ndim == 0:
        return np.asarray(out).item()
    return out


def length(f: SmoothFun) -> int:
    return int(f.coeffs.size)


def diff(f: SmoothFun) -> SmoothFun:
    if f.coeffs.size == 1:
        return SmoothFun(np.zeros(1, dtype=f.coeffs.dtype), happy=f.happy)
    return SmoothFun(C.chebder(f.coeffs), happy=f.happy)


def cumsum(f: SmoothFun) -> SmoothFun:
    """Первообразная F с F(-1) = 0."""
    return SmoothFun(C.chebint(f.coeffs, lbnd=-1.0), happy=f.happy)


def definite_integral(f: SmoothFun) -> complex | float:
    """∫_{-1}^{1} s(x) dx."""
    return evaluate(cumsum(f), 1.0)


def add(f: SmoothFun, g: SmoothFun) -> SmoothFun:
    c = C.chebadd(f.coeffs, g.coeffs)
    tol = _EPS * max(_scale(f.coeffs), _scale(g.coeffs))
    return SmoothFun(_chop(c, tol), happy=f.happy and g.happy)


def scale(f: SmoothFun, alpha: complex | float) -> SmoothFun:
    return SmoothFun(f.coeffs * alpha, happy=f.happy)


def multiply(f: SmoothFun, g: SmoothFun) -> SmoothFun:
    c = C.chebmul(f.coeffs, g.coeffs)
    tol = _EPS * _scale(f.coeffs) * _scale(g.coeffs)
    return SmoothFun(_chop(c, tol), happy=f.happy and g.happy)


def divide(f: SmoothFun, g: SmoothFun, cfg: Optional[SingfunConfig] = None) -> SmoothFun:
    """
    Частное f/g, построенное заново интерполяцией. Проверку того, что g не
    обращается в нуль на [-1, 1], выполняет вызывающий код.
    """
    return make(lambda x: evaluate(f, x) / evaluate(g, x), cfg)


def roots(f: SmoothFun, cfg: Optional[SingfunConfig] = None) -> Array:
    """
    Вещественные корни s на [-1, 1] (собственные значения матрицы-компаньона
    Чебышёва). Для нулевой и ненулевой константы — пустой массив.
    """
    sc = resolve_config(cfg).smooth
    c = _chop(f.coeffs, _EPS * _scale(f.coeffs))
    if c.size <= 1:
        return np.zeros(0)
    r = C.chebroots(c)
    r = r[np.abs(np.imag(r)) <= sc.root_tol]
    r = np.real(r)
    r = r[(r >= -1.0 - sc.root_tol) & (r <= 1.0 + sc.root_tol)]
    r = np.clip(np.sort(r), -1.0, 1.0)
    if r.size <= 1:
        return r
    # кратные корни приходят парами из близких значений
    keep = np.concatenate(([True], np.diff(r) > sc.root_tol))
    return r[keep]


def minandmax(f: SmoothFun, cfg: Optional[SingfunConfig] = None) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Глобальные min и max вещественной s на [-1, 1]:
    ((min, max), (argmin, argmax)). Кандидаты — концы и корни s'.
    """
    if not is_real(f):
        raise ValueError("minandmax: определено только для вещественных функций")
    pts = np.concatenate(([-1.0, 1.0], roots(diff(f), cfg)))
    vals = np.real(evaluate(f, pts))
    i_min = int(np.argmin(vals))
    i_max = int(np.argmax(vals))
    return (float(vals[i_min]), float(vals[i_max])), (float(pts[i_min]), float(pts[i_max]))


def is_real(f: SmoothFun) -> bool:
    return (not np.iscomplexobj(f.coeffs)) or bool(np.all(np.imag(f.coeffs) == 0.0))


def is_zero(f: SmoothFun, cfg: Optional[SingfunConfig] = None) -> bool:
    zt = resolve_config(cfg).smooth.zero_tol
    return bool(np.all(np.abs(f.coeffs) <= zt))


def flip(f: SmoothFun) -> SmoothFun:
    """s(-x): T_k(-x) = (-1)^k T_k(x)."""
    sign = (-1.0) ** np.arange(f.coeffs.size)
    return SmoothFun(f.coeffs * sign, happy=f.happy)


def real(f: SmoothFun) -> SmoothFun:
    return SmoothFun(_chop(np.real(f.coeffs).astype(float), 0.0), happy=f.happy)


def imag(f: SmoothFun) -> SmoothFun:
    return SmoothFun(_chop(np.imag(f.coeffs).astype(float), 0.0), happy=f.happy)


def conj(f: SmoothFun) -> SmoothFun:
    return SmoothFun(np.conj(f.coeffs), happy=f.happy)


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    s = make(np.cos)
    xs = np.linspace(-1.0, 1.0, 11)
    assert np.allclose(s(xs), np.cos(xs), atol=1e-14), "make/evaluate failed"
    assert abs(definite_integral(s) - 2.0 * np.sin(1.0)) < 1e-14, "integral failed"
    r = roots(make(lambda x: x**2 - 0.25))
    assert np.allclose(r, [-0.5, 0.5], atol=1e-12), "roots failed"
    print("smooth.py basic self-tests passed.")
