"""
singlab/queries.py

Запросы к SingFun: значения, корни, экстремумы, предикаты.

feval(f, x):
    внутри (-1, 1):  s(x) · (1+x)^a (1-x)^b;
    в x = ±1 (показатель e на этом конце, s_e = s(±1), m — множитель
    другого конца):
        s_e не конечно  → NaN
        e > 0           → 0
        e < 0           → ±∞ со знаком s_e·m (NaN при s_e = 0)
        e = 0           → s_e · m
    Форма результата совпадает с формой x; для скаляра — скаляр.

roots(f, endpoints=True):
    корни гладкой части строго внутри (-1, 1) (множитель там не
    обращается в нуль); корни s в ±1 — только при нулевом показателе;
    конец с положительным показателем добавляется при endpoints=True.

minandmax(f): кандидаты — концы и внутренние корни f'.

Зависимости: numpy, singlab.smooth, singlab.factor.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from . import smooth
from .calculus import diff
from .config import SingfunConfig, resolve_config
from .factor import reconstitute, snap_exponent, snap_pair
from .singfun import SingFun
from .utils import validate_points


Array = np.ndarray


# -------------------------------- ЗНАЧЕНИЯ --------------------------------- #
def _endpoint_value(sv: complex | float, e: float, other: float) -> complex | float:
    if not np.isfinite(sv):
        return np.nan
    if e > 0.0:
        return 0.0
    if e < 0.0:
        if sv == 0.0:
            return np.nan
        if np.iscomplexobj(sv) and np.imag(sv) != 0.0:
            return complex(np.inf, 0.0)
        return float(np.sign(np.real(sv))) * np.inf
    return sv * other


def feval(f: SingFun, x: Array | float, cfg: Optional[SingfunConfig] = None) -> Array:
    """Значения f в точках x ∈ [-1, 1]."""
    c = resolve_config(cfg)
    xv = validate_points(x)
    a, b = snap_pair(f.exponents, c.exponent_tol)

    vals = np.asarray(smooth.evaluate(f.smooth, xv.ravel()))
    with np.errstate(invalid="ignore"):
        out = np.array(reconstitute(vals, xv.ravel(), a, b))

    left = xv.ravel() == -1.0
    right = xv.ravel() == 1.0
    if np.any(left):
        out[left] = _endpoint_value(smooth.evaluate(f.smooth, -1.0), a, 2.0 ** b)
    if np.any(right):
        out[right] = _endpoint_value(smooth.evaluate(f.smooth, 1.0), b, 2.0 ** a)

    out = out.reshape(xv.shape)
    if xv.ndim == 0:
        return out.item()
    return out


# --------------------------------- КОРНИ ----------------------------------- #
def roots(f: SingFun, endpoints: bool = True, cfg: Optional[SingfunConfig] = None) -> Array:
    """Отсортированные корни f на [-1, 1]."""
    c = resolve_config(cfg)
    a, b = snap_pair(f.exponents, c.exponent_tol)
    if smooth.is_zero(f.smooth, c):
        return np.zeros(0)

    r = smooth.roots(f.smooth, c)
    keep = (r > -1.0) & (r < 1.0)
    keep |= (r == -1.0) & (a == 0.0)
    keep |= (r == 1.0) & (b == 0.0)
    r = r[keep]

    extra = []
    if endpoints and a > 0.0:
        extra.append(-1.0)
    if endpoints and b > 0.0:
        extra.append(1.0)
    if extra:
        r = np.concatenate((r, extra))
    return np.unique(r)


# ------------------------------- ЭКСТРЕМУМЫ -------------------------------- #
def minandmax(f: SingFun, cfg: Optional[SingfunConfig] = None) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Глобальные min и max вещественной f на [-1, 1]:
    ((min, max), (argmin, argmax)). Отрицательный показатель даёт ±∞ на конце.
    """
    c = resolve_config(cfg)
    if not smooth.is_real(f.smooth):
        raise ValueError("minandmax: определено только для вещественных функций")

    crit = roots(diff(f, 1, c), endpoints=False, cfg=c)
    crit = crit[(crit > -1.0) & (crit < 1.0)]
    pts = np.concatenate(([-1.0, 1.0], crit))
    vals = np.asarray(np.real(feval(f, pts, c)), dtype=float)
    if np.all(np.isnan(vals)):
        return (np.nan, np.nan), (np.nan, np.nan)
    i_min = int(np.nanargmin(vals))
    i_max = int(np.nanargmax(vals))
    return (float(vals[i_min]), float(vals[i_max])), (float(pts[i_min]), float(pts[i_max]))


def max_value(f: SingFun, cfg: Optional[SingfunConfig] = None) -> float:
    return minandmax(f, cfg)[0][1]


def min_value(f: SingFun, cfg: Optional[SingfunConfig] = None) -> float:
    return minandmax(f, cfg)[0][0]


# ------------------------------- ПРЕДИКАТЫ --------------------------------- #
def length(f: SingFun) -> int:
    return smooth.length(f.smooth)


def is_real(f: SingFun) -> bool:
    return smooth.is_real(f.smooth)


def is_zero(f: SingFun, cfg: Optional[SingfunConfig] = None) -> bool:
    return smooth.is_zero(f.smooth, resolve_config(cfg))


def is_nan(f: SingFun) -> bool:
    return bool(np.any(np.isnan(f.smooth.coeffs)))


def is_finite(f: SingFun, cfg: Optional[SingfunConfig] = None) -> bool:
    """Нет отрицательных показателей и остаток конечен."""
    c = resolve_config(cfg)
    a, b = snap_pair(f.exponents, c.exponent_tol)
    return a >= 0.0 and b >= 0.0 and bool(np.all(np.isfinite(f.smooth.coeffs)))


def is_inf(f: SingFun, cfg: Optional[SingfunConfig] = None) -> bool:
    """Есть конец с отрицательным показателем и ненулевым значением остатка."""
    c = resolve_config(cfg)
    a, b = snap_pair(f.exponents, c.exponent_tol)
    if a < 0.0 and smooth.evaluate(f.smooth, -1.0) != 0.0:
        return True
    return b < 0.0 and smooth.evaluate(f.smooth, 1.0) != 0.0


def is_equal(f: SingFun, g: SingFun, cfg: Optional[SingfunConfig] = None) -> bool:
    """Совпадение показателей (в пределах exponent_tol) и коэффициентов остатка."""
    tol = resolve_config(cfg).exponent_tol
    fa, fb = f.exponents
    ga, gb = g.exponents
    if abs(snap_exponent(fa, tol) - snap_exponent(ga, tol)) > tol:
        return False
    if abs(snap_exponent(fb, tol) - snap_exponent(gb, tol)) > tol:
        return False
    return bool(np.array_equal(f.smooth.coeffs, g.smooth.coeffs))
