"""
singlab/factor.py

Сингулярный множитель и работа с показателями.

Определение:
    factor(x; a, b) = (1+x)^a · (1-x)^b,   x ∈ (-1, 1).
На концах: 0 при положительном показателе, ∞ при отрицательном, 1 при нулевом.
Основания (1±x) обрезаются снизу нулём, так что отрицательное основание
никогда не возводится в нецелую степень.

Используется в двух направлениях:
    strip(op, a, b)          — x ↦ op(x) / factor(x; a, b)   (перед построением остатка)
    reconstitute(v, x, a, b) — v · factor(x; a, b)           (при вычислении значений)

Показатели в пределах exponent_tol от целого (или нуля) «защёлкиваются»
к нему: snap_exponent, is_integer_exponent, is_nonneg_integer.

Зависимости: numpy.
"""

from __future__ import annotations

from typing import Callable, Tuple

import numpy as np


Array = np.ndarray
Func = Callable[[Array], Array]
Exponents = Tuple[float, float]


# --------------------------- ЦЕЛОЧИСЛЕННОСТЬ ------------------------------- #
def snap_exponent(e: float, tol: float) -> float:
    """Вернуть ближайшее целое, если |e - round(e)| ≤ tol, иначе e."""
    r = float(np.round(e))
    if abs(e - r) <= tol:
        return r + 0.0  # -0.0 → 0.0
    return float(e)


def snap_pair(exps: Exponents, tol: float) -> Exponents:
    return snap_exponent(exps[0], tol), snap_exponent(exps[1], tol)


def is_integer_exponent(e: float, tol: float) -> bool:
    return abs(e - np.round(e)) <= tol


def is_nonneg_integer(e: float, tol: float) -> bool:
    return is_integer_exponent(e, tol) and np.round(e) >= 0


def is_zero_exponent(e: float, tol: float) -> bool:
    return abs(e) <= tol


# ------------------------------ МНОЖИТЕЛЬ ---------------------------------- #
def _side_power(base: Array, e: float) -> Array:
    """base^e для base ≥ 0 с правилами концов: 0^e = 0 (e>0), ∞ (e<0), 1 (e=0)."""
    if e == 0.0:
        return np.ones_like(base)
    with np.errstate(divide="ignore"):
        return np.power(base, e)


def singular_factor(x: Array | float, a: float, b: float) -> Array:
    """
    (1+x)^a (1-x)^b. Для скалярного x — скаляр.
    """
    xv = np.asarray(x, dtype=float)
    left = np.clip(1.0 + xv, 0.0, None)
    right = np.clip(1.0 - xv, 0.0, None)
    with np.errstate(invalid="ignore"):
        out = _side_power(left, float(a)) * _side_power(right, float(b))
    if xv.ndim == 0:
        return float(out)
    return out


def strip(op: Func, a: float, b: float) -> Func:
    """
    Оператор гладкой части: x ↦ op(x) / factor(x; a, b).
    На стороне с нулевым показателем деления нет; при a = b = 0 возвращается op.
    """
    if a == 0.0 and b == 0.0:
        return op
    if b == 0.0:
        return lambda x: op(x) / np.power(1.0 + np.asarray(x, dtype=float), a)
    if a == 0.0:
        return lambda x: op(x) / np.power(1.0 - np.asarray(x, dtype=float), b)
    return lambda x: op(x) / singular_factor(x, a, b)


def reconstitute(values: Array, x: Array | float, a: float, b: float) -> Array:
    """Значения гладкой части, умноженные на сингулярный множитель."""
    if a == 0.0 and b == 0.0:
        return values
    return values * singular_factor(x, a, b)
