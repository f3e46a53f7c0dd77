"""
singlab/singfun.py

Неизменяемое значение SingFun — функция на [-1, 1] в факторизованной форме

    f(x) = s(x) · (1+x)^a · (1-x)^b,

где s — гладкий остаток (SmoothFun), (a, b) — показатели на левом и правом
концах. Показатель 0 — нет особенности, целое отрицательное — полюс,
целое положительное — корень, нецелое — ветвление.

Создание:
    construct(op, exponents=None, type_hints=None, cfg=None)
        — из вызываемого объекта; без exponents показатели находит детектор
          (подсказки по умолчанию: branch на обоих концах);
    SingFun.make(...)   — синоним construct;
    zero_singfun()      — нулевая функция, показатели (0, 0).

Все операции возвращают новое значение; поля не изменяются.
Операторы + - * / и вызов f(x) делегируются в algebra/queries с конфигом
по умолчанию; для явного cfg используйте функции модулей.

Зависимости: numpy, singlab.smooth, singlab.detect, singlab.factor.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Number
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from . import smooth
from .config import SingfunConfig, resolve_config
from .detect import detect, parse_type_hints
from .factor import snap_pair, strip
from .smooth import SmoothFun
from .utils import as_vector_op, validate_exponents


Array = np.ndarray
Exponents = Tuple[float, float]


# ------------------------------- ЗНАЧЕНИЕ ---------------------------------- #
@dataclass(frozen=True, eq=False)
class SingFun:
    """
    Сингулярная функция: гладкий остаток + пара показателей.

    Поля:
      smooth    — SmoothFun, остаток s(x)
      exponents — (a, b): показатели у x = -1 и x = 1
    """
    smooth: SmoothFun
    exponents: Exponents = (0.0, 0.0)

    # numpy-скаляры слева от SingFun отдают операцию в __r*__
    __array_ufunc__ = None

    def __post_init__(self) -> None:
        if not isinstance(self.smooth, SmoothFun):
            raise TypeError(f"SingFun.smooth должен быть SmoothFun, получено {type(self.smooth).__name__}")
        object.__setattr__(self, "exponents", validate_exponents(self.exponents))

    # --- создание ---
    @classmethod
    def make(
        cls,
        op: Any,
        exponents: Optional[Sequence[float]] = None,
        type_hints: Optional[Sequence[Any]] = None,
        cfg: Optional[SingfunConfig] = None,
    ) -> "SingFun":
        return construct(op, exponents, type_hints, cfg)

    # --- свойства ---
    @property
    def length(self) -> int:
        return smooth.length(self.smooth)

    @property
    def vscale(self) -> float:
        return self.smooth.vscale

    def __repr__(self) -> str:
        a, b = self.exponents
        return f"SingFun(exponents=({a:.6g}, {b:.6g}), length={self.length})"

    # --- вычисление ---
    def __call__(self, x: Array | float) -> Array:
        from .queries import feval
        return feval(self, x)

    # --- арифметика ---
    def __add__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import plus
        return plus(self, other)

    def __radd__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import plus
        return plus(other, self)

    def __sub__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import minus
        return minus(self, other)

    def __rsub__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import minus
        return minus(other, self)

    def __mul__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import times
        return times(self, other)

    def __rmul__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import times
        return times(other, self)

    def __truediv__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import rdivide
        return rdivide(self, other)

    def __rtruediv__(self, other: Any) -> "SingFun":
        if not _is_operand(other):
            return NotImplemented
        from .algebra import rdivide
        return rdivide(other, self)

    def __neg__(self) -> "SingFun":
        from .algebra import uminus
        return uminus(self)

    def __pos__(self) -> "SingFun":
        return self

    # --- анализ ---
    def diff(self, k: int = 1) -> "SingFun":
        from .calculus import diff
        return diff(self, k)

    def cumsum(self, m: int = 1) -> "SingFun":
        from .calculus import cumsum
        return cumsum(self, m)

    def sum(self) -> complex | float:
        """∫_{-1}^{1} f(x) dx."""
        from .calculus import integral
        return integral(self)

    def norm(self, p: Any = 2) -> float:
        from .calculus import norm
        return norm(self, p)

    def roots(self, endpoints: bool = True) -> Array:
        from .queries import roots
        return roots(self, endpoints)

    def minandmax(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        from .queries import minandmax
        return minandmax(self)

    def max(self) -> float:
        from .queries import max_value
        return max_value(self)

    def min(self) -> float:
        from .queries import min_value
        return min_value(self)

    def flipud(self) -> "SingFun":
        from .algebra import flipud
        return flipud(self)

    def restrict(self, s: Any) -> Any:
        from .algebra import restrict
        return restrict(self, s)

    def conj(self) -> "SingFun":
        from .algebra import conj
        return conj(self)

    def real(self) -> "SingFun":
        from .algebra import real
        return real(self)

    def imag(self) -> "SingFun":
        from .algebra import imag
        return imag(self)

    def is_real(self) -> bool:
        return smooth.is_real(self.smooth)

    def is_zero(self) -> bool:
        return smooth.is_zero(self.smooth)


def _is_operand(x: Any) -> bool:
    return isinstance(x, SingFun) or (isinstance(x, Number) and not isinstance(x, bool))


# ------------------------------- СОЗДАНИЕ ---------------------------------- #
def zero_singfun() -> SingFun:
    """Нулевая функция с показателями (0, 0)."""
    return SingFun(smooth.zero(), (0.0, 0.0))


def construct(
    op: Any,
    exponents: Optional[Sequence[float]] = None,
    type_hints: Optional[Sequence[Any]] = None,
    cfg: Optional[SingfunConfig] = None,
) -> SingFun:
    """
    Построить SingFun из скалярной функции op.

    1) op приводится к векторизованной форме (InvalidOperator для
       не вызываемых объектов и вектор-функций);
    2) подсказки проверяются всегда (UnknownSingularityType);
    3) если exponents не заданы — детектор (SingularityDetectionFailed
       пробрасывается без изменений);
    4) остаток s = op / factor строит гладкий движок.
    """
    c = resolve_config(cfg)
    g = as_vector_op(op)
    hints = parse_type_hints(type_hints)

    if exponents is not None:
        exps = validate_exponents(exponents)
    else:
        exps = detect(g, hints, c)
    a, b = snap_pair(exps, c.exponent_tol)

    s = smooth.make(strip(g, a, b), c)
    if smooth.is_zero(s, c):
        return zero_singfun()
    return SingFun(s, (a, b))


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    f = construct(lambda x: np.sqrt(1.0 - x) * np.cos(x), type_hints=("none", "unknown"))
    print(f)
    xs = np.linspace(-0.9, 0.9, 7)
    assert np.allclose(f(xs), np.sqrt(1.0 - xs) * np.cos(xs), rtol=1e-12)
    assert zero_singfun().is_zero()
    print("singfun.py basic self-tests passed.")
