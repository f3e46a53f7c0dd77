"""
singlab/models.py

Тестовые функции для singlab с известными показателями особенностей и
известным гладким остатком:

    op(x) = s(x) · (1+x)^a · (1-x)^b.

Подход:
- Остаток s выбирается аналитическим (cos, exp, 2 + sin, …), показатели
  задаются явно, поэтому и детектор, и построение SingFun можно проверять
  без эталонных вычислений.
- (1+x) и (1-x) вычисляются напрямую, без 1 - x² — у концов это
  сохраняет относительную точность op.

Содержимое:
- dataclass SingularCase: op(x), residual s(x), exponents (a, b), hints, meta
- фабрика `from_exponents(...)`
- готовые случаи:
    case_sqrt_right_cos(...)
    case_double_pole_left(...)
    case_branch_both(...)
    case_root_left_exp(...)
    case_smooth(...)
    case_from_exponents(...)

Зависимости: numpy
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np


Array = np.ndarray
Func = Callable[[Array | float], Array]


# ---------------------------- ОСНОВНАЯ СТРУКТУРА --------------------------- #
@dataclass(frozen=True)
class SingularCase:
    """
    Контейнер тестовой функции.

    Поля:
      op        : функция с особенностями на концах
      residual  : гладкий остаток s(x) = op / ((1+x)^a (1-x)^b)
      exponents : точные показатели (a, b)
      hints     : подсказки детектору (левый, правый)
      meta      : словарь с описанием/параметрами
    """
    op: Func
    residual: Func
    exponents: Tuple[float, float]
    hints: Tuple[str, str]
    meta: Dict

    def grid(self, n: int) -> Array:
        """Внутренняя равномерная сетка из n точек (концы исключены)."""
        n = max(int(n), 1)
        return np.linspace(-1.0, 1.0, n + 2, dtype=float)[1:-1]


def _power(base: Array, e: float) -> Array:
    if e == 0.0:
        return np.ones_like(base)
    return np.power(base, e)


def from_exponents(
    a: float,
    b: float,
    residual: Func,
    *,
    hints: Tuple[str, str] = ("branch", "branch"),
    name: str = "custom",
) -> SingularCase:
    """
    Построить случай op = residual · (1+x)^a (1-x)^b.
    """
    a, b = float(a), float(b)

    def op(x: Array | float) -> Array:
        xv = np.asarray(x, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            return residual(xv) * _power(1.0 + xv, a) * _power(1.0 - xv, b)

    meta = {
        "type": name,
        "a": a,
        "b": b,
        "hints": tuple(hints),
    }
    return SingularCase(op=op, residual=residual, exponents=(a, b), hints=tuple(hints), meta=meta)


# ------------------------------ ГОТОВЫЕ СЛУЧАИ ----------------------------- #
def case_sqrt_right_cos(b: float = 0.5) -> SingularCase:
    """
    op(x) = (1-x)^b cos(x): ветвление справа, слева гладко.
    """
    return from_exponents(0.0, b, np.cos, hints=("none", "branch"), name="sqrt_right_cos")


def case_double_pole_left(order: int = 2) -> SingularCase:
    """
    op(x) = e^x / (1+x)^order: полюс порядка order слева.
    """
    if order < 1:
        raise ValueError("order должно быть >= 1")
    return from_exponents(-float(order), 0.0, np.exp, hints=("pole", "none"), name="pole_left_exp")


def case_branch_both(a: float = -0.5, b: float = 0.25) -> SingularCase:
    """
    op(x) = (2 + sin x) (1+x)^a (1-x)^b: ветвления на обоих концах.
    """
    return from_exponents(a, b, lambda x: 2.0 + np.sin(x), hints=("branch", "branch"), name="branch_both")


def case_root_left_exp(order: int = 1) -> SingularCase:
    """
    op(x) = (1+x)^order e^x: корень порядка order слева.
    """
    if order < 1:
        raise ValueError("order должно быть >= 1")
    return from_exponents(float(order), 0.0, np.exp, hints=("root", "none"), name="root_left_exp")


def case_smooth() -> SingularCase:
    """
    op(x) = 1 / (2 + x): гладкая функция, детектор должен вернуть (0, 0).
    """
    return from_exponents(0.0, 0.0, lambda x: 1.0 / (2.0 + x), hints=("branch", "branch"), name="smooth")


def case_from_exponents(a: float, b: float) -> SingularCase:
    """
    op(x) = cos(x/2) (1+x)^a (1-x)^b для произвольных показателей.
    """
    return from_exponents(a, b, lambda x: np.cos(0.5 * x), name="cos_half")


CASES = {
    "sqrt_right_cos": case_sqrt_right_cos,
    "pole_left": case_double_pole_left,
    "branch_both": case_branch_both,
    "root_left": case_root_left_exp,
    "smooth": case_smooth,
}


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    for name, factory in CASES.items():
        case = factory()
        X = case.grid(200)
        vals = case.op(X)
        assert np.all(np.isfinite(vals)), f"op must be finite inside (-1,1) for {name}"
        a, b = case.exponents
        ref = case.residual(X) * (1.0 + X) ** a * (1.0 - X) ** b
        assert np.allclose(vals, ref, rtol=1e-14), f"factorisation mismatch for {name}"

    print("models.py basic self-tests passed.")
