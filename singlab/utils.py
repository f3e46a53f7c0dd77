"""
singlab/utils.py

Вспомогательные функции, не привязанные напрямую к алгебре SingFun,
но необходимые для инфраструктуры singlab:
- Таймер для экспериментов.
- Приведение пользовательской функции к векторизованной скалярной.
- Проверка параметров (показатели, точки вычисления).
- Относительные ошибки на дискретных узлах.
"""

from __future__ import annotations

import contextlib
import sys
import time
from typing import Any, Callable, Sequence, Tuple

import numpy as np

from .errors import InvalidOperator


Array = np.ndarray


# --------------------------- ПРОСТОЙ ПРОФИЛЬНЫЙ ТАЙМЕР --------------------- #
@contextlib.contextmanager
def timer(name: str = "", *, stream=sys.stdout):
    """
    Контекстный менеджер для измерения времени выполнения блока.

    Пример:
    >>> with timer("Детекция"):
    ...     f = construct(op)
    [Детекция] 0.0123 s
    """
    t0 = time.perf_counter()
    yield
    t1 = time.perf_counter()
    print(f"[{name or 'timer'}] {t1 - t0:.4f} s", file=stream)


# ------------------------- ВЕКТОРИЗАЦИЯ ОПЕРАТОРА ------------------------- #
def as_vector_op(op: Any) -> Callable[[Array], Array]:
    """
    Привести вызываемый объект к функции x(ndarray) ↦ ndarray той же формы.

    - не вызываемый объект → InvalidOperator;
    - op(0.0) с более чем одним значением (вектор-функция) → InvalidOperator;
    - функции, которые не принимают массивы (math.*), оборачиваются в np.vectorize;
    - константный результат растягивается на форму x.
    """
    if not callable(op):
        raise InvalidOperator(f"Ожидается вызываемый объект, получено {type(op).__name__}")
    if getattr(op, "_singlab_vectorized", False):
        return op

    sample = np.asarray(op(0.0))
    if sample.size != 1:
        raise InvalidOperator(
            f"Поддерживаются только скалярные функции: op(0) имеет форму {sample.shape}"
        )
    otype = complex if np.iscomplexobj(sample) else float

    x_test = np.array([-0.5, 0.5])
    try:
        out = np.asarray(op(x_test))
        array_ok = out.shape == x_test.shape or out.size == 1
    except (TypeError, ValueError):
        array_ok = False
    base = op if array_ok else np.vectorize(op, otypes=[otype])

    def g(x: Array) -> Array:
        xv = np.asarray(x, dtype=float)
        vals = np.asarray(base(xv))
        if vals.shape != xv.shape:
            if vals.size != 1:
                raise InvalidOperator(
                    f"Поддерживаются только скалярные функции: форма {vals.shape} вместо {xv.shape}"
                )
            vals = np.full(xv.shape, vals.reshape(()).item())
        return vals

    g._singlab_vectorized = True  # type: ignore[attr-defined]
    return g


# ---------------------------- ВАЛИДАЦИЯ ПАРАМЕТРОВ ------------------------ #
def validate_exponents(exponents: Any) -> Tuple[float, float]:
    """
    Проверка пары показателей: ровно два конечных вещественных числа.
    """
    arr = np.asarray(exponents)
    if arr.shape != (2,) or np.iscomplexobj(arr):
        raise ValueError(f"Показатели должны быть парой вещественных чисел, получено {exponents!r}")
    try:
        a, b = float(arr[0]), float(arr[1])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Показатели должны быть числами, получено {exponents!r}") from exc
    if not (np.isfinite(a) and np.isfinite(b)):
        raise ValueError(f"Показатели должны быть конечными, получено {exponents!r}")
    return a, b


def validate_points(x: Array | float) -> Array:
    """
    Проверка точек вычисления: вещественные, в [-1, 1].
    """
    xv = np.asarray(x, dtype=float)
    if np.any(np.abs(xv) > 1.0):
        raise ValueError("Точки вычисления должны лежать в [-1, 1]")
    return xv


# --------------------------- МАТЕМАТИЧЕСКИЕ МЕЛОЧИ ------------------------ #
def norm_Linf(fvals: Sequence[float]) -> float:
    """
    ||f||_{L∞} на дискретных узлах.
    """
    return float(np.max(np.abs(fvals)))


def relative_error_Linf(
    fvals: Sequence[float],
    gvals: Sequence[float],
) -> float:
    """
    Относительная L∞ ошибка: ||f - g||∞ / ||f||∞.
    """
    f = np.asarray(fvals)
    g = np.asarray(gvals)
    num = norm_Linf(f - g)
    den = norm_Linf(f)
    return float(num / den if den != 0 else np.inf)


# ---------------------------- САМООТЛАДКА ---------------------------------- #
if __name__ == "__main__":
    import math

    with timer("demo"):
        time.sleep(0.01)

    g = as_vector_op(math.cos)
    assert np.allclose(g(np.array([0.0, 1.0])), [1.0, math.cos(1.0)])
    assert validate_exponents([0.5, -1]) == (0.5, -1.0)
    print("rel Linf:", relative_error_Linf([1.0, 2.0], [1.1, 2.1]))
