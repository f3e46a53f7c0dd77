"""
singlab/diagnostics.py

Диагностика для singlab:
- Ошибка восстановления f по исходной функции на внутренних точках.
- Ошибка гладкого остатка относительно известного s(x).
- Качество гладкого остатка: длина, «счастье», относительный хвост коэффициентов.
- Отчёт детектора: найденные и точные показатели.

Публичное API:
  - reconstruction_error(f, op, x=None) -> float
  - residual_error(f, residual, x=None) -> float
  - smooth_quality(f) -> dict
  - detection_report(op, hints, exact=None, cfg=None) -> dict

Зависимости: numpy, singlab.detect, singlab.queries
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import numpy as np

from .config import SingfunConfig
from .detect import detect
from .queries import feval
from .singfun import SingFun
from .utils import as_vector_op, relative_error_Linf


Array = np.ndarray
Func = Callable[[Array | float], Array]


def _interior(x: Optional[Array], n: int = 401) -> Array:
    if x is None:
        return np.linspace(-1.0, 1.0, n + 2)[1:-1]
    return np.asarray(x, dtype=float)


# ------------------------------ ВОССТАНОВЛЕНИЕ ----------------------------- #
def reconstruction_error(f: SingFun, op: Func, x: Optional[Array] = None) -> float:
    """
    max |op - f| / max |op| на точках x (по умолчанию — внутренняя равномерная сетка).
    """
    xv = _interior(x)
    ref = as_vector_op(op)(xv)
    return relative_error_Linf(ref, feval(f, xv))


def residual_error(f: SingFun, residual: Func, x: Optional[Array] = None) -> float:
    """
    Относительная L∞-ошибка гладкого остатка f.smooth против известного s(x).
    Сетка включает концы: остаток определён на всём [-1, 1].
    """
    xv = np.linspace(-1.0, 1.0, 401) if x is None else np.asarray(x, dtype=float)
    ref = as_vector_op(residual)(xv)
    return relative_error_Linf(ref, f.smooth(xv))


# -------------------------------- КАЧЕСТВО --------------------------------- #
def smooth_quality(f: SingFun) -> Dict[str, float]:
    """
    Словарь:
      - "length":     число коэффициентов остатка
      - "happy":      1.0, если адаптивная интерполяция сошлась
      - "tail_ratio": max|последних коэфф.| / max|коэфф.|
      - "vscale":     max|s| по точкам Чебышёва
    """
    c = np.abs(f.smooth.coeffs)
    scale = float(c.max()) if c.size else 0.0
    m = max(1, c.size // 8)
    tail = float(c[-m:].max()) / scale if scale > 0 else 0.0
    return {
        "length": float(c.size),
        "happy": 1.0 if f.smooth.happy else 0.0,
        "tail_ratio": tail,
        "vscale": f.vscale,
    }


# -------------------------------- ДЕТЕКЦИЯ --------------------------------- #
def detection_report(
    op: Any,
    hints: Optional[Sequence[Any]] = None,
    exact: Optional[Tuple[float, float]] = None,
    cfg: Optional[SingfunConfig] = None,
) -> Dict[str, float]:
    """
    Найденные показатели и (если известны точные) их ошибки:
      "a", "b", и при exact — "err_a", "err_b".
    """
    a, b = detect(op, hints, cfg)
    out: Dict[str, float] = {"a": a, "b": b}
    if exact is not None:
        out["err_a"] = abs(a - float(exact[0]))
        out["err_b"] = abs(b - float(exact[1]))
    return out


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    from .models import case_sqrt_right_cos
    from .singfun import construct

    case = case_sqrt_right_cos()
    rep = detection_report(case.op, case.hints, case.exponents)
    assert rep["err_b"] < 1e-10, f"Ошибка детектора слишком велика: {rep}"

    f = construct(case.op, type_hints=case.hints)
    assert reconstruction_error(f, case.op) < 1e-12
    assert residual_error(f, case.residual) < 1e-12
    assert smooth_quality(f)["happy"] == 1.0

    print("diagnostics.py basic self-tests passed.")
