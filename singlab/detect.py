"""
singlab/detect.py

Детектор показателей особенностей на концах [-1, 1].

Модель: f(x) ≈ s(±1) · δ^e при δ → 0, где δ — расстояние до конца,
e — искомый показатель (e < 0 — полюс, e > 0 — корень, нецелое — ветвление).

Выборка:
    δ_k = ρ^k,  k = first_power..max_power,
    x_k = -1 + δ_k (левый конец) или 1 - δ_k (правый конец).
При ρ = 1/2 точки x_k — точные двоичные дроби, и 1 ∓ x_k вычисляется без ошибок.
Последовательность обрывается на первом не конечном или нулевом значении
(переполнение у полюсов высокого порядка, исчезновение у корней).

1) Целочисленный поиск (полюс/корень):
       order_k = log(|f_k| / |f_{k+1}|) / log(δ_k / δ_{k+1}).
   Смещение order_k - e линейно по δ_k (гладкость s), поэтому шаг
   экстраполяции Ричардсона
       R_k = (order_{k+1} δ_k - order_k δ_{k+1}) / (δ_k - δ_{k+1})
   убирает его. Оценка принята, когда stable_steps подряд разностей R
   не превосходят exponent_tol. Целое — если R в пределах exponent_tol от
   целого и |R| ≤ max_pole_order.

2) Дробный поиск (ветвление): наклон МНК-прямой log|f| от log δ по окну
   из regression_window точек; окно сдвигается к концу (не более
   max_refinements раз), наклоны соседних окон комбинируются Ричардсоном.
   Сходимость — как в п. 1.

Подсказки (SingType):
    NONE   — показатель 0 без выборки;
    POLE   — целочисленный поиск (ожидается полюс, e < 0);
    ROOT   — целочисленный поиск (ожидается корень, e > 0);
    BRANCH — целочисленный поиск, а если он не дал целого — дробный.
Строки: "pole", "branch", "root", "none" (регистр не важен); "unknown" и
"sing" — синонимы "branch".

Тождественно нулевая вблизи конца функция даёт показатель 0.
Отсутствие сходимости — SingularityDetectionFailed.

Зависимости: numpy.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple
import logging

import numpy as np

from .config import DetectionConfig, SingfunConfig, resolve_config
from .errors import SingularityDetectionFailed, UnknownSingularityType
from .factor import snap_exponent
from .utils import as_vector_op


Array = np.ndarray
Func = Callable[[Array], Array]

_LOG = logging.getLogger("singlab.detect")

LEFT = -1
RIGHT = 1


# ------------------------------- ТИПЫ -------------------------------------- #
class SingType(Enum):
    """Тип особенности на конце."""
    POLE = "pole"
    BRANCH = "branch"
    ROOT = "root"
    NONE = "none"


_ALIASES = {"unknown": SingType.BRANCH, "sing": SingType.BRANCH}


def parse_sing_type(hint: Any) -> SingType:
    """Строка/SingType → SingType; иначе UnknownSingularityType."""
    if isinstance(hint, SingType):
        return hint
    if not isinstance(hint, str):
        raise UnknownSingularityType(f"Тип особенности должен быть строкой, получено {hint!r}")
    key = hint.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return SingType(key)
    except ValueError:
        raise UnknownSingularityType(
            f"Неизвестный тип особенности {hint!r}; допустимы: pole, branch, root, none"
        ) from None


def parse_type_hints(hints: Optional[Sequence[Any]]) -> Tuple[SingType, SingType]:
    """Пара подсказок для (левого, правого) конца; None → (BRANCH, BRANCH)."""
    if hints is None:
        return SingType.BRANCH, SingType.BRANCH
    if isinstance(hints, (str, SingType)) or len(hints) != 2:
        raise UnknownSingularityType(
            f"Ожидается пара типов особенностей (левый, правый), получено {hints!r}"
        )
    return parse_sing_type(hints[0]), parse_sing_type(hints[1])


# ------------------------------- ВЫБОРКА ----------------------------------- #
def _endpoint_samples(op: Func, side: int, dc: DetectionConfig) -> Tuple[Array, Array, bool]:
    """
    Расстояния δ_k и |f(x_k)| до первого непригодного значения.
    Третий элемент — признак «все значения нулевые».
    """
    k = np.arange(dc.first_power, dc.max_power + 1, dtype=float)
    delta = dc.ratio ** k
    x = -1.0 + delta if side == LEFT else 1.0 - delta
    dist = (x + 1.0) if side == LEFT else (1.0 - x)

    with np.errstate(all="ignore"):
        vals = np.abs(np.asarray(op(x)))

    if np.all(vals == 0.0):
        return dist[:0], vals[:0], True

    ok = np.isfinite(vals) & (vals > 0.0) & (dist > 0.0)
    ok[1:] &= np.diff(dist) < 0.0
    bad = np.flatnonzero(~ok)
    n = bad[0] if bad.size else vals.size
    return dist[:n], vals[:n], False


def _richardson(est: Array, dist: Array) -> Array:
    """Исключить линейное по δ смещение: R_k по парам соседних оценок."""
    d0, d1 = dist[:-1], dist[1:]
    return (est[1:] * d0 - est[:-1] * d1) / (d0 - d1)


def _first_stable(seq: Array, tol: float, steps: int) -> Optional[float]:
    """Первое значение, после которого steps подряд разностей ≤ tol."""
    if seq.size < steps + 1:
        return None
    close = np.abs(np.diff(seq)) <= tol
    for j in range(close.size - steps + 1):
        if np.all(close[j:j + steps]):
            return float(seq[j + steps])
    return None


# --------------------------- ЦЕЛОЧИСЛЕННЫЙ ПОИСК --------------------------- #
def find_pole_order(dist: Array, vals: Array, tol: float, dc: DetectionConfig) -> Optional[int]:
    """
    Целочисленный порядок по отношению соседних значений; None, если оценки
    не стабилизировались к целому в пределах max_pole_order.
    """
    if dist.size < dc.stable_steps + 3:
        return None
    orders = np.log(vals[:-1] / vals[1:]) / np.log(dist[:-1] / dist[1:])
    est = _first_stable(_richardson(orders, dist[:-1]), tol, dc.stable_steps)
    _LOG.debug("целочисленный поиск: оценка %r", est)
    if est is None:
        return None
    r = int(np.round(est))
    if abs(est - r) > tol or abs(r) > dc.max_pole_order:
        return None
    return r


# ----------------------------- ДРОБНЫЙ ПОИСК ------------------------------- #
def find_branch_order(dist: Array, vals: Array, tol: float, dc: DetectionConfig) -> Optional[float]:
    """
    Показатель как наклон лог-лог регрессии по скользящему окну; None, если
    наклоны не сошлись за max_refinements сдвигов окна.
    """
    w = dc.regression_window
    n_windows = min(dist.size - w + 1, dc.max_refinements)
    if n_windows < dc.stable_steps + 2:
        return None
    ld = np.log(dist)
    lv = np.log(vals)
    slopes = np.empty(n_windows)
    for j in range(n_windows):
        slopes[j] = np.polyfit(ld[j:j + w], lv[j:j + w], 1)[0]
    est = _first_stable(_richardson(slopes, dist[:n_windows]), tol, dc.stable_steps)
    _LOG.debug("дробный поиск: оценка %r", est)
    return est


# ------------------------------ ПО КОНЦАМ ---------------------------------- #
def detect_endpoint(
    op: Any,
    side: int,
    hint: Any = SingType.BRANCH,
    cfg: Optional[SingfunConfig] = None,
) -> float:
    """
    Показатель на одном конце (side = -1 — левый, 1 — правый).
    """
    if side not in (LEFT, RIGHT):
        raise ValueError("side должен быть -1 (левый конец) или 1 (правый)")
    kind = parse_sing_type(hint)
    if kind is SingType.NONE:
        return 0.0

    c = resolve_config(cfg)
    dc = c.detection
    tol = c.exponent_tol
    name = "левом" if side == LEFT else "правом"

    dist, vals, all_zero = _endpoint_samples(as_vector_op(op), side, dc)
    if all_zero:
        _LOG.debug("на %s конце функция тождественно нулевая: показатель 0", name)
        return 0.0

    order = find_pole_order(dist, vals, tol, dc)
    if order is not None:
        if (kind is SingType.POLE and order > 0) or (kind is SingType.ROOT and order < 0):
            _LOG.info("на %s конце найден порядок %d, противоречащий подсказке %s",
                      name, order, kind.value)
        _LOG.debug("на %s конце: целый порядок %d", name, order)
        return float(order)

    if kind is not SingType.BRANCH:
        raise SingularityDetectionFailed(
            f"Целочисленный поиск на {name} конце не стабилизировался "
            f"(подсказка {kind.value}, {dist.size} пригодных точек)"
        )

    est = find_branch_order(dist, vals, tol, dc)
    if est is None:
        raise SingularityDetectionFailed(
            f"Ни целочисленный, ни дробный поиск на {name} конце не стабилизировался "
            f"({dist.size} пригодных точек)"
        )
    _LOG.debug("на %s конце: дробный показатель %.16g", name, est)
    return snap_exponent(est, tol)


def detect(
    op: Any,
    type_hints: Optional[Sequence[Any]] = None,
    cfg: Optional[SingfunConfig] = None,
) -> Tuple[float, float]:
    """
    Показатели (a, b) на левом и правом концах.
    """
    left, right = parse_type_hints(type_hints)
    g = as_vector_op(op)
    a = detect_endpoint(g, LEFT, left, cfg)
    b = detect_endpoint(g, RIGHT, right, cfg)
    return a, b


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    a, b = detect(lambda x: np.sqrt(1.0 - x) * np.cos(x), ("none", "unknown"))
    assert a == 0.0 and abs(b - 0.5) < 1e-10, (a, b)
    a, b = detect(lambda x: np.exp(x) / (1.0 + x) ** 2, ("pole", "none"))
    assert (a, b) == (-2.0, 0.0), (a, b)
    print("detect.py basic self-tests passed.")
