"""
singlab: функции с особенностями на концах отрезка [-1, 1].

Идея пакета:
- Представление f(x) = s(x) · (1+x)^a · (1-x)^b, где s — гладкий остаток
  (ряд Чебышёва), (a, b) — показатели особенностей на концах
- Автоматическое определение показателей по выборке у концов
- Алгебра (+ - * /), производная, первообразная, интеграл, корни, экстремумы
  с сохранением факторизованной формы либо явной ошибкой

Основные точки входа (экспортируются на верхний уровень):
- construct(...)    → построить SingFun из функции
- detect(...)       → только показатели (a, b)
- plus/minus/times/rdivide, diff/cumsum/integral, feval/roots/minandmax

Пример:
>>> import numpy as np
>>> from singlab import construct
>>> f = construct(lambda x: np.sqrt(1 - x) * np.cos(x), type_hints=("none", "unknown"))
>>> f.exponents[0], round(f.exponents[1], 8)
(0.0, 0.5)
>>> round(f(0.0), 12)
1.0
"""

from __future__ import annotations

# Версия пакета
try:  # предпочтительно брать из метаданных установленного дистрибутива
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("singlab")
except _NotFound:
    __version__ = "0.0.0-dev"

# Настройка логгера пакета (тихий по умолчанию)
import logging as _logging

_logger = _logging.getLogger("singlab")
if not _logger.handlers:
    _handler = _logging.StreamHandler()
    _handler.setFormatter(_logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    _logger.addHandler(_handler)
    _logger.setLevel(_logging.WARNING)


from .config import (  # noqa: E402
    DEFAULT_CONFIG,
    DetectionConfig,
    DiagnosticsConfig,
    SingfunConfig,
    SmoothConfig,
    load_config,
)
from .errors import (  # noqa: E402
    AdditionIncompatibleExponents,
    DivergentAntiderivative,
    DivisionBySingularResidual,
    InvalidOperator,
    SingfunError,
    SingularityDetectionFailed,
    UnknownSingularityType,
)
from .smooth import SmoothFun  # noqa: E402
from .detect import SingType, detect, detect_endpoint  # noqa: E402
from .factor import singular_factor  # noqa: E402
from .singfun import SingFun, construct, zero_singfun  # noqa: E402
from .algebra import (  # noqa: E402
    conj,
    flipud,
    imag,
    minus,
    plus,
    rdivide,
    real,
    restrict,
    times,
    uminus,
    uplus,
)
from .calculus import cumsum, diff, inner_product, integral, norm  # noqa: E402
from .queries import (  # noqa: E402
    feval,
    is_equal,
    is_finite,
    is_inf,
    is_nan,
    is_real,
    is_zero,
    max_value,
    min_value,
    minandmax,
    roots,
)


# Удобные алиасы верхнего уровня
__all__ = [
    "__version__",
    # конфигурация
    "DEFAULT_CONFIG",
    "SingfunConfig",
    "DetectionConfig",
    "SmoothConfig",
    "DiagnosticsConfig",
    "load_config",
    # ошибки
    "SingfunError",
    "InvalidOperator",
    "UnknownSingularityType",
    "SingularityDetectionFailed",
    "AdditionIncompatibleExponents",
    "DivisionBySingularResidual",
    "DivergentAntiderivative",
    # значения и построение
    "SmoothFun",
    "SingFun",
    "SingType",
    "construct",
    "zero_singfun",
    "detect",
    "detect_endpoint",
    "singular_factor",
    # алгебра
    "plus",
    "minus",
    "times",
    "rdivide",
    "uminus",
    "uplus",
    "conj",
    "real",
    "imag",
    "flipud",
    "restrict",
    # анализ
    "diff",
    "cumsum",
    "integral",
    "inner_product",
    "norm",
    # запросы
    "feval",
    "roots",
    "minandmax",
    "max_value",
    "min_value",
    "is_real",
    "is_zero",
    "is_finite",
    "is_inf",
    "is_nan",
    "is_equal",
]
