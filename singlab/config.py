"""
singlab/config.py

Глобальные настройки singlab: допуски на показатели особенностей,
параметры детектора, гладкого движка и диагностики.
Содержит dataclass-конфиги с валидацией, значение по умолчанию
(создаётся один раз при импорте) и фабрики для загрузки/переопределения (в т.ч. из env).

Каждая публичная операция принимает `cfg: Optional[SingfunConfig]` и
разрешает его один раз за вызов через `resolve_config(cfg)`.

Использование:
>>> from singlab.config import SingfunConfig
>>> cfg = SingfunConfig.default().override(exponent_tol=1e-8).validate()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Optional
import logging
import os


# ----------------------------- ЛОГГЕР --------------------------------------- #
_LOG = logging.getLogger("singlab.config")


# --------------------------- ВСПОМОГАТЕЛЬНОЕ -------------------------------- #
def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        _LOG.warning("Невозможно преобразовать %s=%r к float; используем %s", name, v, default)
        return default


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        _LOG.warning("Невозможно преобразовать %s=%r к int; используем %s", name, v, default)
        return default


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return v if v is not None else default


# ----------------------------- КОНФИГИ ------------------------------------- #
@dataclass(frozen=True)
class DetectionConfig:
    """
    Настройки детектора показателей на концах.

    Узлы выборки: δ_k = ratio^k, k = first_power..max_power, точки x = ∓1 ± δ_k.
    При ratio = 1/2 все точки — точные двоичные дроби.
    """
    ratio: float = 0.5                     # ρ в δ_k = ρ^k
    first_power: int = 2                   # первый показатель k
    max_power: int = 52                    # последний показатель k (δ ≥ 2^-52)
    stable_steps: int = 2                  # сколько подряд согласованных оценок нужно
    max_pole_order: int = 20               # потолок целочисленного поиска |order|
    regression_window: int = 6             # число точек в окне лог-лог регрессии
    max_refinements: int = 40              # максимум сдвигов окна регрессии

    def validate(self) -> "DetectionConfig":
        if not (0.0 < self.ratio < 1.0):
            raise ValueError("DetectionConfig.ratio должно быть в (0, 1)")
        if self.first_power < 0:
            raise ValueError("DetectionConfig.first_power должно быть >= 0")
        if self.max_power <= self.first_power + self.stable_steps + 2:
            raise ValueError("DetectionConfig.max_power слишком мало для заданного stable_steps")
        if self.stable_steps < 1:
            raise ValueError("DetectionConfig.stable_steps должно быть >= 1")
        if self.max_pole_order < 1:
            raise ValueError("DetectionConfig.max_pole_order должно быть >= 1")
        if self.regression_window < 3:
            raise ValueError("DetectionConfig.regression_window должно быть >= 3")
        if self.max_refinements < 1:
            raise ValueError("DetectionConfig.max_refinements должно быть >= 1")
        return self

    def override(self, **kwargs: Any) -> "DetectionConfig":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class SmoothConfig:
    """
    Настройки гладкого движка (адаптивная чебышёвская интерполяция).
    """
    min_length: int = 17                   # первая длина выборки
    max_length: int = 1025                 # потолок длины (рост 2n-1)
    tol: float = 2.2e-14                   # относительный допуск «хвоста» коэффициентов (≈ 100·eps)
    zero_tol: float = 0.0                  # абсолютный порог для is_zero
    root_tol: float = 1e-8                 # допуск вещественности/попадания корней в [-1,1]

    def validate(self) -> "SmoothConfig":
        if self.min_length < 2:
            raise ValueError("SmoothConfig.min_length должно быть >= 2")
        if self.max_length < self.min_length:
            raise ValueError("SmoothConfig.max_length должно быть >= min_length")
        if not (self.tol > 0):
            raise ValueError("SmoothConfig.tol должно быть > 0")
        if self.zero_tol < 0:
            raise ValueError("SmoothConfig.zero_tol должно быть >= 0")
        if not (self.root_tol > 0):
            raise ValueError("SmoothConfig.root_tol должно быть > 0")
        return self

    def override(self, **kwargs: Any) -> "SmoothConfig":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class DiagnosticsConfig:
    """
    Настройки диагностики.
    """
    log_level: Literal["WARNING", "INFO", "DEBUG"] = "WARNING"

    def validate(self) -> "DiagnosticsConfig":
        if self.log_level not in ("WARNING", "INFO", "DEBUG"):
            raise ValueError(f"DiagnosticsConfig.log_level: неизвестный уровень {self.log_level!r}")
        return self

    def override(self, **kwargs: Any) -> "DiagnosticsConfig":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class SingfunConfig:
    """
    Главный конфиг singlab: допуск на показатели + конфиги детектора,
    гладкого движка и диагностики.
    """
    exponent_tol: float = 1e-10
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    smooth: SmoothConfig = field(default_factory=SmoothConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)

    def validate(self) -> "SingfunConfig":
        if not (self.exponent_tol > 0):
            raise ValueError("SingfunConfig.exponent_tol должно быть > 0")
        if self.exponent_tol >= 0.5:
            raise ValueError("SingfunConfig.exponent_tol должно быть < 0.5 (иначе «округление» неоднозначно)")
        self.detection.validate()
        self.smooth.validate()
        self.diagnostics.validate()
        return self

    def override(self, **kwargs: Any) -> "SingfunConfig":
        """
        Поверхностное переопределение полей верхнего уровня.
        Для вложенных конфигов передавайте соответствующие dataclass-объекты.
        """
        return replace(self, **kwargs)

    # -------------------------- ФАБРИКИ ------------------------------------ #
    @staticmethod
    def default() -> "SingfunConfig":
        """
        Конфиг по умолчанию, независимый от окружения.
        """
        return SingfunConfig().validate()

    @staticmethod
    def from_env() -> "SingfunConfig":
        """
        Загрузка параметров из переменных окружения.
        Имена переменных:
          SINGLAB_EXPONENT_TOL,
          SINGLAB_DETECT_RATIO, SINGLAB_DETECT_MAX_POWER, SINGLAB_DETECT_MAX_POLE_ORDER,
          SINGLAB_SMOOTH_MAX_LENGTH, SINGLAB_SMOOTH_TOL,
          SINGLAB_LOG_LEVEL
        """
        dc = DetectionConfig(
            ratio=_env_float("SINGLAB_DETECT_RATIO", 0.5),
            max_power=_env_int("SINGLAB_DETECT_MAX_POWER", 52),
            max_pole_order=_env_int("SINGLAB_DETECT_MAX_POLE_ORDER", 20),
        )
        sc = SmoothConfig(
            max_length=_env_int("SINGLAB_SMOOTH_MAX_LENGTH", 1025),
            tol=_env_float("SINGLAB_SMOOTH_TOL", 2.2e-14),
        )
        gc = DiagnosticsConfig(
            log_level=_env_str("SINGLAB_LOG_LEVEL", "WARNING"),  # type: ignore[arg-type]
        )
        cfg = SingfunConfig(
            exponent_tol=_env_float("SINGLAB_EXPONENT_TOL", 1e-10),
            detection=dc,
            smooth=sc,
            diagnostics=gc,
        ).validate()

        # Уровень логгера пакета по DiagnosticsConfig
        logging.getLogger("singlab").setLevel(getattr(logging, cfg.diagnostics.log_level))
        return cfg


# Единственный экземпляр по умолчанию, создаётся при импорте.
DEFAULT_CONFIG = SingfunConfig.default()


def resolve_config(cfg: Optional[SingfunConfig]) -> SingfunConfig:
    """Вернуть cfg или конфиг по умолчанию."""
    return DEFAULT_CONFIG if cfg is None else cfg


def load_config(
    overrides: Optional[Dict[str, Any]] = None,
    *,
    from_environment: bool = False,
) -> SingfunConfig:
    """
    Унифицированная точка входа: загрузка конфига с возможностью
    поверхностного переопределения полей верхнего уровня.
    Пример:
        cfg = load_config({"exponent_tol": 1e-8, "smooth": SmoothConfig(max_length=513)})
    """
    cfg = SingfunConfig.from_env() if from_environment else SingfunConfig.default()
    if overrides:
        cfg = cfg.override(**overrides)
    return cfg.validate()
