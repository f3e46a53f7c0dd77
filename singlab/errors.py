"""
singlab/errors.py

Именованные ошибки singlab. Каждая ошибка — терминальная для вызова,
в котором возникла; ни одна операция их не перехватывает и не повторяет.
Каждый класс наследует также ближайшее встроенное исключение, чтобы
обобщённые обработчики (`except ValueError` и т.п.) продолжали работать.
"""

from __future__ import annotations


class SingfunError(Exception):
    """Базовый класс ошибок singlab."""


class InvalidOperator(SingfunError, TypeError):
    """Вход конструктора — не скалярная вызываемая функция."""


class UnknownSingularityType(SingfunError, ValueError):
    """Тип особенности вне {pole, branch, root, none}."""


class SingularityDetectionFailed(SingfunError, RuntimeError):
    """Ни целочисленный, ни дробный поиск показателя не стабилизировался."""


class AdditionIncompatibleExponents(SingfunError, ValueError):
    """Сумма не представима одним SingFun: избыток показателя не целый неотрицательный."""


class DivisionBySingularResidual(SingfunError, ZeroDivisionError):
    """Гладкая часть делителя обращается в нуль на [-1, 1]."""


class DivergentAntiderivative(SingfunError, ArithmeticError):
    """Интеграл расходится на конце (показатель ≤ -1)."""


__all__ = [
    "SingfunError",
    "InvalidOperator",
    "UnknownSingularityType",
    "SingularityDetectionFailed",
    "AdditionIncompatibleExponents",
    "DivisionBySingularResidual",
    "DivergentAntiderivative",
]
