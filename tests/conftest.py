# tests/conftest.py: конфигурация pytest
"""
Общие фикстуры для тестов singlab.
"""

import os
import sys

import numpy as np
import pytest

# Корень проекта в sys.path (для main.py без установки)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from singlab import SingfunConfig  # noqa: E402


@pytest.fixture
def cfg():
    """Конфиг по умолчанию, независимый от окружения."""
    return SingfunConfig.default()


@pytest.fixture
def interior():
    """Внутренние точки (-1, 1) без концов."""
    return np.linspace(-0.95, 0.95, 39)
