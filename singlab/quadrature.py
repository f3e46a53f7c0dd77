"""
singlab/quadrature.py

Квадратурные формулы на [-1, 1]:

1) Гаусс–Лежандр (безвесовая) — для ∫_{-1}^{1} g(x) dx.
2) Гаусс–Якоби (весовая) — для ∫_{-1}^{1} g(x) (1+x)^a (1-x)^b dx,
   в соглашении singlab: a — показатель у левого конца, b — у правого.

n-точечная формула Гаусса точна для полиномов степени ≤ 2n-1, поэтому
для гладкой части длины L (степень L-1) достаточно n = ⌈L/2⌉ + 1 узлов.

Зависимости: numpy, mpmath (для Γ в константе весов Якоби).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np
import mpmath as mp


Array = np.ndarray


# ----------------------------- МАППИНГИ ------------------------------------ #
def affine_map(x: Array, lo: float, hi: float) -> Array:
    """Отображение узлов x∈[-1,1] → t∈[lo,hi]."""
    return 0.5 * (hi - lo) * np.asarray(x, dtype=float) + 0.5 * (hi + lo)


def nodes_for_length(length: int) -> int:
    """Число узлов Гаусса, точное для полинома из `length` коэффициентов."""
    return max(1, (int(length) + 2) // 2 + 1)


# ------------------------- ГАУСС–ЛЕЖАНДР (без веса) ------------------------ #
def gauss_legendre(n: int) -> Tuple[Array, Array]:
    """
    Узлы и веса на [-1,1] для ∫ g(x) dx по формуле Гаусса–Лежандра.
    """
    if n <= 0:
        raise ValueError("gauss_legendre: n должно быть > 0")
    from numpy.polynomial.legendre import leggauss
    x, w = leggauss(n)
    return x.astype(float), w.astype(float)


# ------------------------- ГАУСС–ЯКОБИ (с весом) --------------------------- #
def gauss_jacobi(n: int, a: float, b: float) -> Tuple[Array, Array]:
    r"""
    Узлы и веса на [-1,1] для ∫_{-1}^{1} g(x) (1+x)^a (1-x)^b dx.

    Алгоритм Голуба–Велша: собственные значения симметричной трёхдиагональной
    матрицы Якоби. В классических обозначениях веса (1-x)^α (1+x)^β
    (здесь α = b, β = a):
        diag_0 = (β - α) / (α + β + 2)
        diag_k = (β² - α²) / ((2k+α+β)(2k+α+β+2)),                     k ≥ 1
        off_1² = 4(1+α)(1+β) / ((2+α+β)² (3+α+β))
        off_k² = 4k(k+α)(k+β)(k+α+β) /
                 ((2k+α+β)² (2k+α+β+1)(2k+α+β-1)),                      k ≥ 2
    Веса: w_i = μ₀ v_{0i}², μ₀ = 2^{α+β+1} Γ(α+1) Γ(β+1) / Γ(α+β+2).
    """
    if n <= 0:
        raise ValueError("gauss_jacobi: n должно быть > 0")
    if a <= -1 or b <= -1:
        raise ValueError("gauss_jacobi: показатели a, b должны быть > -1")

    al, be = float(b), float(a)
    s = al + be

    k = np.arange(n, dtype=float)
    diag = np.empty(n, dtype=float)
    diag[0] = (be - al) / (s + 2.0)
    if n > 1:
        kk = k[1:]
        diag[1:] = (be**2 - al**2) / ((2 * kk + s) * (2 * kk + s + 2.0))

    off = np.empty(max(n - 1, 0), dtype=float)
    if n > 1:
        off[0] = 4.0 * (1.0 + al) * (1.0 + be) / ((2.0 + s) ** 2 * (3.0 + s))
    if n > 2:
        kk = np.arange(2, n, dtype=float)
        num = 4.0 * kk * (kk + al) * (kk + be) * (kk + s)
        den = (2 * kk + s) ** 2 * (2 * kk + s + 1.0) * (2 * kk + s - 1.0)
        off[1:] = num / den
    off = np.sqrt(off)

    J = np.diag(diag) + np.diag(off, 1) + np.diag(off, -1)
    lam, vecs = np.linalg.eigh(J)

    mu0 = float(mp.power(2, s + 1) * mp.gamma(al + 1) * mp.gamma(be + 1) / mp.gamma(s + 2))
    w = mu0 * vecs[0, :] ** 2
    return lam.astype(float), w.astype(float)


# -------------------------- ВЫСОКОУРОВНЕВЫЕ АПИ --------------------------- #
@dataclass(frozen=True)
class Quadrature:
    """Простая обёртка над узлами/весами."""
    nodes: Array
    weights: Array

    def integrate(self, g: Callable[[Array], Array]) -> complex | float:
        return np.dot(self.weights, g(self.nodes)).item()


def build_quadrature(n: int, a: float = 0.0, b: float = 0.0) -> Quadrature:
    """
    Квадратура для веса (1+x)^a (1-x)^b; при a = b = 0 — Гаусс–Лежандр.
    """
    if a == 0.0 and b == 0.0:
        x, w = gauss_legendre(n)
    else:
        x, w = gauss_jacobi(n, a, b)
    return Quadrature(nodes=x, weights=w)


# ------------------------------- САМООТЛАДКА ------------------------------- #
if __name__ == "__main__":
    # 1) Лежандр: ∫ x^2 dx = 2/3
    x, w = gauss_legendre(8)
    assert abs(np.dot(w, x**2) - 2.0 / 3.0) < 1e-14, "Gauss–Legendre test failed"

    # 2) Якоби: ∫ (1+x)^a (1-x)^b dx = 2^{a+b+1} B(a+1, b+1)
    a, b = -0.5, 0.7
    x, w = gauss_jacobi(16, a, b)
    ref = float(mp.power(2, a + b + 1) * mp.beta(a + 1, b + 1))
    assert abs(np.sum(w) - ref) < 1e-12, "Gauss–Jacobi weight test failed"

    # 3) Якоби: момент первого порядка ∫ x (1+x)^a (1-x)^b dx
    ref1 = float(mp.quad(lambda t: t * (1 + t) ** a * (1 - t) ** b, [-1, 1]))
    assert abs(np.dot(w, x) - ref1) < 1e-12, "Gauss–Jacobi moment test failed"

    print("quadrature.py basic self-tests passed.")
