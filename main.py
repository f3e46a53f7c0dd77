# main.py
# Основной эксперимент для singlab:
# - выбор тестовой функции (models.py)
# - определение показателей особенностей и построение SingFun (construct)
# - метрики точности: ошибки показателей, восстановления, остатка, интеграла (diagnostics)
# - (опц.) серия экспериментов по левому показателю и сохранение результатов в CSV
#
# Запуск (примеры):
#   python main.py --case sqrt_right_cos --plot
#   python main.py --case branch_both --a -0.3 --b 0.7 --hints branch,branch
#   python main.py --case branch_both --sweepA -0.75,-0.5,-0.25,0.25,0.5 --out results.csv
#   (список может начинаться с минуса)
#
# Требования: numpy, mpmath; matplotlib (опционально для графиков)

from __future__ import annotations

import argparse
import csv
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

import mpmath as mp
import numpy as np

from singlab import SingfunError, construct, load_config
from singlab.config import SingfunConfig
from singlab.diagnostics import reconstruction_error, residual_error, smooth_quality
from singlab.models import CASES, SingularCase, from_exponents


# ------------------------------- CLI ПАРСЕР -------------------------------- #
_LIST_OPTIONS = ("--sweepA",)


def glue_list_values(argv: List[str]) -> List[str]:
    """
    argparse принимает "-0.5,0.25" за новую опцию. Для опций-списков
    значение, начинающееся с минуса, приклеиваем через "=".
    """
    out: List[str] = []
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok in _LIST_OPTIONS and i + 1 < len(argv) and argv[i + 1].startswith("-") \
                and not argv[i + 1].startswith("--"):
            out.append(f"{tok}={argv[i + 1]}")
            i += 2
            continue
        out.append(tok)
        i += 1
    return out


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="singlab: основной эксперимент")
    p.add_argument(
        "--case",
        type=str,
        default="sqrt_right_cos",
        choices=sorted(CASES),
        help="Выбор тестовой функции",
    )
    p.add_argument("--a", type=float, default=None, help="Показатель у x=-1 (переопределяет случай)")
    p.add_argument("--b", type=float, default=None, help="Показатель у x=1 (переопределяет случай)")
    p.add_argument("--hints", type=str, default=None,
                   help="Подсказки детектору через запятую, например: none,branch")
    p.add_argument("--exponent-tol", type=float, default=None, help="Допуск на показатели")
    p.add_argument("--env", action="store_true", help="Читать настройки из переменных SINGLAB_*")

    p.add_argument("--grid", type=int, default=1000, help="Размер сетки для ошибок")
    p.add_argument("--plot", action="store_true", help="Построить графики (если доступен matplotlib)")

    p.add_argument("--sweepA", type=str, default=None,
                   help="Список левых показателей через запятую (например: -0.5,0.25,0.5)")
    p.add_argument("--out", type=str, default="results.csv", help="Файл для записи результатов серии")

    return p.parse_args(glue_list_values(sys.argv[1:] if argv is None else list(argv)))


# ------------------------------- ПОМОЩНИКИ -------------------------------- #
def parse_hints(text: Optional[str]) -> Optional[Tuple[str, str]]:
    if text is None:
        return None
    parts = [s.strip() for s in text.split(",") if s.strip()]
    if len(parts) != 2:
        raise ValueError(f"--hints: ожидается два значения через запятую, получено {text!r}")
    return parts[0], parts[1]


def parse_list(text: str) -> List[float]:
    return [float(s.strip()) for s in text.split(",") if s.strip()]


def get_case(name: str, a: Optional[float], b: Optional[float],
             hints: Optional[Tuple[str, str]]) -> SingularCase:
    # Базовый случай по имени
    base = CASES[name]()
    if a is None and b is None and hints is None:
        return base

    # Переопределения: тот же остаток, новые показатели/подсказки
    _a = base.exponents[0] if a is None else a
    _b = base.exponents[1] if b is None else b
    _hints = base.hints if hints is None else hints
    return from_exponents(_a, _b, base.residual, hints=_hints, name=base.meta["type"])


def reference_integral(case: SingularCase) -> float:
    """∫ op по [-1, 1] через mpmath.quad (tanh-sinh справляется с особенностями на концах)."""
    a, b = case.exponents
    if a <= -1.0 or b <= -1.0:
        return float("nan")

    def integrand(t):
        s = mp.mpf(float(case.residual(float(t))))
        return s * mp.power(1 + t, a) * mp.power(1 - t, b)

    with mp.workdps(30):
        return float(mp.quad(integrand, [-1, 0, 1]))


@dataclass
class RunResult:
    case: str
    a_exact: float
    b_exact: float
    a_found: float
    b_found: float
    err_a: float
    err_b: float
    length: int
    happy: bool
    recon_err: float
    resid_err: float
    integral: float
    integral_err: float


def run_once(
    case: SingularCase,
    cfg: SingfunConfig,
    *,
    grid_points: int,
    do_plot: bool,
) -> RunResult:
    # Строим SingFun, показатели находит детектор
    f = construct(case.op, type_hints=case.hints, cfg=cfg)
    a, b = f.exponents
    a0, b0 = case.exponents

    # Ошибки на внутренней сетке
    X = case.grid(grid_points)
    recon = reconstruction_error(f, case.op, X)
    resid = residual_error(f, case.residual)
    q = smooth_quality(f)

    # Интеграл против mpmath (только для сходящихся)
    try:
        I = float(np.real(f.sum()))
        I_ref = reference_integral(case)
        I_err = abs(I - I_ref) / max(abs(I_ref), 1.0)
    except SingfunError as e:
        print(f"[integral] пропущено: {e}")
        I, I_err = float("nan"), float("nan")

    # Печать результата
    print("\n--- Результат ---")
    print(f"Случай: {case.meta.get('type', 'custom')}, подсказки={case.hints}")
    print(f"показатели: точные=({a0:g}, {b0:g}), найденные=({a:.12g}, {b:.12g})")
    print(f"остаток: длина={f.length}, happy={bool(q['happy'])}, хвост={q['tail_ratio']:.2e}")
    print(f"ошибки:  восстановление={recon:.3e},  остаток={resid:.3e},  интеграл={I_err:.3e}")

    # (опц.) графики
    if do_plot:
        try:
            import matplotlib.pyplot as plt  # noqa
            plt.figure()
            plt.plot(X, case.op(X), label="op")
            plt.plot(X, f(X), linestyle="--", label="SingFun")
            plt.xlabel("x")
            plt.ylabel("f")
            plt.title(f"singlab: {case.meta.get('type', 'case')} (a={a:.4g}, b={b:.4g})")
            plt.legend()
            plt.grid(True, alpha=0.3)
            plt.tight_layout()
            plt.show()
        except ImportError as e:
            print(f"[plot] пропущено: {e}")

    return RunResult(
        case=str(case.meta.get("type", "custom")),
        a_exact=a0,
        b_exact=b0,
        a_found=a,
        b_found=b,
        err_a=abs(a - a0),
        err_b=abs(b - b0),
        length=f.length,
        happy=bool(q["happy"]),
        recon_err=recon,
        resid_err=resid,
        integral=I,
        integral_err=I_err,
    )


def write_csv(path: str, rows: List[RunResult]) -> None:
    fieldnames = [
        "case", "a_exact", "b_exact", "a_found", "b_found", "err_a", "err_b",
        "length", "happy", "recon_err", "resid_err", "integral", "integral_err",
    ]
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow({
                "case": r.case, "a_exact": r.a_exact, "b_exact": r.b_exact,
                "a_found": f"{r.a_found:.16g}", "b_found": f"{r.b_found:.16g}",
                "err_a": f"{r.err_a:.6e}", "err_b": f"{r.err_b:.6e}",
                "length": r.length, "happy": int(r.happy),
                "recon_err": f"{r.recon_err:.6e}", "resid_err": f"{r.resid_err:.6e}",
                "integral": f"{r.integral:.16g}", "integral_err": f"{r.integral_err:.6e}",
            })
    print(f"[OK] результаты записаны в {path}")


# ---------------------------------- MAIN ----------------------------------- #
def main(argv: Optional[List[str]] = None) -> List[RunResult]:
    args = parse_args(argv)

    overrides = {}
    if args.exponent_tol is not None:
        overrides["exponent_tol"] = args.exponent_tol
    cfg = load_config(overrides, from_environment=args.env)
    hints = parse_hints(args.hints)

    # Одиночный прогон или серия?
    results: List[RunResult] = []
    if args.sweepA:
        for a_val in parse_list(args.sweepA):
            case_i = get_case(args.case, a_val, args.b, hints)
            results.append(run_once(case_i, cfg, grid_points=args.grid, do_plot=args.plot))
        write_csv(args.out, results)
    else:
        case = get_case(args.case, args.a, args.b, hints)
        results.append(run_once(case, cfg, grid_points=args.grid, do_plot=args.plot))

    # Краткая сводка по серии
    if len(results) > 1:
        print("\n=== Сводка по серии ===")
        for r in sorted(results, key=lambda z: z.a_exact):
            print(f"a={r.a_exact:<8g} | найдено a={r.a_found:.12g}, err_a={r.err_a:.3e}, "
                  f"длина={r.length}, восстановление={r.recon_err:.3e}")

    print("\nГотово.")
    return results


if __name__ == "__main__":
    main()
