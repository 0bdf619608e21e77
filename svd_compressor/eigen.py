import logging
import warnings
from collections import namedtuple

import numpy as np

from . import matrix_ops
from .config import ZERO_TOLERANCE, SolverConfig
from .errors import ConvergenceShortfall, DimensionMismatch

logger = logging.getLogger(__name__)

EigenPair = namedtuple("EigenPair", ["value", "vector"])

# Исходы одного прогона степенного метода
CONVERGED = "converged"
EXHAUSTED = "exhausted"    # ‖Av‖ ≈ 0: в матрице больше ничего нет
SHORTFALL = "shortfall"    # не сошлось за max_iterations


def make_random_source(seed=None):
    """Источник случайных чисел для начальных векторов (numpy Generator).

    Любой объект с методом uniform(low, high, size) подходит как RandomSource.
    """
    return np.random.default_rng(seed)


class EigenSolver:
    """Собственные пары симметричной матрицы степенным методом с дефляцией.

    Каждая следующая пара ищется в матрице, из которой вычтен вклад
    уже найденных: A := A - λ·v·vᵗ. Пары выдаются в порядке нахождения,
    то есть по убыванию |λ|.

    Сходимость: |λ_k - λ_(k-1)| < tolerance·max(1, ‖A‖_F), где ‖A‖_F
    берётся от исходной матрицы. Если очередная пара не сошлась за
    max_iterations (ConvergenceShortfall) или |λ| пренебрежимо мало,
    поиск прекращается целиком: результат просто короче k.
    """

    def __init__(self, config=None, random_source=None):
        self.config = config or SolverConfig()
        self.random_source = random_source if random_source is not None else make_random_source()

    def solve(self, A, k=None):
        A = matrix_ops.as_matrix(A)  # рабочая копия, дефлируется на месте
        n, cols = A.shape
        if n != cols:
            raise DimensionMismatch(f"Ожидалась квадратная матрица, получено {n}x{cols}")

        if k is None:
            k = n
        if self.config.max_eigenvalues is not None:
            k = min(k, self.config.max_eigenvalues)
        k = min(k, n)

        scale = max(1.0, float(np.linalg.norm(A)))
        converged = self.config.tolerance * scale
        negligible = ZERO_TOLERANCE * scale

        pairs = []
        for i in range(k):
            v = np.asarray(self.random_source.uniform(-0.5, 0.5, n), dtype=float)
            v_norm = matrix_ops.norm(v)
            if v_norm < ZERO_TOLERANCE:
                logger.debug("Вырожденный начальный вектор для пары %d", i)
                break
            v = v / v_norm

            lam, v, status, iterations = self._power_iteration(A, v, converged, negligible)

            if status == SHORTFALL:
                warnings.warn(
                    f"Пара {i} не сошлась за {iterations} итераций, получено {len(pairs)} из {k}",
                    ConvergenceShortfall,
                    stacklevel=2,
                )
                break
            if status == EXHAUSTED or abs(lam) < negligible:
                logger.debug("Остаток матрицы пренебрежимо мал после %d пар", len(pairs))
                break

            logger.debug("Пара %d: λ=%.6g за %d итераций", i, lam, iterations)
            pairs.append(EigenPair(lam, v.copy()))

            # Дефляция
            A -= lam * matrix_ops.outer(v, v)

        return pairs

    def _power_iteration(self, A, v, converged, negligible):
        """Один прогон степенного метода: (λ, v, исход, число итераций)"""
        lam = 0.0
        iteration = 0
        for iteration in range(1, self.config.max_iterations + 1):
            Av = matrix_ops.multiply_vector(A, v)
            Av_norm = matrix_ops.norm(Av)
            if Av_norm < negligible:
                return lam, v, EXHAUSTED, iteration

            v = Av / Av_norm
            # Отношение Рэлея
            new_lam = matrix_ops.dot(v, matrix_ops.multiply_vector(A, v))
            if abs(new_lam - lam) < converged:
                return new_lam, v, CONVERGED, iteration
            lam = new_lam

        return lam, v, SHORTFALL, iteration


def eigen_decomposition(A, k=None, config=None, random_source=None):
    """До k доминирующих собственных пар матрицы A"""
    return EigenSolver(config, random_source).solve(A, k)
