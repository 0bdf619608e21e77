import logging
import warnings
from dataclasses import dataclass

import numpy as np

from . import matrix_ops
from .config import SolverConfig
from .eigen import EigenSolver
from .errors import DegenerateComponent

logger = logging.getLogger(__name__)


@dataclass
class SVDResult:
    """Разложение A ≈ U·diag(sigma)·V_T.

    sigma отсортированы по убыванию; столбец U[:, i] и строка V_T[i]
    относятся к sigma[i]. Если решатель нашёл меньше компонент, чем
    объявленный ранг, хвост дополнен нулями; в rank число реально найденных,
    в effective_rank число компонент с ненулевым вкладом.
    """
    U: np.ndarray
    sigma: np.ndarray
    V_T: np.ndarray
    rank: int

    @property
    def shape(self):
        return self.U.shape[0], self.V_T.shape[1]

    @property
    def effective_rank(self):
        return contributing(self, len(self.sigma))


def contributing(svd, retain):
    """Сколько из первых retain компонент дают ненулевой вклад.

    Нулевые (дополненные или вырожденные) компоненты имеют нулевой столбец U.
    """
    return int(np.count_nonzero(np.any(svd.U[:, :retain] != 0, axis=0)))


def decompose(A, config=None, random_source=None):
    """SVD через собственные пары AᵗA (степенной метод)"""
    A = matrix_ops.as_matrix(A)
    m, n = A.shape
    if config is None:
        config = SolverConfig.for_shape(m, n)
    tol = config.tolerance

    # === Собственные пары AᵗA ===
    AtA = matrix_ops.multiply(matrix_ops.transpose(A), A)
    declared_rank = config.rank_cap(m, n)
    pairs = EigenSolver(config, random_source).solve(AtA, declared_rank)

    # Сингулярные числа: отрицательные λ это численный шум
    sigma = np.array([np.sqrt(max(0.0, pair.value)) for pair in pairs], dtype=float)

    # Устойчивая сортировка: при равных sigma сохраняется порядок нахождения
    order = sorted(range(len(pairs)), key=lambda i: -sigma[i])
    sigma = sigma[order]
    V_T = np.zeros((declared_rank, n))
    for row, i in enumerate(order):
        V_T[row] = pairs[i].vector

    # === Левые сингулярные векторы: u_i = A·v_i / sigma_i ===
    U = np.zeros((m, declared_rank))
    for i, s in enumerate(sigma):
        if s <= tol:
            continue
        u = matrix_ops.multiply_vector(A, V_T[i]) / s
        u_norm = matrix_ops.norm(u)
        if u_norm < tol:
            warnings.warn(
                f"Вырожденная компонента {i} (sigma={s:.3g}) заменена нулями",
                DegenerateComponent,
                stacklevel=2,
            )
            continue
        U[:, i] = u / u_norm

    # Дополняем sigma нулями до объявленного ранга
    rank = len(pairs)
    if rank < declared_rank:
        logger.debug("Найдено %d из %d компонент, остальные нулевые", rank, declared_rank)
    sigma = np.concatenate([sigma, np.zeros(declared_rank - rank)])

    return SVDResult(U=U, sigma=sigma, V_T=V_T, rank=rank)
