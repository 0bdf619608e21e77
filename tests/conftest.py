import numpy as np
import pytest

from svd_compressor.config import SolverConfig
from svd_compressor.eigen import make_random_source


@pytest.fixture
def rng():
    return make_random_source(42)


@pytest.fixture
def well_conditioned():
    """5x4 матрица с заранее известными, хорошо разделёнными сингулярными числами"""
    gen = np.random.default_rng(7)
    Q1, _ = np.linalg.qr(gen.normal(size=(5, 5)))
    Q2, _ = np.linalg.qr(gen.normal(size=(4, 4)))
    sigma = np.array([100.0, 50.0, 20.0, 5.0])
    return Q1[:, :4] @ np.diag(sigma) @ Q2.T, sigma


@pytest.fixture
def strict():
    """Жёсткий порог для проверок точности собственных пар и векторов"""
    return SolverConfig(tolerance=1e-12)
