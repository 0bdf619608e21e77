"""
Тесты политик усечения и восстановления каналов.
"""

import numpy as np
import pytest

from svd_compressor.reconstruct import (
    ByCount,
    ByEnergy,
    compress,
    compress_by_count,
    compress_by_energy,
    policy_from_method,
    retained_by_count,
    retained_by_energy,
    to_pixel_range,
)
from svd_compressor.svd import decompose


def _is_valid_channel(channel):
    return (
        np.all(channel >= 0)
        and np.all(channel <= 255)
        and np.array_equal(channel, np.round(channel))
    )


class TestRetainedCounts:
    """Сколько компонент оставляет каждая политика"""

    def test_by_count(self):
        sigma = np.array([4.0, 3.0, 2.0, 1.0])
        assert retained_by_count(sigma, 0.5) == 2
        assert retained_by_count(sigma, 0.3) == 2
        assert retained_by_count(sigma, 1.0) == 4
        assert retained_by_count(sigma, 1.5) == 4

    def test_by_count_keeps_at_least_one(self):
        assert retained_by_count(np.array([4.0, 3.0, 2.0]), 0.0) == 1

    def test_by_energy_includes_crossing_component(self):
        sigma = np.array([5.0, 3.0, 2.0])
        assert retained_by_energy(sigma, 0.49) == 1
        # 5 не больше 5, порог пересекает вторая компонента
        assert retained_by_energy(sigma, 0.5) == 2
        assert retained_by_energy(sigma, 0.8) == 3
        assert retained_by_energy(sigma, 1.0) == 3

    def test_by_energy_keeps_at_least_one(self):
        assert retained_by_energy(np.array([5.0, 3.0, 2.0]), 0.0) == 1

    def test_by_energy_zero_sigma(self):
        assert retained_by_energy(np.zeros(3), 0.5) == 3

    def test_by_energy_monotone(self, rng):
        A = np.random.default_rng(5).uniform(0, 255, size=(8, 6))
        svd = decompose(A, random_source=rng)
        counts = [compress_by_energy(svd, p / 10)[1] for p in range(11)]
        assert counts == sorted(counts)
        assert counts[0] >= 1


class TestReconstruction:
    """Восстановленные каналы"""

    def test_constant_matrix(self, rng):
        svd = decompose(np.full((4, 4), 100.0), random_source=rng)
        for percent in (0.5, 1.0):
            channel, used = compress_by_count(svd, percent)
            np.testing.assert_array_equal(channel, np.full((4, 4), 100.0))
        # Вторая компонента нулевая и в счёт не идёт
        assert compress_by_count(svd, 0.5)[1] == 1
        assert compress_by_count(svd, 1.0)[1] == 1

    def test_checkerboard(self, rng):
        A = np.array([[0.0, 255.0], [255.0, 0.0]])
        svd = decompose(A, random_source=rng)

        full, used = compress_by_count(svd, 1.0)
        assert used == 2
        np.testing.assert_array_equal(full, A)

        half, used = compress_by_count(svd, 0.5)
        assert used == 1
        assert not np.array_equal(half, A)
        assert _is_valid_channel(half)

    def test_one_by_one(self, rng):
        svd = decompose([[200]], random_source=rng)
        for percent in (0.1, 0.5, 1.0):
            channel, _ = compress_by_count(svd, percent)
            np.testing.assert_array_equal(channel, [[200.0]])
            channel, _ = compress_by_energy(svd, percent)
            np.testing.assert_array_equal(channel, [[200.0]])

    def test_well_conditioned_pixel_exact(self, rng):
        gen = np.random.default_rng(11)
        u = gen.uniform(0.2, 1.0, size=6)
        v = gen.uniform(0.2, 1.0, size=5)
        A = np.round(200 * np.outer(u, v))
        svd = decompose(A, random_source=rng)
        channel, _ = compress_by_count(svd, 1.0)
        np.testing.assert_array_equal(channel, A)

    @pytest.mark.parametrize("percent", [0.0, 0.2, 0.6, 1.0])
    def test_output_is_clamped_integer(self, percent, rng):
        A = np.random.default_rng(9).uniform(0, 255, size=(7, 5))
        svd = decompose(A, random_source=rng)
        for policy in (ByCount(percent), ByEnergy(percent)):
            channel, used = compress(svd, policy)
            assert used >= 1
            assert channel.shape == A.shape
            assert _is_valid_channel(channel)

    def test_to_pixel_range_rounds_half_up(self):
        np.testing.assert_array_equal(
            to_pixel_range(np.array([-3.0, 0.5, 1.5, 2.4, 254.5, 300.0])),
            [0.0, 1.0, 2.0, 2.0, 255.0, 255.0],
        )


class TestPolicies:
    """Выбор политики по названию"""

    def test_policy_from_method(self):
        assert policy_from_method("count", 0.2) == ByCount(0.2)
        assert policy_from_method("sum", 0.2) == ByEnergy(0.2)
        assert isinstance(policy_from_method("sum", 0.2), ByEnergy)

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            policy_from_method("energy", 0.2)

    def test_unknown_policy(self, rng):
        svd = decompose([[1.0]], random_source=rng)
        with pytest.raises(TypeError):
            compress(svd, 0.5)
