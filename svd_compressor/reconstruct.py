import math
from dataclasses import dataclass

import numpy as np

from . import matrix_ops
from .svd import contributing

# === Политики усечения ===


@dataclass(frozen=True)
class ByCount:
    """Доля числа сингулярных чисел"""
    percent: float


@dataclass(frozen=True)
class ByEnergy:
    """Доля суммы сингулярных чисел"""
    percent: float


METHODS = ("count", "sum")


def policy_from_method(method, percent):
    """'count': по доле числа сингулярных чисел, 'sum': по доле их суммы"""
    if method == "count":
        return ByCount(percent)
    if method == "sum":
        return ByEnergy(percent)
    raise ValueError(f"Неизвестный способ сжатия: {method!r} (ожидается одно из {METHODS})")


def _clip_percent(percent):
    return min(1.0, max(0.0, float(percent)))


def retained_by_count(sigma, percent):
    total = len(sigma)
    if total == 0:
        return 0
    return min(total, max(1, math.ceil(total * _clip_percent(percent))))


def retained_by_energy(sigma, percent):
    """Сколько компонент нужно, чтобы сумма sigma превысила долю percent.

    Компонента, на которой порог пересечён, тоже включается.
    """
    if len(sigma) == 0:
        return 0
    threshold = _clip_percent(percent) * float(np.sum(sigma))
    running = 0.0
    for k, s in enumerate(sigma):
        running += s
        if running > threshold:
            return k + 1
    return len(sigma)


def reconstruct(svd, retain):
    """Сумма первых retain слагаемых sigma_k · u_k · v_kᵗ (без обрезки)"""
    m, n = svd.shape
    channel = np.zeros((m, n))
    for k in range(min(retain, len(svd.sigma))):
        if svd.sigma[k] == 0:
            continue
        channel += svd.sigma[k] * matrix_ops.outer(svd.U[:, k], svd.V_T[k])
    return channel


def to_pixel_range(channel):
    """Обрезка в [0, 255] и округление половин вверх"""
    return np.floor(np.clip(channel, 0, 255) + 0.5)


def _used(svd, retain):
    # В отчёт идут только компоненты с ненулевым вкладом, но не меньше одной
    return max(1, contributing(svd, retain))


def compress_by_count(svd, percent):
    retain = retained_by_count(svd.sigma, percent)
    return to_pixel_range(reconstruct(svd, retain)), _used(svd, retain)


def compress_by_energy(svd, percent):
    retain = retained_by_energy(svd.sigma, percent)
    return to_pixel_range(reconstruct(svd, retain)), _used(svd, retain)


def compress(svd, policy):
    """Восстановленный канал и число использованных компонент"""
    if isinstance(policy, ByCount):
        return compress_by_count(svd, policy.percent)
    if isinstance(policy, ByEnergy):
        return compress_by_energy(svd, policy.percent)
    raise TypeError(f"Неизвестная политика: {policy!r}")
