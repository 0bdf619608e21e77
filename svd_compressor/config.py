from dataclasses import dataclass, replace
from typing import Optional

# === Настройки ===

# Пороги умножаются на ‖A‖_F исходной матрицы, так что для пиксельных
# матриц (λ до ~10¹⁰) они того же порядка, что и для единичных
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 500

# Ниже ZERO_TOLERANCE·‖A‖_F остаток матрицы считается нулевым
ZERO_TOLERANCE = 1e-10

# Для больших матриц точность жертвуется ради времени
LARGE_MATRIX_PIXELS = 250_000
LARGE_TOLERANCE = 1e-5
LARGE_MAX_ITERATIONS = 200
LARGE_MAX_EIGENVALUES = 150

# Ограничение размера стороны изображения при загрузке (как в превью)
DEFAULT_MAX_SIZE = 800


@dataclass(frozen=True)
class SolverConfig:
    """Параметры степенного метода"""
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_eigenvalues: Optional[int] = None  # None: min(m, n)

    @classmethod
    def for_shape(cls, rows, cols):
        """Настройки под размер матрицы: для больших грубее, но быстрее"""
        if rows * cols > LARGE_MATRIX_PIXELS:
            return cls(
                tolerance=LARGE_TOLERANCE,
                max_iterations=LARGE_MAX_ITERATIONS,
                max_eigenvalues=LARGE_MAX_EIGENVALUES,
            )
        return cls()

    def with_overrides(self, **kwargs):
        """Копия с заменой только явно заданных (не None) полей"""
        changes = {k: v for k, v in kwargs.items() if v is not None}
        return replace(self, **changes) if changes else self

    def rank_cap(self, rows, cols):
        cap = min(rows, cols)
        if self.max_eigenvalues is not None:
            cap = min(cap, self.max_eigenvalues)
        return cap
