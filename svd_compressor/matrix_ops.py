import numpy as np

from .errors import DimensionMismatch

# === Базовые операции с матрицами ===
# Только эти функции используются в решателе собственных значений и SVD.


def as_matrix(A):
    """Проверяет матрицу (непустая, все строки одной длины) и возвращает её float-копию"""
    if isinstance(A, np.ndarray):
        if A.ndim != 2:
            raise DimensionMismatch(f"Ожидалась 2D матрица, получено ndim={A.ndim}")
        matrix = A.astype(float, copy=True)
    else:
        rows = list(A)
        try:
            lengths = {len(row) for row in rows}
        except TypeError as e:
            raise DimensionMismatch("Ожидалась 2D матрица") from e
        if len(lengths) > 1:
            raise DimensionMismatch("Строки матрицы имеют разную длину")
        try:
            matrix = np.array(rows, dtype=float)
        except (TypeError, ValueError) as e:
            raise DimensionMismatch(f"Некорректная матрица: {e}") from e
        if matrix.ndim != 2:
            raise DimensionMismatch("Ожидалась 2D матрица")

    if matrix.shape[0] == 0 or matrix.shape[1] == 0:
        raise DimensionMismatch("Пустая матрица")
    return matrix


def as_vector(v):
    vector = np.array(v, dtype=float)
    if vector.ndim != 1:
        raise DimensionMismatch(f"Ожидался вектор, получено ndim={vector.ndim}")
    return vector


def transpose(A):
    """Транспонирование (новая матрица, не представление исходной)"""
    return np.ascontiguousarray(np.asarray(A, dtype=float).T)


def multiply(A, B):
    """Произведение матриц A·B"""
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    if A.ndim != 2 or B.ndim != 2:
        raise DimensionMismatch("multiply ожидает две 2D матрицы")
    if A.shape[1] != B.shape[0]:
        raise DimensionMismatch(
            f"Нельзя умножить {A.shape[0]}x{A.shape[1]} на {B.shape[0]}x{B.shape[1]}"
        )
    return A @ B


def multiply_vector(A, v):
    """Произведение матрицы на вектор A·v"""
    A = np.asarray(A, dtype=float)
    v = as_vector(v)
    if A.ndim != 2:
        raise DimensionMismatch("multiply_vector ожидает 2D матрицу")
    if A.shape[1] != v.shape[0]:
        raise DimensionMismatch(
            f"Нельзя умножить {A.shape[0]}x{A.shape[1]} на вектор длины {v.shape[0]}"
        )
    return A @ v


# === Векторы ===

def dot(u, v):
    u = as_vector(u)
    v = as_vector(v)
    if u.shape != v.shape:
        raise DimensionMismatch(f"Длины векторов {u.shape[0]} и {v.shape[0]} не совпадают")
    return float(u @ v)


def norm(v):
    return float(np.sqrt(dot(v, v)))


def outer(u, v):
    return np.outer(as_vector(u), as_vector(v))
