"""
Тесты базовых операций с матрицами.
"""

import numpy as np
import pytest

from svd_compressor import matrix_ops
from svd_compressor.errors import DimensionMismatch


class TestPrimitives:
    """transpose / multiply / multiply_vector"""

    def test_transpose(self):
        A = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        T = matrix_ops.transpose(A)
        assert T.shape == (3, 2)
        np.testing.assert_array_equal(T, A.T)

    def test_transpose_is_a_copy(self):
        A = np.array([[1.0, 2.0], [3.0, 4.0]])
        T = matrix_ops.transpose(A)
        T[0, 1] = 99.0
        assert A[1, 0] == 3.0

    def test_multiply(self):
        A = [[1, 2], [3, 4]]
        B = [[5, 6], [7, 8]]
        np.testing.assert_array_equal(matrix_ops.multiply(A, B), [[19, 22], [43, 50]])

    def test_multiply_mismatch(self):
        with pytest.raises(DimensionMismatch):
            matrix_ops.multiply(np.ones((2, 3)), np.ones((2, 3)))

    def test_multiply_vector(self):
        A = [[1, 2, 3], [4, 5, 6]]
        np.testing.assert_array_equal(matrix_ops.multiply_vector(A, [1, 0, -1]), [-2, -2])

    def test_multiply_vector_mismatch(self):
        with pytest.raises(DimensionMismatch):
            matrix_ops.multiply_vector(np.ones((2, 3)), [1.0, 2.0])

    def test_vector_helpers(self):
        assert matrix_ops.dot([1, 2, 3], [4, 5, 6]) == 32.0
        assert matrix_ops.norm([3, 4]) == 5.0
        np.testing.assert_array_equal(matrix_ops.outer([1, 2], [3, 4]), [[3, 4], [6, 8]])
        with pytest.raises(DimensionMismatch):
            matrix_ops.dot([1, 2], [1, 2, 3])


class TestAsMatrix:
    """Проверка входных матриц"""

    def test_ragged(self):
        with pytest.raises(DimensionMismatch):
            matrix_ops.as_matrix([[1, 2], [3]])

    def test_empty(self):
        with pytest.raises(DimensionMismatch):
            matrix_ops.as_matrix([])
        with pytest.raises(DimensionMismatch):
            matrix_ops.as_matrix(np.zeros((3, 0)))

    def test_not_2d(self):
        with pytest.raises(DimensionMismatch):
            matrix_ops.as_matrix([1, 2, 3])
        with pytest.raises(DimensionMismatch):
            matrix_ops.as_matrix(np.zeros((2, 2, 2)))

    def test_private_copy(self):
        A = np.array([[1, 2], [3, 4]])
        M = matrix_ops.as_matrix(A)
        M[0, 0] = 100
        assert A[0, 0] == 1
        assert M.dtype == float

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            matrix_ops.as_matrix([[1, 2], [3]])
