################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

import math
import unittest
from typing import List

import numpy as np

from motion_filter.kalman.kalman_types import DegenerateNoiseError
from motion_filter.kalman.kalman_types import MatrixDimensionError
from motion_filter.kalman.kalman_types import NonDiagonalMatrixError
from motion_filter.kalman.matrix import Matrix


class TestMatrix(unittest.TestCase):
    """Tests for the Matrix value type."""

    def test_zeros_shape_and_values(self) -> None:
        """zeros returns a zero-filled matrix of the requested shape."""
        A: Matrix = Matrix.zeros(2, 3)
        self.assertEqual(A.shape, (2, 3))
        self.assertEqual(A.to_list(), [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])

    def test_identity_squared_is_identity(self) -> None:
        """identity(n) · identity(n) == identity(n) for n in 0..5."""
        n: int
        for n in range(6):
            I: Matrix = Matrix.identity(n)
            self.assertEqual(I @ I, I)
            self.assertEqual(I.shape, (n, n))

    def test_double_transpose_is_identity(self) -> None:
        """transpose(transpose(A)) == A."""
        A: Matrix = Matrix.from_rows([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        self.assertEqual(A.transpose().shape, (3, 2))
        self.assertEqual(A.transpose().get(2, 1), 6.0)
        self.assertEqual(A.transpose().transpose(), A)

    def test_multiply(self) -> None:
        """multiply matches a hand-computed product."""
        A: Matrix = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])
        B: Matrix = Matrix.from_rows([[5.0], [6.0]])
        product: Matrix = A.multiply(B)
        self.assertEqual(product.shape, (2, 1))
        self.assertEqual(product.to_list(), [[17.0], [39.0]])

    def test_multiply_dimension_mismatch(self) -> None:
        """multiply raises instead of returning an empty matrix."""
        A: Matrix = Matrix.zeros(2, 3)
        B: Matrix = Matrix.zeros(2, 3)
        with self.assertRaises(MatrixDimensionError):
            A @ B

    def test_add_and_subtract(self) -> None:
        """add and subtract work elementwise."""
        A: Matrix = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])
        B: Matrix = Matrix.from_rows([[0.5, 0.5], [0.5, 0.5]])
        self.assertEqual((A + B).to_list(), [[1.5, 2.5], [3.5, 4.5]])
        self.assertEqual((A - B).to_list(), [[0.5, 1.5], [2.5, 3.5]])

    def test_add_subtract_shape_mismatch(self) -> None:
        """add and subtract reject different shapes."""
        A: Matrix = Matrix.zeros(2, 2)
        B: Matrix = Matrix.zeros(2, 1)
        with self.assertRaises(MatrixDimensionError):
            A.add(B)
        with self.assertRaises(MatrixDimensionError):
            A.subtract(B)

    def test_empty_matrix_is_a_value(self) -> None:
        """A legitimate 0x0 product is not an error."""
        A: Matrix = Matrix.zeros(0, 3)
        B: Matrix = Matrix.zeros(3, 0)
        self.assertEqual((A @ B).shape, (0, 0))

    def test_constructor_rejects_wrong_store_size(self) -> None:
        """The backing store must hold rows * cols values."""
        with self.assertRaises(MatrixDimensionError):
            Matrix(2, 2, [1.0, 2.0, 3.0])
        with self.assertRaises(MatrixDimensionError):
            Matrix(-1, 2)

    def test_from_rows_rejects_ragged(self) -> None:
        """from_rows requires rectangular input."""
        with self.assertRaises(MatrixDimensionError):
            Matrix.from_rows([[1.0, 2.0], [3.0]])

    def test_diagonal_inverse(self) -> None:
        """diagonal_inverse inverts each diagonal entry."""
        D: Matrix = Matrix.diagonal([2.0, 4.0, 0.5])
        inverse: Matrix = D.diagonal_inverse()
        self.assertEqual(inverse.diagonal_values(), [0.5, 0.25, 2.0])
        self.assertEqual(D @ inverse, Matrix.identity(3))

    def test_diagonal_inverse_rejects_full_matrix(self) -> None:
        """diagonal_inverse refuses matrices with off-diagonal terms."""
        A: Matrix = Matrix.from_rows([[1.0, 0.1], [0.0, 1.0]])
        self.assertFalse(A.is_diagonal())
        with self.assertRaises(NonDiagonalMatrixError):
            A.diagonal_inverse()
        with self.assertRaises(NonDiagonalMatrixError):
            Matrix.zeros(2, 3).diagonal_inverse()

    def test_diagonal_inverse_rejects_zero_entry(self) -> None:
        """A zero diagonal entry is reported instead of producing inf."""
        D: Matrix = Matrix.diagonal([1.0, 0.0])
        with self.assertRaises(DegenerateNoiseError):
            D.diagonal_inverse()

    def test_values_are_not_shared(self) -> None:
        """as_array returns an owned copy."""
        A: Matrix = Matrix.identity(2)
        array: np.ndarray = A.as_array()
        array[0, 1] = 5.0
        self.assertEqual(A.get(0, 1), 0.0)

        source: List[float] = [1.0, 2.0]
        column: Matrix = Matrix.column(source)
        source[0] = math.nan
        self.assertEqual(column.get(0, 0), 1.0)

    def test_equality(self) -> None:
        """Equality compares shape and values."""
        self.assertEqual(Matrix.zeros(1, 2), Matrix(1, 2, [0.0, 0.0]))
        self.assertNotEqual(Matrix.zeros(1, 2), Matrix.zeros(2, 1))
        self.assertNotEqual(Matrix.identity(2), Matrix.zeros(2, 2))


if __name__ == "__main__":
    unittest.main()
