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
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_types import DegenerateNoiseError
from motion_filter.kalman.kalman_types import MatrixDimensionError
from motion_filter.kalman.kalman_types import NonDiagonalMatrixError


_FLOAT_ARRAY = NDArray[np.float64]

_MatrixData = Union[Sequence[float], _FLOAT_ARRAY]


class Matrix:
    """Dense row-major matrix value type for the Kalman filter engine.

    Responsibility:
        Provide the small set of matrix operations the identity-model
        Kalman recursion needs, with explicit failures on shape mismatch.

    Purpose:
        Hold a rows x cols block of float64 values in a flat row-major
        store and expose multiply, add, subtract, transpose, identity and a
        checked diagonal inverse.

    Inputs/outputs:
        - Every operation returns a new Matrix; operands are never mutated.
        - The backing store is private and read-only. as_array() and
          to_list() return owned copies.

    Data contract:
        - rows and cols are non-negative integers. 0 x 0 is a legal empty
          matrix and is never used to signal failure.
        - len(store) == rows * cols.

    Determinism and edge cases:
        - multiply requires A.cols == B.rows, else MatrixDimensionError.
        - add and subtract require identical shapes, else
          MatrixDimensionError.
        - transpose and identity always succeed.
        - diagonal_inverse requires a square diagonal matrix with non-zero
          finite diagonal entries.

    Equations:
        Matrix product:
            C[i][j] = Σ_k A[i][k] * B[k][j]

        Diagonal inverse:
            D⁻¹[i][i] = 1 / D[i][i]
    """

    __slots__ = ("_rows", "_cols", "_data")

    def __init__(
        self, rows: int, cols: int, data: Optional[_MatrixData] = None
    ) -> None:
        if rows < 0 or cols < 0:
            raise MatrixDimensionError(
                f"Matrix shape must be non-negative, got {rows}x{cols}"
            )

        store: _FLOAT_ARRAY
        if data is None:
            store = np.zeros(rows * cols, dtype=np.float64)
        else:
            store = np.array(data, dtype=np.float64).reshape(-1)
            if store.size != rows * cols:
                raise MatrixDimensionError(
                    f"Matrix {rows}x{cols} requires {rows * cols} values, "
                    f"got {store.size}"
                )

        store.flags.writeable = False

        self._rows: int = rows
        self._cols: int = cols
        self._data: _FLOAT_ARRAY = store

    @staticmethod
    def zeros(rows: int, cols: int) -> Matrix:
        """Return a zero-filled matrix of the given shape."""
        return Matrix(rows, cols)

    @staticmethod
    def identity(size: int) -> Matrix:
        """Return the size x size identity matrix."""
        return Matrix(size, size, np.eye(size, dtype=np.float64))

    @staticmethod
    def diagonal(values: Sequence[float]) -> Matrix:
        """Return a square matrix with the given values on its diagonal."""
        size: int = len(values)
        return Matrix(size, size, np.diag(np.asarray(values, dtype=np.float64)))

    @staticmethod
    def column(values: Sequence[float]) -> Matrix:
        """Return an n x 1 column vector."""
        return Matrix(len(values), 1, values)

    @staticmethod
    def from_rows(rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix from a rectangular nested sequence."""
        if len(rows) == 0:
            return Matrix(0, 0)
        cols: int = len(rows[0])
        row: Sequence[float]
        for row in rows:
            if len(row) != cols:
                raise MatrixDimensionError("from_rows requires a rectangular matrix")
        flat: List[float] = [float(value) for row in rows for value in row]
        return Matrix(len(rows), cols, flat)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def get(self, row: int, col: int) -> float:
        """Return the element at (row, col)."""
        return float(self._data[row * self._cols + col])

    def multiply(self, other: Matrix) -> Matrix:
        """Return self · other."""
        if self._cols != other._rows:
            raise MatrixDimensionError(
                f"Cannot multiply {self._rows}x{self._cols} "
                f"by {other._rows}x{other._cols}"
            )
        product: _FLOAT_ARRAY = self._as_2d() @ other._as_2d()
        return Matrix(self._rows, other._cols, product)

    def add(self, other: Matrix) -> Matrix:
        """Return self + other."""
        self._require_same_shape(other, "add")
        return Matrix(self._rows, self._cols, self._data + other._data)

    def subtract(self, other: Matrix) -> Matrix:
        """Return self - other."""
        self._require_same_shape(other, "subtract")
        return Matrix(self._rows, self._cols, self._data - other._data)

    def transpose(self) -> Matrix:
        """Return the transpose."""
        return Matrix(self._cols, self._rows, self._as_2d().T)

    def diagonal_values(self) -> List[float]:
        """Return the main diagonal as a list."""
        size: int = min(self._rows, self._cols)
        return [self.get(i, i) for i in range(size)]

    def is_diagonal(self) -> bool:
        """Return True for a square matrix with zero off-diagonal entries."""
        if self._rows != self._cols:
            return False
        matrix: _FLOAT_ARRAY = self._as_2d()
        off_diagonal: _FLOAT_ARRAY = matrix - np.diag(np.diag(matrix))
        return not bool(np.any(off_diagonal))

    def diagonal_inverse(self) -> Matrix:
        """Return the inverse of a diagonal matrix.

        Only the diagonal is inverted, so the result equals the true inverse
        exactly when the matrix is diagonal. That precondition is checked
        rather than assumed.
        """
        if not self.is_diagonal():
            raise NonDiagonalMatrixError(
                f"diagonal_inverse requires a square diagonal matrix, "
                f"got {self._rows}x{self._cols}"
            )
        inverted: List[float] = []
        i: int
        value: float
        for i, value in enumerate(self.diagonal_values()):
            if value == 0.0 or not math.isfinite(value):
                raise DegenerateNoiseError(
                    f"Diagonal entry {i} is {value}, matrix is not invertible"
                )
            inverted.append(1.0 / value)
        return Matrix.diagonal(inverted)

    def as_array(self) -> _FLOAT_ARRAY:
        """Return an owned, writeable rows x cols numpy copy."""
        return np.array(self._as_2d(), dtype=np.float64)

    def to_list(self) -> List[List[float]]:
        """Return the matrix as a nested list of rows."""
        return [
            [self.get(i, j) for j in range(self._cols)] for i in range(self._rows)
        ]

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.multiply(other)

    def __add__(self, other: Matrix) -> Matrix:
        return self.add(other)

    def __sub__(self, other: Matrix) -> Matrix:
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._data, other._data)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self._rows}, {self._cols}, {self.to_list()!r})"

    def _as_2d(self) -> _FLOAT_ARRAY:
        return self._data.reshape(self._rows, self._cols)

    def _require_same_shape(self, other: Matrix, name: str) -> None:
        if self.shape != other.shape:
            raise MatrixDimensionError(
                f"Cannot {name} {self._rows}x{self._cols} "
                f"and {other._rows}x{other._cols}"
            )
