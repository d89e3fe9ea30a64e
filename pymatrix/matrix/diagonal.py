"""
Square diagonal matrix storing only its main diagonal.

Off-diagonal cells are structurally zero. Any attempt to place a nonzero
value there (direct write, in-place combination with a denser operand,
construction from a general matrix, parameter vector) raises
InvalidAssignmentError, and the check always completes before the diagonal
is touched, so a failed operation leaves the receiver unchanged.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import InvalidAssignmentError, SingularMatrixError
from pymatrix.core.kinds import DIAGONAL, SPARSE
from pymatrix.core.tolerances import DEFAULT_EFFECTIVE_ZERO
from pymatrix.core.validation import (
    check_1d,
    check_array,
    check_dimensions,
    check_effective_zero,
    check_index,
    check_square,
    check_submatrix_range,
)
from pymatrix.matrix.base import BaseMatrix
from pymatrix.matrix.dense import DenseMatrix
from pymatrix.matrix.sparse import SparseMatrix
from pymatrix.vector.base import BaseVector
from pymatrix.vector.dense import DenseVector
from pymatrix.vector.sparse import SparseVector

if TYPE_CHECKING:
    from pymatrix.factory import MatrixFactory


def check_off_diagonal(
    rows: NDArray[np.int64],
    columns: NDArray[np.int64],
    values: NDArray[np.float64],
) -> None:
    """
    Verify no entry off the main diagonal is nonzero.

    Raises:
        InvalidAssignmentError: Naming the first offending entry
    """
    bad = np.flatnonzero((rows != columns) & (values != 0.0))
    if bad.size:
        i = int(bad[0])
        row, column, value = int(rows[i]), int(columns[i]), float(values[i])
        raise InvalidAssignmentError(
            f"Cannot store {value} at ({row}, {column}): off-diagonal entries "
            f"of a diagonal matrix must be zero",
            row=row,
            column=column,
            value=value,
        )


class DiagonalMatrix(BaseMatrix):
    """
    Square diagonal matrix.

    Construction:
        DiagonalMatrix(3)                           # zeros
        DiagonalMatrix.from_diagonal([2.0, 3.0])
        DiagonalMatrix.from_matrix(m)               # m must be square and diagonal
    """

    kind = DIAGONAL

    def __init__(self, size: int):
        size, _ = check_dimensions(size, size)
        self._diagonal = np.zeros(size, dtype=np.float64)

    @classmethod
    def _wrap(cls, diagonal: NDArray[np.float64]) -> DiagonalMatrix:
        result = cls.__new__(cls)
        result._diagonal = diagonal
        return result

    @classmethod
    def from_diagonal(cls, values: ArrayLike) -> DiagonalMatrix:
        array = check_array(values, "values")
        check_1d(array, "values")
        check_dimensions(array.shape[0], array.shape[0])
        return cls._wrap(array)

    @classmethod
    def from_matrix(cls, matrix: BaseMatrix) -> DiagonalMatrix:
        """
        Copy the diagonal of a square matrix whose off-diagonal cells are zero.

        Raises:
            DimensionError: If the matrix is not square
            InvalidAssignmentError: If any off-diagonal cell is nonzero
        """
        check_square(matrix, "DiagonalMatrix.from_matrix")
        if matrix.kind == DIAGONAL:
            return matrix.clone()
        if matrix.kind == SPARSE:
            rows, columns, values = matrix._coordinates()
        else:
            array = matrix.to_array()
            rows, columns = np.nonzero(array)
            values = array[rows, columns]
        check_off_diagonal(rows, columns, values)
        diagonal = np.zeros(matrix.num_rows, dtype=np.float64)
        on = rows == columns
        diagonal[rows[on]] = values[on]
        return cls._wrap(diagonal)

    def _coordinates(self) -> tuple[NDArray[np.int64], NDArray[np.int64], NDArray[np.float64]]:
        # Nonzero diagonal entries as (rows, columns, values).
        index = np.flatnonzero(self._diagonal).astype(np.int64)
        return index, index.copy(), self._diagonal[index]

    def get_diagonal(self) -> DenseVector:
        return DenseVector._wrap(self._diagonal.copy())

    # ------------------------------------------------------------------
    # BaseMatrix interface
    # ------------------------------------------------------------------

    @property
    def num_rows(self) -> int:
        return int(self._diagonal.shape[0])

    @property
    def num_columns(self) -> int:
        return int(self._diagonal.shape[0])

    @property
    def matrix_factory(self) -> MatrixFactory:
        from pymatrix.factory import DIAGONAL_MATRIX_FACTORY

        return DIAGONAL_MATRIX_FACTORY

    def _get(self, row: int, column: int) -> float:
        return float(self._diagonal[row]) if row == column else 0.0

    def _set(self, row: int, column: int, value: float) -> None:
        if row == column:
            self._diagonal[row] = value
        elif value != 0.0:
            raise InvalidAssignmentError(
                f"Cannot store {value} at ({row}, {column}): off-diagonal entries "
                f"of a diagonal matrix must be zero",
                row=row,
                column=column,
                value=value,
            )

    def to_array(self) -> NDArray[np.float64]:
        return np.diag(self._diagonal)

    def clone(self) -> DiagonalMatrix:
        return DiagonalMatrix._wrap(self._diagonal.copy())

    def is_sparse(self) -> bool:
        return True

    def get_entry_count(self) -> int:
        return int(self._diagonal.shape[0])

    def scale_equals(self, scale: float) -> None:
        self._diagonal *= float(scale)

    def zero(self) -> None:
        self._diagonal.fill(0.0)

    def identity(self) -> None:
        self._diagonal.fill(1.0)

    def transpose(self) -> DiagonalMatrix:
        return self.clone()

    def inverse(self) -> DiagonalMatrix:
        """
        Raises:
            SingularMatrixError: If any diagonal entry is zero
        """
        zero = self._diagonal == 0.0
        if np.any(zero):
            raise SingularMatrixError(
                f"Can't invert diagonal matrix: zero pivot at row {int(np.argmax(zero))}",
                matrix_name='A',
                rank=int(np.sum(~zero)),
                expected_rank=self.num_rows,
            )
        return DiagonalMatrix._wrap(1.0 / self._diagonal)

    def pseudo_inverse(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> DiagonalMatrix:
        effective_zero = check_effective_zero(effective_zero)
        keep = np.abs(self._diagonal) > effective_zero
        result = np.zeros_like(self._diagonal)
        result[keep] = 1.0 / self._diagonal[keep]
        return DiagonalMatrix._wrap(result)

    def rank(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> int:
        effective_zero = check_effective_zero(effective_zero)
        return int(np.sum(np.abs(self._diagonal) > effective_zero))

    def log_determinant(self) -> complex:
        # The diagonal entries are the pivots
        with np.errstate(divide='ignore'):
            magnitude = float(np.sum(np.log(np.abs(self._diagonal))))
        negatives = int(np.sum(self._diagonal < 0.0))
        return complex(magnitude, math.pi if negatives % 2 else 0.0)

    def norm_frobenius_squared(self) -> float:
        return float(self._diagonal @ self._diagonal)

    def is_symmetric(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        check_effective_zero(effective_zero)
        return True

    def trace(self) -> float:
        return float(np.sum(self._diagonal))

    def get_sub_matrix(
        self,
        min_row: int,
        max_row: int,
        min_column: int,
        max_column: int,
    ) -> SparseMatrix:
        check_submatrix_range(self, min_row, max_row, min_column, max_column)
        index = np.arange(max(min_row, min_column), min(max_row, max_column) + 1)
        index = index[self._diagonal[index] != 0.0]
        return SparseMatrix._from_triplets(
            max_row - min_row + 1,
            max_column - min_column + 1,
            index - min_row,
            index - min_column,
            self._diagonal[index],
        )

    def _unit_entry(self, index: int) -> SparseVector:
        # Row or column ``index``: at most the single diagonal entry
        value = self._diagonal[index]
        if value == 0.0:
            return SparseVector(self.num_rows)
        return SparseVector._wrap(
            self.num_rows, np.array([index], dtype=np.int64), np.array([value])
        )

    def get_row(self, row: int) -> SparseVector:
        return self._unit_entry(check_index(row, self.num_rows, "row"))

    def get_column(self, column: int) -> SparseVector:
        return self._unit_entry(check_index(column, self.num_columns, "column"))

    def convert_to_vector(self) -> SparseVector:
        n = self.num_rows
        index, _, values = self._coordinates()
        return SparseVector._wrap(n * n, index * (n + 1), values.copy())

    def convert_from_vector(self, parameters: BaseVector) -> None:
        """
        Raises:
            DimensionError: If parameters.dimensionality != n * n
            InvalidAssignmentError: If an off-diagonal position is nonzero
        """
        self._check_parameters(parameters)
        n = self.num_rows
        if n == 0:
            return
        if isinstance(parameters, SparseVector):
            indices, values = parameters._compressed_parts()
        else:
            array = parameters.to_array()
            indices = np.flatnonzero(array)
            values = array[indices]
        rows, columns = indices // n, indices % n
        check_off_diagonal(rows, columns, values)
        diagonal = np.zeros(n, dtype=np.float64)
        on = rows == columns
        diagonal[rows[on]] = values[on]
        self._diagonal[:] = diagonal

    # ------------------------------------------------------------------
    # Overloads: combination
    # ------------------------------------------------------------------

    def _scaled_plus_equals_dense(self, other: DenseMatrix, scale: float) -> None:
        rows, columns = np.nonzero(other._values)
        check_off_diagonal(rows, columns, other._values[rows, columns])
        self._diagonal += scale * np.diagonal(other._values)

    def _scaled_plus_equals_sparse(self, other: SparseMatrix, scale: float) -> None:
        rows, columns, values = other._coordinates()
        check_off_diagonal(rows, columns, values)
        on = rows == columns
        self._diagonal[rows[on]] += scale * values[on]

    def _scaled_plus_equals_diagonal(self, other: DiagonalMatrix, scale: float) -> None:
        self._diagonal += scale * other._diagonal

    def _dot_times_equals_dense(self, other: DenseMatrix) -> None:
        self._diagonal *= np.diagonal(other._values)

    def _dot_times_equals_sparse(self, other: SparseMatrix) -> None:
        index = np.arange(self.num_rows, dtype=np.int64)
        self._diagonal *= other._lookup(index, index)

    def _dot_times_equals_diagonal(self, other: DiagonalMatrix) -> None:
        self._diagonal *= other._diagonal

    # ------------------------------------------------------------------
    # Overloads: products
    # ------------------------------------------------------------------

    def _times_dense(self, other: DenseMatrix) -> DenseMatrix:
        # Scale each row by its diagonal entry
        return DenseMatrix._wrap(self._diagonal[:, np.newaxis] * other._values)

    def _times_sparse(self, other: SparseMatrix) -> BaseMatrix:
        return other._pre_times_matrix(self)

    def _times_diagonal(self, other: DiagonalMatrix) -> DiagonalMatrix:
        return DiagonalMatrix._wrap(self._diagonal * other._diagonal)

    def _times_vector_dense(self, vector: DenseVector) -> DenseVector:
        return DenseVector._wrap(self._diagonal * vector._values)

    def _times_vector_sparse(self, vector: SparseVector) -> SparseVector:
        indices, values = vector._compressed_parts()
        return SparseVector._wrap(
            self.num_rows, indices.copy(), values * self._diagonal[indices]
        )

    # D^T = D, so the row-vector product is the same as the column one
    _pre_times_vector_dense = _times_vector_dense
    _pre_times_vector_sparse = _times_vector_sparse

    # ------------------------------------------------------------------
    # Overloads: solve
    # ------------------------------------------------------------------

    def _check_pivots(self, rows: NDArray[np.int64], values: NDArray[np.float64]) -> None:
        # A zero pivot is only allowed where the right-hand side is zero too
        bad = np.flatnonzero((self._diagonal[rows] == 0.0) & (values != 0.0))
        if bad.size:
            row = int(rows[bad[0]])
            raise SingularMatrixError(
                f"Can't solve: zero pivot at row {row} with a nonzero right-hand side",
                matrix_name='A',
                rank=int(np.count_nonzero(self._diagonal)),
                expected_rank=self.num_rows,
            )

    def _divide(self, rows: NDArray[np.int64], values: NDArray[np.float64]) -> NDArray[np.float64]:
        pivots = self._diagonal[rows]
        return np.divide(
            values, pivots, out=np.zeros_like(values), where=pivots != 0.0
        )

    def _solve_dense(self, rhs: DenseMatrix) -> DenseMatrix:
        # Only rows with a zero pivot need their right-hand side inspected
        zero_rows = np.flatnonzero(self._diagonal == 0.0)
        occupied = np.any(rhs._values[zero_rows] != 0.0, axis=1)
        self._check_pivots(zero_rows, occupied.astype(np.float64))
        pivots = self._diagonal[:, np.newaxis]
        result = np.divide(
            rhs._values, pivots,
            out=np.zeros_like(rhs._values),
            where=pivots != 0.0,
        )
        return DenseMatrix._wrap(result)

    def _solve_sparse(self, rhs: SparseMatrix) -> SparseMatrix:
        rows, columns, values = rhs._coordinates()
        self._check_pivots(rows, values)
        return SparseMatrix._from_triplets(
            rhs.num_rows, rhs.num_columns, rows, columns.copy(), self._divide(rows, values)
        )

    def _solve_diagonal(self, rhs: DiagonalMatrix) -> DiagonalMatrix:
        rows = np.arange(self.num_rows, dtype=np.int64)
        self._check_pivots(rows, rhs._diagonal)
        return DiagonalMatrix._wrap(self._divide(rows, rhs._diagonal))

    def _solve_vector_dense(self, rhs: DenseVector) -> DenseVector:
        rows = np.arange(self.num_rows, dtype=np.int64)
        self._check_pivots(rows, rhs._values)
        return DenseVector._wrap(self._divide(rows, rhs._values))

    def _solve_vector_sparse(self, rhs: SparseVector) -> SparseVector:
        indices, values = rhs._compressed_parts()
        self._check_pivots(indices, values)
        return SparseVector._wrap(self.num_rows, indices.copy(), self._divide(indices, values))
