"""
Dense matrix backed by a complete row-major float64 grid.

This is the reference representation: every operation is computed over
the full grid and never short-circuited by sparsity. Mixed-type
operations still use the argument's layout, touching only the stored
entries of a sparse operand and only the diagonal of a diagonal one.
"""

from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.kinds import DENSE
from pymatrix.core.tolerances import DEFAULT_EFFECTIVE_ZERO
from pymatrix.core.validation import (
    check_2d,
    check_array,
    check_dimensions,
    check_effective_zero,
    check_index,
    check_square,
    check_submatrix_range,
)
from pymatrix.core.exceptions import DimensionError
from pymatrix.matrix import _linalg
from pymatrix.matrix.base import BaseMatrix
from pymatrix.vector.base import BaseVector
from pymatrix.vector.dense import DenseVector

if TYPE_CHECKING:
    from pymatrix.factory import MatrixFactory
    from pymatrix.matrix.diagonal import DiagonalMatrix
    from pymatrix.matrix.sparse import SparseMatrix
    from pymatrix.vector.sparse import SparseVector


class DenseMatrix(BaseMatrix):
    """
    Dense 2-D matrix.

    Construction:
        DenseMatrix(2, 3)                              # zeros
        DenseMatrix.from_array([[1.0, 2.0], [3.0, 4.0]])
        DenseMatrix.from_matrix(m)                     # any representation
        DenseMatrix.from_rows([v0, v1])                # equal-length vectors

    Raises:
        MatrixOverflowError: If num_rows * num_columns exceeds MAX_ENTRY_COUNT
    """

    kind = DENSE

    def __init__(self, num_rows: int, num_columns: int):
        num_rows, num_columns = check_dimensions(num_rows, num_columns)
        self._values = np.zeros((num_rows, num_columns), dtype=np.float64)

    @classmethod
    def _wrap(cls, values: NDArray[np.float64]) -> DenseMatrix:
        # Takes ownership of a 2-D float64 array without copying.
        result = cls.__new__(cls)
        result._values = values
        return result

    @classmethod
    def from_array(cls, values: ArrayLike) -> DenseMatrix:
        array = check_array(values, "values")
        check_2d(array, "values")
        check_dimensions(*array.shape)
        return cls._wrap(array)

    @classmethod
    def from_matrix(cls, matrix: BaseMatrix) -> DenseMatrix:
        return cls._wrap(matrix.to_array())

    @classmethod
    def from_rows(cls, rows: Sequence[BaseVector]) -> DenseMatrix:
        """
        Stack vectors as rows.

        Raises:
            DimensionError: If the vectors differ in dimensionality
        """
        rows = list(rows)
        if not rows:
            return cls(0, 0)
        width = rows[0].dimensionality
        for i, row in enumerate(rows):
            if row.dimensionality != width:
                raise DimensionError(
                    f"rows[{i}]: expected dimensionality {width}, got {row.dimensionality}"
                )
        check_dimensions(len(rows), width)
        return cls._wrap(np.vstack([row.to_array() for row in rows]))

    # ------------------------------------------------------------------
    # BaseMatrix interface
    # ------------------------------------------------------------------

    @property
    def num_rows(self) -> int:
        return int(self._values.shape[0])

    @property
    def num_columns(self) -> int:
        return int(self._values.shape[1])

    @property
    def matrix_factory(self) -> MatrixFactory:
        from pymatrix.factory import DENSE_MATRIX_FACTORY

        return DENSE_MATRIX_FACTORY

    def _get(self, row: int, column: int) -> float:
        return float(self._values[row, column])

    def _set(self, row: int, column: int, value: float) -> None:
        self._values[row, column] = value

    def to_array(self) -> NDArray[np.float64]:
        return self._values.copy()

    def clone(self) -> DenseMatrix:
        return DenseMatrix._wrap(self._values.copy())

    def is_sparse(self) -> bool:
        return False

    def get_entry_count(self) -> int:
        return int(self._values.size)

    def scale_equals(self, scale: float) -> None:
        self._values *= float(scale)

    def zero(self) -> None:
        self._values.fill(0.0)

    def identity(self) -> None:
        self._values.fill(0.0)
        np.fill_diagonal(self._values, 1.0)

    def transpose(self) -> DenseMatrix:
        return DenseMatrix._wrap(self._values.T.copy())

    def inverse(self) -> DenseMatrix:
        """
        Raises:
            DimensionError: If the matrix is not square
            SingularMatrixError: If the matrix is singular
        """
        check_square(self, "inverse")
        return DenseMatrix._wrap(_linalg.inverse(self._values))

    def pseudo_inverse(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> DenseMatrix:
        effective_zero = check_effective_zero(effective_zero)
        return DenseMatrix._wrap(_linalg.pseudo_inverse(self._values, effective_zero))

    def rank(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> int:
        effective_zero = check_effective_zero(effective_zero)
        return _linalg.rank(self._values, effective_zero)

    def log_determinant(self) -> complex:
        check_square(self, "log_determinant")
        return _linalg.log_determinant(self._values)

    def norm_frobenius_squared(self) -> float:
        return float(np.sum(self._values * self._values))

    def is_symmetric(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        effective_zero = check_effective_zero(effective_zero)
        if not self.is_square():
            return False
        return bool(np.all(np.abs(self._values - self._values.T) <= effective_zero))

    def get_sub_matrix(
        self,
        min_row: int,
        max_row: int,
        min_column: int,
        max_column: int,
    ) -> DenseMatrix:
        check_submatrix_range(self, min_row, max_row, min_column, max_column)
        return DenseMatrix._wrap(
            self._values[min_row:max_row + 1, min_column:max_column + 1].copy()
        )

    def get_row(self, row: int) -> DenseVector:
        row = check_index(row, self.num_rows, "row")
        return DenseVector._wrap(self._values[row, :].copy())

    def get_column(self, column: int) -> DenseVector:
        column = check_index(column, self.num_columns, "column")
        return DenseVector._wrap(self._values[:, column].copy())

    def convert_to_vector(self) -> DenseVector:
        return DenseVector._wrap(self._values.reshape(-1).copy())

    def convert_from_vector(self, parameters: BaseVector) -> None:
        self._check_parameters(parameters)
        self._values[:, :] = parameters.to_array().reshape(self.shape)

    def trace(self) -> float:
        return float(np.trace(self._values))

    # ------------------------------------------------------------------
    # Overloads: combination
    # ------------------------------------------------------------------

    def _scaled_plus_equals_dense(self, other: DenseMatrix, scale: float) -> None:
        self._values += scale * other._values

    def _scaled_plus_equals_sparse(self, other: SparseMatrix, scale: float) -> None:
        rows, columns, values = other._coordinates()
        self._values[rows, columns] += scale * values

    def _scaled_plus_equals_diagonal(self, other: DiagonalMatrix, scale: float) -> None:
        index = np.arange(self.num_rows)
        self._values[index, index] += scale * other._diagonal

    def _dot_times_equals_dense(self, other: DenseMatrix) -> None:
        self._values *= other._values

    def _dot_times_equals_sparse(self, other: SparseMatrix) -> None:
        rows, columns, values = other._coordinates()
        result = np.zeros_like(self._values)
        result[rows, columns] = self._values[rows, columns] * values
        self._values[:, :] = result

    def _dot_times_equals_diagonal(self, other: DiagonalMatrix) -> None:
        diagonal = np.diag(self._values) * other._diagonal
        self._values.fill(0.0)
        np.fill_diagonal(self._values, diagonal)

    # ------------------------------------------------------------------
    # Overloads: products
    # ------------------------------------------------------------------

    def _times_dense(self, other: DenseMatrix) -> DenseMatrix:
        return DenseMatrix._wrap(self._values @ other._values)

    def _times_sparse(self, other: SparseMatrix) -> BaseMatrix:
        return other._pre_times_matrix(self)

    def _times_diagonal(self, other: DiagonalMatrix) -> DenseMatrix:
        # Scale each column by its diagonal entry
        return DenseMatrix._wrap(self._values * other._diagonal[np.newaxis, :])

    def _times_vector_dense(self, vector: DenseVector) -> DenseVector:
        return DenseVector._wrap(self._values @ vector._values)

    def _times_vector_sparse(self, vector: SparseVector) -> DenseVector:
        indices, values = vector._compressed_parts()
        return DenseVector._wrap(self._values[:, indices] @ values)

    def _pre_times_vector_dense(self, vector: DenseVector) -> DenseVector:
        return DenseVector._wrap(vector._values @ self._values)

    def _pre_times_vector_sparse(self, vector: SparseVector) -> DenseVector:
        indices, values = vector._compressed_parts()
        return DenseVector._wrap(values @ self._values[indices, :])

    # ------------------------------------------------------------------
    # Overloads: solve
    # ------------------------------------------------------------------

    def _solve_matrix(self, rhs: BaseMatrix) -> DenseMatrix:
        return DenseMatrix._wrap(_linalg.solve(self._values, rhs.to_array()))

    _solve_dense = _solve_matrix
    _solve_sparse = _solve_matrix
    _solve_diagonal = _solve_matrix

    def _solve_vector(self, rhs: BaseVector) -> DenseVector:
        return DenseVector._wrap(_linalg.solve(self._values, rhs.to_array()))

    _solve_vector_dense = _solve_vector
    _solve_vector_sparse = _solve_vector
