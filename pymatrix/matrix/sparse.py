"""
Sparse matrix in compressed-row storage.

Storage has two states:
    - Compressed: three parallel arrays, ``values`` / ``column_indices``
      (sorted by column within each row) and ``first_in_rows`` (length
      num_rows + 1, the offset of each row's first entry)
    - Uncompressed: a dict ``(row, column) -> value`` accepting writes in
      any order

Writing to a position that is not already stored moves the matrix to the
uncompressed state. Every read, arithmetic operation and accessor calls
``compress()`` first, so observable values always come from the canonical
form. Explicit zeros already stored stay stored until ``eliminate_zeros()``.

Arithmetic against sparse or diagonal operands merges coordinate lists
(duplicates summed) instead of materializing a dense grid.
"""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import (
    DimensionError,
    OutOfRangeError,
    SparseEfficiencyWarning,
    ValidationError,
)
from pymatrix.core.kinds import DIAGONAL, SPARSE, resolve
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
from pymatrix.matrix import _linalg
from pymatrix.matrix.base import BaseMatrix
from pymatrix.matrix.dense import DenseMatrix
from pymatrix.vector.base import BaseVector
from pymatrix.vector.dense import DenseVector
from pymatrix.vector.sparse import SparseVector

if TYPE_CHECKING:
    from pymatrix.factory import MatrixFactory
    from pymatrix.matrix.diagonal import DiagonalMatrix


def compress_coordinates(
    rows: NDArray[np.int64],
    columns: NDArray[np.int64],
    values: NDArray[np.float64],
    num_rows: int,
    num_columns: int,
) -> tuple[NDArray[np.float64], NDArray[np.int64], NDArray[np.int64]]:
    """
    Build compressed-row arrays from coordinate triplets.

    Entries are sorted by (row, column); duplicate coordinates are summed.

    Args:
        rows: Row of each entry
        columns: Column of each entry
        values: Value of each entry
        num_rows: Row count of the target matrix
        num_columns: Column count of the target matrix

    Returns:
        (values, column_indices, first_in_rows)
    """
    first_in_rows = np.zeros(num_rows + 1, dtype=np.int64)
    if values.size == 0:
        return (
            np.zeros(0, dtype=np.float64),
            np.zeros(0, dtype=np.int64),
            first_in_rows,
        )
    keys = rows.astype(np.int64) * num_columns + columns.astype(np.int64)
    unique, inverse = np.unique(keys, return_inverse=True)
    merged = np.zeros(unique.shape[0], dtype=np.float64)
    np.add.at(merged, inverse.reshape(-1), values)
    merged_rows = unique // num_columns
    np.cumsum(np.bincount(merged_rows, minlength=num_rows), out=first_in_rows[1:])
    return merged, (unique % num_columns).astype(np.int64), first_in_rows


class SparseMatrix(BaseMatrix):
    """
    Compressed-row sparse matrix.

    Construction:
        SparseMatrix(3, 4)                                        # empty
        SparseMatrix.from_array([[0.0, 1.0], [2.0, 0.0]])        # keeps nonzeros
        SparseMatrix.from_matrix(m)                               # any representation
        SparseMatrix.from_coordinates(rows, cols, vals, (3, 4))  # duplicates summed
        SparseMatrix.from_arrays(values, column_indices, first_in_rows, (3, 4))

    Raises:
        MatrixOverflowError: If num_rows * num_columns exceeds MAX_ENTRY_COUNT
    """

    kind = SPARSE

    def __init__(self, num_rows: int, num_columns: int):
        self._num_rows, self._num_columns = check_dimensions(num_rows, num_columns)
        self._values = np.zeros(0, dtype=np.float64)
        self._column_indices = np.zeros(0, dtype=np.int64)
        self._first_in_rows = np.zeros(self._num_rows + 1, dtype=np.int64)
        self._buffer: dict[tuple[int, int], float] | None = None

    @classmethod
    def _wrap(
        cls,
        num_rows: int,
        num_columns: int,
        parts: tuple[NDArray[np.float64], NDArray[np.int64], NDArray[np.int64]],
    ) -> SparseMatrix:
        # Takes ownership of canonical compressed-row arrays.
        result = cls.__new__(cls)
        result._num_rows = num_rows
        result._num_columns = num_columns
        result._values, result._column_indices, result._first_in_rows = parts
        result._buffer = None
        return result

    @classmethod
    def _from_triplets(
        cls,
        num_rows: int,
        num_columns: int,
        rows: NDArray[np.int64],
        columns: NDArray[np.int64],
        values: NDArray[np.float64],
    ) -> SparseMatrix:
        parts = compress_coordinates(rows, columns, values, num_rows, num_columns)
        return cls._wrap(num_rows, num_columns, parts)

    @classmethod
    def from_array(cls, values: ArrayLike) -> SparseMatrix:
        array = check_array(values, "values")
        check_2d(array, "values")
        num_rows, num_columns = check_dimensions(*array.shape)
        rows, columns = np.nonzero(array)
        return cls._from_triplets(num_rows, num_columns, rows, columns, array[rows, columns])

    @classmethod
    def from_matrix(cls, matrix: BaseMatrix) -> SparseMatrix:
        if matrix.kind in (SPARSE, DIAGONAL):
            rows, columns, values = matrix._coordinates()
            return cls._from_triplets(
                matrix.num_rows, matrix.num_columns, rows, columns, values.copy()
            )
        return cls.from_array(matrix.to_array())

    @classmethod
    def from_coordinates(
        cls,
        rows: ArrayLike,
        columns: ArrayLike,
        values: ArrayLike,
        shape: tuple[int, int],
    ) -> SparseMatrix:
        """
        Build from coordinate triplets; duplicate coordinates are summed.

        Raises:
            DimensionError: If the three sequences differ in length
            OutOfRangeError: If any coordinate lies outside ``shape``
        """
        num_rows, num_columns = check_dimensions(*shape)
        row_array = np.asarray(rows, dtype=np.int64).reshape(-1)
        column_array = np.asarray(columns, dtype=np.int64).reshape(-1)
        value_array = check_array(values, "values").reshape(-1)
        if not (row_array.shape == column_array.shape == value_array.shape):
            raise DimensionError(
                f"rows, columns and values must have equal lengths, got "
                f"{row_array.shape[0]}, {column_array.shape[0]}, {value_array.shape[0]}"
            )
        if row_array.size:
            if row_array.min() < 0 or row_array.max() >= num_rows:
                raise OutOfRangeError(
                    f"rows: entries must lie in [0, {num_rows})", bound=num_rows
                )
            if column_array.min() < 0 or column_array.max() >= num_columns:
                raise OutOfRangeError(
                    f"columns: entries must lie in [0, {num_columns})", bound=num_columns
                )
        return cls._from_triplets(num_rows, num_columns, row_array, column_array, value_array)

    @classmethod
    def from_arrays(
        cls,
        values: ArrayLike,
        column_indices: ArrayLike,
        first_in_rows: ArrayLike,
        shape: tuple[int, int],
    ) -> SparseMatrix:
        """
        Build from compressed-row parts, validating the structure.

        Args:
            values: Stored values, shape (nnz,)
            column_indices: Column of each value, strictly increasing within
                each row, shape (nnz,)
            first_in_rows: Row offsets, non-decreasing, starting at 0 and
                ending at nnz, shape (num_rows + 1,)
            shape: (num_rows, num_columns)

        Raises:
            ValidationError: If the parts violate compressed-row invariants
        """
        num_rows, num_columns = check_dimensions(*shape)
        value_array = check_array(values, "values").reshape(-1)
        index_array = np.array(column_indices, dtype=np.int64).reshape(-1)
        offset_array = np.array(first_in_rows, dtype=np.int64).reshape(-1)
        nnz = value_array.shape[0]
        if index_array.shape[0] != nnz:
            raise ValidationError(
                f"column_indices: expected {nnz} entries, got {index_array.shape[0]}"
            )
        if offset_array.shape[0] != num_rows + 1:
            raise ValidationError(
                f"first_in_rows: expected {num_rows + 1} entries, got {offset_array.shape[0]}"
            )
        if offset_array[0] != 0 or offset_array[-1] != nnz:
            raise ValidationError(
                f"first_in_rows: must start at 0 and end at {nnz}"
            )
        if np.any(np.diff(offset_array) < 0):
            raise ValidationError("first_in_rows: must be non-decreasing")
        if nnz and (index_array.min() < 0 or index_array.max() >= num_columns):
            raise ValidationError(
                f"column_indices: entries must lie in [0, {num_columns})"
            )
        row_of_entry = np.repeat(np.arange(num_rows), np.diff(offset_array))
        same_row = row_of_entry[1:] == row_of_entry[:-1]
        if np.any(same_row & (np.diff(index_array) <= 0)):
            raise ValidationError(
                "column_indices: must be strictly increasing within each row"
            )
        return cls._wrap(num_rows, num_columns, (value_array, index_array, offset_array))

    # ------------------------------------------------------------------
    # Compression state machine
    # ------------------------------------------------------------------

    def is_compressed(self) -> bool:
        return self._buffer is None

    def compress(self) -> None:
        """Sort and merge buffered entries into compressed-row arrays."""
        if self._buffer is None:
            return
        count = len(self._buffer)
        keys = np.array(list(self._buffer.keys()), dtype=np.int64).reshape(count, 2)
        values = np.fromiter(self._buffer.values(), dtype=np.float64, count=count)
        self._values, self._column_indices, self._first_in_rows = compress_coordinates(
            keys[:, 0], keys[:, 1], values, self._num_rows, self._num_columns
        )
        self._buffer = None

    def decompress(self) -> None:
        """Move the compressed arrays into the insertion buffer."""
        if self._buffer is not None:
            return
        rows, columns, values = self._coordinates()
        self._buffer = dict(zip(zip(rows.tolist(), columns.tolist()), values.tolist()))
        self._values = np.zeros(0, dtype=np.float64)
        self._column_indices = np.zeros(0, dtype=np.int64)
        self._first_in_rows = np.zeros(self._num_rows + 1, dtype=np.int64)

    def get_values(self) -> NDArray[np.float64]:
        self.compress()
        return self._values.copy()

    def get_column_indices(self) -> NDArray[np.int64]:
        self.compress()
        return self._column_indices.copy()

    def get_first_in_rows(self) -> NDArray[np.int64]:
        self.compress()
        return self._first_in_rows.copy()

    def eliminate_zeros(self) -> None:
        """Drop stored entries whose value is exactly zero."""
        rows, columns, values = self._coordinates()
        keep = values != 0.0
        self._assign_triplets(rows[keep], columns[keep], values[keep])

    def _coordinates(self) -> tuple[NDArray[np.int64], NDArray[np.int64], NDArray[np.float64]]:
        # (rows, columns, values) in canonical order. columns and values are
        # the internal arrays, not copies.
        self.compress()
        rows = np.repeat(
            np.arange(self._num_rows, dtype=np.int64), np.diff(self._first_in_rows)
        )
        return rows, self._column_indices, self._values

    def _assign_triplets(
        self,
        rows: NDArray[np.int64],
        columns: NDArray[np.int64],
        values: NDArray[np.float64],
    ) -> None:
        self._values, self._column_indices, self._first_in_rows = compress_coordinates(
            rows, columns, values, self._num_rows, self._num_columns
        )
        self._buffer = None

    def _assign_array(self, array: NDArray[np.float64]) -> None:
        rows, columns = np.nonzero(array)
        self._assign_triplets(rows, columns, array[rows, columns])

    def _position(self, row: int, column: int) -> int:
        start = int(self._first_in_rows[row])
        end = int(self._first_in_rows[row + 1])
        pos = start + int(np.searchsorted(self._column_indices[start:end], column))
        if pos < end and self._column_indices[pos] == column:
            return pos
        return -1

    def _lookup(
        self,
        rows: NDArray[np.int64],
        columns: NDArray[np.int64],
    ) -> NDArray[np.float64]:
        # Values at the given coordinates, zero where nothing is stored.
        self.compress()
        if self._values.size == 0:
            return np.zeros(rows.shape[0], dtype=np.float64)
        own_rows, own_columns, own_values = self._coordinates()
        own_keys = own_rows * self._num_columns + own_columns
        keys = rows.astype(np.int64) * self._num_columns + columns
        pos = np.minimum(np.searchsorted(own_keys, keys), own_keys.shape[0] - 1)
        return np.where(own_keys[pos] == keys, own_values[pos], 0.0)

    # ------------------------------------------------------------------
    # BaseMatrix interface
    # ------------------------------------------------------------------

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_columns(self) -> int:
        return self._num_columns

    @property
    def matrix_factory(self) -> MatrixFactory:
        from pymatrix.factory import SPARSE_MATRIX_FACTORY

        return SPARSE_MATRIX_FACTORY

    def _get(self, row: int, column: int) -> float:
        self.compress()
        pos = self._position(row, column)
        return float(self._values[pos]) if pos >= 0 else 0.0

    def _set(self, row: int, column: int, value: float) -> None:
        if self._buffer is None:
            pos = self._position(row, column)
            if pos >= 0:
                self._values[pos] = value
                return
            if value == 0.0:
                return
            self.decompress()
        if value == 0.0 and (row, column) not in self._buffer:
            return
        self._buffer[(row, column)] = value

    def to_array(self) -> NDArray[np.float64]:
        rows, columns, values = self._coordinates()
        result = np.zeros((self._num_rows, self._num_columns), dtype=np.float64)
        result[rows, columns] = values
        return result

    def clone(self) -> SparseMatrix:
        self.compress()
        return SparseMatrix._wrap(
            self._num_rows,
            self._num_columns,
            (self._values.copy(), self._column_indices.copy(), self._first_in_rows.copy()),
        )

    def is_sparse(self) -> bool:
        return True

    def get_entry_count(self) -> int:
        if self._buffer is not None:
            return len(self._buffer)
        return int(self._values.shape[0])

    def scale_equals(self, scale: float) -> None:
        self.compress()
        self._values *= float(scale)

    def zero(self) -> None:
        self._assign_triplets(
            np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64), np.zeros(0)
        )

    def identity(self) -> None:
        index = np.arange(min(self._num_rows, self._num_columns), dtype=np.int64)
        self._assign_triplets(index, index, np.ones(index.shape[0]))

    def transpose(self) -> SparseMatrix:
        rows, columns, values = self._coordinates()
        return SparseMatrix._from_triplets(
            self._num_columns, self._num_rows, columns.copy(), rows, values.copy()
        )

    def inverse(self) -> DenseMatrix:
        """
        Dense inverse of a square sparse matrix.

        Raises:
            DimensionError: If the matrix is not square
            SingularMatrixError: If the matrix is singular
        """
        check_square(self, "inverse")
        warnings.warn(
            "Inverting a sparse matrix produces a dense result",
            SparseEfficiencyWarning,
            stacklevel=2,
        )
        return DenseMatrix._wrap(_linalg.inverse(self.to_array()))

    def pseudo_inverse(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> DenseMatrix:
        effective_zero = check_effective_zero(effective_zero)
        warnings.warn(
            "The pseudo-inverse of a sparse matrix is dense",
            SparseEfficiencyWarning,
            stacklevel=2,
        )
        return DenseMatrix._wrap(_linalg.pseudo_inverse(self.to_array(), effective_zero))

    def rank(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> int:
        effective_zero = check_effective_zero(effective_zero)
        return _linalg.rank(self.to_array(), effective_zero)

    def log_determinant(self) -> complex:
        check_square(self, "log_determinant")
        return _linalg.log_determinant(self.to_array())

    def norm_frobenius_squared(self) -> float:
        self.compress()
        return float(self._values @ self._values)

    def is_symmetric(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        effective_zero = check_effective_zero(effective_zero)
        if not self.is_square():
            return False
        rows, columns, values = self._coordinates()
        difference, _, _ = compress_coordinates(
            np.concatenate([rows, columns]),
            np.concatenate([columns, rows]),
            np.concatenate([values, -values]),
            self._num_rows,
            self._num_columns,
        )
        return bool(np.all(np.abs(difference) <= effective_zero))

    def trace(self) -> float:
        rows, columns, values = self._coordinates()
        return float(np.sum(values[rows == columns]))

    def get_sub_matrix(
        self,
        min_row: int,
        max_row: int,
        min_column: int,
        max_column: int,
    ) -> SparseMatrix:
        check_submatrix_range(self, min_row, max_row, min_column, max_column)
        rows, columns, values = self._coordinates()
        keep = (
            (rows >= min_row) & (rows <= max_row)
            & (columns >= min_column) & (columns <= max_column)
        )
        return SparseMatrix._from_triplets(
            max_row - min_row + 1,
            max_column - min_column + 1,
            rows[keep] - min_row,
            columns[keep] - min_column,
            values[keep],
        )

    def get_row(self, row: int) -> SparseVector:
        row = check_index(row, self._num_rows, "row")
        self.compress()
        start, end = int(self._first_in_rows[row]), int(self._first_in_rows[row + 1])
        return SparseVector._wrap(
            self._num_columns,
            self._column_indices[start:end].copy(),
            self._values[start:end].copy(),
        )

    def get_column(self, column: int) -> SparseVector:
        column = check_index(column, self._num_columns, "column")
        rows, columns, values = self._coordinates()
        keep = columns == column
        return SparseVector._wrap(self._num_rows, rows[keep], values[keep])

    def convert_to_vector(self) -> SparseVector:
        rows, columns, values = self._coordinates()
        return SparseVector._wrap(
            self._num_rows * self._num_columns,
            rows * self._num_columns + columns,
            values.copy(),
        )

    def convert_from_vector(self, parameters: BaseVector) -> None:
        self._check_parameters(parameters)
        if isinstance(parameters, SparseVector):
            indices, values = parameters._compressed_parts()
            values = values.copy()
        else:
            array = parameters.to_array()
            indices = np.flatnonzero(array)
            values = array[indices]
        if self._num_columns == 0:
            return
        self._assign_triplets(
            indices // self._num_columns, indices % self._num_columns, values
        )

    # ------------------------------------------------------------------
    # Overloads: combination
    # ------------------------------------------------------------------

    def _scaled_plus_equals_dense(self, other: DenseMatrix, scale: float) -> None:
        self._assign_array(self.to_array() + scale * other._values)

    def _scaled_plus_equals_sparse(self, other: SparseMatrix, scale: float) -> None:
        rows, columns, values = self._coordinates()
        other_rows, other_columns, other_values = other._coordinates()
        self._assign_triplets(
            np.concatenate([rows, other_rows]),
            np.concatenate([columns, other_columns]),
            np.concatenate([values, scale * other_values]),
        )

    def _scaled_plus_equals_diagonal(self, other: DiagonalMatrix, scale: float) -> None:
        rows, columns, values = self._coordinates()
        other_rows, other_columns, other_values = other._coordinates()
        self._assign_triplets(
            np.concatenate([rows, other_rows]),
            np.concatenate([columns, other_columns]),
            np.concatenate([values, scale * other_values]),
        )

    def _dot_times_equals_dense(self, other: DenseMatrix) -> None:
        rows, columns, _ = self._coordinates()
        self._values *= other._values[rows, columns]

    def _dot_times_equals_sparse(self, other: SparseMatrix) -> None:
        rows, columns, _ = self._coordinates()
        self._values *= other._lookup(rows, columns)

    def _dot_times_equals_diagonal(self, other: DiagonalMatrix) -> None:
        rows, columns, _ = self._coordinates()
        self._values *= np.where(rows == columns, other._diagonal[rows], 0.0)

    # ------------------------------------------------------------------
    # Overloads: products
    # ------------------------------------------------------------------

    def _times_dense(self, other: DenseMatrix) -> DenseMatrix:
        rows, columns, values = self._coordinates()
        result = np.zeros((self._num_rows, other.num_columns), dtype=np.float64)
        np.add.at(result, rows, values[:, np.newaxis] * other._values[columns, :])
        return DenseMatrix._wrap(result)

    def _times_sparse(self, other: SparseMatrix) -> SparseMatrix:
        # Row i of the product is the sum over stored (i, k, a) of a * other.row(k)
        rows, columns, values = self._coordinates()
        other.compress()
        starts = other._first_in_rows[columns]
        lengths = other._first_in_rows[columns + 1] - starts
        total = int(np.sum(lengths))
        offsets = np.arange(total, dtype=np.int64) - np.repeat(np.cumsum(lengths) - lengths, lengths)
        positions = np.repeat(starts, lengths) + offsets
        return SparseMatrix._from_triplets(
            self._num_rows,
            other.num_columns,
            np.repeat(rows, lengths),
            other._column_indices[positions],
            np.repeat(values, lengths) * other._values[positions],
        )

    def _times_diagonal(self, other: DiagonalMatrix) -> SparseMatrix:
        # Scale each stored entry by its column's diagonal entry
        rows, columns, values = self._coordinates()
        return SparseMatrix._from_triplets(
            self._num_rows, self._num_columns, rows, columns.copy(),
            values * other._diagonal[columns],
        )

    def _pre_times_matrix(self, left: BaseMatrix) -> BaseMatrix:
        """Compute ``left @ self``; dimensions are already checked by the caller."""
        return resolve(self, 'pre_times', left, BaseMatrix)(left)

    def _pre_times_dense(self, left: DenseMatrix) -> DenseMatrix:
        # Column j of the product gathers left[:, i] * a for stored (i, j, a)
        rows, columns, values = self._coordinates()
        result = np.zeros((left.num_rows, self._num_columns), dtype=np.float64)
        np.add.at(result.T, columns, (left._values[:, rows] * values).T)
        return DenseMatrix._wrap(result)

    def _pre_times_sparse(self, left: SparseMatrix) -> SparseMatrix:
        return left._times_sparse(self)

    def _pre_times_diagonal(self, left: DiagonalMatrix) -> SparseMatrix:
        # Scale each stored entry by its row's diagonal entry
        rows, columns, values = self._coordinates()
        return SparseMatrix._from_triplets(
            self._num_rows, self._num_columns, rows, columns.copy(),
            values * left._diagonal[rows],
        )

    def _times_vector_dense(self, vector: DenseVector) -> DenseVector:
        rows, columns, values = self._coordinates()
        result = np.bincount(
            rows, weights=values * vector._values[columns], minlength=self._num_rows
        )
        return DenseVector._wrap(result.astype(np.float64))

    def _times_vector_sparse(self, vector: SparseVector) -> SparseVector:
        rows, columns, values = self._coordinates()
        result = np.bincount(
            rows, weights=values * vector._lookup(columns), minlength=self._num_rows
        )
        indices = np.flatnonzero(result)
        return SparseVector._wrap(self._num_rows, indices, result[indices].astype(np.float64))

    def _pre_times_vector_dense(self, vector: DenseVector) -> DenseVector:
        rows, columns, values = self._coordinates()
        result = np.bincount(
            columns, weights=values * vector._values[rows], minlength=self._num_columns
        )
        return DenseVector._wrap(result.astype(np.float64))

    def _pre_times_vector_sparse(self, vector: SparseVector) -> SparseVector:
        rows, columns, values = self._coordinates()
        result = np.bincount(
            columns, weights=values * vector._lookup(rows), minlength=self._num_columns
        )
        indices = np.flatnonzero(result)
        return SparseVector._wrap(self._num_columns, indices, result[indices].astype(np.float64))

    # ------------------------------------------------------------------
    # Overloads: solve
    # ------------------------------------------------------------------

    def _solve_matrix(self, rhs: BaseMatrix) -> DenseMatrix:
        return DenseMatrix._wrap(_linalg.solve(self.to_array(), rhs.to_array()))

    _solve_dense = _solve_matrix
    _solve_sparse = _solve_matrix
    _solve_diagonal = _solve_matrix

    def _solve_vector(self, rhs: BaseVector) -> DenseVector:
        return DenseVector._wrap(_linalg.solve(self.to_array(), rhs.to_array()))

    _solve_vector_dense = _solve_vector
    _solve_vector_sparse = _solve_vector
