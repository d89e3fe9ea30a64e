"""
Base class for every matrix representation.

BaseMatrix defines the complete operation vocabulary shared by dense,
sparse and diagonal matrices. Binary operations are written once here as
generic entry points: they validate shapes, then hand off to the receiver's
overload for the argument's kind, so each (receiver, argument) pair runs an
algorithm that exploits both storage layouts.

Overloads a representation provides, one per argument kind:
    _scaled_plus_equals_<kind>(other, scale)
    _dot_times_equals_<kind>(other)
    _times_<kind>(other)            matrix @ matrix
    _solve_<kind>(other)            A X = B, B a matrix
    _times_vector_<kind>(vector)    matrix @ vector
    _pre_times_vector_<kind>(vector)  vector^T @ matrix
    _solve_vector_<kind>(vector)    A x = b

Two operation families:
    - in-place (``*_equals``, ``identity``, ``zero``, ``convert_from_vector``,
      ``set``): mutate the receiver's own storage, return None
    - copy-producing (everything else): return a fresh, independently owned
      matrix or vector; neither operand is modified
"""

from __future__ import annotations

import math
import numbers
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pymatrix.core.kinds import resolve
from pymatrix.core.tolerances import DEFAULT_EFFECTIVE_ZERO
from pymatrix.core.validation import (
    check_dimensionality,
    check_effective_zero,
    check_index,
    check_multiplication_dimensions,
    check_same_dimensions,
    check_solve_dimensions,
)
from pymatrix.vector.base import BaseVector

if TYPE_CHECKING:
    from pymatrix.factory import MatrixFactory


class BaseMatrix:
    """
    Abstract base class for 2-D float64 matrices.

    Subclasses set ``kind``, implement the storage-specific methods below
    and provide the overloads listed in the module docstring.
    """

    kind: str = ''

    # ------------------------------------------------------------------
    # Storage-specific interface
    # ------------------------------------------------------------------

    @property
    def num_rows(self) -> int:
        raise NotImplementedError("Subclasses must implement num_rows")

    @property
    def num_columns(self) -> int:
        raise NotImplementedError("Subclasses must implement num_columns")

    @property
    def matrix_factory(self) -> MatrixFactory:
        """Factory producing matrices of this representation."""
        raise NotImplementedError("Subclasses must implement matrix_factory")

    def _get(self, row: int, column: int) -> float:
        raise NotImplementedError("Subclasses must implement _get")

    def _set(self, row: int, column: int, value: float) -> None:
        raise NotImplementedError("Subclasses must implement _set")

    def to_array(self) -> NDArray[np.float64]:
        """Materialize as a new dense 2-D numpy array."""
        raise NotImplementedError("Subclasses must implement to_array")

    def clone(self) -> BaseMatrix:
        """Deep copy owning its own storage."""
        raise NotImplementedError("Subclasses must implement clone")

    def is_sparse(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_sparse")

    def get_entry_count(self) -> int:
        """Number of stored entries."""
        raise NotImplementedError("Subclasses must implement get_entry_count")

    def scale_equals(self, scale: float) -> None:
        raise NotImplementedError("Subclasses must implement scale_equals")

    def zero(self) -> None:
        raise NotImplementedError("Subclasses must implement zero")

    def identity(self) -> None:
        """Overwrite with ones on the main diagonal, zeros elsewhere."""
        raise NotImplementedError("Subclasses must implement identity")

    def transpose(self) -> BaseMatrix:
        raise NotImplementedError("Subclasses must implement transpose")

    def inverse(self) -> BaseMatrix:
        raise NotImplementedError("Subclasses must implement inverse")

    def pseudo_inverse(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> BaseMatrix:
        raise NotImplementedError("Subclasses must implement pseudo_inverse")

    def rank(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> int:
        raise NotImplementedError("Subclasses must implement rank")

    def log_determinant(self) -> complex:
        raise NotImplementedError("Subclasses must implement log_determinant")

    def norm_frobenius_squared(self) -> float:
        raise NotImplementedError("Subclasses must implement norm_frobenius_squared")

    def is_symmetric(self, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        raise NotImplementedError("Subclasses must implement is_symmetric")

    def get_sub_matrix(
        self,
        min_row: int,
        max_row: int,
        min_column: int,
        max_column: int,
    ) -> BaseMatrix:
        """Copy of rows ``min_row..max_row`` and columns ``min_column..max_column`` (inclusive)."""
        raise NotImplementedError("Subclasses must implement get_sub_matrix")

    def get_row(self, row: int) -> BaseVector:
        raise NotImplementedError("Subclasses must implement get_row")

    def get_column(self, column: int) -> BaseVector:
        raise NotImplementedError("Subclasses must implement get_column")

    def convert_to_vector(self) -> BaseVector:
        """All ``num_rows * num_columns`` cells as a flat vector, row-major."""
        raise NotImplementedError("Subclasses must implement convert_to_vector")

    def convert_from_vector(self, parameters: BaseVector) -> None:
        """Overwrite every cell from a row-major parameter vector."""
        raise NotImplementedError("Subclasses must implement convert_from_vector")

    # ------------------------------------------------------------------
    # Shape queries and element access
    # ------------------------------------------------------------------

    @property
    def shape(self) -> tuple[int, int]:
        return (self.num_rows, self.num_columns)

    def is_square(self) -> bool:
        return self.num_rows == self.num_columns

    def get_element(self, row: int, column: int) -> float:
        """
        Bounds-checked read.

        Raises:
            OutOfRangeError: If either index is outside the matrix
        """
        row = check_index(row, self.num_rows, "row")
        column = check_index(column, self.num_columns, "column")
        return self._get(row, column)

    def set_element(self, row: int, column: int, value: float) -> None:
        """
        Bounds-checked write.

        Raises:
            OutOfRangeError: If either index is outside the matrix
        """
        row = check_index(row, self.num_rows, "row")
        column = check_index(column, self.num_columns, "column")
        self._set(row, column, float(value))

    def get(self, row: int, column: int) -> float:
        return self.get_element(row, column)

    def set(self, row: int, column: int, value: float) -> None:
        self.set_element(row, column, value)

    def trace(self) -> float:
        return float(np.trace(self.to_array()))

    def norm_frobenius(self) -> float:
        return math.sqrt(self.norm_frobenius_squared())

    def _check_parameters(self, parameters: BaseVector) -> None:
        check_dimensionality(parameters, self.num_rows * self.num_columns, "parameters")

    # ------------------------------------------------------------------
    # In-place family
    # ------------------------------------------------------------------

    def scaled_plus_equals(self, other: BaseMatrix, scale: float) -> None:
        """
        ``self += scale * other``.

        Raises:
            DimensionError: If the shapes differ
            InvalidAssignmentError: If the receiver is diagonal and other has
                a nonzero off-diagonal entry
        """
        handler = resolve(self, 'scaled_plus_equals', other, BaseMatrix)
        check_same_dimensions(self, other)
        handler(other, float(scale))

    def plus_equals(self, other: BaseMatrix) -> None:
        self.scaled_plus_equals(other, 1.0)

    def minus_equals(self, other: BaseMatrix) -> None:
        self.scaled_plus_equals(other, -1.0)

    def dot_times_equals(self, other: BaseMatrix) -> None:
        """
        Elementwise (Hadamard) product in place.

        Raises:
            DimensionError: If the shapes differ
        """
        handler = resolve(self, 'dot_times_equals', other, BaseMatrix)
        check_same_dimensions(self, other)
        handler(other)

    # ------------------------------------------------------------------
    # Copy-producing family
    # ------------------------------------------------------------------

    def scaled_plus(self, other: BaseMatrix, scale: float) -> BaseMatrix:
        result = self.clone()
        result.scaled_plus_equals(other, scale)
        return result

    def plus(self, other: BaseMatrix) -> BaseMatrix:
        result = self.clone()
        result.plus_equals(other)
        return result

    def minus(self, other: BaseMatrix) -> BaseMatrix:
        result = self.clone()
        result.minus_equals(other)
        return result

    def dot_times(self, other: BaseMatrix) -> BaseMatrix:
        result = self.clone()
        result.dot_times_equals(other)
        return result

    def scale(self, scale: float) -> BaseMatrix:
        result = self.clone()
        result.scale_equals(scale)
        return result

    def negative(self) -> BaseMatrix:
        return self.scale(-1.0)

    def times(self, other: BaseMatrix | BaseVector) -> BaseMatrix | BaseVector:
        """
        Matrix product ``self @ other`` for a matrix or column vector.

        Raises:
            DimensionError: If the inner dimensions differ
        """
        if isinstance(other, BaseVector):
            handler = resolve(self, 'times_vector', other, BaseVector)
            check_dimensionality(other, self.num_columns, "vector")
            return handler(other)
        handler = resolve(self, 'times', other, BaseMatrix)
        check_multiplication_dimensions(self, other)
        return handler(other)

    def pre_times(self, vector: BaseVector) -> BaseVector:
        """
        Row-vector product ``vector^T @ self``.

        Raises:
            DimensionError: If vector.dimensionality != num_rows
        """
        handler = resolve(self, 'pre_times_vector', vector, BaseVector)
        check_dimensionality(vector, self.num_rows, "vector")
        return handler(vector)

    def solve(self, rhs: BaseMatrix | BaseVector) -> BaseMatrix | BaseVector:
        """
        Solve ``self @ x = rhs`` for x.

        Raises:
            DimensionError: If rhs does not have num_rows rows
            SingularMatrixError: If self cannot span what rhs requires
        """
        if isinstance(rhs, BaseVector):
            handler = resolve(self, 'solve_vector', rhs, BaseVector)
        else:
            handler = resolve(self, 'solve', rhs, BaseMatrix)
        check_solve_dimensions(self, rhs)
        return handler(rhs)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def equals(self, other: Any, effective_zero: float = DEFAULT_EFFECTIVE_ZERO) -> bool:
        """
        Cellwise comparison with an absolute tolerance.

        Two matrices are equal when they have the same shape and every pair
        of cells differs by at most ``effective_zero``. Representations need
        not match.
        """
        effective_zero = check_effective_zero(effective_zero)
        if not isinstance(other, BaseMatrix):
            return False
        if self.shape != other.shape:
            return False
        diff = np.abs(self.to_array() - other.to_array())
        return bool(np.all(diff <= effective_zero))

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: tuple[int, int]) -> float:
        row, column = key
        return self.get_element(row, column)

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        row, column = key
        self.set_element(row, column, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseMatrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    def __add__(self, other: object) -> BaseMatrix:
        if not isinstance(other, BaseMatrix):
            return NotImplemented
        return self.plus(other)

    def __sub__(self, other: object) -> BaseMatrix:
        if not isinstance(other, BaseMatrix):
            return NotImplemented
        return self.minus(other)

    def __iadd__(self, other: object) -> BaseMatrix:
        if not isinstance(other, BaseMatrix):
            return NotImplemented
        self.plus_equals(other)
        return self

    def __isub__(self, other: object) -> BaseMatrix:
        if not isinstance(other, BaseMatrix):
            return NotImplemented
        self.minus_equals(other)
        return self

    def __neg__(self) -> BaseMatrix:
        return self.negative()

    def __mul__(self, scale: object) -> BaseMatrix:
        if not isinstance(scale, numbers.Real):
            return NotImplemented
        return self.scale(float(scale))

    __rmul__ = __mul__

    def __matmul__(self, other: object) -> BaseMatrix | BaseVector:
        if not isinstance(other, (BaseMatrix, BaseVector)):
            return NotImplemented
        return self.times(other)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_array().tolist()})"
