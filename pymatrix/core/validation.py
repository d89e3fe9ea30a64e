"""
Bounds, shape and argument validation for pymatrix.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent. Every matrix and vector
operation routes its dimension and index checks through here.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

import numbers
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.exceptions import (
    DimensionError,
    MatrixOverflowError,
    OutOfRangeError,
    ValidationError,
)
from pymatrix.core.tolerances import MAX_ENTRY_COUNT

if TYPE_CHECKING:
    from pymatrix.matrix.base import BaseMatrix
    from pymatrix.vector.base import BaseVector


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.float64]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).
    The result is always a fresh copy, so callers own it exclusively.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.size > 0 and not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex values are not supported")

    return np.array(result, dtype=np.float64, copy=True)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Args:
        array: Array to check
        ndim: Required number of dimensions
        name: Parameter name for error messages

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_size(value: Any, name: str) -> int:
    """
    Verify a size argument is a non-negative integer.

    Args:
        value: Candidate size
        name: Parameter name for error messages

    Returns:
        The size as a plain int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name}: expected an integer, got {type(value).__name__}")
    value = int(value)
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")
    return value


def check_dimensions(num_rows: Any, num_columns: Any) -> tuple[int, int]:
    """
    Verify requested matrix dimensions can be created.

    Args:
        num_rows: Requested row count
        num_columns: Requested column count

    Returns:
        (num_rows, num_columns) as plain ints

    Raises:
        ValidationError: If either dimension is negative or not an integer
        MatrixOverflowError: If num_rows * num_columns exceeds MAX_ENTRY_COUNT
    """
    num_rows = check_size(num_rows, "num_rows")
    num_columns = check_size(num_columns, "num_columns")
    if num_rows * num_columns > MAX_ENTRY_COUNT:
        raise MatrixOverflowError(
            f"Cannot create a {num_rows}x{num_columns} matrix: "
            f"{num_rows * num_columns} cells exceeds the maximum of {MAX_ENTRY_COUNT}",
            num_rows=num_rows,
            num_columns=num_columns,
        )
    return num_rows, num_columns


def check_index(index: Any, bound: int, name: str) -> int:
    """
    Verify an index lies in ``[0, bound)``.

    Args:
        index: Candidate index
        bound: Exclusive upper bound
        name: Parameter name for error messages

    Returns:
        The index as a plain int

    Raises:
        OutOfRangeError: If the index is negative or >= bound
    """
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise OutOfRangeError(
            f"{name}: expected an integer index, got {type(index).__name__}",
            bound=bound,
        )
    index = int(index)
    if index < 0 or index >= bound:
        raise OutOfRangeError(
            f"{name}: index {index} is not within [0, {bound})",
            index=index,
            bound=bound,
        )
    return index


def check_effective_zero(effective_zero: float) -> float:
    """
    Verify an absolute tolerance is non-negative.

    Raises:
        ValidationError: If effective_zero is negative or NaN
    """
    effective_zero = float(effective_zero)
    if not effective_zero >= 0.0:
        raise ValidationError(
            f"effective_zero: must be non-negative, got {effective_zero}"
        )
    return effective_zero


def check_same_dimensions(a: BaseMatrix, b: BaseMatrix) -> None:
    """
    Verify two matrices have identical shapes.

    Raises:
        DimensionError: If the shapes differ
    """
    if a.num_rows != b.num_rows or a.num_columns != b.num_columns:
        raise DimensionError(
            f"Matrix dimensions do not match: {a.num_rows}x{a.num_columns} "
            f"vs {b.num_rows}x{b.num_columns}"
        )


def check_multiplication_dimensions(a: BaseMatrix, b: BaseMatrix) -> None:
    """
    Verify ``a @ b`` is defined.

    Raises:
        DimensionError: If a.num_columns != b.num_rows
    """
    if a.num_columns != b.num_rows:
        raise DimensionError(
            f"Cannot multiply {a.num_rows}x{a.num_columns} by "
            f"{b.num_rows}x{b.num_columns}: inner dimensions differ"
        )


def check_square(matrix: BaseMatrix, operation: str) -> None:
    """
    Verify a matrix is square.

    Raises:
        DimensionError: If num_rows != num_columns
    """
    if matrix.num_rows != matrix.num_columns:
        raise DimensionError(
            f"{operation} requires a square matrix, got "
            f"{matrix.num_rows}x{matrix.num_columns}"
        )


def check_dimensionality(vector: BaseVector, expected: int, name: str = "vector") -> None:
    """
    Verify a vector has the expected dimensionality.

    Raises:
        DimensionError: If vector.dimensionality != expected
    """
    if vector.dimensionality != expected:
        raise DimensionError(
            f"{name}: expected dimensionality {expected}, got {vector.dimensionality}"
        )


def check_solve_dimensions(matrix: BaseMatrix, rhs: BaseMatrix | BaseVector) -> None:
    """
    Verify the right-hand side of ``A x = B`` has as many rows as A.

    Raises:
        DimensionError: If the row counts differ
    """
    rhs_rows = getattr(rhs, "num_rows", None)
    if rhs_rows is None:
        rhs_rows = rhs.dimensionality
    if rhs_rows != matrix.num_rows:
        raise DimensionError(
            f"Cannot solve with a {matrix.num_rows}x{matrix.num_columns} matrix: "
            f"right-hand side has {rhs_rows} rows"
        )


def check_submatrix_range(
    matrix: BaseMatrix,
    min_row: int,
    max_row: int,
    min_column: int,
    max_column: int,
) -> None:
    """
    Verify an inclusive sub-matrix range lies inside the matrix.

    Raises:
        OutOfRangeError: If any bound is outside the matrix
        ValidationError: If a minimum exceeds its maximum
    """
    check_index(min_row, matrix.num_rows, "min_row")
    check_index(max_row, matrix.num_rows, "max_row")
    check_index(min_column, matrix.num_columns, "min_column")
    check_index(max_column, matrix.num_columns, "max_column")
    if min_row > max_row:
        raise ValidationError(f"min_row ({min_row}) exceeds max_row ({max_row})")
    if min_column > max_column:
        raise ValidationError(
            f"min_column ({min_column}) exceeds max_column ({max_column})"
        )
