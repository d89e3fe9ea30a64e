"""
Exception hierarchy for pymatrix.

All exceptions inherit from PyMatrixError to allow catching any
library-specific error. Errors that have a natural builtin counterpart also
inherit from it, so ``except IndexError`` style callers keep working.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyMatrixError(Exception):
    """Base exception for all pymatrix errors."""
    pass


class ValidationError(PyMatrixError):
    """
    Input validation failed.

    Raised when user-provided inputs (indices, shapes, tolerances, raw
    arrays) fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Operand dimensions are incompatible.

    Raised when two matrices or vectors do not have the shapes required by
    the requested operation.
    """
    pass


class OutOfRangeError(ValidationError, IndexError):
    """
    Index outside ``[0, bound)``.

    Attributes:
        index: The offending index
        bound: The exclusive upper bound it was checked against
    """

    def __init__(
        self,
        message: str,
        index: int | None = None,
        bound: int | None = None
    ):
        super().__init__(message)
        self.index = index
        self.bound = bound


class InvalidAssignmentError(ValidationError, ValueError):
    """
    A nonzero value was written to a structurally forbidden location.

    Raised when a diagonal matrix would receive a nonzero off-diagonal
    entry, whether through a direct write, an in-place combination with a
    denser operand, construction from a general matrix or a flat parameter
    vector.

    Attributes:
        row: Row of the forbidden entry, if known
        column: Column of the forbidden entry, if known
        value: The rejected value, if known
    """

    def __init__(
        self,
        message: str,
        row: int | None = None,
        column: int | None = None,
        value: float | None = None
    ):
        super().__init__(message)
        self.row = row
        self.column = column
        self.value = value


class MatrixOverflowError(ValidationError, OverflowError):
    """
    Requested dimensions exceed the addressable cell count.

    Attributes:
        num_rows: Requested number of rows
        num_columns: Requested number of columns
    """

    def __init__(
        self,
        message: str,
        num_rows: int | None = None,
        num_columns: int | None = None
    ):
        super().__init__(message)
        self.num_rows = num_rows
        self.num_columns = num_columns


class NumericalError(PyMatrixError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix does not span the space needed by inverse or solve.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically the column count)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank


class SparseEfficiencyWarning(UserWarning):
    """Emitted when a sparse operation has to materialize a dense result."""
    pass
