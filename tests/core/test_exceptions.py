"""
Tests for the pymatrix exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyMatrixError)
    - Builtin mix-ins (IndexError, ValueError, OverflowError)
    - Diagnostic attributes and their None defaults
    - SparseEfficiencyWarning is a UserWarning
"""

import warnings

import pytest

from pymatrix.core.exceptions import (
    DimensionError,
    InvalidAssignmentError,
    MatrixOverflowError,
    NumericalError,
    OutOfRangeError,
    PyMatrixError,
    SingularMatrixError,
    SparseEfficiencyWarning,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyMatrixError."""

    def test_validation_error_is_pymatrix_error(self):
        with pytest.raises(PyMatrixError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            raise OutOfRangeError("index 5 is not within [0, 3)", index=5, bound=3)

    def test_out_of_range_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise OutOfRangeError("out of range")

    def test_invalid_assignment_is_value_error(self):
        with pytest.raises(ValueError):
            raise InvalidAssignmentError("off-diagonal")

    def test_overflow_is_overflow_error(self):
        with pytest.raises(OverflowError):
            raise MatrixOverflowError("too big")

    def test_singular_matrix_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise SingularMatrixError("singular")

    def test_singular_matrix_error_is_not_validation_error(self):
        err = SingularMatrixError("singular")
        assert not isinstance(err, ValidationError)
        assert isinstance(err, PyMatrixError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestOutOfRangeError:

    def test_attributes(self):
        err = OutOfRangeError("row: index 4 is not within [0, 2)", index=4, bound=2)
        assert str(err) == "row: index 4 is not within [0, 2)"
        assert err.index == 4
        assert err.bound == 2

    def test_defaults_are_none(self):
        err = OutOfRangeError("out of range")
        assert err.index is None
        assert err.bound is None


class TestInvalidAssignmentError:

    def test_attributes(self):
        err = InvalidAssignmentError("nope", row=0, column=1, value=5.0)
        assert err.row == 0
        assert err.column == 1
        assert err.value == 5.0

    def test_defaults_are_none(self):
        err = InvalidAssignmentError("nope")
        assert err.row is None
        assert err.column is None
        assert err.value is None


class TestMatrixOverflowError:

    def test_attributes(self):
        err = MatrixOverflowError("too big", num_rows=2**31, num_columns=2)
        assert err.num_rows == 2**31
        assert err.num_columns == 2


class TestSingularMatrixError:
    """SingularMatrixError carries matrix diagnostic attributes."""

    def test_all_attributes(self):
        err = SingularMatrixError(
            "A is singular",
            matrix_name="A",
            rank=1,
            expected_rank=2,
        )
        assert str(err) == "A is singular"
        assert err.matrix_name == "A"
        assert err.rank == 1
        assert err.expected_rank == 2

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.rank is None
        assert err.expected_rank is None

    def test_catchable_with_attributes(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            raise SingularMatrixError("singular", matrix_name="D", rank=0)
        assert exc_info.value.matrix_name == "D"
        assert exc_info.value.rank == 0


# ═══════════════════════════════════════════════════════════════════════
# Warnings
# ═══════════════════════════════════════════════════════════════════════


class TestSparseEfficiencyWarning:

    def test_is_user_warning(self):
        assert issubclass(SparseEfficiencyWarning, UserWarning)

    def test_filterable(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", SparseEfficiencyWarning)
            with pytest.raises(SparseEfficiencyWarning):
                warnings.warn("dense result", SparseEfficiencyWarning)
