"""
Tests for SparseMatrix.

Validates:
    - Construction from arrays, coordinates and compressed-row parts
    - The compressed / uncompressed state machine and explicit zeros
    - Arithmetic and products against the dense reference
    - Dense-copy linear algebra and SparseEfficiencyWarning
    - Extraction results stay sparse
"""

import math
import warnings

import numpy as np
import pytest

from pymatrix import (
    DenseMatrix,
    DenseVector,
    DiagonalMatrix,
    DimensionError,
    MatrixOverflowError,
    OutOfRangeError,
    SingularMatrixError,
    SparseEfficiencyWarning,
    SparseMatrix,
    SparseVector,
    ValidationError,
)
from pymatrix.core.tolerances import CPU_FP64
from pymatrix.matrix.sparse import compress_coordinates


@pytest.fixture
def small():
    # [[1, 0, 2],
    #  [0, 0, 3],
    #  [4, 0, 0]]
    return SparseMatrix.from_array([
        [1.0, 0.0, 2.0],
        [0.0, 0.0, 3.0],
        [4.0, 0.0, 0.0],
    ])


@pytest.fixture
def invertible():
    return SparseMatrix.from_array([
        [1.0, 0.0, 2.0],
        [0.0, 5.0, 3.0],
        [4.0, 0.0, 0.0],
    ])


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestCompressCoordinates:

    def test_sorted_and_merged(self):
        values, columns, first = compress_coordinates(
            np.array([1, 0, 1, 1]), np.array([2, 1, 0, 2]),
            np.array([1.0, 2.0, 3.0, 4.0]), 2, 3,
        )
        np.testing.assert_array_equal(values, [2.0, 3.0, 5.0])
        np.testing.assert_array_equal(columns, [1, 0, 2])
        np.testing.assert_array_equal(first, [0, 1, 3])

    def test_empty(self):
        values, columns, first = compress_coordinates(
            np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64), np.zeros(0), 3, 3
        )
        assert values.size == 0
        np.testing.assert_array_equal(first, [0, 0, 0, 0])


class TestConstruction:

    def test_empty(self):
        m = SparseMatrix(3, 4)
        assert m.shape == (3, 4)
        assert m.is_sparse()
        assert m.get_entry_count() == 0
        np.testing.assert_array_equal(m.get_first_in_rows(), [0, 0, 0, 0])

    def test_overflow(self):
        with pytest.raises(MatrixOverflowError):
            SparseMatrix(2**16, 2**16)

    def test_from_array(self, small):
        assert small.get_entry_count() == 4
        np.testing.assert_array_equal(small.get_values(), [1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(small.get_column_indices(), [0, 2, 2, 0])
        np.testing.assert_array_equal(small.get_first_in_rows(), [0, 2, 3, 4])

    def test_from_coordinates_sums_duplicates(self):
        m = SparseMatrix.from_coordinates([0, 0, 1], [1, 1, 0], [1.0, 2.5, 4.0], (2, 2))
        np.testing.assert_array_equal(m.to_array(), [[0.0, 3.5], [4.0, 0.0]])
        assert m.get_entry_count() == 2

    def test_from_coordinates_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            SparseMatrix.from_coordinates([2], [0], [1.0], (2, 2))

    def test_from_coordinates_length_mismatch(self):
        with pytest.raises(DimensionError):
            SparseMatrix.from_coordinates([0, 1], [0], [1.0], (2, 2))

    def test_from_arrays(self):
        m = SparseMatrix.from_arrays([1.0, 2.0], [1, 0], [0, 1, 2], (2, 2))
        np.testing.assert_array_equal(m.to_array(), [[0.0, 1.0], [2.0, 0.0]])

    @pytest.mark.parametrize("values, columns, first, message", [
        ([1.0], [0], [0, 0], "first_in_rows: expected 3"),
        ([1.0], [0], [1, 1, 1], "start at 0"),
        ([1.0, 2.0], [0, 1], [0, 2, 1], "end at 2"),
        ([1.0, 2.0], [1, 0], [0, 2, 2], "strictly increasing"),
        ([1.0], [5], [0, 1, 1], r"\[0, 2\)"),
    ])
    def test_from_arrays_rejects_bad_structure(self, values, columns, first, message):
        with pytest.raises(ValidationError, match=message):
            SparseMatrix.from_arrays(values, columns, first, (2, 2))

    def test_from_matrix_keeps_representation_values(self, small):
        copy = SparseMatrix.from_matrix(DenseMatrix.from_matrix(small))
        assert copy == small
        from_diagonal = SparseMatrix.from_matrix(DiagonalMatrix.from_diagonal([1.0, 0.0, 2.0]))
        assert from_diagonal.get_entry_count() == 2


# ═══════════════════════════════════════════════════════════════════════
# Compression state machine
# ═══════════════════════════════════════════════════════════════════════


class TestCompression:

    def test_write_to_absent_position_decompresses(self, small):
        small.set(1, 1, 9.0)
        assert not small.is_compressed()
        assert small.get_entry_count() == 5

    def test_read_compresses(self, small):
        small.set(2, 2, 9.0)
        small.set(0, 1, 8.0)
        assert small.get(2, 2) == 9.0
        assert small.is_compressed()
        np.testing.assert_array_equal(small.get_first_in_rows(), [0, 3, 4, 6])
        np.testing.assert_array_equal(small.get_column_indices(), [0, 1, 2, 2, 0, 2])

    def test_write_to_stored_position_stays_compressed(self, small):
        small.set(1, 2, -3.0)
        assert small.is_compressed()
        assert small.get(1, 2) == -3.0

    def test_zero_write_to_absent_position_is_noop(self, small):
        small.set(1, 1, 0.0)
        assert small.is_compressed()
        assert small.get_entry_count() == 4

    def test_explicit_zeros_stay_until_eliminated(self, small):
        small.set(0, 0, 0.0)
        assert small.get_entry_count() == 4
        assert small.get(0, 0) == 0.0
        small.eliminate_zeros()
        assert small.get_entry_count() == 3
        np.testing.assert_array_equal(small.get_first_in_rows(), [0, 1, 2, 3])

    def test_decompress_compress_round_trip(self, small):
        before = small.to_array()
        small.decompress()
        assert not small.is_compressed()
        small.compress()
        np.testing.assert_array_equal(small.to_array(), before)

    def test_accessors_return_copies(self, small):
        small.get_values()[0] = 100.0
        assert small.get(0, 0) == 1.0


# ═══════════════════════════════════════════════════════════════════════
# Arithmetic against the dense reference
# ═══════════════════════════════════════════════════════════════════════


class TestArithmetic:

    def test_plus_sparse(self, sparse_array, rng):
        other = rng.standard_normal((5, 4)) * (rng.random((5, 4)) < 0.3)
        result = SparseMatrix.from_array(sparse_array).plus(SparseMatrix.from_array(other))
        assert isinstance(result, SparseMatrix)
        np.testing.assert_allclose(result.to_array(), sparse_array + other)

    def test_minus_dense_keeps_nonzeros(self):
        a = SparseMatrix.from_array([[1.0, 0.0], [0.0, 2.0]])
        a.minus_equals(DenseMatrix.from_array([[1.0, 0.0], [0.0, 0.0]]))
        assert a.get_entry_count() == 1
        np.testing.assert_array_equal(a.to_array(), [[0.0, 0.0], [0.0, 2.0]])

    def test_plus_diagonal(self, small):
        small.plus_equals(DiagonalMatrix.from_diagonal([1.0, 1.0, 1.0]))
        np.testing.assert_array_equal(
            small.to_array(), [[2.0, 0.0, 2.0], [0.0, 1.0, 3.0], [4.0, 0.0, 1.0]]
        )

    def test_scaled_plus_equals_self(self, small):
        small.scaled_plus_equals(small, 1.0)
        np.testing.assert_array_equal(small.get_values(), [2.0, 4.0, 6.0, 8.0])

    def test_dot_times_keeps_receiver_structure(self, small):
        small.dot_times_equals(DenseMatrix.from_array(np.zeros((3, 3))))
        assert small.get_entry_count() == 4
        assert small.norm_frobenius() == 0.0

    def test_dot_times_sparse(self, small):
        other = SparseMatrix.from_coordinates([0, 2], [2, 1], [10.0, 5.0], (3, 3))
        result = small.dot_times(other)
        np.testing.assert_array_equal(
            result.to_array(), [[0.0, 0.0, 20.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]
        )

    def test_dot_times_diagonal(self, small):
        result = small.dot_times(DiagonalMatrix.from_diagonal([3.0, 3.0, 3.0]))
        np.testing.assert_array_equal(np.diag(result.to_array()), [3.0, 0.0, 0.0])
        assert result.to_array()[0, 2] == 0.0

    def test_scale_and_zero(self, small):
        np.testing.assert_array_equal((2 * small).get_values(), [2.0, 4.0, 6.0, 8.0])
        small.zero()
        assert small.get_entry_count() == 0

    def test_identity_rectangular(self):
        m = SparseMatrix(2, 3)
        m.identity()
        np.testing.assert_array_equal(m.to_array(), np.eye(2, 3))


class TestProducts:

    def test_times_dense(self, sparse_array, rng):
        B = rng.standard_normal((4, 3))
        result = SparseMatrix.from_array(sparse_array).times(DenseMatrix.from_array(B))
        assert isinstance(result, DenseMatrix)
        np.testing.assert_allclose(result.to_array(), sparse_array @ B, rtol=CPU_FP64.rtol)

    def test_times_sparse(self, sparse_array, rng):
        B = rng.standard_normal((4, 6)) * (rng.random((4, 6)) < 0.4)
        result = SparseMatrix.from_array(sparse_array).times(SparseMatrix.from_array(B))
        assert isinstance(result, SparseMatrix)
        np.testing.assert_allclose(
            result.to_array(), sparse_array @ B, rtol=CPU_FP64.rtol, atol=CPU_FP64.atol
        )

    def test_times_diagonal_scales_columns(self, small):
        result = small.times(DiagonalMatrix.from_diagonal([1.0, 5.0, 10.0]))
        assert isinstance(result, SparseMatrix)
        np.testing.assert_array_equal(
            result.to_array(), [[1.0, 0.0, 20.0], [0.0, 0.0, 30.0], [4.0, 0.0, 0.0]]
        )

    def test_dense_times_sparse(self, sparse_array, rng):
        A = rng.standard_normal((3, 5))
        result = DenseMatrix.from_array(A).times(SparseMatrix.from_array(sparse_array))
        assert isinstance(result, DenseMatrix)
        np.testing.assert_allclose(result.to_array(), A @ sparse_array, rtol=CPU_FP64.rtol)

    def test_times_vectors(self, sparse_array, rng):
        m = SparseMatrix.from_array(sparse_array)
        x = rng.standard_normal(4)
        dense_result = m.times(DenseVector.from_array(x))
        assert isinstance(dense_result, DenseVector)
        np.testing.assert_allclose(dense_result.to_array(), sparse_array @ x)
        sparse_result = m.times(SparseVector.from_entries(4, [1], [2.0]))
        assert isinstance(sparse_result, SparseVector)
        np.testing.assert_allclose(sparse_result.to_array(), sparse_array[:, 1] * 2.0)

    def test_pre_times_vectors(self, sparse_array, rng):
        m = SparseMatrix.from_array(sparse_array)
        y = rng.standard_normal(5)
        np.testing.assert_allclose(
            m.pre_times(DenseVector.from_array(y)).to_array(), y @ sparse_array
        )
        result = m.pre_times(SparseVector.from_entries(5, [0], [1.0]))
        assert isinstance(result, SparseVector)
        np.testing.assert_allclose(result.to_array(), sparse_array[0])

    def test_times_dimension_mismatch(self, small):
        with pytest.raises(DimensionError):
            small.times(SparseMatrix(2, 2))


# ═══════════════════════════════════════════════════════════════════════
# Linear algebra through a dense copy
# ═══════════════════════════════════════════════════════════════════════


class TestLinearAlgebra:

    def test_solve(self, invertible):
        b = DenseVector.from_array([3.0, 3.0, 4.0])
        x = invertible.solve(b)
        assert isinstance(x, DenseVector)
        np.testing.assert_allclose(invertible.times(x).to_array(), b.to_array())

    def test_solve_matrix(self, invertible):
        X = invertible.solve(SparseMatrix.from_array(np.eye(3)))
        assert isinstance(X, DenseMatrix)
        assert invertible.times(X).equals(DenseMatrix.from_array(np.eye(3)), 1e-12)

    def test_solve_singular(self, small):
        with pytest.raises(SingularMatrixError):
            small.solve(DenseVector.from_array([1.0, 1.0, 1.0]))

    def test_inverse_warns(self, invertible):
        with pytest.warns(SparseEfficiencyWarning):
            inverse = invertible.inverse()
        assert isinstance(inverse, DenseMatrix)
        assert inverse.times(invertible).equals(DenseMatrix.from_array(np.eye(3)), 1e-12)

    def test_inverse_singular(self, small):
        with pytest.warns(SparseEfficiencyWarning):
            with pytest.raises(SingularMatrixError):
                small.inverse()

    def test_pseudo_inverse_warns(self, small):
        with pytest.warns(SparseEfficiencyWarning):
            pinv = small.pseudo_inverse(effective_zero=1e-12)
        np.testing.assert_allclose(
            pinv.to_array(), np.linalg.pinv(small.to_array()), atol=1e-12
        )

    def test_warning_can_be_silenced(self, invertible):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            warnings.simplefilter("ignore", SparseEfficiencyWarning)
            invertible.inverse()

    def test_rank(self, small, invertible):
        # small has an all-zero middle column
        assert small.rank(effective_zero=1e-10) == 2
        assert small.transpose().rank(effective_zero=1e-10) == 2
        assert invertible.rank() == 3

    def test_log_determinant(self, invertible):
        # det = 2 * (0 - 5 * 4) = -40
        result = invertible.log_determinant()
        assert result.real == pytest.approx(math.log(40.0))
        assert result.imag == pytest.approx(math.pi)

    def test_log_determinant_non_square(self):
        with pytest.raises(DimensionError):
            SparseMatrix(2, 3).log_determinant()

    def test_is_symmetric(self):
        m = SparseMatrix.from_coordinates([0, 1], [1, 0], [2.0, 2.0], (2, 2))
        assert m.is_symmetric()
        m.set(1, 0, 2.5)
        assert not m.is_symmetric()
        assert m.is_symmetric(effective_zero=0.5)
        assert not SparseMatrix(2, 3).is_symmetric()

    def test_trace_and_norm(self, small):
        assert small.trace() == 1.0
        assert small.norm_frobenius_squared() == 30.0


# ═══════════════════════════════════════════════════════════════════════
# Extraction and conversion
# ═══════════════════════════════════════════════════════════════════════


class TestExtraction:

    def test_transpose(self, small):
        t = small.transpose()
        assert isinstance(t, SparseMatrix)
        np.testing.assert_array_equal(t.to_array(), small.to_array().T)

    def test_sub_matrix(self, small):
        sub = small.get_sub_matrix(0, 1, 1, 2)
        assert isinstance(sub, SparseMatrix)
        np.testing.assert_array_equal(sub.to_array(), [[0.0, 2.0], [0.0, 3.0]])

    def test_row_and_column(self, small):
        row = small.get_row(0)
        assert isinstance(row, SparseVector)
        np.testing.assert_array_equal(row.get_indices(), [0, 2])
        column = small.get_column(2)
        np.testing.assert_array_equal(column.to_array(), [2.0, 3.0, 0.0])

    def test_row_out_of_range(self, small):
        with pytest.raises(OutOfRangeError):
            small.get_row(3)

    def test_convert_to_vector(self, small):
        v = small.convert_to_vector()
        assert isinstance(v, SparseVector)
        assert v.dimensionality == 9
        np.testing.assert_array_equal(v.get_indices(), [0, 2, 5, 6])

    def test_convert_round_trip(self, small):
        target = SparseMatrix(3, 3)
        target.convert_from_vector(small.convert_to_vector())
        assert target == small
        dense_target = SparseMatrix(3, 3)
        dense_target.convert_from_vector(DenseVector.from_vector(small.convert_to_vector()))
        assert dense_target == small

    def test_clone_is_independent(self, small):
        copy = small.clone()
        copy.set(1, 1, 5.0)
        assert small.get(1, 1) == 0.0

    def test_equals_dense(self, small):
        assert small == DenseMatrix.from_matrix(small)
