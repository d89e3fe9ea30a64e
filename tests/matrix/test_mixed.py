"""
Cross-representation tests.

Every (receiver, argument) pair of representations must agree with the
dense reference computation. Operands are diagonal-valued so every pair is
legal, including diagonal receivers; a second grid uses general values with
dense and sparse receivers only.
"""

import itertools

import numpy as np
import pytest

from pymatrix import (
    DenseMatrix,
    DenseVector,
    DiagonalMatrix,
    SparseMatrix,
    SparseVector,
)
from pymatrix.core.tolerances import select_tolerance

MATRIX_TYPES = [DenseMatrix, SparseMatrix, DiagonalMatrix]
GENERAL_TYPES = [DenseMatrix, SparseMatrix]
VECTOR_TYPES = [DenseVector, SparseVector]

PAIRS = list(itertools.product(MATRIX_TYPES, MATRIX_TYPES))
GENERAL_PAIRS = list(itertools.product(GENERAL_TYPES, GENERAL_TYPES))


def build(cls, array):
    if cls is DiagonalMatrix:
        return DiagonalMatrix.from_matrix(DenseMatrix.from_array(array))
    return cls.from_array(array)


def ids(pairs):
    return [f"{a.__name__}-{b.__name__}" for a, b in pairs]


@pytest.fixture
def diagonal_pair():
    return np.diag([1.0, -2.0, 0.0, 4.0]), np.diag([3.0, 0.5, 5.0, 0.0])


@pytest.fixture
def general_pair(rng):
    a = rng.standard_normal((4, 4)) * (rng.random((4, 4)) < 0.6)
    b = rng.standard_normal((4, 4)) * (rng.random((4, 4)) < 0.6)
    return a, b


class TestDiagonalValuedPairs:

    @pytest.mark.parametrize("left, right", PAIRS, ids=ids(PAIRS))
    def test_plus_minus(self, left, right, diagonal_pair):
        a, b = diagonal_pair
        x, y = build(left, a), build(right, b)
        plus = x.plus(y)
        assert type(plus) is left
        np.testing.assert_array_equal(plus.to_array(), a + b)
        np.testing.assert_array_equal(x.minus(y).to_array(), a - b)
        np.testing.assert_array_equal(x.scaled_plus(y, 2.0).to_array(), a + 2.0 * b)
        np.testing.assert_array_equal(x.to_array(), a)
        np.testing.assert_array_equal(y.to_array(), b)

    @pytest.mark.parametrize("left, right", PAIRS, ids=ids(PAIRS))
    def test_dot_times(self, left, right, diagonal_pair):
        a, b = diagonal_pair
        result = build(left, a).dot_times(build(right, b))
        np.testing.assert_array_equal(result.to_array(), a * b)

    @pytest.mark.parametrize("left, right", PAIRS, ids=ids(PAIRS))
    def test_times(self, left, right, diagonal_pair):
        a, b = diagonal_pair
        result = build(left, a).times(build(right, b))
        np.testing.assert_array_equal(result.to_array(), a @ b)

    @pytest.mark.parametrize("left, right", PAIRS, ids=ids(PAIRS))
    def test_equals_across_representations(self, left, right, diagonal_pair):
        a, _ = diagonal_pair
        assert build(left, a).equals(build(right, a))
        assert build(left, a) == build(right, a)


class TestGeneralPairs:

    @pytest.mark.parametrize("left, right", GENERAL_PAIRS, ids=ids(GENERAL_PAIRS))
    def test_plus_and_times(self, left, right, general_pair):
        a, b = general_pair
        tier = select_tolerance(factorized=False)
        x, y = build(left, a), build(right, b)
        np.testing.assert_allclose(x.plus(y).to_array(), a + b, rtol=tier.rtol, atol=tier.atol)
        np.testing.assert_allclose(x.times(y).to_array(), a @ b, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(x.dot_times(y).to_array(), a * b, rtol=tier.rtol, atol=tier.atol)

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    @pytest.mark.parametrize("vector_cls", VECTOR_TYPES)
    def test_vector_products(self, cls, vector_cls, rng):
        a = np.diag(rng.standard_normal(4)) if cls is DiagonalMatrix else rng.standard_normal((4, 4))
        values = np.array([0.0, 1.5, 0.0, -2.0])
        m = build(cls, a)
        v = vector_cls.from_array(values)
        np.testing.assert_allclose(m.times(v).to_array(), a @ values, atol=1e-12)
        np.testing.assert_allclose(m.pre_times(v).to_array(), values @ a, atol=1e-12)
        np.testing.assert_allclose((v @ m).to_array(), values @ a, atol=1e-12)

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    def test_solve_matches_dense(self, cls, rng):
        tier = select_tolerance(factorized=True)
        if cls is DiagonalMatrix:
            a = np.diag([2.0, -1.0, 4.0, 0.5])
        else:
            a = rng.standard_normal((4, 4)) + 4 * np.eye(4)
        b = rng.standard_normal(4)
        x = build(cls, a).solve(DenseVector.from_array(b))
        np.testing.assert_allclose(x.to_array(), np.linalg.solve(a, b), rtol=tier.rtol, atol=tier.atol)


class TestProperties:

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    def test_rank_invariant_under_transpose(self, cls, rng):
        if cls is DiagonalMatrix:
            a = np.diag([1.0, 0.0, 3.0])
        else:
            a = np.outer(rng.standard_normal(3), rng.standard_normal(3))
        m = build(cls, a)
        assert m.rank(effective_zero=1e-10) == m.transpose().rank(effective_zero=1e-10)

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    def test_vector_round_trip(self, cls):
        a = np.diag([1.0, 0.0, -3.0]) if cls is DiagonalMatrix else np.arange(9.0).reshape(3, 3)
        m = build(cls, a)
        target = m.matrix_factory.create_matrix(3, 3)
        target.convert_from_vector(m.convert_to_vector())
        assert target == m
        assert type(target) is cls

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    def test_copy_results_do_not_alias(self, cls):
        a = np.diag([1.0, 2.0])
        m = build(cls, a)
        result = m.plus(build(cls, a))
        result.set(0, 0, 100.0)
        assert m.get(0, 0) == 1.0

    @pytest.mark.parametrize("cls", MATRIX_TYPES)
    def test_in_place_does_not_alias_argument(self, cls):
        a = np.diag([1.0, 2.0])
        m = build(cls, a)
        other = build(cls, a)
        m.plus_equals(other)
        m.set(1, 1, 50.0)
        assert other.get(1, 1) == 2.0
