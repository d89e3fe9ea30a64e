"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatrix import factory


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def well_conditioned(rng):
    """Random 4x4 matrix shifted to be safely invertible."""
    n = 4
    A = rng.standard_normal((n, n)) + n * np.eye(n)
    return A


@pytest.fixture
def sparse_array(rng):
    """5x4 array with roughly half of its cells zero."""
    A = rng.standard_normal((5, 4))
    A[rng.random((5, 4)) < 0.5] = 0.0
    return A


@pytest.fixture
def rank_deficient():
    """3x3 matrix whose third column is the sum of the first two."""
    return np.array([
        [1.0, 2.0, 3.0],
        [4.0, 5.0, 9.0],
        [7.0, 8.0, 15.0],
    ])


@pytest.fixture(autouse=True)
def restore_default_factories():
    """Tests that change the package defaults do not leak into each other."""
    matrix_default = factory.get_default_matrix_factory()
    vector_default = factory.get_default_vector_factory()
    yield
    factory.set_default_matrix_factory(matrix_default)
    factory.set_default_vector_factory(vector_default)
