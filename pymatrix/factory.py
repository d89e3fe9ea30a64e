"""
Matrix and vector factories.

A factory creates matrices (or vectors) of one representation. Callers that
should not care about storage ask the package defaults instead:

    from pymatrix.factory import create_matrix, set_default_matrix_factory

    set_default_matrix_factory('sparse')
    m = create_matrix(100, 100)         # SparseMatrix

Every matrix exposes the factory of its own representation through
``matrix_factory`` and every vector through ``vector_factory``, so generic
code can produce "more of the same kind" without naming a class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from numpy.typing import ArrayLike

from pymatrix.core.validation import check_array, check_square
from pymatrix.core.exceptions import DimensionError
from pymatrix.core.kinds import DENSE, DIAGONAL, SPARSE
from pymatrix.matrix.base import BaseMatrix
from pymatrix.matrix.dense import DenseMatrix
from pymatrix.matrix.diagonal import DiagonalMatrix
from pymatrix.matrix.sparse import SparseMatrix
from pymatrix.vector.base import BaseVector
from pymatrix.vector.dense import DenseVector
from pymatrix.vector.sparse import SparseVector


# =====================================================================
# Matrix factories
# =====================================================================

class MatrixFactory(ABC):
    """Creates matrices of a single representation."""

    @property
    @abstractmethod
    def kind(self) -> str:
        ...

    @abstractmethod
    def create_matrix(self, num_rows: int, num_columns: int) -> BaseMatrix:
        """All-zero matrix of the given shape."""
        ...

    @abstractmethod
    def copy_matrix(self, matrix: BaseMatrix) -> BaseMatrix:
        """Copy of ``matrix`` converted to this representation."""
        ...

    @abstractmethod
    def copy_array(self, array: ArrayLike) -> BaseMatrix:
        """Matrix holding the values of a 2-D array-like."""
        ...

    def create_identity(self, num_rows: int, num_columns: int) -> BaseMatrix:
        result = self.create_matrix(num_rows, num_columns)
        result.identity()
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DenseMatrixFactory(MatrixFactory):

    @property
    def kind(self) -> str:
        return DENSE

    def create_matrix(self, num_rows: int, num_columns: int) -> DenseMatrix:
        return DenseMatrix(num_rows, num_columns)

    def copy_matrix(self, matrix: BaseMatrix) -> DenseMatrix:
        return DenseMatrix.from_matrix(matrix)

    def copy_array(self, array: ArrayLike) -> DenseMatrix:
        return DenseMatrix.from_array(array)


class SparseMatrixFactory(MatrixFactory):

    @property
    def kind(self) -> str:
        return SPARSE

    def create_matrix(self, num_rows: int, num_columns: int) -> SparseMatrix:
        return SparseMatrix(num_rows, num_columns)

    def copy_matrix(self, matrix: BaseMatrix) -> SparseMatrix:
        return SparseMatrix.from_matrix(matrix)

    def copy_array(self, array: ArrayLike) -> SparseMatrix:
        return SparseMatrix.from_array(array)


class DiagonalMatrixFactory(MatrixFactory):
    """
    Diagonal matrices are square, so every requested shape must be too.

    Raises:
        DimensionError: For a non-square shape
        InvalidAssignmentError: When copying a matrix or array with a
            nonzero off-diagonal cell
    """

    @property
    def kind(self) -> str:
        return DIAGONAL

    def create_matrix(self, num_rows: int, num_columns: int) -> DiagonalMatrix:
        if num_rows != num_columns:
            raise DimensionError(
                f"Diagonal matrices must be square, got {num_rows}x{num_columns}"
            )
        return DiagonalMatrix(num_rows)

    def copy_matrix(self, matrix: BaseMatrix) -> DiagonalMatrix:
        return DiagonalMatrix.from_matrix(matrix)

    def copy_array(self, array: ArrayLike) -> DiagonalMatrix:
        dense = DenseMatrix.from_array(array)
        check_square(dense, "DiagonalMatrixFactory.copy_array")
        return DiagonalMatrix.from_matrix(dense)


# =====================================================================
# Vector factories
# =====================================================================

class VectorFactory(ABC):
    """Creates vectors of a single representation."""

    @property
    @abstractmethod
    def kind(self) -> str:
        ...

    @abstractmethod
    def create_vector(self, dimensionality: int) -> BaseVector:
        """All-zero vector of the given dimensionality."""
        ...

    @abstractmethod
    def copy_vector(self, vector: BaseVector) -> BaseVector:
        ...

    @abstractmethod
    def copy_values(self, values: ArrayLike) -> BaseVector:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DenseVectorFactory(VectorFactory):

    @property
    def kind(self) -> str:
        return DENSE

    def create_vector(self, dimensionality: int) -> DenseVector:
        return DenseVector(dimensionality)

    def copy_vector(self, vector: BaseVector) -> DenseVector:
        return DenseVector.from_vector(vector)

    def copy_values(self, values: ArrayLike) -> DenseVector:
        return DenseVector.from_array(check_array(values, "values").reshape(-1))


class SparseVectorFactory(VectorFactory):

    @property
    def kind(self) -> str:
        return SPARSE

    def create_vector(self, dimensionality: int) -> SparseVector:
        return SparseVector(dimensionality)

    def copy_vector(self, vector: BaseVector) -> SparseVector:
        return SparseVector.from_vector(vector)

    def copy_values(self, values: ArrayLike) -> SparseVector:
        return SparseVector.from_array(check_array(values, "values").reshape(-1))


DENSE_MATRIX_FACTORY = DenseMatrixFactory()
SPARSE_MATRIX_FACTORY = SparseMatrixFactory()
DIAGONAL_MATRIX_FACTORY = DiagonalMatrixFactory()
DENSE_VECTOR_FACTORY = DenseVectorFactory()
SPARSE_VECTOR_FACTORY = SparseVectorFactory()


# =====================================================================
# Kind name → factory mapping + defaults
# =====================================================================

_MATRIX_FACTORIES: dict[str, MatrixFactory] = {
    DENSE: DENSE_MATRIX_FACTORY,
    SPARSE: SPARSE_MATRIX_FACTORY,
    DIAGONAL: DIAGONAL_MATRIX_FACTORY,
}

_VECTOR_FACTORIES: dict[str, VectorFactory] = {
    DENSE: DENSE_VECTOR_FACTORY,
    SPARSE: SPARSE_VECTOR_FACTORY,
}

_default_matrix_factory: MatrixFactory = DENSE_MATRIX_FACTORY
_default_vector_factory: VectorFactory = DENSE_VECTOR_FACTORY


def resolve_matrix_factory(factory: str | MatrixFactory) -> MatrixFactory:
    """Resolve a kind name ('dense', 'sparse', 'diagonal') or factory instance.

    Raises:
        ValueError: If the name is not recognized.
        TypeError: If the argument is neither a string nor a MatrixFactory.
    """
    if isinstance(factory, MatrixFactory):
        return factory
    if isinstance(factory, str):
        result = _MATRIX_FACTORIES.get(factory.lower())
        if result is None:
            valid = ', '.join(sorted(_MATRIX_FACTORIES))
            raise ValueError(f"Unknown matrix kind: {factory!r}. Valid kinds: {valid}")
        return result
    raise TypeError(
        f"factory must be str or MatrixFactory, got {type(factory).__name__}"
    )


def resolve_vector_factory(factory: str | VectorFactory) -> VectorFactory:
    """Resolve a kind name ('dense', 'sparse') or factory instance."""
    if isinstance(factory, VectorFactory):
        return factory
    if isinstance(factory, str):
        result = _VECTOR_FACTORIES.get(factory.lower())
        if result is None:
            valid = ', '.join(sorted(_VECTOR_FACTORIES))
            raise ValueError(f"Unknown vector kind: {factory!r}. Valid kinds: {valid}")
        return result
    raise TypeError(
        f"factory must be str or VectorFactory, got {type(factory).__name__}"
    )


def get_default_matrix_factory() -> MatrixFactory:
    return _default_matrix_factory


def set_default_matrix_factory(factory: str | MatrixFactory) -> None:
    global _default_matrix_factory
    _default_matrix_factory = resolve_matrix_factory(factory)


def get_default_vector_factory() -> VectorFactory:
    return _default_vector_factory


def set_default_vector_factory(factory: str | VectorFactory) -> None:
    global _default_vector_factory
    _default_vector_factory = resolve_vector_factory(factory)


def create_matrix(num_rows: int, num_columns: int) -> BaseMatrix:
    """All-zero matrix from the default matrix factory."""
    return _default_matrix_factory.create_matrix(num_rows, num_columns)


def create_vector(dimensionality: int) -> BaseVector:
    """All-zero vector from the default vector factory."""
    return _default_vector_factory.create_vector(dimensionality)
