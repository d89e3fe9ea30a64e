"""
pymatrix: dense, sparse and diagonal matrices and vectors for Python.

Every representation shares one arithmetic contract. Binary operations are
routed to an algorithm chosen by the concrete types of both operands, so a
diagonal times a sparse matrix never touches a dense grid.

Submodules:
    core: Exceptions, validation, tolerances, kind tags
    vector: DenseVector, SparseVector
    matrix: DenseMatrix, SparseMatrix, DiagonalMatrix
    factory: Representation-agnostic creation and defaults
"""

__version__ = "0.1.0"

from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    OutOfRangeError,
    InvalidAssignmentError,
    MatrixOverflowError,
    NumericalError,
    SingularMatrixError,
    SparseEfficiencyWarning,
)
from pymatrix.vector import BaseVector, DenseVector, SparseVector
from pymatrix.matrix import BaseMatrix, DenseMatrix, SparseMatrix, DiagonalMatrix
from pymatrix.factory import (
    MatrixFactory,
    VectorFactory,
    create_matrix,
    create_vector,
    get_default_matrix_factory,
    set_default_matrix_factory,
    get_default_vector_factory,
    set_default_vector_factory,
)

__all__ = [
    "__version__",
    # Exceptions
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "OutOfRangeError",
    "InvalidAssignmentError",
    "MatrixOverflowError",
    "NumericalError",
    "SingularMatrixError",
    "SparseEfficiencyWarning",
    # Vectors
    "BaseVector",
    "DenseVector",
    "SparseVector",
    # Matrices
    "BaseMatrix",
    "DenseMatrix",
    "SparseMatrix",
    "DiagonalMatrix",
    # Factories
    "MatrixFactory",
    "VectorFactory",
    "create_matrix",
    "create_vector",
    "get_default_matrix_factory",
    "set_default_matrix_factory",
    "get_default_vector_factory",
    "set_default_vector_factory",
]
