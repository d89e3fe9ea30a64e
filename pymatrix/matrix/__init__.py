"""
Matrix representations.

Public API:
    BaseMatrix: shared contract and generic entry points
    DenseMatrix: complete row-major grid
    SparseMatrix: compressed-row storage with lazy compression
    DiagonalMatrix: square matrix storing only its main diagonal
"""

from pymatrix.matrix.base import BaseMatrix
from pymatrix.matrix.dense import DenseMatrix
from pymatrix.matrix.sparse import SparseMatrix
from pymatrix.matrix.diagonal import DiagonalMatrix

__all__ = [
    "BaseMatrix",
    "DenseMatrix",
    "SparseMatrix",
    "DiagonalMatrix",
]
