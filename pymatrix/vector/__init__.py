"""
Vector representations.

Public API:
    BaseVector: shared contract
    DenseVector: contiguous float64 array
    SparseVector: sorted index/value pairs with lazy compression
"""

from pymatrix.vector.base import BaseVector
from pymatrix.vector.dense import DenseVector
from pymatrix.vector.sparse import SparseVector

__all__ = [
    "BaseVector",
    "DenseVector",
    "SparseVector",
]
