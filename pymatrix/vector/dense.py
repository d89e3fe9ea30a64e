"""
Dense vector backed by a contiguous float64 numpy array.

Sparse operands are combined by touching only their stored indices, so
``dense += sparse`` costs O(nnz) rather than O(dimensionality).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.kinds import DENSE
from pymatrix.core.validation import (
    check_1d,
    check_array,
    check_dimensionality,
    check_index,
    check_size,
)
from pymatrix.vector.base import BaseVector

if TYPE_CHECKING:
    from pymatrix.factory import VectorFactory
    from pymatrix.vector.sparse import SparseVector


class DenseVector(BaseVector):
    """
    Dense 1-D vector.

    Construction:
        DenseVector(3)                        # zeros
        DenseVector.from_array([1.0, 2.0])    # copy of the values
        DenseVector.from_vector(v)            # copy of any vector
    """

    kind = DENSE

    def __init__(self, dimensionality: int):
        dimensionality = check_size(dimensionality, "dimensionality")
        self._values = np.zeros(dimensionality, dtype=np.float64)

    @classmethod
    def _wrap(cls, values: NDArray[np.float64]) -> DenseVector:
        # Takes ownership of ``values`` without copying.
        result = cls.__new__(cls)
        result._values = values
        return result

    @classmethod
    def from_array(cls, values: ArrayLike) -> DenseVector:
        array = check_array(values, "values")
        check_1d(array, "values")
        return cls._wrap(array)

    @classmethod
    def from_vector(cls, vector: BaseVector) -> DenseVector:
        return cls._wrap(vector.to_array())

    @property
    def dimensionality(self) -> int:
        return int(self._values.shape[0])

    @property
    def vector_factory(self) -> VectorFactory:
        from pymatrix.factory import DENSE_VECTOR_FACTORY

        return DENSE_VECTOR_FACTORY

    def _get(self, index: int) -> float:
        return float(self._values[index])

    def _set(self, index: int, value: float) -> None:
        self._values[index] = value

    def to_array(self) -> NDArray[np.float64]:
        return self._values.copy()

    def clone(self) -> DenseVector:
        return DenseVector._wrap(self._values.copy())

    def is_sparse(self) -> bool:
        return False

    def get_entry_count(self) -> int:
        return self.dimensionality

    def scale_equals(self, scale: float) -> None:
        self._values *= float(scale)

    def zero(self) -> None:
        self._values.fill(0.0)

    def norm_2_squared(self) -> float:
        return float(self._values @ self._values)

    def sum(self) -> float:
        return float(np.sum(self._values))

    def sub_vector(self, min_index: int, max_index: int) -> DenseVector:
        min_index = check_index(min_index, self.dimensionality, "min_index")
        max_index = check_index(max_index, self.dimensionality, "max_index")
        return DenseVector._wrap(self._values[min_index:max_index + 1].copy())

    def convert_from_vector(self, parameters: BaseVector) -> None:
        check_dimensionality(parameters, self.dimensionality, "parameters")
        self._values[:] = parameters.to_array()

    # ------------------------------------------------------------------
    # Overloads
    # ------------------------------------------------------------------

    def _scaled_plus_equals_dense(self, other: DenseVector, scale: float) -> None:
        self._values += scale * other._values

    def _scaled_plus_equals_sparse(self, other: SparseVector, scale: float) -> None:
        indices, values = other._compressed_parts()
        self._values[indices] += scale * values

    def _dot_times_equals_dense(self, other: DenseVector) -> None:
        self._values *= other._values

    def _dot_times_equals_sparse(self, other: SparseVector) -> None:
        indices, values = other._compressed_parts()
        result = np.zeros_like(self._values)
        result[indices] = self._values[indices] * values
        self._values[:] = result

    def _dot_product_dense(self, other: DenseVector) -> float:
        return float(self._values @ other._values)

    def _dot_product_sparse(self, other: SparseVector) -> float:
        indices, values = other._compressed_parts()
        return float(self._values[indices] @ values)
