"""
Sparse vector storing only its explicit entries.

Two-state storage:
    - Uncompressed: a dict ``index -> value`` accepting writes in any order
    - Compressed: sorted ``indices`` / ``values`` arrays

Writes to a position that is not already stored move the vector to the
uncompressed state. Every read, arithmetic operation and accessor compresses
first, so observable values always come from the canonical sorted form.
Explicit zeros written to a stored position stay stored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.kinds import SPARSE
from pymatrix.core.validation import (
    check_1d,
    check_array,
    check_dimensionality,
    check_index,
    check_size,
)
from pymatrix.core.exceptions import DimensionError, OutOfRangeError
from pymatrix.vector.base import BaseVector

if TYPE_CHECKING:
    from pymatrix.factory import VectorFactory
    from pymatrix.vector.dense import DenseVector


_EMPTY_INDICES = np.zeros(0, dtype=np.int64)
_EMPTY_VALUES = np.zeros(0, dtype=np.float64)


def merge_entries(
    indices: NDArray[np.int64],
    values: NDArray[np.float64],
) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
    """
    Sort entries by index and sum duplicates.

    Args:
        indices: Entry positions, any order, duplicates allowed
        values: Entry values, same length as indices

    Returns:
        (unique sorted indices, summed values)
    """
    if indices.size == 0:
        return _EMPTY_INDICES.copy(), _EMPTY_VALUES.copy()
    unique, inverse = np.unique(indices, return_inverse=True)
    summed = np.zeros(unique.shape[0], dtype=np.float64)
    np.add.at(summed, inverse, values)
    return unique.astype(np.int64), summed


class SparseVector(BaseVector):
    """
    Sparse 1-D vector.

    Construction:
        SparseVector(10)                                   # all zeros
        SparseVector.from_array([0.0, 2.0, 0.0])           # keeps nonzeros
        SparseVector.from_entries(10, [1, 7], [2.0, 5.0])  # duplicates summed
    """

    kind = SPARSE

    def __init__(self, dimensionality: int):
        self._dimensionality = check_size(dimensionality, "dimensionality")
        self._indices = _EMPTY_INDICES.copy()
        self._values = _EMPTY_VALUES.copy()
        self._buffer: dict[int, float] | None = None

    @classmethod
    def _wrap(
        cls,
        dimensionality: int,
        indices: NDArray[np.int64],
        values: NDArray[np.float64],
    ) -> SparseVector:
        # Takes ownership of canonical (sorted, unique) arrays.
        result = cls.__new__(cls)
        result._dimensionality = dimensionality
        result._indices = indices
        result._values = values
        result._buffer = None
        return result

    @classmethod
    def from_array(cls, values: ArrayLike) -> SparseVector:
        array = check_array(values, "values")
        check_1d(array, "values")
        indices = np.flatnonzero(array).astype(np.int64)
        return cls._wrap(array.shape[0], indices, array[indices])

    @classmethod
    def from_entries(
        cls,
        dimensionality: int,
        indices: ArrayLike,
        values: ArrayLike,
    ) -> SparseVector:
        """
        Build from parallel index/value sequences.

        Raises:
            DimensionError: If indices and values differ in length
            OutOfRangeError: If any index is outside [0, dimensionality)
        """
        dimensionality = check_size(dimensionality, "dimensionality")
        index_array = np.asarray(indices, dtype=np.int64).reshape(-1)
        value_array = check_array(values, "values").reshape(-1)
        if index_array.shape[0] != value_array.shape[0]:
            raise DimensionError(
                f"indices has {index_array.shape[0]} entries but values has "
                f"{value_array.shape[0]}"
            )
        if index_array.size and (index_array.min() < 0 or index_array.max() >= dimensionality):
            raise OutOfRangeError(
                f"indices: entries must lie in [0, {dimensionality})",
                bound=dimensionality,
            )
        merged_indices, merged_values = merge_entries(index_array, value_array)
        return cls._wrap(dimensionality, merged_indices, merged_values)

    @classmethod
    def from_vector(cls, vector: BaseVector) -> SparseVector:
        if isinstance(vector, SparseVector):
            return vector.clone()
        return cls.from_array(vector.to_array())

    # ------------------------------------------------------------------
    # Compression state machine
    # ------------------------------------------------------------------

    def is_compressed(self) -> bool:
        return self._buffer is None

    def compress(self) -> None:
        """Move buffered entries into the sorted canonical arrays."""
        if self._buffer is None:
            return
        if self._buffer:
            indices = np.fromiter(self._buffer.keys(), dtype=np.int64, count=len(self._buffer))
            values = np.fromiter(self._buffer.values(), dtype=np.float64, count=len(self._buffer))
            order = np.argsort(indices, kind='stable')
            self._indices = indices[order]
            self._values = values[order]
        else:
            self._indices = _EMPTY_INDICES.copy()
            self._values = _EMPTY_VALUES.copy()
        self._buffer = None

    def decompress(self) -> None:
        """Move the canonical arrays into the insertion buffer."""
        if self._buffer is not None:
            return
        self._buffer = dict(zip(self._indices.tolist(), self._values.tolist()))
        self._indices = _EMPTY_INDICES.copy()
        self._values = _EMPTY_VALUES.copy()

    def _compressed_parts(self) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
        # Internal arrays, not copies. Callers must not mutate them.
        self.compress()
        return self._indices, self._values

    def get_indices(self) -> NDArray[np.int64]:
        """Sorted positions of the stored entries (copy)."""
        self.compress()
        return self._indices.copy()

    def get_values(self) -> NDArray[np.float64]:
        """Values of the stored entries, aligned with get_indices (copy)."""
        self.compress()
        return self._values.copy()

    def eliminate_zeros(self) -> None:
        """Drop stored entries whose value is exactly zero."""
        self.compress()
        keep = self._values != 0.0
        self._indices = self._indices[keep]
        self._values = self._values[keep]

    # ------------------------------------------------------------------
    # BaseVector interface
    # ------------------------------------------------------------------

    @property
    def dimensionality(self) -> int:
        return self._dimensionality

    @property
    def vector_factory(self) -> VectorFactory:
        from pymatrix.factory import SPARSE_VECTOR_FACTORY

        return SPARSE_VECTOR_FACTORY

    def _position(self, index: int) -> int:
        pos = int(np.searchsorted(self._indices, index))
        if pos < self._indices.shape[0] and self._indices[pos] == index:
            return pos
        return -1

    def _get(self, index: int) -> float:
        self.compress()
        pos = self._position(index)
        return float(self._values[pos]) if pos >= 0 else 0.0

    def _set(self, index: int, value: float) -> None:
        if self._buffer is None:
            pos = self._position(index)
            if pos >= 0:
                self._values[pos] = value
                return
            if value == 0.0:
                return
            self.decompress()
        if value == 0.0 and index not in self._buffer:
            return
        self._buffer[index] = value

    def to_array(self) -> NDArray[np.float64]:
        indices, values = self._compressed_parts()
        result = np.zeros(self._dimensionality, dtype=np.float64)
        result[indices] = values
        return result

    def clone(self) -> SparseVector:
        indices, values = self._compressed_parts()
        return SparseVector._wrap(self._dimensionality, indices.copy(), values.copy())

    def is_sparse(self) -> bool:
        return True

    def get_entry_count(self) -> int:
        if self._buffer is not None:
            return len(self._buffer)
        return int(self._indices.shape[0])

    def scale_equals(self, scale: float) -> None:
        self.compress()
        self._values *= float(scale)

    def zero(self) -> None:
        self._indices = _EMPTY_INDICES.copy()
        self._values = _EMPTY_VALUES.copy()
        self._buffer = None

    def norm_2_squared(self) -> float:
        _, values = self._compressed_parts()
        return float(values @ values)

    def sum(self) -> float:
        _, values = self._compressed_parts()
        return float(np.sum(values))

    def sub_vector(self, min_index: int, max_index: int) -> SparseVector:
        min_index = check_index(min_index, self._dimensionality, "min_index")
        max_index = check_index(max_index, self._dimensionality, "max_index")
        indices, values = self._compressed_parts()
        keep = (indices >= min_index) & (indices <= max_index)
        return SparseVector._wrap(
            max(max_index - min_index + 1, 0),
            indices[keep] - min_index,
            values[keep].copy(),
        )

    def convert_from_vector(self, parameters: BaseVector) -> None:
        check_dimensionality(parameters, self._dimensionality, "parameters")
        if isinstance(parameters, SparseVector):
            indices, values = parameters._compressed_parts()
            self._indices = indices.copy()
            self._values = values.copy()
        else:
            array = parameters.to_array()
            self._indices = np.flatnonzero(array).astype(np.int64)
            self._values = array[self._indices]
        self._buffer = None

    def _assign_array(self, array: NDArray[np.float64]) -> None:
        # Replace contents with the nonzeros of a dense array.
        self._indices = np.flatnonzero(array).astype(np.int64)
        self._values = array[self._indices]
        self._buffer = None

    # ------------------------------------------------------------------
    # Overloads
    # ------------------------------------------------------------------

    def _scaled_plus_equals_dense(self, other: DenseVector, scale: float) -> None:
        self._assign_array(self.to_array() + scale * other._values)

    def _scaled_plus_equals_sparse(self, other: SparseVector, scale: float) -> None:
        indices, values = self._compressed_parts()
        other_indices, other_values = other._compressed_parts()
        self._indices, self._values = merge_entries(
            np.concatenate([indices, other_indices]),
            np.concatenate([values, scale * other_values]),
        )

    def _dot_times_equals_dense(self, other: DenseVector) -> None:
        indices, _ = self._compressed_parts()
        self._values *= other._values[indices]

    def _dot_times_equals_sparse(self, other: SparseVector) -> None:
        indices, _ = self._compressed_parts()
        self._values *= other._lookup(indices)

    def _lookup(self, positions: NDArray[np.int64]) -> NDArray[np.float64]:
        # Values at the given positions, zero where nothing is stored.
        indices, values = self._compressed_parts()
        if indices.size == 0:
            return np.zeros(positions.shape[0], dtype=np.float64)
        pos = np.searchsorted(indices, positions)
        pos = np.minimum(pos, indices.shape[0] - 1)
        found = indices[pos] == positions
        return np.where(found, values[pos], 0.0)

    def _dot_product_dense(self, other: DenseVector) -> float:
        indices, values = self._compressed_parts()
        return float(values @ other._values[indices])

    def _dot_product_sparse(self, other: SparseVector) -> float:
        indices, values = self._compressed_parts()
        return float(values @ other._lookup(indices))
