"""Caller supplied weight descriptors."""

import ctypes
from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np

from .dtypes import DataType, MemoryType
from .errors import WeightDataError


@dataclass
class TensorDescriptor:
    """
    Self-describing raw weight buffer, one per trained parameter.

    ``buffer`` is either an object exposing the buffer protocol (bytes,
    bytearray, memoryview, numpy array) or an integer host address. It is
    only read while weights are being loaded; the loader keeps copies.
    """
    name: str
    data_type: int
    memory_type: int
    dimensions: int
    shape: Sequence[int]
    buffer: Any

    @classmethod
    def from_numpy(cls, name: str, array: np.ndarray,
                   memory_type: int = MemoryType.CPU) -> "TensorDescriptor":
        """Describe a host numpy array (float32 or int64)."""
        array = np.asarray(array)
        # ascontiguousarray promotes 0-d arrays to 1-d
        array = np.ascontiguousarray(array).reshape(array.shape)
        if array.dtype == np.float32:
            data_type = DataType.FLOAT32
        elif array.dtype == np.int64:
            data_type = DataType.INT64
        elif array.dtype == np.uint64:
            data_type = DataType.UINT64
        else:
            raise ValueError(f"No descriptor data type for numpy dtype {array.dtype}")
        return cls(
            name=name,
            data_type=int(data_type),
            memory_type=int(memory_type),
            dimensions=array.ndim,
            shape=tuple(array.shape),
            buffer=array,
        )

    def extents(self) -> Tuple[int, ...]:
        """The first ``dimensions`` entries of ``shape``."""
        if self.dimensions < 0 or self.dimensions > len(self.shape):
            raise WeightDataError(
                f"Weight {self.name!r} declares {self.dimensions} dimensions "
                f"but its shape has {len(self.shape)} entries"
            )
        dims = tuple(int(d) for d in self.shape[:self.dimensions])
        if any(d < 0 for d in dims):
            raise WeightDataError(f"Weight {self.name!r} has negative extent in shape {dims}")
        return dims

    def read(self, dtype: np.dtype, count: int) -> np.ndarray:
        """
        Copy ``count`` elements of ``dtype`` out of the buffer.

        Args:
            dtype: Element type the raw bytes are interpreted as
            count: Number of elements to read from offset 0

        Returns:
            A new numpy array that does not alias the buffer
        """
        nbytes = count * dtype.itemsize
        if count == 0:
            return np.empty(0, dtype=dtype)
        if self.buffer is None:
            raise WeightDataError(f"Weight {self.name!r} has no buffer")

        if isinstance(self.buffer, int):
            raw = (ctypes.c_char * nbytes).from_address(self.buffer)
            return np.frombuffer(raw, dtype=dtype, count=count).copy()

        view = memoryview(self.buffer)
        if not view.c_contiguous:
            raise WeightDataError(f"Weight {self.name!r} buffer is not contiguous")
        if view.nbytes < nbytes:
            raise WeightDataError(
                f"Weight {self.name!r} needs {nbytes} bytes for {count} elements, "
                f"buffer holds {view.nbytes}"
            )
        return np.frombuffer(self.buffer, dtype=dtype, count=count).copy()
