"""Element kinds and the mapping from ONNX/ONNXIFI type tags onto them."""

from enum import Enum, IntEnum

import numpy as np
import onnx
import torch

from .errors import UnsupportedTypeError


class ElemKind(Enum):
    """Internal element representations."""
    FLOAT = "float32"
    INDEX = "index"  # 32-bit signed; 64-bit sources are narrowed

    @property
    def torch_dtype(self) -> torch.dtype:
        """Storage dtype backing tensors of this kind."""
        mapping = {
            ElemKind.FLOAT: torch.float32,
            ElemKind.INDEX: torch.int32,
        }
        return mapping[self]

    @property
    def numpy_dtype(self) -> np.dtype:
        return np.dtype(np.float32) if self is ElemKind.FLOAT else np.dtype(np.int32)

    @property
    def element_size(self) -> int:
        """Size of one element in bytes."""
        return self.numpy_dtype.itemsize


class DataType(IntEnum):
    """ONNXIFI data type tags. Values follow onnx.TensorProto.DataType."""
    UNDEFINED = onnx.TensorProto.UNDEFINED
    FLOAT32 = onnx.TensorProto.FLOAT
    UINT8 = onnx.TensorProto.UINT8
    INT8 = onnx.TensorProto.INT8
    UINT16 = onnx.TensorProto.UINT16
    INT16 = onnx.TensorProto.INT16
    INT32 = onnx.TensorProto.INT32
    INT64 = onnx.TensorProto.INT64
    FLOAT16 = onnx.TensorProto.FLOAT16
    FLOAT64 = onnx.TensorProto.DOUBLE
    UINT32 = onnx.TensorProto.UINT32
    UINT64 = onnx.TensorProto.UINT64


class MemoryType(IntEnum):
    """ONNXIFI memory location tags."""
    CPU = 0
    CUDA_BUFFER = 1
    OPENCL_BUFFER = 2
    OPENGLES_TEXTURE_2D = 4
    D3D_RESOURCE = 8


# Tags accepted by the loader. Anything missing here is rejected.
_TAG_TO_ELEM_KIND = {
    DataType.FLOAT32: ElemKind.FLOAT,
    DataType.INT64: ElemKind.INDEX,
    DataType.UINT64: ElemKind.INDEX,
}

# How raw host buffers are interpreted before conversion. Unsigned 64-bit
# weights are read as signed, matching the index narrowing rules.
_TAG_TO_SOURCE_DTYPE = {
    DataType.FLOAT32: np.dtype(np.float32),
    DataType.INT64: np.dtype(np.int64),
    DataType.UINT64: np.dtype(np.int64),
}


def elem_kind_for(tag: int, context: str = "") -> ElemKind:
    """
    Map an ONNX or ONNXIFI element type tag to an internal element kind.

    Args:
        tag: Integer type tag from a TypeProto or a tensor descriptor
        context: Optional name used in the error message

    Returns:
        The matching ElemKind

    Raises:
        UnsupportedTypeError: if the tag is not float32 or a 64-bit integer
    """
    try:
        return _TAG_TO_ELEM_KIND[DataType(tag)]
    except (KeyError, ValueError):
        raise UnsupportedTypeError(tag, context) from None


def source_dtype_for(tag: int, context: str = "") -> np.dtype:
    """numpy dtype used to read a raw buffer tagged with ``tag``."""
    try:
        return _TAG_TO_SOURCE_DTYPE[DataType(tag)]
    except (KeyError, ValueError):
        raise UnsupportedTypeError(tag, context) from None
