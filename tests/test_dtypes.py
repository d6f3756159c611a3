import pytest
import torch
from onnx import TensorProto

from onnxifi_loader import DataType, ElemKind, LoaderError, UnsupportedTypeError, elem_kind_for
from onnxifi_loader.dtypes import source_dtype_for


@pytest.mark.parametrize("tag, kind", [
    (TensorProto.FLOAT, ElemKind.FLOAT),
    (TensorProto.INT64, ElemKind.INDEX),
    (TensorProto.UINT64, ElemKind.INDEX),
    (DataType.FLOAT32, ElemKind.FLOAT),
])
def test_supported_tags_map_to_kind(tag, kind):
    assert elem_kind_for(tag) is kind


@pytest.mark.parametrize("tag", [
    TensorProto.UNDEFINED,
    TensorProto.DOUBLE,
    TensorProto.FLOAT16,
    TensorProto.INT32,
    TensorProto.UINT8,
    TensorProto.BOOL,
    TensorProto.STRING,
    999,
])
def test_unsupported_tags_raise_recoverable_error(tag):
    with pytest.raises(UnsupportedTypeError) as info:
        elem_kind_for(tag, "weight_a")
    assert isinstance(info.value, LoaderError)
    assert info.value.tag == tag
    assert "weight_a" in str(info.value)


def test_elem_kind_storage():
    assert ElemKind.FLOAT.torch_dtype == torch.float32
    assert ElemKind.INDEX.torch_dtype == torch.int32
    assert ElemKind.FLOAT.element_size == 4
    assert ElemKind.INDEX.element_size == 4


def test_unsigned_64_bit_buffers_are_read_as_signed():
    assert source_dtype_for(TensorProto.UINT64).name == "int64"
    assert source_dtype_for(TensorProto.FLOAT).name == "float32"
    with pytest.raises(UnsupportedTypeError):
        source_dtype_for(TensorProto.DOUBLE)
