"""ONNX model loader: declares inputs, ingests weights and assembles the graph."""

import sys
import warnings
from typing import Dict, Optional, Sequence, Union

import onnx
from google.protobuf.message import DecodeError

from .config import LoaderConfig
from .descriptor import TensorDescriptor
from .dtypes import MemoryType, elem_kind_for, source_dtype_for
from .errors import (
    LoaderError,
    LoaderWarning,
    ModelDecodeError,
    NameCollisionError,
    UnsupportedMemoryTypeError,
    UnsupportedShapeError,
    UnsupportedTypeError,
    WeightDataError,
)
from .ir import Function, Node, Tensor, Variable, Visibility, element_count
from .network import build_network, finalize_outputs
from .operators.registry import OperatorRegistry, get_registry

ModelBytes = Union[bytes, bytearray, memoryview]


def _declared_dims(type_proto: onnx.TypeProto, name: str,
                   unknown_dim_value: Optional[int] = None) -> list:
    """Extents of a tensor TypeProto, rejecting symbolic dims unless defaulted."""
    tensor_type = type_proto.tensor_type
    if not tensor_type.HasField("shape"):
        raise UnsupportedShapeError(f"Input {name!r} has no declared shape")

    dims = []
    for i, d in enumerate(tensor_type.shape.dim):
        if d.WhichOneof("value") == "dim_value":
            if d.dim_value < 0:
                raise UnsupportedShapeError(f"Input {name!r} has negative extent {d.dim_value} at dimension {i}")
            dims.append(d.dim_value)
        elif unknown_dim_value is not None:
            dims.append(unknown_dim_value)
        else:
            label = d.dim_param or "?"
            raise UnsupportedShapeError(
                f"Input {name!r} has unknown dimension {i} ({label}); only concrete extents are supported"
            )
    return dims


def tensor_for_type(type_proto: onnx.TypeProto, name: str = "",
                    unknown_dim_value: Optional[int] = None) -> Tensor:
    """
    Create an empty tensor with the shape and element kind of ``type_proto``.

    No data is associated with the tensor; inputs are bound at run time.
    """
    if type_proto.WhichOneof("value") != "tensor_type":
        raise UnsupportedTypeError(0, name)
    kind = elem_kind_for(type_proto.tensor_type.elem_type, name)
    dims = _declared_dims(type_proto, name, unknown_dim_value)
    if element_count(dims) * kind.element_size > sys.maxsize:
        raise UnsupportedShapeError(f"Input {name!r} shape {tuple(dims)} is too large to allocate")
    try:
        return Tensor(kind, dims)
    except (RuntimeError, MemoryError) as e:
        raise UnsupportedShapeError(f"Input {name!r} shape {tuple(dims)} could not be allocated: {e}") from e


def load_weight(descriptor: TensorDescriptor) -> Tensor:
    """
    Copy one host weight buffer into a new tensor.

    Float32 buffers are copied verbatim. 64-bit integer buffers are read as
    signed int64 and narrowed to the index type, so values outside the int32
    range wrap.

    Raises:
        UnsupportedMemoryTypeError: buffer is not in CPU memory
        UnsupportedTypeError: data type is not float32 or a 64-bit integer
        WeightDataError: shape or buffer length is inconsistent
    """
    # Only CPU memory tensors are supported.
    if descriptor.memory_type != MemoryType.CPU:
        raise UnsupportedMemoryTypeError(descriptor.name, descriptor.memory_type)

    dims = descriptor.extents()
    kind = elem_kind_for(descriptor.data_type, descriptor.name)
    source_dtype = source_dtype_for(descriptor.data_type, descriptor.name)

    size = element_count(dims)
    if size * source_dtype.itemsize > sys.maxsize:
        raise WeightDataError(f"Weight {descriptor.name!r} shape {dims} is too large to load")
    try:
        values = descriptor.read(source_dtype, size)
        return Tensor.from_array(kind, dims, values)
    except MemoryError as e:
        raise WeightDataError(f"Weight {descriptor.name!r} could not be allocated: {e}") from e


class ModelLoader:
    """
    Loads a serialized ONNX model and its weights into a Function.

    Everything is staged in a private function and moved into the target
    only once every stage has succeeded. Instances are not thread safe.
    """

    def __init__(self,
                 function: Function,
                 config: Optional[LoaderConfig] = None,
                 registry: Optional[OperatorRegistry] = None):
        """
        Args:
            function: Graph to populate on a successful load
            config: Loader settings, defaults to LoaderConfig()
            registry: Operator table, defaults to the global registry
        """
        self.function = function
        self.staging = Function(name=function.name)
        self.config = (config or LoaderConfig()).validate()
        self.registry = registry or get_registry()

        # Name tables
        self.input_vars: Dict[str, Variable] = {}
        self.tensors: Dict[str, Tensor] = {}

        # Populated during network construction
        self.weight_vars: Dict[str, Variable] = {}
        self.node_values: Dict[str, Node] = {}

        self.ir_version = 0
        self.opset_version = 0

    @staticmethod
    def load_proto(model: ModelBytes, size: Optional[int] = None) -> onnx.ModelProto:
        """Decode serialized bytes into a ModelProto."""
        data = bytes(model) if size is None else bytes(model[:size])
        model_def = onnx.ModelProto()
        try:
            model_def.ParseFromString(data)
        except DecodeError as e:
            raise ModelDecodeError(f"Failed to decode ONNX model: {e}") from e
        return model_def

    def set_version(self, model_def: onnx.ModelProto):
        """Record IR and default-domain opset versions."""
        self.ir_version = model_def.ir_version
        self.opset_version = 0
        for opset in model_def.opset_import:
            if opset.domain in ("", "ai.onnx"):
                self.opset_version = opset.version

    def load_inputs(self, graph: onnx.GraphProto):
        """Create a public variable for every declared graph input."""
        initializers = set()
        if self.config.skip_initializer_inputs:
            initializers = {init.name for init in graph.initializer}

        for value_info in graph.input:
            if value_info.name in initializers:
                continue
            tensor = tensor_for_type(value_info.type, value_info.name,
                                     self.config.unknown_dim_value)
            var = self.staging.create_variable(value_info.name, tensor, Visibility.PUBLIC)
            self.input_vars[value_info.name] = var

    def load_weights(self, descriptors: Sequence[TensorDescriptor],
                     count: Optional[int] = None):
        """
        Load a batch of weight descriptors.

        Args:
            descriptors: Raw weight descriptors
            count: Number of descriptors to consume, defaults to all of them

        Either every descriptor is loaded or none are kept.
        """
        if count is None:
            count = len(descriptors)
        if count > len(descriptors):
            raise LoaderError(f"Weight count {count} exceeds {len(descriptors)} descriptors")

        loaded: Dict[str, Tensor] = {}
        for i in range(count):
            descriptor = descriptors[i]
            loaded[descriptor.name] = load_weight(descriptor)

        self.tensors.update(loaded)

    def check_name_collisions(self):
        """
        Apply the configured policy to names shared by inputs and weights.

        "reject" fails the load, "allow" keeps both (inputs shadow weights) and
        "merge" drops the input declaration so the weight data is used.
        """
        policy = self.config.name_collision
        if policy == "allow":
            return
        shared = sorted(set(self.input_vars) & set(self.tensors))
        if not shared:
            return
        if policy == "reject":
            raise NameCollisionError(f"Weights shadow declared inputs: {shared}")

        for name in shared:
            del self.input_vars[name]
            self.staging.variables = [v for v in self.staging.variables if v.name != name]

    def load_network(self, graph: onnx.GraphProto):
        """Build nodes for the graph. Override to plug in another builder."""
        build_network(self, graph)

    def set_output_nodes(self, graph: onnx.GraphProto):
        """Mark graph outputs. Override to plug in another finalizer."""
        finalize_outputs(self, graph)

    def commit(self):
        """Move staged variables and nodes into the target function."""
        self.function.adopt(self.staging)

    def get_input_variable(self, name: str) -> Variable:
        return self.input_vars[name]

    def get_tensor_by_name(self, name: str) -> Tensor:
        """Weight tensor loaded under ``name``."""
        return self.tensors[name]

    def get_node_value_by_name(self, name: str) -> Union[Node, Variable]:
        """Node producing ``name``, else the input or weight variable called ``name``."""
        if name in self.node_values:
            return self.node_values[name]
        if name in self.input_vars:
            return self.input_vars[name]
        if name in self.weight_vars:
            return self.weight_vars[name]
        raise KeyError(name)

    @classmethod
    def parse(cls,
              model: ModelBytes,
              weights: Sequence[TensorDescriptor],
              function: Function,
              size: Optional[int] = None,
              config: Optional[LoaderConfig] = None,
              registry: Optional[OperatorRegistry] = None) -> Optional["ModelLoader"]:
        """
        Load a model and its weights into ``function``.

        Args:
            model: Serialized ONNX ModelProto
            weights: One descriptor per trained parameter
            function: Graph to populate
            size: Number of bytes of ``model`` to decode, defaults to all
            config: Loader settings
            registry: Operator table used for network construction

        Returns:
            The loader on success, None if any stage failed. On failure
            ``function`` is left untouched.
        """
        loader = cls(function, config=config, registry=registry)
        try:
            model_def = loader.load_proto(model, size)
            loader.set_version(model_def)

            graph = model_def.graph
            loader.load_inputs(graph)
            loader.load_weights(weights)
            loader.check_name_collisions()

            loader.load_network(graph)
            loader.set_output_nodes(graph)
        except LoaderError as e:
            if loader.config.raise_errors:
                raise
            warnings.warn(f"Model loading failed: {e}", LoaderWarning)
            return None

        loader.commit()
        return loader


def print_loader_summary(loader: ModelLoader) -> None:
    """Pretty print what a loader recorded."""
    print("=" * 60)
    print("Model Loader")
    print("=" * 60)
    print(f"IR version: {loader.ir_version}")
    print(f"Opset version: {loader.opset_version}")

    print(f"\nInputs: {len(loader.input_vars)}")
    for name, var in loader.input_vars.items():
        print(f"  {name}: shape={var.shape}, kind={var.elem_kind.value}")

    print(f"\nWeights: {len(loader.tensors)}")
    for name, tensor in list(loader.tensors.items())[:5]:
        print(f"  {name}: shape={tensor.shape}, kind={tensor.elem_kind.value}")
    if len(loader.tensors) > 5:
        print(f"  ... and {len(loader.tensors) - 5} more")
    print("=" * 60)
