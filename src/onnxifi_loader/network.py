"""Default network construction for models made of supported operators."""

from typing import TYPE_CHECKING, Dict, List

import onnx
from onnx import numpy_helper

from .dtypes import elem_kind_for
from .errors import GraphConstructionError, UnsupportedOperatorError, WeightDataError
from .ir import Tensor, Visibility

if TYPE_CHECKING:
    from .loader import ModelLoader


def _materialize_weight(loader: "ModelLoader", name: str,
                        initializers: Dict[str, onnx.TensorProto]) -> bool:
    """Create a private variable for a weight the first time a node uses it."""
    if name in loader.weight_vars:
        return True

    if name in loader.tensors:
        tensor = loader.tensors[name]
    elif name in initializers:
        init = initializers[name]
        kind = elem_kind_for(init.data_type, name)
        try:
            tensor = Tensor.from_array(kind, tuple(init.dims), numpy_helper.to_array(init))
        except (ValueError, MemoryError) as e:
            raise WeightDataError(f"Initializer {name!r} has inconsistent data: {e}") from e
    else:
        return False

    loader.weight_vars[name] = loader.staging.create_variable(name, tensor, Visibility.PRIVATE)
    return True


def _resolve_input(loader: "ModelLoader", name: str,
                   initializers: Dict[str, onnx.TensorProto]) -> None:
    if name in loader.node_values or name in loader.input_vars:
        return
    if not _materialize_weight(loader, name, initializers):
        raise GraphConstructionError(f"Unknown value {name!r}")


def build_network(loader: "ModelLoader", graph: onnx.GraphProto) -> None:
    """
    Create one node per ONNX node, in order.

    Each operand must already be produced by an earlier node, be a declared
    input, or name a loaded weight or graph initializer.

    Raises:
        UnsupportedOperatorError: op type is missing from the registry
        GraphConstructionError: an operand cannot be resolved
    """
    initializers = {init.name: init for init in graph.initializer}

    for index, node_def in enumerate(graph.node):
        capability = loader.registry.lookup(node_def.op_type)
        if capability is None:
            raise UnsupportedOperatorError(node_def.op_type)

        # Empty names mark omitted optional operands
        inputs: List[str] = [name for name in node_def.input if name]
        for name in inputs:
            _resolve_input(loader, name, initializers)

        node = loader.staging.create_node(
            name=node_def.name or f"{node_def.op_type}_{index}",
            kind=capability.kind,
            elem_kind=capability.elem_kind,
            inputs=inputs,
            outputs=[name for name in node_def.output if name],
        )
        for output in node.outputs:
            loader.node_values[output] = node


def finalize_outputs(loader: "ModelLoader", graph: onnx.GraphProto) -> None:
    """Record the graph outputs, each of which must name a known value."""
    if not graph.output:
        raise GraphConstructionError("Graph declares no outputs")

    for value_info in graph.output:
        try:
            loader.get_node_value_by_name(value_info.name)
        except KeyError:
            raise GraphConstructionError(f"Output {value_info.name!r} is not produced by the graph") from None
        loader.staging.outputs.append(value_info.name)
