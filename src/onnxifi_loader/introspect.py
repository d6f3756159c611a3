"""Single-operator capability queries."""

from typing import Optional, Tuple

from .dtypes import ElemKind
from .errors import ModelDecodeError
from .ir import NodeKind
from .loader import ModelBytes, ModelLoader
from .operators.registry import OperatorRegistry, get_registry


def parse_operator(model: ModelBytes,
                   size: Optional[int] = None,
                   registry: Optional[OperatorRegistry] = None) -> Optional[Tuple[NodeKind, ElemKind]]:
    """
    Report which node the backend would build for a one-operator model.

    Args:
        model: Serialized ONNX ModelProto
        size: Number of bytes of ``model`` to decode, defaults to all
        registry: Operator table, defaults to the global registry

    Returns:
        (node kind, element kind) if the graph holds exactly one node of a
        registered op type, otherwise None. Undecodable input also yields None.
    """
    try:
        model_def = ModelLoader.load_proto(model, size)
    except ModelDecodeError:
        return None

    graph = model_def.graph

    # Only a single operator is allowed in the model.
    if len(graph.node) != 1:
        return None

    capability = (registry or get_registry()).lookup(graph.node[0].op_type)
    if capability is None:
        return None
    return capability.as_pair()


def supports_operator(model: ModelBytes, size: Optional[int] = None,
                      registry: Optional[OperatorRegistry] = None) -> bool:
    return parse_operator(model, size, registry) is not None
