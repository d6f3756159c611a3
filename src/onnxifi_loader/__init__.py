"""
onnxifi_loader - Load ONNX models and host weight buffers into a compiler graph.

Declares graph inputs, ingests raw weights and answers single-operator
capability queries.
"""

__version__ = "0.1.0"

# Core imports
from .dtypes import DataType, ElemKind, MemoryType, elem_kind_for
from .descriptor import TensorDescriptor
from .ir import Function, Node, NodeKind, Tensor, Variable, Visibility, print_function
from .config import LoaderConfig
from .loader import ModelLoader, load_weight, print_loader_summary, tensor_for_type
from .introspect import parse_operator, supports_operator

# Operator table
from .operators.registry import (
    OperatorCapability,
    OperatorRegistry,
    get_registry,
    register_operator,
)

# Errors
from .errors import (
    LoaderError,
    LoaderWarning,
    ModelDecodeError,
    UnsupportedTypeError,
    UnsupportedShapeError,
    UnsupportedMemoryTypeError,
    WeightDataError,
    NameCollisionError,
    GraphConstructionError,
    UnsupportedOperatorError,
)


def parse(model, weights, function: Function, size=None, config: LoaderConfig = None):
    """
    Load ``model`` and ``weights`` into ``function``.

    Shorthand for ModelLoader.parse; returns the loader or None.
    """
    return ModelLoader.parse(model, weights, function, size=size, config=config)


__all__ = [
    # Core functions
    'parse',
    'parse_operator',
    'supports_operator',
    'elem_kind_for',
    'load_weight',
    'tensor_for_type',
    'print_function',
    'print_loader_summary',
    'get_registry',
    'register_operator',

    # Classes
    'ModelLoader',
    'LoaderConfig',
    'TensorDescriptor',
    'Function',
    'Tensor',
    'Variable',
    'Node',
    'NodeKind',
    'Visibility',
    'ElemKind',
    'DataType',
    'MemoryType',
    'OperatorCapability',
    'OperatorRegistry',

    # Errors
    'LoaderError',
    'LoaderWarning',
    'ModelDecodeError',
    'UnsupportedTypeError',
    'UnsupportedShapeError',
    'UnsupportedMemoryTypeError',
    'WeightDataError',
    'NameCollisionError',
    'GraphConstructionError',
    'UnsupportedOperatorError',

    # Version
    '__version__',
]
