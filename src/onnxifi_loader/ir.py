"""Graph representation populated by the loader."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import torch

from .dtypes import ElemKind

Shape = Tuple[int, ...]


class Visibility(Enum):
    """Whether a variable is supplied from outside the graph."""
    PUBLIC = "public"
    PRIVATE = "private"


class NodeKind(Enum):
    """Node kinds the backend knows how to build."""
    CONVOLUTION = "convolution"
    RELU = "relu"
    SOFTMAX = "softmax"


def element_count(shape: Sequence[int]) -> int:
    """Product of extents, computed without fixed-width overflow."""
    return math.prod(int(d) for d in shape)


class Tensor:
    """
    Dense, typed buffer with a fixed shape.

    Element kind and shape are set at construction and never change; the
    storage is a contiguous torch tensor of ``elem_kind.torch_dtype``.
    """

    def __init__(self, elem_kind: ElemKind, shape: Sequence[int],
                 data: Optional[torch.Tensor] = None):
        dims = tuple(int(d) for d in shape)
        if any(d < 0 for d in dims):
            raise ValueError(f"Negative extent in shape {dims}")
        self._elem_kind = elem_kind
        self._shape = dims
        if data is None:
            data = torch.zeros(dims, dtype=elem_kind.torch_dtype)
        self._data = data

    @classmethod
    def from_array(cls, elem_kind: ElemKind, shape: Sequence[int], values: np.ndarray) -> "Tensor":
        """
        Build a tensor holding a copy of ``values`` in row-major order.

        Values are cast to the storage dtype of ``elem_kind``; 64-bit integers
        wrap when narrowed to the index type.
        """
        dims = tuple(int(d) for d in shape)
        flat = np.asarray(values).reshape(-1)
        expected = element_count(dims)
        if flat.size != expected:
            raise ValueError(f"Expected {expected} elements for shape {dims}, got {flat.size}")
        converted = flat.astype(elem_kind.numpy_dtype)
        return cls(elem_kind, dims, data=torch.from_numpy(converted).reshape(dims))

    @property
    def elem_kind(self) -> ElemKind:
        return self._elem_kind

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def size(self) -> int:
        """Number of elements (product of extents)."""
        return element_count(self._shape)

    @property
    def size_in_bytes(self) -> int:
        return self.size * self._elem_kind.element_size

    @property
    def data(self) -> torch.Tensor:
        return self._data

    def raw(self, index: int):
        """Element at linear position ``index``."""
        return self._data.reshape(-1)[index].item()

    def values(self) -> list:
        """All elements in linear order."""
        return self._data.reshape(-1).tolist()

    def __repr__(self) -> str:
        return f"Tensor(elem_kind={self._elem_kind.value}, shape={self._shape})"


@dataclass(eq=False)
class Variable:
    """Named graph value wrapping a tensor."""
    name: str
    tensor: Tensor
    visibility: Visibility

    @property
    def elem_kind(self) -> ElemKind:
        return self.tensor.elem_kind

    @property
    def shape(self) -> Shape:
        return self.tensor.shape


@dataclass(frozen=True)
class Node:
    name: str
    kind: NodeKind
    elem_kind: ElemKind
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]


@dataclass
class Function:
    """A graph of variables and nodes handed to the compiler."""
    name: str = "main"
    variables: List[Variable] = field(default_factory=list)
    nodes: List[Node] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)

    def create_variable(self, name: str, tensor: Tensor,
                        visibility: Visibility = Visibility.PRIVATE) -> Variable:
        """Create a variable owning ``tensor`` and add it to the graph."""
        var = Variable(name=name, tensor=tensor, visibility=visibility)
        self.variables.append(var)
        return var

    def create_node(self, name: str, kind: NodeKind, elem_kind: ElemKind,
                    inputs: Sequence[str], outputs: Sequence[str]) -> Node:
        node = Node(name=name, kind=kind, elem_kind=elem_kind,
                    inputs=tuple(inputs), outputs=tuple(outputs))
        self.nodes.append(node)
        return node

    def get_variable(self, name: str) -> Optional[Variable]:
        """Most recently created variable called ``name``, if any."""
        for var in reversed(self.variables):
            if var.name == name:
                return var
        return None

    def public_variables(self) -> Dict[str, Variable]:
        return {v.name: v for v in self.variables if v.visibility is Visibility.PUBLIC}

    def adopt(self, other: "Function") -> None:
        """Move every variable, node and output of ``other`` into this graph."""
        self.variables.extend(other.variables)
        self.nodes.extend(other.nodes)
        self.outputs.extend(other.outputs)
        other.variables = []
        other.nodes = []
        other.outputs = []


def print_function(fn: Function) -> None:
    """Pretty print a function for debugging."""
    print("=" * 60)
    print(f"Function {fn.name}")
    print("=" * 60)

    print(f"\nVariables: {len(fn.variables)}")
    for var in fn.variables[:10]:
        print(f"  {var.name}: shape={var.shape}, kind={var.elem_kind.value}, {var.visibility.value}")
    if len(fn.variables) > 10:
        print(f"  ... and {len(fn.variables) - 10} more")

    print(f"\nNodes: {len(fn.nodes)}")
    for node in fn.nodes[:10]:
        print(f"  [{node.name}] {node.kind.value}:")
        print(f"    inputs: {list(node.inputs)}")
        print(f"    outputs: {list(node.outputs)}")
    if len(fn.nodes) > 10:
        print(f"  ... and {len(fn.nodes) - 10} more")

    print(f"\nOutputs: {fn.outputs}")
    print("=" * 60)
