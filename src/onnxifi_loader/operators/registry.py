"""Operator table mapping ONNX op types to backend node kinds."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..dtypes import ElemKind
from ..ir import NodeKind


@dataclass(frozen=True)
class OperatorCapability:
    """What the backend builds for one ONNX operator type."""
    op_type: str  # ONNX op_type, case sensitive
    kind: NodeKind
    elem_kind: ElemKind = ElemKind.FLOAT

    def as_pair(self) -> Tuple[NodeKind, ElemKind]:
        return (self.kind, self.elem_kind)


class OperatorRegistry:
    """
    Registry of supported operators.
    Lookups are by exact op type; new operators are added with ``register``.
    """

    def __init__(self, defaults: bool = True):
        self.operators: Dict[str, OperatorCapability] = {}
        if defaults:
            self._register_default_operators()

    def _register_default_operators(self):
        """Register the operators the backend currently supports."""
        # Quantized and non-quantized variants come from different ONNX
        # operators; only fp32 is handled for now.
        self.register(OperatorCapability("Conv", NodeKind.CONVOLUTION, ElemKind.FLOAT))
        self.register(OperatorCapability("Relu", NodeKind.RELU, ElemKind.FLOAT))
        self.register(OperatorCapability("Softmax", NodeKind.SOFTMAX, ElemKind.FLOAT))

    def register(self, capability: OperatorCapability):
        """Add or replace the entry for ``capability.op_type``."""
        self.operators[capability.op_type] = capability

    def unregister(self, op_type: str):
        self.operators.pop(op_type, None)

    def lookup(self, op_type: str) -> Optional[OperatorCapability]:
        return self.operators.get(op_type)

    def supports(self, op_type: str) -> bool:
        return op_type in self.operators

    def list_operators(self) -> List[str]:
        return sorted(self.operators)


# Global registry instance
_global_registry = OperatorRegistry()


def get_registry() -> OperatorRegistry:
    """Get the global operator registry."""
    return _global_registry


def register_operator(op_type: str, kind: NodeKind,
                      elem_kind: ElemKind = ElemKind.FLOAT) -> OperatorCapability:
    """
    Register an operator in the global registry.

    ``kind`` must be an existing NodeKind member; the op type is mapped onto
    that node kind.
    """
    capability = OperatorCapability(op_type, kind, elem_kind)
    _global_registry.register(capability)
    return capability
