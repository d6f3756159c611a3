"""
Operator capability table.
"""

from .registry import (
    OperatorCapability,
    OperatorRegistry,
    get_registry,
    register_operator,
)

__all__ = [
    'OperatorCapability',
    'OperatorRegistry',
    'get_registry',
    'register_operator',
]
