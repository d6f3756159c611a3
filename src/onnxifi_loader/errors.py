"""Error types raised while loading ONNX models."""


class LoaderError(Exception):
    """Base class for recoverable model loading failures."""


class ModelDecodeError(LoaderError):
    """Serialized model bytes could not be decoded."""


class UnsupportedTypeError(LoaderError, TypeError):
    """Element type tag has no internal element kind."""

    def __init__(self, tag: int, context: str = ""):
        self.tag = tag
        where = f" for {context}" if context else ""
        super().__init__(f"Unsupported element type {tag}{where}: only float and index tensors are supported")


class UnsupportedShapeError(LoaderError, ValueError):
    """Declared shape contains a symbolic or missing dimension."""


class UnsupportedMemoryTypeError(LoaderError):
    """Weight buffer does not live in host memory."""

    def __init__(self, name: str, memory_type: int):
        self.name = name
        self.memory_type = memory_type
        super().__init__(f"Weight {name!r} has memory type {memory_type}, only CPU memory is supported")


class WeightDataError(LoaderError, ValueError):
    """Weight buffer is inconsistent with its declared shape."""


class NameCollisionError(LoaderError):
    """A weight name clashes with a declared input name."""


class GraphConstructionError(LoaderError):
    """Network construction or output finalization failed."""


class UnsupportedOperatorError(GraphConstructionError):
    """Operator type is not in the operator table."""

    def __init__(self, op_type: str):
        self.op_type = op_type
        super().__init__(f"Unsupported operator {op_type!r}")


class LoaderWarning(UserWarning):
    """Warning emitted when a load is abandoned."""
