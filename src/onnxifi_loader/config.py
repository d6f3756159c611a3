"""Loader configuration."""

import os
from dataclasses import dataclass
from typing import Literal, Optional

NameCollisionPolicy = Literal["reject", "allow", "merge"]

_COLLISION_POLICIES = ("reject", "allow", "merge")


@dataclass
class LoaderConfig:
    """Knobs controlling how strictly a model is loaded."""
    # What to do when a weight shares its name with a declared input
    name_collision: NameCollisionPolicy = "reject"

    # Extent substituted for symbolic/missing input dims; None rejects them
    unknown_dim_value: Optional[int] = None

    # Skip graph inputs that are also listed as initializers
    skip_initializer_inputs: bool = False

    # Re-raise LoaderError from parse() instead of returning None
    raise_errors: bool = False

    def validate(self) -> "LoaderConfig":
        if self.name_collision not in _COLLISION_POLICIES:
            raise ValueError(
                f"Unknown name collision policy {self.name_collision!r}, "
                f"expected one of {_COLLISION_POLICIES}"
            )
        if self.unknown_dim_value is not None and self.unknown_dim_value < 0:
            raise ValueError(f"unknown_dim_value must be non-negative, got {self.unknown_dim_value}")
        return self

    @classmethod
    def from_env(cls) -> "LoaderConfig":
        """Build a config from ONNXIFI_LOADER_* environment variables."""
        unknown_dim = os.environ.get('ONNXIFI_LOADER_UNKNOWN_DIM')
        config = cls(
            name_collision=os.environ.get('ONNXIFI_LOADER_NAME_COLLISION', 'reject'),
            unknown_dim_value=int(unknown_dim) if unknown_dim else None,
            skip_initializer_inputs=os.environ.get('ONNXIFI_LOADER_SKIP_INITIALIZER_INPUTS', '0') == '1',
            raise_errors=os.environ.get('ONNXIFI_LOADER_RAISE_ERRORS', '0') == '1',
        )
        return config.validate()
