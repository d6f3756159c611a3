import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest
from onnx import TensorProto

from onnxifi_loader import Function

from model_fixtures import build_model


@pytest.fixture
def relu_model() -> bytes:
    return build_model(
        inputs=[("x", TensorProto.FLOAT, [1, 4])],
        nodes=[("Relu", ["x"], ["y"])],
        outputs=["y"],
    )


@pytest.fixture
def conv_model() -> bytes:
    return build_model(
        inputs=[("x", TensorProto.FLOAT, [1, 1, 3, 3])],
        nodes=[("Conv", ["x", "W"], ["y"])],
        outputs=["y"],
    )


@pytest.fixture
def function() -> Function:
    return Function(name="main")
