import importlib

import numpy as np

from model_fixtures import build_model


def test_imports_from_readme_usage():
    ol = importlib.import_module("onnxifi_loader")
    assert hasattr(ol, "parse")
    assert hasattr(ol, "parse_operator")
    assert hasattr(ol, "TensorDescriptor")


def test_readme_quickstart(relu_model):
    import onnxifi_loader as ol

    fn = ol.Function()
    weights = [ol.TensorDescriptor.from_numpy("bias", np.zeros(4, dtype=np.float32))]
    loader = ol.parse(relu_model, weights, fn)
    assert loader is not None
    assert loader.get_tensor_by_name("bias").shape == (4,)
    assert ol.parse_operator(relu_model) == (ol.NodeKind.RELU, ol.ElemKind.FLOAT)


def test_readme_register_operator():
    import onnxifi_loader as ol

    capability = ol.register_operator("ConvInteger", ol.NodeKind.CONVOLUTION)
    try:
        assert ol.get_registry().lookup("ConvInteger") is capability
        assert capability.as_pair() == (ol.NodeKind.CONVOLUTION, ol.ElemKind.FLOAT)
    finally:
        ol.get_registry().unregister("ConvInteger")
