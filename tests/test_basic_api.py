"""Basic API walkthrough for onnxifi_loader."""

import numpy as np
from onnx import TensorProto

import onnxifi_loader as ol

from model_fixtures import build_model


def small_conv_net() -> bytes:
    """Conv -> Relu -> Softmax over a 1x1x4x4 image."""
    return build_model(
        inputs=[("image", TensorProto.FLOAT, [1, 1, 4, 4])],
        nodes=[
            ("Conv", ["image", "conv.weight", "conv.bias"], ["features"]),
            ("Relu", ["features"], ["activated"]),
            ("Softmax", ["activated"], ["probs"]),
        ],
        outputs=["probs"],
    )


def small_conv_weights():
    return [
        ol.TensorDescriptor.from_numpy("conv.weight", np.ones((2, 1, 3, 3), dtype=np.float32)),
        ol.TensorDescriptor.from_numpy("conv.bias", np.zeros(2, dtype=np.float32)),
    ]


def test_load():
    """Test loading a small network."""
    print("\n" + "="*60)
    print("Testing Model Load")
    print("="*60)

    fn = ol.Function(name="conv_net")
    loader = ol.parse(small_conv_net(), small_conv_weights(), fn)
    assert loader is not None

    ol.print_loader_summary(loader)
    ol.print_function(fn)

    assert len(fn.nodes) == 3
    assert fn.public_variables().keys() == {"image"}
    assert fn.get_variable("conv.weight").tensor.shape == (2, 1, 3, 3)


def test_capability_queries():
    """Test single operator queries."""
    print("\n" + "="*60)
    print("Testing Capability Queries")
    print("="*60)

    for op_type in ["Conv", "Relu", "Softmax", "Gemm"]:
        model = build_model(
            inputs=[("a", TensorProto.FLOAT, [1]), ("b", TensorProto.FLOAT, [1])],
            nodes=[(op_type, ["a", "b"], ["c"])],
            outputs=["c"],
        )
        result = ol.parse_operator(model)
        print(f"{op_type}: {result}")
        assert (result is not None) == (op_type != "Gemm")


def main():
    """Run all tests."""
    print("\n" + "="*60)
    print("onnxifi_loader API Tests")
    print("="*60)

    test_load()
    test_capability_queries()

    print("\n" + "="*60)
    print("All tests completed!")
    print("="*60)


if __name__ == "__main__":
    main()
