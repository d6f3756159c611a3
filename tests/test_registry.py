from onnxifi_loader import ElemKind, NodeKind, OperatorCapability, OperatorRegistry, get_registry, register_operator


def test_default_operators():
    registry = OperatorRegistry()
    assert registry.list_operators() == ["Conv", "Relu", "Softmax"]
    assert registry.lookup("Relu").as_pair() == (NodeKind.RELU, ElemKind.FLOAT)
    assert registry.lookup("MaxPool") is None


def test_empty_registry():
    registry = OperatorRegistry(defaults=False)
    assert registry.list_operators() == []
    assert not registry.supports("Relu")


def test_register_replaces_and_unregister_removes():
    registry = OperatorRegistry()
    registry.register(OperatorCapability("Relu", NodeKind.RELU, ElemKind.INDEX))
    assert registry.lookup("Relu").elem_kind is ElemKind.INDEX

    registry.unregister("Relu")
    assert not registry.supports("Relu")
    registry.unregister("Relu")


def test_register_operator_uses_global_registry():
    capability = register_operator("ConvTest", NodeKind.CONVOLUTION)
    try:
        assert get_registry().lookup("ConvTest") is capability
        assert capability.elem_kind is ElemKind.FLOAT
    finally:
        get_registry().unregister("ConvTest")
    assert not get_registry().supports("ConvTest")
