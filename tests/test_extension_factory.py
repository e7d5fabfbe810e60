import pytest

from agentwire.extension_factory import ExtensionBase, ExtensionFactory, default_factory
from agentwire.message import MessageError, Reader, Writer


class Echo(ExtensionBase):
    def __init__(self):
        self.text = "initial"

    def serialize(self, writer):
        writer.write_string(self.text)

    def deserialize(self, reader):
        self.text = reader.read_string()


class Other(Echo):
    pass


def test_create_registered_message_extension():
    factory = ExtensionFactory()
    factory.register_message_extension("echo", Echo)
    ext = factory.create_message_extension("echo")
    assert isinstance(ext, Echo)
    assert ext.text == "initial"


def test_create_registered_constraint_extension():
    factory = ExtensionFactory()
    factory.register_constraint_extension("echo", Echo)
    ext = factory.create_constraint_extension("echo")
    assert ext.text == "initial"
    ext.text = "constraint"
    writer = Writer()
    ext.serialize(writer)
    assert writer.getvalue() == b"\x00\x00\x00\x0aconstraint"


def test_each_call_builds_a_new_instance():
    factory = ExtensionFactory()
    factory.register_message_extension("echo", Echo)
    first = factory.create_message_extension("echo")
    second = factory.create_message_extension("echo")
    assert first is not second


def test_unknown_message_extension_raises():
    factory = ExtensionFactory()
    with pytest.raises(MessageError, match="unknown message extension: missing"):
        factory.create_message_extension("missing")


def test_unknown_constraint_extension_raises():
    factory = ExtensionFactory()
    with pytest.raises(MessageError, match="unknown constraint extension: missing"):
        factory.create_constraint_extension("missing")


def test_namespaces_are_separate():
    factory = ExtensionFactory()
    factory.register_message_extension("echo", Echo)
    with pytest.raises(MessageError):
        factory.create_constraint_extension("echo")


def test_registering_again_replaces_creator():
    factory = ExtensionFactory()
    factory.register_message_extension("echo", Echo)
    factory.register_message_extension("echo", Other)
    assert type(factory.create_message_extension("echo")) is Other


def test_default_factory_is_shared():
    default_factory().register_message_extension("shared-echo-test", Other)
    created = default_factory().create_message_extension("shared-echo-test")
    assert type(created) is Other
    assert created.text == "initial"


def test_extension_base_is_abstract():
    with pytest.raises(TypeError):
        ExtensionBase()


def test_extension_round_trip_through_writer_and_reader():
    factory = ExtensionFactory()
    factory.register_message_extension("echo", Echo)
    ext = factory.create_message_extension("echo")
    ext.text = "hello"
    writer = Writer()
    ext.serialize(writer)
    restored = factory.create_message_extension("echo")
    restored.deserialize(Reader(writer.getvalue()))
    assert restored.text == "hello"