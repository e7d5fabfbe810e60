"""SSH_AGENTC_EXTENSION message."""

from __future__ import annotations

from .extension_factory import ExtensionBase, ExtensionFactory, default_factory
from .message import Message, MessageError, MessageType, Reader, Writer


class ExtensionMessage(Message):
    """An agent extension request: an extension name followed by its payload."""

    def __init__(self, name: str = "", extension: ExtensionBase | None = None):
        super().__init__(MessageType.SSH_AGENTC_EXTENSION)
        self.extension_name = name
        self.extension = extension

    @classmethod
    def from_message(
        cls, msg: Message, factory: ExtensionFactory | None = None
    ) -> ExtensionMessage:
        """Parse an extension message, building its payload with ``factory``."""
        if msg.msg_type != MessageType.SSH_AGENTC_EXTENSION:
            raise MessageError(f"expected SSH_AGENTC_EXTENSION, got {msg.type_name()}")
        factory = factory if factory is not None else default_factory()
        reader = Reader(msg.payload)
        name = reader.read_string()
        extension = factory.create_message_extension(name)
        extension.deserialize(reader)
        return cls(name, extension)

    def set_extension(self, name: str, extension: ExtensionBase | None) -> None:
        self.extension_name = name
        self.extension = extension

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_string(self.extension_name)
        if self.extension is not None:
            self.extension.serialize(writer)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()