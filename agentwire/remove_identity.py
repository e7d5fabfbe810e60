"""SSH_AGENTC_REMOVE_IDENTITY message."""

from __future__ import annotations

from .message import BytesLike, Message, MessageError, MessageType, Reader, Writer


class RemoveIdentityMessage(Message):
    """Request to remove the key identified by a public key blob."""

    def __init__(self, key_blob: BytesLike = b""):
        super().__init__(MessageType.SSH_AGENTC_REMOVE_IDENTITY)
        self.key_blob = bytes(key_blob)

    @classmethod
    def from_message(cls, msg: Message) -> RemoveIdentityMessage:
        if msg.msg_type != MessageType.SSH_AGENTC_REMOVE_IDENTITY:
            raise MessageError(f"expected SSH_AGENTC_REMOVE_IDENTITY, got {msg.type_name()}")
        return cls(Reader(msg.payload).read_blob())

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_blob(self.key_blob)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()