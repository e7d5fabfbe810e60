"""SSH_AGENT_SIGN_RESPONSE message."""

from __future__ import annotations

from .message import BytesLike, Message, MessageError, MessageType, Reader, Writer


class SignResponseMessage(Message):
    """Reply carrying a signature blob."""

    def __init__(self, signature: BytesLike = b""):
        super().__init__(MessageType.SSH_AGENT_SIGN_RESPONSE)
        self.signature = bytes(signature)

    @classmethod
    def from_message(cls, msg: Message) -> SignResponseMessage:
        if msg.msg_type != MessageType.SSH_AGENT_SIGN_RESPONSE:
            raise MessageError(f"expected SSH_AGENT_SIGN_RESPONSE, got {msg.type_name()}")
        return cls(Reader(msg.payload).read_blob())

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_blob(self.signature)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()