"""SSH_AGENTC_SIGN_REQUEST message."""

from __future__ import annotations

from enum import IntFlag

from .message import BytesLike, Message, MessageError, MessageType, Reader, Writer


class SignRequestFlags(IntFlag):
    """Flags a client may set on a sign request."""

    SSH_AGENT_RSA_SHA2_256 = 2
    SSH_AGENT_RSA_SHA2_512 = 4


class SignRequestMessage(Message):
    """Request to sign data with the key identified by a public key blob."""

    def __init__(self, key_blob: BytesLike = b"", data: BytesLike = b"", flags: int = 0):
        super().__init__(MessageType.SSH_AGENTC_SIGN_REQUEST)
        self.key_blob = bytes(key_blob)
        self.data = bytes(data)
        self.flags = int(flags)

    @classmethod
    def from_message(cls, msg: Message) -> SignRequestMessage:
        if msg.msg_type != MessageType.SSH_AGENTC_SIGN_REQUEST:
            raise MessageError(f"expected SSH_AGENTC_SIGN_REQUEST, got {msg.type_name()}")
        reader = Reader(msg.payload)
        key_blob = reader.read_blob()
        data = reader.read_blob()
        flags = reader.read_uint32()
        return cls(key_blob, data, flags)

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_blob(self.key_blob)
        writer.write_blob(self.data)
        writer.write_uint32(self.flags)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()