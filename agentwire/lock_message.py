"""SSH_AGENTC_LOCK and SSH_AGENTC_UNLOCK messages."""

from __future__ import annotations

from typing import ClassVar

from .message import BytesLike, Message, MessageError, MessageType, Reader, Writer


class LockMessage(Message):
    """Request to lock the agent with a passphrase."""

    MESSAGE_TYPE: ClassVar[MessageType] = MessageType.SSH_AGENTC_LOCK

    def __init__(self, password: BytesLike | None = None):
        super().__init__(self.MESSAGE_TYPE)
        self.password = bytes(password) if password is not None else bytes()

    @classmethod
    def from_message(cls, msg: Message) -> LockMessage:
        if msg.msg_type != cls.MESSAGE_TYPE:
            raise MessageError(f"expected {cls.MESSAGE_TYPE.name}, got {msg.type_name()}")
        return cls(Reader(msg.payload).read_blob())

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_blob(self.password)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()


class UnlockMessage(LockMessage):
    """Request to unlock the agent with a passphrase."""

    MESSAGE_TYPE: ClassVar[MessageType] = MessageType.SSH_AGENTC_UNLOCK