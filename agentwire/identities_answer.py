"""SSH_AGENT_IDENTITIES_ANSWER message."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .message import BytesLike, Message, MessageError, MessageType, Reader, Writer


@dataclass(frozen=True)
class Identity:
    """A public key blob and its comment."""

    blob: bytes
    comment: str


class IdentitiesAnswerMessage(Message):
    """Reply listing the identities held by the agent."""

    def __init__(self, identities: Iterable[Identity] = ()):
        super().__init__(MessageType.SSH_AGENT_IDENTITIES_ANSWER)
        self.identities: list[Identity] = list(identities)

    @classmethod
    def from_message(cls, msg: Message) -> IdentitiesAnswerMessage:
        if msg.msg_type != MessageType.SSH_AGENT_IDENTITIES_ANSWER:
            raise MessageError(f"expected SSH_AGENT_IDENTITIES_ANSWER, got {msg.type_name()}")
        reader = Reader(msg.payload)
        count = reader.read_uint32()
        return cls(Identity(reader.read_blob(), reader.read_string()) for _ in range(count))

    def add_identity(self, blob: BytesLike, comment: str) -> None:
        self.identities.append(Identity(bytes(blob), comment))

    def _body(self) -> bytes:
        writer = Writer()
        writer.write_uint32(len(self.identities))
        for identity in self.identities:
            writer.write_blob(identity.blob)
            writer.write_string(identity.comment)
        return writer.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()