"""SSH_AGENTC_ADD_IDENTITY and SSH_AGENTC_ADD_ID_CONSTRAINED messages."""

from __future__ import annotations

from .extension_factory import ExtensionBase, ExtensionFactory, default_factory
from .message import (
    BytesLike,
    KeyConstraint,
    Message,
    MessageError,
    MessageType,
    Reader,
    Writer,
)

# Number of length-prefixed private key fields that follow the key type.
_KEY_FIELD_COUNTS = {
    "ssh-ed25519": 2,  # public key, private key
    "ssh-rsa": 6,  # n, e, d, iqmp, p, q
    "ecdsa-sha2-nistp256": 3,  # curve name, public point, private scalar
    "ecdsa-sha2-nistp384": 3,
    "ecdsa-sha2-nistp521": 3,
}

_ADD_TYPES = (
    MessageType.SSH_AGENTC_ADD_IDENTITY,
    MessageType.SSH_AGENTC_ADD_IDENTITY_CONSTRAINED,
)


class AddIdentityMessage(Message):
    """Request to add a private key, optionally with usage constraints.

    ``key_blob`` holds the key-specific fields exactly as they appear on the
    wire, each with its length prefix. Setting ``confirm_required`` or
    ``lifetime`` turns the message into its constrained form.
    """

    def __init__(self, key_type: str = "", key_blob: BytesLike = b"", comment: str = ""):
        super().__init__(MessageType.SSH_AGENTC_ADD_IDENTITY)
        self.key_type = key_type
        self.key_blob = bytes(key_blob)
        self.comment = comment
        self._confirm_required = False
        self._lifetime = 0
        self.extension_name = ""
        self.extension: ExtensionBase | None = None

    @classmethod
    def from_message(
        cls, msg: Message, factory: ExtensionFactory | None = None
    ) -> AddIdentityMessage:
        """Parse an add-identity message; constraint extensions come from ``factory``."""
        if msg.msg_type not in _ADD_TYPES:
            raise MessageError(f"expected an add identity message, got {msg.type_name()}")
        factory = factory if factory is not None else default_factory()

        reader = Reader(msg.payload)
        key_type = reader.read_string()
        try:
            field_count = _KEY_FIELD_COUNTS[key_type]
        except KeyError:
            raise MessageError(f"unsupported key type: {key_type}") from None

        fields = Writer()
        for _ in range(field_count):
            fields.write_blob(reader.read_blob())

        result = cls(key_type, fields.getvalue(), reader.read_string())
        result.msg_type = msg.msg_type
        result._read_constraints(reader, factory)
        return result

    def _read_constraints(self, reader: Reader, factory: ExtensionFactory) -> None:
        while reader.remaining() > 0:
            code = reader.read_byte()
            if code == KeyConstraint.SSH_AGENT_CONSTRAIN_LIFETIME:
                self._lifetime = reader.read_uint32()
            elif code == KeyConstraint.SSH_AGENT_CONSTRAIN_CONFIRM:
                self._confirm_required = True
            elif code == KeyConstraint.SSH_AGENT_CONSTRAIN_EXTENSION:
                name = reader.read_string()
                extension = factory.create_constraint_extension(name)
                extension.deserialize(reader)
                self.extension_name = name
                self.extension = extension
            else:
                raise MessageError(f"unknown key constraint: {code}")

    @property
    def confirm_required(self) -> bool:
        """Whether each use of the key must be confirmed."""
        return self._confirm_required

    @confirm_required.setter
    def confirm_required(self, value: bool) -> None:
        self.msg_type = MessageType.SSH_AGENTC_ADD_IDENTITY_CONSTRAINED
        self._confirm_required = bool(value)

    @property
    def lifetime(self) -> int:
        """Key lifetime in seconds; 0 means unlimited."""
        return self._lifetime

    @lifetime.setter
    def lifetime(self, value: int) -> None:
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"lifetime out of range: {value}")
        self.msg_type = MessageType.SSH_AGENTC_ADD_IDENTITY_CONSTRAINED
        self._lifetime = int(value)

    def _body(self) -> bytes:
        head = Writer()
        head.write_string(self.key_type)

        tail = Writer()
        tail.write_string(self.comment)
        if self._lifetime:
            tail.write_byte(KeyConstraint.SSH_AGENT_CONSTRAIN_LIFETIME)
            tail.write_uint32(self._lifetime)
        if self._confirm_required:
            tail.write_byte(KeyConstraint.SSH_AGENT_CONSTRAIN_CONFIRM)
        if self.extension is not None:
            tail.write_byte(KeyConstraint.SSH_AGENT_CONSTRAIN_EXTENSION)
            tail.write_string(self.extension_name)
            self.extension.serialize(tail)

        return head.getvalue() + self.key_blob + tail.getvalue()

    def serialize(self) -> bytes:
        return super().serialize()