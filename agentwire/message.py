"""Framing and primitive encoding for SSH agent protocol messages."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import ClassVar, Union

BytesLike = Union[bytes, bytearray, memoryview]

_UINT32 = struct.Struct(">I")
_UINT32_MAX = 0xFFFFFFFF


class MessageError(Exception):
    """Raised when a message is malformed or has an unexpected type."""


class TruncatedDataError(MessageError):
    """Raised when the data ends before a field is complete."""


class MessageType(IntEnum):
    """SSH agent message numbers (draft-ietf-sshm-ssh-agent, section 6.1)."""

    SSH_AGENTC_REQUEST_IDENTITIES = 11
    SSH_AGENTC_SIGN_REQUEST = 13
    SSH_AGENTC_ADD_IDENTITY = 17
    SSH_AGENTC_REMOVE_IDENTITY = 18
    SSH_AGENTC_REMOVE_ALL_IDENTITIES = 19
    SSH_AGENTC_LOCK = 22
    SSH_AGENTC_UNLOCK = 23
    SSH_AGENTC_ADD_IDENTITY_CONSTRAINED = 25
    SSH_AGENTC_EXTENSION = 27

    SSH_AGENT_FAILURE = 5
    SSH_AGENT_SUCCESS = 6
    SSH_AGENT_IDENTITIES_ANSWER = 12
    SSH_AGENT_SIGN_RESPONSE = 14

    SSH_AGENTC_ADD_SMARTCARD_KEY = 20
    SSH_AGENTC_REMOVE_SMARTCARD_KEY = 21
    SSH_AGENTC_ADD_SMARTCARD_KEY_CONSTRAINED = 26
    SSH_AGENT_EXTENSION_FAILURE = 28
    SSH_AGENT_EXTENSION_RESPONSE = 29

    # Deprecated
    SSH_AGENTC_REMOVE_ALL_RSA_IDENTITIES = 9


class KeyConstraint(IntEnum):
    """Key constraints used when adding keys (section 6.2)."""

    SSH_AGENT_CONSTRAIN_LIFETIME = 1
    SSH_AGENT_CONSTRAIN_CONFIRM = 2
    SSH_AGENT_CONSTRAIN_EXTENSION = 255


_TYPE_NAMES = {member.value: member.name for member in MessageType}
_TYPE_NAMES[MessageType.SSH_AGENTC_ADD_IDENTITY_CONSTRAINED] = "SSH_AGENTC_ADD_ID_CONSTRAINED"


def _as_bytes(value: BytesLike | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


class Writer:
    """Accumulates SSH wire-format fields into a byte buffer."""

    def __init__(self):
        self._buffer = bytearray()

    def write_byte(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self._buffer.append(value)

    def write_uint32(self, value: int) -> None:
        if not 0 <= value <= _UINT32_MAX:
            raise ValueError(f"uint32 value out of range: {value}")
        self._buffer += _UINT32.pack(value)

    def write_string(self, value: str | BytesLike) -> None:
        self.write_blob(_as_bytes(value))

    def write_blob(self, value: BytesLike) -> None:
        data = bytes(value)
        self.write_uint32(len(data))
        self._buffer += data

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._buffer)

    def framed(self) -> bytes:
        """Return the bytes written so far, prefixed with their length."""
        return _UINT32.pack(len(self._buffer)) + bytes(self._buffer)


class Reader:
    """Reads SSH wire-format fields from a byte string."""

    def __init__(self, data: BytesLike):
        self._data = bytes(data)
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise TruncatedDataError(
                f"need {size} bytes at offset {self._pos}, only {self.remaining()} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack(self._take(4))[0]

    def read_string(self) -> str:
        return self.read_blob().decode("utf-8", "surrogateescape")

    def read_blob(self) -> bytes:
        return self._take(self.read_uint32())

    def remaining(self) -> int:
        return len(self._data) - self._pos


class Message:
    """A generic SSH agent message: a type byte and an opaque payload."""

    def __init__(self, msg_type: int, payload: BytesLike = b""):
        if not 0 <= msg_type <= 0xFF:
            raise ValueError(f"message type out of range: {msg_type}")
        self.msg_type = int(msg_type)
        self._payload = bytes(payload)

    @property
    def payload(self) -> bytes:
        """The message body following the type byte."""
        return self._body()

    def _body(self) -> bytes:
        return self._payload

    @classmethod
    def parse(cls, data: BytesLike) -> Message:
        """Parse a length-framed message into a plain Message."""
        raw = bytes(data)
        if len(raw) < 5:
            raise TruncatedDataError(f"message too short: {len(raw)} bytes")
        (length,) = _UINT32.unpack_from(raw)
        if length < 1:
            raise MessageError("message length is zero")
        if len(raw) - 4 < length:
            raise TruncatedDataError(
                f"message declares {length} bytes, only {len(raw) - 4} available"
            )
        return Message(raw[4], raw[5 : 4 + length])

    def type_name(self) -> str:
        return _TYPE_NAMES.get(self.msg_type, "UNKNOWN")

    def serialize(self) -> bytes:
        body = self.payload
        return _UINT32.pack(1 + len(body)) + bytes([self.msg_type]) + body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self.msg_type == other.msg_type and self.payload == other.payload

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type_name()}, payload={self.payload!r})"


class _SimpleMessage(Message):
    MESSAGE_TYPE: ClassVar[MessageType]

    def __init__(self):
        super().__init__(self.MESSAGE_TYPE)


class FailureMessage(_SimpleMessage):
    """SSH_AGENT_FAILURE reply."""

    MESSAGE_TYPE = MessageType.SSH_AGENT_FAILURE


class SuccessMessage(_SimpleMessage):
    """SSH_AGENT_SUCCESS reply."""

    MESSAGE_TYPE = MessageType.SSH_AGENT_SUCCESS


class RequestIdentitiesMessage(_SimpleMessage):
    """SSH_AGENTC_REQUEST_IDENTITIES request."""

    MESSAGE_TYPE = MessageType.SSH_AGENTC_REQUEST_IDENTITIES


class RemoveAllIdentitiesMessage(_SimpleMessage):
    """SSH_AGENTC_REMOVE_ALL_IDENTITIES request."""

    MESSAGE_TYPE = MessageType.SSH_AGENTC_REMOVE_ALL_IDENTITIES


class ExtensionFailureMessage(_SimpleMessage):
    """SSH_AGENT_EXTENSION_FAILURE reply."""

    MESSAGE_TYPE = MessageType.SSH_AGENT_EXTENSION_FAILURE